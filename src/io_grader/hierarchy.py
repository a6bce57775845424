"""Parser for nested `Suite > Case > check PASSED|FAILED` test report lines.

The format is what Gradle and similar runners print per test. Lines that do not
carry a verdict are ignored, so the report can be mixed with arbitrary program
output.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Union

_RESULT_LINE = re.compile(r"(.+?)\s+(PASSED|FAILED)")
_PATH_SEPARATOR = re.compile(r"\s+>\s+")


@dataclass(frozen=True, slots=True)
class TestLeaf:
    """Terminal pass/fail verdict for one fully qualified test name.

    Example:
        ```python
        leaf = TestLeaf(passed=True)
        ```
    """

    __test__ = False

    passed: bool


@dataclass(slots=True)
class TestBranch:
    """Named group of nested test results.

    Example:
        ```python
        branch = TestBranch({"add": TestLeaf(True), "sub": TestLeaf(False)})
        ```
    """

    __test__ = False

    children: dict[str, "TestNode"] = field(default_factory=dict)

    def __len__(self) -> int:
        """Return the number of direct children.

        Example:
            ```python
            assert len(TestBranch()) == 0
            ```
        """
        return len(self.children)

    def leaves(self) -> Iterator[TestLeaf]:
        """Yield every leaf below this branch, depth first in insertion order.

        Example:
            ```python
            passed = sum(leaf.passed for leaf in tree.leaves())
            ```
        """
        for child in self.children.values():
            if isinstance(child, TestLeaf):
                yield child
            else:
                yield from child.leaves()

    def to_dict(self) -> dict[str, object]:
        """Return the tree as nested dicts with boolean leaves.

        Example:
            ```python
            assert parse_test_report("A > b PASSED").to_dict() == {"A": {"b": True}}
            ```
        """
        return {
            name: child.passed if isinstance(child, TestLeaf) else child.to_dict()
            for name, child in self.children.items()
        }


TestNode = Union[TestLeaf, TestBranch]


def _insert(root: TestBranch, path: list[str], passed: bool) -> None:
    """Store a verdict at `path`, creating branches along the way.

    A leaf sitting where a branch is needed is replaced by a branch, and the
    terminal segment overwrites whatever was stored there before.

    Example:
        ```python
        _insert(root, ["Suite", "Case", "check"], True)
        ```
    """
    node = root
    for name in path[:-1]:
        child = node.children.get(name)
        if not isinstance(child, TestBranch):
            child = TestBranch()
            node.children[name] = child
        node = child
    node.children[path[-1]] = TestLeaf(passed)


def parse_test_report(text: str) -> TestBranch:
    """Parse test report lines from program output into a result tree.

    Example:
        ```python
        tree = parse_test_report("Suite > A PASSED\\nSuite > B FAILED\\n")
        assert tree.to_dict() == {"Suite": {"A": True, "B": False}}
        ```
    """
    root = TestBranch()
    for line in text.split("\n"):
        match = _RESULT_LINE.search(line.strip())
        if match is None:
            continue
        path = _PATH_SEPARATOR.split(match.group(1))
        _insert(root, path, match.group(2) == "PASSED")
    return root
