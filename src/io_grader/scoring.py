from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .config import PASS_RATIO
from .hierarchy import TestBranch

GradeStatus = Literal["pass", "fail", "error"]


@dataclass(frozen=True, slots=True)
class ScoreOutcome:
    """Final verdict for one graded test.

    Example:
        ```python
        outcome = ScoreOutcome(status="fail", score=0, max_score=10, message="Output does not match")
        ```
    """

    status: GradeStatus
    score: float
    max_score: float
    message: str | None = None


@dataclass(frozen=True, slots=True)
class HierarchyScore:
    """Score computed from parsed test report leaves.

    Example:
        ```python
        result = HierarchyScore("pass", 9, 10, 8.0, task_count=10, task_passed=9)
        ```
    """

    status: GradeStatus
    score: float
    max_score: float
    pass_score: float
    task_count: int
    task_passed: int

    def to_outcome(self, message: str | None = None) -> ScoreOutcome:
        """Convert to the envelope-facing outcome.

        Example:
            ```python
            outcome = result.to_outcome()
            ```
        """
        return ScoreOutcome(self.status, self.score, self.max_score, message)


def count_results(tree: TestBranch) -> tuple[int, int]:
    """Return `(task_count, task_passed)` over every leaf of the tree.

    Example:
        ```python
        assert count_results(parse_test_report("A PASSED\\nB FAILED")) == (2, 1)
        ```
    """
    task_count = 0
    task_passed = 0
    for leaf in tree.leaves():
        task_count += 1
        if leaf.passed:
            task_passed += 1
    return task_count, task_passed


def score_hierarchy(tree: TestBranch, max_score: int, pass_score: int) -> HierarchyScore | None:
    """Score a parsed test report, or return None when it holds no results.

    With `max_score <= 0` every leaf is worth one point and the bar is 80% of
    the leaf count. Otherwise the passed fraction is scaled to `max_score` and
    the bar is `pass_score`, or 80% of `max_score` when that is unset.

    Example:
        ```python
        result = score_hierarchy(tree, max_score=50, pass_score=0)
        ```
    """
    task_count, task_passed = count_results(tree)
    if task_count == 0:
        return None

    if max_score <= 0:
        effective_max: float = task_count
        effective_pass: float = task_count * PASS_RATIO
        score: float = task_passed
    else:
        effective_max = max_score
        effective_pass = pass_score if pass_score > 0 else max_score * PASS_RATIO
        score = task_passed / task_count * max_score

    status: GradeStatus = "fail" if score < effective_pass else "pass"
    return HierarchyScore(
        status=status,
        score=score,
        max_score=effective_max,
        pass_score=effective_pass,
        task_count=task_count,
        task_passed=task_passed,
    )
