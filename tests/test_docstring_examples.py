import ast
from pathlib import Path

import pytest

_SRC = Path(__file__).resolve().parents[1] / "src"


def _python_files(package: str) -> list[Path]:
    root = _SRC / package
    return sorted(path for path in root.rglob("*.py") if "__pycache__" not in path.parts)


@pytest.mark.parametrize("package", ["io_grader", "iog"])
def test_all_functions_have_docstring_with_example(package: str) -> None:
    files = _python_files(package)
    assert files, f"No sources found under src/{package}"
    missing: list[str] = []
    missing_example: list[str] = []

    for file_path in files:
        module = ast.parse(file_path.read_text(encoding="utf-8"))
        for node in ast.walk(module):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            name = node.name
            if name in {"<lambda>"}:
                continue
            doc = ast.get_docstring(node)
            location = f"{file_path}:{node.lineno}:{name}"
            if not doc:
                missing.append(location)
                continue
            if "Example:" not in doc:
                missing_example.append(location)

    assert not missing, "Missing function docstrings:\n" + "\n".join(missing)
    assert not missing_example, "Docstrings without Example section:\n" + "\n".join(
        missing_example
    )
