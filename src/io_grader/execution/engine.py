from __future__ import annotations

from typing import Protocol

from .types import ExecutionRequest, ExecutionResult


class ExecutionEngine(Protocol):
    """Runs graded and setup commands for the grader.

    Example:
        ```python
        engine: ExecutionEngine = LocalEngine()
        ```
    """

    def execute(self, request: ExecutionRequest) -> ExecutionResult:
        """Run the graded command and return its captured, classified result.

        Example:
            ```python
            result = engine.execute(ExecutionRequest(command="python main.py", timeout_ms=60_000))
            ```
        """
        ...

    def execute_setup(self, request: ExecutionRequest) -> ExecutionResult:
        """Run a setup command with inherited stdio; output is not captured.

        Example:
            ```python
            result = engine.execute_setup(ExecutionRequest(command="make build", timeout_ms=60_000))
            ```
        """
        ...
