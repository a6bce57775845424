from __future__ import annotations

from dataclasses import dataclass

TIMEOUT_MESSAGE = "Command was killed due to timeout"


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """Normalized request sent to an execution engine.

    Example:
        ```python
        req = ExecutionRequest(command="python main.py", stdin="3 4", timeout_ms=60_000)
        ```
    """

    command: str
    timeout_ms: int
    stdin: str = ""


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Normalized response returned by an execution engine.

    `output` keeps whatever stdout was captured, even when `error` is set.

    Example:
        ```python
        res = ExecutionResult(output="7", error=None)
        ```
    """

    output: str
    error: str | None = None
    timed_out: bool = False
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        """Return True when the command exited cleanly.

        Example:
            ```python
            assert ExecutionResult(output="").ok
            ```
        """
        return self.error is None
