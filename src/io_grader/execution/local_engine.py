from __future__ import annotations

import subprocess
import time

from loguru import logger

from .environment import ChildEnvironment
from .types import TIMEOUT_MESSAGE, ExecutionRequest, ExecutionResult


def _to_text(data: str | bytes | None) -> str:
    """Decode captured process output, which may arrive as bytes after a timeout.

    Example:
        ```python
        assert _to_text(b"partial") == "partial"
        ```
    """
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _failure_message(command: str, returncode: int, stderr: str) -> str:
    """Describe a non-zero exit.

    Example:
        ```python
        msg = _failure_message("python main.py", 1, "Traceback ...")
        ```
    """
    message = f"Command failed: {command}"
    if returncode < 0:
        message += f" (killed by signal {-returncode})"
    else:
        message += f" (exit status {returncode})"
    detail = stderr.strip()
    if detail:
        message += f"\n{detail}"
    return message


class LocalEngine:
    """Execute commands through the local shell with an allowlisted environment.

    Example:
        ```python
        engine = LocalEngine()
        result = engine.execute(ExecutionRequest(command="echo hi", timeout_ms=5_000))
        ```
    """

    def __init__(self, *, environment: ChildEnvironment | None = None) -> None:
        """Initialize the engine with the environment given to every child.

        Example:
            ```python
            engine = LocalEngine(environment=ChildEnvironment.from_host())
            ```
        """
        self._environment = environment or ChildEnvironment.from_host()

    @property
    def environment(self) -> ChildEnvironment:
        """Return the child environment.

        Example:
            ```python
            env = engine.environment
            ```
        """
        return self._environment

    def execute(self, request: ExecutionRequest) -> ExecutionResult:
        """Run the graded command, feeding stdin and capturing stdout.

        Example:
            ```python
            outcome = engine.execute(ExecutionRequest(command="cat", stdin="4 5", timeout_ms=5_000))
            ```
        """
        logger.debug("Running command: {}", request.command)
        started = time.perf_counter()
        try:
            completed = subprocess.run(
                request.command,
                shell=True,
                input=request.stdin,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=request.timeout_ms / 1000,
                check=False,
                env=self._environment.as_dict(),
            )
        except subprocess.TimeoutExpired as exc:
            elapsed = time.perf_counter() - started
            logger.warning("Command exceeded {}ms and was killed", request.timeout_ms)
            return ExecutionResult(
                output=_to_text(exc.stdout).strip(),
                error=TIMEOUT_MESSAGE,
                timed_out=True,
                elapsed_seconds=elapsed,
            )
        elapsed = time.perf_counter() - started
        output = completed.stdout.strip()
        if completed.returncode != 0:
            logger.warning("Command exited with status {}", completed.returncode)
            return ExecutionResult(
                output=output,
                error=_failure_message(request.command, completed.returncode, completed.stderr),
                elapsed_seconds=elapsed,
            )
        return ExecutionResult(output=output, elapsed_seconds=elapsed)

    def execute_setup(self, request: ExecutionRequest) -> ExecutionResult:
        """Run a setup command with inherited stdio.

        Example:
            ```python
            outcome = engine.execute_setup(ExecutionRequest(command="make build", timeout_ms=60_000))
            ```
        """
        logger.debug("Running setup command: {}", request.command)
        started = time.perf_counter()
        try:
            completed = subprocess.run(
                request.command,
                shell=True,
                timeout=request.timeout_ms / 1000,
                check=False,
                env=self._environment.as_dict(),
            )
        except subprocess.TimeoutExpired:
            return ExecutionResult(
                output="",
                error=TIMEOUT_MESSAGE,
                timed_out=True,
                elapsed_seconds=time.perf_counter() - started,
            )
        elapsed = time.perf_counter() - started
        if completed.returncode != 0:
            return ExecutionResult(
                output="",
                error=_failure_message(request.command, completed.returncode, ""),
                elapsed_seconds=elapsed,
            )
        return ExecutionResult(output="", elapsed_seconds=elapsed)
