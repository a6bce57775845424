from __future__ import annotations

from typing import Callable, Mapping

from loguru import logger

from .comparison import comparison_outcome
from .config import GradingConfig
from .errors import GraderError, SetupError
from .execution.engine import ExecutionEngine
from .execution.local_engine import LocalEngine
from .execution.types import ExecutionRequest, ExecutionResult
from .hierarchy import parse_test_report
from .result import ResultEnvelope, build_envelope, build_error_envelope
from .scoring import HierarchyScore, ScoreOutcome, score_hierarchy


def _run_setup(config: GradingConfig, engine: ExecutionEngine) -> None:
    """Run the optional setup command; any failure aborts grading.

    Example:
        ```python
        _run_setup(config, LocalEngine())
        ```
    """
    if config.setup_command is None:
        return
    logger.info("Running setup: {}", config.setup_command)
    result = engine.execute_setup(
        ExecutionRequest(command=config.setup_command, timeout_ms=config.timeout_ms)
    )
    if result.error is not None:
        raise SetupError(f"Setup command failed: {result.error}")


def _hierarchy_message(result: HierarchyScore, execution: ExecutionResult) -> str | None:
    """Describe a hierarchy verdict; passing runs carry no message.

    Example:
        ```python
        message = _hierarchy_message(result, execution)
        ```
    """
    if result.status == "pass":
        return None
    message = (
        f"Passed {result.task_passed} of {result.task_count} tests, "
        f"score {result.score:g} below {result.pass_score:g}"
    )
    if execution.error is not None:
        message += f"\n{execution.error}"
    return message


def score_execution(config: GradingConfig, execution: ExecutionResult) -> ScoreOutcome:
    """Pick the scoring strategy for captured output.

    Parsed test results take priority; raw comparison applies only when the
    output holds none.

    Example:
        ```python
        outcome = score_execution(config, ExecutionResult(output="Suite > a PASSED"))
        ```
    """
    tree = parse_test_report(execution.output)
    result = score_hierarchy(tree, config.max_score, config.pass_score)
    if result is None:
        logger.debug("No test results in output, comparing with {}", config.comparison_method)
        return comparison_outcome(execution, config)
    logger.info(
        "Parsed {} test results, {} passed ({} mode)",
        result.task_count,
        result.task_passed,
        "lazy" if config.lazy_scoring else "weighted",
    )
    return result.to_outcome(_hierarchy_message(result, execution))


def grade(config: GradingConfig, engine: ExecutionEngine) -> ResultEnvelope:
    """Run setup and the graded command, then score the output.

    Raises SetupError or ConfigurationError for fatal conditions.

    Example:
        ```python
        envelope = grade(config, LocalEngine())
        ```
    """
    _run_setup(config, engine)
    logger.info("Running test '{}': {}", config.test_name, config.command)
    execution = engine.execute(
        ExecutionRequest(command=config.command, stdin=config.input, timeout_ms=config.timeout_ms)
    )
    outcome = score_execution(config, execution)
    logger.info(
        "Test '{}' finished with status {} ({:g}/{:g})",
        config.test_name,
        outcome.status,
        outcome.score,
        outcome.max_score,
    )
    return build_envelope(
        test_name=config.test_name,
        command=config.command,
        stdin=config.input,
        outcome=outcome,
        elapsed_seconds=execution.elapsed_seconds,
    )


def run_grader(
    read_inputs: Callable[[], Mapping[str, str]],
    engine: ExecutionEngine | None = None,
    fallback_inputs: Mapping[str, str] | None = None,
) -> ResultEnvelope:
    """Grade once and always return an envelope.

    Every failure is converted to an error envelope here, using whichever raw
    inputs were read before the failure. If `read_inputs` itself fails, the
    error envelope is labelled from `fallback_inputs` instead.

    Example:
        ```python
        envelope = run_grader(read_action_inputs)
        ```
    """
    raw: Mapping[str, str] = dict(fallback_inputs or {})
    try:
        raw = read_inputs()
        config = GradingConfig.from_inputs(raw)
        return grade(config, engine or LocalEngine())
    except GraderError as exc:
        logger.warning("Grading aborted: {}", exc)
        return build_error_envelope(str(exc), raw)
    except Exception as exc:
        logger.exception("Unexpected grader failure")
        return build_error_envelope(str(exc) or type(exc).__name__, raw)
