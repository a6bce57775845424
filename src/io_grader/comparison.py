from __future__ import annotations

import re

from .config import GradingConfig
from .errors import ConfigurationError
from .execution.types import ExecutionResult
from .scoring import ScoreOutcome


def compare(output: str, expected: str, method: str) -> bool:
    """Return whether `output` satisfies `expected` under `method`.

    `regex` searches anywhere in the output; it is not anchored.

    Example:
        ```python
        assert compare("abc123", r"\\d+", "regex")
        ```
    """
    if method == "exact":
        return output == expected
    if method == "contains":
        return expected in output
    if method == "regex":
        try:
            pattern = re.compile(expected)
        except re.error as exc:
            raise ConfigurationError(f"Invalid regular expression {expected!r}: {exc}") from exc
        return pattern.search(output) is not None
    raise ConfigurationError(f"Invalid comparison method: {method}")


def comparison_outcome(execution: ExecutionResult, config: GradingConfig) -> ScoreOutcome:
    """Grade raw output against the configured expectation.

    An execution error wins over any comparison and scores zero.

    Example:
        ```python
        outcome = comparison_outcome(ExecutionResult(output="hi"), config)
        ```
    """
    if execution.error is not None:
        return ScoreOutcome("error", 0, config.max_score, execution.error)
    if config.expected_output is None or config.comparison_method is None:
        raise ConfigurationError(
            "No test results found in output; expected-output and comparison-method are required"
        )
    if not compare(execution.output, config.expected_output, config.comparison_method):
        return ScoreOutcome(
            "fail",
            0,
            config.max_score,
            f"Output does not match expected: {config.expected_output} Got: {execution.output}",
        )
    return ScoreOutcome("pass", config.max_score, config.max_score)
