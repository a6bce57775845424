import pytest

from io_grader.comparison import compare, comparison_outcome
from io_grader.config import GradingConfig
from io_grader.errors import ConfigurationError
from io_grader.execution.types import TIMEOUT_MESSAGE, ExecutionResult


@pytest.mark.parametrize("value", ["", "42", "multi\nline", "ünïcode"])
def test_exact_matches_itself(value: str) -> None:
    assert compare(value, value, "exact") is True


@pytest.mark.parametrize("value", ["", "anything", "x\ny"])
def test_contains_empty_expected(value: str) -> None:
    assert compare(value, "", "contains") is True


def test_exact_is_strict() -> None:
    assert compare("42", "42 ", "exact") is False
    assert compare("Hello", "hello", "exact") is False


def test_contains_substring() -> None:
    assert compare("result: 42 done", "42", "contains") is True
    assert compare("result: 41", "42", "contains") is False


def test_regex_is_unanchored() -> None:
    assert compare("abc123", r"\d+", "regex") is True
    assert compare("abc", r"\d+", "regex") is False


def test_unknown_method_fails_fast() -> None:
    with pytest.raises(ConfigurationError, match="Invalid comparison method: fuzzy"):
        compare("a", "a", "fuzzy")


def test_invalid_regex_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="Invalid regular expression"):
        compare("a", "(", "regex")


def _config(**overrides: object) -> GradingConfig:
    values: dict[str, object] = {
        "test_name": "sum",
        "command": "python sum.py",
        "expected_output": "3",
        "comparison_method": "exact",
        "max_score": 5,
    }
    values.update(overrides)
    return GradingConfig(**values)  # type: ignore[arg-type]


def test_outcome_pass_awards_max_score() -> None:
    outcome = comparison_outcome(ExecutionResult(output="3"), _config())

    assert outcome.status == "pass"
    assert outcome.score == 5
    assert outcome.message is None


def test_outcome_mismatch_message_has_both_values() -> None:
    outcome = comparison_outcome(ExecutionResult(output="4"), _config())

    assert outcome.status == "fail"
    assert outcome.score == 0
    assert outcome.message == "Output does not match expected: 3 Got: 4"


def test_outcome_execution_error_wins() -> None:
    outcome = comparison_outcome(ExecutionResult(output="3", error=TIMEOUT_MESSAGE, timed_out=True), _config())

    assert outcome.status == "error"
    assert outcome.score == 0
    assert outcome.message == TIMEOUT_MESSAGE


def test_outcome_requires_expectation() -> None:
    with pytest.raises(ConfigurationError, match="expected-output and comparison-method are required"):
        comparison_outcome(ExecutionResult(output="3"), _config(expected_output=None))
