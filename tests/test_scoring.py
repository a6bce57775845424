import pytest

from io_grader.hierarchy import parse_test_report
from io_grader.scoring import count_results, score_hierarchy


def _report(passed: int, failed: int) -> str:
    lines = [f"Suite > ok{i} PASSED" for i in range(passed)]
    lines += [f"Suite > bad{i} FAILED" for i in range(failed)]
    return "\n".join(lines)


def test_count_results_over_nested_tree() -> None:
    tree = parse_test_report("Suite > A PASSED\nSuite > B FAILED\n")

    assert count_results(tree) == (2, 1)


def test_no_results_returns_none() -> None:
    assert score_hierarchy(parse_test_report("hello world"), max_score=10, pass_score=0) is None


def test_lazy_mode_below_threshold() -> None:
    result = score_hierarchy(parse_test_report(_report(7, 3)), max_score=0, pass_score=0)

    assert result is not None
    assert result.max_score == 10
    assert result.pass_score == pytest.approx(8)
    assert result.score == 7
    assert result.status == "fail"
    assert (result.task_count, result.task_passed) == (10, 7)


def test_lazy_mode_ignores_configured_pass_score() -> None:
    result = score_hierarchy(parse_test_report(_report(4, 1)), max_score=0, pass_score=5)

    assert result is not None
    assert result.pass_score == pytest.approx(4)
    assert result.status == "pass"


def test_weighted_mode_default_pass_score() -> None:
    result = score_hierarchy(parse_test_report(_report(8, 2)), max_score=50, pass_score=0)

    assert result is not None
    assert result.score == pytest.approx(40)
    assert result.max_score == 50
    assert result.pass_score == pytest.approx(40)
    assert result.status == "pass"


def test_weighted_mode_explicit_pass_score() -> None:
    result = score_hierarchy(parse_test_report(_report(8, 2)), max_score=50, pass_score=45)

    assert result is not None
    assert result.score == pytest.approx(40)
    assert result.status == "fail"


def test_partial_credit_is_not_zeroed() -> None:
    result = score_hierarchy(parse_test_report(_report(1, 3)), max_score=20, pass_score=0)

    assert result is not None
    assert result.score == pytest.approx(5)
    assert result.status == "fail"
    assert result.to_outcome("low").message == "low"
