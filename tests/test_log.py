import pytest
from loguru import logger

from io_grader.log import configure_logging, default_log_level


def test_runner_debug_enables_debug_level() -> None:
    assert default_log_level({"RUNNER_DEBUG": "1"}) == "DEBUG"
    assert default_log_level({"RUNNER_DEBUG": "0"}) == "INFO"
    assert default_log_level({}) == "INFO"


def test_configure_logging_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("DEBUG")
    logger.debug("grading {}", "sum")
    captured = capsys.readouterr()

    assert captured.out == ""
    assert "grading sum" in captured.err
