from __future__ import annotations

import os
import sys
from typing import Mapping

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | {message}"


def _stderr_sink(message: str) -> None:
    """Write a formatted record to whatever `sys.stderr` is at call time.

    Example:
        ```python
        logger.add(_stderr_sink)
        ```
    """
    sys.stderr.write(message)


def default_log_level(environ: Mapping[str, str] | None = None) -> str:
    """Return DEBUG when GitHub step debugging is enabled, else INFO.

    Example:
        ```python
        assert default_log_level({"RUNNER_DEBUG": "1"}) == "DEBUG"
        ```
    """
    source = os.environ if environ is None else environ
    return "DEBUG" if source.get("RUNNER_DEBUG") == "1" else "INFO"


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the requested level.

    Example:
        ```python
        configure_logging("DEBUG")
        ```
    """
    logger.remove()
    logger.add(_stderr_sink, level=level or default_log_level(), format=LOG_FORMAT)
