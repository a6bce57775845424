from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigurationError

COMPARISON_METHODS = ("exact", "contains", "regex")
DEFAULT_TIMEOUT_MINUTES = 10.0
MAX_TIMEOUT_MINUTES = 60.0
PASS_RATIO = 0.8
INPUT_NAMES = (
    "test-name",
    "setup-command",
    "command",
    "input",
    "expected-output",
    "comparison-method",
    "timeout",
    "pass-score",
    "max-score",
)


def _optional(raw: Mapping[str, str], name: str) -> str | None:
    """Return a raw input value, treating an empty string as unset.

    Example:
        ```python
        setup = _optional({"setup-command": ""}, "setup-command")  # None
        ```
    """
    value = raw.get(name)
    if value is None or value == "":
        return None
    return value


def _required(raw: Mapping[str, str], name: str) -> str:
    """Return a required raw input value or raise ConfigurationError.

    Example:
        ```python
        command = _required({"command": "python main.py"}, "command")
        ```
    """
    value = _optional(raw, name)
    if value is None:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def _timeout_ms(raw: Mapping[str, str]) -> int:
    """Convert the `timeout` input (minutes) to milliseconds.

    Example:
        ```python
        assert _timeout_ms({"timeout": "1.5"}) == 90_000
        ```
    """
    text = _optional(raw, "timeout")
    if text is None:
        minutes = DEFAULT_TIMEOUT_MINUTES
    else:
        try:
            minutes = float(text)
        except ValueError:
            raise ConfigurationError(f"Invalid timeout: {text}") from None
    if not minutes > 0:
        raise ConfigurationError(f"Invalid timeout: {text}. Timeout must be a positive number of minutes")
    if minutes > MAX_TIMEOUT_MINUTES:
        raise ConfigurationError(
            f"Invalid timeout: {text}. Timeout cannot exceed {MAX_TIMEOUT_MINUTES:g} minutes"
        )
    return int(minutes * 60_000)


def _score(raw: Mapping[str, str], name: str) -> int:
    """Parse a non-negative integer score input, defaulting to 0.

    Example:
        ```python
        assert _score({"max-score": "10"}, "max-score") == 10
        ```
    """
    text = _optional(raw, name)
    if text is None:
        return 0
    try:
        value = int(text)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: {text}. Expected a non-negative integer") from None
    if value < 0:
        raise ConfigurationError(f"Invalid {name}: {text}. Expected a non-negative integer")
    return value


def read_config_file(path: str | Path) -> dict[str, str]:
    """Read grader inputs from a TOML file.

    Inputs may live at the top level or under a `[grader]` table. Scalar
    values are stringified so they merge with action inputs.

    Example:
        ```python
        raw = read_config_file("grader.toml")
        ```
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid config file {config_path}: {exc}") from exc
    table: Any = data.get("grader", data)
    if not isinstance(table, dict):
        raise ConfigurationError("Grader config must be a TOML table")
    out: dict[str, str] = {}
    for key, value in table.items():
        if key not in INPUT_NAMES:
            raise ConfigurationError(f"Unknown grader input in {config_path}: {key}")
        if isinstance(value, (dict, list)):
            raise ConfigurationError(f"'{key}' must be a string or number")
        if isinstance(value, bool):
            value = str(value).lower()
        out[key] = str(value)
    return out


@dataclass(frozen=True, slots=True)
class GradingConfig:
    """Validated inputs for one grading run.

    Example:
        ```python
        config = GradingConfig(test_name="hello", command="python hello.py", expected_output="hi",
                               comparison_method="exact")
        ```
    """

    test_name: str
    command: str
    setup_command: str | None = None
    input: str = ""
    expected_output: str | None = None
    comparison_method: str | None = None
    timeout_ms: int = int(DEFAULT_TIMEOUT_MINUTES * 60_000)
    max_score: int = 0
    pass_score: int = 0

    def __post_init__(self) -> None:
        """Validate field values after dataclass initialization.

        Example:
            ```python
            GradingConfig(test_name="t", command="true", comparison_method="fuzzy")  # raises
            ```
        """
        if not self.test_name:
            raise ConfigurationError("Input required and not supplied: test-name")
        if not self.command:
            raise ConfigurationError("Input required and not supplied: command")
        if self.comparison_method is not None and self.comparison_method not in COMPARISON_METHODS:
            raise ConfigurationError(f"Invalid comparison method: {self.comparison_method}")
        if self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive")
        if self.max_score < 0 or self.pass_score < 0:
            raise ConfigurationError("Scores must be non-negative")

    @property
    def lazy_scoring(self) -> bool:
        """Return True when no maximum score is configured.

        Example:
            ```python
            assert GradingConfig(test_name="t", command="true").lazy_scoring
            ```
        """
        return self.max_score <= 0

    @property
    def effective_pass_score(self) -> float:
        """Return the configured pass score, or 80% of max-score when unset.

        Example:
            ```python
            assert GradingConfig(test_name="t", command="true", max_score=50).effective_pass_score == 40
            ```
        """
        if self.pass_score > 0:
            return self.pass_score
        return self.max_score * PASS_RATIO

    @classmethod
    def from_inputs(cls, raw: Mapping[str, str]) -> "GradingConfig":
        """Build a config from string-valued action inputs.

        Example:
            ```python
            config = GradingConfig.from_inputs({"test-name": "t", "command": "echo hi"})
            ```
        """
        return cls(
            test_name=_required(raw, "test-name"),
            command=_required(raw, "command"),
            setup_command=_optional(raw, "setup-command"),
            input=(raw.get("input") or "").strip(),
            expected_output=_optional(raw, "expected-output"),
            comparison_method=_optional(raw, "comparison-method"),
            timeout_ms=_timeout_ms(raw),
            max_score=_score(raw, "max-score"),
            pass_score=_score(raw, "pass-score"),
        )

    @classmethod
    def from_file(cls, config_path: str | Path) -> "GradingConfig":
        """Create a config instance from a TOML file.

        Example:
            ```python
            config = GradingConfig.from_file("grader.toml")
            ```
        """
        return cls.from_inputs(read_config_file(config_path))
