from __future__ import annotations


class GraderError(Exception):
    """Base class for failures that abort a grading run.

    Example:
        ```python
        raise GraderError("grading aborted")
        ```
    """


class ConfigurationError(GraderError, ValueError):
    """Raised when grader inputs are missing or invalid.

    Example:
        ```python
        raise ConfigurationError("Invalid comparison method: fuzzy")
        ```
    """


class SetupError(GraderError, RuntimeError):
    """Raised when the setup command fails or times out.

    Example:
        ```python
        raise SetupError("Setup command failed: npm ci")
        ```
    """
