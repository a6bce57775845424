from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .scoring import GradeStatus, ScoreOutcome

ENVELOPE_VERSION = 1
UNKNOWN_TEST = "Unknown Test"
UNKNOWN_COMMAND = "Unknown Command"


def format_test_code(command: str, stdin: str) -> str:
    """Rebuild the invocation string shown in the report.

    Example:
        ```python
        assert format_test_code("python add.py", "1 2") == "python add.py <stdin>1 2"
        ```
    """
    return f"{command} <stdin>{stdin}"


def format_execution_time(seconds: float) -> str:
    """Render elapsed seconds the way the reporting layer displays them.

    Example:
        ```python
        assert format_execution_time(1.25) == "1.25s"
        ```
    """
    millis = f"{seconds:.3f}".rstrip("0").rstrip(".")
    return f"{millis}s"


@dataclass(frozen=True, slots=True)
class TestReport:
    """Per-test record inside the envelope.

    `score` is None for error envelopes, which omit the key.

    Example:
        ```python
        report = TestReport(name="hello", status="pass", message=None, test_code="python hi.py <stdin>",
                            execution_time="0.12s", score=10)
        ```
    """

    __test__ = False

    name: str
    status: GradeStatus
    message: str | None
    test_code: str
    execution_time: str | int
    score: float | None = None
    filename: str = ""
    line_no: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping in wire key order.

        Example:
            ```python
            payload = report.to_dict()
            ```
        """
        payload: dict[str, Any] = {
            "name": self.name,
            "status": self.status,
            "message": self.message,
            "test_code": self.test_code,
            "filename": self.filename,
            "line_no": self.line_no,
            "execution_time": self.execution_time,
        }
        if self.score is not None:
            payload["score"] = self.score
        return payload


@dataclass(frozen=True, slots=True)
class ResultEnvelope:
    """Single result record emitted once per grading run.

    Example:
        ```python
        envelope = ResultEnvelope(status="pass", max_score=10, tests=[report])
        ```
    """

    status: GradeStatus
    max_score: float | None
    tests: list[TestReport] = field(default_factory=list)
    version: int = ENVELOPE_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping; `max_score` is omitted when None.

        Example:
            ```python
            payload = envelope.to_dict()
            ```
        """
        payload: dict[str, Any] = {"version": self.version, "status": self.status}
        if self.max_score is not None:
            payload["max_score"] = self.max_score
        payload["tests"] = [test.to_dict() for test in self.tests]
        return payload


def build_envelope(
    *,
    test_name: str,
    command: str,
    stdin: str,
    outcome: ScoreOutcome,
    elapsed_seconds: float,
) -> ResultEnvelope:
    """Wrap a graded outcome into the envelope.

    Example:
        ```python
        envelope = build_envelope(test_name="t", command="echo", stdin="", outcome=outcome, elapsed_seconds=0.2)
        ```
    """
    report = TestReport(
        name=test_name,
        status=outcome.status,
        message=outcome.message,
        test_code=format_test_code(command, stdin),
        execution_time=format_execution_time(elapsed_seconds),
        score=outcome.score,
    )
    return ResultEnvelope(status=outcome.status, max_score=outcome.max_score, tests=[report])


def build_error_envelope(message: str, inputs: Mapping[str, str] | None = None) -> ResultEnvelope:
    """Build the minimal error envelope from whatever raw inputs were read.

    Example:
        ```python
        envelope = build_error_envelope("Input required and not supplied: command", {"test-name": "t"})
        ```
    """
    raw = inputs or {}
    report = TestReport(
        name=raw.get("test-name") or UNKNOWN_TEST,
        status="error",
        message=message,
        test_code=format_test_code(raw.get("command") or UNKNOWN_COMMAND, (raw.get("input") or "").strip()),
        execution_time=0,
    )
    return ResultEnvelope(status="error", max_score=None, tests=[report])


def encode_envelope(envelope: ResultEnvelope) -> str:
    """Serialize the envelope to base64-encoded JSON.

    Example:
        ```python
        value = encode_envelope(envelope)
        ```
    """
    data = json.dumps(envelope.to_dict(), ensure_ascii=False, separators=(",", ":"))
    return base64.b64encode(data.encode("utf-8")).decode("ascii")


def decode_envelope(value: str) -> dict[str, Any]:
    """Decode a base64 envelope back into its JSON mapping.

    Example:
        ```python
        payload = decode_envelope(encode_envelope(envelope))
        ```
    """
    try:
        raw = base64.b64decode(value.strip(), validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Not a valid result envelope: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Not a valid result envelope: expected a JSON object")
    return payload
