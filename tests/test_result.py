import base64
import json

import pytest

from io_grader.result import (
    build_envelope,
    build_error_envelope,
    decode_envelope,
    encode_envelope,
    format_execution_time,
)
from io_grader.scoring import ScoreOutcome

_TEST_KEYS = {"name", "status", "message", "test_code", "filename", "line_no", "execution_time", "score"}


@pytest.mark.parametrize(
    "outcome",
    [
        ScoreOutcome("pass", 10, 10),
        ScoreOutcome("fail", 2.5, 10, "Passed 1 of 4 tests"),
        ScoreOutcome("error", 0, 10, "Command was killed due to timeout"),
    ],
)
def test_encoded_envelope_decodes_to_schema(outcome: ScoreOutcome) -> None:
    envelope = build_envelope(test_name="t", command="python t.py", stdin="1", outcome=outcome, elapsed_seconds=0.25)

    payload = decode_envelope(encode_envelope(envelope))

    assert set(payload) == {"version", "status", "max_score", "tests"}
    assert payload["version"] == 1
    assert payload["status"] == outcome.status
    assert payload["max_score"] == 10
    test = payload["tests"][0]
    assert set(test) == _TEST_KEYS
    assert test["status"] == outcome.status
    assert test["score"] == outcome.score
    assert test["message"] == outcome.message
    assert test["execution_time"] == "0.25s"
    assert test["test_code"] == "python t.py <stdin>1"


def test_encoding_is_plain_base64_json() -> None:
    envelope = build_error_envelope("bad input", {"test-name": "ünï"})

    raw = base64.b64decode(encode_envelope(envelope)).decode("utf-8")

    assert json.loads(raw)["tests"][0]["name"] == "ünï"


def test_error_envelope_shape() -> None:
    payload = build_error_envelope("Input required and not supplied: command").to_dict()

    assert payload["status"] == "error"
    assert "max_score" not in payload
    test = payload["tests"][0]
    assert set(test) == _TEST_KEYS - {"score"}
    assert test["message"] == "Input required and not supplied: command"
    assert test["execution_time"] == 0
    assert test["name"] == "Unknown Test"


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(1.5, "1.5s"), (0.1234, "0.123s"), (2.0, "2s"), (3599.125, "3599.125s")],
)
def test_format_execution_time(seconds: float, expected: str) -> None:
    assert format_execution_time(seconds) == expected


def test_decode_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Not a valid result envelope"):
        decode_envelope("not base64!")
    with pytest.raises(ValueError, match="expected a JSON object"):
        decode_envelope(base64.b64encode(b"[1]").decode("ascii"))
