from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import Mapping, TextIO

from .config import INPUT_NAMES


def input_variable(name: str) -> str:
    """Return the environment variable GitHub Actions uses for an input.

    Example:
        ```python
        assert input_variable("test-name") == "INPUT_TEST-NAME"
        ```
    """
    return "INPUT_" + name.replace(" ", "_").upper()


def read_action_inputs(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Read grader inputs from `INPUT_*` variables; absent inputs are omitted.

    Example:
        ```python
        raw = read_action_inputs({"INPUT_TEST-NAME": " hello ", "INPUT_COMMAND": "python hi.py"})
        ```
    """
    source = os.environ if environ is None else environ
    inputs: dict[str, str] = {}
    for name in INPUT_NAMES:
        value = source.get(input_variable(name))
        if value is not None:
            inputs[name] = value.strip()
    return inputs


def _make_delimiter(body: str) -> str:
    """Pick a heredoc delimiter that does not occur in the value.

    Example:
        ```python
        delimiter = _make_delimiter("some output")
        ```
    """
    delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    while delimiter in body:
        delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    return delimiter


def set_output(
    name: str,
    value: str,
    output_file: str | Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Publish a step output to the workflow host.

    Appends to `output_file` (defaults to `$GITHUB_OUTPUT`); without one, the
    legacy `::set-output` command is written to `stream`.

    Example:
        ```python
        set_output("result", encoded, output_file="/tmp/github_output.txt")
        ```
    """
    target = output_file if output_file is not None else os.environ.get("GITHUB_OUTPUT", "")
    if target:
        delimiter = _make_delimiter(value)
        with Path(target).open("a", encoding="utf-8") as out:
            out.write(f"{name}<<{delimiter}\n")
            out.write(value)
            out.write(f"\n{delimiter}\n")
        return
    out_stream = stream or sys.stdout
    out_stream.write(f"\n::set-output name={name}::{value}\n")
