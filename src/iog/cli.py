from __future__ import annotations

import argparse
from functools import partial
from typing import Any, Never, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich_argparse import RawTextRichHelpFormatter

from io_grader import LocalEngine, ResultEnvelope, decode_envelope, encode_envelope, run_grader
from io_grader.actions import read_action_inputs, set_output
from io_grader.config import COMPARISON_METHODS, read_config_file
from io_grader.log import configure_logging

_CONSOLE = Console(no_color=False)
_ERR_CONSOLE = Console(stderr=True)
_STATUS_STYLES = {"pass": "bold green", "fail": "bold yellow", "error": "bold red"}

# (flag, input name, help)
_INPUT_FLAGS = (
    ("--test-name", "test-name", "Unique name of the test shown in the report."),
    ("--setup-command", "setup-command", "Command run before the test, e.g. dependency install."),
    ("--command", "command", "Command under test. Receives --input on stdin."),
    ("--input", "input", "Data passed to the command via stdin."),
    ("--expected-output", "expected-output", "Expected stdout when no test report lines are printed."),
    ("--timeout", "timeout", "Minutes before the command is killed (default: 10, max: 60)."),
    ("--max-score", "max-score", "Points for the test. 0 or unset scores one point per reported test."),
    ("--pass-score", "pass-score", "Points needed to pass (default: 80%% of max score)."),
)


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m iog")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit with status 2.

        Example:
            ```python
            # parser.error("unrecognized arguments: --retries")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for grading runs.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m iog",
        description=(
            "io-grader CLI\n"
            "Run a student program, score its test report or compare its output,\n"
            "and publish a base64 result envelope for the classroom reporter."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m iog grade --test-name sum --command 'python sum.py' --input '1 2' \\\n"
            "      --expected-output 3 --comparison-method exact --max-score 5\n"
            "  python -m iog grade --config grader.toml\n"
            "  python -m iog decode eyJ2ZXJzaW9uIjoxLC4uLn0=\n\n"
            "Inside GitHub Actions every input is also read from INPUT_* variables."
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging (also enabled by RUNNER_DEBUG=1).",
    )

    sub = parser.add_subparsers(
        dest="action",
        required=True,
        parser_class=_RichArgumentParser,
    )

    grade_cmd = sub.add_parser(
        "grade",
        help="Run and grade one test.",
        description=(
            "Grade one test and write the `result` output.\n"
            "Precedence: INPUT_* variables < --config file < explicit flags."
        ),
        epilog=(
            "Examples:\n"
            "  python -m iog grade --test-name unit --command 'gradle test' --max-score 20\n"
            "  python -m iog grade --config grader.toml --output-file result.txt"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    grade_cmd.add_argument(
        "--config",
        help="TOML file with grader inputs, at top level or under [grader].",
    )
    for flag, name, text in _INPUT_FLAGS:
        grade_cmd.add_argument(flag, dest=name.replace("-", "_"), help=text)
    grade_cmd.add_argument(
        "--comparison-method",
        dest="comparison_method",
        choices=COMPARISON_METHODS,
        help="How stdout is compared with --expected-output.",
    )
    grade_cmd.add_argument(
        "--output-file",
        help="File receiving the `result` output (default: $GITHUB_OUTPUT).",
    )

    decode_cmd = sub.add_parser(
        "decode",
        help="Pretty-print a base64 result envelope.",
        description="Decode a `result` output value and show its JSON payload.",
        formatter_class=_HELP_FORMATTER,
    )
    decode_cmd.add_argument("value")

    return parser


def collect_inputs(args: argparse.Namespace, *, include_config: bool = True) -> dict[str, str]:
    """Merge action inputs, the config file and explicit flags, in that order.

    With `include_config=False` the file is skipped, which never raises and
    gives the inputs known before the config file is read.

    Example:
        ```python
        inputs = collect_inputs(build_parser().parse_args(["grade", "--test-name", "sum"]))
        ```
    """
    inputs = read_action_inputs()
    if include_config and args.config:
        inputs.update(read_config_file(args.config))
    for _, name, _ in _INPUT_FLAGS:
        value = getattr(args, name.replace("-", "_"))
        if value is not None:
            inputs[name] = value
    if args.comparison_method is not None:
        inputs["comparison-method"] = args.comparison_method
    return inputs


def _print_envelope(envelope: ResultEnvelope) -> None:
    """Render the grading summary table and messages on stderr.

    Example:
        ```python
        _print_envelope(build_error_envelope("Input required and not supplied: command"))
        ```
    """
    table = Table(title="Grading Result")
    table.add_column("Test", style="cyan")
    table.add_column("Status")
    table.add_column("Score")
    table.add_column("Time")
    for test in envelope.tests:
        score = "-" if test.score is None else f"{test.score:g}"
        if envelope.max_score is not None:
            score += f" / {envelope.max_score:g}"
        table.add_row(
            escape(test.name),
            f"[{_STATUS_STYLES[test.status]}]{test.status}[/]",
            score,
            str(test.execution_time),
        )
    _ERR_CONSOLE.print(table)
    for test in envelope.tests:
        if test.message:
            _ERR_CONSOLE.print(Panel(escape(test.message), title=escape(test.name), border_style="yellow", expand=False))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `iog` CLI command handler.

    Example:
        ```python
        code = main(["grade", "--config", "grader.toml"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging("DEBUG" if args.verbose else None)

    if args.action == "grade":
        envelope = run_grader(
            partial(collect_inputs, args),
            engine=LocalEngine(),
            fallback_inputs=collect_inputs(args, include_config=False),
        )
        _print_envelope(envelope)
        set_output("result", encode_envelope(envelope), output_file=args.output_file)
        return 0
    if args.action == "decode":
        try:
            payload: Any = decode_envelope(args.value)
        except ValueError as exc:
            _CONSOLE.print(Panel.fit(escape(str(exc)), style="bold red"))
            return 1
        _CONSOLE.print(Panel.fit(Pretty(payload), title="Result Envelope", border_style="cyan"))
        return 0

    parser.error("Unhandled command")
    return 2
