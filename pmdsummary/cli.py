"""Command-line entry point for pmd-summary."""

from __future__ import annotations

import argparse
import json
import time

from pmdsummary import __version__
from pmdsummary.cli_parsers.core import add_core_commands
from pmdsummary.cli_parsers.types import CommandHandlers
from pmdsummary.commands.analyze import cmd_analyze
from pmdsummary.commands.render import cmd_render
from pmdsummary.exit_codes import EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from pmdsummary.types import CommandResult


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Emit a JSON result payload")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pmd-summary",
        description="Run PMD via sfpowerkit and publish a one-line build summary",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)
    handlers = CommandHandlers(cmd_analyze=cmd_analyze, cmd_render=cmd_render)
    add_core_commands(subparsers, add_json_flag, handlers)
    return parser


def _crash_result(args: argparse.Namespace, exc: Exception) -> CommandResult:
    message = str(exc) or type(exc).__name__
    return CommandResult(
        exit_code=EXIT_INTERNAL_ERROR,
        summary=message,
        host=getattr(args, "host", None),
        problems=[{"severity": "error", "message": message, "code": "PMD-UNHANDLED"}],
        crashed=True,
    )


def main(argv: list[str] | None = None) -> int:
    """Run one pmd-summary command and return its exit code.

    With ``--json`` every outcome, including an unexpected exception, is
    printed as one payload on stdout. Without it unexpected exceptions
    propagate with their traceback.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    json_mode = getattr(args, "json", False)
    start = time.perf_counter()

    try:
        outcome = args.func(args)
    except Exception as exc:  # noqa: BLE001 - reported as a JSON payload
        if not json_mode:
            raise
        outcome = _crash_result(args, exc)

    result = outcome if isinstance(outcome, CommandResult) else CommandResult(exit_code=int(outcome))
    if not result.summary:
        result.summary = "OK" if result.exit_code == EXIT_SUCCESS else "Command failed"

    if json_mode:
        duration_ms = int((time.perf_counter() - start) * 1000)
        print(json.dumps(result.to_payload(args.command, duration_ms), indent=2))
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
