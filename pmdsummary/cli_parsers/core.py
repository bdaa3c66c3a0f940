"""Parser setup for pmd-summary commands."""

from __future__ import annotations

import argparse
from typing import Callable

from pmdsummary.cli_parsers.types import CommandHandlers
from pmdsummary.publish import HOSTS


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value}")
    return parsed


def _positive_int(value: str) -> int:
    parsed = _non_negative_int(value)
    if parsed == 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return parsed


def add_core_commands(
    subparsers,
    add_json_flag: Callable[[argparse.ArgumentParser], None],
    handlers: CommandHandlers,
) -> None:
    analyze = subparsers.add_parser(
        "analyze",
        help="Run PMD through sfpowerkit and publish a build summary",
    )
    add_json_flag(analyze)
    analyze.add_argument("--project-directory", help="Root of the project to analyze")
    analyze.add_argument("--directory", help="Directory to scan, relative to the project")
    analyze.add_argument("--ruleset", help="Ruleset name, or 'Custom' to use --rulesetpath")
    analyze.add_argument("--rulesetpath", help="Path to a custom ruleset (required with --ruleset Custom)")
    analyze.add_argument("--format", help="Report format requested from PMD (default: xml)")
    analyze.add_argument("--output-path", help="Where PMD should write its report")
    analyze.add_argument("--version", dest="pmd_version", help="PMD version (default: 6.22.0)")
    analyze.add_argument("--staging-dir", help="Directory for the build summary file")
    analyze.add_argument("--home-dir", help="Home directory sfpowerkit installs PMD under")
    analyze.add_argument("--config", help="YAML config file (default: <project>/.pmd-summary.yml)")
    analyze.add_argument("--timeout", type=_positive_int, help="Seconds to wait for PMD")
    analyze.add_argument(
        "--host",
        choices=list(HOSTS),
        help="CI host to publish to (default: detect from environment)",
    )
    analyze.set_defaults(func=handlers.cmd_analyze)

    render = subparsers.add_parser("render", help="Render the summary line for given counts")
    add_json_flag(render)
    render.add_argument("--violations", type=_non_negative_int, required=True, help="Total violations")
    render.add_argument("--files", type=_non_negative_int, required=True, help="Files with violations")
    render.set_defaults(func=handlers.cmd_render)
