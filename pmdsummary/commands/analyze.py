"""Analyze command: run PMD and publish the build summary."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from pmdsummary.exit_codes import EXIT_SUCCESS
from pmdsummary.publish import get_publisher
from pmdsummary.services.analysis import run_analysis
from pmdsummary.types import CommandResult


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "project_directory": args.project_directory,
        "directory": args.directory,
        "ruleset": args.ruleset,
        "rulesetpath": args.rulesetpath,
        "format": args.format,
        "output_path": args.output_path,
        "version": args.pmd_version,
        "staging_dir": args.staging_dir,
        "home_dir": args.home_dir,
        "timeout": args.timeout,
    }


def cmd_analyze(args: argparse.Namespace) -> int | CommandResult:
    json_mode = getattr(args, "json", False)
    # Host commands go to stderr in JSON mode so stdout stays parseable.
    publisher = get_publisher(args.host, stream=sys.stderr if json_mode else None)
    config_path = Path(args.config) if args.config else None

    try:
        result = run_analysis(
            _overrides_from_args(args),
            config_path=config_path,
            publisher=publisher,
        )
    except Exception as exc:
        # The host must still see a failed step when the run crashes.
        publisher.fail(f"PMD analysis crashed: {exc}")
        raise

    if result.success:
        summary = result.summary_line or "No PMD report produced"
    else:
        summary = result.errors[0] if result.errors else "PMD analysis failed"
        publisher.fail(summary)

    if json_mode:
        return CommandResult(
            exit_code=result.exit_code,
            summary=summary,
            host=publisher.name,
            report_status=result.report_status,
            problems=result.problems,
            artifacts=result.artifacts,
            data=result.to_payload(),
        )
    if result.exit_code != EXIT_SUCCESS:
        print(summary, file=sys.stderr)
    return result.exit_code
