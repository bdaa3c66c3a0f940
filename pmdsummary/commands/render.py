"""Render command: print the summary line for explicit counts."""

from __future__ import annotations

import argparse
import sys

from pmdsummary.errors import InconsistentAggregateError
from pmdsummary.exit_codes import EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from pmdsummary.report import AnalysisAggregate
from pmdsummary.summary import render_summary_line
from pmdsummary.types import CommandResult


def cmd_render(args: argparse.Namespace) -> int | CommandResult:
    json_mode = getattr(args, "json", False)
    aggregate = AnalysisAggregate(violation_count=args.violations, affected_file_count=args.files)
    try:
        line = render_summary_line(aggregate)
    except InconsistentAggregateError as exc:
        if json_mode:
            return CommandResult(
                exit_code=EXIT_INTERNAL_ERROR,
                summary=str(exc),
                problems=[{"severity": "error", "message": str(exc), "code": exc.code}],
                data=aggregate.to_payload(),
            )
        print(str(exc), file=sys.stderr)
        return EXIT_INTERNAL_ERROR

    if json_mode:
        return CommandResult(exit_code=EXIT_SUCCESS, summary=line, data=aggregate.to_payload())
    print(line)
    return EXIT_SUCCESS
