"""Render the one-line build summary for a PMD run."""

from __future__ import annotations

from pmdsummary.errors import InconsistentAggregateError
from pmdsummary.messages import loc
from pmdsummary.report import AnalysisAggregate

TOOL_NAME = "PMD"


def render_summary_line(aggregate: AnalysisAggregate) -> str:
    violations = aggregate.violation_count
    files = aggregate.affected_file_count

    if violations > 1:
        if files > 1:
            # PMD found 13 violations in 4 files.
            return loc(
                "codeAnalysisBuildSummaryLine_SomeViolationsSomeFiles",
                TOOL_NAME,
                violations,
                files,
            )
        if files == 1:
            # PMD found 13 violations in 1 file.
            return loc("codeAnalysisBuildSummaryLine_SomeViolationsOneFile", TOOL_NAME, violations)
    if violations == 1 and files == 1:
        return loc("codeAnalysisBuildSummaryLine_OneViolationOneFile", TOOL_NAME)
    if violations == 0:
        return loc("codeAnalysisBuildSummaryLine_NoViolations", TOOL_NAME)

    # Unreachable from aggregate_report_text: every counted violation belongs to a counted file.
    raise InconsistentAggregateError(TOOL_NAME, violations, files)
