"""Message catalog for user-facing build summary strings."""

from __future__ import annotations

MESSAGES: dict[str, str] = {
    "codeAnalysisBuildSummaryLine_SomeViolationsSomeFiles": "%s found %d violations in %d files.",
    "codeAnalysisBuildSummaryLine_SomeViolationsOneFile": "%s found %d violations in 1 file.",
    "codeAnalysisBuildSummaryLine_OneViolationOneFile": "%s found 1 violation in 1 file.",
    "codeAnalysisBuildSummaryLine_NoViolations": "%s found no violations.",
    "codeAnalysisBuildSummaryTitle": "Code Analysis Report",
    "codeAnalysisArtifactSummaryTitle": "Code Analysis Results",
}


def loc(key: str, *args: object) -> str:
    """Format the message registered under ``key`` with positional args.

    Unknown keys come back unchanged so a missing entry is visible in the
    build output instead of failing the step.
    """
    template = MESSAGES.get(key)
    if template is None:
        return key
    if not args:
        return template
    return template % args
