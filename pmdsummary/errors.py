"""Exception types raised by the analysis pipeline."""

from __future__ import annotations

from pathlib import Path


class PmdSummaryError(Exception):
    """Base class for pipeline failures."""

    code = "PMD-ERROR"


class ConfigurationError(PmdSummaryError):
    """Raised when resolved inputs are missing or invalid for the chosen mode."""

    code = "PMD-CONFIG"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ExecutionError(PmdSummaryError):
    """Raised when the PMD process cannot start, times out, or exits non-zero."""

    code = "PMD-EXEC"

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class InconsistentAggregateError(PmdSummaryError):
    """Raised when violation and file counts cannot come from a real report."""

    code = "PMD-AGGREGATE"

    def __init__(self, tool_name: str, violation_count: int, affected_file_count: int) -> None:
        super().__init__(
            f"Unexpected results from {tool_name}: "
            f"{violation_count} total violations in {affected_file_count} files"
        )
        self.tool_name = tool_name
        self.violation_count = violation_count
        self.affected_file_count = affected_file_count


class ReportIOError(PmdSummaryError):
    """Raised when the report cannot be read or the summary cannot be written."""

    code = "PMD-IO"

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path
