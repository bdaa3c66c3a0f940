"""Services layer for pmdsummary - pure Python APIs returning dataclasses.

This module provides stable APIs for the CLI and programmatic access.
"""

from pmdsummary.services.analysis import (
    SUMMARY_FILENAME,
    AnalysisRunResult,
    run_analysis,
    summarize_report,
)
from pmdsummary.services.types import ServiceResult

__all__ = [
    "ServiceResult",
    "SUMMARY_FILENAME",
    "AnalysisRunResult",
    "run_analysis",
    "summarize_report",
]
