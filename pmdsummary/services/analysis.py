"""PMD analysis pipeline for the services layer."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from pmdsummary.config.loader import PipelineConfig, load_pipeline_config
from pmdsummary.errors import (
    ConfigurationError,
    ExecutionError,
    InconsistentAggregateError,
    PmdSummaryError,
    ReportIOError,
)
from pmdsummary.exit_codes import EXIT_FAILURE, EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from pmdsummary.messages import loc
from pmdsummary.pmd_runner import ExecResult, Executor, build_pmd_command, execute_pmd, run_command
from pmdsummary.publish import SUMMARY_ATTACHMENT_TYPE, Publisher, get_publisher
from pmdsummary.report import (
    STATUS_EMPTY,
    STATUS_UNRECOGNIZED,
    AnalysisAggregate,
    locate_report,
    parse_report,
)
from pmdsummary.services.types import ServiceResult
from pmdsummary.summary import render_summary_line
from pmdsummary.utils.files import write_text

SUMMARY_FILENAME = "CodeAnalysisBuildSummary.md"


@dataclass
class AnalysisRunResult(ServiceResult):
    """Result of one PMD analysis run."""

    exit_code: int = 0
    config: PipelineConfig | None = None
    command: list[str] = field(default_factory=list)
    exec_result: ExecResult | None = None
    report_path: Path | None = None
    report_found: bool = False
    report_status: str | None = None
    aggregate: AnalysisAggregate | None = None
    summary_line: str = ""
    summary_path: Path | None = None
    problems: list[dict[str, Any]] = field(default_factory=list)

    @property
    def artifacts(self) -> dict[str, str]:
        artifacts: dict[str, str] = {}
        if self.summary_path is not None:
            artifacts["summary"] = str(self.summary_path)
        if self.report_found and self.report_path is not None:
            artifacts["report"] = str(self.report_path)
        return artifacts

    def to_payload(self) -> dict[str, Any]:
        return {
            "config": self.config.to_payload() if self.config else None,
            "command": self.command,
            "exec": self.exec_result.to_payload() if self.exec_result else None,
            "report_path": str(self.report_path) if self.report_path else None,
            "report_found": self.report_found,
            "report_status": self.report_status,
            "aggregate": self.aggregate.to_payload() if self.aggregate else None,
            "summary_line": self.summary_line,
        }


def _split_problems(problems: list[dict[str, Any]]) -> tuple[list[str], list[str]]:
    errors = [p.get("message", "") for p in problems if p.get("severity") == "error"]
    warnings = [p.get("message", "") for p in problems if p.get("severity") == "warning"]
    return [e for e in errors if e], [w for w in warnings if w]


def _publish(publisher: Publisher, summary_path: Path, report_path: Path) -> list[dict[str, Any]]:
    """Attach the summary and upload the report; one failing does not skip the other."""
    problems: list[dict[str, Any]] = []
    actions = (
        (
            "attachment",
            lambda: publisher.add_attachment(
                summary_path,
                attachment_type=SUMMARY_ATTACHMENT_TYPE,
                name=loc("codeAnalysisBuildSummaryTitle"),
            ),
        ),
        (
            "artifact",
            lambda: publisher.upload_artifact(
                report_path,
                artifact_name=loc("codeAnalysisArtifactSummaryTitle"),
            ),
        ),
    )
    for label, action in actions:
        try:
            action()
        except Exception as exc:  # noqa: BLE001 - publishing is best effort
            message = f"Failed to publish {label}: {exc}"
            publisher.warning(message)
            problems.append({"severity": "warning", "message": message, "code": "PMD-PUBLISH"})
    return problems


def summarize_report(
    report_path: Path,
    staging_dir: Path,
    publisher: Publisher,
) -> AnalysisRunResult:
    """Parse an existing report, write the summary file, and publish both.

    Raises:
        InconsistentAggregateError: If the parsed counts cannot be rendered.
        ReportIOError: If the report cannot be read or the summary cannot be written.
    """
    try:
        parsed = parse_report(report_path)
    except OSError as exc:
        raise ReportIOError(f"Failed to read PMD report {report_path}: {exc}", report_path) from exc
    if parsed.status == STATUS_UNRECOGNIZED:
        publisher.debug(f"Empty or unrecognized PMD xml report {report_path}")
    elif parsed.status == STATUS_EMPTY:
        publisher.debug(f"PMD report {report_path} lists no files")

    summary_line = render_summary_line(parsed.aggregate)
    target = staging_dir / SUMMARY_FILENAME
    try:
        summary_path = write_text(target, summary_line)
    except OSError as exc:
        raise ReportIOError(f"Failed to write build summary {target}: {exc}", target) from exc
    publisher.info(summary_line)

    problems = _publish(publisher, summary_path, report_path)
    _, warnings = _split_problems(problems)
    return AnalysisRunResult(
        success=True,
        warnings=warnings,
        exit_code=EXIT_SUCCESS,
        report_path=report_path,
        report_found=True,
        report_status=parsed.status,
        aggregate=parsed.aggregate,
        summary_line=summary_line,
        summary_path=summary_path,
        problems=problems,
    )


def _failure(
    exc: PmdSummaryError,
    exit_code: int,
    config: PipelineConfig | None = None,
    command: list[str] | None = None,
) -> AnalysisRunResult:
    problems = [{"severity": "error", "message": str(exc), "code": exc.code}]
    errors, warnings = _split_problems(problems)
    return AnalysisRunResult(
        success=False,
        errors=errors,
        warnings=warnings,
        exit_code=exit_code,
        config=config,
        command=command or [],
        problems=problems,
    )


def run_analysis(
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
    cwd: Path | None = None,
    publisher: Publisher | None = None,
    executor: Executor = run_command,
) -> AnalysisRunResult:
    """Run PMD and turn its report into a published build summary.

    A missing report is a successful run with nothing published.
    """
    env_map = dict(env) if env is not None else dict(os.environ)
    publisher = publisher or get_publisher(env=env_map)

    try:
        config = load_pipeline_config(overrides, env=env_map, config_path=config_path, cwd=cwd)
        command = build_pmd_command(config)
    except ConfigurationError as exc:
        return _failure(exc, EXIT_FAILURE)

    publisher.info(f"Running: {shlex.join(command)}")
    try:
        exec_result = execute_pmd(command, config.project_directory, config.timeout, executor=executor)
    except ExecutionError as exc:
        return _failure(exc, EXIT_FAILURE, config, command)

    report_path = locate_report(config.home_dir, config.version)
    if not report_path.exists():
        publisher.info(f"No PMD report found at {report_path}; nothing to summarize")
        return AnalysisRunResult(
            success=True,
            exit_code=EXIT_SUCCESS,
            config=config,
            command=command,
            exec_result=exec_result,
            report_path=report_path,
            report_found=False,
        )

    try:
        result = summarize_report(report_path, config.staging_dir, publisher)
    except (InconsistentAggregateError, ReportIOError) as exc:
        exit_code = EXIT_FAILURE if isinstance(exc, ReportIOError) else EXIT_INTERNAL_ERROR
        failed = _failure(exc, exit_code, config, command)
        failed.exec_result = exec_result
        failed.report_path = report_path
        failed.report_found = True
        return failed
    result.config = config
    result.command = command
    result.exec_result = exec_result
    return result
