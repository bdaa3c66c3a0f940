"""Tests for pmdsummary.services.analysis module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pmdsummary.errors import InconsistentAggregateError, ReportIOError
from pmdsummary.exit_codes import EXIT_FAILURE, EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from pmdsummary.pmd_runner import ExecResult
from pmdsummary.report import STATUS_EMPTY, STATUS_UNRECOGNIZED, AnalysisAggregate, locate_report
from pmdsummary.services.analysis import SUMMARY_FILENAME, run_analysis, summarize_report
from tests.helpers import make_report_xml


def _overrides(tmp_path: Path, **extra) -> dict:
    values = {
        "home_dir": str(tmp_path / "home"),
        "staging_dir": str(tmp_path / "staging"),
        "version": "6.22.0",
    }
    values.update(extra)
    return values


def _place_report(tmp_path: Path, text: str) -> Path:
    path = locate_report(tmp_path / "home", "6.22.0")
    path.parent.mkdir(parents=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestRunAnalysis:
    """Tests for run_analysis function."""

    def test_summarizes_and_publishes(self, tmp_path: Path) -> None:
        report = _place_report(tmp_path, make_report_xml([3, 0]))
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))
        publisher = MagicMock()

        result = run_analysis(_overrides(tmp_path), env={}, cwd=tmp_path, publisher=publisher, executor=executor)

        assert result.success is True
        assert result.exit_code == EXIT_SUCCESS
        assert result.aggregate == AnalysisAggregate(violation_count=3, affected_file_count=1)
        assert result.summary_line == "PMD found 3 violations in 1 file."
        summary_path = tmp_path / "staging" / SUMMARY_FILENAME
        assert result.summary_path == summary_path
        assert summary_path.read_text(encoding="utf-8") == "PMD found 3 violations in 1 file."
        publisher.add_attachment.assert_called_once_with(
            summary_path,
            attachment_type="Distributedtask.Core.Summary",
            name="Code Analysis Report",
        )
        publisher.upload_artifact.assert_called_once_with(report, artifact_name="Code Analysis Results")
        assert result.artifacts == {"summary": str(summary_path), "report": str(report)}

    def test_passes_command_workdir_and_timeout(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))

        result = run_analysis(
            _overrides(tmp_path, project_directory=str(project), directory="force-app", timeout=120),
            env={},
            cwd=tmp_path,
            publisher=MagicMock(),
            executor=executor,
        )

        cmd, workdir, timeout = executor.call_args.args
        assert cmd[:2] == ["sfdx", "sfpowerkit:source:pmd"]
        assert "force-app" in cmd
        assert workdir == project.resolve()
        assert timeout == 120
        assert result.command == cmd

    def test_absent_report_succeeds_without_summary(self, tmp_path: Path) -> None:
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))
        publisher = MagicMock()

        result = run_analysis(_overrides(tmp_path), env={}, cwd=tmp_path, publisher=publisher, executor=executor)

        assert result.success is True
        assert result.exit_code == EXIT_SUCCESS
        assert result.report_found is False
        assert result.summary_path is None
        assert result.aggregate is None
        assert not (tmp_path / "staging").exists()
        publisher.add_attachment.assert_not_called()
        publisher.upload_artifact.assert_not_called()
        assert result.artifacts == {}

    def test_execution_failure_aborts(self, tmp_path: Path) -> None:
        _place_report(tmp_path, make_report_xml([1]))
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=2, stderr="sfdx: command failed"))
        publisher = MagicMock()

        result = run_analysis(_overrides(tmp_path), env={}, cwd=tmp_path, publisher=publisher, executor=executor)

        assert result.success is False
        assert result.exit_code == EXIT_FAILURE
        assert result.problems[0]["code"] == "PMD-EXEC"
        assert "sfdx: command failed" in result.errors[0]
        assert not (tmp_path / "staging").exists()
        publisher.add_attachment.assert_not_called()

    def test_configuration_error_skips_execution(self, tmp_path: Path) -> None:
        executor = MagicMock()

        result = run_analysis(
            _overrides(tmp_path, ruleset="Custom"),
            env={},
            cwd=tmp_path,
            publisher=MagicMock(),
            executor=executor,
        )

        assert result.success is False
        assert result.exit_code == EXIT_FAILURE
        assert result.problems[0]["code"] == "PMD-CONFIG"
        executor.assert_not_called()

    def test_inconsistent_aggregate_is_internal_error(self, tmp_path: Path) -> None:
        _place_report(tmp_path, make_report_xml([2]))
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))

        with patch(
            "pmdsummary.services.analysis.render_summary_line",
            side_effect=InconsistentAggregateError("PMD", 5, 0),
        ):
            result = run_analysis(
                _overrides(tmp_path), env={}, cwd=tmp_path, publisher=MagicMock(), executor=executor
            )

        assert result.success is False
        assert result.exit_code == EXIT_INTERNAL_ERROR
        assert result.problems[0]["code"] == "PMD-AGGREGATE"
        assert "5 total violations in 0 files" in result.errors[0]
        assert result.report_found is True

    def test_unreadable_report_fails_without_publishing(self, tmp_path: Path) -> None:
        report = locate_report(tmp_path / "home", "6.22.0")
        report.mkdir(parents=True)
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))
        publisher = MagicMock()

        result = run_analysis(_overrides(tmp_path), env={}, cwd=tmp_path, publisher=publisher, executor=executor)

        assert result.success is False
        assert result.exit_code == EXIT_FAILURE
        assert result.problems[0]["code"] == "PMD-IO"
        assert result.errors[0].startswith(f"Failed to read PMD report {report}")
        assert result.report_found is True
        assert result.summary_path is None
        publisher.add_attachment.assert_not_called()
        publisher.upload_artifact.assert_not_called()

    def test_unwritable_staging_directory_fails_without_publishing(self, tmp_path: Path) -> None:
        _place_report(tmp_path, make_report_xml([2]))
        (tmp_path / "staging").write_text("not a directory", encoding="utf-8")
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))
        publisher = MagicMock()

        result = run_analysis(_overrides(tmp_path), env={}, cwd=tmp_path, publisher=publisher, executor=executor)

        assert result.success is False
        assert result.exit_code == EXIT_FAILURE
        assert result.problems[0]["code"] == "PMD-IO"
        assert "Failed to write build summary" in result.errors[0]
        publisher.add_attachment.assert_not_called()
        publisher.upload_artifact.assert_not_called()

    def test_payload_includes_config_and_exec(self, tmp_path: Path) -> None:
        _place_report(tmp_path, make_report_xml([1]))
        executor = MagicMock(return_value=ExecResult(argv=["/usr/bin/sfdx", "sfpowerkit:source:pmd"], returncode=0))

        result = run_analysis(_overrides(tmp_path), env={}, cwd=tmp_path, publisher=MagicMock(), executor=executor)
        payload = result.to_payload()

        assert payload["config"]["version"] == "6.22.0"
        assert payload["config"]["staging_dir"] == str(tmp_path / "staging")
        assert payload["exec"] == {
            "argv": ["/usr/bin/sfdx", "sfpowerkit:source:pmd"],
            "returncode": 0,
            "success": True,
        }

    def test_reads_task_inputs_from_environment(self, tmp_path: Path) -> None:
        env = {
            "INPUT_VERSION": "6.30.0",
            "BUILD_ARTIFACTSTAGINGDIRECTORY": str(tmp_path / "azure-staging"),
        }
        path = locate_report(tmp_path / "home", "6.30.0")
        path.parent.mkdir(parents=True)
        path.write_text(make_report_xml([]), encoding="utf-8")
        executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))

        result = run_analysis(
            {"home_dir": str(tmp_path / "home")},
            env=env,
            cwd=tmp_path,
            publisher=MagicMock(),
            executor=executor,
        )

        assert result.summary_line == "PMD found no violations."
        assert result.summary_path == tmp_path / "azure-staging" / SUMMARY_FILENAME
        assert result.report_status == STATUS_EMPTY


class TestSummarizeReport:
    """Tests for summarize_report function."""

    def test_creates_staging_directory(self, tmp_path: Path, write_report) -> None:
        report = write_report([4, 4, 4, 1])
        staging = tmp_path / "nested" / "staging"

        result = summarize_report(report, staging, MagicMock())

        assert (staging / SUMMARY_FILENAME).read_text(encoding="utf-8") == "PMD found 13 violations in 4 files."
        assert result.report_found is True

    def test_unrecognized_report_logs_debug(self, tmp_path: Path) -> None:
        report = tmp_path / "sf-pmd-output.xml"
        report.write_text("not xml at all", encoding="utf-8")
        publisher = MagicMock()

        result = summarize_report(report, tmp_path / "staging", publisher)

        assert result.report_status == STATUS_UNRECOGNIZED
        assert result.summary_line == "PMD found no violations."
        publisher.debug.assert_called_once()
        assert "unrecognized" in publisher.debug.call_args.args[0]

    def test_attachment_failure_does_not_block_artifact(self, tmp_path: Path, write_report) -> None:
        report = write_report([1])
        publisher = MagicMock()
        publisher.add_attachment.side_effect = OSError("disk full")

        result = summarize_report(report, tmp_path / "staging", publisher)

        publisher.upload_artifact.assert_called_once()
        assert result.success is True
        assert result.warnings == ["Failed to publish attachment: disk full"]
        assert result.problems[0]["code"] == "PMD-PUBLISH"
        publisher.warning.assert_called_once_with("Failed to publish attachment: disk full")

    def test_artifact_failure_is_recorded(self, tmp_path: Path, write_report) -> None:
        report = write_report([1])
        publisher = MagicMock()
        publisher.upload_artifact.side_effect = RuntimeError("upload refused")

        result = summarize_report(report, tmp_path / "staging", publisher)

        publisher.add_attachment.assert_called_once()
        assert result.warnings == ["Failed to publish artifact: upload refused"]

    def test_unreadable_report_raises(self, tmp_path: Path) -> None:
        report = tmp_path / "sf-pmd-output.xml"
        report.mkdir()

        with pytest.raises(ReportIOError) as excinfo:
            summarize_report(report, tmp_path / "staging", MagicMock())

        assert excinfo.value.code == "PMD-IO"
        assert excinfo.value.path == report
        assert not (tmp_path / "staging").exists()

    def test_payload(self, tmp_path: Path, write_report) -> None:
        report = write_report([2, 2])

        payload = summarize_report(report, tmp_path / "staging", MagicMock()).to_payload()

        assert payload["aggregate"] == {"violation_count": 4, "affected_file_count": 2}
        assert payload["summary_line"] == "PMD found 4 violations in 2 files."
        assert payload["report_status"] == "parsed"


@pytest.mark.parametrize("violations", [[1], [5, 5, 5]])
def test_end_to_end_with_azure_publisher(tmp_path: Path, capsys, violations: list[int]) -> None:
    from pmdsummary.publish import AzurePipelinesPublisher

    _place_report(tmp_path, make_report_xml(violations))
    executor = MagicMock(return_value=ExecResult(argv=[], returncode=0))

    result = run_analysis(
        _overrides(tmp_path),
        env={},
        cwd=tmp_path,
        publisher=AzurePipelinesPublisher(),
        executor=executor,
    )

    out = capsys.readouterr().out
    assert result.success is True
    assert "##vso[task.addattachment type=Distributedtask.Core.Summary;name=Code Analysis Report;]" in out
    assert "##vso[artifact.upload artifactname=Code Analysis Results;]" in out
