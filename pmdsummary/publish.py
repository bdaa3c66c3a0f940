"""Publish the build summary and report to the CI host.

Each host class also carries the log helpers used during a run, so the
pipeline never writes host-specific syntax itself.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Protocol, TextIO

SUMMARY_ATTACHMENT_TYPE = "Distributedtask.Core.Summary"

HOST_AZURE = "azure"
HOST_GITHUB = "github"
HOSTS = (HOST_AZURE, HOST_GITHUB)


class Publisher(Protocol):
    name: str

    def debug(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def fail(self, message: str) -> None: ...

    def add_attachment(self, path: Path, *, attachment_type: str, name: str) -> None: ...

    def upload_artifact(self, path: Path, *, artifact_name: str) -> None: ...


def _escape_azure_data(value: str) -> str:
    return value.replace("%", "%AZP25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_azure_property(value: str) -> str:
    return _escape_azure_data(value).replace(";", "%3B").replace("]", "%5D")


def _escape_github_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class AzurePipelinesPublisher:
    """Emit Azure Pipelines ``##vso`` logging commands."""

    name = HOST_AZURE

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _emit(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout)

    def _command(self, area_action: str, properties: dict[str, str], data: str) -> None:
        props = "".join(f"{key}={_escape_azure_property(value)};" for key, value in properties.items())
        spacer = " " if props else ""
        self._emit(f"##vso[{area_action}{spacer}{props}]{_escape_azure_data(data)}")

    def debug(self, message: str) -> None:
        self._emit(f"##[debug]{_escape_azure_data(message)}")

    def info(self, message: str) -> None:
        self._emit(message)

    def warning(self, message: str) -> None:
        self._command("task.logissue", {"type": "warning"}, message)

    def fail(self, message: str) -> None:
        self._command("task.logissue", {"type": "error"}, message)
        self._command("task.complete", {"result": "Failed"}, message)

    def add_attachment(self, path: Path, *, attachment_type: str, name: str) -> None:
        self._command("task.addattachment", {"type": attachment_type, "name": name}, str(path))

    def upload_artifact(self, path: Path, *, artifact_name: str) -> None:
        self._command("artifact.upload", {"artifactname": artifact_name}, str(path))


class GitHubActionsPublisher:
    """Write to the GitHub Actions step summary and step outputs.

    GitHub has no workflow command for uploading artifacts, so the report
    path is exported as a step output for a later upload-artifact step.
    """

    name = HOST_GITHUB

    def __init__(self, env: Mapping[str, str] | None = None, stream: TextIO | None = None) -> None:
        env_map = env if env is not None else os.environ
        summary = env_map.get("GITHUB_STEP_SUMMARY")
        output = env_map.get("GITHUB_OUTPUT")
        self.summary_path = Path(summary) if summary else None
        self.output_path = Path(output) if output else None
        self._stream = stream

    def _emit(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout)

    def _write_outputs(self, values: dict[str, str]) -> None:
        if self.output_path is None:
            for key, value in values.items():
                self._emit(f"{key}={value}")
            return
        with open(self.output_path, "a", encoding="utf-8") as handle:
            for key, value in values.items():
                handle.write(f"{key}={value}\n")

    def _append_summary(self, text: str) -> None:
        if self.summary_path is None:
            self._emit(text)
            return
        with open(self.summary_path, "a", encoding="utf-8") as handle:
            handle.write(text)
            if not text.endswith("\n"):
                handle.write("\n")

    def debug(self, message: str) -> None:
        self._emit(f"::debug::{_escape_github_data(message)}")

    def info(self, message: str) -> None:
        self._emit(message)

    def warning(self, message: str) -> None:
        self._emit(f"::warning::{_escape_github_data(message)}")

    def fail(self, message: str) -> None:
        self._emit(f"::error::{_escape_github_data(message)}")

    def add_attachment(self, path: Path, *, attachment_type: str, name: str) -> None:
        body = path.read_text(encoding="utf-8").strip()
        self._append_summary(f"## {name}\n\n{body}\n")
        self._write_outputs({"summary_path": str(path)})

    def upload_artifact(self, path: Path, *, artifact_name: str) -> None:
        self._write_outputs({"report_path": str(path), "artifact_name": artifact_name})


def detect_host(env: Mapping[str, str] | None = None) -> str:
    env_map = env if env is not None else os.environ
    if str(env_map.get("GITHUB_ACTIONS", "")).lower() == "true":
        return HOST_GITHUB
    return HOST_AZURE


def get_publisher(
    host: str | None = None,
    env: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> Publisher:
    host = host or detect_host(env)
    if host == HOST_GITHUB:
        return GitHubActionsPublisher(env=env, stream=stream)
    if host == HOST_AZURE:
        return AzurePipelinesPublisher(stream=stream)
    raise ValueError(f"Unsupported host: {host}")
