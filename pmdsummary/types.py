"""Command result rendered by ``--json``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pmdsummary.exit_codes import EXIT_SUCCESS

STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"
STATUS_ERROR = "error"


@dataclass
class CommandResult:
    """Outcome of one pmd-summary command.

    ``host`` is the CI host the command published to, if any. ``report_status``
    tells a clean report apart from an unrecognized one, which both render the
    same summary line.
    """

    exit_code: int = EXIT_SUCCESS
    summary: str = ""
    host: str | None = None
    report_status: str | None = None
    problems: list[dict[str, Any]] = field(default_factory=list)
    artifacts: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    crashed: bool = False

    @property
    def status(self) -> str:
        if self.crashed:
            return STATUS_ERROR
        return STATUS_SUCCESS if self.exit_code == EXIT_SUCCESS else STATUS_FAILURE

    def to_payload(self, command: str, duration_ms: int) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "command": command,
            "status": self.status,
            "exit_code": self.exit_code,
            "duration_ms": duration_ms,
            "host": self.host,
            "summary": self.summary,
            "report_status": self.report_status,
            "artifacts": self.artifacts,
            "problems": self.problems,
        }
        if self.data:
            payload["data"] = self.data
        return payload
