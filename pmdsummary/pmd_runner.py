"""Build and run the sfpowerkit PMD command."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from pmdsummary.config.loader import DEFAULT_RULESET, PipelineConfig
from pmdsummary.errors import ExecutionError

PMD_COMMAND = ["sfdx", "sfpowerkit:source:pmd"]
STDERR_TAIL_LINES = 20


@dataclass
class ExecResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "argv": self.argv,
            "returncode": self.returncode,
            "success": self.success,
        }


Executor = Callable[[list[str], Path | None, int | None], ExecResult]


def build_pmd_command(config: PipelineConfig) -> list[str]:
    """Build the argv for a config already validated by ``load_pipeline_config``."""
    cmd = list(PMD_COMMAND)
    if config.directory:
        cmd += ["-d", config.directory]
    if config.is_custom_ruleset:
        cmd += ["-r", config.rulesetpath]
    elif config.ruleset != DEFAULT_RULESET:
        cmd += ["-r", config.ruleset]
    if config.format:
        cmd += ["-f", config.format]
    if config.output_path:
        cmd += ["-o", config.output_path]
    if config.version:
        cmd += ["--version", config.version]
    return cmd


def run_command(
    cmd: list[str],
    workdir: Path | None = None,
    timeout: int | None = None,
) -> ExecResult:
    # sfdx ships as sfdx.cmd on Windows; fall back to the bare name when PATH has no match.
    resolved = [shutil.which(cmd[0]) or cmd[0], *cmd[1:]]
    proc = subprocess.run(  # noqa: S603
        resolved,
        cwd=str(workdir) if workdir else None,
        env=os.environ.copy(),
        text=True,
        capture_output=True,
        timeout=timeout,
        check=False,
    )
    return ExecResult(argv=resolved, returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def _stderr_tail(text: str) -> str:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return "\n".join(lines[-STDERR_TAIL_LINES:])


def execute_pmd(
    cmd: list[str],
    workdir: Path | None = None,
    timeout: int | None = None,
    executor: Executor = run_command,
) -> ExecResult:
    """Run PMD and fail unless it exits cleanly.

    Raises:
        ExecutionError: If the process cannot start, times out, or exits non-zero.
    """
    try:
        result = executor(cmd, workdir, timeout)
    except subprocess.TimeoutExpired as exc:
        raise ExecutionError(f"{cmd[0]} timed out after {exc.timeout} seconds") from exc
    except OSError as exc:
        raise ExecutionError(f"Failed to start {cmd[0]}: {exc}") from exc

    if not result.success:
        message = f"{' '.join(cmd[:2])} exited with code {result.returncode}"
        tail = _stderr_tail(result.stderr)
        if tail:
            message = f"{message}:\n{tail}"
        raise ExecutionError(message, returncode=result.returncode, stderr=result.stderr)
    return result
