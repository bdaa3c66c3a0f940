"""
pmd-summary - Configuration Loader

Merges configuration from multiple sources with proper precedence:
  1. Command-line flags (highest priority)
  2. Task inputs from the host (INPUT_<NAME> environment variables)
  3. The project's .pmd-summary.yml, or an explicit --config file
  4. Built-in defaults (lowest priority)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from pmdsummary.config.inputs import read_task_inputs
from pmdsummary.config.io import load_yaml_file
from pmdsummary.config.merge import deep_merge
from pmdsummary.config.schema import validate_config
from pmdsummary.errors import ConfigurationError

DEFAULT_CONFIG_NAME = ".pmd-summary.yml"
DEFAULT_RULESET = "sfpowerkit"
CUSTOM_RULESET = "Custom"
DEFAULT_STAGING_NAME = ".pmd-summary"

FALLBACK_DEFAULTS: dict[str, Any] = {
    "ruleset": DEFAULT_RULESET,
    "format": "xml",
    "version": "6.22.0",
}

STAGING_ENV_VARS = ("BUILD_ARTIFACTSTAGINGDIRECTORY", "RUNNER_TEMP")

_ALIASES = {
    "outputPath": "output_path",
    "output": "output_path",
}


@dataclass(frozen=True)
class PipelineConfig:
    """Resolved, validated inputs for one analysis run."""

    staging_dir: Path
    home_dir: Path
    ruleset: str = DEFAULT_RULESET
    format: str = "xml"
    version: str = "6.22.0"
    project_directory: Path | None = None
    directory: str | None = None
    rulesetpath: str | None = None
    output_path: str | None = None
    timeout: int | None = None

    @property
    def is_custom_ruleset(self) -> bool:
        return self.ruleset == CUSTOM_RULESET

    def to_payload(self) -> dict[str, Any]:
        return {
            "project_directory": str(self.project_directory) if self.project_directory else None,
            "directory": self.directory,
            "ruleset": self.ruleset,
            "rulesetpath": self.rulesetpath,
            "format": self.format,
            "output_path": self.output_path,
            "version": self.version,
            "staging_dir": str(self.staging_dir),
            "home_dir": str(self.home_dir),
            "timeout": self.timeout,
        }


def _normalize(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Apply key aliases and drop unset values so they never shadow defaults."""
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if isinstance(value, Path):
            value = str(value)
        key = _ALIASES.get(key, key)
        if key == "version" and isinstance(value, (int, float)):
            value = str(value)
        normalized[key] = value.strip() if isinstance(value, str) else value
    return normalized


def _resolve_path(value: str, cwd: Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = cwd / path
    return path.resolve()


def _resolve_staging_dir(env: Mapping[str, str], cwd: Path) -> Path:
    for name in STAGING_ENV_VARS:
        value = env.get(name)
        if value:
            return _resolve_path(value, cwd)
    return (cwd / DEFAULT_STAGING_NAME).resolve()


def _load_file_config(config_path: Path | None, project_dir: str | None, cwd: Path) -> dict[str, Any]:
    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        path = config_path
    else:
        base = _resolve_path(project_dir, cwd) if project_dir else cwd
        path = base / DEFAULT_CONFIG_NAME
    try:
        return load_yaml_file(path)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def load_pipeline_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
    cwd: Path | None = None,
) -> PipelineConfig:
    """Build the run's PipelineConfig from every configuration source.

    Args:
        overrides: Values from command-line flags; ``None`` entries are ignored.
        env: Environment to read task inputs from (defaults to os.environ).
        config_path: Explicit YAML config file; must exist when given.
        cwd: Base for relative paths (defaults to the current directory).

    Raises:
        ConfigurationError: If the config file is unreadable or the merged
            values fail validation, e.g. a Custom ruleset without a path.
    """
    env_map = dict(env) if env is not None else dict(os.environ)
    base_dir = (cwd or Path.cwd()).resolve()
    cli_values = _normalize(overrides or {})
    task_inputs = _normalize(read_task_inputs(env_map))

    project_dir = cli_values.get("project_directory") or task_inputs.get("project_directory")
    file_values = _normalize(_load_file_config(config_path, project_dir, base_dir))

    merged = deep_merge(FALLBACK_DEFAULTS, file_values)
    merged = deep_merge(merged, task_inputs)
    merged = deep_merge(merged, cli_values)

    errors = validate_config(merged)
    if errors:
        if merged.get("ruleset") == CUSTOM_RULESET and not merged.get("rulesetpath"):
            message = "A custom ruleset was selected but no rulesetpath was provided"
        else:
            message = "Invalid pmd-summary configuration: " + "; ".join(errors)
        raise ConfigurationError(message, errors)

    staging = merged.get("staging_dir")
    home = merged.get("home_dir")
    project = merged.get("project_directory")
    return PipelineConfig(
        staging_dir=_resolve_path(staging, base_dir) if staging else _resolve_staging_dir(env_map, base_dir),
        home_dir=_resolve_path(home, base_dir) if home else Path.home(),
        ruleset=merged["ruleset"],
        format=merged["format"],
        version=merged["version"],
        project_directory=_resolve_path(project, base_dir) if project else None,
        directory=merged.get("directory"),
        rulesetpath=merged.get("rulesetpath"),
        output_path=merged.get("output_path"),
        timeout=merged.get("timeout"),
    )
