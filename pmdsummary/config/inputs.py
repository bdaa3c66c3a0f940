"""Task input resolution from the host environment.

Azure Pipelines and GitHub Actions both expose step inputs as
``INPUT_<NAME>`` environment variables, upper-cased with spaces replaced
by underscores.
"""

from __future__ import annotations

from typing import Mapping

# Host-facing input name -> config key
TASK_INPUTS: dict[str, str] = {
    "project_directory": "project_directory",
    "directory": "directory",
    "ruleset": "ruleset",
    "rulesetpath": "rulesetpath",
    "format": "format",
    "outputPath": "output_path",
    "version": "version",
}


def _env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str, env: Mapping[str, str]) -> str | None:
    value = env.get(_env_name(name))
    if value is None:
        return None
    value = value.strip()
    return value or None


def read_task_inputs(env: Mapping[str, str]) -> dict[str, str]:
    """Collect every task input that is set, keyed by config key."""
    inputs: dict[str, str] = {}
    for name, key in TASK_INPUTS.items():
        value = get_input(name, env)
        if value is not None:
            inputs[key] = value
    return inputs
