"""Schema loading and validation for pmd-summary config."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

SCHEMA_PATH = Path(__file__).resolve().parent / "pmd-summary.schema.json"


def get_schema() -> dict[str, Any]:
    data = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Schema at {SCHEMA_PATH} is not a JSON object")
    return data


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate a merged config mapping.

    Returns:
        Sorted list of validation error strings, empty when valid.
    """
    validator = Draft7Validator(get_schema())
    errors: list[str] = []
    for err in validator.iter_errors(config):
        path = ".".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{path}: {err.message}")
    return sorted(errors)
