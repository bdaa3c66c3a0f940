"""Configuration loading for the PMD analysis step."""

from __future__ import annotations

from pmdsummary.config.inputs import TASK_INPUTS, get_input, read_task_inputs
from pmdsummary.config.io import load_yaml_file
from pmdsummary.config.loader import (
    DEFAULT_CONFIG_NAME,
    FALLBACK_DEFAULTS,
    PipelineConfig,
    load_pipeline_config,
)
from pmdsummary.config.merge import deep_merge
from pmdsummary.config.schema import get_schema, validate_config

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "FALLBACK_DEFAULTS",
    "PipelineConfig",
    "TASK_INPUTS",
    "deep_merge",
    "get_input",
    "get_schema",
    "load_pipeline_config",
    "load_yaml_file",
    "read_task_inputs",
    "validate_config",
]
