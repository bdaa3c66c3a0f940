"""Shared utility functions for pmdsummary."""

from __future__ import annotations

from pmdsummary.utils.files import write_text

__all__ = [
    "write_text",
]
