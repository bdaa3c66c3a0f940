"""Shared result types for the services layer."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ServiceResult:
    """Base result returned by service functions."""

    success: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
