"""Shared types for CLI parser builders."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Callable

from pmdsummary.types import CommandResult

CommandHandler = Callable[[argparse.Namespace], int | CommandResult]


@dataclass(frozen=True)
class CommandHandlers:
    cmd_analyze: CommandHandler
    cmd_render: CommandHandler
