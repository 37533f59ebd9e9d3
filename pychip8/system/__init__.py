"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import (
    DEFAULT_INSTRUCTIONS_PER_FRAME,
    DEFAULT_TIMER_HZ,
    MachineConfig,
    create_machine,
)

__all__ = [
    "MachineConfig",
    "create_machine",
    "DEFAULT_INSTRUCTIONS_PER_FRAME",
    "DEFAULT_TIMER_HZ",
]
