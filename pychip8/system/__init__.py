"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import (
    FATAL_ERRORS,
    LoadResult,
    Machine,
    MachineConfig,
    MachineSnapshot,
    MachineState,
    StepResult,
    create_machine,
)

__all__ = [
    "FATAL_ERRORS",
    "Machine",
    "MachineConfig",
    "MachineState",
    "MachineSnapshot",
    "StepResult",
    "LoadResult",
    "create_machine",
]
