"""Memory bus for the CHIP-8 emulator."""

from .memory import (
    MAX_PROGRAM_SIZE,
    MEMORY_END,
    MEMORY_SIZE,
    PROGRAM_START,
    Memory,
    MemoryBoundsError,
    MemoryFault,
    RomTooLargeError,
)

__all__ = [
    "Memory",
    "MemoryFault",
    "MemoryBoundsError",
    "RomTooLargeError",
    "MEMORY_SIZE",
    "MEMORY_END",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
]
