"""Flat 4 KiB memory for the CHIP-8 machine.

The low 512 bytes are reserved for the interpreter; the glyph tables are
seeded there on reset. Programs are loaded from ``PROGRAM_START`` upwards.
Every access is bounds-checked against the 12-bit address space; nothing
wraps silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pychip8.video.font import LARGE_FONT, LARGE_FONT_ADDRESS, SMALL_FONT, SMALL_FONT_ADDRESS

MEMORY_SIZE = 0x1000
MEMORY_END = MEMORY_SIZE - 1
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_END - PROGRAM_START + 1


class MemoryFault(Exception):
    """Base class for memory access and load failures."""


class MemoryBoundsError(MemoryFault):
    """Raised when an access falls outside 0x000-0xFFF."""

    def __init__(self, address: int, length: int = 1) -> None:
        self.address = address
        self.length = length
        end = address + max(length, 1) - 1
        super().__init__(f"access {address:#05x}-{end:#05x} outside memory 0x000-{MEMORY_END:#05x}")


class RomTooLargeError(MemoryFault):
    """Raised when a program does not fit in the program region."""

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"program of {size} bytes exceeds the {MAX_PROGRAM_SIZE} byte program region")


@dataclass
class Memory:
    """Byte-addressable store covering the whole CHIP-8 address space."""

    size: int = MEMORY_SIZE
    _data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError("memory size must be positive")
        self._data = bytearray(self.size)

    def reset(self) -> None:
        """Zero all cells and re-seed the built-in glyph tables."""

        self._data[:] = bytes(self.size)
        self.write_block(SMALL_FONT_ADDRESS, SMALL_FONT)
        self.write_block(LARGE_FONT_ADDRESS, LARGE_FONT)

    def load_program(self, program: bytes) -> int:
        """Copy ``program`` into the program region and return its length."""

        if len(program) > MAX_PROGRAM_SIZE:
            raise RomTooLargeError(len(program))
        self.write_block(PROGRAM_START, program)
        return len(program)

    def check_range(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > self.size:
            raise MemoryBoundsError(address, length)

    def load8(self, address: int) -> int:
        self.check_range(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self.check_range(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word, as instructions are stored."""

        self.check_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, length: int) -> bytes:
        self.check_range(address, length)
        return bytes(self._data[address : address + length])

    def write_block(self, address: int, values: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in values)
        self.check_range(address, len(payload))
        for offset, value in enumerate(payload):
            self._data[address + offset] = value

    def snapshot(self) -> bytes:
        return bytes(self._data)
