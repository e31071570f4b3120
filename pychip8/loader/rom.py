"""Raw CHIP-8 ROM images: big-endian opcodes, no header, loaded at 0x200."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Sequence

from pychip8.bus import MAX_PROGRAM_SIZE, PROGRAM_START, RomTooLargeError
from pychip8.cpu import disassemble


@dataclass(frozen=True)
class RomImage:
    """A program image together with the name it was loaded under."""

    data: bytes
    name: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    def disassembly(self, origin: int = PROGRAM_START) -> Sequence[str]:
        return [
            f"{address:03X}: {word:04X}  {text}"
            for address, word, text in disassemble(self.data, origin)
        ]


def load_rom(stream: BinaryIO, name: str = "") -> RomImage:
    """Read a ROM from ``stream``; oversize images are rejected, not truncated."""

    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomTooLargeError(len(data) + len(stream.read()))
    return RomImage(bytes(data), name)


def load_rom_from_path(path: Path) -> RomImage:
    with path.open("rb") as handle:
        return load_rom(handle, path.stem)
