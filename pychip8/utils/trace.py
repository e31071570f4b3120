"""Ring buffer of recently executed CHIP-8 steps for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .debug import debug_log


@dataclass
class TraceEntry:
    pc: int
    opcode: int | None
    mnemonic: str
    i: int
    sp: int
    v: tuple[int, ...]
    dt: int
    st: int
    waiting: bool
    halted: bool
    note: str = ""


class TraceRecorder:
    """Fixed-capacity buffer that keeps the most recent step records."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[TraceEntry | None] = [None] * capacity
        self._index = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def record_step(
        self,
        registers,
        opcode: int | None,
        *,
        dt: int,
        st: int,
        waiting: bool,
        halted: bool,
        mnemonic: str = "",
        note: str = "",
    ) -> None:
        """Store a snapshot of ``registers`` taken before ``opcode`` executed."""

        entry = TraceEntry(
            pc=registers.pc & 0xFFFF,
            opcode=None if opcode is None else opcode & 0xFFFF,
            mnemonic=mnemonic,
            i=registers.i & 0x0FFF,
            sp=registers.sp & 0xFF,
            v=tuple(value & 0xFF for value in registers.v),
            dt=dt & 0xFF,
            st=st & 0xFF,
            waiting=waiting,
            halted=halted,
            note=note,
        )
        self._append(entry)

    def entries(self, limit: int | None = None) -> Iterable[TraceEntry]:
        count = self._size if limit is None else min(self._size, max(limit, 0))
        for offset in range(count):
            index = (self._index - count + offset) % self._capacity
            entry = self._entries[index]
            if entry is not None:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        if self._size == 0:
            return None
        return self._entries[(self._index - 1) % self._capacity]

    def clear(self) -> None:
        self._entries = [None] * self._capacity
        self._index = 0
        self._size = 0

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        lines: list[str] = []
        for entry in self.entries(limit):
            opcode = "----" if entry.opcode is None else f"{entry.opcode:04X}"
            flags: list[str] = []
            if entry.waiting:
                flags.append("KEY")
            if entry.halted:
                flags.append("HALT")
            if entry.note:
                flags.append(entry.note)
            registers = " ".join(f"{value:02X}" for value in entry.v)
            lines.append(
                f"pc={entry.pc:03X} opcode={opcode} {entry.mnemonic or '?':<16} "
                f"I={entry.i:03X} SP={entry.sp:X} DT={entry.dt:02X} ST={entry.st:02X} "
                f"V=[{registers}] flags={','.join(flags) if flags else '-'}"
            )
        return lines

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)

    def _append(self, entry: TraceEntry) -> None:
        self._entries[self._index] = entry
        self._index = (self._index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
