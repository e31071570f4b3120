"""Tests for the flat CHIP-8 memory."""

from __future__ import annotations

import pytest

from pychip8.bus import (
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    Memory,
    MemoryBoundsError,
    MemoryFault,
    RomTooLargeError,
)
from pychip8.video.font import LARGE_FONT, LARGE_FONT_ADDRESS, SMALL_FONT, SMALL_FONT_ADDRESS


def make_memory() -> Memory:
    memory = Memory()
    memory.reset()
    return memory


def test_reset_seeds_both_glyph_tables() -> None:
    memory = make_memory()

    assert memory.read_block(SMALL_FONT_ADDRESS, len(SMALL_FONT)) == SMALL_FONT
    assert memory.read_block(LARGE_FONT_ADDRESS, len(LARGE_FONT)) == LARGE_FONT
    assert memory.read_block(PROGRAM_START, 16) == bytes(16)


def test_reset_clears_program_region() -> None:
    memory = make_memory()
    memory.store8(0x300, 0xAB)

    memory.reset()

    assert memory.load8(0x300) == 0


def test_load_program_copies_to_program_start() -> None:
    memory = make_memory()

    size = memory.load_program(bytes([0x60, 0x05, 0x70, 0x03]))

    assert size == 4
    assert memory.load16(PROGRAM_START) == 0x6005
    assert memory.load16(PROGRAM_START + 2) == 0x7003


def test_program_filling_whole_region_is_accepted() -> None:
    memory = make_memory()

    memory.load_program(bytes([0x12]) * MAX_PROGRAM_SIZE)

    assert memory.load8(MEMORY_SIZE - 1) == 0x12


def test_oversize_program_is_rejected_not_truncated() -> None:
    memory = make_memory()

    with pytest.raises(RomTooLargeError) as excinfo:
        memory.load_program(bytes(MAX_PROGRAM_SIZE + 1))

    assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
    assert isinstance(excinfo.value, MemoryFault)
    assert memory.load8(PROGRAM_START) == 0


def test_store8_masks_to_a_byte() -> None:
    memory = make_memory()

    memory.store8(0x400, 0x1FF)

    assert memory.load8(0x400) == 0xFF


@pytest.mark.parametrize("address", [-1, MEMORY_SIZE, MEMORY_SIZE + 5])
def test_single_byte_access_outside_memory_raises(address: int) -> None:
    memory = make_memory()

    with pytest.raises(MemoryBoundsError):
        memory.load8(address)
    with pytest.raises(MemoryBoundsError):
        memory.store8(address, 0)


def test_word_read_straddling_end_raises() -> None:
    memory = make_memory()

    assert memory.load16(0xFFE) == 0
    with pytest.raises(MemoryBoundsError) as excinfo:
        memory.load16(0xFFF)

    assert excinfo.value.address == 0xFFF
    assert excinfo.value.length == 2


def test_block_write_past_end_leaves_memory_untouched() -> None:
    memory = make_memory()

    with pytest.raises(MemoryBoundsError):
        memory.write_block(0xFFE, [1, 2, 3])

    assert memory.read_block(0xFFE, 2) == bytes(2)


def test_block_read_past_end_raises() -> None:
    memory = make_memory()

    assert memory.read_block(0xFFD, 3) == bytes(3)
    with pytest.raises(MemoryBoundsError):
        memory.read_block(0xFFD, 4)


def test_snapshot_is_a_copy() -> None:
    memory = make_memory()
    snapshot = memory.snapshot()

    memory.store8(0x500, 0x42)

    assert len(snapshot) == MEMORY_SIZE
    assert snapshot[0x500] == 0
