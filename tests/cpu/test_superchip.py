"""Tests for the Super-CHIP extensions."""

from __future__ import annotations

from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU
from pychip8.devices import TimerPair
from pychip8.video import HIGH_RES, LOW_RES, Framebuffer
from pychip8.video.font import LARGE_FONT

NO_KEYS = (False,) * 16


def make_cpu(*words: int) -> Chip8CPU:
    memory = Memory()
    memory.reset()
    memory.load_program(b"".join(word.to_bytes(2, "big") for word in words))
    return Chip8CPU(memory, Framebuffer(*LOW_RES), TimerPair(clock=lambda: 0.0))


def run(cpu: Chip8CPU, steps: int) -> None:
    for _ in range(steps):
        cpu.step(NO_KEYS)


def test_high_and_low_switch_resolution_and_clear() -> None:
    cpu = make_cpu(0x00FF, 0x00FE)
    cpu.framebuffer.set_pixel(0, 0, 1)

    run(cpu, 1)
    assert (cpu.framebuffer.width, cpu.framebuffer.height) == HIGH_RES
    assert cpu.framebuffer.lit_count() == 0

    cpu.framebuffer.set_pixel(100, 50, 1)
    run(cpu, 1)
    assert (cpu.framebuffer.width, cpu.framebuffer.height) == LOW_RES
    assert cpu.framebuffer.lit_count() == 0


def test_scroll_down() -> None:
    cpu = make_cpu(0x00C3)
    cpu.framebuffer.set_pixel(5, 0, 1)

    run(cpu, 1)

    assert cpu.framebuffer.get_pixel(5, 3) == 1
    assert cpu.framebuffer.get_pixel(5, 0) == 0


def test_scroll_right_and_left_move_four_columns() -> None:
    cpu = make_cpu(0x00FB, 0x00FC, 0x00FC)
    cpu.framebuffer.set_pixel(0, 2, 1)

    run(cpu, 1)
    assert cpu.framebuffer.get_pixel(4, 2) == 1
    assert cpu.framebuffer.lit_count() == 1

    run(cpu, 1)
    assert cpu.framebuffer.get_pixel(0, 2) == 1

    run(cpu, 1)
    assert cpu.framebuffer.lit_count() == 0


def test_large_glyph_address() -> None:
    cpu = make_cpu(0xF030)
    cpu.registers.v[0] = 0x2

    run(cpu, 1)

    assert cpu.registers.i == 0x050 + 2 * 10
    assert cpu.memory.read_block(cpu.registers.i, 10) == LARGE_FONT[20:30]


def test_flag_register_round_trip() -> None:
    cpu = make_cpu(0xF275, 0xF285)
    cpu.registers.v[:3] = bytes([7, 8, 9])

    run(cpu, 1)
    assert bytes(cpu.registers.rpl[:3]) == bytes([7, 8, 9])

    cpu.registers.v[:3] = bytes(3)
    run(cpu, 1)
    assert bytes(cpu.registers.v[:3]) == bytes([7, 8, 9])


def test_wide_sprite_in_high_resolution() -> None:
    cpu = make_cpu(0x00FF, 0xA300, 0xD010)
    cpu.memory.write_block(0x300, [0xFF, 0xFF] + [0x00, 0x00] * 15)

    run(cpu, 3)

    assert cpu.framebuffer.lit_count() == 16
    assert all(cpu.framebuffer.get_pixel(x, 0) == 1 for x in range(16))
    assert cpu.registers.v[0xF] == 0


def test_zero_height_sprite_in_low_resolution_draws_nothing() -> None:
    cpu = make_cpu(0xA300, 0xD010)
    cpu.memory.write_block(0x300, [0xFF] * 32)

    run(cpu, 2)

    assert cpu.framebuffer.lit_count() == 0
    assert cpu.registers.v[0xF] == 0
