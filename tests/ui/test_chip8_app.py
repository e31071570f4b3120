"""Tests for the front end pieces that do not need a pygame window."""

from __future__ import annotations

from pathlib import Path

import pytest

from pychip8.ui.app import AppConfig, Chip8App


def write_rom(tmp_path: Path, data: bytes, name: str = "test.ch8") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


def make_app(tmp_path: Path, data: bytes, **options) -> Chip8App:
    path = write_rom(tmp_path, data)
    app = Chip8App(AppConfig(rom_path=path, seed=1, **options))
    app._machine = app._create_machine(path)
    app._running = True
    return app


def test_invalid_options_are_rejected() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(scale=0))
    with pytest.raises(ValueError):
        Chip8App(AppConfig(cycles_per_frame=0))


def test_create_machine_loads_rom(tmp_path: Path) -> None:
    app = make_app(tmp_path, bytes([0x60, 0x05, 0x70, 0x03]))

    assert app.machine is not None
    assert app.machine.memory.load16(0x200) == 0x6005


def test_missing_rom_becomes_runtime_error(tmp_path: Path) -> None:
    app = Chip8App(AppConfig(rom_path=tmp_path / "missing.ch8"))

    with pytest.raises(RuntimeError):
        app._create_machine(tmp_path / "missing.ch8")


def test_oversize_rom_becomes_runtime_error(tmp_path: Path) -> None:
    path = write_rom(tmp_path, bytes(0xE01))
    app = Chip8App(AppConfig(rom_path=path))

    with pytest.raises(RuntimeError):
        app._create_machine(path)


def test_step_frame_runs_configured_cycles(tmp_path: Path) -> None:
    app = make_app(tmp_path, bytes([0x70, 0x01, 0x12, 0x00]), cycles_per_frame=6)

    app._step_frame(app.machine)

    assert app.machine.dump().v[0] == 3


def test_step_frame_pauses_on_halt(tmp_path: Path, capsys) -> None:
    app = make_app(tmp_path, bytes([0x51, 0x21]))

    app._step_frame(app.machine)

    assert app._paused
    assert "Machine halted" in capsys.readouterr().out


def test_reload_restarts_program(tmp_path: Path) -> None:
    app = make_app(tmp_path, bytes([0x70, 0x01, 0x12, 0x00]))
    app._step_frame(app.machine)

    app._reload(app.machine)

    assert app.machine.dump().v[0] == 0
    assert app.machine.dump().pc == 0x200


def test_key_events_reach_keypad(tmp_path: Path) -> None:
    app = make_app(tmp_path, bytes([0x00, 0xE0]))

    app._handle_key_event("w", pressed=True)
    assert app.machine.keypad.is_pressed(0x5)

    app._handle_key_event("w", pressed=False)
    assert not app.machine.keypad.is_pressed(0x5)


def test_render_frame_scales_to_window(tmp_path: Path) -> None:
    app = make_app(tmp_path, bytes([0x00, 0xFF]), scale=4)

    low = app._render_frame(app.machine, (256, 128))
    app.machine.step()
    high = app._render_frame(app.machine, (256, 128))

    assert (low.width, low.height) == (256, 128)
    assert (high.width, high.height) == (256, 128)


def test_debug_commands(tmp_path: Path, capsys) -> None:
    app = make_app(tmp_path, bytes([0x60, 0x2A, 0x00, 0xE0]))

    assert app.handle_debug_command(app.machine, "s") is True
    assert "LD V0, 0x2a" in capsys.readouterr().out

    assert app.handle_debug_command(app.machine, "r") is True
    assert "V0=2A" in capsys.readouterr().out

    assert app.handle_debug_command(app.machine, "m 200") is True
    assert capsys.readouterr().out.startswith("200: 60 2A 00 E0")

    assert app.handle_debug_command(app.machine, "d 200") is True
    assert "202: 00E0  CLS" in capsys.readouterr().out

    assert app.handle_debug_command(app.machine, "t") is True
    assert "Tracing disabled" in capsys.readouterr().out

    assert app.handle_debug_command(app.machine, "bogus") is True
    assert "Unknown command" in capsys.readouterr().out

    assert app.handle_debug_command(app.machine, "") is False
    assert app._running

    assert app.handle_debug_command(app.machine, "q") is False
    assert not app._running
