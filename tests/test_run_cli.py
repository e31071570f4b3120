"""Tests for the ``run.py`` command line."""

from __future__ import annotations

from pathlib import Path

import pytest

import run


def test_disassemble_prints_listing(tmp_path: Path, capsys) -> None:
    rom = tmp_path / "demo.ch8"
    rom.write_bytes(bytes([0x00, 0xE0, 0x12, 0x00]))

    assert run.main([str(rom), "--disassemble"]) == 0

    assert capsys.readouterr().out.splitlines() == ["200: 00E0  CLS", "202: 1200  JP 0x200"]


def test_missing_rom_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main([str(tmp_path / "missing.ch8")])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("option", ["--scale=0", "--cycles-per-frame=0", "--timer-hz=0"])
def test_non_positive_options_are_rejected(tmp_path: Path, option: str) -> None:
    rom = tmp_path / "demo.ch8"
    rom.write_bytes(bytes([0x00, 0xE0]))

    with pytest.raises(SystemExit):
        run.main([str(rom), option])
