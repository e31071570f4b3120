"""Baseline tests ensuring the package skeleton loads correctly."""

import pychip8


def test_package_exports() -> None:
    for name in ("audio", "bus", "cpu", "devices", "io", "loader", "system", "ui", "utils", "video"):
        assert hasattr(pychip8, name), f"missing submodule: {name}"


def test_bus_exports() -> None:
    from pychip8 import bus

    for name in ("Memory", "MemoryFault", "MemoryBoundsError", "RomTooLargeError", "PROGRAM_START"):
        assert hasattr(bus, name), f"bus missing symbol: {name}"


def test_system_exports() -> None:
    from pychip8 import system

    for name in ("Machine", "MachineConfig", "StepResult", "LoadResult", "create_machine"):
        assert hasattr(system, name), f"system missing symbol: {name}"
