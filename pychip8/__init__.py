"""CHIP-8 virtual machine with a pygame front end.

The core (``bus``, ``cpu``, ``devices``, ``video``, ``system``) has no
third-party dependencies; ``ui`` and ``audio`` import pygame lazily.
"""

from __future__ import annotations

from . import audio, bus, cpu, devices, io, loader, system, ui, utils, video

__all__: list[str] = [
    "audio",
    "bus",
    "cpu",
    "devices",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
]
