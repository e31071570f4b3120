"""Input helpers for the CHIP-8 emulator."""

from .keypad import DEFAULT_KEY_MAP, KEY_COUNT, Keypad, first_pressed

__all__ = [
    "Keypad",
    "DEFAULT_KEY_MAP",
    "KEY_COUNT",
    "first_pressed",
]
