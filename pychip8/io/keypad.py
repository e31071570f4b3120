"""Sixteen-key hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Set

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

# COSMAC VIP layout mapped onto the left block of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
DEFAULT_KEY_MAP: Mapping[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


@dataclass
class Keypad:
    """Host-owned key states; the machine only reads :meth:`snapshot`."""

    key_map: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
    _state: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _held: Dict[int, Set[str]] = field(default_factory=dict)

    def press_key(self, key: int, source: str = "") -> None:
        """Hold ``key`` on behalf of ``source``; repeats from one source are idempotent."""

        key = self._validate(key)
        self._held.setdefault(key, set()).add(source)
        self._set(key, True)

    def release_key(self, key: int, source: str = "") -> None:
        key = self._validate(key)
        holders = self._held.get(key)
        if holders is not None:
            holders.discard(source)
            if holders:
                return
            del self._held[key]
        self._set(key, False)

    def press(self, key_name: str) -> bool:
        """Press the keypad key bound to host key ``key_name``."""

        key = self.lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press_key(key, key_name.lower())
        return True

    def release(self, key_name: str) -> bool:
        key = self.lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release_key(key, key_name.lower())
        return True

    def lookup(self, key_name: str) -> int | None:
        return self.key_map.get(key_name.lower())

    def is_pressed(self, key: int) -> bool:
        return self._state[key & 0x0F]

    def reset(self) -> None:
        self._state = [False] * KEY_COUNT
        self._held.clear()

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._state)

    def _set(self, key: int, pressed: bool) -> None:
        if self._state[key] == pressed:
            return
        self._state[key] = pressed
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", key, pressed)

    @staticmethod
    def _validate(key: int) -> int:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"keypad key out of range: {key}")
        return key


def first_pressed(snapshot: tuple[bool, ...]) -> int | None:
    """Return the lowest pressed key index in ``snapshot``."""

    for key, pressed in enumerate(snapshot):
        if pressed:
            return key
    return None
