"""Random byte sources consumed by the RND instruction."""

from __future__ import annotations

import random
from typing import Iterable, Protocol


class RandomSource(Protocol):
    def next_byte(self) -> int:  # pragma: no cover - interface
        ...


class SystemRandomSource:
    """Uniform bytes from :class:`random.Random`, optionally seeded."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def next_byte(self) -> int:
        return self._random.randrange(0x100)


class FixedRandomSource:
    """Replays a fixed byte sequence, cycling when exhausted."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = [value & 0xFF for value in values]
        if not self._values:
            raise ValueError("at least one value is required")
        self._index = 0

    def next_byte(self) -> int:
        value = self._values[self._index]
        self._index = (self._index + 1) % len(self._values)
        return value
