"""Delay and sound timers gated by wall-clock time.

Each timer decrements at most once per gate period no matter how often the
machine steps, which decouples timer speed from instruction throughput.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from pychip8.utils import debug_enabled, debug_log

DEFAULT_TIMER_HZ = 60.0

Clock = Callable[[], float]


@dataclass
class CountdownTimer:
    """An 8-bit counter with its own firing gate."""

    name: str
    hz: float = DEFAULT_TIMER_HZ
    clock: Clock = time.monotonic
    value: int = 0
    _last_fire: float = field(init=False, repr=False)
    _fired: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        if self.hz <= 0:
            raise ValueError("timer frequency must be positive")
        self.value &= 0xFF
        self._last_fire = self.clock()

    @property
    def period(self) -> float:
        return 1.0 / self.hz

    @property
    def fired(self) -> bool:
        """Whether the gate fired on the most recent :meth:`tick`."""

        return self._fired

    def set(self, value: int) -> None:
        self.value = value & 0xFF

    def reset(self) -> None:
        self.value = 0
        self._fired = False
        self._last_fire = self.clock()

    def tick(self) -> bool:
        """Check the gate and decrement once if it fired; return the gate state."""

        now = self.clock()
        self._fired = now - self._last_fire >= self.period
        if not self._fired:
            return False
        self._last_fire = now
        if self.value > 0:
            self.value -= 1
            if debug_enabled("timer"):
                debug_log("timer", "%s=%d", self.name, self.value)
        return True


class TimerPair:
    """The delay timer (DT) and sound timer (ST)."""

    def __init__(self, *, hz: float = DEFAULT_TIMER_HZ, clock: Clock = time.monotonic) -> None:
        self.delay = CountdownTimer("delay", hz, clock)
        self.sound = CountdownTimer("sound", hz, clock)

    @property
    def sound_active(self) -> bool:
        return self.sound.value > 0

    def tick(self) -> None:
        self.delay.tick()
        self.sound.tick()

    def reset(self) -> None:
        self.delay.reset()
        self.sound.reset()
