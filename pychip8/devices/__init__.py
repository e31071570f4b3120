"""Timer and entropy devices attached to the CHIP-8 machine."""

from .rng import FixedRandomSource, RandomSource, SystemRandomSource
from .timers import DEFAULT_TIMER_HZ, CountdownTimer, TimerPair

__all__ = [
    "CountdownTimer",
    "TimerPair",
    "DEFAULT_TIMER_HZ",
    "RandomSource",
    "SystemRandomSource",
    "FixedRandomSource",
]
