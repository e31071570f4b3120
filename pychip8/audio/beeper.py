"""Square-wave buzzer that follows the sound timer's "tone active" signal."""

from __future__ import annotations

from array import array
from typing import Optional

from pychip8.utils import debug_enabled, debug_log


class SquareWaveBeeper:
    """Loop a fixed-pitch square wave on a pygame mixer channel while active."""

    def __init__(
        self,
        *,
        frequency: float = 440.0,
        sample_rate: int = 44_100,
        volume: float = 0.25,
    ) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._volume = max(0.0, min(1.0, volume))
        self._sound = pygame.mixer.Sound(buffer=build_square_wave(frequency, sample_rate))
        self._channel: Optional["pygame.mixer.Channel"] = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        """Start or stop the tone; repeated calls with the same state are free."""

        if active == self._active:
            return
        self._active = active
        if debug_enabled("audio"):
            debug_log("audio", "tone=%s", "on" if active else "off")
        if active:
            channel = self._channel or self._pygame.mixer.find_channel(True)
            if channel is None:
                return
            self._channel = channel
            channel.play(self._sound, loops=-1)
            channel.set_volume(self._volume)
        elif self._channel is not None:
            self._channel.stop()

    def shutdown(self) -> None:
        self.set_active(False)
        self._channel = None


def build_square_wave(frequency: float, sample_rate: int, amplitude: int = 8_000) -> bytes:
    """Return one period of signed 16-bit mono samples."""

    period = max(2, int(round(sample_rate / frequency)))
    half = period // 2
    samples = array("h", [amplitude] * half + [-amplitude] * (period - half))
    return samples.tobytes()


__all__ = ["SquareWaveBeeper", "build_square_wave"]
