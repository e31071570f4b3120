"""Tests for the square wave sample generator."""

from __future__ import annotations

from array import array

from pychip8.audio import build_square_wave


def test_square_wave_is_one_period_of_signed_samples() -> None:
    samples = array("h")
    samples.frombytes(build_square_wave(441.0, 44_100, amplitude=1000))

    assert len(samples) == 100
    assert list(samples[:50]) == [1000] * 50
    assert list(samples[50:]) == [-1000] * 50


def test_square_wave_has_at_least_two_samples() -> None:
    samples = array("h")
    samples.frombytes(build_square_wave(50_000.0, 8_000))

    assert list(samples) == [8000, -8000]
