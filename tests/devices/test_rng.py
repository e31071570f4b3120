"""Tests for the RND byte sources."""

from __future__ import annotations

import pytest

from pychip8.devices import FixedRandomSource, SystemRandomSource


def test_fixed_source_cycles_through_values() -> None:
    source = FixedRandomSource([1, 2, 0x1FF])

    assert [source.next_byte() for _ in range(4)] == [1, 2, 0xFF, 1]


def test_fixed_source_needs_values() -> None:
    with pytest.raises(ValueError):
        FixedRandomSource([])


def test_seeded_system_source_is_reproducible() -> None:
    first = SystemRandomSource(1234)
    second = SystemRandomSource(1234)

    values = [first.next_byte() for _ in range(32)]

    assert values == [second.next_byte() for _ in range(32)]
    assert all(0 <= value <= 0xFF for value in values)
