"""Monochrome pixel grid with XOR sprite composition."""

from __future__ import annotations

from typing import Sequence

LOW_RES = (64, 32)
HIGH_RES = (128, 64)


class Framebuffer:
    """Grid of 0/1 pixels addressed as ``(x, y)``.

    Sprites are XORed onto the grid and every coordinate wraps modulo the
    current width and height, so a draw never reaches outside the buffer.
    """

    def __init__(self, width: int = LOW_RES[0], height: int = LOW_RES[1]) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def high_resolution(self) -> bool:
        return (self._width, self._height) == HIGH_RES

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))

    def resize(self, width: int, height: int) -> None:
        """Switch resolution; the grid is cleared."""

        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)

    def get_pixel(self, x: int, y: int) -> int:
        return self._pixels[(y % self._height) * self._width + (x % self._width)]

    def set_pixel(self, x: int, y: int, value: int) -> None:
        self._pixels[(y % self._height) * self._width + (x % self._width)] = 1 if value else 0

    def xor_pixel(self, x: int, y: int) -> bool:
        """Toggle one pixel and report whether it was lit beforehand."""

        index = (y % self._height) * self._width + (x % self._width)
        was_set = self._pixels[index] == 1
        self._pixels[index] ^= 1
        return was_set

    def draw_sprite(self, rows: Sequence[int], x: int, y: int, *, width: int = 8) -> bool:
        """XOR ``rows`` (MSB = leftmost pixel) at ``(x, y)``; return collision."""

        collision = False
        top_bit = 1 << (width - 1)
        for row_index, row in enumerate(rows):
            for column in range(width):
                if row & (top_bit >> column):
                    if self.xor_pixel(x + column, y + row_index):
                        collision = True
        return collision

    def scroll_down(self, rows: int) -> None:
        rows = min(max(rows, 0), self._height)
        if rows == 0:
            return
        shift = rows * self._width
        self._pixels[shift:] = self._pixels[: len(self._pixels) - shift]
        self._pixels[:shift] = bytes(shift)

    def scroll_right(self, columns: int) -> None:
        columns = min(max(columns, 0), self._width)
        for y in range(self._height):
            start = y * self._width
            row = self._pixels[start : start + self._width]
            self._pixels[start : start + self._width] = bytes(columns) + row[: self._width - columns]

    def scroll_left(self, columns: int) -> None:
        columns = min(max(columns, 0), self._width)
        for y in range(self._height):
            start = y * self._width
            row = self._pixels[start : start + self._width]
            self._pixels[start : start + self._width] = row[columns:] + bytes(columns)

    def lit_count(self) -> int:
        return sum(self._pixels)

    def snapshot(self) -> tuple[tuple[int, ...], ...]:
        """Return the grid as rows of 0/1 values for a renderer."""

        return tuple(
            tuple(self._pixels[y * self._width : (y + 1) * self._width])
            for y in range(self._height)
        )
