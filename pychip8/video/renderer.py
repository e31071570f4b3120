"""Convert framebuffer snapshots into RGB frames for presentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]

MONOCHROME: Tuple[RGBColor, RGBColor] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))
PHOSPHOR: Tuple[RGBColor, RGBColor] = ((0x10, 0x18, 0x10), (0x40, 0xFF, 0x60))


def validate_palette(palette: Sequence[RGBColor]) -> Tuple[RGBColor, RGBColor]:
    if len(palette) != 2:
        raise ValueError("palette needs exactly two colours (pixel off, pixel on)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    off, on = (tuple(int(channel) & 0xFF for channel in color) for color in palette)
    return off, on  # type: ignore[return-value]


@dataclass
class RenderResult:
    """A scaled RGB frame laid out row-major."""

    width: int
    height: int
    pixels: list[RGBColor]

    def get_pixel(self, x: int, y: int) -> RGBColor:
        return self.pixels[y * self.width + x]

    def to_bytes(self) -> bytes:
        return bytes(channel for color in self.pixels for channel in color)

    def to_surface(self):
        import pygame  # type: ignore

        return pygame.image.frombuffer(self.to_bytes(), (self.width, self.height), "RGB")


class Renderer:
    """Expand 0/1 pixel rows into RGB using a two-colour palette."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._off, self._on = validate_palette(palette)

    def render(self, rows: Sequence[Sequence[int]], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        source_height = len(rows)
        source_width = len(rows[0]) if source_height else 0
        width = source_width * scale
        height = source_height * scale

        pixels: list[RGBColor] = []
        for row in rows:
            line: list[RGBColor] = []
            for value in row:
                line.extend([self._on if value else self._off] * scale)
            for _ in range(scale):
                pixels.extend(line)
        return RenderResult(width, height, pixels)
