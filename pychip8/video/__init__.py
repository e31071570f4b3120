"""Framebuffer, glyph tables and rendering for the CHIP-8 emulator."""

from __future__ import annotations

from .font import LARGE_FONT, SMALL_FONT, large_glyph_address, small_glyph_address
from .framebuffer import HIGH_RES, LOW_RES, Framebuffer
from .renderer import MONOCHROME, PHOSPHOR, RenderResult, Renderer, validate_palette

__all__ = [
    "Framebuffer",
    "LOW_RES",
    "HIGH_RES",
    "SMALL_FONT",
    "LARGE_FONT",
    "small_glyph_address",
    "large_glyph_address",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PHOSPHOR",
    "validate_palette",
]
