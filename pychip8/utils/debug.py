"""Category-gated debug logging for the CHIP-8 emulator.

Categories are enabled through the ``CHIP8_DEBUG`` environment variable, e.g.
``CHIP8_DEBUG=cpu,timer`` or ``CHIP8_DEBUG=all``.
"""

from __future__ import annotations

import os
from typing import Iterable

ENV_VARIABLE = "CHIP8_DEBUG"

_CATEGORIES: set[str] | None = None


def _load_categories() -> set[str]:
    global _CATEGORIES
    if _CATEGORIES is not None:
        return _CATEGORIES
    value = os.environ.get(ENV_VARIABLE, "")
    parts: Iterable[str] = (part.strip().lower() for part in value.split(","))
    _CATEGORIES = {part for part in parts if part}
    return _CATEGORIES


def reload_categories() -> None:
    """Forget the cached category set so the environment is read again."""

    global _CATEGORIES
    _CATEGORIES = None


def debug_enabled(category: str | None = None) -> bool:
    categories = _load_categories()
    if not categories:
        return False
    if "all" in categories or category is None:
        return True
    return category.lower() in categories


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
