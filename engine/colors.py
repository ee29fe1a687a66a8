"""Packed 0xRRGGBB colour helpers."""

from __future__ import annotations

import math
from typing import Tuple, Union

ColorLike = Union[int, str, Tuple[int, int, int]]


def to_rgb(color: int) -> Tuple[int, int, int]:
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def from_rgb(r: int, g: int, b: int) -> int:
    return (int(r) << 16) | (int(g) << 8) | int(b)


def parse_color(value: ColorLike, default: int = 0xFFFFFF) -> int:
    """Accept 0xRRGGBB ints, '#rrggbb' strings or RGB tuples."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value & 0xFFFFFF
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if text.lower().startswith("0x"):
            text = text[2:]
        try:
            return int(text, 16) & 0xFFFFFF
        except ValueError:
            return default
    if isinstance(value, (tuple, list)) and len(value) >= 3:
        return from_rgb(*(max(0, min(255, int(c))) for c in value[:3]))
    return default


def lighten(color: int, factor: float) -> int:
    """Move each channel ``factor`` of the way toward white."""
    r, g, b = to_rgb(color)
    return from_rgb(
        min(255, math.floor(r + (255 - r) * factor)),
        min(255, math.floor(g + (255 - g) * factor)),
        min(255, math.floor(b + (255 - b) * factor)),
    )


def darken(color: int, factor: float) -> int:
    """Scale each channel toward black by ``factor``."""
    r, g, b = to_rgb(color)
    return from_rgb(
        max(0, math.floor(r * (1 - factor))),
        max(0, math.floor(g * (1 - factor))),
        max(0, math.floor(b * (1 - factor))),
    )


def lerp_color(a: int, b: int, t: float) -> int:
    ar, ag, ab = to_rgb(a)
    br, bg, bb = to_rgb(b)
    return from_rgb(
        round(ar + (br - ar) * t),
        round(ag + (bg - ag) * t),
        round(ab + (bb - ab) * t),
    )


def luminance(color: int) -> float:
    """Relative luminance (Rec. 709 weights) on the 0-255 scale."""
    r, g, b = to_rgb(color)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b
