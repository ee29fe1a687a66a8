"""
Visual effect sprites: burst, star, ring, cloud, sparks.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

import pygame

from settings import VFX_SIZE
from engine.colors import parse_color
from engine.drawer import PixelDrawer
from engine.error_handler import logger

VFX_STYLES = ("burst", "star", "ring", "cloud", "sparks")
DEFAULT_STYLE = "burst"
DEFAULT_COLOR = 0xFFFFFF
STROKE = 2


class VFXGenerator:
    def __init__(self, size: int = VFX_SIZE) -> None:
        self.size = size

    def generate(self, vfx_data: Mapping[str, Any], vfx_id: Optional[str] = None) -> pygame.Surface:
        size = self.size
        drawer = PixelDrawer.create(size, size)
        cx = cy = size / 2
        radius = size * 0.4
        color = parse_color(vfx_data.get("color"), DEFAULT_COLOR)
        style = vfx_data.get("style") or DEFAULT_STYLE
        if style not in VFX_STYLES:
            logger.debug(f"Unknown vfx style {style!r} for {vfx_id}; using {DEFAULT_STYLE}")
            style = DEFAULT_STYLE

        if style == "burst":
            drawer.draw_circle(cx, cy, radius, color)
            self._rays(drawer, cx, cy, radius * 1.2, color)
        elif style == "star":
            self._rays(drawer, cx, cy, radius, color)
            drawer.draw_circle(cx, cy, radius * 0.3, color)
        elif style == "ring":
            for r in (radius, radius * 0.7):
                for i in range(STROKE):
                    drawer.draw_circle_outline(cx, cy, r - i, color)
        elif style == "cloud":
            drawer.draw_circle(cx, cy, radius, color)
            drawer.draw_circle(cx - radius * 0.5, cy, radius * 0.7, color)
            drawer.draw_circle(cx + radius * 0.5, cy, radius * 0.7, color)
        else:
            for i in range(12):
                angle = i * math.pi * 2 / 12
                drawer.draw_circle(cx + math.cos(angle) * radius * 0.7, cy + math.sin(angle) * radius * 0.7, 2, color)
        return drawer.surface

    @staticmethod
    def _rays(drawer: PixelDrawer, cx: float, cy: float, length: float, color: int) -> None:
        """Eight evenly spaced spokes from the centre."""
        for i in range(8):
            angle = i * math.pi * 2 / 8
            drawer.draw_line(cx, cy, cx + math.cos(angle) * length, cy + math.sin(angle) * length, color,
                             thickness=STROKE)
