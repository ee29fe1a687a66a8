"""
Projectile sprites: orb, bolt/missile, shard, lightning, cloud.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import pygame

from settings import PROJECTILE_SIZE
from engine.colors import parse_color
from engine.drawer import PixelDrawer
from engine.error_handler import logger

PROJECTILE_STYLES = ("orb", "bolt", "missile", "shard", "lightning", "cloud")
DEFAULT_STYLE = "bolt"
DEFAULT_COLOR = 0xFFFFFF


class ProjectileGenerator:
    def __init__(self, size: int = PROJECTILE_SIZE) -> None:
        self.size = size

    def generate(self, proj_data: Mapping[str, Any], proj_id: Optional[str] = None) -> pygame.Surface:
        size = self.size
        drawer = PixelDrawer.create(size, size)
        cx = cy = size / 2
        radius = size * 0.3
        color = parse_color(proj_data.get("color"), DEFAULT_COLOR)
        style = proj_data.get("style") or DEFAULT_STYLE
        if style not in PROJECTILE_STYLES:
            logger.debug(f"Unknown projectile style {style!r} for {proj_id}; using {DEFAULT_STYLE}")
            style = DEFAULT_STYLE

        if style == "orb":
            drawer.draw_circle(cx, cy, radius, color)
            # Highlight
            drawer.draw_circle(cx - radius * 0.3, cy - radius * 0.3, radius * 0.5, 0xFFFFFF)
        elif style in ("bolt", "missile"):
            drawer.draw_circle(cx, cy, radius, color)
        elif style == "shard":
            drawer.draw_polygon([(cx, cy - radius), (cx + radius, cy), (cx, cy + radius), (cx - radius, cy)], color)
        elif style == "lightning":
            drawer.draw_line(cx, cy - radius, cx - 2, cy, color, thickness=2)
            drawer.draw_line(cx - 2, cy, cx + 2, cy + radius, color, thickness=2)
            drawer.draw_circle(cx, cy, 2, color)
        else:
            drawer.draw_circle(cx, cy, radius, color)
            drawer.draw_circle(cx - radius * 0.5, cy, radius * 0.6, color)
            drawer.draw_circle(cx + radius * 0.5, cy, radius * 0.6, color)
        return drawer.surface
