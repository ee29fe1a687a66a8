"""
Socketable gem icons.

Shape comes from the gem's type, colours from its element. Unknown
elements get the slate palette.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import pygame

from settings import GEM_CANVAS_SIZE, GEM_SIZE
from engine.drawer import PixelDrawer


@dataclass(frozen=True)
class GemColors:
    primary: int
    secondary: int
    glow: int


GEM_ELEMENTS: Dict[str, GemColors] = {
    "fire": GemColors(0xFF3D00, 0xB71C1C, 0xFFFF00),
    "cold": GemColors(0x00E5FF, 0x1A237E, 0xFFFFFF),
    "lightning": GemColors(0xAA00FF, 0x4A148C, 0xFFFF80),
    "physical": GemColors(0x9E9E9E, 0x424242, 0xE0E0E0),
    "stun": GemColors(0xFFD600, 0xF57F17, 0xFFFFFF),
    "slow": GemColors(0x1B5E20, 0x004D40, 0x76FF03),
    "bleed": GemColors(0xD50000, 0x311B92, 0xFF5252),
    "area": GemColors(0x0091EA, 0x01579B, 0xB3E5FC),
    "cooldown": GemColors(0x00C853, 0x1B5E20, 0xB9F6CA),
    "duration": GemColors(0xFFAB00, 0xFF6D00, 0xFFE57F),
}
SLATE = GemColors(0x607D8B, 0x263238, 0xCFD8DC)

GEM_SHAPES = {"damage": "octagon", "utility": "circle"}


def get_gem_colors(gem_data: Mapping[str, Any]) -> GemColors:
    element = gem_data.get("element") or gem_data.get("effect")
    return GEM_ELEMENTS.get(element, SLATE)


def get_gem_shape(gem_data: Mapping[str, Any]) -> str:
    return GEM_SHAPES.get(gem_data.get("type"), "diamond")


class GemGenerator:
    def __init__(self, canvas_size: int = GEM_CANVAS_SIZE, gem_size: int = GEM_SIZE) -> None:
        self.width = self.height = canvas_size
        self.size = gem_size

    def generate(self, gem_data: Mapping[str, Any], gem_id: Optional[str] = None) -> pygame.Surface:
        drawer = PixelDrawer.create(self.width, self.height)
        self.draw_shape(drawer, self.width // 2, self.height // 2, self.size,
                        get_gem_shape(gem_data), get_gem_colors(gem_data))
        drawer.draw_outline(0x000000, 1)
        return drawer.surface

    def draw_shape(self, drawer: PixelDrawer, x: int, y: int, size: int, shape: str, colors: GemColors) -> None:
        half = math.floor(size / 2)

        if shape == "octagon":
            drawer.draw_rect(x - half, y - half, size, size, colors.primary)
            # Clip the corners
            for cx, cy in ((x - half, y - half), (x + half - 1, y - half),
                           (x - half, y + half - 1), (x + half - 1, y + half - 1)):
                drawer.set_pixel(cx, cy, 0x000000, alpha=0)
            drawer.draw_rect(x - half + 2, y - half + 2, size - 4, size - 4, colors.secondary)
            drawer.set_pixel(x - 1, y - 1, colors.glow)
        elif shape == "circle":
            drawer.draw_circle(x, y, half, colors.primary)
            drawer.draw_circle(x, y, half - 2, colors.secondary)
            drawer.set_pixel(x - 1, y - 1, colors.glow)
        else:
            for i in range(half + 1):
                drawer.draw_line(x - i, y - half + i, x + i, y - half + i, colors.primary)
                drawer.draw_line(x - i, y + half - i, x + i, y + half - i, colors.primary)
            inner = half - 3
            for i in range(inner + 1):
                drawer.draw_line(x - i, y - inner + i, x + i, y - inner + i, colors.secondary)
                drawer.draw_line(x - i, y + inner - i, x + i, y + inner - i, colors.secondary)
            drawer.set_pixel(x, y - 2, colors.glow)
