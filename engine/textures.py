"""Procedural surface textures layered over already-drawn regions."""

from __future__ import annotations

import math
from typing import List

from settings import DEFAULT_SEED
from engine import colors
from engine.drawer import PixelDrawer
from engine.rng import SeededRNG

WEAVE_SIZE = 2
GRAIN_DENSITY = 0.15


class TextureGenerator:
    """Cloth weave, leather grain and metal streaks.

    Only pixels that are already opaque are touched, so a texture never
    grows a silhouette.
    """

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self.rng = SeededRNG(seed)

    def set_seed(self, seed: int) -> None:
        self.rng = SeededRNG(seed)

    def apply_cloth_texture(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int, base_color: int) -> None:
        darker = colors.darken(base_color, 0.15)
        lighter = colors.lighten(base_color, 0.1)
        period = WEAVE_SIZE * 2
        for py in range(y, y + height):
            for px in range(x, x + width):
                if not drawer.is_opaque(px, py):
                    continue
                rel_x, rel_y = px - x, py - y
                if rel_x % period < WEAVE_SIZE:
                    drawer.set_pixel(px, py, darker)
                elif rel_y % period < WEAVE_SIZE:
                    drawer.set_pixel(px, py, lighter)

    def apply_leather_texture(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int, base_color: int) -> None:
        darker = colors.darken(base_color, 0.2)
        lighter = colors.lighten(base_color, 0.15)
        noise = self.generate_noise_pattern(width, height, GRAIN_DENSITY)
        for py in range(y, y + height):
            for px in range(x, x + width):
                rel_x, rel_y = px - x, py - y
                if noise[rel_y * width + rel_x] and drawer.is_opaque(px, py):
                    drawer.set_pixel(px, py, darker if (rel_x + rel_y) % 2 == 0 else lighter)

    def apply_metal_texture(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int, base_color: int) -> None:
        highlight = colors.lighten(base_color, 0.5)
        streak = colors.lighten(base_color, 0.3)
        for px in range(x, x + width, 3):
            rel_x = px - x
            if rel_x % 6 == 0:
                color = highlight
            elif rel_x % 6 == 3:
                color = streak
            else:
                continue
            for py in range(y, y + height):
                if drawer.is_opaque(px, py):
                    drawer.set_pixel(px, py, color)

        # Top edge catches the light
        for px in range(x, x + width):
            if drawer.is_opaque(px, y):
                drawer.set_pixel(px, y, highlight)

    def generate_noise_pattern(self, width: int, height: int, density: float) -> List[bool]:
        total = max(0, width * height)
        pattern = [False] * total
        if total == 0:
            return pattern
        for _ in range(math.floor(total * density)):
            pattern[self.rng.random_int(0, total - 1)] = True
        return pattern
