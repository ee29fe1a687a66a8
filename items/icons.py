"""
Inventory item icons.

An icon is a rarity-tinted plate with either a pre-rendered texture or a
procedural silhouette on top. Texture problems never stop a batch: they
are logged and the procedural silhouette is drawn instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import pygame

from settings import ICON_SIZE
from engine import colors
from engine.drawer import PixelDrawer
from engine.error_handler import logger, TextureLoadError


@dataclass(frozen=True)
class RarityColors:
    base: int
    accent: int


RARITY_COLORS: Dict[str, RarityColors] = {
    "common": RarityColors(0xC0C0C0, 0xFFFFFF),
    "uncommon": RarityColors(0x1EFF00, 0xFFFFFF),
    "rare": RarityColors(0x0070DD, 0x88CCFF),
    "epic": RarityColors(0xA335EE, 0xFF88FF),
    "legendary": RarityColors(0xFF8000, 0xFFFF00),
}

GEMMED_RARITIES = ("rare", "epic", "legendary")
BLADE_COLOR = 0xE2E2E2
HANDLE_COLOR = 0x8B4513
ARMOR_COLOR = 0xCFCFCF
TEXTURE_PADDING = 6


@dataclass(frozen=True)
class IconOptions:
    """Per-icon options; a texture is only tried when both fields allow it."""

    texture_path: Optional[Union[str, Path]] = None
    can_use_texture: bool = False
    # Reject flat frame-only placeholder art
    require_meaningful: bool = True


def load_texture(path: Union[str, Path]) -> pygame.Surface:
    try:
        return pygame.image.load(str(path))
    except (pygame.error, FileNotFoundError, OSError) as e:
        raise TextureLoadError(f"Could not load texture {path}: {e}") from e


def is_meaningful_texture(surface: pygame.Surface, sample: int = 32) -> bool:
    """
    Heuristic placeholder check.

    The texture is sampled at 32x32. Art whose centre is nearly flat while
    its border carries colour variety is a frame, not an item.
    """
    small = pygame.transform.scale(surface, (sample, sample))
    center_colors, border_colors = set(), set()
    for y in range(sample):
        for x in range(sample):
            c = small.get_at((x, y))
            if c.a < 10:
                continue
            key = (c.r, c.g, c.b)
            if x < 4 or x >= sample - 4 or y < 4 or y >= sample - 4:
                border_colors.add(key)
            if 8 <= x < sample - 8 and 8 <= y < sample - 8:
                center_colors.add(key)
    if len(center_colors) <= 3 and len(border_colors) >= 3:
        return False
    if len(center_colors) <= 2 and len(border_colors) <= 4:
        return False
    return True


def draw_icon_plate(drawer: PixelDrawer, size: int, base: int) -> None:
    """Dark background, darker bevel, black rim and a light inner rim."""
    drawer.draw_rect(0, 0, size, size, colors.darken(base, 0.35))
    drawer.draw_rect(3, 3, size - 6, size - 6, colors.darken(base, 0.55))
    drawer.draw_rect_outline(0, 0, size, size, 0x000000, thickness=2)
    drawer.draw_rect_outline(3, 3, size - 6, size - 6, colors.lighten(base, 0.35))


class ItemIconGenerator:
    def __init__(self, size: int = ICON_SIZE) -> None:
        self.size = size

    def generate(
        self,
        item_data: Mapping[str, Any],
        item_id: Optional[str] = None,
        options: IconOptions = IconOptions(),
    ) -> pygame.Surface:
        size = self.size
        drawer = PixelDrawer.create(size, size)
        rarity = item_data.get("rarity") or "common"
        palette = RARITY_COLORS.get(rarity, RARITY_COLORS["common"])

        self.draw_icon_plate(drawer, palette.base)

        if options.can_use_texture and options.texture_path:
            if self.draw_texture(drawer, options, item_id):
                return drawer.surface

        item_type = item_data.get("type") or "weapon"
        if item_type == "weapon":
            self.draw_weapon(drawer, item_data.get("weapon_type") or "", rarity, palette)
        elif item_type == "armor":
            self.draw_armor(drawer, palette)
        else:
            self.draw_accessory(drawer, palette)
        return drawer.surface

    def draw_texture(self, drawer: PixelDrawer, options: IconOptions, item_id: Optional[str]) -> bool:
        """Scale a texture into the plate; False when the procedural icon should be drawn."""
        try:
            image = load_texture(options.texture_path)
        except TextureLoadError as e:
            logger.warning(f"Failed to load texture for {item_id}: {e}")
            return False
        if options.require_meaningful and not is_meaningful_texture(image):
            logger.debug(f"Texture for {item_id} looks like a placeholder; drawing procedurally")
            return False

        size = self.size
        inner = size - TEXTURE_PADDING * 2
        scale = min(inner / image.get_width(), inner / image.get_height())
        w = max(1, math.floor(image.get_width() * scale))
        h = max(1, math.floor(image.get_height() * scale))
        drawer.blit(pygame.transform.scale(image, (w, h)), (size - w) // 2, (size - h) // 2)
        return True

    def draw_icon_plate(self, drawer: PixelDrawer, base: int) -> None:
        draw_icon_plate(drawer, self.size, base)

    def _stroke_rect(self, drawer: PixelDrawer, x: float, y: float, w: float, h: float) -> None:
        """Two-pixel black stroke straddling the rectangle edge."""
        drawer.draw_rect_outline(math.floor(x) - 1, math.floor(y) - 1, int(w) + 2, int(h) + 2, 0x000000, thickness=2)

    def draw_weapon(self, drawer: PixelDrawer, weapon_type: str, rarity: str, palette: RarityColors) -> None:
        size = self.size
        cx = cy = size / 2
        length = size * 0.7
        top = cy - length / 2

        if weapon_type in ("", "sword"):
            drawer.draw_rect(cx - 2, top, 4, length * 0.7, BLADE_COLOR)
            drawer.draw_polygon([(cx - 2, top), (cx + 2, top), (cx, top - 6)], BLADE_COLOR)
            drawer.draw_rect(cx - 3, cy + length * 0.15, 6, length * 0.25, HANDLE_COLOR)
            drawer.draw_rect(cx - 10, cy + length * 0.12, 20, 3, palette.accent)
            if rarity in GEMMED_RARITIES:
                drawer.draw_circle(cx, cy + length * 0.40, 3, palette.base)
                drawer.draw_circle_outline(cx, cy + length * 0.40, 3, 0x000000)
        elif weapon_type == "axe":
            drawer.draw_rect(cx - 2, top, 4, length * 0.7, BLADE_COLOR)
            drawer.draw_rect(cx - 8, top - 4, 16, 4, palette.accent)
            drawer.draw_rect(cx - 3, cy + length * 0.15, 6, length * 0.25, HANDLE_COLOR)
            self._stroke_rect(drawer, cx - 2, top, 4, length * 0.7)
        elif weapon_type == "mace":
            drawer.draw_rect(cx - 3, top, 6, length * 0.5, BLADE_COLOR)
            drawer.draw_circle(cx, top, 6, BLADE_COLOR)
            drawer.draw_rect(cx - 3, cy + length * 0.15, 6, length * 0.25, HANDLE_COLOR)
            self._stroke_rect(drawer, cx - 3, top, 6, length * 0.5)
            drawer.draw_circle_outline(cx, top, 6, 0x000000)
        elif weapon_type in ("staff", "wand"):
            drawer.draw_rect(cx - 1, top, 2, length, HANDLE_COLOR)
            drawer.draw_circle(cx, top, 4, palette.base)
            drawer.draw_circle(cx, top, 2, palette.accent)
            self._stroke_rect(drawer, cx - 1, top, 2, length)
            drawer.draw_circle_outline(cx, top, 4, 0x000000)
        else:
            logger.debug(f"No silhouette for weapon type {weapon_type!r}; drawing a blade outline")
            self._stroke_rect(drawer, cx - 2, top, 4, length * 0.7)

    def draw_armor(self, drawer: PixelDrawer, palette: RarityColors) -> None:
        size = self.size
        w, h = size * 0.6, size * 0.7
        left, top = size / 2 - w / 2, size / 2 - h / 2
        drawer.draw_rect(left, top, w, h, ARMOR_COLOR)
        drawer.draw_rect(left, top, w, 4, palette.accent)
        self._stroke_rect(drawer, left, top, w, h)

    def draw_accessory(self, drawer: PixelDrawer, palette: RarityColors) -> None:
        size = self.size
        c = size / 2
        # Ring band over a thick black stroke
        for r in range(math.floor(size * 0.22) - 1, math.floor(size * 0.22) + 2):
            drawer.draw_circle_outline(c, c, r, 0x000000)
        for r in range(math.floor(size * 0.18), math.floor(size * 0.18) + 2):
            drawer.draw_circle_outline(c, c, r, palette.accent)
        drawer.draw_circle(c + size * 0.12, c - size * 0.10, size * 0.05, palette.accent)
