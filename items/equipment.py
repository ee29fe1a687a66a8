"""
Equipment sprites.

Swords, staves, shields, helmets and chest armour drawn onto a 64x64
canvas. Bloodlines infuse weapons with their own metal and glow colours.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import pygame

from settings import EQUIPMENT_SIZE
from engine import colors
from engine.drawer import PixelDrawer
from engine.error_handler import logger
from engine.glow import GlowRenderer
from engine.palettes import PaletteManager
from engine.rng import SeededRNG
from engine.textures import TextureGenerator

HILT_COLOR = 0x8B4513
GOLD = 0xFFD700
PLUME_COLOR = 0xFF0000

# Bloodline -> (blade colour override, glow colour)
SWORD_INFUSIONS = {
    "ancient_warrior": (0xFFD700, 0xFFFFFF),
    "shadow_assassin": (0x121212, 0xAA00FF),
    "dragon_born": (None, 0xFF3D00),
}

# Bloodline -> (shaft colour, crystal colour)
STAFF_INFUSIONS = {
    "arcane_scholar": (0x3949AB, 0x00E5FF),
    "nature_blessed": (0x795548, 0x76FF03),
}

EQUIPMENT_TYPES = ("sword", "staff", "shield", "helmet", "chest", "detailed_chest", "shoulders", "emblem")


@dataclass(frozen=True)
class ChestDetails:
    segmentation: bool = True
    segments: int = 3
    buckle: bool = True
    buckle_size: int = 4
    buckle_color: int = GOLD
    engravings: bool = False
    pattern: str = "simple"


class EquipmentGenerator:
    """Draws equipment pieces onto one drawer."""

    def __init__(
        self,
        rng: Optional[SeededRNG] = None,
        palette_name: str = "metallic",
        drawer: Optional[PixelDrawer] = None,
        size: int = EQUIPMENT_SIZE,
    ) -> None:
        self.rng = rng or SeededRNG()
        self.palette_manager = PaletteManager()
        self.palette_name = palette_name
        self.palette = self.palette_manager.get_palette(palette_name)
        self.drawer = drawer or PixelDrawer.create(size, size)
        self.width, self.height = self.drawer.width, self.drawer.height
        self.textures = TextureGenerator(self.rng.seed)
        self.glow = GlowRenderer()

    def generate(self, item_data: Mapping[str, Any], item_id: Optional[str] = None) -> pygame.Surface:
        """Draw one piece centred on the canvas and return the canvas."""
        kind = item_data.get("type") or item_data.get("slot") or "sword"
        if kind not in EQUIPMENT_TYPES:
            logger.debug(f"Unknown equipment type {kind!r} for {item_id}; drawing a sword")
            kind = "sword"
        metal = colors.parse_color(
            item_data.get("color", self.palette_manager.get_color(self.palette_name, "metal", self.rng))
        )
        bloodline = item_data.get("bloodline")
        cx, cy = self.width // 2, self.height // 2
        span = self.height - 16

        if kind == "sword":
            self.draw_sword(cx, 6, span, metal, bloodline)
            if item_data.get("rarity") == "legendary":
                _, glow = SWORD_INFUSIONS.get(bloodline, (None, 0xFFFF00))
                path = [(cx, y) for y in range(8, 6 + span - 6, 4)]
                self.glow.render_weapon_glow(self.drawer, path, glow, 0.5)
        elif kind == "staff":
            self.draw_staff(cx, 10, span - 4, metal, bloodline)
        elif kind == "shield":
            self.draw_shield(cx, cy, self.width // 2, metal)
        elif kind == "helmet":
            self.draw_helmet(cx, cy - 10, self.width // 3, metal)
        elif kind == "chest":
            self.draw_chest_armor(cx, cy, self.width // 2, self.height // 2, metal)
        elif kind == "detailed_chest":
            details = ChestDetails(
                engravings=bool(item_data.get("engravings", True)),
                pattern=item_data.get("pattern", "simple"),
            )
            self.draw_detailed_chest_armor(cx, cy, self.width // 2, self.height // 2, metal, details)
        elif kind == "shoulders":
            self.draw_shoulder_pads(cx, cy, 6, metal)
        else:
            self.draw_emblem(cx, cy, self.width // 3, GOLD, item_data.get("shape", "circle"))
        return self.drawer.surface

    # ------------------------------------------------------------------
    # Weapons
    # ------------------------------------------------------------------

    def draw_sword(self, x: float, y: float, length: float, metal_color: int, bloodline: Optional[str] = None) -> None:
        blade_width, hilt_length, guard_width = 2, 4, 6
        blade_override, glow = SWORD_INFUSIONS.get(bloodline, (None, None))
        metal = blade_override if blade_override is not None else metal_color
        d = self.drawer

        d.draw_rect(x - blade_width / 2, y, blade_width, length - hilt_length, metal)
        if glow is not None:
            d.set_pixel(x - blade_width / 2, y + 2, glow)
            d.set_pixel(x + blade_width / 2, y + length / 2, glow)
        d.draw_rect(x - guard_width / 2, y + length - hilt_length - 2, guard_width, 2, metal)
        d.draw_rect(x - blade_width / 2, y + length - hilt_length, blade_width, hilt_length, HILT_COLOR)
        d.draw_circle(x, y + length, 2, metal)

    def draw_staff(self, x: float, y: float, length: float, color: int, bloodline: Optional[str] = None) -> None:
        shaft, crystal = STAFF_INFUSIONS.get(bloodline, (color, 0xFFFFFF))
        self.drawer.draw_rect(x - 1, y, 2, length, shaft)
        self.drawer.draw_circle(x, y, 4, crystal)
        self.drawer.set_pixel(x - 1, y - 1, 0xFFFFFF)

    # ------------------------------------------------------------------
    # Armour
    # ------------------------------------------------------------------

    def draw_shield(self, x: float, y: float, size: float, metal_color: int) -> None:
        w, h = size, size * 1.2
        left, top = x - w / 2, y - h / 2
        self.drawer.draw_rect(left, top, w, h, metal_color)
        self.drawer.draw_rect_outline(left, top, w, h, 0x000000)
        # Gold cross
        self.drawer.draw_line(x, top + 2, x, y + h / 2 - 2, GOLD)
        self.drawer.draw_line(left + 2, y, x + w / 2 - 2, y, GOLD)

    def draw_helmet(self, x: float, y: float, size: float, metal_color: int) -> None:
        h, w = size + 2, size + 1
        self.drawer.draw_rect(x - w / 2, y, w, h, metal_color)
        self.drawer.draw_rect(x - w / 2, y + h / 2, w, 2, 0x000000)
        if self.rng.random() > 0.5:
            self.drawer.draw_rect(x - 1, y - 3, 2, 3, PLUME_COLOR)

    def draw_chest_armor(self, x: float, y: float, width: float, height: float, metal_color: int) -> None:
        left, top = x - width / 2, y - height / 2
        self.drawer.draw_rect(left, top, width, height, metal_color)
        self.textures.apply_metal_texture(self.drawer, math.floor(left), math.floor(top), int(width), int(height), metal_color)
        self.drawer.draw_rect_outline(left, top, width, height, 0x000000)
        self.drawer.draw_line(x, top, x, y + height / 2, 0x000000)

    def draw_detailed_chest_armor(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        metal_color: int,
        details: ChestDetails = ChestDetails(),
    ) -> None:
        left, top = x - width / 2, y - height / 2
        self.drawer.draw_rect(left, top, width, height, metal_color)
        self.textures.apply_metal_texture(self.drawer, math.floor(left), math.floor(top), int(width), int(height), metal_color)

        if details.segmentation:
            self.draw_segmentation_lines(x, y, width, height, details.segments)
        if details.buckle:
            self.draw_buckle(x, y + height / 2 - 2, details.buckle_size, details.buckle_color)
        if details.engravings:
            self.draw_engravings(x, y, width, height, details.pattern)

        self.drawer.draw_rect_outline(left, top, width, height, 0x000000)

    def draw_segmentation_lines(self, x: float, y: float, width: float, height: float, segments: int = 3) -> None:
        segments = max(1, segments)
        segment_width = width / segments
        for i in range(1, segments):
            line_x = x - width / 2 + segment_width * i
            self.drawer.draw_line(line_x, y - height / 2, line_x, y + height / 2, 0x000000)
        self.drawer.draw_line(x - width / 2, y, x + width / 2, y, 0x000000)

    def draw_buckle(self, x: float, y: float, size: int, color: int = GOLD) -> None:
        left, top = x - size / 2, y - size / 2
        self.drawer.draw_rect(left, top, size, size, color)
        self.drawer.draw_rect(left + 1, top + 1, size - 2, 1, colors.lighten(color, 0.3))
        self.drawer.draw_rect_outline(left, top, size, size, 0x000000)

    def draw_engravings(self, x: float, y: float, width: float, height: float, pattern: str = "simple") -> None:
        ink = 0x000000
        top, bottom = y - height / 2, y + height / 2
        d = self.drawer
        if pattern == "ornate":
            d.draw_line(x, top + 2, x, bottom - 2, ink)
            for px, py in ((x - 1, top + 2), (x + 1, top + 2), (x - 1, bottom - 2), (x + 1, bottom - 2)):
                d.set_pixel(px, py, ink)
        elif pattern == "runic":
            for px, py in ((x - 1, top + 2), (x, top + 3), (x + 1, top + 2),
                           (x - 1, bottom - 2), (x, bottom - 3), (x + 1, bottom - 2)):
                d.set_pixel(px, py, ink)
        else:
            d.draw_line(x - 2, y - 2, x + 2, y + 2, ink)
            d.draw_line(x - 2, y + 2, x + 2, y - 2, ink)

    def draw_emblem(self, x: float, y: float, size: float, color: int = GOLD, shape: str = "circle") -> None:
        if shape == "shield":
            w, h = size, size * 1.2
            self.drawer.draw_rect(x - w / 2, y - h / 2, w, h, color)
            self.drawer.draw_rect_outline(x - w / 2, y - h / 2, w, h, 0x000000)
        elif shape == "star":
            s = size
            points = [
                (x, y - s / 2), (x + s / 4, y - s / 4), (x + s / 2, y), (x + s / 4, y + s / 4),
                (x, y + s / 2), (x - s / 4, y + s / 4), (x - s / 2, y), (x - s / 4, y - s / 4),
            ]
            self.drawer.draw_polygon(points, color)
        else:
            self.drawer.draw_circle(x, y, size / 2, color)
            self.drawer.draw_circle_outline(x, y, size / 2, 0x000000)

    def draw_shoulder_pads(self, x: float, y: float, size: float, metal_color: int) -> None:
        self.drawer.draw_circle(x - 8, y, size, metal_color)
        self.drawer.draw_circle(x + 8, y, size, metal_color)
