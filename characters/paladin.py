"""
Paladin sprite generator.

Fixed 48x48 plate-armoured knight: cloth legs and torso, chest plate,
pauldron, gauntlet, head and a full helmet with a T visor are drawn on
the left half and mirrored; the sword goes in the right hand afterwards
and the outline traces everything last. Rarity adds an emblem, a plume
and holy glow.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pygame

from settings import GENERATOR_VERSION, DEFAULT_SEED
from engine import colors
from engine.config import GeneratorConfig
from engine.drawer import PixelDrawer
from engine.glow import GlowRenderer
from engine.palettes import PaletteManager
from engine.rng import SeededRNG
from characters.pipeline import RenderPipeline, RenderStage

PLUME_COLOR = 0xC62828
GRIP_COLOR = 0x8B4513
VISOR_COLOR = 0x000000
EYE_CORE = 0xFFFFFF
EYE_OUTER = 0xFFFF00


@dataclass(frozen=True)
class PaladinProportions:
    head_size: int = 6
    head_y: int = 9
    torso_width: int = 9
    torso_height: int = 12
    torso_y: int = 21
    arm_length: int = 9
    arm_width: int = 3
    leg_length: int = 9
    leg_width: int = 4
    center_x: int = 24
    center_y: int = 24


@dataclass
class PaladinStyle:
    """Every recognised paladin option with its default."""
    palette: str = "paladin"
    armor_color: int = 0xD0D0D0
    armor_highlight: int = 0xFFFFFF
    armor_shadow: int = 0xA0A0A0
    cloth_color: int = 0x4169E1
    default_accent: int = 0x2C3E50
    default_skin: int = 0xFFDBAC
    default_gold: int = 0xFFD700
    # Per-colour brightness jitter, 0 disables it
    color_variation: float = 0.0
    outline_color: Optional[int] = None
    outline_thickness: Optional[int] = None
    proportions: PaladinProportions = field(default_factory=PaladinProportions)


@dataclass
class SpriteResult:
    canvas: pygame.Surface
    metadata: Dict[str, Any]


class PaladinGenerator:
    """Deterministic paladin sprite for one seed."""

    width = 48
    height = 48

    def __init__(
        self,
        seed: object = DEFAULT_SEED,
        style: Optional[PaladinStyle] = None,
        rarity: str = "common",
        config: Optional[GeneratorConfig] = None,
    ) -> None:
        self.rng = SeededRNG(seed)
        self.seed = self.rng.seed
        self.style = style or PaladinStyle()
        self.config = config or GeneratorConfig()
        self.rarity = rarity
        self.flourishes = self.config.flourishes_for(rarity)
        self.palette_manager = PaletteManager()
        self.glow = GlowRenderer()
        self.p = self.style.proportions

        self.outline_color = (
            self.style.outline_color if self.style.outline_color is not None else self.config.outline_color
        )
        self.outline_thickness = (
            self.style.outline_thickness if self.style.outline_thickness is not None
            else self.config.outline_thickness
        )

    def _color(self, category: str, default: int) -> int:
        palette = self.palette_manager.get_palette(self.style.palette)
        if category not in palette:
            return default
        color = self.palette_manager.get_color(self.style.palette, category, self.rng)
        if self.style.color_variation > 0:
            color = self.palette_manager.get_varied_color(color, self.style.color_variation, self.rng)
        return color

    def generate(self, until: Optional[RenderStage] = None) -> SpriteResult:
        """Draw the paladin; ``until`` stops after the given stage."""
        self.rng.reset()
        drawer = PixelDrawer.create(self.width, self.height)
        s = self.style
        cx, cy = self.p.center_x, self.p.center_y

        accent = self._color("accent", s.default_accent)
        skin = self._color("skin", s.default_skin)
        gold = self._color("gold", s.default_gold)

        pipeline = RenderPipeline(cx, self.outline_color, self.outline_thickness)
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_legs_left(d, cx))
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_torso_base(d, cx))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_chest_armor(d, cx, accent, gold))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_shoulder_pad_left(d, cx, cy - 6))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_arm_left(d, cx, cy))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_head(d, cx, skin))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_helmet(d, cx))
        if "emblem" in self.flourishes:
            pipeline.add(RenderStage.ARMOR, lambda d: self.draw_chest_emblem(d, cx, gold))
        if "plume" in self.flourishes:
            pipeline.add(RenderStage.ARMOR, lambda d: self.draw_plume(d, cx))
        if "glow" in self.flourishes:
            pipeline.add(RenderStage.ARMOR, lambda d: self.draw_holy_glow(d, cx))

        blade_path: List[Tuple[int, int]] = []
        pipeline.add(
            RenderStage.ASYMMETRIC_EQUIPMENT,
            lambda d: blade_path.extend(self.draw_sword(d, cx + 10, cy - 4, 20)),
        )
        if "glow" in self.flourishes:
            pipeline.add(RenderStage.ASYMMETRIC_EQUIPMENT, lambda d: self.draw_blade_glow(d, blade_path))

        pipeline.run(drawer, until=until)
        return SpriteResult(canvas=drawer.surface, metadata=self.metadata())

    def metadata(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "type": "paladin",
            "palette": self.style.palette,
            "rarity": self.rarity,
            "equipment": {
                "weapon": "sword",
                "armor": "plate",
                "helmet": True,
                "flourishes": list(self.flourishes),
            },
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "version": GENERATOR_VERSION,
        }

    # ------------------------------------------------------------------
    # Left half
    # ------------------------------------------------------------------

    def draw_legs_left(self, drawer: PixelDrawer, cx: int) -> None:
        p, cloth = self.p, self.style.cloth_color
        leg_y = p.torso_y + p.torso_height / 2
        x = cx - 4 - p.leg_width / 2
        top = leg_y - p.leg_length / 2
        drawer.draw_rect(x, top, p.leg_width, p.leg_length, cloth)
        # Darker inner side, lighter outer side
        drawer.draw_rect(x, top + 2, p.leg_width - 1, p.leg_length - 2, colors.darken(cloth, 0.25))
        drawer.draw_rect(x + 1, top, p.leg_width - 2, p.leg_length - 2, colors.lighten(cloth, 0.15))

    def draw_torso_base(self, drawer: PixelDrawer, cx: int) -> None:
        p, cloth = self.p, self.style.cloth_color
        x = cx - p.torso_width / 2
        drawer.draw_rect(x, p.torso_y - p.torso_height / 2, p.torso_width, p.torso_height, cloth)
        drawer.draw_rect(x, p.torso_y + p.torso_height / 2 - 2, p.torso_width, 2, colors.darken(cloth, 0.2))

    def draw_chest_armor(self, drawer: PixelDrawer, cx: int, accent: int, gold: int) -> None:
        s, p = self.style, self.p
        w, h = p.torso_width - 1, p.torso_height - 1
        left, top, bottom = cx - w / 2, p.torso_y - h / 2, p.torso_y + h / 2

        drawer.draw_rect(left, top, w, h, s.armor_color)
        drawer.draw_rect(left, bottom - 3, w, 3, s.armor_shadow)
        drawer.draw_rect(left, top, w, 3, s.armor_highlight)

        # Centre stripe and plate segmentation
        drawer.draw_line(cx, top, cx, bottom, accent)
        drawer.draw_line(left + 2, top, left + 2, bottom, 0x000000)
        drawer.draw_line(cx + w / 2 - 2, top, cx + w / 2 - 2, bottom, 0x000000)

        # Belt buckle
        drawer.draw_rect(cx - 2, bottom - 2, 4, 2, gold)

    def draw_shoulder_pad_left(self, drawer: PixelDrawer, cx: int, cy: int) -> None:
        s = self.style
        pad_w, pad_h = 6, 5
        pad_x, pad_y = cx - 6, cy - 2
        left, top = pad_x - pad_w / 2, pad_y - pad_h / 2

        drawer.draw_rect(left, top, pad_w, pad_h, s.armor_color)
        drawer.draw_rect(left, pad_y + pad_h / 2 - 2, pad_w, 2, s.armor_shadow)
        drawer.draw_rect(left, top, pad_w, 2, s.armor_highlight)
        drawer.draw_line(left + 2, top, left + 2, pad_y + pad_h / 2, 0x000000)
        drawer.draw_line(pad_x + pad_w / 2 - 2, top, pad_x + pad_w / 2 - 2, pad_y + pad_h / 2, 0x000000)

    def draw_arm_left(self, drawer: PixelDrawer, cx: int, cy: int) -> None:
        s, p = self.style, self.p
        arm_y = cy - 1
        x = cx - 6 - p.arm_width / 2
        top = arm_y - p.arm_length / 2

        drawer.draw_rect(x, top, p.arm_width, p.arm_length, s.cloth_color)
        # Gauntlet
        drawer.draw_rect(x, top, p.arm_width, 3, s.armor_color)
        drawer.draw_rect(x, top + 2, p.arm_width, 2, s.armor_shadow)
        drawer.draw_rect(x, top, p.arm_width, 1, s.armor_highlight)

    def draw_head(self, drawer: PixelDrawer, cx: int, skin: int) -> None:
        head_y = self.p.head_y if 5 <= self.p.head_y <= 15 else 9
        drawer.draw_circle(cx, head_y, self.p.head_size / 2, skin)

    def draw_helmet(self, drawer: PixelDrawer, cx: int) -> None:
        s, p = self.style, self.p
        head_y = p.head_y
        helmet_h = p.head_size + 4
        helmet_w = p.head_size + 3
        top = head_y - p.head_size / 2

        drawer.draw_circle(cx, top, helmet_w / 2, s.armor_color)
        drawer.draw_rect(cx - helmet_w / 2, top, helmet_w, helmet_h, s.armor_color)

        # Ridge highlight and rim shadow
        drawer.draw_rect(cx - 2, top - 1, 4, max(2, helmet_h / 3), s.armor_highlight)
        drawer.draw_rect(cx - helmet_w / 2, top + helmet_h - 2, helmet_w, 2, s.armor_shadow)

        # T-shaped visor
        visor_y = head_y + 1
        x = cx - helmet_w / 2 + 1
        while x < cx + helmet_w / 2:
            drawer.set_pixel(x, visor_y, VISOR_COLOR)
            drawer.set_pixel(x, visor_y + 1, VISOR_COLOR)
            x += 1
        for dx in (-1, 0, 1):
            drawer.set_pixel(cx + dx, visor_y, VISOR_COLOR)
            drawer.set_pixel(cx + dx, visor_y + 2, VISOR_COLOR)

        # Eye glow: white core, yellow rim
        for side in (-1, 1):
            drawer.set_pixel(cx + 2 * side, visor_y + 1, EYE_CORE)
            drawer.set_pixel(cx + 3 * side, visor_y + 1, EYE_OUTER)
            drawer.set_pixel(cx + 2 * side, visor_y, EYE_OUTER)

    # ------------------------------------------------------------------
    # Rarity flourishes
    # ------------------------------------------------------------------

    def draw_chest_emblem(self, drawer: PixelDrawer, cx: int, gold: int) -> None:
        y = self.p.torso_y
        drawer.set_pixel(cx, y - 1, gold)
        drawer.draw_rect(cx - 1, y, 3, 1, gold)
        drawer.set_pixel(cx, y + 1, gold)

    def draw_plume(self, drawer: PixelDrawer, cx: int) -> None:
        p = self.p
        helmet_top = p.head_y - p.head_size / 2 - (p.head_size + 3) / 2
        drawer.draw_rect(cx - 1, helmet_top - 3, 2, 4, PLUME_COLOR)
        drawer.draw_rect(cx - 2, helmet_top - 4, 2, 2, colors.lighten(PLUME_COLOR, 0.3))

    def draw_holy_glow(self, drawer: PixelDrawer, cx: int) -> None:
        intensity = 1.0 if self.rarity == "legendary" else 0.8
        glow = self.glow.get_class_glow("paladin")
        self.glow.render_glow(drawer, cx, self.p.torso_y, 8, glow.color, intensity * glow.intensity,
                              mask_to_existing=True)

    # ------------------------------------------------------------------
    # Right hand
    # ------------------------------------------------------------------

    def draw_sword(self, drawer: PixelDrawer, x: int, y: int, length: int) -> List[Tuple[int, int]]:
        """Diagonal 2px blade with grip and cross-guard; returns the blade path."""
        s = self.style
        blade_length = length - 6
        hilt_length = 4
        guard_width = 5
        path = []

        for i in range(blade_length):
            blade_x = x + math.floor(i * 0.15)
            blade_y = y + i
            drawer.set_pixel(blade_x, blade_y, s.armor_color)
            drawer.set_pixel(blade_x - 1, blade_y, s.armor_color)
            if i % 2 == 0:
                drawer.set_pixel(blade_x, blade_y, s.armor_highlight)
            path.append((blade_x, blade_y))

        grip_x = x + math.floor(blade_length * 0.15)
        drawer.draw_rect(grip_x - 1, y + blade_length, 2, hilt_length, GRIP_COLOR)
        drawer.draw_rect(grip_x - guard_width / 2, y + blade_length, guard_width, 2, 0x000000)
        drawer.draw_rect(grip_x - 1, y + blade_length - 1, 2, 2, 0x000000)

        return path

    def draw_blade_glow(self, drawer: PixelDrawer, blade_path: List[Tuple[int, int]]) -> None:
        """Tint the blade itself; the silhouette stays unchanged."""
        glow = self.glow.get_class_glow("paladin")
        for px, py in blade_path[::3]:
            self.glow.render_glow(drawer, px, py, 3, glow.color, glow.intensity * 0.5, mask_to_existing=True)
