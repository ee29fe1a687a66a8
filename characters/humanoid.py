"""
Humanoid sprite generator.

A generic 48x48 chibi body: legs, arm, torso and head are cel-shaded on
the left half, mirrored, then bloodline decorations and a 2px outline
are added.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pygame

from settings import SPRITE_SIZE, OUTLINE_COLOR, OUTLINE_THICKNESS
from engine.drawer import PixelDrawer
from engine.palettes import PaletteManager, BLOODLINES
from engine.proportions import ProportionManager
from engine.rng import SeededRNG
from engine.shading import MaterialShader
from engine.error_handler import logger
from characters.pipeline import RenderPipeline, RenderStage

SKIN_PALETTE = "warm"
VOID_EYE_COLOR = 0xAA00FF
DRAGON_EYE_COLOR = 0xFF3D00
EYE_COLOR = 0x000000


@dataclass
class HumanoidResult:
    canvas: pygame.Surface
    width: int
    height: int
    center_x: int
    center_y: int
    palette: str
    bloodline: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "center_x": self.center_x,
            "center_y": self.center_y,
            "palette": self.palette,
            "bloodline": self.bloodline,
        }


class HumanoidGenerator:
    """Chibi humanoid with optional bloodline styling."""

    def __init__(
        self,
        rng: Optional[SeededRNG] = None,
        palette_name: str = "warm",
        bloodline: Optional[str] = None,
        size: int = SPRITE_SIZE,
        outline_color: int = OUTLINE_COLOR,
        outline_thickness: int = OUTLINE_THICKNESS,
    ) -> None:
        self.rng = rng or SeededRNG()
        self.palette_manager = PaletteManager()
        self.shader = MaterialShader()

        if bloodline is not None and bloodline not in BLOODLINES:
            logger.warning(f"Unknown bloodline {bloodline!r}; drawing a plain humanoid")
            bloodline = None
        self.bloodline = bloodline
        self.palette_name = bloodline or palette_name
        self.palette = self.palette_manager.get_palette(self.palette_name)

        self.width = size
        self.height = size
        self.outline_color = outline_color
        self.outline_thickness = outline_thickness

        # One layout for the whole sprite, vertically centred
        self.proportions = ProportionManager(self.height)
        figure = self._figure_height()
        self.proportions.top = max(0, (self.height - figure) // 2)

    def _figure_height(self) -> int:
        p = self.proportions
        return (p.head_height - 2) + (p.torso_height - 3) + p.limb_height

    def _cloth_color(self) -> int:
        if "cloth" in self.palette:
            return self.rng.random_choice(self.palette["cloth"])
        return self.palette_manager.get_color(SKIN_PALETTE, "cloth", self.rng)

    def build_pipeline(self) -> RenderPipeline:
        center_x = self.width // 2
        pipeline = RenderPipeline(center_x, self.outline_color, self.outline_thickness)
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_legs(d, center_x))
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_arms(d, center_x))
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_torso(d, center_x))
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_head(d, center_x))
        if self.bloodline:
            pipeline.add(RenderStage.ASYMMETRIC_EQUIPMENT, lambda d: self.draw_bloodline_details(d, center_x))
        return pipeline

    def generate(self, until: Optional[RenderStage] = None) -> HumanoidResult:
        drawer = PixelDrawer.create(self.width, self.height)
        self.build_pipeline().run(drawer, until=until)
        return HumanoidResult(
            canvas=drawer.surface,
            width=self.width,
            height=self.height,
            center_x=self.width // 2,
            center_y=self.height // 2,
            palette=self.palette_name,
            bloodline=self.bloodline,
        )

    # ------------------------------------------------------------------
    # Body parts (left half only)
    # ------------------------------------------------------------------

    def draw_legs(self, drawer: PixelDrawer, center_x: int) -> None:
        bounds = self.proportions.get_leg_bounds(center_x, "left")
        ramp = self.shader.create_cel_shade_palette(self._cloth_color(), "cloth")
        self.shader.apply_cel_shade(drawer, bounds.x, bounds.y, bounds.width, bounds.height, ramp)

    def draw_arms(self, drawer: PixelDrawer, center_x: int) -> None:
        bounds = self.proportions.get_arm_bounds(center_x, "left")
        skin = self.palette_manager.get_color(SKIN_PALETTE, "skin", self.rng)
        ramp = self.shader.create_cel_shade_palette(skin, "skin")
        self.shader.apply_cel_shade(drawer, bounds.x, bounds.y, bounds.width, bounds.height, ramp)

    def draw_torso(self, drawer: PixelDrawer, center_x: int) -> None:
        bounds = self.proportions.get_torso_bounds(center_x)
        ramp = self.shader.create_cel_shade_palette(self._cloth_color(), "cloth")
        self.shader.apply_cel_shade(drawer, bounds.x, bounds.y, bounds.width, bounds.height, ramp)

    def draw_head(self, drawer: PixelDrawer, center_x: int) -> None:
        bounds = self.proportions.get_head_bounds(center_x)
        skin = self.palette_manager.get_color(SKIN_PALETTE, "skin", self.rng)
        ramp = self.shader.create_cel_shade_palette(skin, "skin")
        self.shader.apply_cel_shade_circle(drawer, bounds.center_x, bounds.center_y, bounds.radius, ramp)

        eye_y = bounds.center_y - 1
        drawer.set_pixel(center_x - 2, eye_y, EYE_COLOR)
        drawer.set_pixel(center_x + 2, eye_y, EYE_COLOR)

    # ------------------------------------------------------------------
    # Bloodlines (after mirroring)
    # ------------------------------------------------------------------

    def draw_bloodline_details(self, drawer: PixelDrawer, center_x: int) -> None:
        glow = self.palette_manager.get_color(self.palette_name, "glow", self.rng)
        armor = self.palette_manager.get_color(self.palette_name, "armor", self.rng)
        accent = self.palette_manager.get_color(self.palette_name, "accent", self.rng)

        head = self.proportions.get_head_bounds(center_x)
        torso = self.proportions.get_torso_bounds(center_x)
        arm = self.proportions.get_arm_bounds(center_x, "left")
        leg = self.proportions.get_leg_bounds(center_x, "left")
        eye_y = head.center_y - 1

        if self.bloodline == "ancient_warrior":
            # Single pauldron, chestplate and a crown of light
            drawer.draw_rect(arm.x - 1, torso.y - 1, 6, 6, armor)
            drawer.draw_rect(center_x - 4, torso.y + 2, 8, min(12, torso.height - 2), armor)
            drawer.draw_circle(center_x, head.y + 1, 2, glow)
        elif self.bloodline == "arcane_scholar":
            # Floating orbs beside the head and a chest rune
            drawer.set_pixel(center_x - 14, head.center_y, glow)
            drawer.set_pixel(center_x + 14, head.center_y, glow)
            drawer.draw_rect(center_x - 2, math.floor(torso.center_y) - 2, 4, 4, glow)
        elif self.bloodline == "shadow_assassin":
            drawer.set_pixel(center_x - 2, eye_y, VOID_EYE_COLOR)
            drawer.set_pixel(center_x + 2, eye_y, VOID_EYE_COLOR)
            # Cloak trim on one side
            drawer.draw_rect(torso.x - 1, torso.y + 1, 2, torso.height + 4, accent)
        elif self.bloodline == "dragon_born":
            drawer.set_pixel(center_x - 3, torso.y + 3, accent)
            drawer.set_pixel(center_x + 3, torso.y + 7, accent)
            drawer.set_pixel(center_x - 2, eye_y, DRAGON_EYE_COLOR)
            drawer.set_pixel(center_x + 2, eye_y, DRAGON_EYE_COLOR)
        elif self.bloodline == "nature_blessed":
            # Leaf cloak and vines
            drawer.draw_rect(torso.x - 2, torso.y + 1, 4, torso.height, armor)
            drawer.set_pixel(center_x - 5, leg.y + 3, accent)
            drawer.set_pixel(center_x + 5, leg.y + 7, accent)
