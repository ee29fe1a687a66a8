"""
Radial glow effects.

A glow is three concentric layers (core, outer, soft edge) with a cosine
falloff, blended into whatever is already on the canvas.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from engine.drawer import PixelDrawer


@dataclass(frozen=True)
class GlowStyle:
    color: int
    intensity: float


CLASS_GLOWS: Dict[str, GlowStyle] = {
    "paladin": GlowStyle(0xFFFF00, 0.8),
    "mage": GlowStyle(0x00FFFF, 0.6),
    "warlock": GlowStyle(0xFF00FF, 1.0),
    "priest": GlowStyle(0xFFFF00, 0.8),
    "death_knight": GlowStyle(0xFF0000, 0.9),
    "shaman": GlowStyle(0x00CED1, 0.7),
    "hunter": GlowStyle(0x228B22, 0.6),
    "rogue": GlowStyle(0x9370DB, 0.7),
    "warrior": GlowStyle(0x8B0000, 0.8),
    "default": GlowStyle(0xFFFFFF, 0.5),
}

# Pixels fainter than this are skipped
MIN_VISIBLE_ALPHA = 0.1
WEAPON_GLOW_RADIUS = 3


class GlowRenderer:
    """Draws class, item and weapon glows."""

    def get_class_glow(self, class_name: Optional[str]) -> GlowStyle:
        return CLASS_GLOWS.get((class_name or "").lower(), CLASS_GLOWS["default"])

    @staticmethod
    def calculate_glow_alpha(distance: float, max_alpha: float) -> float:
        return max_alpha * math.cos(distance * math.pi / 2)

    def render_glow(
        self,
        drawer: PixelDrawer,
        x: float,
        y: float,
        radius: float,
        color: int,
        intensity: float = 0.8,
        mask_to_existing: bool = False,
    ) -> None:
        """
        Render a three-layer glow centred on (x, y).

        Args:
            drawer: Target canvas
            x, y: Glow centre
            radius: Radius of the soft outer layer
            color: Glow colour
            intensity: Peak opacity of the outer layers
            mask_to_existing: Only tint pixels that are already opaque
        """
        self.render_glow_layer(drawer, x, y, math.floor(radius * 0.3), color, 1.0, mask_to_existing)
        self.render_glow_layer(drawer, x, y, math.floor(radius * 0.7), color, intensity * 0.6, mask_to_existing)
        self.render_glow_layer(drawer, x, y, radius, color, intensity * 0.3, mask_to_existing)

    def render_glow_layer(
        self,
        drawer: PixelDrawer,
        x: float,
        y: float,
        radius: float,
        color: int,
        alpha: float,
        mask_to_existing: bool = False,
    ) -> None:
        if radius <= 0:
            return
        cx, cy = math.floor(x), math.floor(y)
        r = math.floor(radius)
        r2 = radius * radius
        for py in range(-r, r + 1):
            for px in range(-r, r + 1):
                d2 = px * px + py * py
                if d2 > r2:
                    continue
                pixel_alpha = self.calculate_glow_alpha(math.sqrt(d2) / radius, alpha)
                if pixel_alpha <= MIN_VISIBLE_ALPHA:
                    continue
                if mask_to_existing and not drawer.is_opaque(cx + px, cy + py):
                    continue
                drawer.blend_pixel(cx + px, cy + py, color, pixel_alpha)

    def render_weapon_glow(
        self,
        drawer: PixelDrawer,
        weapon_path: Sequence[Tuple[float, float]],
        color: int,
        intensity: float = 0.8,
    ) -> None:
        """Glow along a weapon's points with a brighter tip."""
        if not weapon_path:
            return
        for px, py in weapon_path:
            self.render_glow(drawer, px, py, WEAPON_GLOW_RADIUS, color, intensity)
        tip_x, tip_y = weapon_path[-1]
        self.render_glow(drawer, tip_x, tip_y, WEAPON_GLOW_RADIUS * 1.5, color, intensity * 1.2)

    def render_class_glow(self, drawer: PixelDrawer, x: float, y: float, radius: float, class_name: str,
                          mask_to_existing: bool = False) -> None:
        glow = self.get_class_glow(class_name)
        self.render_glow(drawer, x, y, radius, glow.color, glow.intensity, mask_to_existing)
