"""
Enemy sprites.

An enemy's appearance picks a body type and a size class. Bodies are
painted from a cel-shade ramp of the enemy colour, the id adds small
details (goblin ears, orc tusks, a dark knight's helmet and sword, bows
and staves), eyes go on last and the silhouette is outlined before a
soft drop shadow is laid underneath it.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from settings import ENEMY_SIZE, GENERATOR_VERSION, OUTLINE_COLOR, OUTLINE_THICKNESS
from engine import colors
from engine.drawer import PixelDrawer, Point
from engine.error_handler import logger
from engine.shading import CelShadePalette, MaterialShader
from characters.paladin import SpriteResult

BODY_TYPES = (
    "blob", "dragon", "elemental", "insectoid", "beast", "undead", "mechanical", "humanoid", "creature",
)
DEFAULT_BODY = "creature"
# Bodies that never get eyes
EYELESS_BODIES = ("blob", "inanimate")

SIZE_SCALES: Dict[str, float] = {"small": 0.6, "medium": 1.0, "large": 1.3}
DEFAULT_SIZE = "medium"

BODY_MATERIALS: Dict[str, str] = {
    "mechanical": "metal",
    "humanoid": "leather",
    "insectoid": "leather",
    "beast": "leather",
    "undead": "cloth",
}
DEFAULT_MATERIAL = "skin"

DEFAULT_COLOR = 0x888888
# Colours for enemies whose data names none, matched by id keyword
ID_COLORS: Tuple[Tuple[str, int], ...] = (
    ("dark_knight", 0x2A2A2A),
    ("goblin", 0x8DA343),
    ("orc", 0x4A7023),
)
# Bodies darker than this are lifted so they read against night skies
MIN_LUMINANCE = 32

SHADOW_ALPHA = 64
UNDEAD_ALPHA = 204
ANTLER_COLOR = 0x8B4513
WOOD_COLOR = 0x8B4513
STEEL_COLOR = 0xCCCCCC
BONE_COLOR = 0xFFFFFF
ARMOR_RING_COLOR = 0x696969
EYE_WHITE = 0xFFFFFF
PUPIL_COLOR = 0x000000


def _quad_points(p0: Point, p1: Point, p2: Point, steps: int = 8) -> List[Point]:
    """Samples of a quadratic curve, excluding p0."""
    points = []
    for i in range(1, steps + 1):
        t = i / steps
        a, b, c = (1 - t) ** 2, 2 * (1 - t) * t, t * t
        points.append((a * p0[0] + b * p1[0] + c * p2[0], a * p0[1] + b * p1[1] + c * p2[1]))
    return points


def _rays(cx: float, cy: float, count: int, inner: float, outer: float) -> List[Tuple[float, float, float, float]]:
    rays = []
    for i in range(count):
        angle = i * math.pi * 2 / count
        cos, sin = math.cos(angle), math.sin(angle)
        rays.append((cx + cos * inner, cy + sin * inner, cx + cos * outer, cy + sin * outer))
    return rays


class EnemySpriteGenerator:
    """Body-type driven enemy sprites on a square canvas."""

    def __init__(
        self,
        size: int = ENEMY_SIZE,
        outline_color: int = OUTLINE_COLOR,
        outline_thickness: int = OUTLINE_THICKNESS,
    ) -> None:
        self.size = size
        self.outline_color = outline_color
        self.outline_thickness = outline_thickness
        self.shader = MaterialShader()

    @staticmethod
    def resolve_body_type(enemy_data: Optional[Mapping[str, Any]], enemy_id: Optional[str] = None) -> str:
        """Explicit body type first, then id keywords, then the round creature."""
        appearance = (enemy_data or {}).get("appearance") or {}
        body = appearance.get("body_type")
        if body in BODY_TYPES or body == "inanimate":
            return body
        if body:
            logger.debug(f"Unknown body type {body!r} for {enemy_id}; guessing from the id")
        enemy_id = enemy_id or ""
        if "slime" in enemy_id:
            return "blob"
        if "dragon" in enemy_id:
            return "dragon"
        return DEFAULT_BODY

    @staticmethod
    def resolve_color(enemy_data: Optional[Mapping[str, Any]], enemy_id: Optional[str] = None) -> int:
        appearance = (enemy_data or {}).get("appearance") or {}
        default = DEFAULT_COLOR
        for keyword, color in ID_COLORS:
            if keyword in (enemy_id or ""):
                default = color
                break
        color = colors.parse_color(appearance.get("color"), default)
        if colors.luminance(color) < MIN_LUMINANCE:
            color = colors.lighten(color, 0.2)
        return color

    def scale_for(self, size_class: Optional[str], enemy_id: Optional[str] = None) -> float:
        if size_class not in SIZE_SCALES:
            if size_class:
                logger.debug(f"Unknown enemy size {size_class!r} for {enemy_id}; using {DEFAULT_SIZE}")
            size_class = DEFAULT_SIZE
        return SIZE_SCALES[size_class]

    def generate(self, enemy_data: Optional[Mapping[str, Any]] = None, enemy_id: Optional[str] = None) -> SpriteResult:
        """
        Draw one enemy.

        Args:
            enemy_data: Enemy definition; reads ``appearance.color``,
                ``appearance.size``, ``appearance.body_type``,
                ``appearance.skin_tone`` and ``appearance.armor_color``
            enemy_id: Enemy identifier; keywords in it add details

        Returns:
            SpriteResult with the canvas and enemy metadata
        """
        enemy_data = enemy_data or {}
        appearance = enemy_data.get("appearance") or {}
        body_type = self.resolve_body_type(enemy_data, enemy_id)
        base_radius = self.size * 0.25 * self.scale_for(appearance.get("size"), enemy_id)

        body = self.draw_body(enemy_data, enemy_id)
        cx = cy = self.size / 2
        drawer = PixelDrawer.create(self.size, self.size)
        drawer.draw_ellipse(cx, cy + base_radius * 0.75, base_radius * 1.8, base_radius * 0.7, 0x000000, SHADOW_ALPHA)
        drawer.blit(body)

        metadata = {
            "type": "enemy",
            "id": enemy_id,
            "body_type": body_type,
            "size": appearance.get("size") if appearance.get("size") in SIZE_SCALES else DEFAULT_SIZE,
            "color": f"#{self.resolve_color(enemy_data, enemy_id):06x}",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "version": GENERATOR_VERSION,
        }
        return SpriteResult(canvas=drawer.surface, metadata=metadata)

    def draw_body(self, enemy_data: Optional[Mapping[str, Any]] = None, enemy_id: Optional[str] = None) -> PixelDrawer:
        """Outlined body layer without the drop shadow."""
        enemy_data = enemy_data or {}
        appearance = enemy_data.get("appearance") or {}
        enemy_id = enemy_id or ""
        body_type = self.resolve_body_type(enemy_data, enemy_id)
        color = self.resolve_color(enemy_data, enemy_id)
        r = self.size * 0.25 * self.scale_for(appearance.get("size"), enemy_id)
        ramp = self.shader.create_cel_shade_palette(color, BODY_MATERIALS.get(body_type, DEFAULT_MATERIAL))

        drawer = PixelDrawer.create(self.size, self.size)
        cx = cy = self.size / 2
        painter = getattr(self, f"draw_{body_type}") if body_type in BODY_TYPES else self.draw_creature
        painter(drawer, cx, cy, r, ramp, enemy_id, appearance)

        if body_type not in EYELESS_BODIES:
            self.draw_eyes(drawer, cx, cy, r)
        drawer.draw_outline(self.outline_color, self.outline_thickness)
        logger.debug(f"Enemy {enemy_id or '<unnamed>'} drawn as {body_type}")
        return drawer

    # ------------------------------------------------------------------
    # Bodies
    # ------------------------------------------------------------------

    def draw_blob(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                  enemy_id: str, appearance: Mapping[str, Any]) -> None:
        r *= 1.05
        start = (cx - r, cy)
        points = [start]
        points += _quad_points(start, (cx - r, cy - r), (cx, cy - r))
        points += _quad_points((cx, cy - r), (cx + r, cy - r), (cx + r, cy))
        # Wavy bottom edge
        points += _quad_points((cx + r, cy), (cx + r * 0.6, cy + r * 0.9), (cx, cy + r * 0.75))
        points += _quad_points((cx, cy + r * 0.75), (cx - r * 0.6, cy + r * 0.9), (cx - r, cy))
        drawer.draw_polygon(points, ramp.base)
        drawer.draw_ellipse(cx - r * 0.25, cy - r * 0.25, r * 0.7, r * 0.5, ramp.light2)

    def draw_dragon(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                    enemy_id: str, appearance: Mapping[str, Any]) -> None:
        r *= 1.1
        for side in (-1, 1):
            drawer.draw_polygon([
                (cx + side * r * 1.2, cy - r * 0.2),
                (cx + side * r * 0.2, cy - r * 0.6),
                (cx + side * r * 0.4, cy + r * 0.2),
            ], ramp.dark1)
        drawer.draw_ellipse(cx, cy + r * 0.15, r * 1.4, r * 1.1, ramp.base)
        self.shader.apply_cel_shade_circle(drawer, cx, cy - r * 0.45, r * 0.3, ramp)
        # Belly
        drawer.draw_ellipse(cx, cy + r * 0.2, r * 0.7, r * 0.5, ramp.light2)

    def draw_elemental(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                       enemy_id: str, appearance: Mapping[str, Any]) -> None:
        self.shader.apply_cel_shade_circle(drawer, cx, cy, r * 1.2, ramp, light_direction="center")
        for x1, y1, x2, y2 in _rays(cx, cy, 6, r * 0.8, r * 1.4):
            drawer.draw_line(x1, y1, x2, y2, ramp.light1, thickness=3)

    def draw_insectoid(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                       enemy_id: str, appearance: Mapping[str, Any]) -> None:
        body_w, body_h = r * 1.8, r * 0.8
        left = cx - body_w / 2
        for i in range(6):
            drawer.draw_rect(left + i * body_w / 5 - 2, cy + body_h / 2, 4, r * 0.6, ramp.dark1)
        self.shader.apply_cel_shade(drawer, left, cy - body_h / 2, body_w, body_h, ramp)
        self.shader.apply_cel_shade_circle(drawer, left, cy, r * 0.4, ramp)

    def draw_beast(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                   enemy_id: str, appearance: Mapping[str, Any]) -> None:
        for offset in (-0.8, -0.4, 0.4, 0.8):
            drawer.draw_rect(cx + offset * r - 3, cy + r * 0.8, 6, r * 0.5, ramp.dark1)
        drawer.draw_ellipse(cx, cy + r * 0.2, r * 2.4, r * 1.4, ramp.base)
        self.shader.apply_cel_shade_circle(drawer, cx, cy - r * 0.3, r * 0.5, ramp)
        if "wendigo" in enemy_id:
            drawer.draw_rect(cx - r * 0.2, cy - r * 0.8, 4, r * 0.4, ANTLER_COLOR)
            drawer.draw_rect(cx + r * 0.2, cy - r * 0.8, 4, r * 0.4, ANTLER_COLOR)

    def draw_undead(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                    enemy_id: str, appearance: Mapping[str, Any]) -> None:
        drawer.draw_circle(cx, cy, r, ramp.base, UNDEAD_ALPHA)
        if "lich" in enemy_id or "death_knight" in enemy_id:
            for ring in range(3):
                drawer.draw_circle_outline(cx, cy, r - ring, ARMOR_RING_COLOR)
        elif "ghost" in enemy_id or "banshee" in enemy_id:
            for x1, y1, x2, y2 in _rays(cx, cy, 8, r * 0.9, r * 1.1):
                drawer.draw_line(x1, y1, x2, y2, ramp.light1)

    def draw_mechanical(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                        enemy_id: str, appearance: Mapping[str, Any]) -> None:
        self.shader.apply_cel_shade(drawer, cx - r, cy - r, r * 2, r * 2, ramp)
        rivet = r * 0.3
        for dx, dy in ((-0.8, -0.8), (0.5, -0.8), (-0.8, 0.5), (0.5, 0.5)):
            drawer.draw_rect(cx + dx * r, cy + dy * r, rivet, rivet, ramp.dark2)
        # Core
        drawer.draw_circle(cx, cy, r * 0.4, ramp.light2)

    def draw_humanoid(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                      enemy_id: str, appearance: Mapping[str, Any]) -> None:
        head_r = r * 0.4
        torso_w, torso_h = r * 0.8, r * 0.9
        arm_w, arm_h = r * 0.25, r * 0.6
        leg_w, leg_h = r * 0.3, r * 0.7
        head_y = cy - torso_h / 2
        arm_y = cy - torso_h / 8

        skin = colors.parse_color(appearance.get("skin_tone"), colors.lighten(ramp.base, 0.3))
        armor = colors.parse_color(appearance.get("armor_color"), colors.darken(ramp.base, 0.2))
        armor_ramp = self.shader.create_cel_shade_palette(armor, "leather")
        skin_ramp = self.shader.create_cel_shade_palette(skin, "skin")

        drawer.draw_rect(cx - torso_w / 2, cy + torso_h / 2, leg_w, leg_h, armor_ramp.dark1)
        drawer.draw_rect(cx + torso_w / 2 - leg_w, cy + torso_h / 2, leg_w, leg_h, armor_ramp.dark1)
        self.shader.apply_cel_shade(drawer, cx - torso_w / 2, cy - torso_h / 4, torso_w, torso_h, armor_ramp)
        drawer.draw_rect(cx - torso_w / 2 - arm_w, arm_y, arm_w, arm_h, armor_ramp.base)
        drawer.draw_rect(cx + torso_w / 2, arm_y, arm_w, arm_h, armor_ramp.base)
        self.shader.apply_cel_shade_circle(drawer, cx, head_y, head_r, skin_ramp)

        if "goblin" in enemy_id:
            for side in (-1, 1):
                drawer.draw_polygon([
                    (cx + side * head_r, head_y),
                    (cx + side * head_r * 2.2, head_y - head_r * 0.3),
                    (cx + side * head_r, head_y + head_r * 0.3),
                ], skin)
            drawer.draw_ellipse(cx, head_y + head_r * 0.1, head_r * 0.3, head_r * 0.2, colors.darken(skin, 0.2))

        if "orc" in enemy_id or "war_lord" in enemy_id or "champion" in enemy_id:
            tusk_y = head_y + head_r * 0.2
            drawer.draw_rect(cx - head_r * 0.4, tusk_y, max(1, head_r * 0.2), max(1, head_r * 0.3), BONE_COLOR)
            drawer.draw_rect(cx + head_r * 0.2, tusk_y, max(1, head_r * 0.2), max(1, head_r * 0.3), BONE_COLOR)
            drawer.draw_rect(cx - head_r * 0.8, head_y - head_r * 0.3, head_r * 1.6, max(1, head_r * 0.2),
                             colors.darken(skin, 0.3))

        if "dark_knight" in enemy_id:
            drawer.draw_rect(cx - head_r * 1.1, head_y - head_r * 0.4, head_r * 2.2, head_r * 1.4,
                             colors.darken(armor, 0.3))
            # Visor slit
            drawer.draw_rect(cx - head_r * 0.3, head_y - head_r * 0.1, head_r * 0.6, max(1, head_r * 0.15), 0x000000)
            blade_x = cx + torso_w / 2 + arm_w * 0.2
            drawer.draw_rect(blade_x, arm_y, max(1, arm_w * 0.4), r * 1.2, STEEL_COLOR)
            drawer.draw_rect(blade_x, cy + r * 0.8, max(1, arm_w * 0.4), max(1, r * 0.2), WOOD_COLOR)

        if "archer" in enemy_id or "slinger" in enemy_id:
            bow_x = cx + torso_w / 2
            drawer.draw_rect(bow_x, arm_y, max(1, arm_w * 0.3), r, WOOD_COLOR)
            drawer.draw_line(bow_x, arm_y, bow_x + arm_w * 0.3, arm_y + r, 0xFFFFFF)

        if "shaman" in enemy_id:
            staff_x = cx + torso_w / 2
            drawer.draw_rect(staff_x, arm_y, max(1, arm_w * 0.2), r * 1.3, WOOD_COLOR)
            drawer.draw_circle(staff_x + arm_w * 0.1, arm_y, head_r * 0.3, colors.lighten(ramp.base, 0.5))

    def draw_creature(self, drawer: PixelDrawer, cx: float, cy: float, r: float, ramp: CelShadePalette,
                      enemy_id: str, appearance: Mapping[str, Any]) -> None:
        self.shader.apply_cel_shade_circle(drawer, cx, cy, r, ramp)

    def draw_eyes(self, drawer: PixelDrawer, cx: float, cy: float, r: float) -> None:
        eye = max(2.0, r * 0.15)
        for side in (-1, 1):
            ex, ey = cx + side * r * 0.4, cy - r * 0.2
            drawer.draw_circle(ex, ey, eye, EYE_WHITE)
            drawer.draw_circle(ex, ey, eye * 0.6, PUPIL_COLOR)
