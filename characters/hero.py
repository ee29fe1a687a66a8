"""
Higher-detail hero sprites with realistic proportions.

Each class has a style (armour/cloth/accent colours, helmet, weapon,
armour style). Heroes go through the same render pipeline as the chibi
sprites, but finish with a selective outline: edge pixels are tinted
with a darkened copy of the colour they border instead of black.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from settings import GENERATOR_VERSION, HERO_SIZE
from engine import colors
from engine.drawer import PixelDrawer
from engine.error_handler import logger
from engine.glow import GlowRenderer
from engine.proportions import ProportionManager
from engine.rng import SeededRNG
from engine.shading import MaterialShader
from engine.textures import TextureGenerator
from characters.paladin import SpriteResult
from characters.pipeline import RenderPipeline, RenderStage


@dataclass(frozen=True)
class ClassStyle:
    armor_color: int
    cloth_color: int
    accent_color: int
    has_helmet: bool
    weapon: str
    armor_style: str


CLASS_STYLES: Dict[str, ClassStyle] = {
    "paladin": ClassStyle(0xC0C0C0, 0x2C3E50, 0x4169E1, True, "sword", "plate"),
    "warrior": ClassStyle(0x8B4513, 0x4A4A4A, 0xA0522D, False, "axe", "leather"),
    "mage": ClassStyle(0x1A237E, 0x3949AB, 0x5C6BC0, False, "staff", "robe"),
    "rogue": ClassStyle(0x2C2C2C, 0x424242, 0x616161, False, "dagger", "leather"),
    "druid": ClassStyle(0x2E7D32, 0x4CAF50, 0x66BB6A, False, "staff", "cloth"),
    "priest": ClassStyle(0xFFFFFF, 0xF5F5F5, 0xFFD700, False, "staff", "robe"),
    "warlock": ClassStyle(0x4A148C, 0x6A1B9A, 0x9C27B0, False, "staff", "robe"),
    "hunter": ClassStyle(0x8B7355, 0x6B8E23, 0x9ACD32, False, "axe", "leather"),
    "shaman": ClassStyle(0x4682B4, 0x2F4F4F, 0x00CED1, False, "staff", "robe"),
}

DEFAULT_CLASS = "paladin"
DEFAULT_SKIN = 0xFFDBAC
DEFAULT_HAIR = 0x8B4513
DEFAULT_EYES = 0x4A90E2
WOOD_COLOR = 0x6D4C41

# Body uses this share of the canvas height
BODY_FILL = 0.85
GROUND_MARGIN = 16
ARM_RATIO = 0.22


@dataclass(frozen=True)
class HeroLayout:
    center_x: int
    ground_y: int
    leg_y: int
    leg_height: int
    torso_y: int
    torso_height: int
    torso_width: int
    head_y: int
    head_height: int
    arm_length: int
    arm_width: int


class HeroSpriteGenerator:
    """Realistic-proportion class sprites."""

    def __init__(self, size: int = HERO_SIZE, selout: bool = True) -> None:
        self.size = size
        self.selout = selout
        self.shader = MaterialShader()
        self.glow = GlowRenderer()

    @staticmethod
    def resolve_class(hero_data: Optional[Mapping[str, Any]], hero_id: Optional[str]) -> str:
        appearance = (hero_data or {}).get("appearance") or {}
        hero_class = appearance.get("class") or (hero_id.split("_")[0] if hero_id else None)
        if hero_class not in CLASS_STYLES:
            if hero_class:
                logger.debug(f"Unknown hero class {hero_class!r}; using {DEFAULT_CLASS}")
            hero_class = DEFAULT_CLASS
        return hero_class

    def layout(self) -> HeroLayout:
        total = math.floor(self.size * BODY_FILL)
        proportions = ProportionManager(total, style="realistic")
        ground_y = self.size - GROUND_MARGIN
        leg_height = proportions.limb_height
        torso_height = proportions.torso_height
        head_height = proportions.head_height
        leg_y = ground_y - leg_height
        torso_y = leg_y - torso_height
        arm_length = round(total * ARM_RATIO)
        return HeroLayout(
            center_x=self.size // 2,
            ground_y=ground_y,
            leg_y=leg_y,
            leg_height=leg_height,
            torso_y=torso_y,
            torso_height=torso_height,
            torso_width=round(torso_height * 0.8),
            head_y=torso_y - head_height,
            head_height=head_height,
            arm_length=arm_length,
            arm_width=max(3, round(arm_length * 0.25)),
        )

    def generate(
        self,
        hero_data: Optional[Mapping[str, Any]] = None,
        hero_id: Optional[str] = None,
        until: Optional[RenderStage] = None,
    ) -> SpriteResult:
        hero_data = hero_data or {}
        appearance = hero_data.get("appearance") or {}
        hero_class = self.resolve_class(hero_data, hero_id)
        style = CLASS_STYLES[hero_class]
        rng = SeededRNG(hero_data.get("seed"))
        textures = TextureGenerator(rng.seed)

        skin = colors.parse_color(appearance.get("skin_color", DEFAULT_SKIN), DEFAULT_SKIN)
        hair = colors.parse_color(appearance.get("hair_color", DEFAULT_HAIR), DEFAULT_HAIR)
        eyes = colors.parse_color(appearance.get("eye_color", DEFAULT_EYES), DEFAULT_EYES)
        lay = self.layout()

        pipeline = RenderPipeline(
            lay.center_x,
            outline=self._outline if self.selout else None,
            outline_thickness=1,
        )
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_legs(d, lay, skin, style))
        pipeline.add(RenderStage.BASE_BODY, lambda d: self.draw_torso(d, lay, style, textures))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_clothing(d, lay, style))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_arm(d, lay, skin, style))
        pipeline.add(RenderStage.ARMOR, lambda d: self.draw_head(d, lay, skin, hair, eyes, style))
        pipeline.add(RenderStage.ASYMMETRIC_EQUIPMENT, lambda d: self.draw_weapon(d, lay, style, hero_class))

        drawer = PixelDrawer.create(self.size, self.size)
        pipeline.run(drawer, until=until)

        metadata = {
            "seed": rng.seed,
            "type": "hero",
            "class": hero_class,
            "id": hero_id,
            "equipment": {
                "weapon": style.weapon,
                "armor": style.armor_style,
                "helmet": style.has_helmet,
            },
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "version": GENERATOR_VERSION,
        }
        return SpriteResult(canvas=drawer.surface, metadata=metadata)

    def _outline(self, drawer: PixelDrawer) -> None:
        drawer.draw_selective_outline(darken_factor=0.5, alpha=200)

    # ------------------------------------------------------------------
    # Left half
    # ------------------------------------------------------------------

    def draw_legs(self, drawer: PixelDrawer, lay: HeroLayout, skin: int, style: ClassStyle) -> None:
        cx = lay.center_x
        leg_width = max(3, round(lay.leg_height * 0.25))
        boot_height = max(2, round(lay.leg_height * 0.15))
        x = cx - leg_width - 1
        trousers = self.shader.create_cel_shade_palette(style.cloth_color, "cloth")
        self.shader.apply_cel_shade(drawer, x, lay.leg_y, leg_width, lay.leg_height - boot_height, trousers)

        boots_material = "metal" if style.armor_style == "plate" else "leather"
        boot_color = style.armor_color if style.armor_style == "plate" else colors.darken(style.armor_color, 0.3)
        boots = self.shader.create_cel_shade_palette(boot_color, boots_material)
        # Toes point outward
        self.shader.apply_cel_shade(drawer, x - 2, lay.ground_y - boot_height, leg_width + 2, boot_height, boots)

    def draw_torso(self, drawer: PixelDrawer, lay: HeroLayout, style: ClassStyle, textures: TextureGenerator) -> None:
        x = lay.center_x - lay.torso_width / 2
        if style.armor_style == "plate":
            material, base = "metal", style.armor_color
        elif style.armor_style == "leather":
            material, base = "leather", style.armor_color
        else:
            material, base = "cloth", style.cloth_color
        ramp = self.shader.create_cel_shade_palette(base, material)
        self.shader.apply_cel_shade(drawer, x, lay.torso_y, lay.torso_width, lay.torso_height, ramp)

        ix = math.floor(x)
        if material == "metal":
            textures.apply_metal_texture(drawer, ix, lay.torso_y, lay.torso_width, lay.torso_height, base)
        elif material == "leather":
            textures.apply_leather_texture(drawer, ix, lay.torso_y, lay.torso_width, lay.torso_height, base)
        else:
            textures.apply_cloth_texture(drawer, ix, lay.torso_y, lay.torso_width, lay.torso_height, base)

    def draw_clothing(self, drawer: PixelDrawer, lay: HeroLayout, style: ClassStyle) -> None:
        cx = lay.center_x
        half = lay.torso_width / 2
        bottom = lay.torso_y + lay.torso_height

        if style.armor_style in ("robe", "cloth"):
            # Skirt flaring over the legs
            hem = lay.leg_y + round(lay.leg_height * (0.75 if style.armor_style == "robe" else 0.35))
            flare = half + max(2, round(lay.leg_height * 0.12))
            skirt = [(cx - half, bottom - 1), (cx + half, bottom - 1), (cx + flare, hem), (cx - flare, hem)]
            drawer.draw_polygon(skirt, style.cloth_color)
            drawer.draw_rect(cx - flare, hem - 2, flare * 2, 2, style.accent_color)

        # Belt
        drawer.draw_rect(cx - half, bottom - 3, lay.torso_width, 3, style.accent_color)
        drawer.draw_rect(cx - 1, bottom - 3, 2, 3, colors.lighten(style.accent_color, 0.4))

        if style.armor_style == "plate":
            # Pauldron and plate segmentation
            pauldron = self.shader.create_cel_shade_palette(style.armor_color, "metal")
            radius = max(3, lay.arm_width // 2 + 2)
            self.shader.apply_cel_shade_circle(drawer, cx - half, lay.torso_y + 2, radius, pauldron)
            step = max(4, lay.torso_height // 4)
            for y in range(lay.torso_y + step, bottom - 3, step):
                drawer.draw_line(cx - half + 1, y, cx + half - 2, y, colors.darken(style.armor_color, 0.4))
            drawer.draw_line(cx, lay.torso_y + 1, cx, bottom - 4, style.accent_color)

    def draw_arm(self, drawer: PixelDrawer, lay: HeroLayout, skin: int, style: ClassStyle) -> None:
        x = lay.center_x - lay.torso_width / 2 - lay.arm_width
        y = lay.torso_y + 2
        sleeve_color = style.armor_color if style.armor_style in ("plate", "leather") else style.cloth_color
        material = {"plate": "metal", "leather": "leather"}.get(style.armor_style, "cloth")
        sleeve = self.shader.create_cel_shade_palette(sleeve_color, material)
        self.shader.apply_cel_shade(drawer, x, y, lay.arm_width, lay.arm_length, sleeve)

        hand = self.shader.create_cel_shade_palette(skin, "skin")
        self.shader.apply_cel_shade_circle(
            drawer, x + lay.arm_width / 2, y + lay.arm_length + 1, max(1, lay.arm_width // 2), hand
        )

    def draw_head(
        self, drawer: PixelDrawer, lay: HeroLayout, skin: int, hair: int, eyes: int, style: ClassStyle
    ) -> None:
        cx = lay.center_x
        radius = max(2, math.floor(lay.head_height * 0.9) // 2 + 1)
        cy = lay.head_y + lay.head_height / 2
        # Neck
        drawer.draw_rect(cx - 2, cy + radius - 2, 4, lay.torso_y - (cy + radius) + 4, colors.darken(skin, 0.15))

        face = self.shader.create_cel_shade_palette(skin, "skin")
        self.shader.apply_cel_shade_circle(drawer, cx, cy, radius, face)

        if style.has_helmet:
            helm = self.shader.create_cel_shade_palette(style.armor_color, "metal")
            top = math.floor(cy - radius - 1)
            self.shader.apply_cel_shade(drawer, cx - radius - 1, top, 2 * radius + 3, radius + 2, helm)
            drawer.draw_line(cx - radius, cy, cx + radius, cy, 0x000000)
            drawer.draw_rect(cx - 1, top - 1, 2, 2, style.accent_color)
        else:
            drawer.draw_rect(cx - radius, cy - radius, 2 * radius + 1, max(2, radius // 2 + 1), hair)
            drawer.draw_rect(cx - radius - 1, cy - radius + 1, 2, radius, hair)

        eye_y = math.floor(cy) + (1 if style.has_helmet else 0)
        eye_x = cx - max(2, radius // 2)
        if not style.has_helmet:
            drawer.set_pixel(eye_x - 1, eye_y, 0xFFFFFF)
        drawer.set_pixel(eye_x, eye_y, eyes)

    # ------------------------------------------------------------------
    # Right hand
    # ------------------------------------------------------------------

    def draw_weapon(self, drawer: PixelDrawer, lay: HeroLayout, style: ClassStyle, hero_class: str) -> None:
        hand_x = lay.center_x + lay.torso_width // 2 + lay.arm_width // 2
        hand_y = lay.torso_y + 2 + lay.arm_length
        length = round(lay.arm_length * 1.6)

        if style.weapon == "sword":
            blade_top = hand_y - length
            drawer.draw_rect(hand_x - 1, blade_top, 3, length - 4, 0xE0E0E0)
            drawer.draw_line(hand_x, blade_top, hand_x, hand_y - 6, 0xFFFFFF)
            drawer.draw_rect(hand_x - 4, hand_y - 4, 9, 2, style.accent_color)
            drawer.draw_rect(hand_x - 1, hand_y - 2, 3, 5, WOOD_COLOR)
        elif style.weapon == "axe":
            top = hand_y - length
            drawer.draw_line(hand_x, top, hand_x, hand_y + 3, WOOD_COLOR, thickness=2)
            head = [(hand_x + 1, top), (hand_x + 9, top - 3), (hand_x + 9, top + 9), (hand_x + 1, top + 6)]
            drawer.draw_polygon(head, 0xB0B0B0)
            drawer.draw_line(hand_x + 9, top - 3, hand_x + 9, top + 9, 0xFFFFFF)
        elif style.weapon == "dagger":
            drawer.draw_rect(hand_x - 1, hand_y - 12, 2, 10, 0xD0D0D0)
            drawer.draw_rect(hand_x - 3, hand_y - 3, 6, 2, style.accent_color)
            drawer.draw_rect(hand_x - 1, hand_y - 1, 2, 4, WOOD_COLOR)
        else:
            top = hand_y - length
            drawer.draw_line(hand_x, top, hand_x, lay.ground_y, WOOD_COLOR, thickness=2)
            drawer.draw_circle(hand_x, top - 2, 3, style.accent_color)
            glow = self.glow.get_class_glow(hero_class)
            self.glow.render_glow(drawer, hand_x, top - 2, 4, glow.color, glow.intensity, mask_to_existing=True)
