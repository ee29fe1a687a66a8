"""
Ability icons.

A spell icon is the item icon plate tinted by spell type with a white
glyph on top. The glyph is chosen from keywords in the ability's id and
name, falling back to one per spell type.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pygame

from settings import ICON_SIZE
from engine import colors
from engine.drawer import PixelDrawer
from items.icons import draw_icon_plate

Point = Tuple[float, float]

GLYPH_COLOR = 0xFFFFFF
GLYPH_SHADOW = 0x000000


@dataclass(frozen=True)
class SpellColors:
    primary: int
    secondary: int
    accent: int


SPELL_TYPE_COLORS: Dict[str, SpellColors] = {
    "attack": SpellColors(0xFF4444, 0xFF8888, 0xFFFFFF),
    "heal": SpellColors(0x44FF44, 0x88FF88, 0xFFFFFF),
    "buff": SpellColors(0x4444FF, 0x8888FF, 0xFFFFFF),
    "debuff": SpellColors(0xFF44FF, 0xFF88FF, 0xFFFFFF),
    "aoe": SpellColors(0xFFAA44, 0xFFCC88, 0xFFFFFF),
    "dot": SpellColors(0xAA44FF, 0xCC88FF, 0xFFFFFF),
}

# Checked in order; first match wins
MOTIF_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("shield", re.compile(r"(shield|barrier|block|ward|aegis)")),
    ("heal", re.compile(r"(heal|renew|rejuvenation|regrowth|hymn|prayer|lay_on_hands|light)\b")),
    ("moon", re.compile(r"(moonkin_form|eclipse|starfall|starfire|moonfire)")),
    ("lightning", re.compile(r"(lightning|thunder|storm|chain_lightning)")),
    ("fire", re.compile(r"(fire|flame|pyro|combust|immolate|lava|inferno)")),
    ("frost", re.compile(r"(frost|ice|cold|freeze|blizzard|icy|snow)")),
    ("shadow", re.compile(r"(shadow|curse|agony|corruption|drain|haunt|vamp|affliction)")),
    ("dagger", re.compile(r"(backstab|stab|dagger|mutilate|eviscerate|envenom|sinister|shred|rip|rend|bleed)")),
    ("arrow", re.compile(r"(shot|arrow|aimed|steady|explosive_shot|chimera|wyvern)")),
    ("tree", re.compile(r"(tree_of_life)")),
    ("form", re.compile(r"(bear_form|cat_form|metamorphosis)")),
    ("totem", re.compile(r"(totem|shamanistic)")),
    ("sword", re.compile(r"(charge|kick|taunt|slam|strike|smite|judgment|crusader)")),
]

TYPE_MOTIFS = {"buff": "shield", "debuff": "shadow", "dot": "shadow", "aoe": "burst"}


def pick_spell_motif(ability_id: Optional[str], ability_data: Mapping[str, Any]) -> str:
    hay = f"{str(ability_id or '').lower()} {str(ability_data.get('name') or '').lower()}"
    spell_type = ability_data.get("type")
    for motif, pattern in MOTIF_PATTERNS:
        if pattern.search(hay):
            return motif
        # Healing types override keywords further down the list
        if motif == "heal" and spell_type in ("heal", "aoe_heal"):
            return "heal"
    return TYPE_MOTIFS.get(spell_type, "spark")


def _bezier(p0: Point, p1: Point, p2: Point, p3: Point, steps: int = 12) -> List[Point]:
    points = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        points.append((
            u ** 3 * p0[0] + 3 * u * u * t * p1[0] + 3 * u * t * t * p2[0] + t ** 3 * p3[0],
            u ** 3 * p0[1] + 3 * u * u * t * p1[1] + 3 * u * t * t * p2[1] + t ** 3 * p3[1],
        ))
    return points


class SpellIconGenerator:
    def __init__(self, size: int = ICON_SIZE) -> None:
        self.size = size

    def generate(self, ability_data: Mapping[str, Any], ability_id: Optional[str] = None) -> pygame.Surface:
        size = self.size
        drawer = PixelDrawer.create(size, size)
        palette = SPELL_TYPE_COLORS.get(ability_data.get("type") or "attack", SPELL_TYPE_COLORS["attack"])
        draw_icon_plate(drawer, size, palette.primary)
        self.draw_glyph(drawer, pick_spell_motif(ability_id, ability_data), palette)
        return drawer.surface

    def draw_glyph(self, drawer: PixelDrawer, motif: str, palette: SpellColors) -> None:
        """
        Draw a motif in white on its own layer, outline it in black, then
        composite it onto the plate. Accent details go on afterwards.
        """
        size = self.size
        cx = cy = size / 2
        glyph = PixelDrawer.create(size, size)
        accents = []

        if motif == "shield":
            w, h = size * 0.42, size * 0.52
            glyph.draw_polygon([
                (cx, cy - h / 2), (cx + w / 2, cy - h * 0.1), (cx + w * 0.35, cy + h * 0.35),
                (cx, cy + h / 2), (cx - w * 0.35, cy + h * 0.35), (cx - w / 2, cy - h * 0.1),
            ], GLYPH_COLOR)
            accents.append(lambda d: d.draw_line(cx, cy - h / 3, cx, cy + h / 3, palette.accent, thickness=2))
        elif motif == "heal":
            s = size * 0.18
            glyph.draw_rect(cx - s, cy - s * 3, s * 2, s * 6, GLYPH_COLOR)
            glyph.draw_rect(cx - s * 3, cy - s, s * 6, s * 2, GLYPH_COLOR)
        elif motif == "lightning":
            glyph.draw_polygon([
                (cx + size * 0.08, cy - size * 0.28), (cx - size * 0.06, cy - size * 0.02),
                (cx + size * 0.04, cy - size * 0.02), (cx - size * 0.10, cy + size * 0.28),
                (cx + size * 0.12, cy + size * 0.02), (cx, cy + size * 0.02),
            ], GLYPH_COLOR)
        elif motif == "fire":
            bottom, top = (cx, cy + size * 0.30), (cx, cy - size * 0.30)
            outline = [bottom]
            outline += _bezier(bottom, (cx - size * 0.18, cy + size * 0.10), (cx - size * 0.20, cy - size * 0.10), top)
            outline += _bezier(top, (cx + size * 0.18, cy - size * 0.12), (cx + size * 0.22, cy + size * 0.10), bottom)
            glyph.draw_polygon(outline, GLYPH_COLOR)
            accents.append(lambda d: d.draw_circle(cx + size * 0.10, cy - size * 0.05, size * 0.04, palette.accent))
        elif motif == "frost":
            r = size * 0.22
            for i in range(6):
                a = i * math.pi / 3
                glyph.draw_line(cx, cy, cx + math.cos(a) * r, cy + math.sin(a) * r, GLYPH_COLOR, thickness=3)
        elif motif == "shadow":
            glyph.draw_circle(cx, cy, size * 0.22, GLYPH_COLOR)

            def eyes(d: PixelDrawer) -> None:
                d.draw_circle(cx - size * 0.08, cy - size * 0.04, size * 0.03, palette.accent)
                d.draw_circle(cx + size * 0.08, cy - size * 0.04, size * 0.03, palette.accent)
            accents.append(eyes)
        elif motif == "dagger":
            glyph.draw_polygon([
                (cx + size * 0.18, cy - size * 0.22), (cx - size * 0.02, cy - size * 0.02),
                (cx + size * 0.02, cy + size * 0.02), (cx + size * 0.22, cy - size * 0.18),
            ], GLYPH_COLOR)
            glyph.draw_rect(cx - size * 0.12, cy + size * 0.10, size * 0.18, size * 0.08, GLYPH_COLOR)
        elif motif == "arrow":
            tip = (cx + size * 0.18, cy - size * 0.18)
            for start in ((cx - size * 0.20, cy + size * 0.16), (cx + size * 0.08, tip[1]), (tip[0], cy - size * 0.08)):
                glyph.draw_line(start[0], start[1], tip[0], tip[1], GLYPH_COLOR, thickness=3)
        elif motif == "sword":
            glyph.draw_polygon([
                (cx, cy - size * 0.26), (cx + size * 0.06, cy - size * 0.06), (cx - size * 0.06, cy - size * 0.06),
            ], GLYPH_COLOR)
            glyph.draw_rect(cx - size * 0.04, cy - size * 0.06, size * 0.08, size * 0.30, GLYPH_COLOR)
            glyph.draw_rect(cx - size * 0.14, cy + size * 0.18, size * 0.28, size * 0.04, GLYPH_COLOR)
            glyph.draw_rect(cx - size * 0.04, cy + size * 0.22, size * 0.08, size * 0.10, GLYPH_COLOR)
        elif motif == "totem":
            glyph.draw_rect(cx - size * 0.08, cy - size * 0.22, size * 0.16, size * 0.44, GLYPH_COLOR)
            glyph.draw_rect(cx - size * 0.14, cy + size * 0.10, size * 0.28, size * 0.08, GLYPH_COLOR)
        elif motif == "form":
            # Paw print
            base_y = cy + size * 0.10
            glyph.draw_circle(cx, base_y, size * 0.12, GLYPH_COLOR)
            for dx, dy in ((-0.12, -0.14), (-0.04, -0.18), (0.04, -0.18), (0.12, -0.14)):
                glyph.draw_circle(cx + size * dx, base_y + size * dy, size * 0.07, GLYPH_COLOR)
        elif motif == "tree":
            glyph.draw_circle(cx, cy - size * 0.08, size * 0.16, GLYPH_COLOR)
            glyph.draw_circle(cx - size * 0.14, cy - size * 0.02, size * 0.12, GLYPH_COLOR)
            glyph.draw_circle(cx + size * 0.14, cy - size * 0.02, size * 0.12, GLYPH_COLOR)
            glyph.draw_rect(cx - size * 0.05, cy + size * 0.08, size * 0.10, size * 0.18, GLYPH_COLOR)
        elif motif == "moon":
            r = size * 0.18
            glyph.draw_circle(cx, cy, r, GLYPH_COLOR)

            def crescent(d: PixelDrawer) -> None:
                # Carve with the plate colour, then a small star
                d.draw_circle(cx + r * 0.55, cy - r * 0.10, r, colors.darken(palette.primary, 0.55))
                d.draw_rect(cx - r * 0.95, cy - r * 0.75, 2, 2, palette.accent)
            accents.append(crescent)
        elif motif == "burst":
            r = size * 0.26
            for i in range(10):
                a = i * math.pi * 2 / 10
                glyph.draw_line(cx, cy, cx + math.cos(a) * r, cy + math.sin(a) * r, GLYPH_COLOR, thickness=3)
        else:
            glyph.draw_circle(cx, cy, size * 0.18, GLYPH_COLOR)

        glyph.draw_outline(GLYPH_SHADOW, 2)
        drawer.blit(glyph)
        for accent in accents:
            accent(drawer)
