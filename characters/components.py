"""
Anchored character components.

Each body part has a fixed anchor (where it sits, as a fraction of the
character box), a pivot (its rotation origin) and a relative size. The
draw functions paint one part and return a ComponentMetadata describing
where it landed, which animation code uses to attach and rotate parts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional

from engine import colors
from engine.drawer import PixelDrawer
from engine.error_handler import logger


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


@dataclass(frozen=True)
class ComponentDefinition:
    anchor: Point
    pivot: Point
    size: Size


COMPONENT_DEFINITIONS: Dict[str, ComponentDefinition] = {
    "HEAD": ComponentDefinition(Point(0.5, 0.2), Point(0.5, 0.5), Size(0.4, 0.25)),
    "TORSO": ComponentDefinition(Point(0.5, 0.5), Point(0.5, 0.5), Size(0.5, 0.35)),
    "ARM_LEFT": ComponentDefinition(Point(0.2, 0.4), Point(0.5, 0.1), Size(0.15, 0.3)),    # pivot at shoulder
    "ARM_RIGHT": ComponentDefinition(Point(0.8, 0.4), Point(0.5, 0.1), Size(0.15, 0.3)),
    "LEG_LEFT": ComponentDefinition(Point(0.4, 0.7), Point(0.5, 0.1), Size(0.15, 0.25)),   # pivot at hip
    "LEG_RIGHT": ComponentDefinition(Point(0.6, 0.7), Point(0.5, 0.1), Size(0.15, 0.25)),
    "WEAPON": ComponentDefinition(Point(0.75, 0.3), Point(0.5, 0.9), Size(0.1, 0.5)),      # pivot at grip
    "SHIELD": ComponentDefinition(Point(0.25, 0.4), Point(0.5, 0.5), Size(0.2, 0.35)),
}


@dataclass(frozen=True)
class ComponentMetadata:
    """Placement of one drawn component; never mutated after creation."""
    type: str
    anchor: Point
    pivot: Point
    size: Size


@dataclass(frozen=True)
class ComponentOptions:
    """Every option the component painters understand."""
    armor_color: int = 0xC0C0C0
    helmet_color: int = 0xC0C0C0
    visor_color: Optional[int] = None
    eye_color: int = 0xFFFF00
    show_eyes: bool = False
    decoration: bool = False
    decoration_color: int = 0x4169E1
    shoulder_color: Optional[int] = None
    emblem: bool = False
    emblem_color: int = 0x4169E1


DEFAULT_OPTIONS = ComponentOptions()


def _place(name: str, center_x: float, center_y: float, char_width: float, char_height: float) -> Point:
    d = COMPONENT_DEFINITIONS[name]
    return Point(center_x + (d.anchor.x - 0.5) * char_width, center_y + (d.anchor.y - 0.5) * char_height)


def _metadata(name: str, anchor: Point, size: Size) -> ComponentMetadata:
    d = COMPONENT_DEFINITIONS[name]
    pivot = Point(anchor.x + (d.pivot.x - 0.5) * size.width, anchor.y + (d.pivot.y - 0.5) * size.height)
    return ComponentMetadata(type=name, anchor=anchor, pivot=pivot, size=size)


def _box(name: str, char_width: float, char_height: float) -> Size:
    d = COMPONENT_DEFINITIONS[name]
    return Size(char_width * d.size.width, char_height * d.size.height)


def generate_head(
    drawer: PixelDrawer,
    center_x: float,
    center_y: float,
    char_width: float,
    char_height: float,
    head_type: str = "default",
    skin_color: int = 0xFFDBAC,
    options: ComponentOptions = DEFAULT_OPTIONS,
) -> ComponentMetadata:
    d = COMPONENT_DEFINITIONS["HEAD"]
    x, y = _place("HEAD", center_x, center_y, char_width, char_height)
    size = min(char_width * d.size.width, char_height * d.size.height)

    drawer.draw_circle(x, y, size / 2, skin_color)

    if head_type == "helmet":
        helmet = size * 1.1
        drawer.draw_rect(x - helmet / 2, y - helmet / 2, helmet, helmet * 0.8, options.helmet_color)
        if options.visor_color is not None:
            drawer.draw_rect(x - helmet * 0.4, y - helmet * 0.2, helmet * 0.8, helmet * 0.3, options.visor_color, 153)
        drawer.draw_rect(
            x - helmet * 0.35, y - helmet * 0.35, helmet * 0.4, helmet * 0.25,
            colors.lighten(options.helmet_color, 0.4), 128,
        )

    if head_type != "helmet" or options.show_eyes:
        eye_radius = max(0.5, size * 0.08)
        drawer.draw_circle(x - size * 0.2, y - size * 0.1, eye_radius, options.eye_color, 204)
        drawer.draw_circle(x + size * 0.2, y - size * 0.1, eye_radius, options.eye_color, 204)

    return _metadata("HEAD", Point(x, y), Size(size, size))


def generate_torso(
    drawer: PixelDrawer,
    center_x: float,
    center_y: float,
    char_width: float,
    char_height: float,
    armor_type: str = "plate",
    base_color: int = 0x2C3E50,
    options: ComponentOptions = DEFAULT_OPTIONS,
) -> ComponentMetadata:
    x, y = _place("TORSO", center_x, center_y, char_width, char_height)
    width, height = _box("TORSO", char_width, char_height)

    drawer.draw_rect(x - width / 2, y - height / 2, width, height, base_color)

    if armor_type != "none":
        aw, ah = width * 0.9, height * 0.85
        armor = options.armor_color
        drawer.draw_rect(x - aw / 2, y - ah / 2, aw, ah, armor)
        drawer.draw_rect(x - aw * 0.4, y - ah * 0.3, aw * 0.5, ah * 0.4, colors.lighten(armor, 0.4), 153)
        drawer.draw_rect(x + aw * 0.1, y + ah * 0.2, aw * 0.5, ah * 0.4, colors.darken(armor, 0.3), 128)
        if options.decoration:
            drawer.draw_rect_outline(x - aw * 0.35, y - ah * 0.2, aw * 0.7, ah * 0.4, options.decoration_color, alpha=128)

    if armor_type in ("plate", "heavy"):
        shoulder = options.shoulder_color if options.shoulder_color is not None else options.armor_color
        sw, sh = width * 0.3, height * 0.2
        drawer.draw_rect(x - width / 2 - sw * 0.3, y - height / 2, sw, sh, shoulder)
        drawer.draw_rect(x + width / 2 - sw * 0.7, y - height / 2, sw, sh, shoulder)
        highlight = colors.lighten(shoulder, 0.4)
        drawer.draw_circle(x - width * 0.35, y - height * 0.1, sw * 0.2, highlight, 178)
        drawer.draw_circle(x + width * 0.35, y - height * 0.1, sw * 0.2, highlight, 178)

    return _metadata("TORSO", Point(x, y), Size(width, height))


def generate_arm(
    drawer: PixelDrawer,
    center_x: float,
    center_y: float,
    char_width: float,
    char_height: float,
    side: str = "left",
    armor_type: str = "none",
    base_color: int = 0x2C3E50,
    options: ComponentOptions = DEFAULT_OPTIONS,
) -> ComponentMetadata:
    name = "ARM_RIGHT" if side == "right" else "ARM_LEFT"
    x, y = _place(name, center_x, center_y, char_width, char_height)
    width, height = _box(name, char_width, char_height)

    drawer.draw_rect(x - width / 2, y - height / 2, width, height, base_color)
    if armor_type != "none":
        aw, ah = width * 0.9, height * 0.8
        drawer.draw_rect(x - aw / 2, y - ah / 2, aw, ah, options.armor_color)
        drawer.draw_rect(x - aw * 0.4, y - ah * 0.4, aw * 0.5, ah * 0.3, colors.lighten(options.armor_color, 0.3), 128)

    return _metadata(name, Point(x, y), Size(width, height))


def generate_leg(
    drawer: PixelDrawer,
    center_x: float,
    center_y: float,
    char_width: float,
    char_height: float,
    side: str = "left",
    armor_type: str = "none",
    base_color: int = 0x2C3E50,
    options: ComponentOptions = DEFAULT_OPTIONS,
) -> ComponentMetadata:
    name = "LEG_RIGHT" if side == "right" else "LEG_LEFT"
    x, y = _place(name, center_x, center_y, char_width, char_height)
    width, height = _box(name, char_width, char_height)

    drawer.draw_rect(x - width / 2, y - height / 2, width, height, base_color)
    if armor_type != "none":
        aw, ah = width * 0.9, height * 0.85
        drawer.draw_rect(x - aw / 2, y - ah / 2, aw, ah, options.armor_color)

    return _metadata(name, Point(x, y), Size(width, height))


def generate_weapon(
    drawer: PixelDrawer,
    center_x: float,
    center_y: float,
    char_width: float,
    char_height: float,
    weapon_type: str = "sword",
    color: int = 0xE0E0E0,
) -> ComponentMetadata:
    x, y = _place("WEAPON", center_x, center_y, char_width, char_height)
    width, height = _box("WEAPON", char_width, char_height)
    top, bottom = y - height / 2, y + height / 2

    if weapon_type == "axe":
        drawer.draw_line(x, top, x, bottom, 0x8B4513, thickness=max(1, round(width * 0.3)))
        head = [(x, top), (x + width * 1.5, top - height * 0.05), (x + width * 1.5, top + height * 0.3), (x, top + height * 0.25)]
        drawer.draw_polygon(head, color)
    elif weapon_type == "staff":
        drawer.draw_line(x, top, x, bottom, 0x8B4513, thickness=max(1, round(width * 0.3)))
        drawer.draw_circle(x, top, max(1, width * 0.6), color)
    else:
        if weapon_type != "sword":
            logger.debug(f"Unknown weapon component {weapon_type!r}; drawing a sword")
        blade_bottom = top + height * 0.75
        drawer.draw_rect(x - width * 0.25, top, max(1, width * 0.5), blade_bottom - top, color)
        drawer.draw_rect(x - width, blade_bottom, width * 2, max(1, height * 0.05), 0x8B7355)
        drawer.draw_rect(x - width * 0.2, blade_bottom, max(1, width * 0.4), bottom - blade_bottom, 0x8B4513)
        # Metallic shine
        drawer.draw_rect(x - width * 0.05, y - height * 0.4, max(1, width * 0.03), height * 0.7,
                         colors.lighten(color, 0.5), 204)

    return _metadata("WEAPON", Point(x, y), Size(width, height))


def generate_shield(
    drawer: PixelDrawer,
    center_x: float,
    center_y: float,
    char_width: float,
    char_height: float,
    shield_type: str = "round",
    color: int = 0xC0C0C0,
    options: ComponentOptions = DEFAULT_OPTIONS,
) -> ComponentMetadata:
    x, y = _place("SHIELD", center_x, center_y, char_width, char_height)
    width, height = _box("SHIELD", char_width, char_height)
    highlight = colors.lighten(color, 0.4)

    if shield_type == "round":
        drawer.draw_circle(x, y, min(width, height) / 2, color)
        drawer.draw_circle(x - width * 0.2, y - height * 0.2, min(width, height) * 0.3, highlight, 153)
    else:
        drawer.draw_rect(x - width / 2, y - height / 2, width, height, color)
        drawer.draw_rect(x - width * 0.35, y - height * 0.35, width * 0.5, height * 0.4, highlight, 153)

    if options.emblem:
        drawer.draw_circle(x, y, min(width, height) * 0.2, options.emblem_color, 204)

    return _metadata("SHIELD", Point(x, y), Size(width, height))


def assemble_character(
    drawer: PixelDrawer,
    armor_type: str = "plate",
    weapon_type: Optional[str] = "sword",
    shield_type: Optional[str] = None,
    head_type: str = "default",
    base_color: int = 0x2C3E50,
    skin_color: int = 0xFFDBAC,
    options: ComponentOptions = DEFAULT_OPTIONS,
) -> Dict[str, ComponentMetadata]:
    """Draw a whole component character filling the canvas, back to front."""
    cx, cy = drawer.width / 2, drawer.height / 2
    w, h = drawer.width, drawer.height
    parts = {}
    for side in ("left", "right"):
        meta = generate_leg(drawer, cx, cy, w, h, side, armor_type, base_color, options)
        parts[meta.type] = meta
    parts["TORSO"] = generate_torso(drawer, cx, cy, w, h, armor_type, base_color, options)
    for side in ("left", "right"):
        meta = generate_arm(drawer, cx, cy, w, h, side, armor_type, base_color, options)
        parts[meta.type] = meta
    parts["HEAD"] = generate_head(drawer, cx, cy, w, h, head_type, skin_color, options)
    if shield_type:
        parts["SHIELD"] = generate_shield(drawer, cx, cy, w, h, shield_type, options.armor_color, options)
    if weapon_type:
        parts["WEAPON"] = generate_weapon(drawer, cx, cy, w, h, weapon_type)
    return parts
