"""
Town building sprites.

Buildings are drawn as a textured wall body under a gable roof, with
symmetric window rows and a centred door. Each one is anchored at its
bottom centre and records the door's world-space rectangle so enterable
buildings can be hit-tested.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pygame

from engine import colors
from engine.drawer import PixelDrawer
from engine.error_handler import logger
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache


@dataclass(frozen=True)
class BuildingType:
    wall: int
    roof: int
    door: int
    window: int
    min_width: int
    max_width: int
    min_height: int
    max_height: int


BUILDING_TYPES: Dict[str, BuildingType] = {
    "residential": BuildingType(0xD4A574, 0x8B4513, 0x654321, 0x87CEEB, 64, 96, 80, 120),
    "commercial": BuildingType(0xC85A4D, 0xA83A2D, 0x654321, 0xFFD700, 80, 128, 96, 140),
    "civic": BuildingType(0x9E9E9E, 0x757575, 0x654321, 0xE0E0E0, 96, 160, 120, 180),
    "defensive": BuildingType(0x616161, 0x424242, 0x2A2A2A, 0x4A4A4A, 80, 120, 140, 200),
}
DEFAULT_BUILDING_TYPE = "residential"

ROOF_OVERHANG = 12
MAX_ROOF_HEIGHT = 32
WINDOW_SIZE = 14
WINDOW_SPACING = 18
DOOR_WIDTH = 18
DOOR_HEIGHT = 28
SHOP_SIZE = (100, 130)
SIGN_SIZE = (70, 20)

FRAME_SHADOW = 0x2A1A0A
FRAME_COLOR = 0x654321
FRAME_LIGHT = 0x8B6B4A
FRAME_DARK = 0x3A2A1A
SILL_COLOR = 0x5A4A3A
GOLD = 0xFFD700

# 3x5 glyphs for sign lettering
SIGN_FONT = {
    "S": ("111", "100", "111", "001", "111"),
    "H": ("101", "101", "111", "101", "101"),
    "O": ("111", "101", "101", "101", "111"),
    "P": ("111", "101", "111", "100", "100"),
}


@dataclass(frozen=True)
class BuildingOptions:
    """Size overrides; random within the type's range when None."""

    width: Optional[int] = None
    height: Optional[int] = None
    enterable: bool = True
    height_scale: float = 1.0


@dataclass
class Building:
    building_type: str
    x: float  # Bottom-centre anchor, world space
    y: float
    width: int  # Wall body size
    height: int
    texture_key: str
    surface: pygame.Surface
    enterable: bool = True
    door_zone: Optional[pygame.Rect] = None
    shop_type: Optional[str] = None
    sign_rect: Optional[pygame.Rect] = None
    destroyed: bool = False

    @property
    def top_left(self) -> Tuple[int, int]:
        """Where the sprite's surface is blitted in world space."""
        return (math.floor(self.x - self.surface.get_width() / 2), math.floor(self.y - self.surface.get_height()))

    def destroy(self) -> None:
        self.destroyed = True
        self.door_zone = None


def texture_type_for_color(color: int) -> str:
    """Pick a wall texture from the wall colour."""
    r, g, b = colors.to_rgb(color)
    if r > 180 and g > 140 and b < 150:
        return "wood"
    if r > 150 and g < 100 and b < 100:
        return "brick"
    if abs(r - g) < 30 and abs(g - b) < 30:
        return "stone"
    return "plank"


def roof_height_for(height: int) -> int:
    return math.floor(min(MAX_ROOF_HEIGHT, height * 0.25))


class BuildingGenerator:
    def __init__(self, rng: Optional[SeededRNG] = None, cache: Optional[TextureCache] = None):
        self.rng = rng or SeededRNG()
        self.cache = cache if cache is not None else TextureCache()
        self._serial = 0

    def generate_building(
        self,
        building_type: str,
        x: float,
        y: float,
        options: BuildingOptions = BuildingOptions(),
    ) -> Building:
        """
        Draw one building anchored at (x, y) and cache its texture.

        Unknown types are drawn as residential.
        """
        if building_type not in BUILDING_TYPES:
            logger.debug(f"Unknown building type {building_type!r}; using {DEFAULT_BUILDING_TYPE}")
            building_type = DEFAULT_BUILDING_TYPE
        spec = BUILDING_TYPES[building_type]

        width = options.width if options.width is not None else \
            spec.min_width + self.rng.random() * (spec.max_width - spec.min_width)
        height = options.height if options.height is not None else \
            spec.min_height + self.rng.random() * (spec.max_height - spec.min_height)
        width = math.floor(width)
        height = math.floor(height * options.height_scale)

        roof_h = roof_height_for(height)
        canvas_w, canvas_h = width + ROOF_OVERHANG * 2, height + roof_h
        drawer = PixelDrawer.create(canvas_w, canvas_h)
        body_x, body_y = ROOF_OVERHANG, roof_h

        self.draw_building_body(drawer, body_x, body_y, width, height, spec)
        self.draw_windows(drawer, body_x, body_y, width, height, spec)
        door = self.draw_door(drawer, body_x, body_y, width, height, spec, options.enterable)
        drawer.draw_rect_outline(body_x, body_y, width, height, 0x000000, thickness=2)
        self.draw_roof(drawer, canvas_w, roof_h, spec)

        self._serial += 1
        key = f"building-{building_type}-{width}x{height}-{self._serial}"
        self.cache.put(key, drawer.surface)

        building = Building(building_type, x, y, width, height, key, drawer.surface, options.enterable)
        if options.enterable:
            left, top = building.top_left
            building.door_zone = door.move(left, top)
        return building

    def draw_building_body(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int, spec: BuildingType) -> None:
        wall = spec.wall
        drawer.draw_rect(x, y, width, height, wall)
        self.draw_wall_texture(drawer, x, y, width, height, wall, texture_type_for_color(wall))

        shadow, dark = colors.darken(wall, 0.25), colors.darken(wall, 0.12)
        highlight, light = colors.lighten(wall, 0.25), colors.lighten(wall, 0.12)
        drawer.draw_gradient(x, y, 6, height, shadow, dark, vertical=False, steps=6)
        drawer.draw_gradient(x + width - 6, y, 6, height, dark, shadow, vertical=False, steps=6)
        drawer.draw_gradient(x, y, width, 8, highlight, light, steps=4)

        # Corner pillars
        drawer.draw_rect(x, y, 3, height, colors.darken(wall, 0.2), 102)
        drawer.draw_rect(x + width - 3, y, 3, height, colors.darken(wall, 0.2), 102)
        drawer.draw_rect(x + 1, y, 1, height, colors.lighten(wall, 0.1), 77)
        drawer.draw_rect(x + width - 2, y, 1, height, colors.lighten(wall, 0.1), 77)

    def draw_wall_texture(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int,
                          wall: int, texture: str, tile: int = 8) -> None:
        mortar = colors.darken(wall, 0.2)
        if texture in ("wood", "plank"):
            for px in range(x + tile, x + width, tile):
                drawer.draw_rect(px, y, 1, height, mortar, 153)
            if texture == "plank":
                for py in range(y + tile * 3, y + height, tile * 3):
                    drawer.draw_rect(x, py, width, 1, mortar, 102)
            return
        # Brick and stone courses; bricks are offset every other row
        course = tile // 2 if texture == "brick" else tile
        for row, py in enumerate(range(y, y + height, course)):
            drawer.draw_rect(x, py, width, 1, mortar, 128)
            offset = (tile // 2) if texture == "brick" and row % 2 else 0
            for px in range(x + offset, x + width, tile):
                drawer.draw_rect(px, py, 1, course, mortar, 128)

    def draw_roof(self, drawer: PixelDrawer, canvas_width: int, roof_height: int, spec: BuildingType) -> None:
        """Gable roof spanning the body plus overhang on both sides."""
        if roof_height <= 0:
            return
        eave_y = roof_height
        apex = (canvas_width / 2, 0)
        outline = [(0, eave_y), apex, (canvas_width, eave_y)]
        drawer.draw_polygon(outline, spec.roof)

        # Shading bands, lighter towards the ridge
        roof_light, roof_dark = colors.lighten(spec.roof, 0.15), colors.darken(spec.roof, 0.15)
        shingle = colors.darken(spec.roof, 0.25)
        for row_y in range(0, eave_y, 6):
            t = row_y / eave_y
            half = (canvas_width / 2) * t
            x0, x1 = canvas_width / 2 - half, canvas_width / 2 + half
            drawer.draw_rect(x0, row_y, x1 - x0, min(6, eave_y - row_y), colors.lerp_color(roof_light, roof_dark, t), 128)
            drawer.draw_line(x0, row_y, x1, row_y, shingle, 153)
            offset = 0 if (row_y // 6) % 2 == 0 else 7
            for sx in range(math.floor(x0) + offset, math.floor(x1), 14):
                drawer.draw_line(sx, row_y, sx, min(eave_y, row_y + 6), shingle, 153)

        drawer.draw_line(0, eave_y, apex[0], apex[1], 0x000000, thickness=2)
        drawer.draw_line(apex[0], apex[1], canvas_width, eave_y, 0x000000, thickness=2)
        drawer.draw_rect(0, eave_y - 1, canvas_width, 2, 0x000000, 51)

    def draw_windows(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int, spec: BuildingType) -> None:
        size, spacing = WINDOW_SIZE, WINDOW_SPACING
        count = max(1, math.floor((width - spacing) / (size + spacing)))
        start_x = x + (width - (count * (size + spacing) - spacing)) / 2
        rows = [y + height * 0.25]
        if height > 100:
            rows.append(y + height * 0.45)

        glass_light, glass_dark = colors.lighten(spec.window, 0.2), colors.darken(spec.window, 0.1)
        for wy in rows:
            for i in range(count):
                wx = start_x + i * (size + spacing)
                drawer.draw_rect(wx - 3, wy - 3, size + 6, size + 6, FRAME_SHADOW)
                drawer.draw_rect(wx - 2, wy - 2, size + 4, size + 4, FRAME_COLOR)
                drawer.draw_rect(wx - 2, wy - 2, size + 4, 2, FRAME_LIGHT, 153)
                drawer.draw_rect(wx - 2, wy - 2, 2, size + 4, FRAME_LIGHT, 153)
                drawer.draw_rect(wx - 2, wy + size, size + 4, 2, FRAME_DARK, 153)
                drawer.draw_rect(wx + size, wy - 2, 2, size + 4, FRAME_DARK, 153)
                drawer.draw_gradient(wx, wy, size, size, glass_light, glass_dark, steps=8)
                drawer.draw_rect(wx + 1, wy + 1, size / 3, size / 3, 0xFFFFFF, 77)
                # Panes
                drawer.draw_line(wx + size / 2, wy, wx + size / 2, wy + size, 0x000000, 178, thickness=2)
                drawer.draw_line(wx, wy + size / 2, wx + size, wy + size / 2, 0x000000, 178, thickness=2)
                drawer.draw_rect(wx - 2, wy + size + 2, size + 4, 3, SILL_COLOR)
                drawer.draw_rect(wx - 2, wy + size + 2, size + 4, 1, 0x7A6A5A, 128)

    def draw_door(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int,
                  spec: BuildingType, enterable: bool) -> pygame.Rect:
        """Draw the door; returns its rectangle in canvas space."""
        dw, dh = DOOR_WIDTH, DOOR_HEIGHT
        dx = math.floor(x + width / 2 - dw / 2)
        dy = y + height - dh - 6

        drawer.draw_rect(dx - 4, dy - 4, dw + 8, dh + 8, FRAME_SHADOW)
        drawer.draw_rect(dx - 2, dy - 2, dw + 4, dh + 4, FRAME_COLOR)
        drawer.draw_rect(dx - 2, dy - 2, dw + 4, 2, FRAME_LIGHT, 153)
        drawer.draw_rect(dx - 2, dy - 2, 2, dh + 4, FRAME_LIGHT, 153)
        drawer.draw_rect(dx - 2, dy + dh, dw + 4, 2, FRAME_DARK, 153)
        drawer.draw_rect(dx + dw, dy - 2, 2, dh + 4, FRAME_DARK, 153)

        drawer.draw_gradient(dx, dy, dw, dh, colors.darken(spec.door, 0.1), colors.lighten(spec.door, 0.05),
                             vertical=False, steps=6)
        panel = colors.darken(spec.door, 0.2)
        drawer.draw_line(dx + dw / 3, dy, dx + dw / 3, dy + dh, panel, 204, thickness=2)
        drawer.draw_line(dx + dw * 2 / 3, dy, dx + dw * 2 / 3, dy + dh, panel, 204, thickness=2)
        drawer.draw_line(dx, dy + dh / 2, dx + dw, dy + dh / 2, panel, 204, thickness=2)

        if enterable:
            hx, hy = dx + dw - 5, dy + dh / 2
            drawer.draw_circle(hx, hy, 5, GOLD, 51)
            drawer.draw_circle(hx, hy + 1, 3, 0x8B7500)
            drawer.draw_circle(hx, hy, 3, GOLD)
            drawer.draw_circle(hx - 1, hy - 1, 1.5, 0xFFFFAA, 153)
            drawer.draw_circle_outline(hx, hy, 3, 0x000000, 204)

        drawer.draw_rect_outline(dx - 1, dy - 1, dw + 2, dh + 2, 0x000000, thickness=2, alpha=230)
        drawer.draw_rect(dx - 2, dy + dh, dw + 4, 4, SILL_COLOR)
        return pygame.Rect(dx, dy, dw, dh)

    def generate_shop_building(self, x: float, y: float, shop_type: str = "general") -> Building:
        """A fixed-size commercial building with a hanging SHOP sign."""
        width, height = SHOP_SIZE
        building = self.generate_building("commercial", x, y, BuildingOptions(width=width, height=height))
        drawer = PixelDrawer(building.surface)
        sign_w, sign_h = SIGN_SIZE
        sx = math.floor(building.surface.get_width() / 2 - sign_w / 2)
        sy = roof_height_for(height) + 15
        self.draw_sign(drawer, sx, sy, sign_w, sign_h)

        building.shop_type = shop_type
        left, top = building.top_left
        building.sign_rect = pygame.Rect(sx + left, sy + top, sign_w, sign_h)
        return building

    def draw_sign(self, drawer: PixelDrawer, x: int, y: int, width: int, height: int) -> None:
        # Chains
        drawer.draw_rect(x - 4, y - 8, 3, 8, 0x8B7355)
        drawer.draw_rect(x + width + 1, y - 8, 3, 8, 0x8B7355)

        board = 0x8B6B4A
        drawer.draw_rect(x, y, width, height, board)
        for gy in range(y + 4, y + height - 3, 4):
            drawer.draw_rect(x + 3, gy, width - 6, 1, colors.darken(board, 0.15), 128)
        drawer.draw_rect_outline(x, y, width, height, FRAME_COLOR, thickness=3)
        drawer.draw_rect(x, y, width, 1, 0xA58B6A, 153)
        drawer.draw_rect(x, y + height - 1, width, 1, SILL_COLOR, 153)

        # Lettering at 2x scale, gold with a black drop
        scale = 2
        text = "SHOP"
        text_w = len(text) * 4 * scale - scale
        tx = x + (width - text_w) // 2
        ty = y + (height - 5 * scale) // 2
        for shade, off in ((0x000000, 1), (GOLD, 0)):
            for i, ch in enumerate(text):
                for row, bits in enumerate(SIGN_FONT[ch]):
                    for col, bit in enumerate(bits):
                        if bit == "1":
                            drawer.draw_rect(tx + (i * 4 + col) * scale + off, ty + row * scale + off, scale, scale, shade)
