"""
Road generation for side-scrolling backgrounds.

A road is a centreline sampled every ROAD_SEGMENT_LENGTH pixels. Each
sample sits on a gentle sine curve plus bounded jitter, clamped to a
vertical band. Roads are stored per (biome, width, height) so positions
can be queried after generation.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pygame

from engine import colors
from engine.drawer import PixelDrawer
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache

ROAD_SEGMENT_LENGTH = 200
MAX_VARIATION = 30
VARIATION_FREQUENCY = 0.02
# Centreline band as fractions of the viewport height
ROAD_MIN_Y = 0.4
ROAD_MAX_Y = 0.85
ROAD_CENTER_Y = 0.65
RENDER_OUTLINE_WIDTH = 2


@dataclass(frozen=True)
class RoadStyle:
    base: int
    light: int
    dark: int
    outline: int


ROAD_TYPES: Dict[str, str] = {
    "plains": "dirt",
    "forest": "dirt",
    "forest_town": "dirt",
    "mountains": "stone",
    "dark_lands": "corrupted",
    "dungeon": "stone",
    "desert": "dirt",
    "city": "cobblestone",
}

ROAD_WIDTHS: Dict[str, int] = {
    "dirt": 100,
    "stone": 120,
    "cobblestone": 120,
    "corrupted": 80,
}

ROAD_COLORS: Dict[str, RoadStyle] = {
    "dirt": RoadStyle(0x8D6E63, 0xA68E83, 0x6D4C41, 0x5D4037),
    "stone": RoadStyle(0x757575, 0x9E9E9E, 0x616161, 0x424242),
    "cobblestone": RoadStyle(0x757575, 0x9E9E9E, 0x616161, 0x424242),
    "corrupted": RoadStyle(0x4A2A2A, 0x6A3A3A, 0x2A1A1A, 0x1A0A0A),
}


def road_key(biome: str, width: int, height: int) -> str:
    return f"{biome}_{width}_{height}"


@dataclass
class RoadPath:
    """A sampled road centreline."""
    biome: str
    road_type: str
    width: int  # Road width in pixels, not the viewport width
    key: str
    points: List[Tuple[float, float]] = field(default_factory=list)

    @property
    def half_width(self) -> float:
        return self.width / 2

    def y_at(self, x: float) -> Optional[float]:
        """
        Centreline y at ``x``.

        Interpolates linearly between the two samples around ``x`` and
        clamps to the nearest end sample outside the sampled range.
        """
        points = self.points
        if len(points) < 2:
            return None
        if x <= points[0][0]:
            return points[0][1]
        if x >= points[-1][0]:
            return points[-1][1]
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            if x1 <= x <= x2:
                if x2 == x1:
                    return y1
                t = (x - x1) / (x2 - x1)
                return y1 + (y2 - y1) * t
        return points[-1][1]

    def contains(self, x: float, y: float) -> bool:
        road_y = self.y_at(x)
        if road_y is None:
            return False
        return abs(y - road_y) <= self.half_width


class RoadGenerator:
    """Generates, stores and renders biome roads."""

    def __init__(self, rng: Optional[SeededRNG] = None, cache: Optional[TextureCache] = None):
        self.rng = rng or SeededRNG()
        self.cache = cache if cache is not None else TextureCache()
        self.road_data: Dict[str, RoadPath] = {}

    def generate_road_path(
        self,
        biome: str,
        width: int,
        height: int,
        start_y: Optional[float] = None,
    ) -> RoadPath:
        """
        Sample a new road across the viewport and store it.

        Args:
            biome: Biome name; picks the road type
            width: Viewport width
            height: Viewport height
            start_y: Centreline baseline; defaults to 65% of the height

        Returns:
            The stored RoadPath
        """
        road_type = ROAD_TYPES.get(biome, "dirt")
        key = road_key(biome, width, height)
        rng = self.rng.derive(f"road-{key}")
        center_y = start_y if start_y is not None else height * ROAD_CENTER_Y
        min_y, max_y = height * ROAD_MIN_Y, height * ROAD_MAX_Y

        points = []
        for i in range(math.ceil(width / ROAD_SEGMENT_LENGTH) + 1):
            x = i * ROAD_SEGMENT_LENGTH
            curve = math.sin(x * VARIATION_FREQUENCY) * MAX_VARIATION * 0.5
            jitter = (rng.random() - 0.5) * MAX_VARIATION * 0.3
            y = max(min_y, min(max_y, center_y + curve + jitter))
            points.append((x, y))

        road = RoadPath(biome, road_type, ROAD_WIDTHS.get(road_type, 100), key, points)
        self.road_data[key] = road
        return road

    def get_road(self, biome: str, width: int, height: int) -> Optional[RoadPath]:
        return self.road_data.get(road_key(biome, width, height))

    def get_road_y_at_x(self, biome: str, x: float, width: int, height: int) -> Optional[float]:
        road = self.get_road(biome, width, height)
        return road.y_at(x) if road else None

    def is_on_road(self, biome: str, x: float, y: float, width: int, height: int) -> bool:
        road = self.get_road(biome, width, height)
        return road.contains(x, y) if road else False

    def clear_road_data(self, biome: str, width: int, height: int) -> None:
        self.road_data.pop(road_key(biome, width, height), None)

    # ------------------------------------------------------------------
    # Textures
    # ------------------------------------------------------------------

    def create_road_segment_texture(self, road_type: str, width: int, height: int) -> str:
        """Build (once) a tileable road surface texture and return its cache key."""
        key = f"road-{road_type}-{width}x{height}"
        if key in self.cache:
            return key

        style = ROAD_COLORS.get(road_type, ROAD_COLORS["dirt"])
        drawer = PixelDrawer.create(width, height)
        drawer.clear(style.base)
        rng = self.rng.derive(key)
        painters = {
            "dirt": self.draw_dirt_texture,
            "stone": self.draw_stone_texture,
            "cobblestone": self.draw_cobblestone_texture,
            "corrupted": self.draw_corrupted_texture,
        }
        painter = painters.get(road_type)
        if painter:
            painter(drawer, width, height, style, rng)
        drawer.draw_rect_outline(0, 0, width, height, style.outline, thickness=2)
        self.cache.put(key, drawer.surface)
        return key

    def draw_dirt_texture(self, drawer: PixelDrawer, width: int, height: int, style: RoadStyle, rng: SeededRNG) -> None:
        for _ in range(40):
            drawer.draw_circle(rng.random() * width, rng.random() * height, rng.random() * 6 + 3, style.dark, 102)
        for _ in range(25):
            drawer.draw_circle(rng.random() * width, rng.random() * height, rng.random() * 5 + 2, style.light, 77)
        # Wheel tracks
        if width > 80:
            for track_y in (height * 0.3, height * 0.7):
                drawer.draw_rect(0, track_y, width, 2, style.dark, 128)
                drawer.draw_rect(0, track_y, width, 1, style.light, 51)
        # Pebbles
        for _ in range(30):
            drawer.draw_circle(rng.random() * width, rng.random() * height, rng.random() * 2 + 1, style.outline, 153)

    def draw_stone_texture(self, drawer: PixelDrawer, width: int, height: int, style: RoadStyle, rng: SeededRNG) -> None:
        tile = 24
        for y in range(0, height, tile):
            for x in range(0, width, tile):
                checker = (x // tile + y // tile) % 2 == 0
                variation = rng.random() * 0.15
                shade = colors.lighten(style.light, variation) if checker else colors.darken(style.dark, variation)
                drawer.draw_rect(x, y, tile, tile, shade, 128)
                # Shadow right and bottom, highlight top and left
                drawer.draw_rect(x + tile - 2, y, 2, tile, style.outline, 77)
                drawer.draw_rect(x, y + tile - 2, tile, 2, style.outline, 77)
                drawer.draw_rect(x, y, tile, 1, style.light, 51)
                drawer.draw_rect(x, y, 1, tile, style.light, 51)
                drawer.draw_rect_outline(x, y, tile, tile, style.outline, alpha=178)
                if rng.random() < 0.1:
                    drawer.draw_line(x + rng.random() * tile, y + rng.random() * tile,
                                     x + rng.random() * tile, y + rng.random() * tile, style.outline, 77)

    def draw_cobblestone_texture(self, drawer: PixelDrawer, width: int, height: int, style: RoadStyle, rng: SeededRNG) -> None:
        stone = 20
        for y in range(0, height, stone):
            for x in range(0, width, stone):
                offset_x = (rng.random() - 0.5) * 6
                offset_y = (rng.random() - 0.5) * 6
                size = stone + (rng.random() - 0.5) * 6
                cx, cy = x + stone / 2 + offset_x, y + stone / 2 + offset_y

                roll = rng.random()
                if roll < 0.3:
                    shade = colors.lighten(style.light, 0.1)
                elif roll < 0.6:
                    shade = style.light
                elif roll < 0.85:
                    shade = style.base
                else:
                    shade = style.dark

                drawer.draw_circle(cx, cy, size / 2, shade, 153)
                drawer.draw_ellipse(cx - size / 6, cy - size / 6, size * 0.3, size * 0.3, colors.lighten(shade, 0.2), 128)
                drawer.draw_ellipse(cx + size / 6, cy + size / 6, size * 0.3, size * 0.3, colors.darken(shade, 0.2), 102)
                drawer.draw_circle_outline(cx, cy, size / 2, style.outline, 204)
                # Moss
                if rng.random() < 0.15:
                    drawer.draw_ellipse(cx + (rng.random() - 0.5) * size / 3, cy + (rng.random() - 0.5) * size / 3,
                                        size / 4, size / 4, colors.darken(shade, 0.3), 128)
        # Mortar cracks
        for y in range(0, height, stone):
            for x in range(0, width, stone):
                if rng.random() < 0.05:
                    drawer.draw_line(x, y, x + stone, y + stone, style.outline, 102)

    def draw_corrupted_texture(self, drawer: PixelDrawer, width: int, height: int, style: RoadStyle, rng: SeededRNG) -> None:
        drawer.draw_rect(0, 0, width, height, style.dark, 128)
        for _ in range(5):
            x, y = rng.random() * width, 0.0
            for j in range(3):
                nx, ny = rng.random() * width, (j + 1) * (height / 3)
                drawer.draw_line(x, y, nx, ny, style.outline, 204, thickness=2)
                x, y = nx, ny
        for _ in range(15):
            drawer.draw_circle(rng.random() * width, rng.random() * height, rng.random() * 10 + 5, 0x000000, 102)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_road(self, drawer: PixelDrawer, road: RoadPath) -> None:
        """Draw the road as one quad per sampled segment with edge lines."""
        if len(road.points) < 2:
            return
        style = ROAD_COLORS.get(road.road_type, ROAD_COLORS["dirt"])
        half = road.half_width
        for (x1, y1), (x2, y2) in zip(road.points, road.points[1:]):
            angle = math.atan2(y2 - y1, x2 - x1)
            perp_x, perp_y = -math.sin(angle) * half, math.cos(angle) * half
            drawer.draw_polygon([
                (x1 + perp_x, y1 + perp_y), (x1 - perp_x, y1 - perp_y),
                (x2 - perp_x, y2 - perp_y), (x2 + perp_x, y2 + perp_y),
            ], style.base)
            drawer.draw_line(x1 + perp_x, y1 + perp_y, x2 + perp_x, y2 + perp_y, style.outline,
                             thickness=RENDER_OUTLINE_WIDTH)
            drawer.draw_line(x1 - perp_x, y1 - perp_y, x2 - perp_x, y2 - perp_y, style.outline,
                             thickness=RENDER_OUTLINE_WIDTH)

    def render_road_surface(self, road: RoadPath, width: int, height: int) -> pygame.Surface:
        drawer = PixelDrawer.create(width, height)
        self.render_road(drawer, road)
        return drawer.surface
