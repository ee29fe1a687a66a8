"""
Terrain tiles and encounter markers for the overworld map.

Three families of cached textures: a square ground tile, one background
tile per segment type (plains, forest, dungeon, desert) and a marker for
each encounter type (shop, treasure, quest). Markers carry a 1px black
outline. Every texture is built once per cache; asking again returns
the cached key.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pygame

from settings import ENCOUNTER_MARKER_SIZE, TERRAIN_TILE_SIZE
from engine import colors
from engine.drawer import PixelDrawer, Point
from engine.error_handler import logger
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache

GROUND_KEY = "terrain-ground"
GROUND_COLOR = 0x16213E

SEGMENT_TYPES = ("plains", "forest", "dungeon", "desert")
SEGMENT_COLORS: Dict[str, int] = {
    "plains": 0x2A3A2A,
    "forest": 0x1A2A1A,
    "dungeon": 0x1A1A1A,
    "desert": 0x3A2A1A,
}
DEFAULT_SEGMENT_COLOR = 0x1A1A2E
BRICK_SIZE = 20


@dataclass(frozen=True)
class EncounterMarker:
    color: int
    shape: str


ENCOUNTER_MARKERS: Dict[str, EncounterMarker] = {
    "shop": EncounterMarker(0x4444FF, "circle"),
    "treasure": EncounterMarker(0xFFFF44, "diamond"),
    "quest": EncounterMarker(0x44FF44, "star"),
}
DEFAULT_MARKER = EncounterMarker(0xAAAAAA, "circle")
MARKER_OUTLINE = 0x000000


def get_background_key(segment_type: str) -> str:
    return f"terrain-background-{segment_type}"


def get_encounter_key(encounter_type: str) -> str:
    return f"encounter-{encounter_type}"


def star_points(cx: float, cy: float, outer: float, inner: float, points: int = 5) -> List[Point]:
    """Alternating outer/inner vertices, starting on the +x axis."""
    vertices = []
    for i in range(points * 2):
        angle = math.pi * i / points
        radius = outer if i % 2 == 0 else inner
        vertices.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
    return vertices


class TerrainGenerator:
    """Builds and caches terrain tiles and encounter markers."""

    def __init__(
        self,
        rng: Optional[SeededRNG] = None,
        cache: Optional[TextureCache] = None,
        tile_size: int = TERRAIN_TILE_SIZE,
        marker_size: int = ENCOUNTER_MARKER_SIZE,
    ) -> None:
        self.rng = rng or SeededRNG()
        self.cache = cache if cache is not None else TextureCache()
        self.tile_size = tile_size
        self.marker_size = marker_size

    def generate_terrain_tiles(self) -> List[str]:
        """Ground tile, every segment background and every encounter marker."""
        keys = [self.generate_ground_tile()]
        keys.extend(self.generate_background_tiles())
        keys.extend(self.generate_encounter_markers())
        logger.debug(f"Terrain tiles ready: {len(keys)} textures")
        return keys

    def _texture(self, key: str, width: int, height: int,
                 paint: Callable[[PixelDrawer, SeededRNG], None]) -> str:
        def build() -> pygame.Surface:
            drawer = PixelDrawer.create(width, height)
            paint(drawer, self.rng.derive(key))
            return drawer.surface
        self.cache.get_or_create(key, build)
        return key

    # ------------------------------------------------------------------
    # Ground and backgrounds
    # ------------------------------------------------------------------

    def generate_ground_tile(self) -> str:
        size = self.tile_size

        def paint(drawer: PixelDrawer, rng: SeededRNG) -> None:
            drawer.clear(GROUND_COLOR)
            speck = colors.lighten(GROUND_COLOR, 0.1)
            for _ in range(8):
                drawer.draw_circle(rng.random() * size, rng.random() * size, 2, speck)
            drawer.draw_rect_outline(0, 0, size, size, colors.darken(GROUND_COLOR, 0.2))

        return self._texture(GROUND_KEY, size, size, paint)

    def generate_background_tiles(self) -> List[str]:
        return [self.generate_background_tile(segment) for segment in SEGMENT_TYPES]

    def generate_background_tile(self, segment_type: str) -> str:
        """
        Square background tile twice the ground tile size.

        Unknown segment types get a dark blue base with the plains grass
        pattern under their own key.
        """
        if segment_type not in SEGMENT_COLORS:
            logger.debug(f"Unknown terrain segment {segment_type!r}; using the default background")
        base = SEGMENT_COLORS.get(segment_type, DEFAULT_SEGMENT_COLOR)
        size = self.tile_size * 2

        def paint(drawer: PixelDrawer, rng: SeededRNG) -> None:
            drawer.clear(base)
            if segment_type == "forest":
                trunk = colors.darken(base, 0.3)
                for i in range(3):
                    drawer.draw_rect(size / 4 * (i + 1), 0, 10, size * 0.6, trunk)
            elif segment_type == "dungeon":
                mortar = colors.darken(base, 0.2)
                for y in range(0, size, BRICK_SIZE):
                    for x in range(0, size, BRICK_SIZE):
                        drawer.draw_rect_outline(x, y, BRICK_SIZE, BRICK_SIZE, mortar)
            elif segment_type == "desert":
                dune = colors.lighten(base, 0.1)
                for i in range(4):
                    drawer.draw_ellipse(size / 5 * (i + 1), size * 0.7, 30, 15, dune)
            else:
                grass = colors.lighten(base, 0.05)
                for _ in range(10):
                    drawer.draw_circle(rng.random() * size, rng.random() * size, 1, grass)

        return self._texture(get_background_key(segment_type), size, size, paint)

    # ------------------------------------------------------------------
    # Encounter markers
    # ------------------------------------------------------------------

    def generate_encounter_markers(self) -> List[str]:
        return [self.generate_encounter_marker(kind) for kind in ENCOUNTER_MARKERS]

    def generate_encounter_marker(self, encounter_type: str) -> str:
        marker = ENCOUNTER_MARKERS.get(encounter_type)
        if marker is None:
            logger.warning(f"Unknown encounter type {encounter_type!r}; drawing a plain marker")
            marker = DEFAULT_MARKER
        size = self.marker_size
        half = size / 2

        def paint(drawer: PixelDrawer, rng: SeededRNG) -> None:
            if marker.shape == "diamond":
                drawer.draw_polygon([(half, 0), (size - 1, half), (half, size - 1), (0, half)], marker.color)
            elif marker.shape == "star":
                drawer.draw_polygon(star_points(half, half, half, size / 4), marker.color)
            else:
                radius = half - 1
                drawer.draw_circle(half, half, radius, marker.color)
                rim = colors.lighten(marker.color, 0.3)
                drawer.draw_circle_outline(half, half, radius, rim)
                drawer.draw_circle_outline(half, half, radius - 1, rim)
            drawer.draw_outline(MARKER_OUTLINE, 1)

        return self._texture(get_encounter_key(encounter_type), size, size, paint)

    def destroy(self) -> None:
        """Evict every terrain texture and marker from the cache."""
        self.cache.invalidate("terrain-")
        self.cache.invalidate("encounter-")
