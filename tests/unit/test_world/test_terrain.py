"""
Unit tests for terrain tiles and encounter markers.
"""

import pytest
import pygame
from engine import colors
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache
from world.terrain import (
    ENCOUNTER_MARKERS,
    GROUND_COLOR,
    GROUND_KEY,
    SEGMENT_COLORS,
    SEGMENT_TYPES,
    TerrainGenerator,
    get_background_key,
    get_encounter_key,
)


def _bytes(surface):
    return pygame.image.tobytes(surface, "RGBA")


class TestTerrainKeys:
    """Tests for the texture key helpers."""

    def test_background_key(self):
        """Test background keys name the segment type."""
        assert get_background_key("forest") == "terrain-background-forest"

    def test_encounter_key(self):
        """Test encounter keys name the encounter type."""
        assert get_encounter_key("shop") == "encounter-shop"


class TestTerrainGenerator:
    """Tests for TerrainGenerator."""

    def test_generate_all_tiles(self):
        """Test one call builds the ground tile, every background and every marker."""
        cache = TextureCache()
        keys = TerrainGenerator(SeededRNG(1), cache).generate_terrain_tiles()
        assert keys[0] == GROUND_KEY
        assert len(keys) == 1 + len(SEGMENT_TYPES) + len(ENCOUNTER_MARKERS)
        assert all(key in cache for key in keys)

    def test_sizes(self):
        """Test tiles are 64px, backgrounds 128px and markers 32px."""
        cache = TextureCache()
        terrain = TerrainGenerator(SeededRNG(1), cache)
        assert cache.get(terrain.generate_ground_tile()).get_size() == (64, 64)
        assert cache.get(terrain.generate_background_tile("desert")).get_size() == (128, 128)
        assert cache.get(terrain.generate_encounter_marker("quest")).get_size() == (32, 32)

    def test_textures_memoised(self):
        """Test asking twice returns the cached surface."""
        cache = TextureCache()
        terrain = TerrainGenerator(SeededRNG(1), cache)
        key = terrain.generate_background_tile("plains")
        surface = cache.get(key)
        assert terrain.generate_background_tile("plains") == key
        assert cache.get(key) is surface

    @pytest.mark.parametrize("segment_type", SEGMENT_TYPES)
    def test_deterministic(self, segment_type):
        """Test one seed paints identical backgrounds in separate caches."""
        a_cache, b_cache = TextureCache(), TextureCache()
        key = TerrainGenerator(SeededRNG(7), a_cache).generate_background_tile(segment_type)
        TerrainGenerator(SeededRNG(7), b_cache).generate_background_tile(segment_type)
        assert _bytes(a_cache.get(key)) == _bytes(b_cache.get(key))

    def test_ground_tile_deterministic(self):
        """Test the ground speckle depends only on the seed."""
        a_cache, b_cache, c_cache = TextureCache(), TextureCache(), TextureCache()
        TerrainGenerator(SeededRNG(7), a_cache).generate_ground_tile()
        TerrainGenerator(SeededRNG(7), b_cache).generate_ground_tile()
        TerrainGenerator(SeededRNG(8), c_cache).generate_ground_tile()
        assert _bytes(a_cache.get(GROUND_KEY)) == _bytes(b_cache.get(GROUND_KEY))
        assert _bytes(a_cache.get(GROUND_KEY)) != _bytes(c_cache.get(GROUND_KEY))

    def test_ground_tile_border(self):
        """Test the ground tile is opaque with a darker border."""
        cache = TextureCache()
        surface = cache.get(TerrainGenerator(SeededRNG(1), cache).generate_ground_tile())
        assert surface.get_at((0, 0)).a == 255
        assert tuple(surface.get_at((0, 30)))[:3] == colors.to_rgb(colors.darken(GROUND_COLOR, 0.2))

    def test_backgrounds_use_segment_base(self):
        """Test a dungeon tile is dungeon grey inside its bricks."""
        cache = TextureCache()
        surface = cache.get(TerrainGenerator(SeededRNG(1), cache).generate_background_tile("dungeon"))
        assert tuple(surface.get_at((10, 10)))[:3] == (0x1A, 0x1A, 0x1A)
        assert tuple(surface.get_at((20, 10)))[:3] != (0x1A, 0x1A, 0x1A)

    def test_unknown_segment_uses_default(self):
        """Test unknown segment types get the default base under their own key."""
        cache = TextureCache()
        key = TerrainGenerator(SeededRNG(1), cache).generate_background_tile("swamp")
        assert key == "terrain-background-swamp"
        assert "swamp" not in SEGMENT_COLORS
        corners = {tuple(cache.get(key).get_at(p))[:3] for p in ((0, 0), (127, 0), (0, 127), (127, 127))}
        assert (0x1A, 0x1A, 0x2E) in corners

    @pytest.mark.parametrize("encounter_type", list(ENCOUNTER_MARKERS) + ["ambush"])
    def test_marker_outline_is_closed(self, encounter_type):
        """Test each marker's silhouette edge is the black outline."""
        cache = TextureCache()
        surface = cache.get(TerrainGenerator(SeededRNG(1), cache).generate_encounter_marker(encounter_type))
        width, height = surface.get_size()
        exposed = 0
        for y in range(height):
            for x in range(width):
                pixel = surface.get_at((x, y))
                if pixel.a == 0:
                    continue
                if any(
                    not (0 <= x + dx < width and 0 <= y + dy < height) or surface.get_at((x + dx, y + dy)).a == 0
                    for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx or dy
                ):
                    exposed += 1
                    assert tuple(pixel) == (0, 0, 0, 255), (x, y)
        assert exposed > 0

    def test_marker_colours(self):
        """Test marker centres carry the encounter colour."""
        cache = TextureCache()
        terrain = TerrainGenerator(SeededRNG(1), cache)
        for encounter_type, marker in ENCOUNTER_MARKERS.items():
            surface = cache.get(terrain.generate_encounter_marker(encounter_type))
            expected = ((marker.color >> 16) & 0xFF, (marker.color >> 8) & 0xFF, marker.color & 0xFF)
            assert tuple(surface.get_at((16, 16)))[:3] == expected

    def test_destroy_evicts_terrain(self):
        """Test destroy removes terrain and marker textures only."""
        cache = TextureCache()
        cache.put("env-sky-plains", pygame.Surface((4, 4), pygame.SRCALPHA, 32))
        terrain = TerrainGenerator(SeededRNG(1), cache)
        terrain.generate_terrain_tiles()
        terrain.destroy()
        assert cache.keys() == ["env-sky-plains"]
