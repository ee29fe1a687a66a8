"""
Unit tests for roads, buildings, NPCs, settlements and layered environments.
"""

import math

import pytest
import pygame
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache
from world.biomes import DEPTH_ORDER, LAYER_ORDER, SCROLL_FACTORS, BIOME_PALETTES, get_biome_palette
from world.buildings import BuildingGenerator, BuildingOptions, BUILDING_TYPES, texture_type_for_color
from world.environment import EnvironmentBackgroundGenerator, EnvironmentOptions
from world.npcs import NPCGenerator
from world.roads import RoadGenerator, RoadPath, ROAD_TYPES, ROAD_WIDTHS
from world.towns import CityBiomeGenerator, TownBiomeGenerator

WIDTH, HEIGHT = 1024, 600


def _bytes(surface):
    return pygame.image.tobytes(surface, "RGBA")


def _path(points, width=100):
    return RoadPath("plains", "dirt", width, "plains_0_0", list(points))


class TestRoadPath:
    """Tests for centreline interpolation."""

    def test_interpolates_between_samples(self):
        """Test y is linear between two samples."""
        road = _path([(0, 100), (200, 140)])
        assert road.y_at(100) == pytest.approx(120)
        assert road.y_at(50) == pytest.approx(110)

    def test_clamps_outside_range(self):
        """Test x beyond the samples uses the nearest end."""
        road = _path([(0, 100), (200, 140)])
        assert road.y_at(-5) == 100
        assert road.y_at(900) == 140

    def test_duplicate_x_samples(self):
        """Test repeated x values never divide by zero."""
        road = _path([(0, 10), (100, 20), (100, 40), (200, 60)])
        assert road.y_at(100) == pytest.approx(20)
        assert road.y_at(150) == pytest.approx(50)

    def test_too_few_points(self):
        """Test a road needs two samples to answer queries."""
        road = _path([(0, 100)])
        assert road.y_at(0) is None
        assert road.contains(0, 100) is False

    def test_contains_uses_half_width(self):
        """Test the band is half the road width either side."""
        road = _path([(0, 300), (400, 300)], width=100)
        assert road.contains(200, 350)
        assert not road.contains(200, 351)


class TestRoadGenerator:
    """Tests for RoadGenerator."""

    def test_road_types_and_widths(self):
        """Test biome road types resolve to their widths."""
        generator = RoadGenerator(SeededRNG(1))
        assert generator.generate_road_path("dark_lands", WIDTH, HEIGHT).width == ROAD_WIDTHS["corrupted"] == 80
        assert generator.generate_road_path("city", WIDTH, HEIGHT).road_type == "cobblestone"
        assert ROAD_TYPES["mountains"] == "stone"

    def test_unknown_biome_is_dirt(self):
        """Test biomes without a road type get dirt."""
        road = RoadGenerator(SeededRNG(1)).generate_road_path("swamp", WIDTH, HEIGHT)
        assert road.road_type == "dirt"
        assert road.width == 100

    def test_samples_every_segment(self):
        """Test samples are 200px apart and cover the viewport."""
        road = RoadGenerator(SeededRNG(1)).generate_road_path("plains", WIDTH, HEIGHT)
        xs = [x for x, _ in road.points]
        assert xs == [i * 200 for i in range(math.ceil(WIDTH / 200) + 1)]

    def test_samples_stay_in_band(self):
        """Test every sample lies between 40% and 85% of the height."""
        for seed in range(5):
            road = RoadGenerator(SeededRNG(seed)).generate_road_path("forest", WIDTH, HEIGHT, start_y=HEIGHT * 0.95)
            assert all(HEIGHT * 0.4 <= y <= HEIGHT * 0.85 for _, y in road.points)

    def test_deterministic(self):
        """Test one seed samples the same road."""
        a = RoadGenerator(SeededRNG(3)).generate_road_path("plains", WIDTH, HEIGHT)
        b = RoadGenerator(SeededRNG(3)).generate_road_path("plains", WIDTH, HEIGHT)
        assert a.points == b.points

    def test_is_on_road(self):
        """Test points 40px off the centreline are on a plains road and 100px off are not."""
        generator = RoadGenerator(SeededRNG(12345))
        generator.generate_road_path("plains", WIDTH, HEIGHT)
        for x in (0, 150, 512, 1000):
            road_y = generator.get_road_y_at_x("plains", x, WIDTH, HEIGHT)
            assert generator.is_on_road("plains", x, road_y + 40, WIDTH, HEIGHT)
            assert generator.is_on_road("plains", x, road_y - 40, WIDTH, HEIGHT)
            assert not generator.is_on_road("plains", x, road_y + 100, WIDTH, HEIGHT)

    def test_queries_without_road(self):
        """Test queries for an ungenerated road are empty."""
        generator = RoadGenerator(SeededRNG(1))
        assert generator.get_road_y_at_x("plains", 10, WIDTH, HEIGHT) is None
        assert generator.is_on_road("plains", 10, 300, WIDTH, HEIGHT) is False

    def test_clear_road_data(self):
        """Test cleared roads stop answering queries."""
        generator = RoadGenerator(SeededRNG(1))
        generator.generate_road_path("plains", WIDTH, HEIGHT)
        generator.clear_road_data("plains", WIDTH, HEIGHT)
        assert generator.get_road("plains", WIDTH, HEIGHT) is None

    def test_segment_texture_cached(self):
        """Test segment textures are built once per type and size."""
        cache = TextureCache()
        generator = RoadGenerator(SeededRNG(1), cache)
        key = generator.create_road_segment_texture("cobblestone", 64, 32)
        surface = cache.get(key)
        assert key == "road-cobblestone-64x32"
        assert generator.create_road_segment_texture("cobblestone", 64, 32) == key
        assert cache.get(key) is surface
        assert surface.get_size() == (64, 32)


class TestBuildingGenerator:
    """Tests for BuildingGenerator."""

    def test_unknown_type_is_residential(self):
        """Test unknown building types become residential."""
        building = BuildingGenerator(SeededRNG(1)).generate_building("castle", 300, 400)
        assert building.building_type == "residential"

    @pytest.mark.parametrize("building_type", list(BUILDING_TYPES))
    def test_size_within_type_range(self, building_type):
        """Test random sizes respect the type's ranges."""
        spec = BUILDING_TYPES[building_type]
        building = BuildingGenerator(SeededRNG(2)).generate_building(building_type, 300, 400)
        assert spec.min_width <= building.width <= spec.max_width
        assert spec.min_height <= building.height <= spec.max_height

    def test_size_options(self):
        """Test explicit sizes and height scale."""
        options = BuildingOptions(width=90, height=100, height_scale=1.5)
        building = BuildingGenerator(SeededRNG(1)).generate_building("civic", 300, 400, options)
        assert building.width == 90
        assert building.height == 150
        assert building.surface.get_size() == (90 + 24, 150 + 32)

    def test_roof_on_top(self):
        """Test the roof apex sits at the top of the sprite."""
        building = BuildingGenerator(SeededRNG(1)).generate_building(
            "residential", 300, 400, BuildingOptions(width=80, height=100),
        )
        width, height = building.surface.get_size()
        assert building.surface.get_at((width // 2, 12)).a > 0
        assert building.surface.get_at((1, 1)).a == 0

    def test_door_zone_in_world_space(self):
        """Test the door zone lies inside the sprite's world rect."""
        building = BuildingGenerator(SeededRNG(1)).generate_building("residential", 300, 400)
        sprite_rect = pygame.Rect(building.top_left, building.surface.get_size())
        assert building.door_zone.size == (18, 28)
        assert sprite_rect.contains(building.door_zone)
        assert building.door_zone.bottom <= 400

    def test_non_enterable_has_no_door_zone(self):
        """Test buildings that cannot be entered report no door."""
        building = BuildingGenerator(SeededRNG(1)).generate_building(
            "residential", 300, 400, BuildingOptions(enterable=False),
        )
        assert building.door_zone is None

    def test_shop_building(self):
        """Test shops are fixed-size commercial buildings with a sign."""
        shop = BuildingGenerator(SeededRNG(1)).generate_shop_building(500, 400, "armory")
        assert shop.building_type == "commercial"
        assert (shop.width, shop.height) == (100, 130)
        assert shop.shop_type == "armory"
        assert shop.sign_rect.size == (70, 20)

    def test_texture_keys_unique(self):
        """Test each building caches under its own key."""
        cache = TextureCache()
        generator = BuildingGenerator(SeededRNG(1), cache)
        a = generator.generate_building("residential", 0, 0, BuildingOptions(width=70, height=90))
        b = generator.generate_building("residential", 0, 0, BuildingOptions(width=70, height=90))
        assert a.texture_key != b.texture_key
        assert cache.get(a.texture_key) is a.surface

    def test_destroy_clears_door(self):
        """Test destroyed buildings drop their door zone."""
        building = BuildingGenerator(SeededRNG(1)).generate_building("residential", 300, 400)
        building.destroy()
        assert building.destroyed
        assert building.door_zone is None

    def test_texture_type_for_color(self):
        """Test wall colours pick a texture family."""
        assert texture_type_for_color(0xDEB887) == "wood"
        assert texture_type_for_color(0xB22222) == "brick"
        assert texture_type_for_color(0x808080) == "stone"


class TestNPCGenerator:
    """Tests for NPCGenerator."""

    def test_unknown_type_is_villager(self):
        """Test unknown NPC types become villagers."""
        npc = NPCGenerator(SeededRNG(1)).generate_npc("wizard", 10, 20)
        assert npc.npc_type == "villager"
        assert npc.surface.get_size() == (24, 28)

    def test_guard_size(self):
        """Test guards are drawn larger."""
        npc = NPCGenerator(SeededRNG(1)).generate_npc("guard", 10, 20, dialogue=["Halt."])
        assert npc.surface.get_size() == (28, 33)
        assert npc.dialogue == ["Halt."]

    def test_cleanup_removes_textures(self):
        """Test cleanup drops every NPC texture from the cache."""
        cache = TextureCache()
        generator = NPCGenerator(SeededRNG(1), cache)
        npcs = [generator.generate_npc("villager", i * 10, 0) for i in range(3)]
        assert len(cache) == 3
        generator.cleanup()
        assert len(cache) == 0
        assert all(npc.destroyed for npc in npcs)

    def test_town_npcs(self):
        """Test town crowds have shopkeepers, villagers and guards."""
        cache = TextureCache()
        roads = RoadGenerator(SeededRNG(1), cache)
        buildings = BuildingGenerator(SeededRNG(1), cache)
        road = roads.generate_road_path("forest_town", WIDTH, HEIGHT)
        shop = buildings.generate_shop_building(512, 400)
        npcs = NPCGenerator(SeededRNG(1), cache).generate_town_npcs(road, [shop], WIDTH)
        kinds = [npc.npc_type for npc in npcs]
        assert kinds.count("shopkeeper") == 1
        assert 3 <= kinds.count("villager") <= 6
        assert 1 <= kinds.count("guard") <= 2


class TestSettlements:
    """Tests for towns and cities."""

    def _generators(self, seed=1):
        cache = TextureCache()
        return RoadGenerator(SeededRNG(seed), cache), BuildingGenerator(SeededRNG(seed), cache)

    def test_town_layout(self):
        """Test a forest town has one shop and a dirt road."""
        layout = TownBiomeGenerator(*self._generators()).generate_forest_town(WIDTH, HEIGHT)
        shops = [b for b in layout.buildings if b.shop_type]
        assert layout.road.road_type == "dirt"
        assert len(layout.buildings) == WIDTH // 150 + 1
        assert [s.x for s in shops] == [WIDTH / 2]

    def test_city_layout(self):
        """Test a city has three shops on a cobblestone road."""
        layout = CityBiomeGenerator(*self._generators()).generate_city(WIDTH, HEIGHT)
        shops = [b for b in layout.buildings if b.shop_type]
        assert layout.road.road_type == "cobblestone"
        assert len(layout.buildings) == WIDTH // 120 + 3
        assert [s.x for s in shops] == [256, 512, 768]

    def test_buildings_alternate_sides(self):
        """Test buildings alternate either side of their anchor."""
        layout = TownBiomeGenerator(*self._generators()).generate_forest_town(WIDTH, HEIGHT)
        assert layout.buildings[0].x == 200 - 80
        assert layout.buildings[1].x == 350 + 80

    def test_cleanup(self):
        """Test cleanup destroys buildings and drops their textures."""
        roads, buildings = self._generators()
        town = TownBiomeGenerator(roads, buildings)
        layout = town.generate_forest_town(WIDTH, HEIGHT)
        town.cleanup()
        assert all(b.destroyed for b in layout.buildings)
        assert not any(k.startswith("building-") for k in buildings.cache.keys())


class TestBiomes:
    """Tests for biome tables."""

    def test_unknown_biome_palette(self):
        """Test unknown biomes use the plains palette."""
        assert get_biome_palette("swamp") == BIOME_PALETTES["plains"]

    def test_parallax_increases_with_depth(self):
        """Test nearer layers scroll faster."""
        factors = [SCROLL_FACTORS[name] for name in DEPTH_ORDER]
        assert factors == sorted(factors)
        assert SCROLL_FACTORS["sky"] == 0
        assert SCROLL_FACTORS["foreground"] > SCROLL_FACTORS["ground"]

    def test_road_between_ground_and_foreground(self):
        """Test the road composites after the ground and before the foreground."""
        assert LAYER_ORDER.index("ground") < LAYER_ORDER.index("road") < LAYER_ORDER.index("foreground")


class TestEnvironmentBackgroundGenerator:
    """Tests for the layered environment."""

    def test_plains_layers(self):
        """Test a plains scene has every layer and a road."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        layers = env.generate_environment("plains", WIDTH, HEIGHT)
        assert set(layers) == {"sky", "distant", "mid", "ground", "road", "foreground", "overlay"}
        assert layers["distant"].y == 0
        assert layers["mid"].y == 180
        assert layers["ground"].y == 360
        assert layers["foreground"].y == 480
        assert layers["sky"].texture_key == "env-sky-plains"

    def test_is_on_road(self):
        """Test road queries through the environment."""
        env = EnvironmentBackgroundGenerator(SeededRNG(12345))
        env.generate_environment("plains", WIDTH, HEIGHT)
        road_y = env.get_road_y_at_x(400)
        assert env.is_on_road(400, road_y + 40)
        assert not env.is_on_road(400, road_y + 100)

    def test_road_texture_follows_viewport_size(self):
        """Test a smaller viewport gets its own road texture matching the new road."""
        env = EnvironmentBackgroundGenerator(SeededRNG(12345))
        env.generate_environment("plains", WIDTH, HEIGHT)
        large_key = env.layers["road"].texture_key
        env.generate_environment("plains", 640, 360)
        key = env.layers["road"].texture_key
        assert key != large_key
        assert key.endswith("-640x360")
        texture = env.cache.get(key)
        assert texture.get_height() == 360
        for x in (20, 100, 320, 620):
            road_y = env.get_road_y_at_x(x)
            assert env.is_on_road(x, road_y)
            assert texture.get_at((x, math.floor(road_y)))[3] == 255

    def test_road_tiles_past_its_texture(self):
        """Test the road repeats when the camera scrolls beyond its texture."""
        env = EnvironmentBackgroundGenerator(SeededRNG(12345))
        env.generate_environment("plains", WIDTH, HEIGHT)
        env.layers = {"road": env.layers["road"]}
        tex_w = env.cache.get(env.layers["road"].texture_key).get_width()
        assert tex_w == math.ceil(env.current_road.points[-1][0])

        far = env.compose(3 * tex_w, include_actors=False)
        assert _bytes(far) == _bytes(env.compose(0, include_actors=False))
        shifted = env.compose(5 * tex_w + 300, include_actors=False)
        road_y = env.get_road_y_at_x(400)
        assert shifted.get_at((100, math.floor(road_y)))[3] == 255

    def test_dark_lands_has_no_road(self):
        """Test roadless biomes skip the road layer."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        layers = env.generate_environment("dark_lands", WIDTH, HEIGHT)
        assert "road" not in layers
        assert env.get_road_y_at_x(100) is None
        assert env.is_on_road(100, 400) is False

    def test_roads_can_be_disabled(self):
        """Test include_roads=False leaves the road out."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        layers = env.generate_environment("plains", WIDTH, HEIGHT, EnvironmentOptions(include_roads=False))
        assert "road" not in layers

    def test_biome_switch_clears_previous(self):
        """Test switching biomes drops the old layers and road."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        old_layers = dict(env.generate_environment("forest", WIDTH, HEIGHT))
        env.generate_environment("desert", WIDTH, HEIGHT)
        assert env.get_current_biome() == "desert"
        assert all(layer.destroyed for layer in old_layers.values())
        assert env.road_generator.get_road("forest", WIDTH, HEIGHT) is None
        assert all(layer.texture_key.endswith("-desert") for layer in env.layers.values() if layer.texture_key)

    def test_town_content(self):
        """Test town biomes place buildings and NPCs, and switching away removes them."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        env.generate_environment("forest_town", WIDTH, HEIGHT)
        buildings = list(env.current_buildings)
        assert buildings
        assert env.current_npcs
        assert "road" in env.layers

        env.generate_environment("plains", WIDTH, HEIGHT)
        assert env.current_buildings == []
        assert env.current_npcs == []
        assert all(b.destroyed for b in buildings)
        assert not any(k.startswith(("building-", "npc-")) for k in env.cache.keys())

    def test_unknown_biome_draws_plains(self):
        """Test unknown biomes still build a full scene."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        layers = env.generate_environment("swamp", 512, 300)
        assert layers["sky"].texture_key == "env-sky-swamp"
        assert "road" in layers

    def test_compose_size(self):
        """Test composed frames match the viewport."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        env.generate_environment("mountains", 640, 360)
        assert env.compose(0).get_size() == (640, 360)
        assert env.compose(5000).get_size() == (640, 360)

    def test_deterministic(self):
        """Test one seed composes identical pixels."""
        a = EnvironmentBackgroundGenerator(SeededRNG(5))
        b = EnvironmentBackgroundGenerator(SeededRNG(5))
        a.generate_environment("plains", 640, 360)
        b.generate_environment("plains", 640, 360)
        assert _bytes(a.compose(0)) == _bytes(b.compose(0))

    def test_camera_scrolls(self):
        """Test moving the camera changes the frame."""
        env = EnvironmentBackgroundGenerator(SeededRNG(5))
        env.generate_environment("forest", 640, 360)
        assert _bytes(env.compose(0)) != _bytes(env.compose(300))

    def test_textures_reused(self):
        """Test returning to a biome reuses its cached textures."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        env.generate_environment("plains", 640, 360)
        sky = env.cache.get("env-sky-plains")
        env.generate_environment("desert", 640, 360)
        env.generate_environment("plains", 640, 360)
        assert env.cache.get("env-sky-plains") is sky

    def test_destroy_invalidates_textures(self):
        """Test destroy drops environment and road textures."""
        env = EnvironmentBackgroundGenerator(SeededRNG(1))
        env.generate_environment("plains", 640, 360)
        env.destroy()
        assert env.get_current_biome() is None
        assert env.layers == {}
        assert not any(k.startswith(("env-", "road-")) for k in env.cache.keys())
