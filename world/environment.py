"""
Parallax environment backgrounds.

One biome is active at a time. Switching biome tears down every layer,
building, NPC and road of the previous biome before the new layers are
built in a fixed order: sky, distant, mid, ground, foreground, then the
atmosphere overlay, then town content or a plain road.

Layer textures are memoised in a TextureCache under ``env-<layer>-<biome>``
keys, so revisiting a biome reuses its textures. Random detail comes from
streams derived from each texture key, which keeps a texture identical
whether or not it was cached.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pygame

from engine import colors
from engine.config import GeneratorConfig
from engine.drawer import PixelDrawer, create_canvas
from engine.error_handler import logger
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache
from world.biomes import (
    BIOMES,
    DEFAULT_BIOME,
    LAYER_ORDER,
    ROADLESS_BIOMES,
    SCROLL_FACTORS,
    TOWN_BIOMES,
    BiomePalette,
    get_biome_palette,
)
from world.buildings import Building, BuildingGenerator
from world.npcs import NPC, NPCGenerator
from world.roads import RoadGenerator, RoadPath
from world.towns import CityBiomeGenerator, SettlementLayout, TownBiomeGenerator

CLOUDLESS_BIOMES = ("dark_lands", "dungeon")
LANDMARK_PERIOD = 2048
GROUND_LINE_SPACING = 16
GROUND_COLUMN_SPACING = 32
SKY_GRADIENT_STEPS = 30
RIB_COLOR = 0xDDDDDD

# Layer placement as fractions of the viewport height: (top, height)
LAYER_BANDS = {
    "distant": (0.0, 0.6),
    "mid": (0.3, 0.7),
    "ground": (0.6, 0.4),
    "foreground": (0.8, 0.2),
}


@dataclass(frozen=True)
class EnvironmentOptions:
    world_x: int = 0
    # Road centreline as a fraction of the viewport height
    ground_y_ratio: float = 0.65
    include_roads: bool = True
    include_town_content: bool = True
    cloud_count: int = 12
    foreground_alpha: float = 0.7


@dataclass
class EnvironmentLayer:
    name: str
    texture_key: Optional[str]
    scroll_factor: float
    y: int
    height: int
    alpha: float = 1.0
    tint: Optional[int] = None
    destroyed: bool = False

    def destroy(self) -> None:
        self.destroyed = True


def _alpha(value: float) -> int:
    return round(value * 255)


class EnvironmentBackgroundGenerator:
    """Builds and composites the layered background for the active biome."""

    def __init__(
        self,
        rng: Optional[SeededRNG] = None,
        cache: Optional[TextureCache] = None,
        config: Optional[GeneratorConfig] = None,
    ):
        self.rng = rng or SeededRNG()
        self.cache = cache if cache is not None else TextureCache()
        self.config = config or GeneratorConfig()

        self.road_generator = RoadGenerator(self.rng.derive("roads"), self.cache)
        self.building_generator = BuildingGenerator(self.rng.derive("buildings"), self.cache)
        self.npc_generator = NPCGenerator(self.rng.derive("npcs"), self.cache)
        self.town_generator = TownBiomeGenerator(self.road_generator, self.building_generator)
        self.city_generator = CityBiomeGenerator(self.road_generator, self.building_generator)

        self.layers: Dict[str, EnvironmentLayer] = {}
        self.current_biome: Optional[str] = None
        self.current_road: Optional[RoadPath] = None
        self.current_buildings: List[Building] = []
        self.current_npcs: List[NPC] = []
        self.width = 0
        self.height = 0
        self.options = EnvironmentOptions()

    # ------------------------------------------------------------------
    # Biome lifecycle
    # ------------------------------------------------------------------

    def generate_environment(
        self,
        biome: str,
        width: int,
        height: int,
        options: EnvironmentOptions = EnvironmentOptions(),
    ) -> Dict[str, EnvironmentLayer]:
        """
        Switch to ``biome`` and build its layers for a width x height viewport.

        Unknown biomes are drawn with the plains palette under their own name.

        Returns:
            The active layer registry, keyed by layer name
        """
        if biome not in BIOMES:
            logger.warning(f"Unknown biome {biome!r}; drawing it as {DEFAULT_BIOME}")

        self.clear_layers()

        self.current_biome = biome
        self.width, self.height = width, height
        self.options = options
        palette = get_biome_palette(biome)

        self.generate_sky_layer(palette)
        self.generate_distant_layer(palette)
        self.generate_mid_layer(palette)
        self.generate_ground_layer(palette)
        self.generate_foreground_layer(palette)
        self.generate_atmosphere(palette)

        if biome in TOWN_BIOMES:
            if options.include_town_content:
                self.generate_town_content()
        elif biome not in ROADLESS_BIOMES and options.include_roads:
            self.generate_road_layer()

        logger.debug(f"Environment {biome} ready: {', '.join(self.layers)}")
        return self.layers

    def clear_layers(self) -> None:
        for layer in self.layers.values():
            layer.destroy()
        self.layers.clear()
        self.cleanup_biome_data()

    def cleanup_biome_data(self) -> None:
        """Destroy buildings, NPCs and road data of the active biome."""
        for building in self.current_buildings:
            building.destroy()
            self.cache.remove(building.texture_key)
        self.current_buildings = []

        self.npc_generator.cleanup()
        self.current_npcs = []

        self.town_generator.cleanup()
        self.city_generator.cleanup()

        if self.current_biome is not None:
            self.road_generator.clear_road_data(self.current_biome, self.width, self.height)
        self.current_road = None

    def destroy(self) -> None:
        """Scene teardown: drop everything, including memoised textures."""
        self.clear_layers()
        self.cache.invalidate("env-")
        self.cache.invalidate("road-")
        self.current_biome = None

    def get_current_biome(self) -> Optional[str]:
        return self.current_biome

    # ------------------------------------------------------------------
    # Road queries
    # ------------------------------------------------------------------

    def get_road_y_at_x(self, x: float) -> Optional[float]:
        if self.current_road is None:
            return None
        return self.road_generator.get_road_y_at_x(self.current_biome, x, self.width, self.height)

    def is_on_road(self, x: float, y: float) -> bool:
        if self.current_road is None:
            return False
        return self.road_generator.is_on_road(self.current_biome, x, y, self.width, self.height)

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def _texture_key(self, layer: str) -> str:
        return f"env-{layer}-{self.current_biome}"

    def _add_layer(self, name: str, key: Optional[str], y: float, height: float, alpha: float = 1.0,
                   tint: Optional[int] = None) -> EnvironmentLayer:
        layer = EnvironmentLayer(name, key, SCROLL_FACTORS[name], math.floor(y), math.floor(height), alpha, tint)
        self.layers[name] = layer
        return layer

    def _texture(self, key: str, width: int, height: int,
                 paint: Callable[[PixelDrawer, SeededRNG], None]) -> pygame.Surface:
        def build() -> pygame.Surface:
            drawer = PixelDrawer.create(width, max(1, height))
            paint(drawer, self.rng.derive(key))
            return drawer.surface
        return self.cache.get_or_create(key, build)

    def generate_sky_layer(self, palette: BiomePalette) -> None:
        key = self._texture_key("sky")
        tex_w = max(self.width, self.config.sky_min_width)
        height = self.height
        clouds = self.current_biome not in CLOUDLESS_BIOMES

        def paint(d: PixelDrawer, rng: SeededRNG) -> None:
            for i in range(SKY_GRADIENT_STEPS):
                band = colors.lerp_color(palette.sky.top, palette.sky.bottom, i / SKY_GRADIENT_STEPS)
                y0 = math.floor(height * i / SKY_GRADIENT_STEPS)
                y1 = math.floor(height * (i + 1) / SKY_GRADIENT_STEPS)
                d.draw_rect(0, y0, tex_w, y1 - y0, band)
            if clouds:
                for _ in range(self.options.cloud_count):
                    x = rng.random() * tex_w
                    y = rng.random() * height * 0.4
                    size = rng.random() * 60 + 40
                    d.draw_circle(x, y, size, 0xFFFFFF, _alpha(0.15))
                    d.draw_circle(x + size * 0.6, y, size * 0.8, 0xFFFFFF, _alpha(0.15))
                    d.draw_circle(x - size * 0.4, y, size * 0.7, 0xFFFFFF, _alpha(0.15))

        self._texture(key, tex_w, height, paint)
        self._add_layer("sky", key, 0, height)

    def generate_distant_layer(self, palette: BiomePalette) -> None:
        key = self._texture_key("distant")
        top, share = LAYER_BANDS["distant"]
        layer_h = math.floor(self.height * share)
        tex_w = max(self.width * 2, self.config.layer_min_width)
        pattern_w = self.width
        painter = {
            "mountains": self.draw_distant_mountains,
            "city": self.draw_distant_mountains,
            "forest": self.draw_distant_forest,
            "forest_town": self.draw_distant_forest,
            "dark_lands": self.draw_dark_lands_distant,
            "desert": self.draw_desert_dunes,
        }.get(self.current_biome, self.draw_distant_hills)

        def paint(d: PixelDrawer, rng: SeededRNG) -> None:
            d.draw_rect(0, 0, tex_w, layer_h, palette.distant.base)
            for pattern_x in range(0, tex_w, max(1, pattern_w)):
                painter(d, palette, pattern_w, layer_h, pattern_x, rng)

        self._texture(key, tex_w, layer_h, paint)
        self._add_layer("distant", key, self.height * top, layer_h)

    def generate_mid_layer(self, palette: BiomePalette) -> None:
        key = self._texture_key("mid")
        top, share = LAYER_BANDS["mid"]
        layer_h = math.floor(self.height * share)
        tex_w = max(self.width * 2, self.config.layer_min_width)
        pattern_w = self.config.mid_pattern_width
        biome = self.current_biome

        def paint(d: PixelDrawer, rng: SeededRNG) -> None:
            d.draw_rect(0, 0, tex_w, layer_h, palette.mid.base, _alpha(0.8))
            for pattern_x in range(0, tex_w, pattern_w):
                if biome == "forest":
                    self.draw_mid_forest(d, palette, pattern_w, layer_h, pattern_x, rng)
                elif biome == "mountains":
                    self.draw_mid_mountains(d, palette, pattern_w, layer_h, pattern_x, rng)
                elif biome == "dark_lands":
                    self.draw_dark_lands_mid(d, palette, pattern_w, layer_h, pattern_x, rng)
                    self.draw_landmark_ruins(d, palette, layer_h, pattern_x + 500)
                elif biome == "desert":
                    self.draw_desert_mid(d, palette, pattern_w, layer_h, pattern_x, rng)
                elif biome == "dungeon":
                    self.draw_dungeon_mid(d, palette, pattern_w, layer_h, pattern_x, rng)
                else:
                    self.draw_mid_plains(d, palette, pattern_w, layer_h, pattern_x, rng)
                    if pattern_x % LANDMARK_PERIOD == 0:
                        self.draw_landmark_ruins(d, palette, layer_h, pattern_x + 300)

        self._texture(key, tex_w, layer_h, paint)
        self._add_layer("mid", key, self.height * top, layer_h)

    def generate_ground_layer(self, palette: BiomePalette) -> None:
        key = self._texture_key("ground")
        top, share = LAYER_BANDS["ground"]
        layer_h = math.floor(self.height * share)
        tex_w = max(self.width * 2, self.config.layer_min_width)
        pattern_w = self.config.ground_pattern_width

        def paint(d: PixelDrawer, rng: SeededRNG) -> None:
            light = colors.lighten(palette.ground.base, 0.05)
            dark = colors.darken(palette.ground.base, 0.05)
            for gy in range(layer_h):
                d.draw_rect(0, gy, tex_w, 1, colors.lerp_color(light, dark, gy / layer_h))

            accent = palette.ground.accent
            accent_light, accent_dark = colors.lighten(accent, 0.1), colors.darken(accent, 0.1)
            for pattern_x in range(0, tex_w, pattern_w):
                for _ in range(60):
                    x = pattern_x + rng.random() * pattern_w
                    y = rng.random() * layer_h
                    size = rng.random() * 5 + 2
                    shade = accent_light if rng.random() > 0.5 else accent_dark
                    d.draw_circle(x, y, size, shade, _alpha(0.4))
                for _ in range(80):
                    x = pattern_x + rng.random() * pattern_w
                    y = rng.random() * layer_h
                    d.draw_circle(x, y, rng.random() * 2 + 1, accent, _alpha(0.5))

            # Terrain strata and faint columns
            for y in range(0, layer_h, GROUND_LINE_SPACING):
                d.draw_rect(0, y, tex_w, 1, accent, _alpha(0.25))
            for x in range(0, tex_w, GROUND_COLUMN_SPACING):
                d.draw_rect(x, 0, 1, layer_h, accent, _alpha(0.1))

        self._texture(key, tex_w, layer_h, paint)
        self._add_layer("ground", key, self.height * top, layer_h)

    def generate_foreground_layer(self, palette: BiomePalette) -> None:
        key = self._texture_key("foreground")
        top, share = LAYER_BANDS["foreground"]
        layer_h = math.floor(self.height * share)
        tex_w = max(self.width * 2, self.config.layer_min_width)
        pattern_w = self.config.foreground_pattern_width
        shrub = colors.darken(palette.ground.base, 0.3)

        def paint(d: PixelDrawer, rng: SeededRNG) -> None:
            for pattern_x in range(0, tex_w, pattern_w):
                for _ in range(5):
                    x = pattern_x + rng.random() * pattern_w
                    y = rng.random() * layer_h
                    size = rng.random() * 40 + 20
                    d.draw_ellipse(x, y, size, size * 2, shrub, _alpha(0.6))
                for _ in range(2):
                    x = pattern_x + rng.random() * pattern_w
                    y = rng.random() * layer_h
                    d.draw_circle(x, y, rng.random() * 60 + 40, colors.darken(shrub, 0.2), _alpha(0.5))

        self._texture(key, tex_w, layer_h, paint)
        self._add_layer("foreground", key, self.height * top, layer_h, alpha=self.options.foreground_alpha)

    def generate_atmosphere(self, palette: BiomePalette) -> None:
        """Full-viewport multiply tint; it has no texture."""
        atmosphere = palette.atmosphere
        self._add_layer("overlay", None, 0, self.height, alpha=atmosphere.alpha, tint=atmosphere.tint)

    # ------------------------------------------------------------------
    # Roads and towns
    # ------------------------------------------------------------------

    def generate_road_layer(self) -> None:
        ground_y = self.height * self.options.ground_y_ratio
        road = self.road_generator.generate_road_path(self.current_biome, self.width, self.height, ground_y)
        self.current_road = road
        self.render_road_layer(road)

    def generate_town_content(self) -> None:
        ground_y = self.height * self.options.ground_y_ratio
        if self.current_biome == "city":
            layout: SettlementLayout = self.city_generator.generate_city(self.width, self.height, ground_y)
        else:
            layout = self.town_generator.generate_forest_town(self.width, self.height, ground_y)
        self.current_road = layout.road
        self.current_buildings = layout.buildings
        self.current_npcs = self.npc_generator.generate_town_npcs(layout.road, layout.buildings, self.width)
        layout.npcs = self.current_npcs
        self.render_road_layer(layout.road)

    def render_road_layer(self, road: RoadPath) -> None:
        if len(road.points) < 2:
            return
        key = f"road-layer-{self.current_biome}-{self.width}x{self.height}"
        # The texture spans the sampled road so it tiles like the other layers
        tex_w = max(self.width, math.ceil(road.points[-1][0]))
        if key not in self.cache:
            self.cache.put(key, self.road_generator.render_road_surface(road, tex_w, self.height))
        self._add_layer("road", key, 0, self.height)

    # ------------------------------------------------------------------
    # Compositing
    # ------------------------------------------------------------------

    def compose(self, camera_x: float = 0, include_actors: bool = True) -> pygame.Surface:
        """
        Render the viewport as seen from ``camera_x``.

        Each layer is offset by camera_x times its scroll factor and tiled
        horizontally. Buildings and NPCs are drawn between the road and the
        foreground.
        """
        out = create_canvas(max(1, self.width), max(1, self.height))
        for name in LAYER_ORDER:
            layer = self.layers.get(name)
            if layer is None:
                continue
            if name == "foreground" and include_actors:
                self._draw_actors(out, camera_x)
            if layer.texture_key is None:
                self._apply_tint(out, layer)
                continue
            texture = self.cache.get(layer.texture_key)
            if texture is None:
                logger.warning(f"Layer {name} lost its texture {layer.texture_key}")
                continue
            if layer.alpha < 1.0:
                texture = texture.copy()
                texture.fill((255, 255, 255, _alpha(layer.alpha)), special_flags=pygame.BLEND_RGBA_MULT)
            tex_w = texture.get_width()
            x = -(math.floor(camera_x * layer.scroll_factor) % tex_w)
            while x < self.width:
                out.blit(texture, (x, layer.y))
                x += tex_w
        return out

    def _draw_actors(self, out: pygame.Surface, camera_x: float) -> None:
        cam = math.floor(camera_x)
        for building in self.current_buildings:
            left, top = building.top_left
            out.blit(building.surface, (left - cam, top))
        for npc in self.current_npcs:
            w, h = npc.surface.get_size()
            out.blit(npc.surface, (math.floor(npc.x - w / 2) - cam, math.floor(npc.y - h)))

    @staticmethod
    def _apply_tint(out: pygame.Surface, layer: EnvironmentLayer) -> None:
        # Multiply blend at partial strength: dst * lerp(white, tint, alpha)
        factor = colors.lerp_color(0xFFFFFF, layer.tint if layer.tint is not None else 0xFFFFFF, layer.alpha)
        out.fill(colors.to_rgb(factor), special_flags=pygame.BLEND_RGB_MULT)

    # ------------------------------------------------------------------
    # Distant silhouettes
    # ------------------------------------------------------------------

    def draw_distant_mountains(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                               offset_x: float, rng: SeededRNG) -> None:
        peaks = 3
        peak_w = width / peaks
        base = palette.distant.accent
        light, dark = colors.lighten(base, 0.15), colors.darken(base, 0.15)
        steps = 6
        for i in range(peaks):
            x = offset_x + peak_w * i + rng.random() * 100
            peak_h = height * (0.4 + rng.random() * 0.5)
            pw = peak_w * (0.8 + rng.random() * 0.4)

            outline = [(x, height)]
            for j in range(1, steps + 1):
                outline.append((x + (pw / 2) * (j / steps), height - peak_h * (j / steps) + (rng.random() * 20 - 10)))
            for j in range(steps - 1, -1, -1):
                outline.append((x + pw - (pw / 2) * (j / steps), height - peak_h * (j / steps) + (rng.random() * 20 - 10)))
            outline.append((x + pw, height))
            d.draw_polygon(outline, dark)

            # Snow cap
            d.draw_polygon([
                (x + pw * 0.25, height - peak_h * 0.5), (x + pw / 2, height - peak_h), (x + pw * 0.4, height - peak_h * 0.6),
            ], light, _alpha(0.4))

    def draw_distant_hills(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                           offset_x: float, rng: SeededRNG) -> None:
        hills = 4
        hill_w = width / hills
        base = palette.distant.accent
        for i in range(hills):
            hill_h = height * (0.2 + rng.random() * 0.2)
            cx = offset_x + hill_w * i + hill_w / 2
            cy = height - hill_h / 2
            d.draw_ellipse(cx, cy, hill_w * 1.2, hill_h, base)
            d.draw_ellipse(cx, cy - hill_h * 0.2, hill_w, hill_h * 0.6, colors.lighten(base, 0.12), _alpha(0.5))
            d.draw_ellipse(cx, cy + hill_h * 0.2, hill_w, hill_h * 0.6, colors.darken(base, 0.12), _alpha(0.4))

    def draw_distant_forest(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                            offset_x: float, rng: SeededRNG) -> None:
        dark = colors.darken(palette.distant.accent, 0.2)
        trees = 12
        spacing = width / trees
        for i in range(trees):
            x = offset_x + spacing * i + rng.random() * spacing
            th = height * (0.2 + rng.random() * 0.4)
            tw = 20 + rng.random() * 30
            # Pine silhouette
            d.draw_polygon([
                (x, height - th),
                (x - tw / 2, height - th * 0.6), (x - tw / 4, height - th * 0.65),
                (x - tw * 0.7, height - th * 0.3), (x - tw / 3, height - th * 0.35),
                (x - tw, height), (x + tw, height),
                (x + tw / 3, height - th * 0.35), (x + tw * 0.7, height - th * 0.3),
                (x + tw / 4, height - th * 0.65), (x + tw / 2, height - th * 0.6),
            ], dark)

    def draw_desert_dunes(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                          offset_x: float, rng: SeededRNG) -> None:
        dunes = 5
        dune_w = width / dunes
        for i in range(dunes):
            dune_h = height * (0.15 + rng.random() * 0.15)
            d.draw_ellipse(offset_x + dune_w * i + dune_w / 2, height - dune_h / 2, dune_w * 1.5, dune_h,
                           palette.distant.accent)

    def draw_dark_lands_distant(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                                offset_x: float, rng: SeededRNG) -> None:
        spires = 4
        spacing = width / spires
        for i in range(spires):
            x = offset_x + spacing * (i + 0.5)
            spire_h = height * (0.4 + rng.random() * 0.3)
            d.draw_rect(x - 10, height - spire_h, 20, spire_h, palette.distant.accent, _alpha(0.5))

    # ------------------------------------------------------------------
    # Mid-layer scenery
    # ------------------------------------------------------------------

    def draw_landmark_ruins(self, d: PixelDrawer, palette: BiomePalette, height: int, x: float) -> None:
        base = colors.darken(palette.mid.accent, 0.5)
        detail = colors.darken(base, 0.3)
        # Broken pillar with fluting
        d.draw_rect(x, height - 120, 30, 120, base)
        d.draw_rect(x + 5, height - 120, 5, 120, detail)
        # Crumbling wall
        d.draw_rect(x - 100, height - 40, 80, 40, base)
        d.draw_rect(x - 80, height - 60, 40, 20, base)
        d.draw_line(x + 10, height - 100, x + 25, height - 80, detail, _alpha(0.8), thickness=2)

    def draw_mid_forest(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                        offset_x: float, rng: SeededRNG) -> None:
        trees = 6
        spacing = width / trees
        trunk = colors.darken(palette.mid.accent, 0.4)
        foliage = palette.mid.accent
        foliage_light, foliage_dark = colors.lighten(foliage, 0.15), colors.darken(foliage, 0.15)
        for i in range(trees):
            x = offset_x + spacing * i + rng.random() * 50
            th = height * (0.5 + rng.random() * 0.3)
            tw = 80 + rng.random() * 60
            trunk_w = 15 + rng.random() * 10
            trunk_top = height - th

            d.draw_rect(x - trunk_w / 2, trunk_top, trunk_w, th, trunk)
            d.draw_rect(x + trunk_w / 4, trunk_top, trunk_w / 4, th, colors.darken(trunk, 0.2))

            for level in range(3):
                level_y = trunk_top + level * th * 0.2
                level_w = tw * (1 - level * 0.2)
                d.draw_ellipse(x, level_y, level_w, th * 0.3, foliage_dark, _alpha(0.9))
                clump = foliage_light if level == 0 else foliage
                d.draw_circle(x - level_w / 4, level_y - 5, level_w / 4, clump, _alpha(0.8))
                d.draw_circle(x + level_w / 4, level_y - 5, level_w / 4, clump, _alpha(0.8))
                d.draw_circle(x, level_y - 10, level_w / 3, clump, _alpha(0.8))

            # Root flares
            d.draw_polygon([(x - trunk_w / 2, height), (x - trunk_w, height), (x - trunk_w / 2, height - 20)], trunk)
            d.draw_polygon([(x + trunk_w / 2, height), (x + trunk_w, height), (x + trunk_w / 2, height - 20)], trunk)

    def draw_mid_mountains(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                           offset_x: float, rng: SeededRNG) -> None:
        peaks = 6
        peak_w = width / (peaks + 1)
        for i in range(peaks):
            x = offset_x + peak_w * (i + 1)
            peak_h = height * (0.4 + rng.random() * 0.4)
            pw = peak_w * (0.7 + rng.random() * 0.3)
            d.draw_polygon([(x - pw / 2, height), (x, height - peak_h), (x + pw / 2, height)], palette.mid.accent)

    def draw_dark_lands_mid(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                            offset_x: float, rng: SeededRNG) -> None:
        elements = 8
        spacing = width / elements
        for i in range(elements):
            x = offset_x + spacing * i + rng.random() * spacing
            roll = rng.random()
            if roll > 0.6:
                # Dead tree
                th = height * (0.4 + rng.random() * 0.3)
                d.draw_line(x, height, x + (rng.random() * 40 - 20), height - th, palette.mid.accent,
                            _alpha(0.8), thickness=4)
                for b in range(3):
                    bx = x + (rng.random() * 20 - 10)
                    by = height - th * (0.3 + b * 0.2)
                    d.draw_line(bx, by, bx + (rng.random() * 60 - 30), by - 30, palette.mid.accent,
                                _alpha(0.8), thickness=4)
            elif roll > 0.3:
                # Obsidian spire
                sh = height * (0.3 + rng.random() * 0.5)
                d.draw_polygon([(x - 20, height), (x, height - sh), (x + 5, height - sh * 0.8), (x + 20, height)],
                               colors.darken(palette.mid.base, 0.4))
            else:
                # Rib bone: quarter arc rising from the ground
                radius = 60 + rng.random() * 40
                points = [
                    (x + math.cos(math.pi + t * math.pi / 2 / 12) * radius,
                     height + math.sin(math.pi + t * math.pi / 2 / 12) * radius)
                    for t in range(13)
                ]
                for (ax, ay), (bx, by) in zip(points, points[1:]):
                    d.draw_line(ax, ay, bx, by, RIB_COLOR, _alpha(0.4), thickness=6)

    def draw_desert_mid(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                        offset_x: float, rng: SeededRNG) -> None:
        cacti = 5
        spacing = width / cacti
        for i in range(cacti):
            x = offset_x + spacing * (i + 0.5)
            ch = height * (0.3 + rng.random() * 0.3)
            d.draw_rect(x - 8, height - ch, 16, ch, palette.mid.accent)
            if rng.random() > 0.5:
                d.draw_rect(x - 8, height - ch * 0.6, 12, 12, palette.mid.accent)

    def draw_dungeon_mid(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                         offset_x: float, rng: SeededRNG) -> None:
        columns = 8
        spacing = width / columns
        for i in range(columns):
            x = offset_x + spacing * (i + 0.5)
            ch = height * (0.4 + rng.random() * 0.3)
            d.draw_rect(x - 8, height - ch, 16, ch, palette.mid.accent)
        # Brickwork on the lower half
        for y in range(math.floor(height * 0.5), height, 15):
            for x in range(0, width, 30):
                d.draw_rect_outline(offset_x + x, y, 30, 15, palette.mid.accent, alpha=_alpha(0.3))

    def draw_mid_plains(self, d: PixelDrawer, palette: BiomePalette, width: int, height: int,
                        offset_x: float, rng: SeededRNG) -> None:
        grass = palette.mid.accent
        grass_light, grass_dark = colors.lighten(grass, 0.1), colors.darken(grass, 0.1)
        for _ in range(30):
            x = offset_x + rng.random() * width
            y = height * (0.6 + rng.random() * 0.4)
            size = rng.random() * 8 + 4
            d.draw_circle(x, y, size, grass_dark, _alpha(0.5))
            d.draw_circle(x - size * 0.3, y - size * 0.3, size * 0.6, grass_light, _alpha(0.4))
            for _ in range(3):
                bx = x + (rng.random() - 0.5) * size
                by = y + (rng.random() - 0.5) * size
                d.draw_line(bx, by, bx + (rng.random() - 0.5) * 2, by - size * 0.5, grass_dark, _alpha(0.6))
        for _ in range(8):
            x = offset_x + rng.random() * width
            y = height * (0.65 + rng.random() * 0.35)
            d.draw_circle(x, y, rng.random() * 4 + 2, colors.darken(grass, 0.3), _alpha(0.6))
