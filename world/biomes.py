"""
Biome definitions for side-scrolling backgrounds.

Each biome has a palette per background layer and an atmosphere tint.
Layers are drawn in LAYER_ORDER and scroll at SCROLL_FACTORS times the
camera speed.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class LayerColors:
    base: int
    accent: int


@dataclass(frozen=True)
class SkyColors:
    top: int
    bottom: int


@dataclass(frozen=True)
class Atmosphere:
    tint: int
    alpha: float
    particle: str


@dataclass(frozen=True)
class BiomePalette:
    sky: SkyColors
    distant: LayerColors
    mid: LayerColors
    ground: LayerColors
    atmosphere: Atmosphere


BIOMES: Tuple[str, ...] = (
    "plains", "forest", "mountains", "dark_lands", "dungeon", "desert", "forest_town", "city",
)
DEFAULT_BIOME = "plains"
TOWN_BIOMES = ("forest_town", "city")
# Biomes with no road through them
ROADLESS_BIOMES = ("dark_lands",)

BIOME_PALETTES: Dict[str, BiomePalette] = {
    "plains": BiomePalette(
        sky=SkyColors(0x4A5A7A, 0x2A3A5A),
        distant=LayerColors(0x1A2A3A, 0x2A3A4A),
        mid=LayerColors(0x2A3A2A, 0x3A4A3A),
        ground=LayerColors(0x16213E, 0x1A2A2E),
        atmosphere=Atmosphere(0xFFFFFF, 0.1, "dust"),
    ),
    "forest": BiomePalette(
        sky=SkyColors(0x1A2A1A, 0x0A1A0A),
        distant=LayerColors(0x0A1A0A, 0x1A2A1A),
        mid=LayerColors(0x1A2A1A, 0x2A3A2A),
        ground=LayerColors(0x0A1A0A, 0x1A2A1A),
        atmosphere=Atmosphere(0x44FF44, 0.15, "leaf"),
    ),
    "mountains": BiomePalette(
        sky=SkyColors(0x5A6A8A, 0x3A4A6A),
        distant=LayerColors(0x2A2A3A, 0x3A3A4A),
        mid=LayerColors(0x3A3A4A, 0x4A4A5A),
        ground=LayerColors(0x1A1A2E, 0x2A2A3E),
        atmosphere=Atmosphere(0xCCCCFF, 0.2, "snow"),
    ),
    "dark_lands": BiomePalette(
        sky=SkyColors(0x1A0A0A, 0x000000),
        distant=LayerColors(0x0A0A0A, 0x1A0A0A),
        mid=LayerColors(0x1A0A0A, 0x2A1A1A),
        ground=LayerColors(0x000000, 0x1A0A0A),
        atmosphere=Atmosphere(0xFF0000, 0.25, "ember"),
    ),
    "dungeon": BiomePalette(
        sky=SkyColors(0x0A0A0A, 0x000000),
        distant=LayerColors(0x1A1A1A, 0x2A2A2A),
        mid=LayerColors(0x1A1A1A, 0x2A2A2A),
        ground=LayerColors(0x0A0A0A, 0x1A1A1A),
        atmosphere=Atmosphere(0x00FF00, 0.1, "bubble"),
    ),
    "desert": BiomePalette(
        sky=SkyColors(0x7A6A5A, 0x5A4A3A),
        distant=LayerColors(0x4A3A2A, 0x5A4A2A),
        mid=LayerColors(0x3A2A1A, 0x4A5A2A),
        ground=LayerColors(0x3A2A1A, 0x4A3A2A),
        atmosphere=Atmosphere(0xFFCC88, 0.15, "sand"),
    ),
    "forest_town": BiomePalette(
        sky=SkyColors(0x3A4A5A, 0x1A2A2A),
        distant=LayerColors(0x0A1A0A, 0x1A2A1A),
        mid=LayerColors(0x1A2A1A, 0x2A3A2A),
        ground=LayerColors(0x16213E, 0x1A2A2E),
        atmosphere=Atmosphere(0xFFEECC, 0.1, "leaf"),
    ),
    "city": BiomePalette(
        sky=SkyColors(0x4A5A7A, 0x2A3A5A),
        distant=LayerColors(0x2A2A3A, 0x3A3A4A),
        mid=LayerColors(0x2A2A3A, 0x3A3A4A),
        ground=LayerColors(0x1A1A2E, 0x2A2A3E),
        atmosphere=Atmosphere(0xFFFFFF, 0.1, "dust"),
    ),
}

# Compositing order, back to front
LAYER_ORDER: Tuple[str, ...] = ("sky", "distant", "mid", "ground", "road", "foreground", "overlay")

# Camera multiplier per layer; non-decreasing from sky to foreground
SCROLL_FACTORS: Dict[str, float] = {
    "sky": 0.0,
    "distant": 0.2,
    "mid": 0.5,
    "ground": 1.0,
    "road": 1.0,
    "foreground": 1.4,
    "overlay": 0.0,
}
DEPTH_ORDER: Tuple[str, ...] = ("sky", "distant", "mid", "ground", "foreground")


def get_biome_palette(biome: str) -> BiomePalette:
    return BIOME_PALETTES.get(biome, BIOME_PALETTES[DEFAULT_BIOME])
