"""
Side-scrolling world backgrounds (biomes, roads, towns, buildings, NPCs)
and overworld terrain tiles.
"""

from .biomes import BIOMES, BIOME_PALETTES, LAYER_ORDER, SCROLL_FACTORS, BiomePalette, get_biome_palette
from .buildings import Building, BuildingGenerator, BuildingOptions, BUILDING_TYPES
from .environment import EnvironmentBackgroundGenerator, EnvironmentLayer, EnvironmentOptions
from .npcs import NPC, NPCGenerator, NPC_TYPES
from .roads import RoadGenerator, RoadPath, ROAD_TYPES, ROAD_WIDTHS
from .terrain import TerrainGenerator, ENCOUNTER_MARKERS, SEGMENT_TYPES, get_background_key, get_encounter_key
from .towns import CityBiomeGenerator, SettlementLayout, TownBiomeGenerator

__all__ = [
    "BIOMES",
    "BIOME_PALETTES",
    "LAYER_ORDER",
    "SCROLL_FACTORS",
    "BiomePalette",
    "get_biome_palette",
    "Building",
    "BuildingGenerator",
    "BuildingOptions",
    "BUILDING_TYPES",
    "EnvironmentBackgroundGenerator",
    "EnvironmentLayer",
    "EnvironmentOptions",
    "NPC",
    "NPCGenerator",
    "NPC_TYPES",
    "RoadGenerator",
    "RoadPath",
    "ROAD_TYPES",
    "ROAD_WIDTHS",
    "TerrainGenerator",
    "ENCOUNTER_MARKERS",
    "SEGMENT_TYPES",
    "get_background_key",
    "get_encounter_key",
    "CityBiomeGenerator",
    "SettlementLayout",
    "TownBiomeGenerator",
]
