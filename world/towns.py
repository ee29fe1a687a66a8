"""
Town and city layouts.

Both lay a road across the viewport and line it with buildings that
alternate sides, then add shops. Cities are denser, taller and carry
more shops and defensive buildings.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from engine.error_handler import logger
from world.buildings import Building, BuildingGenerator, BuildingOptions
from world.npcs import NPC
from world.roads import RoadGenerator, RoadPath

# Buildings sit slightly below the road centreline
BUILDING_ROAD_OFFSET = 30


@dataclass
class SettlementLayout:
    biome: str
    road: RoadPath
    buildings: List[Building] = field(default_factory=list)
    npcs: List[NPC] = field(default_factory=list)


class SettlementGenerator:
    """Shared placement for towns and cities; subclasses set the numbers."""

    biome = "forest_town"
    building_spacing = 150
    first_building_x = 200
    side_offset = 80
    building_types: Tuple[str, ...] = ("residential", "residential", "commercial", "civic")
    enterable_threshold = 0.7
    height_scales = {}

    def __init__(self, road_generator: RoadGenerator, building_generator: BuildingGenerator):
        self.road_generator = road_generator
        self.building_generator = building_generator
        self.rng = building_generator.rng
        self.buildings: List[Building] = []

    def generate(self, width: int, height: int, ground_y: Optional[float] = None) -> SettlementLayout:
        road = self.road_generator.generate_road_path(self.biome, width, height, ground_y)
        buildings = self.place_buildings(road, width)
        logger.debug(f"{self.biome}: {len(buildings)} buildings on a {road.road_type} road")
        return SettlementLayout(self.biome, road, buildings)

    def shop_positions(self, width: int) -> List[float]:
        return [width / 2]

    def place_buildings(self, road: RoadPath, width: int) -> List[Building]:
        buildings = []
        for i in range(math.floor(width / self.building_spacing)):
            anchor_x = self.first_building_x + i * self.building_spacing
            road_y = road.y_at(anchor_x)
            if road_y is None:
                continue
            side = -self.side_offset if i % 2 == 0 else self.side_offset
            building_type = self.building_types[math.floor(self.rng.random() * len(self.building_types))]
            enterable = building_type == "commercial" or self.rng.random() > self.enterable_threshold
            options = BuildingOptions(
                enterable=enterable,
                height_scale=self.height_scales.get(building_type, 1.0),
            )
            buildings.append(self.building_generator.generate_building(
                building_type, anchor_x + side, road_y + BUILDING_ROAD_OFFSET, options,
            ))

        for shop_x in self.shop_positions(width):
            road_y = road.y_at(shop_x)
            if road_y is not None:
                buildings.append(self.building_generator.generate_shop_building(
                    shop_x, road_y + BUILDING_ROAD_OFFSET, "general",
                ))

        self.buildings = buildings
        return buildings

    def cleanup(self) -> None:
        for building in self.buildings:
            building.destroy()
            self.building_generator.cache.remove(building.texture_key)
        self.buildings = []


class TownBiomeGenerator(SettlementGenerator):
    def generate_forest_town(self, width: int, height: int, ground_y: Optional[float] = None) -> SettlementLayout:
        return self.generate(width, height, ground_y)


class CityBiomeGenerator(SettlementGenerator):
    biome = "city"
    building_spacing = 120
    first_building_x = 150
    side_offset = 90
    building_types = ("residential", "commercial", "commercial", "civic", "defensive")
    enterable_threshold = 0.6
    height_scales = {"civic": 1.3, "defensive": 1.5}

    def shop_positions(self, width: int) -> List[float]:
        return [(width / 4) * (i + 1) for i in range(3)]

    def generate_city(self, width: int, height: int, ground_y: Optional[float] = None) -> SettlementLayout:
        return self.generate(width, height, ground_y)
