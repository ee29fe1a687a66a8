"""
Town NPC sprites and placement.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pygame

from engine import colors
from engine.drawer import PixelDrawer
from engine.error_handler import logger
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache
from world.buildings import Building
from world.roads import RoadPath

SKIN = 0xFFDBAC
SKIN_LIGHT = 0xFFF5E6
SKIN_DARK = 0xE6C9A0


@dataclass(frozen=True)
class NPCType:
    color: int
    size: int
    speed: int  # Wander speed; 0 is stationary


NPC_TYPES: Dict[str, NPCType] = {
    "villager": NPCType(0x87CEEB, 24, 20),
    "shopkeeper": NPCType(0xFFD700, 24, 0),
    "guard": NPCType(0x808080, 28, 15),
    "quest_giver": NPCType(0x9370DB, 26, 10),
}
DEFAULT_NPC_TYPE = "villager"


@dataclass
class NPC:
    npc_type: str
    x: float  # Bottom-centre anchor, world space
    y: float
    texture_key: str
    surface: pygame.Surface
    name: Optional[str] = None
    interactive: bool = True
    dialogue: List[str] = field(default_factory=list)
    destroyed: bool = False

    @property
    def config(self) -> NPCType:
        return NPC_TYPES[self.npc_type]

    def destroy(self) -> None:
        self.destroyed = True


class NPCGenerator:
    def __init__(self, rng: Optional[SeededRNG] = None, cache: Optional[TextureCache] = None):
        self.rng = rng or SeededRNG()
        self.cache = cache if cache is not None else TextureCache()
        self.npcs: List[NPC] = []
        self._serial = 0

    def generate_npc(
        self,
        npc_type: str,
        x: float,
        y: float,
        name: Optional[str] = None,
        interactive: bool = True,
        dialogue: Optional[Sequence[str]] = None,
    ) -> NPC:
        if npc_type not in NPC_TYPES:
            logger.debug(f"Unknown NPC type {npc_type!r}; using {DEFAULT_NPC_TYPE}")
            npc_type = DEFAULT_NPC_TYPE
        surface = self.draw_npc(npc_type)

        self._serial += 1
        key = f"npc-{npc_type}-{NPC_TYPES[npc_type].size}-{self._serial}"
        self.cache.put(key, surface)

        npc = NPC(npc_type, x, y, key, surface, name, interactive, list(dialogue or []))
        self.npcs.append(npc)
        return npc

    def draw_npc(self, npc_type: str) -> pygame.Surface:
        """Chibi NPC: round body, big head, dot eyes and a type badge."""
        spec = NPC_TYPES[npc_type]
        w = spec.size
        h = math.floor(spec.size * 1.2)
        d = PixelDrawer.create(w, h)
        cx = w / 2

        # Ground shadow
        d.draw_ellipse(cx, h - 4, w * 0.6, 8, 0x000000, 77)

        body = spec.color
        d.draw_ellipse(cx, h * 0.6, w * 0.7, h * 0.6, body)
        d.draw_ellipse(cx - w * 0.15, h * 0.55, w * 0.4, h * 0.4, colors.lighten(body, 0.2), 128)
        d.draw_ellipse(cx + w * 0.15, h * 0.65, w * 0.4, h * 0.4, colors.darken(body, 0.2), 102)

        head = w * 0.5
        head_y = h * 0.25
        d.draw_circle(cx, head_y, head / 2, SKIN)
        d.draw_circle(cx - head * 0.2, head_y - head * 0.2, head * 0.3, SKIN_LIGHT, 128)
        d.draw_circle(cx + head * 0.2, head_y + head * 0.2, head * 0.3, SKIN_DARK, 102)

        # Eyes
        d.draw_circle(cx - head * 0.15, head_y, head * 0.08, 0x000000)
        d.draw_circle(cx + head * 0.15, head_y, head * 0.08, 0x000000)
        d.set_pixel(cx - head * 0.12, head_y - head * 0.03, 0xFFFFFF)
        d.set_pixel(cx + head * 0.18, head_y - head * 0.03, 0xFFFFFF)

        if npc_type == "shopkeeper":
            # Coin
            d.draw_circle(cx, h * 0.75, w * 0.15, 0xFFD700)
            d.draw_circle_outline(cx, h * 0.75, w * 0.15, 0x000000)
        elif npc_type == "guard":
            d.draw_rect(cx - w * 0.15, h * 0.7, w * 0.3, h * 0.25, 0x808080)
            d.draw_rect_outline(cx - w * 0.15, h * 0.7, w * 0.3, h * 0.25, 0x000000)
        elif npc_type == "quest_giver":
            # Exclamation mark
            d.draw_circle(cx, h * 0.75, w * 0.12, 0x9370DB)
            d.draw_rect(cx - 1, h * 0.68, 2, 4, 0xFFFFFF)
            d.set_pixel(cx, h * 0.68 + 5, 0xFFFFFF)

        d.draw_outline(0x000000, 1)
        return d.surface

    def generate_town_npcs(self, road: RoadPath, buildings: Sequence[Building], width: int) -> List[NPC]:
        """One shopkeeper per shop, 3-6 villagers and 1-2 guards along the road."""
        npcs = []
        for building in buildings:
            if building.shop_type:
                npcs.append(self.generate_npc(
                    "shopkeeper", building.x, building.y - building.height + 40, name="Shopkeeper",
                ))

        for i in range(3 + math.floor(self.rng.random() * 4)):
            x = 100 + self.rng.random() * (width - 200)
            road_y = road.y_at(x)
            if road_y is not None:
                npcs.append(self.generate_npc("villager", x, road_y - 20, name=f"Villager {i + 1}"))

        for _ in range(1 + math.floor(self.rng.random() * 2)):
            x = 150 + self.rng.random() * (width - 300)
            road_y = road.y_at(x)
            if road_y is not None:
                npcs.append(self.generate_npc("guard", x, road_y - 20, name="Guard"))
        return npcs

    def cleanup(self) -> None:
        for npc in self.npcs:
            npc.destroy()
            self.cache.remove(npc.texture_key)
        self.npcs = []
