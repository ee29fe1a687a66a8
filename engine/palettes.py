"""
Named colour palettes.

A palette maps a semantic category (skin, cloth, armor, metal, accent,
gold, glow) to an ordered tuple of candidate colours. Generators look
palettes up by name, so registering a new theme needs no generator change.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from engine import colors
from engine.error_handler import logger
from engine.rng import SeededRNG

Palette = Mapping[str, Tuple[int, ...]]

DEFAULT_PALETTE = "warm"
MISSING_COLOR = 0xFFFFFF

_SKIN = (0xFFDBAC, 0xF4C2A1, 0xE8B896)

BUILTIN_PALETTES: Dict[str, Dict[str, Tuple[int, ...]]] = {
    "paladin": {
        "armor": (0xC0C0C0, 0xE0E0E0, 0xA0A0A0, 0x808080),
        "accent": (0x4169E1, 0x5A7FFF, 0x2E4DB8),
        "cloth": (0x2C3E50, 0x34495E, 0x1A252F),
        "skin": _SKIN,
        "metal": (0xE0E0E0, 0xC0C0C0, 0xA0A0A0, 0x808080),
        "gold": (0xFFD700, 0xFFA500, 0xFF8C00),
        "glow": (0xFFFF00, 0xFFFA00, 0xFFF500),
    },
    "warm": {
        "skin": _SKIN,
        "cloth": (0x8B4513, 0xA0522D, 0xCD853F),
        "metal": (0xC0C0C0, 0xA0A0A0, 0x808080),
    },
    "cool": {
        "skin": _SKIN,
        "cloth": (0x2C3E50, 0x34495E, 0x1A252F),
        "metal": (0x708090, 0x778899, 0x5F7F8F),
    },
    "metallic": {
        "armor": (0xC0C0C0, 0xE0E0E0, 0xA0A0A0, 0x808080),
        "metal": (0xD3D3D3, 0xC0C0C0, 0xA9A9A9),
    },
    # Bloodlines
    "ancient_warrior": {
        "armor": (0xFFD700, 0xDAA520, 0xB8860B),
        "accent": (0xC0C0C0, 0x808080, 0x404040),
        "cloth": (0x800000, 0x600000, 0x400000),
        "glow": (0xFFFF80, 0xFFFFCC, 0xFFFFFF),
        "skin": _SKIN,
    },
    "arcane_scholar": {
        "armor": (0x1A237E, 0x283593, 0x3949AB),
        "accent": (0x7E57C2, 0x9575CD, 0xB39DDB),
        "cloth": (0x4A148C, 0x6A1B9A, 0x8E24AA),
        "glow": (0x00E5FF, 0x18FFFF, 0x84FFFF),
        "skin": _SKIN,
    },
    "shadow_assassin": {
        "armor": (0x212121, 0x424242, 0x616161),
        "accent": (0x4A148C, 0x000000, 0x311B92),
        "cloth": (0x000000, 0x121212, 0x1A1A1B),
        "glow": (0xAA00FF, 0xD500F9, 0xE1F5FE),
        "skin": _SKIN,
    },
    "dragon_born": {
        "armor": (0xB71C1C, 0xD32F2F, 0xE53935),
        "accent": (0xFF6F00, 0xFFA000, 0xFFC107),
        "cloth": (0x3E2723, 0x4E342E, 0x5D4037),
        "glow": (0xFF3D00, 0xFF9100, 0xFFFF00),
        "skin": _SKIN,
    },
    "nature_blessed": {
        "armor": (0x1B5E20, 0x2E7D32, 0x388E3C),
        "accent": (0x795548, 0x8D6E63, 0xA1887F),
        "cloth": (0xDCEDC8, 0xC5E1A5, 0xAED581),
        "glow": (0x76FF03, 0xB2FF59, 0xCCFF90),
        "skin": _SKIN,
    },
}

BLOODLINES = (
    "ancient_warrior",
    "arcane_scholar",
    "shadow_assassin",
    "dragon_born",
    "nature_blessed",
)


def _freeze(mapping: Mapping[str, Union[int, Iterable[int]]]) -> Palette:
    frozen = {}
    for category, value in mapping.items():
        if isinstance(value, int):
            frozen[category] = (value,)
        else:
            frozen[category] = tuple(value)
    return MappingProxyType(frozen)


class PaletteManager:
    """Resolves palette names and colour categories; never fails."""

    def __init__(self) -> None:
        self._palettes: Dict[str, Palette] = {
            name: _freeze(mapping) for name, mapping in BUILTIN_PALETTES.items()
        }

    def register_palette(self, name: str, mapping: Mapping[str, Union[int, Iterable[int]]]) -> None:
        """Add or replace a palette; the stored copy is read-only."""
        self._palettes[name] = _freeze(mapping)

    def has_palette(self, name: str) -> bool:
        return name in self._palettes

    def palette_names(self) -> Tuple[str, ...]:
        return tuple(self._palettes)

    def get_palette(self, name: Optional[str]) -> Palette:
        """Named palette, or the warm palette when the name is unknown."""
        palette = self._palettes.get(name) if name else None
        if palette is None:
            logger.debug(f"Unknown palette {name!r}; falling back to {DEFAULT_PALETTE}")
            return self._palettes[DEFAULT_PALETTE]
        return palette

    def get_color(
        self,
        palette_name: Optional[str],
        category: str,
        rng: Optional[SeededRNG] = None,
    ) -> int:
        """
        Resolve ``category`` of a palette to one colour.

        Multiple candidates are picked with ``rng``; without one the first
        candidate is used. A category missing from the palette yields white.
        """
        candidates = self.get_palette(palette_name).get(category)
        if not candidates:
            return MISSING_COLOR
        if rng is None or len(candidates) == 1:
            return candidates[0]
        return rng.random_choice(candidates)

    def get_varied_color(self, base_color: int, variation: float, rng: SeededRNG) -> int:
        """Scale every channel by one random factor in [1 - variation, 1 + variation]."""
        factor = 1 + (rng.random() - 0.5) * 2 * variation
        r, g, b = colors.to_rgb(base_color)
        return colors.from_rgb(
            max(0, min(255, math.floor(r * factor))),
            max(0, min(255, math.floor(g * factor))),
            max(0, min(255, math.floor(b * factor))),
        )

    @staticmethod
    def darken(color: int, factor: float) -> int:
        return colors.darken(color, factor)

    @staticmethod
    def lighten(color: int, factor: float) -> int:
        return colors.lighten(color, factor)
