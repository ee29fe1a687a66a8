"""
Item sprite generators: equipment, gems, inventory icons, projectiles,
spell icons and visual effects. Each takes item data plus an optional id
and returns a surface.
"""

from .equipment import EquipmentGenerator, ChestDetails, EQUIPMENT_TYPES
from .gems import GemGenerator, GemColors, GEM_ELEMENTS, SLATE, get_gem_colors, get_gem_shape
from .icons import ItemIconGenerator, IconOptions, RARITY_COLORS, draw_icon_plate, is_meaningful_texture, load_texture
from .projectiles import ProjectileGenerator, PROJECTILE_STYLES
from .spell_icons import SpellIconGenerator, SPELL_TYPE_COLORS, pick_spell_motif
from .vfx import VFXGenerator, VFX_STYLES

__all__ = [
    "EquipmentGenerator",
    "ChestDetails",
    "EQUIPMENT_TYPES",
    "GemGenerator",
    "GemColors",
    "GEM_ELEMENTS",
    "SLATE",
    "get_gem_colors",
    "get_gem_shape",
    "ItemIconGenerator",
    "IconOptions",
    "RARITY_COLORS",
    "draw_icon_plate",
    "is_meaningful_texture",
    "load_texture",
    "ProjectileGenerator",
    "PROJECTILE_STYLES",
    "SpellIconGenerator",
    "SPELL_TYPE_COLORS",
    "pick_spell_motif",
    "VFXGenerator",
    "VFX_STYLES",
]
