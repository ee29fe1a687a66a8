"""
Unit tests for equipment, gem, icon, projectile, spell icon and effect generators.
"""

import pytest
import pygame
from engine import colors
from engine.drawer import PixelDrawer, create_canvas
from engine.rng import SeededRNG
from items.equipment import EquipmentGenerator, EQUIPMENT_TYPES
from items.gems import GemGenerator, GEM_ELEMENTS, SLATE, get_gem_colors, get_gem_shape
from items.icons import ItemIconGenerator, IconOptions, RARITY_COLORS, is_meaningful_texture
from items.projectiles import ProjectileGenerator, PROJECTILE_STYLES
from items.spell_icons import SpellIconGenerator, pick_spell_motif
from items.vfx import VFXGenerator, VFX_STYLES


def _bytes(surface):
    return pygame.image.tobytes(surface, "RGBA")


def _has_color(surface, rgb):
    width, height = surface.get_size()
    return any(tuple(surface.get_at((x, y)))[:3] == rgb for y in range(height) for x in range(width))


class TestEquipmentGenerator:
    """Tests for EquipmentGenerator."""

    @pytest.mark.parametrize("kind", EQUIPMENT_TYPES)
    def test_every_type_draws(self, kind):
        """Test every equipment type paints something."""
        surface = EquipmentGenerator(rng=SeededRNG(1)).generate({"type": kind}, kind)
        assert PixelDrawer(surface).opaque_count() > 0

    def test_deterministic(self):
        """Test one seed draws identical equipment."""
        a = EquipmentGenerator(rng=SeededRNG(4)).generate({"type": "chest"})
        b = EquipmentGenerator(rng=SeededRNG(4)).generate({"type": "chest"})
        assert _bytes(a) == _bytes(b)

    def test_unknown_type_is_sword(self):
        """Test unknown types draw a sword."""
        a = EquipmentGenerator(rng=SeededRNG(4)).generate({"type": "boomerang"})
        b = EquipmentGenerator(rng=SeededRNG(4)).generate({"type": "sword"})
        assert _bytes(a) == _bytes(b)

    def test_slot_used_when_type_missing(self):
        """Test the slot field picks the piece when type is absent."""
        a = EquipmentGenerator(rng=SeededRNG(4)).generate({"slot": "shield"})
        b = EquipmentGenerator(rng=SeededRNG(4)).generate({"type": "shield"})
        assert _bytes(a) == _bytes(b)

    def test_infused_sword_blade(self):
        """Test the ancient warrior infusion gilds the blade."""
        surface = EquipmentGenerator(rng=SeededRNG(1)).generate({"type": "sword", "bloodline": "ancient_warrior"})
        assert _has_color(surface, (0xFF, 0xD7, 0x00))

    def test_legendary_sword_glows(self):
        """Test legendary swords differ from common ones."""
        common = EquipmentGenerator(rng=SeededRNG(1)).generate({"type": "sword", "color": 0xC0C0C0})
        legendary = EquipmentGenerator(rng=SeededRNG(1)).generate(
            {"type": "sword", "color": 0xC0C0C0, "rarity": "legendary"}
        )
        assert _bytes(common) != _bytes(legendary)

    def test_explicit_colour(self):
        """Test an item colour overrides the palette metal."""
        surface = EquipmentGenerator(rng=SeededRNG(1)).generate({"type": "shield", "color": "#123456"})
        assert _has_color(surface, (0x12, 0x34, 0x56))


class TestGemGenerator:
    """Tests for GemGenerator."""

    def test_element_colours(self):
        """Test element lookup and effect fallback."""
        assert get_gem_colors({"element": "fire"}) == GEM_ELEMENTS["fire"]
        assert get_gem_colors({"effect": "slow"}) == GEM_ELEMENTS["slow"]
        assert get_gem_colors({"element": "void"}) == SLATE

    def test_shapes(self):
        """Test gem types map to shapes."""
        assert get_gem_shape({"type": "damage"}) == "octagon"
        assert get_gem_shape({"type": "utility"}) == "circle"
        assert get_gem_shape({}) == "diamond"

    def test_unknown_element_uses_slate(self):
        """Test an unknown element draws the slate palette."""
        surface = GemGenerator().generate({"element": "void", "type": "damage"})
        assert _has_color(surface, colors.to_rgb(SLATE.primary))

    def test_octagon_corners_clipped(self):
        """Test octagon corners are not gem coloured."""
        surface = GemGenerator(32, 12).generate({"element": "fire", "type": "damage"})
        corner = tuple(surface.get_at((10, 10)))
        assert corner[:3] != colors.to_rgb(GEM_ELEMENTS["fire"].primary)
        assert tuple(surface.get_at((11, 10)))[:3] == colors.to_rgb(GEM_ELEMENTS["fire"].primary)

    def test_outlined(self):
        """Test gems carry a black outline."""
        surface = GemGenerator().generate({"element": "cold"})
        assert _has_color(surface, (0, 0, 0))


class TestItemIconGenerator:
    """Tests for inventory icons."""

    def test_plate_rims(self):
        """Test the plate has a black rim and a light inner rim."""
        surface = ItemIconGenerator(48).generate({"rarity": "epic", "type": "armor"})
        assert tuple(surface.get_at((0, 0))) == (0, 0, 0, 255)
        assert tuple(surface.get_at((3, 3)))[:3] == colors.to_rgb(colors.lighten(RARITY_COLORS["epic"].base, 0.35))

    def test_unknown_rarity_is_common(self):
        """Test unknown rarities use the common plate."""
        a = ItemIconGenerator().generate({"rarity": "mythic"})
        b = ItemIconGenerator().generate({"rarity": "common"})
        assert _bytes(a) == _bytes(b)

    @pytest.mark.parametrize("weapon", ["sword", "axe", "mace", "staff", "wand", "trident"])
    def test_weapon_silhouettes(self, weapon):
        """Test each weapon type draws over the plate."""
        plate_only = ItemIconGenerator().generate({"type": "accessory"})
        surface = ItemIconGenerator().generate({"type": "weapon", "weapon_type": weapon})
        assert _bytes(surface) != _bytes(plate_only)

    def test_missing_texture_falls_back(self, tmp_path):
        """Test a missing texture draws the procedural icon without raising."""
        data = {"type": "weapon", "weapon_type": "axe", "rarity": "rare"}
        options = IconOptions(texture_path=tmp_path / "missing.png", can_use_texture=True)
        with_texture = ItemIconGenerator().generate(data, "axe_1", options)
        procedural = ItemIconGenerator().generate(data, "axe_1")
        assert _bytes(with_texture) == _bytes(procedural)

    def test_texture_ignored_unless_allowed(self, tmp_path):
        """Test can_use_texture=False never reads the texture."""
        data = {"type": "armor"}
        options = IconOptions(texture_path=tmp_path / "missing.png", can_use_texture=False)
        assert _bytes(ItemIconGenerator().generate(data, None, options)) == _bytes(ItemIconGenerator().generate(data))

    def test_meaningful_texture_used(self, tmp_path):
        """Test a detailed texture replaces the procedural silhouette."""
        art = create_canvas(32, 32)
        for y in range(32):
            for x in range(32):
                art.set_at((x, y), ((x * 8) % 256, (y * 8) % 256, ((x + y) * 4) % 256, 255))
        path = tmp_path / "art.png"
        pygame.image.save(art, str(path))

        data = {"type": "weapon", "weapon_type": "sword"}
        options = IconOptions(texture_path=path, can_use_texture=True)
        assert _bytes(ItemIconGenerator().generate(data, "x", options)) != _bytes(ItemIconGenerator().generate(data))

    def test_flat_texture_is_placeholder(self):
        """Test flat art is rejected as a placeholder."""
        flat = create_canvas(64, 64)
        flat.fill((90, 90, 90, 255))
        assert is_meaningful_texture(flat) is False


class TestProjectileGenerator:
    """Tests for projectiles."""

    @pytest.mark.parametrize("style", PROJECTILE_STYLES)
    def test_styles_draw(self, style):
        """Test every style paints pixels."""
        surface = ProjectileGenerator().generate({"style": style, "color": 0xFF0000})
        assert PixelDrawer(surface).opaque_count() > 0

    def test_unknown_style_is_bolt(self):
        """Test unknown styles draw a bolt."""
        a = ProjectileGenerator().generate({"style": "boomerang"})
        b = ProjectileGenerator().generate({"style": "bolt"})
        assert _bytes(a) == _bytes(b)

    def test_default_colour_white(self):
        """Test projectiles are white by default."""
        surface = ProjectileGenerator(32).generate({})
        assert tuple(surface.get_at((16, 16))) == (255, 255, 255, 255)


class TestSpellIcons:
    """Tests for spell icon motifs and rendering."""

    @pytest.mark.parametrize("ability_id,data,motif", [
        ("fireball", {"type": "attack"}, "fire"),
        ("frost_nova", {"type": "aoe"}, "frost"),
        ("chain_lightning", {}, "lightning"),
        ("moonfire", {"type": "dot"}, "moon"),
        ("power_word_shield", {"type": "buff"}, "shield"),
        ("backstab", {}, "dagger"),
        ("aimed_shot", {}, "arrow"),
        ("healing_stream_totem", {}, "totem"),
        ("bear_form", {}, "form"),
        ("crusader_strike", {}, "sword"),
        ("mystery", {"type": "buff"}, "shield"),
        ("mystery", {"type": "debuff"}, "shadow"),
        ("mystery", {"type": "aoe"}, "burst"),
        ("mystery", {}, "spark"),
    ])
    def test_pick_motif(self, ability_id, data, motif):
        """Test keyword and type fallbacks."""
        assert pick_spell_motif(ability_id, data) == motif

    def test_heal_type_beats_later_keywords(self):
        """Test heal spells stay heal even with a fire keyword."""
        assert pick_spell_motif("cauterize_flame", {"type": "heal"}) == "heal"

    def test_name_is_searched(self):
        """Test the display name contributes keywords."""
        assert pick_spell_motif("ability_7", {"name": "Icy Veins"}) == "frost"

    def test_icon_renders_glyph(self):
        """Test spell icons carry a white glyph on the plate."""
        surface = SpellIconGenerator(48).generate({"type": "attack"}, "fireball")
        assert surface.get_size() == (48, 48)
        assert _has_color(surface, (255, 255, 255))


class TestVFXGenerator:
    """Tests for effect sprites."""

    @pytest.mark.parametrize("style", VFX_STYLES)
    def test_styles_draw(self, style):
        """Test every style paints pixels on a 64px canvas."""
        surface = VFXGenerator().generate({"style": style, "color": 0xFF8C00}, style)
        assert surface.get_size() == (64, 64)
        assert PixelDrawer(surface).opaque_count() > 0

    def test_unknown_style_is_burst(self):
        """Test unknown styles draw a burst."""
        a = VFXGenerator().generate({"style": "swirl", "color": 0x00FF00})
        b = VFXGenerator().generate({"style": "burst", "color": 0x00FF00})
        assert _bytes(a) == _bytes(b)

    def test_hollow_styles(self):
        """Test rings and sparks leave the centre empty while bursts fill it."""
        generator = VFXGenerator()
        assert generator.generate({"style": "ring"}).get_at((32, 32)).a == 0
        assert generator.generate({"style": "sparks"}).get_at((32, 32)).a == 0
        assert tuple(generator.generate({"style": "burst"}).get_at((32, 32))) == (255, 255, 255, 255)

    def test_burst_rays_reach_past_the_disc(self):
        """Test burst rays extend beyond the filled disc."""
        surface = VFXGenerator().generate({"style": "burst", "color": 0xFF0000})
        # Disc radius is 25.6; the horizontal ray ends near x = 62
        assert tuple(surface.get_at((60, 32))) == (255, 0, 0, 255)
        assert surface.get_at((60, 12)).a == 0
