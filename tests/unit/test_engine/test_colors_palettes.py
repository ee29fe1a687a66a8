"""
Unit tests for colour helpers, palettes and cel-shading.
"""

import pytest
from engine import colors
from engine.palettes import PaletteManager, BLOODLINES, DEFAULT_PALETTE, MISSING_COLOR
from engine.rng import SeededRNG
from engine.shading import MaterialShader, MATERIAL_RULES


class TestColors:
    """Tests for packed colour helpers."""

    def test_rgb_round_trip(self):
        """Test to_rgb and from_rgb agree."""
        assert colors.to_rgb(0x12AB34) == (0x12, 0xAB, 0x34)
        assert colors.from_rgb(0x12, 0xAB, 0x34) == 0x12AB34

    @pytest.mark.parametrize("value,expected", [
        (0xFF0000, 0xFF0000),
        ("#00ff00", 0x00FF00),
        ("0x0000FF", 0x0000FF),
        ((10, 20, 30), 0x0A141E),
    ])
    def test_parse_color_accepts_formats(self, value, expected):
        """Test parse_color accepts ints, hex strings and tuples."""
        assert colors.parse_color(value) == expected

    @pytest.mark.parametrize("value", [None, True, "nothex", (1, 2)])
    def test_parse_color_default(self, value):
        """Test unusable values give the default."""
        assert colors.parse_color(value, 0x123456) == 0x123456

    def test_lighten_and_darken(self):
        """Test lighten moves toward white and darken toward black."""
        assert colors.lighten(0x000000, 1.0) == 0xFFFFFF
        assert colors.darken(0xFFFFFF, 1.0) == 0x000000
        assert colors.lighten(0x808080, 0.0) == 0x808080

    def test_lerp_color_endpoints(self):
        """Test lerp_color returns its endpoints at t=0 and t=1."""
        assert colors.lerp_color(0x102030, 0xF0E0D0, 0.0) == 0x102030
        assert colors.lerp_color(0x102030, 0xF0E0D0, 1.0) == 0xF0E0D0


class TestPaletteManager:
    """Tests for PaletteManager."""

    def test_builtin_palettes_present(self):
        """Test built-in and bloodline palettes are registered."""
        manager = PaletteManager()
        for name in ("paladin", "warm", "cool", "metallic") + BLOODLINES:
            assert manager.has_palette(name)

    def test_unknown_palette_falls_back(self):
        """Test an unknown name returns the default palette."""
        manager = PaletteManager()
        assert manager.get_palette("nope") == manager.get_palette(DEFAULT_PALETTE)

    def test_missing_category_is_white(self):
        """Test a category the palette lacks resolves to white."""
        manager = PaletteManager()
        assert manager.get_color("paladin", "no_such_category") == MISSING_COLOR

    def test_get_color_without_rng_takes_first(self):
        """Test get_color without an rng returns the first candidate."""
        manager = PaletteManager()
        assert manager.get_color("paladin", "armor") == 0xC0C0C0

    def test_register_palette(self):
        """Test registering a custom palette."""
        manager = PaletteManager()
        manager.register_palette("sunset", {"accent": 0xFF7700, "cloth": [0x111111, 0x222222]})
        assert manager.get_color("sunset", "accent") == 0xFF7700
        assert manager.get_color("sunset", "cloth", SeededRNG(1)) in (0x111111, 0x222222)

    def test_registered_palette_is_read_only(self):
        """Test stored palettes cannot be mutated."""
        manager = PaletteManager()
        palette = manager.get_palette("warm")
        with pytest.raises(TypeError):
            palette["skin"] = (0,)

    def test_varied_color_deterministic(self):
        """Test get_varied_color depends only on the rng stream."""
        manager = PaletteManager()
        a = manager.get_varied_color(0x808080, 0.2, SeededRNG(4))
        b = manager.get_varied_color(0x808080, 0.2, SeededRNG(4))
        assert a == b


class TestMaterialShader:
    """Tests for cel-shade ramps and light factors."""

    @pytest.mark.parametrize("material", list(MATERIAL_RULES))
    def test_ramp_is_monotonic(self, material):
        """Test ramp luminance strictly falls from light2 to dark2."""
        ramp = MaterialShader().create_cel_shade_palette(0x808080, material)
        lum = [colors.luminance(c) for c in ramp.as_list()]
        assert all(a > b for a, b in zip(lum, lum[1:]))

    def test_unknown_material_uses_cloth(self):
        """Test unknown materials use the cloth rule."""
        shader = MaterialShader()
        assert shader.get_material_rules("slime") == MATERIAL_RULES["cloth"]

    def test_light_factor_extremes(self):
        """Test the light factor is 1 at the source and 0 at the far corner."""
        shader = MaterialShader()
        assert shader.calculate_light_factor(0, 0, 10, 10) == pytest.approx(1.0)
        assert shader.calculate_light_factor(10, 10, 10, 10) == pytest.approx(0.0)

    def test_apply_cel_shade_lights_top_left(self, drawer):
        """Test the top-left cell is lighter than the bottom-right cell."""
        shader = MaterialShader()
        ramp = shader.create_cel_shade_palette(0x4169E1, "metal")
        shader.apply_cel_shade(drawer, 0, 0, 30, 30, ramp)
        top_left = drawer.get_pixel(1, 1)
        bottom_right = drawer.get_pixel(28, 28)
        assert colors.luminance(colors.from_rgb(*top_left[:3])) > colors.luminance(colors.from_rgb(*bottom_right[:3]))

    def test_circle_shades_each_pixel(self, drawer):
        """Test every disc pixel takes the ramp level of its own light factor."""
        shader = MaterialShader()
        ramp = shader.create_cel_shade_palette(0x4169E1, "metal")
        shader.apply_cel_shade_circle(drawer, 24, 24, 20, ramp)
        for py, x_start, x_end in drawer.circle_spans(24, 24, 20):
            for px in range(x_start, x_end + 1):
                expected = ramp.level(shader.calculate_light_factor(px - 4, py - 4, 40, 40))
                assert drawer.get_pixel(px, py) == (*colors.to_rgb(expected), 255)
        assert not drawer.is_opaque(4, 4)

    def test_circle_levels_vary_inside_one_third(self, drawer):
        """Test the top-left third of a disc is not painted as one flat cell."""
        shader = MaterialShader()
        ramp = shader.create_cel_shade_palette(0x808080, "metal")
        shader.apply_cel_shade_circle(drawer, 24, 24, 20, ramp)
        assert drawer.get_pixel(10, 12)[:3] == colors.to_rgb(ramp.light2)
        assert drawer.get_pixel(17, 17)[:3] == colors.to_rgb(ramp.light1)
