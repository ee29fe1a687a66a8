"""
Unit tests for PixelDrawer primitives and whole-canvas operations.
"""

import pytest
from engine.drawer import PixelDrawer, create_canvas
from engine.error_handler import CanvasError


class TestCanvas:
    """Tests for canvas allocation."""

    def test_create_canvas_is_transparent(self):
        """Test new canvases start fully transparent."""
        surface = create_canvas(8, 8)
        assert surface.get_at((3, 3)).a == 0

    @pytest.mark.parametrize("size", [(0, 10), (10, -1)])
    def test_invalid_size_raises(self, size):
        """Test non-positive sizes raise CanvasError."""
        with pytest.raises(CanvasError):
            create_canvas(*size)


class TestShapes:
    """Tests for shape primitives."""

    def test_set_pixel_out_of_bounds_is_ignored(self, drawer):
        """Test writes outside the canvas are dropped."""
        drawer.set_pixel(-1, 5, 0xFF0000)
        drawer.set_pixel(100, 5, 0xFF0000)
        assert drawer.opaque_count() == 0

    def test_set_pixel_alpha_zero_clears(self, drawer):
        """Test alpha 0 clears a pixel."""
        drawer.set_pixel(4, 4, 0xFF0000)
        drawer.set_pixel(4, 4, 0xFF0000, alpha=0)
        assert not drawer.is_opaque(4, 4)

    def test_draw_rect_fills_exact_area(self, drawer):
        """Test draw_rect paints width x height pixels."""
        drawer.draw_rect(2, 3, 5, 4, 0x00FF00)
        assert drawer.opaque_count() == 20
        assert drawer.opaque_bounds() == (2, 3, 6, 6)

    def test_translucent_rect_blends(self, drawer):
        """Test a translucent rect over an opaque one keeps full alpha."""
        drawer.draw_rect(0, 0, 4, 4, 0x000000)
        drawer.draw_rect(0, 0, 4, 4, 0xFFFFFF, alpha=128)
        pixel = drawer.get_pixel(1, 1)
        assert pixel[3] == 255
        assert 100 < pixel[0] < 160

    def test_draw_circle_is_symmetric(self, drawer):
        """Test a circle's pixels mirror about its centre."""
        drawer.draw_circle(24, 24, 6, 0xFFFFFF)
        for dy in range(-6, 7):
            for dx in range(0, 7):
                assert drawer.is_opaque(24 + dx, 24 + dy) == drawer.is_opaque(24 - dx, 24 + dy)

    def test_thick_line_is_wider(self, drawer):
        """Test a thickness-3 line covers more pixels than a thin one."""
        thin = PixelDrawer.create(48, 48)
        thin.draw_line(5, 5, 40, 5, 0xFFFFFF)
        drawer.draw_line(5, 5, 40, 5, 0xFFFFFF, thickness=3)
        assert thin.opaque_count() == 36
        # Square brush widens the ends by one pixel each side
        assert drawer.opaque_count() == 38 * 3

    def test_polygon_fill(self, drawer):
        """Test a triangle fills its interior."""
        drawer.draw_polygon([(10, 10), (30, 10), (20, 30)], 0xFF00FF)
        assert drawer.is_opaque(20, 15)
        assert not drawer.is_opaque(11, 29)

    def test_gradient_runs_between_colours(self, drawer):
        """Test a vertical gradient starts and ends on its colours."""
        drawer.draw_gradient(0, 0, 10, 40, 0x000000, 0xFFFFFF, steps=8)
        assert drawer.get_pixel(5, 0)[:3] == (0, 0, 0)
        assert drawer.get_pixel(5, 39)[:3] == (255, 255, 255)


class TestCanvasOperations:
    """Tests for mirror and outline passes."""

    def test_mirror_copies_left_half(self, drawer):
        """Test every left-half pixel appears at its mirror position."""
        drawer.draw_rect(14, 10, 8, 20, 0xC0C0C0)
        drawer.set_pixel(12, 5, 0xFF0000)
        drawer.mirror_horizontal(24)
        for y in range(48):
            for dx in range(1, 24):
                assert drawer.get_pixel(24 - dx, y) == drawer.get_pixel(24 + dx, y)

    def test_mirror_keeps_existing_right_pixels(self, drawer):
        """Test transparent sources leave the right side untouched."""
        drawer.set_pixel(40, 40, 0x00FF00)
        drawer.mirror_horizontal(24)
        assert drawer.get_pixel(40, 40)[:3] == (0, 255, 0)

    def test_outline_surrounds_shape(self, drawer):
        """Test a one-pixel outline closes around a rectangle."""
        drawer.draw_rect(10, 10, 10, 10, 0xFFFFFF)
        drawer.draw_outline(0x000000, 1)
        for x in range(9, 21):
            assert drawer.get_pixel(x, 9) == (0, 0, 0, 255)
            assert drawer.get_pixel(x, 20) == (0, 0, 0, 255)
        for y in range(9, 21):
            assert drawer.get_pixel(9, y) == (0, 0, 0, 255)
            assert drawer.get_pixel(20, y) == (0, 0, 0, 255)
        assert not drawer.is_opaque(8, 8)
        # Interior untouched
        assert drawer.get_pixel(15, 15) == (255, 255, 255, 255)

    def test_outline_thickness_two(self, drawer):
        """Test thickness 2 reaches two pixels out."""
        drawer.draw_rect(20, 20, 4, 4, 0xFFFFFF)
        drawer.draw_outline(0x000000, 2)
        assert drawer.is_opaque(18, 18)
        assert not drawer.is_opaque(17, 17)

    def test_outline_recolours_border_pixels(self):
        """Test shapes touching the border are outlined in place."""
        d = PixelDrawer.create(8, 8)
        d.draw_rect(0, 2, 4, 4, 0xFFFFFF)
        d.draw_outline(0x000000, 1)
        assert d.get_pixel(0, 3) == (0, 0, 0, 255)

    def test_selective_outline_darkens_interior(self, drawer):
        """Test selout pixels are darker versions of the shape colour."""
        drawer.draw_rect(10, 10, 5, 5, 0x8080FF)
        drawer.draw_selective_outline(0.5, 200)
        pixel = drawer.get_pixel(9, 12)
        assert pixel == (0x40, 0x40, 0x7F, 200)

    def test_opaque_bounds_empty(self, drawer):
        """Test opaque_bounds of a blank canvas is None."""
        assert drawer.opaque_bounds() is None
