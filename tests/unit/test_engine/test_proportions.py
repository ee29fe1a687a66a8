"""
Unit tests for body proportions.
"""

from engine.proportions import ProportionManager


class TestProportionManager:
    """Tests for ProportionManager."""

    def test_chibi_heights(self):
        """Test chibi heights on a 48px sprite."""
        p = ProportionManager(48)
        assert p.get_proportions() == {
            "total_height": 48,
            "head_height": 15,
            "torso_height": 12,
            "limb_height": 9,
        }

    def test_chibi_is_valid(self):
        """Test the chibi layout passes validation."""
        result = ProportionManager(48).validate_proportions()
        assert result["valid"] is True
        assert result["errors"] == []

    def test_realistic_is_valid(self):
        """Test the realistic layout passes validation."""
        assert ProportionManager(108, style="realistic").validate_proportions()["valid"] is True

    def test_zero_height_is_invalid(self):
        """Test a zero total height fails validation."""
        result = ProportionManager(0).validate_proportions()
        assert result["valid"] is False

    def test_unknown_style_uses_chibi(self):
        """Test unknown styles fall back to chibi."""
        assert ProportionManager(48, style="lanky").style == "chibi"

    def test_set_total_height(self):
        """Test resizing recomputes every part."""
        p = ProportionManager(48)
        p.set_total_height(96)
        assert p.head_height == 31
        assert p.torso_height == 24

    def test_torso_overlaps_head(self):
        """Test the torso starts two pixels inside the head."""
        p = ProportionManager(48)
        head = p.get_head_bounds(24)
        torso = p.get_torso_bounds(24)
        assert torso.y == head.y + head.height - 2

    def test_arms_mirror_about_centre(self):
        """Test left and right arms are symmetric about the centre line."""
        p = ProportionManager(48)
        left = p.get_arm_bounds(24, "left")
        right = p.get_arm_bounds(24, "right")
        assert 24 - left.center_x == right.center_x - 24

    def test_equipment_bounds_scaled(self):
        """Test equipment bounds grow by the style scale around the same centre."""
        p = ProportionManager(48)
        torso = p.get_torso_bounds(24)
        armour = p.get_equipment_bounds("torso", 24)
        assert armour.width == 10
        assert armour.height == 14
        assert armour.center_x == torso.center_x
        assert armour.center_y == torso.center_y
