"""
Unit tests for animation frames and sprite-sheet export.
"""

import json
from pathlib import Path

import pytest
from characters.animation import AnimationFrame, AnimationGenerator, ANIMATION_SPECS, render_frame
from characters.paladin import PaladinGenerator
from engine.export import export_asset, export_sprite_sheet, export_multiple_sizes


class TestAnimationGenerator:
    """Tests for AnimationGenerator."""

    @pytest.mark.parametrize("animation_type", list(ANIMATION_SPECS))
    def test_default_frame_counts(self, animation_type):
        """Test each animation uses its default frame count."""
        frames = AnimationGenerator().generate_frames(animation_type)
        assert len(frames) == ANIMATION_SPECS[animation_type].frames

    def test_unknown_type_is_idle(self):
        """Test unknown animation types fall back to idle."""
        generator = AnimationGenerator()
        assert generator.generate_frames("dance") == generator.generate_idle_frames()

    def test_idle_bob(self):
        """Test idle frames bob by the idle amplitude."""
        offsets = [f.offset_y for f in AnimationGenerator().generate_idle_frames()]
        assert offsets == [0, 5, 0, -5]

    def test_walk_alternates_legs(self):
        """Test walk frames alternate leg cycles every two frames."""
        cycles = [f.leg_cycle for f in AnimationGenerator().generate_walk_frames()]
        assert cycles == [0, 0, 1, 1, 0, 0, 1, 1]

    def test_death_fades_out(self):
        """Test the death animation ends invisible and rotated."""
        last = AnimationGenerator().generate_death_frames()[-1]
        assert last.alpha == pytest.approx(0.0)
        assert last.rotation == pytest.approx(15)
        assert last.offset_y == 5

    def test_apply_transform(self):
        """Test offsets add and scale multiplies."""
        frame = AnimationFrame(offset_x=2, scale=1.5)
        moved = AnimationGenerator.apply_transform(frame, {"offset_x": 3, "scale": 2.0, "alpha": 0.5})
        assert moved.offset_x == 5
        assert moved.scale == pytest.approx(3.0)
        assert moved.alpha == 0.5

    def test_animation_data(self):
        """Test timing data for an animation."""
        generator = AnimationGenerator()
        frames = generator.generate_frames("attack")
        data = generator.generate_animation_data("attack", frames)
        assert data["frame_count"] == 6
        assert data["frame_duration"] == pytest.approx(0.4 / 6)
        assert data["loop"] is True
        assert generator.generate_animation_data("death", generator.generate_frames("death"))["loop"] is False


class TestRenderFrame:
    """Tests for applying frames to sprites."""

    def test_keeps_canvas_size(self):
        """Test rendered frames keep the sprite size."""
        base = PaladinGenerator(1).generate().canvas
        for frame in AnimationGenerator().generate_frames("jump"):
            assert render_frame(base, frame).get_size() == base.get_size()

    def test_offset_moves_sprite(self):
        """Test an offset shifts the opaque bounds."""
        base = PaladinGenerator(1).generate().canvas
        still = render_frame(base, AnimationFrame())
        moved = render_frame(base, AnimationFrame(offset_y=3))
        assert still.get_bounding_rect().y + 3 == moved.get_bounding_rect().y


class TestExport:
    """Tests for PNG and sprite-sheet export."""

    def test_export_asset_writes_sidecar(self, tmp_path):
        """Test a PNG is written with its JSON metadata."""
        canvas = PaladinGenerator(1).generate().canvas
        files = export_asset(canvas, tmp_path / "out" / "paladin.png", {"seed": 1})
        assert (tmp_path / "out" / "paladin.png").exists()
        assert json.loads((tmp_path / "out" / "paladin.json").read_text(encoding="utf-8")) == {"seed": 1}
        assert set(files) == {"png", "json"}

    def test_sprite_sheet_layout(self, tmp_path):
        """Test five frames pack into a 3x2 grid."""
        base = PaladinGenerator(1).generate().canvas
        frames = [render_frame(base, f) for f in AnimationGenerator().generate_death_frames()]
        sheet = export_sprite_sheet(frames, tmp_path / "death.png")
        metadata = sheet["metadata"]
        assert metadata["columns"] == 3
        assert metadata["rows"] == 2
        assert metadata["width"] == 144
        assert metadata["frames"][4]["x"] == 48
        assert metadata["frames"][4]["y"] == 48

    def test_sprite_sheet_needs_frames(self, tmp_path):
        """Test an empty frame list is rejected."""
        with pytest.raises(ValueError):
            export_sprite_sheet([], tmp_path / "empty.png")

    def test_multiple_sizes(self, tmp_path):
        """Test rescaled copies are named by size."""
        canvas = PaladinGenerator(1).generate().canvas
        written = export_multiple_sizes(canvas, [16, 32], tmp_path / "paladin")
        assert [Path(p).name for p in written] == ["paladin_16x16.png", "paladin_32x32.png"]
