"""
Unit tests for the run manifest and the batch generator CLI.
"""

import json

import pytest
from engine import config as config_module
from engine.config import GeneratorConfig
from engine.error_handler import GenerationError
from telemetry.logger import TelemetryLogger
from tools import generate_assets


def _events(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestTelemetryLogger:
    """Tests for the JSON-lines manifest."""

    def test_init_creates_file(self, tmp_path):
        """Test init creates the manifest and logs the init event."""
        path = tmp_path / "run" / "manifest.jsonl"
        logger = TelemetryLogger()
        logger.init(path)
        events = _events(path)
        assert events[0]["event"] == "telemetry_init"
        assert events[0]["file"] == str(path)

    def test_counts_and_summary(self, tmp_path):
        """Test generated and failed assets are counted in the summary."""
        logger = TelemetryLogger()
        logger.init(tmp_path / "manifest.jsonl")
        logger.asset_generated("gem", "gem_fire", {"png": "gem_fire.png"})
        logger.asset_generated("gem", "gem_cold", {"png": "gem_cold.png"})
        logger.asset_failed({"context": "gem", "item": "gem_void", "error": "ValueError", "message": "x"})
        summary = logger.batch_complete(seed=1)
        assert summary["generated"] == 2
        assert summary["failed"] == 1
        assert summary["seed"] == 1
        assert [e["event"] for e in _events(tmp_path / "manifest.jsonl")] == [
            "telemetry_init", "asset_generated", "asset_generated", "asset_failed", "batch_complete",
        ]

    def test_disabled_writes_nothing(self, tmp_path):
        """Test a disabled logger never touches the file."""
        path = tmp_path / "manifest.jsonl"
        logger = TelemetryLogger(path=path, enabled=False)
        logger.log("anything")
        assert not path.exists()

    def test_unserialisable_fields_stringified(self, tmp_path):
        """Test odd field values are written with str()."""
        logger = TelemetryLogger()
        logger.init(tmp_path / "manifest.jsonl")
        logger.log("custom", where=tmp_path)
        assert _events(tmp_path / "manifest.jsonl")[-1]["where"] == str(tmp_path)

    def test_write_errors_ignored(self, tmp_path):
        """Test an unwritable manifest does not raise."""
        logger = TelemetryLogger(path=tmp_path)
        logger.log("custom")


class TestRunBatch:
    """Tests for run_batch."""

    def test_batch_writes_assets(self, tmp_path, config):
        """Test a small batch writes sprites, sidecars and a manifest."""
        summary = generate_assets.run_batch(1, 1, tmp_path, biome="plains", config=config)
        assert summary["failed"] == 0
        assert summary["generated"] > 0
        assert (tmp_path / "paladin" / "paladin_0.png").exists()
        assert (tmp_path / "humanoid" / "humanoid_0.json").exists()
        assert (tmp_path / "background" / "background_plains.png").exists()
        assert (tmp_path / "enemy" / "dark_knight.png").exists()
        assert (tmp_path / "vfx" / "sparks.png").exists()
        assert (tmp_path / "terrain" / "terrain-ground.png").exists()
        assert (tmp_path / "terrain" / "encounter-quest.json").exists()

        metadata = json.loads((tmp_path / "background" / "background_plains.json").read_text(encoding="utf-8"))
        assert metadata["biome"] == "plains"
        assert "road" in [layer["name"] for layer in metadata["layers"]]

        events = _events(tmp_path / "manifest.jsonl")
        assert events[1]["event"] == "batch_start"
        assert events[-1]["event"] == "batch_complete"
        generated = [e for e in events if e["event"] == "asset_generated"]
        assert len(generated) == summary["generated"]

    def test_failed_asset_does_not_stop_batch(self, tmp_path, config, monkeypatch):
        """Test a failing job is recorded and the rest still render."""
        def broken_items(seed, glow, config):
            def render():
                raise GenerationError("bad gem")
            yield "gem", "gem_broken", render

        monkeypatch.setattr(generate_assets, "item_jobs", broken_items)
        summary = generate_assets.run_batch(2, 1, tmp_path, config=config)
        assert summary["failed"] == 1
        assert (tmp_path / "paladin" / "paladin_0.png").exists()
        failed = [e for e in _events(tmp_path / "manifest.jsonl") if e["event"] == "asset_failed"]
        assert failed[0]["item"] == "gem_broken"
        assert failed[0]["error"] == "GenerationError"

    def test_animation_sheets(self, tmp_path, config, monkeypatch):
        """Test --animations exports one sheet per animation type."""
        monkeypatch.setattr(generate_assets, "item_jobs", lambda seed, glow, config: iter(()))
        generate_assets.run_batch(3, 0, tmp_path, animations=True, config=config)
        for animation_type in generate_assets.ANIMATION_SPECS:
            assert (tmp_path / "animations" / f"paladin_{animation_type}.png").exists()

    def test_hero_jobs_cover_every_class(self, config):
        """Test heroes cover every class even with a small count."""
        ids = [asset_id for kind, asset_id, _ in generate_assets.character_jobs(1, 1, False, config) if kind == "hero"]
        assert len(ids) == len(generate_assets.CLASS_STYLES)


class TestMain:
    """Tests for the command line entry point."""

    @pytest.fixture(autouse=True)
    def isolated_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config" / "generator_settings.json")
        # The session fixture owns pygame's lifetime
        monkeypatch.setattr(generate_assets.pygame, "quit", lambda: None)

    def test_negative_count_rejected(self):
        """Test argparse rejects a negative count."""
        with pytest.raises(SystemExit):
            generate_assets.main(["--count", "-1"])

    def test_unknown_biome_rejected(self):
        """Test argparse rejects unknown biomes."""
        with pytest.raises(SystemExit):
            generate_assets.main(["--biome", "swamp"])

    def test_main_runs_batch(self, tmp_path, monkeypatch):
        """Test main forwards options and reports success."""
        calls = []

        def fake_run_batch(seed, count, output, **kwargs):
            calls.append((seed, count, output, kwargs))
            return {"generated": 4, "failed": 0}

        monkeypatch.setattr(generate_assets, "run_batch", fake_run_batch)
        code = generate_assets.main(["--seed", "9", "--count", "2", "--output", str(tmp_path), "--glow"])
        assert code == 0
        seed, count, output, kwargs = calls[0]
        assert (seed, count, output) == (9, 2, tmp_path)
        assert kwargs["glow"] is True
        assert kwargs["biome"] == "plains"
        assert isinstance(kwargs["config"], GeneratorConfig)

    def test_main_reports_failures(self, tmp_path, monkeypatch):
        """Test a batch with failures exits non-zero."""
        monkeypatch.setattr(generate_assets, "run_batch", lambda *a, **k: {"generated": 1, "failed": 2})
        assert generate_assets.main(["--output", str(tmp_path)]) == 1
