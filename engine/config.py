"""
Generator configuration.

Loads and saves generator settings from a JSON file under ``config/``.
"""

import json
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Dict, Any, List, Optional

import settings
from engine.error_handler import logger, ConfigError

# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_FILE = CONFIG_DIR / "generator_settings.json"


@dataclass
class GeneratorConfig:
    """Settings shared by every generator in one run."""

    # Randomness
    default_seed: int = settings.DEFAULT_SEED

    # Outline
    outline_color: int = settings.OUTLINE_COLOR
    outline_thickness: int = settings.OUTLINE_THICKNESS

    # Canvas sizes
    sprite_size: int = settings.SPRITE_SIZE
    equipment_size: int = settings.EQUIPMENT_SIZE
    gem_canvas_size: int = settings.GEM_CANVAS_SIZE
    gem_size: int = settings.GEM_SIZE
    icon_size: int = settings.ICON_SIZE
    projectile_size: int = settings.PROJECTILE_SIZE
    hero_size: int = settings.HERO_SIZE
    enemy_size: int = settings.ENEMY_SIZE
    vfx_size: int = settings.VFX_SIZE
    terrain_tile_size: int = settings.TERRAIN_TILE_SIZE

    # Background textures
    sky_min_width: int = settings.SKY_MIN_WIDTH
    layer_min_width: int = settings.LAYER_MIN_WIDTH
    mid_pattern_width: int = settings.MID_PATTERN_WIDTH
    ground_pattern_width: int = settings.GROUND_PATTERN_WIDTH
    foreground_pattern_width: int = settings.FOREGROUND_PATTERN_WIDTH

    # Output
    output_dir: str = settings.OUTPUT_DIR

    # Which decorations each rarity tier adds to class sprites
    rarity_flourishes: Dict[str, List[str]] = field(default_factory=lambda: {
        "common": [],
        "uncommon": [],
        "rare": ["emblem"],
        "epic": ["emblem", "plume", "glow"],
        "legendary": ["emblem", "plume", "glow"],
    })

    def flourishes_for(self, rarity: Optional[str]) -> List[str]:
        """Decorations for a rarity tier; unknown tiers get none."""
        return list(self.rarity_flourishes.get(rarity or "common", []))

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def load(cls, path: Optional[Path] = None, strict: bool = False) -> "GeneratorConfig":
        """
        Load configuration from file, using defaults if the file doesn't exist.

        Args:
            path: Config file to read (defaults to config/generator_settings.json)
            strict: Raise ConfigError instead of falling back on a bad file
        """
        path = Path(path) if path is not None else CONFIG_FILE

        if not path.exists():
            # Create default config file
            config = cls()
            config.save(path)
            return config

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level JSON value must be an object")
            return cls.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            if strict:
                raise ConfigError(f"Could not load {path}: {e}") from e
            logger.warning(f"Error loading generator config {path}: {e}; using defaults")
            return cls()

    def save(self, path: Optional[Path] = None) -> bool:
        """Save configuration to file."""
        path = Path(path) if path is not None else CONFIG_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.warning(f"Error saving generator config {path}: {e}")
            return False
