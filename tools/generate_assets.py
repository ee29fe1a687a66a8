#!/usr/bin/env python3
"""
Batch asset generator.

Renders every sprite family for a seed into an output directory: PNGs with
JSON metadata sidecars, optional animation sprite sheets and parallax
backgrounds, plus a JSON-lines manifest (manifest.jsonl) of the run.

Usage:
    # Default seed, three of each character sprite, plains background
    python tools/generate_assets.py

    # Another seed with legendary glow and animation sheets
    python tools/generate_assets.py --seed 777 --glow --animations

    # Every biome into a custom directory
    python tools/generate_assets.py --biome all --output out/
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from settings import GENERATOR_NAME, GENERATOR_VERSION
from characters.animation import ANIMATION_SPECS, AnimationGenerator, render_frame
from characters.enemy import EnemySpriteGenerator
from characters.hero import CLASS_STYLES, HeroSpriteGenerator
from characters.humanoid import HumanoidGenerator
from characters.paladin import PaladinGenerator
from engine.config import GeneratorConfig
from engine.error_handler import GenerationError, handle_batch_error, logger
from engine.export import export_asset, export_sprite_sheet
from engine.palettes import BLOODLINES
from engine.rng import SeededRNG
from engine.texture_cache import TextureCache
from items.equipment import EQUIPMENT_TYPES, EquipmentGenerator
from items.gems import GEM_ELEMENTS, GemGenerator
from items.icons import RARITY_COLORS, ItemIconGenerator
from items.projectiles import PROJECTILE_STYLES, ProjectileGenerator
from items.spell_icons import SpellIconGenerator
from items.vfx import VFX_STYLES, VFXGenerator
from telemetry.logger import TelemetryLogger
from world.biomes import BIOMES
from world.environment import EnvironmentBackgroundGenerator
from world.terrain import (
    ENCOUNTER_MARKERS, GROUND_KEY, SEGMENT_TYPES, TerrainGenerator, get_background_key, get_encounter_key,
)

Rendered = Tuple[pygame.Surface, Dict[str, Any]]
Job = Tuple[str, str, Callable[[], Rendered]]

ICON_WEAPONS = ("sword", "axe", "mace", "staff", "wand")
SAMPLE_SPELLS: Dict[str, Dict[str, Any]] = {
    "holy_shield": {"name": "Holy Shield", "type": "buff"},
    "flash_heal": {"name": "Flash Heal", "type": "heal"},
    "chain_lightning": {"name": "Chain Lightning", "type": "attack"},
    "fireball": {"name": "Fireball", "type": "attack"},
    "frost_nova": {"name": "Frost Nova", "type": "aoe"},
    "shadow_word_pain": {"name": "Shadow Word: Pain", "type": "dot"},
    "backstab": {"name": "Backstab", "type": "attack"},
    "aimed_shot": {"name": "Aimed Shot", "type": "attack"},
    "healing_totem": {"name": "Healing Totem", "type": "heal"},
    "moonfire": {"name": "Moonfire", "type": "dot"},
}
SAMPLE_ENEMIES: Dict[str, Dict[str, Any]] = {
    "slime": {"appearance": {"color": "#44cc44", "size": "small"}},
    "red_dragon": {"appearance": {"color": "#b22222", "size": "large"}},
    "fire_elemental": {"appearance": {"color": "#ff6a00", "body_type": "elemental"}},
    "cave_spider": {"appearance": {"color": "#5d4037", "body_type": "insectoid"}},
    "wendigo": {"appearance": {"color": "#9e9e9e", "body_type": "beast", "size": "large"}},
    "banshee_ghost": {"appearance": {"color": "#b0c4de", "body_type": "undead"}},
    "clockwork_golem": {"appearance": {"color": "#b8860b", "body_type": "mechanical"}},
    "goblin_archer": {"appearance": {"body_type": "humanoid", "size": "small"}},
    "orc_war_lord": {"appearance": {"body_type": "humanoid", "size": "large"}},
    "dark_knight": {"appearance": {"body_type": "humanoid"}},
    "wisp": {"appearance": {"color": "#e0e0ff"}},
}
VFX_COLORS: Dict[str, int] = {
    "burst": 0xFF8C00, "star": 0xFFD700, "ring": 0x00CED1, "cloud": 0x9E9E9E, "sparks": 0xFFFF66,
}
BACKGROUND_SIZE = (1024, 600)
SHEET_FRAME_SIZE = 48


def character_jobs(seed: int, count: int, glow: bool, config: GeneratorConfig) -> Iterator[Job]:
    rarity = "legendary" if glow else "common"

    for i in range(count):
        bloodline = BLOODLINES[(i - 1) % len(BLOODLINES)] if i else None

        def humanoid(i=i, bloodline=bloodline) -> Rendered:
            result = HumanoidGenerator(rng=SeededRNG(seed + i), bloodline=bloodline,
                                       size=config.sprite_size).generate()
            return result.canvas, {**result.to_dict(), "seed": seed + i}

        yield "humanoid", f"humanoid_{i}", humanoid

    for i in range(count):
        def paladin(i=i) -> Rendered:
            result = PaladinGenerator(seed + i, rarity=rarity, config=config).generate()
            return result.canvas, result.metadata

        yield "paladin", f"paladin_{i}", paladin

    classes = list(CLASS_STYLES)
    for i in range(max(count, len(classes))):
        hero_class = classes[i % len(classes)]

        def hero(i=i, hero_class=hero_class) -> Rendered:
            result = HeroSpriteGenerator(size=config.hero_size).generate(
                {"seed": seed + i, "appearance": {"class": hero_class}}, f"{hero_class}_{i}",
            )
            return result.canvas, result.metadata

        yield "hero", f"{hero_class}_{i}", hero

    enemies = EnemySpriteGenerator(config.enemy_size, config.outline_color, config.outline_thickness)
    for enemy_id, enemy in SAMPLE_ENEMIES.items():
        def enemy_sprite(enemy_id=enemy_id, enemy=enemy) -> Rendered:
            result = enemies.generate(enemy, enemy_id)
            return result.canvas, result.metadata

        yield "enemy", enemy_id, enemy_sprite


def item_jobs(seed: int, glow: bool, config: GeneratorConfig) -> Iterator[Job]:
    rng = SeededRNG(seed)
    rarity = "legendary" if glow else "common"

    for kind in EQUIPMENT_TYPES:
        def equipment(kind=kind) -> Rendered:
            data = {"type": kind, "rarity": rarity}
            generator = EquipmentGenerator(rng=rng.derive(kind), size=config.equipment_size)
            return generator.generate(data, kind), data

        yield "equipment", kind, equipment

    gems = GemGenerator(config.gem_canvas_size, config.gem_size)
    for element in GEM_ELEMENTS:
        def gem(element=element) -> Rendered:
            data = {"element": element}
            return gems.generate(data, f"gem_{element}"), data

        yield "gem", f"gem_{element}", gem

    icons = ItemIconGenerator(config.icon_size)
    for tier in RARITY_COLORS:
        for weapon in ICON_WEAPONS:
            def icon(tier=tier, weapon=weapon) -> Rendered:
                data = {"type": "weapon", "weapon_type": weapon, "rarity": tier}
                return icons.generate(data, f"{weapon}_{tier}"), data

            yield "icon", f"{weapon}_{tier}", icon

    projectiles = ProjectileGenerator(config.projectile_size)
    for style in PROJECTILE_STYLES:
        def projectile(style=style) -> Rendered:
            data = {"style": style}
            return projectiles.generate(data, style), data

        yield "projectile", style, projectile

    spells = SpellIconGenerator(config.icon_size)
    for ability_id, ability in SAMPLE_SPELLS.items():
        def spell(ability_id=ability_id, ability=ability) -> Rendered:
            return spells.generate(ability, ability_id), dict(ability)

        yield "spell", ability_id, spell

    effects = VFXGenerator(config.vfx_size)
    for style in VFX_STYLES:
        def vfx(style=style) -> Rendered:
            data = {"style": style, "color": VFX_COLORS[style]}
            return effects.generate(data, style), data

        yield "vfx", style, vfx


def background_jobs(seed: int, biomes: List[str], config: GeneratorConfig) -> Iterator[Job]:
    width, height = BACKGROUND_SIZE
    for biome in biomes:
        def background(biome=biome) -> Rendered:
            env = EnvironmentBackgroundGenerator(SeededRNG(seed), TextureCache(), config)
            try:
                layers = env.generate_environment(biome, width, height)
                surface = env.compose(0)
                metadata = {
                    "biome": biome,
                    "width": width,
                    "height": height,
                    "layers": [
                        {"name": layer.name, "scroll_factor": layer.scroll_factor, "y": layer.y,
                         "height": layer.height, "alpha": layer.alpha}
                        for layer in layers.values()
                    ],
                    "buildings": len(env.current_buildings),
                    "npcs": len(env.current_npcs),
                }
            finally:
                env.destroy()
            return surface, metadata

        yield "background", f"background_{biome}", background


def terrain_jobs(seed: int, config: GeneratorConfig) -> Iterator[Job]:
    terrain = TerrainGenerator(SeededRNG(seed), TextureCache(), tile_size=config.terrain_tile_size)
    builders: List[Tuple[str, Callable[[], str]]] = [(GROUND_KEY, terrain.generate_ground_tile)]
    builders += [(get_background_key(s), lambda s=s: terrain.generate_background_tile(s)) for s in SEGMENT_TYPES]
    builders += [(get_encounter_key(k), lambda k=k: terrain.generate_encounter_marker(k)) for k in ENCOUNTER_MARKERS]

    for asset_id, build in builders:
        def tile(build=build) -> Rendered:
            key = build()
            return terrain.cache.get(key), {"key": key, "seed": seed}

        yield "terrain", asset_id, tile


def export_animations(seed: int, output: Path, config: GeneratorConfig, telemetry: TelemetryLogger) -> None:
    """Sprite sheet per animation type for the seed's paladin."""
    base = PaladinGenerator(seed, config=config).generate().canvas
    animator = AnimationGenerator()
    for animation_type in ANIMATION_SPECS:
        asset_id = f"paladin_{animation_type}"
        try:
            frames = animator.generate_frames(animation_type)
            sheet = export_sprite_sheet(
                [render_frame(base, frame) for frame in frames],
                output / "animations" / f"{asset_id}.png",
                frame_width=SHEET_FRAME_SIZE,
                frame_height=SHEET_FRAME_SIZE,
                frame_offsets=[{"offset_x": f.offset_x, "offset_y": f.offset_y} for f in frames],
            )
            telemetry.asset_generated(
                "animation", asset_id, {"png": sheet["png"], "json": sheet["json"]},
                timing=animator.generate_animation_data(animation_type, frames)["frame_duration"],
            )
        except (GenerationError, pygame.error, OSError, ValueError) as e:
            telemetry.asset_failed(handle_batch_error(e, "animations", asset_id))


def run_batch(
    seed: int,
    count: int,
    output: Path,
    animations: bool = False,
    glow: bool = False,
    biome: Optional[str] = None,
    config: Optional[GeneratorConfig] = None,
    telemetry: Optional[TelemetryLogger] = None,
) -> Dict[str, Any]:
    """
    Generate one batch and return the manifest summary.

    A failed asset is logged and recorded in the manifest; the batch goes on.
    """
    config = config or GeneratorConfig()
    output = Path(output)
    telemetry = telemetry or TelemetryLogger()
    telemetry.init(output / "manifest.jsonl")
    telemetry.log("batch_start", seed=seed, count=count, generator=GENERATOR_NAME, version=GENERATOR_VERSION)

    if biome == "all":
        biomes = list(BIOMES)
    elif biome:
        biomes = [biome]
    else:
        biomes = []

    jobs: List[Job] = []
    jobs.extend(character_jobs(seed, count, glow, config))
    jobs.extend(item_jobs(seed, glow, config))
    jobs.extend(terrain_jobs(seed, config))
    jobs.extend(background_jobs(seed, biomes, config))

    for kind, asset_id, render in jobs:
        try:
            surface, metadata = render()
            files = export_asset(surface, output / kind / f"{asset_id}.png", metadata)
            telemetry.asset_generated(kind, asset_id, files, size=list(surface.get_size()))
        except (GenerationError, pygame.error, OSError, ValueError) as e:
            telemetry.asset_failed(handle_batch_error(e, kind, asset_id))

    if animations:
        export_animations(seed, output, config, telemetry)

    summary = telemetry.batch_complete(seed=seed, output=str(output))
    logger.info(f"Batch done: {summary['generated']} generated, {summary['failed']} failed")
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    config = GeneratorConfig.load()

    parser = argparse.ArgumentParser(description="Generate pixel-art assets for one seed")
    parser.add_argument(
        "--seed",
        type=int,
        default=config.default_seed,
        help=f"Generation seed (default: {config.default_seed})"
    )
    parser.add_argument(
        "--count",
        type=int,
        default=3,
        help="Humanoid, paladin and hero variants to generate (default: 3)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=config.output_dir,
        help=f"Output directory (default: {config.output_dir})"
    )
    parser.add_argument(
        "--animations",
        action="store_true",
        help="Also export animation sprite sheets"
    )
    parser.add_argument(
        "--glow",
        action="store_true",
        help="Render legendary variants with glow"
    )
    parser.add_argument(
        "--biome",
        choices=list(BIOMES) + ["all"],
        default="plains",
        help="Background biome to render, or 'all' (default: plains)"
    )

    args = parser.parse_args(argv)
    if args.count < 0:
        parser.error("--count must be zero or more")

    pygame.init()
    try:
        summary = run_batch(
            args.seed, args.count, Path(args.output),
            animations=args.animations, glow=args.glow, biome=args.biome, config=config,
        )
    finally:
        pygame.quit()

    print(f"Generated {summary['generated']} assets into {args.output} ({summary['failed']} failed)")
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
