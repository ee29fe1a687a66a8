"""
Character sprite generators.

Provides the ordered render pipeline, the chibi humanoid and paladin
generators, realistic hero sprites, enemy sprites, anchored components
and animation frame transforms.
"""

from .pipeline import RenderStage, RenderPipeline
from .humanoid import HumanoidGenerator, HumanoidResult
from .paladin import PaladinGenerator, PaladinStyle, PaladinProportions, SpriteResult
from .hero import HeroSpriteGenerator, ClassStyle, CLASS_STYLES
from .enemy import EnemySpriteGenerator, BODY_TYPES
from .components import ComponentMetadata, ComponentOptions, COMPONENT_DEFINITIONS, assemble_character
from .animation import AnimationFrame, AnimationGenerator, ANIMATION_SPECS, render_frame

__all__ = [
    "RenderStage",
    "RenderPipeline",
    "HumanoidGenerator",
    "HumanoidResult",
    "PaladinGenerator",
    "PaladinStyle",
    "PaladinProportions",
    "SpriteResult",
    "HeroSpriteGenerator",
    "ClassStyle",
    "CLASS_STYLES",
    "EnemySpriteGenerator",
    "BODY_TYPES",
    "ComponentMetadata",
    "ComponentOptions",
    "COMPONENT_DEFINITIONS",
    "assemble_character",
    "AnimationFrame",
    "AnimationGenerator",
    "ANIMATION_SPECS",
    "render_frame",
]
