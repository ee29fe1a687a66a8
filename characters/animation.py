"""
Transform-based animation frames.

Frames are pure data: an offset, scale, alpha and rotation applied to one
base sprite. Nothing is redrawn; ``render_frame`` turns a frame into a
surface only when a sheet is exported.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Optional

import pygame

from engine.drawer import create_canvas
from engine.error_handler import logger


@dataclass(frozen=True)
class AnimationSpec:
    frames: int
    duration: float
    motion: str
    amplitude: float


ANIMATION_SPECS: Dict[str, AnimationSpec] = {
    "idle": AnimationSpec(4, 2.0, "vertical", 5),
    "walk": AnimationSpec(8, 0.8, "vertical+legs", 10),
    "attack": AnimationSpec(6, 0.4, "dash+squash", 20),
    "jump": AnimationSpec(4, 0.6, "scale", 0.4),
    "death": AnimationSpec(5, 1.0, "fade", 0),
}

JUMP_HEIGHT = 15
DEATH_ROTATION = 15
DEATH_FALL = 5


@dataclass(frozen=True)
class AnimationFrame:
    offset_x: int = 0
    offset_y: int = 0
    scale: float = 1.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    alpha: float = 1.0
    rotation: float = 0.0
    leg_cycle: Optional[int] = None


def _round(value: float) -> int:
    """Round half up."""
    return math.floor(value + 0.5)


def _progress(i: int, frame_count: int) -> float:
    """0..1 across frames, inclusive of both ends."""
    return i / (frame_count - 1) if frame_count > 1 else 0.0


class AnimationGenerator:
    """Builds frame transforms for each animation type."""

    def __init__(self) -> None:
        self.specs = dict(ANIMATION_SPECS)

    def generate_idle_frames(self, frame_count: int = 4) -> List[AnimationFrame]:
        amplitude = self.specs["idle"].amplitude
        return [
            AnimationFrame(offset_y=_round(math.sin(i / frame_count * math.pi * 2) * amplitude))
            for i in range(frame_count)
        ]

    def generate_walk_frames(self, frame_count: int = 8) -> List[AnimationFrame]:
        amplitude = self.specs["walk"].amplitude
        frames = []
        for i in range(frame_count):
            leg_cycle = (i // 2) % 2
            frames.append(AnimationFrame(
                offset_x=-2 if leg_cycle == 0 else 2,
                offset_y=_round(math.sin(i / frame_count * math.pi * 2) * amplitude),
                leg_cycle=leg_cycle,
            ))
        return frames

    def generate_attack_frames(self, frame_count: int = 6) -> List[AnimationFrame]:
        amplitude = self.specs["attack"].amplitude
        frames = []
        for i in range(frame_count):
            t = _progress(i, frame_count)
            # Dash forward while squashing horizontally
            frames.append(AnimationFrame(
                offset_x=_round(t * amplitude),
                scale_x=1.0 - t * 0.2,
                scale_y=1.0 + t * 0.1,
            ))
        return frames

    def generate_jump_frames(self, frame_count: int = 4) -> List[AnimationFrame]:
        amplitude = self.specs["jump"].amplitude
        frames = []
        for i in range(frame_count):
            t = _progress(i, frame_count)
            if t < 0.5:
                scale = 0.8 + t * 2 * amplitude
            else:
                scale = 1.2 - (t - 0.5) * 2 * amplitude
            frames.append(AnimationFrame(
                offset_y=_round(-math.sin(t * math.pi) * JUMP_HEIGHT),
                scale=scale,
            ))
        return frames

    def generate_death_frames(self, frame_count: int = 5) -> List[AnimationFrame]:
        frames = []
        for i in range(frame_count):
            t = _progress(i, frame_count)
            frames.append(AnimationFrame(
                offset_y=_round(t * DEATH_FALL),
                alpha=1.0 - t,
                rotation=t * DEATH_ROTATION,
            ))
        return frames

    def generate_frames(self, animation_type: str, frame_count: Optional[int] = None) -> List[AnimationFrame]:
        """Frames for any known type; unknown types fall back to idle."""
        builders = {
            "idle": self.generate_idle_frames,
            "walk": self.generate_walk_frames,
            "attack": self.generate_attack_frames,
            "jump": self.generate_jump_frames,
            "death": self.generate_death_frames,
        }
        if animation_type not in builders:
            logger.debug(f"Unknown animation {animation_type!r}; using idle")
            animation_type = "idle"
        count = frame_count if frame_count is not None else self.specs[animation_type].frames
        return builders[animation_type](count)

    @staticmethod
    def apply_transform(frame: AnimationFrame, transform: Dict[str, Any]) -> AnimationFrame:
        """Offsets add, scale multiplies, the rest are replaced when given."""
        return replace(
            frame,
            offset_x=frame.offset_x + transform.get("offset_x", 0),
            offset_y=frame.offset_y + transform.get("offset_y", 0),
            scale=frame.scale * transform.get("scale", 1.0),
            scale_x=transform.get("scale_x", frame.scale_x),
            scale_y=transform.get("scale_y", frame.scale_y),
            alpha=transform.get("alpha", frame.alpha),
            rotation=transform.get("rotation", frame.rotation),
        )

    def generate_animation_data(self, animation_type: str, frames: List[AnimationFrame]) -> Dict[str, Any]:
        spec = self.specs.get(animation_type, self.specs["idle"])
        frame_duration = spec.duration / len(frames) if frames else 0.0
        return {
            "type": animation_type,
            "frame_count": len(frames),
            "duration": spec.duration,
            "frame_duration": frame_duration,
            "loop": animation_type != "death",
            "frames": [
                {"index": i, **asdict(frame), "duration": frame_duration}
                for i, frame in enumerate(frames)
            ],
        }


def render_frame(base: pygame.Surface, frame: AnimationFrame) -> pygame.Surface:
    """Apply one frame's transform to a sprite, keeping the canvas size."""
    width, height = base.get_size()
    scaled_w = max(1, _round(width * frame.scale * frame.scale_x))
    scaled_h = max(1, _round(height * frame.scale * frame.scale_y))
    image = pygame.transform.scale(base, (scaled_w, scaled_h))
    if frame.rotation:
        # pygame rotates counter-clockwise
        image = pygame.transform.rotate(image, -frame.rotation)
    if frame.alpha < 1.0:
        image = image.copy()
        image.fill((255, 255, 255, _round(max(0.0, frame.alpha) * 255)), special_flags=pygame.BLEND_RGBA_MULT)

    out = create_canvas(width, height)
    x = (width - image.get_width()) // 2 + frame.offset_x
    y = (height - image.get_height()) // 2 + frame.offset_y
    out.blit(image, (x, y))
    return out
