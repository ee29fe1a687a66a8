"""
Body proportions.

Turns body-part names into pixel bounding boxes for a given sprite
height. One ProportionManager is created per generate() call and reused
for every part so joints line up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from engine.error_handler import logger


@dataclass(frozen=True)
class BodyRatios:
    """Fractions of the total height plus the validation ranges (percent)."""
    head: float
    torso: float
    limbs: float
    equipment_scale: float
    head_range: Tuple[float, float]
    torso_range: Tuple[float, float]
    limbs_range: Tuple[float, float]
    total_range: Tuple[float, float]


STYLES: Dict[str, BodyRatios] = {
    "chibi": BodyRatios(
        head=0.33, torso=0.25, limbs=0.20, equipment_scale=1.2,
        head_range=(30, 36), torso_range=(22, 28), limbs_range=(18, 22), total_range=(72, 82),
    ),
    "realistic": BodyRatios(
        head=0.125, torso=0.28, limbs=0.36, equipment_scale=1.0,
        head_range=(11, 14), torso_range=(25, 31), limbs_range=(33, 39), total_range=(70, 82),
    ),
}

DEFAULT_STYLE = "chibi"


@dataclass(frozen=True)
class BodyRegionBounds:
    """Where one body part is drawn, in canvas pixels."""
    x: float
    y: float
    width: int
    height: int
    center_x: float
    center_y: float

    @property
    def radius(self) -> int:
        return self.width // 2


class ProportionManager:
    """Fixed-ratio body layout for one sprite."""

    def __init__(self, total_height: int = 48, style: str = DEFAULT_STYLE, top: float = 0) -> None:
        if style not in STYLES:
            logger.debug(f"Unknown proportion style {style!r}; using {DEFAULT_STYLE}")
            style = DEFAULT_STYLE
        self.style = style
        self.ratios = STYLES[style]
        self.top = top
        self.set_total_height(total_height)

    def set_total_height(self, total_height: int) -> None:
        self.total_height = total_height
        self.head_height = math.floor(total_height * self.ratios.head)
        self.torso_height = math.floor(total_height * self.ratios.torso)
        self.limb_height = math.floor(total_height * self.ratios.limbs)

    def get_proportions(self) -> Dict[str, int]:
        return {
            "total_height": self.total_height,
            "head_height": self.head_height,
            "torso_height": self.torso_height,
            "limb_height": self.limb_height,
        }

    def get_head_bounds(self, center_x: float) -> BodyRegionBounds:
        width = math.floor(self.head_height * 0.9)
        return BodyRegionBounds(
            x=center_x - width / 2,
            y=self.top,
            width=width,
            height=self.head_height,
            center_x=center_x,
            center_y=self.top + self.head_height / 2,
        )

    def get_torso_bounds(self, center_x: float) -> BodyRegionBounds:
        width = math.floor(self.torso_height * 0.8)
        y = self.top + self.head_height - 2
        return BodyRegionBounds(
            x=center_x - width / 2,
            y=y,
            width=width,
            height=self.torso_height,
            center_x=center_x,
            center_y=y + self.torso_height / 2,
        )

    def get_arm_bounds(self, center_x: float, side: str = "left") -> BodyRegionBounds:
        torso = self.get_torso_bounds(center_x)
        width = math.floor(self.limb_height * 0.45)
        if side == "left":
            x = torso.x - width + 2
        else:
            x = torso.x + torso.width - 2
        y = torso.y + 2
        return BodyRegionBounds(
            x=x,
            y=y,
            width=width,
            height=self.limb_height,
            center_x=x + width / 2,
            center_y=y + self.limb_height / 2,
        )

    def get_leg_bounds(self, center_x: float, side: str = "left") -> BodyRegionBounds:
        torso = self.get_torso_bounds(center_x)
        width = math.floor(self.limb_height * 0.55)
        if side == "left":
            x = center_x - width + 1
        else:
            x = center_x - 1
        y = torso.y + torso.height - 3
        return BodyRegionBounds(
            x=x,
            y=y,
            width=width,
            height=self.limb_height,
            center_x=x + width / 2,
            center_y=y + self.limb_height / 2,
        )

    def get_equipment_bounds(self, part: str, center_x: float, side: str = "left") -> BodyRegionBounds:
        """Part bounds enlarged by the style's equipment scale, same centre."""
        if part == "head":
            base = self.get_head_bounds(center_x)
        elif part == "torso":
            base = self.get_torso_bounds(center_x)
        elif part == "arm":
            base = self.get_arm_bounds(center_x, side)
        elif part == "leg":
            base = self.get_leg_bounds(center_x, side)
        else:
            logger.debug(f"Unknown body part {part!r}; using torso bounds")
            base = self.get_torso_bounds(center_x)

        scale = self.ratios.equipment_scale
        width = math.floor(base.width * scale)
        height = math.floor(base.height * scale)
        return BodyRegionBounds(
            x=base.center_x - width / 2,
            y=base.center_y - height / 2,
            width=width,
            height=height,
            center_x=base.center_x,
            center_y=base.center_y,
        )

    def validate_proportions(self) -> Dict[str, object]:
        """Check the computed heights against the style's ranges."""
        if self.total_height <= 0:
            return {"valid": False, "errors": ["total height must be positive"], "proportions": {}}

        ratios = self.ratios
        percentages = {
            "head": self.head_height / self.total_height * 100,
            "torso": self.torso_height / self.total_height * 100,
            "limbs": self.limb_height / self.total_height * 100,
        }
        percentages["total"] = percentages["head"] + percentages["torso"] + percentages["limbs"]

        errors: List[str] = []
        checks = (
            ("head", ratios.head_range),
            ("torso", ratios.torso_range),
            ("limbs", ratios.limbs_range),
            ("total", ratios.total_range),
        )
        for name, (low, high) in checks:
            value = percentages[name]
            if not low <= value <= high:
                errors.append(f"{name} is {value:.1f}% (expected {low}-{high}%)")

        return {"valid": not errors, "errors": errors, "proportions": percentages}
