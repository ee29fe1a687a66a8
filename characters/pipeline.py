"""
Ordered render stages for character sprites.

Characters are drawn half-body first, mirrored once, finished with the
asymmetric extras and outlined last. RenderPipeline owns the MIRROR and
OUTLINE steps itself and runs registered drawing steps strictly in stage
order, whatever order they were added in.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, List, Optional

from engine.drawer import PixelDrawer
from engine.error_handler import logger


class RenderStage(IntEnum):
    BASE_BODY = 1
    ARMOR = 2
    MIRROR = 3
    ASYMMETRIC_EQUIPMENT = 4
    OUTLINE = 5


DrawStep = Callable[[PixelDrawer], None]

# Stages the pipeline performs itself
BUILTIN_STAGES = (RenderStage.MIRROR, RenderStage.OUTLINE)


class RenderPipeline:
    """Runs drawing steps in BASE_BODY -> ARMOR -> MIRROR -> ASYMMETRIC_EQUIPMENT -> OUTLINE order."""

    def __init__(
        self,
        axis_x: int,
        outline_color: int = 0x000000,
        outline_thickness: int = 2,
        outline: Optional[DrawStep] = None,
    ) -> None:
        self.axis_x = axis_x
        self.outline_color = outline_color
        self.outline_thickness = outline_thickness
        self._outline = outline
        self._steps: Dict[RenderStage, List[DrawStep]] = {
            stage: [] for stage in RenderStage if stage not in BUILTIN_STAGES
        }
        self.completed: List[RenderStage] = []

    def add(self, stage: RenderStage, step: DrawStep) -> "RenderPipeline":
        if stage in BUILTIN_STAGES:
            raise ValueError(f"{stage.name} is performed by the pipeline itself")
        self._steps[stage].append(step)
        return self

    def run(self, drawer: PixelDrawer, until: Optional[RenderStage] = None) -> PixelDrawer:
        """
        Draw every stage in order, stopping after ``until`` when given.

        Returns the drawer for chaining.
        """
        self.completed = []
        for stage in RenderStage:
            if until is not None and stage > until:
                break
            if stage == RenderStage.MIRROR:
                drawer.mirror_horizontal(self.axis_x)
            elif stage == RenderStage.OUTLINE:
                if self._outline is not None:
                    self._outline(drawer)
                else:
                    drawer.draw_outline(self.outline_color, self.outline_thickness)
            else:
                for step in self._steps[stage]:
                    step(drawer)
            self.completed.append(stage)
        logger.debug(f"Render pipeline ran stages {[s.name for s in self.completed]}")
        return drawer
