"""
Material cel-shading.

A base colour and a material kind produce a five-step ramp
(light2, light1, base, dark1, dark2). Rectangles are painted as a 3x3
grid of flat cells and discs pixel by pixel, each picking a ramp level
from its distance to the light source.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from engine import colors
from engine.drawer import PixelDrawer


@dataclass(frozen=True)
class MaterialRule:
    highlight: float
    shadow: float


MATERIAL_RULES: Dict[str, MaterialRule] = {
    "metal": MaterialRule(highlight=0.6, shadow=0.5),
    "cloth": MaterialRule(highlight=0.3, shadow=0.4),
    "leather": MaterialRule(highlight=0.25, shadow=0.35),
    "skin": MaterialRule(highlight=0.35, shadow=0.3),
}

DEFAULT_MATERIAL = "cloth"
DEFAULT_LIGHT = "top-left"

# Light source position as a fraction of the region size
LIGHT_POSITIONS: Dict[str, Tuple[float, float]] = {
    "top-left": (0.0, 0.0),
    "top": (0.5, 0.0),
    "left": (0.0, 0.5),
    "center": (0.5, 0.5),
}

GRID = 3


@dataclass(frozen=True)
class CelShadePalette:
    light2: int
    light1: int
    base: int
    dark1: int
    dark2: int

    def as_list(self) -> List[int]:
        """Ramp ordered light to dark."""
        return [self.light2, self.light1, self.base, self.dark1, self.dark2]

    def level(self, light_factor: float) -> int:
        """Ramp colour for a light factor in [0, 1]."""
        if light_factor > 0.7:
            return self.light2
        if light_factor > 0.5:
            return self.light1
        if light_factor > 0.3:
            return self.base
        if light_factor > 0.15:
            return self.dark1
        return self.dark2


def _grid_edges(start: int, length: int) -> List[int]:
    return [start + math.floor(length * i / GRID) for i in range(GRID + 1)]


class MaterialShader:
    """Derives cel-shade ramps and paints shaded regions."""

    def get_material_rules(self, material: str) -> MaterialRule:
        return MATERIAL_RULES.get(material, MATERIAL_RULES[DEFAULT_MATERIAL])

    def create_cel_shade_palette(self, base_color: int, material: str = DEFAULT_MATERIAL) -> CelShadePalette:
        rule = self.get_material_rules(material)
        return CelShadePalette(
            light2=colors.lighten(base_color, min(1.0, rule.highlight * 1.5)),
            light1=colors.lighten(base_color, rule.highlight),
            base=base_color,
            dark1=colors.darken(base_color, rule.shadow),
            dark2=colors.darken(base_color, min(1.0, rule.shadow * 1.5)),
        )

    def calculate_light_factor(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        light_direction: str = DEFAULT_LIGHT,
    ) -> float:
        """1.0 at the light source falling to 0.0 at the far corner."""
        lx, ly = LIGHT_POSITIONS.get(light_direction, LIGHT_POSITIONS[DEFAULT_LIGHT])
        dx = (x - lx * width) / width
        dy = (y - ly * height) / height
        distance = math.sqrt(dx * dx + dy * dy)
        return 1.0 - min(distance / math.sqrt(2), 1.0)

    def _cell_colors(
        self,
        width: float,
        height: float,
        palette: CelShadePalette,
        light_direction: str,
        xs: List[int],
        ys: List[int],
        origin: Tuple[int, int],
    ) -> List[List[int]]:
        ox, oy = origin
        grid = []
        for row in range(GRID):
            cy = (ys[row] + ys[row + 1]) / 2 - oy
            line = []
            for col in range(GRID):
                cx = (xs[col] + xs[col + 1]) / 2 - ox
                factor = self.calculate_light_factor(cx, cy, width, height, light_direction)
                line.append(palette.level(factor))
            grid.append(line)
        return grid

    def apply_cel_shade(
        self,
        drawer: PixelDrawer,
        x: float,
        y: float,
        width: float,
        height: float,
        palette: CelShadePalette,
        light_direction: str = DEFAULT_LIGHT,
    ) -> None:
        """Paint a rectangle as a 3x3 grid of ramp cells."""
        x0, y0 = math.floor(x), math.floor(y)
        w, h = int(width), int(height)
        if w <= 0 or h <= 0:
            return
        xs = _grid_edges(x0, w)
        ys = _grid_edges(y0, h)
        grid = self._cell_colors(w, h, palette, light_direction, xs, ys, (x0, y0))
        for row in range(GRID):
            for col in range(GRID):
                cw = xs[col + 1] - xs[col]
                ch = ys[row + 1] - ys[row]
                if cw > 0 and ch > 0:
                    drawer.draw_rect(xs[col], ys[row], cw, ch, grid[row][col])

    def apply_cel_shade_circle(
        self,
        drawer: PixelDrawer,
        center_x: float,
        center_y: float,
        radius: float,
        palette: CelShadePalette,
        light_direction: str = DEFAULT_LIGHT,
    ) -> None:
        """
        Paint a disc with a per-pixel ramp level.

        Each pixel's light factor is measured across the disc's bounding
        box, so the light corner of the box is the brightest point. Runs
        of one colour along a row are painted as a single rect.
        """
        if radius <= 0:
            return
        cx, cy = math.floor(center_x), math.floor(center_y)
        r = math.floor(radius)
        left, top = cx - r, cy - r
        size = max(1, 2 * r)

        for py, x_start, x_end in drawer.circle_spans(cx, cy, radius):
            run_start, run_color = x_start, None
            for px in range(x_start, x_end + 1):
                factor = self.calculate_light_factor(px - left, py - top, size, size, light_direction)
                color = palette.level(factor)
                if color != run_color:
                    if run_color is not None:
                        drawer.draw_rect(run_start, py, px - run_start, 1, run_color)
                    run_start, run_color = px, color
            if run_color is not None:
                drawer.draw_rect(run_start, py, x_end + 1 - run_start, 1, run_color)
