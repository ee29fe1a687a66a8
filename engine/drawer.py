"""
Raster primitives over a pygame surface.

PixelDrawer is the only place that touches pixels directly. Every
coordinate is floored to an integer and anything outside the canvas is
clipped silently. Colours are packed 0xRRGGBB ints with a separate alpha;
a pixel with alpha 0 counts as empty.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

import pygame

from engine import colors
from engine.error_handler import CanvasError

Point = Tuple[float, float]
Span = Tuple[int, int, int]  # (y, x_start, x_end) inclusive

_NEIGHBORS_8 = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))
_NEIGHBORS_4 = ((0, -1), (-1, 0), (1, 0), (0, 1))


def create_canvas(width: int, height: int) -> pygame.Surface:
    """Allocate a transparent RGBA surface."""
    width, height = int(width), int(height)
    if width <= 0 or height <= 0:
        raise CanvasError(f"Invalid canvas size {width}x{height}")
    try:
        return pygame.Surface((width, height), pygame.SRCALPHA, 32)
    except (pygame.error, ValueError, MemoryError) as e:
        raise CanvasError(f"Could not allocate {width}x{height} canvas: {e}") from e


def _isqrt(value: float) -> int:
    """Largest h with h * h <= value (0 for negative input)."""
    if value <= 0:
        return 0
    return math.isqrt(math.floor(value))


class PixelDrawer:
    """Drawing primitives bound to one canvas."""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self.width, self.height = surface.get_size()

    @classmethod
    def create(cls, width: int, height: int) -> "PixelDrawer":
        return cls(create_canvas(width, height))

    def copy(self) -> "PixelDrawer":
        return PixelDrawer(self.surface.copy())

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: float, y: float, color: int, alpha: int = 255) -> None:
        px, py = math.floor(x), math.floor(y)
        if self.in_bounds(px, py):
            self.surface.set_at((px, py), (*colors.to_rgb(color), int(alpha)))

    def get_pixel(self, x: float, y: float) -> Optional[Tuple[int, int, int, int]]:
        """RGBA tuple at (x, y), or None outside the canvas."""
        px, py = math.floor(x), math.floor(y)
        if not self.in_bounds(px, py):
            return None
        return tuple(self.surface.get_at((px, py)))

    def is_opaque(self, x: float, y: float) -> bool:
        pixel = self.get_pixel(x, y)
        return pixel is not None and pixel[3] > 0

    def blend_pixel(self, x: float, y: float, color: int, alpha: float) -> None:
        """Blend ``color`` over the pixel with opacity ``alpha`` in [0, 1]."""
        existing = self.get_pixel(x, y)
        if existing is None:
            return
        a = max(0.0, min(1.0, alpha))
        if existing[3] == 0:
            self.set_pixel(x, y, color, round(a * 255))
            return
        er, eg, eb, ea = existing
        cr, cg, cb = colors.to_rgb(color)
        blended = colors.from_rgb(
            round(er * (1 - a) + cr * a),
            round(eg * (1 - a) + cg * a),
            round(eb * (1 - a) + cb * a),
        )
        self.set_pixel(x, y, blended, max(ea, round(a * 255)))

    def clear(self, color: Optional[int] = None) -> None:
        """Fill the canvas with ``color``, or make it transparent."""
        if color is None:
            self.surface.fill((0, 0, 0, 0))
        else:
            self.surface.fill((*colors.to_rgb(color), 255))

    # ------------------------------------------------------------------
    # Span/pixel painters
    # ------------------------------------------------------------------

    def _fill_spans(self, spans: Sequence[Span], color: int, alpha: int = 255) -> None:
        if not spans or alpha <= 0:
            return
        rgb = colors.to_rgb(color)
        if alpha >= 255:
            for y, x0, x1 in spans:
                self.surface.fill((*rgb, 255), pygame.Rect(x0, y, x1 - x0 + 1, 1))
            return
        # Translucent shapes are built on a layer so each pixel blends once
        min_x = min(s[1] for s in spans)
        max_x = max(s[2] for s in spans)
        min_y = min(s[0] for s in spans)
        max_y = max(s[0] for s in spans)
        layer = pygame.Surface((max_x - min_x + 1, max_y - min_y + 1), pygame.SRCALPHA, 32)
        for y, x0, x1 in spans:
            layer.fill((*rgb, int(alpha)), pygame.Rect(x0 - min_x, y - min_y, x1 - x0 + 1, 1))
        self.surface.blit(layer, (min_x, min_y))

    def _paint_pixels(self, pixels: Iterable[Tuple[int, int]], color: int, alpha: int = 255) -> None:
        pixels = list(pixels)
        if not pixels or alpha <= 0:
            return
        rgb = colors.to_rgb(color)
        if alpha >= 255:
            for x, y in pixels:
                if self.in_bounds(x, y):
                    self.surface.set_at((x, y), (*rgb, 255))
            return
        min_x = min(p[0] for p in pixels)
        min_y = min(p[1] for p in pixels)
        max_x = max(p[0] for p in pixels)
        max_y = max(p[1] for p in pixels)
        layer = pygame.Surface((max_x - min_x + 1, max_y - min_y + 1), pygame.SRCALPHA, 32)
        for x, y in pixels:
            layer.set_at((x - min_x, y - min_y), (*rgb, int(alpha)))
        self.surface.blit(layer, (min_x, min_y))

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def draw_rect(self, x: float, y: float, width: float, height: float, color: int, alpha: int = 255) -> None:
        x0, y0 = math.floor(x), math.floor(y)
        w, h = int(width), int(height)
        if w <= 0 or h <= 0 or alpha <= 0:
            return
        rgb = colors.to_rgb(color)
        if alpha >= 255:
            self.surface.fill((*rgb, 255), pygame.Rect(x0, y0, w, h))
        else:
            layer = pygame.Surface((w, h), pygame.SRCALPHA, 32)
            layer.fill((*rgb, int(alpha)))
            self.surface.blit(layer, (x0, y0))

    def draw_rect_outline(
        self, x: float, y: float, width: float, height: float, color: int, thickness: int = 1, alpha: int = 255
    ) -> None:
        x0, y0 = math.floor(x), math.floor(y)
        w, h = int(width), int(height)
        t = max(1, int(thickness))
        if w <= 0 or h <= 0:
            return
        if w <= 2 * t or h <= 2 * t:
            self.draw_rect(x0, y0, w, h, color, alpha)
            return
        self.draw_rect(x0, y0, w, t, color, alpha)
        self.draw_rect(x0, y0 + h - t, w, t, color, alpha)
        self.draw_rect(x0, y0 + t, t, h - 2 * t, color, alpha)
        self.draw_rect(x0 + w - t, y0 + t, t, h - 2 * t, color, alpha)

    def draw_gradient(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        start: int,
        end: int,
        vertical: bool = True,
        steps: int = 8,
        alpha: int = 255,
    ) -> None:
        """Banded gradient from ``start`` to ``end`` in ``steps`` flat bands."""
        w, h = int(width), int(height)
        steps = max(1, int(steps))
        if w <= 0 or h <= 0:
            return
        length = h if vertical else w
        for i in range(steps):
            a = math.floor(length * i / steps)
            b = math.floor(length * (i + 1) / steps)
            if b <= a:
                continue
            t = i / (steps - 1) if steps > 1 else 0.0
            band = colors.lerp_color(start, end, t)
            if vertical:
                self.draw_rect(x, math.floor(y) + a, w, b - a, band, alpha)
            else:
                self.draw_rect(math.floor(x) + a, y, b - a, h, band, alpha)

    def circle_spans(self, center_x: float, center_y: float, radius: float) -> List[Span]:
        """Rows of the disc x^2 + y^2 <= r^2 around the floored centre."""
        if radius < 0:
            return []
        cx, cy = math.floor(center_x), math.floor(center_y)
        r = math.floor(radius)
        r2 = radius * radius
        spans = []
        for dy in range(-r, r + 1):
            half = _isqrt(r2 - dy * dy)
            spans.append((cy + dy, cx - half, cx + half))
        return spans

    def draw_circle(self, center_x: float, center_y: float, radius: float, color: int, alpha: int = 255) -> None:
        self._fill_spans(self.circle_spans(center_x, center_y, radius), color, alpha)

    def draw_circle_outline(self, center_x: float, center_y: float, radius: float, color: int, alpha: int = 255) -> None:
        """One-pixel ring: disc pixels with a 4-neighbour outside the disc."""
        spans = self.circle_spans(center_x, center_y, radius)
        inside = {(x, y) for y, x0, x1 in spans for x in range(x0, x1 + 1)}
        ring = [
            (x, y) for (x, y) in inside
            if any((x + dx, y + dy) not in inside for dx, dy in _NEIGHBORS_4)
        ]
        self._paint_pixels(sorted(ring), color, alpha)

    def draw_ellipse(self, center_x: float, center_y: float, width: float, height: float, color: int, alpha: int = 255) -> None:
        rx, ry = width / 2, height / 2
        if rx <= 0 or ry <= 0:
            return
        cx, cy = math.floor(center_x), math.floor(center_y)
        spans = []
        for dy in range(-math.floor(ry), math.floor(ry) + 1):
            t = 1 - (dy / ry) ** 2
            if t < 0:
                continue
            half = math.floor(rx * math.sqrt(t))
            spans.append((cy + dy, cx - half, cx + half))
        self._fill_spans(spans, color, alpha)

    @staticmethod
    def line_points(x1: float, y1: float, x2: float, y2: float) -> List[Tuple[int, int]]:
        """Bresenham points between two floored endpoints, inclusive."""
        x, y = math.floor(x1), math.floor(y1)
        tx, ty = math.floor(x2), math.floor(y2)
        dx, dy = abs(tx - x), -abs(ty - y)
        sx = 1 if x < tx else -1
        sy = 1 if y < ty else -1
        err = dx + dy
        points = []
        while True:
            points.append((x, y))
            if x == tx and y == ty:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x += sx
            if e2 <= dx:
                err += dx
                y += sy
        return points

    def draw_line(
        self, x1: float, y1: float, x2: float, y2: float, color: int, alpha: int = 255, thickness: int = 1
    ) -> None:
        points = self.line_points(x1, y1, x2, y2)
        t = max(1, int(thickness))
        if t > 1:
            lo = -(t // 2)
            hi = lo + t
            points = {
                (x + ox, y + oy)
                for x, y in points
                for ox in range(lo, hi)
                for oy in range(lo, hi)
            }
        self._paint_pixels(sorted(set(points)), color, alpha)

    def polygon_spans(self, points: Sequence[Point]) -> List[Span]:
        """Scanline fill sampling pixel centres (even-odd rule)."""
        pts = [(float(px), float(py)) for px, py in points]
        if len(pts) < 3:
            return []
        n = len(pts)
        min_y = math.floor(min(p[1] for p in pts))
        max_y = math.ceil(max(p[1] for p in pts))
        spans = []
        for py in range(min_y, max_y + 1):
            yc = py + 0.5
            crossings = []
            for i in range(n):
                ax, ay = pts[i]
                bx, by = pts[(i + 1) % n]
                if (ay <= yc < by) or (by <= yc < ay):
                    crossings.append(ax + (yc - ay) * (bx - ax) / (by - ay))
            crossings.sort()
            for i in range(0, len(crossings) - 1, 2):
                x0 = math.ceil(crossings[i] - 0.5)
                x1 = math.floor(crossings[i + 1] - 0.5)
                if x0 <= x1:
                    spans.append((py, x0, x1))
        return spans

    def draw_polygon(self, points: Sequence[Point], color: int, alpha: int = 255) -> None:
        if len(points) < 3:
            # Degenerate polygons still leave a mark
            if len(points) == 2:
                self.draw_line(*points[0], *points[1], color, alpha)
            elif len(points) == 1:
                self.set_pixel(*points[0], color, alpha)
            return
        self._fill_spans(self.polygon_spans(points), color, alpha)

    def draw_polygon_outline(self, points: Sequence[Point], color: int, alpha: int = 255) -> None:
        pixels = set()
        for i in range(len(points)):
            ax, ay = points[i]
            bx, by = points[(i + 1) % len(points)]
            pixels.update(self.line_points(ax, ay, bx, by))
        self._paint_pixels(sorted(pixels), color, alpha)

    # ------------------------------------------------------------------
    # Whole-canvas operations
    # ------------------------------------------------------------------

    def _alpha_map(self) -> bytes:
        """Alpha channel of every pixel, row-major."""
        return pygame.image.tobytes(self.surface, "RGBA")[3::4]

    def mirror_horizontal(self, axis_x: float) -> None:
        """
        Copy every opaque pixel at (axis - dx, y) to (axis + dx, y).

        Reads from a snapshot taken before the copy starts, so mirrored
        pixels are never read back.
        """
        axis = math.floor(axis_x)
        snapshot = self.surface.copy()
        span = min(axis, self.width - 1 - axis)
        if span <= 0:
            return
        for y in range(self.height):
            for dx in range(1, span + 1):
                source = snapshot.get_at((axis - dx, y))
                if source.a > 0:
                    self.surface.set_at((axis + dx, y), source)

    def draw_outline(self, color: int = 0x000000, thickness: int = 1) -> None:
        """
        Paint a silhouette ring around every opaque region.

        Transparent pixels within ``thickness`` (Chebyshev distance) of an
        edge pixel become ``color``. The canvas border counts as
        transparent; edge pixels touching it have no room outward and are
        recoloured in place. All ring pixels are collected before painting.
        """
        t = max(1, int(thickness))
        w, h = self.width, self.height
        alpha = self._alpha_map()
        ring: Set[Tuple[int, int]] = set()
        for y in range(h):
            row = y * w
            for x in range(w):
                if alpha[row + x] == 0:
                    continue
                edge = False
                on_border = False
                for dx, dy in _NEIGHBORS_8:
                    nx, ny = x + dx, y + dy
                    if nx < 0 or ny < 0 or nx >= w or ny >= h:
                        on_border = True
                        edge = True
                    elif alpha[ny * w + nx] == 0:
                        edge = True
                if not edge:
                    continue
                if on_border:
                    ring.add((x, y))
                for ny in range(max(0, y - t), min(h, y + t + 1)):
                    base = ny * w
                    for nx in range(max(0, x - t), min(w, x + t + 1)):
                        if alpha[base + nx] == 0:
                            ring.add((nx, ny))
        self._paint_pixels(sorted(ring), color)

    def draw_selective_outline(self, darken_factor: float = 0.5, alpha: int = 200) -> None:
        """One-pixel outline coloured by darkening the neighbouring interior pixel."""
        w, h = self.width, self.height
        data = pygame.image.tobytes(self.surface, "RGBA")
        targets = {}
        for y in range(h):
            for x in range(w):
                i = (y * w + x) * 4
                if data[i + 3] == 0:
                    continue
                inner = colors.from_rgb(data[i], data[i + 1], data[i + 2])
                for dx, dy in _NEIGHBORS_4:
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < w and 0 <= ny < h and data[(ny * w + nx) * 4 + 3] == 0:
                        targets.setdefault((nx, ny), colors.darken(inner, darken_factor))
        for (x, y), color in sorted(targets.items()):
            self.set_pixel(x, y, color, alpha)

    def blit(self, source: Union["PixelDrawer", pygame.Surface], x: float = 0, y: float = 0) -> None:
        """Alpha-composite another canvas onto this one."""
        surface = source.surface if isinstance(source, PixelDrawer) else source
        self.surface.blit(surface, (math.floor(x), math.floor(y)))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        return pygame.image.tobytes(self.surface, "RGBA")

    def opaque_count(self) -> int:
        return sum(1 for a in self._alpha_map() if a > 0)

    def opaque_bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """(min_x, min_y, max_x, max_y) of opaque pixels, or None if empty."""
        alpha = self._alpha_map()
        xs, ys = [], []
        for i, a in enumerate(alpha):
            if a > 0:
                ys.append(i // self.width)
                xs.append(i % self.width)
        if not xs:
            return None
        return min(xs), min(ys), max(xs), max(ys)
