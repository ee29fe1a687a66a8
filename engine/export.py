"""
Writing generated assets to disk.

PNGs go through pygame.image.save; every PNG can carry a JSON sidecar
with the generation metadata.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pygame

from engine.drawer import create_canvas

PathLike = Union[str, Path]


def save_png(surface: pygame.Surface, path: PathLike) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pygame.image.save(surface, str(path))
    return path


def save_metadata(metadata: Dict[str, Any], path: PathLike) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2)
    return path


def export_asset(surface: pygame.Surface, path: PathLike, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """Save a PNG and, when given, its metadata next to it."""
    png_path = save_png(surface, path)
    result = {"png": str(png_path)}
    if metadata is not None:
        result["json"] = str(save_metadata(metadata, png_path.with_suffix(".json")))
    return result


def export_sprite_sheet(
    frames: Sequence[pygame.Surface],
    output_path: PathLike,
    frame_width: int = 48,
    frame_height: int = 48,
    columns: Optional[int] = None,
    spacing: int = 0,
    padding: int = 0,
    frame_offsets: Optional[Sequence[Dict[str, float]]] = None,
) -> Dict[str, Any]:
    """
    Pack frames into a grid sheet and write it with a JSON layout file.

    Args:
        frames: Frame surfaces, scaled to frame_width x frame_height
        output_path: Where to write the PNG; the layout goes beside it
        columns: Grid columns (default ceil(sqrt(n)))
        spacing: Gap between frames
        padding: Border around the whole sheet
        frame_offsets: Optional per-frame {"offset_x", "offset_y"} recorded in the layout

    Returns:
        Dict with "png", "json" paths and the "metadata" written.
    """
    if not frames:
        raise ValueError("No frames provided for sprite sheet")

    cols = columns or math.ceil(math.sqrt(len(frames)))
    rows = math.ceil(len(frames) / cols)
    sheet_width = cols * (frame_width + spacing) - spacing + padding * 2
    sheet_height = rows * (frame_height + spacing) - spacing + padding * 2
    sheet = create_canvas(sheet_width, sheet_height)

    frame_data: List[Dict[str, Any]] = []
    for i, frame in enumerate(frames):
        x = padding + (i % cols) * (frame_width + spacing)
        y = padding + (i // cols) * (frame_height + spacing)
        if frame.get_size() != (frame_width, frame_height):
            frame = pygame.transform.scale(frame, (frame_width, frame_height))
        sheet.blit(frame, (x, y))
        offsets = frame_offsets[i] if frame_offsets and i < len(frame_offsets) else {}
        frame_data.append({
            "index": i,
            "x": x,
            "y": y,
            "width": frame_width,
            "height": frame_height,
            "offset_x": offsets.get("offset_x", 0),
            "offset_y": offsets.get("offset_y", 0),
        })

    metadata = {
        "width": sheet_width,
        "height": sheet_height,
        "frame_width": frame_width,
        "frame_height": frame_height,
        "frames": frame_data,
        "columns": cols,
        "rows": rows,
    }
    png_path = save_png(sheet, output_path)
    json_path = save_metadata(metadata, png_path.with_suffix(".json"))
    return {"png": str(png_path), "json": str(json_path), "metadata": metadata}


def export_multiple_sizes(surface: pygame.Surface, sizes: Sequence[int], base_path: PathLike) -> List[str]:
    """Nearest-neighbour rescales of one sprite, written as <base>_<size>x<size>.png."""
    base = Path(base_path)
    written = []
    for size in sizes:
        scaled = pygame.transform.scale(surface, (size, size))
        written.append(str(save_png(scaled, base.with_name(f"{base.name}_{size}x{size}.png"))))
    return written
