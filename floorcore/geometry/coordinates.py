"""Conversion between screen pixels and world millimetres.

World coordinates are millimetres; a zoom of 1 shows one millimetre per
pixel. Pan is expressed in pixels.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Tuple

from floorcore.geometry import contract
from floorcore.geometry.primitives import Bounds, Point

if TYPE_CHECKING:
    from floorcore.model.shapes import ShapeBase, ViewState


def pixel_to_world(px: float, py: float, view: "ViewState") -> Tuple[float, float]:
    return ((px - view.pan_x) / view.zoom, (py - view.pan_y) / view.zoom)


def world_to_pixel(wx: float, wy: float, view: "ViewState") -> Tuple[float, float]:
    return (wx * view.zoom + view.pan_x, wy * view.zoom + view.pan_y)


def pixel_distance_to_world(distance_px: float, zoom: float) -> float:
    return distance_px / zoom


def world_distance_to_pixel(distance_mm: float, zoom: float) -> float:
    return distance_mm * zoom


def world_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def snap_to_grid_world(value_mm: float, grid_size_mm: float, enabled: bool = True) -> float:
    """Round ``value_mm`` to the nearest grid multiple; identity when disabled."""
    if not enabled or grid_size_mm <= 0:
        return value_mm
    return round(value_mm / grid_size_mm) * grid_size_mm


def snap_point_to_grid(point: Point, grid_size_mm: float, enabled: bool = True) -> Point:
    return Point(
        x=snap_to_grid_world(point.x, grid_size_mm, enabled),
        y=snap_to_grid_world(point.y, grid_size_mm, enabled),
    )


def visible_world_bounds(canvas_width: float, canvas_height: float, view: "ViewState") -> Bounds:
    """World rectangle currently visible on a canvas of the given pixel size."""
    min_x, min_y = pixel_to_world(0.0, 0.0, view)
    max_x, max_y = pixel_to_world(canvas_width, canvas_height, view)
    return Bounds(min_x, min_y, max_x, max_y)


@dataclass(frozen=True)
class ArchitecturalScale:
    label: str
    ratio: int  # 1:ratio


ARCHITECTURAL_SCALES: dict[str, ArchitecturalScale] = {
    "1:20": ArchitecturalScale("1:20", 20),
    "1:50": ArchitecturalScale("1:50", 50),
    "1:100": ArchitecturalScale("1:100", 100),
    "1:500": ArchitecturalScale("1:500", 500),
}


def zoom_for_scale(scale: ArchitecturalScale | str, screen_dpi: float = contract.DEFAULT_SCREEN_DPI) -> float:
    """Zoom at which the plan prints at ``scale`` on a screen of ``screen_dpi``."""
    if isinstance(scale, str):
        scale = ARCHITECTURAL_SCALES[scale]
    pixels_per_mm = screen_dpi / contract.MM_PER_INCH
    return pixels_per_mm / scale.ratio


def clamp_zoom(zoom: float, min_zoom: float = contract.MIN_ZOOM, max_zoom: float = contract.MAX_ZOOM) -> float:
    return max(min_zoom, min(max_zoom, zoom))


def content_bounds(shapes: Iterable["ShapeBase"]) -> Bounds | None:
    result: Bounds | None = None
    for shape in shapes:
        box = shape.bounding_box()
        if box is None:
            continue
        result = box if result is None else result.union(box)
    return result


def fit_to_content(
    shapes: Iterable["ShapeBase"],
    viewport_width: float,
    viewport_height: float,
    padding_factor: float = contract.FIT_PADDING_FACTOR,
    *,
    min_zoom: float = contract.FIT_MIN_ZOOM,
    max_zoom: float = contract.FIT_MAX_ZOOM,
) -> "ViewState | None":
    """View that frames every shape, or ``None`` when nothing has extent.

    Content occupies ``padding_factor`` of the viewport, with the zoom kept in
    ``[min_zoom, max_zoom]``. Point-like content (under 1 mm in both
    directions) is centred at zoom 1.
    """
    from floorcore.model.shapes import ViewState

    bounds = content_bounds(shapes)
    if bounds is None:
        return None

    center = bounds.center
    if bounds.width < 1 and bounds.height < 1:
        zoom = 1.0
    else:
        zoom_x = (viewport_width * padding_factor) / bounds.width if bounds.width > 0 else math.inf
        zoom_y = (viewport_height * padding_factor) / bounds.height if bounds.height > 0 else math.inf
        zoom = clamp_zoom(min(zoom_x, zoom_y), min_zoom, max_zoom)

    return ViewState(
        zoom=zoom,
        pan_x=viewport_width / 2.0 - center.x * zoom,
        pan_y=viewport_height / 2.0 - center.y * zoom,
    )


__all__ = [
    "ARCHITECTURAL_SCALES",
    "ArchitecturalScale",
    "clamp_zoom",
    "content_bounds",
    "fit_to_content",
    "pixel_distance_to_world",
    "pixel_to_world",
    "snap_point_to_grid",
    "snap_to_grid_world",
    "visible_world_bounds",
    "world_distance",
    "world_distance_to_pixel",
    "world_to_pixel",
    "zoom_for_scale",
]
