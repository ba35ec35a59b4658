"""
Wall group outlines.

Each wall is a rectangle around its centre line; the rectangles of a
connected group are unioned so corners and T-junctions render as one
continuous outline instead of overlapping strokes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from loguru import logger
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.polygon import orient

from floorcore.geometry import contract
from floorcore.geometry.primitives import Point
from floorcore.model.shapes import ShapeBase, WallSegment
from floorcore.walls.connectivity import find_groups
from floorcore.walls.segment import compute_geometry

Ring = List[Point]


@dataclass
class WallOutline:
    rings: List[Ring]
    wall_ids: List[str]
    is_selected: bool = False
    thickness_mm: float = field(default=contract.DEFAULT_WALL_THICKNESS_MM)


def get_wall_polygon(wall: WallSegment) -> Optional[Ring]:
    """Four corners of the wall footprint, counter-clockwise; ``None`` for zero-length walls."""
    geometry = compute_geometry(wall)
    if geometry is None:
        return None
    nx = geometry.normal.x * wall.thickness_mm / 2.0
    ny = geometry.normal.y * wall.thickness_mm / 2.0
    return [
        Point(x=wall.start.x - nx, y=wall.start.y - ny),
        Point(x=wall.end.x - nx, y=wall.end.y - ny),
        Point(x=wall.end.x + nx, y=wall.end.y + ny),
        Point(x=wall.start.x + nx, y=wall.start.y + ny),
    ]


def _to_polygon(ring: Ring) -> Polygon:
    return Polygon([p.to_tuple() for p in ring])


def _exterior_rings(geometry) -> List[Ring]:
    if isinstance(geometry, Polygon):
        parts = [geometry]
    elif isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts = [g for g in geometry.geoms if isinstance(g, Polygon)]
    else:
        parts = []

    rings: List[Ring] = []
    for part in parts:
        if part.is_empty:
            continue
        # Holes (courtyards enclosed by walls) are not drawn
        oriented = orient(Polygon(part.exterior), sign=1.0)
        coords = list(oriented.exterior.coords)[:-1]
        rings.append([Point.from_tuple(c) for c in coords])
    return rings


def union_wall_group(group: Sequence[WallSegment]) -> List[Ring]:
    """Outer rings of the union of the group's wall rectangles.

    Falls back to the individual rectangles if the union fails.
    """
    rings = [r for r in (get_wall_polygon(w) for w in group) if r is not None]
    if len(rings) <= 1:
        return rings

    try:
        merged = _to_polygon(rings[0])
        for ring in rings[1:]:
            merged = merged.union(_to_polygon(ring))
        if not merged.is_valid:
            merged = merged.buffer(0)
        result = _exterior_rings(merged)
    except (GEOSException, ValueError, FloatingPointError) as exc:
        logger.warning("Wall union failed for {} walls, drawing rectangles: {}", len(rings), exc)
        return rings

    if not result:
        logger.warning("Wall union produced no polygon for {} walls, drawing rectangles", len(rings))
        return rings
    return result


def outline_wall_groups(
    shapes: Iterable[ShapeBase],
    selected_ids: Iterable[str] = (),
    tolerance: float = contract.CONNECT_TOLERANCE_MM,
) -> List[WallOutline]:
    """One outline per connected wall group, in group order."""
    walls = [s for s in shapes if isinstance(s, WallSegment)]
    selected = set(selected_ids)

    outlines: List[WallOutline] = []
    for group in find_groups(walls, tolerance):
        rings = union_wall_group(group)
        if not rings:
            continue
        outlines.append(
            WallOutline(
                rings=rings,
                wall_ids=[w.id for w in group],
                is_selected=any(w.id in selected for w in group),
                thickness_mm=group[0].thickness_mm,
            )
        )
    return outlines
