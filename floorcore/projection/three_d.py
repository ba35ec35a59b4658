"""Projection of plan geometry into the 3D scene.

Plan ``(x, y)`` with an elevation maps to scene ``(x, elevation, y)``: the
scene's Y axis points up and plan depth becomes scene Z. Every box is
described by its centre, its size ``(width along, height, depth across)``
and a rotation about the vertical axis in radians.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from floorcore.model.shapes import (
    Opening,
    OpeningKind,
    PolygonShape,
    ShapeBase,
    SymbolShape,
    WallRelativePosition,
    WallSegment,
)
from floorcore.projection.categories import defaults_for_category, infer_category_from_symbol_type
from floorcore.settings import OpeningDefaults
from floorcore.walls.segment import compute_geometry

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Box3D:
    position: Vec3
    size: Vec3
    rotation_y: float = 0.0


@dataclass(frozen=True)
class FloorOutline:
    points: List[Tuple[float, float]]  # (x, z)
    min_x: float
    max_x: float
    min_z: float
    max_z: float

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2.0, (self.min_z + self.max_z) / 2.0)


def floor_plan_to_three(x: float, y: float, elevation: float = 0.0) -> Vec3:
    return (x, elevation, y)


def three_to_floor_plan(x: float, y: float, z: float) -> Tuple[float, float, float]:
    """Inverse of :func:`floor_plan_to_three`: returns ``(x, y, elevation)``."""
    return (x, z, y)


def wall_box(wall: WallSegment) -> Optional[Box3D]:
    geometry = compute_geometry(wall)
    if geometry is None:
        return None
    return Box3D(
        position=floor_plan_to_three(geometry.center.x, geometry.center.y, geometry.center_elevation),
        size=(geometry.length, geometry.height_mm, geometry.thickness_mm),
        rotation_y=-geometry.angle,
    )


def opening_box(
    opening: Opening,
    host_wall: Optional[WallSegment] = None,
    defaults: Optional[OpeningDefaults] = None,
) -> Optional[Box3D]:
    """Box for a door or window; depth follows the host wall when one is given."""
    if opening.is_degenerate:
        return None
    defaults = defaults or OpeningDefaults()

    if opening.kind is OpeningKind.WINDOW:
        height, sill, category = defaults.window_height_mm, defaults.window_sill_mm, "window"
    else:
        height, sill, category = defaults.door_height_mm, defaults.door_sill_mm, "door"
    depth = host_wall.thickness_mm if host_wall is not None else defaults_for_category(category).depth

    mid = opening.midpoint
    return Box3D(
        position=floor_plan_to_three(mid.x, mid.y, sill + height / 2.0),
        size=(opening.length, height, depth),
        rotation_y=-math.radians(opening.angle_deg),
    )


def wall_relative_box(position: WallRelativePosition, wall: WallSegment) -> Optional[Box3D]:
    geometry = compute_geometry(wall)
    if geometry is None:
        return None

    along = position.distance_from_wall_start
    across = position.perpendicular_offset
    x = wall.start.x + geometry.unit.x * along + geometry.normal.x * across
    y = wall.start.y + geometry.unit.y * along + geometry.normal.y * across
    return Box3D(
        position=floor_plan_to_three(x, y, position.elevation_bottom + position.height / 2.0),
        size=(position.width, position.height, position.depth),
        rotation_y=-geometry.angle,
    )


def _find_wall(walls: Iterable[ShapeBase], wall_id: str) -> Optional[WallSegment]:
    for wall in walls:
        if isinstance(wall, WallSegment) and wall.id == wall_id:
            return wall
    return None


def object_box(shape: ShapeBase, walls: Iterable[ShapeBase] = ()) -> Optional[Box3D]:
    """Box for a placed object.

    Wall-relative placement wins when the host wall exists; then an explicit
    3D position; otherwise the symbol's plan rectangle with category defaults.
    """
    if shape.wall_relative is not None:
        wall = _find_wall(walls, shape.wall_relative.wall_id)
        if wall is not None:
            box = wall_relative_box(shape.wall_relative, wall)
            if box is not None:
                return box

    if not isinstance(shape, SymbolShape):
        return None

    category = shape.object_category or infer_category_from_symbol_type(shape.symbol_type)
    preset = defaults_for_category(category)
    if shape.dimensions_3d is not None:
        width, height, depth = shape.dimensions_3d.width, shape.dimensions_3d.height, shape.dimensions_3d.depth
    else:
        width, height, depth = preset.width, preset.height, preset.depth
    rotation = -math.radians(shape.rotation)

    if shape.position_3d is not None:
        p = shape.position_3d
        return Box3D(
            position=floor_plan_to_three(p.x, p.y, p.z + height / 2.0),
            size=(width, height, depth),
            rotation_y=rotation,
        )

    cx = shape.x + shape.width / 2.0
    cy = shape.y + shape.height / 2.0
    return Box3D(
        position=floor_plan_to_three(cx, cy, preset.elevation_bottom + height / 2.0),
        size=(width, height, depth),
        rotation_y=rotation,
    )


def floor_outline(room: PolygonShape) -> Optional[FloorOutline]:
    if len(room.points) < 3:
        return None
    points = []
    for p in room.points:
        x, _, z = floor_plan_to_three(p.x, p.y)
        points.append((x, z))
    xs = [p[0] for p in points]
    zs = [p[1] for p in points]
    return FloorOutline(points=points, min_x=min(xs), max_x=max(xs), min_z=min(zs), max_z=max(zs))