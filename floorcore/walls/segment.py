"""Derived geometry for a single wall segment."""

from __future__ import annotations

import math
from dataclasses import dataclass

from floorcore.geometry.primitives import Point, midpoint
from floorcore.model.shapes import WallSegment


@dataclass(frozen=True)
class WallGeometry:
    """Derived quantities of a renderable wall. Angles in radians."""

    length: float
    angle: float
    thickness_mm: float
    height_mm: float
    center: Point
    unit: Point
    normal: Point
    center_elevation: float

    @property
    def angle_deg(self) -> float:
        return math.degrees(self.angle)


def compute_geometry(wall: WallSegment) -> WallGeometry | None:
    """Length, direction and normal of ``wall``; ``None`` for zero-length walls."""
    dx = wall.end.x - wall.start.x
    dy = wall.end.y - wall.start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return None

    ux = dx / length
    uy = dy / length
    return WallGeometry(
        length=length,
        angle=math.atan2(dy, dx),
        thickness_mm=wall.thickness_mm,
        height_mm=wall.height_mm,
        center=midpoint(wall.start, wall.end),
        unit=Point(x=ux, y=uy),
        normal=Point(x=-uy, y=ux),
        center_elevation=wall.height_mm / 2.0,
    )


def wall_midpoint(wall: WallSegment) -> Point:
    return midpoint(wall.start, wall.end)


def point_at_distance(wall: WallSegment, distance_mm: float) -> Point | None:
    """Point ``distance_mm`` along the wall from its start (not clamped)."""
    geometry = compute_geometry(wall)
    if geometry is None:
        return None
    return Point(
        x=wall.start.x + geometry.unit.x * distance_mm,
        y=wall.start.y + geometry.unit.y * distance_mm,
    )


def is_renderable(wall: WallSegment) -> bool:
    return wall.start != wall.end
