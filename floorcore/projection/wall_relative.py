"""Conversions between plan coordinates and positions relative to a wall.

A wall-relative position measures an object along the wall from its start
point, away from it along the wall normal (``(-uy, ux)``, "into the room"),
and up from the floor. The elevation view draws the same numbers with the
wall start on the left and the floor at the bottom.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from floorcore.model.shapes import ShapeBase, WallRelativePosition, WallSegment
from floorcore.settings import ToleranceSettings
from floorcore.walls.segment import WallGeometry, compute_geometry

# Walls shorter than this cannot host objects
MIN_HOST_WALL_LENGTH_MM = 1.0


@dataclass(frozen=True)
class WorldPlacement:
    x: float
    y: float
    rotation: float  # degrees


@dataclass(frozen=True)
class ElevationRect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class NearestWall:
    wall: WallSegment
    distance: float
    t: float


def host_geometry(wall: WallSegment) -> Optional[WallGeometry]:
    geometry = compute_geometry(wall)
    if geometry is None or geometry.length < MIN_HOST_WALL_LENGTH_MM:
        return None
    return geometry


def world_to_wall_relative(
    world_x: float,
    world_y: float,
    wall: WallSegment,
    object_width: float,
    object_depth: float,
    object_height: float = 0.0,
    elevation_bottom: float = 0.0,
) -> Optional[WallRelativePosition]:
    """Express an object centred at ``(world_x, world_y)`` relative to ``wall``."""
    geom = host_geometry(wall)
    if geom is None:
        return None

    to_x = world_x - wall.start.x
    to_y = world_y - wall.start.y
    along = to_x * geom.unit.x + to_y * geom.unit.y
    across = to_x * geom.normal.x + to_y * geom.normal.y
    return WallRelativePosition(
        wall_id=wall.id,
        distance_from_wall_start=along - object_width / 2.0,
        perpendicular_offset=across - object_depth / 2.0,
        elevation_bottom=elevation_bottom,
        width=object_width,
        height=object_height,
        depth=object_depth,
    )


def wall_relative_to_world(position: WallRelativePosition, wall: WallSegment) -> Optional[WorldPlacement]:
    """Plan centre and rotation of an object placed relative to ``wall``."""
    geom = host_geometry(wall)
    if geom is None:
        return None

    along = position.distance_from_wall_start + position.width / 2.0
    across = position.perpendicular_offset + position.depth / 2.0
    return WorldPlacement(
        x=wall.start.x + along * geom.unit.x + across * geom.normal.x,
        y=wall.start.y + along * geom.unit.y + across * geom.normal.y,
        rotation=math.degrees(geom.angle),
    )


def wall_relative_to_elevation(
    position: WallRelativePosition,
    wall: WallSegment,
    wall_height_mm: float,
    scale: float,
    wall_x_offset: float = 0.0,
    wall_y_offset: float = 0.0,
) -> Optional[ElevationRect]:
    """Screen rectangle (pixels, y down) of an object in the wall's elevation view.

    ``scale`` is pixels per millimetre; the wall's top edge is drawn at
    ``wall_y_offset`` and its start at ``wall_x_offset``.
    """
    if host_geometry(wall) is None:
        return None

    wall_bottom_y = wall_y_offset + wall_height_mm * scale
    top_from_floor = position.elevation_bottom + position.height
    return ElevationRect(
        x=wall_x_offset + position.distance_from_wall_start * scale,
        y=wall_bottom_y - top_from_floor * scale,
        width=position.width * scale,
        height=position.height * scale,
    )


def elevation_to_wall_relative(
    rect: ElevationRect,
    wall: WallSegment,
    wall_height_mm: float,
    scale: float,
    wall_x_offset: float = 0.0,
    wall_y_offset: float = 0.0,
) -> Optional[WallRelativePosition]:
    """Inverse of :func:`wall_relative_to_elevation`; the object sits on the wall face."""
    if host_geometry(wall) is None or scale <= 0:
        return None

    wall_bottom_y = wall_y_offset + wall_height_mm * scale
    height_mm = rect.height / scale
    top_from_floor = (wall_bottom_y - rect.y) / scale
    return WallRelativePosition(
        wall_id=wall.id,
        distance_from_wall_start=(rect.x - wall_x_offset) / scale,
        perpendicular_offset=0.0,
        elevation_bottom=max(0.0, top_from_floor - height_mm),
        width=rect.width / scale,
        height=height_mm,
        depth=0.0,
    )


def find_nearest_wall_for_point(
    world_x: float,
    world_y: float,
    walls: Iterable[ShapeBase],
    max_distance: Optional[float] = None,
    *,
    tolerances: Optional[ToleranceSettings] = None,
) -> Optional[NearestWall]:
    """Closest hosting wall within ``max_distance`` (default ``tolerances.wall_relative_threshold_mm``)."""
    if max_distance is None:
        max_distance = (tolerances or ToleranceSettings()).wall_relative_threshold_mm
    nearest: Optional[NearestWall] = None
    for wall in walls:
        if not isinstance(wall, WallSegment):
            continue
        geom = host_geometry(wall)
        if geom is None:
            continue
        dot = (world_x - wall.start.x) * geom.unit.x + (world_y - wall.start.y) * geom.unit.y
        t = max(0.0, min(1.0, dot / geom.length))
        closest_x = wall.start.x + t * (wall.end.x - wall.start.x)
        closest_y = wall.start.y + t * (wall.end.y - wall.start.y)
        distance = math.hypot(world_x - closest_x, world_y - closest_y)
        if distance <= max_distance and (nearest is None or distance < nearest.distance):
            nearest = NearestWall(wall=wall, distance=distance, t=t)
    return nearest


def calculate_wall_attachment(
    center_x: float,
    center_y: float,
    object_width: float,
    object_depth: float,
    wall: WallSegment,
    existing: Optional[WallRelativePosition] = None,
) -> Optional[WallRelativePosition]:
    """Attach an object to ``wall`` at the projection of its centre, kept within the wall's length."""
    geom = host_geometry(wall)
    if geom is None:
        return None

    along = (center_x - wall.start.x) * geom.unit.x + (center_y - wall.start.y) * geom.unit.y
    along = max(object_width / 2.0, min(geom.length - object_width / 2.0, along))
    return WallRelativePosition(
        wall_id=wall.id,
        distance_from_wall_start=along - object_width / 2.0,
        perpendicular_offset=existing.perpendicular_offset if existing else 0.0,
        elevation_bottom=existing.elevation_bottom if existing else 0.0,
        width=object_width,
        height=existing.height if existing else 0.0,
        depth=object_depth,
    )
