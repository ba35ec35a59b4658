"""Geometric primitives shared by every kernel component."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """2D point in millimetres (world space)."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def offset(self, dx: float, dy: float) -> Point:
        return Point(x=self.x + dx, y=self.y + dy)

    def lerp(self, other: Point, t: float) -> Point:
        return Point(x=self.x + (other.x - self.x) * t, y=self.y + (other.y - self.y) * t)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple (x, y)."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, xy: Tuple[float, float]) -> Point:
        return cls(x=float(xy[0]), y=float(xy[1]))


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box in millimetres."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point(x=self.min_x + self.width / 2.0, y=self.min_y + self.height / 2.0)

    @property
    def top_left(self) -> Point:
        return Point(x=self.min_x, y=self.min_y)

    def union(self, other: Bounds) -> Bounds:
        return Bounds(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y),
        )

    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        return (
            self.min_x - tolerance <= point.x <= self.max_x + tolerance
            and self.min_y - tolerance <= point.y <= self.max_y + tolerance
        )

    @classmethod
    def empty(cls) -> Bounds:
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Bounds | None:
        xs: list[float] = []
        ys: list[float] = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            return None
        return cls(min(xs), min(ys), max(xs), max(ys))


def angle_deg(start: Point, end: Point) -> float:
    """Direction of ``start -> end`` in degrees, in (-180, 180]."""
    return math.degrees(math.atan2(end.y - start.y, end.x - start.x))


def angles_match(angle1: float, angle2: float, tolerance_deg: float) -> bool:
    """True when two line directions agree within tolerance, ignoring orientation."""
    diff = abs(angle1 - angle2) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff < tolerance_deg or abs(diff - 180.0) < tolerance_deg


def midpoint(start: Point, end: Point) -> Point:
    return Point(x=(start.x + end.x) / 2.0, y=(start.y + end.y) / 2.0)


def transform_point(
    point: Point,
    center: Point,
    *,
    scale_x: float = 1.0,
    scale_y: float = 1.0,
    rotation: float = 0.0,
    dx: float = 0.0,
    dy: float = 0.0,
) -> Point:
    """Scale, then rotate (radians) ``point`` about ``center``, then translate."""
    px = (point.x - center.x) * scale_x
    py = (point.y - center.y) * scale_y
    if rotation:
        cos_r = math.cos(rotation)
        sin_r = math.sin(rotation)
        px, py = px * cos_r - py * sin_r, px * sin_r + py * cos_r
    return Point(x=px + center.x + dx, y=py + center.y + dy)


def signed_area(ring: Iterable[Point]) -> float:
    """Shoelace area; positive for counter-clockwise rings."""
    pts = list(ring)
    if len(pts) < 3:
        return 0.0
    total = 0.0
    for i, p in enumerate(pts):
        q = pts[(i + 1) % len(pts)]
        total += p.x * q.y - q.x * p.y
    return total / 2.0
