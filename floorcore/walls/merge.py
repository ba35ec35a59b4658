"""Merging of collinear walls that share an endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np
from loguru import logger

from floorcore.geometry import contract
from floorcore.geometry.primitives import Point, angles_match
from floorcore.model.changes import ChangeSet
from floorcore.model.shapes import ShapeBase, WallSegment
from floorcore.settings import ToleranceSettings


@dataclass
class MergeResult:
    """Merged wall plus the ids it absorbed."""

    merged_wall: WallSegment
    wall_ids_to_remove: List[str] = field(default_factory=list)

    def to_changes(self) -> ChangeSet:
        deletes = [wid for wid in self.wall_ids_to_remove if wid != self.merged_wall.id]
        return ChangeSet(upserts=[self.merged_wall], deletes=deletes)


def _endpoints_match(p1: Point, p2: Point, tolerance: float) -> bool:
    return abs(p1.x - p2.x) < tolerance and abs(p1.y - p2.y) < tolerance


def find_mergeable_walls(
    new_wall: WallSegment,
    all_walls: Iterable[ShapeBase],
    point_tolerance: float = contract.MERGE_POINT_TOLERANCE_MM,
    angle_tolerance_deg: float = contract.MERGE_ANGLE_TOLERANCE_DEG,
) -> List[WallSegment]:
    """Walls on the same plan that share an endpoint with ``new_wall`` and run in the same direction."""
    new_angle = new_wall.angle_deg
    new_ends = (new_wall.start, new_wall.end)

    mergeable: List[WallSegment] = []
    for wall in all_walls:
        if not isinstance(wall, WallSegment):
            continue
        if wall.id == new_wall.id or wall.plan_id != new_wall.plan_id:
            continue
        shares_endpoint = any(
            _endpoints_match(a, b, point_tolerance) for a in new_ends for b in (wall.start, wall.end)
        )
        if shares_endpoint and angles_match(new_angle, wall.angle_deg, angle_tolerance_deg):
            mergeable.append(wall)
    return mergeable


def merge_walls(walls: Sequence[WallSegment]) -> Optional[WallSegment]:
    """Single wall spanning the two farthest-apart endpoints of ``walls``.

    Properties (id included) come from the first wall. Inputs are assumed
    collinear; anything else yields a wall between the extreme points.
    """
    if not walls:
        return None
    if len(walls) == 1:
        return walls[0]

    points = np.array([(p.x, p.y) for w in walls for p in (w.start, w.end)], dtype=float)
    deltas = points[:, None, :] - points[None, :, :]
    distances = np.sqrt((deltas**2).sum(axis=-1))
    # Only pairs i < j, so argmax picks the first pair in scan order on ties
    distances[np.tril_indices(len(points))] = -1.0
    flat = int(np.argmax(distances))
    i, j = divmod(flat, len(points))
    if distances[i, j] <= 0:
        return None

    base = walls[0]
    return base.with_endpoints(
        Point(x=float(points[i, 0]), y=float(points[i, 1])),
        Point(x=float(points[j, 0]), y=float(points[j, 1])),
    )


def auto_merge_walls(
    new_wall: WallSegment,
    existing_walls: Iterable[ShapeBase],
    point_tolerance: Optional[float] = None,
    angle_tolerance_deg: Optional[float] = None,
    *,
    tolerances: Optional[ToleranceSettings] = None,
) -> Optional[MergeResult]:
    """Merge ``new_wall`` with every compatible existing wall.

    The merged wall keeps ``new_wall``'s id; absorbed walls are listed for removal.
    Tolerances not passed explicitly come from ``tolerances`` (defaults if omitted).
    """
    tol = tolerances or ToleranceSettings()
    if point_tolerance is None:
        point_tolerance = tol.merge_point_mm
    if angle_tolerance_deg is None:
        angle_tolerance_deg = tol.merge_angle_deg
    mergeable = find_mergeable_walls(new_wall, existing_walls, point_tolerance, angle_tolerance_deg)
    if not mergeable:
        return None

    try:
        merged = merge_walls([new_wall, *mergeable])
    except (ValueError, FloatingPointError) as exc:
        logger.warning("Wall merge failed for {}: {}", new_wall.id, exc)
        return None
    if merged is None:
        return None

    logger.debug("Merged wall {} with {} collinear walls", new_wall.id, len(mergeable))
    return MergeResult(merged_wall=merged, wall_ids_to_remove=[w.id for w in mergeable])
