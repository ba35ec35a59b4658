"""Snapping door and window openings onto walls.

An opening dropped near a wall is centred on it and the wall is split into
the pieces left and right of the opening. Dropped onto an existing gap
between two collinear walls it simply fills the gap. Dragged away from its
host, the two flanking walls are merged back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

from loguru import logger

from floorcore.geometry import contract
from floorcore.geometry.primitives import Point, angles_match
from floorcore.model.changes import ChangeSet
from floorcore.model.shapes import OPENING_TYPES, Opening, ShapeBase, WallSegment, new_shape_id
from floorcore.settings import ToleranceSettings
from floorcore.walls.merge import MergeResult, merge_walls


@dataclass(frozen=True)
class WallHit:
    wall: WallSegment
    t: float
    distance: float


@dataclass(frozen=True)
class WallGap:
    """Space between two collinear walls that an opening can occupy."""

    wall1: WallSegment
    wall2: WallSegment
    start: Point
    end: Point
    midpoint_distance: float

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def host_id(self) -> str:
        return f"{self.wall1.id}:{self.wall2.id}"


@dataclass
class SnapResult:
    """Outcome of dropping an opening: the updated opening and the edits it implies."""

    kind: Literal["gap", "wall", "detached"]
    opening: Opening
    changes: ChangeSet = field(default_factory=ChangeSet)
    host_wall_id: Optional[str] = None


def is_opening_type(type_tag: str) -> bool:
    return type_tag in OPENING_TYPES


def point_to_segment(p: Point, a: Point, b: Point) -> Tuple[float, float]:
    """Distance from ``p`` to segment ``a-b`` and the clamped parameter ``t`` of the closest point."""
    dx = b.x - a.x
    dy = b.y - a.y
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return p.distance_to(a), 0.0
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / len_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(p.x - (a.x + t * dx), p.y - (a.y + t * dy)), t


def _walls(shapes: Iterable[ShapeBase], exclude_id: Optional[str] = None) -> List[WallSegment]:
    return [s for s in shapes if isinstance(s, WallSegment) and s.id != exclude_id]


def find_nearest_wall(
    opening: Opening,
    walls: Iterable[ShapeBase],
    threshold: float = contract.OPENING_SNAP_THRESHOLD_MM,
) -> Optional[WallHit]:
    """Closest wall to the opening's midpoint within ``threshold``; first wins on ties."""
    mid = opening.midpoint
    best: Optional[WallHit] = None
    for wall in _walls(walls):
        distance, t = point_to_segment(mid, wall.start, wall.end)
        if distance <= threshold and (best is None or distance < best.distance):
            best = WallHit(wall=wall, t=t, distance=distance)
    return best


def project_onto_wall(opening: Opening, wall: WallSegment) -> Opening:
    """Centre the opening on ``wall`` at its midpoint's projection, aligned with the wall."""
    wdx = wall.end.x - wall.start.x
    wdy = wall.end.y - wall.start.y
    wall_len = math.hypot(wdx, wdy)
    if wall_len == 0:
        return opening

    ux = wdx / wall_len
    uy = wdy / wall_len
    half = opening.length / 2.0
    _, t = point_to_segment(opening.midpoint, wall.start, wall.end)
    cx = wall.start.x + t * wdx
    cy = wall.start.y + t * wdy
    return opening.with_endpoints(
        Point(x=cx - half * ux, y=cy - half * uy),
        Point(x=cx + half * ux, y=cy + half * uy),
    )


def _param_along(wall: WallSegment, p: Point) -> float:
    dx = wall.end.x - wall.start.x
    dy = wall.end.y - wall.start.y
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return 0.0
    return ((p.x - wall.start.x) * dx + (p.y - wall.start.y) * dy) / len_sq


def split_wall(
    wall: WallSegment,
    opening: Opening,
    min_segment_length: float = contract.MIN_SEGMENT_LENGTH_MM,
) -> List[WallSegment]:
    """Wall pieces before and after ``opening``.

    Pieces shorter than ``min_segment_length`` are dropped, as is the piece on
    a side where the opening reaches past the wall end (it would run backwards).
    """
    near, far = opening.start, opening.end
    t_near, t_far = _param_along(wall, near), _param_along(wall, far)
    if t_near > t_far:
        near, far = far, near
        t_near, t_far = t_far, t_near

    pieces: List[WallSegment] = []
    for start, end, runs_forward in ((wall.start, near, t_near > 0.0), (far, wall.end, t_far < 1.0)):
        if runs_forward and start.distance_to(end) >= min_segment_length:
            pieces.append(wall.with_endpoints(start, end, id=new_shape_id()))
    return pieces


def _closest_ends(w1: WallSegment, w2: WallSegment) -> Tuple[Point, Point, float]:
    pairs = [(a, b, a.distance_to(b)) for a in (w1.start, w1.end) for b in (w2.start, w2.end)]
    return min(pairs, key=lambda pair: pair[2])


def _collinear(w1: WallSegment, w2: WallSegment, tolerance: float) -> bool:
    if w1.is_degenerate or w2.is_degenerate:
        return False
    if not angles_match(w1.angle_deg, w2.angle_deg, contract.MERGE_ANGLE_TOLERANCE_DEG):
        return False
    # w2 must lie on w1's line, not merely parallel to it
    for p in (w2.start, w2.end):
        off_line = abs((w1.end.x - w1.start.x) * (p.y - w1.start.y) - (w1.end.y - w1.start.y) * (p.x - w1.start.x))
        if off_line / w1.length > tolerance:
            return False
    return True


def find_wall_gap(
    opening: Opening,
    walls: Iterable[ShapeBase],
    tolerance: float = contract.GAP_TOLERANCE_MM,
) -> Optional[WallGap]:
    """Gap between two collinear walls matching the opening's length and position."""
    candidates = _walls(walls, exclude_id=opening.id)
    mid = opening.midpoint
    target_len = opening.length

    best: Optional[WallGap] = None
    for i, w1 in enumerate(candidates):
        for w2 in candidates[i + 1 :]:
            if not _collinear(w1, w2, tolerance):
                continue
            a, b, gap_len = _closest_ends(w1, w2)
            if gap_len == 0 or abs(gap_len - target_len) > tolerance:
                continue
            gap_mid = Point(x=(a.x + b.x) / 2.0, y=(a.y + b.y) / 2.0)
            mid_dist = gap_mid.distance_to(mid)
            if mid_dist > tolerance:
                continue
            if best is None or mid_dist < best.midpoint_distance:
                best = WallGap(wall1=w1, wall2=w2, start=a, end=b, midpoint_distance=mid_dist)
    return best


def merge_across_gap(
    opening: Opening,
    walls: Iterable[ShapeBase],
    tolerance: float = contract.GAP_TOLERANCE_MM,
) -> Optional[MergeResult]:
    """Re-join the two walls flanking ``opening`` (its position before it was moved away)."""
    gap = find_wall_gap(opening, walls, tolerance)
    if gap is None:
        return None
    try:
        merged = merge_walls([gap.wall1, gap.wall2])
    except (ValueError, FloatingPointError) as exc:
        logger.warning("Could not merge walls {} across opening {}: {}", gap.host_id, opening.id, exc)
        return None
    if merged is None:
        return None
    logger.debug("Merged walls {} across opening {}", gap.host_id, opening.id)
    return MergeResult(merged_wall=merged, wall_ids_to_remove=[gap.wall2.id])


def snap_opening(
    opening: Opening,
    shapes: Sequence[ShapeBase],
    tolerances: Optional[ToleranceSettings] = None,
    *,
    previous: Optional[Opening] = None,
    zoom: float = 1.0,
) -> Optional[SnapResult]:
    """Resolve an opening drop at its current position.

    Tries an existing wall gap first, then the nearest wall (projected and
    split). When neither is in reach and ``previous`` was attached to a wall,
    the opening is detached and the walls around its old position re-merged.
    Returns ``None`` when nothing changes beyond the move itself.
    """
    tol = (tolerances or ToleranceSettings()).for_zoom(zoom)
    walls = _walls(shapes, exclude_id=opening.id)

    gap = find_wall_gap(opening, walls, tol.gap_mm)
    if gap is not None:
        placed = opening.with_endpoints(
            gap.start, gap.end, attached_wall_id=gap.host_id, position_on_wall=0.5
        )
        logger.debug("Opening {} placed in gap {}", opening.id, gap.host_id)
        return SnapResult(kind="gap", opening=placed, changes=ChangeSet(upserts=[placed]), host_wall_id=gap.host_id)

    hit = find_nearest_wall(opening, walls, tol.snap_threshold_mm)
    if hit is not None:
        projected = project_onto_wall(opening, hit.wall)
        placed = projected.model_copy(update={"attached_wall_id": hit.wall.id, "position_on_wall": hit.t})
        pieces = split_wall(hit.wall, placed, tol.min_segment_mm)
        logger.debug("Opening {} snapped to wall {} (t={:.3f}), {} pieces", opening.id, hit.wall.id, hit.t, len(pieces))
        return SnapResult(
            kind="wall",
            opening=placed,
            changes=ChangeSet(upserts=[placed, *pieces], deletes=[hit.wall.id]),
            host_wall_id=hit.wall.id,
        )

    if previous is not None and previous.attached_wall_id:
        detached = opening.model_copy(update={"attached_wall_id": None, "position_on_wall": None})
        changes = ChangeSet(upserts=[detached])
        merged = merge_across_gap(previous, walls, tol.gap_mm)
        if merged is not None:
            changes = changes.merge(merged.to_changes())
        return SnapResult(kind="detached", opening=detached, changes=changes)

    return None
