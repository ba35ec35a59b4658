"""Wall geometry, connectivity and merging."""

from .connectivity import WallGraph, find_groups
from .merge import MergeResult, auto_merge_walls, find_mergeable_walls, merge_walls
from .segment import WallGeometry, compute_geometry

__all__ = [
    "MergeResult",
    "WallGeometry",
    "WallGraph",
    "auto_merge_walls",
    "compute_geometry",
    "find_groups",
    "find_mergeable_walls",
    "merge_walls",
]
