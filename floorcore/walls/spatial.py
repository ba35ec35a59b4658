"""Uniform grid index over wall endpoints."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Set, Tuple

from floorcore.geometry.primitives import Point
from floorcore.model.shapes import WallSegment

Cell = Tuple[int, int]


class SpatialGrid:
    """Buckets wall endpoints into square cells of ``cell_size`` mm.

    Any two endpoints closer than ``cell_size`` fall into the same or
    adjacent cells, so a 3x3 neighbourhood lookup finds every candidate.
    """

    def __init__(self, cell_size: float):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = cell_size
        self._cells: Dict[Cell, List[int]] = defaultdict(list)

    def _cell(self, point: Point) -> Cell:
        return (math.floor(point.x / self.cell_size), math.floor(point.y / self.cell_size))

    def insert(self, index: int, point: Point) -> None:
        bucket = self._cells[self._cell(point)]
        if not bucket or bucket[-1] != index:
            bucket.append(index)

    def nearby(self, point: Point) -> Set[int]:
        cx, cy = self._cell(point)
        found: Set[int] = set()
        for ix in (cx - 1, cx, cx + 1):
            for iy in (cy - 1, cy, cy + 1):
                bucket = self._cells.get((ix, iy))
                if bucket:
                    found.update(bucket)
        return found

    @classmethod
    def from_walls(cls, walls: Iterable[WallSegment], cell_size: float) -> "SpatialGrid":
        grid = cls(cell_size)
        for index, wall in enumerate(walls):
            grid.insert(index, wall.start)
            grid.insert(index, wall.end)
        return grid

    def __len__(self) -> int:
        return len(self._cells)
