"""Wall connectivity graph: which walls share an endpoint."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from loguru import logger

from floorcore.geometry import contract
from floorcore.model.shapes import WallSegment
from floorcore.walls.spatial import SpatialGrid


def walls_connected(w1: WallSegment, w2: WallSegment, tolerance: float = contract.CONNECT_TOLERANCE_MM) -> bool:
    """True when some endpoint of ``w1`` lies strictly within ``tolerance`` of an endpoint of ``w2``."""
    for p1 in (w1.start, w1.end):
        for p2 in (w2.start, w2.end):
            if p1.distance_to(p2) < tolerance:
                return True
    return False


@dataclass
class WallNode:
    """Graph node: one wall and the indices of walls touching it."""

    index: int
    wall: WallSegment
    neighbours: List[int] = field(default_factory=list)


class WallGraph:
    """Adjacency between walls whose endpoints meet within ``tolerance``.

    Neighbour lists are kept in input order. With ``use_spatial_index=None``
    a :class:`SpatialGrid` is used once the collection reaches
    ``SPATIAL_INDEX_MIN_WALLS``; both paths produce the same graph.
    """

    def __init__(
        self,
        walls: Sequence[WallSegment],
        tolerance: float = contract.CONNECT_TOLERANCE_MM,
        use_spatial_index: Optional[bool] = None,
    ):
        self.tolerance = tolerance
        self.walls = list(walls)
        self.nodes: Dict[int, WallNode] = {i: WallNode(index=i, wall=w) for i, w in enumerate(self.walls)}
        self._index_by_id: Dict[str, int] = {}
        for i, wall in enumerate(self.walls):
            self._index_by_id.setdefault(wall.id, i)

        if use_spatial_index is None:
            use_spatial_index = len(self.walls) >= contract.SPATIAL_INDEX_MIN_WALLS
        self.uses_spatial_index = use_spatial_index and tolerance > 0

        if self.uses_spatial_index:
            self._build_indexed()
        else:
            self._build_pairwise()

    def _build_pairwise(self) -> None:
        for i, wall in enumerate(self.walls):
            node = self.nodes[i]
            for j, other in enumerate(self.walls):
                if i != j and walls_connected(wall, other, self.tolerance):
                    node.neighbours.append(j)

    def _build_indexed(self) -> None:
        grid = SpatialGrid.from_walls(self.walls, self.tolerance)
        for i, wall in enumerate(self.walls):
            candidates = grid.nearby(wall.start) | grid.nearby(wall.end)
            candidates.discard(i)
            self.nodes[i].neighbours = [
                j for j in sorted(candidates) if walls_connected(wall, self.walls[j], self.tolerance)
            ]

    def connections(self, wall_id: str) -> List[WallSegment]:
        """Walls connected to ``wall_id``, in input order."""
        index = self._index_by_id.get(wall_id)
        if index is None:
            return []
        return [self.walls[j] for j in self.nodes[index].neighbours]

    def groups(self) -> List[List[WallSegment]]:
        """Connected components, found breadth-first from each unvisited wall in input order."""
        visited = [False] * len(self.walls)
        groups: List[List[WallSegment]] = []

        for root in range(len(self.walls)):
            if visited[root]:
                continue
            visited[root] = True
            queue = deque([root])
            group: List[WallSegment] = []
            while queue:
                current = queue.popleft()
                group.append(self.walls[current])
                for j in self.nodes[current].neighbours:
                    if not visited[j]:
                        visited[j] = True
                        queue.append(j)
            groups.append(group)

        logger.debug(
            "Wall graph: {} walls in {} groups (spatial index: {})",
            len(self.walls),
            len(groups),
            self.uses_spatial_index,
        )
        return groups


def find_groups(
    walls: Sequence[WallSegment],
    tolerance: float = contract.CONNECT_TOLERANCE_MM,
    use_spatial_index: Optional[bool] = None,
) -> List[List[WallSegment]]:
    """Partition ``walls`` into transitively connected groups."""
    return WallGraph(walls, tolerance, use_spatial_index).groups()
