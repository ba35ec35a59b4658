from __future__ import annotations

import math

import numpy as np
import pytest

from floorcore.geometry.primitives import Point, angles_match
from floorcore.settings import ToleranceSettings
from floorcore.walls.connectivity import WallGraph, find_groups, walls_connected
from floorcore.walls.merge import auto_merge_walls, find_mergeable_walls, merge_walls
from floorcore.walls.segment import compute_geometry, is_renderable, point_at_distance, wall_midpoint
from floorcore.walls.spatial import SpatialGrid
from tests.factories import make_wall


def _random_walls(count: int, seed: int = 7):
    """Walls on a coarse lattice so many endpoints coincide."""
    rng = np.random.default_rng(seed)
    walls = []
    for i in range(count):
        x1, y1 = rng.integers(0, 12, size=2) * 500.0
        horizontal = bool(rng.integers(0, 2))
        length = float(rng.integers(1, 4)) * 500.0
        x2, y2 = (x1 + length, y1) if horizontal else (x1, y1 + length)
        # jitter below the connection tolerance
        jitter = float(rng.uniform(-1.5, 1.5))
        walls.append(make_wall(float(x1) + jitter, float(y1), x2, y2, f"w{i}"))
    return walls


def test_compute_geometry_horizontal_wall():
    geometry = compute_geometry(make_wall(0, 0, 2000, 0))
    assert geometry.length == 2000
    assert geometry.angle == 0
    assert geometry.center == Point(x=1000, y=0)
    assert geometry.normal == Point(x=0, y=1)
    assert geometry.center_elevation == 1200
    assert geometry.thickness_mm == 150


def test_compute_geometry_degenerate_wall():
    assert compute_geometry(make_wall(5, 5, 5, 5)) is None
    assert not is_renderable(make_wall(5, 5, 5, 5))
    assert is_renderable(make_wall(0, 0, 1, 0))


def test_point_helpers():
    wall = make_wall(0, 0, 0, 1000)
    assert wall_midpoint(wall) == Point(x=0, y=500)
    p = point_at_distance(wall, 250)
    assert (p.x, p.y) == pytest.approx((0, 250))
    assert point_at_distance(make_wall(1, 1, 1, 1), 10) is None


def test_connection_is_strictly_within_tolerance():
    a = make_wall(0, 0, 1000, 0)
    assert walls_connected(a, make_wall(1004.9, 0, 2000, 0))
    assert not walls_connected(a, make_wall(1005, 0, 2000, 0))


def test_l_corner_is_one_group_without_merge(l_corner):
    groups = find_groups(l_corner)
    assert [[w.id for w in g] for g in groups] == [["w1", "w2"]]
    assert auto_merge_walls(l_corner[1], [l_corner[0]]) is None


def test_groups_follow_input_order():
    walls = [
        make_wall(0, 0, 100, 0, "a"),
        make_wall(5000, 0, 5100, 0, "b"),
        make_wall(100, 0, 100, 100, "c"),
        make_wall(5100, 0, 5100, 100, "d"),
        make_wall(100, 100, 0, 100, "e"),
    ]
    groups = find_groups(walls)
    assert [[w.id for w in g] for g in groups] == [["a", "c", "e"], ["b", "d"]]


def test_graph_connections():
    walls = [make_wall(0, 0, 100, 0, "a"), make_wall(100, 0, 200, 0, "b"), make_wall(900, 0, 1000, 0, "c")]
    graph = WallGraph(walls)
    assert [w.id for w in graph.connections("a")] == ["b"]
    assert graph.connections("c") == []
    assert graph.connections("missing") == []


@pytest.mark.parametrize("use_index", [False, True])
def test_groups_partition_walls(use_index):
    walls = _random_walls(150)
    groups = find_groups(walls, use_spatial_index=use_index)
    ids = [w.id for g in groups for w in g]
    assert sorted(ids) == sorted(w.id for w in walls)
    assert len(ids) == len(set(ids))

    # no wall connects to a wall in a different group
    group_of = {w.id: i for i, g in enumerate(groups) for w in g}
    for w1 in walls:
        for w2 in walls:
            if w1.id != w2.id and walls_connected(w1, w2):
                assert group_of[w1.id] == group_of[w2.id]


def test_spatial_index_matches_pairwise_scan():
    walls = _random_walls(200, seed=11)
    naive = find_groups(walls, use_spatial_index=False)
    indexed = find_groups(walls, use_spatial_index=True)
    assert [[w.id for w in g] for g in naive] == [[w.id for w in g] for g in indexed]
    assert WallGraph(walls).uses_spatial_index


def test_spatial_grid_neighbourhood():
    walls = [make_wall(0, 0, 4, 0), make_wall(4.5, 0, 100, 0), make_wall(500, 500, 600, 500)]
    grid = SpatialGrid.from_walls(walls, 5.0)
    assert grid.nearby(Point(x=4, y=0)) == {0, 1}
    with pytest.raises(ValueError):
        SpatialGrid(0)


def test_angles_match_is_direction_agnostic():
    assert angles_match(0.0, 180.0, 5.0)
    assert angles_match(179.0, -179.0, 5.0)
    assert angles_match(90.0, -88.0, 5.0)
    assert not angles_match(0.0, 5.0, 5.0)
    assert not angles_match(0.0, 90.0, 5.0)


def test_merge_spans_farthest_endpoints():
    existing = make_wall(0, 0, 1000, 0, "w1", plan_id="p1")
    new_wall = make_wall(1000, 0, 2500, 0, "new", plan_id="p1", thickness_mm=200.0)

    result = auto_merge_walls(new_wall, [existing])
    assert result is not None
    assert result.merged_wall.id == "new"
    assert result.merged_wall.thickness_mm == 200.0
    assert result.wall_ids_to_remove == ["w1"]
    assert {result.merged_wall.start.x, result.merged_wall.end.x} == {0.0, 2500.0}

    changes = result.to_changes()
    assert changes.deletes == ["w1"]
    assert changes.upserts[0].id == "new"


def test_merge_angle_tolerance_comes_from_settings():
    existing = make_wall(0, 0, 1000, 0, "w1")
    kinked = make_wall(1000, 0, 2000, 194, "new")

    assert auto_merge_walls(kinked, [existing]) is None
    result = auto_merge_walls(kinked, [existing], tolerances=ToleranceSettings(merge_angle_deg=45.0))
    assert result is not None
    assert result.wall_ids_to_remove == ["w1"]
    # explicit arguments win over the settings
    loose = ToleranceSettings(merge_angle_deg=45.0)
    assert auto_merge_walls(kinked, [existing], angle_tolerance_deg=5.0, tolerances=loose) is None


def test_merge_is_idempotent():
    walls = [make_wall(0, 0, 1000, 0, "a"), make_wall(1000, 0, 1800, 0, "b"), make_wall(1800, 0, 3000, 0, "c")]
    merged = merge_walls(walls)
    assert merged.id == "a"
    again = merge_walls([merged])
    assert again is merged
    assert merged.length == pytest.approx(3000.0)


def test_merge_edge_cases():
    assert merge_walls([]) is None
    point_wall = make_wall(3, 3, 3, 3)
    assert merge_walls([point_wall, point_wall.model_copy(update={"id": "other"})]) is None


def test_mergeable_walls_filters():
    new_wall = make_wall(0, 0, 1000, 0, "n", plan_id="p1")
    candidates = [
        make_wall(1000.5, 0.5, 2000, 0, "touching", plan_id="p1"),
        make_wall(2000, 0, 1000, 0, "reversed", plan_id="p1"),
        make_wall(1000, 0, 2000, 0, "other-plan", plan_id="p2"),
        make_wall(1000, 0, 1000, 500, "perpendicular", plan_id="p1"),
        make_wall(1001, 0, 2000, 0, "too-far", plan_id="p1"),
        make_wall(0, 0, 1000, 0, "n", plan_id="p1"),
    ]
    assert [w.id for w in find_mergeable_walls(new_wall, candidates)] == ["touching", "reversed"]


def test_merge_keeps_first_pair_on_ties():
    # a square's diagonals tie; the first pair in scan order wins
    walls = [make_wall(0, 0, 100, 100, "d1"), make_wall(100, 0, 0, 100, "d2")]
    merged = merge_walls(walls)
    assert (merged.start, merged.end) == (Point(x=0, y=0), Point(x=100, y=100))
    assert math.isclose(merged.length, math.hypot(100, 100))
