from __future__ import annotations

import pytest

from floorcore.exceptions import GeometryError, TemplateNotFoundError
from floorcore.geometry.primitives import Point
from floorcore.model.shapes import CircleShape, PolygonShape, RectangleShape, SymbolShape, TextShape
from floorcore.templates.cache import TemplateCache
from floorcore.templates.placement import (
    Template,
    calculate_bounds,
    normalize_shapes,
    place_template_shapes,
    resize_group_about_center,
    transform_group,
)
from tests.factories import make_wall


def _wc_shapes():
    return [
        RectangleShape(id="tank", left=-150, top=-75, width=300, height=60),
        CircleShape(id="bowl", cx=0, cy=20, radius=50),
        make_wall(-150, 75, 150, 75, "back"),
        TextShape(id="label", x=-50, y=-10, text="WC"),
    ]


def test_calculate_bounds_unions_every_encoding():
    bounds = calculate_bounds(_wc_shapes())
    assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (-150, -75, 150, 75)


def test_calculate_bounds_skips_shapes_without_extent():
    bounds = calculate_bounds([CircleShape(cx=10, cy=10, radius=0), PolygonShape(points=[])])
    assert (bounds.min_x, bounds.min_y, bounds.width, bounds.height) == (0, 0, 0, 0)


def test_place_template_offsets_to_target():
    template = Template(name="WC", category="bathroom", shapes=_wc_shapes())
    placed = place_template_shapes(template, Point(x=500, y=500), "plan-2")

    bounds = calculate_bounds(placed)
    assert (bounds.min_x, bounds.min_y) == (500, 500)
    tank = placed[0]
    assert (tank.left, tank.top) == (500, 500)
    assert (placed[1].cx, placed[1].cy) == (650, 595)

    assert all(s.plan_id == "plan-2" for s in placed)
    assert len({s.group_id for s in placed}) == 1
    assert placed[0].group_id is not None
    assert not {s.id for s in placed} & {"tank", "bowl", "back", "label"}
    # template untouched
    assert template.shapes[0].left == -150


def test_place_empty_template():
    assert place_template_shapes(Template(name="empty"), Point(x=0, y=0), "p") == []


def test_normalize_and_template_from_shapes():
    normalized = normalize_shapes(_wc_shapes())
    bounds = calculate_bounds(normalized)
    assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (0, 0, 300, 150)

    template = Template.from_shapes("WC", _wc_shapes(), category="bathroom")
    assert (template.bounds.width, template.bounds.height) == (300, 150)
    assert template.bounds.top_left == Point(x=0, y=0)


def _library_object(px, py):
    return PolygonShape(
        id="plant",
        type="freehand",
        points=[Point(x=0, y=0), Point(x=10, y=0), Point(x=10, y=10)],
        metadata={"placementX": px, "placementY": py, "symbolType": "plant"},
    )


def test_library_object_bounds_follow_placement():
    shapes = [_library_object(2000, 2000), make_wall(1000, 1000, 1500, 1000, "w")]
    bounds = calculate_bounds(shapes)
    assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (1000, 1000, 3000, 3000)


def test_library_object_moves_with_its_template():
    shapes = [_library_object(2000, 2000), make_wall(1000, 1000, 1500, 1000, "w")]
    placed = place_template_shapes(shapes, Point(x=500, y=500), "p")

    plant = placed[0]
    assert (plant.metadata["placementX"], plant.metadata["placementY"]) == (1500, 1500)
    assert plant.metadata["symbolType"] == "plant"
    # the symbol drawing itself is not moved
    assert plant.points == shapes[0].points
    assert (placed[1].start.x, placed[1].start.y) == (500, 500)
    assert shapes[0].metadata["placementX"] == 2000

    normalized = normalize_shapes(shapes)
    assert normalized[0].metadata["placementX"] == 1000
    assert calculate_bounds(normalized).top_left == Point(x=0, y=0)


def test_library_object_resize_keeps_its_size():
    resized = resize_group_about_center([_library_object(0, 0)], 2.0, 2.0, center=Point(x=0, y=0))
    box = resized[0].bounding_box()
    assert (box.min_x, box.min_y, box.width, box.height) == (500, 500, 1000, 1000)


def test_plain_freehand_uses_its_points():
    sketch = PolygonShape(type="freehand", points=[Point(x=0, y=0), Point(x=40, y=30)])
    assert sketch.placement is None
    moved = sketch.translate(10, 10)
    assert moved.points[0] == Point(x=10, y=10)


def test_resize_group_about_center():
    shapes = [
        RectangleShape(left=0, top=0, width=100, height=100),
        SymbolShape(x=25, y=25, width=50, height=50),
        make_wall(0, 100, 100, 100),
    ]
    resized = resize_group_about_center(shapes, 2.0, 0.5)
    rect, symbol, wall = resized
    assert (rect.left, rect.top, rect.width, rect.height) == (-50, 25, 200, 50)
    assert (symbol.x, symbol.y, symbol.width, symbol.height) == (0, 37.5, 100, 25)
    assert (wall.start.x, wall.start.y, wall.end.x) == (-50, 75, 150)
    bounds = calculate_bounds(resized)
    assert bounds.center == Point(x=50, y=50)


def test_transform_group_rotates_and_moves():
    shapes = [make_wall(0, 0, 100, 0, "w")]
    moved = transform_group(shapes, rotation=3.141592653589793, dx=10, dy=0, center=Point(x=0, y=0))
    wall = moved[0]
    assert (wall.start.x, wall.end.x) == pytest.approx((10, -90))
    assert wall.end.y == pytest.approx(0, abs=1e-9)


def test_resize_rejects_non_positive_scale():
    with pytest.raises(GeometryError):
        resize_group_about_center([RectangleShape(left=0, top=0, width=1, height=1)], 0, 1)


def test_template_cache_loads_once():
    calls = []

    def loader(project_id):
        calls.append(project_id)
        return [Template(id="t1", name="WC")]

    cache = TemplateCache()
    assert cache.get("proj") is None
    assert cache.get_or_load("proj", loader)[0].id == "t1"
    assert cache.get_or_load("proj", loader)[0].id == "t1"
    assert calls == ["proj"]
    assert cache.find("proj", "t1").name == "WC"

    cache.invalidate("proj")
    assert "proj" not in cache
    cache.get_or_load("proj", loader)
    assert calls == ["proj", "proj"]


def test_template_cache_expiry_and_missing_template():
    now = [0.0]
    cache = TemplateCache(ttl_seconds=60, clock=lambda: now[0])
    cache.put("a", [])
    cache.put("b", [])
    now[0] = 30.0
    assert cache.get("a") == []
    now[0] = 61.0
    assert cache.get("a") is None

    with pytest.raises(TemplateNotFoundError):
        cache.find("b", "missing")

    cache.invalidate()
    assert len(cache) == 0
