from __future__ import annotations

import pytest
from pydantic import ValidationError

from floorcore.exceptions import ConfigurationError
from floorcore.geometry.coordinates import (
    ARCHITECTURAL_SCALES,
    clamp_zoom,
    fit_to_content,
    pixel_distance_to_world,
    pixel_to_world,
    snap_point_to_grid,
    snap_to_grid_world,
    visible_world_bounds,
    world_distance,
    world_distance_to_pixel,
    world_to_pixel,
    zoom_for_scale,
)
from floorcore.geometry.primitives import Point
from floorcore.geometry.units import (
    Unit,
    convert_from_mm,
    convert_to_mm,
    default_grid_size,
    format_with_unit,
    parse_unit,
    unit_display_name,
)
from floorcore.model.shapes import PolygonShape, RectangleShape, ViewState


@pytest.mark.parametrize(
    "view",
    [
        ViewState(zoom=1.0, pan_x=0.0, pan_y=0.0),
        ViewState(zoom=0.35, pan_x=-120.5, pan_y=48.0),
        ViewState(zoom=4.2, pan_x=300.0, pan_y=-75.25),
    ],
)
def test_pixel_world_round_trip(view):
    for px, py in [(0.0, 0.0), (640.0, 480.0), (-13.5, 999.0)]:
        wx, wy = pixel_to_world(px, py, view)
        back = world_to_pixel(wx, wy, view)
        assert back == pytest.approx((px, py))


def test_pixel_to_world_applies_pan_then_zoom():
    view = ViewState(zoom=0.5, pan_x=100.0, pan_y=50.0)
    assert pixel_to_world(300.0, 150.0, view) == pytest.approx((400.0, 200.0))


def test_distances_ignore_pan():
    assert pixel_distance_to_world(50.0, 0.5) == pytest.approx(100.0)
    assert world_distance_to_pixel(100.0, 0.5) == pytest.approx(50.0)
    assert world_distance(0, 0, 3, 4) == pytest.approx(5.0)


def test_view_state_rejects_non_positive_zoom():
    with pytest.raises(ValidationError):
        ViewState(zoom=0.0)


def test_snap_to_grid():
    assert snap_to_grid_world(740.0, 500.0) == 500.0
    assert snap_to_grid_world(760.0, 500.0) == 1000.0
    assert snap_to_grid_world(760.0, 500.0, enabled=False) == 760.0
    assert snap_to_grid_world(760.0, 0.0) == 760.0
    assert snap_point_to_grid(Point(x=149.0, y=-160.0), 100.0) == Point(x=100.0, y=-200.0)


def test_visible_world_bounds():
    bounds = visible_world_bounds(800, 600, ViewState(zoom=2.0, pan_x=100.0, pan_y=0.0))
    assert (bounds.min_x, bounds.min_y) == pytest.approx((-50.0, 0.0))
    assert (bounds.max_x, bounds.max_y) == pytest.approx((350.0, 300.0))


def test_zoom_for_scale():
    assert zoom_for_scale("1:100") == pytest.approx(96 / 25.4 / 100)
    assert zoom_for_scale(ARCHITECTURAL_SCALES["1:50"], screen_dpi=72) == pytest.approx(72 / 25.4 / 50)


def test_clamp_zoom():
    assert clamp_zoom(0.01) == 0.3
    assert clamp_zoom(12.0) == 5.0
    assert clamp_zoom(1.5) == 1.5


def test_fit_to_content_frames_shapes():
    shapes = [RectangleShape(left=0, top=0, width=1000, height=500)]
    view = fit_to_content(shapes, 800, 600)
    assert view is not None
    assert view.zoom == pytest.approx(0.56)
    assert view.pan_x == pytest.approx(120.0)
    assert view.pan_y == pytest.approx(160.0)


def test_fit_to_content_clamps_zoom():
    view = fit_to_content([RectangleShape(left=0, top=0, width=10, height=10)], 800, 600)
    assert view.zoom == 2.0


def test_fit_to_content_centres_point_content():
    view = fit_to_content([PolygonShape(points=[Point(x=5, y=5)])], 800, 600)
    assert view.zoom == 1.0
    assert (view.pan_x, view.pan_y) == pytest.approx((395.0, 295.0))


def test_fit_to_content_empty():
    assert fit_to_content([], 800, 600) is None


def test_units():
    assert convert_from_mm(1000.0, "m") == pytest.approx(1.0)
    assert convert_to_mm(1.0, "inch") == pytest.approx(25.4)
    assert format_with_unit(1234.0, "cm") == "123.4cm"
    assert default_grid_size("inch") == 254.0
    assert parse_unit("cm") is Unit.CM
    assert unit_display_name(Unit.M) == "Meters"
    with pytest.raises(ConfigurationError):
        convert_to_mm(1.0, "furlong")
