from __future__ import annotations

import pytest

from tests.factories import make_wall


@pytest.fixture
def l_corner():
    return [
        make_wall(0, 0, 1000, 0, "w1", plan_id="p1"),
        make_wall(1000, 0, 1000, 1000, "w2", plan_id="p1"),
    ]


@pytest.fixture
def long_wall():
    return make_wall(0, 0, 3000, 0, "host", plan_id="p1", thickness_mm=200.0)
