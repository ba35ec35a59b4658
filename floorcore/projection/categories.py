"""Default installation heights and sizes for wall-mounted object categories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class CategoryDefaults:
    elevation_bottom: float  # mm from floor
    width: float  # along the wall
    height: float  # vertical
    depth: float  # into the room


OBJECT_CATEGORY_DEFAULTS: Dict[str, CategoryDefaults] = {
    "floor_cabinet": CategoryDefaults(elevation_bottom=0, width=600, height=720, depth=560),
    "wall_cabinet": CategoryDefaults(elevation_bottom=1400, width=600, height=720, depth=350),
    "countertop": CategoryDefaults(elevation_bottom=850, width=600, height=40, depth=600),
    "appliance_floor": CategoryDefaults(elevation_bottom=0, width=600, height=850, depth=600),
    "appliance_wall": CategoryDefaults(elevation_bottom=1000, width=600, height=400, depth=400),
    "window": CategoryDefaults(elevation_bottom=900, width=1200, height=1200, depth=200),
    "door": CategoryDefaults(elevation_bottom=0, width=900, height=2100, depth=100),
    "decoration": CategoryDefaults(elevation_bottom=1200, width=400, height=400, depth=50),
    "custom": CategoryDefaults(elevation_bottom=0, width=500, height=500, depth=500),
}

CATEGORY_LABELS: Dict[str, str] = {
    "floor_cabinet": "Floor Cabinet",
    "wall_cabinet": "Wall Cabinet",
    "countertop": "Countertop",
    "appliance_floor": "Floor Appliance",
    "appliance_wall": "Wall Appliance",
    "window": "Window",
    "door": "Door",
    "decoration": "Decoration",
    "custom": "Custom",
}

CATEGORY_COLORS: Dict[str, str] = {
    "floor_cabinet": "#D2B48C",
    "wall_cabinet": "#DEB887",
    "countertop": "#808080",
    "appliance_floor": "#C0C0C0",
    "appliance_wall": "#A9A9A9",
    "window": "#ADD8E6",
    "door": "#A0522D",
    "decoration": "#FFB6C1",
    "custom": "#D3D3D3",
}
FALLBACK_COLOR = "#CCCCCC"

_SYMBOL_CATEGORIES: Dict[str, str] = {
    # Kitchen
    "floor_cabinet": "floor_cabinet",
    "wall_cabinet": "wall_cabinet",
    "sink_cabinet": "floor_cabinet",
    "oven": "appliance_floor",
    "stove": "floor_cabinet",
    "fridge": "appliance_floor",
    "dishwasher": "appliance_floor",
    # Bathroom
    "toilet": "floor_cabinet",
    "shower": "custom",
    "bathtub": "appliance_floor",
    "sink": "floor_cabinet",
    "mirror": "decoration",
    "washing_machine": "appliance_floor",
    "dryer": "appliance_floor",
    # Furniture
    "bed": "custom",
    "bed_single": "custom",
    "bed_double": "custom",
    "sofa": "custom",
    "table": "custom",
    "chair": "custom",
    "wardrobe": "floor_cabinet",
    "nightstand": "floor_cabinet",
    "desk": "floor_cabinet",
    # Structural
    "door": "door",
    "window": "window",
    "arch_window": "window",
    "door_outward": "door",
    "sliding_door": "door",
}


def defaults_for_category(category: Optional[str]) -> CategoryDefaults:
    """Defaults for ``category``; unknown or missing categories get ``custom``."""
    if not category or category not in OBJECT_CATEGORY_DEFAULTS:
        return OBJECT_CATEGORY_DEFAULTS["custom"]
    return OBJECT_CATEGORY_DEFAULTS[category]


def default_elevation(category: Optional[str]) -> float:
    return defaults_for_category(category).elevation_bottom


def infer_category_from_symbol_type(symbol_type: Optional[str]) -> str:
    if not symbol_type:
        return "custom"
    return _SYMBOL_CATEGORIES.get(symbol_type, "custom")


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)


def category_color(category: Optional[str]) -> str:
    return CATEGORY_COLORS.get(category or "", FALLBACK_COLOR)
