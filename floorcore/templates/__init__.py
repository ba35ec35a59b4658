"""Template bounds, placement and caching."""

from .cache import TemplateCache
from .placement import (
    Template,
    calculate_bounds,
    normalize_shapes,
    place_template_shapes,
    resize_group_about_center,
    transform_group,
)

__all__ = [
    "Template",
    "TemplateCache",
    "calculate_bounds",
    "normalize_shapes",
    "place_template_shapes",
    "resize_group_about_center",
    "transform_group",
]
