"""Shape data model and change sets."""

from .changes import ChangeSet
from .shapes import (
    CircleShape,
    LineShape,
    Opening,
    OpeningKind,
    PolygonShape,
    RectangleShape,
    ShapeBase,
    SymbolShape,
    TextShape,
    ViewState,
    WallRelativePosition,
    WallSegment,
    parse_shape,
    parse_shapes,
)

__all__ = [
    "ChangeSet",
    "CircleShape",
    "LineShape",
    "Opening",
    "OpeningKind",
    "PolygonShape",
    "RectangleShape",
    "ShapeBase",
    "SymbolShape",
    "TextShape",
    "ViewState",
    "WallRelativePosition",
    "WallSegment",
    "parse_shape",
    "parse_shapes",
]
