"""Canonical shape model for floor-plan geometry.

Every shape kind is its own pydantic model discriminated by the ``type`` tag.
The coordinate encoding belongs to the kind, so geometry code never has to
sniff for fields: bounding boxes, translation and scaling are implemented once
per variant.

The editor stores shapes as camelCase dicts with a nested ``coordinates``
record; :func:`parse_shape` and :meth:`ShapeBase.to_editor_dict` convert at
that boundary.
"""

from __future__ import annotations

import math
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Iterable, Literal, Union, get_args

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from floorcore.exceptions import ShapeParseError
from floorcore.geometry import contract
from floorcore.geometry.primitives import Bounds, Point, angle_deg, midpoint, transform_point

if TYPE_CHECKING:
    from floorcore.settings import WallDefaults


def new_shape_id() -> str:
    return str(uuid.uuid4())


class WallRelativePosition(BaseModel):
    """Position of an object relative to a wall. All measurements in mm."""

    model_config = ConfigDict(populate_by_name=True)

    wall_id: str = Field(..., alias="wallId")
    distance_from_wall_start: float = Field(0.0, alias="distanceFromWallStart")
    perpendicular_offset: float = Field(0.0, alias="perpendicularOffset", description="+ = into room")
    elevation_bottom: float = Field(0.0, alias="elevationBottom", description="Bottom of object above floor")
    width: float = Field(0.0, ge=0.0, description="Along wall direction")
    height: float = Field(0.0, ge=0.0, description="Vertical")
    depth: float = Field(0.0, ge=0.0, description="Perpendicular to wall")


class Dimensions3D(BaseModel):
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)
    depth: float = Field(..., ge=0.0)


class Position3D(BaseModel):
    x: float
    y: float
    z: float = Field(0.0, description="Height from floor")


class ViewState(BaseModel):
    """Zoom and pan of the editor canvas."""

    model_config = ConfigDict(populate_by_name=True)

    zoom: float = Field(1.0, gt=0.0)
    pan_x: float = Field(0.0, alias="panX")
    pan_y: float = Field(0.0, alias="panY")


class OpeningKind(str, Enum):
    DOOR = "door"
    WINDOW = "window"
    SLIDING_DOOR = "slidingDoor"


_OPENING_TYPE_BY_KIND = {
    OpeningKind.DOOR: "door_line",
    OpeningKind.WINDOW: "window_line",
    OpeningKind.SLIDING_DOOR: "sliding_door_line",
}
_OPENING_KIND_BY_TYPE = {tag: kind for kind, tag in _OPENING_TYPE_BY_KIND.items()}


class ShapeBase(BaseModel):
    """Fields and capabilities common to every shape kind."""

    model_config = ConfigDict(populate_by_name=True)

    # Fields that live in the editor's nested ``coordinates`` record
    coordinate_fields: ClassVar[frozenset[str]] = frozenset()

    id: str = Field(default_factory=new_shape_id)
    plan_id: str | None = Field(None, alias="planId")
    group_id: str | None = Field(None, alias="groupId")
    rotation: float = Field(0.0, description="Rotation angle in degrees")
    color: str | None = None
    stroke_color: str | None = Field(None, alias="strokeColor")
    wall_relative: WallRelativePosition | None = Field(None, alias="wallRelative")
    metadata: dict[str, Any] = Field(default_factory=dict)

    # -- capabilities --------------------------------------------------------

    def bounding_box(self) -> Bounds | None:
        raise NotImplementedError

    def translate(self, dx: float, dy: float) -> "ShapeBase":
        raise NotImplementedError

    def transform_about(
        self,
        center: Point,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
        rotation: float = 0.0,
        dx: float = 0.0,
        dy: float = 0.0,
    ) -> "ShapeBase":
        """Scale, rotate (radians) about ``center`` and translate; returns a new shape."""
        raise NotImplementedError

    # -- editor boundary -----------------------------------------------------

    @classmethod
    def coordinates_from_editor(cls, coords: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def editor_coordinates(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_editor_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude=set(self.coordinate_fields))
        data["coordinates"] = self.editor_coordinates()
        return data


class _LineEncoded(ShapeBase):
    coordinate_fields: ClassVar[frozenset[str]] = frozenset({"start", "end"})

    start: Point
    end: Point

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def midpoint(self) -> Point:
        return midpoint(self.start, self.end)

    @property
    def angle_deg(self) -> float:
        return angle_deg(self.start, self.end)

    @property
    def is_degenerate(self) -> bool:
        return self.length == 0.0

    def bounding_box(self) -> Bounds | None:
        return Bounds.from_points((self.start, self.end))

    def translate(self, dx: float, dy: float) -> "_LineEncoded":
        return self.model_copy(update={"start": self.start.offset(dx, dy), "end": self.end.offset(dx, dy)}, deep=True)

    def transform_about(self, center, scale_x=1.0, scale_y=1.0, rotation=0.0, dx=0.0, dy=0.0):
        kw = dict(scale_x=scale_x, scale_y=scale_y, rotation=rotation, dx=dx, dy=dy)
        return self.model_copy(
            update={"start": transform_point(self.start, center, **kw), "end": transform_point(self.end, center, **kw)},
            deep=True,
        )

    def with_endpoints(self, start: Point, end: Point, **updates: Any) -> "_LineEncoded":
        return self.model_copy(update={"start": start, "end": end, **updates}, deep=True)

    @classmethod
    def coordinates_from_editor(cls, coords: dict[str, Any]) -> dict[str, Any]:
        return {
            "start": Point(x=coords["x1"], y=coords["y1"]),
            "end": Point(x=coords["x2"], y=coords["y2"]),
        }

    def editor_coordinates(self) -> dict[str, Any]:
        return {"x1": self.start.x, "y1": self.start.y, "x2": self.end.x, "y2": self.end.y}


class LineShape(_LineEncoded):
    type: Literal["line", "measurement"] = "line"


class WallSegment(_LineEncoded):
    """Wall modelled as a thick centre line."""

    type: Literal["wall"] = "wall"
    thickness_mm: float = Field(contract.DEFAULT_WALL_THICKNESS_MM, gt=0.0, alias="thicknessMM")
    height_mm: float = Field(contract.DEFAULT_WALL_HEIGHT_MM, gt=0.0, alias="heightMM")
    material: str | None = None

    @field_validator("thickness_mm", mode="before")
    @classmethod
    def _default_thickness(cls, value: Any) -> Any:
        return contract.DEFAULT_WALL_THICKNESS_MM if value is None else value

    @field_validator("height_mm", mode="before")
    @classmethod
    def _default_height(cls, value: Any) -> Any:
        return contract.DEFAULT_WALL_HEIGHT_MM if value is None else value


class Opening(_LineEncoded):
    """Door, window or sliding door drawn as a line hosted by a wall."""

    type: Literal["door_line", "window_line", "sliding_door_line"] = "door_line"
    attached_wall_id: str | None = Field(None, alias="attachedToWall")
    position_on_wall: float | None = Field(None, ge=0.0, le=1.0, alias="positionOnWall")
    opening_direction: Literal["left", "right"] | None = Field(None, alias="openingDirection")

    @property
    def kind(self) -> OpeningKind:
        return _OPENING_KIND_BY_TYPE[self.type]

    @classmethod
    def of_kind(cls, kind: OpeningKind | str, start: Point, end: Point, **fields: Any) -> "Opening":
        return cls(type=_OPENING_TYPE_BY_KIND[OpeningKind(kind)], start=start, end=end, **fields)


class PolygonShape(ShapeBase):
    type: Literal["polygon", "room", "freehand"] = "polygon"
    coordinate_fields: ClassVar[frozenset[str]] = frozenset({"points"})

    points: list[Point] = Field(default_factory=list)
    name: str | None = None

    @property
    def is_degenerate(self) -> bool:
        return len(self.points) < 3

    @property
    def area_mm2(self) -> float:
        if self.is_degenerate:
            return 0.0
        total = 0.0
        for i, p in enumerate(self.points):
            q = self.points[(i + 1) % len(self.points)]
            total += p.x * q.y - q.x * p.y
        return abs(total) / 2.0

    @property
    def placement(self) -> Point | None:
        """Anchor of a freehand library object (``metadata.placementX/Y``), if any.

        Such objects are positioned by the anchor alone; their points are the
        symbol drawing and stay untouched when the object moves.
        """
        if self.type != "freehand":
            return None
        px = self.metadata.get("placementX")
        py = self.metadata.get("placementY")
        if px is None or py is None:
            return None
        return Point(x=px, y=py)

    def _with_placement(self, anchor: Point) -> "PolygonShape":
        metadata = {**self.metadata, "placementX": anchor.x, "placementY": anchor.y}
        return self.model_copy(update={"metadata": metadata}, deep=True)

    def bounding_box(self) -> Bounds | None:
        anchor = self.placement
        if anchor is not None:
            size = contract.LIBRARY_OBJECT_SIZE_MM
            return Bounds(anchor.x, anchor.y, anchor.x + size, anchor.y + size)
        return Bounds.from_points(self.points)

    def translate(self, dx: float, dy: float) -> "PolygonShape":
        anchor = self.placement
        if anchor is not None:
            return self._with_placement(anchor.offset(dx, dy))
        return self.model_copy(update={"points": [p.offset(dx, dy) for p in self.points]}, deep=True)

    def transform_about(self, center, scale_x=1.0, scale_y=1.0, rotation=0.0, dx=0.0, dy=0.0):
        kw = dict(scale_x=scale_x, scale_y=scale_y, rotation=rotation, dx=dx, dy=dy)
        anchor = self.placement
        if anchor is not None:
            # the object keeps its size; only its centre follows the transform
            half = contract.LIBRARY_OBJECT_SIZE_MM / 2.0
            moved = transform_point(anchor.offset(half, half), center, **kw)
            return self._with_placement(moved.offset(-half, -half))
        return self.model_copy(update={"points": [transform_point(p, center, **kw) for p in self.points]}, deep=True)

    @classmethod
    def coordinates_from_editor(cls, coords: dict[str, Any]) -> dict[str, Any]:
        return {"points": [Point(x=p["x"], y=p["y"]) for p in coords["points"]]}

    def editor_coordinates(self) -> dict[str, Any]:
        return {"points": [{"x": p.x, "y": p.y} for p in self.points]}


class RectangleShape(ShapeBase):
    type: Literal["rectangle"] = "rectangle"
    coordinate_fields: ClassVar[frozenset[str]] = frozenset({"left", "top", "width", "height"})

    left: float
    top: float
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)

    def bounding_box(self) -> Bounds | None:
        return Bounds(self.left, self.top, self.left + self.width, self.top + self.height)

    def translate(self, dx: float, dy: float) -> "RectangleShape":
        return self.model_copy(update={"left": self.left + dx, "top": self.top + dy}, deep=True)

    def transform_about(self, center, scale_x=1.0, scale_y=1.0, rotation=0.0, dx=0.0, dy=0.0):
        corners = [
            Point(x=self.left, y=self.top),
            Point(x=self.left + self.width, y=self.top),
            Point(x=self.left + self.width, y=self.top + self.height),
            Point(x=self.left, y=self.top + self.height),
        ]
        moved = [
            transform_point(c, center, scale_x=scale_x, scale_y=scale_y, rotation=rotation, dx=dx, dy=dy)
            for c in corners
        ]
        box = Bounds.from_points(moved)
        return self.model_copy(
            update={"left": box.min_x, "top": box.min_y, "width": box.width, "height": box.height},
            deep=True,
        )

    @classmethod
    def coordinates_from_editor(cls, coords: dict[str, Any]) -> dict[str, Any]:
        return {k: coords[k] for k in ("left", "top", "width", "height")}

    def editor_coordinates(self) -> dict[str, Any]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


class CircleShape(ShapeBase):
    type: Literal["circle"] = "circle"
    coordinate_fields: ClassVar[frozenset[str]] = frozenset({"cx", "cy", "radius"})

    cx: float
    cy: float
    radius: float = Field(..., ge=0.0)

    @property
    def is_degenerate(self) -> bool:
        return self.radius == 0.0

    def bounding_box(self) -> Bounds | None:
        if self.is_degenerate:
            return None
        return Bounds(self.cx - self.radius, self.cy - self.radius, self.cx + self.radius, self.cy + self.radius)

    def translate(self, dx: float, dy: float) -> "CircleShape":
        return self.model_copy(update={"cx": self.cx + dx, "cy": self.cy + dy}, deep=True)

    def transform_about(self, center, scale_x=1.0, scale_y=1.0, rotation=0.0, dx=0.0, dy=0.0):
        c = transform_point(
            Point(x=self.cx, y=self.cy), center, scale_x=scale_x, scale_y=scale_y, rotation=rotation, dx=dx, dy=dy
        )
        # circles stay circles: use the mean scale for the radius
        avg_scale = (abs(scale_x) + abs(scale_y)) / 2.0
        return self.model_copy(update={"cx": c.x, "cy": c.y, "radius": self.radius * avg_scale}, deep=True)

    @classmethod
    def coordinates_from_editor(cls, coords: dict[str, Any]) -> dict[str, Any]:
        return {k: coords[k] for k in ("cx", "cy", "radius")}

    def editor_coordinates(self) -> dict[str, Any]:
        return {"cx": self.cx, "cy": self.cy, "radius": self.radius}


class _AnchoredBox(ShapeBase):
    """Shapes anchored at a top-left point with an explicit extent."""

    coordinate_fields: ClassVar[frozenset[str]] = frozenset({"x", "y", "width", "height"})

    x: float
    y: float

    def _extent(self) -> tuple[float, float]:
        raise NotImplementedError

    def bounding_box(self) -> Bounds | None:
        w, h = self._extent()
        return Bounds(self.x, self.y, self.x + w, self.y + h)

    def translate(self, dx: float, dy: float) -> "_AnchoredBox":
        return self.model_copy(update={"x": self.x + dx, "y": self.y + dy}, deep=True)

    @classmethod
    def coordinates_from_editor(cls, coords: dict[str, Any]) -> dict[str, Any]:
        return {k: coords[k] for k in ("x", "y", "width", "height") if k in coords}


class SymbolShape(_AnchoredBox):
    """Library object (furniture, fixtures) placed on the plan."""

    type: Literal["symbol"] = "symbol"

    width: float = Field(0.0, ge=0.0)
    height: float = Field(0.0, ge=0.0)
    symbol_type: str | None = Field(None, alias="symbolType")
    object_category: str | None = Field(None, alias="objectCategory")
    position_3d: Position3D | None = Field(None, alias="position3D")
    dimensions_3d: Dimensions3D | None = Field(None, alias="dimensions3D")

    def _extent(self) -> tuple[float, float]:
        return self.width, self.height

    def transform_about(self, center, scale_x=1.0, scale_y=1.0, rotation=0.0, dx=0.0, dy=0.0):
        c = transform_point(
            Point(x=self.x + self.width / 2.0, y=self.y + self.height / 2.0),
            center,
            scale_x=scale_x,
            scale_y=scale_y,
            rotation=rotation,
            dx=dx,
            dy=dy,
        )
        width = self.width * abs(scale_x)
        height = self.height * abs(scale_y)
        updates: dict[str, Any] = {"x": c.x - width / 2.0, "y": c.y - height / 2.0, "width": width, "height": height}
        if rotation:
            updates["rotation"] = self.rotation + math.degrees(rotation)
        return self.model_copy(update=updates, deep=True)

    def editor_coordinates(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class TextShape(_AnchoredBox):
    type: Literal["text"] = "text"

    width: float | None = Field(None, ge=0.0)
    height: float | None = Field(None, ge=0.0)
    text: str = ""
    font_size: float | None = Field(None, gt=0.0, alias="fontSize")

    def _extent(self) -> tuple[float, float]:
        return (
            self.width if self.width is not None else contract.TEXT_DEFAULT_WIDTH_MM,
            self.height if self.height is not None else contract.TEXT_DEFAULT_HEIGHT_MM,
        )

    def transform_about(self, center, scale_x=1.0, scale_y=1.0, rotation=0.0, dx=0.0, dy=0.0):
        anchor = transform_point(
            Point(x=self.x, y=self.y), center, scale_x=scale_x, scale_y=scale_y, rotation=rotation, dx=dx, dy=dy
        )
        updates: dict[str, Any] = {"x": anchor.x, "y": anchor.y}
        if self.width is not None:
            updates["width"] = self.width * abs(scale_x)
        if self.height is not None:
            updates["height"] = self.height * abs(scale_y)
        return self.model_copy(update=updates, deep=True)

    def editor_coordinates(self) -> dict[str, Any]:
        coords: dict[str, Any] = {"x": self.x, "y": self.y}
        if self.width is not None:
            coords["width"] = self.width
        if self.height is not None:
            coords["height"] = self.height
        return coords


Shape = Annotated[
    Union[LineShape, WallSegment, Opening, PolygonShape, RectangleShape, CircleShape, SymbolShape, TextShape],
    Field(discriminator="type"),
]

SHAPE_ADAPTER: TypeAdapter = TypeAdapter(Shape)

SHAPE_CLASSES: dict[str, type[ShapeBase]] = {
    tag: cls
    for cls in (LineShape, WallSegment, Opening, PolygonShape, RectangleShape, CircleShape, SymbolShape, TextShape)
    for tag in get_args(cls.model_fields["type"].annotation)
}

OPENING_TYPES = frozenset(get_args(Opening.model_fields["type"].annotation))


def parse_shape(raw: dict[str, Any], wall_defaults: "WallDefaults | None" = None) -> ShapeBase | None:
    """Build a shape from an editor record.

    Returns ``None`` for type tags the kernel does not model (images, bezier
    curves, ...). Raises :class:`ShapeParseError` when a known kind is malformed.
    Walls without a thickness or height take them from ``wall_defaults``.
    """
    tag = raw.get("type")
    cls = SHAPE_CLASSES.get(tag)  # type: ignore[arg-type]
    if cls is None:
        logger.warning("Skipping shape {} with unsupported type {!r}", raw.get("id"), tag)
        return None

    payload = dict(raw)
    if cls is WallSegment and wall_defaults is not None:
        for name, alias in (("thickness_mm", "thicknessMM"), ("height_mm", "heightMM")):
            if payload.get(alias) is None and payload.get(name) is None:
                payload[alias] = getattr(wall_defaults, name)
    coords = payload.pop("coordinates", None)
    try:
        if coords is not None:
            payload.update(cls.coordinates_from_editor(coords))
        return cls.model_validate(payload)
    except (KeyError, TypeError, ValidationError) as exc:
        raise ShapeParseError(
            f"Invalid {tag} shape: {exc}",
            {"id": str(raw.get("id")), "type": str(tag)},
        ) from exc


def parse_shapes(
    records: Iterable[dict[str, Any]],
    *,
    strict: bool = False,
    wall_defaults: "WallDefaults | None" = None,
) -> list[ShapeBase]:
    """Parse editor records, skipping unsupported kinds (and malformed ones unless ``strict``)."""
    shapes: list[ShapeBase] = []
    for raw in records:
        try:
            shape = parse_shape(raw, wall_defaults)
        except ShapeParseError as exc:
            if strict:
                raise
            logger.warning("Skipping malformed shape {}: {}", exc.details.get("id"), exc.message)
            continue
        if shape is not None:
            shapes.append(shape)
    return shapes


def walls_of(shapes: Iterable[ShapeBase]) -> list[WallSegment]:
    return [s for s in shapes if isinstance(s, WallSegment)]


def openings_of(shapes: Iterable[ShapeBase]) -> list[Opening]:
    return [s for s in shapes if isinstance(s, Opening)]


__all__ = [
    "Bounds",
    "CircleShape",
    "Dimensions3D",
    "LineShape",
    "OPENING_TYPES",
    "Opening",
    "OpeningKind",
    "Point",
    "PolygonShape",
    "Position3D",
    "RectangleShape",
    "SHAPE_ADAPTER",
    "SHAPE_CLASSES",
    "Shape",
    "ShapeBase",
    "SymbolShape",
    "TextShape",
    "ViewState",
    "WallRelativePosition",
    "WallSegment",
    "new_shape_id",
    "parse_shape",
    "parse_shapes",
    "walls_of",
    "openings_of",
]
