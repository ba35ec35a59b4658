"""Bounds, placement and group resizing for templates (reusable shape groups)."""

from __future__ import annotations

import uuid
from typing import Iterable, List, Literal, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from floorcore.exceptions import GeometryError
from floorcore.geometry.primitives import Bounds, Point
from floorcore.model.shapes import Shape, ShapeBase, new_shape_id

TemplateCategory = Literal[
    "walls",
    "bathroom",
    "kitchen",
    "electrical",
    "furniture",
    "doors_windows",
    "stairs",
    "structural",
    "other",
]


class Template(BaseModel):
    """Named group of shapes stored relative to its own bounding box."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_shape_id)
    name: str
    description: Optional[str] = None
    category: TemplateCategory = "other"
    project_id: Optional[str] = Field(None, alias="projectId")
    tags: List[str] = Field(default_factory=list)
    shapes: List[Shape] = Field(default_factory=list)

    @property
    def bounds(self) -> Bounds:
        return calculate_bounds(self.shapes)

    @classmethod
    def from_shapes(cls, name: str, shapes: Iterable[ShapeBase], **fields) -> "Template":
        """Build a template from plan shapes, normalised so its bounds start at the origin."""
        return cls(name=name, shapes=normalize_shapes(shapes), **fields)


def calculate_bounds(shapes: Iterable[ShapeBase]) -> Bounds:
    """Union of the shapes' bounding boxes; zero bounds when nothing has extent."""
    result: Optional[Bounds] = None
    for shape in shapes:
        box = shape.bounding_box()
        if box is None:
            continue
        result = box if result is None else result.union(box)
    return result if result is not None else Bounds.empty()


def normalize_shapes(shapes: Iterable[ShapeBase]) -> List[ShapeBase]:
    shapes = list(shapes)
    bounds = calculate_bounds(shapes)
    return [s.translate(-bounds.min_x, -bounds.min_y) for s in shapes]


def place_template_shapes(
    template: Template | Iterable[ShapeBase],
    position: Point,
    plan_id: str,
) -> List[ShapeBase]:
    """Copies of the template's shapes with their bounds' top-left at ``position``.

    Every copy gets a fresh id, ``plan_id`` and one shared new group id.
    """
    shapes = list(template.shapes if isinstance(template, Template) else template)
    if not shapes:
        return []

    bounds = calculate_bounds(shapes)
    dx = position.x - bounds.min_x
    dy = position.y - bounds.min_y
    group_id = str(uuid.uuid4())

    placed = []
    for shape in shapes:
        moved = shape.translate(dx, dy)
        placed.append(moved.model_copy(update={"id": new_shape_id(), "plan_id": plan_id, "group_id": group_id}))
    logger.debug("Placed {} template shapes at ({}, {}) offset ({}, {})", len(placed), position.x, position.y, dx, dy)
    return placed


def transform_group(
    shapes: Iterable[ShapeBase],
    *,
    scale_x: float = 1.0,
    scale_y: float = 1.0,
    rotation: float = 0.0,
    dx: float = 0.0,
    dy: float = 0.0,
    center: Optional[Point] = None,
) -> List[ShapeBase]:
    """Scale and rotate (radians) every shape about ``center``, then move by ``(dx, dy)``.

    ``center`` defaults to the centre of the group's bounds.
    """
    if scale_x <= 0 or scale_y <= 0:
        raise GeometryError(
            "Scale factors must be positive",
            {"scale_x": str(scale_x), "scale_y": str(scale_y)},
        )
    shapes = list(shapes)
    if center is None:
        center = calculate_bounds(shapes).center
    return [s.transform_about(center, scale_x, scale_y, rotation, dx, dy) for s in shapes]


def resize_group_about_center(
    shapes: Iterable[ShapeBase],
    scale_x: float,
    scale_y: float,
    center: Optional[Point] = None,
) -> List[ShapeBase]:
    return transform_group(shapes, scale_x=scale_x, scale_y=scale_y, center=center)
