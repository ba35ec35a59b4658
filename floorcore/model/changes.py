"""Proposed edits returned to the editor's commit layer."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, Field, SerializeAsAny

from floorcore.model.shapes import ShapeBase


class ChangeSet(BaseModel):
    """Shapes to insert or replace, plus ids to delete.

    Kernel operations never mutate the caller's collection; they describe the
    next state and the editor applies it in one step.
    """

    upserts: list[SerializeAsAny[ShapeBase]] = Field(default_factory=list)
    deletes: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.upserts and not self.deletes

    def merge(self, other: "ChangeSet") -> "ChangeSet":
        upserts = {s.id: s for s in self.upserts}
        for shape in other.upserts:
            upserts[shape.id] = shape
        for shape_id in other.deletes:
            upserts.pop(shape_id, None)
        deletes = [d for d in self.deletes if d not in upserts]
        deletes += [d for d in other.deletes if d not in deletes]
        return ChangeSet(upserts=list(upserts.values()), deletes=deletes)

    def apply(self, shapes: Iterable[ShapeBase]) -> list[ShapeBase]:
        """Return ``shapes`` with this change set applied.

        Replaced shapes keep their position; new shapes are appended.
        """
        deleted = set(self.deletes)
        pending = {s.id: s for s in self.upserts}
        result: list[ShapeBase] = []
        for shape in shapes:
            if shape.id in pending:
                result.append(pending.pop(shape.id))
            elif shape.id not in deleted:
                result.append(shape)
        result.extend(pending.values())
        return result
