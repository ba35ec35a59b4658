"""floorcore - geometry kernel for an interactive floor-plan editor.

Pure, synchronous functions over a list of plan shapes: coordinate
conversion, wall connectivity, merging and splitting, outline unions,
3D projection and template placement.
"""

from .exceptions import FloorCoreError
from .geometry.primitives import Bounds, Point
from .model import ChangeSet, Opening, ViewState, WallSegment, parse_shapes
from .settings import KernelSettings, get_settings

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "ChangeSet",
    "FloorCoreError",
    "KernelSettings",
    "Opening",
    "Point",
    "ViewState",
    "WallSegment",
    "get_settings",
    "parse_shapes",
    "__version__",
]
