from __future__ import annotations

"""
Geometry Kernel Contract

Single source of truth for geometric thresholds, tolerances, and defaults used
throughout the kernel. All modules should import from here instead of hardcoding.
"""

# All lengths in millimetres, angles in degrees unless noted

# Walls
DEFAULT_WALL_THICKNESS_MM = 150.0
DEFAULT_WALL_HEIGHT_MM = 2400.0

# Connectivity / merging
CONNECT_TOLERANCE_MM = 5.0  # endpoint distance for wall groups
MERGE_POINT_TOLERANCE_MM = 1.0  # per-axis endpoint match for merges
MERGE_ANGLE_TOLERANCE_DEG = 5.0  # direction-agnostic collinearity

# Openings
MIN_SEGMENT_LENGTH_MM = 5.0  # residual wall pieces shorter than this are dropped
GAP_TOLERANCE_MM = 30.0  # gap length / midpoint match for wall gaps
OPENING_SNAP_THRESHOLD_MM = 50.0  # opening midpoint to wall distance
WALL_RELATIVE_THRESHOLD_MM = 500.0  # wall-attached objects

DOOR_HEIGHT_MM = 2100.0
DOOR_SILL_MM = 0.0
WINDOW_HEIGHT_MM = 1200.0
WINDOW_SILL_MM = 900.0

# View
MIN_ZOOM = 0.3
MAX_ZOOM = 5.0
FIT_PADDING_FACTOR = 0.7
FIT_MIN_ZOOM = 0.3
FIT_MAX_ZOOM = 2.0
DEFAULT_SCREEN_DPI = 96.0
MM_PER_INCH = 25.4

# Grid
DEFAULT_GRID_SIZE_MM = 500.0

# Text shapes have no measured extent
TEXT_DEFAULT_WIDTH_MM = 100.0
TEXT_DEFAULT_HEIGHT_MM = 20.0

# Spatial index
SPATIAL_INDEX_MIN_WALLS = 64  # below this a pairwise scan is cheaper

# Library objects drawn freehand are placed as a square of this size
LIBRARY_OBJECT_SIZE_MM = 1000.0
