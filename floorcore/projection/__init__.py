"""3D and wall-relative projections of plan geometry."""
