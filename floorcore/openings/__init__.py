"""Door and window placement on walls."""
