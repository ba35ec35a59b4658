"""Coordinate systems, units and geometric constants."""
