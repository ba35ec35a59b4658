"""Outline computation for drawing walls."""
