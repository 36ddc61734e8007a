"""Shared utilities for Castline."""

from castline.core.utils.math import clamp, snap_to_grid

__all__ = [
    "clamp",
    "snap_to_grid",
]
