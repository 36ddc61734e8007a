"""Math utilities for timeline arithmetic."""

from __future__ import annotations

from typing import TypeVar

Number = TypeVar("Number", int, float)

# Decimal places kept after grid snapping.  Keeps values such as
# 3 * 0.1 from drifting to 0.30000000000000004.
_GRID_DECIMALS = 6


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def snap_to_grid(value: float, step: float) -> float:
    """Round a time value to the nearest multiple of ``step``.

    Args:
        value: Time in seconds.
        step: Grid spacing in seconds (must be positive).

    Returns:
        Snapped time, rounded to a stable number of decimals.

    Example:
        >>> snap_to_grid(1.26, 0.1)
        1.3
    """
    if step <= 0:
        return round(value, _GRID_DECIMALS)
    return round(round(value / step) * step, _GRID_DECIMALS)
