"""Tests for math utility functions."""

from __future__ import annotations

import pytest

from castline.core.utils.math import clamp, snap_to_grid


def test_clamp_within_range():
    """Test clamping values within range."""
    assert clamp(5, 0, 10) == 5
    assert clamp(0, 0, 10) == 0
    assert clamp(10, 0, 10) == 10


def test_clamp_outside_range():
    """Test clamping values below minimum and above maximum."""
    assert clamp(-5, 0, 10) == 0
    assert clamp(15, 0, 10) == 10


def test_clamp_with_floats():
    """Test clamping with float values."""
    assert clamp(5.5, 0.0, 10.0) == 5.5
    assert clamp(-1.5, 0.0, 10.0) == 0.0
    assert clamp(11.5, 0.0, 10.0) == 10.0


@pytest.mark.parametrize(
    ("value", "step", "expected"),
    [
        (1.26, 0.1, 1.3),
        (1.24, 0.1, 1.2),
        (0.3, 0.1, 0.3),
        (7.0, 0.25, 7.0),
        (7.1, 0.25, 7.0),
        (0.13, 0.05, 0.15),
        (2.4, 1.0, 2.0),
    ],
)
def test_snap_to_grid(value, step, expected):
    """Test snapping to the nearest grid multiple."""
    assert snap_to_grid(value, step) == expected


def test_snap_to_grid_has_no_float_drift():
    """Test that snapped values do not accumulate float error."""
    assert snap_to_grid(3 * 0.1, 0.1) == 0.3
    assert repr(snap_to_grid(0.7, 0.1)) == "0.7"


def test_snap_to_grid_non_positive_step():
    """Test that a non-positive step only rounds."""
    assert snap_to_grid(1.23456789, 0) == 1.234568
