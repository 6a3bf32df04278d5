"""
B-spline helper functions for height-field patches.

This module contains utility functions for B-spline operations including:
- Knot vector generation (fully clamped and uniform)
- Knot vector validation
"""

from __future__ import annotations

import numpy as np

from heightpatch.core import config
from heightpatch.core.errors import ValidationError

KNOT_STYLES = ("clamped", "uniform")


def _check_control_point_count(num_control_points: int, degree: int) -> None:
    if isinstance(num_control_points, bool) or not isinstance(num_control_points, (int, np.integer)):
        raise ValidationError(f"Control point count must be an integer, got {num_control_points!r}")
    if num_control_points < degree + 1:
        raise ValidationError(
            f"A degree-{degree} knot vector needs at least {degree + 1} control points, "
            f"got {num_control_points}"
        )


def create_uniform_knot_vector(num_control_points: int, degree: int = config.DEGREE) -> np.ndarray:
    """
    Create the three-fold-start uniform knot vector (knot_style="uniform").

    The first ``degree`` entries are 0.0, entries ``degree .. N-1`` are the
    equally spaced interior knots ``(i - degree + 1) / (N - degree + 1)`` and
    the trailing ``degree + 1`` entries are 1.0, for a total length of
    ``N + degree + 1``.

    Only the end is clamped, so a curve on this vector ends on its last
    control point but does not start on its first one.

    Args:
        num_control_points: Number of control points (N)
        degree: B-spline degree

    Returns:
        Knot vector of length N + degree + 1
    """
    _check_control_point_count(num_control_points, degree)
    n = int(num_control_points)
    p = int(degree)

    knot_vector = np.ones(n + p + 1)
    knot_vector[:p] = 0.0
    spans = n - p + 1
    for i in range(p, n):
        knot_vector[i] = (i - p + 1) / spans
    return knot_vector


def create_knot_vector(num_control_points: int, degree: int = config.DEGREE) -> np.ndarray:
    """
    Create clamped knot vector, the default for surface hand-off.

    Args:
        num_control_points: Number of control points
        degree: B-spline degree

    Returns:
        Clamped knot vector
    """
    _check_control_point_count(num_control_points, degree)
    n = num_control_points - 1
    p = degree
    num_interior = n - p

    if num_interior <= 0:
        knot_vector = np.concatenate([
            np.zeros(p + 1),
            np.ones(p + 1)
        ])
    else:
        uniform_knots = np.linspace(0.0, 1.0, num_interior + 2)[1:-1]
        knot_vector = np.concatenate([
            np.zeros(p + 1),
            uniform_knots,
            np.ones(p + 1)
        ])
    return knot_vector


def knot_vector_for_style(num_control_points: int, knot_style: str = config.DEFAULT_KNOT_STYLE,
                          degree: int = config.DEGREE) -> np.ndarray:
    """Build a knot vector using one of the named ``KNOT_STYLES``."""
    if knot_style == "uniform":
        return create_uniform_knot_vector(num_control_points, degree)
    if knot_style == "clamped":
        return create_knot_vector(num_control_points, degree)
    raise ValidationError(f"Unknown knot style {knot_style!r}; expected one of {KNOT_STYLES}")


def expected_knot_count(num_control_points: int, degree: int = config.DEGREE) -> int:
    return int(num_control_points) + int(degree) + 1


def validate_knot_vector(knot_vector, num_control_points: int, degree: int = config.DEGREE,
                         label: str = "knot vector") -> np.ndarray:
    """
    Check a knot vector against the control point count it will be paired with.

    Args:
        knot_vector: Candidate knot vector
        num_control_points: Number of control points along that direction
        degree: B-spline degree
        label: Name used in error messages

    Returns:
        The knot vector as a float array

    Raises:
        ValidationError: on wrong length, values outside [0, 1], decreasing
            values, or missing end clamps
    """
    knots = np.asarray(knot_vector, dtype=float)
    if knots.ndim != 1:
        raise ValidationError(f"{label} must be one-dimensional, got shape {knots.shape}")

    expected = expected_knot_count(num_control_points, degree)
    if len(knots) != expected:
        raise ValidationError(
            f"{label} has {len(knots)} entries, expected {expected} "
            f"for {num_control_points} control points of degree {degree}"
        )
    if not np.all(np.isfinite(knots)):
        raise ValidationError(f"{label} contains non-finite values")
    if knots[0] < 0.0 or knots[-1] > 1.0:
        raise ValidationError(f"{label} must lie in [0, 1]")
    if np.any(np.diff(knots) < 0.0):
        raise ValidationError(f"{label} must be non-decreasing")
    if np.any(knots[:degree] != 0.0) or np.any(knots[-degree:] != 1.0):
        raise ValidationError(f"{label} must start with {degree} zeros and end with {degree} ones")
    return knots
