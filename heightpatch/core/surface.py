"""
B-spline surface descriptors for sampled height fields.

The control grid is the sampled lattice itself, paired with one knot vector
per direction. The surface is cubic in both directions and non-periodic.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from heightpatch.core import config
from heightpatch.core.errors import ValidationError
from heightpatch.core.sampling import (
    ControlGrid,
    HeightFunction,
    SamplingSpec,
    resolve_height_function,
    sample_control_grid,
)
from heightpatch.utils import bspline_helper
from heightpatch.utils.log import default_logger_func


@dataclass(frozen=True, eq=False)
class SurfaceDescriptor:
    """
    Non-periodic cubic tensor-product B-spline surface, ready for a geometry kernel.

    An empty ``weights`` array means every control point is weighted equally.
    """

    control_grid: ControlGrid = field(repr=False)
    u_knots: np.ndarray = field(repr=False)
    v_knots: np.ndarray = field(repr=False)
    weights: np.ndarray = field(repr=False)
    order: tuple[int, int] = config.SURFACE_ORDER
    periodic: tuple[bool, bool] = config.SURFACE_PERIODIC
    degree: int = config.DEGREE

    @property
    def nu(self) -> int:
        return self.control_grid.nu

    @property
    def nv(self) -> int:
        return self.control_grid.nv

    @property
    def is_rational(self) -> bool:
        return len(self.weights) > 0


def _frozen_array(values) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    arr.setflags(write=False)
    return arr


def assemble_surface_descriptor(grid: ControlGrid, u_knots, v_knots, weights=None) -> SurfaceDescriptor:
    """
    Package a control grid and its knot vectors into a surface descriptor.

    Args:
        grid: Sampled control grid
        u_knots: Knot vector along u
        v_knots: Knot vector along v
        weights: Optional per-point weights; None or empty means unweighted

    Returns:
        SurfaceDescriptor

    Raises:
        ValidationError: if a knot vector does not fit its grid dimension or
            the weights are malformed
    """
    degree = config.DEGREE
    u_knots = bspline_helper.validate_knot_vector(u_knots, grid.nu, degree, label="u knot vector")
    v_knots = bspline_helper.validate_knot_vector(v_knots, grid.nv, degree, label="v knot vector")

    weight_arr = np.zeros(0) if weights is None else np.asarray(weights, dtype=float).reshape(-1)
    if len(weight_arr) > 0:
        if len(weight_arr) != grid.nu * grid.nv:
            raise ValidationError(
                f"Expected {grid.nu * grid.nv} weights for a {grid.nu} x {grid.nv} grid, "
                f"got {len(weight_arr)}"
            )
        if not np.all(np.isfinite(weight_arr)) or np.any(weight_arr <= 0.0):
            raise ValidationError("Weights must be positive finite values")

    return SurfaceDescriptor(
        control_grid=grid,
        u_knots=_frozen_array(u_knots),
        v_knots=_frozen_array(v_knots),
        weights=_frozen_array(weight_arr),
    )


def generate_surface_descriptor(spec: SamplingSpec,
                                height_fn: HeightFunction | str | None = None,
                                knot_style: str = config.DEFAULT_KNOT_STYLE,
                                weights=None,
                                logger_func: Callable[[str], None] | None = None) -> SurfaceDescriptor:
    """
    Sample a height function and build the B-spline surface descriptor.

    Args:
        spec: Lattice resolution and extents (at least 4 x 4)
        height_fn: Callable ``(x, y) -> z`` or registered name; defaults to
            ``config.DEFAULT_SURFACE_HEIGHT_FUNCTION``
        knot_style: "clamped" (default) or "uniform"
        weights: Optional per-point weights
        logger_func: Logging callable

    Returns:
        SurfaceDescriptor
    """
    log = logger_func or default_logger_func("surface")
    spec.require_min_points(config.MIN_SURFACE_POINTS, "surface")
    height = resolve_height_function(height_fn, default=config.DEFAULT_SURFACE_HEIGHT_FUNCTION)

    # Knot style is checked before sampling
    u_knots = bspline_helper.knot_vector_for_style(spec.nu, knot_style)
    v_knots = bspline_helper.knot_vector_for_style(spec.nv, knot_style)

    t0 = time.perf_counter()
    grid = sample_control_grid(spec, height)
    if config.DEBUG_WORKER_LOGGING:
        log(f"[DEBUG] Sampled {spec.nu} x {spec.nv} control grid in {time.perf_counter() - t0:.4f} sec")

    return assemble_surface_descriptor(grid, u_knots, v_knots, weights)
