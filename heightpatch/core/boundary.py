"""
Boundary curve extraction for four-sided patches.

The four edges of the control grid are returned in loop order
``v0 -> uN -> vN -> u0`` so that each edge ends where the next begins:

- ``v0``: v = 0, u = 0 .. nu-1
- ``uN``: u = nu-1, v = 0 .. nv-1
- ``vN``: v = nv-1, u = nu-1 .. 0 (reversed)
- ``u0``: u = 0, v = nv-1 .. 0 (reversed)

Each edge keeps the knot vector of the direction it runs along.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from heightpatch.core.errors import ValidationError
from heightpatch.core.sampling import ControlGrid

BOUNDARY_ORDER = ("v0", "uN", "vN", "u0")


@dataclass(frozen=True, eq=False)
class BoundaryCurve:
    name: str
    points: np.ndarray = field(repr=False)
    knots: np.ndarray = field(repr=False)
    direction: str
    reversed: bool = False

    @property
    def start(self) -> np.ndarray:
        return self.points[0]

    @property
    def end(self) -> np.ndarray:
        return self.points[-1]

    def flat_points(self) -> np.ndarray:
        """Poles as a flat ``[x, y, z, x, y, z, ...]`` buffer."""
        return self.points.reshape(-1).copy()


def _readonly(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


def extract_boundary_curves(grid: ControlGrid, u_knots, v_knots) -> dict[str, BoundaryCurve]:
    """
    Extract the four boundary edges of ``grid``.

    Args:
        grid: Control grid of ``nu x nv`` points
        u_knots: Knot vector along u (length nu + degree + 1)
        v_knots: Knot vector along v (length nv + degree + 1)

    Returns:
        Dict of BoundaryCurve keyed by edge name, in loop order
    """
    lattice = grid.as_lattice()  # [v, u]
    u_knots = np.asarray(u_knots, dtype=float)
    v_knots = np.asarray(v_knots, dtype=float)
    if len(u_knots) - grid.nu != len(v_knots) - grid.nv:
        raise ValidationError(
            f"Knot vectors of length {len(u_knots)} and {len(v_knots)} do not match "
            f"a {grid.nu} x {grid.nv} grid of one degree"
        )

    curves = [
        BoundaryCurve("v0", _readonly(lattice[0, :]), _readonly(u_knots), "u"),
        BoundaryCurve("uN", _readonly(lattice[:, grid.nu - 1]), _readonly(v_knots), "v"),
        BoundaryCurve("vN", _readonly(lattice[grid.nv - 1, ::-1]), _readonly(u_knots), "u", reversed=True),
        BoundaryCurve("u0", _readonly(lattice[::-1, 0]), _readonly(v_knots), "v", reversed=True),
    ]
    return {curve.name: curve for curve in curves}


def corner_points(grid: ControlGrid) -> np.ndarray:
    """Corners in loop order: (0, 0), (nu-1, 0), (nu-1, nv-1), (0, nv-1)."""
    return np.array([
        grid.point(0, 0),
        grid.point(grid.nu - 1, 0),
        grid.point(grid.nu - 1, grid.nv - 1),
        grid.point(0, grid.nv - 1),
    ])


def boundary_loop_is_closed(curves: dict[str, BoundaryCurve], tol: float = 0.0) -> bool:
    """True if every edge ends where the next one in the loop begins."""
    for i, name in enumerate(BOUNDARY_ORDER):
        next_name = BOUNDARY_ORDER[(i + 1) % len(BOUNDARY_ORDER)]
        if not np.allclose(curves[name].end, curves[next_name].start, rtol=0.0, atol=tol):
            return False
    return True
