"""
Bounded-body definition for a four-sided surface patch.

Pairs a ``SurfaceDescriptor`` with the corner vertices, boundary edges and
the edge-use loop a geometry kernel needs to build a single-face surface
body.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from heightpatch.core.boundary import (
    BOUNDARY_ORDER,
    BoundaryCurve,
    corner_points,
    extract_boundary_curves,
)
from heightpatch.core.errors import ValidationError
from heightpatch.core.surface import SurfaceDescriptor

# Edge uses of the face loop as (edge index, forward), walking u0, vN, uN, v0.
# The two reversed edges are used against their stored direction.
FACE_LOOP: tuple[tuple[int, bool], ...] = ((3, False), (2, False), (1, True), (0, True))


@dataclass(frozen=True)
class EdgeDefinition:
    start_corner: int
    end_corner: int
    curve: BoundaryCurve


@dataclass(frozen=True, eq=False)
class SurfaceBodyDefinition:
    descriptor: SurfaceDescriptor = field(repr=False)
    curves: dict = field(repr=False)
    corners: np.ndarray = field(repr=False)
    edges: tuple[EdgeDefinition, ...]
    loop: tuple[tuple[int, bool], ...] = FACE_LOOP

    def ordered_curves(self) -> list[BoundaryCurve]:
        return [self.curves[name] for name in BOUNDARY_ORDER]


def build_body_definition(descriptor: SurfaceDescriptor) -> SurfaceBodyDefinition:
    """
    Derive corners, edges and the face loop from a surface descriptor.

    Edge ``i`` runs from corner ``i`` to corner ``i + 1`` (mod 4) along the
    boundary curve ``BOUNDARY_ORDER[i]``. Both knot vectors must be clamped at
    each end, otherwise the edge curves would not pass through the corners.
    """
    degree = descriptor.degree
    for label, knots in (("u", descriptor.u_knots), ("v", descriptor.v_knots)):
        if np.any(knots[:degree + 1] != 0.0) or np.any(knots[-(degree + 1):] != 1.0):
            raise ValidationError(
                f"The {label} knot vector must be clamped at both ends to bound a body "
                f"(knot_style=\"clamped\")"
            )

    curves = extract_boundary_curves(descriptor.control_grid, descriptor.u_knots, descriptor.v_knots)
    corners = corner_points(descriptor.control_grid)
    corners.setflags(write=False)

    edges = []
    for i, name in enumerate(BOUNDARY_ORDER):
        j = (i + 1) % len(BOUNDARY_ORDER)
        curve = curves[name]
        if not (np.array_equal(curve.start, corners[i]) and np.array_equal(curve.end, corners[j])):
            raise ValidationError(f"Boundary curve {name} does not join corners {i} and {j}")
        edges.append(EdgeDefinition(i, j, curve))

    return SurfaceBodyDefinition(
        descriptor=descriptor,
        curves=curves,
        corners=corners,
        edges=tuple(edges),
    )
