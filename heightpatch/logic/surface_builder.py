"""
Surface body creation through a geometry kernel.

Generates the descriptor and body definition for a height field, then asks
the kernel for the four boundary curves, the surface and the bounded body
inside a single transaction.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable

from heightpatch.core import config
from heightpatch.core.body import SurfaceBodyDefinition, build_body_definition
from heightpatch.core.sampling import HeightFunction, SamplingSpec
from heightpatch.core.surface import generate_surface_descriptor
from heightpatch.logic.collaborators import (
    GeometryKernel,
    TransactionManager,
    call_collaborator,
    transaction_scope,
)
from heightpatch.utils.log import default_logger_func

TRANSACTION_NAME = "Create B-Spline Surface"


@dataclass
class SurfaceBodyResult:
    body: Any
    surface: Any
    curves: dict
    definition: SurfaceBodyDefinition = field(repr=False)
    timings: dict = field(default_factory=dict)


def create_surface_body(spec: SamplingSpec,
                        kernel: GeometryKernel,
                        transactions: TransactionManager,
                        height_fn: HeightFunction | str | None = None,
                        knot_style: str = config.DEFAULT_KNOT_STYLE,
                        logger_func: Callable[[str], None] | None = None) -> SurfaceBodyResult:
    """
    Build a bounded B-spline surface body for a height field.

    Validation and sampling run before the transaction starts. Any kernel
    failure aborts the transaction and surfaces as CollaboratorError.

    Args:
        spec: Lattice resolution and extents
        kernel: Geometry kernel capability
        transactions: Transaction capability scoping the kernel edits
        height_fn: Callable or registered height function name
        knot_style: Knot style; a bounded body needs "clamped"
        logger_func: Logging callable

    Returns:
        SurfaceBodyResult with the kernel's body, surface and curve objects
    """
    log = logger_func or default_logger_func("surface_builder")
    t0 = time.perf_counter()

    descriptor = generate_surface_descriptor(spec, height_fn, knot_style=knot_style, logger_func=log)
    definition = build_body_definition(descriptor)

    with transaction_scope(transactions, TRANSACTION_NAME, logger_func=log):
        curves = {}
        for curve in definition.ordered_curves():
            curves[curve.name] = call_collaborator(
                f"Boundary curve {curve.name} creation", kernel.create_curve, curve, logger_func=log
            )
        surface = call_collaborator("Surface creation", kernel.create_surface, descriptor, logger_func=log)

        t1 = time.perf_counter()
        body = call_collaborator("Surface body creation", kernel.create_body, definition, surface, curves,
                                 logger_func=log)
        t2 = time.perf_counter()

    t_final = time.perf_counter()
    timings = {
        "before_body": t1 - t0,
        "body": t2 - t1,
        "after_body": t_final - t2,
    }
    log(f"Time before body creation: {timings['before_body']:.4f} sec")
    log(f"Body creation time: {timings['body']:.4f} sec")
    log(f"Time after body creation: {timings['after_body']:.4f} sec")

    return SurfaceBodyResult(body=body, surface=surface, curves=curves,
                             definition=definition, timings=timings)
