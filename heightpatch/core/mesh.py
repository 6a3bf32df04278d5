"""
Uniform triangle mesh tessellation of a height field.

Vertices follow the control-grid layout: row ``r`` is the ``v`` (y) index,
column ``c`` the ``u`` (x) index, and vertex ``r * nu + c`` sits at
``(x_c, y_r, f(x_c, y_r))``. Every grid cell is split along its
low-to-high diagonal into

    A = (r, c), (r, c+1), (r+1, c+1)
    B = (r, c), (r+1, c+1), (r+1, c)

Normals are flat per triangle. ``normal_mode="constant"`` reports the up
vector (0, 0, 1) for every face, which only approximates near-flat fields;
``normal_mode="face"`` computes the true face normal.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from heightpatch.core import config
from heightpatch.core.errors import ComputationError, ValidationError
from heightpatch.core.sampling import (
    HeightFunction,
    SamplingSpec,
    resolve_height_function,
    sample_heights,
)
from heightpatch.utils.log import default_logger_func

INDEX_BASES = (0, 1)
NORMAL_MODES = ("constant", "face")
UP = np.array([0.0, 0.0, 1.0])


@dataclass(frozen=True, eq=False)
class MeshBuffers:
    vertices: np.ndarray = field(repr=False)
    triangle_indices: np.ndarray = field(repr=False)
    normals: np.ndarray = field(repr=False)
    index_base: int = config.DEFAULT_INDEX_BASE
    resolution: tuple[int, int] = (0, 0)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangle_indices)

    def flat_vertices(self) -> np.ndarray:
        return self.vertices.reshape(-1).copy()

    def flat_indices(self) -> np.ndarray:
        return self.triangle_indices.reshape(-1).copy()

    def flat_normals(self) -> np.ndarray:
        return self.normals.reshape(-1).copy()

    def zero_based_faces(self) -> np.ndarray:
        return self.triangle_indices - self.index_base


def triangulate_grid(nu: int, nv: int, index_base: int = 0) -> np.ndarray:
    """
    Index triples for a ``nu x nv`` vertex lattice.

    Returns:
        ``(2 * (nu-1) * (nv-1), 3)`` int array, A and B of each cell adjacent
    """
    r, c = np.mgrid[0:nv - 1, 0:nu - 1]
    t0 = (r * nu + c).ravel()   # (r, c)
    t1 = t0 + nu                # (r+1, c)

    faces = np.empty((len(t0), 2, 3), dtype=np.int64)
    faces[:, 0] = np.stack([t0, t0 + 1, t1 + 1], axis=1)
    faces[:, 1] = np.stack([t0, t1 + 1, t1], axis=1)
    return faces.reshape(-1, 3) + index_base


def face_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """
    Unit normals ``(p1 - p0) x (p2 - p0)`` for zero-based faces.

    Raises:
        ComputationError: if a triangle is degenerate
    """
    p0 = vertices[faces[:, 0]]
    p1 = vertices[faces[:, 1]]
    p2 = vertices[faces[:, 2]]
    normals = np.cross(p1 - p0, p2 - p0)
    lengths = np.linalg.norm(normals, axis=1)
    degenerate = lengths <= config.NORMAL_EPSILON
    if np.any(degenerate):
        raise ComputationError(f"{int(degenerate.sum())} degenerate triangles have no normal")
    return normals / lengths[:, None]


def generate_mesh_buffers(spec: SamplingSpec,
                          height_fn: HeightFunction | str | None = None,
                          index_base: int = config.DEFAULT_INDEX_BASE,
                          normal_mode: str = config.DEFAULT_NORMAL_MODE,
                          logger_func: Callable[[str], None] | None = None) -> MeshBuffers:
    """
    Tessellate a height function over ``spec``.

    Args:
        spec: Lattice resolution and extents (at least 2 x 2)
        height_fn: Callable ``(x, y) -> z`` or registered name; defaults to
            ``config.DEFAULT_MESH_HEIGHT_FUNCTION``
        index_base: 0 or 1, added to every emitted vertex index
        normal_mode: "constant" or "face"
        logger_func: Logging callable

    Returns:
        MeshBuffers
    """
    log = logger_func or default_logger_func("mesh")
    if isinstance(index_base, bool) or index_base not in INDEX_BASES:
        raise ValidationError(f"index_base must be 0 or 1, got {index_base!r}")
    if normal_mode not in NORMAL_MODES:
        raise ValidationError(f"Unknown normal mode {normal_mode!r}; expected one of {NORMAL_MODES}")
    spec.require_min_points(config.MIN_MESH_POINTS, "mesh")
    height = resolve_height_function(height_fn, default=config.DEFAULT_MESH_HEIGHT_FUNCTION)

    t0 = time.perf_counter()
    vertices = sample_heights(spec, height)
    faces = triangulate_grid(spec.nu, spec.nv)

    if normal_mode == "face":
        normals = face_normals(vertices, faces)
    else:
        normals = np.tile(UP, (len(faces), 1))

    if config.DEBUG_WORKER_LOGGING:
        log(f"[DEBUG] Tessellated {spec.nu} x {spec.nv} grid into {len(faces)} triangles "
            f"in {time.perf_counter() - t0:.4f} sec")

    indices = faces + index_base
    for arr in (vertices, indices, normals):
        arr.setflags(write=False)
    return MeshBuffers(
        vertices=vertices,
        triangle_indices=indices,
        normals=normals,
        index_base=int(index_base),
        resolution=(spec.nu, spec.nv),
    )
