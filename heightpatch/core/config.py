"""Central project configuration constants.

This module gathers default sampling parameters and hand-off settings used
across the height-field patch library so they live in one place.
Import these values instead of hard-coding magic numbers inside
algorithms or collaborators.
"""
from __future__ import annotations

# B-spline settings
DEGREE: int = 3
SURFACE_ORDER: tuple[int, int] = (3, 3)  # Order as reported to the geometry kernel
SURFACE_PERIODIC: tuple[bool, bool] = (False, False)
MIN_SURFACE_POINTS: int = DEGREE + 1  # Fewest control points per direction for the surface path
MIN_MESH_POINTS: int = 2  # Fewest vertices per direction for the mesh path
DEFAULT_KNOT_STYLE: str = "clamped"  # "clamped" (degree+1 at both ends) or "uniform" (three-fold start)

# ---- Sampling ----------------------------------------------------------
DEFAULT_SURFACE_RESOLUTION: int = 100
DEFAULT_MESH_RESOLUTION: int = 512
DEFAULT_EXTENT: float = 10.0  # Domain side length in cm
DEFAULT_AMPLITUDE: float = 0.3
DEFAULT_SURFACE_HEIGHT_FUNCTION: str = "cosine_ripple"
DEFAULT_MESH_HEIGHT_FUNCTION: str = "sine_ripple"

# ---- Mesh output -------------------------------------------------------
DEFAULT_INDEX_BASE: int = 1  # Host display APIs expect 1-based indices
DEFAULT_NORMAL_MODE: str = "constant"  # "constant" keeps (0, 0, 1); "face" uses true face normals
NORMAL_EPSILON: float = 1e-12

# ---- DXF hand-off ------------------------------------------------------
DXF_VERSION: str = "R2010"
DXF_UNITS: int = 5  # Centimeters
DXF_SURFACE_LAYER: str = "SURFACE"
DXF_BOUNDARY_LAYER: str = "BOUNDARY"
DXF_MESH_LAYER: str = "MESH"
DXF_POLYMESH_CUBIC_BSPLINE: int = 6  # POLYLINE smooth surface type for cubic B-spline

# Debug and logging settings
DEBUG_WORKER_LOGGING: bool = False  # Enable detailed debug logging for sampling and hand-off steps
