"""Cubic B-spline surface and triangle mesh approximations of height fields."""

from heightpatch.core.body import SurfaceBodyDefinition, build_body_definition
from heightpatch.core.boundary import BoundaryCurve, extract_boundary_curves
from heightpatch.core.errors import (
    CollaboratorError,
    ComputationError,
    HeightPatchError,
    ValidationError,
)
from heightpatch.core.mesh import MeshBuffers, generate_mesh_buffers
from heightpatch.core.sampling import ControlGrid, SamplingSpec, sample_control_grid
from heightpatch.core.surface import SurfaceDescriptor, generate_surface_descriptor
from heightpatch.logic.mesh_toggle import MeshToggleController
from heightpatch.logic.state import Hide, Show, ToggleState
from heightpatch.logic.surface_builder import create_surface_body
from heightpatch.utils.log import setup_logging

__version__ = "0.1.0"
