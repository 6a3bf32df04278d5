"""
ezdxf-backed collaborators.

These implement the geometry kernel, mesh display and transaction
capabilities on an in-memory DXF document, so surface and mesh output can
be handed to any DXF-reading CAD package.
"""
from __future__ import annotations

import itertools

import ezdxf

from heightpatch.core import config
from heightpatch.core.boundary import BoundaryCurve
from heightpatch.core.body import SurfaceBodyDefinition
from heightpatch.core.errors import CollaboratorError
from heightpatch.core.mesh import MeshBuffers
from heightpatch.core.surface import SurfaceDescriptor
from heightpatch.utils.log import default_logger_func


def new_document(dxfversion: str = config.DXF_VERSION):
    """Create an empty DXF document in Fusion/Inventor internal units (cm)."""
    doc = ezdxf.new(dxfversion)
    doc.header["$INSUNITS"] = config.DXF_UNITS
    return doc


def _point_tuples(points):
    return [tuple(float(c) for c in pt) for pt in points]


class DxfGeometryKernel:
    """
    Materializes surface descriptors and boundary curves as DXF entities.

    Boundary curves become open SPLINE entities with their explicit knot
    vectors. The surface becomes a POLYLINE polymesh over the control grid
    flagged as a cubic B-spline smooth surface. The body is a DXF group
    holding the surface and its four edges.
    """

    def __init__(self, doc=None, logger_func=None):
        self.doc = doc if doc is not None else new_document()
        self.msp = self.doc.modelspace()
        self.logger_func = logger_func or default_logger_func("dxf")
        self._body_ids = itertools.count(1)

    def create_curve(self, curve: BoundaryCurve):
        knots = curve.knots.tolist() if hasattr(curve.knots, 'tolist') else list(curve.knots)
        spline = self.msp.add_open_spline(
            control_points=_point_tuples(curve.points),
            degree=config.DEGREE,
            knots=knots,
            dxfattribs={'layer': config.DXF_BOUNDARY_LAYER},
        )
        return spline

    def create_surface(self, descriptor: SurfaceDescriptor):
        if descriptor.is_rational:
            raise CollaboratorError("DXF polymesh surfaces cannot carry control point weights")
        grid = descriptor.control_grid
        lattice = grid.as_lattice()
        polymesh = self.msp.add_polymesh(
            size=(grid.nu, grid.nv),
            dxfattribs={
                'layer': config.DXF_SURFACE_LAYER,
                'smooth_type': config.DXF_POLYMESH_CUBIC_BSPLINE,
            },
        )
        for v in range(grid.nv):
            for u in range(grid.nu):
                polymesh.set_mesh_vertex((u, v), tuple(float(c) for c in lattice[v, u]))
        return polymesh

    def create_body(self, body: SurfaceBodyDefinition, surface, curves: dict):
        if surface is None:
            return None
        name = f"HEIGHTPATCH_BODY_{next(self._body_ids)}"
        group = self.doc.groups.new(name, description="Bounded B-spline surface patch")
        group.set_data([surface] + [curves[curve.name] for curve in body.ordered_curves()])
        if config.DEBUG_WORKER_LOGGING:
            self.logger_func(f"[DEBUG] Created group {name} with {len(group)} entities")
        return group


class DxfMeshDisplay:
    """
    Display capability that renders mesh buffers as DXF MESH entities.

    The handle of a materialized mesh is the entity's DXF handle; releasing
    it deletes the entity.
    """

    def __init__(self, doc=None, layer: str = config.DXF_MESH_LAYER, logger_func=None):
        self.doc = doc if doc is not None else new_document()
        self.msp = self.doc.modelspace()
        self.layer = layer
        self.logger_func = logger_func or default_logger_func("dxf")
        self._entities = {}

    @property
    def live_handles(self) -> list:
        return list(self._entities)

    def materialize(self, buffers: MeshBuffers):
        mesh = self.msp.add_mesh(dxfattribs={'layer': self.layer})
        with mesh.edit_data() as data:
            data.vertices = _point_tuples(buffers.vertices)
            data.faces = buffers.zero_based_faces().tolist()
        handle = mesh.dxf.handle
        self._entities[handle] = mesh
        return handle

    def release(self, handle) -> None:
        mesh = self._entities.pop(handle, None)
        if mesh is None:
            raise CollaboratorError(f"No mesh resources recorded for handle {handle!r}")
        self.msp.delete_entity(mesh)


class DxfTransaction:
    def __init__(self, doc, name: str, logger_func):
        self.doc = doc
        self.name = name
        self.logger_func = logger_func
        self._entity_handles = {e.dxf.handle for e in doc.modelspace()}
        self._group_names = {group_name for group_name, _ in doc.groups}
        self.closed = False

    def end(self) -> None:
        self.closed = True

    def abort(self) -> None:
        """Delete every group and modelspace entity added since the transaction started."""
        for group_name in [n for n, _ in self.doc.groups if n not in self._group_names]:
            self.doc.groups.delete(group_name)
        msp = self.doc.modelspace()
        added = [e for e in msp if e.dxf.handle not in self._entity_handles]
        for entity in added:
            msp.delete_entity(entity)
        self.logger_func(f"Transaction '{self.name}' rolled back {len(added)} entities")
        self.closed = True


class DxfTransactionManager:
    def __init__(self, doc, logger_func=None):
        self.doc = doc
        self.logger_func = logger_func or default_logger_func("dxf")

    def start_transaction(self, name: str) -> DxfTransaction:
        return DxfTransaction(self.doc, name, self.logger_func)
