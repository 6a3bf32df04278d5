"""
Show/hide toggle for the interactive mesh preview.

The first ``invoke()`` tessellates the height field and asks the display to
materialize it; the next one releases those resources again. The controller
never holds more than one mesh.
"""
from __future__ import annotations

import threading
import time
from typing import Callable

from heightpatch.core import config
from heightpatch.core.mesh import generate_mesh_buffers
from heightpatch.core.sampling import HeightFunction, SamplingSpec
from heightpatch.logic.collaborators import MeshDisplay, call_collaborator
from heightpatch.logic.state import DisplayAction, DisplayResources, Hide, Show, ToggleState
from heightpatch.utils.log import default_logger_func


class MeshToggleController:
    """
    Two-state machine (ABSENT / PRESENT) owning one display handle.

    Calls are serialized with a lock so a host invoking the toggle from
    several threads still sees strict alternation.
    """

    def __init__(self, display: MeshDisplay,
                 spec: SamplingSpec | None = None,
                 height_fn: HeightFunction | str | None = None,
                 index_base: int = config.DEFAULT_INDEX_BASE,
                 normal_mode: str = config.DEFAULT_NORMAL_MODE,
                 logger_func: Callable[[str], None] | None = None):
        self.display = display
        self.spec = spec or SamplingSpec.square(config.DEFAULT_MESH_RESOLUTION, config.DEFAULT_EXTENT)
        self.height_fn = height_fn
        self.index_base = index_base
        self.normal_mode = normal_mode
        self.logger_func = logger_func or default_logger_func("toggle")
        self._resources = DisplayResources()
        self._lock = threading.Lock()

    @property
    def state(self) -> ToggleState:
        return self._resources.state

    @property
    def handle(self):
        return self._resources.handle

    @property
    def held_count(self) -> int:
        return self._resources.held_count

    def invoke(self) -> DisplayAction:
        """Show the mesh if it is absent, otherwise hide it."""
        with self._lock:
            if self._resources.state is ToggleState.PRESENT:
                return self._hide()
            return self._show()

    def reset(self) -> Hide | None:
        """Release any held mesh, e.g. when the host command is destroyed."""
        with self._lock:
            if self._resources.state is ToggleState.PRESENT:
                return self._hide()
            return None

    def _show(self) -> Show:
        t0 = time.perf_counter()
        buffers = generate_mesh_buffers(
            self.spec, self.height_fn,
            index_base=self.index_base,
            normal_mode=self.normal_mode,
            logger_func=self.logger_func,
        )
        t1 = time.perf_counter()
        handle = call_collaborator("Mesh materialization", self.display.materialize, buffers,
                                   logger_func=self.logger_func)
        t2 = time.perf_counter()

        self._resources.record(handle)
        self.logger_func(
            f"N = {self.spec.nu} x {self.spec.nv}, {buffers.triangle_count} triangles; "
            f"tessellation {t1 - t0:.4f} sec, materialization {t2 - t1:.4f} sec"
        )
        return Show(buffers, handle)

    def _hide(self) -> Hide:
        handle = self._resources.handle
        # A failed release leaves the handle recorded
        call_collaborator("Mesh release", self.display.release, handle,
                          logger_func=self.logger_func, allow_none=True)
        self._resources.clear()
        self.logger_func("Mesh display released.")
        return Hide(handle)
