import itertools
import threading

import pytest

from heightpatch.core.errors import CollaboratorError, ComputationError
from heightpatch.core.sampling import SamplingSpec
from heightpatch.logic.mesh_toggle import MeshToggleController
from heightpatch.logic.state import Hide, Show, ToggleState


class RecordingDisplay:
    def __init__(self):
        self._ids = itertools.count(1)
        self.live = {}
        self.materialized = 0
        self.released = 0

    def materialize(self, buffers):
        handle = next(self._ids)
        self.live[handle] = buffers
        self.materialized += 1
        return handle

    def release(self, handle):
        del self.live[handle]
        self.released += 1


class FailingDisplay(RecordingDisplay):
    def materialize(self, buffers):
        raise RuntimeError("graphics data sets unavailable")


class EmptyDisplay(RecordingDisplay):
    def materialize(self, buffers):
        return None


class StuckDisplay(RecordingDisplay):
    def release(self, handle):
        raise RuntimeError("node is locked")


def _controller(display, **kwargs):
    return MeshToggleController(display, spec=SamplingSpec.square(4, 1.0), logger_func=lambda msg: None,
                                **kwargs)


def test_initial_state_is_absent():
    ctrl = _controller(RecordingDisplay())
    assert ctrl.state is ToggleState.ABSENT
    assert ctrl.handle is None
    assert ctrl.held_count == 0


def test_invoke_shows_then_hides():
    display = RecordingDisplay()
    ctrl = _controller(display)

    action = ctrl.invoke()
    assert isinstance(action, Show)
    assert action.buffers.triangle_count == 18
    assert ctrl.state is ToggleState.PRESENT
    assert ctrl.handle == action.handle
    assert list(display.live) == [action.handle]

    hidden = ctrl.invoke()
    assert hidden == Hide(action.handle)
    assert ctrl.state is ToggleState.ABSENT
    assert ctrl.handle is None
    assert display.live == {}


def test_two_toggles_leak_nothing():
    display = RecordingDisplay()
    ctrl = _controller(display)
    for _ in range(3):
        ctrl.invoke()
        ctrl.invoke()
    assert ctrl.state is ToggleState.ABSENT
    assert ctrl.held_count == 0
    assert display.materialized == display.released == 3
    assert display.live == {}


def test_second_show_gets_fresh_resources():
    display = RecordingDisplay()
    ctrl = _controller(display)
    first = ctrl.invoke()
    ctrl.invoke()
    second = ctrl.invoke()
    assert second.handle != first.handle
    assert len(display.live) == 1


def test_toggle_passes_mesh_options():
    ctrl = _controller(RecordingDisplay(), index_base=0, normal_mode="face", height_fn="flat")
    action = ctrl.invoke()
    assert action.buffers.index_base == 0
    assert action.buffers.triangle_indices.min() == 0


@pytest.mark.parametrize("display_cls", [FailingDisplay, EmptyDisplay])
def test_failed_materialization_stays_absent(display_cls):
    ctrl = _controller(display_cls())
    with pytest.raises(CollaboratorError):
        ctrl.invoke()
    assert ctrl.state is ToggleState.ABSENT
    assert ctrl.held_count == 0


def test_failed_tessellation_never_reaches_display():
    def broken(x, y):
        raise ZeroDivisionError("bad sample")

    display = RecordingDisplay()
    ctrl = _controller(display, height_fn=broken)
    with pytest.raises(ComputationError):
        ctrl.invoke()
    assert ctrl.state is ToggleState.ABSENT
    assert ctrl.handle is None
    assert display.materialized == 0
    assert display.live == {}


def test_failed_release_keeps_handle():
    display = StuckDisplay()
    ctrl = _controller(display)
    shown = ctrl.invoke()
    with pytest.raises(CollaboratorError) as excinfo:
        ctrl.invoke()
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert ctrl.state is ToggleState.PRESENT
    assert ctrl.handle == shown.handle


def test_reset():
    display = RecordingDisplay()
    ctrl = _controller(display)
    assert ctrl.reset() is None
    shown = ctrl.invoke()
    assert ctrl.reset() == Hide(shown.handle)
    assert ctrl.state is ToggleState.ABSENT
    assert display.live == {}


def test_concurrent_invokes_alternate():
    display = RecordingDisplay()
    ctrl = _controller(display)
    barrier = threading.Barrier(8)
    actions = []

    def worker():
        barrier.wait()
        actions.append(ctrl.invoke())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(isinstance(a, Show) for a in actions) == 4
    assert sum(isinstance(a, Hide) for a in actions) == 4
    assert ctrl.state is ToggleState.ABSENT
    assert display.live == {}
