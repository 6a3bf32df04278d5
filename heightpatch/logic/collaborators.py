"""
Capabilities the host application supplies.

The core never talks to a host directly. Adapters implement these protocols
to turn descriptors and mesh buffers into host-native geometry, and to scope
their edits in transactions.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Hashable, Iterator, Protocol, runtime_checkable

from heightpatch.core.boundary import BoundaryCurve
from heightpatch.core.body import SurfaceBodyDefinition
from heightpatch.core.errors import CollaboratorError
from heightpatch.core.mesh import MeshBuffers
from heightpatch.core.surface import SurfaceDescriptor
from heightpatch.utils.log import default_logger_func


@runtime_checkable
class GeometryKernel(Protocol):
    def create_curve(self, curve: BoundaryCurve) -> Any: ...

    def create_surface(self, descriptor: SurfaceDescriptor) -> Any: ...

    def create_body(self, body: SurfaceBodyDefinition, surface: Any, curves: dict) -> Any: ...


@runtime_checkable
class MeshDisplay(Protocol):
    def materialize(self, buffers: MeshBuffers) -> Hashable: ...

    def release(self, handle: Hashable) -> None: ...


class Transaction(Protocol):
    def end(self) -> None: ...

    def abort(self) -> None: ...


@runtime_checkable
class TransactionManager(Protocol):
    def start_transaction(self, name: str) -> Transaction: ...


def call_collaborator(label: str, func: Callable, *args, logger_func=None, allow_none=False):
    """
    Invoke a collaborator capability, turning failures into CollaboratorError.

    A ``None`` result counts as a failure unless ``allow_none`` is set.
    """
    log = logger_func or default_logger_func("collaborators")
    try:
        result = func(*args)
    except CollaboratorError:
        raise
    except Exception as e:
        log(f"{label} failed: {e}")
        raise CollaboratorError(f"{label} failed: {e}") from e
    if result is None and not allow_none:
        log(f"{label} returned empty")
        raise CollaboratorError(f"{label} returned empty")
    return result


@contextmanager
def transaction_scope(manager: TransactionManager, name: str, logger_func=None) -> Iterator[Transaction]:
    """
    Run a block inside a host transaction.

    Commits when the block finishes. If the block or the commit raises, the
    transaction is aborted and the original exception re-raised; a failing
    abort is only logged.
    """
    log = logger_func or default_logger_func("collaborators")
    transaction = call_collaborator(f"Starting transaction '{name}'", manager.start_transaction, name,
                                    logger_func=log)
    try:
        yield transaction
        call_collaborator(f"Committing transaction '{name}'", transaction.end, logger_func=log, allow_none=True)
    except BaseException:
        log(f"Aborting transaction '{name}'")
        try:
            transaction.abort()
        except Exception as abort_error:
            log(f"Aborting transaction '{name}' failed: {abort_error}")
        raise
