# State held by the mesh display toggle
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Hashable, Optional, Union

from heightpatch.core.mesh import MeshBuffers


class ToggleState(enum.Enum):
    ABSENT = "absent"  # No display resources held
    PRESENT = "present"  # One mesh materialized, handle recorded


@dataclass(frozen=True)
class Show:
    """The mesh was materialized under ``handle``."""
    buffers: MeshBuffers
    handle: Hashable


@dataclass(frozen=True)
class Hide:
    """The resources recorded under ``handle`` were released."""
    handle: Hashable


DisplayAction = Union[Show, Hide]


@dataclass
class DisplayResources:
    state: ToggleState = ToggleState.ABSENT
    handle: Optional[Hashable] = None

    @property
    def held_count(self) -> int:
        return 0 if self.handle is None else 1

    def record(self, handle: Hashable) -> None:
        self.handle = handle
        self.state = ToggleState.PRESENT

    def clear(self) -> None:
        """Reset all state variables to their default values."""
        self.handle = None
        self.state = ToggleState.ABSENT
