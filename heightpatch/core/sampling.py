"""
Grid sampling of height functions.

A ``SamplingSpec`` describes an ``nu x nv`` lattice spanning ``lx x ly``.
``sample_control_grid`` evaluates a height function ``f(x, y) -> z`` on that
lattice and stores the points row-major (``v`` outer, ``u`` inner) in a flat
read-only buffer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Union

import numpy as np

from heightpatch.core import config
from heightpatch.core.errors import ComputationError, ValidationError

HeightFunction = Callable[[float, float], float]


def _is_count(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass(frozen=True)
class SamplingSpec:
    """Lattice resolution and domain extents for one sampling request."""

    nu: int
    nv: int
    lx: float = config.DEFAULT_EXTENT
    ly: float = config.DEFAULT_EXTENT

    def __post_init__(self):
        for name in ("nu", "nv"):
            value = getattr(self, name)
            if not _is_count(value):
                raise ValidationError(f"{name} must be an integer, got {value!r}")
            if value < config.MIN_MESH_POINTS:
                raise ValidationError(
                    f"{name} must be at least {config.MIN_MESH_POINTS}, got {value}"
                )
        for name in ("lx", "ly"):
            value = getattr(self, name)
            try:
                extent = float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{name} must be a real number, got {value!r}") from None
            if not math.isfinite(extent) or extent <= 0.0:
                raise ValidationError(f"{name} must be a positive finite extent, got {value!r}")
            object.__setattr__(self, name, extent)
        object.__setattr__(self, "nu", int(self.nu))
        object.__setattr__(self, "nv", int(self.nv))

    @classmethod
    def square(cls, n: int, length: float = config.DEFAULT_EXTENT) -> "SamplingSpec":
        return cls(n, n, length, length)

    @property
    def point_count(self) -> int:
        return self.nu * self.nv

    def require_min_points(self, minimum: int, purpose: str = "surface") -> None:
        """Raise ValidationError unless both directions have ``minimum`` points."""
        if self.nu < minimum or self.nv < minimum:
            raise ValidationError(
                f"The {purpose} path needs at least {minimum} points per direction, "
                f"got {self.nu} x {self.nv}"
            )

    def x_coords(self) -> np.ndarray:
        return np.array([u * self.lx / (self.nu - 1) for u in range(self.nu)])

    def y_coords(self) -> np.ndarray:
        return np.array([v * self.ly / (self.nv - 1) for v in range(self.nv)])


@dataclass(frozen=True, eq=False)
class ControlGrid:
    """
    Flat ``3 * nu * nv`` coordinate buffer.

    Point ``(u, v)`` starts at offset ``3 * (v * nu + u)``.
    """

    nu: int
    nv: int
    coordinates: np.ndarray = field(repr=False)

    def __post_init__(self):
        coords = np.array(self.coordinates, dtype=float).reshape(-1)
        if len(coords) != 3 * self.nu * self.nv:
            raise ValidationError(
                f"Control grid of {self.nu} x {self.nv} needs {3 * self.nu * self.nv} "
                f"coordinates, got {len(coords)}"
            )
        coords.setflags(write=False)
        object.__setattr__(self, "coordinates", coords)

    def __len__(self) -> int:
        return len(self.coordinates)

    def offset(self, u: int, v: int) -> int:
        if not (0 <= u < self.nu and 0 <= v < self.nv):
            raise IndexError(f"Grid index ({u}, {v}) outside {self.nu} x {self.nv}")
        return 3 * (v * self.nu + u)

    def point(self, u: int, v: int) -> np.ndarray:
        idx = self.offset(u, v)
        return self.coordinates[idx:idx + 3].copy()

    def points(self) -> np.ndarray:
        """All points as an ``(nu * nv, 3)`` array in buffer order."""
        return self.coordinates.reshape(-1, 3).copy()

    def as_lattice(self) -> np.ndarray:
        """All points as an ``(nv, nu, 3)`` array indexed ``[v, u]``."""
        return self.coordinates.reshape(self.nv, self.nu, 3).copy()


def cosine_ripple(amplitude: float = config.DEFAULT_AMPLITUDE) -> HeightFunction:
    """z = A * cos(2r), the surface command's test field."""
    def height(x, y):
        return amplitude * math.cos(2.0 * math.hypot(x, y))
    return height


def sine_ripple(amplitude: float = config.DEFAULT_AMPLITUDE) -> HeightFunction:
    """z = A * sin(2 pi r), the mesh command's test field."""
    def height(x, y):
        return amplitude * math.sin(2.0 * math.pi * math.hypot(x, y))
    return height


def flat(amplitude: float = 0.0) -> HeightFunction:
    def height(x, y):
        return 0.0
    return height


HEIGHT_FUNCTIONS: dict[str, Callable[..., HeightFunction]] = {
    "cosine_ripple": cosine_ripple,
    "sine_ripple": sine_ripple,
    "flat": flat,
}


def resolve_height_function(height_fn: Union[str, HeightFunction, None],
                            default: str = config.DEFAULT_SURFACE_HEIGHT_FUNCTION,
                            amplitude: float | None = None) -> HeightFunction:
    """
    Turn a height function name or callable into a callable.

    Args:
        height_fn: Callable ``(x, y) -> z``, a key of ``HEIGHT_FUNCTIONS`` or None
        default: Registry key used when ``height_fn`` is None
        amplitude: Amplitude passed to registry factories (config default if None)

    Returns:
        Callable height function
    """
    if height_fn is None:
        height_fn = default
    if callable(height_fn):
        return height_fn
    factory = HEIGHT_FUNCTIONS.get(height_fn)
    if factory is None:
        raise ValidationError(
            f"Unknown height function {height_fn!r}; expected one of {sorted(HEIGHT_FUNCTIONS)}"
        )
    if amplitude is None:
        amplitude = config.DEFAULT_AMPLITUDE
    return factory(amplitude)


def evaluate_height(height_fn: HeightFunction, x: float, y: float) -> float:
    """Evaluate one height sample, turning failures into ComputationError."""
    try:
        z = float(height_fn(x, y))
    except Exception as e:
        raise ComputationError(f"Height function failed at ({x}, {y}): {e}") from e
    if not math.isfinite(z):
        raise ComputationError(f"Height function returned {z} at ({x}, {y})")
    return z


def sample_heights(spec: SamplingSpec, height_fn: HeightFunction) -> np.ndarray:
    """
    Sample the lattice points of ``spec``.

    Returns:
        ``(nu * nv, 3)`` array, row ``v * nu + u`` holding ``(x, y, z)``
    """
    xs = spec.x_coords()
    ys = spec.y_coords()
    points = np.empty((spec.nu * spec.nv, 3), dtype=float)
    for v, y in enumerate(ys):
        row = v * spec.nu
        for u, x in enumerate(xs):
            points[row + u] = (x, y, evaluate_height(height_fn, x, y))
    return points


def sample_control_grid(spec: SamplingSpec, height_fn: HeightFunction) -> ControlGrid:
    """Evaluate ``height_fn`` over ``spec`` and return the control grid."""
    points = sample_heights(spec, height_fn)
    return ControlGrid(spec.nu, spec.nv, points.reshape(-1))
