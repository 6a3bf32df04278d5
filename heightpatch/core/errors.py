"""Error kinds raised by the height-field patch library."""


class HeightPatchError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(HeightPatchError, ValueError):
    """Malformed input detected before any computation starts."""


class ComputationError(HeightPatchError, ArithmeticError):
    """A height function raised or produced a non-finite value."""


class CollaboratorError(HeightPatchError, RuntimeError):
    """An external geometry, display or transaction capability failed."""
