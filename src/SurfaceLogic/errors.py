"""errors.py
=========
Exception types raised by the SurfaceLogic package.

``InvalidDimension`` comes out of the lattice builder. ``EngineFailure`` is
what the reference measurement engines raise when the round protocol hands
them something they cannot execute. The round driver lets both propagate
untouched.
"""

from __future__ import annotations


class SurfaceLogicError(Exception):
    """Base class for all package specific errors."""


class InvalidDimension(SurfaceLogicError, ValueError):
    """Lattice width/height outside the supported range (both must be >= 2)."""

    def __init__(self, width: object, height: object) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"Lattice dimensions must be integers >= 2, got width={width!r}, height={height!r}."
        )


class EngineFailure(SurfaceLogicError, RuntimeError):
    """A measurement engine could not execute a measure/apply request."""


__all__ = ["SurfaceLogicError", "InvalidDimension", "EngineFailure"]
