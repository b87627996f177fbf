from __future__ import annotations

"""Typed failures raised by the geometry kernel."""


class GeometryError(ValueError):
    """Base class for malformed-input failures of a mesh build."""


class ContourError(GeometryError):
    """A contour is not a simple closed polygon."""


class UnresolvableHoleError(GeometryError):
    """A hole contour could not be bridged into an enclosing contour."""


class TriangulationStallError(GeometryError):
    """Ear clipping exhausted its candidates without finding a valid ear."""

    def __init__(self, message: str, remaining: int) -> None:
        super().__init__(message)
        self.remaining = remaining
