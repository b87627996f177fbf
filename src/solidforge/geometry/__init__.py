"""Geometry kernel: footprints, ear clipping and hole bridging."""

from .errors import ContourError, GeometryError, TriangulationStallError, UnresolvableHoleError
from .holes import NestInfo, resolve_holes
from .primitives import ProfileBuilder
from .triangulate import BOTTOM_ORIENTATION, TOP_ORIENTATION, Face, triangulate

__all__ = [
    "BOTTOM_ORIENTATION",
    "ContourError",
    "Face",
    "GeometryError",
    "NestInfo",
    "ProfileBuilder",
    "TOP_ORIENTATION",
    "TriangulationStallError",
    "UnresolvableHoleError",
    "resolve_holes",
    "triangulate",
]
