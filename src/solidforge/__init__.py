"""SolidForge: extrude 2D footprints into grouped triangle meshes."""

from .config import SolidConfig
from .geometry import GeometryError, ProfileBuilder, resolve_holes, triangulate
from .pipeline import Color, Mesh, extrude, generate_model, merge_meshes

__version__ = "0.1.0"

__all__ = [
    "Color",
    "GeometryError",
    "Mesh",
    "ProfileBuilder",
    "SolidConfig",
    "extrude",
    "generate_model",
    "merge_meshes",
    "resolve_holes",
    "triangulate",
]
