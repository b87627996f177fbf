"""Extrusion, mesh model and export."""

from .core import build_scene, generate_model
from .engine import export_mesh, get_model_engine
from .extrude import extrude
from .mesh import Color, Group, Material, Mesh, merge_meshes

__all__ = [
    "Color",
    "Group",
    "Material",
    "Mesh",
    "build_scene",
    "export_mesh",
    "extrude",
    "generate_model",
    "get_model_engine",
    "merge_meshes",
]
