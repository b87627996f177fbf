from __future__ import annotations

"""Indexed triangle mesh with named, colored face groups."""

import logging
from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable

import numpy as np
import trimesh

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Color:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    BLACK: ClassVar["Color"]
    GRAY25: ClassVar["Color"]
    GRAY33: ClassVar["Color"]
    GRAY50: ClassVar["Color"]
    GRAY66: ClassVar["Color"]
    GRAY75: ClassVar["Color"]
    WHITE: ClassVar["Color"]
    RED: ClassVar["Color"]
    GREEN: ClassVar["Color"]
    BLUE: ClassVar["Color"]
    MAGENTA: ClassVar["Color"]
    YELLOW: ClassVar["Color"]
    CYAN: ClassVar["Color"]

    @staticmethod
    def from_value(value) -> "Color":
        if value is None:
            return Color.GREEN
        if isinstance(value, Color):
            return value
        channels = [float(v) for v in value]
        if len(channels) not in (3, 4):
            raise ValueError(f"color needs 3 or 4 channels, got {len(channels)}")
        return Color(*channels)

    def light(self, scale: float) -> "Color":
        return Color(self.r * scale, self.g * scale, self.b * scale, self.a)

    @property
    def rgb(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


Color.BLACK = Color(0.00, 0.00, 0.00)
Color.GRAY25 = Color(0.25, 0.25, 0.25)
Color.GRAY33 = Color(0.33, 0.33, 0.33)
Color.GRAY50 = Color(0.50, 0.50, 0.50)
Color.GRAY66 = Color(0.66, 0.66, 0.66)
Color.GRAY75 = Color(0.75, 0.75, 0.75)
Color.WHITE = Color(1.00, 1.00, 1.00)
Color.RED = Color(1.00, 0.00, 0.00)
Color.GREEN = Color(0.00, 1.00, 0.00)
Color.BLUE = Color(0.00, 0.00, 1.00)
Color.MAGENTA = Color(1.00, 0.00, 0.50)
Color.YELLOW = Color(1.00, 1.00, 0.00)
Color.CYAN = Color(0.00, 0.66, 1.00)


@dataclass(frozen=True)
class Material:
    name: str
    kd: Color = Color.GREEN
    ka: Color = field(default_factory=lambda: Color.WHITE.light(0.1))
    ns: float = 100.0


@dataclass(frozen=True)
class Group:
    """A contiguous run of ``Mesh.faces`` sharing one material."""

    name: str
    offset: int
    count: int
    color: Color = Color.GREEN
    material: str = ""
    visible: bool = True

    @property
    def stop(self) -> int:
        return self.offset + self.count


@dataclass(frozen=True, eq=False)
class Mesh:
    vertices: np.ndarray
    faces: np.ndarray
    groups: tuple[Group, ...] = ()
    materials: tuple[Material, ...] = ()

    def __post_init__(self) -> None:
        vertices = np.array(self.vertices, dtype=np.float64).reshape(-1, 3)
        faces = np.array(self.faces, dtype=np.int64).reshape(-1, 3)
        if faces.size and (faces.min() < 0 or faces.max() >= len(vertices)):
            raise ValueError("face index out of range")
        for group in self.groups:
            if group.offset < 0 or group.stop > len(faces):
                raise ValueError(f"group '{group.name}' exceeds face buffer")
        vertices.setflags(write=False)
        faces.setflags(write=False)
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "faces", faces)
        object.__setattr__(self, "groups", tuple(self.groups))
        object.__setattr__(self, "materials", tuple(self.materials))

    @property
    def is_empty(self) -> bool:
        return len(self.faces) == 0

    def group_faces(self, group: Group) -> np.ndarray:
        return self.faces[group.offset : group.stop]

    def find_group(self, name: str) -> Group | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def to_trimesh(self) -> trimesh.Trimesh:
        return trimesh.Trimesh(vertices=self.vertices.copy(), faces=self.faces.copy(), process=False)


def merge_meshes(meshes: Iterable[Mesh]) -> Mesh:
    # Concatenate buffers, re-basing indices by the running vertex count
    vertices = []
    faces = []
    groups: list[Group] = []
    materials: list[Material] = []
    vertex_ofs = 0
    face_ofs = 0
    for mesh in meshes:
        vertices.append(mesh.vertices)
        faces.append(mesh.faces + vertex_ofs)
        for group in mesh.groups:
            groups.append(replace(group, offset=group.offset + face_ofs))
        materials.extend(mesh.materials)
        vertex_ofs += len(mesh.vertices)
        face_ofs += len(mesh.faces)
    if not vertices:
        return Mesh(np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int64))
    return Mesh(np.vstack(vertices), np.vstack(faces), tuple(groups), tuple(materials))


def translate_to_origin(mesh: Mesh) -> Mesh:
    # Shift the bounding box minimum onto the origin
    if len(mesh.vertices) == 0:
        return mesh
    offset = -mesh.vertices.min(axis=0)
    logger.info("Mesh translated to origin: offset=%s", tuple(float(v) for v in offset))
    return replace(mesh, vertices=mesh.vertices + offset)


def mesh_stats(mesh: Mesh) -> dict:
    tm = mesh.to_trimesh()
    stats = {
        "vertices": int(len(mesh.vertices)),
        "faces": int(len(mesh.faces)),
        "groups": len(mesh.groups),
        "watertight": bool(tm.is_watertight) if not mesh.is_empty else False,
        "euler": int(tm.euler_number) if not mesh.is_empty else 0,
    }
    logger.info(
        "Mesh stats: faces=%s watertight=%s euler=%s",
        stats["faces"],
        stats["watertight"],
        stats["euler"],
    )
    return stats

