from __future__ import annotations

"""Wavefront OBJ/MTL text for grouped meshes."""

import logging
from typing import Iterable

from .mesh import Color, Group, Material, Mesh

logger = logging.getLogger(__name__)


def format_obj(mesh: Mesh, mtl_name: str = "", precision: int = 3) -> str:
    lines = []
    if mtl_name:
        lines.append(f"mtllib {mtl_name}")
    for x, y, z in mesh.vertices:
        lines.append(f"v {x:.{precision}e} {y:.{precision}e} {z:.{precision}e}")
    for group in mesh.groups:
        if not group.visible:
            continue
        lines.append(f"g '{group.name}'")
        lines.append(f"usemtl '{group.material}'")
        for a, o, b in mesh.group_faces(group):
            lines.append(f"f {a + 1} {o + 1} {b + 1}")
    return "\n".join(lines) + "\n"


def format_mtl(materials: Iterable[Material]) -> str:
    chunks = []
    for mtl in materials:
        chunks.append(
            f"newmtl '{mtl.name}'\n"
            f"Kd {mtl.kd.r:g} {mtl.kd.g:g} {mtl.kd.b:g}\n"
            f"Ka {mtl.ka.r:g} {mtl.ka.g:g} {mtl.ka.b:g}\n"
            f"Ns {mtl.ns:g}\n"
        )
    return "\n".join(chunks)


def load_obj(text: str, materials: Iterable[Material] = ()) -> Mesh:
    """Parse OBJ text; group colors come from the matching material's Kd."""
    vertices: list[tuple[float, float, float]] = []
    faces: list[tuple[int, int, int]] = []
    groups: list[dict] = []
    usemtl = ""
    current: dict | None = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        parts = raw.strip().split(maxsplit=1)
        if not parts or parts[0].startswith("#"):
            continue
        key = parts[0]
        rest = parts[1] if len(parts) > 1 else ""
        if key == "v":
            cols = rest.split()
            if len(cols) < 3:
                raise ValueError(f"line {lineno}: vertex needs three coordinates")
            vertices.append((float(cols[0]), float(cols[1]), float(cols[2])))
        elif key == "usemtl":
            usemtl = _unquote(rest)
        elif key == "g":
            current = {"name": _unquote(rest), "offset": len(faces), "material": usemtl}
            groups.append(current)
        elif key == "f":
            if current is None:
                current = {"name": "", "offset": len(faces), "material": usemtl}
                groups.append(current)
            current["material"] = usemtl
            refs = [_vertex_ref(tok, len(vertices), lineno) for tok in rest.split()]
            faces.extend(split_polygon(refs))

    palette = {m.name: m for m in materials}
    built = []
    for i, grp in enumerate(groups):
        stop = groups[i + 1]["offset"] if i + 1 < len(groups) else len(faces)
        mtl = palette.get(grp["material"])
        color = mtl.kd if mtl is not None else Color.GREEN
        built.append(Group(grp["name"], grp["offset"], stop - grp["offset"], color, grp["material"]))
    logger.debug("Loaded OBJ: vertices=%s faces=%s groups=%s", len(vertices), len(faces), len(built))
    return Mesh(vertices, faces, tuple(built), tuple(palette.values()))


def load_mtl(text: str) -> list[Material]:
    materials: list[Material] = []
    fields: dict | None = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        parts = raw.strip().split(maxsplit=1)
        if not parts or parts[0].startswith("#"):
            continue
        key = parts[0]
        rest = parts[1] if len(parts) > 1 else ""
        if key == "newmtl":
            if fields is not None:
                materials.append(Material(**fields))
            fields = {"name": _unquote(rest)}
            continue
        if key not in {"Kd", "Ka", "Ns"}:
            continue
        if fields is None:
            raise ValueError(f"line {lineno}: {key} before newmtl")
        if key == "Ns":
            fields["ns"] = float(rest)
        else:
            fields[key.lower()] = Color.from_value(rest.split()[:3])
    if fields is not None:
        materials.append(Material(**fields))
    return materials


def split_polygon(refs: list[int]) -> list[tuple[int, int, int]]:
    # Zig-zag strip across the polygon, closing with one triangle when odd
    n = len(refs)
    if n < 3:
        return []
    half = n // 2
    tris = []
    for i in range(1, half):
        bl, br = refs[i - 1], refs[i]
        tr, tl = refs[n - i - 1], refs[n - i]
        tris.append((tl, bl, br))
        tris.append((br, tr, tl))
    if n % 2:
        tris.append((refs[half - 1], refs[half], refs[half + 1]))
    return tris


def _vertex_ref(token: str, vertex_count: int, lineno: int) -> int:
    head = token.split("/")[0]
    try:
        ref = int(head)
    except ValueError as exc:
        raise ValueError(f"line {lineno}: bad face index '{token}'") from exc
    ix = ref - 1 if ref > 0 else vertex_count + ref
    if not 0 <= ix < vertex_count:
        raise ValueError(f"line {lineno}: face index {ref} out of range")
    return ix


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value
