from __future__ import annotations

"""2D contours -> closed 3D solid (caps plus side walls)."""

import logging
from typing import Iterable

from shapely.geometry import LinearRing

from ..geometry.holes import merge_holes, nest_contours, resolve_holes
from ..geometry.triangulate import BOTTOM_ORIENTATION, TOP_ORIENTATION, triangulate
from .mesh import Color, Group, Material, Mesh

logger = logging.getLogger(__name__)


def extrude(contours: Iterable, bottom: float, height: float, name: str = "", color=None) -> Mesh:
    """Extrude footprint contours between ``bottom`` and ``bottom + height``.

    Each contour is a sequence of ``(x, y)`` points. Contours lying inside
    another one become holes. The mesh is Y-up: footprint ``(x, y)`` at
    elevation ``e`` is stored as vertex ``(x, e, y)``. All faces land in a
    single group named ``name``.
    """
    color = Color.from_value(color)
    points: list[tuple[float, float]] = []
    vertices: list[tuple[float, float, float]] = []
    bottoms: list[list[int]] = []
    tops: list[list[int]] = []
    top_z = bottom + height

    for i, contour in enumerate(contours):
        loop = [(float(p[0]), float(p[1])) for p in contour]
        count = len(loop)
        if count < 3 or LinearRing(loop).convex_hull.area == 0:
            if count:
                logger.debug("Skipping degenerate contour %s with %s points", i, count)
            continue
        if not LinearRing(loop).is_ccw:
            loop.reverse()
        ofs = len(points)
        bottoms.append(list(range(ofs, ofs + count)))
        points.extend(loop)
        vertices.extend((x, bottom, y) for x, y in loop)

        ofs += count
        # Top ring is indexed back to front so its front face points up
        tops.append([ofs + count - j - 1 for j in range(count)])
        points.extend(loop)
        vertices.extend((x, top_z, y) for x, y in loop)

    nesting = nest_contours(points, bottoms, BOTTOM_ORIENTATION)
    bottom_caps = merge_holes(points, [list(c) for c in bottoms], nesting, BOTTOM_ORIENTATION)
    top_caps = resolve_holes(points, [list(c) for c in tops], TOP_ORIENTATION)

    faces: list[tuple[int, int, int]] = []
    for caps, orientation in ((bottom_caps, BOTTOM_ORIENTATION), (top_caps, TOP_ORIENTATION)):
        for cap in caps:
            if not cap:
                continue
            cap_faces, _ = triangulate(points, cap, orientation)
            faces.extend(tuple(f) for f in cap_faces)
    cap_count = len(faces)

    for ring_bottom, ring_top, info in zip(bottoms, tops, nesting):
        faces.extend(_side_wall(points, ring_bottom, ring_top, info.is_hole))

    holes = sum(1 for info in nesting if info.is_hole)
    logger.info(
        "Extruded '%s': contours=%s holes=%s cap_faces=%s wall_faces=%s",
        name,
        len(bottoms),
        holes,
        cap_count,
        len(faces) - cap_count,
    )
    group = Group(name=name, offset=0, count=len(faces), color=color, material=name)
    return Mesh(vertices, faces, (group,), (Material(name=name, kd=color),))


def _side_wall(points, ring_bottom: list[int], ring_top: list[int], is_hole: bool):
    top_at = {}
    for ix in ring_top:
        top_at.setdefault(points[ix], ix)
    count = len(ring_bottom)
    for ib in range(count):
        ix1 = ring_bottom[ib]
        ix0 = ring_bottom[(ib + 1) % count]
        ix2 = top_at[points[ix1]]
        ix3 = top_at[points[ix0]]
        if is_hole:
            # Hole walls face into the hole
            yield (ix2, ix1, ix0)
            yield (ix3, ix2, ix0)
        else:
            yield (ix0, ix1, ix2)
            yield (ix0, ix2, ix3)
