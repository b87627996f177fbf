from __future__ import annotations

"""Hole detection and bridging.

Contours drawn on one plane are nested by containment. A contour at odd
nesting depth is a hole: it is spliced into its immediate parent through
the closest pair of points whose connecting segment crosses no other
boundary, so every solid region ends up as a single self-touching
boundary that ``triangulate`` can clip.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from .errors import UnresolvableHoleError
from .triangulate import BOTTOM_ORIENTATION, Face, _cross, point_in_triangle, triangulate

logger = logging.getLogger(__name__)

# Holes are merged nearest-first from these corners.
MERGE_ANCHOR_BOTTOM = (1e10, 1e10)
MERGE_ANCHOR_TOP = (-1e10, -1e10)


@dataclass
class NestInfo:
    parent: int = -1
    depth: int = 0

    @property
    def is_hole(self) -> bool:
        return self.depth % 2 == 1


def resolve_holes(vertices: Sequence, contours: list[list[int]], orientation: int) -> list[list[int]]:
    """Merge every hole contour into its parent, in place.

    Degenerate contours are emptied, holes are emptied after being spliced
    into their parent. The same list is returned.
    """
    for i, contour in enumerate(contours):
        if len(contour) < 3:
            contours[i] = []
    nesting = nest_contours(vertices, contours, orientation)
    return merge_holes(vertices, contours, nesting, orientation)


def nest_contours(vertices: Sequence, contours: Sequence[Sequence[int]], orientation: int) -> list[NestInfo]:
    nesting = [NestInfo() for _ in contours]
    solved: dict[int, tuple[list[Face], float]] = {}
    for i, contour in enumerate(contours):
        if len(contour) >= 3:
            solved[i] = triangulate(vertices, contour, orientation)

    # Largest first, so the last recorded parent is the innermost one.
    outers = sorted(solved, key=lambda i: -solved[i][1])
    for ix_outer in outers:
        outer_faces, outer_area = solved[ix_outer]
        for ix_inner in solved:
            if ix_inner == ix_outer:
                continue
            inner = nesting[ix_inner]
            if nesting[ix_outer].depth > inner.depth:
                continue
            inner_faces, inner_area = solved[ix_inner]
            if inner_area < outer_area and _has_inner_polygon(vertices, outer_faces, inner_faces):
                inner.parent = ix_outer
                inner.depth += 1

    _check_acyclic(nesting)
    logger.debug(
        "Nesting: contours=%s holes=%s",
        len(solved),
        sum(1 for i in solved if nesting[i].is_hole),
    )
    return nesting


def merge_holes(
    vertices: Sequence,
    contours: list[list[int]],
    nesting: Sequence[NestInfo],
    orientation: int,
) -> list[list[int]]:
    anchor = MERGE_ANCHOR_BOTTOM if orientation == BOTTOM_ORIENTATION else MERGE_ANCHOR_TOP
    while True:
        ix_hole = -1
        most_near = math.inf
        for i, info in enumerate(nesting):
            if not info.is_hole or info.parent == i or len(contours[i]) < 3:
                continue
            pos = vertices[contours[i][0]]
            ox = pos[0] - anchor[0]
            oy = pos[1] - anchor[1]
            dist = math.sqrt(ox * ox + oy * oy)
            if dist < most_near:
                ix_hole = i
                most_near = dist
        if ix_hole < 0:
            break

        ix_parent = nesting[ix_hole].parent
        if not 0 <= ix_parent < len(contours) or len(contours[ix_parent]) < 3:
            raise UnresolvableHoleError(f"hole contour {ix_hole} has no enclosing contour to merge into")
        hole = contours[ix_hole]
        parent = contours[ix_parent]
        src, dst = _find_bridge(vertices, contours, ix_hole, ix_parent)
        contours[ix_parent] = splice_hole(parent, hole, dst, src)
        contours[ix_hole] = []
        logger.debug("Merged hole %s into contour %s at (%s, %s)", ix_hole, ix_parent, hole[src], parent[dst])
    return contours


def splice_hole(parent: Sequence[int], hole: Sequence[int], dst: int, src: int) -> list[int]:
    """Insert ``hole`` (reversed, from ``src``) after ``parent[dst]``.

    Both bridge points occur twice in the result so the slit closes.
    """
    size = len(hole)
    merged = list(parent[: dst + 1])
    merged.extend(hole[(size + src - i) % size] for i in range(size))
    merged.append(hole[src])
    merged.extend(parent[dst:])
    return merged


def _find_bridge(
    vertices: Sequence,
    contours: Sequence[Sequence[int]],
    ix_hole: int,
    ix_parent: int,
) -> tuple[int, int]:
    """Closest (hole slot, parent slot) pair whose segment stays clear.

    Pairs are tried nearest first, ties in hole-major order. A pair is
    rejected when its segment properly crosses an edge of any live
    contour (earlier slits included) or passes through one of their points.
    """
    hole = contours[ix_hole]
    parent = contours[ix_parent]
    candidates = []
    for i_child, child_ix in enumerate(hole):
        vc = vertices[child_ix]
        for i_parent, parent_ix in enumerate(parent):
            vp = vertices[parent_ix]
            dx = vc[0] - vp[0]
            dy = vc[1] - vp[1]
            candidates.append((math.sqrt(dx * dx + dy * dy), i_child, i_parent))
    candidates.sort(key=lambda c: c[0])

    edges = []
    for contour in contours:
        size = len(contour)
        if size < 3:
            continue
        for k in range(size):
            edges.append((vertices[contour[k]], vertices[contour[(k + 1) % size]]))

    for rejected, (_, i_child, i_parent) in enumerate(candidates):
        if not _bridge_blocked(vertices[hole[i_child]], vertices[parent[i_parent]], edges):
            if rejected:
                logger.debug("Hole %s: skipped %s crossing bridges", ix_hole, rejected)
            return i_child, i_parent
    raise UnresolvableHoleError(f"no bridge found for hole contour {ix_hole}")


def _bridge_blocked(p, q, edges) -> bool:
    for a, b in edges:
        if _segments_cross(p, q, a, b) or _on_open_segment(p, q, a):
            return True
    return False


def _segments_cross(p, q, a, b) -> bool:
    # Proper crossing only; touching at an end point is allowed
    d1 = _cross(q[0] - p[0], q[1] - p[1], a[0] - p[0], a[1] - p[1])
    d2 = _cross(q[0] - p[0], q[1] - p[1], b[0] - p[0], b[1] - p[1])
    d3 = _cross(b[0] - a[0], b[1] - a[1], p[0] - a[0], p[1] - a[1])
    d4 = _cross(b[0] - a[0], b[1] - a[1], q[0] - a[0], q[1] - a[1])
    return ((d1 > 0 > d2) or (d1 < 0 < d2)) and ((d3 > 0 > d4) or (d3 < 0 < d4))


def _on_open_segment(p, q, r) -> bool:
    dx = q[0] - p[0]
    dy = q[1] - p[1]
    rx = r[0] - p[0]
    ry = r[1] - p[1]
    if _cross(dx, dy, rx, ry) != 0:
        return False
    along = dx * rx + dy * ry
    return 0 < along < dx * dx + dy * dy


def _has_inner_polygon(vertices: Sequence, outer_faces: Sequence[Face], inner_faces: Sequence[Face]) -> bool:
    for outer in outer_faces:
        va, vo, vb = vertices[outer.a], vertices[outer.o], vertices[outer.b]
        for inner in inner_faces:
            for ix in inner:
                if point_in_triangle(va, vo, vb, vertices[ix]):
                    return True
    return False


def _check_acyclic(nesting: Sequence[NestInfo]) -> None:
    for start in range(len(nesting)):
        seen = {start}
        ix = nesting[start].parent
        while ix >= 0:
            if ix in seen:
                raise UnresolvableHoleError(f"contour {start} is nested inside itself")
            seen.add(ix)
            ix = nesting[ix].parent
