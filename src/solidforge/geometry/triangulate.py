from __future__ import annotations

"""Farthest-point ear clipping for one simple closed contour.

Contours are index lists into a shared 2D vertex buffer. The winding that
counts as front-facing is chosen by ``orientation``: with
``BOTTOM_ORIENTATION`` (-1) a counter-clockwise contour is front-facing,
with ``TOP_ORIENTATION`` (+1) a clockwise one is.
"""

import logging
import math
from typing import NamedTuple, Sequence

from .errors import TriangulationStallError

logger = logging.getLogger(__name__)

BOTTOM_ORIENTATION = -1
TOP_ORIENTATION = 1

# Ear candidates are visited farthest-first from this point.
TRIANGULATION_ANCHOR = (-1e10, -1e10)


class Face(NamedTuple):
    a: int
    o: int
    b: int


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


def point_in_triangle(a, o, b, p) -> bool:
    """Half-plane test of ``p`` against triangle ``(a, o, b)``.

    A point on exactly one edge line counts as inside; a point on two edge
    lines (a triangle corner) counts as outside.
    """
    oap = _cross(o[0] - a[0], o[1] - a[1], p[0] - a[0], p[1] - a[1])
    bop = _cross(b[0] - o[0], b[1] - o[1], p[0] - o[0], p[1] - o[1])
    abp = _cross(a[0] - b[0], a[1] - b[1], p[0] - b[0], p[1] - b[1])
    if oap > 0 and bop > 0 and abp > 0:
        return True
    if oap < 0 and bop < 0 and abp < 0:
        return True
    if oap == 0 and ((bop > 0 and abp > 0) or (bop < 0 and abp < 0)):
        return True
    if bop == 0 and ((abp > 0 and oap > 0) or (abp < 0 and oap < 0)):
        return True
    if abp == 0 and ((oap > 0 and bop > 0) or (oap < 0 and bop < 0)):
        return True
    return False


def triangle_area(vertices: Sequence, face: Face) -> float:
    a, o, b = vertices[face.a], vertices[face.o], vertices[face.b]
    return abs(_cross(a[0] - o[0], a[1] - o[1], b[0] - o[0], b[1] - o[1])) / 2.0


def triangulate(vertices: Sequence, contour: Sequence[int], orientation: int) -> tuple[list[Face], float]:
    """Split ``contour`` into triangles.

    Returns the faces in emission order and the summed triangle area.
    Contours with fewer than three points yield ``([], 0.0)``.
    """
    if orientation not in (BOTTOM_ORIENTATION, TOP_ORIENTATION):
        raise ValueError(f"orientation must be -1 or 1, got {orientation!r}")
    count = len(contour)
    if count < 3:
        return [], 0.0

    step_left = count - 1
    step_right = 1
    step_next = count + orientation
    max_advances = count * (count + 2)

    points = [vertices[ix] for ix in contour]
    removed = [False] * count
    distance = []
    for p in points:
        dx = p[0] - TRIANGULATION_ANCHOR[0]
        dy = p[1] - TRIANGULATION_ANCHOR[1]
        distance.append(math.sqrt(dx * dx + dy * dy))

    def skip(ix: int, step: int) -> int:
        for _ in range(count):
            if not removed[ix]:
                break
            ix = (ix + step) % count
        return ix

    faces: list[Face] = []
    area = 0.0
    remaining = count
    while True:
        active = remaining
        reverse_count = 0
        advances = 0

        ix_o = 0
        distance_max = 0.0
        for i in range(count):
            if removed[i]:
                continue
            if distance_max < distance[i]:
                distance_max = distance[i]
                ix_o = i

        while True:
            ix_a = skip((ix_o + step_left) % count, step_left)
            ix_b = skip((ix_o + step_right) % count, step_right)
            va, vo, vb = points[ix_a], points[ix_o], points[ix_b]

            aob = _cross(va[0] - vo[0], va[1] - vo[1], vb[0] - vo[0], vb[1] - vo[1]) * orientation
            if aob < 0:
                reverse_count += 1
                if reverse_count > count:
                    # No front-facing ear around the ring: drop the candidate.
                    removed[ix_o] = True
                    remaining -= 1
                    break
            else:
                blocked = False
                for i in range(count):
                    if removed[i] or i == ix_a or i == ix_o or i == ix_b:
                        continue
                    if point_in_triangle(va, vo, vb, points[i]):
                        blocked = True
                        break
                if not blocked:
                    faces.append(Face(contour[ix_a], contour[ix_o], contour[ix_b]))
                    area += abs(aob) / 2.0
                    removed[ix_o] = True
                    remaining -= 1
                    break

            advances += 1
            if advances > max_advances:
                raise TriangulationStallError(
                    f"ear clipping stalled with {remaining} of {count} vertices left",
                    remaining,
                )
            ix_o = skip((ix_o + step_next) % count, step_next)

        if active <= 3:
            break

    logger.debug("Triangulated contour: points=%s faces=%s area=%.6f", count, len(faces), area)
    return faces, area
