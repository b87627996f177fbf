from __future__ import annotations

import importlib

import pytest
from shapely.geometry import Polygon

from solidforge.geometry import ProfileBuilder
from solidforge.geometry.errors import TriangulationStallError
from solidforge.geometry.triangulate import (
    BOTTOM_ORIENTATION,
    TOP_ORIENTATION,
    Face,
    point_in_triangle,
    triangle_area,
    triangulate,
)

PENTAGON = [(0.0, 0.0), (5.0, 1.0), (7.0, 4.0), (3.0, 7.0), (-2.0, 3.0)]
L_SHAPE = [(0.0, 0.0), (4.0, 0.0), (4.0, 1.0), (1.0, 1.0), (1.0, 3.0), (0.0, 3.0)]


def _triangulate_module():
    # The package re-exports the function under the submodule's name
    return importlib.import_module("solidforge.geometry.triangulate")


def test_rectangle_splits_into_two_triangles() -> None:
    builder = ProfileBuilder()
    points = builder.add_rectangle((3.0, -2.0), 6.0, 2.5, 0.0)

    faces, area = triangulate(points, [0, 1, 2, 3], BOTTOM_ORIENTATION)

    assert len(faces) == 2
    assert area == pytest.approx(6.0 * 2.5)


@pytest.mark.parametrize("segments", [3, 5, 12, 48])
def test_convex_polygon_yields_n_minus_two_triangles(segments: int) -> None:
    points = ProfileBuilder().add_circle((1.0, 2.0), 10.0, segments)

    faces, area = triangulate(points, list(range(segments)), BOTTOM_ORIENTATION)

    assert len(faces) == segments - 2
    assert area == pytest.approx(Polygon(points).area)


@pytest.mark.parametrize("loop", [PENTAGON, L_SHAPE])
def test_returned_area_matches_emitted_triangles(loop) -> None:
    faces, area = triangulate(loop, list(range(len(loop))), BOTTOM_ORIENTATION)

    assert sum(triangle_area(loop, f) for f in faces) == pytest.approx(area)
    assert area == pytest.approx(Polygon(loop).area)
    assert len(faces) == len(loop) - 2


def test_concave_polygon_triangles_stay_inside() -> None:
    faces, _ = triangulate(L_SHAPE, list(range(len(L_SHAPE))), BOTTOM_ORIENTATION)

    outline = Polygon(L_SHAPE)
    for face in faces:
        tri = Polygon([L_SHAPE[face.a], L_SHAPE[face.o], L_SHAPE[face.b]])
        assert outline.buffer(1e-9).covers(tri)


def test_triangle_contour_is_returned_as_is() -> None:
    loop = [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]

    faces, area = triangulate(loop, [0, 1, 2], BOTTOM_ORIENTATION)

    assert len(faces) == 1
    assert set(faces[0]) == {0, 1, 2}
    assert area == pytest.approx(0.5)


def test_reversed_contour_with_opposite_orientation_reverses_faces() -> None:
    contour = list(range(len(PENTAGON)))

    front, front_area = triangulate(PENTAGON, contour, BOTTOM_ORIENTATION)
    back, back_area = triangulate(PENTAGON, contour[::-1], TOP_ORIENTATION)

    assert back == [Face(f.b, f.o, f.a) for f in front]
    assert back_area == pytest.approx(front_area)


def test_back_facing_winding_produces_no_area() -> None:
    contour = list(range(len(PENTAGON)))

    _, area = triangulate(PENTAGON, contour, TOP_ORIENTATION)

    assert area == pytest.approx(0.0)


def test_faces_index_into_shared_buffer() -> None:
    buffer = [(99.0, 99.0)] * 4 + PENTAGON
    contour = [4, 5, 6, 7, 8]

    faces, area = triangulate(buffer, contour, BOTTOM_ORIENTATION)

    assert all(ix in contour for face in faces for ix in face)
    assert area == pytest.approx(Polygon(PENTAGON).area)


@pytest.mark.parametrize("contour", [[], [0], [0, 1]])
def test_degenerate_contour_is_empty(contour: list[int]) -> None:
    assert triangulate(PENTAGON, contour, BOTTOM_ORIENTATION) == ([], 0.0)


def test_rejects_unknown_orientation() -> None:
    with pytest.raises(ValueError, match="orientation must be -1 or 1"):
        triangulate(PENTAGON, [0, 1, 2], 0)


def test_first_ear_is_farthest_from_anchor(monkeypatch) -> None:
    square = ProfileBuilder().add_rectangle((0.0, 0.0), 10.0, 10.0)

    faces, _ = triangulate(square, [0, 1, 2, 3], BOTTOM_ORIENTATION)
    assert faces[0].o == 2

    monkeypatch.setattr(_triangulate_module(), "TRIANGULATION_ANCHOR", (1e10, 1e10))
    faces, _ = triangulate(square, [0, 1, 2, 3], BOTTOM_ORIENTATION)
    assert faces[0] == Face(3, 0, 1)


def test_stall_is_reported(monkeypatch) -> None:
    monkeypatch.setattr(_triangulate_module(), "point_in_triangle", lambda *args: True)
    square = ProfileBuilder().add_rectangle((0.0, 0.0), 2.0, 2.0)

    with pytest.raises(TriangulationStallError, match="stalled") as info:
        triangulate(square, [0, 1, 2, 3], BOTTOM_ORIENTATION)
    assert info.value.remaining == 4


@pytest.mark.parametrize(
    ("point", "inside"),
    [
        ((1.0, 1.0), True),
        ((2.0, 0.0), True),
        ((0.0, 2.0), True),
        ((2.0, 2.0), True),
        ((0.0, 0.0), False),
        ((4.0, 0.0), False),
        ((5.0, 0.0), False),
        ((-1.0, 1.0), False),
        ((3.0, 3.0), False),
    ],
)
def test_point_in_triangle_counts_edges_as_inside(point, inside: bool) -> None:
    a, o, b = (0.0, 0.0), (4.0, 0.0), (0.0, 4.0)

    assert point_in_triangle(a, o, b, point) is inside
    assert point_in_triangle(b, o, a, point) is inside
