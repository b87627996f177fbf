from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from solidforge.pipeline.extrude import extrude
from solidforge.pipeline.mesh import Color, Group, Material, Mesh
from solidforge.pipeline.objfile import format_mtl, format_obj, load_mtl, load_obj, split_polygon


def _triangle_mesh() -> Mesh:
    return Mesh(
        [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)],
        [(0, 1, 2)],
        (Group("tri", 0, 1, Color.RED, "tri"),),
        (Material("tri", Color.RED),),
    )


def test_format_obj_layout() -> None:
    text = format_obj(_triangle_mesh(), "tri.mtl")

    assert text.splitlines() == [
        "mtllib tri.mtl",
        "v 0.000e+00 0.000e+00 0.000e+00",
        "v 1.000e+00 0.000e+00 0.000e+00",
        "v 0.000e+00 1.000e+00 0.000e+00",
        "g 'tri'",
        "usemtl 'tri'",
        "f 1 2 3",
    ]


def test_format_obj_precision() -> None:
    mesh = Mesh([(1.23456, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)], [(0, 1, 2)])

    assert "v 1.23456e+00 0.00000e+00 0.00000e+00" in format_obj(mesh, precision=5)
    assert not format_obj(mesh).startswith("mtllib")


def test_format_mtl() -> None:
    text = format_mtl([Material("red", Color.RED), Material("blue", Color.BLUE)])

    assert text == (
        "newmtl 'red'\nKd 1 0 0\nKa 0.1 0.1 0.1\nNs 100\n"
        "\n"
        "newmtl 'blue'\nKd 0 0 1\nKa 0.1 0.1 0.1\nNs 100\n"
    )


def test_material_survives_mtl_text() -> None:
    mtl = Material("matte", Color.GRAY50, Color(0.2, 0.3, 0.4), 12.5)

    assert load_mtl(format_mtl([mtl])) == [mtl]


def test_hidden_groups_are_not_written() -> None:
    mesh = extrude([[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]], 0.0, 1.0, name="box")
    hidden = Mesh(mesh.vertices, mesh.faces, (replace(mesh.groups[0], visible=False),), mesh.materials)

    text = format_obj(hidden, "box.mtl")

    assert "g 'box'" not in text
    assert not any(line.startswith("f ") for line in text.splitlines())
    assert load_obj(text).is_empty


def test_exported_mesh_loads_back() -> None:
    mesh = extrude([[(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (0.0, 1.0)]], 0.0, 1.0, name="block", color=Color.BLUE)

    loaded = load_obj(format_obj(mesh, "block.mtl", precision=6), load_mtl(format_mtl(mesh.materials)))

    assert np.array_equal(loaded.faces, mesh.faces)
    assert np.allclose(loaded.vertices, mesh.vertices)
    assert [(g.name, g.offset, g.count) for g in loaded.groups] == [("block", 0, 12)]
    assert loaded.groups[0].color == Color.BLUE


@pytest.mark.parametrize(
    ("refs", "expected"),
    [
        ([0, 1], []),
        ([0, 1, 2], [(0, 1, 2)]),
        ([0, 1, 2, 3], [(3, 0, 1), (1, 2, 3)]),
        ([0, 1, 2, 3, 4], [(4, 0, 1), (1, 3, 4), (1, 2, 3)]),
        ([0, 1, 2, 3, 4, 5], [(5, 0, 1), (1, 4, 5), (4, 1, 2), (2, 3, 4)]),
    ],
)
def test_split_polygon_zig_zag(refs: list[int], expected) -> None:
    assert split_polygon(refs) == expected


def test_load_obj_polygons_and_relative_indices() -> None:
    text = "\n".join(
        [
            "# square",
            "v 0 0 0",
            "v 1 0 0",
            "v 1 1 0",
            "v 0 1 0",
            "usemtl 'paint'",
            "g 'quad'",
            "f 1/1/1 2/2/2 3/3/3 4/4/4",
            "g 'again'",
            "f -4 -3 -2",
        ]
    )

    mesh = load_obj(text, [Material("paint", Color.YELLOW)])

    assert mesh.faces.tolist() == [[3, 0, 1], [1, 2, 3], [0, 1, 2]]
    assert [(g.name, g.offset, g.count, g.material) for g in mesh.groups] == [
        ("quad", 0, 2, "paint"),
        ("again", 2, 1, "paint"),
    ]
    assert mesh.groups[0].color == Color.YELLOW


def test_load_obj_without_material_is_green() -> None:
    mesh = load_obj("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")

    assert mesh.groups[0].name == ""
    assert mesh.groups[0].color == Color.GREEN


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("v 0 0\n", "line 1: vertex needs three coordinates"),
        ("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 9\n", "line 4: face index 9 out of range"),
        ("v 0 0 0\nf a b c\n", "line 2: bad face index 'a'"),
    ],
)
def test_load_obj_errors(text: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_obj(text)


def test_load_mtl_reads_colors_and_shininess() -> None:
    text = "newmtl 'a'\nKd 1 0 0\nKa 0.2 0.2 0.2\nNs 50\n\nnewmtl b\nKd 0 0 1\n"

    materials = load_mtl(text)

    assert [m.name for m in materials] == ["a", "b"]
    assert materials[0].kd == Color.RED
    assert materials[0].ka == Color(0.2, 0.2, 0.2)
    assert materials[0].ns == 50.0
    assert materials[1].kd == Color.BLUE
    assert materials[1].ns == 100.0


def test_load_mtl_rejects_color_before_newmtl() -> None:
    with pytest.raises(ValueError, match="line 1: Kd before newmtl"):
        load_mtl("Kd 1 0 0\n")
