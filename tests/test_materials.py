from __future__ import annotations

import io

import pytest

from conftest import make_palette
from digconv.errors import PaletteIndexError
from digconv.materials import Material, MaterialSet, resolve_materials, write_mtl
from digconv.palette import load_palette
from digconv.records import parse_face_text


def test_texture_material_block():
    mat = Material(name="object_texture_3", diffuse=(1.0, 1.0, 1.0), texture_path="tex/3.png")
    assert mat.mtl_lines() == [
        "newmtl object_texture_3",
        "Kd 1 1 1",
        "Ks 0 0 0",
        "Ns 0",
        "illum 0",
        "map_Kd tex/3.png",
    ]


def test_palette_color_material(palette_bytes):
    records = parse_face_text("1 -5 0 0 0 0 0")
    materials = resolve_materials(records, load_palette(palette_bytes))
    (mat,) = list(materials)
    assert mat.name == "object_color_5"
    assert mat.texture_path is None
    assert mat.mtl_lines()[1] == "Kd 0.501961 0.250980 0.125490"


def test_first_occurrence_order_and_dedup(palette_bytes):
    text = "\n".join(
        [
            "1 2 0 0 0 0 0",
            "1 -5 0 0 0 0 0",
            "1 2 1 1 1 1 1",
            "1 5 0 0 0 0 0",
            "1 -5 2 2 2 2 2",
            "0 -300",
            "1 0 0 0 0 0 0",
        ]
    )
    materials = resolve_materials(parse_face_text(text), load_palette(palette_bytes), "textures/")
    assert [m.name for m in materials] == [
        "object_texture_2",
        "object_color_5",
        "object_texture_5",
        "object_texture_0",
    ]
    assert ("texture", 5) in materials
    assert ("color", 5) in materials
    assert materials.get(("texture", 2)).texture_path == "textures/2.png"


def test_material_set_keeps_first_definition():
    materials = MaterialSet()
    first = Material(name="a", diffuse=(0.0, 0.0, 0.0))
    assert materials.add(("color", 1), first)
    assert not materials.add(("color", 1), Material(name="b", diffuse=(1.0, 1.0, 1.0)))
    assert len(materials) == 1
    assert materials.get(("color", 1)) is first


def test_out_of_range_palette_index_is_fatal():
    records = parse_face_text("1 0 0 0 0 0 0\n1 -4 0 0 0 0 0")
    with pytest.raises(PaletteIndexError, match="line 2"):
        resolve_materials(records, load_palette(make_palette(size=4)))


def test_write_mtl_separates_blocks(palette_bytes):
    records = parse_face_text("1 0 0 0 0 0 0\n1 -7 0 0 0 0 0")
    out = io.StringIO()
    write_mtl(out, resolve_materials(records, load_palette(palette_bytes), "t/"))
    assert out.getvalue() == (
        "newmtl object_texture_0\n"
        "Kd 1 1 1\n"
        "Ks 0 0 0\n"
        "Ns 0\n"
        "illum 0\n"
        "map_Kd t/0.png\n"
        "\n"
        "newmtl object_color_7\n"
        "Kd 1.000000 0.000000 0.200000\n"
        "Ks 0 0 0\n"
        "Ns 0\n"
        "illum 0\n"
        "\n"
    )
