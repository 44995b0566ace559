"""Convert dig .TRM face records into an indexed OBJ mesh plus its MTL library.

The conversion runs as a fixed sequence of passes over the parsed records:
1) resolve materials,
2) deduplicate vertex positions,
3) deduplicate UV coordinates,
4) map every face vertex to its (position, uv) table indexes.

Everything is built in memory before any output is written, so a fatal error
never leaves a half-written mesh behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Callable, Iterable, TextIO

import numpy as np

from .errors import ConsistencyError, ParseError
from .materials import MaterialSet, resolve_materials, write_mtl
from .palette import load_palette
from .records import FaceRecord, Vertex, parse_face_text, split_lines
from .unique_table import UniqueAttributeTable


DEFAULT_HEADER = "# A conversion produced by digconv/trm2obj of a Tomb Raider 1 mesh."
DEFAULT_OBJECT_NAME = "tr_mesh"


@dataclass
class ConvertOptions:
    texture_dir: str = ""
    texture_ext: str = ".png"
    object_name: str = DEFAULT_OBJECT_NAME
    header: str = DEFAULT_HEADER


@dataclass
class ObjFace:
    material_name: str
    refs: list[tuple[int, int]]


@dataclass
class ConvertedMesh:
    materials: MaterialSet
    positions: UniqueAttributeTable
    uvs: UniqueAttributeTable
    faces: list[ObjFace] = field(default_factory=list)


@dataclass
class ConversionSummary:
    input_lines: int
    records: int
    skipped_lines: int
    materials: int
    positions: int
    uvs: int
    faces: int


def _build_table(
    records: Iterable[FaceRecord],
    arity: int,
    pick: Callable[[Vertex], tuple[str, ...]],
) -> UniqueAttributeTable:
    table = UniqueAttributeTable(arity)
    for record in records:
        for vertex in record.vertices:
            values = pick(vertex)
            try:
                table.insert_if_absent(values)
            except ValueError:
                raise ParseError(
                    f"line {record.line_no}: non-numeric component in {' '.join(values)!r}"
                ) from None
    return table


def _position(vertex: Vertex) -> tuple[str, ...]:
    return vertex.position


def _uv(vertex: Vertex) -> tuple[str, ...]:
    return vertex.uv


def build_position_table(records: Iterable[FaceRecord]) -> UniqueAttributeTable:
    return _build_table(records, 3, _position)


def build_uv_table(records: Iterable[FaceRecord]) -> UniqueAttributeTable:
    return _build_table(records, 2, _uv)


def lookup(table: UniqueAttributeTable, values: tuple[str, ...], record: FaceRecord) -> int:
    idx = table.index_of(values)
    if idx is None:
        raise ConsistencyError(
            f"line {record.line_no}: {' '.join(values)!r} missing from the deduplicated table"
        )
    return idx + 1


def build_faces(
    records: Iterable[FaceRecord],
    positions: UniqueAttributeTable,
    uvs: UniqueAttributeTable,
) -> list[ObjFace]:
    faces: list[ObjFace] = []
    for record in records:
        refs = [
            (lookup(positions, v.position, record), lookup(uvs, v.uv, record))
            for v in record.vertices
        ]
        faces.append(ObjFace(material_name=record.material_name, refs=refs))
    return faces


def build_mesh(
    records: list[FaceRecord],
    palette: np.ndarray,
    options: ConvertOptions | None = None,
) -> ConvertedMesh:
    opts = options or ConvertOptions()
    materials = resolve_materials(records, palette, opts.texture_dir, opts.texture_ext)
    positions = build_position_table(records)
    uvs = build_uv_table(records)
    faces = build_faces(records, positions, uvs)
    return ConvertedMesh(materials=materials, positions=positions, uvs=uvs, faces=faces)


def write_obj(
    stream: TextIO,
    mesh: ConvertedMesh,
    mtl_name: str,
    options: ConvertOptions | None = None,
) -> None:
    opts = options or ConvertOptions()
    stream.write(f"{opts.header}\n")
    stream.write(f"mtllib {PurePath(mtl_name).name}\n")
    stream.write(f"o {opts.object_name}\n")

    for x, y, z in mesh.positions:
        stream.write(f"v {x} {y} {z}\n")
    for u, v in mesh.uvs:
        stream.write(f"vt {u} {v}\n")

    for face in mesh.faces:
        stream.write(f"usemtl {face.material_name}\n")
        stream.write("f" + "".join(f" {vi}/{ti}" for vi, ti in face.refs) + "\n")


def prepare_mesh(
    text: str,
    palette: np.ndarray,
    options: ConvertOptions | None = None,
) -> tuple[list[FaceRecord], ConvertedMesh]:
    records = parse_face_text(text)
    return records, build_mesh(records, palette, options)


def write_outputs(
    mesh: ConvertedMesh,
    obj_stream: TextIO,
    mtl_stream: TextIO,
    mtl_name: str,
    options: ConvertOptions | None = None,
) -> None:
    write_mtl(mtl_stream, mesh.materials)
    write_obj(obj_stream, mesh, mtl_name, options)


def convert(
    text: str,
    palette_bytes: bytes,
    obj_stream: TextIO,
    mtl_stream: TextIO,
    mtl_name: str,
    options: ConvertOptions | None = None,
) -> ConversionSummary:
    records, mesh = prepare_mesh(text, load_palette(palette_bytes), options)
    write_outputs(mesh, obj_stream, mtl_stream, mtl_name, options)
    return summarize(text, records, mesh)


def summarize(text: str, records: list[FaceRecord], mesh: ConvertedMesh) -> ConversionSummary:
    input_lines = len(split_lines(text))
    return ConversionSummary(
        input_lines=input_lines,
        records=len(records),
        skipped_lines=input_lines - len(records),
        materials=len(mesh.materials),
        positions=len(mesh.positions),
        uvs=len(mesh.uvs),
        faces=len(mesh.faces),
    )
