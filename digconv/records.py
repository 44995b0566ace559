"""Parse dig's line-oriented .TRM face records.

Mesh records (trm2obj):
    <vertex_count> <material_selector> <x y z u v> * vertex_count

Room records (trm2stl) carry positions only and no selector:
    <vertex_count> <x y z> * vertex_count

Empty lines and records with a vertex count of 0 are placeholders and are
skipped; anything else that cannot be read is a ParseError.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ParseError


MESH_STRIDE = 5
ROOM_STRIDE = 3


@dataclass(frozen=True)
class Vertex:
    position: tuple[str, str, str]
    uv: tuple[str, str]


@dataclass(frozen=True)
class FaceRecord:
    line_no: int
    vertex_count: int
    material_selector: int
    vertices: tuple[Vertex, ...]

    @property
    def is_texture(self) -> bool:
        return self.material_selector >= 0

    @property
    def material_index(self) -> int:
        return abs(self.material_selector)

    @property
    def material_name(self) -> str:
        if self.is_texture:
            return f"object_texture_{self.material_index}"
        return f"object_color_{self.material_index}"


@dataclass(frozen=True)
class PositionRecord:
    line_no: int
    vertex_count: int
    positions: tuple[tuple[str, str, str], ...]


def decode_text(data: bytes) -> str:
    # Read as bytes so only "\n" separates records; text mode would also split on a lone "\r".
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"input is not valid UTF-8 text: {exc}") from None


def split_lines(text: str) -> list[str]:
    # A final newline yields one empty record, which the parsers skip.
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def parse_int(token: str, what: str, line_no: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise ParseError(f"line {line_no}: {what} {token!r} is not an integer") from None


def read_vertex_count(tokens: list[str], line_no: int) -> int | None:
    if not tokens or tokens[0] in {"", "0"}:
        return None
    count = parse_int(tokens[0], "vertex count", line_no)
    if count < 0:
        raise ParseError(f"line {line_no}: negative vertex count {count}")
    if count == 0:
        return None
    return count


def take_components(tokens: list[str], count: int, stride: int, line_no: int) -> list[str]:
    needed = count * stride
    if len(tokens) < needed:
        raise ParseError(
            f"line {line_no}: {count} vertices need {needed} component values, found {len(tokens)}"
        )
    return tokens[:needed]


def parse_face_line(line: str, line_no: int = 1) -> FaceRecord | None:
    if not line:
        return None
    tokens = line.split(" ")
    count = read_vertex_count(tokens, line_no)
    if count is None:
        return None
    if len(tokens) < 2 or tokens[1] == "":
        raise ParseError(f"line {line_no}: missing material selector")
    selector = parse_int(tokens[1], "material selector", line_no)

    comps = take_components(tokens[2:], count, MESH_STRIDE, line_no)
    vertices = []
    for p in range(count):
        x, y, z, u, v = comps[p * MESH_STRIDE : (p + 1) * MESH_STRIDE]
        vertices.append(Vertex(position=(x, y, z), uv=(u, v)))

    return FaceRecord(
        line_no=line_no,
        vertex_count=count,
        material_selector=selector,
        vertices=tuple(vertices),
    )


def parse_face_text(text: str) -> list[FaceRecord]:
    records: list[FaceRecord] = []
    for line_no, line in enumerate(split_lines(text), start=1):
        record = parse_face_line(line, line_no)
        if record is not None:
            records.append(record)
    return records


def parse_position_line(line: str, line_no: int = 1) -> PositionRecord | None:
    if not line:
        return None
    tokens = line.split(" ")
    count = read_vertex_count(tokens, line_no)
    if count is None:
        return None

    comps = take_components(tokens[1:], count, ROOM_STRIDE, line_no)
    positions = tuple(
        (comps[p * 3], comps[p * 3 + 1], comps[p * 3 + 2]) for p in range(count)
    )
    return PositionRecord(line_no=line_no, vertex_count=count, positions=positions)


def parse_position_text(text: str) -> list[PositionRecord]:
    records: list[PositionRecord] = []
    for line_no, line in enumerate(split_lines(text), start=1):
        record = parse_position_line(line, line_no)
        if record is not None:
            records.append(record)
    return records
