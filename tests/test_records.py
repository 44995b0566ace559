from __future__ import annotations

import pytest

from digconv.errors import ParseError
from digconv.records import (
    Vertex,
    decode_text,
    parse_face_line,
    parse_face_text,
    parse_position_line,
    parse_position_text,
    split_lines,
)


TRIANGLE = "3 0 0 0 0 0 0 1 0 0 1 0 0 1 1 1 1"


def test_parse_triangle_keeps_tokens_verbatim():
    rec = parse_face_line(TRIANGLE, 4)
    assert rec is not None
    assert rec.line_no == 4
    assert rec.vertex_count == 3
    assert rec.material_selector == 0
    assert rec.vertices == (
        Vertex(position=("0", "0", "0"), uv=("0", "0")),
        Vertex(position=("1", "0", "0"), uv=("1", "0")),
        Vertex(position=("0", "1", "1"), uv=("1", "1")),
    )


def test_material_names():
    assert parse_face_line(TRIANGLE).material_name == "object_texture_0"
    rec = parse_face_line("1 -5 1.5 2 3 0.25 0.75")
    assert not rec.is_texture
    assert rec.material_index == 5
    assert rec.material_name == "object_color_5"
    assert rec.vertices[0].position == ("1.5", "2", "3")


@pytest.mark.parametrize("line", ["", "0", "0 3", "0 -1 1 2 3 4 5", " "])
def test_placeholder_records_are_skipped(line):
    assert parse_face_line(line) is None


@pytest.mark.parametrize(
    "line",
    [
        "x 0 1 2 3 4 5",
        "1",
        "1 abc 1 2 3 4 5",
        "-1 0",
        "2 0 1 2 3 4 5 6 7 8",
    ],
)
def test_malformed_records_raise(line):
    with pytest.raises(ParseError):
        parse_face_line(line, 9)


def test_short_record_reports_line_number():
    with pytest.raises(ParseError, match="line 2"):
        parse_face_text(TRIANGLE + "\n3 0 1 2 3\n")


def test_extra_trailing_tokens_are_ignored():
    rec = parse_face_line("1 2 1 2 3 4 5 99")
    assert rec.vertices == (Vertex(position=("1", "2", "3"), uv=("4", "5")),)


def test_parse_text_skips_blank_and_zero_lines():
    text = "\n" + TRIANGLE + "\n0 1\n\n1 -2 9 9 9 0 0\n"
    records = parse_face_text(text)
    assert [r.line_no for r in records] == [2, 5]
    assert [r.material_selector for r in records] == [0, -2]


def test_split_lines_strips_carriage_returns():
    assert split_lines("a\r\nb\n") == ["a", "b", ""]


def test_position_records():
    rec = parse_position_line("4 0 0 0 1 0 0 1 1 0 0 1 0")
    assert rec.vertex_count == 4
    assert rec.positions[2] == ("1", "1", "0")
    assert parse_position_line("") is None
    assert parse_position_line("0") is None
    with pytest.raises(ParseError):
        parse_position_line("3 0 0 0 1 1 1")


def test_position_text_keeps_order():
    records = parse_position_text("3 0 0 0 1 0 0 0 1 0\n\n3 5 5 5 6 5 5 5 6 5")
    assert [r.line_no for r in records] == [1, 3]


def test_decode_text():
    assert decode_text(b"1 0 0 0 0 0 0\r\n") == "1 0 0 0 0 0 0\r\n"
    with pytest.raises(ParseError, match="UTF-8"):
        decode_text(b"3 0 0\n\xff\n")
