"""Write dig room meshes (.TRM, positions only) as ASCII STL.

Polygons are fan-split from their first vertex, so a quad 0-1-2-3 becomes the
triangles 0-1-2 and 0-2-3. Normals are left at zero for the importer to
recompute.
"""

from __future__ import annotations

from typing import Iterable, TextIO

from .records import PositionRecord


Position = tuple[str, str, str]


def triangulate(record: PositionRecord) -> list[tuple[Position, Position, Position]]:
    pts = record.positions
    if len(pts) < 3:
        return []
    root = pts[0]
    return [(root, pts[i], pts[i + 1]) for i in range(1, len(pts) - 1)]


def write_stl(stream: TextIO, records: Iterable[PositionRecord], solid_name: str = "room") -> int:
    written = 0
    stream.write(f"solid {solid_name}\n")
    for record in records:
        for tri in triangulate(record):
            stream.write("facet normal 0 0 0\n")
            stream.write("\touter loop\n")
            for x, y, z in tri:
                stream.write(f"\t\tvertex {x} {y} {z}\n")
            stream.write("\tendloop\n")
            stream.write("endfacet\n")
            written += 1
    stream.write(f"endsolid {solid_name}\n")
    return written
