"""Resolve face material selectors into MTL material definitions.

Selector >= 0 names a texture atlas page (<texture_dir><selector><ext>); a
negative selector is a flat colour taken from the level palette.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, TextIO

import numpy as np

from .errors import PaletteIndexError
from .palette import normalized_color, palette_color
from .records import FaceRecord


MaterialKey = tuple[str, int]


@dataclass(frozen=True)
class Material:
    name: str
    diffuse: tuple[float, float, float]
    texture_path: str | None = None

    def mtl_lines(self) -> list[str]:
        if self.texture_path is not None:
            kd = "Kd 1 1 1"
        else:
            r, g, b = self.diffuse
            kd = f"Kd {r:.6f} {g:.6f} {b:.6f}"
        lines = [
            f"newmtl {self.name}",
            kd,
            "Ks 0 0 0",
            "Ns 0",
            "illum 0",
        ]
        if self.texture_path is not None:
            lines.append(f"map_Kd {self.texture_path}")
        return lines


def material_key(record: FaceRecord) -> MaterialKey:
    return ("texture" if record.is_texture else "color", record.material_index)


class MaterialSet:
    """Materials keyed by (kind, index) in first-seen order; re-adding a key keeps the first."""

    def __init__(self) -> None:
        self._materials: dict[MaterialKey, Material] = {}

    def add(self, key: MaterialKey, material: Material) -> bool:
        if key in self._materials:
            return False
        self._materials[key] = material
        return True

    def get(self, key: MaterialKey) -> Material | None:
        return self._materials.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._materials

    def __len__(self) -> int:
        return len(self._materials)

    def __iter__(self) -> Iterator[Material]:
        return iter(self._materials.values())


def make_material(record: FaceRecord, palette: np.ndarray, texture_dir: str, texture_ext: str) -> Material:
    idx = record.material_index
    if record.is_texture:
        return Material(
            name=record.material_name,
            diffuse=(1.0, 1.0, 1.0),
            texture_path=f"{texture_dir}{idx}{texture_ext}",
        )
    try:
        rgb = palette_color(palette, idx)
    except PaletteIndexError as exc:
        raise PaletteIndexError(f"line {record.line_no}: {exc}") from None
    return Material(name=record.material_name, diffuse=normalized_color(rgb))


def resolve_materials(
    records: Iterable[FaceRecord],
    palette: np.ndarray,
    texture_dir: str = "",
    texture_ext: str = ".png",
) -> MaterialSet:
    materials = MaterialSet()
    for record in records:
        key = material_key(record)
        if key in materials:
            continue
        materials.add(key, make_material(record, palette, texture_dir, texture_ext))
    return materials


def write_mtl(stream: TextIO, materials: MaterialSet) -> None:
    for material in materials:
        for line in material.mtl_lines():
            stream.write(line + "\n")
        stream.write("\n")
