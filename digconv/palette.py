"""Load dig's .PAL palettes: a flat run of 8-bit R, G, B triples (256 entries expected)."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .errors import PaletteIndexError


PALETTE_ENTRIES = 256


def load_palette(data: bytes) -> np.ndarray:
    n = len(data) // 3
    # Any trailing partial triple is dropped.
    return np.frombuffer(data[: n * 3], dtype=np.uint8).reshape(n, 3).copy()


def read_palette(path: Path) -> np.ndarray:
    return load_palette(Path(path).read_bytes())


def palette_color(palette: np.ndarray, index: int) -> tuple[int, int, int]:
    if index < 0 or index >= len(palette):
        raise PaletteIndexError(
            f"palette index {index} is outside the loaded palette ({len(palette)} entries)"
        )
    r, g, b = palette[index]
    return int(r), int(g), int(b)


def normalized_color(rgb: tuple[int, int, int]) -> tuple[float, float, float]:
    return rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0
