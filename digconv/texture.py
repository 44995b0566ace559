"""Decode dig's .TRT texture atlases into PNG images.

A .TRT file is a raw grid of 8-bit palette indexes; its <name>.trt.mta sidecar
holds "<width> <height>". Index 0 is the transparent colour unless
transparent_zero is turned off.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from .errors import PaletteIndexError, TextureDataError
from .palette import read_palette


def meta_path_for(trt_path: Path) -> Path:
    return trt_path.with_name(trt_path.name + ".mta")


def parse_texture_meta(text: str) -> tuple[int, int]:
    parts = text.split()
    if len(parts) < 2:
        raise TextureDataError(f"Bad texture metadata {text!r}. Expected form: <width> <height>")
    try:
        width = int(parts[0])
        height = int(parts[1])
    except ValueError:
        raise TextureDataError(f"Bad texture metadata {text!r}. Expected integer width and height") from None
    if width <= 0 or height <= 0:
        raise TextureDataError(f"Bad texture size {width}x{height}")
    return width, height


def read_texture_meta(path: Path) -> tuple[int, int]:
    return parse_texture_meta(Path(path).read_text(encoding="ascii", errors="replace"))


def decode_indexed_image(
    pixels: bytes,
    width: int,
    height: int,
    palette: np.ndarray,
    transparent_zero: bool = True,
) -> Image.Image:
    count = width * height
    if len(pixels) < count:
        raise TextureDataError(f"Texture needs {count} pixels ({width}x{height}), found {len(pixels)}")

    indices = np.frombuffer(pixels[:count], dtype=np.uint8).reshape(height, width)
    top = int(indices.max(initial=0))
    if top >= len(palette):
        raise PaletteIndexError(
            f"pixel palette index {top} is outside the loaded palette ({len(palette)} entries)"
        )

    rgb = palette[indices]
    if not transparent_zero:
        return Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8))

    clear = indices == 0
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., :3][clear] = 0
    rgba[..., 3] = np.where(clear, 0, 255)
    return Image.fromarray(rgba)


def convert_texture(trt_path: Path, palette_path: Path, png_path: Path, transparent_zero: bool = True) -> tuple[int, int]:
    width, height = read_texture_meta(meta_path_for(trt_path))
    image = decode_indexed_image(
        trt_path.read_bytes(),
        width,
        height,
        read_palette(palette_path),
        transparent_zero=transparent_zero,
    )
    png_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(png_path, format="PNG")
    return width, height
