from __future__ import annotations

import pytest


def make_palette(entries: dict[int, tuple[int, int, int]] | None = None, size: int = 256) -> bytes:
    data = bytearray(size * 3)
    for idx, (r, g, b) in (entries or {}).items():
        data[idx * 3 : idx * 3 + 3] = bytes((r, g, b))
    return bytes(data)


@pytest.fixture
def palette_bytes() -> bytes:
    return make_palette({5: (128, 64, 32), 7: (255, 0, 51)})
