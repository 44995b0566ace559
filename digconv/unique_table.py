from __future__ import annotations

import math
import re
from typing import Iterator


DECIMAL_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def numeric_key(values: tuple[str, ...]) -> tuple[float, ...]:
    """Compare coordinate tokens by value, so "1", "1.0" and "1.00" collapse together.

    Only finite decimal literals are accepted; nan, inf, "1_0" and overflowing
    exponents raise ValueError.
    """
    out = []
    for x in values:
        if not DECIMAL_RE.fullmatch(x):
            raise ValueError(f"not a decimal number: {x!r}")
        value = float(x)
        if not math.isfinite(value):
            raise ValueError(f"not a finite number: {x!r}")
        out.append(value)
    return tuple(out)


class UniqueAttributeTable:
    """Insertion-ordered list of distinct attribute tuples with O(1) value lookup.

    The first text form seen for a value is the one kept for output. Indexes are
    0-based and never change once assigned.
    """

    def __init__(self, arity: int) -> None:
        if arity <= 0:
            raise ValueError(f"arity must be positive, got {arity}")
        self.arity = arity
        self._items: list[tuple[str, ...]] = []
        self._index: dict[tuple[float, ...], int] = {}

    def _key(self, values: tuple[str, ...]) -> tuple[float, ...]:
        if len(values) != self.arity:
            raise ValueError(f"expected {self.arity} components, got {len(values)}")
        return numeric_key(values)

    def insert_if_absent(self, values: tuple[str, ...]) -> int:
        key = self._key(values)
        idx = self._index.get(key)
        if idx is None:
            idx = len(self._items)
            self._items.append(tuple(values))
            self._index[key] = idx
        return idx

    def index_of(self, values: tuple[str, ...]) -> int | None:
        return self._index.get(self._key(values))

    def at(self, idx: int) -> tuple[str, ...]:
        if idx < 0 or idx >= len(self._items):
            raise IndexError(f"table index {idx} out of range (count {len(self._items)})")
        return self._items[idx]

    def count(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return iter(self._items)
