from __future__ import annotations


class ParseError(RuntimeError):
    pass


class PaletteIndexError(ParseError):
    pass


class TextureDataError(ParseError):
    pass


class ConsistencyError(RuntimeError):
    pass
