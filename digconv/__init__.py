"""Converters for meshes, palettes and textures exported by the dig Tomb Raider 1 extractor."""

__version__ = "0.1.0"
