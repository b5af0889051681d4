"""Chunked voxel world: blocks, light propagation, quad mesh data, prefabs and helpers."""

__version__ = "0.1.0"

__all__ = [
    "block",
    "chunk",
    "coords",
    "cvars",
    "hud",
    "light",
    "manager",
    "mesh",
    "prefab",
    "shading",
    "shapes",
    "utilities",
    "world",
]