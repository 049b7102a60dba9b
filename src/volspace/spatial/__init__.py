"""Spatial operations: voxel/world coordinate conversion and inverse caching."""

__all__ = [
    "conversion",
    "cache",
]
