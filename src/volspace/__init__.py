"""
Volspace - backend-agnostic affine transforms and coordinate spaces for
N-dimensional volumes.

Main package providing the transform algebra, tagged voxel/world coordinates
and volume descriptors.
"""

__version__ = "0.1.0"

from .core import (
    AffineTransform,
    Coordinate,
    DimensionMismatchError,
    NonInvertibleError,
    Space,
    SpaceTagMismatchError,
    VolspaceError,
    VolumeDescriptor,
    compose,
    identity,
    invert,
)
from .spatial.conversion import to_voxel, to_world

__all__ = [
    "__version__",
    "AffineTransform",
    "Coordinate",
    "Space",
    "VolumeDescriptor",
    "identity",
    "compose",
    "invert",
    "to_world",
    "to_voxel",
    "VolspaceError",
    "DimensionMismatchError",
    "NonInvertibleError",
    "SpaceTagMismatchError",
]
