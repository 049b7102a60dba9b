"""
Core data structures: affine transforms, coordinate spaces, sample grids
and volume descriptors.
"""

from .exceptions import (
    BackendNotAvailableError,
    ConfigError,
    DimensionMismatchError,
    NonInvertibleError,
    SpaceTagMismatchError,
    ValidationError,
    VolspaceError,
)
from .spaces import Coordinate, Space, ensure_coordinate
from .grids import ArrayGrid, SampleGrid, SliceGrid, as_grid, to_ndarray
from .affine import (
    AffineTransform,
    allclose,
    apply_point,
    apply_vector,
    compose,
    identity,
    invert,
)
from .volume import VolumeDescriptor, WorldBounds

__all__ = [
    # Exceptions
    "VolspaceError",
    "ValidationError",
    "ConfigError",
    "DimensionMismatchError",
    "NonInvertibleError",
    "SpaceTagMismatchError",
    "BackendNotAvailableError",
    # Coordinate spaces
    "Space",
    "Coordinate",
    "ensure_coordinate",
    # Grids
    "SampleGrid",
    "ArrayGrid",
    "SliceGrid",
    "as_grid",
    "to_ndarray",
    # Transforms
    "AffineTransform",
    "identity",
    "compose",
    "invert",
    "apply_point",
    "apply_vector",
    "allclose",
    # Volumes
    "VolumeDescriptor",
    "WorldBounds",
]
