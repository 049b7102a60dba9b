"""
VolumeDescriptor - a sample grid paired with its grid->world transform.

The descriptor references (never copies or writes) its sample grid and owns
exactly one affine transform of matching dimensionality. It is immutable:
re-registering a volume with a new transform produces a new descriptor over
the same grid.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any

from volspace.config import get_config
from volspace.core.affine import AffineTransform
from volspace.core.exceptions import ValidationError
from volspace.core.grids import SliceGrid, as_grid
from volspace.core.spaces import Coordinate, Space, ensure_coordinate
from volspace.core.validation import check_dimensionality
from volspace.spatial.cache import InverseCache
from volspace.spatial.conversion import to_voxel, to_world
from volspace.utils.logging import ConsoleLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldBounds:
    """Axis-aligned world-space bounding box.

    Attributes:
        lower: Per-axis minimum, tagged Space.WORLD
        upper: Per-axis maximum, tagged Space.WORLD
    """

    lower: Coordinate
    upper: Coordinate

    @property
    def extent(self) -> tuple[float, ...]:
        """Per-axis size of the box."""
        return (self.upper - self.lower).values

    def contains(self, point: Coordinate) -> bool:
        """Whether a world point lies inside the closed box."""
        point = ensure_coordinate(point, Space.WORLD, "bounds check")
        check_dimensionality(len(self.lower), point.ndim, "bounds check")
        return all(lo <= p <= hi for lo, p, hi in zip(self.lower, point, self.upper))


class VolumeDescriptor:
    """
    Sample grid with its grid->world affine transform.

    Parameters
    ----------
    grid : SampleGrid or array-like
        Sample data, referenced rather than copied. Anything exposing
        ``shape`` and ``__getitem__`` (numpy arrays, nibabel array proxies)
        is used as-is; other inputs are converted with ``np.asarray``.
    transform : AffineTransform
        Grid->world transform; its dimensionality must equal ``len(shape)``.
    cache_inverse : bool, optional
        Cache the inverse transform for world->voxel conversion.
        Defaults to the configured ``cache_inverse``.

    Raises
    ------
    DimensionMismatchError
        If the grid and transform dimensionalities differ.
    ValidationError
        If the grid shape has non-positive extents.

    Examples
    --------
    >>> import numpy as np
    >>> volume = VolumeDescriptor(
    ...     np.zeros((91, 109, 91)),
    ...     AffineTransform([[2, 0, 0], [0, 2, 0], [0, 0, 2]], [-90, -126, -72]),
    ... )
    >>> volume.to_world(Coordinate.voxel([45, 63, 36]))
    Coordinate.world((0, 0, 0))
    """

    def __init__(
        self,
        grid: Any,
        transform: AffineTransform,
        cache_inverse: bool | None = None,
    ):
        if not isinstance(transform, AffineTransform):
            raise TypeError(f"transform must be an AffineTransform, got {type(transform).__name__}")

        self._grid = as_grid(grid)
        self._shape = tuple(self._grid.shape)
        check_dimensionality(len(self._shape), transform.dimensionality, "volume construction")
        self._transform = transform

        if cache_inverse is None:
            cache_inverse = get_config().cache_inverse
        self._inverse_cache = InverseCache(enabled=cache_inverse)

    @classmethod
    def from_homogeneous(
        cls, grid: Any, matrix: Any, backend: str | None = None, cache_inverse: bool | None = None
    ) -> VolumeDescriptor:
        """Build a descriptor from a grid and a (D+1) x (D+1) homogeneous affine."""
        return cls(grid, AffineTransform.from_homogeneous(matrix, backend=backend), cache_inverse)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def shape(self) -> tuple[int, ...]:
        """Per-axis extents of the sample grid."""
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def grid(self):
        """The referenced sample grid (read-only)."""
        return self._grid

    @property
    def transform(self) -> AffineTransform:
        """Grid->world transform."""
        return self._transform

    @property
    def inverse_cache(self) -> InverseCache:
        return self._inverse_cache

    def inverse_transform(self) -> AffineTransform:
        """World->grid transform (cached).

        Raises:
            NonInvertibleError: If the grid->world transform is singular
        """
        return self._inverse_cache.get_inverse(self._transform)

    def voxel_sizes(self) -> tuple[float, ...]:
        """World-space length of one voxel step along each grid axis."""
        return self._transform.voxel_sizes()

    # ------------------------------------------------------------------
    # Coordinate conversion
    # ------------------------------------------------------------------

    def to_world(self, voxel_coord: Coordinate) -> Coordinate:
        """Map a voxel coordinate to world space."""
        return to_world(voxel_coord, self)

    def to_voxel(self, world_coord: Coordinate) -> Coordinate:
        """Map a world coordinate to (fractional) voxel space."""
        return to_voxel(world_coord, self)

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------

    def voxel_corners(self) -> list[tuple[float, ...]]:
        """All 2^D corners of the voxel box spanned by 0 and each extent."""
        return list(itertools.product(*[(0.0, float(extent)) for extent in self._shape]))

    def bounds_world(self) -> WorldBounds:
        """
        Axis-aligned world bounding box of the grid.

        Every corner of the voxel box is mapped, since with rotation or shear
        the extreme world coordinates need not come from the min/max voxel
        corners.

        Returns
        -------
        WorldBounds
            Per-axis minimum and maximum world coordinates.
        """
        corners = self._transform.apply_points(self.voxel_corners())
        lower = tuple(min(axis) for axis in zip(*corners))
        upper = tuple(max(axis) for axis in zip(*corners))
        return WorldBounds(Coordinate.world(lower), Coordinate.world(upper))

    def _inside(self, values: tuple[float, ...]) -> bool:
        return all(0.0 <= v < extent for v, extent in zip(values, self._shape))

    def contains_voxel(self, point: Coordinate) -> bool:
        """
        Whether a voxel coordinate lies within ``[0, extent)`` on every axis.

        Raises
        ------
        SpaceTagMismatchError
            If point is not tagged ``Space.VOXEL``.
        """
        point = ensure_coordinate(point, Space.VOXEL, "contains_voxel")
        check_dimensionality(self.ndim, point.ndim, "contains_voxel")
        return self._inside(point.values)

    def contains_world(self, point: Coordinate) -> bool:
        """
        Whether a world coordinate falls inside the grid.

        Raises
        ------
        SpaceTagMismatchError
            If point is not tagged ``Space.WORLD``.
        NonInvertibleError
            If the transform cannot be inverted.
        """
        return self._inside(self.to_voxel(point).values)

    # ------------------------------------------------------------------
    # Derived descriptors and grid access
    # ------------------------------------------------------------------

    def with_transform(self, new_transform: AffineTransform) -> VolumeDescriptor:
        """
        New descriptor over the same grid with a replaced transform.

        The new descriptor starts with an empty inverse cache.

        Raises
        ------
        DimensionMismatchError
            If new_transform has a different dimensionality.
        """
        if not isinstance(new_transform, AffineTransform):
            raise TypeError(
                f"new_transform must be an AffineTransform, got {type(new_transform).__name__}"
            )
        check_dimensionality(self.ndim, new_transform.dimensionality, "with_transform")
        return VolumeDescriptor(self._grid, new_transform, cache_inverse=self._inverse_cache.enabled)

    def value_at(self, voxel_coord: Coordinate) -> Any:
        """
        Read the sample at an integral voxel coordinate.

        Raises
        ------
        SpaceTagMismatchError
            If voxel_coord is not tagged ``Space.VOXEL``.
        ValidationError
            If the coordinate is fractional or outside the grid.
        """
        coord = ensure_coordinate(voxel_coord, Space.VOXEL, "value_at")
        check_dimensionality(self.ndim, coord.ndim, "value_at")
        if not all(v.is_integer() for v in coord.values):
            raise ValidationError(f"value_at requires integral voxel indices, got {coord.values}")
        if not self._inside(coord.values):
            raise ValidationError(f"Voxel index {coord.values} outside grid of shape {self._shape}")
        return self._grid[tuple(int(v) for v in coord.values)]

    def grid_slice(self, axis: int, index: int) -> SliceGrid:
        """Non-copying view of the grid with axis fixed at index."""
        return SliceGrid(self._grid, axis, index)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """Key properties as a plain dictionary."""
        bounds = self.bounds_world()
        return {
            "shape": self._shape,
            "dimensionality": self.ndim,
            "voxel_sizes": tuple(round(v, 6) for v in self.voxel_sizes()),
            "bounds_lower": tuple(round(v, 6) for v in bounds.lower),
            "bounds_upper": tuple(round(v, 6) for v in bounds.upper),
            "invertible": self._transform.is_invertible(),
            "backend": self._transform.backend.name,
        }

    def describe(self, log_level: int | None = None) -> None:
        """Print a summary of the volume through ConsoleLogger."""
        if log_level is None:
            log_level = get_config().log_level
        console = ConsoleLogger(log_level=log_level)

        summary = self.summary()
        console.section("VOLUME DESCRIPTOR")
        console.result_summary("Geometry", summary)
        if not summary["invertible"]:
            console.warning("Transform is not invertible; world->voxel conversion will fail")
        console.info(f"Grid: {self._grid!r}", verbose=True)
        console.info(f"Transform: {self._transform!r}", verbose=True)

    def __repr__(self) -> str:
        return f"VolumeDescriptor(shape={self._shape}, transform={self._transform!r})"


__all__ = ["VolumeDescriptor", "WorldBounds"]
