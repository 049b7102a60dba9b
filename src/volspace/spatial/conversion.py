"""Conversion of tagged coordinates between voxel and world space.

The only way to move a coordinate from one space to the other is through a
volume's grid->world transform; the result is always tagged with the
destination space.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from volspace.core.spaces import Coordinate, Space, ensure_coordinate
from volspace.core.validation import check_dimensionality

if TYPE_CHECKING:
    from volspace.core.volume import VolumeDescriptor


def to_world(voxel_coord: Coordinate, volume: VolumeDescriptor) -> Coordinate:
    """
    Map a voxel-space coordinate to world space.

    Parameters
    ----------
    voxel_coord : Coordinate
        Coordinate tagged ``Space.VOXEL``.
    volume : VolumeDescriptor
        Volume whose grid->world transform is applied.

    Returns
    -------
    Coordinate
        Coordinate tagged ``Space.WORLD``.

    Raises
    ------
    SpaceTagMismatchError
        If voxel_coord is untagged or tagged ``Space.WORLD``.
    DimensionMismatchError
        If the coordinate and volume dimensionalities differ.

    Examples
    --------
    >>> world = to_world(Coordinate.voxel([0, 0, 0]), volume)
    >>> world.space
    <Space.WORLD: 'world'>
    """
    coord = ensure_coordinate(voxel_coord, Space.VOXEL, "to_world")
    check_dimensionality(volume.ndim, coord.ndim, "to_world")
    return Coordinate.world(volume.transform.apply_point(coord.values))


def to_voxel(world_coord: Coordinate, volume: VolumeDescriptor) -> Coordinate:
    """
    Map a world-space coordinate to (fractional) voxel space.

    Uses the volume's cached inverse transform.

    Parameters
    ----------
    world_coord : Coordinate
        Coordinate tagged ``Space.WORLD``.
    volume : VolumeDescriptor
        Volume whose grid->world transform is inverted.

    Returns
    -------
    Coordinate
        Coordinate tagged ``Space.VOXEL``.

    Raises
    ------
    SpaceTagMismatchError
        If world_coord is untagged or tagged ``Space.VOXEL``.
    DimensionMismatchError
        If the coordinate and volume dimensionalities differ.
    NonInvertibleError
        If the volume's transform cannot be inverted.
    """
    coord = ensure_coordinate(world_coord, Space.WORLD, "to_voxel")
    check_dimensionality(volume.ndim, coord.ndim, "to_voxel")
    return Coordinate.voxel(volume.inverse_transform().apply_point(coord.values))


__all__ = ["to_world", "to_voxel"]
