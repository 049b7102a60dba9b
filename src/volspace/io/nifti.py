"""
Interoperability with nibabel images.

nibabel does all header parsing; this module only reads an image's voxel->world
affine and data object, and builds images back from 3-D volume descriptors.
"""

from __future__ import annotations

import logging

try:
    import nibabel as nib
    import numpy as np
except ImportError as e:
    raise ImportError(
        "nibabel and numpy are required for NIfTI interop. "
        "Install with: pip install volspace[nifti]"
    ) from e

from volspace.core.affine import AffineTransform
from volspace.core.exceptions import DimensionMismatchError, ValidationError
from volspace.core.grids import ArrayGrid, SliceGrid
from volspace.core.volume import VolumeDescriptor

logger = logging.getLogger(__name__)

SPATIAL_DIMS = 3


def volume_from_nifti(
    img: nib.spatialimages.SpatialImage,
    volume_index: int = 0,
    backend: str | None = None,
    cache_inverse: bool | None = None,
) -> VolumeDescriptor:
    """
    Create a VolumeDescriptor from a nibabel image.

    The image's data object is referenced, not loaded: for proxy-backed images
    samples are only read on access.

    Parameters
    ----------
    img : nibabel.spatialimages.SpatialImage
        Image with a 4x4 voxel->world affine (e.g. Nifti1Image).
    volume_index : int, default=0
        For images with more than 3 axes, the index selected along each
        non-spatial axis.
    backend : str, optional
        Matrix backend for the transform.
    cache_inverse : bool, optional
        Forwarded to VolumeDescriptor.

    Returns
    -------
    VolumeDescriptor
        3-D descriptor in the image's world (scanner/template) space.

    Raises
    ------
    DimensionMismatchError
        If the image has fewer than 3 axes.
    ValidationError
        If the image has no affine.

    Examples
    --------
    >>> img = nib.Nifti1Image(np.zeros((91, 109, 91)), np.diag([2, 2, 2, 1]))
    >>> volume = volume_from_nifti(img)
    >>> volume.voxel_sizes()
    (2.0, 2.0, 2.0)
    """
    if img.affine is None:
        raise ValidationError("Image has no affine; cannot relate voxels to world space")

    shape = img.shape
    if len(shape) < SPATIAL_DIMS:
        raise DimensionMismatchError(SPATIAL_DIMS, len(shape), "volume_from_nifti")

    transform = AffineTransform.from_homogeneous(img.affine, backend=backend, atol=1e-6)

    grid = ArrayGrid(img.dataobj)
    # Fix trailing non-spatial axes, always slicing the last remaining axis
    for axis in range(len(shape) - 1, SPATIAL_DIMS - 1, -1):
        grid = SliceGrid(grid, axis, volume_index)

    if len(shape) > SPATIAL_DIMS:
        logger.debug(f"Selected volume {volume_index} of image with shape {shape}")

    return VolumeDescriptor(grid, transform, cache_inverse=cache_inverse)


def volume_to_nifti(volume: VolumeDescriptor, dtype: np.dtype | None = None) -> nib.Nifti1Image:
    """
    Build a Nifti1Image from a 3-D volume descriptor.

    Parameters
    ----------
    volume : VolumeDescriptor
        3-D descriptor; its grid is materialized with ``to_ndarray``.
    dtype : numpy dtype, optional
        Cast the data to this dtype.

    Raises
    ------
    DimensionMismatchError
        If the volume is not 3-D.
    """
    if volume.ndim != SPATIAL_DIMS:
        raise DimensionMismatchError(SPATIAL_DIMS, volume.ndim, "volume_to_nifti")

    data = volume.grid.to_ndarray()
    if dtype is not None:
        data = data.astype(dtype)
    return nib.Nifti1Image(data, volume.transform.as_array())


def axis_codes(volume: VolumeDescriptor) -> tuple[str, ...]:
    """
    Anatomical axis direction codes of a 3-D volume, e.g. ``("R", "A", "S")``.

    Raises
    ------
    DimensionMismatchError
        If the volume is not 3-D.
    """
    if volume.ndim != SPATIAL_DIMS:
        raise DimensionMismatchError(SPATIAL_DIMS, volume.ndim, "axis_codes")
    return tuple(nib.aff2axcodes(volume.transform.as_array()))


__all__ = ["volume_from_nifti", "volume_to_nifti", "axis_codes"]
