"""
Shared test fixtures for volspace tests.

Provides common fixtures used across contract, integration, and unit tests.
"""

import math

import nibabel as nib
import numpy as np
import pytest

BACKENDS = ["python", "numpy"]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Run every test against default configuration, unaffected by the environment."""
    from volspace.config import reset_config

    for var in ("VOLSPACE_CONFIG", "VOLSPACE_BACKEND", "VOLSPACE_ATOL"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(params=BACKENDS)
def backend_name(request):
    """Name of each registered matrix backend in turn."""
    return request.param


@pytest.fixture
def oblique_transform(backend_name):
    """3D grid->world transform with rotation, anisotropic scaling, shear and translation."""
    from volspace.core.affine import AffineTransform

    rotation = AffineTransform.from_rotation(math.radians(30), dimensionality=3, axes=(0, 1))
    scaling = AffineTransform.from_scaling([2.0, 1.5, 3.0])
    shear = AffineTransform([[1.0, 0.2, 0.0], [0.0, 1.0, 0.1], [0.0, 0.0, 1.0]])
    shift = AffineTransform.from_translation([-90.0, -126.0, -72.0])

    transform = shift @ rotation @ shear @ scaling
    return transform.with_backend(backend_name)


@pytest.fixture
def mni_transform():
    """MNI152NLin6Asym 2mm grid->world transform."""
    from volspace.core.affine import AffineTransform

    return AffineTransform.from_homogeneous(
        [
            [2.0, 0.0, 0.0, -90.0],
            [0.0, 2.0, 0.0, -126.0],
            [0.0, 0.0, 2.0, -72.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


@pytest.fixture
def synthetic_grid():
    """Small 3D grid with distinct values per voxel."""
    return np.arange(4 * 5 * 6, dtype=np.float32).reshape(4, 5, 6)


@pytest.fixture
def synthetic_volume(synthetic_grid, oblique_transform):
    """VolumeDescriptor over synthetic_grid with an oblique transform."""
    from volspace.core.volume import VolumeDescriptor

    return VolumeDescriptor(synthetic_grid, oblique_transform)


@pytest.fixture
def synthetic_nifti_img():
    """Synthetic 3D NIfTI image in MNI152NLin6Asym 2mm space."""
    shape = (16, 18, 14)
    data = np.zeros(shape, dtype=np.int16)
    data[8, 9, 7] = 1

    affine = np.array(
        [
            [2.0, 0.0, 0.0, -90.0],
            [0.0, 2.0, 0.0, -126.0],
            [0.0, 0.0, 2.0, -72.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return nib.Nifti1Image(data, affine)
