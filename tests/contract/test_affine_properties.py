"""
Contract tests for affine transform algebra.

These hold for every registered matrix backend.
"""

import math

import pytest

from volspace import (
    AffineTransform,
    Coordinate,
    DimensionMismatchError,
    NonInvertibleError,
    VolumeDescriptor,
    compose,
    identity,
    invert,
)

SAMPLE_POINTS = [
    (0.0, 0.0, 0.0),
    (1.0, 2.0, 3.0),
    (-7.5, 0.25, 12.0),
    (45.0, 63.0, 36.0),
]


@pytest.fixture
def second_transform(backend_name):
    rotation = AffineTransform.from_rotation(math.radians(-20), dimensionality=3, axes=(1, 2))
    return (AffineTransform.from_translation([3.0, -1.0, 0.5]) @ rotation).with_backend(backend_name)


@pytest.fixture
def third_transform(backend_name):
    return AffineTransform([[1.0, 0.0, 0.3], [0.0, 0.5, 0.0], [0.0, 0.0, 2.0]], [0.0, 4.0, -2.0], backend=backend_name)


@pytest.mark.contract
class TestCompositionContract:
    """Composition is associative and applies inner first."""

    def test_associativity(self, oblique_transform, second_transform, third_transform):
        left = compose(compose(oblique_transform, second_transform), third_transform)
        right = compose(oblique_transform, compose(second_transform, third_transform))

        assert left.allclose(right, atol=1e-9)

    def test_composition_applies_inner_first(self, oblique_transform, second_transform):
        combined = compose(oblique_transform, second_transform)

        for p in SAMPLE_POINTS:
            expected = oblique_transform.apply_point(second_transform.apply_point(p))
            assert combined.apply_point(p) == pytest.approx(expected)

    def test_identity_is_neutral(self, oblique_transform, backend_name):
        eye = identity(3, backend=backend_name)

        assert compose(oblique_transform, eye).allclose(oblique_transform)
        assert compose(eye, oblique_transform).allclose(oblique_transform)

    def test_identity_fixes_points(self, backend_name):
        eye = identity(3, backend=backend_name)
        for p in SAMPLE_POINTS:
            assert eye.apply_point(p) == p


@pytest.mark.contract
class TestInversionContract:
    """Inversion round-trips points and composes to the identity."""

    def test_compose_with_inverse_is_identity(self, oblique_transform):
        inverse = invert(oblique_transform)

        assert compose(oblique_transform, inverse).is_identity(atol=1e-9)
        assert compose(inverse, oblique_transform).is_identity(atol=1e-9)

    def test_round_trip_points(self, oblique_transform):
        inverse = invert(oblique_transform)

        for p in SAMPLE_POINTS:
            assert inverse.apply_point(oblique_transform.apply_point(p)) == pytest.approx(p, abs=1e-9)

    def test_double_inverse(self, oblique_transform):
        assert invert(invert(oblique_transform)).allclose(oblique_transform, atol=1e-9)

    def test_inverse_determinant(self, oblique_transform):
        assert invert(oblique_transform).determinant() == pytest.approx(1.0 / oblique_transform.determinant())

    def test_singular_transform_raises(self, backend_name):
        flat = AffineTransform([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 0.0]], backend=backend_name)

        assert not flat.is_invertible()
        with pytest.raises(NonInvertibleError):
            invert(flat)

    def test_zero_linear_part_raises(self, backend_name):
        zero = AffineTransform([[0.0, 0.0], [0.0, 0.0]], [1.0, 1.0], backend=backend_name)

        with pytest.raises(NonInvertibleError, match="all zeros"):
            invert(zero)

    def test_nearly_singular_transform_raises(self, backend_name):
        nearly = AffineTransform([[1.0, 1.0], [1.0, 1.0 + 1e-14]], backend=backend_name)

        with pytest.raises(NonInvertibleError):
            invert(nearly)

    def test_to_voxel_on_singular_volume_raises(self, synthetic_grid, backend_name):
        flat = AffineTransform([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 0.0]], backend=backend_name)
        volume = VolumeDescriptor(synthetic_grid, flat)

        # voxel->world still works
        assert volume.to_world(Coordinate.voxel([1, 1, 1])) == Coordinate.world([1, 1, 0])
        with pytest.raises(NonInvertibleError):
            volume.to_voxel(Coordinate.world([1, 1, 0]))


@pytest.mark.contract
class TestPointVectorContract:
    """Points are translated, vectors are not."""

    def test_translation_moves_points_not_vectors(self, backend_name):
        shift = AffineTransform.from_translation([1.0, 0.0, 0.0], backend=backend_name)

        assert shift.apply_point([0.0, 0.0, 0.0]) == (1.0, 0.0, 0.0)
        assert shift.apply_vector([0.0, 0.0, 0.0]) == (0.0, 0.0, 0.0)
        assert shift.apply_vector([0.0, 2.0, 0.0]) == (0.0, 2.0, 0.0)

    def test_vector_is_difference_of_points(self, oblique_transform):
        a, b = SAMPLE_POINTS[1], SAMPLE_POINTS[2]
        mapped_a = oblique_transform.apply_point(a)
        mapped_b = oblique_transform.apply_point(b)
        displacement = tuple(y - x for x, y in zip(a, b))

        expected = tuple(y - x for x, y in zip(mapped_a, mapped_b))
        assert oblique_transform.apply_vector(displacement) == pytest.approx(expected)

    def test_apply_points_matches_apply_point(self, oblique_transform):
        batch = oblique_transform.apply_points(SAMPLE_POINTS)

        for p, mapped in zip(SAMPLE_POINTS, batch):
            assert mapped == pytest.approx(oblique_transform.apply_point(p))


@pytest.mark.contract
class TestDimensionContract:
    """Mixing dimensionalities always fails."""

    def test_compose_mismatch(self, backend_name):
        with pytest.raises(DimensionMismatchError):
            compose(identity(3, backend=backend_name), identity(2, backend=backend_name))

    def test_apply_point_mismatch(self, oblique_transform):
        with pytest.raises(DimensionMismatchError):
            oblique_transform.apply_point([1.0, 2.0])

    def test_apply_vector_mismatch(self, oblique_transform):
        with pytest.raises(DimensionMismatchError):
            oblique_transform.apply_vector([1.0, 2.0, 3.0, 4.0])

    def test_volume_construction_mismatch(self, synthetic_grid):
        with pytest.raises(DimensionMismatchError):
            VolumeDescriptor(synthetic_grid, identity(2))

    def test_different_dimensionality_never_close(self):
        assert not identity(2).allclose(identity(3))
