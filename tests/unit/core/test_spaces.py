"""Unit tests for coordinate space tags and tagged coordinates."""

import dataclasses

import pytest

from volspace.core.exceptions import (
    DimensionMismatchError,
    SpaceTagMismatchError,
    ValidationError,
)
from volspace.core.spaces import Coordinate, Space, ensure_coordinate


@pytest.mark.unit
class TestSpace:
    """Tests for the Space enum."""

    def test_values(self):
        assert Space.VOXEL.value == "voxel"
        assert Space.WORLD.value == "world"

    def test_is_string_enum(self):
        assert Space.WORLD == "world"

    def test_coerce(self):
        assert Space.coerce("voxel") is Space.VOXEL
        assert Space.coerce(Space.WORLD) is Space.WORLD

    def test_coerce_unknown_space(self):
        with pytest.raises(ValidationError, match="space must be one of"):
            Space.coerce("scanner")


@pytest.mark.unit
class TestCoordinateConstruction:
    """Tests for building coordinates."""

    def test_voxel_constructor(self):
        c = Coordinate.voxel([1, 2, 3])

        assert c.values == (1.0, 2.0, 3.0)
        assert c.space is Space.VOXEL
        assert c.ndim == 3
        assert len(c) == 3

    def test_world_constructor_from_string_tag(self):
        c = Coordinate([0.5, -1.5], "world")
        assert c.space is Space.WORLD

    def test_empty_coordinate_rejected(self):
        with pytest.raises(ValidationError):
            Coordinate.voxel([])

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError):
            Coordinate.world([0.0, float("nan")])

    def test_frozen(self):
        c = Coordinate.voxel([1, 2])
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.space = Space.WORLD

    def test_equality_includes_tag(self):
        assert Coordinate.voxel([1, 2]) == Coordinate.voxel([1.0, 2.0])
        assert Coordinate.voxel([1, 2]) != Coordinate.world([1, 2])

    def test_hashable(self):
        assert len({Coordinate.voxel([1, 2]), Coordinate.voxel([1, 2])}) == 1

    def test_indexing_and_iteration(self):
        c = Coordinate.world([4, 5, 6])
        assert c[1] == 5.0
        assert list(c) == [4.0, 5.0, 6.0]

    def test_as_array(self):
        import numpy as np

        np.testing.assert_array_equal(Coordinate.voxel([1, 2]).as_array(), np.array([1.0, 2.0]))

    def test_repr(self):
        assert repr(Coordinate.voxel([1, 2.5])) == "Coordinate.voxel((1, 2.5))"


@pytest.mark.unit
class TestCoordinateArithmetic:
    """Arithmetic requires matching tags."""

    def test_add_same_space(self):
        result = Coordinate.voxel([1, 2]) + Coordinate.voxel([3, 4])
        assert result == Coordinate.voxel([4, 6])

    def test_subtract_same_space(self):
        result = Coordinate.world([1, 2]) - Coordinate.world([3, 5])
        assert result == Coordinate.world([-2, -3])

    def test_scale(self):
        assert 2 * Coordinate.voxel([1, 2]) == Coordinate.voxel([2, 4])
        assert Coordinate.voxel([1, 2]) * 0.5 == Coordinate.voxel([0.5, 1])
        assert -Coordinate.world([1, -2]) == Coordinate.world([-1, 2])

    def test_add_mismatched_space(self):
        with pytest.raises(SpaceTagMismatchError) as exc_info:
            Coordinate.voxel([1, 2]) + Coordinate.world([1, 2])

        assert exc_info.value.expected == "voxel"
        assert exc_info.value.actual == "world"

    def test_subtract_mismatched_space(self):
        with pytest.raises(SpaceTagMismatchError):
            Coordinate.world([1, 2]) - Coordinate.voxel([1, 2])

    def test_add_untagged_right(self):
        with pytest.raises(SpaceTagMismatchError, match="untagged"):
            Coordinate.voxel([1, 2]) + (1.0, 2.0)

    def test_add_untagged_left(self):
        with pytest.raises(SpaceTagMismatchError):
            [1.0, 2.0] + Coordinate.voxel([1, 2])

    def test_subtract_untagged_left(self):
        with pytest.raises(SpaceTagMismatchError):
            (1.0, 2.0) - Coordinate.world([1, 2])

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            Coordinate.voxel([1, 2]) + Coordinate.voxel([1, 2, 3])

    def test_multiply_by_coordinate_not_supported(self):
        with pytest.raises(TypeError):
            Coordinate.voxel([1, 2]) * Coordinate.voxel([1, 2])

    def test_is_close(self):
        a = Coordinate.world([1.0, 2.0])
        assert a.is_close(Coordinate.world([1.0 + 1e-12, 2.0]))
        assert not a.is_close(Coordinate.world([1.1, 2.0]))
        with pytest.raises(SpaceTagMismatchError):
            a.is_close(Coordinate.voxel([1.0, 2.0]))

    def test_is_close_uses_configured_atol(self):
        from volspace.config import VolspaceConfig, set_config

        origin = Coordinate.world([0.0, 0.0])
        nearby = Coordinate.world([1e-4, 0.0])
        assert not origin.is_close(nearby)

        set_config(VolspaceConfig(atol=1e-3))
        assert origin.is_close(nearby)
        assert not origin.is_close(nearby, atol=1e-5)

    def test_tag_mismatch_is_type_error(self):
        with pytest.raises(TypeError):
            Coordinate.voxel([1]) + Coordinate.world([1])


@pytest.mark.unit
class TestEnsureCoordinate:
    """Tests for the API-boundary tag check."""

    def test_accepts_matching_tag(self):
        c = Coordinate.voxel([1, 2])
        assert ensure_coordinate(c, Space.VOXEL) is c
        assert c.require("voxel") is c

    def test_rejects_other_tag(self):
        with pytest.raises(SpaceTagMismatchError, match="contains_voxel"):
            ensure_coordinate(Coordinate.world([1, 2]), Space.VOXEL, "contains_voxel")

    def test_rejects_untagged(self):
        with pytest.raises(SpaceTagMismatchError) as exc_info:
            ensure_coordinate((1.0, 2.0), Space.WORLD)

        assert exc_info.value.actual is None
