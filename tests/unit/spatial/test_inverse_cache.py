"""Unit tests for InverseCache."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from volspace.config import get_config, set_config
from volspace.core.affine import AffineTransform
from volspace.core.exceptions import NonInvertibleError
from volspace.core.spaces import Coordinate
from volspace.core.volume import VolumeDescriptor
from volspace.spatial.cache import InverseCache


@pytest.fixture
def scaling():
    return AffineTransform.from_scaling([2.0, 4.0, 8.0])


@pytest.mark.unit
class TestInverseCache:
    """Tests for InverseCache."""

    def test_miss_then_hit(self, scaling):
        cache = InverseCache()

        first = cache.get_inverse(scaling)
        second = cache.get_inverse(scaling)

        assert first is second
        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["cached"] is True

    def test_cached_value_is_inverse(self, scaling):
        inverse = InverseCache().get_inverse(scaling)
        assert inverse.apply_point([2.0, 4.0, 8.0]) == pytest.approx((1.0, 1.0, 1.0))

    def test_equal_transform_hits(self, scaling):
        cache = InverseCache()
        cache.get_inverse(scaling)
        cache.get_inverse(AffineTransform.from_scaling([2.0, 4.0, 8.0]))

        assert cache.get_stats()["hits"] == 1

    def test_different_transform_invalidates(self, scaling):
        cache = InverseCache()
        cache.get_inverse(scaling)

        other = AffineTransform.from_translation([1.0, 2.0, 3.0])
        inverse = cache.get_inverse(other)

        assert inverse.apply_point([1.0, 2.0, 3.0]) == pytest.approx((0.0, 0.0, 0.0))
        stats = cache.get_stats()
        assert stats["misses"] == 2
        assert stats["invalidations"] == 1

    def test_different_epsilon_recomputes(self, scaling):
        cache = InverseCache()
        cache.get_inverse(scaling)
        cache.get_inverse(scaling, epsilon=1e-6)

        assert cache.get_stats()["misses"] == 2

    def test_invalidate(self, scaling):
        cache = InverseCache()
        cache.get_inverse(scaling)
        cache.invalidate()

        assert cache.peek() is None
        assert cache.get_stats()["invalidations"] == 1

    def test_invalidate_empty_is_noop(self):
        cache = InverseCache()
        cache.invalidate()

        assert cache.get_stats()["invalidations"] == 0

    def test_peek_does_not_compute(self, scaling):
        cache = InverseCache()
        assert cache.peek() is None

        inverse = cache.get_inverse(scaling)
        assert cache.peek() is inverse

    def test_disabled_cache_always_recomputes(self, scaling):
        cache = InverseCache(enabled=False)

        first = cache.get_inverse(scaling)
        second = cache.get_inverse(scaling)

        assert first == second
        assert first is not second
        stats = cache.get_stats()
        assert stats["hits"] == 0
        assert stats["misses"] == 2
        assert stats["cached"] is False

    def test_non_invertible_not_cached(self):
        cache = InverseCache()
        singular = AffineTransform([[1.0, 2.0], [2.0, 4.0]])

        with pytest.raises(NonInvertibleError):
            cache.get_inverse(singular)
        with pytest.raises(NonInvertibleError):
            cache.get_inverse(singular)

        assert cache.peek() is None
        assert cache.get_stats()["misses"] == 2

    def test_empty_stats(self):
        stats = InverseCache().get_stats()
        assert stats == {"hits": 0, "misses": 0, "hit_rate": 0.0, "invalidations": 0, "cached": False}

    def test_concurrent_readers_share_one_inverse(self, scaling):
        cache = InverseCache()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: cache.get_inverse(scaling), range(64)))

        assert all(r is results[0] for r in results)
        stats = cache.get_stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 63

    def test_configured_epsilon_is_part_of_key(self):
        cache = InverseCache()
        thin = AffineTransform.from_scaling([1.0, 1e-6])
        cache.get_inverse(thin)

        set_config(get_config().updated(singular_epsilon=1e-3))

        with pytest.raises(NonInvertibleError):
            cache.get_inverse(thin)
        assert cache.get_stats()["hits"] == 0

    def test_volume_sees_epsilon_change_after_warm_up(self):
        volume = VolumeDescriptor([[0.0] * 3] * 3, AffineTransform.from_scaling([1.0, 1e-6]))
        volume.to_voxel(Coordinate.world([1.0, 1e-6]))

        set_config(get_config().updated(singular_epsilon=1e-3))

        with pytest.raises(NonInvertibleError):
            volume.to_voxel(Coordinate.world([1.0, 1e-6]))
