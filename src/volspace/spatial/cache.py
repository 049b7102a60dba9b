"""Cache for inverted affine transforms.

Each volume descriptor owns one InverseCache slot holding the inverse of its
grid->world transform, so repeated world->voxel conversions do not re-invert.
The slot remembers which transform (and singularity epsilon) the inverse was
computed for and is guarded by a lock, so concurrent readers never observe a
partially published entry and a stale inverse is never served.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from volspace.config import get_config
from volspace.core.affine import AffineTransform

logger = logging.getLogger(__name__)


class InverseCache:
    """Single-slot cache for an inverse transform.

    Attributes:
        enabled: Whether inverses are cached at all
    """

    def __init__(self, enabled: bool = True):
        """Initialize an empty cache slot.

        Args:
            enabled: If False, every lookup recomputes the inverse
        """
        self.enabled = enabled
        self._lock = threading.Lock()
        self._entry: tuple[AffineTransform, float, AffineTransform] | None = None

        # Statistics
        self._hits = 0
        self._misses = 0
        self._invalidations = 0

    def get_inverse(self, transform: AffineTransform, epsilon: float | None = None) -> AffineTransform:
        """Return the inverse of transform, computing it on a miss.

        Args:
            transform: Transform to invert
            epsilon: Singularity threshold forwarded to AffineTransform.invert;
                defaults to the configured singular_epsilon

        Returns:
            Inverse transform

        Raises:
            NonInvertibleError: If transform cannot be inverted (never cached)
        """
        # Resolve now so a later config change is a different key
        epsilon = get_config().singular_epsilon if epsilon is None else epsilon

        if not self.enabled:
            with self._lock:
                self._misses += 1
            return transform.invert(epsilon=epsilon)

        with self._lock:
            if self._entry is not None:
                cached_transform, cached_epsilon, inverse = self._entry
                if cached_epsilon == epsilon and cached_transform == transform:
                    self._hits += 1
                    return inverse
                # Entry belongs to another transform or epsilon
                self._entry = None
                self._invalidations += 1

            self._misses += 1
            inverse = transform.invert(epsilon=epsilon)
            self._entry = (transform, epsilon, inverse)
            logger.debug(f"Cached inverse of {transform.dimensionality}-D transform")
            return inverse

    def peek(self) -> AffineTransform | None:
        """Currently cached inverse, without computing anything."""
        with self._lock:
            return None if self._entry is None else self._entry[2]

    def invalidate(self) -> None:
        """Drop the cached inverse."""
        with self._lock:
            if self._entry is not None:
                self._entry = None
                self._invalidations += 1

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics:
            - hits: Number of cache hits
            - misses: Number of cache misses
            - hit_rate: Hit rate (hits / total requests)
            - invalidations: Number of dropped entries
            - cached: Whether an inverse is currently held
        """
        with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = self._hits / total_requests if total_requests > 0 else 0.0

            return {
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": hit_rate,
                "invalidations": self._invalidations,
                "cached": self._entry is not None,
            }


__all__ = ["InverseCache"]
