"""Affine transforms between coordinate spaces of fixed dimensionality.

An affine transform maps ``x -> L @ x + t`` where ``L`` is the D x D linear
part and ``t`` the translation. Transforms are immutable values: composing
or inverting always returns a new transform. All numeric work goes through a
MatrixBackend, so the same algebra runs on the built-in Python backend or on
numpy.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from volspace.backends import MatrixBackend, get_backend
from volspace.config import get_config
from volspace.core.exceptions import NonInvertibleError, ValidationError
from volspace.core.validation import (
    as_matrix,
    as_vector,
    check_dimensionality,
    validate_square,
)

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)

Matrix = tuple[tuple[float, ...], ...]
Vector = tuple[float, ...]


def _identity_matrix(n: int) -> Matrix:
    return tuple(tuple(1.0 if i == j else 0.0 for j in range(n)) for i in range(n))


class AffineTransform:
    """
    Immutable affine map ``x -> linear @ x + translation``.

    Parameters
    ----------
    linear : sequence of sequences of float
        D x D linear part (rotation, scaling, shear).
    translation : sequence of float, optional
        D-length translation. Defaults to zeros.
    backend : str or MatrixBackend, optional
        Matrix backend used for the algebra. Defaults to the configured backend.

    Raises
    ------
    ValidationError
        If the linear part is not square or contains non-finite values.
    DimensionMismatchError
        If the translation length differs from the linear part size.

    Examples
    --------
    >>> shift = AffineTransform.from_translation([1.0, 0.0, 0.0])
    >>> shift.apply_point([0.0, 0.0, 0.0])
    (1.0, 0.0, 0.0)
    >>> shift.apply_vector([0.0, 0.0, 0.0])
    (0.0, 0.0, 0.0)
    """

    __slots__ = ("_linear", "_translation", "_backend")

    def __init__(
        self,
        linear: Iterable,
        translation: Iterable | None = None,
        backend: str | MatrixBackend | None = None,
    ):
        linear = as_matrix(linear, name="linear part")
        n = validate_square(linear, name="linear part")

        if translation is None:
            translation = (0.0,) * n
        else:
            translation = as_vector(translation, name="translation")
        check_dimensionality(n, len(translation), "affine construction (translation length)")

        object.__setattr__(self, "_linear", linear)
        object.__setattr__(self, "_translation", translation)
        object.__setattr__(self, "_backend", get_backend(backend))

    def __setattr__(self, name, value):
        raise AttributeError(
            f"Cannot modify AffineTransform.{name} - transforms are immutable.\n"
            "Use compose(), invert() or the from_* constructors to create a new transform."
        )

    def __delattr__(self, name):
        raise AttributeError(f"Cannot delete AffineTransform.{name} - transforms are immutable.")

    def __reduce__(self):
        return (AffineTransform, (self._linear, self._translation, self._backend.name))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls, dimensionality: int, backend: str | MatrixBackend | None = None) -> AffineTransform:
        """Neutral transform: identity linear part and zero translation."""
        if isinstance(dimensionality, bool) or not isinstance(dimensionality, int) or dimensionality < 1:
            raise ValidationError(f"dimensionality must be a positive integer, got {dimensionality!r}")
        return cls(_identity_matrix(dimensionality), backend=backend)

    @classmethod
    def from_translation(cls, offset: Iterable, backend: str | MatrixBackend | None = None) -> AffineTransform:
        """Pure translation by offset."""
        offset = as_vector(offset, name="offset")
        return cls(_identity_matrix(len(offset)), offset, backend=backend)

    @classmethod
    def from_scaling(cls, factors: Iterable, backend: str | MatrixBackend | None = None) -> AffineTransform:
        """Axis-aligned scaling, e.g. voxel sizes in mm."""
        factors = as_vector(factors, name="scaling factors")
        n = len(factors)
        linear = tuple(tuple(factors[i] if i == j else 0.0 for j in range(n)) for i in range(n))
        return cls(linear, backend=backend)

    @classmethod
    def from_rotation(
        cls,
        angle: float,
        dimensionality: int = 2,
        axes: tuple[int, int] = (0, 1),
        backend: str | MatrixBackend | None = None,
    ) -> AffineTransform:
        """
        Rotation by angle (radians) in the plane spanned by two axes.

        Parameters
        ----------
        angle : float
            Rotation angle in radians, counter-clockwise from axes[0] to axes[1].
        dimensionality : int, default=2
            Number of axes (at least 2).
        axes : tuple of int, default=(0, 1)
            The two distinct axes spanning the rotation plane.
        """
        if dimensionality < 2:
            raise ValidationError(f"Rotation needs at least 2 dimensions, got {dimensionality}")
        i, j = axes
        if i == j or not (0 <= i < dimensionality and 0 <= j < dimensionality):
            raise ValidationError(f"Invalid rotation axes {axes} for dimensionality {dimensionality}")

        c, s = math.cos(angle), math.sin(angle)
        rows = [list(row) for row in _identity_matrix(dimensionality)]
        rows[i][i] = c
        rows[i][j] = -s
        rows[j][i] = s
        rows[j][j] = c
        return cls(rows, backend=backend)

    @classmethod
    def from_homogeneous(
        cls,
        matrix: Iterable,
        backend: str | MatrixBackend | None = None,
        atol: float | None = None,
    ) -> AffineTransform:
        """
        Build a transform from a (D+1) x (D+1) homogeneous matrix.

        The last row must be ``[0, ..., 0, 1]`` within atol.

        Examples
        --------
        >>> t = AffineTransform.from_homogeneous([[2, 0, -90], [0, 2, -126], [0, 0, 1]])
        >>> t.translation
        (-90.0, -126.0)
        """
        rows = as_matrix(matrix, name="homogeneous matrix")
        size = validate_square(rows, name="homogeneous matrix")
        if size < 2:
            raise ValidationError(f"Homogeneous matrix must be at least 2x2, got {size}x{size}")

        atol = get_config().atol if atol is None else atol
        expected_last = (0.0,) * (size - 1) + (1.0,)
        if any(abs(a - b) > atol for a, b in zip(rows[-1], expected_last)):
            raise ValidationError(
                f"Homogeneous matrix last row must be {list(expected_last)}, got {list(rows[-1])}"
            )

        linear = tuple(row[:-1] for row in rows[:-1])
        translation = tuple(row[-1] for row in rows[:-1])
        return cls(linear, translation, backend=backend)

    def with_backend(self, backend: str | MatrixBackend) -> AffineTransform:
        """Same transform computed with another backend."""
        return AffineTransform(self._linear, self._translation, backend=backend)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def dimensionality(self) -> int:
        return len(self._translation)

    @property
    def linear(self) -> Matrix:
        return self._linear

    @property
    def translation(self) -> Vector:
        return self._translation

    @property
    def backend(self) -> MatrixBackend:
        return self._backend

    def to_homogeneous(self) -> Matrix:
        """(D+1) x (D+1) homogeneous matrix as nested tuples."""
        rows = tuple(row + (t,) for row, t in zip(self._linear, self._translation))
        return rows + ((0.0,) * self.dimensionality + (1.0,),)

    def as_array(self) -> np.ndarray:
        """Homogeneous matrix as a numpy array (e.g. for nibabel)."""
        import numpy as np

        return np.asarray(self.to_homogeneous(), dtype=float)

    def determinant(self) -> float:
        """Determinant of the linear part."""
        return self._backend.determinant(self._linear)

    def voxel_sizes(self) -> Vector:
        """Length of each transformed unit axis (column norms of the linear part)."""
        return tuple(math.hypot(*column) for column in self._backend.transpose(self._linear))

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def compose(self, inner: AffineTransform) -> AffineTransform:
        """
        Transform equivalent to applying inner, then self.

        Raises
        ------
        DimensionMismatchError
            If the dimensionalities differ.
        """
        if not isinstance(inner, AffineTransform):
            raise TypeError(f"Can only compose with AffineTransform, got {type(inner).__name__}")
        check_dimensionality(self.dimensionality, inner.dimensionality, "compose")

        be = self._backend
        linear = be.matmul(self._linear, inner._linear)
        shifted = be.matvec(self._linear, inner._translation)
        translation = tuple(a + b for a, b in zip(shifted, self._translation))
        return AffineTransform(linear, translation, backend=be)

    def __matmul__(self, inner: AffineTransform) -> AffineTransform:
        if not isinstance(inner, AffineTransform):
            return NotImplemented
        return self.compose(inner)

    def _singular_threshold(self, epsilon: float | None) -> float:
        epsilon = get_config().singular_epsilon if epsilon is None else epsilon
        magnitude = max(abs(x) for row in self._linear for x in row)
        return epsilon * magnitude**self.dimensionality

    def is_invertible(self, epsilon: float | None = None) -> bool:
        """Whether the linear part's determinant is clear of zero relative to its magnitude."""
        threshold = self._singular_threshold(epsilon)
        if threshold == 0.0:
            return False
        return abs(self.determinant()) > threshold

    def invert(self, epsilon: float | None = None) -> AffineTransform:
        """
        Inverse transform, such that ``t @ t.invert()`` is the identity.

        Parameters
        ----------
        epsilon : float, optional
            Relative determinant threshold. Defaults to the configured
            ``singular_epsilon``.

        Raises
        ------
        NonInvertibleError
            If the linear part is singular or nearly so.
        """
        det = self.determinant()
        threshold = self._singular_threshold(epsilon)
        if threshold == 0.0:
            raise NonInvertibleError(det, "linear part is all zeros")
        if abs(det) <= threshold:
            raise NonInvertibleError(det, f"|determinant| below tolerance {threshold:.3g}")

        be = self._backend
        inv_linear = be.inverse(self._linear)
        if inv_linear is None:
            raise NonInvertibleError(det, f"{be.name} backend reported a singular matrix")

        inv_translation = tuple(-x for x in be.matvec(inv_linear, self._translation))
        logger.debug(f"Inverted {self.dimensionality}-D transform (det={det:.6g}) with {be.name}")
        return AffineTransform(inv_linear, inv_translation, backend=be)

    def apply_point(self, point: Iterable) -> Vector:
        """Map a position: ``linear @ point + translation``."""
        point = as_vector(point, name="point")
        check_dimensionality(self.dimensionality, len(point), "apply_point")
        mapped = self._backend.matvec(self._linear, point)
        return tuple(a + b for a, b in zip(mapped, self._translation))

    def apply_vector(self, vector: Iterable) -> Vector:
        """Map a direction or displacement: ``linear @ vector`` (no translation)."""
        vector = as_vector(vector, name="vector")
        check_dimensionality(self.dimensionality, len(vector), "apply_vector")
        return self._backend.matvec(self._linear, vector)

    def apply_points(self, points: Sequence) -> Matrix:
        """
        Map N points at once.

        Parameters
        ----------
        points : sequence of sequences
            N x D array-like of positions.

        Returns
        -------
        tuple of tuples
            N x D mapped positions, computed as ``points @ linear.T + translation``.
        """
        rows = as_matrix(points, name="points")
        if not rows:
            return ()
        check_dimensionality(self.dimensionality, len(rows[0]), "apply_points")

        be = self._backend
        mapped = be.matmul(rows, be.transpose(self._linear))
        return tuple(tuple(a + b for a, b in zip(row, self._translation)) for row in mapped)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def allclose(self, other: AffineTransform, atol: float | None = None) -> bool:
        """
        Approximate equality of linear parts and translations.

        Transforms of different dimensionality are never close.
        """
        if not isinstance(other, AffineTransform):
            raise TypeError(f"Can only compare with AffineTransform, got {type(other).__name__}")
        if self.dimensionality != other.dimensionality:
            return False
        atol = get_config().atol if atol is None else atol
        be = self._backend
        return be.allclose(self._linear, other._linear, atol) and be.allclose(
            (self._translation,), (other._translation,), atol
        )

    def is_identity(self, atol: float | None = None) -> bool:
        """Whether this transform is the identity within atol."""
        return self.allclose(AffineTransform.identity(self.dimensionality, backend=self._backend), atol)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return self._linear == other._linear and self._translation == other._translation

    def __hash__(self) -> int:
        return hash((self._linear, self._translation))

    def __repr__(self) -> str:
        linear = ", ".join("[" + ", ".join(f"{x:g}" for x in row) + "]" for row in self._linear)
        translation = ", ".join(f"{x:g}" for x in self._translation)
        return (
            f"AffineTransform(linear=[{linear}], translation=[{translation}], "
            f"backend='{self._backend.name}')"
        )


# Functional interface


def identity(dimensionality: int, backend: str | MatrixBackend | None = None) -> AffineTransform:
    """Neutral transform of the given dimensionality."""
    return AffineTransform.identity(dimensionality, backend=backend)


def compose(outer: AffineTransform, inner: AffineTransform) -> AffineTransform:
    """Transform equivalent to applying inner, then outer."""
    return outer.compose(inner)


def invert(transform: AffineTransform, epsilon: float | None = None) -> AffineTransform:
    """Inverse of transform; raises NonInvertibleError for singular linear parts."""
    return transform.invert(epsilon=epsilon)


def apply_point(transform: AffineTransform, point: Iterable) -> Vector:
    """Map a position (translation applied)."""
    return transform.apply_point(point)


def apply_vector(transform: AffineTransform, vector: Iterable) -> Vector:
    """Map a direction (translation not applied)."""
    return transform.apply_vector(vector)


def allclose(a: AffineTransform, b: AffineTransform, atol: float | None = None) -> bool:
    """Approximate equality of two transforms."""
    return a.allclose(b, atol=atol)


__all__ = [
    "AffineTransform",
    "identity",
    "compose",
    "invert",
    "apply_point",
    "apply_vector",
    "allclose",
]
