"""
Validation utilities for transforms, coordinates and grid shapes.

Functions for coercing user input into the plain-float tuples used
throughout volspace and for checking dimensional consistency.
"""

import math
from collections.abc import Iterable, Sequence
from numbers import Integral, Real

from .exceptions import DimensionMismatchError, ValidationError


def as_vector(values: Iterable, name: str = "vector") -> tuple[float, ...]:
    """
    Coerce a 1-D sequence of real numbers into a tuple of floats.

    Parameters
    ----------
    values : iterable of real
        Input values (list, tuple, 1-D numpy array, ...).
    name : str, default="vector"
        Name used in error messages.

    Returns
    -------
    tuple of float

    Raises
    ------
    ValidationError
        If values is not a flat sequence of finite real numbers.
    """
    if isinstance(values, (str, bytes)):
        raise ValidationError(f"{name} must be a sequence of numbers, got {type(values).__name__}")
    try:
        items = list(values)
    except TypeError as e:
        raise ValidationError(f"{name} must be a sequence of numbers, got {type(values).__name__}") from e

    result = []
    for item in items:
        if not isinstance(item, Real):
            raise ValidationError(f"{name} must contain only real numbers, got {item!r}")
        value = float(item)
        if not math.isfinite(value):
            raise ValidationError(f"{name} contains NaN or inf values: {items}")
        result.append(value)
    return tuple(result)


def as_matrix(values: Iterable, name: str = "matrix") -> tuple[tuple[float, ...], ...]:
    """
    Coerce a 2-D sequence of real numbers into a tuple of float-tuples.

    Raises
    ------
    ValidationError
        If rows are ragged or contain non-finite values.
    """
    if isinstance(values, (str, bytes)):
        raise ValidationError(f"{name} must be a 2-D sequence of numbers")
    try:
        rows = [as_vector(row, name=f"{name} row") for row in values]
    except TypeError as e:
        raise ValidationError(f"{name} must be a 2-D sequence of numbers") from e

    widths = {len(row) for row in rows}
    if len(widths) > 1:
        raise ValidationError(f"{name} has rows of unequal length: {sorted(widths)}")
    return tuple(rows)


def validate_square(matrix: Sequence[Sequence[float]], name: str = "matrix") -> int:
    """Check that a matrix is square and non-empty; return its size."""
    n = len(matrix)
    if n == 0:
        raise ValidationError(f"{name} must have at least one row")
    if any(len(row) != n for row in matrix):
        raise ValidationError(
            f"{name} must be square, got {n} rows of length {len(matrix[0])}"
        )
    return n


def validate_shape(shape: Iterable) -> tuple[int, ...]:
    """
    Validate a grid shape: a non-empty sequence of positive integers.

    Parameters
    ----------
    shape : iterable of int
        Per-axis extents.

    Returns
    -------
    tuple of int

    Raises
    ------
    ValidationError
        If any extent is not a positive integer.
    """
    try:
        extents = tuple(shape)
    except TypeError as e:
        raise ValidationError(f"Shape must be a sequence of integers, got {shape!r}") from e

    if not extents:
        raise ValidationError("Shape must have at least one axis")

    for extent in extents:
        if isinstance(extent, bool) or not isinstance(extent, Integral) or extent <= 0:
            raise ValidationError(f"Shape extents must be positive integers, got {extents}")
    return tuple(int(e) for e in extents)


def check_dimensionality(expected: int, actual: int, context: str = "operation") -> None:
    """
    Raise DimensionMismatchError when two dimensionalities differ.

    Examples
    --------
    >>> check_dimensionality(3, 3)
    >>> check_dimensionality(3, 2, "compose")
    Traceback (most recent call last):
    ...
    volspace.core.exceptions.DimensionMismatchError: Dimensionality mismatch in compose: expected 3, got 2
    """
    if expected != actual:
        raise DimensionMismatchError(expected=expected, actual=actual, context=context)
