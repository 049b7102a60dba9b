"""Matrix backend built on numpy.linalg."""

from __future__ import annotations

import numpy as np

from volspace.backends.base import Matrix, MatrixBackend, Vector


def _to_tuple(arr: np.ndarray) -> tuple:
    """Convert a numpy array to nested tuples of Python floats."""
    if arr.ndim == 1:
        return tuple(float(x) for x in arr)
    return tuple(tuple(float(x) for x in row) for row in arr)


class NumpyBackend(MatrixBackend):
    """Dense matrix operations delegated to numpy."""

    name = "numpy"

    def matmul(self, a: Matrix, b: Matrix) -> Matrix:
        if not a:
            return ()
        try:
            result = np.asarray(a, dtype=float) @ np.asarray(b, dtype=float)
        except ValueError as e:
            raise ValueError(f"matmul shape mismatch: {e}") from e
        return _to_tuple(result)

    def matvec(self, a: Matrix, v: Vector) -> Vector:
        try:
            result = np.asarray(a, dtype=float) @ np.asarray(v, dtype=float)
        except ValueError as e:
            raise ValueError(f"matvec shape mismatch: {e}") from e
        return _to_tuple(result)

    def transpose(self, a: Matrix) -> Matrix:
        return _to_tuple(np.asarray(a, dtype=float).T)

    def inverse(self, a: Matrix) -> Matrix | None:
        try:
            inv = np.linalg.inv(np.asarray(a, dtype=float))
        except np.linalg.LinAlgError:
            return None
        if not np.all(np.isfinite(inv)):
            return None
        return _to_tuple(inv)

    def determinant(self, a: Matrix) -> float:
        return float(np.linalg.det(np.asarray(a, dtype=float)))

    def allclose(self, a: Matrix, b: Matrix, atol: float) -> bool:
        arr_a = np.asarray(a, dtype=float)
        arr_b = np.asarray(b, dtype=float)
        if arr_a.shape != arr_b.shape:
            return False
        return bool(np.allclose(arr_a, arr_b, rtol=0.0, atol=atol))
