"""Built-in dense matrix backend written in plain Python.

Always available; used when no numeric library should be involved.
"""

from __future__ import annotations

from volspace.backends.base import Matrix, MatrixBackend, Vector


def _check_square(a: Matrix, operation: str) -> int:
    n = len(a)
    if any(len(row) != n for row in a):
        raise ValueError(f"{operation} requires a square matrix, got {n} rows of unequal length")
    return n


class PythonBackend(MatrixBackend):
    """Dense matrix operations on tuples using Gauss-Jordan elimination."""

    name = "python"

    def matmul(self, a: Matrix, b: Matrix) -> Matrix:
        if not a:
            return ()
        inner = len(b)
        if any(len(row) != inner for row in a):
            raise ValueError(f"matmul shape mismatch: inner dimension {inner}")
        columns = list(zip(*b))
        return tuple(
            tuple(sum(x * y for x, y in zip(row, col)) for col in columns) for row in a
        )

    def matvec(self, a: Matrix, v: Vector) -> Vector:
        if any(len(row) != len(v) for row in a):
            raise ValueError(f"matvec shape mismatch: vector of length {len(v)}")
        return tuple(sum(x * y for x, y in zip(row, v)) for row in a)

    def transpose(self, a: Matrix) -> Matrix:
        return tuple(tuple(float(x) for x in col) for col in zip(*a))

    def inverse(self, a: Matrix) -> Matrix | None:
        n = _check_square(a, "inverse")
        # Augmented [A | I]
        work = [list(map(float, row)) + [1.0 if i == j else 0.0 for j in range(n)]
                for i, row in enumerate(a)]

        for col in range(n):
            pivot_row = max(range(col, n), key=lambda r: abs(work[r][col]))
            pivot = work[pivot_row][col]
            if pivot == 0.0:
                return None
            work[col], work[pivot_row] = work[pivot_row], work[col]

            pivot_values = work[col]
            work[col] = [x / pivot for x in pivot_values]
            for r in range(n):
                if r != col and work[r][col] != 0.0:
                    factor = work[r][col]
                    work[r] = [x - factor * p for x, p in zip(work[r], work[col])]

        return tuple(tuple(row[n:]) for row in work)

    def determinant(self, a: Matrix) -> float:
        n = _check_square(a, "determinant")
        work = [list(map(float, row)) for row in a]
        det = 1.0

        for col in range(n):
            pivot_row = max(range(col, n), key=lambda r: abs(work[r][col]))
            pivot = work[pivot_row][col]
            if pivot == 0.0:
                return 0.0
            if pivot_row != col:
                work[col], work[pivot_row] = work[pivot_row], work[col]
                det = -det
            det *= pivot
            for r in range(col + 1, n):
                factor = work[r][col] / pivot
                if factor != 0.0:
                    work[r] = [x - factor * p for x, p in zip(work[r], work[col])]

        return det

    def allclose(self, a: Matrix, b: Matrix, atol: float) -> bool:
        if len(a) != len(b):
            return False
        for row_a, row_b in zip(a, b):
            if len(row_a) != len(row_b):
                return False
            if any(abs(x - y) > atol for x, y in zip(row_a, row_b)):
                return False
        return True
