"""
Matrix backend capability contract.

A backend supplies the handful of dense linear-algebra operations the affine
algebra needs. Matrices and vectors cross the boundary as nested tuples of
Python floats, so no backend-specific type is ever exposed to callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

Matrix = tuple[tuple[float, ...], ...]
Vector = tuple[float, ...]


class MatrixBackend(ABC):
    """
    Abstract base class for matrix backends.

    Subclasses must implement all abstract methods. ``inverse`` signals a
    singular input by returning None; it must never raise for singularity.

    Class Attributes
    ----------------
    name : str
        Registry name of the backend.
    """

    name: str = "base"

    @abstractmethod
    def matmul(self, a: Matrix, b: Matrix) -> Matrix:
        """Matrix-matrix product ``a @ b``."""

    @abstractmethod
    def matvec(self, a: Matrix, v: Vector) -> Vector:
        """Matrix-vector product ``a @ v``."""

    @abstractmethod
    def inverse(self, a: Matrix) -> Matrix | None:
        """Inverse of a square matrix, or None when it is singular."""

    @abstractmethod
    def transpose(self, a: Matrix) -> Matrix:
        """Transpose of a matrix."""

    @abstractmethod
    def determinant(self, a: Matrix) -> float:
        """Determinant of a square matrix."""

    @abstractmethod
    def allclose(self, a: Matrix, b: Matrix, atol: float) -> bool:
        """Element-wise equality within absolute tolerance ``atol``."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


__all__ = ["MatrixBackend", "Matrix", "Vector"]
