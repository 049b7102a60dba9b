"""Coordinate space tags and tagged coordinate values.

Every coordinate carries the space it lives in. Voxel coordinates are grid
offsets (possibly fractional during conversion), world coordinates are
physical positions. Arithmetic only combines coordinates of the same space.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import TYPE_CHECKING

from volspace.config import get_config
from volspace.core.exceptions import (
    DimensionMismatchError,
    SpaceTagMismatchError,
    ValidationError,
)
from volspace.core.validation import as_vector

if TYPE_CHECKING:
    import numpy as np


class Space(str, Enum):
    """Supported coordinate spaces."""

    VOXEL = "voxel"
    WORLD = "world"

    @classmethod
    def coerce(cls, space: Space | str) -> Space:
        """Convert a space name to a Space tag.

        Raises:
            ValidationError: If the name is not a known space
        """
        try:
            return cls(space)
        except ValueError as e:
            valid = [s.value for s in cls]
            raise ValidationError(f"space must be one of {valid}, got {space!r}") from e


@dataclass(frozen=True)
class Coordinate:
    """Immutable position tagged with its coordinate space.

    Attributes:
        values: Per-axis components as floats
        space: Space the position lives in
    """

    values: tuple[float, ...]
    space: Space

    def __post_init__(self):
        """Normalize values to floats and the tag to a Space member."""
        object.__setattr__(self, "values", as_vector(self.values, name="coordinate"))
        object.__setattr__(self, "space", Space.coerce(self.space))
        if not self.values:
            raise ValidationError("coordinate must have at least one component")

    @classmethod
    def voxel(cls, values) -> Coordinate:
        """Create a voxel-space coordinate."""
        return cls(values, Space.VOXEL)

    @classmethod
    def world(cls, values) -> Coordinate:
        """Create a world-space coordinate."""
        return cls(values, Space.WORLD)

    @property
    def ndim(self) -> int:
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, axis: int) -> float:
        return self.values[axis]

    def require(self, space: Space | str, context: str = "operation") -> Coordinate:
        """Return self if tagged with space, raise SpaceTagMismatchError otherwise."""
        space = Space.coerce(space)
        if self.space is not space:
            raise SpaceTagMismatchError(space.value, self.space.value, context)
        return self

    def _check_operand(self, other, operation: str) -> Coordinate:
        if not isinstance(other, Coordinate):
            raise SpaceTagMismatchError(self.space.value, None, operation)
        other.require(self.space, operation)
        if other.ndim != self.ndim:
            raise DimensionMismatchError(self.ndim, other.ndim, operation)
        return other

    def __add__(self, other) -> Coordinate:
        other = self._check_operand(other, "coordinate addition")
        return Coordinate(tuple(a + b for a, b in zip(self.values, other.values)), self.space)

    def __sub__(self, other) -> Coordinate:
        other = self._check_operand(other, "coordinate subtraction")
        return Coordinate(tuple(a - b for a, b in zip(self.values, other.values)), self.space)

    def __radd__(self, other):
        # Only reached for untagged left operands
        raise SpaceTagMismatchError(self.space.value, None, "coordinate addition")

    def __rsub__(self, other):
        raise SpaceTagMismatchError(self.space.value, None, "coordinate subtraction")

    def __mul__(self, factor) -> Coordinate:
        if isinstance(factor, bool) or not isinstance(factor, Real):
            return NotImplemented
        return Coordinate(tuple(a * factor for a in self.values), self.space)

    __rmul__ = __mul__

    def __neg__(self) -> Coordinate:
        return Coordinate(tuple(-a for a in self.values), self.space)

    def is_close(self, other: Coordinate, atol: float | None = None) -> bool:
        """Check component-wise closeness with another coordinate of the same space.

        Args:
            other: Coordinate tagged with the same space
            atol: Absolute tolerance; defaults to the configured atol
        """
        other = self._check_operand(other, "coordinate comparison")
        atol = get_config().atol if atol is None else atol
        return all(abs(a - b) <= atol for a, b in zip(self.values, other.values))

    def as_array(self) -> np.ndarray:
        """Return the components as a 1-D float numpy array."""
        import numpy as np

        return np.asarray(self.values, dtype=float)

    def __repr__(self) -> str:
        components = ", ".join(f"{v:g}" for v in self.values)
        return f"Coordinate.{self.space.value}(({components}))"


def ensure_coordinate(value, space: Space | str, context: str = "operation") -> Coordinate:
    """
    Check that value is a Coordinate tagged with space.

    Untagged sequences are rejected rather than silently assumed to be in
    the requested space.

    Raises:
        SpaceTagMismatchError: If value is untagged or tagged with another space
    """
    space = Space.coerce(space)
    if not isinstance(value, Coordinate):
        raise SpaceTagMismatchError(space.value, None, context)
    return value.require(space, context)


__all__ = ["Space", "Coordinate", "ensure_coordinate"]
