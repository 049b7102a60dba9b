"""
Sample grid adapters.

volspace never owns or writes sample data. A sample grid is anything that
reports a ``shape`` and supports read access by index tuple: numpy arrays,
nibabel array proxies, h5py datasets. The adapters here only add a uniform
read-only surface and a non-copying fixed-index slice view.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .exceptions import ValidationError
from .validation import validate_shape

if TYPE_CHECKING:
    import numpy as np


def _import_numpy():
    try:
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "numpy is required to convert sample grids to arrays. "
            "Install with: pip install volspace[numpy]"
        ) from e
    return np


@runtime_checkable
class SampleGrid(Protocol):
    """Read-only N-dimensional sample grid capability."""

    @property
    def shape(self) -> tuple[int, ...]: ...

    def __getitem__(self, index: Any) -> Any: ...


class ArrayGrid:
    """
    Read-only view over an array-like object.

    Parameters
    ----------
    data : array-like
        Object with ``shape`` and ``__getitem__``. It is referenced, not copied.

    Examples
    --------
    >>> grid = ArrayGrid(np.zeros((4, 5)))
    >>> grid.shape
    (4, 5)
    """

    def __init__(self, data: Any):
        self._data = data
        self._shape = validate_shape(data.shape)

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def data(self) -> Any:
        """The referenced array-like object."""
        return self._data

    def __getitem__(self, index: Any) -> Any:
        return self._data[index]

    def to_ndarray(self) -> np.ndarray:
        """Materialize the grid as a numpy array."""
        return _import_numpy().asarray(self._data)

    def __repr__(self) -> str:
        return f"ArrayGrid(shape={self._shape}, data={type(self._data).__name__})"


class SliceGrid:
    """
    Grid view with one axis fixed at a given index.

    The resulting grid has one dimension fewer than its parent. Sample reads
    are forwarded to the parent with the fixed index inserted, so nothing is
    copied until ``to_ndarray`` is called.

    Parameters
    ----------
    parent : SampleGrid
        Grid to slice.
    axis : int
        Axis to fix.
    index : int
        Position along axis.
    """

    def __init__(self, parent: SampleGrid, axis: int, index: int):
        parent_shape = tuple(parent.shape)
        if len(parent_shape) < 2:
            raise ValidationError(f"Cannot slice a grid with shape {parent_shape}")
        if not 0 <= axis < len(parent_shape):
            raise ValidationError(f"Slice axis {axis} out of range for shape {parent_shape}")
        if not 0 <= index < parent_shape[axis]:
            raise ValidationError(
                f"Slice index {index} out of range for axis {axis} with extent {parent_shape[axis]}"
            )

        self._parent = parent
        self._axis = int(axis)
        self._index = int(index)
        self._shape = parent_shape[:axis] + parent_shape[axis + 1 :]

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def parent(self) -> SampleGrid:
        return self._parent

    @property
    def axis(self) -> int:
        return self._axis

    @property
    def index(self) -> int:
        return self._index

    def _parent_key(self, key: Any) -> tuple:
        if not isinstance(key, tuple):
            key = (key,)
        return key[: self._axis] + (self._index,) + key[self._axis :]

    def __getitem__(self, key: Any) -> Any:
        return self._parent[self._parent_key(key)]

    def to_ndarray(self) -> np.ndarray:
        """Materialize the slice as a numpy array."""
        full = tuple(slice(None) for _ in self._shape)
        return _import_numpy().asarray(self[full])

    def __repr__(self) -> str:
        return f"SliceGrid(shape={self._shape}, axis={self._axis}, index={self._index})"


def as_grid(obj: Any) -> ArrayGrid | SliceGrid:
    """
    Wrap an object as a sample grid.

    Existing grid adapters are returned unchanged, array-likes exposing
    ``shape`` and ``__getitem__`` are referenced, anything else (e.g. nested
    lists) is converted with ``np.asarray``.
    """
    if isinstance(obj, (ArrayGrid, SliceGrid)):
        return obj
    if isinstance(obj, SampleGrid):
        return ArrayGrid(obj)
    return ArrayGrid(_import_numpy().asarray(obj))


def to_ndarray(grid: Any) -> np.ndarray:
    """Materialize any sample grid as a numpy array."""
    return as_grid(grid).to_ndarray()


__all__ = ["SampleGrid", "ArrayGrid", "SliceGrid", "as_grid", "to_ndarray"]
