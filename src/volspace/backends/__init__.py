"""
Matrix backends for the affine algebra.

Two backends ship with volspace:

- ``"python"``: built-in dense implementation with no third-party imports.
- ``"numpy"``: delegates to ``numpy.linalg``. Registered only when numpy is
  installed; import it from ``volspace.backends.numpy_backend``.

The default is taken from the configuration (see ``volspace.config``).
"""

from volspace.backends.base import Matrix, MatrixBackend, Vector
from volspace.backends.python_backend import PythonBackend
from volspace.backends.registry import (
    BackendRegistry,
    get_backend,
    list_backends,
    register_backend,
)

__all__ = [
    "MatrixBackend",
    "Matrix",
    "Vector",
    "PythonBackend",
    "BackendRegistry",
    "get_backend",
    "list_backends",
    "register_backend",
]
