"""
Matrix backend registry.

This module keeps track of the available matrix backends and resolves the
active one by name, falling back to the configured default.

Classes:
    BackendRegistry: Registry of backend classes and their instances.

Functions:
    register_backend: Register a backend class under a name.
    get_backend: Resolve a backend by name or instance.
    list_backends: List registered backend names.
"""

from __future__ import annotations

import logging
import threading

from volspace.backends.base import MatrixBackend
from volspace.backends.python_backend import PythonBackend
from volspace.core.exceptions import BackendNotAvailableError

logger = logging.getLogger(__name__)


class BackendRegistry:
    """
    Registry for matrix backends.

    Backends are registered as classes and instantiated lazily, once per
    name. Backends are stateless, so a single shared instance is safe to use
    from any thread.

    Class Methods
    -------------
    register(name, backend_cls) -> None
        Register a backend class.
    get(name) -> MatrixBackend
        Get the backend instance registered under name.
    names() -> list[str]
        Sorted list of registered names.
    """

    _classes: dict[str, type[MatrixBackend]] = {}
    _instances: dict[str, MatrixBackend] = {}
    _lock = threading.Lock()

    @classmethod
    def register(cls, name: str, backend_cls: type[MatrixBackend]) -> None:
        """
        Register a backend class under a name.

        Parameters
        ----------
        name : str
            Registry name (e.g. "numpy").
        backend_cls : type[MatrixBackend]
            Concrete MatrixBackend subclass.

        Raises
        ------
        TypeError
            If backend_cls is not a MatrixBackend subclass.
        """
        if not (isinstance(backend_cls, type) and issubclass(backend_cls, MatrixBackend)):
            raise TypeError(f"Backend must be a MatrixBackend subclass, got {backend_cls!r}")

        with cls._lock:
            if name in cls._classes and cls._classes[name] is not backend_cls:
                logger.warning(f"Replacing registered backend '{name}' with {backend_cls.__name__}")
            cls._classes[name] = backend_cls
            cls._instances.pop(name, None)

    @classmethod
    def get(cls, name: str) -> MatrixBackend:
        """
        Get the backend instance registered under name.

        Raises
        ------
        BackendNotAvailableError
            If no backend is registered under name.
        """
        with cls._lock:
            if name not in cls._classes:
                raise BackendNotAvailableError(name, sorted(cls._classes))
            if name not in cls._instances:
                cls._instances[name] = cls._classes[name]()
                logger.debug(f"Instantiated matrix backend '{name}'")
            return cls._instances[name]

    @classmethod
    def names(cls) -> list[str]:
        """Sorted list of registered backend names."""
        return sorted(cls._classes)


def register_backend(name: str, backend_cls: type[MatrixBackend]) -> None:
    """Register a backend class under a name."""
    BackendRegistry.register(name, backend_cls)


def get_backend(backend: str | MatrixBackend | None = None) -> MatrixBackend:
    """
    Resolve a matrix backend.

    Parameters
    ----------
    backend : str, MatrixBackend or None
        Backend name, an existing backend instance (returned unchanged),
        or None for the configured default.

    Returns
    -------
    MatrixBackend
        The resolved backend.

    Raises
    ------
    BackendNotAvailableError
        If the name is not registered.

    Examples
    --------
    >>> get_backend("python").name
    'python'
    """
    if isinstance(backend, MatrixBackend):
        return backend
    if backend is None:
        from volspace.config import get_config

        backend = get_config().backend
    return BackendRegistry.get(backend)


def list_backends() -> list[str]:
    """
    List registered backend names.

    Examples
    --------
    >>> list_backends()
    ['numpy', 'python']
    """
    return BackendRegistry.names()


register_backend(PythonBackend.name, PythonBackend)

try:
    from volspace.backends.numpy_backend import NumpyBackend
except ImportError:
    # numpy not installed - only the built-in backend is available
    logger.debug("numpy not available, numpy backend not registered")
else:
    register_backend(NumpyBackend.name, NumpyBackend)
