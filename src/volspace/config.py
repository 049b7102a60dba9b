"""
Volspace configuration module.

This module provides the VolspaceConfig dataclass holding process-wide
defaults (matrix backend, tolerances, caching) and helpers to load it from
a YAML file and environment variables.

Classes:
    VolspaceConfig: Library configuration.

Functions:
    load_yaml_config: Load configuration values from YAML file.
    config_from_env: Build configuration from environment variables.
    get_config: Get the process-wide configuration.
    set_config: Replace the process-wide configuration.
    reset_config: Drop the process-wide configuration (rebuilt lazily).
"""

from __future__ import annotations

import importlib.util
import logging
import math
import os
from dataclasses import dataclass, fields, replace
from numbers import Real
from pathlib import Path
from typing import Any

import yaml

from volspace.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "VOLSPACE_CONFIG"
ENV_BACKEND = "VOLSPACE_BACKEND"
ENV_ATOL = "VOLSPACE_ATOL"

# numpy is an optional extra; without it only the built-in backend exists
DEFAULT_BACKEND = "numpy" if importlib.util.find_spec("numpy") is not None else "python"
DEFAULT_ATOL = 1e-9
DEFAULT_SINGULAR_EPSILON = 1e-12

# YAML 1.1 reads exponent-only floats such as 1e-6 as strings
_NUMERIC_FIELDS = {"atol": float, "singular_epsilon": float, "log_level": int}


def load_yaml_config(config_path: str | Path) -> dict[str, Any]:
    """
    Load configuration values from a YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file doesn't exist.
    ConfigError
        If YAML parsing fails or the top level is not a mapping.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(
            f"Config file must contain a mapping, got {type(config).__name__}: {config_path}"
        )

    return config


@dataclass(frozen=True)
class VolspaceConfig:
    """
    Process-wide volspace configuration.

    Attributes
    ----------
    backend : str
        Name of the default matrix backend ("numpy" or "python").
    atol : float
        Default absolute tolerance for approximate transform comparison.
    singular_epsilon : float
        Relative epsilon below which a determinant is treated as zero.
    cache_inverse : bool
        Whether volume descriptors cache their inverse transform.
    log_level : int
        Verbosity for user-facing summaries (0 silent, 1 standard, 2 verbose).
    """

    backend: str = DEFAULT_BACKEND
    atol: float = DEFAULT_ATOL
    singular_epsilon: float = DEFAULT_SINGULAR_EPSILON
    cache_inverse: bool = True
    log_level: int = 1

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If any value is out of range
        """
        if not isinstance(self.backend, str) or not self.backend:
            raise ConfigError(f"backend must be a non-empty string, got {self.backend!r}")
        for name in ("atol", "singular_epsilon"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
                raise ConfigError(f"{name} must be a finite number, got {value!r}")
        if not isinstance(self.cache_inverse, bool):
            raise ConfigError(f"cache_inverse must be true or false, got {self.cache_inverse!r}")
        if isinstance(self.log_level, bool) or not isinstance(self.log_level, int):
            raise ConfigError(f"log_level must be an integer, got {self.log_level!r}")
        if self.atol < 0:
            raise ConfigError(f"atol must be non-negative, got {self.atol}")
        if not 0 < self.singular_epsilon < 1:
            raise ConfigError(
                f"singular_epsilon must be in (0, 1), got {self.singular_epsilon}"
            )
        if self.log_level not in (0, 1, 2):
            raise ConfigError(f"log_level must be 0, 1 or 2, got {self.log_level}")

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> VolspaceConfig:
        """Build a configuration from a mapping, rejecting unknown keys.

        Numeric fields given as strings (e.g. ``atol: 1e-6`` in YAML) are
        converted.

        Raises:
            ConfigError: If a key is unknown or a value cannot be converted
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {sorted(unknown)}. "
                f"Valid keys: {sorted(known)}"
            )
        converted = {}
        for key, value in values.items():
            cast = _NUMERIC_FIELDS.get(key)
            if cast is not None and isinstance(value, str):
                try:
                    value = cast(value)
                except ValueError as e:
                    raise ConfigError(f"{key} must be a number, got {value!r}") from e
            converted[key] = value

        config = cls(**converted)
        config.validate()
        return config

    def updated(self, **changes: Any) -> VolspaceConfig:
        """Return a copy with the given fields replaced."""
        config = replace(self, **changes)
        config.validate()
        return config


def config_from_env(environ: dict[str, str] | None = None) -> VolspaceConfig:
    """
    Build configuration from environment variables.

    VOLSPACE_CONFIG points to a YAML file applied over the defaults;
    VOLSPACE_BACKEND and VOLSPACE_ATOL override individual values.

    Parameters
    ----------
    environ : dict, optional
        Environment mapping (default: os.environ)

    Returns
    -------
    VolspaceConfig
        Validated configuration.
    """
    if environ is None:
        environ = dict(os.environ)

    values: dict[str, Any] = {}
    if config_path := environ.get(ENV_CONFIG_PATH):
        values.update(load_yaml_config(config_path))

    if backend := environ.get(ENV_BACKEND):
        values["backend"] = backend

    if atol := environ.get(ENV_ATOL):
        try:
            values["atol"] = float(atol)
        except ValueError as e:
            raise ConfigError(f"{ENV_ATOL} must be a number, got '{atol}'") from e

    return VolspaceConfig.from_dict(values)


# Global configuration singleton
_global_config: VolspaceConfig | None = None


def get_config() -> VolspaceConfig:
    """Get the process-wide configuration, building it from the environment on first use."""
    global _global_config

    if _global_config is None:
        _global_config = config_from_env()
        logger.debug(f"Loaded configuration: {_global_config}")

    return _global_config


def set_config(config: VolspaceConfig) -> None:
    """Replace the process-wide configuration."""
    global _global_config

    config.validate()
    _global_config = config


def reset_config() -> None:
    """Drop the process-wide configuration so it is rebuilt on next access."""
    global _global_config

    _global_config = None


__all__ = [
    "VolspaceConfig",
    "load_yaml_config",
    "config_from_env",
    "get_config",
    "set_config",
    "reset_config",
    "DEFAULT_BACKEND",
    "DEFAULT_ATOL",
    "DEFAULT_SINGULAR_EPSILON",
]
