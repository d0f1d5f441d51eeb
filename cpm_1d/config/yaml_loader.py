"""YAML Configuration Loader

This module loads defaults.yaml and provides access functions.
It has no dependencies on other config modules to avoid circular imports.

Usage:
    from cpm_1d.config.yaml_loader import get_default, get_defaults
    rule = get_default('quadrature.rule')
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml


def _get_yaml_path() -> Path:
    """Get the path to defaults.yaml.

    The YAML file is searched for in the following order:
    1. Environment variable CPM1D_DEFAULTS_PATH
    2. defaults.yaml relative to this module's directory

    Raises:
        FileNotFoundError: If defaults.yaml cannot be found.
    """
    env_path = os.getenv("CPM1D_DEFAULTS_PATH")
    if env_path and Path(env_path).exists():
        return Path(env_path)

    yaml_path = Path(__file__).parent / "defaults.yaml"
    if not yaml_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {yaml_path}\n"
            f"Set CPM1D_DEFAULTS_PATH environment variable if file is relocated."
        )
    return yaml_path


def _load_yaml_config() -> dict[str, Any]:
    yaml_path = _get_yaml_path()
    with open(yaml_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


_CONFIG_CACHE: dict[str, Any] | None = None


def _get_config() -> dict[str, Any]:
    """Get the cached configuration, loading if necessary."""
    global _CONFIG_CACHE
    if _CONFIG_CACHE is None:
        _CONFIG_CACHE = _load_yaml_config()
    return _CONFIG_CACHE


def get_defaults() -> dict[str, Any]:
    """Get the full configuration dictionary from defaults.yaml.

    Example:
        >>> cfg = get_defaults()
        >>> cfg['solver']['factorization']
        'qr'
    """
    return _get_config().copy()


def get_default(key_path: str, default: Any = None) -> Any:
    """Get a configuration value by dotted key path from defaults.yaml.

    Args:
        key_path: Dotted path to the value (e.g., 'quadrature.rule')
        default: Default value if key is not found

    Returns:
        The configuration value or default if not found.

    Example:
        >>> get_default('quadrature.max_subdivisions')
        50
        >>> get_default('nonexistent.key', 'fallback')
        'fallback'
    """
    value = _get_config()
    for key in key_path.split("."):
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                return default
        else:
            return default
    return value if value is not None else default


def reload_defaults() -> None:
    """Reload defaults.yaml from disk."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = _load_yaml_config()
