"""
Configuration Validation Utilities

This module provides validation functions for engine configurations.

Import Policy:
    from cpm_1d.config.validation import validate_config, warn_if_unsafe

DO NOT use: from cpm_1d.config.validation import *
"""

import warnings
from typing import List, Tuple

from cpm_1d.config.cell_config import CellConfig
from cpm_1d.config.enums import GaussKronrodRule, QuadratureMode
from cpm_1d.core.exceptions import ConfigurationError


class ConfigurationWarning(Warning):
    """Warning for potentially inaccurate or slow configuration choices."""

    pass


def validate_config(config: CellConfig, raise_on_error: bool = True) -> Tuple[bool, List[str]]:
    """Validate an engine configuration.

    Args:
        config: CellConfig to validate
        raise_on_error: If True, raise ConfigurationError on validation failure

    Returns:
        Tuple of (is_valid, error_messages)

    Raises:
        ConfigurationError: If validation fails and raise_on_error=True
    """
    errors = config.validate()

    if errors:
        if raise_on_error:
            raise ConfigurationError(
                f"Configuration validation failed with {len(errors)} error(s):\n"
                + "\n".join(f"  - {err}" for err in errors)
            )
        return False, errors

    return True, []


def warn_if_unsafe(config: CellConfig) -> List[str]:
    """Check for configuration choices that are legal but questionable.

    Warnings are issued via Python's warnings module.

    Args:
        config: CellConfig to check

    Returns:
        List of warning messages (empty if no warnings)
    """
    warnings_list = []

    quad = config.quadrature
    if quad.mode == QuadratureMode.FIXED and quad.rule == GaussKronrodRule.GK15:
        warnings_list.append(
            "FIXED quadrature with the GK15 rule integrates each shell with 15 points. "
            "Chord lengths have square-root behaviour at shell boundaries, so expect "
            "errors well above 1e-6 in the collision probabilities."
        )

    if quad.mode == QuadratureMode.ADAPTIVE and quad.max_subdivisions < 5:
        warnings_list.append(
            f"max_subdivisions ({quad.max_subdivisions}) is small. "
            "Adaptive integration will rarely reach the requested tolerance."
        )

    if quad.mode == QuadratureMode.ADAPTIVE and 0 < quad.rel_tol < 1e-13:
        warnings_list.append(
            f"rel_tol ({quad.rel_tol:.1e}) is close to machine precision and "
            "cannot be met by the interpolated Ki3 kernel."
        )

    if config.solver.singular_tol == 0.0:
        warnings_list.append(
            "singular_tol is 0: only exactly-zero pivots will be reported as singular."
        )

    for warning_msg in warnings_list:
        warnings.warn(warning_msg, ConfigurationWarning, stacklevel=2)

    return warnings_list


def create_validated_config(**kwargs) -> CellConfig:
    """Create an engine configuration with validation.

    Keyword arguments name fields of QuadratureConfig or SolverConfig
    (enum fields accept their string values).

    Raises:
        ConfigurationError: If a keyword is unknown or the result is invalid

    Example:
        >>> config = create_validated_config(rule="gk15", n_workers=4)
    """
    quad_keys = {"rule", "mode", "abs_tol", "rel_tol", "max_subdivisions"}
    solver_keys = {"factorization", "singular_tol", "n_workers"}

    unknown = set(kwargs) - quad_keys - solver_keys
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration parameter(s): {', '.join(sorted(unknown))}"
        )

    data = {
        "quadrature": {k: v for k, v in kwargs.items() if k in quad_keys},
        "solver": {k: v for k, v in kwargs.items() if k in solver_keys},
    }
    try:
        config = CellConfig.from_dict(data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration value: {e}") from e

    validate_config(config, raise_on_error=True)
    return config
