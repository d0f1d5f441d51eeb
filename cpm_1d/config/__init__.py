"""Configuration Module - Single Source of Truth for Engine Parameters

Default Configuration (loaded from defaults.yaml):
    from cpm_1d.config import get_default, get_defaults

    rule = get_default('quadrature.rule')
    all_defaults = get_defaults()

Recommended Usage:
    from cpm_1d.config import CellConfig, create_validated_config

    # Create a default config
    config = CellConfig()

    # Create a custom config with validation
    config = create_validated_config(mode="fixed", rule="gk21", n_workers=4)

Import Policy:
    DO NOT use: from cpm_1d.config import *

Submodules:
    enums: Configuration enumerations (GaussKronrodRule, QuadratureMode, ...)
    yaml_loader: YAML configuration loader (get_default, get_defaults)
    cell_config: Configuration dataclasses (QuadratureConfig, SolverConfig, CellConfig)
    validation: Validation utilities (validate_config, warn_if_unsafe, ...)
"""

from cpm_1d.config.enums import (
    CellState,
    Factorization,
    GaussKronrodRule,
    QuadratureMode,
)
from cpm_1d.config.yaml_loader import get_default, get_defaults, reload_defaults
from cpm_1d.config.cell_config import (
    CellConfig,
    QuadratureConfig,
    SolverConfig,
    create_default_config,
)
from cpm_1d.config.validation import (
    ConfigurationWarning,
    create_validated_config,
    validate_config,
    warn_if_unsafe,
)


__all__ = [
    # Enums
    "GaussKronrodRule",
    "QuadratureMode",
    "Factorization",
    "CellState",
    # Config classes
    "QuadratureConfig",
    "SolverConfig",
    "CellConfig",
    # Factory functions
    "create_default_config",
    "create_validated_config",
    # Validation
    "validate_config",
    "warn_if_unsafe",
    "ConfigurationWarning",
    # YAML defaults access
    "get_default",
    "get_defaults",
    "reload_defaults",
]
