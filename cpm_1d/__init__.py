"""Collision-Probability Engine for 1D Cylindrical Cells

Computes multigroup collision probabilities, response matrices and cell
blackness for cylindrical cells made of concentric annular regions.

Key Principles:
- Reduced collision probabilities from Bickley-Naymark Ki3 chord integrals
- Gauss-Kronrod quadrature (fixed or adaptive) over every annular shell
- One factorization per group, reused for all source and surface responses
- Immutable materials and geometry; results only after an explicit solve()

Version: 1.0
"""

__version__ = "1.0"

# Configuration
from cpm_1d.config import (
    CellConfig,
    CellState,
    Factorization,
    GaussKronrodRule,
    QuadratureConfig,
    QuadratureMode,
    SolverConfig,
    create_default_config,
    create_validated_config,
)

# Core data structures
from cpm_1d.core import (
    AnnularGeometry,
    ConfigurationError,
    CpmError,
    GaussKronrod,
    Ki3,
    MGCrossSections,
    NumericalError,
    UsageError,
    mexp,
)

# Material library
from cpm_1d.materials import MaterialRegistry, get_material, list_materials

# Cell orchestration
from cpm_1d.transport import (
    CellSolution,
    CylindricalCell,
    create_reference_pin_cell,
    run_from_config,
    solve_cell,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "CellConfig",
    "QuadratureConfig",
    "SolverConfig",
    "GaussKronrodRule",
    "QuadratureMode",
    "Factorization",
    "CellState",
    "create_default_config",
    "create_validated_config",
    # Core
    "AnnularGeometry",
    "MGCrossSections",
    "GaussKronrod",
    "Ki3",
    "mexp",
    # Errors
    "CpmError",
    "ConfigurationError",
    "NumericalError",
    "UsageError",
    # Materials
    "MaterialRegistry",
    "get_material",
    "list_materials",
    # Transport
    "CylindricalCell",
    "CellSolution",
    "solve_cell",
    "run_from_config",
    "create_reference_pin_cell",
]
