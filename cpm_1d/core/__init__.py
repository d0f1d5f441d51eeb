"""Core building blocks of the collision-probability engine.

This module contains the special functions, the Gauss-Kronrod quadrature
engine, the multigroup material record, the annular geometry model and the
exception hierarchy.
"""

from cpm_1d.core.exceptions import (
    ConfigurationError,
    CpmError,
    NumericalError,
    UsageError,
)
from cpm_1d.core.geometry import AnnularGeometry, Region
from cpm_1d.core.materials import MGCrossSections
from cpm_1d.core.quadrature import GaussKronrod, QuadratureResult, get_rule
from cpm_1d.core.special_functions import Ki2_quad, Ki3, Ki3_quad, bickley_table, mexp

__all__ = [
    "CpmError",
    "ConfigurationError",
    "NumericalError",
    "UsageError",
    "AnnularGeometry",
    "Region",
    "MGCrossSections",
    "GaussKronrod",
    "QuadratureResult",
    "get_rule",
    "mexp",
    "Ki3",
    "Ki3_quad",
    "Ki2_quad",
    "bickley_table",
]
