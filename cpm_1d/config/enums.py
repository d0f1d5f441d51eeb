"""
Configuration Enums for the cpm_1d engine

This module defines all enumeration types used throughout the configuration.

Import Policy:
    from cpm_1d.config.enums import GaussKronrodRule, QuadratureMode, Factorization

DO NOT use: from cpm_1d.config.enums import *
"""

from enum import Enum


class GaussKronrodRule(Enum):
    """Fixed-order Gauss-Kronrod pairs.

    Options:
        GK15: 7-point Gauss embedded in a 15-point Kronrod rule
        GK21: 10-point Gauss embedded in a 21-point Kronrod rule
    """
    GK15 = "gk15"
    GK21 = "gk21"


class QuadratureMode(Enum):
    """How the radial shell integrals are evaluated.

    Options:
        FIXED: A single rule evaluation per shell. The embedded error estimate
            is computed but never drives refinement.
        ADAPTIVE: Global adaptive bisection driven by the error estimate
            until abs_tol / rel_tol are met or max_subdivisions is reached.
    """
    FIXED = "fixed"
    ADAPTIVE = "adaptive"


class Factorization(Enum):
    """Dense factorization of the per-group response matrix.

    Options:
        QR: Householder QR (default, tolerant of mild ill-conditioning)
        LU: LU with partial pivoting (cheaper)
    """
    QR = "qr"
    LU = "lu"


class CellState(Enum):
    """Lifecycle of a cylindrical cell.

    UNSOLVED -> PROBABILITIES_COMPUTED -> SOLVED. Any failure during solve()
    returns the cell to UNSOLVED.
    """
    UNSOLVED = "unsolved"
    PROBABILITIES_COMPUTED = "probabilities_computed"
    SOLVED = "solved"
