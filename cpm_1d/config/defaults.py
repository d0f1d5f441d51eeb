"""
Default Configuration Constants for the cpm_1d collision-probability engine

This module contains ALL numerical defaults used by the engine.
This is the Single Source of Truth (SSOT) for default configuration.

IMPORTANT Import Policies:
    1. DO NOT use: from cpm_1d.config.defaults import *
       This causes namespace pollution and makes tracking difficult.

    2. DO use explicit imports:
       from cpm_1d.config.defaults import DEFAULT_QUADRATURE_RULE, DEFAULT_ABS_TOL

    3. DO NOT define defaults elsewhere. All defaults must be in this file.
"""

# =============================================================================
# Quadrature Defaults
# =============================================================================

# Gauss-Kronrod rule used for the radial shell integrals.
# "gk15" (7-point Gauss / 15-point Kronrod) or "gk21" (10 / 21)
DEFAULT_QUADRATURE_RULE = "gk21"

# "fixed": one rule evaluation per shell, the error estimate is only reported
# "adaptive": bisect the worst interval until the tolerances are met
DEFAULT_QUADRATURE_MODE = "adaptive"

# Adaptive tolerances. Convergence when error <= max(abs_tol, rel_tol * |I|)
DEFAULT_ABS_TOL = 1.0e-10
DEFAULT_REL_TOL = 1.0e-8

# Maximum number of intervals kept by the adaptive integrator
DEFAULT_MAX_SUBDIVISIONS = 50

# =============================================================================
# Linear Solver Defaults
# =============================================================================

# Factorization of the per-group response matrix ("qr" or "lu")
DEFAULT_FACTORIZATION = "qr"

# A pivot (|R_ii| or |U_ii|) smaller than SINGULAR_TOL * max pivot is
# treated as a singular matrix
DEFAULT_SINGULAR_TOL = 1.0e-12

# Worker processes for the group loop. 1 runs the groups serially.
DEFAULT_N_WORKERS = 1

# =============================================================================
# Special Function Defaults
# =============================================================================

# Below this argument mexp(x) = 1 - exp(-x) is evaluated with expm1
MEXP_SERIES_THRESHOLD = 1.0e-2

# Bickley-Naymark Ki3 interpolation table: [0, KI3_TABLE_X_MAX] with
# KI3_TABLE_SPACING between knots. Past the table an asymptotic tail is used.
KI3_TABLE_X_MAX = 40.0
KI3_TABLE_SPACING = 1.0e-2

# Number of Gauss-Kronrod panels over [0, pi/2] used to build the table
KI3_TABLE_PANELS = 32

# Tolerances for the reference (quadrature) evaluation Ki3_quad
KI3_QUAD_ABS_TOL = 0.0
KI3_QUAD_REL_TOL = 1.0e-12
KI3_QUAD_MAX_SUBDIVISIONS = 200
