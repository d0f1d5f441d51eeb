"""Mathematical constants for the collision-probability engine.

This module is the Single Source of Truth (SSOT) for constants used in the
kernel and geometry calculations. Import from here rather than defining
constants locally.

Import Policy:
    from cpm_1d.core.constants import PI, KI3_AT_ZERO

DO NOT use: from cpm_1d.core.constants import *
"""

import math

# =============================================================================
# Geometry
# =============================================================================

PI = math.pi
HALF_PI = 0.5 * math.pi

# =============================================================================
# Bickley-Naymark functions at the origin
# =============================================================================

# Ki_n(0) = integral of cos^(n-1)(theta) over [0, pi/2]
KI1_AT_ZERO = 0.5 * math.pi
KI2_AT_ZERO = 1.0
KI3_AT_ZERO = 0.25 * math.pi

# =============================================================================
# Floating point
# =============================================================================

# Machine epsilon and smallest positive normal double (QUADPACK epmach/uflow)
EPMACH = 2.220446049250313e-16
UFLOW = 2.2250738585072014e-308
