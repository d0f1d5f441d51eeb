"""Special functions for the cylindrical collision-probability kernel.

Bickley-Naymark functions are defined by

    Ki_n(x) = integral_0^{pi/2} cos^(n-1)(theta) exp(-x / cos(theta)) dtheta

with d/dx Ki_n(x) = -Ki_{n-1}(x). The collision-probability integrals only
need Ki3, which is evaluated by cubic Hermite interpolation on a table of
Ki3 values and exact slopes (-Ki2). The table is computed once per process
with the Gauss-Kronrod engine. Past the end of the table the leading
asymptotic behaviour sqrt(pi / 2x) exp(-x), anchored on the last tabulated
value, is used.

Ki3_quad evaluates the defining integral directly and serves as the
reference for the interpolated Ki3.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Union

import numpy as np
from scipy.interpolate import CubicHermiteSpline

from cpm_1d.config.defaults import (
    KI3_QUAD_ABS_TOL,
    KI3_QUAD_MAX_SUBDIVISIONS,
    KI3_QUAD_REL_TOL,
    KI3_TABLE_PANELS,
    KI3_TABLE_SPACING,
    KI3_TABLE_X_MAX,
    MEXP_SERIES_THRESHOLD,
)
from cpm_1d.config.enums import GaussKronrodRule
from cpm_1d.core.constants import HALF_PI, KI2_AT_ZERO, KI3_AT_ZERO
from cpm_1d.core.quadrature import get_rule

ArrayLike = Union[float, np.ndarray]


def _scalar_or_array(out: np.ndarray) -> ArrayLike:
    return float(out) if out.ndim == 0 else out


def _check_domain(x: np.ndarray, name: str) -> None:
    if np.any(np.isnan(x)) or np.any(x < 0.0):
        raise ValueError(f"{name}(x) is defined for x >= 0, got {x}")


def mexp(x: ArrayLike) -> ArrayLike:
    """Evaluate 1 - exp(-x) without cancellation for small x.

    Args:
        x: Argument (scalar or array)

    Returns:
        1 - exp(-x), same shape as x
    """
    x = np.asarray(x, dtype=float)
    small = np.abs(x) < MEXP_SERIES_THRESHOLD
    out = np.where(small, -np.expm1(-x), 1.0 - np.exp(-x))
    return _scalar_or_array(out)


@dataclass(frozen=True)
class BickleyTable:
    """Tabulated Ki3 and Ki2 on a uniform grid with its interpolant.

    Attributes:
        x: Knots [0, x_max]
        ki3: Ki3 at the knots
        ki2: Ki2 at the knots (minus the slope of Ki3)
        spline: Cubic Hermite interpolant of Ki3

    """

    x: np.ndarray
    ki3: np.ndarray
    ki2: np.ndarray
    spline: CubicHermiteSpline

    @property
    def x_max(self) -> float:
        return float(self.x[-1])

    @property
    def ki3_max(self) -> float:
        """Ki3 at the last knot, anchor of the asymptotic tail."""
        return float(self.ki3[-1])


@lru_cache(maxsize=1)
def bickley_table() -> BickleyTable:
    """Build (once per process) the Ki3 interpolation table."""
    n_intervals = int(round(KI3_TABLE_X_MAX / KI3_TABLE_SPACING))
    x = np.linspace(0.0, KI3_TABLE_X_MAX, n_intervals + 1)
    n_knots = len(x)

    def integrand(theta: np.ndarray) -> np.ndarray:
        c = np.cos(theta)[:, np.newaxis]
        attenuation = np.exp(-x[np.newaxis, :] / c)
        return np.concatenate([c * c * attenuation, c * attenuation], axis=1)

    gk = get_rule(GaussKronrodRule.GK21)
    res = gk.integrate_composite(integrand, 0.0, HALF_PI, KI3_TABLE_PANELS)

    values = np.asarray(res.value)
    ki3 = values[:n_knots].copy()
    ki2 = values[n_knots:].copy()
    ki3[0] = KI3_AT_ZERO
    ki2[0] = KI2_AT_ZERO

    for arr in (x, ki3, ki2):
        arr.setflags(write=False)

    return BickleyTable(x=x, ki3=ki3, ki2=ki2, spline=CubicHermiteSpline(x, ki3, -ki2))


def Ki3(x: ArrayLike) -> ArrayLike:
    """Third-order Bickley-Naymark function.

    Monotonically decreasing from Ki3(0) = pi/4 towards 0.

    Args:
        x: Optical depth, x >= 0 (scalar or array)

    Returns:
        Ki3(x), same shape as x

    Raises:
        ValueError: If any x is negative or NaN

    """
    x = np.asarray(x, dtype=float)
    _check_domain(x, "Ki3")

    table = bickley_table()
    out = np.empty_like(x)

    inside = x <= table.x_max
    out[inside] = table.spline(x[inside])

    tail = ~inside
    if np.any(tail):
        xt = x[tail]
        out[tail] = (
            table.ki3_max
            * np.sqrt(table.x_max / xt)
            * np.exp(-(xt - table.x_max))
        )

    out[x == 0.0] = KI3_AT_ZERO
    return _scalar_or_array(out)


def _bickley_quad(x: float, power: int) -> float:
    gk = get_rule(GaussKronrodRule.GK21)

    def integrand(theta: np.ndarray) -> np.ndarray:
        c = np.cos(theta)
        return c ** power * np.exp(-x / c)

    res = gk.integrate_adaptive(
        integrand,
        0.0,
        HALF_PI,
        abs_tol=KI3_QUAD_ABS_TOL,
        rel_tol=KI3_QUAD_REL_TOL,
        max_subdivisions=KI3_QUAD_MAX_SUBDIVISIONS,
    )
    return res.value


def Ki3_quad(x: ArrayLike) -> ArrayLike:
    """Ki3 by adaptive quadrature of its defining integral.

    Much slower than Ki3; used to verify the interpolation table.
    """
    x = np.asarray(x, dtype=float)
    _check_domain(x, "Ki3_quad")
    out = np.array([_bickley_quad(float(v), 2) for v in x.ravel()]).reshape(x.shape)
    return _scalar_or_array(out)


def Ki2_quad(x: ArrayLike) -> ArrayLike:
    """Ki2 (minus the derivative of Ki3) by adaptive quadrature."""
    x = np.asarray(x, dtype=float)
    _check_domain(x, "Ki2_quad")
    out = np.array([_bickley_quad(float(v), 1) for v in x.ravel()]).reshape(x.shape)
    return _scalar_or_array(out)
