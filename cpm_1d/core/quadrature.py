"""Gauss-Kronrod quadrature.

Fixed-order Gauss-Kronrod pairs (QUADPACK QK15 / QK21 tables) returning an
integral estimate together with the embedded QUADPACK error bound, plus a
composite rule and a globally adaptive bisection driver (QAG style).

Integrands are vectorized: ``f`` receives the array of abscissae of one
interval and returns either an array of the same length (scalar integrand)
or an array of shape ``(n_nodes, m)`` (m integrands evaluated at once).
"""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Union

import numpy as np

from cpm_1d.config.enums import GaussKronrodRule
from cpm_1d.core.constants import EPMACH, UFLOW

ArrayLike = Union[float, np.ndarray]

# =============================================================================
# Node and weight tables (QUADPACK). Abscissae are listed from the interval
# end towards the centre; Gauss points sit at the odd indices.
# =============================================================================

_XGK15 = np.array([
    0.991455371120812639206854697526329,
    0.949107912342758524526189684047851,
    0.864864423359769072789712788640926,
    0.741531185599394439863864773280788,
    0.586087235467691130294144845693013,
    0.405845151377397166906606412076961,
    0.207784955007898467600689403773245,
    0.000000000000000000000000000000000,
])
_WGK15 = np.array([
    0.022935322010529224963732008058970,
    0.063092092629978553290700663189204,
    0.104790010322250183839876322541518,
    0.140653259715525918745189590510238,
    0.169004726639267902826583426598550,
    0.190350578064785409913256402421014,
    0.204432940075298892414161999234649,
    0.209482141084727828012999174891714,
])
_WG7 = np.array([
    0.129484966168869693270611432679082,
    0.279705391489276667901467771423780,
    0.381830050505118944950369775488975,
    0.417959183673469387755102040816327,
])

_XGK21 = np.array([
    0.995657163025808080735527280689003,
    0.973906528517171720077964012084452,
    0.930157491355708226001207180059508,
    0.865063366688984510732096688423493,
    0.780817726586416897063717578345042,
    0.679409568299024406234327365114874,
    0.562757134668604683339000099272694,
    0.433395394129247190799265943165784,
    0.294392862701460198131126603103866,
    0.148874338981631210884826001129720,
    0.000000000000000000000000000000000,
])
_WGK21 = np.array([
    0.011694638867371874278064396062192,
    0.032558162307964727478818972459390,
    0.054755896574351996031381300244580,
    0.075039674810919952767043140916190,
    0.093125454583697605535065465083366,
    0.109387158802297641899210590325805,
    0.123491976262065851077208980292238,
    0.134709217311473325928054001771707,
    0.142775938577060080797094273138717,
    0.147739104901338491374841515972068,
    0.149445554002916905664936468389821,
])
_WG10 = np.array([
    0.066671344308688137593568809893332,
    0.149451349150580593145776339657697,
    0.219086362515982043995534934228163,
    0.269266719309996355091226921569469,
    0.295524224714752870173892994651338,
])

_TABLES = {
    GaussKronrodRule.GK15: (_XGK15, _WGK15, _WG7),
    GaussKronrodRule.GK21: (_XGK21, _WGK21, _WG10),
}


@dataclass(frozen=True)
class QuadratureResult:
    """Integral estimate.

    Attributes:
        value: Integral estimate (float, or array for vector integrands)
        error: Estimated absolute error, same shape as value
        n_intervals: Number of intervals in the final partition
        converged: False when the adaptive driver ran out of subdivisions

    """

    value: ArrayLike
    error: ArrayLike
    n_intervals: int = 1
    converged: bool = True


def _as_result_value(x: np.ndarray) -> ArrayLike:
    return float(x) if np.ndim(x) == 0 else x


class GaussKronrod:
    """Fixed-order Gauss-Kronrod pair on [-1, 1] mapped to [a, b].

    Args:
        rule: Which Gauss-Kronrod pair to use

    Example:
        >>> gk = GaussKronrod(GaussKronrodRule.GK21)
        >>> res = gk.integrate(np.sin, 0.0, np.pi)
        >>> round(res.value, 12)
        2.0
    """

    def __init__(self, rule: GaussKronrodRule = GaussKronrodRule.GK21):
        if rule not in _TABLES:
            raise ValueError(f"Unsupported Gauss-Kronrod rule: {rule!r}")

        xgk, wgk, wg = _TABLES[rule]
        self.rule = rule

        gauss_half = np.zeros_like(wgk)
        gauss_half[1::2] = wg

        # Full symmetric abscissae in ascending order
        self.nodes = np.concatenate([-xgk, xgk[-2::-1]])
        self.kronrod_weights = np.concatenate([wgk, wgk[-2::-1]])
        self.gauss_weights = np.concatenate([gauss_half, gauss_half[-2::-1]])

    @property
    def n_points(self) -> int:
        """Number of integrand evaluations per interval."""
        return len(self.nodes)

    @property
    def gauss_nodes(self) -> np.ndarray:
        """Abscissae of the embedded Gauss rule."""
        return self.nodes[self.gauss_weights != 0.0]

    def integrate(self, f: Callable[[np.ndarray], np.ndarray], a: float, b: float) -> QuadratureResult:
        """Integrate ``f`` over [a, b] with a single rule evaluation.

        The error bound is the QUADPACK estimate built from the difference
        between the Kronrod and the embedded Gauss results.

        Args:
            f: Vectorized integrand
            a: Lower limit
            b: Upper limit

        Returns:
            QuadratureResult with n_intervals=1

        """
        centre = 0.5 * (a + b)
        half = 0.5 * (b - a)
        fx = np.asarray(f(centre + half * self.nodes), dtype=float)
        if fx.ndim == 0:
            fx = np.full(self.n_points, float(fx))

        if fx.shape[0] != self.n_points:
            raise ValueError(
                f"Integrand returned {fx.shape[0]} values for {self.n_points} abscissae"
            )

        resk = np.tensordot(self.kronrod_weights, fx, axes=(0, 0))
        resg = np.tensordot(self.gauss_weights, fx, axes=(0, 0))
        resabs = np.tensordot(self.kronrod_weights, np.abs(fx), axes=(0, 0))
        reskh = 0.5 * resk
        resasc = np.tensordot(
            self.kronrod_weights, np.abs(fx - reskh), axes=(0, 0)
        )

        abs_half = abs(half)
        value = resk * half
        abserr = np.abs((resk - resg) * half)
        resabs = resabs * abs_half
        resasc = resasc * abs_half

        error = _quadpack_error(abserr, resabs, resasc)
        return QuadratureResult(
            value=_as_result_value(value),
            error=_as_result_value(error),
        )

    def integrate_composite(
        self,
        f: Callable[[np.ndarray], np.ndarray],
        a: float,
        b: float,
        n_panels: int,
    ) -> QuadratureResult:
        """Integrate over ``n_panels`` equal sub-intervals of [a, b].

        Suited to vector integrands, where adaptive refinement of a single
        partition is not meaningful.
        """
        if n_panels < 1:
            raise ValueError(f"n_panels must be >= 1, got {n_panels}")

        edges = np.linspace(a, b, n_panels + 1)
        value = 0.0
        error = 0.0
        for lo, hi in zip(edges[:-1], edges[1:]):
            res = self.integrate(f, lo, hi)
            value = value + np.asarray(res.value)
            error = error + np.asarray(res.error)

        return QuadratureResult(
            value=_as_result_value(np.asarray(value)),
            error=_as_result_value(np.asarray(error)),
            n_intervals=n_panels,
        )

    def integrate_adaptive(
        self,
        f: Callable[[np.ndarray], np.ndarray],
        a: float,
        b: float,
        abs_tol: float = 1e-10,
        rel_tol: float = 1e-8,
        max_subdivisions: int = 50,
    ) -> QuadratureResult:
        """Globally adaptive integration of a scalar integrand.

        The interval with the largest error estimate is bisected until the
        summed error satisfies ``error <= max(abs_tol, rel_tol * |value|)``
        or the partition holds ``max_subdivisions`` intervals.

        Returns:
            QuadratureResult; ``converged`` is False when the budget ran out

        """
        first = self.integrate(f, a, b)
        if np.ndim(first.value) != 0:
            raise ValueError("Adaptive integration requires a scalar integrand")

        # Heap entries: (-error, insertion counter, lo, hi, value, error)
        counter = 0
        heap = [(-first.error, counter, a, b, first.value, first.error)]
        total_value = first.value
        total_error = first.error

        def tolerance(value: float) -> float:
            return max(abs_tol, rel_tol * abs(value))

        while total_error > tolerance(total_value) and len(heap) < max_subdivisions:
            _, _, lo, hi, val, err = heapq.heappop(heap)
            mid = 0.5 * (lo + hi)
            if mid <= lo or mid >= hi:
                # Interval cannot be split any further in floating point
                heapq.heappush(heap, (0.0, counter, lo, hi, val, err))
                break

            left = self.integrate(f, lo, mid)
            right = self.integrate(f, mid, hi)
            counter += 1
            heapq.heappush(heap, (-left.error, counter, lo, mid, left.value, left.error))
            counter += 1
            heapq.heappush(heap, (-right.error, counter, mid, hi, right.value, right.error))

            total_value += left.value + right.value - val
            total_error += left.error + right.error - err

        # Re-sum to remove the drift of the running updates
        total_value = math.fsum(entry[4] for entry in heap)
        total_error = math.fsum(entry[5] for entry in heap)

        return QuadratureResult(
            value=total_value,
            error=total_error,
            n_intervals=len(heap),
            converged=total_error <= tolerance(total_value),
        )


def _quadpack_error(abserr: np.ndarray, resabs: np.ndarray, resasc: np.ndarray) -> np.ndarray:
    """QUADPACK scaling of the raw |Kronrod - Gauss| difference."""
    abserr = np.asarray(abserr, dtype=float)
    resabs = np.asarray(resabs, dtype=float)
    resasc = np.asarray(resasc, dtype=float)

    scale = np.ones_like(abserr)
    mask = (resasc != 0.0) & (abserr != 0.0)
    scale[mask] = np.minimum(
        1.0, (200.0 * abserr[mask] / resasc[mask]) ** 1.5
    ) * resasc[mask] / abserr[mask]
    err = abserr * scale

    floor = np.where(resabs > UFLOW / (50.0 * EPMACH), 50.0 * EPMACH * resabs, 0.0)
    return np.maximum(err, floor)


@lru_cache(maxsize=None)
def get_rule(rule: GaussKronrodRule = GaussKronrodRule.GK21) -> GaussKronrod:
    """Shared GaussKronrod instance for ``rule``."""
    return GaussKronrod(rule)
