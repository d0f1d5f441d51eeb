"""Collision-probability matrices of a cylindrical annular cell.

For one energy group, the reduced collision probabilities

    P(i, j) = Etr_i V_i p_{i->j}

are obtained from the auxiliary integrals

    S(i, j) = sum_{k=0}^{i} int_{R_{k-1}}^{R_k} [Ki3(tau_plus(y)) - Ki3(tau_minus(y))] dy

for i <= j, where y is the transverse offset of a chord from the centre.
tau_plus is the optical length of the chord crossing every shell up to i on
both sides of the midline and shells i+1..j on one side; tau_minus only
counts shells i+1..j. The matrix follows from the second difference

    P(i, j) = 2 S(i, j) + 2 S(i-1, j-1) - 2 S(i-1, j) - 2 S(i, j-1)

plus Etr_i V_i on the diagonal. Every function here is pure: all geometry
and cross-section data are passed explicitly.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Optional

import numpy as np

from cpm_1d.config.cell_config import QuadratureConfig
from cpm_1d.config.enums import QuadratureMode
from cpm_1d.core.exceptions import NumericalError
from cpm_1d.core.quadrature import QuadratureResult, get_rule
from cpm_1d.core.special_functions import Ki3

logger = logging.getLogger(__name__)


def shell_integrand(
    y: np.ndarray,
    radii: np.ndarray,
    etr: np.ndarray,
    k: int,
    i: int,
    j: int,
) -> np.ndarray:
    """Ki3(tau_plus) - Ki3(tau_minus) for offsets y inside shell k.

    Args:
        y: Transverse offsets, R_{k-1} <= y <= R_k
        radii: Outer radii of all regions [N]
        etr: Transport cross section of every region for this group [N]
        k: Shell containing the offsets
        i: Inner region of the pair (i <= j)
        j: Outer region of the pair

    Returns:
        Integrand values, same length as y

    """
    y = np.atleast_1d(np.asarray(y, dtype=float))
    r = radii[k:j + 1]

    # Half-chord lengths at every shell boundary crossed, x_s = sqrt(R_s^2 - y^2)
    x = np.sqrt(np.clip(r[np.newaxis, :] ** 2 - (y * y)[:, np.newaxis], 0.0, None))
    segments = np.diff(x, axis=1, prepend=0.0)
    dtau = segments * etr[k:j + 1]

    crossed_twice = np.arange(k, j + 1) <= i
    tau_plus = dtau @ np.where(crossed_twice, 2.0, 1.0)
    tau_minus = dtau @ np.where(crossed_twice, 0.0, 1.0)

    return np.asarray(Ki3(tau_plus)) - np.asarray(Ki3(tau_minus))


def _integrate_shell(f, r_min: float, r_max: float, quadrature: QuadratureConfig) -> QuadratureResult:
    gk = get_rule(quadrature.rule)
    if quadrature.mode == QuadratureMode.FIXED:
        return gk.integrate(f, r_min, r_max)
    return gk.integrate_adaptive(
        f,
        r_min,
        r_max,
        abs_tol=quadrature.abs_tol,
        rel_tol=quadrature.rel_tol,
        max_subdivisions=quadrature.max_subdivisions,
    )


def compute_s_ij(
    i: int,
    j: int,
    radii: np.ndarray,
    etr: np.ndarray,
    quadrature: QuadratureConfig,
) -> float:
    """Auxiliary integral S(i, j), symmetric in (i, j).

    Args:
        i, j: Region indices
        radii: Outer radii [N]
        etr: Transport cross sections for one group [N]
        quadrature: Integration settings

    Returns:
        S(i, j)

    """
    if i > j:
        i, j = j, i

    s_ij = 0.0
    for k in range(i + 1):
        r_min = 0.0 if k == 0 else float(radii[k - 1])
        r_max = float(radii[k])

        f = partial(shell_integrand, radii=radii, etr=etr, k=k, i=i, j=j)
        res = _integrate_shell(f, r_min, r_max, quadrature)

        if not res.converged:
            logger.debug(
                f"S({i},{j}) shell {k}: adaptive quadrature stopped at "
                f"{res.n_intervals} intervals, error estimate {res.error:.3e}"
            )

        s_ij += res.value

    return s_ij


def compute_s_matrix(radii: np.ndarray, etr: np.ndarray, quadrature: QuadratureConfig) -> np.ndarray:
    """Symmetric matrix of all S(i, j) for one group [N, N]."""
    n = len(radii)
    s = np.zeros((n, n))
    for j in range(n):
        for i in range(j + 1):
            s[i, j] = compute_s_ij(i, j, radii, etr, quadrature)
            s[j, i] = s[i, j]
    return s


def compute_probability_matrix(
    radii: np.ndarray,
    volumes: np.ndarray,
    etr: np.ndarray,
    quadrature: QuadratureConfig,
    group: Optional[int] = None,
) -> np.ndarray:
    """Reduced collision-probability matrix P for one group.

    Args:
        radii: Outer radii [N]
        volumes: Region volumes [N]
        etr: Transport cross sections for this group [N]
        quadrature: Integration settings
        group: Group index, only used in error messages

    Returns:
        Symmetric matrix P [N, N]

    Raises:
        NumericalError: If P is not finite or not exactly symmetric

    """
    radii = np.asarray(radii, dtype=float)
    volumes = np.asarray(volumes, dtype=float)
    etr = np.asarray(etr, dtype=float)

    s = compute_s_matrix(radii, etr, quadrature)

    n = len(radii)
    p = np.zeros((n, n))
    for j in range(n):
        for i in range(j + 1):
            value = 2.0 * s[i, j]
            if i > 0 and j > 0:
                value += 2.0 * s[i - 1, j - 1]
            if i > 0:
                value -= 2.0 * s[i - 1, j]
            if j > 0:
                value -= 2.0 * s[i, j - 1]

            if i == j:
                value += volumes[i] * etr[i]

            p[i, j] = value
            p[j, i] = value

    if not np.all(np.isfinite(p)):
        raise NumericalError(
            f"Collision probability matrix for group {group} contains non-finite values",
            group=group,
        )

    if not np.array_equal(p, p.T):
        raise NumericalError(
            f"Collision probability matrix for group {group} is not symmetric",
            group=group,
        )

    return p
