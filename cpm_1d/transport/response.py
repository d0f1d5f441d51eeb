"""Per-group response matrices and blackness.

With the reduced collision probabilities P of one group, the collision
rates in every region satisfy

    sum_j [delta_ij Etr_i V_i - c_j P(j, i)] x_j = b_i

where c_j = Es_tr_j / Etr_j. The same matrix M is factored once and solved
for N source right-hand sides (X) and one surface right-hand side (Y).
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve, qr, solve_triangular

from cpm_1d.config.cell_config import SolverConfig
from cpm_1d.config.enums import Factorization
from cpm_1d.core.exceptions import NumericalError


@dataclass(frozen=True)
class GroupResponse:
    """Solution of the response systems of one group.

    Attributes:
        X: X[i, k], collisions in region i from a unit isotropic source in k [N, N]
        Y: Y[i], collisions in region i from a unit incoming surface current [N]
        gamma: Blackness, sum_i Er_tr_i V_i Y_i

    """

    X: np.ndarray
    Y: np.ndarray
    gamma: float


def assemble_response_matrix(
    p: np.ndarray,
    volumes: np.ndarray,
    etr: np.ndarray,
    es_tr: np.ndarray,
) -> np.ndarray:
    """M(i, j) = -c_j P(j, i) + delta_ij Etr_i V_i.

    Args:
        p: Reduced collision probabilities [N, N]
        volumes: Region volumes [N]
        etr: Transport cross sections [N]
        es_tr: In-group scattering cross sections [N]

    Returns:
        Dense matrix M [N, N]

    """
    c = es_tr / etr
    m = -c[np.newaxis, :] * p.T
    m[np.diag_indices_from(m)] += etr * volumes
    return m


def _check_pivots(pivots: np.ndarray, singular_tol: float, group: Optional[int]) -> None:
    pivots = np.abs(pivots)
    largest = pivots.max()
    if not np.isfinite(largest) or largest == 0.0:
        raise NumericalError(f"Response matrix for group {group} is singular", group=group)

    ratio = pivots.min() / largest
    if ratio <= singular_tol:
        raise NumericalError(
            f"Response matrix for group {group} is singular or numerically degenerate "
            f"(smallest/largest pivot = {ratio:.3e})",
            group=group,
        )


def factorize(
    m: np.ndarray,
    method: Factorization = Factorization.QR,
    singular_tol: float = 0.0,
    group: Optional[int] = None,
) -> Callable[[np.ndarray], np.ndarray]:
    """Factor M once and return a solver reusable for any right-hand side.

    Raises:
        NumericalError: If M is non-finite, singular or degenerate

    """
    if not np.all(np.isfinite(m)):
        raise NumericalError(
            f"Response matrix for group {group} contains non-finite values", group=group
        )

    if method == Factorization.QR:
        q, r = qr(m)
        _check_pivots(np.diag(r), singular_tol, group)

        def solve(b: np.ndarray) -> np.ndarray:
            return solve_triangular(r, q.T @ b)

        return solve

    with warnings.catch_warnings():
        # Zero pivots are reported through NumericalError below
        warnings.simplefilter("ignore", LinAlgWarning)
        lu_piv = lu_factor(m)
    _check_pivots(np.diag(lu_piv[0]), singular_tol, group)

    def solve(b: np.ndarray) -> np.ndarray:
        return lu_solve(lu_piv, b)

    return solve


def solve_response_group(
    p: np.ndarray,
    volumes: np.ndarray,
    etr: np.ndarray,
    es_tr: np.ndarray,
    er_tr: np.ndarray,
    surface: float,
    solver: SolverConfig,
    group: Optional[int] = None,
) -> GroupResponse:
    """Solve the X, Y systems and the blackness of one group.

    Args:
        p: Reduced collision probabilities [N, N]
        volumes: Region volumes [N]
        etr: Transport cross sections [N]
        es_tr: In-group scattering cross sections [N]
        er_tr: Removal cross sections [N]
        surface: Outer surface of the cell, 2 pi R_outer
        solver: Factorization settings
        group: Group index, only used in error messages

    Returns:
        GroupResponse

    Raises:
        NumericalError: If the response matrix cannot be factored or the
            solution is not finite

    """
    m = assemble_response_matrix(p, volumes, etr, es_tr)
    solve = factorize(m, solver.factorization, solver.singular_tol, group)

    # Column k: b_k(i) = P(k, i) / Etr_k
    x = solve(p.T / etr[np.newaxis, :])

    b_surface = (4.0 / surface) * (etr * volumes - p.sum(axis=1))
    y = solve(b_surface)

    gamma = float(np.sum(er_tr * volumes * y))

    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y)) and np.isfinite(gamma)):
        raise NumericalError(
            f"Response solution for group {group} contains non-finite values", group=group
        )

    return GroupResponse(X=x, Y=y, gamma=gamma)
