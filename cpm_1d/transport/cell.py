"""Cylindrical composite cell solved with the collision-probability method.

The cell is built once from validated radii and materials. solve() computes
the reduced collision probabilities P[g] for every group, then the response
matrices X[g], Y[g] and the blackness Gamma[g]. Groups are independent: each
is a task whose result fills its own slice of the output arrays, so the
group loop can run on a process pool.

Import Policy:
    from cpm_1d.transport.cell import CylindricalCell, CellSolution

DO NOT use: from cpm_1d.transport.cell import *
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from multiprocessing import Pool
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from cpm_1d.config.cell_config import CellConfig, create_default_config
from cpm_1d.config.enums import CellState
from cpm_1d.config.validation import validate_config
from cpm_1d.core.exceptions import UsageError
from cpm_1d.core.geometry import AnnularGeometry
from cpm_1d.core.materials import MGCrossSections
from cpm_1d.transport.collision_probability import compute_probability_matrix
from cpm_1d.transport.response import GroupResponse, solve_response_group

logger = logging.getLogger(__name__)


def _probability_task(task: tuple) -> np.ndarray:
    """Process-pool worker: P matrix of one group."""
    g, radii, volumes, etr, quadrature = task
    return compute_probability_matrix(radii, volumes, etr, quadrature, group=g)


def _response_task(task: tuple) -> GroupResponse:
    """Process-pool worker: X, Y and Gamma of one group."""
    g, p, volumes, etr, es_tr, er_tr, surface, solver = task
    return solve_response_group(p, volumes, etr, es_tr, er_tr, surface, solver, group=g)


@dataclass
class CellSolution:
    """Snapshot of a solved cell, handed to a flux solver.

    Attributes:
        radii: Outer radii [N]
        volumes: Region volumes [N]
        surface: Outer surface 2 pi R_outer
        material_names: Name of the material in every region [N]
        etr: Transport cross section of every region [G, N]
        p: Reduced collision probabilities [G, N, N]
        X: Source response matrices [G, N, N]
        Y: Surface response vectors [G, N]
        gamma: Blackness per group [G]
        runtime_seconds: Wall-clock time of the last solve()

    """

    radii: np.ndarray
    volumes: np.ndarray
    surface: float
    material_names: List[str]
    etr: np.ndarray
    p: np.ndarray
    X: np.ndarray
    Y: np.ndarray
    gamma: np.ndarray
    runtime_seconds: float = 0.0

    @property
    def ngroups(self) -> int:
        return self.p.shape[0]

    @property
    def nregions(self) -> int:
        return self.p.shape[1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary of plain lists."""
        return {
            "radii": self.radii.tolist(),
            "volumes": self.volumes.tolist(),
            "surface": self.surface,
            "material_names": list(self.material_names),
            "etr": self.etr.tolist(),
            "p": self.p.tolist(),
            "X": self.X.tolist(),
            "Y": self.Y.tolist(),
            "gamma": self.gamma.tolist(),
            "runtime_seconds": self.runtime_seconds,
        }


class CylindricalCell:
    """One-dimensional cylindrical cell of concentric annular regions.

    Args:
        radii: Outer radius of every region [cm], strictly increasing
        materials: Material of every region, sharing one group count
        config: Engine configuration (defaults if None)

    Raises:
        ConfigurationError: If the geometry, the materials or the
            configuration are invalid

    Example:
        >>> cell = CylindricalCell([0.4, 0.6], [fuel, water])
        >>> cell.solve()
        >>> cell.Gamma(0)
    """

    def __init__(
        self,
        radii: Sequence[float],
        materials: Sequence[MGCrossSections],
        config: Optional[CellConfig] = None,
    ):
        self.config = config if config is not None else create_default_config()
        validate_config(self.config, raise_on_error=True)

        self.geometry = AnnularGeometry(radii, materials)

        self._state = CellState.UNSOLVED
        self._p: Optional[np.ndarray] = None
        self._X: Optional[np.ndarray] = None
        self._Y: Optional[np.ndarray] = None
        self._gamma: Optional[np.ndarray] = None
        self._runtime = 0.0

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def nregions(self) -> int:
        return self.geometry.nregions

    @property
    def ngroups(self) -> int:
        return self.geometry.ngroups

    @property
    def radii(self) -> np.ndarray:
        return self.geometry.radii

    @property
    def volumes(self) -> np.ndarray:
        return self.geometry.volumes

    @property
    def surface(self) -> float:
        """Outer surface of the cell, 2 pi R_outer."""
        return self.geometry.surface

    def radius(self, i: int) -> float:
        return float(self.geometry.radii[i])

    def volume(self, i: int) -> float:
        return float(self.geometry.volumes[i])

    def material(self, i: int) -> MGCrossSections:
        return self.geometry.materials[i]

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def solved(self) -> bool:
        return self._state == CellState.SOLVED

    def _reset(self) -> None:
        self._state = CellState.UNSOLVED
        self._p = None
        self._X = None
        self._Y = None
        self._gamma = None

    def _map_groups(self, func: Callable[[tuple], Any], tasks: List[tuple]) -> list:
        n_workers = min(self.config.solver.n_workers, len(tasks))
        if n_workers <= 1:
            return [func(task) for task in tasks]

        logger.debug(f"Dispatching {len(tasks)} group tasks to {n_workers} workers")
        with Pool(processes=n_workers) as pool:
            return pool.map(func, tasks)

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------

    def solve(self) -> None:
        """Compute P, X, Y and Gamma for every group from scratch.

        Raises:
            NumericalError: If any group fails; the cell is left UNSOLVED

        """
        logger.info(
            f"Solving cylindrical cell: {self.nregions} regions, {self.ngroups} groups, "
            f"quadrature {self.config.quadrature.rule.value}/{self.config.quadrature.mode.value}"
        )
        start = time.perf_counter()

        try:
            self.calculate_collision_probabilities()
            self.solve_systems()
        except Exception:
            self._reset()
            raise

        self._runtime = time.perf_counter() - start
        logger.info(f"Cell solved in {self._runtime:.3f} s")

    def calculate_collision_probabilities(self) -> None:
        """Compute the reduced collision-probability matrices P[g]."""
        self._reset()

        geom = self.geometry
        tasks = [
            (g, geom.radii, geom.volumes, geom.group_data(g)[0], self.config.quadrature)
            for g in range(self.ngroups)
        ]
        results = self._map_groups(_probability_task, tasks)

        p = np.empty((self.ngroups, self.nregions, self.nregions))
        for g, p_g in enumerate(results):
            p[g] = p_g

        p.setflags(write=False)
        self._p = p
        self._state = CellState.PROBABILITIES_COMPUTED
        logger.debug("Collision probabilities computed")

    def solve_systems(self) -> None:
        """Solve the response systems X[g], Y[g] and the blackness Gamma[g].

        Raises:
            UsageError: If the collision probabilities have not been computed

        """
        if self._p is None:
            raise UsageError(
                "Collision probabilities must be computed before solving the response systems."
            )

        geom = self.geometry
        tasks = []
        for g in range(self.ngroups):
            etr, es_tr, er_tr = geom.group_data(g)
            tasks.append(
                (g, self._p[g], geom.volumes, etr, es_tr, er_tr, geom.surface,
                 self.config.solver)
            )
        results = self._map_groups(_response_task, tasks)

        x = np.empty((self.ngroups, self.nregions, self.nregions))
        y = np.empty((self.ngroups, self.nregions))
        gamma = np.empty(self.ngroups)
        for g, res in enumerate(results):
            x[g] = res.X
            y[g] = res.Y
            gamma[g] = res.gamma
            logger.debug(f"Group {g}: Gamma = {res.gamma:.6e}")

        for arr in (x, y, gamma):
            arr.setflags(write=False)

        self._X = x
        self._Y = y
        self._gamma = gamma
        self._state = CellState.SOLVED

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _require(self, state: CellState) -> None:
        if self._state != state:
            raise UsageError(
                f"Cell results are not available in state '{self._state.value}'. "
                "Call solve() first."
            )

    @property
    def p_matrix(self) -> np.ndarray:
        """Reduced collision probabilities [G, N, N]."""
        self._require(CellState.SOLVED)
        return self._p

    @property
    def x_matrix(self) -> np.ndarray:
        """Source response matrices [G, N, N]."""
        self._require(CellState.SOLVED)
        return self._X

    @property
    def y_matrix(self) -> np.ndarray:
        """Surface response vectors [G, N]."""
        self._require(CellState.SOLVED)
        return self._Y

    @property
    def gamma(self) -> np.ndarray:
        """Blackness per group [G]."""
        self._require(CellState.SOLVED)
        return self._gamma

    def p(self, g: int, i: int, j: int) -> float:
        return float(self.p_matrix[g, i, j])

    def X(self, g: int, i: int, k: int) -> float:
        return float(self.x_matrix[g, i, k])

    def Y(self, g: int, i: int) -> float:
        return float(self.y_matrix[g, i])

    def Gamma(self, g: int) -> float:
        return float(self.gamma[g])

    def result(self) -> CellSolution:
        """Copy of all solved quantities.

        Raises:
            UsageError: If the cell is not solved

        """
        self._require(CellState.SOLVED)
        return CellSolution(
            radii=self.radii.copy(),
            volumes=self.volumes.copy(),
            surface=self.surface,
            material_names=[mat.name for mat in self.geometry.materials],
            etr=np.array([self.geometry.group_data(g)[0] for g in range(self.ngroups)]),
            p=self._p.copy(),
            X=self._X.copy(),
            Y=self._Y.copy(),
            gamma=self._gamma.copy(),
            runtime_seconds=self._runtime,
        )

    def __repr__(self) -> str:
        return (
            f"CylindricalCell(nregions={self.nregions}, ngroups={self.ngroups}, "
            f"state={self._state.value})"
        )
