"""Annular region geometry.

A one-dimensional cylindrical cell made of concentric annuli. Region i
spans [R_{i-1}, R_i] with R_{-1} = 0 and is bound to one immutable
multigroup material.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from cpm_1d.core.constants import PI
from cpm_1d.core.exceptions import ConfigurationError
from cpm_1d.core.materials import MGCrossSections


@dataclass(frozen=True, eq=False)
class Region:
    """One annular region of a cell.

    Attributes:
        index: Position from the centre (0 = innermost)
        inner_radius: R_{i-1} [cm] (0 for the innermost region)
        outer_radius: R_i [cm]
        volume: pi * (R_i^2 - R_{i-1}^2) [cm^2 per unit height]
        material: Bound material (never mutated)

    """

    index: int
    inner_radius: float
    outer_radius: float
    volume: float
    material: MGCrossSections


class AnnularGeometry:
    """Validated set of concentric annular regions.

    Args:
        radii: Outer radius of every region, strictly increasing, > 0 [cm]
        materials: One material per region; all share one group count

    Raises:
        ConfigurationError: If any geometric or material invariant is violated

    Example:
        >>> geom = AnnularGeometry([0.4, 0.6], [fuel, water])
        >>> geom.nregions
        2
    """

    def __init__(self, radii: Sequence[float], materials: Sequence[MGCrossSections]):
        radii = list(radii)
        materials = list(materials)

        if len(radii) != len(materials):
            raise ConfigurationError(
                f"Number of radii ({len(radii)}) does not match the number of "
                f"materials ({len(materials)})."
            )

        if len(radii) < 2:
            raise ConfigurationError(
                f"Must have at least 2 regions, got {len(radii)}."
            )

        radii_arr = np.array(radii, dtype=float)
        if radii_arr.ndim != 1 or not np.all(np.isfinite(radii_arr)):
            raise ConfigurationError(f"Radii must be a sequence of finite numbers: {radii}")

        for i in range(1, len(radii_arr)):
            if radii_arr[i] <= radii_arr[i - 1]:
                raise ConfigurationError(
                    f"Radii are not sorted in strictly increasing order: "
                    f"R[{i - 1}] = {radii_arr[i - 1]} >= R[{i}] = {radii_arr[i]}.",
                    index=i,
                )

        if radii_arr[0] <= 0.0:
            raise ConfigurationError(
                f"All radii must be > 0, got R[0] = {radii_arr[0]}.", index=0
            )

        for i, mat in enumerate(materials):
            if mat is None:
                raise ConfigurationError(f"Material of region {i} is None.", index=i)

        ngroups = materials[0].ngroups
        if ngroups < 1:
            raise ConfigurationError(
                f"Must have at least 1 energy group, material '{materials[0].name}' has "
                f"{ngroups}.",
                index=0,
            )

        for i, mat in enumerate(materials):
            if mat.ngroups != ngroups:
                raise ConfigurationError(
                    f"Not all materials have the same number of energy groups: region {i} "
                    f"('{mat.name}') has {mat.ngroups}, expected {ngroups}.",
                    index=i,
                )

        inner = np.concatenate([[0.0], radii_arr[:-1]])
        volumes = PI * (radii_arr * radii_arr - inner * inner)

        radii_arr.setflags(write=False)
        volumes.setflags(write=False)

        self._radii = radii_arr
        self._volumes = volumes
        self._materials: Tuple[MGCrossSections, ...] = tuple(materials)
        self._ngroups = ngroups
        self._regions = tuple(
            Region(
                index=i,
                inner_radius=float(inner[i]),
                outer_radius=float(radii_arr[i]),
                volume=float(volumes[i]),
                material=materials[i],
            )
            for i in range(len(radii_arr))
        )

    @property
    def radii(self) -> np.ndarray:
        """Outer radii [N] (read-only)."""
        return self._radii

    @property
    def volumes(self) -> np.ndarray:
        """Region volumes (areas per unit height) [N] (read-only)."""
        return self._volumes

    @property
    def materials(self) -> Tuple[MGCrossSections, ...]:
        return self._materials

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    @property
    def nregions(self) -> int:
        return len(self._radii)

    @property
    def ngroups(self) -> int:
        return self._ngroups

    @property
    def outer_radius(self) -> float:
        return float(self._radii[-1])

    @property
    def surface(self) -> float:
        """Outer surface of the cell per unit height, 2 pi R_outer."""
        return 2.0 * PI * self.outer_radius

    def group_data(self, g: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Per-region (Etr, in-group Es_tr, Er_tr) vectors for group g.

        Raises:
            IndexError: If g is outside [0, ngroups)

        """
        if not 0 <= g < self._ngroups:
            raise IndexError(f"Group index {g} out of range [0, {self._ngroups})")

        etr = np.array([mat.Etr[g] for mat in self._materials])
        es_tr = np.array([mat.in_group_scatter[g] for mat in self._materials])
        er_tr = np.array([mat.Er_tr[g] for mat in self._materials])
        return etr, es_tr, er_tr

    def __len__(self) -> int:
        return self.nregions

    def __repr__(self) -> str:
        return (
            f"AnnularGeometry(nregions={self.nregions}, ngroups={self.ngroups}, "
            f"R_outer={self.outer_radius:.6g})"
        )
