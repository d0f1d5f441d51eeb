"""Multigroup material records.

A material is an immutable set of per-group macroscopic cross sections
[1/cm]. Cells bind to materials by reference and never modify them: all
arrays are copied on construction and flagged read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from cpm_1d.core.exceptions import ConfigurationError


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class MGCrossSections:
    """Multigroup macroscopic cross sections of one material.

    Attributes:
        name: Material name
        Etr: Transport-corrected total cross section per group [G]
        Es_tr: Transport-corrected scattering matrix [G, G] indexed
            [g_in, g_out]. A vector of length G is accepted and taken as
            the in-group (diagonal) scattering only.
        Er_tr: Removal cross section per group [G]. Defaults to
            Etr - Es_tr[g, g].
        Ea: Absorption cross section per group [G] (optional)
        Ef: Fission cross section per group [G] (optional)
        nu: Neutrons per fission per group [G] (optional)
        chi: Fission spectrum per group [G] (optional)

    Example:
        >>> fuel = MGCrossSections(name="fuel", Etr=[0.5], Es_tr=[0.0])
        >>> fuel.ngroups
        1
    """

    name: str
    Etr: np.ndarray
    Es_tr: np.ndarray
    Er_tr: Optional[np.ndarray] = None
    Ea: Optional[np.ndarray] = None
    Ef: Optional[np.ndarray] = None
    nu: Optional[np.ndarray] = None
    chi: Optional[np.ndarray] = None
    _in_group: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        """Validate, copy and freeze all cross-section arrays."""
        etr = np.array(self.Etr, dtype=float)
        if etr.ndim != 1:
            raise ConfigurationError(
                f"Material '{self.name}': Etr must be 1D, got shape {etr.shape}"
            )
        ngroups = len(etr)

        if not np.all(np.isfinite(etr)) or np.any(etr <= 0.0):
            raise ConfigurationError(
                f"Material '{self.name}': Etr must be finite and > 0 in every group: {etr}"
            )

        es_tr = np.array(self.Es_tr, dtype=float)
        if es_tr.ndim == 1:
            if len(es_tr) != ngroups:
                raise ConfigurationError(
                    f"Material '{self.name}': Es_tr has {len(es_tr)} groups, Etr has {ngroups}"
                )
            es_tr = np.diag(es_tr)
        elif es_tr.shape != (ngroups, ngroups):
            raise ConfigurationError(
                f"Material '{self.name}': Es_tr must have shape ({ngroups}, {ngroups}), "
                f"got {es_tr.shape}"
            )

        if not np.all(np.isfinite(es_tr)):
            raise ConfigurationError(f"Material '{self.name}': Es_tr must be finite")

        in_group = np.diag(es_tr).copy()

        if self.Er_tr is None:
            er_tr = etr - in_group
        else:
            er_tr = self._group_vector(self.Er_tr, "Er_tr", ngroups)

        object.__setattr__(self, "Etr", _freeze(etr))
        object.__setattr__(self, "Es_tr", _freeze(es_tr))
        object.__setattr__(self, "Er_tr", _freeze(er_tr))
        object.__setattr__(self, "_in_group", _freeze(in_group))

        for attr in ("Ea", "Ef", "nu", "chi"):
            value = getattr(self, attr)
            if value is not None:
                arr = self._group_vector(value, attr, ngroups)
                if np.any(arr < 0.0):
                    raise ConfigurationError(
                        f"Material '{self.name}': {attr} must be >= 0: {arr}"
                    )
                object.__setattr__(self, attr, _freeze(arr))

    def _group_vector(self, value, attr: str, ngroups: int) -> np.ndarray:
        arr = np.array(value, dtype=float)
        if arr.shape != (ngroups,):
            raise ConfigurationError(
                f"Material '{self.name}': {attr} must have shape ({ngroups},), got {arr.shape}"
            )
        if not np.all(np.isfinite(arr)):
            raise ConfigurationError(f"Material '{self.name}': {attr} must be finite")
        return arr

    @property
    def ngroups(self) -> int:
        """Number of energy groups."""
        return len(self.Etr)

    @property
    def in_group_scatter(self) -> np.ndarray:
        """In-group scattering cross section Es_tr(g -> g) [G]."""
        return self._in_group

    @property
    def scattering_ratio(self) -> np.ndarray:
        """In-group scattering ratio c(g) = Es_tr(g -> g) / Etr(g) [G]."""
        return self._in_group / self.Etr

    @property
    def fissile(self) -> bool:
        """True when the material carries a non-zero fission cross section."""
        return self.Ef is not None and bool(np.any(self.Ef > 0.0))

    def to_dict(self) -> dict:
        """Convert to a dictionary of plain lists (YAML friendly)."""
        data = {
            "name": self.name,
            "Etr": self.Etr.tolist(),
            "Es_tr": self.Es_tr.tolist(),
            "Er_tr": self.Er_tr.tolist(),
        }
        for attr in ("Ea", "Ef", "nu", "chi"):
            value = getattr(self, attr)
            if value is not None:
                data[attr] = value.tolist()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MGCrossSections":
        """Create a material from a dictionary.

        Raises:
            ConfigurationError: If a required key is missing or a value is invalid

        """
        for key in ("name", "Etr", "Es_tr"):
            if key not in data:
                raise ConfigurationError(f"Material definition is missing '{key}'")

        return cls(
            name=data["name"],
            Etr=data["Etr"],
            Es_tr=data["Es_tr"],
            Er_tr=data.get("Er_tr"),
            Ea=data.get("Ea"),
            Ef=data.get("Ef"),
            nu=data.get("nu"),
            chi=data.get("chi"),
        )
