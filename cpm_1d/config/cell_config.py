"""Cell Configuration - Single Source of Truth (SSOT)

This module provides the configuration dataclasses for the collision-probability
engine. ALL numerical parameters of a cell solve flow through these classes.

Import Policy:
    from cpm_1d.config.cell_config import CellConfig, QuadratureConfig, SolverConfig

DO NOT use: from cpm_1d.config.cell_config import *
"""

from dataclasses import dataclass, field

from cpm_1d.config.defaults import (
    DEFAULT_ABS_TOL,
    DEFAULT_FACTORIZATION,
    DEFAULT_MAX_SUBDIVISIONS,
    DEFAULT_N_WORKERS,
    DEFAULT_QUADRATURE_MODE,
    DEFAULT_QUADRATURE_RULE,
    DEFAULT_REL_TOL,
    DEFAULT_SINGULAR_TOL,
)
from cpm_1d.config.enums import Factorization, GaussKronrodRule, QuadratureMode


@dataclass
class QuadratureConfig:
    """Radial shell integration settings.

    Attributes:
        rule: Gauss-Kronrod pair used on every interval
        mode: FIXED (one evaluation per shell) or ADAPTIVE
        abs_tol: Absolute error target (ADAPTIVE only)
        rel_tol: Relative error target (ADAPTIVE only)
        max_subdivisions: Interval budget per shell integral (ADAPTIVE only)

    """

    rule: GaussKronrodRule = GaussKronrodRule(DEFAULT_QUADRATURE_RULE)
    mode: QuadratureMode = QuadratureMode(DEFAULT_QUADRATURE_MODE)
    abs_tol: float = DEFAULT_ABS_TOL
    rel_tol: float = DEFAULT_REL_TOL
    max_subdivisions: int = DEFAULT_MAX_SUBDIVISIONS

    def validate(self) -> list[str]:
        """Validate quadrature configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if not isinstance(self.rule, GaussKronrodRule):
            errors.append(f"rule must be a GaussKronrodRule, got {self.rule!r}")
        if not isinstance(self.mode, QuadratureMode):
            errors.append(f"mode must be a QuadratureMode, got {self.mode!r}")

        if self.abs_tol < 0:
            errors.append(f"abs_tol must be >= 0, got {self.abs_tol}")
        if self.rel_tol < 0:
            errors.append(f"rel_tol must be >= 0, got {self.rel_tol}")
        if self.abs_tol == 0 and self.rel_tol == 0:
            errors.append("abs_tol and rel_tol cannot both be 0")

        if self.max_subdivisions < 1:
            errors.append(f"max_subdivisions must be >= 1, got {self.max_subdivisions}")

        return errors


@dataclass
class SolverConfig:
    """Response-matrix solver settings.

    Attributes:
        factorization: QR (default) or LU factorization of the group matrix
        singular_tol: Relative pivot threshold below which the matrix is
            considered singular
        n_workers: Worker processes for the group loop (1 = serial)

    """

    factorization: Factorization = Factorization(DEFAULT_FACTORIZATION)
    singular_tol: float = DEFAULT_SINGULAR_TOL
    n_workers: int = DEFAULT_N_WORKERS

    def validate(self) -> list[str]:
        """Validate solver configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if not isinstance(self.factorization, Factorization):
            errors.append(
                f"factorization must be a Factorization, got {self.factorization!r}"
            )

        if not (0.0 <= self.singular_tol < 1.0):
            errors.append(f"singular_tol must be in [0, 1), got {self.singular_tol}")

        if self.n_workers < 1:
            errors.append(f"n_workers must be >= 1, got {self.n_workers}")

        return errors


@dataclass
class CellConfig:
    """Complete engine configuration (SSOT).

    Example:
        >>> config = CellConfig()
        >>> config.validate()
        []

    Attributes:
        quadrature: Radial shell integration settings
        solver: Response-matrix solver settings

    """

    quadrature: QuadratureConfig = field(default_factory=QuadratureConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)

    def validate(self) -> list[str]:
        """Validate the complete configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []
        errors.extend(self.quadrature.validate())
        errors.extend(self.solver.validate())
        return errors

    def to_dict(self) -> dict:
        """Convert configuration to a plain dictionary (enums as values)."""
        return {
            "quadrature": {
                "rule": self.quadrature.rule.value,
                "mode": self.quadrature.mode.value,
                "abs_tol": self.quadrature.abs_tol,
                "rel_tol": self.quadrature.rel_tol,
                "max_subdivisions": self.quadrature.max_subdivisions,
            },
            "solver": {
                "factorization": self.solver.factorization.value,
                "singular_tol": self.solver.singular_tol,
                "n_workers": self.solver.n_workers,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CellConfig":
        """Create configuration from a dictionary.

        Missing keys fall back to the defaults; enum fields accept their
        string values.

        Args:
            data: Dictionary with optional 'quadrature' and 'solver' sections

        Returns:
            CellConfig instance

        """
        def parse_enum(enum_cls, value):
            if isinstance(value, str):
                return enum_cls(value.lower())
            return value

        quad_data = dict(data.get("quadrature") or {})
        solver_data = dict(data.get("solver") or {})

        if "rule" in quad_data:
            quad_data["rule"] = parse_enum(GaussKronrodRule, quad_data["rule"])
        if "mode" in quad_data:
            quad_data["mode"] = parse_enum(QuadratureMode, quad_data["mode"])
        if "factorization" in solver_data:
            solver_data["factorization"] = parse_enum(
                Factorization, solver_data["factorization"]
            )

        return cls(
            quadrature=QuadratureConfig(**quad_data),
            solver=SolverConfig(**solver_data),
        )


def create_default_config() -> CellConfig:
    """Create a configuration populated from defaults.py."""
    return CellConfig()
