"""
High-Level API for cpm_1d Cell Calculations

This module provides a convenient Python API and CLI interface for computing
collision probabilities, response matrices and blackness of cylindrical
annular cells.

This is the recommended entry point for users who want to:
- Solve a cell with one function call, referring to library materials by name
- Run a case described in a YAML or JSON file
- Reproduce the reference UO2/H2O pin cell from the command line

Import Policy:
    from cpm_1d.transport.api import solve_cell, run_from_config
    # Or use CLI: python -m cpm_1d.transport.api --config case.yaml

DO NOT use: from cpm_1d.transport.api import *
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import yaml

from cpm_1d.config.cell_config import CellConfig
from cpm_1d.config.validation import validate_config
from cpm_1d.core.exceptions import ConfigurationError, CpmError
from cpm_1d.core.materials import MGCrossSections
from cpm_1d.materials.registry import get_material
from cpm_1d.transport.cell import CellSolution, CylindricalCell

logger = logging.getLogger(__name__)

MaterialSpec = Union[str, MGCrossSections]

# Outer radii [cm] of the reference pin cell: seven fuel rings, four water
# rings, and an outer boundary preserving the 1.26 cm square pitch area.
REFERENCE_RADII = [
    0.1, 0.2, 0.3, 0.4, 0.45, 0.5, 0.54, 0.58, 0.61, 0.65,
    1.26 / np.sqrt(np.pi),
]
REFERENCE_MATERIALS = ["UO2"] * 7 + ["H2O"] * 4


def _resolve_material(spec: Union[MaterialSpec, dict]) -> MGCrossSections:
    if isinstance(spec, MGCrossSections):
        return spec
    if isinstance(spec, str):
        try:
            return get_material(spec)
        except KeyError as e:
            raise ConfigurationError(str(e.args[0])) from e
    if isinstance(spec, dict):
        return MGCrossSections.from_dict(spec)
    raise ConfigurationError(f"Cannot interpret material specification: {spec!r}")


def create_reference_pin_cell(config: Optional[CellConfig] = None) -> CylindricalCell:
    """Build the 11-region UO2/H2O reference pin cell (unsolved).

    Example:
        >>> cell = create_reference_pin_cell()
        >>> cell.nregions
        11
    """
    materials = [get_material(name) for name in REFERENCE_MATERIALS]
    return CylindricalCell(REFERENCE_RADII, materials, config=config)


def solve_cell(
    radii: Sequence[float],
    materials: Sequence[MaterialSpec],
    config: Optional[CellConfig] = None,
) -> CellSolution:
    """Build and solve a cylindrical cell.

    Args:
        radii: Outer radius of every region [cm]
        materials: MGCrossSections or library material names, one per region
        config: Optional CellConfig (uses defaults if None)

    Returns:
        CellSolution with P, X, Y and Gamma for every group

    Raises:
        ConfigurationError: If the geometry, materials or config are invalid
        NumericalError: If a group cannot be solved

    Example:
        >>> from cpm_1d.transport.api import solve_cell
        >>> sol = solve_cell([0.4, 0.63], ["UO2", "H2O"])
        >>> sol.gamma.shape
        (7,)
    """
    cell = CylindricalCell(radii, [_resolve_material(m) for m in materials], config=config)
    cell.solve()
    return cell.result()


def load_case(config_path: Union[str, Path]) -> tuple:
    """Read a case file.

    Expected format (YAML or JSON):
        radii: [0.4, 0.63]
        materials: [UO2, H2O]        # names or inline material mappings
        quadrature: {rule: gk21, mode: adaptive}
        solver: {factorization: qr}

    Returns:
        (radii, materials, config)

    Raises:
        ValueError: If the file format is not supported
        ConfigurationError: If the case content is invalid

    """
    config_path = Path(config_path)

    if config_path.suffix == ".yaml" or config_path.suffix == ".yml":
        with open(config_path, "r") as f:
            case = yaml.safe_load(f)
    elif config_path.suffix == ".json":
        with open(config_path, "r") as f:
            case = json.load(f)
    else:
        raise ValueError(f"Unsupported config format: {config_path.suffix}")

    if not isinstance(case, dict):
        raise ConfigurationError(f"{config_path}: case file must contain a mapping")

    for key in ("radii", "materials"):
        if key not in case:
            raise ConfigurationError(f"{config_path}: missing required key '{key}'")

    try:
        config = CellConfig.from_dict(case)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{config_path}: invalid engine settings: {e}") from e
    validate_config(config, raise_on_error=True)

    materials = [_resolve_material(m) for m in case["materials"]]
    return list(case["radii"]), materials, config


def run_from_config(config_path: Union[str, Path]) -> CellSolution:
    """Solve the cell described by a configuration file.

    Example:
        >>> from cpm_1d.transport.api import run_from_config
        >>> sol = run_from_config("cases/pin_cell.yaml")
    """
    radii, materials, config = load_case(config_path)
    logger.info(f"Loaded case {config_path}: {len(radii)} regions")
    return solve_cell(radii, materials, config=config)


def format_summary(solution: CellSolution) -> str:
    """Human-readable table of region volumes and group blackness."""
    lines = ["Region  Material      R_outer [cm]   Volume [cm^2]"]
    for i, (r, v, name) in enumerate(
        zip(solution.radii, solution.volumes, solution.material_names)
    ):
        lines.append(f"{i:6d}  {name:12s}  {r:12.6f}   {v:13.6e}")
    r_outer = solution.radii[-1]
    lines.append(f"Total volume: {solution.volumes.sum():.6e} (pi R^2 = {np.pi * r_outer**2:.6e})")
    lines.append("")
    lines.append("Group   Gamma")
    for g, gamma in enumerate(solution.gamma):
        lines.append(f"{g:5d}   {gamma:.6e}")
    lines.append(f"Runtime: {solution.runtime_seconds:.3f} s")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        description="Collision probabilities and blackness of a cylindrical annular cell",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--config", type=Path, help="Case file (YAML or JSON)")
    source.add_argument(
        "--reference", action="store_true", help="Solve the 11-region UO2/H2O pin cell"
    )
    parser.add_argument("--output", type=Path, help="Write the full solution as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.reference:
            cell = create_reference_pin_cell()
            cell.solve()
            solution = cell.result()
        else:
            solution = run_from_config(args.config)
    except (CpmError, OSError, ValueError) as e:
        logger.error(f"Cell calculation failed: {e}")
        return 1

    print(format_summary(solution))

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump(solution.to_dict(), f, indent=2)
        logger.info(f"Solution written to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
