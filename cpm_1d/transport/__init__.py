"""Collision-probability and response calculations package."""

from cpm_1d.transport.collision_probability import (
    compute_probability_matrix,
    compute_s_ij,
    compute_s_matrix,
    shell_integrand,
)
from cpm_1d.transport.response import (
    GroupResponse,
    assemble_response_matrix,
    factorize,
    solve_response_group,
)
from cpm_1d.transport.cell import CellSolution, CylindricalCell
from cpm_1d.transport.api import (
    create_reference_pin_cell,
    run_from_config,
    solve_cell,
)

__all__ = [
    'shell_integrand',
    'compute_s_ij',
    'compute_s_matrix',
    'compute_probability_matrix',
    'GroupResponse',
    'assemble_response_matrix',
    'factorize',
    'solve_response_group',
    'CellSolution',
    'CylindricalCell',
    'create_reference_pin_cell',
    'run_from_config',
    'solve_cell',
]
