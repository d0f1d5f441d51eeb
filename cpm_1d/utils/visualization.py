"""Simple visualization utilities for solved cells."""

import logging

import numpy as np
import matplotlib.pyplot as plt

from cpm_1d.transport.cell import CellSolution

logger = logging.getLogger(__name__)


def normalized_probabilities(solution: CellSolution, group: int) -> np.ndarray:
    """First-flight probabilities p_{i->j} = P(i, j) / (Etr_i V_i) of one group."""
    if not 0 <= group < solution.ngroups:
        raise IndexError(f"Group index {group} out of range [0, {solution.ngroups})")

    p = solution.p[group]
    etr_v = solution.etr[group] * solution.volumes
    return p / etr_v[:, np.newaxis]


def plot_probability_matrix(
    solution: CellSolution,
    group: int,
    title: str = None,
    save_path: str = None,
):
    """Heatmap of the first-flight collision probabilities of one group.

    Args:
        solution: Solved cell
        group: Energy group index
        title: Plot title
        save_path: If provided, save to file
    """
    probs = normalized_probabilities(solution, group)
    n = solution.nregions

    fig, ax = plt.subplots(figsize=(10, 6))

    im = ax.imshow(
        probs,
        origin='upper',
        aspect='auto',
        cmap='viridis',
    )

    plt.colorbar(im, ax=ax, label='p(i -> j)')
    ax.set_xticks(range(n))
    ax.set_yticks(range(n))
    ax.set_xlabel('Collision region j')
    ax.set_ylabel('Source region i')
    ax.set_title(title or f'Collision Probabilities, Group {group}')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Saved: {save_path}")
    else:
        plt.show()

    plt.close()


def plot_blackness(
    solution: CellSolution,
    title: str = 'Cell Blackness',
    save_path: str = None,
):
    """Bar chart of the blackness Gamma of every group.

    Args:
        solution: Solved cell
        title: Plot title
        save_path: If provided, save to file
    """
    groups = np.arange(solution.ngroups)

    fig, ax = plt.subplots(figsize=(10, 6))

    ax.bar(groups, solution.gamma, color='steelblue')
    ax.set_xticks(groups)
    ax.set_xlabel('Energy group')
    ax.set_ylabel('Gamma')
    ax.set_title(title)
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Saved: {save_path}")
    else:
        plt.show()

    plt.close()
