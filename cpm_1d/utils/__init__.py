"""Utility modules for cpm_1d."""

from cpm_1d.utils.visualization import plot_blackness, plot_probability_matrix

__all__ = [
    "plot_probability_matrix",
    "plot_blackness",
]
