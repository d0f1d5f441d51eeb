"""Tests for the plotting utilities."""

import matplotlib

matplotlib.use("Agg")

import pytest
import numpy as np
from numpy.testing import assert_allclose

from cpm_1d.utils.visualization import (
    normalized_probabilities,
    plot_blackness,
    plot_probability_matrix,
)


@pytest.fixture
def solution(scattering_cell):
    scattering_cell.solve()
    return scattering_cell.result()


class TestNormalizedProbabilities:
    """Tests for p(i -> j) = P(i, j) / (Etr_i V_i)."""

    def test_rows_bounded(self, solution):
        for g in range(solution.ngroups):
            probs = normalized_probabilities(solution, g)

            assert probs.shape == (2, 2)
            assert np.all(probs > 0.0)
            assert np.all(probs.sum(axis=1) <= 1.0)

    def test_bad_group(self, solution):
        with pytest.raises(IndexError):
            normalized_probabilities(solution, 2)
        with pytest.raises(IndexError):
            normalized_probabilities(solution, -1)

    def test_no_scattering_escape(self, two_region_cell):
        """Without scattering, 1 - sum_j p(i -> j) = S / 4 * Y_i."""
        two_region_cell.solve()
        sol = two_region_cell.result()
        escape = 1.0 - normalized_probabilities(sol, 0).sum(axis=1)

        assert_allclose(escape, sol.surface / 4.0 * sol.Y[0], rtol=1e-12)


class TestPlots:
    """Plots are written to disk without a display."""

    def test_probability_matrix(self, solution, tmp_path):
        path = tmp_path / "p.png"
        plot_probability_matrix(solution, 1, save_path=str(path))

        assert path.exists()
        assert path.stat().st_size > 0

    def test_blackness(self, solution, tmp_path):
        path = tmp_path / "gamma.png"
        plot_blackness(solution, title="Two-group cell", save_path=str(path))

        assert path.exists()

    def test_bad_group_does_not_plot(self, solution, tmp_path):
        path = tmp_path / "bad.png"

        with pytest.raises(IndexError):
            plot_probability_matrix(solution, 5, save_path=str(path))

        assert not path.exists()
