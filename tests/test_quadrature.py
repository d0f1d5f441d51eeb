"""Tests for the Gauss-Kronrod quadrature engine."""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from cpm_1d.config.enums import GaussKronrodRule
from cpm_1d.core.quadrature import GaussKronrod, QuadratureResult, get_rule


@pytest.fixture(params=[GaussKronrodRule.GK15, GaussKronrodRule.GK21])
def gk(request):
    """Both supported Gauss-Kronrod pairs."""
    return GaussKronrod(request.param)


class TestGaussKronrodTables:
    """Tests for the node and weight tables."""

    @pytest.mark.parametrize("rule,n_gauss", [
        (GaussKronrodRule.GK15, 7),
        (GaussKronrodRule.GK21, 10),
    ])
    def test_embedded_gauss_rule(self, rule, n_gauss):
        """The embedded rule is the Gauss-Legendre rule of order n."""
        gk = GaussKronrod(rule)
        nodes, weights = np.polynomial.legendre.leggauss(n_gauss)

        assert_allclose(gk.gauss_nodes, nodes, atol=1e-14)
        assert_allclose(gk.gauss_weights[gk.gauss_weights != 0.0], weights, atol=1e-14)

    @pytest.mark.parametrize("rule,n_points", [
        (GaussKronrodRule.GK15, 15),
        (GaussKronrodRule.GK21, 21),
    ])
    def test_number_of_points(self, rule, n_points):
        assert GaussKronrod(rule).n_points == n_points

    def test_nodes_ascending_and_symmetric(self, gk):
        assert np.all(np.diff(gk.nodes) > 0.0)
        assert_allclose(gk.nodes, -gk.nodes[::-1], atol=0.0)

    def test_weights_sum_to_interval_length(self, gk):
        assert_allclose(gk.kronrod_weights.sum(), 2.0, rtol=1e-14)
        assert_allclose(gk.gauss_weights.sum(), 2.0, rtol=1e-14)

    def test_unsupported_rule_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            GaussKronrod("gk99")

    def test_get_rule_cached(self):
        assert get_rule(GaussKronrodRule.GK21) is get_rule(GaussKronrodRule.GK21)


class TestIntegrate:
    """Tests for a single rule evaluation."""

    @pytest.mark.parametrize("degree", [0, 1, 5, 13, 20])
    def test_polynomial_exactness(self, gk, degree):
        res = gk.integrate(lambda x: x ** degree, 0.0, 1.0)
        assert_allclose(res.value, 1.0 / (degree + 1), rtol=1e-13)

    def test_low_degree_error_at_roundoff(self, gk):
        """Both rules are exact for x^4, so only the roundoff floor remains."""
        res = gk.integrate(lambda x: x ** 4, -1.0, 2.0)

        assert_allclose(res.value, (32.0 + 1.0) / 5.0, rtol=1e-14)
        assert res.error < 1e-12

    def test_sine(self):
        res = get_rule(GaussKronrodRule.GK21).integrate(np.sin, 0.0, np.pi)
        assert_allclose(res.value, 2.0, rtol=1e-13)

    def test_error_estimate_bounds_true_error(self, gk):
        res = gk.integrate(np.exp, 0.0, 3.0)
        true_error = abs(res.value - (np.exp(3.0) - 1.0))

        assert true_error <= res.error

    def test_reversed_limits(self, gk):
        forward = gk.integrate(np.exp, 0.0, 1.0)
        backward = gk.integrate(np.exp, 1.0, 0.0)

        assert_allclose(backward.value, -forward.value, rtol=1e-14)
        assert backward.error >= 0.0

    def test_constant_integrand(self, gk):
        """A scalar returned by the integrand is broadcast to all nodes."""
        res = gk.integrate(lambda x: 3.0, 1.0, 2.5)
        assert_allclose(res.value, 4.5, rtol=1e-14)

    def test_vector_integrand(self, gk):
        res = gk.integrate(lambda x: np.column_stack([x, x * x]), 0.0, 2.0)

        assert res.value.shape == (2,)
        assert res.error.shape == (2,)
        assert_allclose(res.value, [2.0, 8.0 / 3.0], rtol=1e-14)

    def test_wrong_output_length_raises(self, gk):
        with pytest.raises(ValueError, match="abscissae"):
            gk.integrate(lambda x: x[:3], 0.0, 1.0)

    def test_result_defaults(self, gk):
        res = gk.integrate(np.cos, 0.0, 1.0)

        assert isinstance(res, QuadratureResult)
        assert isinstance(res.value, float)
        assert res.n_intervals == 1
        assert res.converged


class TestComposite:
    """Tests for the composite rule."""

    def test_exponential(self, gk):
        res = gk.integrate_composite(np.exp, 0.0, 1.0, n_panels=4)

        assert res.n_intervals == 4
        assert_allclose(res.value, np.e - 1.0, rtol=1e-14)

    def test_panels_improve_peaked_integrand(self):
        gk = get_rule(GaussKronrodRule.GK15)
        f = lambda x: np.exp(-50.0 * x)  # noqa: E731
        exact = (1.0 - np.exp(-50.0)) / 50.0

        coarse = gk.integrate_composite(f, 0.0, 1.0, n_panels=1)
        fine = gk.integrate_composite(f, 0.0, 1.0, n_panels=16)

        assert abs(fine.value - exact) < abs(coarse.value - exact)
        assert_allclose(fine.value, exact, rtol=1e-12)

    def test_vector_integrand(self, gk):
        res = gk.integrate_composite(
            lambda x: np.column_stack([np.sin(x), np.cos(x)]), 0.0, np.pi, n_panels=3
        )
        assert_allclose(res.value, [2.0, 0.0], atol=1e-13)

    def test_invalid_panels_raises(self, gk):
        with pytest.raises(ValueError, match="n_panels"):
            gk.integrate_composite(np.exp, 0.0, 1.0, n_panels=0)


class TestAdaptive:
    """Tests for the globally adaptive driver."""

    def test_square_root_singularity(self, gk):
        res = gk.integrate_adaptive(
            np.sqrt, 0.0, 1.0, abs_tol=1e-12, rel_tol=1e-10, max_subdivisions=100
        )

        assert res.converged
        assert res.n_intervals > 1
        assert_allclose(res.value, 2.0 / 3.0, rtol=1e-9)

    def test_smooth_integrand_single_interval(self):
        """A smooth integrand meets the tolerance without subdividing."""
        res = get_rule(GaussKronrodRule.GK21).integrate_adaptive(np.exp, 0.0, 1.0)

        assert res.converged
        assert res.n_intervals == 1
        assert_allclose(res.value, np.e - 1.0, rtol=1e-14)

    def test_budget_exhausted(self, gk):
        res = gk.integrate_adaptive(
            np.sqrt, 0.0, 1.0, abs_tol=0.0, rel_tol=1e-14, max_subdivisions=1
        )

        assert not res.converged
        assert res.n_intervals == 1

    def test_subdivision_limit_respected(self, gk):
        res = gk.integrate_adaptive(
            lambda x: np.log(x), 0.0, 1.0, abs_tol=0.0, rel_tol=1e-15, max_subdivisions=10
        )

        assert res.n_intervals <= 10
        assert_allclose(res.value, -1.0, rtol=1e-3)

    def test_vector_integrand_rejected(self, gk):
        with pytest.raises(ValueError, match="scalar integrand"):
            gk.integrate_adaptive(lambda x: np.column_stack([x, x]), 0.0, 1.0)
