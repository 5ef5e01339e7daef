"""
Unit tests for exceedance selection and GPD parameter estimation.
"""

import numpy as np
import pytest
from scipy import stats

from evt_dimensions import ConfigurationError, EstimationError, estimate_gpd_parameters
from evt_dimensions.analysis import quantile_threshold, select_exceedances


class TestSelectExceedances:
    """Tests for select_exceedances()."""

    def test_shift_and_mask(self):
        """Values at or above the quantile are shifted to start at zero."""
        g = np.arange(101, dtype=float)
        sample = select_exceedances(g, 0.5)
        assert sample.threshold == 50.0
        np.testing.assert_array_equal(sample.values, np.arange(51, dtype=float))
        assert sample.mask.sum() == 51
        assert np.all(sample.mask[50:]) and not np.any(sample.mask[:50])

    def test_values_non_negative(self):
        """Exceedances are non-negative by construction."""
        rng = np.random.default_rng(0)
        sample = select_exceedances(rng.normal(size=5000), 0.97)
        assert np.all(sample.values >= 0)
        assert sample.size == pytest.approx(150, abs=2)

    def test_ties_at_threshold_kept(self):
        """A value exactly at the threshold enters the sample as zero."""
        g = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        sample = select_exceedances(g, 0.5)
        assert sample.threshold == 2.0
        np.testing.assert_array_equal(sample.values, [0.0, 1.0, 2.0])

    def test_explicit_threshold(self):
        """A precomputed threshold is used as is."""
        g = np.arange(10, dtype=float)
        sample = select_exceedances(g, 0.5, threshold=7.0)
        np.testing.assert_array_equal(sample.values, [0.0, 1.0, 2.0])

    def test_constant_observable_is_degenerate(self):
        """All-equal observables give an all-zero sample the fit rejects."""
        sample = select_exceedances(np.full(50, 3.0), 0.9)
        assert np.all(sample.values == 0)
        with pytest.raises(EstimationError):
            estimate_gpd_parameters(sample.values, "exp")

    def test_empty_observable(self):
        with pytest.raises(EstimationError):
            select_exceedances(np.array([]), 0.9)

    def test_quantile_is_linear_interpolation(self):
        g = np.array([1.0, 2.0, 3.0, 4.0])
        assert quantile_threshold(g, 0.5) == pytest.approx(2.5)


class TestEstimateGPDParameters:
    """Tests for estimate_gpd_parameters()."""

    @pytest.fixture
    def exponential_sample(self):
        rng = np.random.default_rng(42)
        return rng.exponential(scale=0.5, size=20000)

    @pytest.fixture
    def thin_tail_sample(self):
        rng = np.random.default_rng(43)
        return stats.genpareto.rvs(-0.2, scale=1.5, size=20000, random_state=rng)

    def test_exp_is_mean_excess(self, exponential_sample):
        """The exponential shortcut fixes xi=0 and sigma to the mean."""
        sigma, xi = estimate_gpd_parameters(exponential_sample, "exp")
        assert xi == 0.0
        assert sigma == pytest.approx(exponential_sample.mean())
        assert sigma == pytest.approx(0.5, rel=0.03)

    @pytest.mark.parametrize("estimator", ["exp", "mm", "pwm", "mle"])
    def test_recovers_exponential_scale(self, exponential_sample, estimator):
        sigma, xi = estimate_gpd_parameters(exponential_sample, estimator)
        assert sigma == pytest.approx(0.5, rel=0.05)
        assert abs(xi) < 0.05

    @pytest.mark.parametrize("estimator", ["mm", "pwm", "mle"])
    def test_recovers_thin_tail(self, thin_tail_sample, estimator):
        sigma, xi = estimate_gpd_parameters(thin_tail_sample, estimator)
        assert sigma == pytest.approx(1.5, rel=0.05)
        assert xi == pytest.approx(-0.2, abs=0.05)

    @pytest.mark.parametrize("estimator", ["exp", "mm", "pwm", "mle"])
    def test_too_small_sample(self, estimator):
        """A single exceedance cannot identify sigma."""
        with pytest.raises(EstimationError):
            estimate_gpd_parameters(np.array([0.3]), estimator)

    @pytest.mark.parametrize("estimator", ["exp", "mm", "pwm", "mle"])
    def test_zero_variance(self, estimator):
        with pytest.raises(EstimationError):
            estimate_gpd_parameters(np.full(20, 0.7), estimator)

    def test_non_finite_sample(self):
        with pytest.raises(EstimationError):
            estimate_gpd_parameters(np.array([0.1, 0.5, np.inf]), "exp")

    def test_unknown_estimator(self, exponential_sample):
        with pytest.raises(ConfigurationError):
            estimate_gpd_parameters(exponential_sample, "bayes")
