"""
Unit tests for the local dimension/persistence evaluator and its dispatch.
"""

import numpy as np
import pytest
from scipy import stats

from evt_dimensions import (
    BlockMaxima,
    ConfigurationError,
    Exceedances,
    extremevaltheory_local_dim_persistence,
)
from evt_dimensions.processing import ScratchBuffer, as_state_space_set, log_distances_from_index
from evt_dimensions.workflows.local import fit_tail, is_registered

from conftest import circle_points


class TestObservableInput:
    """Evaluator fed directly with a log-distance-like observable."""

    def test_exponential_tail_dimension(self):
        """Exceedances of an exponential(scale 0.5) observable give dim ~ 2."""
        rng = np.random.default_rng(21)
        g = rng.exponential(scale=0.5, size=20000)
        dim, theta = extremevaltheory_local_dim_persistence(g, Exceedances(0.9, "exp"))
        assert dim == pytest.approx(2.0, rel=0.1)
        assert 0.8 <= theta <= 1.0

    def test_persistence_off(self):
        rng = np.random.default_rng(22)
        g = rng.exponential(size=2000)
        dim, theta = extremevaltheory_local_dim_persistence(
            g, Exceedances(0.95, "mm"), compute_persistence=False
        )
        assert dim > 0
        assert np.isnan(theta)

    def test_block_maxima_gumbel(self):
        """Block maxima of a Gumbel(scale 0.5) observable with blocksize 1 give dim ~ 2."""
        rng = np.random.default_rng(23)
        g = stats.gumbel_r.rvs(scale=0.5, size=5000, random_state=rng)
        dim, theta = extremevaltheory_local_dim_persistence(g, BlockMaxima(1, "mm", p=0.95))
        assert dim == pytest.approx(2.0, rel=0.1)
        assert 0.0 < theta <= 1.0

    def test_block_maxima_persistence_off(self):
        rng = np.random.default_rng(24)
        g = rng.normal(size=1000)
        _, theta = extremevaltheory_local_dim_persistence(
            g, BlockMaxima(10, "pwm"), compute_persistence=False
        )
        assert np.isnan(theta)

    def test_dimension_grows_with_quantile_for_thin_tails(self):
        """For a bounded GPD tail, higher thresholds give smaller scales, so larger dims."""
        rng = np.random.default_rng(25)
        g = stats.genpareto.rvs(-0.3, scale=1.0, size=20000, random_state=rng)
        dims = [
            extremevaltheory_local_dim_persistence(g, Exceedances(p, "mm"), compute_persistence=False)[0]
            for p in (0.5, 0.8, 0.95)
        ]
        assert dims[0] <= dims[1] <= dims[2]
        assert dims[0] == pytest.approx(1.0 / 0.812, rel=0.1)

    def test_state_space_without_point(self):
        """A 2-D set needs a reference point."""
        with pytest.raises(ConfigurationError):
            extremevaltheory_local_dim_persistence(circle_points(50), Exceedances(0.9))


class TestReferencePoint:
    """Evaluator fed with a state space set and a reference point."""

    def test_member_point_is_self_excluded(self):
        """Using a point of the set gives the same result as the batch observable."""
        X = as_state_space_set(circle_points(400))
        extraction = Exceedances(0.95, "exp")
        direct = extremevaltheory_local_dim_persistence(X, extraction, X[7])
        logdist = log_distances_from_index(X, 7, ScratchBuffer.for_set(X))
        assert direct == pytest.approx(fit_tail(extraction, logdist))
        assert np.isfinite(direct[0]) and direct[0] > 0

    def test_outside_point(self):
        X = circle_points(400)
        dim, theta = extremevaltheory_local_dim_persistence(X, Exceedances(0.95, "exp"), np.array([1.0, 0.0]))
        assert dim > 0
        assert 0.0 < theta <= 1.0


class TestDeprecatedProbability:
    """A bare probability is still accepted with a warning."""

    def test_warns_and_matches_explicit(self):
        X = circle_points(300)
        with pytest.deprecated_call():
            old = extremevaltheory_local_dim_persistence(X, 0.95, X[0])
        new = extremevaltheory_local_dim_persistence(X, Exceedances(0.95, "exp"), X[0])
        assert old == new

    def test_estimator_keyword(self):
        X = circle_points(300)
        with pytest.deprecated_call():
            old = extremevaltheory_local_dim_persistence(X, 0.95, X[0], estimator="pwm")
        assert old == extremevaltheory_local_dim_persistence(X, Exceedances(0.95, "pwm"), X[0])

    def test_warning_points_at_caller(self):
        X = circle_points(300)
        with pytest.warns(DeprecationWarning) as record:
            extremevaltheory_local_dim_persistence(X, 0.95, X[0])
        deprecations = [w for w in record if issubclass(w.category, DeprecationWarning)]
        assert len(deprecations) == 1
        assert deprecations[0].filename == __file__

    @pytest.mark.parametrize("extraction", [Exceedances(0.95, "mm"), BlockMaxima(10, "mm")])
    def test_estimator_conflicts_with_extraction(self, extraction):
        X = circle_points(300)
        with pytest.raises(ConfigurationError):
            extremevaltheory_local_dim_persistence(X, extraction, X[0], estimator="mle")


class TestDispatch:
    """Tests for the fit_tail dispatch point."""

    def test_unknown_extraction_type(self):
        with pytest.raises(ConfigurationError):
            extremevaltheory_local_dim_persistence(np.arange(10.0), "exceedances")

    def test_base_case_raises(self):
        with pytest.raises(ConfigurationError):
            fit_tail(object(), np.arange(10.0))

    def test_registered_types(self):
        assert is_registered(Exceedances(0.9))
        assert is_registered(BlockMaxima(5))
        assert not is_registered(0.9)
