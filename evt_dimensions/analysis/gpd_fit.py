"""Generalised Pareto Distribution (GPD) fitting for exceedances.

The location is fixed at zero because exceedances are shifted by the threshold.
Shape follows the usual EVT sign convention (``xi > 0`` heavy tail), which for
``scipy.stats.genpareto`` coincides with SciPy's ``c``.
"""

from __future__ import annotations

import logging

import numpy as np
from scipy import stats

from evt_dimensions.exceptions import ConfigurationError, EstimationError

logger = logging.getLogger(__name__)

GPD_ESTIMATORS = ("exp", "mm", "pwm", "mle")


def _check_sample(sample: np.ndarray) -> np.ndarray:
    sample = np.asarray(sample, dtype=float).ravel()
    if sample.size < 2:
        raise EstimationError(f"Need at least 2 exceedances to fit a GPD, got {sample.size}.")
    if not np.all(np.isfinite(sample)):
        raise EstimationError("Exceedance sample contains non-finite values.")
    if np.ptp(sample) == 0:
        raise EstimationError("Exceedance sample has zero variance; the GPD scale is not identified.")
    return sample


def _fit_exp(sample: np.ndarray) -> tuple[float, float]:
    # Exponential tail: xi fixed at 0, scale is the mean excess.
    return float(sample.mean()), 0.0


def _fit_mm(sample: np.ndarray) -> tuple[float, float]:
    mean = sample.mean()
    ratio = mean**2 / sample.var(ddof=1)
    xi = 0.5 * (1.0 - ratio)
    sigma = mean * (1.0 - xi)
    return float(sigma), float(xi)


def _fit_pwm(sample: np.ndarray) -> tuple[float, float]:
    """Hosking & Wallis (1987) probability weighted moments."""
    ordered = np.sort(sample)
    n = ordered.size
    plotting = (np.arange(1, n + 1) - 0.35) / n
    a0 = ordered.mean()
    a1 = np.mean(ordered * (1.0 - plotting))
    denom = a0 - 2.0 * a1
    if denom == 0:
        raise EstimationError("Probability weighted moments are degenerate (a0 == 2*a1).")
    xi = 2.0 - a0 / denom
    sigma = 2.0 * a0 * a1 / denom
    return float(sigma), float(xi)


def _fit_mle(sample: np.ndarray) -> tuple[float, float]:
    c, _, scale = stats.genpareto.fit(sample, floc=0.0)
    return float(scale), float(c)


_FITTERS = {
    "exp": _fit_exp,
    "mm": _fit_mm,
    "pwm": _fit_pwm,
    "mle": _fit_mle,
}


def estimate_gpd_parameters(exceedances: np.ndarray, estimator: str = "mm") -> tuple[float, float]:
    """Fit a two-parameter GPD to non-negative exceedances.

    Returns ``(sigma, xi)``. Raises ``EstimationError`` when the sample cannot identify
    a positive, finite scale.
    """
    try:
        fitter = _FITTERS[estimator]
    except KeyError:
        raise ConfigurationError(
            f"Unknown GPD estimator {estimator!r}; choose one of {', '.join(GPD_ESTIMATORS)}."
        ) from None
    sample = _check_sample(exceedances)
    sigma, xi = fitter(sample)
    if not np.isfinite(sigma) or sigma <= 0:
        raise EstimationError(f"GPD fit ({estimator}) produced an invalid scale {sigma!r}.")
    logger.debug("GPD %s fit on %d exceedances: sigma=%.4g xi=%.4g", estimator, sample.size, sigma, xi)
    return sigma, xi


def gpd_pdf(x: np.ndarray, sigma: float, xi: float) -> np.ndarray:
    """Density of the zero-location GPD."""
    return stats.genpareto.pdf(x, xi, loc=0.0, scale=sigma)


def gpd_cdf(x: np.ndarray, sigma: float, xi: float) -> np.ndarray:
    """Distribution function of the zero-location GPD."""
    return stats.genpareto.cdf(x, xi, loc=0.0, scale=sigma)
