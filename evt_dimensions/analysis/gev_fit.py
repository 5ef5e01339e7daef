"""Generalised Extreme Value (GEV) fitting for block maxima.

SciPy uses the reverse sign convention for the shape parameter (``c = -xi``). The
public helpers here return ``xi`` in the EVT convention so that ``xi > 0`` always means a
heavy tail, and convert when talking to ``scipy.stats.genextreme``.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from scipy import special, stats

from evt_dimensions.exceptions import ConfigurationError, EstimationError

logger = logging.getLogger(__name__)

GEV_ESTIMATORS = ("mm", "pwm", "mle")

# Below this |k| the Hosking approximation is replaced by its Gumbel limit.
_GUMBEL_TOL = 1e-6


def block_maxima(observable: np.ndarray, blocksize: int) -> np.ndarray:
    """Maxima of contiguous blocks of ``blocksize`` values.

    Only complete blocks are used; the leading remainder is dropped so the most
    recent observations always fill the blocks.
    """
    g = np.asarray(observable, dtype=float).ravel()
    nblocks = g.size // blocksize
    if nblocks < 2:
        raise EstimationError(
            f"Need at least 2 complete blocks of size {blocksize}, got {nblocks} from {g.size} values."
        )
    used = g[g.size - nblocks * blocksize :]
    return used.reshape(nblocks, blocksize).max(axis=1)


def _check_sample(sample: np.ndarray) -> np.ndarray:
    sample = np.asarray(sample, dtype=float).ravel()
    if sample.size < 2:
        raise EstimationError(f"Need at least 2 block maxima to fit a GEV, got {sample.size}.")
    if not np.all(np.isfinite(sample)):
        raise EstimationError("Block maxima contain non-finite values.")
    if np.ptp(sample) == 0:
        raise EstimationError("Block maxima have zero variance; the GEV scale is not identified.")
    return sample


def _fit_mm(sample: np.ndarray) -> tuple[float, float, float]:
    # Gumbel method of moments: var = (pi * sigma)^2 / 6.
    sigma = math.sqrt(6.0 * sample.var(ddof=1)) / math.pi
    mu = sample.mean() - np.euler_gamma * sigma
    return float(mu), float(sigma), 0.0


def _sample_l_moments(sample: np.ndarray) -> tuple[float, float, float]:
    """First three sample L-moments (l1, l2, l3) from unbiased PWMs."""
    x = np.sort(sample)
    n = x.size
    j = np.arange(n)
    b0 = x.mean()
    b1 = np.sum(j * x) / (n * (n - 1))
    b2 = np.sum(j * (j - 1) * x) / (n * (n - 1) * (n - 2)) if n > 2 else 0.0
    return b0, 2.0 * b1 - b0, 6.0 * b2 - 6.0 * b1 + b0


def _fit_pwm(sample: np.ndarray) -> tuple[float, float, float]:
    """Hosking, Wallis & Wood (1985) L-moment estimator."""
    if sample.size < 3:
        raise EstimationError("Need at least 3 block maxima for the L-moment GEV fit.")
    l1, l2, l3 = _sample_l_moments(sample)
    t3 = l3 / l2
    z = 2.0 / (3.0 + t3) - math.log(2.0) / math.log(3.0)
    k = 7.8590 * z + 2.9554 * z**2
    if abs(k) < _GUMBEL_TOL:
        sigma = l2 / math.log(2.0)
        mu = l1 - np.euler_gamma * sigma
        return float(mu), float(sigma), 0.0
    gamma_k = special.gamma(1.0 + k)
    sigma = l2 * k / ((1.0 - 2.0 ** (-k)) * gamma_k)
    mu = l1 - sigma * (1.0 - gamma_k) / k
    return float(mu), float(sigma), float(-k)


def _fit_mle(sample: np.ndarray) -> tuple[float, float, float]:
    c, loc, scale = stats.genextreme.fit(sample)
    return float(loc), float(scale), float(-c)


_FITTERS = {
    "mm": _fit_mm,
    "pwm": _fit_pwm,
    "mle": _fit_mle,
}


def estimate_gev_parameters(maxima: np.ndarray, estimator: str = "mm") -> tuple[float, float, float]:
    """Fit a GEV distribution to block maxima.

    Returns ``(mu, sigma, xi)`` with ``xi`` in the EVT sign convention.
    """
    try:
        fitter = _FITTERS[estimator]
    except KeyError:
        raise ConfigurationError(
            f"Unknown GEV estimator {estimator!r}; choose one of {', '.join(GEV_ESTIMATORS)}."
        ) from None
    sample = _check_sample(maxima)
    mu, sigma, xi = fitter(sample)
    if not np.isfinite(sigma) or sigma <= 0:
        raise EstimationError(f"GEV fit ({estimator}) produced an invalid scale {sigma!r}.")
    logger.debug("GEV %s fit on %d maxima: mu=%.4g sigma=%.4g xi=%.4g", estimator, sample.size, mu, sigma, xi)
    return mu, sigma, xi
