"""Quantile threshold and exceedance selection (peaks over threshold)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from evt_dimensions.exceptions import EstimationError

logger = logging.getLogger(__name__)

# Below this many exceedances the GPD scale is poorly identified.
SMALL_SAMPLE_WARNING = 10


@dataclass
class ExceedanceSample:
    """Exceedances of an observable above its p-quantile.

    ``values`` holds ``g_i - threshold`` for every ``g_i >= threshold`` (ties at the
    threshold are kept as zeros). ``mask`` flags those positions in the original order.
    """

    threshold: float
    values: np.ndarray
    mask: np.ndarray

    @property
    def size(self) -> int:
        return int(self.values.size)


def quantile_threshold(observable: np.ndarray, p: float) -> float:
    """Linear-interpolation p-quantile of the observable."""
    return float(np.quantile(observable, p))


def select_exceedances(observable: np.ndarray, p: float, threshold: float | None = None) -> ExceedanceSample:
    """Shift the values at or above the p-quantile so they start at zero."""
    g = np.asarray(observable, dtype=float)
    if g.size == 0:
        raise EstimationError("Cannot select exceedances from an empty observable.")
    thresh = quantile_threshold(g, p) if threshold is None else float(threshold)
    mask = g >= thresh
    values = g[mask] - thresh
    if values.size < SMALL_SAMPLE_WARNING:
        logger.debug("Only %d exceedances above the %.4g quantile.", values.size, p)
    return ExceedanceSample(threshold=thresh, values=values, mask=mask)


def warn_small_sample(n_values: int, p: float) -> bool:
    """Log once if an observable of ``n_values`` values is expected to give too few exceedances."""
    expected = n_values * (1.0 - p)
    if expected < SMALL_SAMPLE_WARNING:
        logger.warning(
            "About %.1f exceedances expected per point above the %.4g quantile of %d values; "
            "the tail fits will be noisy.",
            expected,
            p,
            n_values,
        )
        return True
    return False
