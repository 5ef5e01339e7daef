"""Extremal index through the Süveges (2007) closed-form estimator.

The estimator only looks at the positions of the exceedances, so it is shared by
every tail-fitting strategy.
"""

from __future__ import annotations

import math

import numpy as np

from evt_dimensions.exceptions import ConfigurationError, EstimationError


def extremal_index_sueveges(y: np.ndarray, p: float, threshold: float | None = None) -> float:
    """Compute the extremal index ``theta`` of ``y`` for quantile probability ``p``.

    ``threshold`` may be passed when the p-quantile of ``y`` is already known; it is
    recomputed otherwise. Exceedances are the positions with ``y > threshold``.

    Returns ``theta`` in (0, 1]. When no exceedance is followed by a gap (zero total
    slack) the result is exactly 1.
    """
    if not 0.0 < p < 1.0:
        raise ConfigurationError(f"p must lie in the open interval (0, 1), got {p!r}")
    y = np.asarray(y, dtype=float).ravel()
    thresh = float(np.quantile(y, p)) if threshold is None else float(threshold)
    q = 1.0 - p

    positions = np.flatnonzero(y > thresh)
    if positions.size < 2:
        raise EstimationError(
            f"Need at least 2 exceedances for the extremal index, got {positions.size}."
        )
    slack = np.diff(positions) - 1
    n_obs = slack.size
    n_clusters = int(np.count_nonzero(slack > 0))
    qs = q * float(slack.sum())
    if qs == 0:
        return 1.0

    b = qs + n_obs + n_clusters
    theta = (b - math.sqrt(b**2 - 8.0 * n_clusters * qs)) / (2.0 * qs)
    return min(theta, 1.0)
