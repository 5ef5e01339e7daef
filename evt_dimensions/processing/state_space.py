"""Coercion of user input into a state space set (an ``(N, D)`` float array)."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from evt_dimensions.exceptions import ConfigurationError


def as_state_space_set(X: Any) -> np.ndarray:
    """Return ``X`` as a read-only, C-contiguous ``(N, D)`` float64 array.

    Args:
        X: Array-like of points. A ``pandas.DataFrame`` is read row-wise; a 1-D input is
            treated as N points of dimension 1.

    Returns:
        np.ndarray: The points, one per row. The caller's data is never modified.
    """
    if isinstance(X, pd.DataFrame):
        X = X.to_numpy(dtype=float)
    try:
        points = np.array(X, dtype=float, order="C", copy=True)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"State space set must be numeric and rectangular: {exc}") from exc
    if points.ndim == 1:
        points = points[:, None]
    if points.ndim != 2:
        raise ConfigurationError(f"State space set must be 2-dimensional (N, D), got shape {points.shape}.")
    if points.shape[0] < 2:
        raise ConfigurationError(f"State space set needs at least 2 points, got {points.shape[0]}.")
    if points.shape[1] < 1:
        raise ConfigurationError("State space points must have at least one coordinate.")
    if not np.all(np.isfinite(points)):
        raise ConfigurationError("State space set contains non-finite coordinates.")
    points.setflags(write=False)
    return points
