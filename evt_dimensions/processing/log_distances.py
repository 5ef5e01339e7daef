"""Log-distance observable ``g_i = -log(||x_i - zeta||)``.

The batch workflow computes one such vector per point of the set. Each worker owns a
``ScratchBuffer`` so the hot loop does not allocate per point; single-threaded callers
can create one buffer and reuse it the same way.
"""

from __future__ import annotations

import numpy as np

from evt_dimensions.exceptions import ConfigurationError


class ScratchBuffer:
    """Per-worker storage for the squared distances of one reference point.

    The vector returned by ``log_distances_from_index`` is a view into this buffer and is
    only valid until the next call on the same buffer.
    """

    def __init__(self, n_points: int, dimension: int):
        self.n_points = n_points
        self.dimension = dimension
        self.diff = np.empty((n_points, dimension), dtype=float)
        self.dist = np.empty(n_points, dtype=float)

    @classmethod
    def for_set(cls, X: np.ndarray) -> "ScratchBuffer":
        return cls(X.shape[0], X.shape[1])


def _neg_log_from_squared(squared: np.ndarray) -> np.ndarray:
    # Coincident points have no scale information; -log(0) would be +inf.
    if not np.all(squared > 0):
        squared = squared[squared > 0]
    np.log(squared, out=squared)
    squared *= -0.5
    return squared


def log_distances_from_index(X: np.ndarray, j: int, scratch: ScratchBuffer) -> np.ndarray:
    """Log-distances from point ``j`` to every other point of ``X``, in point order.

    Point ``j`` itself and any exact duplicate of it are left out.
    """
    if scratch.dist.shape[0] != X.shape[0] or scratch.diff.shape != X.shape:
        raise ValueError(
            f"Scratch buffer sized for {scratch.diff.shape} cannot hold a set of shape {X.shape}."
        )
    diff, dist = scratch.diff, scratch.dist
    np.subtract(X, X[j], out=diff)
    np.multiply(diff, diff, out=diff)
    np.sum(diff, axis=1, out=dist)
    # Shift the tail left over the self-distance to keep the remaining order.
    dist[j:-1] = dist[j + 1 :]
    return _neg_log_from_squared(dist[:-1])


def log_distances_to(X: np.ndarray, zeta: np.ndarray) -> np.ndarray:
    """Log-distances from an arbitrary point ``zeta`` to every point of ``X``.

    Points coinciding with ``zeta`` are left out, so ``zeta`` may be a member of ``X``.
    """
    zeta = np.asarray(zeta, dtype=float).ravel()
    if zeta.shape[0] != X.shape[1]:
        raise ConfigurationError(f"Point has dimension {zeta.shape[0]} but the set has dimension {X.shape[1]}.")
    squared = np.sum((X - zeta) ** 2, axis=1)
    return _neg_log_from_squared(squared)
