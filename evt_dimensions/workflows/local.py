"""Local dimension and persistence around a single reference point.

``fit_tail`` is the one dispatch point between the workflows and the tail estimators.
It is a ``functools.singledispatch`` function keyed on the extraction type; a new
strategy registers a handler with the same ``(extraction, logdist, compute_persistence)
-> (dim, theta)`` contract and becomes usable by the batch workflow unchanged.
"""

from __future__ import annotations

import functools
import logging
import numbers
import warnings
from typing import Any

import numpy as np

from evt_dimensions.analysis import (
    block_maxima,
    estimate_gev_parameters,
    estimate_gpd_parameters,
    extremal_index_sueveges,
    select_exceedances,
)
from evt_dimensions.exceptions import ConfigurationError
from evt_dimensions.extraction import BlockMaxima, Exceedances
from evt_dimensions.processing import as_state_space_set, log_distances_to

logger = logging.getLogger(__name__)


@functools.singledispatch
def fit_tail(extraction: Any, logdist: np.ndarray, compute_persistence: bool = True) -> tuple[float, float]:
    """Fit the tail of ``logdist`` as prescribed by ``extraction``; return ``(dim, theta)``."""
    raise ConfigurationError(f"No tail estimator registered for {type(extraction).__name__}.")


@fit_tail.register
def _(extraction: Exceedances, logdist: np.ndarray, compute_persistence: bool = True) -> tuple[float, float]:
    sample = select_exceedances(logdist, extraction.p)
    sigma, _ = estimate_gpd_parameters(sample.values, extraction.estimator)
    if compute_persistence:
        # Reuse the threshold instead of recomputing the quantile.
        theta = extremal_index_sueveges(logdist, extraction.p, sample.threshold)
    else:
        theta = np.nan
    return 1.0 / sigma, theta


@fit_tail.register
def _(extraction: BlockMaxima, logdist: np.ndarray, compute_persistence: bool = True) -> tuple[float, float]:
    maxima = block_maxima(logdist, extraction.blocksize)
    _, sigma, _ = estimate_gev_parameters(maxima, extraction.estimator)
    theta = extremal_index_sueveges(logdist, extraction.p) if compute_persistence else np.nan
    return 1.0 / sigma, theta


def is_registered(extraction: Any) -> bool:
    """Whether ``fit_tail`` has a handler for this extraction type."""
    return fit_tail.dispatch(type(extraction)) is not fit_tail.registry[object]


def resolve_extraction(extraction: Any, estimator: str | None = None, stacklevel: int = 3) -> Any:
    """Validate an extraction type, converting the deprecated bare probability.

    A real number ``p`` is still accepted and means ``Exceedances(p, estimator)`` with
    ``"exp"`` as the default estimator, but it emits a ``DeprecationWarning`` attributed to
    the caller ``stacklevel`` frames up. ``estimator`` only applies to that form; passing
    it together with an extraction type is an error.
    """
    if isinstance(extraction, numbers.Real) and not isinstance(extraction, bool):
        warnings.warn(
            "Passing a bare probability is deprecated. "
            "Explicitly create `Exceedances(p, estimator)` instead.",
            DeprecationWarning,
            stacklevel=stacklevel,
        )
        return Exceedances(float(extraction), estimator or "exp")
    if not is_registered(extraction):
        raise ConfigurationError(
            f"Expected an extraction type such as Exceedances or BlockMaxima, got {extraction!r}."
        )
    if estimator is not None:
        raise ConfigurationError(
            f"`estimator={estimator!r}` only applies to a bare probability; set it on {extraction!r} instead."
        )
    return extraction


def extremevaltheory_local_dim_persistence(
    source: Any,
    extraction: Any,
    zeta: np.ndarray | None = None,
    *,
    compute_persistence: bool = True,
    estimator: str | None = None,
) -> tuple[float, float]:
    """Local dimension ``dim`` and persistence ``theta`` around one point.

    Args:
        source: Either a state space set (then ``zeta`` is required) or a precomputed
            1-D log-distance vector (then ``zeta`` must be omitted).
        extraction: ``Exceedances`` or ``BlockMaxima``. A bare probability is deprecated.
        zeta: Reference point. Points of ``source`` equal to it are skipped.
        compute_persistence: If False, ``theta`` is NaN.
        estimator: Only used by the deprecated bare-probability form (default ``"exp"``).

    Returns:
        tuple[float, float]: ``(dim, theta)``.
    """
    extraction = resolve_extraction(extraction, estimator)
    if zeta is None:
        logdist = np.asarray(source, dtype=float)
        if logdist.ndim != 1:
            raise ConfigurationError(
                "A reference point `zeta` is required when passing a state space set."
            )
    else:
        logdist = log_distances_to(as_state_space_set(source), zeta)
    return fit_tail(extraction, logdist, compute_persistence=compute_persistence)
