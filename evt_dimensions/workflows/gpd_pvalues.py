"""Per-point confidence in the GPD fits behind the exceedance dimensions.

Repeats the exceedance fit of every point and checks how well the fitted GPD describes
the exceedances. Low p-values flag points whose local dimension should not be trusted.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import numpy as np
import pandas as pd

from evt_dimensions.analysis import estimate_gpd_parameters, select_exceedances, warn_small_sample
from evt_dimensions.analysis.goodness_of_fit import gpd_fit_nrmse, gpd_fit_pvalue
from evt_dimensions.config import default_show_progress, load_defaults
from evt_dimensions.exceptions import ConfigurationError
from evt_dimensions.extraction import Exceedances
from evt_dimensions.processing import ScratchBuffer, as_state_space_set, log_distances_from_index
from evt_dimensions.workflows.batch import ProgressSink, resolve_workers, run_chunked

logger = logging.getLogger(__name__)


def extremevaltheory_gpdfit_pvalues(
    X: Any,
    p: Any,
    *,
    estimator: str | None = None,
    cramer_vonmises: bool = True,
    nbins: int | None = None,
    max_workers: int | None = None,
    show_progress: bool | None = None,
) -> pd.DataFrame:
    """Fit a GPD to the exceedances of every point and test the fit.

    Args:
        X: State space set of shape ``(N, D)``.
        p: Quantile probability, or an ``Exceedances`` carrying its own estimator.
        estimator: GPD estimator name for a bare ``p`` (default ``"mm"``). Passing it
            with an ``Exceedances`` raises ``ConfigurationError``.
        cramer_vonmises: Use the Cramér-von Mises test; Kolmogorov-Smirnov if False.
        nbins: Histogram bins for the NRMSE (default ``sqrt(n)``, at least 3).
        max_workers: Worker pool size.
        show_progress: Draw a progress bar.

    Returns:
        pd.DataFrame: One row per point with columns ``pvalue``, ``sigma``, ``xi``, ``nrmse``.
    """
    if isinstance(p, Exceedances):
        if estimator is not None:
            raise ConfigurationError(f"`estimator={estimator!r}` conflicts with {p!r}; set it on the extraction.")
        extraction = p
    else:
        extraction = Exceedances(p, estimator or "mm")
    points = as_state_space_set(X)
    n_points = points.shape[0]
    config = load_defaults()
    if show_progress is None:
        show_progress = default_show_progress(config)
    workers = resolve_workers(max_workers, n_points, config)
    warn_small_sample(n_points - 1, extraction.p)

    pvalues = np.zeros(n_points)
    sigmas = np.zeros(n_points)
    xis = np.zeros(n_points)
    nrmses = np.zeros(n_points)
    logger.info("Testing GPD fits of %d points with %r.", n_points, extraction)
    sink = ProgressSink(n_points, show_progress=show_progress, desc="GPD fit p-values")

    def _process(indices: np.ndarray, abort: threading.Event) -> None:
        scratch = ScratchBuffer.for_set(points)
        for j in indices:
            if abort.is_set():
                return
            logdist = log_distances_from_index(points, j, scratch)
            sample = select_exceedances(logdist, extraction.p)
            sigma, xi = estimate_gpd_parameters(sample.values, extraction.estimator)
            sigmas[j], xis[j] = sigma, xi
            pvalues[j] = gpd_fit_pvalue(sample.values, sigma, xi, cramer_vonmises)
            nrmses[j] = gpd_fit_nrmse(sample.values, sigma, xi, nbins)
            sink.advance()

    try:
        run_chunked(n_points, workers, _process)
    finally:
        sink.close()

    return pd.DataFrame(
        {"pvalue": pvalues, "sigma": sigmas, "xi": xis, "nrmse": nrmses},
        index=pd.RangeIndex(n_points, name="point"),
    )
