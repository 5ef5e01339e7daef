"""Goodness of fit of a GPD to exceedances: test p-values and histogram NRMSE."""

from __future__ import annotations

import numpy as np
from scipy import stats

from evt_dimensions.analysis.gpd_fit import gpd_cdf, gpd_pdf


def gpd_fit_pvalue(exceedances: np.ndarray, sigma: float, xi: float, cramer_vonmises: bool = True) -> float:
    """p-value of a one-sample test of the exceedances against the fitted GPD.

    Uses the Cramér-von Mises statistic by default, the Kolmogorov-Smirnov one otherwise.
    Small p-values mean the GPD is a poor description of the tail.
    """
    sample = np.asarray(exceedances, dtype=float)
    if cramer_vonmises:
        result = stats.cramervonmises(sample, gpd_cdf, args=(sigma, xi))
    else:
        result = stats.kstest(sample, gpd_cdf, args=(sigma, xi))
    return float(np.clip(result.pvalue, 0.0, 1.0))


def gpd_fit_nrmse(exceedances: np.ndarray, sigma: float, xi: float, nbins: int | None = None) -> float:
    """Root mean square error between the histogram density and the fitted pdf.

    The error is normalised by the mean histogram density so values are comparable
    between points with different scales.
    """
    sample = np.asarray(exceedances, dtype=float)
    bins = nbins or max(3, int(round(np.sqrt(sample.size))))
    density, edges = np.histogram(sample, bins=bins, density=True)
    centres = 0.5 * (edges[:-1] + edges[1:])
    model = gpd_pdf(centres, sigma, xi)
    rmse = np.sqrt(np.mean((density - model) ** 2))
    return float(rmse / np.mean(density))
