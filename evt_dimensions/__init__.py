"""Local fractal dimensions and persistences of state space sets via extreme value theory.

For every point of a set, the negative log-distances to all other points are treated as
an observable whose upper tail follows an extreme value law. Fitting that tail gives:

- the local dimension, the inverse scale of a GPD fit to quantile exceedances or of a
  GEV fit to block maxima
- the local persistence, the Süveges extremal index of the exceedances
- per-point goodness-of-fit p-values of the GPD fits
"""

from evt_dimensions.analysis import estimate_gev_parameters, estimate_gpd_parameters, extremal_index_sueveges
from evt_dimensions.config import load_defaults
from evt_dimensions.exceptions import ConfigurationError, EstimationError
from evt_dimensions.extraction import BlockMaxima, Exceedances
from evt_dimensions.workflows import (
    extremevaltheory_dim,
    extremevaltheory_dims,
    extremevaltheory_dims_persistences,
    extremevaltheory_gpdfit_pvalues,
    extremevaltheory_local_dim_persistence,
)

__all__ = [
    "BlockMaxima",
    "ConfigurationError",
    "EstimationError",
    "Exceedances",
    "estimate_gev_parameters",
    "estimate_gpd_parameters",
    "extremal_index_sueveges",
    "extremevaltheory_dim",
    "extremevaltheory_dims",
    "extremevaltheory_dims_persistences",
    "extremevaltheory_gpdfit_pvalues",
    "extremevaltheory_local_dim_persistence",
    "load_defaults",
]
