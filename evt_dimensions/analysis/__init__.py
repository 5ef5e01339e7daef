"""Statistical routines: exceedance selection, GPD/GEV fitting, extremal index, fit diagnostics."""

from evt_dimensions.analysis.exceedances import (
    ExceedanceSample,
    quantile_threshold,
    select_exceedances,
    warn_small_sample,
)
from evt_dimensions.analysis.extremal_index import extremal_index_sueveges
from evt_dimensions.analysis.gev_fit import block_maxima, estimate_gev_parameters
from evt_dimensions.analysis.gpd_fit import estimate_gpd_parameters

__all__ = [
    "ExceedanceSample",
    "quantile_threshold",
    "select_exceedances",
    "warn_small_sample",
    "extremal_index_sueveges",
    "block_maxima",
    "estimate_gev_parameters",
    "estimate_gpd_parameters",
]
