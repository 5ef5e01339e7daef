"""High-level workflows: per-point and whole-set dimension estimates."""

from evt_dimensions.workflows.batch import (
    extremevaltheory_dim,
    extremevaltheory_dims,
    extremevaltheory_dims_persistences,
)
from evt_dimensions.workflows.gpd_pvalues import extremevaltheory_gpdfit_pvalues
from evt_dimensions.workflows.local import extremevaltheory_local_dim_persistence, fit_tail

__all__ = [
    "extremevaltheory_dim",
    "extremevaltheory_dims",
    "extremevaltheory_dims_persistences",
    "extremevaltheory_gpdfit_pvalues",
    "extremevaltheory_local_dim_persistence",
    "fit_tail",
]
