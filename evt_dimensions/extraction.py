"""Extraction types selecting how the tail of the log-distance observable is fitted.

``Exceedances`` fits a Generalized Pareto Distribution to the values above a high
quantile (peaks over threshold). ``BlockMaxima`` fits a Generalized Extreme Value
distribution to the maxima of contiguous blocks. Both are immutable and validated on
construction, so configuration mistakes surface before any point is processed.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from pathlib import Path

from evt_dimensions.analysis.gev_fit import GEV_ESTIMATORS
from evt_dimensions.analysis.gpd_fit import GPD_ESTIMATORS
from evt_dimensions.config import load_defaults
from evt_dimensions.exceptions import ConfigurationError


def validate_probability(p: float, name: str = "p") -> float:
    """Return ``p`` as a float, requiring it to lie strictly inside (0, 1)."""
    if isinstance(p, bool):
        raise ConfigurationError(f"{name} must be a real number, got {p!r}")
    try:
        value = float(p)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a real number, got {p!r}") from None
    if math.isnan(value) or not 0.0 < value < 1.0:
        raise ConfigurationError(f"{name} must lie in the open interval (0, 1), got {p!r}")
    return value


def _validate_estimator(estimator: str, allowed: tuple[str, ...], family: str) -> str:
    if estimator not in allowed:
        raise ConfigurationError(
            f"Unknown {family} estimator {estimator!r}; choose one of {', '.join(allowed)}."
        )
    return estimator


@dataclass(frozen=True)
class Exceedances:
    """Peaks-over-threshold extraction fitted with a GPD.

    Args:
        p: Quantile probability of the threshold, e.g. 0.99.
        estimator: ``"exp"``, ``"mm"``, ``"pwm"`` or ``"mle"``.
    """

    p: float
    estimator: str = "mm"

    def __post_init__(self):
        object.__setattr__(self, "p", validate_probability(self.p))
        _validate_estimator(self.estimator, GPD_ESTIMATORS, "GPD")

    @classmethod
    def from_config(cls, config_path: Path | None = None) -> "Exceedances":
        section = load_defaults(config_path)["exceedances"]
        return cls(p=section["p"], estimator=section["estimator"])


@dataclass(frozen=True)
class BlockMaxima:
    """Block-maxima extraction fitted with a GEV.

    Args:
        blocksize: Number of consecutive observables per block.
        estimator: ``"mm"``, ``"pwm"`` or ``"mle"``.
        p: Quantile probability used only for the extremal index.
    """

    blocksize: int
    estimator: str = "mm"
    p: float = 0.99

    def __post_init__(self):
        integral = isinstance(self.blocksize, numbers.Integral) or (
            isinstance(self.blocksize, float) and self.blocksize.is_integer()
        )
        if isinstance(self.blocksize, bool) or not integral:
            raise ConfigurationError(f"blocksize must be an integer, got {self.blocksize!r}")
        object.__setattr__(self, "blocksize", int(self.blocksize))
        if self.blocksize < 1:
            raise ConfigurationError(f"blocksize must be >= 1, got {self.blocksize}")
        _validate_estimator(self.estimator, GEV_ESTIMATORS, "GEV")
        object.__setattr__(self, "p", validate_probability(self.p))

    @classmethod
    def from_config(cls, config_path: Path | None = None) -> "BlockMaxima":
        section = load_defaults(config_path)["block_maxima"]
        return cls(
            blocksize=section["blocksize"],
            estimator=section["estimator"],
            p=section["p"],
        )
