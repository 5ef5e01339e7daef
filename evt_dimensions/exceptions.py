"""Error types raised by the estimators."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid extraction type, estimator name, probability, or input set.

    Raised before any per-point work starts.
    """


class EstimationError(ValueError):
    """A sample is too small or too degenerate to identify tail parameters."""
