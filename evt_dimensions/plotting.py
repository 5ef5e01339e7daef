"""Plotting utilities for local dimension and persistence estimates."""

from typing import Any

import matplotlib.pyplot as plt
import numpy as np

from evt_dimensions.processing import as_state_space_set


def plot_local_dimensions(
    X: Any,
    dims: np.ndarray,
    figsize: tuple[int, int] = (8, 7),
    cmap: str = "viridis",
    title: str | None = None,
) -> plt.Figure:
    """Scatter the first two coordinates of the set coloured by local dimension.

    Args:
        X: State space set of shape (N, D), D >= 2.
        dims: Local dimensions, one per point.
        figsize: Figure size as (width, height).
        cmap: Colormap to use.
        title: Plot title. If None, shows the mean dimension.

    Returns:
        plt.Figure: The matplotlib figure object.
    """
    points = as_state_space_set(X)
    dims = np.asarray(dims, dtype=float)
    if points.shape[1] < 2:
        raise ValueError("Need at least two coordinates to draw the state space.")
    if dims.shape[0] != points.shape[0]:
        raise ValueError(f"Got {dims.shape[0]} dimensions for {points.shape[0]} points.")

    fig, ax = plt.subplots(figsize=figsize)
    sc = ax.scatter(points[:, 0], points[:, 1], c=dims, cmap=cmap, s=6)
    fig.colorbar(sc, ax=ax, label="local dimension")
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    ax.set_title(title or f"Local dimensions (mean {np.mean(dims):.3f})")

    plt.tight_layout()
    return fig


def plot_dimension_histogram(
    dims: np.ndarray,
    bins: int = 40,
    figsize: tuple[int, int] = (8, 5),
) -> plt.Figure:
    """Histogram of local dimensions with the mean marked."""
    dims = np.asarray(dims, dtype=float)
    fig, ax = plt.subplots(figsize=figsize)
    ax.hist(dims, bins=bins, density=True, color="steelblue", alpha=0.8)
    ax.axvline(np.mean(dims), color="black", linestyle="--", label=f"mean = {np.mean(dims):.3f}")
    ax.set_xlabel("local dimension")
    ax.set_ylabel("density")
    ax.legend()

    plt.tight_layout()
    return fig


def plot_dimension_persistence(
    dims: np.ndarray,
    thetas: np.ndarray,
    figsize: tuple[int, int] = (7, 6),
) -> plt.Figure:
    """Scatter local dimension against persistence.

    Points with NaN persistence (persistence not computed) are dropped.
    """
    dims = np.asarray(dims, dtype=float)
    thetas = np.asarray(thetas, dtype=float)
    keep = np.isfinite(thetas)
    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(dims[keep], thetas[keep], s=6, alpha=0.6)
    ax.set_xlabel("local dimension")
    ax.set_ylabel("extremal index")
    ax.set_ylim(0.0, 1.05)

    plt.tight_layout()
    return fig
