"""
Smoke tests for the plotting helpers.
"""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from evt_dimensions.plotting import (
    plot_dimension_histogram,
    plot_dimension_persistence,
    plot_local_dimensions,
)

from conftest import circle_points


@pytest.fixture
def estimates():
    rng = np.random.default_rng(3)
    return rng.normal(1.0, 0.1, size=100), rng.uniform(0.5, 1.0, size=100)


def test_local_dimensions_figure(estimates):
    dims, _ = estimates
    fig = plot_local_dimensions(circle_points(100), dims, title="circle")
    assert isinstance(fig, plt.Figure)
    assert fig.axes[0].get_title() == "circle"
    plt.close(fig)


def test_local_dimensions_default_title(estimates):
    dims, _ = estimates
    fig = plot_local_dimensions(circle_points(100), dims)
    assert fig.axes[0].get_title().startswith("Local dimensions (mean")
    plt.close(fig)


def test_local_dimensions_needs_two_coordinates(estimates):
    dims, _ = estimates
    with pytest.raises(ValueError):
        plot_local_dimensions(np.linspace(0, 1, 100), dims)


def test_local_dimensions_length_mismatch(estimates):
    dims, _ = estimates
    with pytest.raises(ValueError):
        plot_local_dimensions(circle_points(100), dims[:50])


def test_histogram(estimates):
    dims, _ = estimates
    fig = plot_dimension_histogram(dims, bins=20)
    assert isinstance(fig, plt.Figure)
    plt.close(fig)


def test_persistence_drops_nan(estimates):
    dims, thetas = estimates
    thetas = thetas.copy()
    thetas[:10] = np.nan
    fig = plot_dimension_persistence(dims, thetas)
    offsets = fig.axes[0].collections[0].get_offsets()
    assert len(offsets) == 90
    plt.close(fig)
