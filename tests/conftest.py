import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


def circle_points(n: int, seed: int = 1234) -> np.ndarray:
    rng = np.random.default_rng(seed)
    angles = rng.uniform(0, 2 * np.pi, n)
    return np.column_stack([np.cos(angles), np.sin(angles)])


def square_points(n: int, seed: int = 1234) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.uniform(size=(n, 2))


@pytest.fixture
def circle_300():
    return circle_points(300)


@pytest.fixture
def square_300():
    return square_points(300)


@pytest.fixture(autouse=True)
def _clear_runtime_env(monkeypatch):
    """Keep user environment overrides out of the tests."""
    monkeypatch.delenv("EVT_DIMENSIONS_SHOW_PROGRESS", raising=False)
    monkeypatch.delenv("EVT_DIMENSIONS_MAX_WORKERS", raising=False)
