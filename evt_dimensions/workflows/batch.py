"""Local dimensions and persistences for every point of a state space set.

For each point ``x_j`` the log-distances ``g_i = -log(||x_i - x_j||)`` to all other
points are computed, an extreme quantile (or block maxima) of ``g`` is selected, and
the fitted tail gives ``dim_j = 1/sigma``. Optionally the Süveges extremal index gives
the persistence ``theta_j``.

The points are split into one contiguous chunk per worker of a thread pool. Each worker
owns a ``ScratchBuffer`` for its whole chunk and writes only the result slots of its
own indices. NumPy releases the GIL inside the distance kernels, so the threads run in
parallel on the heavy part of the loop.
"""

from __future__ import annotations

import concurrent.futures as cf
import logging
import threading
import time
from typing import Any, Callable

import numpy as np
from tqdm.auto import tqdm

from evt_dimensions.analysis import warn_small_sample
from evt_dimensions.config import default_max_workers, default_show_progress, load_defaults
from evt_dimensions.exceptions import ConfigurationError
from evt_dimensions.extraction import Exceedances
from evt_dimensions.processing import ScratchBuffer, as_state_space_set, log_distances_from_index
from evt_dimensions.workflows.local import fit_tail, resolve_extraction

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ProgressSink:
    """Thread-safe progress reporting: an optional tqdm bar plus an optional callback.

    The callback receives ``(completed, total)`` after every finished point.
    """

    def __init__(
        self,
        total: int,
        show_progress: bool = False,
        callback: ProgressCallback | None = None,
        desc: str = "Extreme value theory dim",
    ):
        self.total = total
        self.completed = 0
        self._callback = callback
        self._lock = threading.Lock()
        self._bar = tqdm(total=total, desc=desc, disable=not show_progress)

    def advance(self) -> None:
        with self._lock:
            self.completed += 1
            self._bar.update(1)
            if self._callback is not None:
                self._callback(self.completed, self.total)

    def close(self) -> None:
        self._bar.close()


def resolve_workers(max_workers: int | None, n_points: int, config: dict | None = None) -> int:
    """Number of workers to use: explicit value, else config/env, capped at ``n_points``."""
    if max_workers is None:
        workers = default_max_workers(config)
    else:
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise ConfigurationError(f"max_workers must be a positive integer, got {max_workers!r}")
        workers = max_workers
    return max(1, min(workers, n_points))


def run_chunked(
    n_points: int,
    workers: int,
    process_chunk: Callable[[np.ndarray, threading.Event], None],
) -> None:
    """Run ``process_chunk(indices, abort)`` on one contiguous chunk per worker.

    The first exception raised by any chunk sets ``abort`` (so the other workers stop at
    their next point) and is re-raised here once the pool has shut down.
    """
    chunks = [c for c in np.array_split(np.arange(n_points), workers) if c.size]
    abort = threading.Event()

    def _guarded(indices: np.ndarray) -> None:
        logger.debug("Worker %s handles points %d..%d", threading.current_thread().name, indices[0], indices[-1])
        try:
            process_chunk(indices, abort)
        except Exception:
            abort.set()
            raise

    if len(chunks) == 1:
        _guarded(chunks[0])
        return
    with cf.ThreadPoolExecutor(max_workers=len(chunks), thread_name_prefix="evt-dim") as pool:
        futures = [pool.submit(_guarded, chunk) for chunk in chunks]
        done, _ = cf.wait(futures, return_when=cf.FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                raise future.exception()


def extremevaltheory_dims_persistences(
    X: Any,
    extraction: Any,
    *,
    show_progress: bool | None = None,
    compute_persistence: bool = True,
    max_workers: int | None = None,
    progress: ProgressCallback | None = None,
    estimator: str | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Return the local dimensions ``dims`` and persistences ``thetas`` of every point.

    Args:
        X: State space set, an array-like of shape ``(N, D)``.
        extraction: ``Exceedances`` or ``BlockMaxima``. A bare probability ``p`` still
            works as ``Exceedances(p, estimator)`` but is deprecated.
        show_progress: Draw a progress bar. Defaults to the configured value.
        compute_persistence: If False, skip the extremal index and return NaN thetas.
        max_workers: Size of the worker pool. Defaults to the configured value or the
            number of CPUs.
        progress: Optional ``callback(completed, total)`` called after every point.
        estimator: GPD estimator used only by the deprecated bare-probability form
            (default ``"exp"``). Passing it with an extraction type raises
            ``ConfigurationError``.

    Returns:
        tuple[np.ndarray, np.ndarray]: ``(dims, thetas)``, each of length N and aligned
        with the points of ``X``.
    """
    extraction = resolve_extraction(extraction, estimator)
    points = as_state_space_set(X)
    n_points = points.shape[0]
    config = load_defaults()
    if show_progress is None:
        show_progress = default_show_progress(config)
    workers = resolve_workers(max_workers, n_points, config)
    if isinstance(extraction, Exceedances):
        warn_small_sample(n_points - 1, extraction.p)

    dims = np.zeros(n_points, dtype=float)
    thetas = np.zeros(n_points, dtype=float)
    logger.info(
        "Estimating local dimensions of %d points (D=%d) with %r on %d worker(s).",
        n_points,
        points.shape[1],
        extraction,
        workers,
    )
    started = time.perf_counter()
    sink = ProgressSink(n_points, show_progress=show_progress, callback=progress)

    def _process(indices: np.ndarray, abort: threading.Event) -> None:
        scratch = ScratchBuffer.for_set(points)
        for j in indices:
            if abort.is_set():
                return
            logdist = log_distances_from_index(points, j, scratch)
            dims[j], thetas[j] = fit_tail(extraction, logdist, compute_persistence=compute_persistence)
            sink.advance()

    try:
        run_chunked(n_points, workers, _process)
    finally:
        sink.close()
    logger.info("Finished %d points in %.2fs.", n_points, time.perf_counter() - started)
    return dims, thetas


def extremevaltheory_dims(X: Any, extraction: Any, **kwargs) -> np.ndarray:
    """Local dimensions of every point; persistences are not computed."""
    extraction = resolve_extraction(extraction, kwargs.pop("estimator", None))
    kwargs["compute_persistence"] = False
    dims, _ = extremevaltheory_dims_persistences(X, extraction, **kwargs)
    return dims


def extremevaltheory_dim(X: Any, extraction: Any, **kwargs) -> float:
    """Mean of the local dimensions, an estimate of the dimension of the whole set."""
    extraction = resolve_extraction(extraction, kwargs.pop("estimator", None))
    return float(np.mean(extremevaltheory_dims(X, extraction, **kwargs)))
