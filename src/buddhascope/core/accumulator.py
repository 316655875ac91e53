"""
Monte Carlo density accumulation.

Draws uniform candidates over the viewport, iterates each one and counts how
often escaping orbits pass through every pixel-sized bin. Samples are
independent, so a pass is split into shards that each fill a private grid
with their own random stream; shard grids are summed in one reduction step.
"""

import multiprocessing as mp
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numba
import numpy as np

from buddhascope.core.errors import ConfigurationError
from buddhascope.core.trajectory import escape_length, replay_and_bin
from buddhascope.core.viewport import Viewport

DEFAULT_BATCH_SIZE = 65536

ProgressCallback = Callable[[int, int], None]


class DensityGrid:
    """
    Owned (height, width) grid of visit counters.

    Indexing is by (row, col) and is bounds-checked: negative indices are
    rejected instead of wrapping around.
    """

    def __init__(self, height: int, width: int):
        if height <= 0 or width <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {height}x{width}")
        self._counts = np.zeros((height, width), dtype=np.int64)

    @classmethod
    def from_counts(cls, counts: np.ndarray) -> "DensityGrid":
        counts = np.asarray(counts)
        if not np.issubdtype(counts.dtype, np.integer):
            raise ValueError(f"Density counts must be integers, got dtype {counts.dtype}")
        if counts.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {counts.shape}")
        if np.any(counts < 0):
            raise ValueError("Density counts must be non-negative")
        grid = cls(*counts.shape)
        grid._counts[...] = counts
        return grid

    @property
    def height(self) -> int:
        return self._counts.shape[0]

    @property
    def width(self) -> int:
        return self._counts.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._counts.shape

    @property
    def counts(self) -> np.ndarray:
        """Read-only view of the counters."""
        view = self._counts.view()
        view.flags.writeable = False
        return view

    def _check(self, row: int, col: int):
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Cell ({row}, {col}) outside {self.height}x{self.width} grid")

    def __getitem__(self, index: Tuple[int, int]) -> int:
        row, col = index
        self._check(row, col)
        return int(self._counts[row, col])

    def increment(self, row: int, col: int, amount: int = 1) -> int:
        """Add ``amount`` to a cell and return its new value."""
        if amount < 0:
            raise ValueError("Counters never decrease")
        self._check(row, col)
        self._counts[row, col] += amount
        return int(self._counts[row, col])

    def merge(self, partial: np.ndarray):
        """Add a partial grid of the same shape into this one."""
        if partial.shape != self.shape:
            raise ValueError(f"Shape mismatch: {partial.shape} vs {self.shape}")
        self._counts += partial

    def max(self) -> int:
        return int(self._counts.max())

    def total(self) -> int:
        return int(self._counts.sum())


@dataclass
class ChannelResult:
    """One channel's finished grid and the running maximum after its pass."""

    name: str
    iterations: int
    samples: int
    grid: DensityGrid
    running_max: int


def sample_candidates(
    rng: np.random.Generator,
    viewport: Viewport,
    count: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Draw ``count`` candidates uniformly over [min_r, max_r) x [min_i, max_i)."""
    re = rng.uniform(viewport.minimum.r, viewport.maximum.r, count)
    im = rng.uniform(viewport.minimum.i, viewport.maximum.i, count)
    return re, im


@numba.njit(cache=True, nogil=True)
def _bin_kernel(re, im, counts, budget, min_r, max_r, min_i, max_i):
    escaped = 0
    for s in range(re.shape[0]):
        length = escape_length(re[s], im[s], budget)
        if length == 0:
            continue
        escaped += 1
        replay_and_bin(re[s], im[s], length, counts, min_r, max_r, min_i, max_i)
    return escaped


def bin_samples(
    counts: np.ndarray,
    re: np.ndarray,
    im: np.ndarray,
    viewport: Viewport,
    budget: int,
) -> int:
    """
    Iterate every candidate and bin the escaping orbits into ``counts``.

    Args:
        counts: Writable int64 array of shape (height, width), updated in place.
        re, im: Candidate coordinates, same length.
        viewport: Region mapped onto ``counts``.
        budget: Iteration budget per candidate.

    Returns:
        Number of candidates that escaped.
    """
    if counts.dtype != np.int64 or counts.ndim != 2:
        raise ValueError("counts must be a 2D int64 array")
    return int(
        _bin_kernel(
            np.ascontiguousarray(re, dtype=np.float64),
            np.ascontiguousarray(im, dtype=np.float64),
            counts,
            budget,
            viewport.minimum.r,
            viewport.maximum.r,
            viewport.minimum.i,
            viewport.maximum.i,
        )
    )


def _split(total: int, parts: int) -> list[int]:
    base, extra = divmod(total, parts)
    return [base + (1 if k < extra else 0) for k in range(parts)]


def _fill(
    counts: np.ndarray,
    rng: np.random.Generator,
    viewport: Viewport,
    budget: int,
    n_samples: int,
    batch_size: int,
    on_batch: Optional[Callable[[int], None]] = None,
):
    done = 0
    while done < n_samples:
        n = min(batch_size, n_samples - done)
        re, im = sample_candidates(rng, viewport, n)
        bin_samples(counts, re, im, viewport, budget)
        done += n
        if on_batch:
            on_batch(n)


def _accumulate_shard(args) -> np.ndarray:
    """Fill a private grid from one random stream (runs inside a worker)."""
    shape, viewport, budget, n_samples, rng, batch_size = args
    counts = np.zeros(shape, dtype=np.int64)
    _fill(counts, rng, viewport, budget, n_samples, batch_size)
    return counts


def spawn_streams(
    workers: int,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> list[np.random.Generator]:
    """Independent generators, one per shard."""
    if rng is not None:
        return rng.spawn(workers)
    root = np.random.SeedSequence(seed if seed is not None else time.time_ns())
    return [np.random.default_rng(child) for child in root.spawn(workers)]


def accumulate(
    grid: DensityGrid,
    viewport: Viewport,
    budget: int,
    sample_count: int,
    running_max: int = 0,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    workers: int = 1,
    batch_size: int = DEFAULT_BATCH_SIZE,
    progress_callback: Optional[ProgressCallback] = None,
) -> int:
    """
    Run one accumulation pass into ``grid``.

    Args:
        grid: Target grid, incremented in place.
        viewport: Sampling region, also the region mapped onto the grid.
        budget: Iteration budget per candidate (> 0).
        sample_count: Number of candidates to draw (>= 0).
        running_max: Maximum carried in from earlier passes.
        seed: Seed for the shard streams. Ignored when ``rng`` is given.
        rng: Injected generator. Shard streams are spawned from it.
        workers: Number of shards; more than one runs them in a process pool.
        batch_size: Candidates drawn per kernel call.
        progress_callback: Called as (samples_done, sample_count).

    Returns:
        ``max(running_max, grid.max())`` after the merge.
    """
    if budget <= 0:
        raise ConfigurationError(f"Iteration budget must be positive, got {budget}")
    if sample_count < 0:
        raise ConfigurationError(f"Sample count must be non-negative, got {sample_count}")
    if workers <= 0:
        raise ConfigurationError(f"Worker count must be positive, got {workers}")
    if batch_size <= 0:
        raise ConfigurationError(f"Batch size must be positive, got {batch_size}")

    streams = spawn_streams(workers, seed=seed, rng=rng)
    jobs = [
        (grid.shape, viewport, budget, n, stream, batch_size)
        for n, stream in zip(_split(sample_count, workers), streams)
    ]

    done = 0

    def _report(n: int):
        nonlocal done
        done += n
        if progress_callback:
            progress_callback(done, sample_count)

    if workers == 1:
        # In-process, so progress is reported per batch.
        counts = np.zeros(grid.shape, dtype=np.int64)
        _fill(counts, streams[0], viewport, budget, sample_count, batch_size, on_batch=_report)
        partials = [counts]
    else:
        partials = []
        with mp.Pool(processes=workers) as pool:
            for job, partial in zip(jobs, pool.imap(_accumulate_shard, jobs)):
                partials.append(partial)
                _report(job[3])

    grid.merge(np.sum(partials, axis=0, dtype=np.int64))
    return max(running_max, grid.max())
