"""Thread fan-out helpers shared by the CPU-bound passes.

Every phase (a band of rows, or one DP sweep) gets a freshly spawned set of
workers that is joined before the phase returns. Workers of one phase write
disjoint regions of their output buffers, so no locking is involved.
"""

import concurrent.futures
import os
from typing import Callable, Optional, Sequence, TypeVar

import numpy as np

from seam_shrink.config import get_settings

T = TypeVar("T")


def resolve_workers(extent: int, max_workers: Optional[int] = None) -> int:
    """Number of workers for a phase over ``extent`` independent lines.

    Args:
        extent: Size of the parallelized dimension
        max_workers: Explicit cap (default: settings, then CPU count)

    Returns:
        min(cap, extent), never below 1
    """
    if max_workers is None:
        max_workers = get_settings().max_workers
    if max_workers is None:
        max_workers = os.cpu_count() or 1
    return max(1, min(int(max_workers), int(extent)))


def row_bands(n: int, workers: int) -> list[tuple[int, int]]:
    """Split ``range(n)`` into contiguous, non-overlapping ``(start, stop)`` bands."""
    bounds = np.linspace(0, n, workers + 1).astype(np.int64)
    return [
        (int(start), int(stop))
        for start, stop in zip(bounds[:-1], bounds[1:])
        if stop > start
    ]


def stripes(n: int, workers: int) -> list[np.ndarray]:
    """Striped assignment: worker t gets indices t, t + T, t + 2T, ..."""
    return [np.arange(t, n, workers) for t in range(workers) if t < n]


def run_phase(fn: Callable[[T], None], parts: Sequence[T]) -> None:
    """Run ``fn`` once per part on fresh threads and wait for all of them.

    Returning from this function is the barrier between phases. A worker
    exception is re-raised in the caller.
    """
    if len(parts) <= 1:
        for part in parts:
            fn(part)
        return

    with concurrent.futures.ThreadPoolExecutor(max_workers=len(parts)) as ex:
        futures = [ex.submit(fn, part) for part in parts]
        for future in futures:
            future.result()
