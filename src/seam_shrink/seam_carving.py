"""Seam search and removal for content-aware image shrinking.

Based on "Seam Carving for Content-Aware Image Resizing" by Avidan & Shamir (2007).
A vertical seam holds one column index per row, a horizontal seam one row
index per column; neighbouring entries differ by at most one.
"""

import operator
from enum import Enum
from functools import partial
from typing import Callable, Optional, Union

import numpy as np

from seam_shrink.energy import as_single_channel
from seam_shrink.errors import (
    DimensionTooSmall,
    InvalidSeamType,
    SeamLengthMismatch,
    SeamOutOfBounds,
)
from seam_shrink.parallel import resolve_workers, run_phase, stripes

# compare(candidate, current) -> True when candidate should replace current
Comparator = Callable[[np.ndarray, np.ndarray], np.ndarray]

MINIMUM: Comparator = operator.lt
MAXIMUM: Comparator = operator.gt


class Orientation(str, Enum):
    """Direction a seam runs in."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


def find_vertical_seam(
    energy_map: np.ndarray,
    compare: Comparator = MINIMUM,
    max_workers: Optional[int] = None,
) -> np.ndarray:
    """Find the extremal-cost top-to-bottom seam.

    Args:
        energy_map: uint8 single-channel energy map (H, W)
        compare: Strict ordering choosing the preferred cost (default: minimum)
        max_workers: Cap on worker threads per DP sweep

    Returns:
        Array (H,) of column indices, one per row
    """
    values = as_single_channel(energy_map, "Vertical seam search")
    if values.shape[0] == 0:
        raise DimensionTooSmall("Vertical seam search needs at least 1 row, got 0")
    if values.shape[1] <= 1:
        raise DimensionTooSmall(
            f"Vertical seam search needs at least 2 columns, got {values.shape[1]}"
        )
    return _find_seam(values, compare, max_workers)


def find_horizontal_seam(
    energy_map: np.ndarray,
    compare: Comparator = MINIMUM,
    max_workers: Optional[int] = None,
) -> np.ndarray:
    """Find the extremal-cost left-to-right seam (the vertical search, transposed).

    Returns:
        Array (W,) of row indices, one per column
    """
    values = as_single_channel(energy_map, "Horizontal seam search")
    if values.shape[1] == 0:
        raise DimensionTooSmall("Horizontal seam search needs at least 1 column, got 0")
    if values.shape[0] <= 1:
        raise DimensionTooSmall(
            f"Horizontal seam search needs at least 2 rows, got {values.shape[0]}"
        )
    return _find_seam(values.T, compare, max_workers)


def find_seam(
    energy_map: np.ndarray,
    orientation: Union[Orientation, str] = Orientation.VERTICAL,
    compare: Comparator = MINIMUM,
    max_workers: Optional[int] = None,
) -> np.ndarray:
    if Orientation(orientation) is Orientation.VERTICAL:
        return find_vertical_seam(energy_map, compare, max_workers)
    return find_horizontal_seam(energy_map, compare, max_workers)


def _find_seam(
    values: np.ndarray, compare: Comparator, max_workers: Optional[int]
) -> np.ndarray:
    """Dynamic programming over rows of ``values``; one seam entry per row."""
    h, w = values.shape

    # Backpointers in {-1, 0, +1}; row 0 has none
    routes = np.zeros((h, w), dtype=np.int8)
    last = values[0].astype(np.int64)
    current = np.empty(w, dtype=np.int64)

    parts = stripes(w, resolve_workers(w, max_workers))
    for r in range(1, h):
        # Each sweep reads all of `last`; run_phase returning is the barrier
        run_phase(
            partial(_sweep, last, current, values[r], routes[r], compare),
            parts,
        )
        last, current = current, last

    seam = np.empty(h, dtype=np.int64)
    col = _first_extremal(last, compare)
    for r in range(h - 1, -1, -1):
        seam[r] = col
        col += int(routes[r, col])

    return seam


def _sweep(
    prev: np.ndarray,
    cur: np.ndarray,
    row: np.ndarray,
    route_row: np.ndarray,
    compare: Comparator,
    cols: np.ndarray,
) -> None:
    """Fill ``cur`` and ``route_row`` at ``cols`` from the previous sweep.

    Straight ahead is the starting candidate; left, then right, replace it
    only on a strict improvement, so ties keep the earlier choice.
    """
    w = prev.shape[0]
    best = prev[cols]
    route = np.zeros(cols.shape[0], dtype=np.int8)

    for offset, valid in ((-1, cols > 0), (1, cols < w - 1)):
        idx = np.flatnonzero(valid)
        candidate = prev[cols[idx] + offset]
        better = np.asarray(compare(candidate, best[idx]), dtype=bool)
        best[idx[better]] = candidate[better]
        route[idx[better]] = offset

    cur[cols] = best + row[cols]
    route_row[cols] = route


def _first_extremal(costs: np.ndarray, compare: Comparator) -> int:
    # Only strictly better costs move the index, so the first extremum wins
    best = 0
    for i in range(1, costs.shape[0]):
        if compare(costs[i], costs[best]):
            best = i
    return best


def remove_seam(
    image: np.ndarray,
    seam: np.ndarray,
    orientation: Union[Orientation, str] = Orientation.VERTICAL,
) -> np.ndarray:
    """Delete the cells named by ``seam``, shrinking the image by one line.

    Works in place: within every row (vertical) or column (horizontal) the
    elements past the seam move one step toward it, and the returned array is
    a view of ``image`` that leaves out the now-stale last column/row. Any
    channel count is accepted.

    Args:
        image: Writable image buffer (H, W) or (H, W, C)
        seam: Column per row (vertical) or row per column (horizontal)
        orientation: 'vertical' or 'horizontal'

    Returns:
        View of ``image`` with one column (vertical) or row (horizontal) fewer
    """
    orientation = Orientation(orientation)
    seam = np.asarray(seam)

    # Horizontal removal is vertical removal on the transposed view
    lines = image if orientation is Orientation.VERTICAL else image.swapaxes(0, 1)
    n_lines, extent = lines.shape[:2]

    if seam.ndim != 1 or seam.shape[0] != n_lines:
        dimension = "rows" if orientation is Orientation.VERTICAL else "columns"
        raise SeamLengthMismatch(
            f"{orientation.value.capitalize()} seam of length {seam.size} "
            f"does not match image with {n_lines} {dimension}"
        )
    if seam.size and not np.issubdtype(seam.dtype, np.integer):
        raise InvalidSeamType(f"Seam coordinates must be integers, got {seam.dtype}")
    if n_lines and (seam.min() < 0 or seam.max() >= extent):
        raise SeamOutOfBounds(
            f"Seam coordinates must lie in [0, {extent - 1}], "
            f"got [{seam.min()}, {seam.max()}]"
        )

    for i, pos in enumerate(seam.tolist()):
        lines[i, pos:-1] = lines[i, pos + 1 :]

    carved = lines[:, :-1]
    return carved if orientation is Orientation.VERTICAL else carved.swapaxes(0, 1)
