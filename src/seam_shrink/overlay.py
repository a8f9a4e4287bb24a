"""Projection of recorded seams back onto the original image, for display.

Seams are recorded against a working buffer that shrinks after every
removal, so seam k is relative to the image with seams 1..k-1 already gone.
The helpers here translate them into original-image coordinates. The result
is only meant for drawing; carving always replays the recorded seams.
"""

from typing import Sequence

import numpy as np

from seam_shrink.energy import channel_count, check_depth
from seam_shrink.errors import InvalidChannelCount

VERTICAL_COLOR = (0, 0, 255)
HORIZONTAL_COLOR = (255, 0, 0)


def _remap(seam: np.ndarray, earlier: Sequence[np.ndarray], lines: np.ndarray) -> np.ndarray:
    """Shift ``seam`` (sampled at ``lines``) past every earlier seam at or before it."""
    pos = np.asarray(seam, dtype=np.int64).copy()
    for prev in reversed(earlier):
        pos += np.asarray(prev)[lines] <= pos
    return pos


def remap_vertical_seams(vertical_seams: Sequence[np.ndarray]) -> list[np.ndarray]:
    """Express each vertical seam as original-image columns.

    Args:
        vertical_seams: Seams in discovery order, each (H,) of buffer-relative columns

    Returns:
        One (H,) array per seam with the column in the original image
    """
    remapped = []
    for k, seam in enumerate(vertical_seams):
        rows = np.arange(len(seam))
        remapped.append(_remap(seam, vertical_seams[:k], rows))
    return remapped


def remap_horizontal_seams(
    horizontal_seams: Sequence[np.ndarray],
    vertical_seams: Sequence[np.ndarray] = (),
) -> list[np.ndarray]:
    """Express each horizontal seam as original-image ``(row, column)`` points.

    Horizontal seams are searched after all vertical seams were removed, so
    their columns live in the narrowed image. The row is first moved past the
    earlier horizontal seams; the column is then moved past every vertical
    seam at that original row.

    Returns:
        One (W', 2) int array per seam
    """
    remapped = []
    for k, seam in enumerate(horizontal_seams):
        cols = np.arange(len(seam))
        rows = _remap(seam, horizontal_seams[:k], cols)
        real_cols = cols.copy()
        for prev in reversed(vertical_seams):
            real_cols += np.asarray(prev)[rows] <= real_cols
        remapped.append(np.stack([rows, real_cols], axis=1))
    return remapped


def render_overlay(
    image: np.ndarray,
    vertical_columns: Sequence[np.ndarray] = (),
    horizontal_points: Sequence[np.ndarray] = (),
) -> np.ndarray:
    """Paint remapped seams onto a copy of ``image``.

    Args:
        image: uint8 image (H, W) or (H, W, 3); grayscale is expanded to RGB
        vertical_columns: Output of ``remap_vertical_seams``
        horizontal_points: Output of ``remap_horizontal_seams``

    Returns:
        uint8 RGB image (H, W, 3) with vertical seams blue, horizontal red
    """
    check_depth(image)
    channels = channel_count(image)
    if channels == 1:
        canvas = np.repeat(image.reshape(image.shape[:2])[:, :, np.newaxis], 3, axis=2)
    elif channels == 3:
        canvas = image.copy()
    else:
        raise InvalidChannelCount(f"Overlay supports 1 or 3 channels, got {channels}")

    for columns in vertical_columns:
        canvas[np.arange(len(columns)), columns] = VERTICAL_COLOR
    for points in horizontal_points:
        canvas[points[:, 0], points[:, 1]] = HORIZONTAL_COLOR

    return canvas
