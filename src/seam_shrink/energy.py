"""Grayscale conversion and the gradient energy map.

The energy of a pixel approximates its visual importance: the sum of the
absolute horizontal and vertical intensity differences around it. Seams
prefer low-energy pixels, so flat regions are carved away first.
"""

import logging
from typing import Optional

import numpy as np
from scipy import ndimage

from seam_shrink.errors import InvalidChannelCount, InvalidDepth
from seam_shrink.parallel import resolve_workers, row_bands, run_phase

logger = logging.getLogger(__name__)

# Directional difference kernels, applied by correlation (no flip)
H_KERNEL = np.array([[-1, 0, 1], [-1, 0, 1], [-1, 0, 1]], dtype=np.int32)
V_KERNEL = np.array([[-1, -1, -1], [0, 0, 0], [1, 1, 1]], dtype=np.int32)

# |gh| + |gv| is divided by this to land (mostly) inside 8 bits
ENERGY_SCALE = 2


def channel_count(image: np.ndarray) -> int:
    """Number of channels of an (H, W) or (H, W, C) buffer."""
    if image.ndim == 2:
        return 1
    if image.ndim == 3:
        return int(image.shape[2])
    raise InvalidChannelCount(
        f"Expected a 2-D or 3-D image buffer, got {image.ndim} dimensions"
    )


def check_depth(image: np.ndarray) -> None:
    if image.dtype != np.uint8:
        raise InvalidDepth(f"Expected 8-bit unsigned pixels, got {image.dtype}")


def as_single_channel(image: np.ndarray, operation: str) -> np.ndarray:
    """Validate a 1-channel 8-bit buffer and return it as an (H, W) view."""
    check_depth(image)
    channels = channel_count(image)
    if channels != 1:
        raise InvalidChannelCount(
            f"{operation} needs a single-channel image, got {channels} channels"
        )
    return image.reshape(image.shape[:2])


def grayscale(image: np.ndarray, max_workers: Optional[int] = None) -> np.ndarray:
    """Reduce a 3-channel image to 1-channel luminance.

    Each channel is floor-divided by the channel count before summing, so the
    result sits at or slightly below the true channel mean. A 1-channel image
    comes back as an unchanged copy.

    Args:
        image: uint8 image (H, W, 3), or (H, W) / (H, W, 1)
        max_workers: Cap on worker threads (row bands)

    Returns:
        uint8 array (H, W)
    """
    check_depth(image)
    channels = channel_count(image)

    if channels == 1:
        logger.warning("Image is already grayscale")
        return image.copy()
    if channels != 3:
        raise InvalidChannelCount(
            f"Grayscale conversion supports 1 or 3 channels, got {channels}"
        )

    h, w = image.shape[:2]
    gray = np.empty((h, w), dtype=np.uint8)

    def convert_band(band: tuple[int, int]) -> None:
        start, stop = band
        acc = np.zeros((stop - start, w), dtype=np.uint16)
        for ch in range(channels):
            acc += image[start:stop, :, ch] // channels
        gray[start:stop] = acc

    run_phase(convert_band, row_bands(h, resolve_workers(h, max_workers)))
    return gray


def energy(image: np.ndarray, max_workers: Optional[int] = None) -> np.ndarray:
    """Compute the energy map of a grayscale image.

    Correlates the horizontal and vertical difference kernels over each
    pixel's 3x3 neighbourhood (edge-clamped at the borders) and stores
    ``clip((|gh| + |gv|) // 2, 0, 255)``. Rows are split into contiguous bands,
    one per worker; each band reads one halo row above and below it.

    Args:
        image: uint8 single-channel image
        max_workers: Cap on worker threads

    Returns:
        uint8 energy map with the same shape as ``image``
    """
    gray = as_single_channel(image, "Energy computation")
    h, w = gray.shape
    out = np.empty((h, w), dtype=np.uint8)

    def energy_band(band: tuple[int, int]) -> None:
        start, stop = band
        lo = max(start - 1, 0)
        hi = min(stop + 1, h)
        block = gray[lo:hi].astype(np.int32)

        # mode="nearest" clamps at the image border; inner band edges use
        # the real halo rows
        grad_h = ndimage.correlate(block, H_KERNEL, mode="nearest")
        grad_v = ndimage.correlate(block, V_KERNEL, mode="nearest")
        magnitude = (np.abs(grad_h) + np.abs(grad_v)) // ENERGY_SCALE

        offset = start - lo
        out[start:stop] = np.clip(magnitude[offset : offset + stop - start], 0, 255)

    run_phase(energy_band, row_bands(h, resolve_workers(h, max_workers)))
    return out.reshape(image.shape)


def visualize_energy(energy_map: np.ndarray, cmap: str = "hot") -> np.ndarray:
    """Colorize an energy map for inspection.

    Returns:
        uint8 RGB image (H, W, 3)
    """
    from matplotlib import colormaps

    values = as_single_channel(energy_map, "Energy visualization")
    colored = colormaps.get_cmap(cmap)(values.astype(np.float32) / 255.0)[:, :, :3]

    return (colored * 255).astype(np.uint8)
