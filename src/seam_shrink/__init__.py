"""Seam Shrink: content-aware image shrinking by seam carving."""

from seam_shrink.energy import energy, grayscale, visualize_energy
from seam_shrink.errors import (
    DimensionTooSmall,
    InvalidChannelCount,
    InvalidDepth,
    InvalidRemovalCount,
    InvalidSeamType,
    SeamCarvingError,
    SeamLengthMismatch,
    SeamOutOfBounds,
    SessionStateError,
)
from seam_shrink.overlay import remap_horizontal_seams, remap_vertical_seams, render_overlay
from seam_shrink.seam_carving import (
    MAXIMUM,
    MINIMUM,
    Orientation,
    find_horizontal_seam,
    find_seam,
    find_vertical_seam,
    remove_seam,
)
from seam_shrink.session import CarveResult, CarvingSession, SeamPlan, carve_image

__version__ = "0.1.0"
__all__ = [
    "CarvingSession",
    "CarveResult",
    "SeamPlan",
    "carve_image",
    "grayscale",
    "energy",
    "visualize_energy",
    "find_vertical_seam",
    "find_horizontal_seam",
    "find_seam",
    "remove_seam",
    "Orientation",
    "MINIMUM",
    "MAXIMUM",
    "remap_vertical_seams",
    "remap_horizontal_seams",
    "render_overlay",
    "SeamCarvingError",
    "InvalidDepth",
    "InvalidChannelCount",
    "DimensionTooSmall",
    "SeamLengthMismatch",
    "SeamOutOfBounds",
    "InvalidRemovalCount",
    "InvalidSeamType",
    "SessionStateError",
]
