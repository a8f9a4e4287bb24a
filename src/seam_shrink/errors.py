"""Exceptions raised by seam carving operations.

All of them are input-contract violations detected before any buffer is
allocated or written, so a caller that catches one can assume nothing was
mutated.
"""


class SeamCarvingError(ValueError):
    """Base class for invalid input handed to the carving core."""


class InvalidDepth(SeamCarvingError):
    """Image buffer is not 8-bit unsigned."""


class InvalidChannelCount(SeamCarvingError):
    """Image buffer has a channel count the operation does not support."""


class DimensionTooSmall(SeamCarvingError):
    """Image is too narrow (vertical) or too short (horizontal) to hold a seam."""


class SeamLengthMismatch(SeamCarvingError):
    """Seam length disagrees with the dimension it is removed across."""


class SeamOutOfBounds(SeamCarvingError):
    """Seam names a coordinate outside the buffer."""


class InvalidRemovalCount(SeamCarvingError):
    """Requested number of rows/columns to remove is negative or too large."""


class InvalidSeamType(SeamCarvingError):
    """Seam coordinates are not integers."""


class SessionStateError(RuntimeError):
    """Session operation called out of order (e.g. commit before planning)."""
