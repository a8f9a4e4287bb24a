"""Carving session: plan seams on a grayscale copy, then apply them in colour."""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image
from tqdm import tqdm

from seam_shrink.config import Settings, get_settings
from seam_shrink.energy import channel_count, check_depth, energy, grayscale
from seam_shrink.errors import InvalidChannelCount, InvalidRemovalCount, SessionStateError
from seam_shrink.overlay import remap_horizontal_seams, remap_vertical_seams, render_overlay
from seam_shrink.seam_carving import (
    MINIMUM,
    Comparator,
    Orientation,
    find_horizontal_seam,
    find_vertical_seam,
    remove_seam,
)

logger = logging.getLogger(__name__)


class SeamPlan:
    """Seams found by ``CarvingSession.plan_seams``.

    Seam k of each batch is relative to the working buffer after seams
    0..k-1 were removed. The remapped coordinates and overlay image are
    only filled in when an overlay was requested.
    """

    def __init__(
        self,
        vertical_seams: list[np.ndarray],
        horizontal_seams: list[np.ndarray],
        vertical_columns: Optional[list[np.ndarray]] = None,
        horizontal_points: Optional[list[np.ndarray]] = None,
        overlay: Optional[np.ndarray] = None,
    ):
        self.vertical_seams = vertical_seams
        self.horizontal_seams = horizontal_seams
        self.vertical_columns = vertical_columns
        self.horizontal_points = horizontal_points
        self.overlay = overlay

    def __len__(self) -> int:
        return len(self.vertical_seams) + len(self.horizontal_seams)


class CarveResult:
    """Result of a carving run."""

    def __init__(
        self,
        image: np.ndarray,
        original_size: tuple[int, int],
        plan: SeamPlan,
    ):
        self.image = image
        self.original_size = original_size
        self.carved_size = (image.shape[0], image.shape[1])
        self.vertical_seams = plan.vertical_seams
        self.horizontal_seams = plan.horizontal_seams
        self.overlay = plan.overlay

    def to_pil(self) -> Image.Image:
        """Convert to PIL Image."""
        image = self.image
        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        return Image.fromarray(np.ascontiguousarray(image))

    def save(self, path: Union[str, Path]) -> None:
        """Save carved image."""
        self.to_pil().save(path)


class CarvingSession:
    """Shrinks one image by removing low-energy seams.

    Usage mirrors an interactive tool: ``load_image`` once, ``plan_seams`` as
    often as needed (each call starts again from the original), then
    ``commit`` to carve the colour image with the last plan.

    Holds the original colour buffer, the grayscale working buffer that
    shrinks while planning, and the seam batches of the pending plan.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        show_progress: Optional[bool] = None,
        compare: Comparator = MINIMUM,
        settings: Optional[Settings] = None,
    ):
        """Initialize carving session.

        Args:
            max_workers: Worker threads per parallel phase (default: settings)
            show_progress: Show progress bars while planning (default: settings)
            compare: Seam cost preference (default: minimum energy)
            settings: Configuration (default: environment)
        """
        self.settings = settings or get_settings()
        self.max_workers = max_workers if max_workers is not None else self.settings.max_workers
        self.show_progress = (
            show_progress if show_progress is not None else self.settings.show_progress
        )
        self.compare = compare

        self.original: Optional[np.ndarray] = None
        self.gray: Optional[np.ndarray] = None
        self.vertical_seams: list[np.ndarray] = []
        self.horizontal_seams: list[np.ndarray] = []
        self._planned = False

    @property
    def limits(self) -> tuple[int, int]:
        """Largest allowed ``(rows, cols)`` removal counts for the loaded image."""
        if self.original is None:
            raise SessionStateError("No image loaded")
        h, w = self.original.shape[:2]
        margin = self.settings.safety_margin
        return max(h - margin, 0), max(w - margin, 0)

    def load_image(self, image: Union[np.ndarray, Image.Image]) -> tuple[int, int]:
        """Take a private copy of ``image`` and reset the session.

        Args:
            image: uint8 array (H, W) / (H, W, 3), or a PIL image

        Returns:
            The removal limits ``(max_rows, max_cols)``
        """
        img = self._to_numpy(image)
        check_depth(img)
        channels = channel_count(img)
        if channels not in (1, 3):
            raise InvalidChannelCount(
                f"Carving supports 1 or 3 channels, got {channels}"
            )

        self.original = img.copy()
        self.gray = grayscale(self.original, self.max_workers)
        self.vertical_seams = []
        self.horizontal_seams = []
        self._planned = False

        logger.info("Loaded image of size %dx%d (%d channels)", img.shape[1], img.shape[0], channels)
        return self.limits

    def _to_numpy(self, image: Union[np.ndarray, Image.Image]) -> np.ndarray:
        """Convert image to numpy array."""
        if isinstance(image, Image.Image):
            if image.mode not in ("L", "RGB"):
                image = image.convert("RGB")
            return np.array(image)
        return np.asarray(image)

    def plan_seams(self, rows: int, cols: int, overlay: bool = False) -> SeamPlan:
        """Find ``cols`` vertical seams, then ``rows`` horizontal seams.

        Energy is recomputed on the grayscale working buffer before every
        search, and each seam is removed from that buffer right after it is
        found. The colour image is untouched until ``commit``.

        Args:
            rows: Number of rows to remove
            cols: Number of columns to remove
            overlay: Also remap the seams onto the original and draw them

        Returns:
            SeamPlan with both batches in discovery order
        """
        if self.original is None:
            raise SessionStateError("Load an image before planning seams")

        max_rows, max_cols = self.limits
        if not 0 <= rows <= max_rows:
            raise InvalidRemovalCount(f"Rows to remove must be in [0, {max_rows}], got {rows}")
        if not 0 <= cols <= max_cols:
            raise InvalidRemovalCount(f"Columns to remove must be in [0, {max_cols}], got {cols}")

        logger.info("Planning removal of %d columns and %d rows", cols, rows)

        # Start over from the full image so re-planning replaces the last plan
        work = grayscale(self.original, self.max_workers)
        self.vertical_seams = []
        self.horizontal_seams = []

        for _ in self._progress(cols, "Finding vertical seams"):
            seam = find_vertical_seam(energy(work, self.max_workers), self.compare, self.max_workers)
            self.vertical_seams.append(seam)
            work = remove_seam(work, seam, Orientation.VERTICAL)
            logger.debug("Vertical seam %d found, working size %s", len(self.vertical_seams), work.shape)

        for _ in self._progress(rows, "Finding horizontal seams"):
            seam = find_horizontal_seam(energy(work, self.max_workers), self.compare, self.max_workers)
            self.horizontal_seams.append(seam)
            work = remove_seam(work, seam, Orientation.HORIZONTAL)
            logger.debug("Horizontal seam %d found, working size %s", len(self.horizontal_seams), work.shape)

        self.gray = work
        self._planned = True

        plan = SeamPlan(list(self.vertical_seams), list(self.horizontal_seams))
        if overlay:
            plan.vertical_columns = remap_vertical_seams(plan.vertical_seams)
            plan.horizontal_points = remap_horizontal_seams(
                plan.horizontal_seams, plan.vertical_seams
            )
            plan.overlay = render_overlay(
                self.original, plan.vertical_columns, plan.horizontal_points
            )
        return plan

    def _progress(self, n: int, desc: str):
        return tqdm(range(n), desc=desc) if self.show_progress else range(n)

    def commit(self) -> np.ndarray:
        """Carve the colour image with the pending plan.

        Replays the recorded seams, vertical batch then horizontal batch, in
        discovery order on a full-size copy of the original. The plan is
        consumed.

        Returns:
            Contiguous uint8 array of size (H - rows, W - cols[, C])
        """
        if self.original is None or not self._planned:
            raise SessionStateError("No seams planned; call plan_seams first")

        carved = self.original.copy()
        for seam in self.vertical_seams:
            carved = remove_seam(carved, seam, Orientation.VERTICAL)
        for seam in self.horizontal_seams:
            carved = remove_seam(carved, seam, Orientation.HORIZONTAL)

        logger.info(
            "Carved %dx%d image to %dx%d",
            self.original.shape[1], self.original.shape[0], carved.shape[1], carved.shape[0],
        )

        self.vertical_seams = []
        self.horizontal_seams = []
        self._planned = False
        return np.ascontiguousarray(carved)


def carve_image(
    image: Union[np.ndarray, Image.Image],
    rows: int,
    cols: int,
    overlay: bool = False,
    **kwargs,
) -> CarveResult:
    """Convenience function for one-off carving.

    Example:
        >>> result = carve_image(np.asarray(Image.open("photo.jpg")), rows=20, cols=40)
        >>> result.save("photo_carved.png")
    """
    session = CarvingSession(**kwargs)
    session.load_image(image)
    original_size = session.original.shape[:2]
    plan = session.plan_seams(rows, cols, overlay=overlay)
    return CarveResult(session.commit(), original_size, plan)
