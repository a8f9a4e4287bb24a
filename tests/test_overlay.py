"""Tests for projecting seams back onto the original image."""

import numpy as np
import pytest

from seam_shrink.errors import InvalidChannelCount
from seam_shrink.overlay import (
    HORIZONTAL_COLOR,
    VERTICAL_COLOR,
    remap_horizontal_seams,
    remap_vertical_seams,
    render_overlay,
)


class TestRemapVerticalSeams:
    def test_first_seam_unchanged(self):
        """Test that the first seam is already in original coordinates."""
        seams = [np.array([3, 2, 2])]

        assert remap_vertical_seams(seams)[0].tolist() == [3, 2, 2]

    def test_shifted_past_earlier_seams_on_the_left(self):
        """Test that a seam at or right of an earlier seam moves one column right."""
        seams = [np.array([0, 0]), np.array([0, 0])]

        remapped = remap_vertical_seams(seams)

        assert remapped[1].tolist() == [1, 1]

    def test_not_shifted_by_seams_on_the_right(self):
        """Test that earlier seams right of a seam leave it alone."""
        seams = [np.array([1, 1]), np.array([0, 0])]

        remapped = remap_vertical_seams(seams)

        assert remapped[1].tolist() == [0, 0]

    def test_cascading_shift(self):
        """Test that adjusted coordinates are compared against older seams."""
        # Third seam at 1 passes the second (at 1) to 2, then the first (at 2) to 3
        seams = [np.array([2]), np.array([1]), np.array([1])]

        remapped = remap_vertical_seams(seams)

        assert [s.tolist() for s in remapped] == [[2], [1], [3]]

    def test_input_not_mutated(self):
        """Test that remapping works on copies."""
        seams = [np.array([0, 1]), np.array([1, 1])]

        remap_vertical_seams(seams)

        assert seams[1].tolist() == [1, 1]


class TestRemapHorizontalSeams:
    def test_rows_and_columns(self):
        """Test that rows and columns are both moved back to the original grid."""
        horizontal = [np.array([0, 0, 0]), np.array([0, 1, 0])]
        vertical = [np.array([0, 0, 0, 0])]

        remapped = remap_horizontal_seams(horizontal, vertical)

        # Columns move past the removed column 0; rows past the first horizontal seam
        assert remapped[0].tolist() == [[0, 1], [0, 2], [0, 3]]
        assert remapped[1].tolist() == [[1, 1], [2, 2], [1, 3]]

    def test_without_vertical_seams(self):
        """Test that columns are unchanged when no vertical seams were removed."""
        remapped = remap_horizontal_seams([np.array([2, 2])])

        assert remapped[0].tolist() == [[2, 0], [2, 1]]


class TestRenderOverlay:
    def test_paints_seams(self):
        """Test that seam pixels are painted on a copy."""
        img = np.zeros((3, 4, 3), dtype=np.uint8)
        vertical = [np.array([1, 2, 1])]
        horizontal = [np.array([[2, 0], [2, 3]])]

        out = render_overlay(img, vertical, horizontal)

        assert tuple(out[0, 1]) == VERTICAL_COLOR
        assert tuple(out[1, 2]) == VERTICAL_COLOR
        assert tuple(out[2, 0]) == HORIZONTAL_COLOR
        assert tuple(out[2, 3]) == HORIZONTAL_COLOR
        assert not img.any()

    def test_grayscale_expanded(self):
        """Test that a grayscale image is expanded to RGB."""
        img = np.full((3, 3), 7, dtype=np.uint8)

        out = render_overlay(img, [np.array([0, 0, 0])])

        assert out.shape == (3, 3, 3)
        assert tuple(out[1, 1]) == (7, 7, 7)

    def test_rejects_unsupported_channels(self):
        """Test that a 2-channel image is refused."""
        with pytest.raises(InvalidChannelCount):
            render_overlay(np.zeros((3, 3, 2), dtype=np.uint8))
