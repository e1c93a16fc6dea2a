"""Tests for rectangle bounds validation."""

import pytest

from image_cpr.core.exceptions import OutOfBoundsError
from image_cpr.core.geometry import fits, validate_crop, validate_placement
from image_cpr.core.models import Rect, U32_MAX


class TestFits:
    """Tests for fits."""

    def test_rect_inside_image(self):
        assert fits((100, 100), Rect(x=10, y=10, width=50, height=50))

    def test_rect_touching_far_edges(self):
        """Test that a rectangle ending exactly on the image edge fits."""
        assert fits((100, 100), Rect(x=50, y=50, width=50, height=50))
        assert fits((100, 100), Rect(x=0, y=0, width=100, height=100))

    @pytest.mark.parametrize(
        "rect",
        [
            Rect(x=60, y=60, width=50, height=50),
            Rect(x=51, y=0, width=50, height=10),
            Rect(x=0, y=51, width=10, height=50),
            Rect(x=200, y=0, width=1, height=1),
        ],
    )
    def test_rect_outside_image(self, rect):
        assert not fits((100, 100), rect)

    def test_sum_beyond_u32_does_not_wrap(self):
        """Test that x + width past 2**32 is out of bounds, not wrapped to small."""
        rect = Rect(x=U32_MAX, y=0, width=2, height=1)
        assert not fits((100, 100), rect)


class TestValidateCrop:
    """Tests for validate_crop."""

    def test_valid_crop_returns_none(self):
        assert validate_crop((100, 100), Rect(x=10, y=10, width=50, height=50)) is None

    def test_invalid_crop_identifies_crop(self):
        rect = Rect(x=60, y=60, width=50, height=50)
        with pytest.raises(OutOfBoundsError) as exc_info:
            validate_crop((100, 100), rect)

        error = exc_info.value
        assert error.target == "crop"
        assert error.rect == rect
        assert error.image_size == (100, 100)
        assert "Crop" in str(error)
        assert "100x100" in str(error)


class TestValidatePlacement:
    """Tests for validate_placement."""

    def test_valid_placement_returns_none(self):
        assert validate_placement((64, 32), Rect(x=0, y=0, width=64, height=32)) is None

    def test_invalid_placement_identifies_watermark(self):
        with pytest.raises(OutOfBoundsError) as exc_info:
            validate_placement((64, 32), Rect(x=0, y=1, width=64, height=32))
        assert exc_info.value.target == "watermark"
