"""Tests for the Lanczos resampler."""

from unittest.mock import patch

import pytest
from PIL import Image

from image_cpr.core.exceptions import InvalidParameterError
from image_cpr.core.resample import RESAMPLE_FILTER, resize, to_rgba
from image_cpr.testing.fakes import create_test_pil_image


class TestToRgba:
    """Tests for to_rgba."""

    def test_rgba_passes_through(self):
        image = create_test_pil_image(4, 4)
        assert to_rgba(image) is image

    @pytest.mark.parametrize("mode", ["RGB", "L", "P", "LA"])
    def test_other_modes_are_converted(self, mode):
        image = Image.new(mode, (4, 4))
        converted = to_rgba(image)
        assert converted.mode == "RGBA"
        assert converted.size == (4, 4)

    def test_missing_alpha_becomes_opaque(self):
        converted = to_rgba(Image.new("RGB", (3, 3), (1, 2, 3)))
        assert converted.getpixel((1, 1)) == (1, 2, 3, 255)


class TestResize:
    """Tests for resize."""

    @pytest.mark.parametrize("size", [(200, 200), (50, 25), (1, 1), (100, 100)])
    def test_output_has_requested_dimensions(self, size):
        image = create_test_pil_image(100, 100)
        resized = resize(image, *size)
        assert resized.size == size
        assert resized.mode == "RGBA"

    def test_resize_is_idempotent_in_dimension(self):
        image = create_test_pil_image(90, 60)
        once = resize(image, 45, 70)
        twice = resize(once, 45, 70)
        assert twice.size == (45, 70)

    def test_non_rgba_source_is_converted(self):
        resized = resize(Image.new("RGB", (10, 10), (9, 9, 9)), 20, 20)
        assert resized.mode == "RGBA"
        assert resized.getpixel((5, 5)) == (9, 9, 9, 255)

    def test_uses_lanczos(self):
        assert RESAMPLE_FILTER == Image.Resampling.LANCZOS
        image = create_test_pil_image(10, 10)
        with patch.object(Image.Image, "resize", autospec=True) as mock_resize:
            resize(image, 20, 30)
        args, _ = mock_resize.call_args
        assert args[1:] == ((20, 30), Image.Resampling.LANCZOS)

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (0, 0)])
    def test_zero_area_target_is_rejected(self, size):
        with pytest.raises(InvalidParameterError) as exc_info:
            resize(create_test_pil_image(10, 10), *size)
        assert exc_info.value.field.startswith("size.")

    @pytest.mark.parametrize("size", [(2**32 - 1, 1), (1, 2**31)])
    def test_dimension_beyond_pillow_range_is_rejected(self, size):
        with pytest.raises(InvalidParameterError) as exc_info:
            resize(create_test_pil_image(4, 4), *size)
        assert exc_info.value.field.startswith("size.")

    def test_area_beyond_pixel_limit_is_rejected(self):
        with patch.object(Image, "MAX_IMAGE_PIXELS", 50):
            with pytest.raises(InvalidParameterError) as exc_info:
                resize(create_test_pil_image(4, 4), 11, 10)
        assert exc_info.value.field == "size"

    def test_pixel_limit_can_be_disabled(self):
        with patch.object(Image, "MAX_IMAGE_PIXELS", None):
            assert resize(create_test_pil_image(4, 4), 11, 10).size == (11, 10)

    @pytest.mark.parametrize("error", [MemoryError(), OverflowError("too big")])
    def test_allocation_failure_becomes_invalid_parameter(self, error):
        image = create_test_pil_image(4, 4)
        with patch.object(Image.Image, "resize", side_effect=error):
            with pytest.raises(InvalidParameterError) as exc_info:
                resize(image, 8, 8)
        assert exc_info.value.field == "size"
        assert exc_info.value.__cause__ is error
