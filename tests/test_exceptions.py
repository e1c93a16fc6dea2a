import pytest

from image_cpr.core.exceptions import (
    DecodeError,
    EncodeError,
    ImageCprError,
    InvalidFormatError,
    InvalidParameterError,
    OutOfBoundsError,
    StorageError,
)
from image_cpr.core.models import Rect


@pytest.mark.parametrize(
    "error",
    [
        InvalidFormatError("gif"),
        DecodeError("bad"),
        OutOfBoundsError("crop", Rect(x=0, y=0, width=1, height=1), (0, 0)),
        InvalidParameterError("quality", "too high"),
        EncodeError("bad"),
        StorageError("bad"),
    ],
)
def test_every_error_is_an_image_cpr_error(error) -> None:
    assert isinstance(error, ImageCprError)


def test_invalid_format_message() -> None:
    error = InvalidFormatError("gif", role="output")
    assert str(error) == "Invalid output format: 'gif'"


def test_decode_error_keeps_diagnostic() -> None:
    error = DecodeError("cannot identify image file", source="watermark")
    assert error.diagnostic == "cannot identify image file"
    assert str(error) == "Failed to decode watermark image: cannot identify image file"


def test_out_of_bounds_message_names_rectangle_and_image() -> None:
    error = OutOfBoundsError("watermark", Rect(x=5, y=6, width=7, height=8), (10, 9))
    assert str(error) == (
        "Watermark rectangle (x=5, y=6, width=7, height=8) exceeds image bounds 10x9"
    )


def test_invalid_parameter_message() -> None:
    error = InvalidParameterError("watermark.opacity", "must be <= 100")
    assert error.field == "watermark.opacity"
    assert str(error) == "Invalid parameter 'watermark.opacity': must be <= 100"


def test_encode_error_message() -> None:
    assert str(EncodeError("boom", "png")) == "Failed to encode image as png: boom"
    assert str(EncodeError("boom")) == "Failed to encode image: boom"
