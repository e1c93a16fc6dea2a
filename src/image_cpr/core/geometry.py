"""Bounds validation for crop and watermark rectangles.

Every check runs before the image is touched, so a failure never leaves a
partially transformed buffer behind. Sums are plain Python integers and
cannot wrap around the way a fixed-width ``x + width`` would.
"""

from typing import Tuple

from .exceptions import OutOfBoundsError
from .models import Rect

ImageSize = Tuple[int, int]


def fits(image_size: ImageSize, rect: Rect) -> bool:
    """Return True when ``rect`` lies entirely inside an image of ``image_size``."""
    width, height = image_size
    return rect.x + rect.width <= width and rect.y + rect.height <= height


def _validate(target: str, image_size: ImageSize, rect: Rect) -> None:
    if not fits(image_size, rect):
        raise OutOfBoundsError(target, rect, image_size)


def validate_crop(image_size: ImageSize, rect: Rect) -> None:
    """Raise OutOfBoundsError if the crop rectangle exceeds the image."""
    _validate("crop", image_size, rect)


def validate_placement(image_size: ImageSize, rect: Rect) -> None:
    """Raise OutOfBoundsError if the watermark placement exceeds the image."""
    _validate("watermark", image_size, rect)
