"""Resizing with a single fixed Lanczos kernel."""

from typing import Optional

from PIL import Image

from .exceptions import InvalidParameterError

# Lanczos with a support radius of 3; the only filter the pipeline uses.
RESAMPLE_FILTER = Image.Resampling.LANCZOS

# Pillow stores dimensions as signed C ints.
MAX_DIMENSION = 2**31 - 1


def to_rgba(image: Image.Image) -> Image.Image:
    """Return ``image`` in RGBA mode, synthesizing opaque alpha if needed."""
    if image.mode == "RGBA":
        return image
    return image.convert("RGBA")


def max_target_pixels() -> Optional[int]:
    """Largest target area accepted, following Pillow's decompression bomb limit."""
    if Image.MAX_IMAGE_PIXELS is None:
        return None
    return 2 * Image.MAX_IMAGE_PIXELS


def _check_target(width: int, height: int) -> None:
    for field, value in (("size.width", width), ("size.height", height)):
        if value < 1:
            raise InvalidParameterError(field, f"must be at least 1, got {value}")
        if value > MAX_DIMENSION:
            raise InvalidParameterError(
                field, f"must be at most {MAX_DIMENSION}, got {value}"
            )

    limit = max_target_pixels()
    if limit is not None and width * height > limit:
        raise InvalidParameterError(
            "size", f"{width}x{height} exceeds the {limit} pixel limit"
        )


def resize(image: Image.Image, width: int, height: int) -> Image.Image:
    """
    Resample an image to ``width`` x ``height`` using Lanczos.

    The source is converted to RGBA first. Zero-sized targets are rejected
    because none of the supported codecs can encode an empty image, and
    targets larger than Pillow can allocate are rejected up front.

    Args:
        image: Source PIL Image
        width: Target width in pixels
        height: Target height in pixels

    Returns:
        New RGBA PIL Image of exactly the requested size

    Raises:
        InvalidParameterError: If the target is empty, too large, or
            cannot be allocated
    """
    _check_target(width, height)

    rgba = to_rgba(image)
    try:
        return rgba.resize((width, height), RESAMPLE_FILTER)
    except (OverflowError, ValueError, MemoryError) as exc:
        raise InvalidParameterError(
            "size", f"cannot resample to {width}x{height}: {exc}"
        ) from exc
