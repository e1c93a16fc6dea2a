"""Alpha compositing of a watermark image onto a base image."""

import numpy as np
from PIL import Image

from .codecs import decode_any
from .geometry import validate_placement
from .models import WatermarkSpec
from .resample import resize, to_rgba


def blend(
    base: Image.Image,
    overlay: Image.Image,
    x: int,
    y: int,
    opacity: float = 1.0,
    use_source_alpha: bool = False,
) -> Image.Image:
    """
    Blend ``overlay`` onto ``base`` with its top-left corner at (x, y).

    Only the colour channels change; the base alpha channel is kept as is.
    Overlay pixels that land outside the base are skipped.

    Args:
        base: Base image
        overlay: Image to blend on top
        x: Horizontal offset of the overlay in base pixels
        y: Vertical offset of the overlay in base pixels
        opacity: Multiplier for the overlay alpha, in [0, 1]
        use_source_alpha: Use the overlay alpha verbatim and ignore opacity

    Returns:
        New RGBA PIL Image
    """
    base_pixels = np.array(to_rgba(base), dtype=np.uint8)
    overlay_pixels = np.asarray(to_rgba(overlay), dtype=np.uint8)

    base_height, base_width = base_pixels.shape[:2]
    visible_width = max(0, min(overlay_pixels.shape[1], base_width - x))
    visible_height = max(0, min(overlay_pixels.shape[0], base_height - y))

    if visible_width and visible_height:
        region = base_pixels[y : y + visible_height, x : x + visible_width]
        source = overlay_pixels[:visible_height, :visible_width]

        alpha = source[..., 3]
        if not use_source_alpha:
            alpha = (alpha.astype(np.float32) * np.float32(opacity)).astype(np.uint8)

        weight = alpha.astype(np.float32)[..., np.newaxis] / np.float32(255.0)
        blended = region[..., :3].astype(np.float32) * (
            np.float32(1.0) - weight
        ) + source[..., :3].astype(np.float32) * weight

        region[..., :3] = np.clip(blended, 0, 255).astype(np.uint8)

    return Image.fromarray(base_pixels)


def composite(base: Image.Image, watermark: WatermarkSpec) -> Image.Image:
    """
    Decode, fit and blend a watermark onto ``base``.

    Raises:
        DecodeError: If the watermark bytes are not a supported image
        OutOfBoundsError: If the placement rectangle exceeds the base image
    """
    mark = decode_any(watermark.source_bytes, source="watermark")

    placement = watermark.placement
    validate_placement(base.size, placement)

    if mark.size != (placement.width, placement.height):
        mark = resize(mark, placement.width, placement.height)

    return blend(
        base,
        mark,
        placement.x,
        placement.y,
        opacity=watermark.opacity,
        use_source_alpha=watermark.use_source_alpha,
    )
