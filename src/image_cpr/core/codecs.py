"""Pillow-backed decode and encode for the supported image formats."""

import io
from enum import Enum
from typing import Any, Dict, Optional

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError, EncodeError, InvalidFormatError
from .logging_config import get_logger
from .resample import to_rgba

DEFAULT_JPEG_QUALITY = 80

# Fixed PNG policy: strongest zlib level, adaptive per-row filter selection.
PNG_SAVE_OPTIONS: Dict[str, Any] = {"compress_level": 9, "optimize": True}

# Fixed WebP policy: always lossless, transparent pixels keep their colour.
WEBP_SAVE_OPTIONS: Dict[str, Any] = {"lossless": True, "exact": True}

_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    EOFError,
    ValueError,
)

logger = get_logger("image-cpr.codecs")


class ImageFormat(Enum):
    """Supported codecs, valued by their Pillow format identifier."""

    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"

    @property
    def tag(self) -> str:
        return self.name.lower()

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def is_lossy(self) -> bool:
        return self is ImageFormat.JPEG


_CONTENT_TYPES = {
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.PNG: "image/png",
    ImageFormat.WEBP: "image/webp",
}

_TAGS = {
    "jpeg": ImageFormat.JPEG,
    "jpg": ImageFormat.JPEG,
    "png": ImageFormat.PNG,
    "webp": ImageFormat.WEBP,
}

SUPPORTED_TAGS = frozenset(_TAGS)


def resolve_format(tag: Any, role: str = "input") -> ImageFormat:
    """
    Map a format tag such as "png" or "jpg" to its codec.

    Args:
        tag: Format tag, case-insensitive; ImageFormat members pass through
        role: "input" or "output", used in the error message

    Returns:
        The matching ImageFormat

    Raises:
        InvalidFormatError: If the tag is not a supported format
    """
    if isinstance(tag, ImageFormat):
        return tag
    if not isinstance(tag, str):
        raise InvalidFormatError(tag, role)
    image_format = _TAGS.get(tag.strip().lower())
    if image_format is None:
        raise InvalidFormatError(tag, role)
    return image_format


def content_type(tag: Any) -> str:
    """Return the MIME type for a format tag."""
    return resolve_format(tag, role="output").content_type


def _open(data: bytes, formats: list, source: str) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data), formats=formats)
        image.load()
        return to_rgba(image)
    except _DECODE_ERRORS as exc:
        raise DecodeError(str(exc) or type(exc).__name__, source=source) from exc


def decode(data: bytes, format_tag: Any, source: str = "input") -> Image.Image:
    """
    Decode encoded bytes of exactly the named format into an RGBA image.

    Args:
        data: Encoded image bytes
        format_tag: Format the bytes are expected to be in
        source: "input" or "watermark", used in the error message

    Returns:
        Fully loaded RGBA PIL Image

    Raises:
        InvalidFormatError: If the format tag is unknown
        DecodeError: If the codec cannot parse the bytes
    """
    image_format = resolve_format(format_tag, role="input")
    image = _open(data, [image_format.value], source)
    logger.debug(
        f"Decoded {source} {image_format.tag} image {image.width}x{image.height}"
    )
    return image


def decode_any(data: bytes, source: str = "watermark") -> Image.Image:
    """Decode bytes in any of the supported formats into an RGBA image."""
    image = _open(data, [fmt.value for fmt in ImageFormat], source)
    logger.debug(f"Decoded {source} image {image.width}x{image.height}")
    return image


def encode(image: Image.Image, format_tag: Any, quality: Optional[int] = None) -> bytes:
    """
    Encode an image with the fixed policy of the target format.

    JPEG honours ``quality`` (default 80) and drops alpha. PNG always uses
    the strongest compression. WebP is always lossless, so ``quality`` has
    no effect on it.

    Raises:
        InvalidFormatError: If the format tag is unknown
        EncodeError: If the codec cannot serialize the image
    """
    image_format = resolve_format(format_tag, role="output")

    if image_format is ImageFormat.JPEG:
        options: Dict[str, Any] = {
            "quality": DEFAULT_JPEG_QUALITY if quality is None else quality
        }
        image = image.convert("RGB")
    elif image_format is ImageFormat.PNG:
        options = dict(PNG_SAVE_OPTIONS)
    else:
        options = dict(WEBP_SAVE_OPTIONS)

    if quality is not None and not image_format.is_lossy:
        logger.debug(f"Ignoring quality={quality} for lossless {image_format.tag} output")

    output_stream = io.BytesIO()
    try:
        image.save(output_stream, format=image_format.value, **options)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(str(exc) or type(exc).__name__, image_format.tag) from exc

    return output_stream.getvalue()
