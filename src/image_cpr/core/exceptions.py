"""Custom exceptions for the image transformation pipeline."""

from __future__ import annotations

from typing import Any, Optional, Tuple


class ImageCprError(Exception):
    """Base exception for all image-cpr errors."""


class InvalidFormatError(ImageCprError):
    """Error raised when an input or output format tag is not recognized."""

    def __init__(self, tag: Any, role: str = "input") -> None:
        self.tag = tag
        self.role = role
        super().__init__(f"Invalid {role} format: {tag!r}")


class DecodeError(ImageCprError):
    """Error raised when the codec cannot parse input or watermark bytes."""

    def __init__(self, message: str, source: str = "input") -> None:
        self.source = source
        self.diagnostic = message
        super().__init__(f"Failed to decode {source} image: {message}")


class OutOfBoundsError(ImageCprError):
    """Error raised when a rectangle does not fit inside its owning image."""

    def __init__(self, target: str, rect: Any, image_size: Tuple[int, int]) -> None:
        self.target = target
        self.rect = rect
        self.image_size = image_size
        width, height = image_size
        super().__init__(
            f"{target.capitalize()} rectangle "
            f"(x={rect.x}, y={rect.y}, width={rect.width}, height={rect.height}) "
            f"exceeds image bounds {width}x{height}"
        )


class InvalidParameterError(ImageCprError):
    """Error raised for a malformed request value."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.reason = message
        super().__init__(f"Invalid parameter '{field}': {message}")


class EncodeError(ImageCprError):
    """Error raised when the codec cannot serialize the final image."""

    def __init__(self, message: str, format_tag: Optional[str] = None) -> None:
        self.format_tag = format_tag
        self.diagnostic = message
        target = f" as {format_tag}" if format_tag else ""
        super().__init__(f"Failed to encode image{target}: {message}")


class StorageError(ImageCprError):
    """Error raised when reading or writing image bytes fails."""
