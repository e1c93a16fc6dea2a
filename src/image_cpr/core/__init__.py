"""Core transformation pipeline and shared components for image-cpr."""

from .logging_config import get_logger, set_debug, setup_logger
from .exceptions import (
    ImageCprError,
    InvalidFormatError,
    DecodeError,
    OutOfBoundsError,
    InvalidParameterError,
    EncodeError,
    StorageError,
)
from .models import PipelineRequest, Rect, Size, WatermarkSpec
from .codecs import ImageFormat, content_type, decode, decode_any, encode, resolve_format
from .geometry import fits, validate_crop, validate_placement
from .resample import resize, to_rgba
from .compositor import blend, composite
from .pipeline import ImagePipeline, crop, transform
from .config import load_request, parse_request, read_config

__all__ = [
    "PipelineRequest",
    "Rect",
    "Size",
    "WatermarkSpec",
    "ImageFormat",
    "resolve_format",
    "content_type",
    "decode",
    "decode_any",
    "encode",
    "fits",
    "validate_crop",
    "validate_placement",
    "resize",
    "to_rgba",
    "blend",
    "composite",
    "crop",
    "ImagePipeline",
    "transform",
    "parse_request",
    "read_config",
    "load_request",
    "setup_logger",
    "get_logger",
    "set_debug",
    "ImageCprError",
    "InvalidFormatError",
    "DecodeError",
    "OutOfBoundsError",
    "InvalidParameterError",
    "EncodeError",
    "StorageError",
]
