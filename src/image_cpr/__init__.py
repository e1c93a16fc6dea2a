"""image-cpr: crop, resize, watermark and re-encode a single image."""

__version__ = "0.1.0"

from .core import (  # noqa: E402
    DecodeError,
    EncodeError,
    ImageCprError,
    ImagePipeline,
    InvalidFormatError,
    InvalidParameterError,
    OutOfBoundsError,
    PipelineRequest,
    Rect,
    Size,
    StorageError,
    WatermarkSpec,
    load_request,
    parse_request,
    transform,
)

__all__ = [
    "__version__",
    "transform",
    "parse_request",
    "load_request",
    "ImagePipeline",
    "PipelineRequest",
    "Rect",
    "Size",
    "WatermarkSpec",
    "ImageCprError",
    "InvalidFormatError",
    "DecodeError",
    "OutOfBoundsError",
    "InvalidParameterError",
    "EncodeError",
    "StorageError",
]
