"""Orchestration of the decode → crop → resize → watermark → encode pipeline."""

from typing import Any, Mapping, Optional, Union

from PIL import Image

from .codecs import decode, encode, resolve_format
from .compositor import composite
from .config import parse_request
from .geometry import validate_crop
from .models import PipelineRequest, Rect
from .observability import LogContext, MetricsCollector, StructuredLogger, track_stage
from .protocols import LoggerProtocol
from .resample import resize


def crop(image: Image.Image, rect: Rect) -> Image.Image:
    """
    Cut ``rect`` out of ``image``.

    Raises:
        OutOfBoundsError: If the rectangle exceeds the image
    """
    validate_crop(image.size, rect)
    return image.crop(rect.as_box())


class ImagePipeline:
    """Runs a PipelineRequest against encoded image bytes.

    Stages run in a fixed order and the first failure aborts the run with
    that stage's error. Optional stages without configuration are skipped.
    """

    def __init__(
        self,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._logger = logger or StructuredLogger()
        self._metrics_collector = metrics_collector

    def _stage(self, name: str, context: LogContext):
        return track_stage(name, self._logger, context, self._metrics_collector)

    def run(
        self, input_bytes: bytes, request: Union[PipelineRequest, Mapping[str, Any]]
    ) -> bytes:
        """
        Transform ``input_bytes`` according to ``request``.

        A plain mapping is validated with ``parse_request`` first, so bad
        values surface as InvalidParameterError.
        """
        request = parse_request(request)
        input_format = resolve_format(request.input_format, role="input")
        output_format = resolve_format(request.resolved_output_format, role="output")

        context = LogContext(component="image_pipeline").with_metadata(
            input_format=input_format.tag, output_format=output_format.tag
        )

        with self._stage("decode", context):
            image = decode(input_bytes, input_format)

        if request.crop is not None:
            with self._stage("crop", context.with_metadata(size=_dims(image))):
                image = crop(image, request.crop)

        if request.target_size is not None:
            with self._stage("resize", context.with_metadata(size=_dims(image))):
                image = resize(image, request.target_size.width, request.target_size.height)

        if request.watermark is not None:
            with self._stage("watermark", context.with_metadata(size=_dims(image))):
                image = composite(image, request.watermark)

        with self._stage("encode", context.with_metadata(size=_dims(image))):
            output_bytes = encode(image, output_format, request.quality)

        self._logger.debug(
            "Transformed image", context, output_bytes=len(output_bytes)
        )
        return output_bytes


def _dims(image: Image.Image) -> str:
    return f"{image.width}x{image.height}"


def transform(
    input_bytes: bytes, request: Union[PipelineRequest, Mapping[str, Any]]
) -> bytes:
    """
    Decode, optionally crop, resize and watermark, then re-encode an image.

    Args:
        input_bytes: Encoded image in ``request.input_format``
        request: Validated transformation request, or a configuration
            mapping accepted by ``parse_request``

    Returns:
        Encoded bytes in the resolved output format

    Raises:
        InvalidFormatError, DecodeError, OutOfBoundsError,
        InvalidParameterError, EncodeError
    """
    return ImagePipeline().run(input_bytes, request)
