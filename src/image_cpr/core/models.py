"""Request data models for the image transformation pipeline."""

import base64
import binascii
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Geometry is carried as unsigned 32-bit values.
U32_MAX = 2**32 - 1


class Rect(BaseModel):
    """Pixel rectangle anchored at its top-left corner."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0, le=U32_MAX)
    y: int = Field(ge=0, le=U32_MAX)
    width: int = Field(ge=1, le=U32_MAX)
    height: int = Field(ge=1, le=U32_MAX)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def as_box(self) -> tuple:
        """Return the (left, upper, right, lower) box Pillow expects."""
        return (self.x, self.y, self.right, self.bottom)


class Size(BaseModel):
    """Target dimensions for a resize."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=1, le=U32_MAX)
    height: int = Field(ge=1, le=U32_MAX)


class WatermarkSpec(BaseModel):
    """Watermark image and how to blend it onto the base image.

    Like every model here, direct construction raises ValidationError;
    pass a mapping through ``parse_request`` for InvalidParameterError.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_bytes: bytes = Field(alias="content", min_length=1)
    placement: Rect = Field(alias="position")
    opacity_percent: float = Field(default=100.0, alias="opacity", ge=0.0, le=100.0)
    use_source_alpha: bool = Field(default=False, alias="use_watermark_alpha")

    @field_validator("source_bytes", mode="before")
    @classmethod
    def _decode_base64_content(cls, value: Any) -> Any:
        # JSON configs cannot carry raw bytes, so text content is base64.
        if isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ValueError(f"content is not valid base64: {exc}") from exc
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        # A serialized Uint8Array arrives as a list of ints.
        if isinstance(value, list):
            try:
                return bytes(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"content must be a byte array: {exc}") from exc
        return value

    @field_validator("placement", mode="before")
    @classmethod
    def _placement_from_sequence(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 4:
                raise ValueError(
                    "position must be an array of 4 numbers [x, y, width, height]"
                )
            x, y, width, height = value
            return {"x": x, "y": y, "width": width, "height": height}
        return value

    @property
    def opacity(self) -> float:
        """Opacity normalized to [0, 1]."""
        return self.opacity_percent / 100.0


class PipelineRequest(BaseModel):
    """A single, read-only transformation request.

    Building the model directly raises pydantic's ValidationError on bad
    values. ``parse_request``, ``transform`` and ``ImagePipeline.run``
    accept the same fields as a mapping and raise InvalidParameterError
    instead.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    input_format: str = Field(alias="format", min_length=1)
    crop: Optional[Rect] = None
    target_size: Optional[Size] = Field(default=None, alias="size")
    watermark: Optional[WatermarkSpec] = None
    output_format: Optional[str] = None
    quality: Optional[int] = Field(default=None, ge=0, le=100)

    @property
    def resolved_output_format(self) -> str:
        """Output format tag, falling back to the input format."""
        return self.output_format or self.input_format
