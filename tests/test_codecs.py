"""Tests for the Pillow codec adapter."""

import io
from unittest.mock import patch

import pytest
from PIL import Image

from image_cpr.core.codecs import (
    DEFAULT_JPEG_QUALITY,
    ImageFormat,
    content_type,
    decode,
    decode_any,
    encode,
    resolve_format,
)
from image_cpr.core.exceptions import DecodeError, EncodeError, InvalidFormatError
from image_cpr.testing.fakes import (
    create_test_image,
    create_test_pil_image,
    decode_image,
)


class TestResolveFormat:
    """Tests for resolve_format."""

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("jpeg", ImageFormat.JPEG),
            ("jpg", ImageFormat.JPEG),
            ("JPEG", ImageFormat.JPEG),
            ("png", ImageFormat.PNG),
            ("webp", ImageFormat.WEBP),
            (ImageFormat.PNG, ImageFormat.PNG),
        ],
    )
    def test_known_tags(self, tag, expected):
        assert resolve_format(tag) is expected

    @pytest.mark.parametrize("tag", ["gif", "bmp", "", None, 42])
    def test_unknown_tags_raise(self, tag):
        """Test that unknown tags never fall back to a default codec."""
        with pytest.raises(InvalidFormatError) as exc_info:
            resolve_format(tag, role="output")
        assert exc_info.value.role == "output"
        assert exc_info.value.tag == tag

    def test_content_type(self):
        assert content_type("jpg") == "image/jpeg"
        assert content_type("png") == "image/png"
        assert content_type("webp") == "image/webp"


class TestDecode:
    """Tests for decode and decode_any."""

    @pytest.mark.parametrize("fmt", ["PNG", "JPEG", "WEBP"])
    def test_decode_returns_rgba(self, fmt):
        data = create_test_image(40, 30, fmt, mode="RGB")
        image = decode(data, fmt.lower())
        assert image.mode == "RGBA"
        assert image.size == (40, 30)

    def test_decode_synthesizes_opaque_alpha(self):
        data = create_test_image(8, 8, "JPEG", mode="RGB")
        image = decode(data, "jpeg")
        assert image.getchannel("A").getextrema() == (255, 255)

    def test_decode_with_wrong_tag_fails(self):
        """Test that the tag is authoritative: PNG bytes are not a JPEG."""
        data = create_test_image(8, 8, "PNG")
        with pytest.raises(DecodeError) as exc_info:
            decode(data, "jpeg")
        assert exc_info.value.source == "input"

    def test_decode_corrupt_bytes_keeps_diagnostic(self):
        with pytest.raises(DecodeError) as exc_info:
            decode(b"definitely not an image", "png")
        assert exc_info.value.diagnostic
        assert exc_info.value.__cause__ is not None

    def test_decode_truncated_png(self):
        data = create_test_image(50, 50, "PNG")
        with pytest.raises(DecodeError):
            decode(data[: len(data) // 2], "png")

    def test_decode_unknown_tag(self):
        with pytest.raises(InvalidFormatError):
            decode(create_test_image(8, 8, "PNG"), "tiff")

    @pytest.mark.parametrize("fmt", ["PNG", "JPEG", "WEBP"])
    def test_decode_any_supported_format(self, fmt):
        data = create_test_image(12, 6, fmt, mode="RGB")
        assert decode_any(data).size == (12, 6)

    def test_decode_any_rejects_unsupported_format(self):
        stream = io.BytesIO()
        Image.new("RGB", (4, 4)).save(stream, format="BMP")
        with pytest.raises(DecodeError) as exc_info:
            decode_any(stream.getvalue())
        assert exc_info.value.source == "watermark"


class TestEncode:
    """Tests for encode."""

    def test_png_round_trip_is_exact(self):
        image = create_test_pil_image(30, 20, color=(10, 20, 30, 128))
        decoded = decode_image(encode(image, "png"))
        assert decoded.size == (30, 20)
        assert decoded.convert("RGBA").tobytes() == image.tobytes()

    def test_webp_round_trip_is_exact(self):
        """Test that WebP output is lossless, including transparent pixels."""
        image = create_test_pil_image(30, 20, color=(10, 20, 30, 0))
        decoded = decode_image(encode(image, "webp", quality=10))
        assert decoded.convert("RGBA").tobytes() == image.tobytes()

    def test_jpeg_round_trip_preserves_dimensions(self):
        image = create_test_pil_image(33, 17)
        decoded = decode_image(encode(image, "jpeg"))
        assert decoded.format == "JPEG"
        assert decoded.mode == "RGB"
        assert decoded.size == (33, 17)

    def test_jpeg_default_quality(self):
        image = create_test_pil_image(16, 16)
        with patch.object(Image.Image, "save", autospec=True) as mock_save:
            encode(image, "jpeg")
        _, kwargs = mock_save.call_args
        assert kwargs["quality"] == DEFAULT_JPEG_QUALITY == 80

    def test_jpeg_quality_changes_output(self):
        image = create_test_pil_image(64, 64)
        assert len(encode(image, "jpeg", quality=10)) < len(encode(image, "jpeg", quality=95))

    def test_webp_ignores_quality(self):
        image = create_test_pil_image(32, 32)
        assert encode(image, "webp", quality=5) == encode(image, "webp", quality=95)

    def test_png_uses_strongest_compression(self):
        image = create_test_pil_image(16, 16)
        with patch.object(Image.Image, "save", autospec=True) as mock_save:
            encode(image, "png", quality=10)
        _, kwargs = mock_save.call_args
        assert kwargs["compress_level"] == 9
        assert kwargs["optimize"] is True
        assert "quality" not in kwargs

    def test_encode_failure_is_wrapped(self):
        image = create_test_pil_image(16, 16)
        with patch.object(Image.Image, "save", side_effect=OSError("disk on fire")):
            with pytest.raises(EncodeError) as exc_info:
                encode(image, "png")
        assert exc_info.value.format_tag == "png"
        assert "disk on fire" in str(exc_info.value)

    def test_encode_unknown_tag(self):
        with pytest.raises(InvalidFormatError) as exc_info:
            encode(create_test_pil_image(4, 4), "gif")
        assert exc_info.value.role == "output"
