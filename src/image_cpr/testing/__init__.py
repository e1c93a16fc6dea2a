"""Testing utilities and fakes for image-cpr."""

from .fakes import (
    FakeS3Client,
    FakeLogger,
    S3Object,
    S3Bucket,
    create_test_image,
    create_test_pil_image,
    decode_image,
    encode_solid,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "create_test_pil_image",
    "decode_image",
    "encode_solid",
    "setup_test_s3_environment",
]
