"""Reading and writing image bytes from local paths or S3 URIs."""

from pathlib import Path
from typing import Any, Optional, Tuple

import boto3

from .core.error_handling import retry_storage_operation, with_error_handling
from .core.exceptions import StorageError
from .core.logging_config import get_logger
from .core.protocols import S3ClientProtocol

S3_SCHEME = "s3://"


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


def parse_s3_uri(uri: str) -> Optional[Tuple[str, str]]:
    """
    Split an ``s3://bucket/key`` URI.

    Returns:
        (bucket, key), or None when ``uri`` is not an S3 URI

    Raises:
        StorageError: If the URI has no bucket or no key
    """
    if not uri.startswith(S3_SCHEME):
        return None
    bucket, _, key = uri[len(S3_SCHEME) :].partition("/")
    if not bucket or not key:
        raise StorageError(f"Malformed S3 URI: {uri}")
    return bucket, key


def uri_suffix(uri: str) -> str:
    """Return the lowercase extension of a path or URI, without the dot."""
    return Path(uri.split("?", 1)[0]).suffix.lstrip(".").lower()


@retry_storage_operation()
@with_error_handling
def _download_s3_object(s3_client: S3ClientProtocol, bucket: str, key: str) -> bytes:
    response = s3_client.get_object(Bucket=bucket, Key=key)
    return response["Body"].read()


@retry_storage_operation()
@with_error_handling
def _upload_s3_object(
    s3_client: S3ClientProtocol, bucket: str, key: str, data: bytes, content_type: str
) -> None:
    s3_client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)


@with_error_handling
def _read_file(path: Path) -> bytes:
    return path.read_bytes()


@with_error_handling
def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class ByteStorage:
    """Byte I/O over local files and S3, creating the S3 client on demand."""

    def __init__(self, s3_client: Optional[S3ClientProtocol] = None):
        self._s3_client = s3_client
        self._logger = get_logger("image-cpr.storage")

    @property
    def s3_client(self) -> S3ClientProtocol:
        if self._s3_client is None:
            self._s3_client = S3ClientFactory.create_s3_client()
        return self._s3_client

    def read(self, uri: str) -> bytes:
        """Read all bytes from a local path or ``s3://`` URI."""
        location = parse_s3_uri(uri)
        if location is None:
            self._logger.debug(f"Reading {uri}")
            return _read_file(Path(uri))

        bucket, key = location
        self._logger.debug(f"Downloading s3://{bucket}/{key}")
        return _download_s3_object(self.s3_client, bucket, key)

    def write(self, uri: str, data: bytes, content_type: str) -> None:
        """Write bytes to a local path or ``s3://`` URI."""
        location = parse_s3_uri(uri)
        if location is None:
            self._logger.debug(f"Writing {len(data)} bytes to {uri}")
            _write_file(Path(uri), data)
            return

        bucket, key = location
        self._logger.debug(f"Uploading {len(data)} bytes to s3://{bucket}/{key}")
        _upload_s3_object(self.s3_client, bucket, key, data, content_type)
