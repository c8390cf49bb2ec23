"""
Upload handling: turn the ``file`` part of a multipart request into one S3 object.

The content type is checked before any byte is read and the size cap is
enforced while reading, so a rejected upload never reaches the bucket.
"""

import logging
import mimetypes
import re
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from mypy_boto3_s3 import S3Client

from uploads_api.config.settings import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_UPLOAD_SIZE_BYTES,
    Settings,
)
from uploads_api.errors import (
    UPLOAD_ERROR_SUMMARY,
    BackendError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)
from uploads_api.s3.read_objects import build_object_url
from uploads_api.s3.write_objects import upload_s3_object

logger = logging.getLogger(__name__)

FILE_FIELD_NAME = "file"
READ_CHUNK_SIZE = 1024 * 1024

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class UploadConfig:
    """Configuration for file uploads.

    Attributes:
        bucket_name: S3 bucket receiving the uploads
        base_url: Public URL of the bucket, used to build object locations
        max_file_size: Maximum file size in bytes (default: 10MB)
        allowed_content_types: MIME types accepted
        acl: Canned ACL of new objects, None for the bucket default
    """

    bucket_name: str
    base_url: str
    max_file_size: int = DEFAULT_MAX_UPLOAD_SIZE_BYTES
    allowed_content_types: Tuple[str, ...] = tuple(DEFAULT_ALLOWED_CONTENT_TYPES)
    acl: Optional[str] = "public-read"

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadConfig":
        return cls(
            bucket_name=settings.s3_bucket_name,
            base_url=settings.public_base_url,
            max_file_size=settings.max_upload_size_bytes,
            allowed_content_types=tuple(t.lower() for t in settings.allowed_content_types),
            acl=settings.object_acl,
        )


@dataclass(frozen=True)
class UploadedObject:
    """The object created by a successful upload."""

    location: str
    key: str
    size: int
    mimetype: str


def generate_object_key(filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build the key of an uploaded object: ``<epoch-millis>-<filename>``.

    Every run of whitespace in the filename becomes a single hyphen. Two
    uploads of the same name within the same millisecond get the same key.

    :param filename: The original filename sent by the client.
    :param timestamp_ms: Milliseconds since the epoch; defaults to now.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{timestamp_ms}-{_WHITESPACE_RUN.sub('-', filename)}"


def normalize_content_type(content_type: Optional[str]) -> str:
    """Strip parameters (``; charset=...``) and lowercase a MIME type."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def describe_allowed_types(allowed_content_types: Sequence[str]) -> str:
    """Human readable list of allowed types, e.g. ``.jpg and .png``."""
    names = []
    for content_type in allowed_content_types:
        extension = mimetypes.guess_extension(content_type)
        # guess_extension prefers ".jpe" on some platforms
        if content_type == "image/jpeg":
            extension = ".jpg"
        names.append(extension or content_type)
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def check_content_type(content_type: str, config: UploadConfig) -> None:
    if content_type not in config.allowed_content_types:
        raise UnsupportedMediaTypeError(
            f"Only {describe_allowed_types(config.allowed_content_types)} files are allowed!"
        )


async def read_upload(upload: UploadFile, max_file_size: int) -> bytes:
    """
    Read an uploaded file, failing as soon as it grows past ``max_file_size``.

    :raises PayloadTooLargeError: if the file is larger than the cap.
    """
    chunks = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_file_size:
            raise PayloadTooLargeError()
        chunks.append(chunk)
    return b"".join(chunks)


async def store_upload(
    upload: UploadFile,
    s3_client: S3Client,
    config: UploadConfig,
    timestamp_ms: Optional[int] = None,
) -> UploadedObject:
    """
    Validate an uploaded file and store it in the bucket.

    :param upload: The ``file`` part of the multipart request.
    :param s3_client: The boto3 S3 client.
    :param config: Upload limits and destination.
    :param timestamp_ms: Request time in epoch milliseconds; defaults to now.
    :raises UnsupportedMediaTypeError: if the MIME type is not allowed.
    :raises PayloadTooLargeError: if the file exceeds the size cap.
    :raises BackendError: if S3 rejects the write (status 400).
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    content_type = normalize_content_type(upload.content_type)
    check_content_type(content_type, config)

    file_bytes = await read_upload(upload, config.max_file_size)
    object_key = generate_object_key(upload.filename or "", timestamp_ms)

    try:
        await run_in_threadpool(
            upload_s3_object,
            bucket_name=config.bucket_name,
            object_key=object_key,
            file_content=file_bytes,
            s3_client=s3_client,
            content_type=content_type,
            acl=config.acl,
            metadata={"fieldname": FILE_FIELD_NAME},
        )
    except (BotoCoreError, ClientError) as err:
        raise BackendError.from_exception(UPLOAD_ERROR_SUMMARY, err, status_code=400) from err

    logger.info(f"Uploaded {object_key} ({len(file_bytes)} bytes) to bucket {config.bucket_name}")
    return UploadedObject(
        location=build_object_url(config.base_url, object_key),
        key=object_key,
        size=len(file_bytes),
        mimetype=content_type,
    )
