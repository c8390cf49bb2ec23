"""FastAPI dependencies exposing the objects built once by ``create_app``."""

from fastapi import Request
from mypy_boto3_s3 import S3Client

from uploads_api.config.settings import Settings
from uploads_api.uploads import UploadConfig


def get_app_settings(request: Request) -> Settings:
    """Settings dependency."""
    return request.app.state.settings


def get_s3_client(request: Request) -> S3Client:
    """S3 client dependency."""
    return request.app.state.s3_client


def get_upload_config(request: Request) -> UploadConfig:
    """Upload configuration dependency."""
    return request.app.state.upload_config
