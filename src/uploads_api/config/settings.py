# src/uploads_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_UPLOAD_SIZE_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_ALLOWED_CONTENT_TYPES = ["image/jpeg", "image/png"]

# canned ACLs accepted by PutObject
CANNED_ACLS = [
    "private",
    "public-read",
    "public-read-write",
    "authenticated-read",
    "aws-exec-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from uploads_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="uploads-api",
        description="Application name"
    )

    # AWS Core Settings
    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_REGION"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Custom S3 endpoint, e.g. a moto server, LocalStack or MinIO"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="uploads",
        alias="AWS_BUCKET_NAME",
        description="S3 bucket holding the uploaded files"
    )

    # Upload Configuration
    max_upload_size_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_SIZE_BYTES,
        gt=0,
        description="Largest accepted upload, in bytes"
    )

    allowed_content_types: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_CONTENT_TYPES),
        description="MIME types accepted by POST /upload"
    )

    object_acl: Optional[str] = Field(
        default="public-read",
        description="Canned ACL applied to uploaded objects; empty to use the bucket default"
    )

    # HTTP Configuration
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("object_acl", mode="before")
    @classmethod
    def normalize_object_acl(cls, v):
        """Treat an empty ACL as 'no ACL' so the bucket's own policy applies."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("object_acl")
    @classmethod
    def validate_object_acl(cls, v):
        """Validate the ACL is one of the canned ACLs S3 understands."""
        if v is not None and v not in CANNED_ACLS:
            raise ValueError(f"Invalid object_acl: {v}. Must be one of {CANNED_ACLS}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def public_base_url(self) -> str:
        """Base URL under which objects of the bucket are publicly reachable."""
        if self.aws_endpoint_url:
            return f"{self.aws_endpoint_url.rstrip('/')}/{self.s3_bucket_name}"
        return f"https://{self.s3_bucket_name}.s3.amazonaws.com"

    def get_display_dict(self) -> dict:
        """Get the settings as a dictionary with the credentials masked.

        Returns:
            Dictionary suitable for printing
        """
        return {
            "App Name": self.app_name,
            "AWS Region": self.aws_region,
            "AWS Endpoint": self.aws_endpoint_url,
            "AWS Access Key ID": _mask(self.aws_access_key_id),
            "AWS Secret Access Key": _mask(self.aws_secret_access_key),
            "S3 Bucket": self.s3_bucket_name,
            "Max Upload Size (bytes)": self.max_upload_size_bytes,
            "Allowed Content Types": ", ".join(self.allowed_content_types),
            "Object ACL": self.object_acl or "(bucket default)",
            "CORS Origins": ", ".join(self.cors_allow_origins),
            "Log Level": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


def _mask(value: Optional[str]) -> str:
    if not value:
        return "(not set)"
    return f"{value[:4]}****"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
