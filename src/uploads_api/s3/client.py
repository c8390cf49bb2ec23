"""Creation of the S3 client and the startup connectivity probe."""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_s3 import S3Client

from uploads_api.config.settings import Settings

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> S3Client:
    """
    Create a boto3 S3 client from the application settings.

    Credentials that are not set are left to boto3's default chain; nothing is
    validated here, so missing configuration surfaces as a backend error on
    the first request.

    :param settings: The application settings.
    """
    client_kwargs = {"region_name": settings.aws_region}
    if settings.aws_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.aws_endpoint_url:
        client_kwargs["endpoint_url"] = settings.aws_endpoint_url

    logger.info(f"Creating S3 client for region {settings.aws_region}")
    if settings.aws_endpoint_url:
        logger.info(f"  Endpoint: {settings.aws_endpoint_url}")
    return boto3.client("s3", **client_kwargs)


def probe_s3_connection(s3_client: S3Client) -> bool:
    """
    List the buckets visible to the client to check that S3 is reachable.

    The result is only logged; a failure never raises.

    :param s3_client: The boto3 S3 client to probe.
    :return: True if S3 answered, False otherwise.
    """
    try:
        s3_client.list_buckets()
    except (BotoCoreError, ClientError) as err:
        logger.error(f"Error connecting to S3: {err}")
        return False
    logger.info("Successfully connected to S3")
    return True
