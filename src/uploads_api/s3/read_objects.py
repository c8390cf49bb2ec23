"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import List
from urllib.parse import quote

from mypy_boto3_s3 import S3Client


def fetch_s3_objects_metadata(bucket_name: str, s3_client: S3Client) -> List[dict]:
    """
    Fetch the metadata of the objects in an S3 bucket.

    A single ``ListObjects`` call is made. If S3 truncates the listing
    (more than 1000 keys) only the first page is returned.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: The boto3 S3 client.
    :return: The ``Contents`` entries of the listing, in S3's order.
    """
    response = s3_client.list_objects(Bucket=bucket_name)
    return response.get("Contents", [])


def build_object_url(base_url: str, object_key: str) -> str:
    """
    Build the public URL of an object.

    :param base_url: URL of the bucket, e.g. ``https://my-bucket.s3.amazonaws.com``.
    :param object_key: Key of the object in the bucket.
    """
    return f"{base_url.rstrip('/')}/{quote(object_key, safe='/~')}"
