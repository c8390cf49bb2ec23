"""Functions for writing objects to an S3 bucket--the "C" and "U" in CRUD."""

from typing import Optional

from mypy_boto3_s3 import S3Client


def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: bytes,
    s3_client: S3Client,
    content_type: Optional[str] = None,
    acl: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> None:
    """
    Upload a file to an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: The content of the file to upload.
    :param s3_client: The boto3 S3 client.
    :param content_type: The MIME type of the file, e.g. "image/png".
    :param acl: Canned ACL for the new object, e.g. "public-read". None keeps the bucket default.
    :param metadata: User metadata stored with the object.
    """
    put_kwargs = {
        "Bucket": bucket_name,
        "Key": object_key,
        "Body": file_content,
        "ContentType": content_type or "application/octet-stream",
    }
    if acl:
        put_kwargs["ACL"] = acl
    if metadata:
        put_kwargs["Metadata"] = metadata
    s3_client.put_object(**put_kwargs)
