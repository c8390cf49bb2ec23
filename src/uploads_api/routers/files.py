import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from mypy_boto3_s3 import S3Client

from uploads_api.config.settings import Settings
from uploads_api.dependencies import get_app_settings, get_s3_client, get_upload_config
from uploads_api.errors import BackendError, MissingFileError
from uploads_api.s3.delete_objects import delete_s3_object
from uploads_api.s3.read_objects import build_object_url, fetch_s3_objects_metadata
from uploads_api.schemas import (
    DeleteFileResponse,
    ErrorResponse,
    FileListItem,
    PostUploadResponse,
    UploadedFileMetadata,
)
from uploads_api.uploads import UploadConfig, store_upload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/upload",
    response_model=PostUploadResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def upload_file(
    file: Optional[UploadFile] = File(None, description="A .jpg or .png image"),
    s3_client: S3Client = Depends(get_s3_client),
    upload_config: UploadConfig = Depends(get_upload_config),
) -> PostUploadResponse:
    """
    Upload an image to the bucket.

    The object key is the upload time in epoch milliseconds followed by the
    original filename, with whitespace replaced by hyphens.
    """
    if file is None:
        raise MissingFileError()

    uploaded = await store_upload(file, s3_client, upload_config)

    return PostUploadResponse(
        message="File uploaded successfully",
        file=UploadedFileMetadata(
            location=uploaded.location,
            key=uploaded.key,
            size=uploaded.size,
            mimetype=uploaded.mimetype,
        ),
    )


@router.get(
    "/files",
    response_model=List[FileListItem],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def list_files(
    settings: Settings = Depends(get_app_settings),
    s3_client: S3Client = Depends(get_s3_client),
) -> List[FileListItem]:
    """
    List the files in the bucket, in the order S3 returns them.

    Only the first page of the listing is returned.
    """
    try:
        objects = await run_in_threadpool(
            fetch_s3_objects_metadata, settings.s3_bucket_name, s3_client
        )
    except (BotoCoreError, ClientError) as err:
        raise BackendError.from_exception("Error retrieving files", err) from err

    return [
        FileListItem(
            url=build_object_url(settings.public_base_url, obj["Key"]),
            key=obj["Key"],
            size=obj["Size"],
            last_modified=obj["LastModified"],
        )
        for obj in objects
    ]


@router.delete(
    "/files/{filename:path}",
    response_model=DeleteFileResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def delete_file(
    filename: str = Path(..., min_length=1, description="The key of the file to delete, slashes included"),
    settings: Settings = Depends(get_app_settings),
    s3_client: S3Client = Depends(get_s3_client),
) -> DeleteFileResponse:
    """
    Delete a file from the bucket.

    Deleting a key that does not exist also succeeds.
    """
    try:
        await run_in_threadpool(
            delete_s3_object, settings.s3_bucket_name, filename, s3_client
        )
    except (BotoCoreError, ClientError) as err:
        raise BackendError.from_exception("Error deleting file", err) from err

    logger.info(f"Deleted {filename} from bucket {settings.s3_bucket_name}")
    return DeleteFileResponse(message="File deleted successfully")
