from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from mypy_boto3_s3 import S3Client

from uploads_api.config.settings import Settings
from uploads_api.dependencies import get_app_settings, get_s3_client
from uploads_api.s3.client import probe_s3_connection

router = APIRouter()


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_app_settings),
    s3_client: S3Client = Depends(get_s3_client),
):
    """
    Health check endpoint for monitoring API status and storage reachability.

    Always answers 200; an unreachable S3 shows up as a "degraded" status.
    """
    health_status = {
        "status": "ok",
        "bucket": settings.s3_bucket_name,
        "components": {
            "api": "ready",
            "storage": "ready",
        },
        "ready": True,
    }

    if not await run_in_threadpool(probe_s3_connection, s3_client):
        health_status["components"]["storage"] = "unreachable"
        health_status["status"] = "degraded"
        health_status["ready"] = False

    return health_status
