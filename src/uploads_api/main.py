from contextlib import asynccontextmanager
from textwrap import dedent
import logging
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from mypy_boto3_s3 import S3Client
from starlette.exceptions import HTTPException as StarletteHTTPException

from uploads_api.config.settings import Settings
from uploads_api.errors import (
    UploadsApiError,
    handle_broad_exceptions,
    handle_http_exceptions,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
    handle_uploads_api_errors,
)
from uploads_api.routers.files import router as files_router
from uploads_api.routers.health import router as health_router
from uploads_api.s3.client import create_s3_client, probe_s3_connection
from uploads_api.uploads import UploadConfig

# Set up logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Probe S3 once at startup. The outcome is logged and never blocks startup."""
    await run_in_threadpool(probe_s3_connection, app.state.s3_client)
    yield


def create_app(
    settings: Optional[Settings] = None,
    s3_client: Optional[S3Client] = None,
) -> FastAPI:
    """Create a FastAPI application.

    :param settings: Application settings; read from the environment if omitted.
    :param s3_client: S3 client to use; built from ``settings`` if omitted.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Uploads API",
        summary="Store images in an S3 bucket",
        version="v1",
        description=dedent(
            """\
        Upload `.jpg` and `.png` images to an S3 bucket, list them and delete them.

        | Route | Notes |
        | --- | --- |
        | `POST /upload` | multipart form with a single `file` field, 10 MiB max |
        | `GET /files` | every object of the bucket with its public URL |
        | `DELETE /files/{filename}` | succeeds whether or not the key exists |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],  # Allow all methods
        allow_headers=["*"],  # Allow all headers
    )
    app.state.settings = settings
    app.state.s3_client = s3_client or create_s3_client(settings)
    app.state.upload_config = UploadConfig.from_settings(settings)
    logger.info(f"Serving bucket {settings.s3_bucket_name}")

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=UploadsApiError,
        handler=handle_uploads_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=StarletteHTTPException,
        handler=handle_http_exceptions,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=3000)
