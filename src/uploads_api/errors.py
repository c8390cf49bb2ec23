"""Exceptions raised by the Uploads API and the handlers that render them as JSON.

Every error response has the same shape: ``{"error": <summary>, "details": <message>}``.
"""

import logging
from typing import Optional

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

UPLOAD_ERROR_SUMMARY = "Error uploading file"


class UploadsApiError(Exception):
    """Base exception carrying the ``error`` summary, the ``details`` and an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, details: str, status_code: Optional[int] = None):
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(f"{error}: {details}")

    def to_dict(self) -> dict:
        return {"error": self.error, "details": self.details}


class UploadValidationError(UploadsApiError):
    """The request itself is unacceptable: missing file, wrong type, too large."""

    status_code = status.HTTP_400_BAD_REQUEST


class MissingFileError(UploadValidationError):
    def __init__(self):
        super().__init__("No file provided", "Please select a file to upload")


class UnsupportedMediaTypeError(UploadValidationError):
    def __init__(self, details: str):
        super().__init__(UPLOAD_ERROR_SUMMARY, details)


class PayloadTooLargeError(UploadValidationError):
    def __init__(self, details: str = "File too large"):
        super().__init__(UPLOAD_ERROR_SUMMARY, details)


class BackendError(UploadsApiError):
    """Any failure reported by the storage backend (network, permissions, not found)."""

    @classmethod
    def from_exception(
        cls, error: str, exc: Exception, status_code: Optional[int] = None
    ) -> "BackendError":
        return cls(error=error, details=str(exc), status_code=status_code)


async def handle_uploads_api_errors(request: Request, exc: UploadsApiError) -> JSONResponse:
    """Render an :class:`UploadsApiError` as ``{error, details}``."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) as ``{error, details}``."""
    logger.error(f"{request.method} {request.url.path} failed: {exc.status_code} {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "details": f"{request.method} {request.url.path}"},
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation_errors(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests (e.g. a text value in the ``file`` field) as 400s."""
    messages = [
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.error(f"Invalid request to {request.url.path}: {messages}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": "; ".join(messages)},
    )


async def handle_pydantic_validation_errors(
    request: Request, exc: pydantic.ValidationError
) -> JSONResponse:
    """Response models that fail to validate are server bugs, not client errors."""
    logger.error(f"Response validation failed for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "details": "; ".join(error["msg"] for error in exc.errors()),
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        logger.exception(err)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "details": str(err)},
        )
