####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UploadedFileMetadata(BaseModel):
    """Metadata of a freshly uploaded file."""
    location: str = Field(
        description="Public URL of the file.",
        json_schema_extra={"example": "https://my-bucket.s3.amazonaws.com/1700000000000-photo.png"},
    )
    key: str = Field(
        description="Key of the file in the bucket.",
        json_schema_extra={"example": "1700000000000-photo.png"},
    )
    size: int = Field(description="The size of the file in bytes.")
    mimetype: str = Field(description="The MIME type of the file.")


class PostUploadResponse(BaseModel):
    """Response model for `POST /upload`."""
    message: str = Field(description="A message about the operation.")
    file: UploadedFileMetadata

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "File uploaded successfully",
                "file": {
                    "location": "https://my-bucket.s3.amazonaws.com/1700000000000-photo.png",
                    "key": "1700000000000-photo.png",
                    "size": 512000,
                    "mimetype": "image/png",
                },
            }
        }
    )


class FileListItem(BaseModel):
    """One entry of the `GET /files` response."""
    url: str = Field(description="Public URL of the file.")
    key: str = Field(description="Key of the file in the bucket.")
    size: int = Field(description="The size of the file in bytes.")
    last_modified: datetime = Field(
        alias="lastModified",
        description="The last modified date of the file.",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://my-bucket.s3.amazonaws.com/1700000000000-photo.png",
                "key": "1700000000000-photo.png",
                "size": 512000,
                "lastModified": "2024-01-01T00:00:00Z",
            }
        },
    )


class DeleteFileResponse(BaseModel):
    """Response model for `DELETE /files/:filename`."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str = Field(description="Short summary of what failed.")
    details: str = Field(description="The underlying error message.")
