"""Pydantic schemas for ingest responses."""

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class VideoUploadResponse(_CamelModel):
    success: bool = True
    video_url: str = Field(alias="videoUrl")


class ImageUploadResponse(_CamelModel):
    success: bool = True
    image_url: str = Field(alias="imageUrl")
    original_format: str = Field(alias="originalFormat")
    compressed_format: str = Field(alias="compressedFormat")


class ErrorResponse(_CamelModel):
    success: bool = False
    error: str


class BackendStatus(BaseModel):
    configured: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    cloudinary: BackendStatus
    imgbb: BackendStatus
