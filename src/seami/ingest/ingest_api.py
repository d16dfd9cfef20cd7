"""HTTP routes for ingest operations."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .ingest_models import ErrorKind, MediaKind, UploadJob
from .ingest_schemas import (
    BackendStatus,
    ErrorResponse,
    HealthResponse,
    ImageUploadResponse,
    VideoUploadResponse,
)
from .ingest_service import IngestService

router = APIRouter(tags=["ingest"])
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TRANSCODE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.PUBLISH: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.IO: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_ingest_service(request: Request) -> IngestService:
    """Fetch ingest service from application state."""
    try:
        return request.app.state.ingest_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("IngestService is not configured") from exc


def _json(model: BaseModel, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(by_alias=True))


def _error(message: str, status_code: int) -> JSONResponse:
    return _json(ErrorResponse(error=message), status_code)


async def _run_pipeline(
    service: IngestService, kind: MediaKind, upload: UploadFile
) -> UploadJob | JSONResponse:
    try:
        job = await service.ingest_upload(kind, upload)
    except Exception:
        logger.exception("ingest.unexpected_error", extra={"media_kind": kind.value})
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
    finally:
        await upload.close()

    result = job.result
    if result is None or not result.ok:
        kind_failed = result.error_kind if result and result.error_kind else ErrorKind.INTERNAL
        message = result.message if result and result.message else "Processing failed"
        return _error(message, ERROR_STATUS[kind_failed])
    return job


@router.post("/upload")
async def upload_video(
    video: UploadFile | None = File(None),
    service: IngestService = Depends(get_ingest_service),
) -> JSONResponse:
    """Compress a video and publish it to the media store."""
    if video is None or not video.filename:
        logger.warning("ingest.invalid_request_missing_file", extra={"field": "video"})
        return _error("No video file provided", status.HTTP_400_BAD_REQUEST)

    outcome = await _run_pipeline(service, MediaKind.VIDEO, video)
    if isinstance(outcome, JSONResponse):
        return outcome
    return _json(VideoUploadResponse(video_url=outcome.result.url))


@router.post("/upload-image")
async def upload_image(
    image: UploadFile | None = File(None),
    service: IngestService = Depends(get_ingest_service),
) -> JSONResponse:
    """Compress an image to WebP and publish it to the image host."""
    if image is None or not image.filename:
        logger.warning("ingest.invalid_request_missing_file", extra={"field": "image"})
        return _error("No image file provided", status.HTTP_400_BAD_REQUEST)

    outcome = await _run_pipeline(service, MediaKind.IMAGE, image)
    if isinstance(outcome, JSONResponse):
        return outcome
    return _json(
        ImageUploadResponse(
            image_url=outcome.result.url,
            original_format=outcome.original_extension,
            compressed_format=service.image_transform.output_suffix.lstrip("."),
        )
    )


@router.get("/health")
async def health(service: IngestService = Depends(get_ingest_service)) -> JSONResponse:
    """Report whether the external store credentials are present."""
    publishers = service.publishers
    return _json(
        HealthResponse(
            cloudinary=BackendStatus(configured=publishers.video.configured),
            imgbb=BackendStatus(configured=publishers.image.configured),
        )
    )
