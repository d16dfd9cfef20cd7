"""Dependency wiring helpers."""

from fastapi import FastAPI

from .config import AppConfig
from .ingest.ingest_api import router as ingest_router
from .ingest.ingest_service import IngestService
from .ingest.validation import UploadValidator
from .media.temp_media_store import TempMediaStore
from .publishers.publishers_factory import PublisherRegistry, create_publishers
from .transforms import ImageTransform, VideoTransform


def build_ingest_service(
    config: AppConfig, *, publishers: PublisherRegistry | None = None
) -> IngestService:
    """Construct the pipeline from explicit configuration."""
    temp_store = TempMediaStore(
        paths=config.staging,
        chunk_size=config.ingest_limits.chunk_size_bytes,
        absolute_cap_bytes=config.ingest_limits.absolute_cap_bytes,
    )
    video_transform = VideoTransform(
        spec=config.video_spec,
        ffmpeg_path=config.ffmpeg_path,
        loglevel=config.ffmpeg_loglevel,
        timeout_seconds=config.transform_timeout_seconds,
    )
    image_transform = ImageTransform(
        spec=config.image_spec,
        timeout_seconds=config.transform_timeout_seconds,
    )
    return IngestService(
        store=temp_store,
        validator=UploadValidator(config.ingest_limits),
        video_transform=video_transform,
        image_transform=image_transform,
        publishers=publishers or create_publishers(config),
    )


def include_routers(
    app: FastAPI, config: AppConfig, *, publishers: PublisherRegistry | None = None
) -> None:
    """Mount module routers and attach services."""
    ingest_service = build_ingest_service(config, publishers=publishers)

    app.state.config = config
    app.state.ingest_service = ingest_service
    app.state.temp_store = ingest_service.store

    app.include_router(ingest_router)
