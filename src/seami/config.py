"""Application configuration builder."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

ALLOWED_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "bmp", "tiff", "webp")
CLOUDINARY_FOLDER = "seami_compressed"
IMGBB_ENDPOINT = "https://api.imgbb.com/1/upload"


@dataclass(frozen=True, slots=True)
class VideoTransformSpec:
    """Target parameters for video derivatives."""

    max_width: int = 1280
    max_height: int = 720
    frame_rate: int = 30
    video_bitrate: str = "800k"
    letterbox: bool = True
    video_codec: str = "libx264"
    audio_codec: str = "aac"
    container_suffix: str = ".mp4"


@dataclass(frozen=True, slots=True)
class ImageTransformSpec:
    """Target parameters for image derivatives."""

    format: str = "webp"
    quality: int = 85
    max_width: int = 800
    max_height: int = 800
    upscale: bool = False

    @property
    def suffix(self) -> str:
        return f".{self.format}"


VIDEO_SPEC = VideoTransformSpec()
IMAGE_SPEC = ImageTransformSpec()


@dataclass(slots=True)
class StagingPaths:
    root: Path


@dataclass(slots=True)
class IngestLimits:
    allowed_image_extensions: Sequence[str]
    absolute_cap_bytes: int
    chunk_size_bytes: int


@dataclass(slots=True)
class CloudinaryConfig:
    """Credentials for the video media store."""

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder: str = CLOUDINARY_FOLDER

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass(slots=True)
class ImgbbConfig:
    """Settings for the image hosting API."""

    api_key: str = ""
    endpoint: str = IMGBB_ENDPOINT
    timeout_seconds: float | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(slots=True)
class AppConfig:
    staging: StagingPaths
    ingest_limits: IngestLimits
    cloudinary: CloudinaryConfig
    imgbb: ImgbbConfig
    video_spec: VideoTransformSpec = VIDEO_SPEC
    image_spec: ImageTransformSpec = IMAGE_SPEC
    transform_timeout_seconds: float = 600.0
    staging_ttl_seconds: int = 3600
    ffmpeg_path: str = "ffmpeg"
    ffmpeg_loglevel: str = "error"
    port: int = 3000
    cors_origins: Sequence[str] = field(default_factory=lambda: ("*",))


def _optional_float(value: str | None) -> float | None:
    return float(value) if value else None


def _ensure_staging(paths: StagingPaths) -> None:
    paths.root.mkdir(parents=True, exist_ok=True)


def load_config() -> AppConfig:
    """Load configuration from environment variables."""
    staging = StagingPaths(root=Path(os.getenv("STAGING_DIR", "uploads")))
    _ensure_staging(staging)

    ingest_limits = IngestLimits(
        allowed_image_extensions=ALLOWED_IMAGE_EXTENSIONS,
        absolute_cap_bytes=int(os.getenv("INGEST_ABSOLUTE_CAP_BYTES", 500 * 1024 * 1024)),
        chunk_size_bytes=int(os.getenv("INGEST_CHUNK_SIZE_BYTES", 1 * 1024 * 1024)),
    )

    cloudinary = CloudinaryConfig(
        cloud_name=os.getenv("CLOUDINARY_NAME", ""),
        api_key=os.getenv("CLOUDINARY_KEY", ""),
        api_secret=os.getenv("CLOUDINARY_SECRET", ""),
    )
    imgbb = ImgbbConfig(
        api_key=os.getenv("IMGBB_API_KEY", ""),
        timeout_seconds=_optional_float(os.getenv("IMGBB_TIMEOUT_SECONDS")),
    )

    return AppConfig(
        staging=staging,
        ingest_limits=ingest_limits,
        cloudinary=cloudinary,
        imgbb=imgbb,
        transform_timeout_seconds=float(os.getenv("TRANSFORM_TIMEOUT_SECONDS", 600)),
        staging_ttl_seconds=int(os.getenv("STAGING_TTL_SECONDS", 3600)),
        ffmpeg_path=os.getenv("FFMPEG_PATH", "ffmpeg"),
        ffmpeg_loglevel=os.getenv("FFMPEG_LOGLEVEL", "error"),
        port=int(os.getenv("PORT", 3000)),
    )
