from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

from src.seami.config import (
    ALLOWED_IMAGE_EXTENSIONS,
    AppConfig,
    CloudinaryConfig,
    ImgbbConfig,
    IngestLimits,
    StagingPaths,
)

os.environ.setdefault("STAGING_DIR", str(Path(tempfile.gettempdir()) / "seami-test-uploads"))


def build_config(staging_dir: Path, **overrides) -> AppConfig:
    staging_dir.mkdir(parents=True, exist_ok=True)
    params = dict(
        staging=StagingPaths(root=staging_dir),
        ingest_limits=IngestLimits(
            allowed_image_extensions=ALLOWED_IMAGE_EXTENSIONS,
            absolute_cap_bytes=5 * 1024 * 1024,
            chunk_size_bytes=1024,
        ),
        cloudinary=CloudinaryConfig(cloud_name="demo", api_key="key", api_secret="secret"),
        imgbb=ImgbbConfig(api_key="imgbb-key"),
        transform_timeout_seconds=60,
    )
    params.update(overrides)
    return AppConfig(**params)


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest.fixture
def app_config(staging_dir: Path) -> AppConfig:
    return build_config(staging_dir)
