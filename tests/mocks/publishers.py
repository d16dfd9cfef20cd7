"""Deterministic publisher and transform stubs for pipeline tests."""

from __future__ import annotations

from pathlib import Path

from src.seami.ingest.ingest_errors import PublishError, TranscodeError
from src.seami.publishers.publishers_base import Publisher
from src.seami.transforms.transforms_base import MediaTransform

CLOUDINARY_BASE_URL = "https://res.cloudinary.com/demo/video/upload/v1/seami_compressed"
IMGBB_BASE_URL = "https://i.ibb.co/Abc123"


class StubPublisher(Publisher):
    """Record publish calls and return a URL derived from the file name."""

    def __init__(
        self,
        base_url: str,
        *,
        name: str = "stub",
        error: str | None = None,
        configured: bool = True,
    ) -> None:
        self.base_url = base_url
        self.name = name
        self.error = error
        self._configured = configured
        self.calls: list[Path] = []
        self.seen_existing: list[bool] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def publish(self, local_path: Path) -> str:
        self.calls.append(local_path)
        self.seen_existing.append(local_path.exists())
        if self.error is not None:
            raise PublishError(self.error)
        return f"{self.base_url}/{local_path.name}"


class CopyTransform(MediaTransform):
    """Copy the raw bytes to the output path, or fail on demand."""

    def __init__(self, suffix: str, *, prefix: str = "", error: str | None = None) -> None:
        self._suffix = suffix
        self.output_prefix = prefix
        self.error = error
        self.calls: list[tuple[Path, Path]] = []

    @property
    def output_suffix(self) -> str:
        return self._suffix

    async def transform(self, raw_path: Path, output_path: Path) -> Path:
        self.calls.append((raw_path, output_path))
        if self.error is not None:
            raise TranscodeError(self.error)
        output_path.write_bytes(raw_path.read_bytes())
        return output_path
