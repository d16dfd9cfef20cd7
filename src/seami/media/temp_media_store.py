"""Temporary media storage for ingest uploads and derivatives."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from fastapi import UploadFile

from ..config import StagingPaths
from ..ingest.ingest_errors import StagingError, ValidationError

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB


@dataclass(slots=True)
class CleanupScope:
    """Deferred release list bound to one job."""

    store: "TempMediaStore"
    paths: list[Path] = field(default_factory=list)

    def register(self, path: Path) -> Path:
        if path not in self.paths:
            self.paths.append(path)
        return path

    def allocate(self, suffix: str, *, prefix: str = "") -> Path:
        """Reserve a fresh staging path and schedule it for release."""
        return self.register(self.store.allocate(suffix, prefix=prefix))

    def release(self) -> None:
        self.store.release(self.paths)


@dataclass(slots=True)
class TempMediaStore:
    """Manages lifecycle of staged uploads and derivatives."""

    paths: StagingPaths
    chunk_size: int = CHUNK_SIZE
    absolute_cap_bytes: int | None = None
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    @property
    def root(self) -> Path:
        return self.paths.root

    def ensure_structure(self) -> Path:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingError(f"staging directory unavailable: {exc.strerror or exc}") from exc
        return self.root

    def allocate(self, suffix: str, *, prefix: str = "") -> Path:
        """Return a unique path inside the staging directory without creating it."""
        directory = self.ensure_structure()
        return directory / f"{prefix}{uuid.uuid4().hex}{_normalize_suffix(suffix)}"

    @contextmanager
    def scope(self) -> Iterator[CleanupScope]:
        """Yield a cleanup scope released on every exit path."""
        scope = CleanupScope(store=self)
        try:
            yield scope
        finally:
            scope.release()

    def stage(self, data: bytes, original_ext: str, scope: CleanupScope | None = None) -> Path:
        """Write an in-memory payload to a fresh staging file."""
        target = scope.allocate(original_ext) if scope else self.allocate(original_ext)
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise StagingError(f"failed to stage upload: {exc.strerror or exc}") from exc
        self.log.info(
            "media.temp.staged",
            extra={"file": target.name, "size_bytes": len(data)},
        )
        return target

    async def persist_upload(
        self,
        upload: UploadFile,
        original_ext: str,
        scope: CleanupScope,
    ) -> Path:
        """Copy upload contents to the staging directory chunk by chunk."""
        target = scope.allocate(original_ext)
        size = 0
        try:
            with target.open("wb") as sink:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if self.absolute_cap_bytes is not None and size > self.absolute_cap_bytes:
                        self.log.warning(
                            "media.temp.payload_too_large",
                            extra={"size_bytes": size, "limit_bytes": self.absolute_cap_bytes},
                        )
                        raise ValidationError(
                            f"File exceeds the {self.absolute_cap_bytes} byte upload limit"
                        )
                    sink.write(chunk)
        except OSError as exc:
            raise StagingError(f"failed to stage upload: {exc.strerror or exc}") from exc

        self.log.info(
            "media.temp.persisted",
            extra={"file": target.name, "size_bytes": size, "upload_name": upload.filename},
        )
        return target

    def release(self, paths: Iterable[Path]) -> None:
        """Delete each path if it still exists; never raises."""
        for path in set(paths):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                self.log.warning(
                    "media.temp.release_failed",
                    extra={"file": path.name, "error": str(exc)},
                )
            else:
                self.log.debug("media.temp.released", extra={"file": path.name})

    def cleanup_expired(self, ttl_seconds: int, reference_time: datetime | None = None) -> int:
        """Purge staged files older than ``ttl_seconds`` (fallback for cron)."""
        if not self.root.exists():
            return 0
        now = reference_time.timestamp() if reference_time else time.time()
        removed = 0
        for path in self.list_expired(ttl_seconds, now):
            self.release([path])
            if not path.exists():
                removed += 1
                self.log.info("media.temp.cleanup.removed", extra={"file": path.name})
        return removed

    def list_expired(self, ttl_seconds: int, now: float | None = None) -> list[Path]:
        cutoff = (now if now is not None else time.time()) - ttl_seconds
        expired: list[Path] = []
        for path in self.root.iterdir():
            try:
                if path.is_file() and path.stat().st_mtime < cutoff:
                    expired.append(path)
            except FileNotFoundError:
                continue
        return expired


def _normalize_suffix(suffix: str) -> str:
    if not suffix:
        return ""
    return suffix if suffix.startswith(".") else f".{suffix}"
