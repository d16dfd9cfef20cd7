"""Domain service sequencing stage, transform, publish and cleanup."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

from fastapi import UploadFile

from ..media.temp_media_store import CleanupScope, TempMediaStore
from ..publishers.publishers_factory import PublisherRegistry
from ..transforms.transforms_base import MediaTransform
from .ingest_errors import PipelineError
from .ingest_models import ErrorKind, JobStatus, MediaKind, UploadJob
from .validation import UploadValidator, normalize_extension, original_extension

logger = logging.getLogger(__name__)

Stager = Callable[[CleanupScope], Awaitable[Path]]


@dataclass(slots=True)
class IngestService:
    """Coordinates the per-request ingest pipeline."""

    store: TempMediaStore
    validator: UploadValidator
    video_transform: MediaTransform
    image_transform: MediaTransform
    publishers: PublisherRegistry
    log: logging.Logger = field(default_factory=lambda: logger)

    def select_transform(self, kind: MediaKind) -> MediaTransform:
        if kind is MediaKind.VIDEO:
            return self.video_transform
        if kind is MediaKind.IMAGE:
            return self.image_transform
        raise ValueError(f"Unsupported media kind '{kind}'")

    async def ingest_upload(self, kind: MediaKind, upload: UploadFile) -> UploadJob:
        """Run the pipeline for a multipart upload."""
        job = UploadJob(media_kind=kind, original_extension=original_extension(upload.filename))

        async def stage(scope: CleanupScope) -> Path:
            return await self.store.persist_upload(upload, job.original_extension, scope)

        return await self._run(job, stage)

    async def ingest_bytes(self, kind: MediaKind, data: bytes, original_ext: str) -> UploadJob:
        """Run the pipeline for an in-memory payload."""
        job = UploadJob(media_kind=kind, original_extension=normalize_extension(original_ext))

        async def stage(scope: CleanupScope) -> Path:
            return self.store.stage(data, job.original_extension, scope)

        return await self._run(job, stage)

    async def _run(self, job: UploadJob, stage: Stager) -> UploadJob:
        self.log.info(
            "ingest.job.received",
            extra={"job_id": job.job_id, "media_kind": job.media_kind.value},
        )
        with self.store.scope() as scope:
            try:
                job.raw_path = await stage(scope)
                await self._execute(job, scope)
            except PipelineError as exc:
                self._record_failure(job, exc)
            except Exception:
                if job.terminal:
                    raise
                self._record_crash(job)
        return job

    async def _execute(self, job: UploadJob, scope: CleanupScope) -> None:
        if job.raw_path is None:
            raise RuntimeError("UploadJob has no staged raw file")
        self.validator.validate_extension(job.media_kind, job.original_extension)
        job.advance(JobStatus.VALIDATED)

        transform = self.select_transform(job.media_kind)
        job.advance(JobStatus.TRANSFORMING)
        output_path = scope.allocate(transform.output_suffix, prefix=transform.output_prefix)
        job.derivative_path = await transform.transform(job.raw_path, output_path)
        job.advance(JobStatus.TRANSFORMED)

        publisher = self.publishers.select(job.media_kind)
        job.advance(JobStatus.PUBLISHING)
        url = await publisher.publish(job.derivative_path)
        job.succeed(url)
        self.log.info(
            "ingest.job.completed",
            extra={
                "job_id": job.job_id,
                "media_kind": job.media_kind.value,
                "backend": publisher.name,
                "url": url,
            },
        )

    def _record_failure(self, job: UploadJob, exc: PipelineError) -> None:
        job.fail(exc.error_kind, str(exc))
        self.log.warning(
            "ingest.job.failed",
            extra={
                "job_id": job.job_id,
                "media_kind": job.media_kind.value,
                "stage": job.failed_stage.value if job.failed_stage else None,
                "error_kind": exc.error_kind.value,
                "error": str(exc),
            },
        )

    def _record_crash(self, job: UploadJob) -> None:
        stage = job.status
        self.log.exception(
            "ingest.job.crashed",
            extra={
                "job_id": job.job_id,
                "media_kind": job.media_kind.value,
                "stage": stage.value,
            },
        )
        job.fail(ErrorKind.INTERNAL, "Internal server error")
