"""Data structures for the ingest pipeline."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


class MediaKind(StrEnum):
    """Kinds of media accepted by the pipeline."""

    VIDEO = "video"
    IMAGE = "image"


class JobStatus(StrEnum):
    """Lifecycle statuses of an upload job, in transition order."""

    RECEIVED = "received"
    VALIDATED = "validated"
    TRANSFORMING = "transforming"
    TRANSFORMED = "transformed"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    FAILED = "failed"


_STATUS_ORDER = {status: index for index, status in enumerate(JobStatus)}
TERMINAL_STATUSES = frozenset({JobStatus.PUBLISHED, JobStatus.FAILED})


class ErrorKind(StrEnum):
    """Failure categories reported to callers."""

    VALIDATION = "validation"
    TRANSCODE = "transcode"
    PUBLISH = "publish"
    IO = "io"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of a job: a remote URL or a typed failure."""

    url: str | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def success(cls, url: str) -> "PublishResult":
        return cls(url=url)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "PublishResult":
        return cls(error_kind=kind, message=message)

    @property
    def ok(self) -> bool:
        return self.error_kind is None and self.url is not None


@dataclass(slots=True)
class UploadJob:
    """State carried through one request's pipeline run."""

    media_kind: MediaKind
    original_extension: str
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    raw_path: Path | None = None
    derivative_path: Path | None = None
    status: JobStatus = JobStatus.RECEIVED
    failed_stage: JobStatus | None = None
    result: PublishResult | None = None

    @property
    def terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def advance(self, status: JobStatus) -> None:
        """Move the job forward; backward moves are programming errors."""
        if self.terminal:
            raise RuntimeError(f"job {self.job_id} already finished as {self.status}")
        if status is not JobStatus.FAILED and _STATUS_ORDER[status] <= _STATUS_ORDER[self.status]:
            raise RuntimeError(
                f"job {self.job_id} cannot move from {self.status} to {status}"
            )
        self.status = status

    def succeed(self, url: str) -> None:
        self.advance(JobStatus.PUBLISHED)
        self.result = PublishResult.success(url)

    def fail(self, kind: ErrorKind, message: str) -> None:
        self.failed_stage = self.status
        self.advance(JobStatus.FAILED)
        self.result = PublishResult.failure(kind, message)
