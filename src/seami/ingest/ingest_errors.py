"""Domain-specific exceptions for the ingest pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike

from .ingest_models import ErrorKind


class PipelineError(Exception):
    """Base class for failures raised by pipeline stages."""

    error_kind: ErrorKind = ErrorKind.INTERNAL


class ValidationError(PipelineError):
    """Raised when the inbound upload is missing or malformed."""

    error_kind = ErrorKind.VALIDATION


class UnsupportedFormatError(ValidationError):
    """Raised when the file extension is not on the allow-list."""


class TranscodeError(PipelineError):
    """Raised when the transcoding engine cannot produce a derivative."""

    error_kind = ErrorKind.TRANSCODE


class PublishError(PipelineError):
    """Raised when the remote store rejects the upload or is unreachable."""

    error_kind = ErrorKind.PUBLISH


class StagingError(PipelineError):
    """Raised when the staging directory cannot be written."""

    error_kind = ErrorKind.IO


def scrub_paths(message: str, paths: Iterable[str | PathLike[str]]) -> str:
    """Replace absolute staging paths in diagnostics with bare file names."""
    for path in paths:
        text = str(path)
        if not text:
            continue
        name = text.replace("\\", "/").rsplit("/", 1)[-1]
        message = message.replace(text, name)
    return message
