"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath

from ..config import IngestLimits
from .ingest_errors import UnsupportedFormatError
from .ingest_models import MediaKind

logger = logging.getLogger(__name__)


def original_extension(filename: str | None) -> str:
    """Return the lowercase suffix of ``filename`` including the dot."""
    if not filename:
        return ""
    return PurePath(filename.replace("\\", "/")).suffix.lower()


def normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        return f".{extension}"
    return extension


@dataclass(slots=True)
class UploadValidator:
    """Validate staged uploads against configured limits."""

    limits: IngestLimits

    def validate_extension(self, kind: MediaKind, extension: str) -> None:
        # Video uploads are not gated by extension.
        if kind is not MediaKind.IMAGE:
            return
        allowed = {ext.lower().lstrip(".") for ext in self.limits.allowed_image_extensions}
        if extension.lower().lstrip(".") not in allowed:
            logger.warning(
                "ingest.upload.unsupported_format",
                extra={"extension": extension, "media_kind": kind.value},
            )
            raise UnsupportedFormatError(
                "Unsupported image format. Allowed formats: "
                + ", ".join(sorted(allowed))
            )
