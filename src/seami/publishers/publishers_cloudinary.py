"""Cloudinary publisher for video derivatives."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader

from ..config import CloudinaryConfig
from ..ingest.ingest_errors import PublishError
from .publishers_base import Publisher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CloudinaryPublisher(Publisher):
    """Upload videos to a fixed Cloudinary folder."""

    config: CloudinaryConfig
    resource_type: str = "video"
    name: str = "cloudinary"
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def configured(self) -> bool:
        return self.config.configured

    async def publish(self, local_path: Path) -> str:
        if not self.configured:
            raise PublishError("Cloudinary credentials are not configured")

        self.log.info(
            "publish.cloudinary.start",
            extra={"file": local_path.name, "folder": self.config.folder},
        )
        try:
            response = await asyncio.to_thread(self._upload, local_path)
        except cloudinary.exceptions.Error as exc:
            self.log.error("publish.cloudinary.rejected", extra={"error": str(exc)})
            raise PublishError(f"Cloudinary upload failed: {exc}") from exc
        except Exception as exc:
            self.log.error("publish.cloudinary.network_error", extra={"error": repr(exc)})
            raise PublishError(f"Cloudinary unreachable: {exc}") from exc

        secure_url = response.get("secure_url") if isinstance(response, dict) else None
        if not secure_url:
            message = _error_message(response) or "response did not include secure_url"
            raise PublishError(f"Cloudinary upload failed: {message}")

        self.log.info(
            "publish.cloudinary.done",
            extra={"file": local_path.name, "public_id": response.get("public_id")},
        )
        return str(secure_url)

    def _upload(self, local_path: Path) -> Any:
        return cloudinary.uploader.upload(
            str(local_path),
            resource_type=self.resource_type,
            folder=self.config.folder,
            cloud_name=self.config.cloud_name,
            api_key=self.config.api_key,
            api_secret=self.config.api_secret,
        )


def _error_message(response: Any) -> str | None:
    if not isinstance(response, dict):
        return None
    error = response.get("error")
    if isinstance(error, dict):
        return error.get("message")
    return str(error) if error else None
