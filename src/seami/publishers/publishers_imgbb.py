"""imgbb publisher for image derivatives."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from ..config import ImgbbConfig
from ..ingest.ingest_errors import PublishError
from .publishers_base import Publisher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImgbbPublisher(Publisher):
    """Upload images to imgbb through its multipart form API."""

    config: ImgbbConfig
    content_type: str = "image/webp"
    name: str = "imgbb"
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def configured(self) -> bool:
        return self.config.configured

    async def publish(self, local_path: Path) -> str:
        if not self.configured:
            raise PublishError("imgbb API key is not configured")

        self.log.info("publish.imgbb.start", extra={"file": local_path.name})
        try:
            payload = local_path.read_bytes()
        except OSError as exc:
            raise PublishError(f"derivative unreadable: {exc.strerror or exc}") from exc

        files = {"image": (local_path.name, payload, self.content_type)}
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.post(
                    self.config.endpoint,
                    params={"key": self.config.api_key},
                    files=files,
                )
        except httpx.HTTPError as exc:
            self.log.error("publish.imgbb.network_error", extra={"error": repr(exc)})
            raise PublishError(f"imgbb unreachable: {exc.__class__.__name__}: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise PublishError(
                f"imgbb returned a non-JSON response with status {response.status_code}"
            ) from exc
        if not isinstance(body, dict):
            raise _unexpected(response.status_code)

        if not body.get("success"):
            message = _error_message(body) or f"status {response.status_code}"
            self.log.error(
                "publish.imgbb.rejected",
                extra={"status_code": response.status_code, "error": message},
            )
            raise PublishError(f"imgbb upload failed: {message}")

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise _unexpected(response.status_code)
        url = data.get("url") or data.get("display_url")
        if not url:
            raise PublishError("imgbb response missing image url")

        self.log.info("publish.imgbb.done", extra={"file": local_path.name, "id": data.get("id")})
        return str(url)


def _unexpected(status_code: int) -> PublishError:
    return PublishError(f"imgbb returned an unexpected response with status {status_code}")


def _error_message(body: dict[str, Any]) -> str | None:
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("message")
    if error:
        return str(error)
    return body.get("status_txt")
