"""Backend selection by media kind."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import AppConfig
from ..ingest.ingest_models import MediaKind
from .publishers_base import Publisher
from .publishers_cloudinary import CloudinaryPublisher
from .publishers_imgbb import ImgbbPublisher


@dataclass(slots=True)
class PublisherRegistry:
    """Closed mapping of media kinds to their backends."""

    video: Publisher
    image: Publisher

    def select(self, kind: MediaKind) -> Publisher:
        if kind is MediaKind.VIDEO:
            return self.video
        if kind is MediaKind.IMAGE:
            return self.image
        raise ValueError(f"Unsupported media kind '{kind}'")


def create_publishers(config: AppConfig) -> PublisherRegistry:
    """Instantiate both backends from explicit configuration."""
    return PublisherRegistry(
        video=CloudinaryPublisher(config=config.cloudinary),
        image=ImgbbPublisher(config=config.imgbb),
    )
