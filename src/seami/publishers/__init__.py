"""Publisher adapters uploading derivatives to remote stores."""

from .publishers_base import Publisher
from .publishers_cloudinary import CloudinaryPublisher
from .publishers_factory import PublisherRegistry
from .publishers_imgbb import ImgbbPublisher

__all__ = ["Publisher", "CloudinaryPublisher", "ImgbbPublisher", "PublisherRegistry"]
