"""Transform adapters producing local derivatives from staged uploads."""

from .transforms_base import MediaTransform
from .transforms_image import ImageTransform
from .transforms_video import VideoTransform

__all__ = ["MediaTransform", "ImageTransform", "VideoTransform"]
