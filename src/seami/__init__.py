"""seami media ingest service.

Accepts a video or image upload, produces a compressed derivative and
publishes it to Cloudinary (video) or imgbb (image).
"""

from .ingest.ingest_models import MediaKind, PublishResult, UploadJob

__all__ = ["MediaKind", "PublishResult", "UploadJob"]
