"""Pillow image transform: bounded resize and WebP re-encode."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import IMAGE_SPEC, ImageTransformSpec
from ..ingest.ingest_errors import TranscodeError, scrub_paths
from .transforms_base import MediaTransform

logger = logging.getLogger(__name__)


def fit_within(size: tuple[int, int], box: tuple[int, int], *, upscale: bool = False) -> tuple[int, int]:
    """Return ``size`` scaled to fit ``box`` preserving aspect ratio."""
    width, height = size
    max_width, max_height = box
    ratio = min(max_width / width, max_height / height)
    if ratio >= 1 and not upscale:
        return width, height
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def _webp_ready(image: Image.Image) -> Image.Image:
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    target_mode = "RGBA" if has_alpha else "RGB"
    if image.mode != target_mode:
        return image.convert(target_mode)
    return image


@dataclass(slots=True)
class ImageTransform(MediaTransform):
    """Re-encode images to the configured lossy format."""

    spec: ImageTransformSpec = IMAGE_SPEC
    timeout_seconds: float = 600.0
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def output_suffix(self) -> str:
        return self.spec.suffix

    async def transform(
        self, raw_path: Path, output_path: Path, quality: int | None = None
    ) -> Path:
        quality = self.spec.quality if quality is None else quality
        self.log.info(
            "transform.image.start",
            extra={"source": raw_path.name, "target": output_path.name, "quality": quality},
        )
        try:
            size = await asyncio.wait_for(
                asyncio.to_thread(self._encode, raw_path, output_path, quality),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            self.log.warning(
                "transform.image.timeout",
                extra={"source": raw_path.name, "timeout_seconds": self.timeout_seconds},
            )
            raise TranscodeError(
                f"image compression did not finish within {self.timeout_seconds:g} seconds"
            ) from exc

        self.log.info(
            "transform.image.done",
            extra={"target": output_path.name, "width": size[0], "height": size[1]},
        )
        return output_path

    def _encode(self, raw_path: Path, output_path: Path, quality: int) -> tuple[int, int]:
        spec = self.spec
        try:
            with Image.open(raw_path) as source:
                source.seek(0)
                image = ImageOps.exif_transpose(source)
                image = _webp_ready(image)
                target = fit_within(
                    image.size, (spec.max_width, spec.max_height), upscale=spec.upscale
                )
                if target != image.size:
                    image = image.resize(target, Image.Resampling.LANCZOS)
                image.save(output_path, format=spec.format.upper(), quality=quality)
                return image.size
        except UnidentifiedImageError as exc:
            raise TranscodeError("image could not be decoded") from exc
        except Image.DecompressionBombError as exc:
            raise TranscodeError(f"image rejected: {exc}") from exc
        except (OSError, ValueError) as exc:
            message = scrub_paths(str(exc), (raw_path, output_path, raw_path.parent))
            raise TranscodeError(f"image compression failed: {message}") from exc
