"""FFmpeg video transform.

Scales the source into the target box preserving aspect ratio, pads the rest
(letterbox), and re-encodes at a fixed frame rate and bitrate.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import VIDEO_SPEC, VideoTransformSpec
from ..ingest.ingest_errors import TranscodeError, scrub_paths
from .transforms_base import MediaTransform

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 2000


def build_filter_graph(spec: VideoTransformSpec) -> str:
    """Return the ``-vf`` filter chain for ``spec``."""
    width, height = spec.max_width, spec.max_height
    scale = f"scale={width}:{height}:force_original_aspect_ratio=decrease"
    if not spec.letterbox:
        return scale
    return f"{scale},pad={width}:{height}:(ow-iw)/2:(oh-ih)/2,setsar=1"


@dataclass(slots=True)
class VideoTransform(MediaTransform):
    """Run ffmpeg as a subprocess with an upper time bound."""

    spec: VideoTransformSpec = VIDEO_SPEC
    ffmpeg_path: str = "ffmpeg"
    loglevel: str = "error"
    timeout_seconds: float = 600.0
    output_prefix: str = "compressed_"
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def output_suffix(self) -> str:
        return self.spec.container_suffix

    def build_command(self, raw_path: Path, output_path: Path) -> list[str]:
        spec = self.spec
        return [
            self.ffmpeg_path,
            "-hide_banner",
            "-nostdin",
            "-loglevel", self.loglevel,
            "-y",
            "-i", str(raw_path),
            "-vf", build_filter_graph(spec),
            "-r", str(spec.frame_rate),
            "-c:v", spec.video_codec,
            "-b:v", spec.video_bitrate,
            "-pix_fmt", "yuv420p",
            "-c:a", spec.audio_codec,
            "-movflags", "+faststart",
            str(output_path),
        ]

    async def transform(self, raw_path: Path, output_path: Path) -> Path:
        cmd = self.build_command(raw_path, output_path)
        scrub = (raw_path, output_path, raw_path.parent)
        self.log.info(
            "transform.video.start",
            extra={"source": raw_path.name, "target": output_path.name},
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise TranscodeError(f"ffmpeg executable not found: {self.ffmpeg_path}") from exc
        except OSError as exc:
            raise TranscodeError(f"failed to start ffmpeg: {exc}") from exc

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            await _terminate(process)
            self.log.warning(
                "transform.video.timeout",
                extra={"source": raw_path.name, "timeout_seconds": self.timeout_seconds},
            )
            raise TranscodeError(
                f"ffmpeg did not finish within {self.timeout_seconds:g} seconds"
            ) from exc
        except asyncio.CancelledError:
            await _terminate(process)
            raise

        diagnostic = scrub_paths(
            stderr.decode("utf-8", errors="replace").strip()[-STDERR_TAIL_CHARS:], scrub
        )
        if process.returncode != 0:
            self.log.error(
                "transform.video.failed",
                extra={"source": raw_path.name, "returncode": process.returncode},
            )
            raise TranscodeError(
                f"ffmpeg exited with code {process.returncode}: {diagnostic or 'no diagnostic output'}"
            )

        if not output_path.exists() or output_path.stat().st_size == 0:
            raise TranscodeError(f"ffmpeg produced no output: {diagnostic or 'empty file'}")

        self.log.info(
            "transform.video.done",
            extra={"target": output_path.name, "size_bytes": output_path.stat().st_size},
        )
        return output_path


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
