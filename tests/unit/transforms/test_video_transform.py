import asyncio
from pathlib import Path

import pytest

from src.seami.config import VideoTransformSpec
from src.seami.ingest.ingest_errors import TranscodeError
from src.seami.transforms.transforms_video import VideoTransform, build_filter_graph
from tests.helpers.media import FFMPEG, FFPROBE, probe_video, write_test_video


class FakeProcess:
    def __init__(self, returncode: int, stderr: bytes = b"", *, hang: bool = False) -> None:
        self._final_returncode = returncode
        self.returncode: int | None = None
        self._stderr = stderr
        self._hang = hang
        self.killed = False

    async def communicate(self) -> tuple[bytes | None, bytes]:
        if self._hang:
            await asyncio.sleep(3600)
        self.returncode = self._final_returncode
        return None, self._stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode or 0


def install_process(monkeypatch, process: FakeProcess, *, on_start=None) -> list[tuple]:
    calls: list[tuple] = []

    async def fake_exec(*cmd, **kwargs):
        calls.append(cmd)
        if on_start is not None:
            on_start(cmd)
        return process

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)
    return calls


def test_filter_graph_letterboxes_into_target_box() -> None:
    graph = build_filter_graph(VideoTransformSpec())
    assert graph == (
        "scale=1280:720:force_original_aspect_ratio=decrease,"
        "pad=1280:720:(ow-iw)/2:(oh-ih)/2,setsar=1"
    )


def test_filter_graph_without_letterbox_only_scales() -> None:
    graph = build_filter_graph(VideoTransformSpec(letterbox=False))
    assert "pad=" not in graph


def test_command_carries_fixed_output_parameters(tmp_path: Path) -> None:
    transform = VideoTransform(ffmpeg_path="/opt/ffmpeg")
    cmd = transform.build_command(tmp_path / "in.mov", tmp_path / "out.mp4")

    assert cmd[0] == "/opt/ffmpeg"
    assert cmd[cmd.index("-r") + 1] == "30"
    assert cmd[cmd.index("-b:v") + 1] == "800k"
    assert cmd[cmd.index("-c:v") + 1] == "libx264"
    assert cmd[cmd.index("-i") + 1] == str(tmp_path / "in.mov")
    assert cmd[-1] == str(tmp_path / "out.mp4")
    assert transform.output_suffix == ".mp4"
    assert transform.output_prefix == "compressed_"


@pytest.mark.asyncio
async def test_successful_run_returns_output(monkeypatch, tmp_path: Path) -> None:
    output = tmp_path / "out.mp4"
    calls = install_process(
        monkeypatch, FakeProcess(0), on_start=lambda cmd: output.write_bytes(b"mp4")
    )

    result = await VideoTransform().transform(tmp_path / "in.mov", output)

    assert result == output
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_nonzero_exit_raises_with_scrubbed_diagnostic(monkeypatch, tmp_path: Path) -> None:
    raw = tmp_path / "in.mov"
    stderr = f"{raw}: Invalid data found when processing input".encode()
    install_process(monkeypatch, FakeProcess(1, stderr))

    with pytest.raises(TranscodeError) as excinfo:
        await VideoTransform().transform(raw, tmp_path / "out.mp4")

    message = str(excinfo.value)
    assert "Invalid data found" in message
    assert "in.mov" in message
    assert str(tmp_path) not in message


@pytest.mark.asyncio
async def test_missing_output_raises(monkeypatch, tmp_path: Path) -> None:
    install_process(monkeypatch, FakeProcess(0))

    with pytest.raises(TranscodeError):
        await VideoTransform().transform(tmp_path / "in.mov", tmp_path / "out.mp4")


@pytest.mark.asyncio
async def test_timeout_kills_process(monkeypatch, tmp_path: Path) -> None:
    process = FakeProcess(0, hang=True)
    install_process(monkeypatch, process)

    with pytest.raises(TranscodeError, match="did not finish"):
        await VideoTransform(timeout_seconds=0.05).transform(
            tmp_path / "in.mov", tmp_path / "out.mp4"
        )

    assert process.killed


@pytest.mark.asyncio
async def test_missing_binary_raises_transcode_error(tmp_path: Path) -> None:
    transform = VideoTransform(ffmpeg_path=str(tmp_path / "no-such-ffmpeg"))

    with pytest.raises(TranscodeError, match="not found"):
        await transform.transform(tmp_path / "in.mov", tmp_path / "out.mp4")


@pytest.mark.skipif(FFMPEG is None or FFPROBE is None, reason="ffmpeg not installed")
@pytest.mark.asyncio
async def test_real_ffmpeg_letterboxes_portrait_video(tmp_path: Path) -> None:
    raw = write_test_video(tmp_path / "portrait.mp4", size="480x640", seconds=1)
    output = tmp_path / "out.mp4"

    await VideoTransform(ffmpeg_path=FFMPEG).transform(raw, output)

    width, height, rate = probe_video(output)
    assert (width, height) == (1280, 720)
    assert rate == "30/1"
    assert raw.exists()


@pytest.mark.skipif(FFMPEG is None, reason="ffmpeg not installed")
@pytest.mark.asyncio
async def test_real_ffmpeg_rejects_garbage(tmp_path: Path) -> None:
    raw = tmp_path / "garbage.mp4"
    raw.write_bytes(b"\x00" * 512)

    with pytest.raises(TranscodeError):
        await VideoTransform(ffmpeg_path=FFMPEG).transform(raw, tmp_path / "out.mp4")
