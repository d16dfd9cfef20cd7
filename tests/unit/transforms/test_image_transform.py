from pathlib import Path

import pytest
from PIL import Image

from src.seami.config import ImageTransformSpec
from src.seami.ingest.ingest_errors import TranscodeError
from src.seami.transforms.transforms_image import ImageTransform, fit_within
from tests.helpers.media import write_image


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        ((2000, 500), (800, 200)),
        ((500, 2000), (200, 800)),
        ((1600, 1600), (800, 800)),
        ((640, 480), (640, 480)),
        ((800, 800), (800, 800)),
    ],
)
def test_fit_within_bounds_longer_edge(size, expected) -> None:
    assert fit_within(size, (800, 800)) == expected


def test_fit_within_upscales_only_when_allowed() -> None:
    assert fit_within((100, 50), (800, 800), upscale=True) == (800, 400)


@pytest.mark.asyncio
async def test_wide_jpeg_is_resized_to_webp(tmp_path: Path) -> None:
    raw = write_image(tmp_path / "raw.jpg", (2000, 500))
    output = tmp_path / "out.webp"

    result = await ImageTransform().transform(raw, output)

    assert result == output
    assert raw.exists()
    with Image.open(output) as image:
        assert image.format == "WEBP"
        assert image.size == (800, 200)


@pytest.mark.asyncio
async def test_small_image_is_never_upscaled(tmp_path: Path) -> None:
    raw = write_image(tmp_path / "raw.png", (320, 240), fmt="PNG")
    output = tmp_path / "out.webp"

    await ImageTransform().transform(raw, output)

    with Image.open(output) as image:
        assert image.size == (320, 240)


@pytest.mark.asyncio
async def test_transparency_is_preserved(tmp_path: Path) -> None:
    raw = write_image(tmp_path / "raw.png", (1000, 1000), fmt="PNG", mode="RGBA")
    output = tmp_path / "out.webp"

    await ImageTransform().transform(raw, output)

    with Image.open(output) as image:
        assert image.mode == "RGBA"
        assert image.size == (800, 800)


@pytest.mark.asyncio
async def test_quality_override_is_accepted(tmp_path: Path) -> None:
    raw = write_image(tmp_path / "raw.bmp", (1200, 900), fmt="BMP")
    low = await ImageTransform().transform(raw, tmp_path / "low.webp", quality=10)
    high = await ImageTransform().transform(raw, tmp_path / "high.webp", quality=95)

    assert low.stat().st_size > 0 and high.stat().st_size > 0


@pytest.mark.asyncio
async def test_custom_box_is_respected(tmp_path: Path) -> None:
    raw = write_image(tmp_path / "raw.jpg", (1000, 400))
    transform = ImageTransform(spec=ImageTransformSpec(max_width=100, max_height=100))

    output = await transform.transform(raw, tmp_path / "out.webp")

    with Image.open(output) as image:
        assert image.size == (100, 40)


@pytest.mark.asyncio
async def test_undecodable_input_raises_transcode_error(tmp_path: Path) -> None:
    raw = tmp_path / "broken.jpg"
    raw.write_bytes(b"definitely not an image")

    with pytest.raises(TranscodeError) as excinfo:
        await ImageTransform().transform(raw, tmp_path / "out.webp")

    assert str(tmp_path) not in str(excinfo.value)
    assert not (tmp_path / "out.webp").exists()
