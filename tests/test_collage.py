from __future__ import annotations

import io

import pytest
from PIL import Image

from vibe.errors import DownsampleError, PaletteError, StitchingError
from vibe.image import collage
from vibe.image.collage import Swatch


def _size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def test_swatch_hex_and_brightness() -> None:
    swatch = Swatch(rgb=(255, 0, 16), population=3)
    assert swatch.hex == "#ff0010"
    assert swatch.brightness == pytest.approx(271 / 3)


def test_extract_palette_solid_color(make_png) -> None:
    swatches = collage.extract_palette(make_png(color=(120, 60, 200)))
    assert swatches[0].rgb == (120, 60, 200)


def test_extract_palette_orders_by_population() -> None:
    img = Image.new("RGB", (100, 100), (200, 30, 30))
    img.paste((30, 30, 200), (0, 0, 100, 20))
    out = io.BytesIO()
    img.save(out, format="PNG")

    swatches = collage.extract_palette(out.getvalue())

    assert swatches[0].rgb == (200, 30, 30)
    assert swatches[0].population > swatches[-1].population


def test_extract_palette_rejects_garbage() -> None:
    with pytest.raises(PaletteError):
        collage.extract_palette(b"not an image")


def test_outlier_rules() -> None:
    mid = Swatch((120, 120, 120), 10)
    assert collage.has_color_outliers([]) is True
    assert collage.has_color_outliers([mid]) is False
    assert collage.has_color_outliers([mid, Swatch((5, 5, 5), 1)]) is True
    assert collage.has_color_outliers([mid, Swatch((250, 250, 250), 1)]) is True
    assert collage.has_color_outliers([Swatch((20, 20, 20), 1), Swatch((235, 235, 235), 1)]) is True
    assert collage.has_color_outliers([Swatch((40, 40, 40), 1), Swatch((200, 200, 200), 1)]) is False


def test_downsample_keeps_small_images(make_png) -> None:
    data = make_png(size=(300, 200))
    assert collage.downsample(data, 800) is data


def test_downsample_preserves_aspect(make_png) -> None:
    reduced = collage.downsample(make_png(size=(1600, 400)), 800)
    assert _size(reduced) == (800, 200)


def test_downsample_rejects_garbage() -> None:
    with pytest.raises(DownsampleError):
        collage.downsample(b"nope", 800)


def test_stretch_to_size(make_png) -> None:
    assert _size(collage.stretch_to_size(make_png(size=(50, 300)), 200, 200)) == (200, 200)


def test_stitch_horizontally(make_png) -> None:
    red = make_png(size=(200, 200), color=(200, 0, 0))
    blue = make_png(size=(100, 100), color=(0, 0, 200))

    stitched = collage.stitch_horizontally([red, blue], 200, 200)

    with Image.open(io.BytesIO(stitched)) as img:
        assert img.size == (400, 200)
        rgba = img.convert("RGBA")
        assert rgba.getpixel((10, 10))[:3] == (200, 0, 0)
        r, g, b, _ = rgba.getpixel((390, 190))
        assert r < 10 and g < 10 and b > 190


def test_stitch_errors(make_png) -> None:
    with pytest.raises(StitchingError):
        collage.stitch_horizontally([], 200, 200)
    with pytest.raises(StitchingError):
        collage.stitch_horizontally([make_png(), b"junk"], 200, 200)


def test_to_data_url() -> None:
    assert collage.to_data_url(b"abc") == "data:image/png;base64,YWJj"


def test_corrupt_png_chunk_is_a_palette_error(broken_png) -> None:
    with pytest.raises(PaletteError):
        collage.extract_palette(broken_png)
