from __future__ import annotations

import asyncio
import io

from PIL import Image

from vibe.errors import FetchError
from vibe.image import service


class FakeFetcher:
    def __init__(self, images: dict) -> None:
        self.images = images

    async def fetch_image_bytes(self, url):
        if url not in self.images:
            raise FetchError(url)
        return self.images[url]


def test_prepare_tile_makes_uniform_tile(make_png) -> None:
    tile = service.prepare_tile(make_png(size=(1200, 300), color=(40, 120, 90)))

    with Image.open(io.BytesIO(tile)) as img:
        assert img.size == (service.TILE_WIDTH, service.TILE_HEIGHT)


def test_prepare_tile_drops_outliers(make_png) -> None:
    assert service.prepare_tile(make_png(color=(255, 255, 255))) is None
    assert service.prepare_tile(make_png(color=(0, 0, 0))) is None


def test_prepare_tile_drops_corrupt_images(broken_png) -> None:
    assert service.prepare_tile(broken_png) is None
    assert service.prepare_tile(b"not an image") is None


def test_assemble_collage_skips_bad_sources(make_png, broken_png) -> None:
    collage = service.assemble_collage(
        [make_png(color=(40, 120, 90)), broken_png, make_png(color=(255, 255, 255))]
    )

    assert collage is not None
    assert collage.image_count == 1
    assert collage.swatches
    with Image.open(io.BytesIO(collage.png)) as img:
        assert img.size == (service.TILE_WIDTH, service.TILE_HEIGHT)


def test_assemble_collage_all_outliers(make_png) -> None:
    assert service.assemble_collage([make_png(color=(255, 255, 255)), make_png(color=(0, 0, 0))]) is None


def test_build_theme_collage_nothing_fetchable() -> None:
    result = asyncio.run(service.build_theme_collage(["https://img/a", "https://img/b"], FakeFetcher({})))
    assert result is None


def test_build_theme_collage_only_outliers(make_png) -> None:
    fetcher = FakeFetcher({"https://img/white": make_png(color=(255, 255, 255))})
    result = asyncio.run(service.build_theme_collage(["https://img/white", "https://img/gone"], fetcher))
    assert result is None


def test_build_theme_collage_stitches_survivors(make_png) -> None:
    fetcher = FakeFetcher(
        {
            "https://img/a": make_png(color=(40, 120, 90)),
            "https://img/b": make_png(color=(90, 60, 140)),
        }
    )

    collage = asyncio.run(service.build_theme_collage(["https://img/a", "https://img/b"], fetcher))

    assert collage.image_count == 2
    with Image.open(io.BytesIO(collage.png)) as img:
        assert img.size == (2 * service.TILE_WIDTH, service.TILE_HEIGHT)
