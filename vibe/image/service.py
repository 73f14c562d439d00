"""Collage builder used by the color pipeline.

Role in pipeline:
    - Receives candidate image URLs from web image search.
    - Fetches them concurrently and screens each one by palette.
    - Normalizes survivors to uniform tiles and stitches one collage.
    - Extracts the collage palette as a compact color hint for the model.

Error handling strategy:
    Per-image failures (fetch, decode, outliers, resize) are logged and the
    image is skipped. Only a failure of the final stitch/palette step is
    raised, because at that point the inputs were already validated.

Performance characteristics:
    Fetches run concurrently; image work is CPU-bound and runs in a worker
    thread so the event loop keeps serving the other pipelines.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from vibe.errors import VibeError
from vibe.image.collage import (
    Swatch,
    downsample,
    extract_palette,
    has_color_outliers,
    stitch_horizontally,
    stretch_to_size,
)


logger = logging.getLogger(__name__)

MAX_SOURCE_DIMENSION = 800
TILE_WIDTH = 200
TILE_HEIGHT = 200


@dataclass(frozen=True)
class Collage:
    """Stitched reference image plus its extracted palette."""

    png: bytes
    swatches: list[Swatch]
    image_count: int


def prepare_tile(data: bytes) -> bytes | None:
    """Screen one source image and turn it into a collage tile.

    Returns:
        PNG tile bytes, or `None` when the image is an outlier or unusable.
    """
    try:
        if has_color_outliers(extract_palette(data)):
            return None
        reduced = downsample(data, MAX_SOURCE_DIMENSION)
        return stretch_to_size(reduced, TILE_WIDTH, TILE_HEIGHT)
    except VibeError as exc:
        logger.info("Skipping collage source image: %s", exc)
        return None


def assemble_collage(images: list[bytes]) -> Collage | None:
    """Build a collage from already-fetched image bytes.

    Returns:
        `Collage`, or `None` when no image survives screening.

    Raises:
        StitchingError / PaletteError: The final collage step failed.
    """
    tiles = [tile for tile in (prepare_tile(data) for data in images) if tile is not None]
    if not tiles:
        return None

    stitched = stitch_horizontally(tiles, TILE_WIDTH, TILE_HEIGHT)
    return Collage(png=stitched, swatches=extract_palette(stitched), image_count=len(tiles))


async def build_theme_collage(urls: list[str], searcher) -> Collage | None:
    """Fetch candidate images and build a themed collage.

    Args:
        urls: Candidate image URLs, usually from `searcher.search_images`.
        searcher: Object providing `async fetch_image_bytes(url)`.

    Returns:
        `Collage`, or `None` when nothing could be fetched or screened in.
    """
    if not urls:
        return None

    results = await asyncio.gather(
        *(searcher.fetch_image_bytes(url) for url in urls),
        return_exceptions=True,
    )

    images = []
    for url, result in zip(urls, results):
        if isinstance(result, Exception):
            logger.info("Dropping image %s: %s", url, result)
            continue
        images.append(result)

    if not images:
        return None

    return await asyncio.to_thread(assemble_collage, images)
