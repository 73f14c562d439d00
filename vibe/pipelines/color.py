"""Color pipeline: themed reference images -> 24 color variables.

Processing flow:
    1. Search the web for images matching the theme keywords.
    2. Build a screened collage and extract its palette (`vibe.image.service`).
    3. Convert any user-supplied images to `data:` URLs.
    4. Ask the vision model for the color variables, grounded on the collage,
       its swatches, and the user's images.

Degradation:
    Missing search results, a failed collage, or unreachable user images only
    reduce the grounding material. The color request is still sent, text-only
    if nothing else is left.
"""

import asyncio
import logging

from vibe.errors import VibeError
from vibe.image.collage import to_data_url
from vibe.image.service import build_theme_collage
from vibe.llm.service import image_part, request_structured, string_properties, text_part
from vibe.prompting.prompts import COLOR_KEYS, PALETTE_PROMPT
from vibe.retrieval.web.image_search import ImageSearchModule


logger = logging.getLogger(__name__)


def describe_swatches(swatches) -> str:
    """Render swatches as a short text hint: `#aabbcc (412), #112233 (97)`."""
    return ", ".join(f"{s.hex} ({s.population})" for s in swatches)


async def _user_images(image_urls, searcher) -> list:
    results = await asyncio.gather(
        *(searcher.fetch_to_data_url(url) for url in image_urls),
        return_exceptions=True,
    )
    parts = []
    for url, result in zip(image_urls, results):
        if isinstance(result, Exception):
            logger.warning("Dropping user image %s: %s", url[:80], result)
            continue
        parts.append(image_part(result, detail="low"))
    return parts


async def _collage(theme: str, searcher):
    urls = await searcher.search_images(theme)
    try:
        return await build_theme_collage(urls, searcher)
    except VibeError:
        logger.exception("Collage build failed for theme=%r", theme)
        return None


async def color_pipeline(theme: str, image_urls=(), searcher=None) -> dict:
    """Generate color variables for a theme.

    Args:
        theme: Theme keywords.
        image_urls: Image URLs the user attached to the request.
        searcher: `ImageSearchModule`-compatible object; a default one is
            created when omitted.

    Returns:
        `{"ui_changes": {<COLOR_KEYS>: str}}`.

    Raises:
        VibeError: The color request itself failed.
    """
    searcher = searcher or ImageSearchModule()

    collage, user_parts = await asyncio.gather(
        _collage(theme, searcher),
        _user_images(list(image_urls), searcher),
    )

    parts = [text_part(theme)]
    if collage is not None:
        logger.info(
            "Collage built from %d images for theme=%r", collage.image_count, theme
        )
        parts.append(text_part(f"Dominant colors of the reference images: {describe_swatches(collage.swatches)}"))
        parts.append(image_part(to_data_url(collage.png), detail="low"))
    parts.extend(user_parts)

    result = await request_structured(
        "send_query",
        PALETTE_PROMPT,
        parts,
        {
            "ui_changes": {
                "type": "object",
                "properties": string_properties(COLOR_KEYS),
                "required": list(COLOR_KEYS),
                "additionalProperties": False,
            }
        },
        temperature=0,
    )
    ui_changes = result.get("ui_changes")
    return {"ui_changes": ui_changes if isinstance(ui_changes, dict) else {}}
