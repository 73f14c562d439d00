"""Font pipeline: theme -> Google Font stylesheet + font variables.

Processing flow:
    1. Ask the model for a primary and a fallback Google Font name.
    2. Build CSS2 URLs for both covering every published weight.
    3. Fetch the primary stylesheet, falling back to the second font.
    4. Summarize available families/weights and ask the model which family and
       weight to use for headers, messages, and placeholders.

Failure handling:
    Any step failing raises; the orchestrator reports it and the response
    simply carries no font changes.
"""

import logging

from vibe.errors import InvalidFontNameError
from vibe.llm.service import request_structured, string_properties, text_part
from vibe.prompting.prompts import FONT_NAME_KEYS, FONT_NAME_PROMPT, FONT_VAR_KEYS, FONT_VARS_PROMPT
from vibe.retrieval.google_fonts import GoogleFontsClient, parse_google_font_css


logger = logging.getLogger(__name__)


async def send_font_name_request(prompt: str) -> dict:
    """Return `{"primary_font_name": str, "fallback_font_name": str}`."""
    return await request_structured(
        "font_name_query",
        FONT_NAME_PROMPT,
        [text_part(prompt)],
        string_properties(FONT_NAME_KEYS),
        temperature=0,
    )


async def send_font_vars_request(font_summary: str) -> dict:
    """Pick family/weight variables from a stylesheet summary."""
    return await request_structured(
        "font_vars_query",
        FONT_VARS_PROMPT,
        [text_part(font_summary)],
        string_properties(FONT_VAR_KEYS),
        temperature=0,
    )


async def font_pipeline(prompt: str, fonts=None) -> dict:
    """Run the full font flow for a theme.

    Args:
        prompt: Theme keywords.
        fonts: `GoogleFontsClient`-compatible object; a default one is created
            when omitted.

    Returns:
        `{"css": str, "ui_changes": {<FONT_VAR_KEYS>: str}}`.

    Raises:
        InvalidFontNameError: The model returned no usable font names.
        RequestFailedError / FallbackFailedError: Google Fonts lookups failed.
        VibeError: Either model request failed.
    """
    fonts = fonts or GoogleFontsClient()

    names = await send_font_name_request(prompt)
    primary = str(names.get("primary_font_name") or "").strip()
    fallback = str(names.get("fallback_font_name") or "").strip()
    if not primary and not fallback:
        raise InvalidFontNameError()

    logger.info("Font candidates: primary=%r fallback=%r", primary, fallback)

    primary_url = await fonts.build_google_fonts_url(primary)
    fallback_url = await fonts.build_google_fonts_url(fallback)
    css = await fonts.fetch_google_font_css(primary_url, fallback_url)

    variables = await send_font_vars_request(parse_google_font_css(css))
    return {
        "css": css,
        "ui_changes": {key: variables[key] for key in FONT_VAR_KEYS if key in variables},
    }
