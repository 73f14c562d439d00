"""Core request orchestration for themed UI generation.

Architectural role:
    Provides the per-request pipeline used by the HTTP adapter to transform one
    chat request into a single `ui_update` response.

Control-flow model:
    1. Take the latest message; collect its text and attached image URLs.
    2. Run keyword extraction (sequential; everything else depends on it).
    3. Fan out the color, font, layout, and text pipelines concurrently and
       wait for all of them.
    4. Merge partial UI change maps in fixed order: color, font, layout.
       Later fragments win on key collisions.
    5. Report each failed pipeline in `errors`; fail the whole request only
       when keyword extraction fails or every pipeline fails.

Concurrency:
    A single flat `asyncio.gather(..., return_exceptions=True)`. No
    cancellation, retries, or ordering guarantees beyond "all finish before
    responding".

Error handling strategy:
    Pipeline exceptions are logged and converted to structured error entries.
    The returned value is always a dict; callers never need to catch.
"""

import asyncio
import logging
import time
from typing import Any

from vibe.core.messages import ChatMessage
from vibe.core.ui_changes import merge_ui_changes, to_css_variables
from vibe.errors import InvalidChatMessagesError, error_payload
from vibe.pipelines.color import color_pipeline
from vibe.pipelines.fonts import font_pipeline
from vibe.pipelines.keywords import preprocess_message
from vibe.pipelines.layout import layout_pipeline
from vibe.pipelines.text import text_pipeline


logger = logging.getLogger(__name__)

DEFAULT_CONTENT = "Your new theme is ready! ✨"

PIPELINE_NAMES = ("color", "font", "layout", "text")


def error_response(exc: BaseException) -> dict[str, Any]:
    """Wrap an exception in the structured error envelope."""
    return {"type": "error", "error": error_payload(exc)}


async def _timed(name: str, coroutine):
    """Await a pipeline coroutine and log its duration."""
    started = time.perf_counter()
    try:
        return await coroutine
    finally:
        logger.info("Pipeline %s finished in %.2fs", name, time.perf_counter() - started)


async def run_pipelines(
    theme: str,
    image_urls: list[str],
    searcher=None,
    fonts=None,
) -> dict[str, Any]:
    """Run the four generation pipelines concurrently.

    Args:
        theme: Extracted keywords fed to every pipeline.
        image_urls: User-attached image URLs for the color pipeline.
        searcher: Optional image search module override.
        fonts: Optional Google Fonts client override.

    Returns:
        Mapping of pipeline name to its result or the exception it raised.
    """
    results = await asyncio.gather(
        _timed("color", color_pipeline(theme, image_urls, searcher=searcher)),
        _timed("font", font_pipeline(theme, fonts=fonts)),
        _timed("layout", layout_pipeline(theme)),
        _timed("text", text_pipeline(theme)),
        return_exceptions=True,
    )
    return dict(zip(PIPELINE_NAMES, results))


def build_ui_update(keywords: str, results: dict[str, Any]) -> dict[str, Any]:
    """Merge pipeline results into one response.

    Args:
        keywords: Keywords the pipelines ran on.
        results: Output of `run_pipelines`.

    Returns:
        `ui_update` payload, or a structured error when every pipeline failed.
    """
    errors = []
    succeeded = {}

    for name in PIPELINE_NAMES:
        result = results.get(name)
        if isinstance(result, BaseException):
            logger.error(
                "Pipeline %s failed",
                name,
                exc_info=(type(result), result, result.__traceback__),
            )
            errors.append({"pipeline": name, **error_payload(result)})
        else:
            succeeded[name] = result

    if not succeeded:
        return {
            "type": "error",
            "error": {"type": "AllPipelinesFailed", "detail": errors},
        }

    ui_changes = merge_ui_changes(
        (succeeded.get("color") or {}).get("ui_changes"),
        (succeeded.get("font") or {}).get("ui_changes"),
        (succeeded.get("layout") or {}).get("ui_changes"),
    )

    return {
        "type": "ui_update",
        "content": succeeded.get("text") or DEFAULT_CONTENT,
        "ui_changes": ui_changes,
        "css": (succeeded.get("font") or {}).get("css", ""),
        "css_variables": to_css_variables(ui_changes),
        "keywords": keywords,
        "errors": errors,
    }


async def process_chat(messages: list[ChatMessage], searcher=None, fonts=None) -> dict[str, Any]:
    """Turn a parsed chat request into a `ui_update` or structured error.

    Args:
        messages: Parsed conversation; only the latest message is used.
        searcher: Optional image search module override.
        fonts: Optional Google Fonts client override.

    Returns:
        Response payload dict (see module docstring).

    Edge cases:
        - Empty message list returns an `InvalidChatMessages` error.
        - Keyword extraction failure returns that error; no pipeline runs.
        - A latest message without text still runs, with empty keywords
          decided by the model.
    """
    if not messages:
        return error_response(InvalidChatMessagesError("Input does not contain any chat messages."))

    latest = messages[-1]
    image_urls = latest.image_urls()

    try:
        preprocessed = await preprocess_message(latest)
    except Exception as exc:
        logger.exception("Keyword extraction failed")
        return error_response(exc)

    keywords = preprocessed.text().strip()
    logger.info(
        "Dispatching pipelines: keywords=%r user_images=%d", keywords, len(image_urls)
    )

    results = await run_pipelines(keywords, image_urls, searcher=searcher, fonts=fonts)
    return build_ui_update(keywords, results)
