"""Keyword-extraction pipeline.

Condenses a free-form theme request into a short keyword string suitable both
as an image search query and as the theme handed to the other pipelines.
"""

import logging

from vibe.core.messages import ChatMessage
from vibe.llm.service import request_structured, text_part
from vibe.prompting.prompts import KEYWORDS_PROMPT


logger = logging.getLogger(__name__)


async def extract_keywords(prompt: str) -> str:
    """Ask the model for search keywords describing `prompt`.

    Raises:
        VibeError: Transport or parse failure.
    """
    result = await request_structured(
        "keywords_query",
        KEYWORDS_PROMPT,
        [text_part(prompt)],
        {"keywords": {"type": "string"}},
        temperature=0,
    )
    return str(result.get("keywords") or "").strip()


async def preprocess_message(message: ChatMessage) -> ChatMessage:
    """Replace a user message's text with extracted keywords.

    Non-user messages are returned unchanged. Image parts of a user message are
    dropped from the returned message; callers read them from the input message.
    """
    if message.role != "user":
        return message

    keywords = await extract_keywords(message.text())
    logger.info("Extracted keywords: %r", keywords)
    return ChatMessage(role=message.role, content=[text_part(keywords)])
