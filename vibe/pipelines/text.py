"""Text pipeline: a one-sentence themed greeting."""

from vibe.llm.service import request_structured, text_part
from vibe.prompting.prompts import GREETING_PROMPT


async def text_pipeline(theme: str) -> str:
    """Generate a playful greeting for `theme`.

    A higher temperature keeps greetings varied between requests.
    """
    result = await request_structured(
        "text_response",
        GREETING_PROMPT,
        [text_part(theme)],
        {"response": {"type": "string"}},
        temperature=0.7,
    )
    response = result.get("response")
    return "" if response is None else str(response)
