"""Layout pipeline: theme -> bubble, border, spacing, and animation variables."""

from vibe.llm.service import request_structured, string_properties, text_part
from vibe.prompting.prompts import LAYOUT_KEYS, LAYOUT_PROMPT


async def layout_pipeline(prompt: str) -> dict:
    """Choose layout variables for a theme.

    Returns:
        `{"ui_changes": {<LAYOUT_KEYS>: str}}`.
    """
    result = await request_structured(
        "layout_query",
        LAYOUT_PROMPT,
        [text_part(prompt)],
        string_properties(LAYOUT_KEYS),
        temperature=0,
    )
    return {"ui_changes": {key: result[key] for key in LAYOUT_KEYS if key in result}}
