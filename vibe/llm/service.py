"""Structured-output payload adapter for LLM invocation.

Architectural role:
    Provides the canonical request entrypoint used by every generation
    pipeline. It bridges prompt/schema definitions to transport
    (`vibe.llm.client`).

Model call flow:
    system prompt + user parts + schema properties -> payload construction ->
    `client.send_chat_request(...)` in a worker thread ->
    `client.parse_chat_response(...)`.

Schema contract:
    Every request uses the `json_schema` response format in strict mode. All
    declared properties are required and no additional properties are allowed,
    so callers can index the result without existence checks.

Determinism:
    Payload construction is deterministic for fixed inputs and configuration.
    Generated output remains non-deterministic because inference runs remotely.
"""

import asyncio
from typing import Any

from vibe.llm.client import parse_chat_response, send_chat_request
from vibe.llm.provider_config import MODEL_NAME


def text_part(text: str) -> dict:
    """Build a `text` content part."""
    return {"type": "text", "text": text}


def image_part(url: str, detail: str = "low") -> dict:
    """Build an `image_url` content part (plain URL or `data:` URL)."""
    return {"type": "image_url", "image_url": {"url": url, "detail": detail}}


def message(role: str, parts: list) -> dict:
    return {"role": role, "content": list(parts)}


def string_properties(names) -> dict:
    """Map each name to a `{"type": "string"}` schema."""
    return {name: {"type": "string"} for name in names}


def build_chat_payload(
    name: str,
    messages: list,
    properties: dict,
    temperature: float = 0,
) -> dict:
    """Build a chat payload constrained to a strict JSON schema.

    Args:
        name: Schema name reported to the provider.
        messages: Chat messages in content-part form.
        properties: JSON-schema properties of the top-level object.
        temperature: Sampling temperature.

    Returns:
        Request body for `send_chat_request`.
    """
    return {
        "model": MODEL_NAME,
        "temperature": temperature,
        "messages": messages,
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": name,
                "strict": True,
                "schema": {
                    "type": "object",
                    "properties": properties,
                    "required": list(properties.keys()),
                    "additionalProperties": False,
                },
            },
        },
    }


async def request_structured(
    name: str,
    system_prompt: str,
    user_parts: list,
    properties: dict,
    temperature: float = 0,
) -> dict[str, Any]:
    """Send one structured request and return the parsed JSON object.

    The blocking transport call runs in a worker thread so several pipelines
    can wait on the provider concurrently.

    Raises:
        VibeError: Any transport or parse failure from `vibe.llm.client`.
    """
    payload = build_chat_payload(
        name,
        [
            message("system", [text_part(system_prompt)]),
            message("user", user_parts),
        ],
        properties,
        temperature=temperature,
    )
    envelope = await asyncio.to_thread(send_chat_request, payload)
    return parse_chat_response(envelope)
