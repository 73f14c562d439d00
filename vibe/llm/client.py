"""Transport client for structured chat-completion requests.

Architectural role:
    Executes HTTP requests against the configured OpenAI-compatible completions
    endpoint and extracts the JSON object the model produced under a
    `json_schema` response format.

Model invocation flow:
    `service.request_structured` -> `send_chat_request(payload)` ->
    `parse_chat_response(envelope)` -> dict.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with the
    configured timeout.

Failure handling model:
    Failures are raised as typed `VibeError` subclasses so pipelines can report
    them individually:
        - no key -> `MissingApiKeyError`
        - non-2xx status -> `HttpError`
        - transport failure -> `FetchError`
        - missing content -> `NoResponseContentError`
        - unparsable content -> `InvalidResponseJsonError`
"""

import json
import logging

import requests

from vibe.errors import (
    FetchError,
    HttpError,
    InvalidResponseJsonError,
    MissingApiKeyError,
    NoResponseContentError,
)
from vibe.llm.provider_config import LLM_TIMEOUT_SECONDS, LLM_URL, load_key


logger = logging.getLogger(__name__)


def _error_detail(response: requests.Response):
    """Return the error body as JSON when possible, else as raw text."""
    text = response.text
    try:
        return json.loads(text)
    except ValueError:
        return text


def send_chat_request(payload: dict) -> dict:
    """Send one chat-completions request and return the decoded envelope.

    Args:
        payload: Complete request body (model, messages, response_format, ...).

    Returns:
        Decoded JSON response envelope.

    Raises:
        MissingApiKeyError: No API key is configured.
        HttpError: Endpoint answered with a non-success status.
        FetchError: The request could not be completed or decoded.
    """
    api_key = load_key()
    if not api_key:
        raise MissingApiKeyError()

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    try:
        response = requests.post(
            LLM_URL,
            headers=headers,
            json=payload,
            timeout=LLM_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as err:
        raise FetchError(str(err)) from err

    if not response.ok:
        logger.warning(
            "Completions request failed: status=%s schema=%s",
            response.status_code,
            _schema_name(payload),
        )
        raise HttpError(response.status_code, response.reason or "", _error_detail(response))

    try:
        return response.json()
    except ValueError as err:
        raise FetchError(f"Undecodable response body: {err}") from err


def parse_chat_response(envelope) -> dict:
    """Extract the structured JSON object from a completions envelope.

    Args:
        envelope: Decoded response from `send_chat_request`.

    Returns:
        The JSON object found in `choices[0].message.content`.

    Raises:
        NoResponseContentError: The envelope carries no message content.
        InvalidResponseJsonError: Content is not a JSON object.
    """
    try:
        content = envelope["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None

    if not content:
        raise NoResponseContentError()

    try:
        data = json.loads(content)
    except (TypeError, ValueError) as err:
        raise InvalidResponseJsonError() from err

    if not isinstance(data, dict):
        raise InvalidResponseJsonError()

    return data


def _schema_name(payload: dict) -> str:
    try:
        return payload["response_format"]["json_schema"]["name"]
    except (KeyError, TypeError):
        return "unknown"
