"""
HTTP API adapter for the themed-UI backend.

Architectural role:
- Expose the chat endpoint consumed by the frontend.
- Validate raw request bodies into `ChatMessage` lists.
- Delegate generation to `vibe.core.engine.process_chat`.
- Map orchestrator results onto HTTP status codes.

Endpoint responsibilities:
- `POST /api/chat`: parse JSON, validate `messages`, invoke core, and
  return a `ui_update` payload or a structured error envelope.
- `GET /health`: liveness check reporting the configured model.

Input validation behavior:
- Non-JSON body -> HTTP 400 `InvalidChatMessages`.
- Missing or malformed `messages` -> HTTP 400 `InvalidChatMessages`.

Error handling strategy:
- Orchestrator structured errors -> HTTP 502, except `MissingApiKey`
  which is a server configuration problem -> HTTP 500.
- Unexpected exceptions from the engine are logged and reported as
  `InternalError` with HTTP 500.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Logs request bodies only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vibe.api.schemas import ErrorResponse, HealthResponse, UIUpdateResponse
from vibe.core import engine
from vibe.core.messages import parse_chat_messages
from vibe.errors import InvalidChatMessagesError, VibeError, error_payload
from vibe.llm.provider_config import MODEL_NAME

logger = logging.getLogger(__name__)

app = FastAPI(title="vibe-ui")
# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"

ERROR_STATUS = {
    "MissingApiKey": 500,
    "InternalError": 500,
}


def error_json(status_code: int, error: dict) -> JSONResponse:
    """Build an error envelope response."""
    body = ErrorResponse.model_validate({"type": "error", "error": error})
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/health")
def health():
    """Report liveness and the configured completions model."""
    return HealthResponse(model=MODEL_NAME).model_dump()


@app.post("/api/chat")
async def chat(request: Request):
    """
    Generate a themed UI update from a chat conversation.

    Request body:
    - `{"messages": [...]}` in chat-completions message format; `content`
      may be a string or a list of `text` / `image_url` parts.

    Response formatting:
    - 200: `UIUpdateResponse`.
    - 400/500/502: `{"type": "error", "error": {...}}`.
    """
    try:
        body = await request.json()
    except ValueError:
        return error_json(400, {"type": "InvalidChatMessages", "detail": "Request body is not valid JSON."})

    if DEBUG:
        logger.debug("Incoming chat body: %s", body)

    try:
        messages = parse_chat_messages(body, path=["messages"])
    except InvalidChatMessagesError as exc:
        return error_json(400, exc.to_dict())

    try:
        result = await engine.process_chat(messages)
    except VibeError as exc:
        logger.exception("Chat processing failed")
        return error_json(502, exc.to_dict())
    except Exception as exc:
        logger.exception("Unexpected chat processing failure")
        return error_json(500, error_payload(exc))

    if result.get("type") == "error":
        error = result.get("error") or {"type": "InternalError"}
        return error_json(ERROR_STATUS.get(error.get("type"), 502), error)

    if DEBUG:
        logger.debug("Outgoing ui_update: %s", result)

    payload = UIUpdateResponse.model_validate(result)
    # Error entries share the envelope shape: absent detail is omitted.
    content = payload.model_dump()
    content["errors"] = [entry.model_dump(exclude_none=True) for entry in payload.errors]
    return content
