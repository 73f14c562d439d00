"""Application error taxonomy.

Architectural role:
    Every failure the backend can report is one `VibeError` subclass. Each class
    carries a stable `type` tag which is what clients see in structured error
    payloads, so the set of tags is the application's error enum.

Failure handling model:
    Library layers (LLM client, retrieval, image processing, pipelines) raise.
    The orchestrator and the HTTP adapter catch and serialize with `to_dict()`.
"""

from __future__ import annotations

from typing import Any


class VibeError(Exception):
    """Base class for all reported application errors."""

    type = "Error"

    def __init__(self, detail: Any = None) -> None:
        self.detail = detail
        super().__init__(self._message())

    def _message(self) -> str:
        if self.detail is None:
            return self.type
        return f"{self.type}: {self.detail}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the `{"type": ..., "detail": ...}` wire shape."""
        payload: dict[str, Any] = {"type": self.type}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class MissingApiKeyError(VibeError):
    type = "MissingApiKey"


class HttpError(VibeError):
    """Non-success HTTP status from the completions endpoint."""

    type = "HttpError"

    def __init__(self, status: int, status_text: str = "", detail: Any = None) -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(detail)

    def _message(self) -> str:
        return f"{self.type}: {self.status} {self.status_text}".rstrip()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "status": self.status,
            "statusText": self.status_text,
            "detail": self.detail,
        }


class FetchError(VibeError):
    type = "FetchError"


class NoResponseContentError(VibeError):
    type = "NoResponseContent"


class InvalidResponseJsonError(VibeError):
    type = "InvalidResponseJson"


class InvalidChatMessagesError(VibeError):
    type = "InvalidChatMessages"


class MissingMetadataError(VibeError):
    type = "MissingMetadata"


class DownsampleError(VibeError):
    type = "DownsampleError"


class StitchingError(VibeError):
    type = "StitchingError"


class PaletteError(VibeError):
    type = "PaletteError"


class InvalidImageUrlError(VibeError):
    type = "InvalidImageUrl"


class InvalidFontNameError(VibeError):
    type = "InvalidFontName"


class InvalidParametersError(VibeError):
    type = "InvalidParameters"


class RequestFailedError(VibeError):
    type = "RequestFailed"


class FallbackFailedError(VibeError):
    type = "FallbackFailed"


def error_payload(exc: BaseException) -> dict[str, Any]:
    """Serialize any exception into the structured error shape.

    Unknown exception types are reported as `InternalError` without leaking
    their message.
    """
    if isinstance(exc, VibeError):
        return exc.to_dict()
    return {"type": "InternalError"}
