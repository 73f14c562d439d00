"""Response transport models for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Structured error; extra keys (status, statusText) pass through."""

    model_config = {"extra": "allow"}

    type: str
    detail: Any = None


class ErrorResponse(BaseModel):
    type: str = "error"
    error: ErrorBody


class PipelineError(BaseModel):
    model_config = {"extra": "allow"}

    pipeline: str
    type: str
    detail: Any = None


class UIUpdateResponse(BaseModel):
    """Successful theme generation result."""

    type: str = "ui_update"
    content: str
    ui_changes: dict[str, Any] = Field(default_factory=dict)
    css: str = ""
    css_variables: dict[str, str] = Field(default_factory=dict)
    keywords: str = ""
    errors: list[PipelineError] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    model: str
