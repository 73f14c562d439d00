from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from vibe.api import http_api
from vibe.core import engine
from vibe.errors import FetchError
from vibe.llm.provider_config import MODEL_NAME


UI_UPDATE = {
    "type": "ui_update",
    "content": "Ahoy!",
    "ui_changes": {"primary_color": "#003366"},
    "css": "",
    "css_variables": {"--primary-color": "#003366"},
    "keywords": "pirate, ocean",
    "errors": [{"pipeline": "font", "type": "FallbackFailed"}],
}


def _client() -> TestClient:
    return TestClient(http_api.app)


def _fake_engine(monkeypatch: pytest.MonkeyPatch, result=None, exc=None) -> list:
    received = []

    async def fake_process_chat(messages, searcher=None, fonts=None):
        received.append(messages)
        if exc is not None:
            raise exc
        return result

    monkeypatch.setattr(engine, "process_chat", fake_process_chat)
    return received


def test_health() -> None:
    response = _client().get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "model": MODEL_NAME}


def test_chat_success(monkeypatch: pytest.MonkeyPatch) -> None:
    received = _fake_engine(monkeypatch, result=UI_UPDATE)

    response = _client().post("/api/chat", json={"messages": [{"role": "user", "content": "pirates"}]})

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "ui_update"
    assert body["ui_changes"] == {"primary_color": "#003366"}
    assert body["errors"] == [{"pipeline": "font", "type": "FallbackFailed"}]
    assert received[0][0].text() == "pirates"


def test_chat_rejects_invalid_json() -> None:
    response = _client().post("/api/chat", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "InvalidChatMessages"


def test_chat_rejects_missing_messages() -> None:
    response = _client().post("/api/chat", json={"prompt": "pirates"})

    assert response.status_code == 400
    assert response.json() == {
        "type": "error",
        "error": {
            "type": "InvalidChatMessages",
            "detail": "Could not resolve path messages on the input object.",
        },
    }


def test_chat_orchestrator_error_is_bad_gateway(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_engine(
        monkeypatch,
        result={"type": "error", "error": {"type": "HttpError", "status": 503, "statusText": "Unavailable", "detail": "x"}},
    )

    response = _client().post("/api/chat", json={"messages": [{"role": "user", "content": "pirates"}]})

    assert response.status_code == 502
    assert response.json()["error"]["status"] == 503


def test_chat_missing_key_is_server_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_engine(monkeypatch, result={"type": "error", "error": {"type": "MissingApiKey"}})

    response = _client().post("/api/chat", json={"messages": [{"role": "user", "content": "pirates"}]})

    assert response.status_code == 500
    assert response.json() == {"type": "error", "error": {"type": "MissingApiKey"}}


def test_chat_engine_exception(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_engine(monkeypatch, exc=FetchError("lost"))

    response = _client().post("/api/chat", json={"messages": [{"role": "user", "content": "pirates"}]})

    assert response.status_code == 502
    assert response.json()["error"] == {"type": "FetchError", "detail": "lost"}


def test_pipeline_errors_match_envelope_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    result = dict(
        UI_UPDATE,
        errors=[
            {"pipeline": "color", "type": "HttpError", "status": 429, "statusText": "Too Many Requests", "detail": "slow"},
            {"pipeline": "text", "type": "InternalError"},
        ],
    )
    _fake_engine(monkeypatch, result=result)

    response = _client().post("/api/chat", json={"messages": [{"role": "user", "content": "pirates"}]})

    assert response.json()["errors"] == [
        {"pipeline": "color", "type": "HttpError", "status": 429, "statusText": "Too Many Requests", "detail": "slow"},
        {"pipeline": "text", "type": "InternalError"},
    ]
