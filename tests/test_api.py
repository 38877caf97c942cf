"""Tests for the FastAPI surface."""

from __future__ import annotations

from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from chat_adapter import main
from chat_adapter.config import AdapterConfig
from chat_adapter.errors import ExhaustedRetriesError, TransportError
from chat_adapter.models import ChatRequest, ConversationTurn, ResultEnvelope, Role


class _StubService:
    def __init__(self, *, result: ResultEnvelope | None = None, error: Exception | None = None) -> None:
        self._result = result
        self._error = error
        self.requests: list[ChatRequest] = []

    async def send(self, request: ChatRequest, config: Any = None) -> ResultEnvelope:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        assert self._result is not None
        return self._result


@pytest.fixture
def client() -> Iterator[TestClient]:
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_chat_returns_camel_case_envelope(client: TestClient) -> None:
    stub = _StubService(
        result=ResultEnvelope(
            content="Hi",
            raw_content="Hi",
            reasoning="",
            history=[
                ConversationTurn(role=Role.USER, content="Hello"),
                ConversationTurn(role=Role.ASSISTANT, content="Hi"),
            ],
        )
    )
    main.app.dependency_overrides[main.get_chat_service] = lambda: stub

    resp = client.post(
        "/chat",
        json={
            "message": "Hello",
            "history": [],
            "model": "gpt-4o",
            "contextItems": [{"type": "journal", "id": "j1", "name": "Dragons", "journalName": "Lore", "content": "x"}],
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["rawContent"] == "Hi"
    assert body["history"] == [
        {"role": "user", "content": "Hello"},
        {"role": "assistant", "content": "Hi"},
    ]
    request = stub.requests[0]
    assert request.model == "gpt-4o"
    assert request.context_items[0].journal_name == "Lore"


def test_chat_failure_maps_to_bad_gateway(client: TestClient) -> None:
    stub = _StubService(error=ExhaustedRetriesError(3, TransportError("HTTP error 500", status_code=500)))
    main.app.dependency_overrides[main.get_chat_service] = lambda: stub

    resp = client.post("/chat", json={"message": "Hello"})

    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to get a response. Please try again."


def test_chat_rejects_unknown_roles(client: TestClient) -> None:
    main.app.dependency_overrides[main.get_chat_service] = lambda: _StubService()

    resp = client.post("/chat", json={"message": "Hello", "history": [{"role": "narrator", "content": "x"}]})

    assert resp.status_code == 422


def test_chat_unavailable_before_startup(client: TestClient) -> None:
    resp = client.post("/chat", json={"message": "Hello"})

    assert resp.status_code == 503


def test_models_lists_configured_models(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "load_adapter_config", lambda: AdapterConfig(models="llama3, mistral"))

    resp = client.get("/models")

    assert resp.json() == {"models": ["llama3", "mistral"], "default": "llama3"}
