"""Tests for the httpx transport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from chat_adapter.errors import TransportError
from chat_adapter.llm import HttpxTransport

URL = "http://llm.local/v1/chat/completions"
HEADERS = {"Content-Type": "application/json", "Authorization": "Bearer k"}


@pytest.mark.asyncio
async def test_post_json_sends_body_and_headers() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = HttpxTransport(client=client)
        resp = await transport.post_json(URL, {"model": "m", "messages": []}, headers=HEADERS, timeout=5.0)

    assert resp.ok
    assert json.loads(resp.text) == {"ok": True}
    assert seen == {
        "method": "POST",
        "url": URL,
        "auth": "Bearer k",
        "body": {"model": "m", "messages": []},
    }


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised() -> None:
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="busy"))
    ) as client:
        resp = await HttpxTransport(client=client).post_json(URL, {}, headers=HEADERS)

    assert not resp.ok
    assert resp.status_code == 503
    assert resp.text == "busy"


@pytest.mark.asyncio
async def test_network_failure_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError) as excinfo:
            await HttpxTransport(client=client).post_json(URL, {}, headers=HEADERS)

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    transport = HttpxTransport(client=client)

    await transport.aclose()

    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_owned_client() -> None:
    transport = HttpxTransport()

    await transport.aclose()

    assert transport._client.is_closed


@pytest.mark.asyncio
async def test_invalid_url_becomes_transport_error() -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200))) as client:
        with pytest.raises(TransportError):
            await HttpxTransport(client=client).post_json("http://bad host:xx/v1", {}, headers=HEADERS)
