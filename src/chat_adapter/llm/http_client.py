"""httpx-backed transport for arbitrary chat-completion endpoints."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from chat_adapter.errors import TransportError
from chat_adapter.llm.base import LLMTransport, TransportResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class HttpxTransport(LLMTransport):
    """Posts payloads with a shared AsyncClient. Pass `client` to reuse or mock one."""

    def __init__(self, *, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> TransportResponse:
        request_timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        try:
            resp = await self._client.post(
                url,
                json=dict(payload),
                headers=dict(headers),
                timeout=request_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request to {url} failed: {e}") from e
        if resp.status_code >= 400:
            logger.debug("Endpoint returned %s: %s", resp.status_code, resp.text[:200])
        return TransportResponse(status_code=resp.status_code, text=resp.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
