"""LLM transport abstract interface - one JSON POST per attempt."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TransportResponse:
    """Status and undecoded body of one HTTP exchange."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class LLMTransport(ABC):
    """Sends a fully built payload to a chat endpoint."""

    @abstractmethod
    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> TransportResponse:
        """
        POST payload as JSON and return the raw response.
        Raise TransportError on network-level failure; HTTP error statuses are returned.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
