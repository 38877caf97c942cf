"""LLM transport abstraction."""

from chat_adapter.llm.base import LLMTransport, TransportResponse
from chat_adapter.llm.http_client import HttpxTransport

__all__ = ["HttpxTransport", "LLMTransport", "TransportResponse"]
