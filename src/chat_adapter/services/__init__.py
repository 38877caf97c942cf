"""Business logic services."""

from chat_adapter.services.chat_service import ChatService

__all__ = ["ChatService"]
