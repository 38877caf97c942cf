"""Data models."""

from chat_adapter.models.conversation import ChatRequest, ContextItem, ConversationTurn, Role
from chat_adapter.models.result import ReasoningDisplay, ReasoningSplit, ResultEnvelope

__all__ = [
    "ChatRequest",
    "ContextItem",
    "ConversationTurn",
    "ReasoningDisplay",
    "ReasoningSplit",
    "ResultEnvelope",
    "Role",
]
