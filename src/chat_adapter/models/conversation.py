"""Conversation data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Conversation turn role."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """One message in a conversation. Identity is its position in the list."""

    role: Role = Field(..., description="system, user or assistant")
    content: str = Field(default="", description="Message text")

    def to_message(self) -> dict[str, str]:
        """Plain dict as sent in a messages array."""
        return {"role": self.role.value, "content": self.content}


class ContextItem(BaseModel):
    """Journal or page excerpt supplied alongside a message."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(default="page", description="journal, page or other")
    id: str = Field(default="", description="Source document id")
    name: str = Field(default="", description="Display name")
    journal_name: str | None = Field(default=None, alias="journalName")
    content: str = Field(default="", description="Excerpt text")


class ChatRequest(BaseModel):
    """Inbound call: message plus the caller-owned history."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="New user message")
    history: list[ConversationTurn] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Overrides the default model")
    context_items: list[ContextItem] = Field(default_factory=list, alias="contextItems")
