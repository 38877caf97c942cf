"""Exchange result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from chat_adapter.models.conversation import ConversationTurn


class ReasoningDisplay(str, Enum):
    """How a reasoning preamble is rendered."""

    HIDE = "hide"
    TRUNCATE = "truncate"
    SHOW = "show"


class ReasoningSplit(BaseModel):
    """Reply split into reasoning and answer, plus display markup."""

    reasoning: str = ""
    answer: str = ""
    display_markup: str = ""


class ResultEnvelope(BaseModel):
    """Returned once per successful exchange."""

    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., description="Display-ready text, may embed reasoning markup")
    raw_content: str = Field(..., alias="rawContent", description="Unmodified extracted reply")
    reasoning: str = Field(default="")
    history: list[ConversationTurn] = Field(default_factory=list)
