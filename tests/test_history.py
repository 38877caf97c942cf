"""Tests for history truncation and global context merging."""

from __future__ import annotations

import pytest

from chat_adapter.models import ConversationTurn, Role
from chat_adapter.services.history import merge_global_context, truncate_history


def _turn(role: Role, content: str) -> ConversationTurn:
    return ConversationTurn(role=role, content=content)


def _contents(turns: list[ConversationTurn]) -> list[str]:
    return [t.content for t in turns]


@pytest.fixture
def conversation() -> list[ConversationTurn]:
    return [
        _turn(Role.SYSTEM, "system"),
        _turn(Role.USER, "u1"),
        _turn(Role.ASSISTANT, "a1"),
        _turn(Role.USER, "u2"),
        _turn(Role.ASSISTANT, "a2"),
        _turn(Role.USER, "u3"),
    ]


def test_system_turn_is_kept_first(conversation: list[ConversationTurn]) -> None:
    assert _contents(truncate_history(conversation, 3)) == ["system", "a2", "u3"]


def test_most_recent_turns_kept_without_system_turn() -> None:
    turns = [_turn(Role.USER, "u1"), _turn(Role.ASSISTANT, "a1"), _turn(Role.USER, "u2")]

    assert _contents(truncate_history(turns, 2)) == ["a1", "u2"]


@pytest.mark.parametrize("limit", [0, -1, 6, 10])
def test_unbounded_or_within_limit_is_unchanged(conversation: list[ConversationTurn], limit: int) -> None:
    assert truncate_history(conversation, limit) == conversation


def test_limit_of_one_keeps_only_system_turn(conversation: list[ConversationTurn]) -> None:
    assert _contents(truncate_history(conversation, 1)) == ["system"]


def test_system_turn_moves_to_front() -> None:
    turns = [
        _turn(Role.USER, "u1"),
        _turn(Role.SYSTEM, "system"),
        _turn(Role.ASSISTANT, "a1"),
        _turn(Role.USER, "u2"),
    ]

    assert _contents(truncate_history(turns, 2)) == ["system", "u2"]


@pytest.mark.parametrize("context", ["", "   "])
def test_blank_global_context_changes_nothing(conversation: list[ConversationTurn], context: str) -> None:
    assert merge_global_context(conversation, context) == conversation


def test_global_context_creates_system_turn() -> None:
    turns = [_turn(Role.USER, "hi")]

    merged = merge_global_context(turns, "World lore")

    assert merged[0] == _turn(Role.SYSTEM, "World lore")
    assert _contents(merged) == ["World lore", "hi"]
    assert len(turns) == 1


def test_global_context_is_prepended_without_mutating_input(conversation: list[ConversationTurn]) -> None:
    merged = merge_global_context(conversation, "World lore")

    assert merged[0].content == "World lore\n\nsystem"
    assert conversation[0].content == "system"


def test_global_context_already_present_is_not_repeated() -> None:
    turns = [_turn(Role.SYSTEM, "Intro. World lore. Outro.")]

    assert merge_global_context(turns, "World lore")[0].content == "Intro. World lore. Outro."
