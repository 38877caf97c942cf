"""Flattened context text for templates that take plain text rather than a messages array."""

import re
from collections.abc import Sequence

from chat_adapter.models import ContextItem, ConversationTurn, Role

TRANSCRIPT_HEADING = "Previous conversation:"

_HTML_TAG = re.compile(r"<[^>]*>?")


def strip_html(text: str) -> str:
    return _HTML_TAG.sub("", text)


def render_transcript(turns: Sequence[ConversationTurn]) -> str:
    """Prior turns as "User: ..." / "Assistant: ..." lines. System turns are skipped."""
    lines = [
        f"{'User' if t.role == Role.USER else 'Assistant'}: {strip_html(t.content)}"
        for t in turns
        if t.role != Role.SYSTEM
    ]
    if not lines:
        return ""
    return f"{TRANSCRIPT_HEADING}\n\n" + "\n\n".join(lines)


def context_item_heading(item: ContextItem) -> str:
    kind = (item.type or "").strip().lower()
    if kind == "journal":
        if item.journal_name and item.journal_name != item.name:
            return f"Journal: {item.journal_name} / {item.name}"
        return f"Journal: {item.name}"
    if kind == "page":
        return f"Page: {item.name}"
    label = kind.capitalize() if kind else "Context"
    return f"{label}: {item.name}" if item.name else label


def render_context_items(items: Sequence[ContextItem]) -> str:
    """Each item's content under a labeled heading. Items without content are skipped."""
    blocks = [
        f"### {context_item_heading(item)}\n{item.content.strip()}"
        for item in items
        if item.content and item.content.strip()
    ]
    return "\n\n".join(blocks)


def build_context(
    turns: Sequence[ConversationTurn],
    items: Sequence[ContextItem] = (),
) -> str:
    """Context items first, then the transcript of prior turns."""
    parts = [render_context_items(items), render_transcript(turns)]
    return "\n\n".join(p for p in parts if p)
