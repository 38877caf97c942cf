"""History manager - global context merge and deterministic truncation."""

from collections.abc import Sequence

from chat_adapter.models import ConversationTurn, Role


def find_system_turn(turns: Sequence[ConversationTurn]) -> ConversationTurn | None:
    return next((t for t in turns if t.role == Role.SYSTEM), None)


def merge_global_context(
    turns: Sequence[ConversationTurn],
    global_context: str,
) -> list[ConversationTurn]:
    """
    Fold global context into the system turn.
    No system turn: a new one is put first. Existing one: context is prepended
    unless already present verbatim. Input turns are never mutated.
    """
    merged = list(turns)
    if not global_context or not global_context.strip():
        return merged
    for i, turn in enumerate(merged):
        if turn.role != Role.SYSTEM:
            continue
        if global_context not in turn.content:
            merged[i] = turn.model_copy(update={"content": f"{global_context}\n\n{turn.content}"})
        return merged
    return [ConversationTurn(role=Role.SYSTEM, content=global_context), *merged]


def truncate_history(
    turns: Sequence[ConversationTurn],
    max_length: int,
) -> list[ConversationTurn]:
    """
    Keep at most max_length turns (max_length <= 0 means unbounded).
    The first system turn survives and stays first; the rest are the most recent turns.
    """
    if max_length <= 0 or len(turns) <= max_length:
        return list(turns)
    system = find_system_turn(turns)
    if system is None:
        return list(turns[-max_length:])
    others = [t for t in turns if t.role != Role.SYSTEM]
    keep = max_length - 1
    recent = others[-keep:] if keep > 0 else []
    return [system, *recent]
