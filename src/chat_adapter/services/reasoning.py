"""Reasoning splitter - separates a reasoning preamble from the answer for display."""

from chat_adapter.models import ReasoningDisplay, ReasoningSplit

PREVIEW_LENGTH = 100

REASONING_HEADER = """<div class="llm-reasoning-header">
  <span>AI Reasoning</span>
  <button class="llm-toggle-reasoning">Show/Hide</button>
</div>"""


def _response_block(answer: str) -> str:
    return f'<div class="llm-response">{answer}</div>'


def _preview(reasoning: str) -> str:
    if len(reasoning) > PREVIEW_LENGTH:
        return reasoning[:PREVIEW_LENGTH] + "..."
    return reasoning


def render_markup(reasoning: str, answer: str, display: ReasoningDisplay) -> str:
    """Display markup for a reply that had a reasoning section."""
    if display == ReasoningDisplay.HIDE:
        return _response_block(answer)
    if display == ReasoningDisplay.TRUNCATE:
        body = (
            f'<div class="llm-reasoning-preview">{_preview(reasoning)}</div>\n'
            f'<div class="llm-reasoning-full" style="display: none;">{reasoning}</div>'
        )
    else:
        body = f'<div class="llm-reasoning-full">{reasoning}</div>'
    return f'<div class="llm-reasoning">\n{REASONING_HEADER}\n{body}\n</div>\n{_response_block(answer)}'


def split_reasoning(
    reply: str,
    delimiter: str | None,
    display: ReasoningDisplay = ReasoningDisplay.TRUNCATE,
) -> ReasoningSplit:
    """
    Split on the first occurrence of `delimiter`.
    Later occurrences stay in the answer. A blank or absent delimiter, or no
    match, leaves the reply untouched with empty reasoning.
    """
    if not delimiter or not delimiter.strip() or delimiter not in reply:
        return ReasoningSplit(reasoning="", answer=reply, display_markup=reply)
    head, _, tail = reply.partition(delimiter)
    reasoning = head.strip()
    answer = tail.strip()
    return ReasoningSplit(
        reasoning=reasoning,
        answer=answer,
        display_markup=render_markup(reasoning, answer, ReasoningDisplay(display)),
    )
