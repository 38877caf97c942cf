"""Lenient JSON parsing for filled payload templates.

Templates are user-authored and often carry raw newlines or stray backslashes
inside system-prompt text. Parsing tries strict JSON first, then the repair
passes below applied in order, then gives up with PayloadParseError.
parse_payload() turns that last case into a fallback {model, messages} body.
"""

import json
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from chat_adapter.errors import PayloadParseError

logger = logging.getLogger(__name__)

RepairPass = Callable[[str], str]

_COLON_SPACING = re.compile(r"""(['"])\s*:\s*""")
_TRAILING_COMMA_OBJECT = re.compile(r",\s*}")
_TRAILING_COMMA_ARRAY = re.compile(r",\s*\]")
_RAW_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}
_ERROR_WINDOW = 20


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n")


def escape_backslashes(text: str) -> str:
    return text.replace("\\", "\\\\")


def restore_escapes(text: str) -> str:
    """Undo the doubling for newline, tab and quote escapes."""
    return text.replace("\\\\n", "\\n").replace("\\\\t", "\\t").replace('\\\\"', '\\"')


def escape_raw_controls(text: str) -> str:
    """Escape literal newlines, carriage returns and tabs inside string literals."""
    out: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            elif ch in _RAW_CONTROL_ESCAPES:
                out.append(_RAW_CONTROL_ESCAPES[ch])
                continue
        elif ch == '"':
            in_string = True
        out.append(ch)
    return "".join(out)


def collapse_colon_spacing(text: str) -> str:
    return _COLON_SPACING.sub(r"\1:", text)


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_ARRAY.sub("]", _TRAILING_COMMA_OBJECT.sub("}", text))


REPAIR_PASSES: tuple[RepairPass, ...] = (
    normalize_line_endings,
    escape_backslashes,
    restore_escapes,
    escape_raw_controls,
    collapse_colon_spacing,
    strip_trailing_commas,
)


def repair(text: str, passes: Sequence[RepairPass] = REPAIR_PASSES) -> str:
    for repair_pass in passes:
        text = repair_pass(text)
    return text


def _loads_object(text: str) -> dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise PayloadParseError(f"Payload must be a JSON object, got {type(data).__name__}")
    return data


def _log_error_position(text: str, err: json.JSONDecodeError) -> None:
    start = max(0, err.pos - _ERROR_WINDOW)
    end = min(len(text), err.pos + _ERROR_WINDOW)
    logger.debug(
        "JSON error at position %s (line %s, column %s). Characters around it: %r",
        err.pos,
        err.lineno,
        err.colno,
        text[start:end],
    )


def loads_lenient(text: str) -> dict[str, Any]:
    """Strict parse, then one repaired parse. Raises PayloadParseError."""
    cleaned = text.strip().lstrip("\ufeff").strip()
    try:
        return _loads_object(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Initial payload JSON parse failed, repairing template: %s", e)
        _log_error_position(cleaned, e)
    except PayloadParseError as e:
        logger.warning("%s, repairing template", e)

    repaired = repair(cleaned)
    try:
        return _loads_object(repaired)
    except json.JSONDecodeError as e:
        _log_error_position(repaired, e)
        raise PayloadParseError(f"Repaired payload still invalid: {e}", position=e.pos) from e


def parse_payload(
    filled: str,
    *,
    model: str,
    messages: Sequence[dict[str, Any]],
) -> dict[str, Any]:
    """Parsed request body. Never raises: falls back to {model, messages}."""
    try:
        payload = loads_lenient(filled)
    except PayloadParseError as e:
        logger.warning("Error parsing payload template, using fallback payload: %s", e)
        return {"model": model, "messages": list(messages)}
    logger.debug("Parsed payload template with keys: %s", sorted(payload))
    return payload
