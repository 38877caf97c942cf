"""Request payload templating and response extraction."""

from chat_adapter.payload.extractor import extract_reply
from chat_adapter.payload.lenient_json import loads_lenient, parse_payload
from chat_adapter.payload.template import fill_template, find_unresolved

__all__ = [
    "extract_reply",
    "fill_template",
    "find_unresolved",
    "loads_lenient",
    "parse_payload",
]
