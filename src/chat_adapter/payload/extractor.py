"""Response extractor - walks a dotted path into a decoded response body."""

from collections.abc import Mapping, Sequence
from typing import Any

from chat_adapter.errors import ExtractionError


def split_path(path: str) -> list[str]:
    return path.strip().split(".")


def _step(node: Any, segment: str, path: str) -> Any:
    if isinstance(node, Mapping):
        if segment not in node:
            raise ExtractionError(path, f"missing key {segment!r}")
        return node[segment]
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        if not (segment.isascii() and segment.isdigit()):
            raise ExtractionError(path, f"segment {segment!r} is not an index")
        index = int(segment)
        if index >= len(node):
            raise ExtractionError(path, f"index {index} out of range")
        return node[index]
    raise ExtractionError(path, f"cannot look up {segment!r} in {type(node).__name__}")


def extract_reply(data: Any, path: str) -> str:
    """
    Reply text at `path`, e.g. "choices.0.message.content".
    Numeric segments index sequences; on mappings every segment is a key.
    Raises ExtractionError when the path breaks or ends on nothing usable.
    """
    node = data
    for segment in split_path(path):
        node = _step(node, segment, path)
    if node is None or node == "":
        raise ExtractionError(path, "value is empty")
    if isinstance(node, (Mapping, list, tuple)):
        raise ExtractionError(path, f"value is a {type(node).__name__}, not text")
    return node if isinstance(node, str) else str(node)
