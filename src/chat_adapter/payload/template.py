"""Template engine - fills {{Name}} placeholders in a JSON-shaped template.

Works on raw text: the template is not valid JSON until every placeholder is
substituted, so nothing here parses it.
"""

import json
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}")


def placeholder(name: str) -> str:
    """Token form of a variable name."""
    return "{{" + name + "}}"


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, Mapping):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def render_value(value: Any) -> str:
    """
    Text substituted for one variable.
    Strings: JSON-escaped body without surrounding quotes (the template supplies them).
    Everything else: JSON text, so an unquoted slot expands into an array or literal.
    """
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)[1:-1]
    return json.dumps(_to_jsonable(value), ensure_ascii=False)


def fill_template(template: str, variables: Mapping[str, Any]) -> str:
    """
    Replace every occurrence of each known placeholder. Unknown tokens are left as-is.
    Single pass: text coming from a value is never scanned for placeholders again.
    """
    rendered: dict[str, str] = {}

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        if name not in rendered:
            rendered[name] = render_value(variables[name])
        return rendered[name]

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def find_unresolved(filled: str) -> list[str]:
    """Placeholder tokens still present after filling."""
    return [match.group(0) for match in PLACEHOLDER_PATTERN.finditer(filled)]


def references(template: str, name: str) -> bool:
    return placeholder(name) in template
