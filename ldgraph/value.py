"""Helpers over literal JSON values stored on graph nodes.

Literal values are pydantic `JsonValue`s: None, bool, int, float, str, a list
of JSON values, or an insertion-ordered dict of JSON values. Every helper here
checks `bool` before numbers, since `bool` is a subclass of `int`.
"""

import json
from typing import Callable

from pydantic import JsonValue

__all__ = [
    "JsonValue",
    "find_nested_text",
    "json_value_display",
    "json_value_to_text",
]


def _scalar_text(value: JsonValue) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return None


def json_value_to_text(value: JsonValue) -> str | None:
    """Coerce a literal to a single piece of text.

    Arrays yield their first element with non-empty text; mappings yield their
    `@value` (or `name`) member. Returns None when nothing usable is found.
    """
    if isinstance(value, list):
        for item in value:
            text = json_value_to_text(item)
            if text:
                return text
        return None
    if isinstance(value, dict):
        for key in ("@value", "name"):
            if key in value:
                text = json_value_to_text(value[key])
                if text is not None:
                    return text
        return None
    return _scalar_text(value)


def json_value_display(value: JsonValue) -> str:
    """Render any literal as display text, joining arrays with commas."""
    if isinstance(value, list):
        return ", ".join(json_value_display(item) for item in value)
    if isinstance(value, dict):
        if "@value" in value:
            return json_value_display(value["@value"])
        return json.dumps(value, ensure_ascii=False)
    text = _scalar_text(value)
    return "" if text is None else text


def find_nested_text(value: JsonValue, matches_key: Callable[[str], bool]) -> str | None:
    """Depth-first search for the first key accepted by `matches_key` whose value has text."""
    if isinstance(value, dict):
        for key, item in value.items():
            if matches_key(key):
                text = json_value_to_text(item)
                if text:
                    return text
        for item in value.values():
            found = find_nested_text(item, matches_key)
            if found:
                return found
    elif isinstance(value, list):
        for item in value:
            found = find_nested_text(item, matches_key)
            if found:
                return found
    return None
