"""Fallback-aware property lookup over graph nodes.

Source JSON-LD is inconsistent about how it spells the same property: the
`https://schema.org/` vocabulary, the legacy `http://schema.org/` one, or a
bare short name left over from a compacted document. Callers pass an ordered
list of candidate keys (usually from `schema_keys`) and resolution is strictly
first match, never merged across keys.
"""

import re
from typing import Mapping, Sequence

from ldschema.graph import GraphNode

from ldgraph.value import JsonValue, json_value_display, json_value_to_text

SCHEMA_HTTPS = "https://schema.org/"
SCHEMA_HTTP = "http://schema.org/"
DEFAULT_VOCABULARIES: tuple[str, ...] = (SCHEMA_HTTPS, SCHEMA_HTTP)

_SCHEME_ALTERNATES = ((SCHEMA_HTTPS, SCHEMA_HTTP), (SCHEMA_HTTP, SCHEMA_HTTPS))
_SEGMENT_SEPARATOR = re.compile(r"[/#]")

Properties = Mapping[str, JsonValue]


def schema_keys(name: str, vocabularies: Sequence[str] = DEFAULT_VOCABULARIES) -> tuple[str, ...]:
    """Candidate keys for one logical property, full IRIs first.

    >>> schema_keys("name")
    ('https://schema.org/name', 'http://schema.org/name', 'name')
    """
    return tuple(f"{vocab}{name}" for vocab in vocabularies) + (name,)


def shorten_iri(iri: str) -> str:
    """Return the trailing segment after the last `/` or `#`.

    Strings without a separator are returned unchanged, as is an IRI that
    ends with a separator.
    """
    segment = _SEGMENT_SEPARATOR.split(iri)[-1]
    return segment or iri


def _properties(node: GraphNode | Properties) -> Properties:
    return node.properties if isinstance(node, GraphNode) else node


def resolve_property(properties: Properties, key: str) -> JsonValue:
    """Look up `key`, then its other schema.org scheme, then its bare name."""
    if key in properties:
        return properties[key]
    for prefix, alternate in _SCHEME_ALTERNATES:
        if key.startswith(prefix):
            alt_key = alternate + key[len(prefix):]
            if alt_key in properties:
                return properties[alt_key]
            break
    short = shorten_iri(key)
    if short != key and short in properties:
        return properties[short]
    return None


def property_text(node: GraphNode | Properties, keys: Sequence[str]) -> str | None:
    """Text of the first candidate key holding a usable literal."""
    properties = _properties(node)
    for key in keys:
        value = resolve_property(properties, key)
        if value is None:
            continue
        text = json_value_to_text(value)
        if text is not None:
            return text
    return None


def property_list(node: GraphNode | Properties, keys: Sequence[str]) -> list[str]:
    """All display strings of the first candidate key present (arrays expanded)."""
    properties = _properties(node)
    for key in keys:
        value = resolve_property(properties, key)
        if value is None:
            continue
        items = value if isinstance(value, list) else [value]
        texts = [json_value_display(item) for item in items]
        return [text for text in texts if text]
    return []


def has_schema_type(node: GraphNode, type_name: str) -> bool:
    wanted = shorten_iri(type_name).casefold()
    return any(shorten_iri(t).casefold() == wanted for t in node.types)


def predicate_matches(predicate: str, name: str) -> bool:
    return shorten_iri(predicate).casefold() == name.casefold()
