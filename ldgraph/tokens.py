"""Token-based matching of property names against variesBy dimensions.

A ProductGroup's `variesBy` lists the dimensions that distinguish its
variants. Deciding whether a variant property belongs to one of those
dimensions is done on word tokens, not characters: `colorway` is a single
token and therefore never matches the dimension `color`, while `frameSize`
and `FrameSize` normalize to the same `["frame", "size"]` sequence.
"""

import re
from typing import Iterable, Sequence

from ldgraph.resolver import shorten_iri

_SEPARATORS = re.compile(r"[\W_]+")


def _is_boundary(prev: str, ch: str, nxt: str) -> bool:
    if ch.isdigit() != prev.isdigit():
        return True
    if not ch.isupper():
        return False
    # "sizeXL" -> size|XL, "HTMLParser" -> HTML|Parser
    return prev.islower() or (prev.isupper() and nxt.islower())


def _split_case(chunk: str) -> list[str]:
    tokens: list[str] = []
    start = 0
    for i in range(1, len(chunk)):
        nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
        if _is_boundary(chunk[i - 1], chunk[i], nxt):
            tokens.append(chunk[start:i])
            start = i
    if chunk:
        tokens.append(chunk[start:])
    return tokens


def normalize_tokens(name: str) -> list[str]:
    """Split a property name into lower-case word tokens.

    IRIs are shortened first, so `https://schema.org/FrameSize` and
    `frame_size` both give `["frame", "size"]`.
    """
    tokens: list[str] = []
    for chunk in _SEPARATORS.split(shorten_iri(name.strip())):
        tokens.extend(token.lower() for token in _split_case(chunk))
    return tokens


def _contains_run(tokens: Sequence[str], run: Sequence[str]) -> bool:
    width = len(run)
    return any(list(tokens[i:i + width]) == list(run) for i in range(len(tokens) - width + 1))


class TokenMatcher:
    """Matches property names against a fixed set of varying dimensions."""

    def __init__(self, varies_by: Iterable[str]) -> None:
        self.varies_by = tuple(varies_by)
        self._dimensions = [tokens for tokens in map(normalize_tokens, self.varies_by) if tokens]

    def is_varying(self, prop_name: str) -> bool:
        tokens = normalize_tokens(prop_name)
        if not tokens:
            return False
        return any(_contains_run(tokens, dimension) for dimension in self._dimensions)


def is_varying(prop_name: str, varies_by: Iterable[str]) -> bool:
    """True when some `varies_by` entry's tokens occur as a contiguous run in `prop_name`'s tokens."""
    return TokenMatcher(varies_by).is_varying(prop_name)
