"""Blank-node identifier allocation.

Nodes without an `@id` get a generated identifier that is unique within one
build. The allocator is injected into `GraphBuilder` so tests can use
`SequentialIdAllocator` and assert exact graph shapes.
"""

import itertools
import uuid
from abc import ABC, abstractmethod


class IdAllocator(ABC):
    """Produces fresh blank-node identifiers."""

    @abstractmethod
    def allocate(self) -> str:
        """Return an identifier never returned before by this allocator."""


class UuidIdAllocator(IdAllocator):
    def __init__(self, prefix: str = "_:") -> None:
        self.prefix = prefix

    def allocate(self) -> str:
        return f"{self.prefix}{uuid.uuid4().hex}"


class SequentialIdAllocator(IdAllocator):
    """Deterministic ids: `_:gen0`, `_:gen1`, ..."""

    def __init__(self, prefix: str = "_:gen", start: int = 0) -> None:
        if not prefix.strip():
            raise ValueError("prefix must be a non-empty string")
        self.prefix = prefix
        self._counter = itertools.count(start)

    def allocate(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
