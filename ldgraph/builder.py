"""Knowledge graph construction from expanded JSON-LD.

`GraphBuilder` walks the node objects of an already-expanded JSON-LD
document (every key a full IRI, every value an array) and produces a
`KnowledgeGraph`:

- value objects (`@value`) become literals stored on the node,
- node objects become nodes of their own, linked by an edge named after the
  property key,
- `@list` and `@set` objects are unwrapped, their literals kept together and
  their nodes linked,
- `@graph`, `@included` and `@reverse` members are linked with `@graph`,
  `@included` and inverted edges respectively.

Nodes without `@id` get an identifier from the injected `IdAllocator`. When
the same id is seen again the node is merged in place: types are unioned and
a later literal replaces an earlier one under the same key. Structural
anomalies (nested arrays, bare scalars, non-array values) are recovered
locally and logged at debug level; nothing here raises on malformed input.
Nested nodes are processed on an explicit stack rather than by recursion, so
arbitrarily deep documents do not hit the interpreter recursion limit.

Example:
    ```python
    builder = GraphBuilder()
    builder.ingest(expanded_document)
    graph = builder.into_graph()
    ```
"""

from typing import Any, Generator, Iterable, Iterator, Mapping

from ldschema.graph import GraphEdge, GraphNode, KnowledgeGraph

from ldgraph.ids import IdAllocator, UuidIdAllocator
from ldgraph.logging import PprintLogger, get_logger
from ldgraph.value import JsonValue

GRAPH_PREDICATE = "@graph"
INCLUDED_PREDICATE = "@included"

# yields nested node objects, receives their ids, returns a node id or None
_Frame = Generator[Mapping[str, Any], str, str | None]


class _PendingNode:
    """Mutable node state while the document is still being ingested."""

    __slots__ = ("id", "types", "properties")

    def __init__(self, node_id: str) -> None:
        self.id = node_id
        self.types: list[str] = []
        self.properties: dict[str, JsonValue] = {}


class GraphBuilder:
    """Accumulates nodes and edges from one or more expanded documents.

    The builder is single use: `into_graph()` finalizes it, after which both
    `ingest()` and `into_graph()` raise `RuntimeError`.
    """

    def __init__(self, id_allocator: IdAllocator | None = None, logger: PprintLogger | None = None) -> None:
        self._allocator = id_allocator or UuidIdAllocator()
        self._logger = logger or get_logger(__name__)
        self._nodes: dict[str, _PendingNode] = {}
        self._edges: list[GraphEdge] = []
        self._processing: set[str] = set()
        self._finalized = False

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("GraphBuilder has already been finalized by into_graph()")

    def ingest(self, document: Iterable[Any] | Mapping[str, Any]) -> None:
        """Add every top-level node object of an expanded document."""
        self._check_open()
        count = 0
        for obj in self._top_level_objects(document):
            self._processing.clear()
            self._run(self._process_object(obj))
            count += 1
        self._logger.debug(
            "Ingested %d top-level object(s); graph now has %d node(s), %d edge(s)",
            count,
            len(self._nodes),
            len(self._edges),
            pprint=False,
        )

    def into_graph(self) -> KnowledgeGraph:
        """Finalize and return the graph, nodes sorted by id."""
        self._check_open()
        self._finalized = True
        nodes = [
            GraphNode(id=pending.id, types=sorted(set(pending.types)), properties=pending.properties)
            for pending in sorted(self._nodes.values(), key=lambda p: p.id)
        ]
        return KnowledgeGraph(nodes=nodes, edges=self._edges)

    # -- traversal --

    def _top_level_objects(self, document: Iterable[Any] | Mapping[str, Any]) -> Iterator[Any]:
        if isinstance(document, Mapping):
            if "@graph" in document and set(document) <= {"@graph", "@context"}:
                yield from self._flatten(document["@graph"])
            else:
                yield document
            return
        if isinstance(document, (str, bytes)):
            self._logger.debug("Skipping non-object document %r", document, pprint=False)
            return
        for item in document:
            yield from self._flatten(item)

    def _run(self, frame: _Frame) -> str | None:
        """Drive `frame` to completion on an explicit stack.

        Each nested node object a frame yields is processed in a frame of its
        own, and the resulting node id is sent back to the waiting parent.
        Nesting depth is bounded by memory, not by the recursion limit.
        """
        stack = [frame]
        sent: str | None = None
        while True:
            try:
                nested = stack[-1].send(sent)
            except StopIteration as stop:
                stack.pop()
                if not stack:
                    return stop.value
                sent = stop.value
                continue
            stack.append(self._process_node(nested))
            sent = None

    def _process_object(self, obj: Any) -> _Frame:
        """Process a top-level or container member; returns a node id for node objects."""
        if not isinstance(obj, Mapping):
            self._logger.debug("Skipping non-object member %r", obj, pprint=False)
            return None
        if "@value" in obj:
            return None
        for container in ("@list", "@set"):
            if container in obj:
                for item in self._flatten(obj[container]):
                    yield from self._process_object(item)
                return None
        return (yield obj)

    def _node_identifier(self, node: Mapping[str, Any]) -> str:
        raw = node.get("@id")
        if isinstance(raw, str) and raw.strip():
            return raw
        node_id = self._allocator.allocate()
        while node_id in self._nodes:
            node_id = self._allocator.allocate()
        return node_id

    def _process_node(self, node: Mapping[str, Any]) -> _Frame:
        node_id = self._node_identifier(node)
        pending = self._nodes.get(node_id)
        if pending is None:
            pending = self._nodes[node_id] = _PendingNode(node_id)

        if node_id in self._processing:
            return node_id
        self._processing.add(node_id)
        try:
            for type_iri in self._flatten(node.get("@type")):
                if isinstance(type_iri, str) and type_iri not in pending.types:
                    pending.types.append(type_iri)

            for keyword, predicate in (("@graph", GRAPH_PREDICATE), ("@included", INCLUDED_PREDICATE)):
                for member in self._flatten(node.get(keyword)):
                    target_id = yield from self._process_object(member)
                    if target_id is not None:
                        self._link(node_id, target_id, predicate)

            reverse = node.get("@reverse")
            if isinstance(reverse, Mapping):
                for predicate, values in reverse.items():
                    for member in self._flatten(values):
                        if isinstance(member, Mapping) and "@value" not in member:
                            source_id = yield member
                            self._link(source_id, node_id, predicate)

            for key, raw in node.items():
                if key.startswith("@"):
                    continue
                collected: list[JsonValue] = []
                for element in self._flatten(raw):
                    yield from self._handle_value(node_id, key, element, collected)
                if collected:
                    # last occurrence of a key wins across merges
                    pending.properties[key] = collected[0] if len(collected) == 1 else collected
        finally:
            self._processing.discard(node_id)
        return node_id

    def _handle_value(self, source_id: str, predicate: str, element: Any, collected: list[JsonValue]) -> _Frame:
        if not isinstance(element, Mapping):
            self._logger.debug("Bare literal under %s on %s", predicate, source_id, pprint=False)
            collected.append(element)
            return None
        if "@value" in element:
            collected.append(_literal(element))
        elif "@list" in element:
            items: list[JsonValue] = []
            for item in self._flatten(element["@list"]):
                yield from self._handle_value(source_id, predicate, item, items)
            if items:
                collected.append(items)
        elif "@set" in element:
            for item in self._flatten(element["@set"]):
                yield from self._handle_value(source_id, predicate, item, collected)
        else:
            target_id = yield element
            self._link(source_id, target_id, predicate)
        return None

    def _link(self, from_id: str, to_id: str, predicate: str) -> None:
        self._edges.append(GraphEdge(from_id=from_id, to=to_id, predicate=predicate))

    def _flatten(self, value: Any) -> Iterator[Any]:
        """Yield array members, flattening nested arrays and wrapping single values."""
        if value is None:
            return
        if not isinstance(value, (list, tuple)):
            yield value
            return
        for item in value:
            if isinstance(item, (list, tuple)):
                self._logger.debug("Flattening nested array of %d item(s)", len(item), pprint=False)
                yield from self._flatten(item)
            else:
                yield item


def _literal(value_object: Mapping[str, Any]) -> JsonValue:
    """Unwrap a value object, keeping language and direction annotations."""
    value = value_object["@value"]
    if value_object.get("@type") == "@json":
        return value
    language = value_object.get("@language")
    direction = value_object.get("@direction")
    if language is None and direction is None:
        return value
    annotated: dict[str, JsonValue] = {"@value": value}
    if language is not None:
        annotated["@language"] = language
    if direction is not None:
        annotated["@direction"] = direction
    return annotated


def build_graph(document: Iterable[Any] | Mapping[str, Any], id_allocator: IdAllocator | None = None) -> KnowledgeGraph:
    """Build a graph from a single expanded document."""
    builder = GraphBuilder(id_allocator=id_allocator)
    builder.ingest(document)
    return builder.into_graph()
