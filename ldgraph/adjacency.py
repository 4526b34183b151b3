"""Per-node edge lookup over a finalized knowledge graph.

`AdjacencyIndex` is a snapshot: it is built once in O(E) and gives O(1)
lookups of a node's outgoing (and incoming) edges afterwards. It does not
track later changes, so a graph that changes needs a fresh index.
"""

from typing import Sequence

from ldschema.graph import GraphEdge, KnowledgeGraph

from ldgraph.resolver import predicate_matches


def build_adjacency(graph: KnowledgeGraph) -> dict[str, list[GraphEdge]]:
    """Map each node id to its outgoing edges, in edge order."""
    adjacency: dict[str, list[GraphEdge]] = {}
    for edge in graph.edges:
        adjacency.setdefault(edge.from_id, []).append(edge)
    return adjacency


class AdjacencyIndex:
    """Outgoing and incoming edges keyed by node id."""

    def __init__(
        self,
        outgoing: dict[str, list[GraphEdge]],
        incoming: dict[str, list[GraphEdge]],
    ) -> None:
        self._outgoing = outgoing
        self._incoming = incoming

    @classmethod
    def build(cls, graph: KnowledgeGraph) -> "AdjacencyIndex":
        incoming: dict[str, list[GraphEdge]] = {}
        for edge in graph.edges:
            incoming.setdefault(edge.to, []).append(edge)
        return cls(build_adjacency(graph), incoming)

    def outgoing(self, node_id: str) -> Sequence[GraphEdge]:
        return self._outgoing.get(node_id, ())

    def incoming(self, node_id: str) -> Sequence[GraphEdge]:
        return self._incoming.get(node_id, ())

    def targets(self, node_id: str, predicate: str) -> list[str]:
        """Ids reached from `node_id` over edges named `predicate` (any IRI spelling)."""
        return [edge.to for edge in self.outgoing(node_id) if predicate_matches(edge.predicate, predicate)]

    def sources(self, node_id: str, predicate: str) -> list[str]:
        """Ids pointing at `node_id` over edges named `predicate`."""
        return [edge.from_id for edge in self.incoming(node_id) if predicate_matches(edge.predicate, predicate)]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._outgoing

    def __len__(self) -> int:
        return len(self._outgoing)
