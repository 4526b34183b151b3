"""Knowledge graph representation for expanded JSON-LD documents.

This module defines the normalized output of graph construction:

- `GraphNode`: one JSON-LD node, identified by an IRI or a blank-node label,
  with its types and its literal-valued properties.
- `GraphEdge`: a typed relation between two node ids.
- `KnowledgeGraph`: the node arena plus the ordered edge list.

Edges reference nodes by id rather than holding them, so cyclic data
(a node reachable from itself through chained relations) is representable
without ownership problems. An edge target may dangle if the referenced node
was never materialized.

All models are frozen Pydantic models. The builder accumulates mutable state
internally and only constructs these once the graph is finalized.
"""

from typing import Any

from pydantic import BaseModel, Field, JsonValue


class GraphNode(BaseModel, frozen=True):
    """A node in the knowledge graph.

    `properties` holds literal values only, keyed by the property key exactly
    as it appeared in the expanded document (usually a full IRI such as
    `https://schema.org/name`). Relations to other nodes live in the graph's
    edge list instead.
    """

    id: str = Field(description="IRI or blank-node identifier, unique within a graph.")
    types: list[str] = Field(
        default_factory=list,
        description="Type IRIs or short names; may be empty.",
    )
    properties: dict[str, JsonValue] = Field(
        default_factory=dict,
        description="Literal property values keyed by property IRI.",
    )

    def to_json(self) -> dict[str, Any]:
        """Serialize using JSON-LD style `@id`/`@type` keys.

        Empty property maps are omitted.
        """
        out: dict[str, Any] = {"@id": self.id, "@type": list(self.types)}
        if self.properties:
            out["properties"] = dict(self.properties)
        return out

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "GraphNode":
        return cls(
            id=data["@id"],
            types=list(data.get("@type") or []),
            properties=dict(data.get("properties") or {}),
        )


class GraphEdge(BaseModel, frozen=True):
    """A directed, typed relation between two nodes."""

    from_id: str = Field(description="Id of the node the relation starts from.")
    to: str = Field(description="Id of the referenced node (may dangle).")
    predicate: str = Field(description="Relation IRI or short name, e.g. 'offers'.")

    def to_json(self) -> dict[str, str]:
        return {"from": self.from_id, "to": self.to, "predicate": self.predicate}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "GraphEdge":
        return cls(from_id=data["from"], to=data["to"], predicate=data["predicate"])


class KnowledgeGraph(BaseModel, frozen=True):
    """Nodes deduplicated by id plus edges in insertion order.

    Edge duplicates are allowed: if the source data repeats the same relation
    between the same two nodes, it appears more than once.
    """

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def node(self, node_id: str) -> GraphNode | None:
        """Find a node by id with a linear scan over `nodes`.

        This is O(N) per call; for repeated lookups build `nodes_by_id()` once.
        """
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_by_id(self) -> dict[str, GraphNode]:
        return {node.id: node for node in self.nodes}

    def to_json(self) -> dict[str, list[dict[str, Any]]]:
        """Return the `{"nodes": [...], "edges": [...]}` form handed to renderers."""
        return {
            "nodes": [node.to_json() for node in self.nodes],
            "edges": [edge.to_json() for edge in self.edges],
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "KnowledgeGraph":
        return cls(
            nodes=[GraphNode.from_json(n) for n in data.get("nodes", [])],
            edges=[GraphEdge.from_json(e) for e in data.get("edges", [])],
        )
