"""
Linked Data Graph - JSON-LD Knowledge Graph and Schema.org Insights.

Turns an already-expanded JSON-LD document into a normalized knowledge graph
of nodes and typed edges, then infers higher-level insights from it (product
groups and variants, organization, breadcrumbs, data downloads):

    from ldgraph import build_graph, extract_insights

    graph = build_graph(expanded_document)
    insights = extract_insights(graph)

Fetching pages, resolving remote contexts and the expansion itself happen
upstream; rendering the results happens downstream.
"""

from ldschema.graph import GraphEdge, GraphNode, KnowledgeGraph
from ldschema.insights import GraphInsights

from ldgraph.adjacency import AdjacencyIndex, build_adjacency
from ldgraph.builder import GraphBuilder, build_graph
from ldgraph.config import InsightsConfig, load_insights_config
from ldgraph.ids import IdAllocator, SequentialIdAllocator, UuidIdAllocator
from ldgraph.insights import InsightsEngine, extract_insights
from ldgraph.resolver import (
    has_schema_type,
    predicate_matches,
    property_list,
    property_text,
    schema_keys,
    shorten_iri,
)
from ldgraph.tokens import TokenMatcher, is_varying, normalize_tokens

__all__ = [
    "AdjacencyIndex",
    "GraphBuilder",
    "GraphEdge",
    "GraphInsights",
    "GraphNode",
    "IdAllocator",
    "InsightsConfig",
    "InsightsEngine",
    "KnowledgeGraph",
    "SequentialIdAllocator",
    "TokenMatcher",
    "UuidIdAllocator",
    "build_adjacency",
    "build_graph",
    "extract_insights",
    "has_schema_type",
    "is_varying",
    "load_insights_config",
    "normalize_tokens",
    "predicate_matches",
    "property_list",
    "property_text",
    "schema_keys",
    "shorten_iri",
]

__version__ = "0.1.0"
