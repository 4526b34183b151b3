"""
Linked Data Graph Schema - Pydantic Models

This package contains only Pydantic models with no functional code. It
defines:

- The knowledge graph built from an expanded JSON-LD document
- The insight summaries inferred from that graph

These are produced by ldgraph and consumed by renderers and exporters.
"""

from ldschema.graph import GraphEdge, GraphNode, KnowledgeGraph
from ldschema.insights import (
    BreadcrumbItem,
    DataDownloadEntry,
    GraphInsights,
    OrganizationInfo,
    PriceStats,
    ProductGroupSummary,
    VariantSummary,
)

__all__ = [
    "BreadcrumbItem",
    "DataDownloadEntry",
    "GraphEdge",
    "GraphInsights",
    "GraphNode",
    "KnowledgeGraph",
    "OrganizationInfo",
    "PriceStats",
    "ProductGroupSummary",
    "VariantSummary",
]

__version__ = "0.1.0"
