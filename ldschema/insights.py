"""Insight models derived from a knowledge graph.

These are the structured results of Schema.org-aware analysis: product groups
and their variants, the publishing organization, breadcrumb trails and
downloadable datasets. They are read-only views built once per analysis run;
renderers (Markdown tables, Mermaid diagrams, JSON/CSV exports) consume them.
"""

from pydantic import BaseModel, Field


class PriceStats(BaseModel, frozen=True):
    """Price range over the offers of a product group."""

    min: float
    max: float
    currency: str | None = None


class VariantSummary(BaseModel, frozen=True):
    """One variant of a product group.

    `properties` holds the variant's effective properties (its own, then those
    inherited through `isVariantOf`) except the ones promoted to the group's
    `common_properties`.
    """

    id: str = Field(description="Node id of the variant.")
    sku: str | None = None
    name: str | None = None
    parent_id: str | None = Field(
        default=None,
        description="Nearest isVariantOf parent, if any.",
    )
    properties: dict[str, str] = Field(default_factory=dict)
    inherited: tuple[str, ...] = Field(
        default=(),
        description="Property names whose value came from a parent product.",
    )
    price: float | None = None
    price_display: str | None = None
    price_currency: str | None = None
    availability: str | None = Field(
        default=None,
        description="Shortened availability enum, e.g. 'InStock'.",
    )


class ProductGroupSummary(BaseModel, frozen=True):
    """A ProductGroup (or a standalone Product) with its variants."""

    id: str
    name: str | None = None
    product_group_id: str | None = None
    brand: str | None = None
    varies_by: tuple[str, ...] = ()
    variants: tuple[VariantSummary, ...] = ()
    total_variants: int = Field(default=0, ge=0)
    common_properties: dict[str, str] = Field(
        default_factory=dict,
        description="Non-varying properties shared by every variant.",
    )
    varying_properties: tuple[str, ...] = Field(
        default=(),
        description="Property names matching variesBy, in discovery order.",
    )
    price_stats: PriceStats | None = None
    availability_counts: dict[str, int] = Field(default_factory=dict)
    standalone: bool = Field(
        default=False,
        description="True when synthesized from a Product outside any ProductGroup.",
    )


class OrganizationInfo(BaseModel, frozen=True):
    id: str
    name: str | None = None
    url: str | None = None
    description: str | None = None
    logo: str | None = None
    same_as: tuple[str, ...] = ()


class BreadcrumbItem(BaseModel, frozen=True):
    list_id: str = Field(description="Id of the BreadcrumbList this item belongs to.")
    position: int | None = None
    name: str | None = None
    url: str | None = None


class DataDownloadEntry(BaseModel, frozen=True):
    id: str
    content_url: str
    encoding_format: str | None = None
    license: str | None = None
    name: str | None = None


class GraphInsights(BaseModel, frozen=True):
    """Everything inferred from one knowledge graph."""

    product_groups: tuple[ProductGroupSummary, ...] = ()
    organization: OrganizationInfo | None = None
    breadcrumbs: tuple[BreadcrumbItem, ...] = ()
    data_downloads: tuple[DataDownloadEntry, ...] = ()
    entity_types: tuple[str, ...] = Field(
        default=(),
        description="Sorted short names of every type present in the graph.",
    )

    def is_empty(self) -> bool:
        return not (
            self.product_groups
            or self.organization
            or self.breadcrumbs
            or self.data_downloads
            or self.entity_types
        )
