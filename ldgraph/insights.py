"""Schema.org insight extraction over a finalized knowledge graph.

`InsightsEngine` runs a single pass over an immutable `KnowledgeGraph` and
produces `GraphInsights`:

- **Product groups**: every `ProductGroup` node with its variants (reached
  over `hasVariant`, or pointing back with `isVariantOf`), each variant's
  offer, the group's price range and availability counts. When the graph has
  no ProductGroup, each Product that is not itself a variant is summarized
  as a standalone group.
- **Property inheritance**: a property missing on a variant is resolved on
  its `isVariantOf` parent, up to `InsightsConfig.max_inheritance_depth`
  hops, guarded by a visited set.
- **Common properties**: properties of the first variant that do not match a
  `variesBy` dimension (see `ldgraph.tokens`) and resolve to the same text on
  every variant are promoted to the group.
- **Organization, breadcrumbs, data downloads**: scanned by type and read
  through the same fallback-aware property lookup.

Missing data never raises: absent properties become `None`, a group without
variants has an empty variant list, and malformed literals are skipped for
the affected field only.
"""

from typing import Iterator, NamedTuple

from ldschema.graph import GraphNode, KnowledgeGraph
from ldschema.insights import (
    BreadcrumbItem,
    DataDownloadEntry,
    GraphInsights,
    OrganizationInfo,
    ProductGroupSummary,
    VariantSummary,
)

from ldgraph.adjacency import AdjacencyIndex
from ldgraph.config import InsightsConfig
from ldgraph.logging import PprintLogger, get_logger
from ldgraph.pricing import PriceAccumulator, format_price, parse_price
from ldgraph.resolver import has_schema_type, property_list, property_text, shorten_iri
from ldgraph.tokens import TokenMatcher
from ldgraph.value import find_nested_text, json_value_to_text


class Offer(NamedTuple):
    price: float | None
    price_display: str | None
    currency: str | None
    availability: str | None


class _VariantDraft(NamedTuple):
    node: GraphNode
    lineage: list[GraphNode]
    properties: dict[str, str]
    inherited: list[str]
    offer: Offer | None


class InsightsEngine:
    """Derives `GraphInsights` from one knowledge graph.

    The adjacency index and node map are built once at construction; the
    graph must not change afterwards.
    """

    def __init__(
        self,
        graph: KnowledgeGraph,
        config: InsightsConfig | None = None,
        logger: PprintLogger | None = None,
    ) -> None:
        self.graph = graph
        self.config = config or InsightsConfig()
        self._logger = logger or get_logger(__name__)
        self._nodes = graph.nodes_by_id()
        self._index = AdjacencyIndex.build(graph)
        self._non_inheritable = {name.casefold() for name in self.config.non_inheritable_properties}

    def analyze(self) -> GraphInsights:
        groups = [self.summarize_group(node) for node in self.graph.nodes if has_schema_type(node, "ProductGroup")]
        if not groups:
            groups = [self.summarize_group(node, standalone=True) for node in self._standalone_products()]

        insights = GraphInsights(
            product_groups=tuple(groups),
            organization=self.organization(),
            breadcrumbs=tuple(self.breadcrumbs()),
            data_downloads=tuple(self.data_downloads()),
            entity_types=tuple(sorted({shorten_iri(t) for node in self.graph.nodes for t in node.types})),
        )
        self._logger.info(
            "Extracted %d product group(s), %d breadcrumb(s), %d data download(s) from %d node(s)",
            len(insights.product_groups),
            len(insights.breadcrumbs),
            len(insights.data_downloads),
            len(self.graph.nodes),
            pprint=False,
        )
        self._logger.debug(insights)
        return insights

    # -- lookup helpers --

    def _text(self, node: GraphNode, name: str) -> str | None:
        return property_text(node, self.config.keys(name))

    def _related(self, node_id: str, predicate: str) -> list[GraphNode]:
        related = []
        for target_id in self._index.targets(node_id, predicate):
            target = self._nodes.get(target_id)
            if target is None:
                self._logger.debug("Dangling %s edge %s -> %s", predicate, node_id, target_id, pprint=False)
                continue
            related.append(target)
        return related

    def _text_or_ref(self, node: GraphNode, name: str) -> str | None:
        """Literal text of `name`, else the id of the first node it references.

        Schema.org declares URL-valued properties (url, contentUrl, item,
        availability, ...) as `@id`, so expansion turns them into edges.
        """
        text = self._text(node, name)
        if text:
            return text
        for target_id in self._index.targets(node.id, name):
            if not target_id.startswith("_:"):
                return target_id
        return None

    def lineage(self, node: GraphNode) -> list[GraphNode]:
        """The node followed by its isVariantOf ancestors, nearest first."""
        chain = [node]
        seen = {node.id}
        frontier = [node]
        for _ in range(self.config.max_inheritance_depth):
            next_frontier = []
            for current in frontier:
                for parent in self._related(current.id, "isVariantOf"):
                    if parent.id in seen:
                        continue
                    seen.add(parent.id)
                    chain.append(parent)
                    next_frontier.append(parent)
            if not next_frontier:
                break
            frontier = next_frontier
        return chain

    def inherited_text(self, node: GraphNode, name: str) -> str | None:
        """Resolve `name` on the node, falling back to its isVariantOf parents."""
        for depth, current in enumerate(self.lineage(node)):
            if depth and name.casefold() in self._non_inheritable:
                break
            text = self._text(current, name)
            if text is not None:
                return text
        return None

    # -- product groups --

    def _own_properties(self, node: GraphNode) -> dict[str, str]:
        properties: dict[str, str] = {}
        for key, value in node.properties.items():
            name = shorten_iri(key)
            if name in properties:
                continue
            text = json_value_to_text(value)
            if text is None:
                self._logger.debug("Skipping non-text literal %s on %s", key, node.id, pprint=False)
                continue
            properties[name] = text
        for prop in self._related(node.id, "additionalProperty"):
            if not has_schema_type(prop, "PropertyValue"):
                continue
            name = self._text(prop, "name") or self._text(prop, "propertyID")
            value = self._text(prop, "value") or self._text_or_ref(prop, "valueReference")
            if name and value is not None and name not in properties:
                properties[name] = value
        return properties

    def _effective_properties(self, lineage: list[GraphNode]) -> tuple[dict[str, str], list[str]]:
        properties: dict[str, str] = {}
        inherited: list[str] = []
        for depth, node in enumerate(lineage):
            for name, value in self._own_properties(node).items():
                if name in properties:
                    continue
                if depth:
                    if name.casefold() in self._non_inheritable:
                        continue
                    inherited.append(name)
                properties[name] = value
        return properties, inherited

    def _offer(self, lineage: list[GraphNode]) -> Offer | None:
        for node in lineage:
            for target in self._related(node.id, "offers"):
                if not has_schema_type(target, "Offer"):
                    continue
                price_raw = self._text(target, "price")
                price = parse_price(price_raw)
                currency = self._text(target, "priceCurrency")
                availability = self._text_or_ref(target, "availability")
                return Offer(
                    price=price,
                    price_display=format_price(price, currency) if price is not None else price_raw,
                    currency=currency,
                    availability=shorten_iri(availability) if availability else None,
                )
        return None

    def _variant_nodes(self, group: GraphNode) -> list[GraphNode]:
        ids = self._index.targets(group.id, "hasVariant") + self._index.sources(group.id, "isVariantOf")
        variants: list[GraphNode] = []
        seen: set[str] = set()
        for node_id in ids:
            if node_id in seen or node_id == group.id:
                continue
            seen.add(node_id)
            node = self._nodes.get(node_id)
            if node is None:
                self._logger.debug("Variant %s of %s is not in the graph", node_id, group.id, pprint=False)
                continue
            variants.append(node)
        return variants

    def _draft(self, node: GraphNode) -> _VariantDraft:
        lineage = self.lineage(node)
        properties, inherited = self._effective_properties(lineage)
        return _VariantDraft(node, lineage, properties, inherited, self._offer(lineage))

    def _brand(self, node: GraphNode) -> str | None:
        for brand in self._related(node.id, "brand"):
            name = self._text(brand, "name")
            if name:
                return name
        return self._text(node, "brand")

    def summarize_group(self, group: GraphNode, standalone: bool = False) -> ProductGroupSummary:
        varies_by = property_list(group, self.config.keys("variesBy"))
        varies_by += [target for target in self._index.targets(group.id, "variesBy") if target not in varies_by]
        matcher = TokenMatcher(varies_by)

        variant_nodes = self._variant_nodes(group)
        # a lone product is its own single variant
        self_variant = standalone and not variant_nodes
        if self_variant:
            variant_nodes = [group]
        drafts = [self._draft(node) for node in variant_nodes]

        common: dict[str, str] = {}
        if drafts and not self_variant:
            for name, value in drafts[0].properties.items():
                if matcher.is_varying(name):
                    continue
                if all(draft.properties.get(name) == value for draft in drafts[1:]):
                    common[name] = value

        varying: list[str] = []
        for draft in drafts:
            for name in draft.properties:
                if name not in varying and matcher.is_varying(name):
                    varying.append(name)

        prices = PriceAccumulator()
        availability_counts: dict[str, int] = {}
        variants = []
        for draft in drafts:
            variant = self._variant_summary(draft, common)
            variants.append(variant)
            prices.add(variant.price, variant.price_currency)
            if variant.availability:
                availability_counts[variant.availability] = availability_counts.get(variant.availability, 0) + 1
        variants.sort(key=lambda v: (v.sku is not None, v.sku or ""))

        if standalone:
            group_id = self._text(group, "productID") or self._text(group, "sku")
        else:
            group_id = self._text(group, "productGroupID")

        return ProductGroupSummary(
            id=group.id,
            name=self._text(group, "name"),
            product_group_id=group_id,
            brand=self._brand(group),
            varies_by=tuple(varies_by),
            variants=tuple(variants),
            total_variants=len(variants),
            common_properties=common,
            varying_properties=tuple(varying),
            price_stats=prices.stats(),
            availability_counts=availability_counts,
            standalone=standalone,
        )

    def _variant_summary(self, draft: _VariantDraft, common: dict[str, str]) -> VariantSummary:
        offer = draft.offer
        return VariantSummary(
            id=draft.node.id,
            sku=self._text(draft.node, "sku"),
            name=self.inherited_text(draft.node, "name"),
            parent_id=draft.lineage[1].id if len(draft.lineage) > 1 else None,
            properties={name: value for name, value in draft.properties.items() if name not in common},
            inherited=tuple(name for name in draft.inherited if name not in common),
            price=offer.price if offer else None,
            price_display=offer.price_display if offer else None,
            price_currency=offer.currency if offer else None,
            availability=offer.availability if offer else None,
        )

    def _standalone_products(self) -> Iterator[GraphNode]:
        for node in self.graph.nodes:
            if not has_schema_type(node, "Product"):
                continue
            if self._index.targets(node.id, "isVariantOf") or self._index.sources(node.id, "hasVariant"):
                continue
            yield node

    # -- organization, breadcrumbs, downloads --

    def organization(self) -> OrganizationInfo | None:
        for type_name in self.config.organization_types:
            for node in self.graph.nodes:
                if has_schema_type(node, type_name):
                    return self._organization_info(node)
        return None

    def _organization_info(self, node: GraphNode) -> OrganizationInfo:
        logo = self._text(node, "logo")
        if not logo:
            for image in self._related(node.id, "logo"):
                logo = self._text(image, "url") or self._text(image, "contentUrl")
                if not logo and not image.id.startswith("_:"):
                    logo = image.id
                if logo:
                    break
        same_as = property_list(node, self.config.keys("sameAs"))
        same_as += [target for target in self._index.targets(node.id, "sameAs") if target not in same_as]
        return OrganizationInfo(
            id=node.id,
            name=self._text(node, "name"),
            url=self._text_or_ref(node, "url"),
            description=self._text(node, "description"),
            logo=logo,
            same_as=tuple(same_as),
        )

    def breadcrumbs(self) -> list[BreadcrumbItem]:
        crumbs: list[BreadcrumbItem] = []
        for node in self.graph.nodes:
            if not has_schema_type(node, "BreadcrumbList"):
                continue
            items = [self._breadcrumb_item(node.id, element) for element in self._related(node.id, "itemListElement")]
            items.sort(key=lambda item: (item.position is None, item.position or 0))
            crumbs.extend(items)
        return crumbs

    def _breadcrumb_item(self, list_id: str, element: GraphNode) -> BreadcrumbItem:
        name = self._text(element, "name")
        url = self._text(element, "item")
        for item in self._related(element.id, "item"):
            name = name or self._text(item, "name")
            if not url:
                url = self._text(item, "url") or (None if item.id.startswith("_:") else item.id)
        return BreadcrumbItem(
            list_id=list_id,
            position=_parse_position(self._text(element, "position")),
            name=name,
            url=url or self._text_or_ref(element, "url"),
        )

    def _content_url(self, node: GraphNode) -> str | None:
        url = self._text_or_ref(node, "contentUrl")
        if url:
            return url
        return find_nested_text(node.properties, lambda key: shorten_iri(key).casefold() == "contenturl")

    def data_downloads(self) -> list[DataDownloadEntry]:
        entries: list[DataDownloadEntry] = []
        for node in self.graph.nodes:
            if not has_schema_type(node, "DataDownload"):
                continue
            content_url = self._content_url(node)
            if not content_url:
                self._logger.debug("DataDownload %s has no contentUrl", node.id, pprint=False)
                continue
            entries.append(
                DataDownloadEntry(
                    id=node.id,
                    content_url=content_url,
                    encoding_format=self._text(node, "encodingFormat"),
                    license=self._text_or_ref(node, "license"),
                    name=self._text(node, "name"),
                )
            )
        return entries


def _parse_position(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        return None


def extract_insights(graph: KnowledgeGraph, config: InsightsConfig | None = None) -> GraphInsights:
    return InsightsEngine(graph, config=config).analyze()
