"""Test fixtures and expanded JSON-LD document factories.

This module provides:
- Small factories that write node objects in JSON-LD *expanded* form
  (full schema.org IRIs, every value an array, `{"@value": ...}` literals and
  `{"@id": ...}` references), so tests read close to the compacted markup a
  page would carry
- A deterministic id allocator fixture for exact graph-shape assertions
- A product catalogue document (ProductGroup, variants, shared parent
  product, offers, brand) used by the insight tests
- A site document (Organization, BreadcrumbList, nested DataDownloads)
"""

from typing import Any

import pytest

from ldgraph.builder import GraphBuilder
from ldgraph.ids import SequentialIdAllocator
from ldschema.graph import KnowledgeGraph

SDO = "https://schema.org/"
SHOP = "https://shop.example/"


def sdo(name: str) -> str:
    return f"{SDO}{name}"


def lit(value: Any, **annotations: str) -> dict[str, Any]:
    """A value object; annotations become `@language`, `@direction`, ..."""
    obj: dict[str, Any] = {"@value": value}
    for key, annotation in annotations.items():
        obj[f"@{key}"] = annotation
    return obj


def ref(node_id: str) -> dict[str, str]:
    return {"@id": node_id}


def json_lit(value: Any) -> dict[str, Any]:
    """An `@json` value object, stored on the node as raw JSON."""
    return {"@value": value, "@type": "@json"}


def expanded_node(node_id: str | None = None, types: tuple[str, ...] | list[str] = (), **properties: Any) -> dict[str, Any]:
    """Build an expanded node object.

    Short type and property names are turned into schema.org IRIs. Property
    values may be a single item or a list; dict items are kept as they are
    (nested nodes, references, value objects) and anything else is wrapped
    in a value object.
    """
    node: dict[str, Any] = {}
    if node_id is not None:
        node["@id"] = node_id
    if types:
        node["@type"] = [t if "://" in t else sdo(t) for t in types]
    for name, value in properties.items():
        items = value if isinstance(value, list) else [value]
        node[sdo(name)] = [item if isinstance(item, dict) else lit(item) for item in items]
    return node


def build(document: Any, allocator: SequentialIdAllocator | None = None) -> KnowledgeGraph:
    builder = GraphBuilder(id_allocator=allocator or SequentialIdAllocator())
    builder.ingest(document)
    return builder.into_graph()


def offer(price: str, currency: str = "EUR", availability: str = "InStock") -> dict[str, Any]:
    return expanded_node(
        None,
        ["Offer"],
        price=price,
        priceCurrency=currency,
        availability=ref(sdo(availability)),
    )


def bike_variant(color: str, size: str, price: str, availability: str) -> dict[str, Any]:
    sku = f"TB-1-{color.upper()}-{size}"
    return expanded_node(
        f"{SHOP}bike#{sku}",
        ["Product"],
        sku=sku,
        name=f"Trail Bike {color} {size}",
        color=color,
        size=size,
        description="Full suspension trail bike",
        isVariantOf=ref(f"{SHOP}bike#model"),
        offers=offer(price, availability=availability),
        additionalProperty=expanded_node(None, ["PropertyValue"], name="FrameSize", value=size),
    )


def make_bike_document() -> list[dict[str, Any]]:
    group = expanded_node(
        f"{SHOP}bike#group",
        ["ProductGroup"],
        name="Trail Bike",
        productGroupID="TB-1",
        variesBy=[sdo("color"), sdo("size")],
        brand=expanded_node(None, ["Brand"], name="Acme Cycles"),
        hasVariant=[
            bike_variant("Red", "M", "1299.00", "InStock"),
            bike_variant("Blue", "L", "1399.50", "OutOfStock"),
        ],
    )
    model = expanded_node(
        f"{SHOP}bike#model",
        ["Product"],
        name="Trail Bike Frame Model",
        material="aluminum",
        countryOfOrigin="DE",
    )
    return [group, model]


def make_site_document() -> list[dict[str, Any]]:
    organization = expanded_node(
        f"{SHOP}#org",
        ["Organization"],
        name="Acme Cycles GmbH",
        url=ref(SHOP),
        description="Bicycles since 1921",
        logo=expanded_node(None, ["ImageObject"], url=f"{SHOP}logo.png"),
        sameAs=[ref("https://social.example/acme"), ref("https://wiki.example/Acme")],
    )
    breadcrumbs = expanded_node(
        f"{SHOP}bike#breadcrumbs",
        ["BreadcrumbList"],
        itemListElement=[
            expanded_node(None, ["ListItem"], position=2, name="Bikes", item=ref(f"{SHOP}bikes")),
            expanded_node(None, ["ListItem"], position=1, item=expanded_node(f"{SHOP}", ["WebPage"], name="Home")),
            expanded_node(None, ["ListItem"], position="3", name="Trail Bike"),
        ],
    )
    catalog = expanded_node(
        f"{SHOP}data#catalog",
        ["DataCatalog"],
        name="Open product data",
        dataset=expanded_node(
            f"{SHOP}data#prices",
            ["Dataset"],
            name="Price history",
            distribution=[
                expanded_node(
                    f"{SHOP}data#prices-csv",
                    ["DataDownload"],
                    contentUrl=f"{SHOP}data/prices.csv",
                    encodingFormat="text/csv",
                    license=ref("https://creativecommons.org/licenses/by/4.0/"),
                ),
                expanded_node(
                    f"{SHOP}data#prices-json",
                    ["DataDownload"],
                    contentUrl=ref(f"{SHOP}data/prices.json"),
                    encodingFormat="application/json",
                ),
            ],
        ),
    )
    return [organization, breadcrumbs, catalog]


@pytest.fixture
def allocator() -> SequentialIdAllocator:
    return SequentialIdAllocator()


@pytest.fixture
def bike_document() -> list[dict[str, Any]]:
    return make_bike_document()


@pytest.fixture
def bike_graph() -> KnowledgeGraph:
    return build(make_bike_document())


@pytest.fixture
def site_graph() -> KnowledgeGraph:
    return build(make_site_document())
