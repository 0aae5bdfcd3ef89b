from __future__ import annotations

import pytest

from domain.models import LayoutItem
from domain.services.inventory_index import LocationSkuCatalog, build_inventory_index
from domain.services.inventory_query import (
    InventorySelection,
    QueryOutcome,
    query_layout,
    search_layout,
)
from tests.helpers.layout_fixtures import make_item, make_rack


def _keys(outcome: QueryOutcome) -> list[str]:
    return [result.item_key for result in outcome.results]


def test_sku_query_highlights_matching_compartment(
    steel_layout: list[LayoutItem],
    steel_catalog: LocationSkuCatalog,
) -> None:
    outcome = query_layout(steel_layout, InventorySelection(sku="Steel Brackets"), steel_catalog)

    assert _keys(outcome) == ["A"]
    assert outcome.highlight.item_keys == ["A"]
    assert outcome.highlight.compartments == {"A": ["c1"]}
    assert outcome.results[0].title == "Rack A"
    assert outcome.results[0].subtitle == "LOC-007"


def test_location_query_matches_compartment(steel_layout: list[LayoutItem]) -> None:
    outcome = query_layout(steel_layout, InventorySelection(location_tag="LOC-009"))

    assert _keys(outcome) == ["A"]
    assert outcome.highlight.compartments == {"A": ["c2"]}


def test_location_query_matches_item_field(steel_layout: list[LayoutItem]) -> None:
    outcome = query_layout(steel_layout, InventorySelection(location_tag="LOC-020"))

    assert _keys(outcome) == ["su-1"]
    assert outcome.highlight.compartments == {}


def test_location_query_matches_compartment_unique_id() -> None:
    rack = make_rack("r", compartmentContents={"c5": {"uniqueId": "U-1"}})

    outcome = query_layout([rack], InventorySelection(location_tag="U-1"))

    assert outcome.highlight.compartments == {"r": ["c5"]}


def test_combined_filters_intersect_compartments(
    steel_layout: list[LayoutItem],
    steel_catalog: LocationSkuCatalog,
) -> None:
    both = query_layout(
        steel_layout,
        InventorySelection(location_tag="LOC-007", sku="Steel Brackets"),
        steel_catalog,
    )
    disjoint = query_layout(
        steel_layout,
        InventorySelection(location_tag="LOC-009", sku="Steel Brackets"),
        steel_catalog,
    )

    assert both.highlight.compartments == {"A": ["c1"]}
    assert _keys(disjoint) == ["A"]
    assert disjoint.highlight.compartments == {}


def test_combined_filters_are_a_subset_of_each_filter(
    steel_layout: list[LayoutItem],
    steel_catalog: LocationSkuCatalog,
) -> None:
    combined = query_layout(
        steel_layout,
        InventorySelection(location_tag="LOC-011", sku="Copper Pipe"),
        steel_catalog,
    )
    by_location = query_layout(steel_layout, InventorySelection(location_tag="LOC-011"))
    by_sku = query_layout(steel_layout, InventorySelection(sku="Copper Pipe"), steel_catalog)

    assert _keys(combined) == ["B"]
    assert set(_keys(combined)) <= set(_keys(by_location))
    assert set(_keys(combined)) <= set(_keys(by_sku))


def test_no_filters_returns_empty_outcome(steel_layout: list[LayoutItem]) -> None:
    assert query_layout(steel_layout, InventorySelection()) == QueryOutcome()
    assert query_layout(steel_layout, InventorySelection(sku="  ")).results == []


@pytest.mark.parametrize(
    ("asset", "expected"),
    [
        ("STORAGE UNIT", ["su-1"]),
        ("storage unit", ["su-1"]),
        ("SKU HOLDER", ["A", "B"]),
        ("Horizontal Storage", ["A", "B"]),
        ("Rack B", ["B"]),
        ("Forklift", []),
    ],
)
def test_asset_filter(steel_layout: list[LayoutItem], asset: str, expected: list[str]) -> None:
    outcome = query_layout(steel_layout, InventorySelection(asset_type=asset))

    assert _keys(outcome) == expected


def test_sku_query_matches_any_case_variant(steel_catalog: LocationSkuCatalog) -> None:
    rack = make_rack(
        "r",
        compartmentContents={"c1": {"locationId": "Loc-007"}, "c2": {"locationId": "loc-007"}},
    )

    outcome = query_layout([rack], InventorySelection(sku="Steel Brackets"), steel_catalog)

    assert outcome.highlight.compartments == {"r": ["c1", "c2"]}


def test_sku_query_splits_compound_fields() -> None:
    unit = make_item("storage_unit", id="u", sku="Widget, Gadget")

    outcome = query_layout([unit], InventorySelection(sku="Gadget"))

    assert _keys(outcome) == ["u"]


def test_every_indexed_value_finds_an_item(
    steel_layout: list[LayoutItem],
    steel_catalog: LocationSkuCatalog,
) -> None:
    index = build_inventory_index(steel_layout, steel_catalog)

    for tag in index.location_tags:
        assert query_layout(steel_layout, InventorySelection(location_tag=tag)).results
    for sku in index.skus:
        assert query_layout(steel_layout, InventorySelection(sku=sku), steel_catalog).results
    for asset in index.assets:
        assert query_layout(steel_layout, InventorySelection(asset_type=asset)).results


def test_square_boundary_is_never_returned() -> None:
    floor = make_item("square_boundary", id="floor", locationId="LOC-1")

    assert query_layout([floor], InventorySelection(location_tag="LOC-1")).results == []


def test_duplicate_keys_are_reported_once() -> None:
    items = [
        make_item("storage_unit", id="dup", locationId="LOC-1"),
        make_item("storage_unit", id="dup", locationId="LOC-1", x=100),
    ]

    outcome = query_layout(items, InventorySelection(location_tag="LOC-1"))

    assert outcome.highlight.item_keys == ["dup"]


def test_duplicate_keys_pool_their_compartments() -> None:
    items = [
        make_rack("dup", name="First", compartmentContents={"c1": {"locationId": "LOC-7"}}),
        make_rack(
            "dup",
            x=200,
            compartmentContents={"c1": {"locationId": "LOC-7"}, "c3": {"locationId": "LOC-7"}},
        ),
    ]

    outcome = query_layout(items, InventorySelection(location_tag="LOC-7"))

    assert _keys(outcome) == ["dup"]
    assert outcome.results[0].title == "First"
    assert outcome.results[0].compartment_ids == ["c1", "c3"]
    assert outcome.highlight.compartments == {"dup": ["c1", "c3"]}


def test_id_less_keys_round_half_up() -> None:
    item = make_item("storage_unit", x=2.5, y=0.5, locationId="LOC-1")

    outcome = query_layout([item], InventorySelection(location_tag="LOC-1"))

    assert outcome.highlight.item_keys == ["storage_unit-3-1-60-60"]


def test_query_is_idempotent(
    steel_layout: list[LayoutItem],
    steel_catalog: LocationSkuCatalog,
) -> None:
    selection = InventorySelection(sku="Steel Brackets", asset_type="SKU HOLDER")

    first = query_layout(steel_layout, selection, steel_catalog)
    second = query_layout(steel_layout, selection, steel_catalog)

    assert first == second
    assert first.to_dict()["highlight"] == {"item_keys": ["A"], "compartments": {"A": ["c1"]}}


def test_search_by_name(steel_layout: list[LayoutItem]) -> None:
    results = search_layout(steel_layout, "rack")

    assert [(result.item_key, result.reason) for result in results] == [
        ("A", "Name match"),
        ("B", "Name match"),
    ]


def test_search_locations_scope(steel_layout: list[LayoutItem]) -> None:
    results = search_layout(steel_layout, "loc-020", scope="locations")

    assert [(result.item_key, result.reason) for result in results] == [
        ("su-1", "Location match")
    ]


def test_search_items_scope_reports_sku(steel_layout: list[LayoutItem]) -> None:
    results = search_layout(steel_layout, "copper", scope="items")

    assert len(results) == 1
    assert results[0].reason == "SKU match: Copper Pipe"
    assert results[0].title == "Rack B"


def test_search_zones_scope_only_returns_containers(steel_layout: list[LayoutItem]) -> None:
    zone = make_item("storage_zone", id="z", isContainer=True, name="Rack Zone")

    results = search_layout([*steel_layout, zone], "rack", scope="zones")

    assert [result.item_key for result in results] == ["z"]


def test_search_limit_and_blank_term(steel_layout: list[LayoutItem]) -> None:
    assert len(search_layout(steel_layout, "rack", limit=1)) == 1
    assert search_layout(steel_layout, "   ") == []


def test_search_rejects_unknown_scope(steel_layout: list[LayoutItem]) -> None:
    with pytest.raises(ValueError, match="Unknown search scope"):
        search_layout(steel_layout, "rack", scope="shelves")
