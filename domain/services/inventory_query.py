from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Literal

from domain.component_types import CONTAINER_TYPES, readable_type_name, type_for_asset_label
from domain.models import LayoutItem
from domain.services.inventory_index import (
    LocationSkuCatalog,
    content_location_values,
    content_sku_values,
    is_indexable,
    item_location_values,
    item_sku_values,
    split_identifier,
)

SearchScope = Literal["all", "locations", "items", "zones"]
SEARCH_SCOPES: tuple[str, ...] = ("all", "locations", "items", "zones")
DEFAULT_SEARCH_LIMIT = 10


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


@dataclass(frozen=True)
class InventorySelection:
    location_tag: str | None = None
    sku: str | None = None
    asset_type: str | None = None

    def normalized(self) -> InventorySelection:
        return InventorySelection(
            location_tag=_clean(self.location_tag),
            sku=_clean(self.sku),
            asset_type=_clean(self.asset_type),
        )

    def is_empty(self) -> bool:
        normalized = self.normalized()
        return not (normalized.location_tag or normalized.sku or normalized.asset_type)


@dataclass(frozen=True)
class QueryResult:
    item_key: str
    title: str
    subtitle: str
    compartment_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HighlightSet:
    item_keys: list[str] = field(default_factory=list)
    compartments: dict[str, list[str]] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.item_keys


@dataclass(frozen=True)
class QueryOutcome:
    results: list[QueryResult] = field(default_factory=list)
    highlight: HighlightSet = field(default_factory=HighlightSet)

    def to_dict(self) -> dict[str, object]:
        return {
            "results": [
                {
                    "item_key": result.item_key,
                    "title": result.title,
                    "subtitle": result.subtitle,
                    "compartment_ids": list(result.compartment_ids),
                }
                for result in self.results
            ],
            "highlight": {
                "item_keys": list(self.highlight.item_keys),
                "compartments": {
                    key: list(ids) for key, ids in self.highlight.compartments.items()
                },
            },
        }


@dataclass(frozen=True)
class SearchResult:
    item_key: str
    title: str
    subtitle: str
    reason: str


def item_title(item: LayoutItem) -> str:
    return item.name or item.label or readable_type_name(item.type) or item.item_key()


def item_subtitle(item: LayoutItem) -> str:
    locations = item_location_values(item)
    if locations:
        return locations[0]
    for _, content in item.compartments():
        content_locations = content_location_values(content)
        if content_locations:
            return content_locations[0]
    return readable_type_name(item.type)


def _matches_sku(
    values: Iterable[str],
    sku: str,
    identifiers: set[str],
    catalog: LocationSkuCatalog,
) -> bool:
    for value in values:
        for segment in split_identifier(value):
            if segment in identifiers or catalog.sku_for(segment) == sku:
                return True
    return False


def _location_compartments(item: LayoutItem, location_tag: str) -> list[str]:
    matched: list[str] = []
    for compartment_id, content in item.compartments():
        candidates = content_location_values(content)
        if content.unique_id:
            candidates.append(content.unique_id)
        if location_tag in candidates:
            matched.append(compartment_id)
    return matched


def _sku_compartments(
    item: LayoutItem,
    sku: str,
    identifiers: set[str],
    catalog: LocationSkuCatalog,
) -> list[str]:
    return [
        compartment_id
        for compartment_id, content in item.compartments()
        if _matches_sku(content_sku_values(content), sku, identifiers, catalog)
    ]


def matches_asset(item: LayoutItem, asset_label: str) -> bool:
    label = asset_label.strip()
    mapped_type = type_for_asset_label(label)
    if mapped_type is None:
        mapped_type = "_".join(label.lower().split())
    if item.type == mapped_type:
        return True
    return item.name is not None and item.name == label


def _merge_compartments(
    location_ids: list[str] | None,
    sku_ids: list[str] | None,
) -> list[str]:
    if location_ids and sku_ids:
        allowed = set(sku_ids)
        merged = [compartment_id for compartment_id in location_ids if compartment_id in allowed]
    else:
        merged = list(location_ids or sku_ids or [])
    seen: set[str] = set()
    unique: list[str] = []
    for compartment_id in merged:
        if compartment_id not in seen:
            seen.add(compartment_id)
            unique.append(compartment_id)
    return unique


def query_layout(
    items: Sequence[LayoutItem],
    selection: InventorySelection,
    catalog: LocationSkuCatalog | None = None,
) -> QueryOutcome:
    """Find the items matching every active filter of the selection.

    Filters combine with AND. The location and SKU filters may also match single
    compartments; when both of them do, only compartments matched by both are
    highlighted.
    """
    selection = selection.normalized()
    if selection.is_empty():
        return QueryOutcome()

    resolver = catalog if catalog is not None else LocationSkuCatalog()
    sku_identifiers: set[str] = set()
    if selection.sku:
        sku_identifiers = {selection.sku} | resolver.location_ids_for(selection.sku)

    matched: dict[str, QueryResult] = {}

    for item in items:
        if not is_indexable(item):
            continue

        location_hits: list[str] | None = None
        if selection.location_tag:
            location_hits = _location_compartments(item, selection.location_tag)
            if selection.location_tag not in item_location_values(item) and not location_hits:
                continue

        sku_hits: list[str] | None = None
        if selection.sku:
            sku_hits = _sku_compartments(item, selection.sku, sku_identifiers, resolver)
            item_match = _matches_sku(
                item_sku_values(item), selection.sku, sku_identifiers, resolver
            )
            if not item_match and not sku_hits:
                continue

        if selection.asset_type and not matches_asset(item, selection.asset_type):
            continue

        key = item.item_key()
        compartment_ids = _merge_compartments(location_hits, sku_hits)
        existing = matched.get(key)
        if existing is not None:
            # items sharing a key render as one; keep the first title, pool compartments
            merged = existing.compartment_ids + [
                compartment_id
                for compartment_id in compartment_ids
                if compartment_id not in existing.compartment_ids
            ]
            matched[key] = replace(existing, compartment_ids=merged)
            continue
        matched[key] = QueryResult(
            item_key=key,
            title=item_title(item),
            subtitle=item_subtitle(item),
            compartment_ids=compartment_ids,
        )

    results = list(matched.values())
    return QueryOutcome(
        results=results,
        highlight=HighlightSet(
            item_keys=[result.item_key for result in results],
            compartments={
                result.item_key: result.compartment_ids
                for result in results
                if result.compartment_ids
            },
        ),
    )


def _is_zone(item: LayoutItem) -> bool:
    return item.is_container or item.type in CONTAINER_TYPES


def _contains(value: str | None, term: str) -> bool:
    return value is not None and term in value.lower()


def _match_reason(item: LayoutItem, term: str, scope: str) -> str | None:
    if scope == "zones" and not _is_zone(item):
        return None
    if scope != "locations":
        if _contains(item.name, term) or _contains(item.label, term):
            return "Name match"
    if scope in ("all", "locations"):
        locations = list(item_location_values(item))
        for _, content in item.compartments():
            locations.extend(content_location_values(content))
        if any(_contains(location, term) for location in locations):
            return "Location match"
    if scope != "locations" and _contains(item.type, term):
        return "Type match"
    if scope in ("all", "items"):
        for _, content in item.compartments():
            for sku in (content.sku, content.primary_sku):
                if _contains(sku, term):
                    return f"SKU match: {sku}"
        sku_code = item.sku_code()
        if _contains(sku_code, term):
            return f"SKU match: {sku_code}"
    return None


def search_layout(
    items: Sequence[LayoutItem],
    term: str,
    scope: str = "all",
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[SearchResult]:
    if scope not in SEARCH_SCOPES:
        msg = f"Unknown search scope: {scope}"
        raise ValueError(msg)
    needle = term.strip().lower()
    if not needle:
        return []

    results: list[SearchResult] = []
    for item in items:
        if not is_indexable(item):
            continue
        reason = _match_reason(item, needle, scope)
        if reason is None:
            continue
        results.append(
            SearchResult(
                item_key=item.item_key(),
                title=item_title(item),
                subtitle=item_subtitle(item),
                reason=reason,
            )
        )
        if limit > 0 and len(results) >= limit:
            break
    return results
