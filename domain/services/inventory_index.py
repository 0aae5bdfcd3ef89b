from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from domain.component_types import INDEX_EXCLUDED_TYPES, asset_label_for_type
from domain.models import ContentRecord, LayoutItem, LocationCatalogEntry

DEFAULT_LOCATION_PREFIX = "LOC-"


def case_variants(value: str) -> list[str]:
    variants: list[str] = []
    for variant in (value, value.upper(), value.lower()):
        if variant not in variants:
            variants.append(variant)
    return variants


def split_identifier(value: str | None) -> list[str]:
    if not value:
        return []
    if "," not in value:
        text = value.strip()
        return [text] if text else []
    return [part.strip() for part in value.split(",") if part.strip()]


class LocationSkuCatalog:
    """Case-insensitive lookup between raw location ids and catalog SKU names."""

    def __init__(self, location_prefix: str = DEFAULT_LOCATION_PREFIX) -> None:
        self._location_prefix = location_prefix.lower()
        self._sku_by_location: dict[str, str] = {}
        self._locations_by_sku: dict[str, list[str]] = {}

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[LocationCatalogEntry] | None,
        location_prefix: str = DEFAULT_LOCATION_PREFIX,
    ) -> LocationSkuCatalog:
        catalog = cls(location_prefix)
        for entry in entries or []:
            catalog.add(entry)
        return catalog

    def add(self, entry: LocationCatalogEntry) -> None:
        """Index an entry; a later entry for the same id replaces the earlier one."""
        if not entry.location_id or not entry.sku_name:
            return
        for variant in case_variants(entry.location_id):
            previous = self._sku_by_location.get(variant)
            if previous is not None and previous != entry.sku_name:
                self._forget_location(previous, variant)
            self._sku_by_location[variant] = entry.sku_name
            reverse = self._locations_by_sku.setdefault(entry.sku_name, [])
            if variant not in reverse:
                reverse.append(variant)

    def _forget_location(self, sku_name: str, variant: str) -> None:
        locations = self._locations_by_sku.get(sku_name, [])
        if variant in locations:
            locations.remove(variant)
        if not locations:
            self._locations_by_sku.pop(sku_name, None)

    def __len__(self) -> int:
        return len(self._sku_by_location)

    def sku_for(self, location_id: str | None) -> str | None:
        if not location_id:
            return None
        for variant in case_variants(location_id.strip()):
            sku_name = self._sku_by_location.get(variant)
            if sku_name is not None:
                return sku_name
        return None

    def location_ids_for(self, sku_name: str | None) -> set[str]:
        if not sku_name:
            return set()
        return set(self._locations_by_sku.get(sku_name.strip(), []))

    def looks_like_location(self, value: str) -> bool:
        return bool(self._location_prefix) and value.lower().startswith(self._location_prefix)

    def resolve_skus(self, raw_value: str | None) -> list[str]:
        """Map a raw (possibly comma separated) identifier to SKU display names.

        Segments without a catalog entry are kept verbatim unless they carry the
        location prefix, in which case they are dropped.
        """
        resolved: list[str] = []
        for segment in split_identifier(raw_value):
            sku_name = self.sku_for(segment)
            if sku_name is None:
                if self.looks_like_location(segment):
                    continue
                sku_name = segment
            if sku_name not in resolved:
                resolved.append(sku_name)
        return resolved


def item_location_values(item: LayoutItem) -> list[str]:
    values = [
        item.location_id,
        item.location_code,
        item.location_tag,
        item.primary_location_id,
    ]
    result = [value for value in values if value]
    result.extend(item.location_ids)
    result.extend(item.mapping_location_ids())
    return result


def content_location_values(content: ContentRecord) -> list[str]:
    values = [content.location_id, content.primary_location_id]
    result = [value for value in values if value]
    result.extend(content.location_ids)
    result.extend(content.mapping_location_ids())
    return result


def item_sku_values(item: LayoutItem) -> list[str]:
    values = [
        item.sku,
        item.primary_sku,
        item.sku_data.sku if item.sku_data else None,
        item.location_id,
        item.primary_location_id,
    ]
    result = [value for value in values if value]
    result.extend(item.location_ids)
    result.extend(item.mapping_location_ids())
    return result


def content_sku_values(content: ContentRecord) -> list[str]:
    values = [
        content.sku,
        content.unique_id,
        content.primary_sku,
        content.location_id,
        content.primary_location_id,
    ]
    result = [value for value in values if value]
    result.extend(content.location_ids)
    result.extend(content.mapping_location_ids())
    return result


def is_indexable(item: LayoutItem) -> bool:
    return item.type not in INDEX_EXCLUDED_TYPES


@dataclass(frozen=True)
class InventoryIndex:
    location_tags: list[str] = field(default_factory=list)
    skus: list[str] = field(default_factory=list)
    assets: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "location_tags": list(self.location_tags),
            "skus": list(self.skus),
            "assets": list(self.assets),
        }


def build_inventory_index(
    items: Sequence[LayoutItem],
    catalog: LocationSkuCatalog | None = None,
    extra_assets: Iterable[str] = (),
) -> InventoryIndex:
    resolver = catalog if catalog is not None else LocationSkuCatalog()
    location_tags: set[str] = set()
    skus: set[str] = set()
    assets: set[str] = set()

    for item in items:
        if not is_indexable(item):
            continue
        location_tags.update(item_location_values(item))
        for raw_value in item_sku_values(item):
            skus.update(resolver.resolve_skus(raw_value))
        for _, content in item.compartments():
            location_tags.update(content_location_values(content))
            for raw_value in content_sku_values(content):
                skus.update(resolver.resolve_skus(raw_value))
        asset_label = asset_label_for_type(item.type)
        if asset_label:
            assets.add(asset_label)
        if item.name:
            assets.add(item.name)

    for extra in extra_assets:
        text = str(extra).strip()
        if text:
            assets.add(text)

    return InventoryIndex(
        location_tags=sorted(location_tags),
        skus=sorted(skus),
        assets=sorted(assets),
    )
