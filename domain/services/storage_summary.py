from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from domain.component_types import (
    COMPONENT_COLORS,
    DEFAULT_COMPONENT_COLOR,
    RACK_TYPES,
    SKU_HOLDER,
    SPARE_UNIT,
    STORAGE_UNIT,
    VERTICAL_SKU_HOLDER,
)
from domain.models import ContentRecord, LayoutItem, round_half_up

STORAGE_GRID_SIZE = 60.0

_SUMMARY_LABELS: dict[str, str] = {
    STORAGE_UNIT: "Storage Unit",
    SPARE_UNIT: "Spare Unit",
    SKU_HOLDER: "Horizontal Storage Rack",
    VERTICAL_SKU_HOLDER: "Vertical Storage Rack",
}


@dataclass(frozen=True)
class StorageSummary:
    item_key: str
    type: str
    label: str
    color: str
    title: str
    subtitle: str
    max_capacity: float
    used_capacity: float
    location_ids: list[str] = field(default_factory=list)
    skus: list[str] = field(default_factory=list)

    @property
    def available_capacity(self) -> float:
        return max(0.0, self.max_capacity - self.used_capacity)


def _add(values: list[str], value: str | None) -> None:
    if value and value not in values:
        values.append(value)


def _collect_item_identifiers(item: LayoutItem, locations: list[str], skus: list[str]) -> None:
    _add(locations, item.location_id)
    _add(locations, item.primary_location_id)
    _add(locations, item.location_code)
    for location_id in item.location_ids:
        _add(locations, location_id)
    for location_id in item.mapping_location_ids():
        _add(locations, location_id)
    _add(skus, item.sku)
    _add(skus, item.primary_sku)


def _collect_content_identifiers(
    content: ContentRecord,
    locations: list[str],
    skus: list[str],
) -> None:
    if content.location_ids:
        for location_id in content.location_ids:
            _add(locations, location_id)
    else:
        _add(locations, content.location_id or content.unique_id)
    for location_id in content.mapping_location_ids():
        _add(locations, location_id)
    _add(skus, content.sku)
    _add(skus, content.primary_sku)


def _content_quantity(content: ContentRecord) -> float:
    if content.quantity is not None and content.quantity > 0:
        return content.quantity
    if content.location_ids:
        return float(len(content.location_ids))
    if content.level_location_mappings:
        return float(len(content.level_location_mappings))
    return 1.0


def rack_capacity(item: LayoutItem) -> int:
    width = item.width or STORAGE_GRID_SIZE
    height = item.height or STORAGE_GRID_SIZE
    cols = max(1, round_half_up(width / STORAGE_GRID_SIZE))
    rows = max(1, round_half_up(height / STORAGE_GRID_SIZE))
    return cols * rows * (item.max_skus_per_compartment or 1)


def summarize_storage_components(items: Sequence[LayoutItem]) -> list[StorageSummary]:
    summaries: list[StorageSummary] = []
    type_counters: dict[str, int] = {}

    for item in items:
        label = _SUMMARY_LABELS.get(item.type)
        if label is None:
            continue

        locations: list[str] = []
        skus: list[str] = []
        _collect_item_identifiers(item, locations, skus)

        if item.type in RACK_TYPES:
            max_capacity = float(rack_capacity(item))
            used = 0.0
            for _, content in item.compartments():
                _collect_content_identifiers(content, locations, skus)
                used += _content_quantity(content)
            used_capacity = min(max_capacity, used)
        else:
            max_capacity = 1.0
            has_identifier = item.location_id or item.primary_location_id or item.sku
            used_capacity = 1.0 if has_identifier else 0.0

        order = type_counters.get(item.type, 0) + 1
        type_counters[item.type] = order

        summaries.append(
            StorageSummary(
                item_key=item.item_key(),
                type=item.type,
                label=label,
                color=COMPONENT_COLORS.get(item.type, DEFAULT_COMPONENT_COLOR),
                title=item.name or item.label or f"{label} {order}",
                subtitle=locations[0] if locations else "",
                max_capacity=max_capacity,
                used_capacity=used_capacity,
                location_ids=locations,
                skus=skus,
            )
        )

    summaries.sort(key=lambda summary: (summary.label, summary.title))
    return summaries
