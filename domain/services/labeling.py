from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from domain.component_types import (
    SKU_HOLDER,
    STORAGE_CATEGORY_COLORS,
    STORAGE_UNIT,
    VERTICAL_SKU_HOLDER,
)
from domain.models import LayoutItem

LabelContext = Literal["tooltip", "properties", "export", "category", "default"]

DEFAULT_LABEL_MAX_LENGTH = 20
DEFAULT_CATEGORY_COLOR = "#4CAF50"

_LABEL_PREFIX_BY_TYPE: dict[str, str] = {
    STORAGE_UNIT: "SU",
    SKU_HOLDER: "HSR",
    VERTICAL_SKU_HOLDER: "VSR",
}

_CATEGORY_SUFFIX: dict[str, str] = {
    "dry_storage": "DS",
    "cold_storage": "CS",
    "hazardous": "HZ",
    "fragile": "FR",
    "bulk": "BK",
}

_STORAGE_UNIT_NAME_BY_CATEGORY: dict[str, str] = {
    "dry_storage": "Dry Storage Unit",
    "cold_storage": "Cold Storage Unit",
    "hazardous": "Hazardous Storage Unit",
    "fragile": "Fragile Storage Unit",
    "bulk": "Bulk Storage Unit",
}

_CATEGORY_TEXT: dict[str, str] = {
    "storage": "Storage",
    "dry_storage": "Dry Storage",
    "cold_storage": "Cold Storage",
    "hazardous": "Hazardous",
    "fragile": "Fragile",
    "bulk": "Bulk Storage",
}

_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9\-_\s]+$")


@dataclass(frozen=True)
class LabelValidation:
    is_valid: bool
    formatted_label: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class LabelInfo:
    auto_label: str
    display_name: str
    category_text: str
    full_label: str
    show_category: bool
    category_color: str


def has_auto_label(component_type: str | None) -> bool:
    return component_type in _LABEL_PREFIX_BY_TYPE


def generate_storage_component_label(
    component_type: str,
    index: int,
    category: str | None = None,
) -> str | None:
    prefix = _LABEL_PREFIX_BY_TYPE.get(component_type)
    if prefix is None:
        return None
    label = f"{prefix}-{index:03d}"
    if component_type == STORAGE_UNIT and category in _CATEGORY_SUFFIX:
        return f"{label}-{_CATEGORY_SUFFIX[category]}"
    return label


def storage_unit_display_name(category: str | None = None) -> str:
    return _STORAGE_UNIT_NAME_BY_CATEGORY.get(category or "", "Storage Unit")


def category_display_text(category: str | None = None) -> str:
    return _CATEGORY_TEXT.get(category or "", "Storage")


def build_label_info(item: LayoutItem, index: int) -> LabelInfo | None:
    if item.type != STORAGE_UNIT:
        return None
    auto_label = generate_storage_component_label(item.type, index, item.category) or ""
    if item.category:
        category_color = STORAGE_CATEGORY_COLORS.get(item.category, DEFAULT_CATEGORY_COLOR)
    else:
        category_color = DEFAULT_CATEGORY_COLOR
    return LabelInfo(
        auto_label=auto_label,
        display_name=storage_unit_display_name(item.category),
        category_text=category_display_text(item.category),
        full_label=item.label or auto_label,
        show_category=True,
        category_color=category_color,
    )


def apply_enhanced_labeling(items: Sequence[LayoutItem]) -> list[LayoutItem]:
    """Give every unlabeled storage component its sequential auto label.

    Numbering runs per component type in item order, and custom labels are kept.
    """
    counters: dict[str, int] = {}
    labeled: list[LayoutItem] = []
    for item in items:
        if not has_auto_label(item.type):
            labeled.append(item)
            continue
        index = counters.get(item.type, 0) + 1
        counters[item.type] = index
        if item.label:
            labeled.append(item)
            continue
        auto_label = generate_storage_component_label(item.type, index, item.category)
        labeled.append(item.model_copy(update={"label": auto_label}))
    return labeled


def resolve_display_label(item: LayoutItem, index: int = 1) -> str:
    if item.location_id:
        return item.location_id
    if item.sku_data is not None and item.sku_data.sku:
        return item.sku_data.sku
    if item.label and item.label != item.name:
        return item.label
    info = build_label_info(item, index)
    if info is not None:
        return info.full_label
    return generate_storage_component_label(item.type, index, item.category) or ""


def get_contextual_label(item: LayoutItem, context: str = "default") -> str:
    if item.type != STORAGE_UNIT:
        return item.name or item.label or "Component"

    display_label = resolve_display_label(item)
    if context == "tooltip":
        return f"Storage Unit ({display_label})"
    if context == "export":
        return f"{display_label} - Storage Unit"
    if context == "category":
        return category_display_text(item.category)
    return display_label


def validate_storage_unit_label(
    custom_label: str,
    component_type: str,
    max_length: int = DEFAULT_LABEL_MAX_LENGTH,
) -> LabelValidation:
    if component_type != STORAGE_UNIT:
        return LabelValidation(is_valid=True, formatted_label=custom_label)

    trimmed = custom_label.strip()
    if not trimmed:
        return LabelValidation(is_valid=False, error="Label cannot be empty")
    if len(trimmed) > max_length:
        return LabelValidation(
            is_valid=False,
            error=f"Label must be {max_length} characters or less",
        )
    if not _LABEL_PATTERN.match(trimmed):
        return LabelValidation(
            is_valid=False,
            error="Label can only contain letters, numbers, hyphens, and underscores",
        )
    return LabelValidation(is_valid=True, formatted_label=trimmed.upper())
