from __future__ import annotations

WAREHOUSE_BLOCK = "warehouse_block"
STORAGE_ZONE = "storage_zone"
PROCESSING_AREA = "processing_area"
CONTAINER_UNIT = "container_unit"
ZONE_DIVIDER = "zone_divider"
AREA_BOUNDARY = "area_boundary"
SQUARE_BOUNDARY = "square_boundary"
SOLID_BOUNDARY = "solid_boundary"
DOTTED_BOUNDARY = "dotted_boundary"
STORAGE_UNIT = "storage_unit"
SKU_HOLDER = "sku_holder"
VERTICAL_SKU_HOLDER = "vertical_sku_holder"
SPARE_UNIT = "spare_unit"

LINKABLE_TYPES: frozenset[str] = frozenset(
    {
        WAREHOUSE_BLOCK,
        STORAGE_ZONE,
        PROCESSING_AREA,
        CONTAINER_UNIT,
        ZONE_DIVIDER,
        AREA_BOUNDARY,
    }
)
CONTAINER_TYPES: frozenset[str] = frozenset(
    {WAREHOUSE_BLOCK, STORAGE_ZONE, PROCESSING_AREA, CONTAINER_UNIT}
)
DIVIDER_TYPES: frozenset[str] = frozenset({ZONE_DIVIDER, AREA_BOUNDARY})
RACK_TYPES: frozenset[str] = frozenset({SKU_HOLDER, VERTICAL_SKU_HOLDER})
SINGLE_SLOT_TYPES: frozenset[str] = frozenset({STORAGE_UNIT, SPARE_UNIT})
INDEX_EXCLUDED_TYPES: frozenset[str] = frozenset({SQUARE_BOUNDARY})

BOUNDARY_LEVEL = 1
ZONE_LEVEL = 2
UNIT_LEVEL = 3

_DEFAULT_CONTAINER_LEVEL_BY_TYPE: dict[str, int] = {
    SQUARE_BOUNDARY: BOUNDARY_LEVEL,
    SOLID_BOUNDARY: ZONE_LEVEL,
    DOTTED_BOUNDARY: ZONE_LEVEL,
    SKU_HOLDER: UNIT_LEVEL,
    VERTICAL_SKU_HOLDER: UNIT_LEVEL,
}

_READABLE_NAME_BY_TYPE: dict[str, str] = {
    STORAGE_UNIT: "Storage Unit",
    SPARE_UNIT: "Spare Unit",
    SKU_HOLDER: "Horizontal Storage",
    VERTICAL_SKU_HOLDER: "Vertical Storage",
    SQUARE_BOUNDARY: "Square Boundary",
    SOLID_BOUNDARY: "Solid Boundary",
    DOTTED_BOUNDARY: "Dotted Boundary",
}

COMPONENT_COLORS: dict[str, str] = {
    SQUARE_BOUNDARY: "#263238",
    SOLID_BOUNDARY: "#607D8B",
    DOTTED_BOUNDARY: "#90A4AE",
    STORAGE_UNIT: "#4CAF50",
    SKU_HOLDER: "#2196F3",
    VERTICAL_SKU_HOLDER: "#FF9800",
    SPARE_UNIT: "#8D6E63",
    WAREHOUSE_BLOCK: "#FF9800",
    STORAGE_ZONE: "#9C27B0",
    PROCESSING_AREA: "#F44336",
    CONTAINER_UNIT: "#00BCD4",
    ZONE_DIVIDER: "#795548",
    AREA_BOUNDARY: "#607D8B",
}
STORAGE_CATEGORY_COLORS: dict[str, str] = {
    "storage": "#4CAF50",
    "dry_storage": "#9E9E9E",
    "cold_storage": "#1565C0",
    "hazardous": "#F44336",
    "fragile": "#FFEB3B",
    "bulk": "#00BCD4",
}
DEFAULT_COMPONENT_COLOR = "#607D8B"


def default_container_level(component_type: str | None) -> int | None:
    return _DEFAULT_CONTAINER_LEVEL_BY_TYPE.get(str(component_type or "").strip())


def readable_type_name(component_type: str | None) -> str:
    normalized = str(component_type or "").strip()
    if not normalized:
        return normalized
    if normalized in _READABLE_NAME_BY_TYPE:
        return _READABLE_NAME_BY_TYPE[normalized]
    return " ".join(part.capitalize() for part in normalized.split("_") if part)


def asset_label_for_type(component_type: str | None) -> str:
    normalized = str(component_type or "").strip()
    return normalized.replace("_", " ").upper()


def type_for_asset_label(asset_label: str | None) -> str | None:
    normalized = " ".join(str(asset_label or "").split()).lower()
    if not normalized:
        return None
    for component_type, readable in _READABLE_NAME_BY_TYPE.items():
        if readable.lower() == normalized:
            return component_type
    return None


def component_color(component_type: str | None, category: str | None = None) -> str:
    normalized = str(component_type or "").strip()
    if normalized == STORAGE_UNIT and category and category in STORAGE_CATEGORY_COLORS:
        return STORAGE_CATEGORY_COLORS[category]
    return COMPONENT_COLORS.get(normalized, DEFAULT_COMPONENT_COLOR)
