from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_CONTAINER_LEVEL = 1
MAX_CONTAINER_LEVEL = 3
_TRUE_STRINGS = {"true", "1", "yes", "on"}


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clean_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list | tuple | set):
        return []
    result: List[str] = []
    for item in value:
        text = _clean_text(item)
        if text is not None:
            result.append(text)
    return result


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


class LevelLocationMapping(_SnapshotModel):
    location_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("locationId", "locId", "location_id"),
    )
    level_index: Optional[int] = None

    @field_validator("location_id", mode="before")
    @classmethod
    def normalize_location_id(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @field_validator("level_index", mode="before")
    @classmethod
    def normalize_level_index(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not number.is_integer():
            return None
        return int(number)


def _clean_mappings(value: Any) -> List[Any]:
    if not isinstance(value, list | tuple):
        return []
    return [mapping for mapping in value if isinstance(mapping, dict | LevelLocationMapping)]


class SkuData(_SnapshotModel):
    sku: Optional[str] = None

    @field_validator("sku", mode="before")
    @classmethod
    def normalize_sku(cls, value: Any) -> Optional[str]:
        return _clean_text(value)


class ContentRecord(_SnapshotModel):
    location_id: Optional[str] = None
    unique_id: Optional[str] = None
    sku: Optional[str] = None
    primary_sku: Optional[str] = None
    primary_location_id: Optional[str] = None
    location_ids: List[str] = Field(default_factory=list)
    level_location_mappings: List[LevelLocationMapping] = Field(default_factory=list)
    quantity: Optional[float] = None
    category: Optional[str] = None
    brand: Optional[str] = None

    @field_validator(
        "location_id",
        "unique_id",
        "sku",
        "primary_sku",
        "primary_location_id",
        "category",
        "brand",
        mode="before",
    )
    @classmethod
    def normalize_text(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @field_validator("location_ids", mode="before")
    @classmethod
    def normalize_location_ids(cls, value: Any) -> List[str]:
        return _clean_text_list(value)

    @field_validator("level_location_mappings", mode="before")
    @classmethod
    def normalize_mappings(cls, value: Any) -> List[Any]:
        return _clean_mappings(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def normalize_quantity(cls, value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def mapping_location_ids(self) -> List[str]:
        return [m.location_id for m in self.level_location_mappings if m.location_id]


class LayoutItem(_SnapshotModel):
    id: Optional[str] = None
    type: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    container_level: Optional[int] = None
    is_container: bool = False
    container_padding: Optional[float] = None
    category: Optional[str] = None
    location_id: Optional[str] = None
    location_code: Optional[str] = None
    location_tag: Optional[str] = None
    primary_location_id: Optional[str] = None
    location_ids: List[str] = Field(default_factory=list)
    level_location_mappings: List[LevelLocationMapping] = Field(default_factory=list)
    sku: Optional[str] = None
    primary_sku: Optional[str] = None
    sku_data: Optional[SkuData] = None
    compartment_contents: Dict[str, Optional[ContentRecord]] = Field(default_factory=dict)
    label: Optional[str] = None
    name: Optional[str] = None
    max_skus_per_compartment: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(
            "maxSKUsPerCompartment", "maxSkusPerCompartment", "max_skus_per_compartment"
        ),
    )

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> str:
        return _clean_text(value) or ""

    @field_validator("x", "y", "width", "height", mode="before")
    @classmethod
    def normalize_number(cls, value: Any) -> float:
        if value is None or value == "":
            return 0.0
        return value

    @field_validator("is_container", mode="before")
    @classmethod
    def normalize_is_container(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    @field_validator("container_level", mode="after")
    @classmethod
    def ensure_container_level(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        if not MIN_CONTAINER_LEVEL <= value <= MAX_CONTAINER_LEVEL:
            msg = f"containerLevel must be between 1 and 3, got {value}"
            raise ValueError(msg)
        return value

    @field_validator(
        "category",
        "location_id",
        "location_code",
        "location_tag",
        "primary_location_id",
        "sku",
        "primary_sku",
        "label",
        "name",
        mode="before",
    )
    @classmethod
    def normalize_text(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @field_validator("location_ids", mode="before")
    @classmethod
    def normalize_location_ids(cls, value: Any) -> List[str]:
        return _clean_text_list(value)

    @field_validator("level_location_mappings", mode="before")
    @classmethod
    def normalize_mappings(cls, value: Any) -> List[Any]:
        return _clean_mappings(value)

    @field_validator("compartment_contents", mode="before")
    @classmethod
    def normalize_compartments(cls, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict):
            return {}
        normalized: Dict[str, Any] = {}
        for compartment_id, content in value.items():
            key = str(compartment_id).strip()
            if not key:
                continue
            normalized[key] = content if isinstance(content, dict | ContentRecord) else None
        return normalized

    @field_validator("sku_data", mode="before")
    @classmethod
    def normalize_sku_data(cls, value: Any) -> Any:
        return value if isinstance(value, dict | SkuData) else None

    def mapping_location_ids(self) -> List[str]:
        return [m.location_id for m in self.level_location_mappings if m.location_id]

    def compartments(self) -> List[tuple[str, ContentRecord]]:
        return [
            (compartment_id, content)
            for compartment_id, content in self.compartment_contents.items()
            if content is not None
        ]

    def sku_code(self) -> Optional[str]:
        if self.sku_data is not None and self.sku_data.sku:
            return self.sku_data.sku
        return self.sku

    def item_key(self) -> str:
        if self.id:
            return self.id
        parts = [
            self.type or "item",
            _format_number(round_half_up(self.x)),
            _format_number(round_half_up(self.y)),
            _format_number(self.width),
            _format_number(self.height),
        ]
        return "-".join(parts)


class LocationCatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    location_id: Optional[str] = None
    sku_name: Optional[str] = None
    brand: Optional[str] = None
    procurement_date: Optional[str] = None
    available_quantity: Optional[float] = None

    @field_validator("location_id", "sku_name", "brand", "procurement_date", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> Optional[str]:
        return _clean_text(value)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)
