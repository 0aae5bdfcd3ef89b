from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.services.boundary import DEFAULT_BOUNDARY_GRID_SIZE, DEFAULT_BOUNDARY_PADDING
from domain.services.connections import SNAP_TOLERANCE
from domain.services.geometry import DEFAULT_CONTAINER_PADDING
from domain.services.inventory_index import DEFAULT_LOCATION_PREFIX, LocationSkuCatalog
from domain.services.labeling import DEFAULT_LABEL_MAX_LENGTH

DEFAULT_CONFIG_PATH = Path("config/layout.yaml")


def _split_string_list_value(raw_value: str) -> list[str]:
    raw = raw_value.strip()
    if not raw:
        return []
    if (
        (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'"))
    ) and len(raw) >= 2:
        raw = raw[1:-1].strip()
    if raw.startswith("[") and raw.endswith("]"):
        raw = raw[1:-1].strip()
    if not raw:
        return []
    return [
        token for token in (part.strip().strip("'").strip('"') for part in raw.split(",")) if token
    ]


class LayoutSettings(BaseModel):
    snap_tolerance: float = Field(default=SNAP_TOLERANCE, ge=0)
    container_padding: float = Field(default=DEFAULT_CONTAINER_PADDING, ge=0)
    boundary_padding: float = Field(default=DEFAULT_BOUNDARY_PADDING, ge=0)
    boundary_grid_size: float = Field(default=DEFAULT_BOUNDARY_GRID_SIZE, gt=0)
    label_max_length: int = Field(default=DEFAULT_LABEL_MAX_LENGTH, gt=0)


class InventorySettings(BaseModel):
    catalog_path: Path | None = None
    location_prefix: str = DEFAULT_LOCATION_PREFIX
    extra_assets: Annotated[list[str], NoDecode] = Field(default_factory=list)

    @field_validator("catalog_path", mode="before")
    @classmethod
    def normalize_catalog_path(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("extra_assets", mode="before")
    @classmethod
    def normalize_lists(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, list):
            normalized: list[str] = []
            for item in value:
                normalized.extend(_split_string_list_value(str(item)))
            return normalized
        return _split_string_list_value(str(value))

    def build_catalog(self, entries: object = None) -> LocationSkuCatalog:
        return LocationSkuCatalog.from_entries(entries or [], location_prefix=self.location_prefix)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WLC_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    inventory: InventorySettings = InventorySettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("WLC_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
