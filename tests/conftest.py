from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, InventorySettings, LayoutSettings
from domain.models import LayoutItem
from domain.services.inventory_index import LocationSkuCatalog
from tests.helpers.layout_fixtures import make_catalog_entries, steel_brackets_layout


def _clear_wlc_env() -> None:
    for key in list(os.environ):
        if key.startswith("WLC_"):
            os.environ.pop(key, None)


_clear_wlc_env()


@pytest.fixture(autouse=True)
def clear_wlc_env() -> Generator[None, None, None]:
    _clear_wlc_env()
    yield
    _clear_wlc_env()


@pytest.fixture
def layout_settings() -> LayoutSettings:
    return LayoutSettings(
        snap_tolerance=10,
        container_padding=10,
        boundary_padding=20,
        boundary_grid_size=60,
        label_max_length=20,
    )


@pytest.fixture
def inventory_settings(tmp_path: Path) -> InventorySettings:
    return InventorySettings(
        catalog_path=tmp_path / "catalog.json",
        location_prefix="LOC-",
        extra_assets=[],
    )


@pytest.fixture
def inventory_settings_factory(
    inventory_settings: InventorySettings,
) -> Callable[..., InventorySettings]:
    def _factory(**overrides: object) -> InventorySettings:
        return inventory_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(
    layout_settings: LayoutSettings,
    inventory_settings: InventorySettings,
) -> AppSettings:
    return AppSettings(layout=layout_settings, inventory=inventory_settings)


@pytest.fixture
def app_settings_factory(
    layout_settings: LayoutSettings,
    inventory_settings_factory: Callable[..., InventorySettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(layout=layout_settings, inventory=inventory_settings_factory(**overrides))

    return _factory


@pytest.fixture
def steel_catalog() -> LocationSkuCatalog:
    return LocationSkuCatalog.from_entries(
        make_catalog_entries({"LOC-007": "Steel Brackets", "LOC-011": "Copper Pipe"})
    )


@pytest.fixture
def steel_layout() -> list[LayoutItem]:
    return steel_brackets_layout()
