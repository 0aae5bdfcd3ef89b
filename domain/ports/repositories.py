from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import LayoutItem, LocationCatalogEntry
from domain.services.inventory_query import QueryOutcome


class LayoutRepository(Protocol):
    def load(self, path: Path) -> Sequence[LayoutItem]: ...

    def save(self, items: Sequence[LayoutItem], path: Path) -> None: ...


class LocationCatalogRepository(Protocol):
    def load(self, path: Path) -> Sequence[LocationCatalogEntry]: ...


class HighlightRepository(Protocol):
    def save(self, outcome: QueryOutcome, path: Path) -> None: ...
