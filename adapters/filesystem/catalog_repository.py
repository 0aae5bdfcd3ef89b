from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

import orjson
from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_payload
from domain.models import LocationCatalogEntry
from domain.ports.repositories import LocationCatalogRepository

logger = logging.getLogger(__name__)


class CatalogSnapshotError(ValueError):
    pass


def _extract_entries(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("locations"), list):
        return payload["locations"]
    msg = "Location catalog must be a list or an object with a 'locations' list"
    raise CatalogSnapshotError(msg)


class FileSystemLocationCatalogRepository(LocationCatalogRepository):
    def load(self, path: Path) -> List[LocationCatalogEntry]:
        try:
            payload = load_json_payload(path)
        except orjson.JSONDecodeError as exc:
            msg = f"Location catalog {path} is not valid JSON: {exc}"
            raise CatalogSnapshotError(msg) from exc

        entries: List[LocationCatalogEntry] = []
        for raw in _extract_entries(payload):
            if not isinstance(raw, dict):
                continue
            try:
                entries.append(LocationCatalogEntry.model_validate(raw))
            except ValidationError as exc:
                msg = f"Location catalog entry in {path} is invalid: {exc}"
                raise CatalogSnapshotError(msg) from exc
        logger.debug("Loaded %s catalog entries from %s", len(entries), path)
        return entries
