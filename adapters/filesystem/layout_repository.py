from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, List

import orjson
from filelock import FileLock
from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_payload, lock_path_for, write_json_atomic
from domain.models import LayoutItem
from domain.ports.repositories import LayoutRepository

logger = logging.getLogger(__name__)


class LayoutSnapshotError(ValueError):
    pass


def extract_item_payloads(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if "items" in payload:
            items = payload["items"]
        elif isinstance(payload.get("layoutData"), dict):
            items = payload["layoutData"].get("items")
        else:
            items = None
        if isinstance(items, list):
            return items
    msg = "Layout snapshot must be a list of items or an object with an 'items' list"
    raise LayoutSnapshotError(msg)


class FileSystemLayoutRepository(LayoutRepository):
    def load(self, path: Path) -> List[LayoutItem]:
        try:
            payload = load_json_payload(path)
        except orjson.JSONDecodeError as exc:
            msg = f"Layout snapshot {path} is not valid JSON: {exc}"
            raise LayoutSnapshotError(msg) from exc

        items: List[LayoutItem] = []
        for position, raw in enumerate(extract_item_payloads(payload)):
            if not isinstance(raw, dict):
                logger.debug("Skipping non-object layout entry at position %s", position)
                continue
            try:
                items.append(LayoutItem.model_validate(raw))
            except ValidationError as exc:
                msg = f"Layout item #{position} in {path} is invalid: {exc}"
                raise LayoutSnapshotError(msg) from exc
        logger.debug("Loaded %s layout items from %s", len(items), path)
        return items

    def save(self, items: Sequence[LayoutItem], path: Path) -> None:
        payload = {
            "items": [
                item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items
            ]
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(lock_path_for(path))):
            write_json_atomic(path, payload)
