from __future__ import annotations

import logging
from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import lock_path_for, write_json_atomic
from domain.ports.repositories import HighlightRepository
from domain.services.inventory_query import QueryOutcome

logger = logging.getLogger(__name__)


class FileSystemHighlightRepository(HighlightRepository):
    def save(self, outcome: QueryOutcome, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(lock_path_for(path))):
            write_json_atomic(path, outcome.to_dict())
        logger.debug("Wrote %s query results to %s", len(outcome.results), path)
