from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import orjson


def load_json_payload(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def dump_json_bytes(payload: Any) -> bytes:
    try:
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2)
    except TypeError:
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str).encode("utf-8")


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)


def lock_path_for(path: Path) -> Path:
    return path.with_suffix(f"{path.suffix}.lock")
