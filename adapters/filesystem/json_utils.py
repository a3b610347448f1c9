from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json_payload(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def load_json_records(path: Path, key: str = "activities") -> list[dict[str, Any]]:
    data = load_json_payload(path)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS)


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)
