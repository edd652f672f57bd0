from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def read_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def write_bytes_atomic(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(content)
    tmp_path.replace(path)


def write_json_atomic(path: Path, payload: Any) -> None:
    # Draw instructions hold only str, int, float, bool, list and dict.
    write_bytes_atomic(path, orjson.dumps(payload, option=orjson.OPT_INDENT_2))
