from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
from filelock import FileLock

_DUMP_OPTIONS = orjson.OPT_INDENT_2
_FILE_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE


def load_json(path: Path) -> Any:
    try:
        return orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise ValueError(msg) from exc


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=_DUMP_OPTIONS)


def write_json_atomic(path: Path, payload: Any, lock_timeout: float = -1) -> None:
    """Write ``payload`` next to ``path`` and swap it in while holding ``<path>.lock``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lock_path = path.with_suffix(f"{path.suffix}.lock")
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    with FileLock(str(lock_path), timeout=lock_timeout):
        tmp_path.write_bytes(orjson.dumps(payload, option=_FILE_OPTIONS))
        tmp_path.replace(path)
