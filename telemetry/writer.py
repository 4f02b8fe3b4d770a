"""Solve trace writer producing JSON lines."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping

from rational import Fraction


def write_history(path: str | Path, records: Iterable[Mapping[str, object]]) -> int:
    """Write one JSON object per line and return how many were written."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with target.open("w", encoding="utf-8") as handle:
        for record in records:
            handle.write(json.dumps(record, default=_json_fallback, ensure_ascii=False))
            handle.write("\n")
            count += 1
    return count


def read_history(path: str | Path) -> list[dict]:
    with Path(path).open("r", encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]


def _json_fallback(obj):
    if isinstance(obj, Fraction):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "tolist"):
        return obj.tolist()
    raise TypeError(f"object of type {type(obj)!r} is not JSON serializable")
