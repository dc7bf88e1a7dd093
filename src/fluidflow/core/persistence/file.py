"""Disk-backed key-value adapter.

All keys live in a single JSON document (an object of string to string):

- Default location: `FLUID_STORE_PATH` env var or `.fluid/store.json`
- Writes go to a sibling temp file that then replaces the target, so a crash
  mid-write leaves the previous document intact.

Usage
-----
>>> kv = JsonFileKeyValueStore()  # uses default path
>>> kv.set("active_flow_id", "flow-1")
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from fluidflow.core.errors import PersistenceError


def default_store_path() -> Path:
    """Return the default location of the store document."""
    root = os.getenv("FLUID_STORE_PATH")
    return Path(root) if root else Path(".fluid") / "store.json"


class JsonFileKeyValueStore:
    """Persist string keys to one JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path if path is not None else default_store_path()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"cannot read store at {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise PersistenceError(f"store at {self.path} is not a JSON object")
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """Write ``key`` and rewrite the document atomically."""
        try:
            data = self._read_all()
        except PersistenceError:
            # An unreadable document is overwritten rather than blocking saves.
            data = {}
        data[key] = value

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.write("\n")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise PersistenceError(f"cannot write store at {self.path}: {exc}") from exc


__all__ = ["JsonFileKeyValueStore", "default_store_path"]
