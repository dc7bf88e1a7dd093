"""Key-value persistence port and its adapters."""

from __future__ import annotations

from .file import JsonFileKeyValueStore, default_store_path
from .memory import InMemoryKeyValueStore
from .port import ACTIVE_FLOW_KEY, FLOWS_KEY, KeyValueStore

__all__ = [
    "KeyValueStore",
    "FLOWS_KEY",
    "ACTIVE_FLOW_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "default_store_path",
]
