"""
Persistence port used by :class:`~fluidflow.core.flow_store.FlowStore`.

The store only needs two string-valued keys, so the capability it depends on
is a tiny key-value protocol. Adapters raise
:class:`~fluidflow.core.errors.PersistenceError` on backend failure and return
``None`` for a missing key.
"""

from __future__ import annotations

from typing import Final, Protocol, runtime_checkable

FLOWS_KEY: Final = "flows"
ACTIVE_FLOW_KEY: Final = "active_flow_id"


@runtime_checkable
class KeyValueStore(Protocol):
    """String key to string value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


__all__ = ["KeyValueStore", "FLOWS_KEY", "ACTIVE_FLOW_KEY"]
