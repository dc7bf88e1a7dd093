"""In-memory key-value adapter, used by tests and the ephemeral API mode."""

from __future__ import annotations

from collections.abc import Mapping


class InMemoryKeyValueStore:
    """Dict-backed :class:`~fluidflow.core.persistence.port.KeyValueStore`.

    Attributes
    ----------
    writes : int
        Number of ``set`` calls so far; tests use it to check that an
        operation persisted (or did not).
    """

    __slots__ = ("_data", "writes")

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.writes: int = 0

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.writes += 1

    def keys(self) -> tuple[str, ...]:
        """Return the current keys as a sorted tuple (stable for tests)."""
        return tuple(sorted(self._data))

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._data)


__all__ = ["InMemoryKeyValueStore"]
