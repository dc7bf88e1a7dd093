"""
UndoEngine: linear undo/redo over whole-flow value copies.

Every checkpoint is a deep copy of the active flow, so a stack entry never
shares a list, message or artifact with the live flow. History is linear: a
new checkpoint always clears the redo stack.

The stacks have no depth limit, so memory grows with every checkpoint until
the controller resets them on a hard re-initialization.
"""

from __future__ import annotations

from fluidflow.core.contracts import Flow
from fluidflow.core.flow_store import FlowStore
from fluidflow.core.settings import get_logger

logger = get_logger(__name__)


class UndoEngine:
    """Two stacks of :class:`Flow` copies for the currently active flow."""

    def __init__(self, store: FlowStore) -> None:
        self._store = store
        self._undo: list[Flow] = []
        self._redo: list[Flow] = []

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def _copy_active(self) -> Flow:
        return self._store.active_flow.model_copy(deep=True)

    def checkpoint(self) -> None:
        """Push a copy of the active flow and drop any redo history."""
        self._undo.append(self._copy_active())
        self._redo.clear()

    def undo(self) -> Flow | None:
        """Restore the previous state; ``None`` when there is nothing to undo."""
        if not self._undo:
            return None
        self._redo.append(self._copy_active())
        restored = self._undo.pop()
        self._store.replace_flow(restored)
        logger.debug("Undo -> %s (undo=%d redo=%d)", restored.id, self.undo_depth, self.redo_depth)
        return restored

    def redo(self) -> Flow | None:
        """Re-apply an undone state; ``None`` when there is nothing to redo."""
        if not self._redo:
            return None
        self._undo.append(self._copy_active())
        restored = self._redo.pop()
        self._store.replace_flow(restored)
        logger.debug("Redo -> %s (undo=%d redo=%d)", restored.id, self.undo_depth, self.redo_depth)
        return restored

    def reset(self) -> None:
        self._undo.clear()
        self._redo.clear()


__all__ = ["UndoEngine"]
