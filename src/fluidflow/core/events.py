"""
State-change notifications for renderers.

State transitions in the stores, the dispatcher and the controller never draw
anything. They publish a :class:`FlowEvent` on an :class:`EventBus` and any
number of subscribers (the rich terminal renderer, a test recorder, a future
web push channel) redraw from it.

A subscriber that raises is logged and skipped; it cannot break the
transition that emitted the event.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from fluidflow.core.contracts import Artifact, Message, TaskList
from fluidflow.core.settings import get_logger

logger = get_logger(__name__)


class EventType(str, Enum):
    """Kinds of state change a renderer may care about."""

    MESSAGE_APPENDED = "message_appended"
    ARTIFACT_PRESENTED = "artifact_presented"
    ARTIFACT_RERENDER = "artifact_rerender"
    ARTIFACT_SELECTED = "artifact_selected"
    TASK_LIST = "task_list"
    SESSION_REBUILT = "session_rebuilt"
    FLOWS_CHANGED = "flows_changed"
    LOADING_CHANGED = "loading_changed"
    NOTICE = "notice"


class FlowEvent(BaseModel):
    """One notification. Only the fields relevant to ``type`` are set."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    flow_id: str | None = None
    message: Message | None = None
    artifact: Artifact | None = None
    task_list: TaskList | None = None
    detail: str | None = None
    loading: bool | None = None


Subscriber = Callable[[FlowEvent], None]


class EventBus:
    """Synchronous publish/subscribe hub."""

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def emit(self, event: FlowEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("event subscriber failed on %s", event.type.value)


class EventRecorder:
    """Subscriber that keeps every event; handy in tests and replays."""

    def __init__(self) -> None:
        self.events: list[FlowEvent] = []

    def __call__(self, event: FlowEvent) -> None:
        self.events.append(event)

    def of_type(self, kind: EventType) -> list[FlowEvent]:
        return [e for e in self.events if e.type is kind]


__all__ = ["EventType", "FlowEvent", "EventBus", "EventRecorder", "Subscriber"]
