"""
ToolDispatcher: apply gateway tool calls to the active flow.

Every call is checkpointed exactly once through the
:class:`~fluidflow.core.undo.UndoEngine` before anything else happens, then
parsed into the closed :data:`~fluidflow.core.contracts.tools.ToolOperation`
union and matched exhaustively:

- ``present_artifact``  -> new artifact appended and made active.
- ``modify_artifact``   -> content overwritten, or a notice message when the
  id is unknown (artifacts untouched).
- ``create_task_list``  -> model message with an ephemeral task-list attachment.
- unknown / malformed   -> logged, nothing else changes.

The checkpoint is taken even when the call turns out to be a no-op (unknown
name, missing target), so undo may step over an unchanged state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from fluidflow.core.artifacts import ArtifactRegistry
from fluidflow.core.contracts import (
    Artifact,
    CreateTaskList,
    MalformedToolCall,
    Message,
    ModifyArtifact,
    PresentArtifact,
    TaskList,
    ToolCall,
    UnknownTool,
    model_message,
    parse_tool_call,
)
from fluidflow.core.errors import FluidError, ToolLookupError, UnknownToolError
from fluidflow.core.events import EventBus, EventType, FlowEvent
from fluidflow.core.flow_store import FlowStore
from fluidflow.core.settings import get_logger
from fluidflow.core.undo import UndoEngine

logger = get_logger(__name__)

TASK_LIST_INTRO = "I have created the following task list for you:"


def artifact_updated_text(artifact: Artifact) -> str:
    return f"I have updated the artifact: *{artifact.title}*."


def artifact_missing_text(artifact_id: str) -> str:
    return f"Apologies, I could not find an artifact with the ID {artifact_id}."


class DispatchStatus(str, Enum):
    PRESENTED = "presented"
    MODIFIED = "modified"
    NOT_FOUND = "not_found"
    TASK_LIST = "task_list"
    UNKNOWN = "unknown"
    MALFORMED = "malformed"


@dataclass(slots=True)
class DispatchResult:
    """What a single tool call did to the flow."""

    name: str
    status: DispatchStatus
    artifact: Artifact | None = None
    message: Message | None = None
    task_list: TaskList | None = None
    error: FluidError | None = None


class ToolDispatcher:
    """Interpret tool calls against the active flow."""

    def __init__(
        self,
        store: FlowStore,
        registry: ArtifactRegistry,
        undo: UndoEngine,
        events: EventBus,
    ) -> None:
        self._store = store
        self._registry = registry
        self._undo = undo
        self._events = events

    def dispatch(self, call: ToolCall) -> DispatchResult:
        """Checkpoint, then apply ``call`` to the active flow. Never raises for bad calls."""
        self._undo.checkpoint()
        flow_id = self._store.active_flow.id
        op = parse_tool_call(call)

        match op:
            case PresentArtifact():
                return self._present(flow_id, op)
            case ModifyArtifact():
                return self._modify(flow_id, op)
            case CreateTaskList():
                return self._task_list(flow_id, op)
            case UnknownTool():
                error = UnknownToolError(op.name)
                logger.warning("Ignoring %s (args=%s)", error, sorted(op.arguments))
                return DispatchResult(name=op.name, status=DispatchStatus.UNKNOWN, error=error)
            case MalformedToolCall():
                logger.warning("Ignoring malformed %s call: %s", op.name, "; ".join(op.problems))
                return DispatchResult(name=op.name, status=DispatchStatus.MALFORMED)
            case _:
                assert_never(op)

    # ------------------------------ Operations -------------------------------

    def _present(self, flow_id: str, op: PresentArtifact) -> DispatchResult:
        artifact = Artifact(
            id=self._registry.new_id(flow_id),
            title=op.title,
            type=op.type,
            content=op.content,
            language=op.language,
        )
        artifact = self._registry.append(flow_id, artifact)
        self._store.persist()
        logger.info("Presented artifact %s (%s) in %s", artifact.id, artifact.type, flow_id)
        self._events.emit(
            FlowEvent(type=EventType.ARTIFACT_PRESENTED, flow_id=flow_id, artifact=artifact)
        )
        return DispatchResult(name="present_artifact", status=DispatchStatus.PRESENTED, artifact=artifact)

    def _modify(self, flow_id: str, op: ModifyArtifact) -> DispatchResult:
        try:
            artifact = self._registry.update_content(flow_id, op.artifact_id, op.new_content)
        except ToolLookupError as exc:
            logger.warning("modify_artifact: %s in %s", exc, flow_id)
            notice = self._say(flow_id, artifact_missing_text(op.artifact_id))
            return DispatchResult(
                name="modify_artifact", status=DispatchStatus.NOT_FOUND, message=notice, error=exc
            )

        self._store.persist()
        if self._store.active_artifact_id == artifact.id:
            self._events.emit(
                FlowEvent(type=EventType.ARTIFACT_RERENDER, flow_id=flow_id, artifact=artifact)
            )
        confirmation = self._say(flow_id, artifact_updated_text(artifact))
        return DispatchResult(
            name="modify_artifact",
            status=DispatchStatus.MODIFIED,
            artifact=artifact,
            message=confirmation,
        )

    def _task_list(self, flow_id: str, op: CreateTaskList) -> DispatchResult:
        task_list = TaskList(tasks=op.tasks)
        message = self._say(flow_id, TASK_LIST_INTRO, attachment=task_list)
        self._events.emit(FlowEvent(type=EventType.TASK_LIST, flow_id=flow_id, task_list=task_list))
        return DispatchResult(
            name="create_task_list",
            status=DispatchStatus.TASK_LIST,
            message=message,
            task_list=task_list,
        )

    def _say(self, flow_id: str, text: str, attachment: TaskList | None = None) -> Message:
        message = model_message(text, attachment=attachment)
        self._store.append_message(flow_id, message)
        self._events.emit(FlowEvent(type=EventType.MESSAGE_APPENDED, flow_id=flow_id, message=message))
        return message


__all__ = [
    "ToolDispatcher",
    "DispatchResult",
    "DispatchStatus",
    "TASK_LIST_INTRO",
    "artifact_updated_text",
    "artifact_missing_text",
]
