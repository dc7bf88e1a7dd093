"""
Request / response models for the HTTP API.

Domain contracts (:class:`Flow`, :class:`Message`, :class:`Artifact`) are
returned as-is; the models here only wrap them with the bits a client needs
(active pointers, dispatch outcomes, undo availability).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from fluidflow.core.contracts import Flow, Message, TaskList
from fluidflow.core.controller import ConversationController, SubmitOutcome


class FlowSummary(BaseModel):
    id: str
    name: str
    message_count: int
    artifact_count: int
    active: bool


class FlowState(BaseModel):
    """The active flow plus the pointers and undo availability around it."""

    flow: Flow
    active_artifact_id: str | None
    can_undo: bool
    can_redo: bool
    is_loading: bool

    @classmethod
    def of(cls, controller: ConversationController) -> FlowState:
        return cls(
            flow=controller.active_flow,
            active_artifact_id=controller.store.active_artifact_id,
            can_undo=controller.undo_engine.can_undo,
            can_redo=controller.undo_engine.can_redo,
            is_loading=controller.is_loading,
        )


class CreateFlowRequest(BaseModel):
    name: str | None = Field(default=None, description="Defaults to 'New Flow <n>'.")


class RenameFlowRequest(BaseModel):
    name: str


class ChatRequest(BaseModel):
    text: str = Field(..., min_length=1)


class DispatchSummary(BaseModel):
    name: str
    status: str
    artifact_id: str | None = None
    task_list: TaskList | None = None


class ChatResponse(BaseModel):
    failed: bool
    user_message: Message | None
    reply_message: Message | None
    dispatched: list[DispatchSummary]
    state: FlowState

    @classmethod
    def of(cls, outcome: SubmitOutcome, controller: ConversationController) -> ChatResponse:
        return cls(
            failed=outcome.failed,
            user_message=outcome.user_message,
            reply_message=outcome.reply_message,
            dispatched=[
                DispatchSummary(
                    name=r.name,
                    status=r.status.value,
                    artifact_id=r.artifact.id if r.artifact else None,
                    task_list=r.task_list,
                )
                for r in outcome.dispatched
            ],
            state=FlowState.of(controller),
        )


class HistoryResponse(BaseModel):
    changed: bool
    state: FlowState


class EditArtifactRequest(BaseModel):
    content: str


__all__ = [
    "FlowSummary",
    "FlowState",
    "CreateFlowRequest",
    "RenameFlowRequest",
    "ChatRequest",
    "ChatResponse",
    "DispatchSummary",
    "HistoryResponse",
    "EditArtifactRequest",
]
