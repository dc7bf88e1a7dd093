"""
API Routes for conversation, undo/redo and artifact edits.

Endpoints
---------
- `POST /chat`                          : Submit user text; 409 while one is in flight.
- `POST /undo`, `POST /redo`            : Step through checkpoints of the active flow.
- `PUT /artifacts/{artifact_id}`        : Manual edit-and-save.
- `POST /artifacts/{artifact_id}/select`: Make an artifact the active one.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from fluidflow.api.deps import get_controller
from fluidflow.api.schemas import (
    ChatRequest,
    ChatResponse,
    EditArtifactRequest,
    FlowState,
    HistoryResponse,
)
from fluidflow.core.controller import ConversationController

router = APIRouter(tags=["Conversation"])

Controller = Annotated[ConversationController, Depends(get_controller)]


@router.post("/chat", response_model=ChatResponse, summary="Send a message to the active flow")
async def chat(request: ChatRequest, controller: Controller) -> ChatResponse:
    outcome = await controller.submit(request.text)
    if not outcome.accepted:
        if outcome.reason == "busy":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A request is already in flight.",
            )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty message.")
    return ChatResponse.of(outcome, controller)


@router.post("/undo", response_model=HistoryResponse, summary="Undo the last checkpoint")
async def undo(controller: Controller) -> HistoryResponse:
    changed = controller.undo()
    return HistoryResponse(changed=changed, state=FlowState.of(controller))


@router.post("/redo", response_model=HistoryResponse, summary="Redo the last undone checkpoint")
async def redo(controller: Controller) -> HistoryResponse:
    changed = controller.redo()
    return HistoryResponse(changed=changed, state=FlowState.of(controller))


@router.put("/artifacts/{artifact_id}", response_model=FlowState, summary="Edit an artifact")
async def edit_artifact(
    artifact_id: str, request: EditArtifactRequest, controller: Controller
) -> FlowState:
    if controller.edit_artifact(artifact_id, request.content) is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A request is already in flight.",
        )
    return FlowState.of(controller)


@router.post(
    "/artifacts/{artifact_id}/select", response_model=FlowState, summary="Select an artifact"
)
async def select_artifact(artifact_id: str, controller: Controller) -> FlowState:
    if controller.select_artifact(artifact_id) is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A request is already in flight.",
        )
    return FlowState.of(controller)


__all__ = ["router"]
