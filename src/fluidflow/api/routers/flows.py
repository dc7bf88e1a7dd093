"""
API Routes for flow management.

Endpoints
---------
- `GET /flows`                  : List flows (insertion order).
- `POST /flows`                 : Create a flow and make it active.
- `GET /flows/active`           : Active flow with its pointers.
- `PATCH /flows/{flow_id}`      : Rename (blank names are ignored).
- `DELETE /flows/{flow_id}`     : Delete; 409 for the last remaining flow.
- `POST /flows/{flow_id}/activate` : Switch the active flow.

Unknown flow ids raise :class:`FlowNotFoundError`, mapped to 404 by the app.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from fluidflow.api.deps import get_controller
from fluidflow.api.schemas import CreateFlowRequest, FlowState, FlowSummary, RenameFlowRequest
from fluidflow.core.controller import ConversationController

router = APIRouter(prefix="/flows", tags=["Flows"])

Controller = Annotated[ConversationController, Depends(get_controller)]


def _ensure_idle(controller: ConversationController) -> None:
    if controller.is_loading:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A request is already in flight.",
        )


@router.get("", response_model=list[FlowSummary], summary="List flows")
async def list_flows(controller: Controller) -> list[FlowSummary]:
    store = controller.store
    return [
        FlowSummary(
            id=flow.id,
            name=flow.name,
            message_count=len(flow.history),
            artifact_count=len(flow.artifacts),
            active=flow.id == store.active_flow_id,
        )
        for flow in store.flows.values()
    ]


@router.post(
    "",
    response_model=FlowState,
    status_code=status.HTTP_201_CREATED,
    summary="Create a flow",
)
async def create_flow(request: CreateFlowRequest, controller: Controller) -> FlowState:
    _ensure_idle(controller)
    controller.create_flow(request.name)
    return FlowState.of(controller)


@router.get("/active", response_model=FlowState, summary="Active flow")
async def active_flow(controller: Controller) -> FlowState:
    return FlowState.of(controller)


@router.patch("/{flow_id}", response_model=FlowSummary, summary="Rename a flow")
async def rename_flow(
    flow_id: str, request: RenameFlowRequest, controller: Controller
) -> FlowSummary:
    _ensure_idle(controller)
    controller.rename_flow(flow_id, request.name)
    flow = controller.store.get(flow_id)
    return FlowSummary(
        id=flow.id,
        name=flow.name,
        message_count=len(flow.history),
        artifact_count=len(flow.artifacts),
        active=flow.id == controller.store.active_flow_id,
    )


@router.delete("/{flow_id}", response_model=FlowState, summary="Delete a flow")
async def delete_flow(flow_id: str, controller: Controller) -> FlowState:
    _ensure_idle(controller)
    if not controller.delete_flow(flow_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete the last flow.",
        )
    return FlowState.of(controller)


@router.post("/{flow_id}/activate", response_model=FlowState, summary="Switch the active flow")
async def activate_flow(flow_id: str, controller: Controller) -> FlowState:
    _ensure_idle(controller)
    controller.switch_flow(flow_id)
    return FlowState.of(controller)


__all__ = ["router"]
