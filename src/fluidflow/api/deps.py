"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from fluidflow.core.controller import ConversationController


def get_controller(request: Request) -> ConversationController:
    """Return the controller installed on ``app.state`` by :func:`create_app`."""
    controller: ConversationController = request.app.state.controller
    return controller


__all__ = ["get_controller"]
