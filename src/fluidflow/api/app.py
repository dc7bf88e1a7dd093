"""
HTTP application factory.

`create_app(controller=None)` returns a FastAPI app bound to exactly one
:class:`ConversationController`, stored on ``app.state`` and handed to the
routers through :func:`fluidflow.api.deps.get_controller`.

- Tests pass a controller over an in-memory store and a scripted gateway.
- `fluidflow.api.server` lets the factory wire one from settings.

Domain errors map onto JSON bodies of the shape
``{"error": <reason>, "detail": <message>, "path": <url path>}``:

=====================  ======
FlowNotFoundError      404
ToolLookupError        404
anything else          500
=====================  ======
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fluidflow import __version__
from fluidflow.api.routers import chat, flows
from fluidflow.core.controller import ConversationController
from fluidflow.core.errors import FlowNotFoundError, ToolLookupError
from fluidflow.core.settings import get_logger, load_settings

logger = get_logger(__name__)


def _error_body(status_code: int, reason: str, request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": reason, "detail": str(exc), "path": request.url.path},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the active flow on startup; flush the store once more on shutdown."""
    controller: ConversationController = app.state.controller
    logger.info(
        "API up with %d flow(s); active=%s", len(controller.store), controller.store.active_flow_id
    )
    yield
    if not controller.store.persist():
        logger.warning("Final persist failed; unsaved changes are lost")
    logger.info("API shut down")


def create_app(controller: ConversationController | None = None) -> FastAPI:
    """
    Build the fluidflow API around ``controller``.

    An omitted controller is built from settings (JSON file store and Gemini
    gateway). A controller without a session yet is started here, which loads
    the store and opens the first session.
    """
    if controller is None:
        controller = ConversationController.from_settings()
    if controller.session is None:
        controller.start()

    cfg = load_settings()
    app = FastAPI(
        title="fluidflow API",
        description="Conversational flows with artifacts, task lists and undo/redo.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.controller = controller
    store = controller.store

    # Browser clients on another origin are allowed in dev only.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if cfg.is_dev else [],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    @app.exception_handler(FlowNotFoundError)
    async def on_flow_not_found(request: Request, exc: FlowNotFoundError) -> JSONResponse:
        return _error_body(404, "Flow Not Found", request, exc)

    @app.exception_handler(ToolLookupError)
    async def on_artifact_not_found(request: Request, exc: ToolLookupError) -> JSONResponse:
        return _error_body(404, "Artifact Not Found", request, exc)

    @app.exception_handler(Exception)
    async def on_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_body(500, "Internal Server Error", request, exc)

    app.include_router(flows.router)
    app.include_router(chat.router)

    @app.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        """Liveness probe with environment, version and store mode."""
        return {
            "status": "ok",
            "environment": cfg.environment,
            "version": __version__,
            "store": "degraded" if store.degraded else "ok",
        }

    return app


def get_app() -> FastAPI:
    """ASGI factory: an app wired from settings."""
    return create_app()


__all__ = ["create_app", "get_app"]
