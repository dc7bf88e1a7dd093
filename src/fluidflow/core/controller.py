"""
ConversationController: the top-level orchestrator and application context.

One controller owns every piece of mutable state: the flow store, the
artifact registry, the undo engine, the tool dispatcher, the current gateway
session and the ``is_loading`` flag. Surfaces (CLI, HTTP API) hold a
controller and call its methods. Nothing is module-global.

Submission lifecycle
--------------------
1. Empty text is ignored; text arriving while a request is in flight is
   rejected (not queued).
2. The user message is appended and persisted. No checkpoint is taken, so
   undo never removes a user's own words on its own.
3. The gateway round trip is awaited (bounded by ``gateway_timeout``).
4. Reply text becomes a model message, then every tool call is dispatched in
   the order received.
5. On any gateway failure a fixed apology is appended instead; the user
   message stays. ``is_loading`` is cleared in ``finally``.

Every other mutating operation (flow lifecycle, undo/redo, manual artifact
edits) is refused while a submission is pending.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fluidflow.core.artifacts import ArtifactRegistry
from fluidflow.core.contracts import Artifact, Flow, Message, model_message, user_message
from fluidflow.core.dispatcher import DispatchResult, ToolDispatcher
from fluidflow.core.errors import LastFlowError, ToolLookupError
from fluidflow.core.events import EventBus, EventType, FlowEvent
from fluidflow.core.flow_store import FlowStore
from fluidflow.core.persistence import JsonFileKeyValueStore, KeyValueStore
from fluidflow.core.settings import Settings, get_logger, load_settings
from fluidflow.core.undo import UndoEngine
from fluidflow.llm.gateway import ChatSession, Gateway, GeminiGateway
from fluidflow.llm.prompts import SYSTEM_INSTRUCTION, TOOL_SCHEMAS, WELCOME_TEXT

logger = get_logger(__name__)

GATEWAY_FAILURE_TEXT = "apologies. an error occurred. please try again."


@dataclass(slots=True)
class SubmitOutcome:
    """Result of one :meth:`ConversationController.submit` call."""

    accepted: bool
    reason: str | None = None
    user_message: Message | None = None
    reply_message: Message | None = None
    dispatched: list[DispatchResult] = field(default_factory=list)
    failed: bool = False


class ConversationController:
    """Owns the flow state and drives user turns through the gateway."""

    def __init__(
        self,
        backend: KeyValueStore,
        gateway: Gateway,
        *,
        events: EventBus | None = None,
        gateway_timeout: float | None = None,
        system_instruction: str = SYSTEM_INSTRUCTION,
        tool_schemas: Sequence[Mapping[str, Any]] = TOOL_SCHEMAS,
    ) -> None:
        self.events = events if events is not None else EventBus()
        self.store = FlowStore(backend)
        self.registry = ArtifactRegistry(self.store)
        self.undo_engine = UndoEngine(self.store)
        self.dispatcher = ToolDispatcher(self.store, self.registry, self.undo_engine, self.events)
        self.gateway = gateway
        self.gateway_timeout = gateway_timeout
        self.system_instruction = system_instruction
        self.tool_schemas = list(tool_schemas)
        self.session: ChatSession | None = None
        self.is_loading = False

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, events: EventBus | None = None
    ) -> ConversationController:
        """Wire the file-backed store and the Gemini gateway from configuration."""
        cfg = settings or load_settings()
        gateway = GeminiGateway.from_env(cfg.model_alias, timeout_seconds=cfg.gateway_timeout)
        if cfg.google_api_key and not gateway.client.api_key:
            gateway.client.api_key = cfg.google_api_key
        return cls(
            JsonFileKeyValueStore(cfg.store_path),
            gateway,
            events=events,
            gateway_timeout=cfg.gateway_timeout,
        )

    # ------------------------------ Lifecycle --------------------------------

    def start(self) -> Flow:
        """Load persisted flows and build the first session."""
        self.store.load()
        return self.initialize()

    def initialize(self, flow_id: str | None = None, soft_refresh: bool = False) -> Flow:
        """Rebuild the gateway session from a flow's stored history.

        A hard initialization (``soft_refresh=False``) also clears undo/redo.
        The active artifact is re-resolved with the registry's fallback rule.
        """
        flow = self.store.get(flow_id) if flow_id else self.store.active_flow
        if not soft_refresh:
            self.undo_engine.reset()

        self._open_session(flow)
        self.registry.resolve_active(flow.id)
        self.events.emit(
            FlowEvent(
                type=EventType.SESSION_REBUILT,
                flow_id=flow.id,
                detail=WELCOME_TEXT if not flow.history else None,
            )
        )
        logger.debug("Session rebuilt for %s (soft=%s)", flow.id, soft_refresh)
        return flow

    # ------------------------------ Properties -------------------------------

    @property
    def active_flow(self) -> Flow:
        return self.store.active_flow

    @property
    def active_artifact(self) -> Artifact | None:
        return self.registry.active(self.store.active_flow.id)

    # ------------------------------ Internals --------------------------------

    def _open_session(self, flow: Flow | None = None) -> ChatSession:
        flow = flow or self.store.active_flow
        self.session = self.gateway.create_session(
            self.system_instruction, self.tool_schemas, list(flow.history)
        )
        return self.session

    def _set_loading(self, value: bool) -> None:
        self.is_loading = value
        self.events.emit(FlowEvent(type=EventType.LOADING_CHANGED, loading=value))

    def _idle(self, action: str) -> bool:
        if self.is_loading:
            logger.info("Refusing %s while a request is in flight", action)
            self.events.emit(FlowEvent(type=EventType.NOTICE, detail=f"busy: {action} refused"))
            return False
        return True

    def _append(self, flow_id: str, message: Message) -> Message:
        self.store.append_message(flow_id, message)
        self.events.emit(FlowEvent(type=EventType.MESSAGE_APPENDED, flow_id=flow_id, message=message))
        return message

    def _flows_changed(self) -> None:
        self.events.emit(FlowEvent(type=EventType.FLOWS_CHANGED, flow_id=self.store.active_flow_id))

    # ------------------------------ Conversation -----------------------------

    async def submit(self, text: str) -> SubmitOutcome:
        """Send one user turn; see the module docstring for the lifecycle."""
        cleaned = text.strip()
        if not cleaned:
            return SubmitOutcome(accepted=False, reason="empty")
        if not self._idle("submit"):
            return SubmitOutcome(accepted=False, reason="busy")
        session = self.session or self._open_session()

        flow_id = self.store.active_flow.id
        outcome = SubmitOutcome(accepted=True)
        outcome.user_message = self._append(flow_id, user_message(cleaned))
        self._set_loading(True)
        try:
            try:
                reply = await asyncio.wait_for(session.send(cleaned), timeout=self.gateway_timeout)
            except Exception:
                logger.exception("Gateway request failed for flow %s", flow_id)
                outcome.failed = True
                outcome.reply_message = self._append(flow_id, model_message(GATEWAY_FAILURE_TEXT))
                return outcome

            if reply.text:
                outcome.reply_message = self._append(flow_id, model_message(reply.text))
            for call in reply.calls:
                outcome.dispatched.append(self.dispatcher.dispatch(call))
            return outcome
        finally:
            self._set_loading(False)

    # ------------------------------ Flows ------------------------------------

    def create_flow(self, name: str | None = None) -> str | None:
        if not self._idle("create flow"):
            return None
        self.undo_engine.checkpoint()
        flow_id = self.store.create(name)
        self.initialize()
        self._flows_changed()
        return flow_id

    def rename_flow(self, flow_id: str, name: str) -> bool:
        if not self._idle("rename flow"):
            return False
        self.store.get(flow_id)
        if not name.strip():
            return False
        self.undo_engine.checkpoint()
        renamed = self.store.rename(flow_id, name)
        self._flows_changed()
        return renamed

    def delete_flow(self, flow_id: str) -> bool:
        """Delete a flow; the last one is refused with a notice, not an exception."""
        if not self._idle("delete flow"):
            return False
        self.store.get(flow_id)
        try:
            if len(self.store) > 1:
                self.undo_engine.checkpoint()
            self.store.delete(flow_id)
        except LastFlowError as exc:
            logger.info("Refused to delete %s: %s", flow_id, exc)
            self.events.emit(FlowEvent(type=EventType.NOTICE, flow_id=flow_id, detail=str(exc)))
            return False
        self.initialize()
        self._flows_changed()
        return True

    def switch_flow(self, flow_id: str) -> bool:
        """Activate another flow and fully re-initialize the conversation."""
        if not self._idle("switch flow"):
            return False
        if not self.store.switch_active(flow_id):
            return False
        self.initialize()
        self._flows_changed()
        return True

    # ------------------------------ Undo / redo ------------------------------

    def undo(self) -> bool:
        if not self._idle("undo"):
            return False
        restored = self.undo_engine.undo()
        if restored is None:
            return False
        self.store.persist()
        self.initialize(soft_refresh=True)
        return True

    def redo(self) -> bool:
        if not self._idle("redo"):
            return False
        restored = self.undo_engine.redo()
        if restored is None:
            return False
        self.store.persist()
        self.initialize(soft_refresh=True)
        return True

    # ------------------------------ Artifacts --------------------------------

    def edit_artifact(self, artifact_id: str, content: str) -> Artifact | None:
        """Manual edit-and-save of an artifact in the active flow.

        Raises
        ------
        ToolLookupError
            If the artifact is not part of the active flow.
        """
        if not self._idle("edit artifact"):
            return None
        flow_id = self.store.active_flow.id
        if self.registry.find_by_id(flow_id, artifact_id) is None:
            raise ToolLookupError(artifact_id, flow_id)
        self.undo_engine.checkpoint()
        artifact = self.registry.update_content(flow_id, artifact_id, content.strip())
        self.store.persist()
        if self.store.active_artifact_id == artifact.id:
            self.events.emit(
                FlowEvent(type=EventType.ARTIFACT_RERENDER, flow_id=flow_id, artifact=artifact)
            )
        return artifact

    def select_artifact(self, artifact_id: str) -> Artifact | None:
        """Make an artifact of the active flow the one on display.

        Returns ``None`` while a request is in flight.
        """
        if not self._idle("select artifact"):
            return None
        flow_id = self.store.active_flow.id
        artifact = self.registry.select(flow_id, artifact_id)
        self.store.persist()
        self.events.emit(
            FlowEvent(type=EventType.ARTIFACT_SELECTED, flow_id=flow_id, artifact=artifact)
        )
        return artifact


__all__ = ["ConversationController", "SubmitOutcome", "GATEWAY_FAILURE_TEXT"]
