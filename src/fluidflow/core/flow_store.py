"""
FlowStore: the mapping of flow ids to flows plus the active pointers.

Responsibilities
----------------
- **Load / persist** the whole store through an injected
  :class:`~fluidflow.core.persistence.port.KeyValueStore` under the keys
  ``flows`` and ``active_flow_id``.
- **Lifecycle**: create, rename, delete and switch flows while keeping the
  store non-empty and the active id valid.
- **Pointers**: ``active_flow_id`` and ``active_artifact_id``. The artifact
  pointer is a single slot that the controller refreshes whenever the active
  flow changes.

Failure policy
--------------
A missing, unparsable or invalid ``flows`` value on load resets the store to a
single default flow, which is written back at once. A failing backend on
persist is logged and the store keeps working in memory (``degraded``
becomes True). Neither case raises.
"""

from __future__ import annotations

from pydantic import ValidationError

from fluidflow.core.contracts import DEFAULT_FLOW_NAME, Flow, FlowMap, Message
from fluidflow.core.errors import FlowNotFoundError, LastFlowError, PersistenceError
from fluidflow.core.persistence import ACTIVE_FLOW_KEY, FLOWS_KEY, KeyValueStore
from fluidflow.core.settings import get_logger

logger = get_logger(__name__)


class FlowStore:
    """Owns every flow and the active-flow / active-artifact pointers."""

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend
        self.flows: dict[str, Flow] = {}
        self.active_flow_id: str | None = None
        self.active_artifact_id: str | None = None
        self.degraded: bool = False

    # ------------------------------ Load / save ------------------------------

    def load(self) -> None:
        """Read the persisted store; fall back to one default flow on any problem."""
        try:
            raw = self._backend.get(FLOWS_KEY)
            flows = FlowMap.validate_json(raw) if raw else {}
            active_id = self._backend.get(ACTIVE_FLOW_KEY)
        except (PersistenceError, ValidationError, ValueError) as exc:
            logger.warning("Persisted flows unreadable, starting fresh: %s", exc)
            flows, active_id = {}, None

        # Keys are authoritative; make each flow agree with the key it sits under.
        self.flows = {key: flow.model_copy(update={"id": key}) for key, flow in flows.items()}

        if not self.flows:
            self._bootstrap()
            return

        if active_id in self.flows:
            self.active_flow_id = active_id
        else:
            self.active_flow_id = next(iter(self.flows))
        logger.debug("Loaded %d flow(s); active=%s", len(self.flows), self.active_flow_id)

    def _bootstrap(self) -> None:
        flow = Flow(name=DEFAULT_FLOW_NAME)
        self.flows = {flow.id: flow}
        self.active_flow_id = flow.id
        self.active_artifact_id = None
        logger.info("Created default flow %s", flow.id)
        self.persist()

    def persist(self) -> bool:
        """Write all flows and the active id. Returns False if the backend failed."""
        try:
            self._backend.set(FLOWS_KEY, FlowMap.dump_json(self.flows).decode("utf-8"))
            if self.active_flow_id is not None:
                self._backend.set(ACTIVE_FLOW_KEY, self.active_flow_id)
        except PersistenceError as exc:
            if not self.degraded:
                logger.error("Persisting flows failed, continuing in memory: %s", exc)
            self.degraded = True
            return False
        self.degraded = False
        return True

    # ------------------------------- Accessors -------------------------------

    def get(self, flow_id: str) -> Flow:
        try:
            return self.flows[flow_id]
        except KeyError:
            raise FlowNotFoundError(flow_id) from None

    @property
    def active_flow(self) -> Flow:
        if self.active_flow_id is None:
            raise FlowNotFoundError("<none>")
        return self.get(self.active_flow_id)

    def flow_ids(self) -> list[str]:
        """Flow ids in insertion order."""
        return list(self.flows)

    def __len__(self) -> int:
        return len(self.flows)

    def __contains__(self, flow_id: object) -> bool:
        return flow_id in self.flows

    # ------------------------------- Lifecycle -------------------------------

    def create(self, name: str | None = None) -> str:
        """Allocate an empty flow, make it active, persist, return its id."""
        label = (name or "").strip() or f"New Flow {len(self.flows) + 1}"
        flow = Flow(name=label)
        while flow.id in self.flows:
            flow = Flow(name=label)
        self.flows[flow.id] = flow
        self.active_flow_id = flow.id
        self.active_artifact_id = None
        self.persist()
        logger.info("Created flow %s (%s)", flow.id, label)
        return flow.id

    def rename(self, flow_id: str, name: str) -> bool:
        """Rename a flow; an empty name after trimming is a no-op."""
        flow = self.get(flow_id)
        cleaned = name.strip()
        if not cleaned:
            return False
        flow.name = cleaned
        self.persist()
        return True

    def delete(self, flow_id: str) -> None:
        """Remove a flow; refuses with :class:`LastFlowError` for the final one."""
        self.get(flow_id)
        if len(self.flows) <= 1:
            raise LastFlowError(flow_id)
        del self.flows[flow_id]
        if self.active_flow_id == flow_id:
            self.active_flow_id = next(iter(self.flows))
            self.active_artifact_id = None
        self.persist()
        logger.info("Deleted flow %s; active=%s", flow_id, self.active_flow_id)

    def switch_active(self, flow_id: str) -> bool:
        """Point at another flow. Returns False when it is already active."""
        self.get(flow_id)
        if flow_id == self.active_flow_id:
            return False
        self.active_flow_id = flow_id
        self.persist()
        return True

    # ------------------------------- Mutation --------------------------------

    def replace_flow(self, flow: Flow) -> None:
        """Install ``flow`` under its own id (used by undo/redo)."""
        self.flows[flow.id] = flow

    def append_message(self, flow_id: str, message: Message) -> None:
        self.get(flow_id).history.append(message)
        self.persist()


__all__ = ["FlowStore"]
