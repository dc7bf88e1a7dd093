"""
ArtifactRegistry: per-flow ordered artifacts and active-artifact selection.

Artifacts are appended, looked up and overwritten in place; they are never
reordered or removed individually. The single active-artifact pointer lives on
the :class:`~fluidflow.core.flow_store.FlowStore` and is re-resolved with one
rule whenever the sequence or the pointer changes:

    keep the pointer if it names an artifact of the flow, otherwise fall back
    to the last artifact, or to ``None`` for an empty sequence.
"""

from __future__ import annotations

import uuid

from fluidflow.core.contracts import Artifact
from fluidflow.core.errors import ToolLookupError
from fluidflow.core.flow_store import FlowStore


class ArtifactRegistry:
    """Artifact operations scoped to one flow at a time."""

    def __init__(self, store: FlowStore) -> None:
        self._store = store

    def new_id(self, flow_id: str) -> str:
        """Return an artifact id not yet used in ``flow_id``."""
        taken = set(self._store.get(flow_id).artifact_ids())
        while True:
            candidate = f"artifact-{uuid.uuid4().hex[:12]}"
            if candidate not in taken:
                return candidate

    def artifacts(self, flow_id: str) -> list[Artifact]:
        return list(self._store.get(flow_id).artifacts)

    def append(self, flow_id: str, artifact: Artifact) -> Artifact:
        """Add ``artifact`` at the end and make it active."""
        flow = self._store.get(flow_id)
        if artifact.id in flow.artifact_ids():
            artifact = artifact.model_copy(update={"id": self.new_id(flow_id)})
        flow.artifacts.append(artifact)
        self._store.active_artifact_id = artifact.id
        return artifact

    def find_by_id(self, flow_id: str, artifact_id: str) -> Artifact | None:
        for artifact in self._store.get(flow_id).artifacts:
            if artifact.id == artifact_id:
                return artifact
        return None

    def update_content(self, flow_id: str, artifact_id: str, content: str) -> Artifact:
        """Overwrite content in place; :class:`ToolLookupError` if absent."""
        artifact = self.find_by_id(flow_id, artifact_id)
        if artifact is None:
            raise ToolLookupError(artifact_id, flow_id)
        artifact.content = content
        return artifact

    def select(self, flow_id: str, artifact_id: str) -> Artifact:
        """Make an existing artifact the active one."""
        artifact = self.find_by_id(flow_id, artifact_id)
        if artifact is None:
            raise ToolLookupError(artifact_id, flow_id)
        self._store.active_artifact_id = artifact.id
        return artifact

    def resolve_active(self, flow_id: str) -> str | None:
        """Apply the fallback rule and store the result on the pointer."""
        artifacts = self._store.get(flow_id).artifacts
        current = self._store.active_artifact_id
        if current is None or all(a.id != current for a in artifacts):
            current = artifacts[-1].id if artifacts else None
        self._store.active_artifact_id = current
        return current

    def active(self, flow_id: str) -> Artifact | None:
        current = self.resolve_active(flow_id)
        return self.find_by_id(flow_id, current) if current else None


__all__ = ["ArtifactRegistry"]
