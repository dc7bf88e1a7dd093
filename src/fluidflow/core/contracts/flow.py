"""
Flow and Snapshot contracts.

A :class:`Flow` is an independent conversation thread: its message history,
its artifacts and a list of named snapshots. It is also the unit of undo/redo
granularity, which is why every field here must survive a deep copy and a
JSON round trip without changing order.

Snapshots
---------
:class:`Snapshot` is a point-in-time capture that is stored and reloaded with
its flow. Nothing in the engine creates or restores one; the type exists so
persisted data carrying snapshots loads and saves unchanged.
"""

from __future__ import annotations

import time
import uuid

from pydantic import BaseModel, Field, TypeAdapter, model_validator

from .artifact import Artifact
from .message import Message

DEFAULT_FLOW_NAME = "My First Flow"


def new_flow_id() -> str:
    """Return a fresh flow identifier."""
    return f"flow-{uuid.uuid4().hex[:12]}"


class Snapshot(BaseModel):
    """Named capture of a flow's history and artifacts."""

    id: str
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000), description="ms epoch")
    message_count: int = Field(default=0, ge=0)
    history: list[Message] = Field(default_factory=list)
    artifacts: list[Artifact] = Field(default_factory=list)


class Flow(BaseModel):
    """A conversation thread with its own history and artifacts."""

    id: str = Field(default_factory=new_flow_id)
    name: str = DEFAULT_FLOW_NAME
    history: list[Message] = Field(default_factory=list)
    snapshots: list[Snapshot] = Field(default_factory=list)
    artifacts: list[Artifact] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_artifact_ids(self) -> Flow:
        ids = self.artifact_ids()
        if len(set(ids)) != len(ids):
            raise ValueError(f"flow {self.id!r} repeats an artifact id")
        return self

    def artifact_ids(self) -> list[str]:
        return [a.id for a in self.artifacts]


#: Serializer for the persisted ``flows`` key (insertion order preserved).
FlowMap = TypeAdapter(dict[str, Flow])


__all__ = ["Flow", "Snapshot", "FlowMap", "DEFAULT_FLOW_NAME", "new_flow_id"]
