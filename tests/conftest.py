"""Shared fixtures: an in-memory store and a scripted model gateway.

The scripted gateway never touches the network. Each ``send`` pops the next
queued item: a :class:`GatewayReply` is returned, an exception is raised.
Setting ``gateway.block`` to an :class:`asyncio.Event` makes ``send`` wait on
it, which lets tests hold a request in flight.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

import pytest

from fluidflow.core.contracts import Message, ToolCall
from fluidflow.core.controller import ConversationController
from fluidflow.core.events import EventRecorder
from fluidflow.core.persistence import InMemoryKeyValueStore
from fluidflow.llm.gateway import GatewayReply


class ScriptedSession:
    def __init__(self, gateway: ScriptedGateway) -> None:
        self.gateway = gateway

    async def send(self, user_text: str) -> GatewayReply:
        self.gateway.sent.append(user_text)
        if self.gateway.block is not None:
            await self.gateway.block.wait()
        if not self.gateway.replies:
            return GatewayReply()
        item = self.gateway.replies.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class ScriptedGateway:
    def __init__(self, replies: Sequence[GatewayReply | BaseException] = ()) -> None:
        self.replies: list[GatewayReply | BaseException] = list(replies)
        self.sent: list[str] = []
        self.histories: list[list[Message]] = []
        self.block: asyncio.Event | None = None

    def queue(self, text: str | None = None, *calls: ToolCall) -> None:
        self.replies.append(GatewayReply(text=text, calls=list(calls)))

    def create_session(
        self,
        system_instruction: str,
        tool_schemas: Sequence[Mapping[str, Any]],
        initial_history: Sequence[Message],
    ) -> ScriptedSession:
        self.histories.append(list(initial_history))
        return ScriptedSession(self)


def present(title: str = "Plan", type_: str = "plan", content: str = "step 1") -> ToolCall:
    return ToolCall(name="present_artifact", arguments={"title": title, "type": type_, "content": content})


def modify(artifact_id: str, content: str) -> ToolCall:
    return ToolCall(name="modify_artifact", arguments={"artifactId": artifact_id, "newContent": content})


@pytest.fixture  # type: ignore[misc]
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture  # type: ignore[misc]
def gateway() -> ScriptedGateway:
    return ScriptedGateway()


@pytest.fixture  # type: ignore[misc]
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture  # type: ignore[misc]
def controller(
    backend: InMemoryKeyValueStore, gateway: ScriptedGateway, recorder: EventRecorder
) -> ConversationController:
    """A started controller on a fresh in-memory store."""
    ctl = ConversationController(backend, gateway)
    ctl.events.subscribe(recorder)
    ctl.start()
    return ctl
