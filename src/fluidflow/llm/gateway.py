"""
Model gateway protocol and the Gemini adapter.

Contract
--------
- ``Gateway.create_session(system_instruction, tool_schemas, initial_history)``
  returns a :class:`ChatSession` primed with a flow's stored messages.
- ``await ChatSession.send(user_text)`` returns a :class:`GatewayReply` with
  optional free text and zero or more :class:`~fluidflow.core.contracts.ToolCall`.
- Any failure surfaces as :class:`~fluidflow.core.errors.GatewayError`.

The gateway keeps no state across process restarts. Continuity comes entirely
from the persisted messages handed to ``create_session``.

Gemini specifics
----------------
History maps onto ``contents`` entries (``role`` user/model, one text part).
When a reply carried ``functionCall`` parts, the next user turn starts with the
matching ``functionResponse`` parts, which the API requires before new text.
The blocking HTTP call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from fluidflow.core.contracts import Message, ToolCall
from fluidflow.core.errors import GatewayError

from .client import GeminiClient


@dataclass(slots=True)
class GatewayReply:
    """Free text and tool calls produced for one user turn."""

    text: str | None = None
    calls: list[ToolCall] = field(default_factory=list)


class ChatSession(Protocol):
    async def send(self, user_text: str) -> GatewayReply: ...


class Gateway(Protocol):
    def create_session(
        self,
        system_instruction: str,
        tool_schemas: Sequence[Mapping[str, Any]],
        initial_history: Sequence[Message],
    ) -> ChatSession: ...


# --------------------------------------------------------------------------- #
# Response extraction
# --------------------------------------------------------------------------- #


def parse_gemini_reply(response: Mapping[str, Any]) -> tuple[GatewayReply, dict[str, Any]]:
    """Split a ``generateContent`` body into a reply and the raw model content.

    Raises
    ------
    GatewayError
        If the response carries no candidate content at all.
    """
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise GatewayError("Gemini response has no candidates; cannot extract content.")

    content = candidates[0].get("content")
    if not isinstance(content, Mapping):
        raise GatewayError("Gemini response candidates[0].content is missing or invalid.")

    parts = content.get("parts") or []
    texts: list[str] = []
    calls: list[ToolCall] = []
    for part in parts:
        if not isinstance(part, Mapping):
            continue
        if isinstance(part.get("text"), str):
            texts.append(part["text"])
        fc = part.get("functionCall")
        if isinstance(fc, Mapping) and isinstance(fc.get("name"), str):
            args = fc.get("args")
            calls.append(ToolCall(name=fc["name"], arguments=dict(args) if isinstance(args, Mapping) else {}))

    text = "".join(texts) or None
    raw_content = {"role": "model", "parts": [dict(p) for p in parts if isinstance(p, Mapping)]}
    return GatewayReply(text=text, calls=calls), raw_content


def _to_content(message: Message) -> dict[str, Any]:
    return {"role": message.role, "parts": [{"text": message.text}]}


# --------------------------------------------------------------------------- #
# Gemini adapter
# --------------------------------------------------------------------------- #


class GeminiChatSession:
    """Multi-turn chat over the stateless ``generateContent`` endpoint."""

    def __init__(
        self,
        client: GeminiClient,
        system_instruction: str,
        tool_schemas: Sequence[Mapping[str, Any]],
        initial_history: Sequence[Message],
    ) -> None:
        self._client = client
        self._system_instruction = system_instruction
        self._tools = [dict(t) for t in tool_schemas]
        self.contents: list[dict[str, Any]] = [_to_content(m) for m in initial_history]
        self._pending_calls: list[ToolCall] = []

    def _user_turn(self, user_text: str) -> dict[str, Any]:
        parts: list[dict[str, Any]] = [
            {"functionResponse": {"name": call.name, "response": {"status": "ok"}}}
            for call in self._pending_calls
        ]
        parts.append({"text": user_text})
        return {"role": "user", "parts": parts}

    async def send(self, user_text: str) -> GatewayReply:
        turn = self._user_turn(user_text)
        response = await asyncio.to_thread(
            self._client.generate_content,
            [*self.contents, turn],
            system_instruction=self._system_instruction,
            tools=self._tools,
        )
        reply, model_content = parse_gemini_reply(response)

        # Only a successful round trip becomes part of the session transcript.
        self.contents.extend([turn, model_content])
        self._pending_calls = list(reply.calls)
        return reply


class GeminiGateway:
    """Creates :class:`GeminiChatSession` objects sharing one client."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    @classmethod
    def from_env(cls, model_alias: str, timeout_seconds: float = 120.0) -> GeminiGateway:
        return cls(GeminiClient.from_env(model_alias=model_alias, timeout_seconds=timeout_seconds))

    def create_session(
        self,
        system_instruction: str,
        tool_schemas: Sequence[Mapping[str, Any]],
        initial_history: Sequence[Message],
    ) -> GeminiChatSession:
        return GeminiChatSession(self.client, system_instruction, tool_schemas, initial_history)


__all__ = [
    "Gateway",
    "ChatSession",
    "GatewayReply",
    "GeminiGateway",
    "GeminiChatSession",
    "parse_gemini_reply",
]
