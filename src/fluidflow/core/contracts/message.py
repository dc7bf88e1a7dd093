"""
Message and task-list contracts.

A :class:`Message` is one chronological entry in a flow's history. Messages
are append-only; their order is the conversation order replayed into the
model gateway when a session is rebuilt.

Task lists produced by the ``create_task_list`` tool ride along on a model
message as an *attachment*. The attachment is excluded from serialization,
so it is visible to subscribers for the lifetime of the process and is gone
after a reload.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

Role = Literal["user", "model"]


class TaskItem(BaseModel):
    """One row of a task list. ``priority`` is expected to be High/Medium/Low."""

    title: str
    priority: str = Field(description="Required; not validated against a fixed set.")


class TaskList(BaseModel):
    """Ephemeral, rendered-only list of tasks."""

    tasks: list[TaskItem] = Field(default_factory=list)


class Message(BaseModel):
    """A single user or model turn."""

    role: Role
    text: str
    attachment: TaskList | None = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _accept_parts(cls, data: Any) -> Any:
        """Accept the older ``{"role", "parts": [{"text"}]}`` layout."""
        if isinstance(data, dict) and "text" not in data and "parts" in data:
            parts = data.get("parts") or []
            text = "".join(
                str(p.get("text", "")) for p in parts if isinstance(p, dict)
            )
            data = {k: v for k, v in data.items() if k != "parts"}
            data["text"] = text
        return data


def user_message(text: str) -> Message:
    return Message(role="user", text=text)


def model_message(text: str, attachment: TaskList | None = None) -> Message:
    return Message(role="model", text=text, attachment=attachment)


__all__ = ["Role", "Message", "TaskItem", "TaskList", "user_message", "model_message"]
