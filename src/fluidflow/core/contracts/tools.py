"""
Tool-call contracts: raw calls from the gateway and the parsed operations.

The gateway hands back :class:`ToolCall` values (a name plus an argument
mapping). :func:`parse_tool_call` turns each one into a member of the closed
union :data:`ToolOperation`:

- :class:`PresentArtifact`   - ``present_artifact(title, type, content, language?)``
- :class:`ModifyArtifact`    - ``modify_artifact(artifactId, newContent)``
- :class:`CreateTaskList`    - ``create_task_list(tasks)``
- :class:`UnknownTool`       - any other name
- :class:`MalformedToolCall` - a known name whose required arguments are missing

Only the presence and basic shape of arguments are checked. Values such as an
artifact ``type`` or a task ``priority`` are passed through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .message import TaskItem

PRESENT_ARTIFACT: Final = "present_artifact"
MODIFY_ARTIFACT: Final = "modify_artifact"
CREATE_TASK_LIST: Final = "create_task_list"


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A structured instruction returned by the model gateway."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


class _Args(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PresentArtifact(_Args):
    title: str
    type: str
    content: str
    language: str | None = None


class ModifyArtifact(_Args):
    artifact_id: str = Field(alias="artifactId")
    new_content: str = Field(alias="newContent")


class CreateTaskList(_Args):
    tasks: list[TaskItem]


@dataclass(frozen=True, slots=True)
class UnknownTool:
    name: str
    arguments: dict[str, Any]


@dataclass(frozen=True, slots=True)
class MalformedToolCall:
    name: str
    problems: tuple[str, ...]


ToolOperation = PresentArtifact | ModifyArtifact | CreateTaskList | UnknownTool | MalformedToolCall

_ARGUMENT_MODELS: Final[dict[str, type[_Args]]] = {
    PRESENT_ARTIFACT: PresentArtifact,
    MODIFY_ARTIFACT: ModifyArtifact,
    CREATE_TASK_LIST: CreateTaskList,
}


def parse_tool_call(call: ToolCall) -> ToolOperation:
    """Map a raw call onto the operation union. Never raises."""
    model = _ARGUMENT_MODELS.get(call.name)
    if model is None:
        return UnknownTool(name=call.name, arguments=dict(call.arguments or {}))
    try:
        return model.model_validate(call.arguments or {})
    except ValidationError as exc:
        problems = tuple(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return MalformedToolCall(name=call.name, problems=problems)


__all__ = [
    "ToolCall",
    "ToolOperation",
    "PresentArtifact",
    "ModifyArtifact",
    "CreateTaskList",
    "UnknownTool",
    "MalformedToolCall",
    "parse_tool_call",
    "PRESENT_ARTIFACT",
    "MODIFY_ARTIFACT",
    "CREATE_TASK_LIST",
]
