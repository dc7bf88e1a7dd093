"""Pydantic data contracts shared by the stores, dispatcher and surfaces."""

from __future__ import annotations

from .artifact import ARTIFACT_TYPES, Artifact
from .flow import DEFAULT_FLOW_NAME, Flow, FlowMap, Snapshot, new_flow_id
from .message import Message, Role, TaskItem, TaskList, model_message, user_message
from .tools import (
    CreateTaskList,
    MalformedToolCall,
    ModifyArtifact,
    PresentArtifact,
    ToolCall,
    ToolOperation,
    UnknownTool,
    parse_tool_call,
)

__all__ = [
    "ARTIFACT_TYPES",
    "Artifact",
    "DEFAULT_FLOW_NAME",
    "Flow",
    "FlowMap",
    "Snapshot",
    "new_flow_id",
    "Message",
    "Role",
    "TaskItem",
    "TaskList",
    "model_message",
    "user_message",
    "ToolCall",
    "ToolOperation",
    "PresentArtifact",
    "ModifyArtifact",
    "CreateTaskList",
    "UnknownTool",
    "MalformedToolCall",
    "parse_tool_call",
]
