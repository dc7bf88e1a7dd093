"""Tests for the pydantic contracts and tool-call parsing."""

from __future__ import annotations

from fluidflow.core.contracts import (
    Artifact,
    CreateTaskList,
    Flow,
    FlowMap,
    MalformedToolCall,
    Message,
    ModifyArtifact,
    PresentArtifact,
    TaskItem,
    TaskList,
    ToolCall,
    UnknownTool,
    parse_tool_call,
)


def test_message_accepts_legacy_parts_layout() -> None:
    """Stored messages in the `{role, parts: [{text}]}` shape still load."""
    msg = Message.model_validate({"role": "model", "parts": [{"text": "Hello "}, {"text": "there"}]})
    assert msg.role == "model"
    assert msg.text == "Hello there"


def test_task_list_attachment_is_not_serialized() -> None:
    """Task lists are ephemeral: they vanish from the persisted form."""
    attachment = TaskList(tasks=[TaskItem(title="Write tests", priority="High")])
    msg = Message(role="model", text="tasks", attachment=attachment)
    dumped = msg.model_dump()
    assert "attachment" not in dumped

    reloaded = Message.model_validate_json(msg.model_dump_json())
    assert reloaded.attachment is None
    assert reloaded.text == "tasks"


def test_artifact_type_alias_and_passthrough() -> None:
    mermaid = Artifact(id="a1", title="Flow", type="mermaid", content="graph TD;")
    assert mermaid.type == "diagram"
    assert mermaid.display_language == "mermaid"

    odd = Artifact(id="a2", title="Sheet", type="spreadsheet", content="x")
    assert odd.type == "spreadsheet"

    code = Artifact(id="a3", title="Script", type="code", content="print()", language="python")
    assert code.display_language == "python"


def test_flow_map_round_trip_preserves_order() -> None:
    flows = {
        "f2": Flow(id="f2", name="second"),
        "f1": Flow(id="f1", name="first"),
    }
    flows["f2"].history.append(Message(role="user", text="a"))
    flows["f2"].history.append(Message(role="model", text="b"))

    restored = FlowMap.validate_json(FlowMap.dump_json(flows))
    assert list(restored) == ["f2", "f1"]
    assert [m.text for m in restored["f2"].history] == ["a", "b"]


def test_parse_known_tools() -> None:
    op = parse_tool_call(
        ToolCall("present_artifact", {"title": "T", "type": "code", "content": "x", "language": "go"})
    )
    assert isinstance(op, PresentArtifact)
    assert op.language == "go"

    op2 = parse_tool_call(ToolCall("modify_artifact", {"artifactId": "a1", "newContent": "y"}))
    assert isinstance(op2, ModifyArtifact)
    assert (op2.artifact_id, op2.new_content) == ("a1", "y")

    op3 = parse_tool_call(
        ToolCall("create_task_list", {"tasks": [{"title": "Ship", "priority": "Urgent"}]})
    )
    assert isinstance(op3, CreateTaskList)
    # Priority is not validated against High/Medium/Low.
    assert op3.tasks[0].priority == "Urgent"


def test_parse_unknown_and_malformed() -> None:
    unknown = parse_tool_call(ToolCall("launch_rocket", {"when": "now"}))
    assert isinstance(unknown, UnknownTool)
    assert unknown.name == "launch_rocket"

    malformed = parse_tool_call(ToolCall("modify_artifact", {"artifactId": "a1"}))
    assert isinstance(malformed, MalformedToolCall)
    assert any("newContent" in p for p in malformed.problems)

    not_a_list = parse_tool_call(ToolCall("create_task_list", {"tasks": "buy milk"}))
    assert isinstance(not_a_list, MalformedToolCall)


def test_task_without_priority_is_malformed() -> None:
    op = parse_tool_call(ToolCall("create_task_list", {"tasks": [{"title": "Ship"}]}))
    assert isinstance(op, MalformedToolCall)
    assert any(p.startswith("tasks.0.priority") for p in op.problems)
