"""End-to-end tests for ConversationController with a scripted gateway.

The controller is driven exactly like the CLI and API drive it: `submit()`
for conversation turns and plain method calls for flow management, undo/redo
and manual artifact edits. Async paths run under `asyncio.run`.
"""

from __future__ import annotations

import asyncio

import pytest
from conftest import ScriptedGateway, present

from fluidflow.core.contracts import Artifact
from fluidflow.core.controller import GATEWAY_FAILURE_TEXT, ConversationController
from fluidflow.core.errors import FlowNotFoundError, GatewayError, ToolLookupError
from fluidflow.core.events import EventRecorder, EventType
from fluidflow.core.persistence import InMemoryKeyValueStore
from fluidflow.llm.prompts import WELCOME_TEXT


def test_start_emits_welcome_for_empty_flow(
    controller: ConversationController, recorder: EventRecorder, gateway: ScriptedGateway
) -> None:
    rebuilt = recorder.of_type(EventType.SESSION_REBUILT)
    assert rebuilt[-1].detail == WELCOME_TEXT
    assert gateway.histories == [[]]
    assert controller.session is not None


def test_submit_with_present_artifact(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    """The canonical turn: one user message, one reply, one new active artifact."""
    gateway.queue("Here is a first draft.", present("X design", "document", "# X"))

    outcome = asyncio.run(controller.submit("design X"))

    assert outcome.accepted and not outcome.failed
    flow = controller.active_flow
    assert [(m.role, m.text) for m in flow.history] == [
        ("user", "design X"),
        ("model", "Here is a first draft."),
    ]
    assert len(flow.artifacts) == 1
    assert controller.store.active_artifact_id == flow.artifacts[0].id
    assert controller.is_loading is False
    assert gateway.sent == ["design X"]


def test_empty_submission_is_ignored(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    outcome = asyncio.run(controller.submit("   "))
    assert outcome.accepted is False
    assert outcome.reason == "empty"
    assert controller.active_flow.history == []
    assert gateway.sent == []


def test_gateway_failure_appends_apology(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    gateway.replies.append(GatewayError("boom"))

    outcome = asyncio.run(controller.submit("hello"))

    assert outcome.failed is True
    assert [(m.role, m.text) for m in controller.active_flow.history] == [
        ("user", "hello"),
        ("model", GATEWAY_FAILURE_TEXT),
    ]
    assert controller.is_loading is False


def test_gateway_timeout_is_a_failure(backend: InMemoryKeyValueStore) -> None:
    gateway = ScriptedGateway()
    ctl = ConversationController(backend, gateway, gateway_timeout=0.01)
    ctl.start()

    async def scenario() -> None:
        gateway.block = asyncio.Event()  # never set
        outcome = await ctl.submit("are you there?")
        assert outcome.failed is True

    asyncio.run(scenario())
    assert ctl.active_flow.history[-1].text == GATEWAY_FAILURE_TEXT
    assert ctl.is_loading is False


def test_second_submission_while_loading_is_rejected(
    controller: ConversationController,
    gateway: ScriptedGateway,
    recorder: EventRecorder,
    backend: InMemoryKeyValueStore,
) -> None:
    flow_id = controller.active_flow.id
    one = controller.registry.append(
        flow_id, Artifact(id="artifact-1", title="One", type="plan", content="1")
    )
    two = controller.registry.append(
        flow_id, Artifact(id="artifact-2", title="Two", type="plan", content="2")
    )
    gateway.queue("first reply")

    async def scenario() -> None:
        gateway.block = asyncio.Event()
        first = asyncio.create_task(controller.submit("one"))
        while not controller.is_loading:
            await asyncio.sleep(0)

        second = await controller.submit("two")
        assert second.accepted is False
        assert second.reason == "busy"
        # Flow and artifact changes are refused too.
        assert controller.create_flow("sneaky") is None
        assert controller.undo() is False
        writes = backend.writes
        assert controller.select_artifact(one.id) is None
        assert controller.store.active_artifact_id == two.id
        assert backend.writes == writes

        gateway.block.set()
        outcome = await first
        assert outcome.accepted is True

    asyncio.run(scenario())
    assert [m.text for m in controller.active_flow.history] == ["one", "first reply"]
    assert gateway.sent == ["one"]
    assert len(controller.store) == 1
    assert recorder.of_type(EventType.NOTICE)


def test_undo_reverts_tool_effect_but_not_user_text(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    gateway.queue("done", present("Plan"))
    asyncio.run(controller.submit("make a plan"))
    assert len(controller.active_flow.artifacts) == 1

    assert controller.undo() is True
    assert controller.active_flow.artifacts == []
    assert [m.text for m in controller.active_flow.history] == ["make a plan", "done"]
    # User submissions are not checkpointed; nothing left to undo.
    assert controller.undo() is False

    assert controller.redo() is True
    assert len(controller.active_flow.artifacts) == 1
    assert controller.store.active_artifact_id == controller.active_flow.artifacts[0].id


def test_undo_soft_refresh_rebuilds_session_with_restored_history(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    gateway.queue("ok", present("A"))
    asyncio.run(controller.submit("go"))
    controller.undo()

    assert [m.text for m in gateway.histories[-1]] == ["go", "ok"]
    # Soft refresh keeps the redo entry.
    assert controller.undo_engine.can_redo


def test_create_and_switch_flow_resets_undo(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    first = controller.active_flow.id
    gateway.queue("hi", present("Doc"))
    asyncio.run(controller.submit("hello"))
    assert controller.undo_engine.can_undo

    second = controller.create_flow("Second")
    assert second is not None
    assert controller.active_flow.id == second
    assert controller.active_flow.name == "Second"
    assert controller.undo_engine.undo_depth == 0
    assert controller.store.active_artifact_id is None

    assert controller.switch_flow(first) is True
    assert controller.undo_engine.undo_depth == 0
    assert [m.text for m in gateway.histories[-1]] == ["hello", "hi"]
    # The artifact pointer falls back to the flow's last artifact.
    assert controller.store.active_artifact_id == controller.active_flow.artifacts[-1].id

    assert controller.switch_flow(first) is False
    with pytest.raises(FlowNotFoundError):
        controller.switch_flow("flow-ghost")


def test_rename_flow_is_undoable(controller: ConversationController) -> None:
    fid = controller.active_flow.id
    assert controller.rename_flow(fid, "  ") is False
    assert controller.undo_engine.undo_depth == 0

    assert controller.rename_flow(fid, "Launch") is True
    assert controller.active_flow.name == "Launch"
    controller.undo()
    assert controller.active_flow.name != "Launch"


def test_delete_last_flow_is_refused_with_notice(
    controller: ConversationController, recorder: EventRecorder
) -> None:
    only = controller.active_flow.id
    assert controller.delete_flow(only) is False
    assert controller.store.flow_ids() == [only]
    assert recorder.of_type(EventType.NOTICE)[-1].detail == "Cannot delete the last flow."


def test_delete_active_flow_moves_to_first(controller: ConversationController) -> None:
    first = controller.active_flow.id
    second = controller.create_flow()
    assert second is not None
    assert controller.delete_flow(second) is True
    assert controller.active_flow.id == first
    assert second not in controller.store


def test_edit_artifact_strips_and_rerenders(
    controller: ConversationController, gateway: ScriptedGateway, recorder: EventRecorder
) -> None:
    gateway.queue(None, present("Code", "code", "x = 1"))
    asyncio.run(controller.submit("code please"))
    art = controller.active_flow.artifacts[0]

    edited = controller.edit_artifact(art.id, "  x = 2\n")
    assert edited is not None
    assert edited.content == "x = 2"
    assert recorder.of_type(EventType.ARTIFACT_RERENDER)[-1].artifact == edited

    controller.undo()
    assert controller.active_flow.artifacts[0].content == "x = 1"

    with pytest.raises(ToolLookupError):
        controller.edit_artifact("artifact-ghost", "nope")


def test_select_artifact_updates_pointer(
    controller: ConversationController, gateway: ScriptedGateway
) -> None:
    gateway.queue(None, present("One"), present("Two"))
    asyncio.run(controller.submit("two things"))
    one, two = controller.active_flow.artifacts
    assert controller.store.active_artifact_id == two.id

    controller.select_artifact(one.id)
    assert controller.active_artifact == one


def test_restart_restores_flows_and_replays_history(backend: InMemoryKeyValueStore) -> None:
    gateway = ScriptedGateway()
    gateway.queue("noted", present("Notes"))
    ctl = ConversationController(backend, gateway)
    ctl.start()
    asyncio.run(ctl.submit("remember this"))
    ctl.create_flow("Other")
    ctl.switch_flow(ctl.store.flow_ids()[0])

    fresh_gateway = ScriptedGateway()
    restarted = ConversationController(backend, fresh_gateway)
    restarted.start()

    assert restarted.store.flow_ids() == ctl.store.flow_ids()
    assert restarted.active_flow.id == ctl.active_flow.id
    assert [m.text for m in fresh_gateway.histories[0]] == ["remember this", "noted"]
    assert restarted.active_artifact is not None
    assert restarted.active_artifact.title == "Notes"
