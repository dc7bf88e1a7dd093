"""Tests for the UndoEngine stacks."""

from __future__ import annotations

from fluidflow.core.contracts import Artifact, Message
from fluidflow.core.flow_store import FlowStore
from fluidflow.core.persistence import InMemoryKeyValueStore
from fluidflow.core.undo import UndoEngine


def _engine() -> tuple[FlowStore, UndoEngine]:
    store = FlowStore(InMemoryKeyValueStore())
    store.load()
    return store, UndoEngine(store)


def _dump(store: FlowStore) -> str:
    return store.active_flow.model_dump_json()


def test_undo_redo_on_empty_stacks_is_noop() -> None:
    store, engine = _engine()
    before = _dump(store)
    assert engine.undo() is None
    assert engine.redo() is None
    assert _dump(store) == before


def test_undo_then_redo_restores_exact_state() -> None:
    store, engine = _engine()
    engine.checkpoint()
    store.active_flow.history.append(Message(role="model", text="one"))
    engine.checkpoint()
    store.active_flow.artifacts.append(Artifact(id="artifact-1", title="A", type="plan", content="p"))

    before_undo = _dump(store)
    engine.undo()
    after_undo = _dump(store)
    assert after_undo != before_undo
    assert store.active_flow.artifacts == []

    engine.redo()
    assert _dump(store) == before_undo

    # And the other way round: redo then undo.
    engine.undo()
    assert _dump(store) == after_undo


def test_checkpoint_clears_redo() -> None:
    store, engine = _engine()
    engine.checkpoint()
    store.active_flow.history.append(Message(role="user", text="x"))
    engine.undo()
    assert engine.redo_depth == 1

    engine.checkpoint()
    assert engine.redo_depth == 0
    assert engine.can_redo is False


def test_stack_entries_do_not_alias_live_flow() -> None:
    store, engine = _engine()
    store.active_flow.artifacts.append(Artifact(id="artifact-1", title="A", type="code", content="v1"))
    engine.checkpoint()

    store.active_flow.artifacts[0].content = "v2"
    store.active_flow.history.append(Message(role="model", text="changed"))

    engine.undo()
    assert store.active_flow.artifacts[0].content == "v1"
    assert store.active_flow.history == []


def test_undo_stack_grows_without_bound() -> None:
    """Documents current behaviour: N checkpoints keep N entries."""
    _, engine = _engine()
    for _ in range(250):
        engine.checkpoint()
    assert engine.undo_depth == 250


def test_reset_clears_both_stacks() -> None:
    _, engine = _engine()
    engine.checkpoint()
    engine.checkpoint()
    engine.undo()
    engine.reset()
    assert (engine.undo_depth, engine.redo_depth) == (0, 0)
