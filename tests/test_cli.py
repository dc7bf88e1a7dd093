# tests/test_cli.py
"""
Tests for the fluidflow command-line interface (CLI).

Scope
-----
These tests verify the interaction layer provided by Typer:
1.  **Command Registration**: `--help` lists the flow commands.
2.  **Flow Management**: `flows`, `new`, `rename`, `delete`, `switch` against
    a shared in-memory store, so state persists between invocations the way
    the JSON file does in real use.
3.  **Chat REPL**: plain lines go through the controller; slash commands
    drive undo and artifact display.
4.  **Error Handling**: exit code 1 for refused or unknown targets.

`_build_controller` is patched to return a controller over the scripted
gateway, so no Gemini call is ever made.
"""

from __future__ import annotations

from typing import Any

import pytest
from conftest import ScriptedGateway, present
from typer.testing import CliRunner

from fluidflow.cli import app
from fluidflow.core.controller import ConversationController
from fluidflow.core.persistence import InMemoryKeyValueStore


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """A fresh CliRunner per test keeps Click state isolated."""
    return CliRunner()


@pytest.fixture(autouse=True)  # type: ignore[misc]
def patched_controller(
    monkeypatch: Any, backend: InMemoryKeyValueStore, gateway: ScriptedGateway
) -> None:
    """Every command builds its controller over the same store and gateway."""
    monkeypatch.setattr(
        "fluidflow.cli._build_controller", lambda: ConversationController(backend, gateway)
    )


def _reload(backend: InMemoryKeyValueStore) -> ConversationController:
    controller = ConversationController(backend, ScriptedGateway())
    controller.start()
    return controller


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    for command in ("chat", "flows", "new", "rename", "delete", "switch", "show"):
        assert command in result.output


def test_flows_lists_default_flow(runner: CliRunner) -> None:
    result = runner.invoke(app, ["flows"])
    assert result.exit_code == 0, result.output
    assert "My First Flow" in result.output


def test_new_flow_persists_between_invocations(
    runner: CliRunner, backend: InMemoryKeyValueStore
) -> None:
    result = runner.invoke(app, ["new", "Payments"])
    assert result.exit_code == 0, result.output
    assert "Created" in result.output

    listing = runner.invoke(app, ["flows"])
    assert "Payments" in listing.output
    assert "My First Flow" in listing.output
    assert _reload(backend).active_flow.name == "Payments"


def test_rename_and_switch(runner: CliRunner, backend: InMemoryKeyValueStore) -> None:
    runner.invoke(app, ["new", "Two"])
    first_id = _reload(backend).store.flow_ids()[0]

    renamed = runner.invoke(app, ["rename", first_id, "Renamed"])
    assert renamed.exit_code == 0, renamed.output
    switched = runner.invoke(app, ["switch", first_id])
    assert switched.exit_code == 0, switched.output

    reloaded = _reload(backend)
    assert reloaded.active_flow.id == first_id
    assert reloaded.active_flow.name == "Renamed"


def test_delete_last_flow_exits_with_error(
    runner: CliRunner, backend: InMemoryKeyValueStore
) -> None:
    only = _reload(backend).store.flow_ids()[0]
    result = runner.invoke(app, ["delete", only])
    assert result.exit_code == 1
    assert "Cannot delete the last flow" in result.output
    assert _reload(backend).store.flow_ids() == [only]


def test_unknown_flow_exits_with_error(runner: CliRunner) -> None:
    for args in (["switch", "flow-ghost"], ["rename", "flow-ghost", "x"], ["delete", "flow-ghost"]):
        result = runner.invoke(app, args)
        assert result.exit_code == 1, f"{args}: {result.output}"
        assert "not found" in result.output


def test_chat_repl_sends_and_undoes(
    runner: CliRunner, backend: InMemoryKeyValueStore, gateway: ScriptedGateway
) -> None:
    gateway.queue("Here you go.", present("Launch plan", "plan", "1. launch"))

    result = runner.invoke(app, ["chat"], input="design a launch\n/artifacts\n/undo\n/quit\n")

    assert result.exit_code == 0, result.output
    assert "Here you go." in result.output
    assert "Launch plan" in result.output
    assert gateway.sent == ["design a launch"]

    flow = _reload(backend).active_flow
    assert [m.text for m in flow.history] == ["design a launch", "Here you go."]
    assert flow.artifacts == []


def test_chat_ends_on_eof(runner: CliRunner) -> None:
    result = runner.invoke(app, ["chat"], input="")
    assert result.exit_code == 0, result.output


def test_show_unknown_artifact_exits_with_error(runner: CliRunner) -> None:
    result = runner.invoke(app, ["show", "--artifact", "artifact-ghost"])
    assert result.exit_code == 1
    assert "not found" in result.output
