# src/fluidflow/cli.py
"""
fluidflow Command Line Interface (CLI).

This module implements the terminal client using `typer` and `rich`. The
controller never prints anything itself: a :class:`RichRenderer` subscribes to
its event bus and draws messages, artifacts and task lists as they change.

Features
--------
- **Interactive chat**: a REPL bound to the active flow, with slash commands
  for undo/redo, flow management and artifact viewing.
- **Flow management**: list, create, rename, delete and switch flows.
- **Artifact viewer**: code and diagrams as highlighted source, documents and
  plans as Markdown.

Usage
-----
    $ fluidflow chat
    $ fluidflow flows
    $ fluidflow new "Payments redesign"
    $ fluidflow show --artifact artifact-3f9c0a1b2d4e
"""

from __future__ import annotations

import asyncio
import shlex
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from fluidflow.core.contracts import Artifact, Message, TaskList
from fluidflow.core.controller import ConversationController
from fluidflow.core.errors import FlowNotFoundError, ToolLookupError
from fluidflow.core.events import EventType, FlowEvent
from fluidflow.llm.prompts import CATALYSTS

# Ensure env vars (like GOOGLE_API_KEY) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="fluidflow: conversational flows with artifacts, task lists and undo.",
    rich_markup_mode="markdown",
)
console = Console()

_PRIORITY_STYLES = {"high": "bold red", "medium": "yellow", "low": "green"}

CHAT_HELP = """\
/undo, /redo            step through checkpoints
/new [name]             create and switch to a new flow
/flows                  list flows
/switch <flow-id>       activate another flow
/rename <flow-id> <name>
/delete <flow-id>
/artifacts              list artifacts of the active flow
/show [artifact-id]     display an artifact (default: active one)
/edit <artifact-id>     edit an artifact in $EDITOR
/catalysts              list starter prompts; /catalyst <n> sends one
/quit                   leave"""


# --------------------------------------------------------------------------- #
# Rendering
# --------------------------------------------------------------------------- #


def render_message(message: Message) -> None:
    """Print one chat message (and its task-list attachment, if any)."""
    if message.role == "user":
        console.print(Panel(Markdown(message.text), title="you", border_style="cyan"))
    else:
        console.print(Panel(Markdown(message.text), title="~flow", border_style="magenta"))
    if message.attachment is not None:
        render_task_list(message.attachment)


def render_task_list(task_list: TaskList) -> None:
    table = Table(title="Task List", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Task")
    table.add_column("Priority")
    for i, task in enumerate(task_list.tasks, start=1):
        style = _PRIORITY_STYLES.get(task.priority.lower(), "white")
        table.add_row(str(i), task.title, f"[{style}]{task.priority}[/{style}]")
    console.print(table)


def render_artifact(artifact: Artifact) -> None:
    """Show an artifact: code/diagram as source, everything else as Markdown."""
    body: Syntax | Markdown
    if artifact.type in ("code", "diagram"):
        body = Syntax(artifact.content, artifact.display_language, line_numbers=True, word_wrap=True)
    else:
        body = Markdown(artifact.content)
    console.print(
        Panel(
            body,
            title=f"{artifact.title} [dim]({artifact.type})[/dim]",
            subtitle=artifact.id,
            border_style="green",
        )
    )


class RichRenderer:
    """Event-bus subscriber that redraws the terminal on state changes."""

    def __init__(self, controller: ConversationController) -> None:
        self.controller = controller

    def __call__(self, event: FlowEvent) -> None:
        if event.type is EventType.MESSAGE_APPENDED and event.message is not None:
            # User input is already on screen in the REPL.
            if event.message.role == "model":
                render_message(event.message)
        elif event.type in (EventType.ARTIFACT_PRESENTED, EventType.ARTIFACT_RERENDER):
            if event.artifact is not None:
                render_artifact(event.artifact)
        elif event.type is EventType.SESSION_REBUILT:
            self._render_flow(event)
        elif event.type is EventType.NOTICE and event.detail:
            console.print(f"[bold yellow]⚠️ {event.detail}[/bold yellow]")

    def _render_flow(self, event: FlowEvent) -> None:
        flow = self.controller.active_flow
        console.rule(f"[bold]{flow.name}[/bold] [dim]{flow.id}[/dim]")
        if event.detail:
            console.print(Markdown(event.detail))
        for message in flow.history:
            render_message(message)
        artifact = self.controller.active_artifact
        if artifact is not None:
            render_artifact(artifact)


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _build_controller() -> ConversationController:
    """Construct the controller from settings (patched in tests)."""
    return ConversationController.from_settings()


def _started(renderer: bool = False) -> ConversationController:
    controller = _build_controller()
    if renderer:
        controller.events.subscribe(RichRenderer(controller))
    controller.start()
    return controller


def _print_flows(controller: ConversationController) -> None:
    table = Table(title="Flows")
    table.add_column("", width=1)
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Messages", justify="right")
    table.add_column("Artifacts", justify="right")
    for flow in controller.store.flows.values():
        marker = "●" if flow.id == controller.store.active_flow_id else ""
        table.add_row(marker, flow.id, flow.name, str(len(flow.history)), str(len(flow.artifacts)))
    console.print(table)


def _print_artifacts(controller: ConversationController) -> None:
    flow = controller.active_flow
    if not flow.artifacts:
        console.print("[dim]No artifacts in this flow yet.[/dim]")
        return
    active_id = controller.store.active_artifact_id
    table = Table(title=f"Artifacts of {flow.name}")
    table.add_column("", width=1)
    table.add_column("Id", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Type")
    for artifact in flow.artifacts:
        table.add_row("●" if artifact.id == active_id else "", artifact.id, artifact.title, artifact.type)
    console.print(table)


def _submit(controller: ConversationController, text: str) -> None:
    with console.status("[cyan]~flow is thinking...", spinner="dots"):
        outcome = asyncio.run(controller.submit(text))
    if not outcome.accepted and outcome.reason == "busy":
        console.print("[yellow]A request is already in flight.[/yellow]")


def _run_slash(controller: ConversationController, line: str) -> bool:
    """Execute one slash command. Returns False when the REPL should stop."""
    parts = shlex.split(line[1:]) or [""]
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("quit", "exit", "q"):
        return False
    if cmd == "help":
        console.print(CHAT_HELP)
    elif cmd == "undo":
        if not controller.undo():
            console.print("[dim]Nothing to undo.[/dim]")
    elif cmd == "redo":
        if not controller.redo():
            console.print("[dim]Nothing to redo.[/dim]")
    elif cmd == "new":
        controller.create_flow(" ".join(args) or None)
    elif cmd == "flows":
        _print_flows(controller)
    elif cmd == "switch" and args:
        if not controller.switch_flow(args[0]):
            console.print("[dim]Already active.[/dim]")
    elif cmd == "rename" and len(args) >= 2:
        controller.rename_flow(args[0], " ".join(args[1:]))
    elif cmd == "delete" and args:
        controller.delete_flow(args[0])
    elif cmd == "artifacts":
        _print_artifacts(controller)
    elif cmd == "show":
        artifact = controller.select_artifact(args[0]) if args else controller.active_artifact
        if artifact is None:
            console.print("[dim]No artifacts in this flow yet.[/dim]")
        else:
            render_artifact(artifact)
    elif cmd == "edit" and args:
        current = controller.registry.find_by_id(controller.active_flow.id, args[0])
        if current is None:
            raise ToolLookupError(args[0], controller.active_flow.id)
        edited = typer.edit(current.content)
        if edited is not None:
            controller.edit_artifact(args[0], edited)
    elif cmd == "catalysts":
        for i, name in enumerate(CATALYSTS, start=1):
            console.print(f" {i}. [bold]{name}[/bold]")
    elif cmd == "catalyst" and args and args[0].isdigit():
        names = list(CATALYSTS)
        index = int(args[0]) - 1
        if 0 <= index < len(names):
            prompt = CATALYSTS[names[index]]
            console.print(Panel(prompt, title="you", border_style="cyan"))
            _submit(controller, prompt)
    else:
        console.print(f"[yellow]Unknown command: /{cmd}[/yellow] (try /help)")
    return True


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def chat(
    flow: Annotated[
        str | None, typer.Option("--flow", "-f", help="Flow id to activate before chatting.")
    ] = None,
) -> None:
    """
    Chat with ~flow in the active flow.

    Plain lines are sent to the model; lines starting with `/` are commands
    (type `/help`).
    """
    controller = _started(renderer=True)
    if flow:
        try:
            controller.switch_flow(flow)
        except FlowNotFoundError as e:
            console.print(f"[bold red]❌ {e}[/bold red]")
            raise typer.Exit(code=1) from e

    while True:
        try:
            line = console.input("[bold cyan]you ›[/bold cyan] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        line = line.strip()
        if not line:
            continue
        if line.startswith("/"):
            try:
                if not _run_slash(controller, line):
                    break
            except (FlowNotFoundError, ToolLookupError) as e:
                console.print(f"[bold red]❌ {e}[/bold red]")
            continue
        _submit(controller, line)


@app.command()  # type: ignore[misc]
def flows() -> None:
    """List all flows; the active one is marked."""
    _print_flows(_started())


@app.command()  # type: ignore[misc]
def new(
    name: Annotated[str | None, typer.Argument(help="Name of the new flow.")] = None,
) -> None:
    """Create a flow and make it active."""
    controller = _started()
    flow_id = controller.create_flow(name)
    console.print(f"[green]✅ Created[/green] {controller.active_flow.name} [dim]{flow_id}[/dim]")


@app.command()  # type: ignore[misc]
def rename(
    flow_id: Annotated[str, typer.Argument(help="Flow id.")],
    name: Annotated[str, typer.Argument(help="New name.")],
) -> None:
    """Rename a flow. Blank names are ignored."""
    controller = _started()
    try:
        changed = controller.rename_flow(flow_id, name)
    except FlowNotFoundError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1) from e
    if not changed:
        console.print("[yellow]Name unchanged (empty name).[/yellow]")
        return
    console.print(f"[green]✅ Renamed[/green] {flow_id} → {name.strip()}")


@app.command()  # type: ignore[misc]
def delete(
    flow_id: Annotated[str, typer.Argument(help="Flow id.")],
) -> None:
    """Delete a flow. The last remaining flow cannot be deleted."""
    controller = _started()
    try:
        deleted = controller.delete_flow(flow_id)
    except FlowNotFoundError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1) from e
    if not deleted:
        console.print("[bold red]❌ Cannot delete the last flow.[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ Deleted[/green] {flow_id}; active: {controller.store.active_flow_id}")


@app.command()  # type: ignore[misc]
def switch(
    flow_id: Annotated[str, typer.Argument(help="Flow id to activate.")],
) -> None:
    """Make another flow the active one."""
    controller = _started()
    try:
        controller.switch_flow(flow_id)
    except FlowNotFoundError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print(f"Active flow: [bold]{controller.active_flow.name}[/bold] [dim]{flow_id}[/dim]")


@app.command()  # type: ignore[misc]
def show(
    artifact: Annotated[
        str | None, typer.Option("--artifact", "-a", help="Artifact id to display.")
    ] = None,
) -> None:
    """Print the active flow's transcript and its active (or chosen) artifact."""
    controller = _started()
    flow = controller.active_flow
    console.rule(f"[bold]{flow.name}[/bold] [dim]{flow.id}[/dim]")
    for message in flow.history:
        render_message(message)

    if artifact:
        try:
            chosen = controller.select_artifact(artifact)
        except ToolLookupError as e:
            console.print(f"[bold red]❌ {e}[/bold red]")
            raise typer.Exit(code=1) from e
        if chosen is not None:
            render_artifact(chosen)
    elif controller.active_artifact is not None:
        render_artifact(controller.active_artifact)


@app.command()  # type: ignore[misc]
def catalysts() -> None:
    """List the starter prompts available in chat via `/catalyst <n>`."""
    for i, (name, prompt) in enumerate(CATALYSTS.items(), start=1):
        console.print(Panel(prompt, title=f"{i}. {name}", border_style="blue"))


if __name__ == "__main__":
    app()
