"""Shared utilities for Studio CLI commands.

- Studio construction and workspace selection
- Formatted output helpers (error, success, info)
- Task and file-tree formatting for display
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from studio.application import Studio, WorkspaceSession
from studio.domain.filesystem import FolderNode, iter_files
from studio.domain.task import Task, TaskStatus
from studio.global_config import get_global_config
from studio.infrastructure import build_studio

T = TypeVar("T")

console = Console()

# Reusable workspace option for CLI commands
# Usage: def my_command(workspace: str | None = workspace_option) -> None:
workspace_option = typer.Option(
    None,
    "--workspace",
    "-w",
    help="Workspace id, id prefix or name (or set STUDIO_WORKSPACE env var)",
    envvar="STUDIO_WORKSPACE",
)

STATUS_COLORS = {
    TaskStatus.RUNNING: "cyan",
    TaskStatus.COMPLETED: "green",
    TaskStatus.ERROR: "red",
    TaskStatus.PENDING_CONFIRMATION: "yellow",
    TaskStatus.PENDING_BLUEPRINT_APPROVAL: "magenta",
}


def get_studio() -> Studio:
    """Build a Studio from the global configuration."""
    return build_studio(get_global_config())


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from a synchronous command."""
    return asyncio.run(coro)


def require_session(studio: Studio, workspace: str | None = None) -> WorkspaceSession:
    """Resolve the workspace to operate on, exiting if it cannot be found.

    Args:
        studio: The studio to look in.
        workspace: Id, id prefix or name from the CLI option. None means
            the active workspace.

    Raises:
        typer.Exit: If no such workspace exists.
    """
    workspace_id = None
    if workspace:
        found = studio.find_workspace(workspace)
        if found is None:
            print_error(f"Workspace not found: {workspace}")
            typer.echo("List available workspaces with: studio workspace list")
            raise typer.Exit(1)
        workspace_id = found.id
    session = studio.session(workspace_id)
    if session is None:
        print_error("No active workspace")
        raise typer.Exit(1)
    return session


def find_task(session: WorkspaceSession, ref: str) -> Task:
    """Find a task by id or unique id prefix, exiting if there is none."""
    matches = [t for t in session.tasks if t.id == ref or t.id.startswith(ref)]
    if len(matches) != 1:
        print_error(f"Task not found: {ref}" if not matches else f"Ambiguous task id: {ref}")
        raise typer.Exit(1)
    return matches[0]


def print_error(msg: str) -> None:
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def print_task(task: Task) -> None:
    """Print a task with its response, pending operations or blueprint."""
    color = STATUS_COLORS.get(task.status, "white")
    console.print(f"[bold]{task.id[:8]}[/bold] [{color}]{task.status.value}[/{color}] {escape(task.prompt)}")
    response = task.response
    if response and response.content.strip():
        typer.echo(response.content.strip())
    if task.error:
        print_error(task.error)
    if response and response.operations:
        typer.echo("")
        typer.echo("Operations:")
        for op in response.operations:
            line = f"  - {op.summary()}"
            if op.description:
                line += f": {op.description}"
            typer.echo(line)
    if response and response.blueprint:
        print_blueprint(task)


def print_blueprint(task: Task) -> None:
    blueprint = task.response.blueprint
    print_header(f"Blueprint: {blueprint.app_name}")
    for feature in blueprint.features:
        typer.echo(f"* {feature.title}: {feature.description}")
    for guideline in blueprint.style_guidelines:
        colors = f" ({', '.join(guideline.colors)})" if guideline.colors else ""
        typer.echo(f"[{guideline.category.value}] {guideline.details}{colors}")
    print_separator()


def task_table(tasks: list[Task]) -> Table:
    table = Table(title="Tasks", show_header=True)
    table.add_column("ID", style="bold")
    table.add_column("Status")
    table.add_column("Origin")
    table.add_column("Prompt")
    for task in tasks:
        color = STATUS_COLORS.get(task.status, "white")
        table.add_row(
            task.id[:8],
            f"[{color}]{task.status.value}[/{color}]",
            task.origin.value,
            escape(task.prompt if len(task.prompt) <= 60 else task.prompt[:57] + "..."),
        )
    return table


def file_listing(tree: FolderNode) -> list[str]:
    """One line per file: path and size in characters."""
    return [f"{path}  ({len(node.content)} chars)" for path, node in iter_files(tree)]


__all__ = [
    "console",
    "workspace_option",
    "get_studio",
    "run",
    "require_session",
    "find_task",
    "print_error",
    "print_success",
    "print_info",
    "print_warning",
    "print_separator",
    "print_header",
    "print_task",
    "print_blueprint",
    "task_table",
    "file_listing",
]
