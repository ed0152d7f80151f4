"""Workspace management CLI commands."""

import typer
from rich.table import Table

from studio.domain.shared import Err
from studio.interfaces.cli.common import (
    console,
    get_studio,
    print_error,
    print_success,
)

app = typer.Typer(help="Workspace management commands")


@app.command("list")
def list_workspaces() -> None:
    """List workspaces; the active one is marked with *."""
    studio = get_studio()
    active_id = studio.active_id
    table = Table(title="Workspaces", show_header=True)
    table.add_column("")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Tasks", justify="right")
    table.add_column("Created")
    for ws in studio.list_workspaces():
        table.add_row(
            "*" if ws.id == active_id else "",
            ws.id[:8],
            ws.name,
            str(len(ws.tasks)),
            ws.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command("create")
def create(
    name: str | None = typer.Argument(None, help="Workspace name (default: Project N)"),
) -> None:
    """Create a workspace and make it active."""
    result = get_studio().create_workspace(name)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Created workspace '{result.value.name}' ({result.value.id[:8]})")


@app.command("delete")
def delete(
    ref: str = typer.Argument(..., help="Workspace id, id prefix or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a workspace. The last workspace cannot be deleted."""
    studio = get_studio()
    workspace = studio.find_workspace(ref)
    if workspace is None:
        print_error(f"Workspace not found: {ref}")
        raise typer.Exit(1)
    if not yes and not typer.confirm(
        f"Delete workspace '{workspace.name}'? This cannot be undone."
    ):
        raise typer.Abort()
    result = studio.delete_workspace(workspace.id)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Deleted workspace '{workspace.name}'")


@app.command("use")
def use(ref: str = typer.Argument(..., help="Workspace id, id prefix or name")) -> None:
    """Make a workspace the active one."""
    studio = get_studio()
    workspace = studio.find_workspace(ref)
    if workspace is None:
        print_error(f"Workspace not found: {ref}")
        raise typer.Exit(1)
    studio.switch_workspace(workspace.id)
    print_success(f"Active workspace: {workspace.name}")
