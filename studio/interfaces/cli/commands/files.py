"""File tree CLI commands: list, show and edit workspace files."""

from pathlib import Path

import typer

from studio.domain.filesystem import FileNode, FileOperation, FileOperationType, find_node
from studio.interfaces.cli.common import (
    file_listing,
    get_studio,
    print_error,
    print_success,
    print_warning,
    require_session,
    workspace_option,
)


def files(workspace: str | None = workspace_option) -> None:
    """List every file in the workspace."""
    session = require_session(get_studio(), workspace)
    lines = file_listing(session.tree)
    if not lines:
        typer.echo("The project is empty.")
        return
    for line in lines:
        typer.echo(line)


def cat(
    path: str = typer.Argument(..., help="File path, e.g. src/App.tsx"),
    workspace: str | None = workspace_option,
) -> None:
    """Print a file's content."""
    session = require_session(get_studio(), workspace)
    node = find_node(session.tree, path)
    if not isinstance(node, FileNode):
        print_error(f"No such file: {path}")
        raise typer.Exit(1)
    typer.echo(node.content)


def write(
    path: str = typer.Argument(..., help="Destination path in the workspace"),
    source: Path = typer.Option(..., "--from", "-f", exists=True, dir_okay=False, help="Local file to copy in"),
    workspace: str | None = workspace_option,
) -> None:
    """Create or overwrite a workspace file from a local file."""
    session = require_session(get_studio(), workspace)
    result = session.write_file(path, source.read_text(encoding="utf-8"))
    _report(result, session)


def rm(
    path: str = typer.Argument(..., help="File or folder to delete"),
    workspace: str | None = workspace_option,
) -> None:
    """Delete a file or folder."""
    session = require_session(get_studio(), workspace)
    node = find_node(session.tree, path)
    if node is None:
        print_error(f"No such file or folder: {path}")
        raise typer.Exit(1)
    kind = FileOperationType.DELETE_FILE if isinstance(node, FileNode) else FileOperationType.DELETE_FOLDER
    result = session.apply_batch([FileOperation(operation=kind, path=path)])
    _report(result, session)


def mv(
    path: str = typer.Argument(..., help="File or folder to move"),
    new_path: str = typer.Argument(..., help="Destination path"),
    workspace: str | None = workspace_option,
) -> None:
    """Rename or move a file or folder."""
    session = require_session(get_studio(), workspace)
    node = find_node(session.tree, path)
    kind = FileOperationType.RENAME_FILE if isinstance(node, FileNode) else FileOperationType.RENAME_FOLDER
    result = session.apply_batch([FileOperation(operation=kind, path=path, new_path=new_path)])
    _report(result, session)


def _report(result, session) -> None:
    for skipped in result.skipped:
        print_warning(f"Skipped {skipped.operation.summary()}: {skipped.reason}")
    if result.skipped:
        raise typer.Exit(1)
    session.checkpoint()
    for op in result.applied:
        print_success(op.summary())
