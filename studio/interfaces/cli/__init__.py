"""CLI interface for Studio using Typer.

Usage:
    studio ask "build a pomodoro timer"   # Ask the AI for a change
    studio tasks                          # List tasks
    studio approve <id>                   # Apply pending changes
    studio files                          # List project files
    studio workspace list                 # List workspaces

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups and top-level commands
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import logging
from typing import Optional

import typer

from studio import __version__
from studio.interfaces.cli.commands import autopilot, config, extension, files, serve, task, workspace

app = typer.Typer(
    name="studio",
    help="AI-assisted web app studio",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"studio version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Quantum Studio - build web apps by talking to an AI architect.

    The assistant either proposes a blueprint for a new app or edits the
    project's files directly; every change is streamed as it is written.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(workspace.app, name="workspace")
app.add_typer(extension.app, name="extension")
app.add_typer(config.app, name="config")


# =============================================================================
# Top-Level Commands
# =============================================================================

app.command("ask")(task.ask)
app.command("tasks")(task.tasks)
app.command("show")(task.show)
app.command("approve")(task.approve)
app.command("reject")(task.reject)
app.command("build")(task.build)

app.command("files")(files.files)
app.command("cat")(files.cat)
app.command("write")(files.write)
app.command("rm")(files.rm)
app.command("mv")(files.mv)

app.command("autopilot")(autopilot.autopilot)
app.command("serve")(serve.serve)


__all__ = ["app"]
