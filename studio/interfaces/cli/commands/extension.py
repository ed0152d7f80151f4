"""Extension CLI commands."""

import typer

from studio.domain.shared import Err
from studio.interfaces.cli.common import get_studio, print_error, print_success

app = typer.Typer(help="Manage installed extensions")


@app.command("list")
def list_extensions() -> None:
    """List installed extensions."""
    installed = get_studio().extensions.installed()
    if not installed:
        typer.echo("No extensions installed.")
        return
    for name in installed:
        typer.echo(name)


@app.command("install")
def install(name: str = typer.Argument(..., help="Extension name")) -> None:
    """Install an extension. The AI is told about installed extensions."""
    result = get_studio().extensions.install(name)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Installed {name}")


@app.command("uninstall")
def uninstall(name: str = typer.Argument(..., help="Extension name")) -> None:
    """Uninstall an extension."""
    result = get_studio().extensions.uninstall(name)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Uninstalled {name}")
