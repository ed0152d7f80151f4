"""Configuration CLI commands."""

import json

import typer
from pydantic import ValidationError

from studio.global_config import StudioConfig, get_config_dir, get_global_config, save_global_config
from studio.interfaces.cli.common import print_error, print_info, print_success

app = typer.Typer(help="Show and change global configuration")


@app.command("show")
def show() -> None:
    """Print the current configuration."""
    print_info(f"# {get_config_dir() / 'config.json'}")
    typer.echo(json.dumps(get_global_config().model_dump(mode="json"), indent=2))


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name, e.g. provider"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change one setting.

    Example:
        studio config set provider anthropic
    """
    if key not in StudioConfig.model_fields:
        print_error(f"Unknown setting: {key}")
        typer.echo(f"Available: {', '.join(StudioConfig.model_fields)}")
        raise typer.Exit(1)
    data = get_global_config().model_dump()
    data[key] = None if value.lower() in ("none", "null") else value
    try:
        config = StudioConfig.model_validate(data)
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    save_global_config(config)
    print_success(f"{key} = {config.model_dump(mode='json')[key]}")
