"""Autopilot CLI command."""

import asyncio

import typer

from studio.domain.task import TaskStatus
from studio.interfaces.cli.commands.task import StreamPrinter
from studio.interfaces.cli.common import (
    get_studio,
    print_error,
    print_info,
    print_success,
    require_session,
    run,
    workspace_option,
)


def autopilot(
    rounds: int = typer.Option(1, "--rounds", "-r", min=1, help="How many proactive steps to run"),
    interval: float | None = typer.Option(
        None, "--interval", "-i", help="Seconds between rounds (default: from config)"
    ),
    workspace: str | None = workspace_option,
) -> None:
    """Let the AI improve the project on its own; changes apply automatically."""
    studio = get_studio()
    session = require_session(studio, workspace)
    scheduler = studio.scheduler(session.id)
    session.subscribe(StreamPrinter())
    pause = studio.config.autopilot_interval if interval is None else interval

    async def drive() -> int:
        failures = 0
        for round_number in range(1, rounds + 1):
            print_info(f"\n--- Autopilot round {round_number}/{rounds} ---")
            task = await scheduler.trigger()
            typer.echo("")
            if task is None:
                continue
            if task.status == TaskStatus.ERROR:
                failures += 1
                print_error(task.error or "Autopilot round failed")
            else:
                count = len(task.response.operations) if task.response else 0
                print_success(f"Applied {count} operation(s)")
            if round_number < rounds:
                await asyncio.sleep(pause)
        return failures

    failures = run(drive())
    if failures:
        raise typer.Exit(1)
