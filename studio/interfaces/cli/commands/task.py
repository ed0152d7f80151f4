"""AI task CLI commands.

``ask`` streams the assistant's reply as it arrives, then handles the
outcome: pending changes can be applied or discarded, and a proposed
blueprint can be approved to start the build.
"""

import base64
from pathlib import Path

import typer

from studio.application import Attachment, TaskController
from studio.domain.shared import DomainEvent, Err
from studio.domain.task import Task, TaskStatus, TaskStreamed
from studio.interfaces.cli.common import (
    console,
    find_task,
    get_studio,
    print_error,
    print_info,
    print_success,
    print_task,
    require_session,
    run,
    task_table,
    workspace_option,
)


class StreamPrinter:
    """Echoes streamed conversational text as it grows."""

    def __init__(self) -> None:
        self._printed: dict[str, int] = {}

    def __call__(self, event: DomainEvent) -> None:
        if not isinstance(event, TaskStreamed):
            return
        start = self._printed.get(event.task_id, 0)
        if len(event.content) > start:
            typer.echo(event.content[start:], nl=False)
            self._printed[event.task_id] = len(event.content)

    def reset(self, task_id: str) -> None:
        self._printed.pop(task_id, None)


def _attachment(path: Path | None) -> Attachment | None:
    if path is None:
        return None
    if path.suffix.lower() in (".png", ".jpg", ".jpeg", ".gif", ".webp"):
        data = base64.b64encode(path.read_bytes()).decode("ascii")
        return Attachment(kind="image", name=path.name, data=data)
    return Attachment(kind="text", name=path.name, data=path.read_text(encoding="utf-8"))


def _follow_up(
    controller: TaskController,
    printer: StreamPrinter,
    task: Task,
    apply: bool | None,
) -> Task:
    """Resolve pending states interactively (or per ``apply``)."""
    while task.is_pending():
        typer.echo("")
        print_task(task)
        if task.status == TaskStatus.PENDING_BLUEPRINT_APPROVAL:
            build = apply if apply is not None else typer.confirm("Build this blueprint?", default=True)
            if not build:
                print_info("Blueprint left pending. Build it later with: studio build " + task.id[:8])
                return task
            printer.reset(task.id)
            result = run(controller.approve_blueprint(task.id))
            if isinstance(result, Err):
                print_error(result.error)
                raise typer.Exit(1)
            task = result.value
            continue

        accept = apply if apply is not None else typer.confirm("Apply these changes?", default=True)
        result = controller.approve(task.id) if accept else controller.reject(task.id)
        if isinstance(result, Err):
            print_error(result.error)
            raise typer.Exit(1)
        task = result.value
        if accept:
            print_success(f"Applied {len(task.response.operations)} operation(s)")
        else:
            print_info("Changes discarded")
    return task


def _report(task: Task | None) -> None:
    typer.echo("")
    if task is None:
        return
    if task.status == TaskStatus.ERROR:
        print_error(task.error or "Task failed")
        raise typer.Exit(1)


def ask(
    prompt: str = typer.Argument(..., help="What you want the AI to do"),
    attach: Path | None = typer.Option(
        None, "--attach", "-a", exists=True, dir_okay=False, help="Attach a text file or image"
    ),
    apply: bool | None = typer.Option(
        None, "--apply/--no-apply", help="Apply (or discard) proposed changes without asking"
    ),
    workspace: str | None = workspace_option,
) -> None:
    """Ask the AI for a change and stream its answer.

    Example:
        studio ask "add a dark mode toggle"
    """
    studio = get_studio()
    session = require_session(studio, workspace)
    controller = studio.controller(session.id)
    printer = StreamPrinter()
    session.subscribe(printer)

    task = run(controller.submit(prompt, _attachment(attach)))
    if task is None:
        print_error("Prompt is empty")
        raise typer.Exit(1)
    if task.status != TaskStatus.ERROR:
        task = _follow_up(controller, printer, task, apply)
    _report(task)


def tasks(
    limit: int = typer.Option(20, "--limit", "-n", help="How many tasks to show"),
    workspace: str | None = workspace_option,
) -> None:
    """List the workspace's tasks, newest first."""
    session = require_session(get_studio(), workspace)
    if not session.tasks:
        typer.echo("No tasks yet.")
        return
    console.print(task_table(session.tasks[:limit]))


def show(
    task_id: str = typer.Argument(..., help="Task id or id prefix"),
    workspace: str | None = workspace_option,
) -> None:
    """Show a task's response, operations or blueprint."""
    session = require_session(get_studio(), workspace)
    print_task(find_task(session, task_id))


def approve(
    task_id: str = typer.Argument(..., help="Task id or id prefix"),
    workspace: str | None = workspace_option,
) -> None:
    """Apply a task's pending changes."""
    studio = get_studio()
    session = require_session(studio, workspace)
    task = find_task(session, task_id)
    result = studio.controller(session.id).approve(task.id)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Applied {len(result.value.response.operations)} operation(s)")


def reject(
    task_id: str = typer.Argument(..., help="Task id or id prefix"),
    workspace: str | None = workspace_option,
) -> None:
    """Discard a task's pending changes."""
    studio = get_studio()
    session = require_session(studio, workspace)
    task = find_task(session, task_id)
    result = studio.controller(session.id).reject(task.id)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success("Changes discarded")


def build(
    task_id: str = typer.Argument(..., help="Task id or id prefix"),
    apply: bool | None = typer.Option(
        None, "--apply/--no-apply", help="Apply (or discard) the generated changes without asking"
    ),
    workspace: str | None = workspace_option,
) -> None:
    """Approve a pending blueprint and stream the implementation."""
    studio = get_studio()
    session = require_session(studio, workspace)
    controller = studio.controller(session.id)
    task = find_task(session, task_id)
    printer = StreamPrinter()
    session.subscribe(printer)

    result = run(controller.approve_blueprint(task.id))
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    task = result.value
    if task.status != TaskStatus.ERROR:
        task = _follow_up(controller, printer, task, apply)
    _report(task)
