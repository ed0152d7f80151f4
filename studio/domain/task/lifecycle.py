"""Task lifecycle transitions.

Pure functions implementing the task state machine::

    running -> completed | error | pending_confirmation | pending_blueprint_approval
    pending_confirmation -> completed            (approve or reject)
    pending_blueprint_approval -> running        (approve, new round, same id)

Each transition returns a new Task plus the domain event describing it.
Transitions requested from the wrong state return Err. Nothing here touches
the file tree; applying an approved batch is the caller's job.
"""

from studio.domain.shared import Err, Ok, Result
from studio.domain.stream.decoder import decode_blueprint, decode_operations
from studio.domain.stream.framer import Frame, PayloadKind
from studio.domain.task.events import (
    BlueprintApproved,
    OperationsApproved,
    OperationsRejected,
    TaskCreated,
    TaskFailed,
    TaskSettled,
)
from studio.domain.task.models import AssistantResponse, Task, TaskOrigin, TaskStatus


def new_task(prompt: str, origin: TaskOrigin = TaskOrigin.USER) -> tuple[Task, TaskCreated]:
    """Create a running task."""
    task = Task(prompt=prompt, origin=origin)
    return task, TaskCreated(task_id=task.id, origin=origin, prompt=prompt)


def stream_update(task: Task, frame: Frame) -> Task:
    """Show the conversational text streamed so far.

    Only running tasks take updates; anything else is returned unchanged.
    """
    if task.status != TaskStatus.RUNNING:
        return task
    return task.model_copy(
        update={"response": AssistantResponse(content=frame.conversational)}
    )


def settle(
    task: Task, frame: Frame, auto_apply: bool | None = None
) -> Result[tuple[Task, TaskSettled], str]:
    """End a streaming round from the final frame of the response.

    - blueprint marker: pending_blueprint_approval
    - operations marker: completed when the batch is auto-applied (the
      caller applies it), pending_confirmation otherwise
    - no marker: completed

    Args:
        task: The running task.
        frame: Classification of the complete response.
        auto_apply: Whether an operations batch skips confirmation. Defaults
            to true for autopilot tasks only.

    Returns:
        Ok((settled_task, TaskSettled)) or Err(str) if the task is not running.

    Raises:
        PayloadParseFailure: If the payload after the marker does not decode.
    """
    if task.status != TaskStatus.RUNNING:
        return Err(f"Task {task.id} is not running (current status: {task.status.value})")

    if auto_apply is None:
        auto_apply = task.origin == TaskOrigin.AUTOPILOT
    applied = False
    if frame.kind == PayloadKind.BLUEPRINT:
        response = AssistantResponse(
            content=frame.conversational.strip(),
            blueprint=decode_blueprint(frame.raw_payload),
        )
        status = TaskStatus.PENDING_BLUEPRINT_APPROVAL
    elif frame.kind == PayloadKind.OPERATIONS:
        response = AssistantResponse(
            content=frame.conversational.strip(),
            operations=decode_operations(frame.raw_payload),
        )
        applied = auto_apply
        status = TaskStatus.COMPLETED if applied else TaskStatus.PENDING_CONFIRMATION
    else:
        response = AssistantResponse(content=frame.conversational)
        status = TaskStatus.COMPLETED

    settled = task.model_copy(update={"status": status, "response": response, "error": None})
    return Ok((settled, TaskSettled(task_id=task.id, status=status, auto_apply=applied)))


def fail(task: Task, reason: str) -> tuple[Task, TaskFailed]:
    """Move a task to ``error``, keeping whatever content it streamed."""
    failed = task.model_copy(update={"status": TaskStatus.ERROR, "error": reason})
    return failed, TaskFailed(task_id=task.id, reason=reason)


def approve_operations(task: Task) -> Result[tuple[Task, OperationsApproved], str]:
    """Approve a pending batch. The caller applies ``task.response.operations``."""
    if task.status != TaskStatus.PENDING_CONFIRMATION:
        return Err(f"Task {task.id} has no changes awaiting confirmation")
    count = len(task.response.operations) if task.response else 0
    approved = task.model_copy(update={"status": TaskStatus.COMPLETED})
    return Ok((approved, OperationsApproved(task_id=task.id, operation_count=count)))


def reject_operations(task: Task) -> Result[tuple[Task, OperationsRejected], str]:
    """Reject a pending batch. The conversational content stays visible."""
    if task.status != TaskStatus.PENDING_CONFIRMATION:
        return Err(f"Task {task.id} has no changes awaiting confirmation")
    rejected = task.model_copy(update={"status": TaskStatus.COMPLETED})
    return Ok((rejected, OperationsRejected(task_id=task.id)))


def approve_blueprint(task: Task) -> Result[tuple[Task, BlueprintApproved], str]:
    """Approve a pending blueprint and put the task back into ``running``."""
    if task.status != TaskStatus.PENDING_BLUEPRINT_APPROVAL:
        return Err(f"Task {task.id} has no blueprint awaiting approval")
    if task.response is None or task.response.blueprint is None:
        return Err(f"Task {task.id} has no blueprint")
    blueprint = task.response.blueprint
    running = task.model_copy(update={"status": TaskStatus.RUNNING, "error": None})
    return Ok((running, BlueprintApproved(task_id=task.id, app_name=blueprint.app_name)))
