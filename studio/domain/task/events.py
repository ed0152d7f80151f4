"""Task domain events.

Immutable records of task state changes. Sessions forward them to
subscribers; nothing in the domain performs I/O on their behalf.
"""

from studio.domain.shared.events import DomainEvent
from studio.domain.task.models import TaskOrigin, TaskStatus


class TaskCreated(DomainEvent):
    """A task was created and its first streaming round is about to start."""

    task_id: str
    origin: TaskOrigin
    prompt: str


class TaskStreamed(DomainEvent):
    """More conversational text arrived for a running task."""

    task_id: str
    content: str


class TaskSettled(DomainEvent):
    """A streaming round ended without error.

    ``status`` is completed, pending_confirmation or
    pending_blueprint_approval.
    """

    task_id: str
    status: TaskStatus
    auto_apply: bool = False


class TaskFailed(DomainEvent):
    """A task hit a fatal failure (stream or payload)."""

    task_id: str
    reason: str


class OperationsApproved(DomainEvent):
    """The user approved a pending batch."""

    task_id: str
    operation_count: int


class OperationsRejected(DomainEvent):
    """The user rejected a pending batch; the tree is untouched."""

    task_id: str


class BlueprintApproved(DomainEvent):
    """The user approved a blueprint; a new round starts on the same task."""

    task_id: str
    app_name: str
