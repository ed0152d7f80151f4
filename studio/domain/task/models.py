"""Task domain models.

Pure domain models for AI tasks and the blueprints they may propose.
Pydantic keeps them serializable for workspace persistence and the API.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from studio.domain.blueprint import Blueprint
from studio.domain.filesystem.operations import FileOperation


class TaskStatus(str, Enum):
    """Status of a task.

    ``PENDING_CONFIRMATION`` and ``PENDING_BLUEPRINT_APPROVAL`` end a
    streaming round but wait for a human decision before the task is done.
    """

    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"
    PENDING_CONFIRMATION = "pending_confirmation"
    PENDING_BLUEPRINT_APPROVAL = "pending_blueprint_approval"


class TaskOrigin(str, Enum):
    """Who started a task."""

    USER = "user"
    AUTOPILOT = "autopilot"


class AssistantResponse(BaseModel):
    """What the model produced for a task.

    ``content`` is the conversational part; at most one of ``operations``
    and ``blueprint`` is populated.
    """

    content: str = ""
    operations: list[FileOperation] = Field(default_factory=list)
    blueprint: Blueprint | None = None


class Task(BaseModel):
    """A unit of AI work inside a workspace."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    prompt: str
    status: TaskStatus = TaskStatus.RUNNING
    response: AssistantResponse | None = None
    error: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    origin: TaskOrigin = TaskOrigin.USER

    def is_running(self) -> bool:
        return self.status == TaskStatus.RUNNING

    def is_pending(self) -> bool:
        """True while the task waits for a human decision."""
        return self.status in (
            TaskStatus.PENDING_CONFIRMATION,
            TaskStatus.PENDING_BLUEPRINT_APPROVAL,
        )
