"""Task domain - AI task state and its lifecycle.

All exports are pure (no I/O, no side effects).

Key Types:
    Task, TaskStatus, TaskOrigin - the unit of AI work
    AssistantResponse - streamed content plus decoded payload
    Blueprint, Feature, StyleGuideline, StyleCategory - approvable plans

Lifecycle Functions:
    new_task, stream_update, settle, fail,
    approve_operations, reject_operations, approve_blueprint

Domain Events:
    TaskCreated, TaskStreamed, TaskSettled, TaskFailed,
    OperationsApproved, OperationsRejected, BlueprintApproved
"""

from studio.domain.blueprint import Blueprint, Feature, StyleCategory, StyleGuideline

from .models import (
    AssistantResponse,
    Task,
    TaskOrigin,
    TaskStatus,
)
from .events import (
    BlueprintApproved,
    OperationsApproved,
    OperationsRejected,
    TaskCreated,
    TaskFailed,
    TaskSettled,
    TaskStreamed,
)
from .lifecycle import (
    approve_blueprint,
    approve_operations,
    fail,
    new_task,
    reject_operations,
    settle,
    stream_update,
)

__all__ = [
    # Models
    "Task",
    "TaskStatus",
    "TaskOrigin",
    "AssistantResponse",
    "Blueprint",
    "Feature",
    "StyleGuideline",
    "StyleCategory",
    # Lifecycle
    "new_task",
    "stream_update",
    "settle",
    "fail",
    "approve_operations",
    "reject_operations",
    "approve_blueprint",
    # Events
    "TaskCreated",
    "TaskStreamed",
    "TaskSettled",
    "TaskFailed",
    "OperationsApproved",
    "OperationsRejected",
    "BlueprintApproved",
]
