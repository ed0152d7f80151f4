"""Request/Response schemas for the Studio API.

These Pydantic models define the API contract for request and response bodies.
Domain models (tasks, file trees, operations) are returned as they are.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from studio.application import Attachment, WorkspaceUiState
from studio.domain.filesystem import BatchResult, FileOperation
from studio.domain.sandbox import LogEntry, PreviewTab, SelectedElement


# =============================================================================
# Workspace Schemas
# =============================================================================


class CreateWorkspaceRequest(BaseModel):
    """Request to create a workspace. A blank name becomes "Project N"."""

    name: Optional[str] = None


class WorkspaceSummary(BaseModel):
    id: str
    name: str
    created_at: datetime
    task_count: int
    active: bool


# =============================================================================
# File Schemas
# =============================================================================


class FileResponse(BaseModel):
    path: str
    content: str


class WriteFileRequest(BaseModel):
    """Direct edit of one file from the editor."""

    path: str
    content: str


class OperationsRequest(BaseModel):
    """A batch of file operations from the file explorer."""

    operations: list[FileOperation]


class SkippedItem(BaseModel):
    operation: FileOperation
    reason: str


class BatchResponse(BaseModel):
    """Outcome of applying a batch: what landed and what was skipped."""

    applied: list[FileOperation]
    skipped: list[SkippedItem]

    @classmethod
    def from_result(cls, result: BatchResult) -> "BatchResponse":
        return cls(
            applied=list(result.applied),
            skipped=[SkippedItem(operation=s.operation, reason=s.reason) for s in result.skipped],
        )


# =============================================================================
# Task Schemas
# =============================================================================


class SubmitRequest(BaseModel):
    """Request to start a user task."""

    prompt: str
    attachment: Optional[Attachment] = None


class AutopilotRequest(BaseModel):
    enabled: bool


# =============================================================================
# Preview Host Schemas
# =============================================================================


class PickerRequest(BaseModel):
    """Arm or disarm the element picker. Omit ``enabled`` to toggle."""

    enabled: Optional[bool] = None


class TabRequest(BaseModel):
    tab: PreviewTab


class HostStateResponse(BaseModel):
    """What the preview pane shows besides the rendered app."""

    tab: PreviewTab
    picker_armed: bool
    selected: Optional[SelectedElement] = None
    fixable_error: Optional[LogEntry] = None


class UiStateRequest(BaseModel):
    """Partial update of the per-workspace UI state."""

    active_editor_path: Optional[str] = None
    preview_tab: Optional[PreviewTab] = None
    prompt_draft: Optional[str] = None


__all__ = [
    "CreateWorkspaceRequest",
    "WorkspaceSummary",
    "FileResponse",
    "WriteFileRequest",
    "OperationsRequest",
    "SkippedItem",
    "BatchResponse",
    "SubmitRequest",
    "AutopilotRequest",
    "PickerRequest",
    "TabRequest",
    "HostStateResponse",
    "UiStateRequest",
    "WorkspaceUiState",
]
