"""Workspace session.

The live, in-memory state of one open workspace: its published tree, its
task list, its preview host and its UI state. Every tree publish and every
task replacement happens under ``session.lock``, and a batch is always
applied to the most recently published tree, never to an older snapshot.
"""

import logging
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from studio.application.workspace import Workspace, WorkspaceUiState
from studio.domain.filesystem import (
    BatchResult,
    FileOperation,
    FileOperationType,
    FolderNode,
    OperationsApplied,
    apply_operations,
)
from studio.domain.sandbox import PreviewHost, PreviewTab
from studio.domain.shared import DomainEvent, Err
from studio.domain.task import Task, TaskOrigin, TaskStatus

if TYPE_CHECKING:
    from studio.infrastructure.storage.repositories import WorkspaceRepository

logger = logging.getLogger(__name__)

Subscriber = Callable[[DomainEvent], None]


class WorkspaceSession:
    """One open workspace.

    Args:
        workspace: The workspace to operate on.
        repository: Where checkpoints go. None keeps everything in memory.
        ui_state: UI preferences for this workspace.
        log_window: Size of the preview host's log window.
    """

    def __init__(
        self,
        workspace: Workspace,
        repository: "WorkspaceRepository | None" = None,
        ui_state: WorkspaceUiState | None = None,
        log_window: int = 50,
    ) -> None:
        self.workspace = workspace
        self.ui_state = ui_state or WorkspaceUiState()
        self.lock = threading.RLock()
        self.host = PreviewHost(
            window_size=log_window,
            tab=self.ui_state.preview_tab,
            on_tab_change=self._remember_tab,
        )
        self._repository = repository
        self._subscribers: list[Subscriber] = []

    @property
    def id(self) -> str:
        return self.workspace.id

    @property
    def tree(self) -> FolderNode:
        """The most recently published tree."""
        return self.workspace.file_system

    @property
    def tasks(self) -> list[Task]:
        """Tasks, newest first."""
        return list(self.workspace.tasks)

    # ------------------------------------------------------------------
    # UI state
    # ------------------------------------------------------------------

    def update_ui_state(self, **changes) -> WorkspaceUiState:
        """Replace some UI state fields. A new preview tab is shown by the host too."""
        with self.lock:
            self.ui_state = self.ui_state.model_copy(update=changes)
            if "preview_tab" in changes:
                self.host.select_tab(self.ui_state.preview_tab)
            return self.ui_state

    def _remember_tab(self, tab: PreviewTab) -> None:
        with self.lock:
            self.ui_state = self.ui_state.model_copy(update={"preview_tab": tab})

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register an event callback. Returns a function that unsubscribes."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, event: DomainEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Task | None:
        return next((t for t in self.workspace.tasks if t.id == task_id), None)

    def add_task(self, task: Task) -> None:
        with self.lock:
            self.workspace.tasks = [task, *self.workspace.tasks]

    def update_task(self, task: Task) -> None:
        with self.lock:
            self.workspace.tasks = [
                task if existing.id == task.id else existing
                for existing in self.workspace.tasks
            ]

    def has_running(self, origin: TaskOrigin | None = None) -> bool:
        return any(
            t.status == TaskStatus.RUNNING and (origin is None or t.origin == origin)
            for t in self.workspace.tasks
        )

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def apply_batch(self, operations: Sequence[FileOperation], task_id: str = "") -> BatchResult:
        """Apply a batch to the latest tree and publish the result."""
        with self.lock:
            result = apply_operations(self.workspace.file_system, operations)
            self.workspace.file_system = result.tree
            if result.applied:
                # The preview reloads with the new code.
                self.host.refresh()
            self.emit(
                OperationsApplied(
                    task_id=task_id,
                    applied=len(result.applied),
                    skipped=[s.reason for s in result.skipped],
                )
            )
        return result

    def write_file(self, path: str, content: str) -> BatchResult:
        """Direct edit: create or overwrite one file."""
        op = FileOperation(operation=FileOperationType.UPDATE_FILE, path=path, content=content)
        return self.apply_batch([op])

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def checkpoint(self) -> bool:
        """Save workspace and UI state. Failures are logged, state stays in memory."""
        if self._repository is None:
            return True
        with self.lock:
            snapshot = self.workspace.model_copy()
            ui_state = self.ui_state.model_copy()
        ok = True
        for result in (
            self._repository.save(snapshot),
            self._repository.save_ui_state(snapshot.id, ui_state),
        ):
            if isinstance(result, Err):
                logger.warning(f"Checkpoint of workspace {snapshot.id} failed: {result.error}")
                ok = False
        return ok
