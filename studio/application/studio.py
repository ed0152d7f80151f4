"""Studio facade.

Owns the open workspace sessions and their controllers and schedulers,
and routes workspace-level commands (create, delete, switch) to the
repository. The CLI and the API both talk to one ``Studio``.
"""

import logging
from typing import TYPE_CHECKING

from studio.application.autopilot import AutopilotScheduler
from studio.application.controller import TaskController
from studio.application.ports import TextSource
from studio.application.session import WorkspaceSession
from studio.application.workspace import Workspace, new_workspace
from studio.domain.shared import Err, Ok, Result
from studio.domain.task import TaskStatus, fail
from studio.global_config import StudioConfig

if TYPE_CHECKING:
    from studio.infrastructure.storage.repositories import ExtensionRegistry, WorkspaceRepository

logger = logging.getLogger(__name__)

INTERRUPTED = "Interrupted before the response finished."


class Studio:
    """Entry point to every workspace.

    Args:
        repository: Workspace persistence.
        extensions: Installed-extension registry.
        source: Text source shared by all controllers.
        config: Global configuration.
    """

    def __init__(
        self,
        repository: "WorkspaceRepository",
        extensions: "ExtensionRegistry",
        source: TextSource,
        config: StudioConfig | None = None,
    ) -> None:
        self.repository = repository
        self.extensions = extensions
        self.source = source
        self.config = config or StudioConfig()
        self._sessions: dict[str, WorkspaceSession] = {}
        self._controllers: dict[str, TaskController] = {}
        self._schedulers: dict[str, AutopilotScheduler] = {}

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @property
    def active_id(self) -> str:
        return self.repository.get_active_id()

    def session(self, workspace_id: str | None = None) -> WorkspaceSession | None:
        """Open (or reuse) the session of a workspace; the active one by default."""
        workspace_id = workspace_id or self.active_id
        if workspace_id in self._sessions:
            return self._sessions[workspace_id]
        workspace = self.repository.get(workspace_id)
        if workspace is None:
            return None
        session = WorkspaceSession(
            workspace,
            repository=self.repository,
            ui_state=self.repository.load_ui_state(workspace_id),
            log_window=self.config.log_window,
        )
        for task in session.tasks:
            if task.status == TaskStatus.RUNNING:
                # Left running by a process that stopped mid-stream.
                session.update_task(fail(task, INTERRUPTED)[0])
        self._sessions[workspace_id] = session
        return session

    def controller(self, workspace_id: str | None = None) -> TaskController | None:
        session = self.session(workspace_id)
        if session is None:
            return None
        if session.id not in self._controllers:
            self._controllers[session.id] = TaskController(
                session, self.source, self.extensions, self.config
            )
        return self._controllers[session.id]

    def scheduler(self, workspace_id: str | None = None) -> AutopilotScheduler | None:
        controller = self.controller(workspace_id)
        if controller is None:
            return None
        key = controller.session.id
        if key not in self._schedulers:
            self._schedulers[key] = AutopilotScheduler(controller, self.config.autopilot_interval)
        return self._schedulers[key]

    async def set_autopilot(self, enabled: bool, workspace_id: str | None = None) -> bool:
        """Turn the autopilot of a workspace on or off and remember the choice."""
        scheduler = self.scheduler(workspace_id)
        if scheduler is None:
            return False
        session = self.session(workspace_id)
        session.update_ui_state(autopilot_enabled=enabled)
        if enabled:
            scheduler.start()
        else:
            await scheduler.stop()
        session.checkpoint()
        return True

    async def shutdown(self) -> None:
        for scheduler in self._schedulers.values():
            await scheduler.stop()
        for session in self._sessions.values():
            session.checkpoint()

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------

    def list_workspaces(self) -> list[Workspace]:
        return self.repository.list_all()

    def create_workspace(self, name: str | None = None) -> Result[Workspace, str]:
        name = (name or "").strip() or f"Project {len(self.list_workspaces()) + 1}"
        workspace = new_workspace(name)
        saved = self.repository.save(workspace)
        if isinstance(saved, Err):
            return Err(str(saved.error))
        self.repository.set_active_id(workspace.id)
        logger.info(f"Created workspace {workspace.name} ({workspace.id})")
        return Ok(workspace)

    def delete_workspace(self, workspace_id: str) -> Result[None, str]:
        result = self.repository.delete(workspace_id)
        if isinstance(result, Ok):
            self._sessions.pop(workspace_id, None)
            self._controllers.pop(workspace_id, None)
            scheduler = self._schedulers.pop(workspace_id, None)
            if scheduler is not None:
                scheduler.cancel()
        return result

    def switch_workspace(self, workspace_id: str) -> Result[Workspace, str]:
        workspace = self.repository.get(workspace_id)
        if workspace is None:
            return Err(f"Workspace not found: {workspace_id}")
        self.repository.set_active_id(workspace_id)
        return Ok(workspace)

    def find_workspace(self, ref: str) -> Workspace | None:
        """Look a workspace up by id, id prefix or exact name."""
        workspaces = self.list_workspaces()
        for ws in workspaces:
            if ws.id == ref or ws.name == ref:
                return ws
        matches = [ws for ws in workspaces if ws.id.startswith(ref)]
        return matches[0] if len(matches) == 1 else None
