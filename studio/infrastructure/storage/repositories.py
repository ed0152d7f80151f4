"""Repository implementations for workspaces and extensions.

Both repositories sit on a ``KeyValueStore`` and return Result types for
explicit error handling. Stored records that no longer validate are
skipped with a warning instead of failing the whole load.
"""

import logging
from typing import Any

from pydantic import ValidationError

from studio.application.ports import KeyValueStore
from studio.application.workspace import Workspace, WorkspaceUiState, new_workspace
from studio.domain.shared import StorageFailure
from studio.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)

WORKSPACES_KEY = "workspaces"
ACTIVE_WORKSPACE_KEY = "active_workspace"
UI_STATES_KEY = "ui_states"
EXTENSIONS_KEY = "extensions"


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True)


class WorkspaceRepository:
    """Repository for workspace persistence.

    Wraps the ``workspaces``, ``active_workspace`` and ``ui_states`` keys.
    When nothing is stored yet, a default workspace is created and saved.
    """

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize the repository.

        Args:
            store: Key-value store to read and write.
        """
        self._store = store

    def list_all(self) -> list[Workspace]:
        """List all workspaces, creating the default one if there are none.

        Returns:
            Every stored workspace that validates, in stored order.
        """
        workspaces: list[Workspace] = []
        for raw in self._store.load(WORKSPACES_KEY) or []:
            try:
                workspaces.append(Workspace.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid workspace record: {e.error_count()} error(s)")

        if not workspaces:
            default = new_workspace()
            workspaces = [default]
            result = self._save_all(workspaces)
            if isinstance(result, Err):
                logger.warning(f"Could not save default workspace: {result.error}")
        return workspaces

    def get(self, workspace_id: str) -> Workspace | None:
        """Get a workspace by ID, or None if there is no such workspace."""
        return next((ws for ws in self.list_all() if ws.id == workspace_id), None)

    def save(self, workspace: Workspace) -> Result[None, StorageFailure]:
        """Insert or replace a workspace.

        Args:
            workspace: Workspace to persist.

        Returns:
            Ok(None) if successful, Err(StorageFailure) if the store failed.
        """
        workspaces = self.list_all()
        for index, existing in enumerate(workspaces):
            if existing.id == workspace.id:
                workspaces[index] = workspace
                break
        else:
            workspaces.append(workspace)
        return self._save_all(workspaces)

    def delete(self, workspace_id: str) -> Result[None, str]:
        """Delete a workspace and its UI state.

        The last remaining workspace cannot be deleted. Deleting the active
        workspace makes the first remaining one active.

        Returns:
            Ok(None) if deleted, Err(str) explaining why not.
        """
        workspaces = self.list_all()
        if len(workspaces) <= 1:
            return Err("You cannot delete the last workspace.")
        remaining = [ws for ws in workspaces if ws.id != workspace_id]
        if len(remaining) == len(workspaces):
            return Err(f"Workspace not found: {workspace_id}")

        active_id = self.get_active_id()
        result = self._save_all(remaining)
        if isinstance(result, Err):
            return Err(str(result.error))

        states = self._load_ui_states()
        if states.pop(workspace_id, None) is not None:
            self._store.save(UI_STATES_KEY, {k: _dump(v) for k, v in states.items()})
        if active_id == workspace_id:
            self.set_active_id(remaining[0].id)
        return Ok(None)

    def get_active_id(self) -> str:
        """The active workspace: the stored choice, else the newest one."""
        workspaces = self.list_all()
        saved = self._store.load(ACTIVE_WORKSPACE_KEY)
        if isinstance(saved, str) and any(ws.id == saved for ws in workspaces):
            return saved
        return max(workspaces, key=lambda ws: ws.created_at).id

    def set_active_id(self, workspace_id: str) -> Result[None, StorageFailure]:
        return self._store.save(ACTIVE_WORKSPACE_KEY, workspace_id)

    def load_ui_state(self, workspace_id: str) -> WorkspaceUiState:
        """UI state of a workspace, defaults if none is stored."""
        return self._load_ui_states().get(workspace_id) or WorkspaceUiState()

    def save_ui_state(
        self, workspace_id: str, state: WorkspaceUiState
    ) -> Result[None, StorageFailure]:
        states = self._load_ui_states()
        states[workspace_id] = state
        return self._store.save(UI_STATES_KEY, {k: _dump(v) for k, v in states.items()})

    def _load_ui_states(self) -> dict[str, WorkspaceUiState]:
        raw = self._store.load(UI_STATES_KEY)
        if not isinstance(raw, dict):
            return {}
        states: dict[str, WorkspaceUiState] = {}
        for workspace_id, data in raw.items():
            try:
                states[workspace_id] = WorkspaceUiState.model_validate(data)
            except ValidationError:
                logger.warning(f"Dropping invalid UI state for workspace {workspace_id}")
        return states

    def _save_all(self, workspaces: list[Workspace]) -> Result[None, StorageFailure]:
        return self._store.save(WORKSPACES_KEY, [_dump(ws) for ws in workspaces])


class ExtensionRegistry:
    """Installed extensions, stored as a sorted list of names."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def installed(self) -> list[str]:
        raw = self._store.load(EXTENSIONS_KEY)
        if not isinstance(raw, list):
            return []
        return [name for name in raw if isinstance(name, str)]

    def is_installed(self, name: str) -> bool:
        return name in self.installed()

    def install(self, name: str) -> Result[None, str]:
        name = name.strip()
        if not name:
            return Err("Extension name cannot be empty")
        names = self.installed()
        if name in names:
            return Err(f"Extension already installed: {name}")
        return self._save(sorted([*names, name]))

    def uninstall(self, name: str) -> Result[None, str]:
        names = self.installed()
        if name not in names:
            return Err(f"Extension not installed: {name}")
        return self._save([n for n in names if n != name])

    def _save(self, names: list[str]) -> Result[None, str]:
        result = self._store.save(EXTENSIONS_KEY, names)
        if isinstance(result, Err):
            return Err(str(result.error))
        return Ok(None)
