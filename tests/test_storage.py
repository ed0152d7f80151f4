import json

import pytest

from studio.application import WorkspaceSession, new_workspace
from studio.application.workspace import ENTRY_POINT, STARTER_APP, WorkspaceUiState
from studio.domain.filesystem import FileNode, find_node
from studio.domain.sandbox import PreviewTab
from studio.domain.shared import Err, Ok, StorageFailure
from studio.global_config import Provider, StudioConfig, get_global_config, save_global_config
from studio.infrastructure import ExtensionRegistry, JsonFileStore, MemoryStore, WorkspaceRepository
from studio.infrastructure.storage.repositories import ACTIVE_WORKSPACE_KEY, WORKSPACES_KEY


@pytest.fixture
def repository(store):
    return WorkspaceRepository(store)


# =============================================================================
# JSON file store
# =============================================================================


def test_json_store_round_trip(tmp_path):
    store = JsonFileStore(tmp_path / "state")
    assert store.load("workspaces") is None

    assert isinstance(store.save("workspaces", [{"id": "1"}]), Ok)

    assert store.load("workspaces") == [{"id": "1"}]
    assert not list((tmp_path / "state").glob("*.tmp"))


def test_json_store_sanitizes_keys(tmp_path):
    store = JsonFileStore(tmp_path)
    assert store.path_for("../evil key").parent == tmp_path


def test_corrupt_file_loads_as_none(tmp_path):
    store = JsonFileStore(tmp_path)
    store.path_for("extensions").write_text("{not json", encoding="utf-8")
    assert store.load("extensions") is None


def test_save_failure_is_a_storage_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = JsonFileStore(blocker)

    result = store.save("workspaces", [])

    assert isinstance(result, Err)
    assert isinstance(result.error, StorageFailure)


# =============================================================================
# Workspace repository
# =============================================================================


def test_default_workspace_is_created(repository, store):
    workspaces = repository.list_all()

    assert len(workspaces) == 1
    assert workspaces[0].name == "My First Project"
    node = find_node(workspaces[0].file_system, ENTRY_POINT)
    assert isinstance(node, FileNode)
    assert node.content == STARTER_APP
    assert store.load(WORKSPACES_KEY)[0]["id"] == workspaces[0].id


def test_save_and_get(repository):
    workspace = new_workspace("Portfolio")
    repository.save(workspace)

    loaded = repository.get(workspace.id)

    assert loaded.name == "Portfolio"
    assert loaded.file_system == workspace.file_system
    assert repository.get("missing") is None


def test_invalid_records_are_skipped(store, repository):
    valid = new_workspace("Valid")
    store.save(WORKSPACES_KEY, [{"id": "broken"}, valid.model_dump(mode="json")])

    assert [ws.name for ws in repository.list_all()] == ["Valid"]


def test_cannot_delete_last_workspace(repository):
    only = repository.list_all()[0]

    result = repository.delete(only.id)

    assert isinstance(result, Err)
    assert result.error == "You cannot delete the last workspace."


def test_delete_active_reassigns(repository):
    first = repository.list_all()[0]
    second = new_workspace("Second")
    repository.save(second)
    repository.set_active_id(second.id)
    repository.save_ui_state(second.id, WorkspaceUiState(prompt_draft="draft"))

    assert isinstance(repository.delete(second.id), Ok)

    assert repository.get_active_id() == first.id
    assert repository.load_ui_state(second.id) == WorkspaceUiState()


def test_delete_unknown_workspace(repository):
    repository.save(new_workspace("Second"))
    assert isinstance(repository.delete("missing"), Err)


def test_active_defaults_to_newest(repository, store):
    repository.list_all()
    newest = new_workspace("Newest")
    repository.save(newest)
    assert repository.get_active_id() == newest.id

    store.save(ACTIVE_WORKSPACE_KEY, "gone")
    assert repository.get_active_id() == newest.id


def test_ui_state_round_trip(repository):
    state = WorkspaceUiState(preview_tab=PreviewTab.CONSOLE, autopilot_enabled=True)
    repository.save_ui_state("ws-1", state)
    assert repository.load_ui_state("ws-1") == state


# =============================================================================
# Extensions
# =============================================================================


def test_extension_registry(store):
    registry = ExtensionRegistry(store)

    assert registry.installed() == []
    assert isinstance(registry.install("tailwind"), Ok)
    assert isinstance(registry.install("framer-motion"), Ok)
    assert registry.installed() == ["framer-motion", "tailwind"]
    assert isinstance(registry.install("tailwind"), Err)
    assert isinstance(registry.install("  "), Err)

    assert isinstance(registry.uninstall("tailwind"), Ok)
    assert registry.is_installed("tailwind") is False
    assert isinstance(registry.uninstall("tailwind"), Err)


# =============================================================================
# Session checkpoints
# =============================================================================


class FailingStore(MemoryStore):
    def save(self, key, value):
        return Err(StorageFailure("disk full"))


def test_failed_checkpoint_keeps_state_in_memory():
    repository = WorkspaceRepository(FailingStore())
    session = WorkspaceSession(new_workspace(), repository=repository)
    session.write_file("src/notes.md", "kept")

    assert session.checkpoint() is False
    assert find_node(session.tree, "src/notes.md").content == "kept"


def test_checkpoint_saves_workspace_and_ui_state(repository):
    workspace = repository.list_all()[0]
    session = WorkspaceSession(workspace, repository=repository)
    session.write_file("src/notes.md", "saved")
    session.ui_state = WorkspaceUiState(prompt_draft="half typed")

    assert session.checkpoint() is True
    assert find_node(repository.get(workspace.id).file_system, "src/notes.md").content == "saved"
    assert repository.load_ui_state(workspace.id).prompt_draft == "half typed"


# =============================================================================
# Global config
# =============================================================================


def test_config_defaults_and_save(studio_home):
    assert get_global_config() == StudioConfig()

    save_global_config(StudioConfig(provider=Provider.ANTHROPIC, log_window=10))

    saved = json.loads((studio_home / "config.json").read_text(encoding="utf-8"))
    assert saved["provider"] == "anthropic"
    assert get_global_config().log_window == 10


def test_invalid_config_falls_back_to_defaults(studio_home):
    studio_home.mkdir(parents=True, exist_ok=True)
    (studio_home / "config.json").write_text("[1, 2", encoding="utf-8")
    assert get_global_config() == StudioConfig()
