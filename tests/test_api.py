import pytest
from conftest import create_file, operations_reply
from fastapi.testclient import TestClient

from studio import __version__
from studio.interfaces.api import create_app


@pytest.fixture
def client(studio):
    with TestClient(create_app(studio)) as client:
        yield client


def test_root(client):
    assert client.get("/").json() == {"name": "Quantum Studio", "version": __version__}


def test_default_workspace_is_listed(client):
    workspaces = client.get("/api/workspaces").json()

    assert len(workspaces) == 1
    assert workspaces[0]["name"] == "My First Project"
    assert workspaces[0]["active"] is True


def test_create_and_activate_workspace(client):
    created = client.post("/api/workspaces", json={"name": "Landing Page"})
    assert created.status_code == 201

    names = {ws["name"]: ws["active"] for ws in client.get("/api/workspaces").json()}
    assert names == {"My First Project": False, "Landing Page": True}


def test_cannot_delete_last_workspace(client):
    workspace_id = client.get("/api/workspaces").json()[0]["id"]

    response = client.delete(f"/api/workspaces/{workspace_id}")

    assert response.status_code == 409
    assert response.json()["detail"] == "You cannot delete the last workspace."


def test_unknown_workspace_is_404(client):
    assert client.get("/api/workspaces/nope/tree").status_code == 404


def test_tree_and_files(client):
    assert client.get("/api/workspaces/active/files").json() == ["src/App.tsx"]
    tree = client.get("/api/workspaces/active/tree").json()
    assert tree["children"]["src"]["type"] == "folder"
    app = client.get("/api/workspaces/active/files/src/App.tsx").json()
    assert "function App()" in app["content"]
    assert client.get("/api/workspaces/active/files/src/Nope.tsx").status_code == 404


def test_direct_edit_and_operations(client):
    written = client.put("/api/workspaces/active/files", json={"path": "src/util.ts", "content": "x"})
    assert written.json()["applied"][0]["path"] == "src/util.ts"

    batch = client.post(
        "/api/workspaces/active/operations",
        json={
            "operations": [
                {"operation": "RENAME_FILE", "path": "src/util.ts", "newPath": "lib/util.ts"},
                {"operation": "CREATE_FILE", "path": "lib/util.ts/oops.ts", "content": ""},
            ]
        },
    ).json()

    assert [op["newPath"] for op in batch["applied"]] == ["lib/util.ts"]
    assert "lib/util.ts" in batch["skipped"][0]["reason"]
    assert client.get("/api/workspaces/active/files/lib/util.ts").json()["content"] == "x"


def test_submit_approve_flow(client, source):
    source.add(operations_reply("Adding a footer.", create_file("src/Footer.tsx", "footer")))

    created = client.post("/api/workspaces/active/tasks", json={"prompt": "add a footer"})
    assert created.status_code == 201
    task = created.json()
    assert task["status"] == "pending_confirmation"
    assert task["response"]["operations"][0]["path"] == "src/Footer.tsx"

    approved = client.post(f"/api/workspaces/active/tasks/{task['id']}/approve")
    assert approved.json()["status"] == "completed"
    assert client.get("/api/workspaces/active/files/src/Footer.tsx").json()["content"] == "footer"

    again = client.post(f"/api/workspaces/active/tasks/{task['id']}/approve")
    assert again.status_code == 409

    tasks = client.get("/api/workspaces/active/tasks").json()
    assert [t["id"] for t in tasks] == [task["id"]]


def test_reject_and_missing_task(client, source):
    source.add(operations_reply("Deleting.", {"operation": "DELETE_FILE", "path": "src/App.tsx"}))
    task = client.post("/api/workspaces/active/tasks", json={"prompt": "delete"}).json()

    assert client.post(f"/api/workspaces/active/tasks/{task['id']}/reject").json()["status"] == "completed"
    assert client.get("/api/workspaces/active/files/src/App.tsx").status_code == 200
    assert client.post("/api/workspaces/active/tasks/missing/approve").status_code == 404


def test_empty_prompt_is_rejected(client):
    assert client.post("/api/workspaces/active/tasks", json={"prompt": "  "}).status_code == 422


def test_sandbox_console_messages(client):
    bad = client.post("/api/workspaces/active/sandbox/messages", json={"type": "navigate"})
    assert bad.status_code == 422

    for level, message in [("log", "ready"), ("error", "Uncaught Error: boom")]:
        response = client.post(
            "/api/workspaces/active/sandbox/messages",
            json={"type": "console", "level": level, "message": message},
        )
        assert response.status_code == 202

    logs = client.get("/api/workspaces/active/logs").json()
    assert [entry["message"] for entry in logs] == ["Uncaught Error: boom", "ready"]

    preview = client.get("/api/workspaces/active/preview").json()
    assert preview["tab"] == "console"
    assert preview["fixable_error"]["message"] == "Uncaught Error: boom"

    assert client.delete("/api/workspaces/active/fixable-error").status_code == 200
    assert client.get("/api/workspaces/active/preview").json()["fixable_error"] is None


def test_picker_and_selection(client):
    armed = client.post("/api/workspaces/active/picker", json={"enabled": True})
    assert armed.json() == {"armed": True}
    assert client.get("/api/workspaces/active/sandbox/outbox").json() == [
        {"type": "toggle-selector", "enabled": True}
    ]
    assert client.get("/api/workspaces/active/sandbox/outbox").json() == []

    client.post(
        "/api/workspaces/active/sandbox/messages",
        json={"type": "element-selected", "selector": "main > h1", "text": "Welcome"},
    )

    assert client.get("/api/workspaces/active/selection").json() == {"selector": "main > h1", "text": "Welcome"}
    assert client.get("/api/workspaces/active/preview").json()["picker_armed"] is False

    client.delete("/api/workspaces/active/selection")
    assert client.get("/api/workspaces/active/selection").json() is None
    assert client.get("/api/workspaces/active/sandbox/outbox").json() == [{"type": "clear-selection"}]


def test_ui_state_update(client):
    updated = client.patch("/api/workspaces/active/ui-state", json={"prompt_draft": "make it blue"})
    assert updated.json()["prompt_draft"] == "make it blue"
    assert client.get("/api/workspaces/active/ui-state").json()["active_editor_path"] == "src/App.tsx"


def test_preview_tab_is_part_of_ui_state(client):
    client.put("/api/workspaces/active/preview/tab", json={"tab": "console"})
    assert client.get("/api/workspaces/active/ui-state").json()["preview_tab"] == "console"

    client.patch("/api/workspaces/active/ui-state", json={"preview_tab": "preview"})
    assert client.get("/api/workspaces/active/preview").json()["tab"] == "preview"


def test_autopilot_toggle(client, studio):
    assert client.put("/api/workspaces/active/autopilot", json={"enabled": True}).json() == {"enabled": True}
    assert studio.session().ui_state.autopilot_enabled is True
    client.put("/api/workspaces/active/autopilot", json={"enabled": False})
    assert studio.scheduler().enabled is False


def test_auto_fix_needs_an_error(client):
    assert client.post("/api/workspaces/active/auto-fix").status_code == 409
