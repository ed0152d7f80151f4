import asyncio
import json

import pytest

from studio.application import Studio, TaskController, WorkspaceSession, new_workspace
from studio.domain.stream import BLUEPRINT_MARKER, OPERATIONS_MARKER
from studio.global_config import StudioConfig
from studio.infrastructure import ExtensionRegistry, MemoryStore, WorkspaceRepository


class FakeTextSource:
    """Text source replaying scripted chunk lists, one list per request.

    A chunk that is an exception instance is raised instead of yielded.
    Requests beyond the scripts get an empty response.
    """

    def __init__(self, *scripts):
        self.scripts = [list(script) for script in scripts]
        self.requests = []

    def add(self, *chunks):
        self.scripts.append(list(chunks))

    async def generate(self, request):
        self.requests.append(request)
        script = self.scripts.pop(0) if self.scripts else []
        for chunk in script:
            await asyncio.sleep(0)
            if isinstance(chunk, BaseException):
                raise chunk
            yield chunk


def operations_reply(text, *operations):
    return f"{text}\n{OPERATIONS_MARKER}\n" + json.dumps({"operations": list(operations)})


def blueprint_reply(text, app_name="Tune Deck"):
    blueprint = {
        "appName": app_name,
        "features": [{"title": "Playlists", "description": "Group songs into playlists"}],
        "styleGuidelines": [
            {"category": "Color", "details": "Dark theme", "colors": ["#111827", "#f59e0b"]},
            {"category": "Layout", "details": "Sidebar plus main panel"},
        ],
    }
    return f"{text}\n{BLUEPRINT_MARKER}\n" + json.dumps(blueprint)


def create_file(path, content, description=None):
    op = {"operation": "CREATE_FILE", "path": path, "content": content}
    if description:
        op["description"] = description
    return op


@pytest.fixture(autouse=True)
def studio_home(tmp_path, monkeypatch):
    home = tmp_path / "studio-home"
    monkeypatch.setenv("STUDIO_HOME", str(home))
    return home


@pytest.fixture
def source():
    return FakeTextSource()


@pytest.fixture
def session():
    return WorkspaceSession(new_workspace("Test Project"))


@pytest.fixture
def controller(session, source):
    return TaskController(session, source)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def studio(store, source):
    return Studio(
        repository=WorkspaceRepository(store),
        extensions=ExtensionRegistry(store),
        source=source,
        config=StudioConfig(autopilot_interval=0.01),
    )
