"""Workspace models.

A workspace is one project: its file tree and its task history. The
per-workspace UI state is kept separately, the way the editor stores it.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from studio.domain.filesystem import FileNode, FolderNode
from studio.domain.sandbox import PreviewTab
from studio.domain.task import Task

ENTRY_POINT = "src/App.tsx"

STARTER_APP = """// Welcome to Quantum Code!
// Your root component must be named 'App'.
// Try asking the AI for a big idea, like "build an app like Obsidian.md".
// The AI will first create a plan. Approve it, and watch it build!
// Or, enable Auto-Pilot and see what it comes up with on its own.

// React is available globally in the preview, no import needed.
function App() {
  return (
    <div className="p-8 text-center bg-gray-100 h-screen flex flex-col justify-center items-center">
      <h1 className="text-4xl font-bold text-gray-800 mb-4">
        Quantum Code Live Preview
      </h1>
      <p className="text-lg text-gray-600 mb-6">
        Ask the AI on the right to build something!
      </p>
    </div>
  );
}"""


def starter_tree() -> FolderNode:
    """The tree every new workspace starts with."""
    return FolderNode(
        children={"src": FolderNode(children={"App.tsx": FileNode(content=STARTER_APP)})}
    )


class WorkspaceUiState(BaseModel):
    """Per-workspace UI preferences."""

    active_editor_path: str | None = ENTRY_POINT
    preview_tab: PreviewTab = PreviewTab.PREVIEW
    autopilot_enabled: bool = False
    prompt_draft: str = ""


class Workspace(BaseModel):
    """A project: file tree plus task history (newest task first)."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    file_system: FolderNode = Field(default_factory=starter_tree)
    tasks: list[Task] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def new_workspace(name: str = "My First Project") -> Workspace:
    return Workspace(name=name)
