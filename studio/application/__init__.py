"""Application layer for Quantum Studio.

Orchestrates the domain for live workspaces. Only this layer holds mutable
state (sessions); I/O goes through the ports in ``studio.application.ports``.

Services:
    session - WorkspaceSession, the published tree and task list
    controller - TaskController, the streaming pipeline
    autopilot - AutopilotScheduler, periodic proactive tasks
    sandbox_channel - SandboxChannel, host/surface message queues
    prompting - prompt composition
    studio - Studio, the facade the CLI and API use

Example usage:
    >>> session = WorkspaceSession(new_workspace("Demo"))
    >>> controller = TaskController(session, source)
    >>> task = asyncio.run(controller.submit("add a counter button"))
    >>> task.status
    <TaskStatus.PENDING_CONFIRMATION: 'pending_confirmation'>
"""

from studio.application.autopilot import AutopilotScheduler
from studio.application.controller import TaskController
from studio.application.ports import (
    GenerationRequest,
    InstalledExtensions,
    KeyValueStore,
    TextSource,
)
from studio.application.prompting import Attachment
from studio.application.sandbox_channel import SandboxChannel
from studio.application.session import WorkspaceSession
from studio.application.studio import Studio
from studio.application.workspace import (
    Workspace,
    WorkspaceUiState,
    new_workspace,
    starter_tree,
)

__all__ = [
    # Ports
    "GenerationRequest",
    "TextSource",
    "KeyValueStore",
    "InstalledExtensions",
    # Workspaces
    "Workspace",
    "WorkspaceUiState",
    "new_workspace",
    "starter_tree",
    # Services
    "WorkspaceSession",
    "TaskController",
    "AutopilotScheduler",
    "SandboxChannel",
    "Attachment",
    "Studio",
]
