"""FastAPI routes for Studio.

Every route works on one workspace (``/api/workspaces/{workspace_id}/...``);
the special id ``active`` means the active workspace. The ``Studio`` the
routes operate on lives in ``app.state.studio``.
"""

import logging
from collections import deque
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from studio import __version__
from studio.application import Studio, WorkspaceSession
from studio.domain.filesystem import FileNode, find_node, iter_files
from studio.domain.sandbox import LogEntry, SandboxMessage, SelectedElement, parse_message
from studio.domain.shared import Err
from studio.domain.task import Task
from studio.interfaces.api.schemas import (
    AutopilotRequest,
    BatchResponse,
    CreateWorkspaceRequest,
    FileResponse,
    HostStateResponse,
    OperationsRequest,
    PickerRequest,
    SubmitRequest,
    TabRequest,
    UiStateRequest,
    WorkspaceSummary,
    WorkspaceUiState,
    WriteFileRequest,
)

logger = logging.getLogger(__name__)

ACTIVE = "active"


# =============================================================================
# Dependencies
# =============================================================================


def get_studio(request: Request) -> Studio:
    return request.app.state.studio


def get_session(workspace_id: str, studio: Studio = Depends(get_studio)) -> WorkspaceSession:
    session = studio.session(None if workspace_id == ACTIVE else workspace_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Workspace not found: {workspace_id}")
    return session


def _outbox(request: Request, session: WorkspaceSession) -> "deque[SandboxMessage]":
    """Host -> surface messages waiting for the preview to collect them."""
    outboxes: dict[str, deque] = request.app.state.outboxes
    if session.id not in outboxes:
        outbox: deque = deque(maxlen=100)
        session.host.connect(outbox.append)
        outboxes[session.id] = outbox
    return outboxes[session.id]


def _task_or_404(session: WorkspaceSession, task_id: str) -> Task:
    task = session.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return task


router = APIRouter(prefix="/api")


# =============================================================================
# Workspaces
# =============================================================================


@router.get("/workspaces", response_model=list[WorkspaceSummary])
def list_workspaces(studio: Studio = Depends(get_studio)):
    active_id = studio.active_id
    return [
        WorkspaceSummary(
            id=ws.id,
            name=ws.name,
            created_at=ws.created_at,
            task_count=len(ws.tasks),
            active=ws.id == active_id,
        )
        for ws in studio.list_workspaces()
    ]


@router.post("/workspaces", status_code=201)
def create_workspace(req: CreateWorkspaceRequest, studio: Studio = Depends(get_studio)):
    result = studio.create_workspace(req.name)
    if isinstance(result, Err):
        raise HTTPException(status_code=500, detail=result.error)
    return {"id": result.value.id, "name": result.value.name}


@router.delete("/workspaces/{workspace_id}")
def delete_workspace(workspace_id: str, studio: Studio = Depends(get_studio)):
    """Delete a workspace. Deleting the last one is refused with 409."""
    if studio.repository.get(workspace_id) is None:
        raise HTTPException(status_code=404, detail=f"Workspace not found: {workspace_id}")
    result = studio.delete_workspace(workspace_id)
    if isinstance(result, Err):
        raise HTTPException(status_code=409, detail=result.error)
    return {"deleted": workspace_id}


@router.post("/workspaces/{workspace_id}/activate")
def activate_workspace(workspace_id: str, studio: Studio = Depends(get_studio)):
    result = studio.switch_workspace(workspace_id)
    if isinstance(result, Err):
        raise HTTPException(status_code=404, detail=result.error)
    return {"active": workspace_id}


@router.get("/workspaces/{workspace_id}/ui-state", response_model=WorkspaceUiState)
def get_ui_state(session: WorkspaceSession = Depends(get_session)):
    return session.ui_state


@router.patch("/workspaces/{workspace_id}/ui-state", response_model=WorkspaceUiState)
def update_ui_state(req: UiStateRequest, session: WorkspaceSession = Depends(get_session)):
    updated = session.update_ui_state(**req.model_dump(exclude_none=True))
    session.checkpoint()
    return updated


# =============================================================================
# File Tree
# =============================================================================


@router.get("/workspaces/{workspace_id}/tree")
def get_tree(session: WorkspaceSession = Depends(get_session)) -> dict[str, Any]:
    """The whole file tree as stored."""
    return session.tree.model_dump(mode="json")


@router.get("/workspaces/{workspace_id}/files", response_model=list[str])
def list_files(session: WorkspaceSession = Depends(get_session)):
    return [path for path, _ in iter_files(session.tree)]


@router.get("/workspaces/{workspace_id}/files/{path:path}", response_model=FileResponse)
def read_file(path: str, session: WorkspaceSession = Depends(get_session)):
    node = find_node(session.tree, path)
    if not isinstance(node, FileNode):
        raise HTTPException(status_code=404, detail=f"No such file: {path}")
    return FileResponse(path=path, content=node.content)


@router.put("/workspaces/{workspace_id}/files", response_model=BatchResponse)
def write_file(req: WriteFileRequest, session: WorkspaceSession = Depends(get_session)):
    """Direct edit from the code editor."""
    result = session.write_file(req.path, req.content)
    session.checkpoint()
    return BatchResponse.from_result(result)


@router.post("/workspaces/{workspace_id}/operations", response_model=BatchResponse)
def apply_operations(req: OperationsRequest, session: WorkspaceSession = Depends(get_session)):
    """Apply a batch from the file explorer (create, delete, rename)."""
    result = session.apply_batch(req.operations)
    session.checkpoint()
    return BatchResponse.from_result(result)


# =============================================================================
# Tasks
# =============================================================================


@router.get("/workspaces/{workspace_id}/tasks", response_model=list[Task])
def list_tasks(session: WorkspaceSession = Depends(get_session)):
    return session.tasks


@router.get("/workspaces/{workspace_id}/tasks/{task_id}", response_model=Task)
def get_task(task_id: str, session: WorkspaceSession = Depends(get_session)):
    return _task_or_404(session, task_id)


@router.post("/workspaces/{workspace_id}/tasks", response_model=Task, status_code=201)
async def submit_task(
    req: SubmitRequest,
    session: WorkspaceSession = Depends(get_session),
    studio: Studio = Depends(get_studio),
):
    """Start a task and wait for its streaming round to finish.

    Other requests (for example polling the task list) are served while
    the round streams.
    """
    task = await studio.controller(session.id).submit(req.prompt, req.attachment)
    if task is None:
        raise HTTPException(status_code=422, detail="Prompt is empty")
    return task


@router.post("/workspaces/{workspace_id}/tasks/{task_id}/approve", response_model=Task)
def approve_task(
    task_id: str,
    session: WorkspaceSession = Depends(get_session),
    studio: Studio = Depends(get_studio),
):
    _task_or_404(session, task_id)
    result = studio.controller(session.id).approve(task_id)
    if isinstance(result, Err):
        raise HTTPException(status_code=409, detail=result.error)
    return result.value


@router.post("/workspaces/{workspace_id}/tasks/{task_id}/reject", response_model=Task)
def reject_task(
    task_id: str,
    session: WorkspaceSession = Depends(get_session),
    studio: Studio = Depends(get_studio),
):
    _task_or_404(session, task_id)
    result = studio.controller(session.id).reject(task_id)
    if isinstance(result, Err):
        raise HTTPException(status_code=409, detail=result.error)
    return result.value


@router.post("/workspaces/{workspace_id}/tasks/{task_id}/approve-blueprint", response_model=Task)
async def approve_blueprint(
    task_id: str,
    session: WorkspaceSession = Depends(get_session),
    studio: Studio = Depends(get_studio),
):
    _task_or_404(session, task_id)
    result = await studio.controller(session.id).approve_blueprint(task_id)
    if isinstance(result, Err):
        raise HTTPException(status_code=409, detail=result.error)
    return result.value


@router.post("/workspaces/{workspace_id}/auto-fix", response_model=Task)
async def auto_fix(
    session: WorkspaceSession = Depends(get_session),
    studio: Studio = Depends(get_studio),
):
    """Ask the AI to fix the first console error since the last task."""
    task = await studio.controller(session.id).auto_fix()
    if task is None:
        raise HTTPException(status_code=409, detail="No error to fix")
    return task


@router.put("/workspaces/{workspace_id}/autopilot")
async def set_autopilot(
    req: AutopilotRequest,
    session: WorkspaceSession = Depends(get_session),
    studio: Studio = Depends(get_studio),
):
    await studio.set_autopilot(req.enabled, session.id)
    return {"enabled": req.enabled}


# =============================================================================
# Preview Host
# =============================================================================


@router.post("/workspaces/{workspace_id}/sandbox/messages", status_code=202)
def post_sandbox_message(
    message: dict[str, Any],
    request: Request,
    session: WorkspaceSession = Depends(get_session),
):
    """Ingress for messages from the preview surface."""
    _outbox(request, session)
    result = parse_message(message)
    if isinstance(result, Err):
        logger.debug(f"Dropping sandbox message: {result.error}")
        raise HTTPException(status_code=422, detail=result.error)
    session.host.handle(result.value)
    return {"accepted": True}


@router.get("/workspaces/{workspace_id}/sandbox/outbox")
def collect_sandbox_messages(request: Request, session: WorkspaceSession = Depends(get_session)):
    """Host -> surface messages (picker toggles, selection clears), oldest first."""
    outbox = _outbox(request, session)
    messages = [m.model_dump() for m in outbox]
    outbox.clear()
    return messages


@router.get("/workspaces/{workspace_id}/logs", response_model=list[LogEntry])
def get_logs(limit: int | None = None, session: WorkspaceSession = Depends(get_session)):
    """The log window, newest first."""
    return session.host.logs.recent(limit)


@router.delete("/workspaces/{workspace_id}/logs")
def clear_logs(session: WorkspaceSession = Depends(get_session)):
    session.host.logs.clear()
    return {"cleared": True}


@router.get("/workspaces/{workspace_id}/preview", response_model=HostStateResponse)
def get_preview_state(session: WorkspaceSession = Depends(get_session)):
    host = session.host
    return HostStateResponse(
        tab=host.tab,
        picker_armed=host.picker_armed,
        selected=host.selected,
        fixable_error=host.fixable_error,
    )


@router.put("/workspaces/{workspace_id}/preview/tab", response_model=HostStateResponse)
def select_tab(req: TabRequest, session: WorkspaceSession = Depends(get_session)):
    session.host.select_tab(req.tab)
    session.checkpoint()
    return get_preview_state(session)


@router.post("/workspaces/{workspace_id}/picker")
def toggle_picker(
    req: PickerRequest,
    request: Request,
    session: WorkspaceSession = Depends(get_session),
):
    _outbox(request, session)
    return {"armed": session.host.toggle_picker(req.enabled)}


@router.get("/workspaces/{workspace_id}/selection", response_model=SelectedElement | None)
def get_selection(session: WorkspaceSession = Depends(get_session)):
    return session.host.selected


@router.delete("/workspaces/{workspace_id}/selection")
def clear_selection(request: Request, session: WorkspaceSession = Depends(get_session)):
    _outbox(request, session)
    session.host.clear_selection()
    return {"cleared": True}


@router.delete("/workspaces/{workspace_id}/fixable-error")
def dismiss_fixable_error(session: WorkspaceSession = Depends(get_session)):
    session.host.dismiss_fixable_error()
    return {"dismissed": True}


# =============================================================================
# App Factory
# =============================================================================


def create_app(studio: Studio) -> FastAPI:
    """Create the FastAPI application around a studio."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Resume autopilot where it was left on; stop everything on exit."""
        session = studio.session()
        if session is not None and session.ui_state.autopilot_enabled:
            await studio.set_autopilot(True, session.id)
        yield
        await studio.shutdown()

    app = FastAPI(
        title="Quantum Studio",
        description="AI-assisted web app studio",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.studio = studio
    app.state.outboxes = {}

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "Quantum Studio", "version": __version__}

    return app
