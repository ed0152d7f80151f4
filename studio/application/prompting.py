"""Prompt composition.

Builds the text sent to the model for each streaming round: conversation
history, the full file tree, real-time preview context and the user's
prompt. Everything here is a pure function of its inputs.
"""

import json
from collections.abc import Iterable, Sequence
from typing import Literal

from pydantic import BaseModel

from studio.application.ports import GenerationRequest
from studio.application.workspace import WorkspaceUiState
from studio.domain.blueprint import Blueprint
from studio.domain.filesystem import FolderNode, iter_files
from studio.domain.sandbox import LogEntry, SelectedElement
from studio.domain.stream import BLUEPRINT_MARKER, OPERATIONS_MARKER
from studio.domain.task import Task, TaskStatus

EMPTY_PROJECT = "The project is currently empty.\n"
FIRST_MESSAGE = "This is the first message in the conversation."
NO_LOGS = "No recent console logs."

AUTOPILOT_TITLE = "Proactive AI Step"
AUTOPILOT_PROMPT = f"{AUTOPILOT_TITLE}: Analyze the context and perform the most logical improvement."

SELECTED_TEXT_LIMIT = 100


class Attachment(BaseModel):
    """A file the user attached to a prompt.

    ``data`` is the text for text files, and base64 (optionally a data URL)
    for images.
    """

    kind: Literal["image", "text"]
    name: str
    data: str

    def image_payload(self) -> str | None:
        """Bare base64 image data, or None for text attachments."""
        if self.kind != "image":
            return None
        return self.data.split(",", 1)[1] if self.data.startswith("data:") else self.data

SYSTEM_INSTRUCTION = f"""You are "Quantum Architect", the AI software architect built into the Quantum Code IDE.

---
**WORKFLOW: PLAN, THEN PROTOTYPE**

1. PLANNING: For a broad or ambitious idea ("build a music player"), do not write code yet. Reply with an App Blueprint.
2. PROTOTYPING: Once the user approves a blueprint you receive it in a follow-up prompt. Implement it completely. Small incremental requests ("make the button blue", "fix this error") skip planning and go straight to file operations.

---
**BLUEPRINT RESPONSE FORMAT**

1. A short conversational introduction of the plan.
2. A new line with exactly: {BLUEPRINT_MARKER}
3. One JSON object:
   * "appName": a fitting name for the app.
   * "features": an array of objects with "title" and "description".
   * "styleGuidelines": an array of objects with "category" (one of "Color", "Layout", "Typography", "Iconography", "Animation"), "details", and for "Color" only, "colors" (hex strings).

---
**CODING RESPONSE FORMAT**

1. A conversational explanation of the changes.
2. A new line with exactly: {OPERATIONS_MARKER}
3. One JSON object with an "operations" array. Each operation has:
   * "operation": one of CREATE_FILE, UPDATE_FILE, DELETE_FILE, CREATE_FOLDER, DELETE_FOLDER, RENAME_FILE, RENAME_FOLDER
   * "path": slash-separated path from the project root
   * "content": full file text for CREATE_FILE and UPDATE_FILE
   * "newPath": destination for RENAME_FILE and RENAME_FOLDER
   * "description": one plain sentence describing this operation
   Do not add markdown fences or any text after the JSON.

---
**AUTONOMOUS MODE**

When the prompt says "{AUTOPILOT_TITLE}", pick the single most valuable improvement and deliver it as file operations.

---
**ENVIRONMENT**

* The live preview renders only src/App.tsx.
* React is global; do not import it.
* The preview cannot resolve module imports. Keep components in their own files, and also inline their code into src/App.tsx so the preview runs.
"""


def serialize_file_system(tree: FolderNode) -> str:
    """Every file, depth first in name order, wrapped in start/end markers."""
    sections = [
        f"[START OF FILE: {path}]\n{node.content}\n[END OF FILE: {path}]\n\n"
        for path, node in iter_files(tree)
    ]
    if not sections:
        return EMPTY_PROJECT
    return "Here is the current file structure and content:\n\n" + "".join(sections)


def _history_entry(task: Task) -> str:
    lines = [f"User: {task.prompt}"]
    response = task.response
    if response is not None:
        lines.append(f"Assistant: {response.content}")
        if task.status == TaskStatus.PENDING_CONFIRMATION and response.operations:
            lines.append("(System note: My proposed changes are currently pending user approval.)")
        elif task.status == TaskStatus.PENDING_BLUEPRINT_APPROVAL and response.blueprint:
            lines.append(
                "(System note: I have proposed a blueprint and am waiting for user "
                "approval before proceeding to code.)"
            )
    if task.status == TaskStatus.ERROR and task.error:
        lines.append(
            f'(System note: I encountered an error. Error message: "{task.error}". '
            "I must not repeat this mistake.)"
        )
    return "\n".join(lines)


def serialize_task_history(tasks: Sequence[Task], limit: int = 10) -> str:
    """Summarize recent tasks, oldest first.

    Args:
        tasks: Task list, newest first (the order a workspace keeps).
        limit: How many tasks with a response or error to include.
    """
    relevant = [t for t in tasks if t.prompt and (t.response is not None or t.error)][:limit]
    if not relevant:
        return FIRST_MESSAGE
    summary = "\n\n".join(_history_entry(task) for task in reversed(relevant))
    return (
        "For context, here is the conversation history for this session. "
        "Pay close attention to system notes about errors or pending actions:\n"
        f"{summary}\n\n---\n"
    )


def serialize_logs(logs: Sequence[LogEntry], limit: int = 20) -> str:
    """Render log lines, newest first as given."""
    if not logs:
        return NO_LOGS
    return "\n".join(
        f"[{log.level.value.upper()} at {log.timestamp.isoformat()}] {log.message}"
        for log in logs[:limit]
    )


def compose_prompt(
    prompt: str,
    tree: FolderNode,
    tasks: Sequence[Task] = (),
    ui_state: WorkspaceUiState | None = None,
    logs: Sequence[LogEntry] = (),
    extensions: Iterable[str] = (),
    history_limit: int = 10,
    log_limit: int = 20,
) -> str:
    """Assemble the full prompt for one streaming round."""
    state = (ui_state or WorkspaceUiState()).model_dump(mode="json")
    real_time = (
        "\n---\n"
        "**REAL-TIME CONTEXT:**\n"
        f"- Current UI State: {json.dumps(state)}\n"
        "- Recent Console Logs:\n"
        f"{serialize_logs(logs, log_limit)}\n"
        "---\n"
    )
    installed = list(extensions)
    extension_note = ""
    if installed:
        extension_note = (
            f"\n\n(Context: User has these extensions installed: [{', '.join(installed)}]. "
            "Acknowledge and use them where appropriate.)"
        )
    return (
        serialize_task_history(tasks, history_limit)
        + serialize_file_system(tree)
        + real_time
        + f"\nUser prompt: {prompt}"
        + extension_note
    )


def build_request(prompt: str, images: Sequence[str] = (), **context) -> GenerationRequest:
    """Compose the prompt and wrap it with the system instruction."""
    return GenerationRequest(
        system=SYSTEM_INSTRUCTION,
        prompt=compose_prompt(prompt, **context),
        images=list(images),
    )


def decorate_user_prompt(
    prompt: str,
    selected: SelectedElement | None = None,
    attachment: Attachment | None = None,
) -> str:
    """Prefix the user's prompt with picked-element and attached-file context."""
    decorated = prompt
    if selected is not None:
        decorated = (
            f'Context from selected element (selector: "{selected.selector}", '
            f'text: "{selected.text[:SELECTED_TEXT_LIMIT]}..."): \n\n{decorated}'
        )
    if attachment is not None and attachment.kind == "text":
        decorated = (
            f'Context from attached file "{attachment.name}":\n\n'
            f"{attachment.data}\n\n---\n\n{decorated}"
        )
    return decorated


def blueprint_implementation_prompt(blueprint: Blueprint) -> str:
    payload = json.dumps(blueprint.model_dump(mode="json", by_alias=True), indent=2)
    return (
        "The user has approved this application blueprint. Your task is to implement it "
        "fully. Generate all necessary files and code based on this plan. "
        f"Here is the blueprint:\n\n{payload}"
    )


def auto_fix_prompt(error: LogEntry) -> str:
    return (
        "My application has an error. Here is the console output:\n---\n"
        f"{error.message}\n---\nPlease analyze the current code and fix this error."
    )
