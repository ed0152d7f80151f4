from datetime import UTC, datetime

from studio.application import Attachment, WorkspaceUiState
from studio.application.prompting import (
    EMPTY_PROJECT,
    FIRST_MESSAGE,
    NO_LOGS,
    SYSTEM_INSTRUCTION,
    auto_fix_prompt,
    blueprint_implementation_prompt,
    build_request,
    compose_prompt,
    decorate_user_prompt,
    serialize_file_system,
    serialize_logs,
    serialize_task_history,
)
from studio.domain.blueprint import Blueprint, Feature
from studio.domain.filesystem import FileNode, FileOperation, FileOperationType, FolderNode, empty_tree
from studio.domain.sandbox import LogEntry, LogLevel, SelectedElement
from studio.domain.stream import BLUEPRINT_MARKER, OPERATIONS_MARKER
from studio.domain.task import AssistantResponse, Task, TaskStatus


def make_task(prompt, status=TaskStatus.COMPLETED, content="ok", error=None, **response):
    return Task(
        prompt=prompt,
        status=status,
        response=AssistantResponse(content=content, **response) if content is not None else None,
        error=error,
    )


def test_file_system_serialization_is_sorted():
    tree = FolderNode(
        children={
            "src": FolderNode(children={"b.ts": FileNode(content="B"), "a.ts": FileNode(content="A")}),
        }
    )
    text = serialize_file_system(tree)

    assert text.index("[START OF FILE: src/a.ts]\nA\n[END OF FILE: src/a.ts]") < text.index(
        "[START OF FILE: src/b.ts]"
    )


def test_empty_project():
    assert serialize_file_system(empty_tree()) == EMPTY_PROJECT


def test_history_oldest_first_with_limit():
    tasks = [make_task(f"prompt {i}") for i in range(5, 0, -1)]  # newest first

    text = serialize_task_history(tasks, limit=3)

    assert "prompt 1" not in text
    assert text.index("User: prompt 3") < text.index("User: prompt 4") < text.index("User: prompt 5")


def test_history_system_notes():
    pending_ops = make_task(
        "add file",
        status=TaskStatus.PENDING_CONFIRMATION,
        operations=[FileOperation(operation=FileOperationType.CREATE_FILE, path="a.ts", content="")],
    )
    pending_plan = make_task(
        "plan it",
        status=TaskStatus.PENDING_BLUEPRINT_APPROVAL,
        blueprint=Blueprint(app_name="Plan"),
    )
    failed = make_task("broken", status=TaskStatus.ERROR, content=None, error="bad JSON")

    text = serialize_task_history([failed, pending_plan, pending_ops])

    assert "pending user approval" in text
    assert "waiting for user approval before proceeding to code" in text
    assert 'Error message: "bad JSON"' in text


def test_history_skips_tasks_without_response():
    assert serialize_task_history([make_task("streaming", status=TaskStatus.RUNNING, content=None)]) == FIRST_MESSAGE


def test_logs_format():
    entry = LogEntry(level=LogLevel.WARN, message="slow", timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
    assert serialize_logs([entry]) == "[WARN at 2024-01-02T03:04:05+00:00] slow"
    assert serialize_logs([]) == NO_LOGS


def test_compose_prompt_sections_in_order():
    text = compose_prompt(
        "add a footer",
        FolderNode(children={"App.tsx": FileNode(content="app")}),
        ui_state=WorkspaceUiState(prompt_draft="draft"),
        extensions=["tailwind", "zustand"],
    )

    assert text.startswith(FIRST_MESSAGE)
    assert text.index("[START OF FILE: App.tsx]") < text.index("**REAL-TIME CONTEXT:**")
    assert '"prompt_draft": "draft"' in text
    assert "User prompt: add a footer" in text
    assert text.endswith("[tailwind, zustand]. Acknowledge and use them where appropriate.)")


def test_build_request_carries_images():
    request = build_request("look at this", ["aGVsbG8="], tree=empty_tree())

    assert request.system == SYSTEM_INSTRUCTION
    assert request.images == ["aGVsbG8="]
    assert BLUEPRINT_MARKER in request.system and OPERATIONS_MARKER in request.system


def test_decorate_with_selection_and_text_attachment():
    selected = SelectedElement(selector="button:nth-of-type(2)", text="x" * 150)
    attachment = Attachment(kind="text", name="notes.md", data="# Notes")

    text = decorate_user_prompt("make it pop", selected, attachment)

    assert text.startswith('Context from attached file "notes.md":\n\n# Notes')
    assert f'text: "{"x" * 100}..."' in text
    assert "x" * 101 not in text
    assert text.endswith("make it pop")


def test_image_attachment_payload():
    image = Attachment(kind="image", name="shot.jpg", data="data:image/jpeg;base64,AAAA")

    assert image.image_payload() == "AAAA"
    assert decorate_user_prompt("fix layout", attachment=image) == "fix layout"
    assert Attachment(kind="text", name="a", data="b").image_payload() is None


def test_blueprint_prompt_uses_wire_names():
    blueprint = Blueprint(app_name="Notes", features=[Feature(title="Tags", description="Tag notes")])
    text = blueprint_implementation_prompt(blueprint)

    assert '"appName": "Notes"' in text
    assert '"styleGuidelines": []' in text


def test_auto_fix_prompt():
    error = LogEntry(level=LogLevel.ERROR, message="Uncaught Error: boom")
    assert "Uncaught Error: boom" in auto_fix_prompt(error)
