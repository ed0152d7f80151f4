import pytest

from studio.domain.shared import Err, Ok, PayloadParseFailure
from studio.domain.stream import BLUEPRINT_MARKER, OPERATIONS_MARKER, classify
from studio.domain.task import (
    TaskOrigin,
    TaskStatus,
    approve_blueprint,
    approve_operations,
    fail,
    new_task,
    reject_operations,
    settle,
    stream_update,
)

OPS = '{"operations": [{"operation": "CREATE_FILE", "path": "a.ts", "content": "x"}]}'
BLUEPRINT = '{"appName": "Notes", "features": [], "styleGuidelines": []}'


def settled(task, buffer):
    result = settle(task, classify(buffer))
    assert isinstance(result, Ok)
    return result.value


def test_new_task_is_running():
    task, event = new_task("build a timer")

    assert task.status == TaskStatus.RUNNING
    assert task.origin == TaskOrigin.USER
    assert event.task_id == task.id
    assert event.prompt == "build a timer"


def test_stream_update_shows_conversation_only():
    task, _ = new_task("x")
    updated = stream_update(task, classify(f"Working on it{OPERATIONS_MARKER}{{"))
    assert updated.response.content == "Working on it"


def test_stream_update_ignores_settled_tasks():
    task, _ = new_task("x")
    done, _ = settled(task, "All done.")
    assert stream_update(done, classify("late text")) is done


def test_plain_reply_completes():
    task, _ = new_task("hello")
    done, event = settled(task, "Hi there!")

    assert done.status == TaskStatus.COMPLETED
    assert done.response.content == "Hi there!"
    assert event.auto_apply is False


def test_user_operations_wait_for_confirmation():
    task, _ = new_task("add a file")
    pending, event = settled(task, f"Adding a.ts.\n{OPERATIONS_MARKER}\n{OPS}")

    assert pending.status == TaskStatus.PENDING_CONFIRMATION
    assert pending.response.content == "Adding a.ts."
    assert pending.response.operations[0].path == "a.ts"
    assert event.auto_apply is False


def test_autopilot_operations_complete_and_auto_apply():
    task, _ = new_task("Proactive AI Step", TaskOrigin.AUTOPILOT)
    done, event = settled(task, f"Improving.\n{OPERATIONS_MARKER}\n{OPS}")

    assert done.status == TaskStatus.COMPLETED
    assert event.auto_apply is True


def test_blueprint_waits_for_approval():
    task, _ = new_task("build a notes app")
    pending, _ = settled(task, f"Here is the plan.\n{BLUEPRINT_MARKER}\n{BLUEPRINT}")

    assert pending.status == TaskStatus.PENDING_BLUEPRINT_APPROVAL
    assert pending.response.blueprint.app_name == "Notes"


def test_bad_payload_raises_parse_failure():
    task, _ = new_task("x")
    with pytest.raises(PayloadParseFailure):
        settle(task, classify(f"oops {OPERATIONS_MARKER} not json"))


def test_settle_requires_running():
    task, _ = new_task("x")
    done, _ = settled(task, "ok")
    assert isinstance(settle(done, classify("again")), Err)


def test_approve_and_reject_complete_the_task():
    task, _ = new_task("x")
    pending, _ = settled(task, f"Change.\n{OPERATIONS_MARKER}\n{OPS}")

    approved = approve_operations(pending)
    rejected = reject_operations(pending)

    assert isinstance(approved, Ok)
    assert approved.value[0].status == TaskStatus.COMPLETED
    assert approved.value[1].operation_count == 1
    assert isinstance(rejected, Ok)
    assert rejected.value[0].status == TaskStatus.COMPLETED
    assert rejected.value[0].response.content == "Change."


def test_approve_from_wrong_state_is_an_error():
    task, _ = new_task("x")
    assert isinstance(approve_operations(task), Err)
    assert isinstance(reject_operations(task), Err)
    assert isinstance(approve_blueprint(task), Err)


def test_approve_blueprint_returns_to_running():
    task, _ = new_task("build")
    pending, _ = settled(task, f"Plan.{BLUEPRINT_MARKER}{BLUEPRINT}")

    result = approve_blueprint(pending)

    assert isinstance(result, Ok)
    running, event = result.value
    assert running.status == TaskStatus.RUNNING
    assert running.id == task.id
    assert event.app_name == "Notes"


def test_fail_keeps_streamed_content():
    task, _ = new_task("x")
    partial = stream_update(task, classify("half an ans"))
    failed, event = fail(partial, "connection reset")

    assert failed.status == TaskStatus.ERROR
    assert failed.error == "connection reset"
    assert failed.response.content == "half an ans"
    assert event.reason == "connection reset"


def test_explicit_auto_apply_overrides_origin():
    reply = f"Building.\n{OPERATIONS_MARKER}\n{OPS}"
    autopilot, _ = new_task("Proactive AI Step", TaskOrigin.AUTOPILOT)
    user, _ = new_task("add a.ts")

    held, held_event = settle(autopilot, classify(reply), auto_apply=False).value
    forced, forced_event = settle(user, classify(reply), auto_apply=True).value

    assert held.status == TaskStatus.PENDING_CONFIRMATION
    assert held_event.auto_apply is False
    assert forced.status == TaskStatus.COMPLETED
    assert forced_event.auto_apply is True


def test_auto_apply_only_flags_operation_batches():
    task, _ = new_task("Proactive AI Step", TaskOrigin.AUTOPILOT)
    _, event = settled(task, f"Plan.\n{BLUEPRINT_MARKER}\n{BLUEPRINT}")

    assert event.auto_apply is False
