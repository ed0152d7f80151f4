"""Task controller.

Runs the streaming pipeline for a workspace session:

    new task -> compose prompt -> stream chunks through the framer
    (updating the task after every chunk) -> settle -> maybe auto-apply

The controller is the error boundary: a stream or payload failure turns
the task into ``error`` and never propagates to the caller.
"""

import asyncio
import logging
from collections.abc import Sequence

from studio.application.ports import InstalledExtensions, TextSource
from studio.application.prompting import (
    AUTOPILOT_PROMPT,
    AUTOPILOT_TITLE,
    Attachment,
    auto_fix_prompt,
    blueprint_implementation_prompt,
    build_request,
    decorate_user_prompt,
)
from studio.application.session import WorkspaceSession
from studio.domain.shared import Err, Ok, Result, StudioError
from studio.domain.stream import StreamFramer
from studio.domain.task import (
    Task,
    TaskOrigin,
    TaskStreamed,
    approve_blueprint,
    approve_operations,
    fail,
    new_task,
    reject_operations,
    settle,
    stream_update,
)
from studio.global_config import StudioConfig

logger = logging.getLogger(__name__)


class TaskController:
    """Creates tasks and drives their streaming rounds.

    Args:
        session: The workspace session the tasks belong to.
        source: Where generated text comes from.
        extensions: Installed extensions, mentioned in every prompt.
        config: Window and history limits.
    """

    def __init__(
        self,
        session: WorkspaceSession,
        source: TextSource,
        extensions: InstalledExtensions | None = None,
        config: StudioConfig | None = None,
    ) -> None:
        self.session = session
        self._source = source
        self._extensions = extensions
        self._config = config or StudioConfig()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def submit(self, prompt: str, attachment: Attachment | None = None) -> Task | None:
        """Start a user task and run it to the end of its streaming round.

        The picked element (if any) and a text attachment are folded into
        the prompt; an image attachment is sent alongside it.

        Returns:
            The task after the round, or None for a blank prompt.
        """
        if not prompt.strip():
            return None
        session = self.session
        selected = session.host.take_context()
        full_prompt = decorate_user_prompt(prompt, selected, attachment)
        image = attachment.image_payload() if attachment else None

        task, event = new_task(prompt, TaskOrigin.USER)
        with session.lock:
            history = session.tasks
            session.add_task(task)
            session.update_ui_state(prompt_draft="")
        session.emit(event)

        await self._run_round(task.id, full_prompt, [image] if image else [], history)
        return session.get_task(task.id)

    async def autopilot_tick(self) -> Task | None:
        """Start one autopilot task unless one is already running."""
        session = self.session
        with session.lock:
            if session.has_running(TaskOrigin.AUTOPILOT):
                logger.debug("Autopilot task still running, skipping tick")
                return None
            task, event = new_task(AUTOPILOT_TITLE, TaskOrigin.AUTOPILOT)
            history = session.tasks
            session.add_task(task)
        session.emit(event)

        await self._run_round(task.id, AUTOPILOT_PROMPT, [], history)
        return session.get_task(task.id)

    def approve(self, task_id: str) -> Result[Task, str]:
        """Apply a pending batch to the latest tree and complete the task."""
        session = self.session
        with session.lock:
            task = session.get_task(task_id)
            if task is None:
                return Err(f"Task not found: {task_id}")
            result = approve_operations(task)
            if isinstance(result, Err):
                return result
            approved, event = result.value
            operations = task.response.operations if task.response else []
            session.apply_batch(operations, task_id)
            session.update_task(approved)
        session.emit(event)
        session.checkpoint()
        return Ok(approved)

    def reject(self, task_id: str) -> Result[Task, str]:
        """Discard a pending batch. The tree is left alone."""
        session = self.session
        with session.lock:
            task = session.get_task(task_id)
            if task is None:
                return Err(f"Task not found: {task_id}")
            result = reject_operations(task)
            if isinstance(result, Err):
                return result
            rejected, event = result.value
            session.update_task(rejected)
        session.emit(event)
        session.checkpoint()
        return Ok(rejected)

    async def approve_blueprint(self, task_id: str) -> Result[Task, str]:
        """Approve a blueprint and run the implementation round on the same task."""
        session = self.session
        with session.lock:
            task = session.get_task(task_id)
            if task is None:
                return Err(f"Task not found: {task_id}")
            history = session.tasks
            result = approve_blueprint(task)
            if isinstance(result, Err):
                return result
            running, event = result.value
            session.update_task(running)
        session.emit(event)

        prompt = blueprint_implementation_prompt(task.response.blueprint)
        # The build round always waits for confirmation.
        await self._run_round(task_id, prompt, [], history, auto_apply=False)
        return Ok(session.get_task(task_id))

    async def auto_fix(self) -> Task | None:
        """Submit a fix request for the first error seen since the last task."""
        error = self.session.host.fixable_error
        if error is None:
            return None
        return await self.submit(auto_fix_prompt(error))

    # ------------------------------------------------------------------
    # Streaming round
    # ------------------------------------------------------------------

    async def _run_round(
        self,
        task_id: str,
        prompt: str,
        images: Sequence[str],
        history: Sequence[Task],
        auto_apply: bool | None = None,
    ) -> None:
        session = self.session
        config = self._config
        request = build_request(
            prompt,
            images,
            tree=session.tree,
            tasks=history,
            ui_state=session.ui_state,
            logs=session.host.logs.recent(),
            extensions=self._extensions.installed() if self._extensions else [],
            history_limit=config.history_limit,
            log_limit=config.log_prompt_limit,
        )
        framer = StreamFramer()

        try:
            async for chunk in self._source.generate(request):
                frame = framer.feed(chunk)
                with session.lock:
                    task = session.get_task(task_id)
                    if task is None:
                        return
                    session.update_task(stream_update(task, frame))
                session.emit(TaskStreamed(task_id=task_id, content=frame.conversational))

            with session.lock:
                task = session.get_task(task_id)
                if task is None:
                    return
                result = settle(task, framer.frame, auto_apply)
                if isinstance(result, Err):
                    logger.warning(result.error)
                    return
                settled, event = result.value
                session.update_task(settled)
                session.emit(event)
                if event.auto_apply and settled.response:
                    session.apply_batch(settled.response.operations, task_id)
        except asyncio.CancelledError:
            self._fail(task_id, "Task was cancelled.")
            session.checkpoint()
            raise
        except StudioError as e:
            self._fail(task_id, str(e))
        except Exception as e:
            logger.exception(f"Unexpected failure while running task {task_id}")
            self._fail(task_id, str(e) or "An unknown error occurred.")
        session.checkpoint()

    def _fail(self, task_id: str, reason: str) -> None:
        session = self.session
        logger.error(f"Task {task_id} failed: {reason}")
        with session.lock:
            task = session.get_task(task_id)
            if task is None:
                return
            failed, event = fail(task, reason)
            session.update_task(failed)
        session.emit(event)
