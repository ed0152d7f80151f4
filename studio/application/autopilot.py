"""Autopilot scheduler.

While enabled, asks the controller for a proactive autopilot task every
``interval`` seconds. A tick waits for its task to settle before the next
interval starts, and the controller itself refuses to start a second
autopilot task while one is running.
"""

import asyncio
import contextlib
import logging

from studio.application.controller import TaskController
from studio.domain.task import Task

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10.0


class AutopilotScheduler:
    """Periodic autopilot driver for one workspace.

    Example:
        scheduler = AutopilotScheduler(controller, interval=10.0)
        scheduler.start()      # needs a running event loop
        ...
        await scheduler.stop()
    """

    def __init__(self, controller: TaskController, interval: float = DEFAULT_INTERVAL) -> None:
        self._controller = controller
        self.interval = interval
        self._runner: asyncio.Task[None] | None = None

    @property
    def enabled(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def start(self) -> None:
        if self.enabled:
            return
        logger.info(f"Autopilot enabled (every {self.interval:g}s)")
        self._runner = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> "asyncio.Task[None] | None":
        """Cancel the loop without waiting for it to finish."""
        runner, self._runner = self._runner, None
        if runner is not None:
            runner.cancel()
        return runner

    async def stop(self) -> None:
        runner = self.cancel()
        if runner is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await runner
        logger.info("Autopilot disabled")

    async def trigger(self) -> Task | None:
        """Run one tick now."""
        return await self._controller.autopilot_tick()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.trigger()
