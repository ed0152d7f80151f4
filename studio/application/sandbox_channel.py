"""Sandbox channel.

Asynchronous, untrusted message transport between the preview host and
the rendering surface. Each direction is a queue; every message is
validated on the way in and malformed ones are dropped.
"""

import asyncio
import logging
from typing import Any

from studio.domain.sandbox import ElementPicker, PreviewHost, SandboxMessage, parse_message
from studio.domain.shared import Err

logger = logging.getLogger(__name__)


class SandboxChannel:
    """A pair of message queues, host-bound and surface-bound.

    Example:
        channel = SandboxChannel()
        host.connect(channel.post_to_surface)
        relay = ConsoleRelay(channel.post_to_host)
        picker = ElementPicker(channel.post_to_host)
        await channel.run(host, picker)
    """

    def __init__(self) -> None:
        self._to_host: asyncio.Queue[SandboxMessage | None] = asyncio.Queue()
        self._to_surface: asyncio.Queue[SandboxMessage | None] = asyncio.Queue()

    def post_to_host(self, data: Any) -> bool:
        """Queue a surface -> host message. Returns False if it was dropped."""
        return self._post(self._to_host, data, "host")

    def post_to_surface(self, data: Any) -> bool:
        """Queue a host -> surface message. Returns False if it was dropped."""
        return self._post(self._to_surface, data, "surface")

    def _post(self, queue: "asyncio.Queue[SandboxMessage | None]", data: Any, side: str) -> bool:
        result = parse_message(data)
        if isinstance(result, Err):
            logger.debug(f"Dropping message for {side}: {result.error}")
            return False
        queue.put_nowait(result.value)
        return True

    async def run(self, host: PreviewHost, surface: ElementPicker) -> None:
        """Deliver messages to both actors until ``close`` is called."""
        await asyncio.gather(
            self._pump(self._to_host, host.handle),
            self._pump(self._to_surface, surface.handle),
        )

    async def _pump(self, queue: "asyncio.Queue[SandboxMessage | None]", handler) -> None:
        while True:
            message = await queue.get()
            if message is None:
                return
            handler(message)

    def close(self) -> None:
        self._to_host.put_nowait(None)
        self._to_surface.put_nowait(None)

