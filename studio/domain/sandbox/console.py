"""Console relay for the preview surface.

Every console call made inside the surface is rendered to a single string
and forwarded to the host as a ``console`` message. Rendering never raises:
cycles become ``[Circular]`` and anything JSON cannot express becomes
``[Unserializable Object]``.
"""

import json
import traceback
from collections.abc import Callable
from typing import Any

from studio.domain.sandbox.messages import ConsoleMessage

CIRCULAR = "[Circular]"
UNSERIALIZABLE = "[Unserializable Object]"


def _guard(value: Any, seen: set[int]) -> Any:
    if isinstance(value, dict | list | tuple | set):
        if id(value) in seen:
            return CIRCULAR
        seen.add(id(value))
        if isinstance(value, dict):
            return {str(key): _guard(item, seen) for key, item in value.items()}
        return [_guard(item, seen) for item in value]
    return value


def render_value(value: Any) -> str:
    """Render one console argument the way the surface reports it."""
    if isinstance(value, BaseException):
        stack = "".join(traceback.format_exception(value)).rstrip()
        return f"Error: {value}\n{stack}"
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if callable(value):
        name = getattr(value, "__name__", "")
        if not name or name == "<lambda>":
            name = "anonymous"
        return f"[Function: {name}]"
    if isinstance(value, dict | list | tuple | set):
        try:
            return json.dumps(_guard(value, set()), indent=2)
        except (TypeError, ValueError):
            return UNSERIALIZABLE
    return str(value)


def render_args(*args: Any) -> str:
    return " ".join(render_value(arg) for arg in args)


class ConsoleRelay:
    """Surface-side console replacement.

    Example:
        relay = ConsoleRelay(channel.post_to_host)
        relay.log("ready", {"count": 3})
        relay.uncaught("x is not defined", "App.tsx", 12)
    """

    def __init__(self, send: Callable[[ConsoleMessage], None]) -> None:
        self._send = send

    def emit(self, level: str, *args: Any) -> ConsoleMessage:
        message = ConsoleMessage(level=level, message=render_args(*args))
        self._send(message)
        return message

    def log(self, *args: Any) -> ConsoleMessage:
        return self.emit("log", *args)

    def debug(self, *args: Any) -> ConsoleMessage:
        return self.emit("debug", *args)

    def info(self, *args: Any) -> ConsoleMessage:
        return self.emit("info", *args)

    def warn(self, *args: Any) -> ConsoleMessage:
        return self.emit("warn", *args)

    def error(self, *args: Any) -> ConsoleMessage:
        return self.emit("error", *args)

    def uncaught(self, message: str, filename: str, lineno: int) -> ConsoleMessage:
        """Report an uncaught error raised while running preview code."""
        return self.emit("error", f"Uncaught Error: {message} at {filename}:{lineno}")

    def unhandled_rejection(self, reason: Any) -> ConsoleMessage:
        """Report a rejected promise nobody handled."""
        return self.emit("error", f"Unhandled Promise Rejection: {render_value(reason)}")
