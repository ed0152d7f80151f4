"""Host side of the sandbox channel.

The host owns the log window, the active preview tab, the picker flag and
the selected-element descriptor. It changes them only in response to
surface messages or explicit host actions.
"""

import logging
from collections import deque
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from studio.domain.sandbox.messages import (
    ClearSelectionMessage,
    ConsoleMessage,
    ElementSelectedMessage,
    SandboxMessage,
    ToggleSelectorMessage,
)

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    LOG = "log"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


def normalize_level(level: str) -> LogLevel:
    """Map a reported console level onto the fixed set; unknown -> log."""
    try:
        return LogLevel(level)
    except ValueError:
        return LogLevel.LOG


class LogEntry(BaseModel):
    """One captured console line."""

    level: LogLevel
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SelectedElement(BaseModel):
    """Descriptor of the element the user picked in the preview."""

    selector: str
    text: str = ""


class PreviewTab(str, Enum):
    PREVIEW = "preview"
    CONSOLE = "console"


class LogWindow:
    """Bounded most-recent-N window of log entries."""

    def __init__(self, size: int = 50) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=size)

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def recent(self, limit: int | None = None) -> list[LogEntry]:
        """Entries newest first, optionally capped at ``limit``."""
        newest_first = list(reversed(self._entries))
        return newest_first if limit is None else newest_first[:limit]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class PreviewHost:
    """Host actor for one preview surface.

    Args:
        window_size: How many log entries to keep.
        send: Delivers host -> surface messages (usually
            ``SandboxChannel.post_to_surface``).
        tab: The tab shown initially.
        on_tab_change: Called with the new tab whenever it changes.
    """

    def __init__(
        self,
        window_size: int = 50,
        send: Callable[[SandboxMessage], None] | None = None,
        tab: PreviewTab = PreviewTab.PREVIEW,
        on_tab_change: Callable[[PreviewTab], None] | None = None,
    ) -> None:
        self.logs = LogWindow(window_size)
        self.tab = tab
        self.picker_armed = False
        self.selected: SelectedElement | None = None
        self.fixable_error: LogEntry | None = None
        self._send = send or (lambda message: None)
        self._on_tab_change = on_tab_change

    def connect(self, send: Callable[[SandboxMessage], None]) -> None:
        self._send = send

    def handle(self, message: SandboxMessage) -> None:
        """Apply one surface -> host message."""
        if isinstance(message, ConsoleMessage):
            self._on_console(message)
        elif isinstance(message, ElementSelectedMessage):
            self.selected = SelectedElement(selector=message.selector, text=message.text)
            self.picker_armed = False
        else:
            logger.debug(f"Host ignoring message of type {message.type}")

    def _on_console(self, message: ConsoleMessage) -> None:
        entry = LogEntry(level=normalize_level(message.level), message=message.message)
        self.logs.append(entry)
        if entry.level == LogLevel.ERROR:
            if self.fixable_error is None:
                self.fixable_error = entry
            self.select_tab(PreviewTab.CONSOLE)

    def toggle_picker(self, enabled: bool | None = None) -> bool:
        """Arm or disarm the surface picker. Flips the flag when ``enabled`` is None."""
        self.picker_armed = (not self.picker_armed) if enabled is None else enabled
        self._send(ToggleSelectorMessage(enabled=self.picker_armed))
        return self.picker_armed

    def clear_selection(self) -> None:
        self.selected = None
        self._send(ClearSelectionMessage())

    def select_tab(self, tab: PreviewTab) -> None:
        if tab == self.tab:
            return
        self.tab = tab
        if self._on_tab_change is not None:
            self._on_tab_change(tab)

    def take_context(self) -> SelectedElement | None:
        """Hand the selection to a new task and reset per-task state.

        Called when a user task is submitted: the selection is consumed,
        the surface highlight is cleared and error tracking restarts.
        """
        selected = self.selected
        self.fixable_error = None
        if selected is not None:
            self.clear_selection()
        return selected

    def dismiss_fixable_error(self) -> None:
        self.fixable_error = None

    def refresh(self) -> None:
        """The surface reloaded with new code: logs and picker start over."""
        self.logs.clear()
        self.picker_armed = False
