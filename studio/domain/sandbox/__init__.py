"""Sandbox domain - host/surface message protocol for the live preview.

Key Types:
    SandboxMessage - discriminated union of the four wire messages
    ConsoleRelay - surface-side console capture
    ElementPicker, Element - surface-side element picking
    PreviewHost, LogWindow, LogEntry, SelectedElement - host-side state
"""

from .console import CIRCULAR, UNSERIALIZABLE, ConsoleRelay, render_args, render_value
from .host import (
    LogEntry,
    LogLevel,
    LogWindow,
    PreviewHost,
    PreviewTab,
    SelectedElement,
    normalize_level,
)
from .messages import (
    ClearSelectionMessage,
    ConsoleMessage,
    ElementSelectedMessage,
    SandboxMessage,
    ToggleSelectorMessage,
    parse_message,
)
from .picker import (
    PERSISTENT_OUTLINE,
    TRANSIENT_OUTLINE,
    Element,
    ElementPicker,
    compute_selector,
)

__all__ = [
    # Messages
    "SandboxMessage",
    "ConsoleMessage",
    "ElementSelectedMessage",
    "ToggleSelectorMessage",
    "ClearSelectionMessage",
    "parse_message",
    # Surface
    "ConsoleRelay",
    "render_value",
    "render_args",
    "CIRCULAR",
    "UNSERIALIZABLE",
    "Element",
    "ElementPicker",
    "compute_selector",
    "TRANSIENT_OUTLINE",
    "PERSISTENT_OUTLINE",
    # Host
    "PreviewHost",
    "LogWindow",
    "LogEntry",
    "LogLevel",
    "SelectedElement",
    "PreviewTab",
    "normalize_level",
]
