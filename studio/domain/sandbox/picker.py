"""Element picker for the preview surface.

The picker is an actor owned by the surface: it holds the armed flag and
the highlighted elements, and only talks to the host through messages.
Elements are compared by identity, never by value.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from studio.domain.sandbox.messages import (
    ClearSelectionMessage,
    ElementSelectedMessage,
    SandboxMessage,
    ToggleSelectorMessage,
)

TRANSIENT_OUTLINE = "2px solid #3b82f6"
PERSISTENT_OUTLINE = "3px solid #f59e0b"


@dataclass(eq=False)
class Element:
    """Minimal element model of the rendered preview document."""

    tag: str
    id: str = ""
    text: str = ""
    children: list["Element"] = field(default_factory=list)
    parent: "Element | None" = field(default=None, repr=False)
    outline: str = ""

    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    def previous_siblings(self) -> Iterator["Element"]:
        if self.parent is None:
            return
        for sibling in self.parent.children:
            if sibling is self:
                return
            yield sibling

    def text_content(self) -> str:
        """Own text followed by all descendant text, like the DOM property."""
        return self.text + "".join(child.text_content() for child in self.children)


def compute_selector(element: Element) -> str:
    """Build a structural CSS selector for ``element``.

    Walks up to the root. An element with an id ends the walk with a
    ``tag#id`` shortcut; otherwise each step is the tag name, disambiguated
    with ``:nth-of-type(n)`` when it is not the first of its type.
    """
    parts: list[str] = []
    current: Element | None = element
    while current is not None:
        selector = current.tag.lower()
        if current.id:
            parts.insert(0, f"{selector}#{current.id.strip().replace(' ', chr(92) + ' ')}")
            break
        nth = 1 + sum(1 for sibling in current.previous_siblings() if sibling.tag.lower() == selector)
        if nth != 1:
            selector += f":nth-of-type({nth})"
        parts.insert(0, selector)
        current = current.parent
    return " > ".join(parts)


class ElementPicker:
    """Surface-side picker state machine.

    States: disarmed / armed. While armed, hovering moves a transient
    outline; clicking reports the element, disarms, and leaves a persistent
    outline that only ``clear-selection`` or disarming removes.
    """

    def __init__(self, send: Callable[[ElementSelectedMessage], None]) -> None:
        self._send = send
        self.armed = False
        self.transient: Element | None = None
        self.persistent: Element | None = None

    @property
    def cursor(self) -> str:
        return "crosshair" if self.armed else "default"

    def handle(self, message: SandboxMessage) -> None:
        """React to a host message; other message types are ignored."""
        if isinstance(message, ToggleSelectorMessage):
            self.armed = message.enabled
            if not self.armed:
                self._clear_transient()
                self._clear_persistent()
        elif isinstance(message, ClearSelectionMessage):
            self._clear_persistent()

    def hover(self, element: Element) -> None:
        if not self.armed or element is self.persistent or element is self.transient:
            return
        self._clear_transient()
        element.outline = TRANSIENT_OUTLINE
        self.transient = element

    def leave(self) -> None:
        if not self.armed:
            return
        self._clear_transient()

    def click(self, element: Element) -> ElementSelectedMessage | None:
        """Pick ``element``. Returns the message sent, or None when disarmed."""
        if not self.armed:
            return None
        message = ElementSelectedMessage(
            selector=compute_selector(element),
            text=element.text_content().strip(),
        )
        self._send(message)
        self._clear_transient()
        self._clear_persistent()
        element.outline = PERSISTENT_OUTLINE
        self.persistent = element
        self.armed = False
        return message

    def _clear_transient(self) -> None:
        if self.transient is not None:
            self.transient.outline = ""
            self.transient = None

    def _clear_persistent(self) -> None:
        if self.persistent is not None:
            self.persistent.outline = ""
            self.persistent = None
