"""Stream framer.

Splits a growing model response into the conversational text the user can
read so far and the structured payload trailing a marker. The buffer is
rescanned from scratch on every chunk, so a marker split across chunk
boundaries is still found.
"""

from dataclasses import dataclass
from enum import Enum

BLUEPRINT_MARKER = "---JSON_BLUEPRINT---"
OPERATIONS_MARKER = "---JSON_OPERATIONS---"


class PayloadKind(str, Enum):
    """Kind of structured payload a response carries after its marker."""

    BLUEPRINT = "blueprint"
    OPERATIONS = "operations"


# Scan order: the blueprint marker wins if both ever appear.
_MARKERS: tuple[tuple[PayloadKind, str], ...] = (
    (PayloadKind.BLUEPRINT, BLUEPRINT_MARKER),
    (PayloadKind.OPERATIONS, OPERATIONS_MARKER),
)


@dataclass(frozen=True)
class Frame:
    """Classification of an accumulated response buffer.

    Attributes:
        conversational: Text before the winning marker (the whole buffer if none).
        kind: Payload kind of the winning marker, or None.
        raw_payload: Text after the winning marker, empty if none.
    """

    conversational: str
    kind: PayloadKind | None = None
    raw_payload: str = ""


def classify(buffer: str) -> Frame:
    """Classify a whole buffer. Pure and idempotent."""
    for kind, marker in _MARKERS:
        index = buffer.find(marker)
        if index != -1:
            return Frame(
                conversational=buffer[:index],
                kind=kind,
                raw_payload=buffer[index + len(marker):],
            )
    return Frame(conversational=buffer)


class StreamFramer:
    """Accumulates chunks and reclassifies the buffer after each one.

    Example:
        framer = StreamFramer()
        framer.feed("hello ---JSON_OPER")
        frame = framer.feed("ATIONS--- {}")
        frame.conversational  # "hello "
        frame.kind            # PayloadKind.OPERATIONS
    """

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._frame = Frame(conversational="")

    @property
    def buffer(self) -> str:
        return "".join(self._chunks)

    @property
    def frame(self) -> Frame:
        return self._frame

    def feed(self, chunk: str) -> Frame:
        """Append a chunk and return the classification of the full buffer."""
        if chunk:
            self._chunks.append(chunk)
            self._frame = classify(self.buffer)
        return self._frame
