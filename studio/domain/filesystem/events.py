"""File system domain events."""

from studio.domain.shared.events import DomainEvent


class OperationsApplied(DomainEvent):
    """A batch was applied and the resulting tree published.

    ``task_id`` is empty for direct (non-AI) edits.
    """

    task_id: str = ""
    applied: int
    skipped: list[str] = []
