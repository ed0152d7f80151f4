"""Base domain event infrastructure.

Domain events are immutable records of something that happened to a
workspace: a task settling, a batch being applied, a log line arriving.
Sessions hand them to subscribers (CLI printers, API listeners) so the
outer layers never poll the core.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Each event has a unique ID and the UTC time it occurred.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}
