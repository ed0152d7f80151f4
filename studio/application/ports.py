"""Ports to the outside world.

The application layer only sees these protocols; infrastructure supplies
the implementations (Ollama/Anthropic text sources, JSON file store).
"""

from collections.abc import AsyncIterator
from typing import Any, Protocol

from pydantic import BaseModel, Field

from studio.domain.shared import Result, StorageFailure


class GenerationRequest(BaseModel):
    """Everything a text source needs for one streaming round.

    Attributes:
        system: System instruction (the response-format contract).
        prompt: The composed prompt, context included.
        images: Base64-encoded JPEG images attached to the prompt.
    """

    system: str
    prompt: str
    images: list[str] = Field(default_factory=list)


class TextSource(Protocol):
    """Streams generated text for a request.

    The iterator is finite and not restartable. Abnormal termination
    surfaces as an exception (implementations raise StreamFailure).
    """

    def generate(self, request: GenerationRequest) -> AsyncIterator[str]: ...


class KeyValueStore(Protocol):
    """Durable storage of JSON-compatible values by key."""

    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> Result[None, StorageFailure]: ...


class InstalledExtensions(Protocol):
    """Names of the extensions the user has installed."""

    def installed(self) -> list[str]: ...
