"""Sandbox wire messages.

Host and preview surface only ever exchange these four shapes,
discriminated by ``type``. Anything arriving over the channel is untrusted
and goes through ``parse_message`` first.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from studio.domain.shared import Err, Ok, Result


class ConsoleMessage(BaseModel):
    """Surface -> host: one console call or uncaught error.

    ``level`` is kept verbatim; the host normalizes unknown levels.
    """

    type: Literal["console"] = "console"
    level: str = "log"
    message: str = ""


class ElementSelectedMessage(BaseModel):
    """Surface -> host: the user clicked an element while picking."""

    type: Literal["element-selected"] = "element-selected"
    selector: str
    text: str = ""


class ToggleSelectorMessage(BaseModel):
    """Host -> surface: arm or disarm the element picker."""

    type: Literal["toggle-selector"] = "toggle-selector"
    enabled: bool


class ClearSelectionMessage(BaseModel):
    """Host -> surface: drop the persistent selection outline."""

    type: Literal["clear-selection"] = "clear-selection"


SandboxMessage = Annotated[
    Union[ConsoleMessage, ElementSelectedMessage, ToggleSelectorMessage, ClearSelectionMessage],
    Field(discriminator="type"),
]

_adapter: TypeAdapter[SandboxMessage] = TypeAdapter(SandboxMessage)


def parse_message(data: Any) -> Result[SandboxMessage, str]:
    """Validate a raw message (a dict, or an already-built message)."""
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return Ok(_adapter.validate_python(data))
    except ValidationError as e:
        return Err(f"Malformed sandbox message: {e.error_count()} error(s)")
