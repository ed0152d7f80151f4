"""Payload decoder.

Turns the raw text that followed a marker into a structured value once the
stream has ended. Models sometimes wrap the JSON in a fenced code block
despite being told not to; the fence is stripped when present. Anything
that still does not decode is a ``PayloadParseFailure``: there is no
partial decoding at the document level.
"""

import json
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from studio.domain.blueprint import Blueprint
from studio.domain.filesystem.operations import FileOperation
from studio.domain.shared import PayloadParseFailure

# First fence to last fence, optional language tag after the opening fence.
_FENCED = re.compile(r"```[\w+-]*\s*(.*?)\s*```", re.DOTALL)


class OperationsPayload(BaseModel):
    """The object the model emits after the operations marker."""

    operations: list[FileOperation] = Field(default_factory=list)

    @field_validator("operations", mode="before")
    @classmethod
    def null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def extract_json_text(raw: str) -> str:
    """Strip surrounding whitespace and, if present, a fenced code block."""
    trimmed = raw.strip()
    match = _FENCED.fullmatch(trimmed)
    if match:
        return match.group(1)
    return trimmed


def _load(raw: str, what: str) -> Any:
    try:
        return json.loads(extract_json_text(raw))
    except json.JSONDecodeError as e:
        raise PayloadParseFailure(f"Failed to parse {what} from AI. {e}") from e


def decode_blueprint(raw: str) -> Blueprint:
    """Decode a blueprint payload.

    Raises:
        PayloadParseFailure: If the text is not a valid blueprint object.
    """
    data = _load(raw, "blueprint")
    try:
        return Blueprint.model_validate(data)
    except ValidationError as e:
        raise PayloadParseFailure(f"Failed to parse blueprint from AI. {e}") from e


def decode_operations(raw: str) -> list[FileOperation]:
    """Decode an operations payload into a batch.

    A missing or null ``operations`` key decodes to an empty batch.

    Raises:
        PayloadParseFailure: If the text is not a valid operations object.
    """
    data = _load(raw, "file operations")
    try:
        return OperationsPayload.model_validate(data).operations
    except ValidationError as e:
        raise PayloadParseFailure(f"Failed to parse file operations from AI. {e}") from e
