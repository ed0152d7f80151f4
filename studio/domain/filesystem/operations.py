"""Structured file operations.

Operations are the only way the model changes a workspace. They are
immutable value objects; a batch is a plain list applied in order.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FileOperationType(str, Enum):
    """Kinds of structural change an operation can request."""

    CREATE_FILE = "CREATE_FILE"
    UPDATE_FILE = "UPDATE_FILE"
    DELETE_FILE = "DELETE_FILE"
    CREATE_FOLDER = "CREATE_FOLDER"
    DELETE_FOLDER = "DELETE_FOLDER"
    RENAME_FILE = "RENAME_FILE"
    RENAME_FOLDER = "RENAME_FOLDER"


class FileOperation(BaseModel):
    """A single requested change to the file tree.

    ``new_path`` is serialized as ``newPath`` to match the wire format the
    model is instructed to produce.
    """

    operation: FileOperationType
    path: str
    content: str | None = None
    new_path: str | None = Field(default=None, alias="newPath")
    description: str | None = None

    model_config = {"frozen": True, "populate_by_name": True}

    def summary(self) -> str:
        """One-line human readable form, e.g. ``RENAME_FILE a.ts -> b.ts``."""
        target = f" -> {self.new_path}" if self.new_path else ""
        return f"{self.operation.value} {self.path}{target}"
