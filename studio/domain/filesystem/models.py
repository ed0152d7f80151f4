"""File tree domain models.

The workspace document is a tree of folders and files. Pydantic's
discriminated union on ``type`` keeps the persisted JSON shape
(``{"type": "folder", "children": {...}}``) identical to what the preview
and the model prompts expect.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from studio.domain.types import SEPARATOR


class FileNode(BaseModel):
    """A text file. Files are never mutated in place, only replaced."""

    type: Literal["file"] = "file"
    content: str = ""

    model_config = {"frozen": True}


class FolderNode(BaseModel):
    """A folder mapping child names to nodes.

    Names are unique among siblings by construction (dict keys) and may not
    contain the path separator.
    """

    type: Literal["folder"] = "folder"
    children: dict[str, "Node"] = Field(default_factory=dict)

    @field_validator("children")
    @classmethod
    def names_are_single_segments(cls, children: dict[str, "Node"]) -> dict[str, "Node"]:
        for name in children:
            if not name or SEPARATOR in name:
                raise ValueError(f"Invalid node name: {name!r}")
        return children

    def shallow_copy(self) -> "FolderNode":
        """Return a new folder sharing this folder's child nodes."""
        return self.model_copy(update={"children": dict(self.children)})


Node = Annotated[Union[FileNode, FolderNode], Field(discriminator="type")]

FolderNode.model_rebuild()


def empty_tree() -> FolderNode:
    """Return a new, empty root folder."""
    return FolderNode()
