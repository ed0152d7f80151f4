"""Error taxonomy.

Path errors are operation-level: the applier records them and moves on.
Payload and stream failures are fatal to a single task, which absorbs them
into its ``error`` status. Storage failures degrade a session to in-memory
operation for the cycle in which they happen.
"""


class StudioError(Exception):
    """Base class for all errors raised by the studio core."""


class PathError(StudioError):
    """A path could not be resolved against a tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path or '/'}")
        self.path = path
        self.reason = reason


class PathNotFound(PathError):
    """A required node (source or intermediate folder) does not exist."""

    def __init__(self, path: str, reason: str = "Path not found") -> None:
        super().__init__(path, reason)


class PathConflict(PathError):
    """A file sits where a folder is required, or vice versa."""

    def __init__(self, path: str, reason: str = "Path conflicts with an existing file") -> None:
        super().__init__(path, reason)


class InvalidPath(PathError):
    """The path is structurally unusable (empty, root, missing)."""

    def __init__(self, path: str, reason: str = "Invalid path") -> None:
        super().__init__(path, reason)


class PayloadParseFailure(StudioError):
    """The structured payload after a marker could not be decoded."""


class StreamFailure(StudioError):
    """The text generation source terminated abnormally."""


class StorageFailure(StudioError):
    """The persistence collaborator failed to load or save."""
