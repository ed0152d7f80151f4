"""Storage infrastructure for Quantum Studio.

Key-value stores and the repositories built on them, using Result
monads for explicit error handling.
"""

from studio.infrastructure.storage.json_storage import JsonFileStore, JsonStorage, MemoryStore
from studio.infrastructure.storage.repositories import ExtensionRegistry, WorkspaceRepository

__all__ = [
    "JsonStorage",
    "JsonFileStore",
    "MemoryStore",
    "WorkspaceRepository",
    "ExtensionRegistry",
]
