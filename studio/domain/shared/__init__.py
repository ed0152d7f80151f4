"""Shared domain utilities.

- Result monad for explicit error handling
- Base domain event infrastructure
- The error taxonomy shared by every layer
"""

from studio.domain.shared.errors import (
    InvalidPath,
    PathConflict,
    PathError,
    PathNotFound,
    PayloadParseFailure,
    StorageFailure,
    StreamFailure,
    StudioError,
)
from studio.domain.shared.events import DomainEvent
from studio.domain.shared.result import Err, Ok, Result, is_err, is_ok, unwrap_or

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "unwrap_or",
    # Domain events
    "DomainEvent",
    # Errors
    "StudioError",
    "PathError",
    "PathNotFound",
    "PathConflict",
    "InvalidPath",
    "PayloadParseFailure",
    "StreamFailure",
    "StorageFailure",
]
