"""Result monad for explicit error handling in domain operations.

Domain functions that can fail for expected reasons (a path that does not
resolve, a task in the wrong state for a transition) return a Result instead
of raising. Callers branch on ``isinstance(result, Ok)`` or use the helpers
below.

Example usage:
    >>> result = resolve(tree, FilePath.parse("src/App.tsx"))
    >>> if is_ok(result):
    ...     print(result.value.name)
    App.tsx
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Check if a result is successful."""
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    """Check if a result is an error."""
    return isinstance(result, Err)


def unwrap_or(result: Ok[T] | Err[E], default: T) -> T:
    """Extract the value from a Result, using a default if it's an error.

    Args:
        result: The result to unwrap.
        default: The value to return if result is Err.

    Returns:
        The Ok value if successful, otherwise the default.
    """
    if isinstance(result, Ok):
        return result.value
    return default
