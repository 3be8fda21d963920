"""
Result type for fallible construction paths.

Engine construction may fail (bad viewport, broken clock). Consumers must be
able to keep running with no engine at all, so construction returns a
Result instead of raising and the caller decides how to degrade.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful construction carrying its value."""
    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed construction carrying the error."""
    error: E

    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        # Surface the original error when there is one to re-raise
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]
