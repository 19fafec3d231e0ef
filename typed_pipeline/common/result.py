"""Two-variant result container returned by every pipeline stage.

    result = load_config("settings.txt", reader=reader)
    if isinstance(result, Err):
        ...  # result.error is one of the ERROR_KINDS
    else:
        ...  # result.value is a Config
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class UnwrapError(RuntimeError):
    """Raised when the wrong variant of a Result is read."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self):
        raise UnwrapError(f"unwrap_err() called on Ok({self.value!r})")

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return fn(self.value)

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise UnwrapError(f"unwrap() called on Err({self.error!r})")

    def unwrap_err(self) -> E:
        return self.error

    def and_then(self, fn: Callable) -> "Err[E]":
        # Later stages never run once an error exists.
        return self

    def map(self, fn: Callable) -> "Err[E]":
        return self


Result = Union[Ok[T], Err[E]]
