"""Terminal outcome of an API call."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(str, Enum):
    """Why a call failed."""

    NETWORK = "network"
    HTTP_STATUS = "http_status"
    DECODE = "decode"


class ResultError(RuntimeError):
    """Raised by :meth:`Failure.unwrap`."""

    def __init__(self, failure: "Failure") -> None:
        super().__init__(failure.describe())
        self.failure = failure


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def value_or(self, default: Any) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure:
    """A failed call.

    ``status_code`` is set only for :attr:`ErrorKind.HTTP_STATUS`, where
    ``detail`` holds the raw error body text (possibly empty).
    """

    reason: ErrorKind
    detail: str
    status_code: int | None = None

    def __post_init__(self) -> None:
        if (self.reason == ErrorKind.HTTP_STATUS) != (self.status_code is not None):
            raise ValueError("status_code is required for, and only for, HTTP_STATUS failures")

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ResultError(self)

    def value_or(self, default: U) -> U:
        return default

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def describe(self) -> str:
        if self.reason == ErrorKind.HTTP_STATUS:
            head = f"HTTP {self.status_code}"
        elif self.reason == ErrorKind.NETWORK:
            head = "network error"
        else:
            head = "decode error"
        return f"{head}: {self.detail}" if self.detail else head


Result = Union[Success[T], Failure]
