"""Explicit success/failure values for per-element and per-day computations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, Tuple, Type, TypeVar

from .errors import KalaError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[KalaError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: KalaError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        return type(self.error).__name__ if self.error is not None else None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]


def capture(
    fn: Callable[[], T],
    catch: Tuple[Type[KalaError], ...] = (KalaError,),
) -> Result[T]:
    """Run ``fn`` and fold the listed engine errors into a failed ``Result``."""

    try:
        return Result.success(fn())
    except catch as exc:
        return Result.failure(exc)


__all__ = ["Result", "capture"]
