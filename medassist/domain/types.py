from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Fallible outcome: either a value or an explicit error."""

    ok: bool
    value: T | None = None
    error: E | None = None

    @staticmethod
    def success(v: T) -> "Result[T, E]":
        return Result(ok=True, value=v)

    @staticmethod
    def failure(e: E) -> "Result[T, E]":
        return Result(ok=False, error=e)


@dataclass(frozen=True)
class Degradable(Generic[T]):
    """Fail-soft outcome: the value is always usable.

    `degraded` marks a best-effort value produced on a fallback path;
    `cause` carries the reason that was logged when it happened.
    """

    value: T
    degraded: bool = False
    cause: str | None = None

    @staticmethod
    def exact(v: T) -> "Degradable[T]":
        return Degradable(value=v)

    @staticmethod
    def fallback(v: T, cause: str) -> "Degradable[T]":
        return Degradable(value=v, degraded=True, cause=cause)


Vector = tuple[float, ...]  # 384-d for all-MiniLM-L6-v2; dim is validated at composition
Score = float
