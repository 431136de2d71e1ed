"""
=============================================================================
RESULT ALGEBRA
=============================================================================

A two-case outcome value: every computation ends in exactly one of

    Success(value)   - the computation produced a value
    Failure(error)   - the computation failed with an error value

Failures are VALUES, not exceptions. Nothing above this layer raises to
signal a domain-level failure; it returns a Failure and lets the combinators
carry it to the edge of the pipeline.

=============================================================================
RAILWAY DIAGRAM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      TWO-TRACK COMPOSITION                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Success ──► chain(f) ──► map(g) ──► chain(h) ──► fold(...)        │
    │                  │                       │            ▲              │
    │                  │ f returns Failure     │            │              │
    │                  ▼                       ▼            │              │
    │   Failure ─────────────────────────────────────────────┘             │
    │                                                                      │
    │   Once on the failure track, chain/map are skipped entirely:        │
    │   the continuation is NEVER called.                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
OPERATORS
=============================================================================

    chain(f)        Success(x) → f(x)            Failure(e) → Failure(e)
    map(f)          Success(x) → Success(f(x))   Failure(e) → Failure(e)
    map_failure(f)  Success(x) → Success(x)      Failure(e) → Failure(f(e))
    or_else(f)      Success(x) → Success(x)      Failure(e) → f(e)
    fold(f, g)      Success(x) → g(x)            Failure(e) → f(e)
    get_or(d)       Success(x) → x               Failure(e) → d

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar


L = TypeVar("L")   # Failure type
R = TypeVar("R")   # Success type
T = TypeVar("T")


class Result(Generic[L, R]):
    """
    Base class of the two result variants.

    Never instantiate Result directly; use Success(x) or Failure(e).
    Exactly one of is_success / is_failure is True.
    """

    __slots__ = ()

    is_success: bool = False
    is_failure: bool = False

    def chain(self, f: Callable[[R], "Result[L, T]"]) -> "Result[L, T]":
        raise NotImplementedError

    def map(self, f: Callable[[R], T]) -> "Result[L, T]":
        raise NotImplementedError

    def map_failure(self, f: Callable[[L], T]) -> "Result[T, R]":
        raise NotImplementedError

    def or_else(self, f: Callable[[L], "Result[T, R]"]) -> "Result[T, R]":
        raise NotImplementedError

    def fold(self, on_failure: Callable[[L], T], on_success: Callable[[R], T]) -> T:
        raise NotImplementedError

    def get_or(self, default: R) -> R:
        raise NotImplementedError


@dataclass(frozen=True)
class Success(Result[L, R]):
    """
    The success variant.

    Example:
        >>> Success(2).map(lambda x: x * 10)
        Success(value=20)
    """

    value: R

    is_success = True
    is_failure = False

    def chain(self, f: Callable[[R], Result[L, T]]) -> Result[L, T]:
        return f(self.value)

    def map(self, f: Callable[[R], T]) -> Result[L, T]:
        return Success(f(self.value))

    def map_failure(self, f: Callable[[L], T]) -> Result[T, R]:
        return self

    def or_else(self, f: Callable[[L], Result[T, R]]) -> Result[T, R]:
        return self

    def fold(self, on_failure: Callable[[L], T], on_success: Callable[[R], T]) -> T:
        return on_success(self.value)

    def get_or(self, default: R) -> R:
        return self.value


@dataclass(frozen=True)
class Failure(Result[L, R]):
    """
    The failure variant.

    chain and map return this same failure untouched and never call
    their argument.
    """

    error: L

    is_success = False
    is_failure = True

    def chain(self, f: Callable[[R], Result[L, T]]) -> Result[L, T]:
        return self

    def map(self, f: Callable[[R], T]) -> Result[L, T]:
        return self

    def map_failure(self, f: Callable[[L], T]) -> Result[T, R]:
        return Failure(f(self.error))

    def or_else(self, f: Callable[[L], Result[T, R]]) -> Result[T, R]:
        return f(self.error)

    def fold(self, on_failure: Callable[[L], T], on_success: Callable[[R], T]) -> T:
        return on_failure(self.error)

    def get_or(self, default: R) -> R:
        return default


def from_nullable(value: Optional[Any]) -> Result[None, Any]:
    """
    Lift an optional value into a Result.

    None becomes Failure(None); anything else (including falsy values
    such as 0 or "") becomes Success(value).
    """
    if value is None:
        return Failure(None)
    return Success(value)
