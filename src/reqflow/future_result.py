"""
=============================================================================
FUTURE RESULT
=============================================================================

A FutureResult is a DEFERRED asynchronous computation that eventually
produces a Result. Building one does nothing; the effect only happens when
run() is awaited.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     LAZY, NOT MEMOIZED                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   fr = FutureResult.of(fetch_user)     # nothing happens yet        │
    │                                                                      │
    │   await fr.run()    ──► fetch_user() runs  ──► Result               │
    │   await fr.run()    ──► fetch_user() runs AGAIN ──► Result          │
    │                                                                      │
    │   Each run() re-invokes the thunk. If the effect is not             │
    │   idempotent, run it once and keep the Result.                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

chain() is what makes middleware short-circuit: when the left side fails,
the continuation is never called, so nothing downstream ever executes.
"""

import inspect
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from .result import Failure, Result, Success


L = TypeVar("L")
R = TypeVar("R")
T = TypeVar("T")

# A value that may or may not need awaiting. Handlers and middleware are
# allowed to be plain functions or coroutines.
MaybeAwaitable = Union[T, Awaitable[T]]


async def resolve(value: MaybeAwaitable[T]) -> T:
    """Await value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class FutureResult(Generic[L, R]):
    """
    Deferred async computation yielding Result[L, R].

    Use the constructors rather than __init__:

        FutureResult.of(thunk)            # thunk: () -> Awaitable[Result]
        FutureResult.succeed(value)
        FutureResult.fail(error)
        FutureResult.from_callable(f, *args)
    """

    __slots__ = ("_effect",)

    def __init__(self, effect: Callable[[], Awaitable[Result[L, R]]]):
        self._effect = effect

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def of(cls, effect: Callable[[], Awaitable[Result[L, R]]]) -> "FutureResult[L, R]":
        return cls(effect)

    @classmethod
    def succeed(cls, value: R) -> "FutureResult[Any, R]":
        async def effect() -> Result[Any, R]:
            return Success(value)
        return cls(effect)

    @classmethod
    def fail(cls, error: L) -> "FutureResult[L, Any]":
        async def effect() -> Result[L, Any]:
            return Failure(error)
        return cls(effect)

    @classmethod
    def from_callable(
        cls,
        f: Callable[..., MaybeAwaitable[Result[L, R]]],
        *args: Any,
    ) -> "FutureResult[L, R]":
        """
        Lift a sync or async function returning a Result.

        f is called on every run(), never at construction time.
        """
        async def effect() -> Result[L, R]:
            return await resolve(f(*args))
        return cls(effect)

    # =========================================================================
    # COMPOSITION
    # =========================================================================

    def chain(self, f: Callable[[R], "FutureResult[L, T]"]) -> "FutureResult[L, T]":
        """
        Sequence two computations.

        On failure of the left side the failure is returned as-is and
        f is not called at all.
        """
        async def effect() -> Result[L, T]:
            result = await self.run()
            if result.is_failure:
                return result
            return await f(result.value).run()
        return FutureResult(effect)

    def map(self, f: Callable[[R], T]) -> "FutureResult[L, T]":
        async def effect() -> Result[L, T]:
            return (await self.run()).map(f)
        return FutureResult(effect)

    def map_failure(self, f: Callable[[L], T]) -> "FutureResult[T, R]":
        async def effect() -> Result[T, R]:
            return (await self.run()).map_failure(f)
        return FutureResult(effect)

    async def fold(self, on_failure: Callable[[L], T], on_success: Callable[[R], T]) -> T:
        result = await self.run()
        return result.fold(on_failure, on_success)

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def run(self) -> Awaitable[Result[L, R]]:
        """Invoke the underlying effect. Re-executes on every call."""
        return self._effect()
