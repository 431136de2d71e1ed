"""
Unit tests for FutureResult.
"""

import pytest

from reqflow.future_result import FutureResult, resolve
from reqflow.result import Failure, Success


def counting(result):
    """A thunk returning result and counting its invocations."""
    calls = {"count": 0}

    async def effect():
        calls["count"] += 1
        return result

    return effect, calls


class TestResolve:
    """Tests for resolve()."""

    @pytest.mark.asyncio
    async def test_plain_value(self):
        assert await resolve(42) == 42

    @pytest.mark.asyncio
    async def test_awaitable(self):
        async def coro():
            return 42
        assert await resolve(coro()) == 42


class TestLaziness:
    """Tests for deferred, non-memoized execution."""

    @pytest.mark.asyncio
    async def test_nothing_runs_at_construction(self):
        """Test building and composing does not invoke the effect."""
        effect, calls = counting(Success(1))

        FutureResult.of(effect).map(lambda x: x + 1).chain(FutureResult.succeed)

        assert calls["count"] == 0

    @pytest.mark.asyncio
    async def test_each_run_reinvokes(self):
        """Test run() is not memoized."""
        effect, calls = counting(Success(1))
        future = FutureResult.of(effect)

        assert await future.run() == Success(1)
        assert await future.run() == Success(1)
        assert calls["count"] == 2

    @pytest.mark.asyncio
    async def test_from_callable_calls_on_run(self):
        """Test from_callable defers the call and accepts sync functions."""
        calls = []

        def f(x):
            calls.append(x)
            return Success(x * 2)

        future = FutureResult.from_callable(f, 21)
        assert calls == []

        assert await future.run() == Success(42)
        assert calls == [21]


class TestComposition:
    """Tests for chain, map, map_failure and fold."""

    @pytest.mark.asyncio
    async def test_chain_success(self):
        future = FutureResult.succeed(2).chain(lambda x: FutureResult.succeed(x + 1))
        assert await future.run() == Success(3)

    @pytest.mark.asyncio
    async def test_chain_skips_continuation_on_failure(self):
        """Test the continuation is never called after a failure."""
        def explode(value):
            raise AssertionError("continuation must not be called")

        future = FutureResult.fail("boom").chain(explode)
        assert await future.run() == Failure("boom")

    @pytest.mark.asyncio
    async def test_chain_failure_from_continuation(self):
        future = FutureResult.succeed(2).chain(lambda x: FutureResult.fail(f"bad {x}"))
        assert await future.run() == Failure("bad 2")

    @pytest.mark.asyncio
    async def test_map(self):
        assert await FutureResult.succeed(2).map(lambda x: x * 10).run() == Success(20)
        assert await FutureResult.fail("e").map(lambda x: x * 10).run() == Failure("e")

    @pytest.mark.asyncio
    async def test_map_failure(self):
        assert await FutureResult.fail("e").map_failure(str.upper).run() == Failure("E")
        assert await FutureResult.succeed(1).map_failure(str.upper).run() == Success(1)

    @pytest.mark.asyncio
    async def test_fold(self):
        """Test fold collapses both tracks."""
        assert await FutureResult.succeed(1).fold(lambda e: "f", lambda v: "s") == "s"
        assert await FutureResult.fail(1).fold(lambda e: "f", lambda v: "s") == "f"

    @pytest.mark.asyncio
    async def test_chained_effects_run_in_order(self):
        """Test each step runs after the previous one completes."""
        order = []

        def step(name):
            async def effect():
                order.append(name)
                return Success(name)
            return FutureResult.of(effect)

        future = step("a").chain(lambda _: step("b")).chain(lambda _: step("c"))
        assert await future.run() == Success("c")
        assert order == ["a", "b", "c"]
