"""
Unit tests for the Result algebra.
"""

import pytest

from reqflow.result import Failure, Result, Success, from_nullable


def explode(value):
    raise AssertionError("continuation must not be called")


class TestSuccess:
    """Tests for the success variant."""

    def test_flags(self):
        """Test exactly one flag is set."""
        result = Success(1)
        assert result.is_success
        assert not result.is_failure

    def test_chain(self):
        """Test chain passes the value to the continuation."""
        assert Success(2).chain(lambda x: Success(x + 1)) == Success(3)
        assert Success(2).chain(lambda x: Failure("nope")) == Failure("nope")

    def test_map(self):
        """Test map transforms the value."""
        assert Success(2).map(lambda x: x * 10) == Success(20)

    def test_map_failure_is_identity(self):
        """Test map_failure leaves a success alone."""
        result = Success(2)
        assert result.map_failure(explode) is result

    def test_or_else_is_identity(self):
        """Test or_else does not call its argument on success."""
        result = Success(2)
        assert result.or_else(explode) is result

    def test_fold(self):
        """Test fold picks the success branch."""
        assert Success(2).fold(lambda e: "failed", lambda v: f"got {v}") == "got 2"

    def test_get_or(self):
        assert Success(0).get_or(99) == 0


class TestFailure:
    """Tests for the failure variant."""

    def test_flags(self):
        """Test exactly one flag is set."""
        result = Failure("boom")
        assert result.is_failure
        assert not result.is_success

    def test_chain_short_circuits(self):
        """Test chain returns the same failure without calling f."""
        result = Failure("boom")
        assert result.chain(explode) is result

    def test_map_short_circuits(self):
        """Test map returns the same failure without calling f."""
        result = Failure("boom")
        assert result.map(explode) is result

    def test_map_failure(self):
        """Test map_failure transforms the error."""
        assert Failure("boom").map_failure(str.upper) == Failure("BOOM")

    def test_or_else_recovers(self):
        """Test or_else can turn a failure into a success."""
        assert Failure("boom").or_else(lambda e: Success(len(e))) == Success(4)

    def test_fold(self):
        """Test fold picks the failure branch."""
        assert Failure("boom").fold(lambda e: f"failed: {e}", explode) == "failed: boom"

    def test_get_or(self):
        assert Failure("boom").get_or(99) == 99


class TestComposition:
    """Tests for pipelines of combinators."""

    def test_first_failure_wins(self):
        """Test a failure in the middle of a chain stops everything after it."""
        calls = []

        def step(name, fail=False):
            def f(value):
                calls.append(name)
                return Failure(name) if fail else Success(value)
            return f

        result = (Success(1)
            .chain(step("a"))
            .chain(step("b", fail=True))
            .chain(step("c")))

        assert result == Failure("b")
        assert calls == ["a", "b"]

    def test_results_are_immutable(self):
        """Test results cannot be mutated in place."""
        result = Success(1)
        with pytest.raises(AttributeError):
            result.value = 2

    def test_results_are_results(self):
        assert isinstance(Success(1), Result)
        assert isinstance(Failure(1), Result)


class TestFromNullable:
    """Tests for from_nullable()."""

    def test_none_is_failure(self):
        assert from_nullable(None) == Failure(None)

    @pytest.mark.parametrize("value", [0, "", [], False, "x"])
    def test_other_values_are_success(self, value):
        """Test falsy values other than None still succeed."""
        assert from_nullable(value) == Success(value)
