"""Matcher tests.

Validates argument constraints, argument matchers and the invocation-count
state machine (satisfiable at call time, satisfied at finalize).
"""

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from doubleengine.diagnostics import InvalidConfigurationError
from doubleengine.matching import (
    ANY_ARGUMENTS,
    ArgumentMatcher,
    CountMatcher,
    EqualTo,
    any_number_of_times,
    anything,
    as_constraint,
    at_least,
    at_least_once,
    at_most,
    equal_to,
    exactly,
    identical_to,
    instance_of,
    never,
    once,
    satisfies,
)
from tests.strategies import call_counts, count_matchers, scalar_values


class TestConstraints:
    """Single-value constraints."""

    def test_equal_to(self) -> None:
        """equal_to compares with ==."""
        assert equal_to([1]).matches([1])
        assert not equal_to([1]).matches([2])
        assert equal_to(1).describe() == "1"

    def test_identical_to(self) -> None:
        """identical_to compares identity."""
        value = [1]
        assert identical_to(value).matches(value)
        assert not identical_to(value).matches([1])

    def test_anything(self) -> None:
        """anything accepts None too."""
        assert anything().matches(None)
        assert anything().describe() == "anything"

    def test_instance_of(self) -> None:
        """instance_of accepts a type or a tuple of types."""
        assert instance_of(int).matches(1)
        assert not instance_of(int).matches("1")
        assert instance_of((int, str)).matches("1")
        assert instance_of((int, str)).describe() == "instance of int | str"

    def test_satisfies(self) -> None:
        """satisfies runs a predicate and describes itself."""

        def is_even(value: object) -> bool:
            return isinstance(value, int) and value % 2 == 0

        assert satisfies(is_even).matches(4)
        assert not satisfies(is_even).matches(3)
        assert satisfies(is_even).describe() == "satisfies is_even"
        assert satisfies(is_even, "an even number").describe() == "an even number"

    def test_as_constraint(self) -> None:
        """Raw values are wrapped; constraints pass through."""
        constraint = anything()
        assert as_constraint(constraint) is constraint
        assert as_constraint(3) == EqualTo(3)


class TestArgumentMatcher:
    """Matching whole calls."""

    def test_positional(self) -> None:
        """Leading arguments are constrained; extras are not."""
        matcher = ArgumentMatcher.of(1)
        assert matcher.matches((1,), {})
        assert matcher.matches((1, 2), {})
        assert not matcher.matches((2,), {})

    def test_fewer_arguments_never_match(self) -> None:
        """A call with fewer arguments than constraints does not match."""
        assert not ArgumentMatcher.of(1, 2).matches((1,), {})

    def test_keywords(self) -> None:
        """Keyword constraints require the keyword to be present."""
        matcher = ArgumentMatcher.of(mode="r")
        assert matcher.matches((), {"mode": "r"})
        assert not matcher.matches((), {"mode": "w"})
        assert not matcher.matches((), {})

    def test_describe(self) -> None:
        """Matchers render their constraints."""
        assert ArgumentMatcher.of(1, anything(), mode="r").describe() == "(1, anything, mode='r')"
        assert ANY_ARGUMENTS.describe() == "(any arguments)"

    def test_accepts_any(self) -> None:
        """Empty matchers place no constraint."""
        assert ANY_ARGUMENTS.accepts_any
        assert ArgumentMatcher.of().accepts_any
        assert not ArgumentMatcher.of(1).accepts_any

    @given(
        st.lists(scalar_values, max_size=6),
        st.dictionaries(st.sampled_from(["a", "b"]), scalar_values, max_size=2),
    )
    def test_any_arguments_matches_everything(
        self, args: list[object], kwargs: dict[str, object]
    ) -> None:
        """ANY_ARGUMENTS accepts every call."""
        event(f"args={len(args)}")
        assert ANY_ARGUMENTS.matches(tuple(args), kwargs)

    @given(st.lists(scalar_values, min_size=1, max_size=6), st.data())
    def test_prefix_constraints_match(self, args: list[object], data: st.DataObject) -> None:
        """Constraining any prefix of a call with its own values matches it."""
        prefix = data.draw(st.integers(min_value=0, max_value=len(args)))
        event(f"prefix={prefix}/{len(args)}")
        matcher = ArgumentMatcher.of(*(identical_to(a) for a in args[:prefix]))
        assert matcher.matches(tuple(args), {})


class TestCountMatchers:
    """Invocation-count predicates."""

    @given(call_counts)
    def test_never(self, count: int) -> None:
        """Never: only zero calls are possible; finalize never fails."""
        assert never().is_satisfiable(count) == (count == 0)
        assert never().is_satisfied(count)

    @given(call_counts)
    def test_any_number(self, count: int) -> None:
        """Any: always possible, always satisfied."""
        assert any_number_of_times().is_satisfiable(count)
        assert any_number_of_times().is_satisfied(count)

    @given(st.integers(min_value=0, max_value=10), call_counts)
    def test_exactly(self, expected: int, count: int) -> None:
        """Exactly(n): over-saturated above n, satisfied only at n."""
        event(f"relation={'below' if count < expected else 'at' if count == expected else 'above'}")
        matcher = exactly(expected)
        assert matcher.is_satisfiable(count) == (count <= expected)
        assert matcher.is_satisfied(count) == (count == expected)

    @given(st.integers(min_value=0, max_value=10), call_counts)
    def test_at_least(self, minimum: int, count: int) -> None:
        """AtLeast(n): never over-saturated, satisfied from n on."""
        matcher = at_least(minimum)
        assert matcher.is_satisfiable(count)
        assert matcher.is_satisfied(count) == (count >= minimum)

    @given(st.integers(min_value=0, max_value=10), call_counts)
    def test_at_most(self, maximum: int, count: int) -> None:
        """AtMost(n): over-saturated above n, never fails at finalize."""
        matcher = at_most(maximum)
        assert matcher.is_satisfiable(count) == (count <= maximum)
        assert matcher.is_satisfied(count)

    @given(count_matchers(), call_counts)
    def test_unsatisfiable_implies_unsatisfiable_later(
        self, matcher: CountMatcher, count: int
    ) -> None:
        """Once over-saturated, more calls never make a matcher satisfiable again."""
        event(f"matcher={type(matcher).__name__}")
        if not matcher.is_satisfiable(count):
            assert not matcher.is_satisfiable(count + 1)

    @pytest.mark.parametrize(
        ("matcher", "text"),
        [
            (never(), "never"),
            (once(), "exactly once"),
            (exactly(2), "exactly twice"),
            (exactly(5), "exactly 5 times"),
            (at_least_once(), "at least once"),
            (at_most(3), "at most 3 times"),
            (any_number_of_times(), "any number of times"),
        ],
    )
    def test_describe(self, matcher: CountMatcher, text: str) -> None:
        """Matchers render for diagnostics."""
        assert matcher.describe() == text

    @pytest.mark.parametrize("bad", [-1, True, 1.5, "2"])
    def test_invalid_counts_rejected(self, bad: object) -> None:
        """Counts must be non-negative integers."""
        with pytest.raises(InvalidConfigurationError):
            exactly(bad)  # type: ignore[arg-type]
