"""Invocation-count matchers.

A CountMatcher judges how many times an operation was called. It answers
two questions:

    is_satisfiable(count): can the expectation still be met after `count`
        calls? False means over-saturation, reported synchronously at the
        offending call.
    is_satisfied(count): is the expectation met at end-of-use? False means
        under-saturation, reported by finalize.

Never and AnyCount never fail at finalize; AtMost only fails at call time.

Python 3.13+. Zero external dependencies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from doubleengine.diagnostics import ErrorTemplate, InvalidConfigurationError

__all__ = [
    "AnyCount",
    "AtLeast",
    "AtMost",
    "CountMatcher",
    "Exactly",
    "Never",
    "any_number_of_times",
    "at_least",
    "at_least_once",
    "at_most",
    "exactly",
    "never",
    "once",
]


def _times(n: int) -> str:
    match n:
        case 1:
            return "once"
        case 2:
            return "twice"
        case _:
            return f"{n} times"


class CountMatcher(ABC):
    """Pure predicate over an invocation count."""

    __slots__ = ()

    @abstractmethod
    def is_satisfiable(self, count: int) -> bool:
        """Whether further verification can still succeed after count calls."""

    @abstractmethod
    def is_satisfied(self, count: int) -> bool:
        """Whether the expectation holds at finalize after count calls."""

    @abstractmethod
    def describe(self) -> str:
        """Render for diagnostics (e.g. "exactly twice")."""


@dataclass(frozen=True, slots=True)
class Never(CountMatcher):
    """No call may happen."""

    def is_satisfiable(self, count: int) -> bool:
        return count == 0

    def is_satisfied(self, count: int) -> bool:
        return True

    def describe(self) -> str:
        return "never"


@dataclass(frozen=True, slots=True)
class AnyCount(CountMatcher):
    """Any number of calls, including zero."""

    def is_satisfiable(self, count: int) -> bool:
        return True

    def is_satisfied(self, count: int) -> bool:
        return True

    def describe(self) -> str:
        return "any number of times"


@dataclass(frozen=True, slots=True)
class AtLeast(CountMatcher):
    """At least `minimum` calls."""

    minimum: int

    def __post_init__(self) -> None:
        _validate_count(self.minimum)

    def is_satisfiable(self, count: int) -> bool:
        return True

    def is_satisfied(self, count: int) -> bool:
        return count >= self.minimum

    def describe(self) -> str:
        return f"at least {_times(self.minimum)}"


@dataclass(frozen=True, slots=True)
class AtMost(CountMatcher):
    """No more than `maximum` calls."""

    maximum: int

    def __post_init__(self) -> None:
        _validate_count(self.maximum)

    def is_satisfiable(self, count: int) -> bool:
        return count <= self.maximum

    def is_satisfied(self, count: int) -> bool:
        return True

    def describe(self) -> str:
        return f"at most {_times(self.maximum)}"


@dataclass(frozen=True, slots=True)
class Exactly(CountMatcher):
    """Exactly `expected` calls."""

    expected: int

    def __post_init__(self) -> None:
        _validate_count(self.expected)

    def is_satisfiable(self, count: int) -> bool:
        return count <= self.expected

    def is_satisfied(self, count: int) -> bool:
        return count == self.expected

    def describe(self) -> str:
        return f"exactly {_times(self.expected)}"


def _validate_count(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidConfigurationError(
            ErrorTemplate.invalid_configuration(
                f"Invocation count must be a non-negative integer, got {n!r}"
            )
        )


def never() -> Never:
    """Expect no calls; any call raises immediately."""
    return Never()


def any_number_of_times() -> AnyCount:
    """Accept any number of calls; never fails."""
    return AnyCount()


def at_least_once() -> AtLeast:
    """Expect one or more calls."""
    return AtLeast(1)


def at_least(minimum: int) -> AtLeast:
    """Expect at least `minimum` calls."""
    return AtLeast(minimum)


def at_most(maximum: int) -> AtMost:
    """Allow up to `maximum` calls; the next one raises immediately."""
    return AtMost(maximum)


def once() -> Exactly:
    """Expect exactly one call."""
    return Exactly(1)


def exactly(expected: int) -> Exactly:
    """Expect exactly `expected` calls."""
    return Exactly(expected)
