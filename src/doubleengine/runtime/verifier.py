"""Expectation verification for mocks.

An ExpectationVerifier judges the calls of one method of one double
against a CountMatcher. Over-saturation (a call the matcher can never
accept) is reported immediately at call time; under-saturation (too few
calls) is reported by finalize().

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from doubleengine.diagnostics import Diagnostic, ErrorTemplate, UnsatisfiedExpectationError
from doubleengine.matching import ArgumentMatcher, CountMatcher

from .ledger import render_arguments

__all__ = ["ExpectationVerifier", "VerificationFailure"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VerificationFailure:
    """An expectation left unsatisfied at finalize.

    Attributes:
        target: Display name of the doubled type
        method_name: Operation the expectation was set on
        expected: Rendered count matcher
        actual: Number of calls the verifier consumed
        diagnostic: Structured diagnostic for reporting
    """

    target: str
    method_name: str
    expected: str
    actual: int
    diagnostic: Diagnostic

    def to_error(self) -> UnsatisfiedExpectationError:
        """Exception carrying this failure's diagnostic."""
        return UnsatisfiedExpectationError(self.diagnostic)

    def __str__(self) -> str:
        return self.diagnostic.message


class ExpectationVerifier:
    """Per (double, method) call-count expectation.

    Mutability Note:
        Intentionally mutable: count advances on every consumed call and
        the argument matcher may be narrowed while the expectation is
        being configured.

    Attributes:
        target: Display name of the doubled type
        method_name: Verified operation
        count_matcher: Judges the number of calls
        argument_matcher: Restricts which calls count (None = every call)
    """

    __slots__ = ("_count", "argument_matcher", "count_matcher", "method_name", "target")

    def __init__(
        self,
        target: str,
        method_name: str,
        count_matcher: CountMatcher,
        argument_matcher: ArgumentMatcher | None = None,
    ) -> None:
        """Initialize verifier with a zero count."""
        self.target = target
        self.method_name = method_name
        self.count_matcher = count_matcher
        self.argument_matcher = argument_matcher
        self._count = 0

    def __repr__(self) -> str:
        return (
            f"ExpectationVerifier({self.target}.{self.method_name}, "
            f"{self.count_matcher.describe()}, count={self._count})"
        )

    @property
    def count(self) -> int:
        """Number of calls consumed so far."""
        return self._count

    def applies(self, args: tuple[object, ...], kwargs: Mapping[str, object]) -> bool:
        """Whether this verifier counts a call with these arguments."""
        return self.argument_matcher is None or self.argument_matcher.matches(args, kwargs)

    def record_and_check(
        self, args: tuple[object, ...], kwargs: Mapping[str, object]
    ) -> Diagnostic | None:
        """Count a call and check for over-saturation.

        Calls the verifier does not apply to are ignored.

        Returns:
            Diagnostic if the matcher can no longer be satisfied, else None
        """
        if not self.applies(args, kwargs):
            return None
        self._count += 1
        if self.count_matcher.is_satisfiable(self._count):
            return None
        logger.debug(
            "Over-saturated %s.%s: %d call(s), expected %s",
            self.target,
            self.method_name,
            self._count,
            self.count_matcher.describe(),
        )
        return ErrorTemplate.unexpected_invocation(
            self.target,
            self.method_name,
            self.count_matcher.describe(),
            self._count,
            render_arguments(args, kwargs),
        )

    def finalize(self) -> VerificationFailure | None:
        """Check for under-saturation.

        Returns:
            VerificationFailure if the expectation is unmet, else None
        """
        if self.count_matcher.is_satisfied(self._count):
            return None
        expected = self.count_matcher.describe()
        arguments = None
        if self.argument_matcher is not None and not self.argument_matcher.accepts_any:
            arguments = self.argument_matcher.describe()
        return VerificationFailure(
            target=self.target,
            method_name=self.method_name,
            expected=expected,
            actual=self._count,
            diagnostic=ErrorTemplate.unsatisfied_expectation(
                self.target, self.method_name, expected, self._count, arguments
            ),
        )
