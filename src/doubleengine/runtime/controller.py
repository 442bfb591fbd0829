"""Double controller: configuration and inspection facade for one double.

The double's own namespace holds only the doubled type's operations, so
configuration goes through a separate controller obtained with control():

    repo = create_mock(Repository)
    control(repo).method("fetch").with_args(1).will_return("x")
    control(repo).expects(once()).method("save")

    service.run(repo)

    control(repo).verify()

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Self

from doubleengine.diagnostics import (
    ErrorTemplate,
    ExpectationOnStubError,
    InvalidConfigurationError,
    InvalidReturnValueError,
    VerificationError,
)
from doubleengine.enums import DoubleKind, SequenceExhaustion
from doubleengine.matching import ANY_ARGUMENTS, ArgumentMatcher, CountMatcher
from doubleengine.surface import MethodSignature, MethodSurfaceDescriptor

from .actions import (
    Action,
    CallOriginal,
    InvokeCallback,
    ReturnArgument,
    ReturnFromMap,
    ReturnSelf,
    ReturnSequence,
    ReturnValue,
    Throw,
)
from .behavior import BehaviorRule
from .configuration import BuildConfiguration
from .handler import InvocationHandler, handler_of
from .ledger import InvocationLedger, InvocationRecord
from .verifier import ExpectationVerifier, VerificationFailure

__all__ = [
    "DoubleController",
    "ExpectationBuilder",
    "InvocationStubber",
    "control",
    "finalize_all",
]

logger = logging.getLogger(__name__)


class InvocationStubber:
    """Fluent configuration of one operation.

    with_args()/with_any_args() select which calls the next rules answer;
    each will_*() call appends one behavior rule and returns the stubber.
    When created through expects(), the argument selection also restricts
    which calls the expectation counts.
    """

    __slots__ = ("_configured", "_handler", "_matcher", "_signature", "_verifier")

    def __init__(
        self,
        handler: InvocationHandler,
        signature: MethodSignature,
        verifier: ExpectationVerifier | None = None,
    ) -> None:
        """Initialize stubber matching any arguments."""
        self._handler = handler
        self._signature = signature
        self._verifier = verifier
        self._matcher = ANY_ARGUMENTS
        self._configured = False

    def __repr__(self) -> str:
        return f"InvocationStubber({self._handler.target}.{self.method_name}{self._matcher.describe()})"

    @property
    def method_name(self) -> str:
        """Configured operation."""
        return self._signature.name

    @property
    def matcher(self) -> ArgumentMatcher:
        """Current argument selection."""
        return self._matcher

    # ------------------------------------------------------------------
    # Argument selection
    # ------------------------------------------------------------------

    def with_args(self, *constraints: object, **keyword_constraints: object) -> Self:
        """Answer only calls whose arguments satisfy these constraints.

        Raw values are compared with ==; pass matchers such as anything() or
        instance_of() for looser checks.

        Raises:
            InvalidConfigurationError: If a behavior was already configured
        """
        return self._select(ArgumentMatcher.of(*constraints, **keyword_constraints))

    def with_any_args(self) -> Self:
        """Answer every call (default)."""
        return self._select(ANY_ARGUMENTS)

    def _select(self, matcher: ArgumentMatcher) -> Self:
        if self._configured:
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration(
                    f"Arguments for {self._handler.target}.{self.method_name}() "
                    "must be selected before configuring a behavior",
                    "Call with_args() before will_*()",
                )
            )
        self._matcher = matcher
        if self._verifier is not None:
            self._verifier.argument_matcher = None if matcher.accepts_any else matcher
        return self

    # ------------------------------------------------------------------
    # Behaviors
    # ------------------------------------------------------------------

    def will(self, action: Action) -> Self:
        """Append a rule running an arbitrary action.

        Raises:
            InvalidReturnValueError: If a value the action returns does not
                satisfy the operation's return type
        """
        for value in action.configured_values():
            self._check_return(value)
        self._handler.add_rule(self.method_name, BehaviorRule(self._matcher, action))
        self._configured = True
        return self

    def will_return(self, value: object) -> Self:
        """Return a fixed value."""
        return self.will(ReturnValue(value))

    def will_return_argument(self, index: int) -> Self:
        """Return the positional argument at index."""
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration(
                    f"Argument index must be a non-negative integer, got {index!r}"
                )
            )
        return self.will(ReturnArgument(index))

    def will_return_self(self) -> Self:
        """Return the double itself."""
        return self.will(ReturnSelf())

    def will_return_map(self, rows: Iterable[Sequence[object]]) -> Self:
        """Return values looked up by the leading arguments.

        Args:
            rows: (arg_1, ..., arg_n, value) tuples; calls no row matches
                fall through to the default resolution
        """
        table = tuple(tuple(row) for row in rows)
        for row in table:
            if not row:
                raise InvalidConfigurationError(
                    ErrorTemplate.invalid_configuration(
                        "Return map rows need at least a return value"
                    )
                )
        return self.will(ReturnFromMap(table))

    def will_return_on_consecutive_calls(
        self,
        *values: object,
        exhausted: SequenceExhaustion = SequenceExhaustion.RAISE,
    ) -> Self:
        """Return one value per call, in order."""
        if not values:
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration("Consecutive calls need at least one value")
            )
        return self.will(ReturnSequence(values, SequenceExhaustion(exhausted)))

    def will_return_callback(self, callback: Callable[..., object]) -> Self:
        """Return callback(*args, **kwargs)."""
        if not callable(callback):
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration(f"Callback {callback!r} is not callable")
            )
        return self.will(InvokeCallback(callback))

    def will_raise(self, error: BaseException | type[BaseException]) -> Self:
        """Raise an exception instance or class."""
        valid = isinstance(error, BaseException) or (
            isinstance(error, type) and issubclass(error, BaseException)
        )
        if not valid:
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration(f"{error!r} is not an exception")
            )
        return self.will(Throw(error))

    def will_call_original(self) -> Self:
        """Run the original implementation (or the proxy target's)."""
        return self.will(CallOriginal())

    def _check_return(self, value: object) -> None:
        descriptor = self._signature.return_type
        if not descriptor.accepts(value):
            raise InvalidReturnValueError(
                ErrorTemplate.invalid_return_value(
                    self._handler.target, self.method_name, descriptor.describe(), value
                )
            )


class ExpectationBuilder:
    """Result of DoubleController.expects(); names the expected operation."""

    __slots__ = ("_count", "_handler")

    def __init__(self, handler: InvocationHandler, count: CountMatcher) -> None:
        """Initialize with the count the expectation will require."""
        self._handler = handler
        self._count = count

    def method(self, name: str) -> InvocationStubber:
        """Attach the expectation to an operation.

        Raises:
            UnknownMethodError: If the double does not intercept name
        """
        signature = self._handler.signature(name)
        verifier = ExpectationVerifier(self._handler.target, name, self._count)
        self._handler.add_verifier(verifier)
        return InvocationStubber(self._handler, signature, verifier)


class DoubleController:
    """Configuration and inspection facade bound to one double.

    Attributes:
        double: The controlled double
    """

    __slots__ = ("_handler", "double")

    def __init__(self, double: object) -> None:
        """Bind to a double.

        Raises:
            NotADoubleError: If double was not created by DoubleFactory
        """
        self._handler = handler_of(double)
        self.double = double

    def __repr__(self) -> str:
        return f"DoubleController({self.double!r})"

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def kind(self) -> DoubleKind:
        """STUB or MOCK."""
        return self._handler.kind

    @property
    def surface(self) -> MethodSurfaceDescriptor:
        """Surface the double was built from."""
        return self._handler.surface

    @property
    def configuration(self) -> BuildConfiguration:
        """Build options the double was built with."""
        return self._handler.config

    @property
    def depth(self) -> int:
        """Nesting depth (0 for doubles built by test code)."""
        return self._handler.depth

    @property
    def exposed_methods(self) -> frozenset[str]:
        """Names of intercepted operations."""
        return frozenset(self._handler.exposed)

    @property
    def ledger(self) -> InvocationLedger:
        """Every call recorded on the double."""
        return self._handler.ledger

    def invocations(self, method_name: str | None = None) -> tuple[InvocationRecord, ...]:
        """Recorded calls, of one operation or all, in call order."""
        if method_name is None:
            return self._handler.ledger.records
        return self._handler.ledger.for_method(method_name)

    def call_count(self, method_name: str | None = None) -> int:
        """Number of recorded calls, of one operation or in total."""
        return self._handler.ledger.count(method_name)

    def rules_for(self, method_name: str) -> tuple[BehaviorRule, ...]:
        """Behavior rules of one operation in evaluation order."""
        return self._handler.table.rules_for(method_name)

    @property
    def verifiers(self) -> tuple[ExpectationVerifier, ...]:
        """Attached expectations in configuration order."""
        return self._handler.verifiers

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def method(self, name: str) -> InvocationStubber:
        """Configure behaviors of an operation.

        Raises:
            UnknownMethodError: If the double does not intercept name
        """
        return InvocationStubber(self._handler, self._handler.signature(name))

    def expects(self, count: CountMatcher) -> ExpectationBuilder:
        """Start an invocation expectation.

        Raises:
            ExpectationOnStubError: If the double is a stub
            InvalidConfigurationError: If count is not a CountMatcher
        """
        if self._handler.kind is DoubleKind.STUB:
            raise ExpectationOnStubError(ErrorTemplate.expectation_on_stub(self._handler.target))
        if not isinstance(count, CountMatcher):
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration(
                    f"Expected a count matcher, got {count!r}",
                    "Use once(), exactly(n), at_least(n), at_most(n), never() or "
                    "any_number_of_times()",
                )
            )
        return ExpectationBuilder(self._handler, count)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def finalize(self) -> list[VerificationFailure]:
        """Report expectations left unsatisfied."""
        return self._handler.finalize()

    def verify(self) -> None:
        """Raise if any expectation is unsatisfied.

        Raises:
            VerificationError: Aggregating every unsatisfied expectation
        """
        failures = self.finalize()
        if failures:
            raise VerificationError(
                ErrorTemplate.verification_failed(len(failures), 1),
                [failure.to_error() for failure in failures],
            )


def control(double: object) -> DoubleController:
    """Controller of a double.

    Raises:
        NotADoubleError: If double was not created by DoubleFactory
    """
    return DoubleController(double)


def finalize_all(double: object) -> list[VerificationFailure]:
    """Unsatisfied expectations of a double, in configuration order."""
    return control(double).finalize()
