"""DoubleEngine exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic object for rich error
information. Configuration-time errors abort double construction; call-time
errors surface to the caller of the intercepted method exactly like any
other exception; verification errors are produced by explicit finalization.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic


class DoubleError(Exception):
    """Base exception for all DoubleEngine errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize DoubleError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


# ============================================================================
# CONFIGURATION-TIME ERRORS
# ============================================================================


class DoubleConfigurationError(DoubleError):
    """Invalid surface, build option or behavior configuration.

    Raised before a double is exercised. Never silently degraded.
    """


class UnknownMethodError(DoubleConfigurationError):
    """Configuration or call references an operation the double does not expose."""


class MethodConflictError(DoubleConfigurationError):
    """An additional method collides with a method already on the surface."""


class IncompatibleSurfaceError(DoubleConfigurationError):
    """Surfaces cannot be merged.

    Raised when two surfaces declare the same method name with different
    signatures, or when their Python types cannot share one subclass.
    """


class InvalidReturnValueError(DoubleConfigurationError):
    """A configured return value does not satisfy the method's return type."""


class InvalidConfigurationError(DoubleConfigurationError):
    """A build option or behavior argument is malformed."""


class ExpectationOnStubError(DoubleConfigurationError):
    """Expectations were configured on a stub.

    Stubs only return values; build a mock to verify invocations.
    """


class TargetNotFoundError(DoubleConfigurationError):
    """The introspection target could not be located."""


class AmbiguousTargetError(DoubleConfigurationError):
    """The introspection target does not denote a single class."""


# ============================================================================
# CALL-TIME ERRORS
# ============================================================================


class DoubleInvocationError(DoubleError):
    """Failure raised while a double is being exercised."""


class StaticInterceptionError(DoubleInvocationError):
    """A static-scope operation was called on a double.

    Static and class methods cannot be intercepted; the double exposes them
    as operations that always fail.
    """


class UnexpectedInvocationError(DoubleInvocationError):
    """A call exceeded its configured count matcher.

    Raised synchronously at call time. The offending call is still recorded
    in the invocation ledger.
    """


class SequenceExhaustedError(DoubleInvocationError):
    """A consecutive-call rule with the RAISE policy ran out of values."""


class UnresolvableTypeError(DoubleInvocationError):
    """No default value can be produced for a return type.

    The engine never guesses: unions, type variables and unresolved forward
    references must be configured explicitly.
    """


class NoOriginalMethodError(DoubleInvocationError):
    """A call-original rule fired for a method without an implementation."""


class NotADoubleError(DoubleError, TypeError):
    """An object passed to the engine is not a synthesized double."""


# ============================================================================
# VERIFICATION ERRORS
# ============================================================================


class UnsatisfiedExpectationError(DoubleError):
    """A minimum or exact count expectation was not met at finalize."""


class VerificationError(DoubleError):
    """One or more expectations failed verification.

    Aggregates every UnsatisfiedExpectationError reported while verifying a
    scope, so a single test failure lists all of them.

    Attributes:
        failures: Individual errors in the order they were reported
    """

    def __init__(
        self,
        message: str | Diagnostic,
        failures: Sequence[UnsatisfiedExpectationError] = (),
    ) -> None:
        """Initialize VerificationError.

        Args:
            message: Error message string OR Diagnostic object
            failures: Individual unsatisfied expectations
        """
        super().__init__(message)
        self.failures: tuple[UnsatisfiedExpectationError, ...] = tuple(failures)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.failures:
            return base
        lines = [
            f"  - {f.diagnostic.message}" if f.diagnostic else f"  - {f}" for f in self.failures
        ]
        details = "\n".join(lines)
        return f"{base}\n{details}"
