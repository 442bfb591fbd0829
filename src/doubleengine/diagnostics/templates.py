"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]

# Unknown-method diagnostics list at most this many known operations in the hint.
_MAX_LISTED_METHODS: int = 10


def _qualified(target: str, method_name: str) -> str:
    return f"{target}.{method_name}()"


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This provides:
        - Testable error messages
        - Consistent formatting
        - Documentation of all error cases
    """

    # ------------------------------------------------------------------
    # Surface errors
    # ------------------------------------------------------------------

    @staticmethod
    def target_not_found(target: str, reason: str) -> Diagnostic:
        """Introspection target could not be imported or located.

        Args:
            target: Dotted path or display name of the target
            reason: Underlying lookup failure

        Returns:
            Diagnostic for TARGET_NOT_FOUND
        """
        msg = f"Target '{target}' not found: {reason}"
        return Diagnostic(
            code=DiagnosticCode.TARGET_NOT_FOUND,
            message=msg,
            hint="Pass the class object itself or a fully qualified 'package.module.Class' path",
            target=target,
        )

    @staticmethod
    def target_ambiguous(target: str, found: str) -> Diagnostic:
        """Introspection target is not a class.

        Args:
            target: Dotted path or display name of the target
            found: Description of what was found instead

        Returns:
            Diagnostic for TARGET_AMBIGUOUS
        """
        msg = f"Target '{target}' does not denote a class (found {found})"
        return Diagnostic(
            code=DiagnosticCode.TARGET_AMBIGUOUS,
            message=msg,
            hint="Doubles are synthesized from classes, ABCs or Protocols",
            target=target,
            actual=found,
        )

    @staticmethod
    def unknown_method(target: str, method_name: str, known: Iterable[str]) -> Diagnostic:
        """Operation is not part of the double's surface.

        Args:
            target: Display name of the doubled type
            method_name: The unknown operation name
            known: Operations that are available

        Returns:
            Diagnostic for UNKNOWN_METHOD
        """
        names = sorted(known)
        listed = ", ".join(names[:_MAX_LISTED_METHODS])
        if len(names) > _MAX_LISTED_METHODS:
            listed += ", ..."
        msg = f"Method '{method_name}' is not an operation of {target}"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_METHOD,
            message=msg,
            hint=f"Available operations: {listed}" if names else "The surface has no operations",
            target=target,
            method_name=method_name,
        )

    @staticmethod
    def method_conflict(target: str, method_name: str) -> Diagnostic:
        """Additional method already exists on the surface.

        Args:
            target: Display name of the doubled type
            method_name: The duplicated operation name

        Returns:
            Diagnostic for METHOD_CONFLICT
        """
        msg = f"Additional method '{method_name}' already exists on {target}"
        return Diagnostic(
            code=DiagnosticCode.METHOD_CONFLICT,
            message=msg,
            hint="Use only_methods() to intercept existing operations",
            target=target,
            method_name=method_name,
        )

    @staticmethod
    def incompatible_signatures(method_name: str, first: str, second: str) -> Diagnostic:
        """Two merged surfaces declare one name with different signatures.

        Args:
            method_name: The colliding operation name
            first: Rendered signature from the first surface
            second: Rendered signature from the second surface

        Returns:
            Diagnostic for INCOMPATIBLE_SURFACE
        """
        msg = f"Method '{method_name}' has incompatible signatures: {first} vs {second}"
        return Diagnostic(
            code=DiagnosticCode.INCOMPATIBLE_SURFACE,
            message=msg,
            hint="Intersected interfaces must agree on shared method signatures",
            method_name=method_name,
            expected=first,
            actual=second,
        )

    @staticmethod
    def incompatible_bases(target: str, reason: str) -> Diagnostic:
        """Python types of the surface cannot share one subclass.

        Args:
            target: Display name of the merged surface
            reason: TypeError message from class creation

        Returns:
            Diagnostic for INCOMPATIBLE_SURFACE
        """
        msg = f"Cannot synthesize a double for {target}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.INCOMPATIBLE_SURFACE,
            message=msg,
            hint="Intersect interfaces (ABCs or Protocols) rather than unrelated concrete classes",
            target=target,
        )

    # ------------------------------------------------------------------
    # Configuration errors
    # ------------------------------------------------------------------

    @staticmethod
    def invalid_return_value(
        target: str, method_name: str, expected: str, value: object
    ) -> Diagnostic:
        """Configured return value does not satisfy the return type.

        Args:
            target: Display name of the doubled type
            method_name: Operation being configured
            expected: Rendered return type descriptor
            value: The rejected value

        Returns:
            Diagnostic for INVALID_RETURN_VALUE
        """
        received = type(value).__name__
        msg = (
            f"Return value {value!r} of type {received} is not compatible with "
            f"{_qualified(target, method_name)} -> {expected}"
        )
        return Diagnostic(
            code=DiagnosticCode.INVALID_RETURN_VALUE,
            message=msg,
            hint="Configure a value of the declared return type, or use will_return_callback()",
            target=target,
            method_name=method_name,
            expected=expected,
            actual=received,
        )

    @staticmethod
    def invalid_configuration(message: str, hint: str | None = None) -> Diagnostic:
        """Malformed build option or behavior argument.

        Args:
            message: What is wrong
            hint: How to fix it

        Returns:
            Diagnostic for INVALID_CONFIGURATION
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_CONFIGURATION,
            message=message,
            hint=hint,
        )

    @staticmethod
    def expectation_on_stub(target: str) -> Diagnostic:
        """Expectations configured on a stub.

        Args:
            target: Display name of the doubled type

        Returns:
            Diagnostic for EXPECTATION_ON_STUB
        """
        msg = f"Stub of {target} does not support invocation expectations"
        return Diagnostic(
            code=DiagnosticCode.EXPECTATION_ON_STUB,
            message=msg,
            hint="Use create_mock() or DoubleBuilder.get_mock() to verify calls",
            target=target,
        )

    @staticmethod
    def not_a_double(value: object) -> Diagnostic:
        """Object is not a synthesized double.

        Args:
            value: The offending object

        Returns:
            Diagnostic for NOT_A_DOUBLE
        """
        received = type(value).__name__
        msg = f"Object of type {received} is not a double"
        return Diagnostic(
            code=DiagnosticCode.NOT_A_DOUBLE,
            message=msg,
            hint="Pass an object created by create_stub(), create_mock() or DoubleFactory",
            actual=received,
        )

    # ------------------------------------------------------------------
    # Invocation errors
    # ------------------------------------------------------------------

    @staticmethod
    def static_interception(target: str, method_name: str) -> Diagnostic:
        """Static-scope operation called on a double.

        Args:
            target: Display name of the doubled type
            method_name: The static operation

        Returns:
            Diagnostic for STATIC_INTERCEPTION
        """
        msg = f"Static operation {_qualified(target, method_name)} cannot be intercepted"
        return Diagnostic(
            code=DiagnosticCode.STATIC_INTERCEPTION,
            message=msg,
            hint="Call the original class directly, or inject the collaborator as an instance",
            target=target,
            method_name=method_name,
        )

    @staticmethod
    def unexpected_invocation(
        target: str,
        method_name: str,
        expected: str,
        actual: int,
        arguments: str,
    ) -> Diagnostic:
        """Call exceeded its count matcher.

        Args:
            target: Display name of the doubled type
            method_name: The over-called operation
            expected: Rendered count matcher
            actual: Count including the offending call
            arguments: Rendered arguments of the offending call

        Returns:
            Diagnostic for UNEXPECTED_INVOCATION
        """
        msg = f"{_qualified(target, method_name)} was called {actual} time(s), expected {expected}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_INVOCATION,
            message=msg,
            hint="Raise the expected count or remove the extra call",
            target=target,
            method_name=method_name,
            expected=expected,
            actual=str(actual),
            arguments=arguments,
        )

    @staticmethod
    def sequence_exhausted(target: str, method_name: str, length: int) -> Diagnostic:
        """Consecutive-call values exhausted under the RAISE policy.

        Args:
            target: Display name of the doubled type
            method_name: Operation being called
            length: Number of configured values

        Returns:
            Diagnostic for SEQUENCE_EXHAUSTED
        """
        msg = (
            f"{_qualified(target, method_name)} was called more than the "
            f"{length} consecutive value(s) configured"
        )
        return Diagnostic(
            code=DiagnosticCode.SEQUENCE_EXHAUSTED,
            message=msg,
            hint="Configure more values or pass exhausted=SequenceExhaustion.REPEAT_LAST",
            target=target,
            method_name=method_name,
            expected=str(length),
        )

    @staticmethod
    def unresolvable_type(type_name: str, reason: str) -> Diagnostic:
        """No default value for a return type.

        Args:
            type_name: Rendered type descriptor
            reason: Why no default exists

        Returns:
            Diagnostic for UNRESOLVABLE_TYPE
        """
        msg = f"Cannot generate a default value for type '{type_name}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.UNRESOLVABLE_TYPE,
            message=msg,
            hint="Configure an explicit return value for this method",
            expected=type_name,
        )

    @staticmethod
    def max_depth_exceeded(max_depth: int) -> Diagnostic:
        """Nesting depth limit exceeded.

        Args:
            max_depth: The configured limit

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Check for self-referencing return types walked in a loop",
            expected=str(max_depth),
        )

    @staticmethod
    def no_original_method(target: str, method_name: str) -> Diagnostic:
        """Call-original rule has no implementation to call.

        Args:
            target: Display name of the doubled type
            method_name: Operation being called

        Returns:
            Diagnostic for NO_ORIGINAL_METHOD
        """
        msg = f"{_qualified(target, method_name)} has no original implementation to call"
        return Diagnostic(
            code=DiagnosticCode.NO_ORIGINAL_METHOD,
            message=msg,
            hint="Abstract, protocol and additional methods have no original body",
            target=target,
            method_name=method_name,
        )

    # ------------------------------------------------------------------
    # Verification errors
    # ------------------------------------------------------------------

    @staticmethod
    def unsatisfied_expectation(
        target: str,
        method_name: str,
        expected: str,
        actual: int,
        arguments: str | None = None,
    ) -> Diagnostic:
        """Minimum or exact count expectation not met.

        Args:
            target: Display name of the doubled type
            method_name: The under-called operation
            expected: Rendered count matcher
            actual: Number of matching calls
            arguments: Rendered argument matcher (if any)

        Returns:
            Diagnostic for UNSATISFIED_EXPECTATION
        """
        msg = (
            f"Expectation failed for {_qualified(target, method_name)}: "
            f"expected {expected}, called {actual} time(s)"
        )
        return Diagnostic(
            code=DiagnosticCode.UNSATISFIED_EXPECTATION,
            message=msg,
            hint="Exercise the code path that should call this method, or relax the expectation",
            target=target,
            method_name=method_name,
            expected=expected,
            actual=str(actual),
            arguments=arguments,
        )

    @staticmethod
    def verification_failed(failure_count: int, double_count: int) -> Diagnostic:
        """Aggregate verification failure for a scope.

        Args:
            failure_count: Number of unsatisfied expectations
            double_count: Number of doubles verified

        Returns:
            Diagnostic for VERIFICATION_FAILED
        """
        msg = (
            f"{failure_count} expectation(s) unsatisfied across "
            f"{double_count} double(s)"
        )
        return Diagnostic(
            code=DiagnosticCode.VERIFICATION_FAILED,
            message=msg,
            actual=str(failure_count),
        )
