"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages for double configuration,
interception and verification failures.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorPhase",
]


class ErrorPhase(StrEnum):
    """Lifecycle phase in which a diagnostic is raised.

    Inherits from ``StrEnum`` so that log aggregation receives plain strings
    (``"configuration"``, ``"invocation"``, ...) rather than enum reprs.

    Phases:
        CONFIGURATION: Surface resolution, double synthesis, behavior setup
        INVOCATION: A call routed through the interception core
        VERIFICATION: End-of-use finalization of expectations
    """

    CONFIGURATION = "configuration"
    INVOCATION = "invocation"
    VERIFICATION = "verification"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Surface errors (introspection, merging, unknown members)
        2000-2999: Configuration errors (build options, behavior rules)
        3000-3999: Invocation errors (raised while a double is exercised)
        4000-4999: Verification errors (raised at finalize)
    """

    # Surface errors (1000-1999)
    TARGET_NOT_FOUND = 1001
    TARGET_AMBIGUOUS = 1002
    UNKNOWN_METHOD = 1003
    METHOD_CONFLICT = 1004
    INCOMPATIBLE_SURFACE = 1005

    # Configuration errors (2000-2999)
    INVALID_RETURN_VALUE = 2001
    INVALID_CONFIGURATION = 2002
    EXPECTATION_ON_STUB = 2003
    NOT_A_DOUBLE = 2004

    # Invocation errors (3000-3999)
    STATIC_INTERCEPTION = 3001
    UNEXPECTED_INVOCATION = 3002
    SEQUENCE_EXHAUSTED = 3003
    UNRESOLVABLE_TYPE = 3004
    MAX_DEPTH_EXCEEDED = 3005
    NO_ORIGINAL_METHOD = 3006

    # Verification errors (4000-4999)
    UNSATISFIED_EXPECTATION = 4001
    VERIFICATION_FAILED = 4002


PHASE_BY_CATEGORY: dict[int, ErrorPhase] = {
    1: ErrorPhase.CONFIGURATION,
    2: ErrorPhase.CONFIGURATION,
    3: ErrorPhase.INVOCATION,
    4: ErrorPhase.VERIFICATION,
}


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Provides rich error information for both humans and tooling (test
    reporters, IDE integrations).

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        target: Display name of the doubled type
        method_name: Operation the error concerns
        expected: Expected count, type or value description
        actual: Actual count, type or value description
        arguments: Rendered call arguments (invocation errors)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    target: str | None = None
    method_name: str | None = None
    expected: str | None = None
    actual: str | None = None
    arguments: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    @property
    def phase(self) -> ErrorPhase:
        """Lifecycle phase derived from the code's thousand-range."""
        return PHASE_BY_CATEGORY[self.code.value // 1000]

    def format_error(self) -> str:
        """Format diagnostic in multi-line compiler style.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[UNEXPECTED_INVOCATION]: Repository.fetch() was called 2 time(s), expected exactly 1 time(s)
              --> Repository.fetch
              = arguments: (1,)
              = expected: exactly 1 time(s)
              = actual: 2
              = help: Raise the expected count or remove the extra call

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
