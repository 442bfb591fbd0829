"""Diagnostic system for DoubleEngine errors.

Provides structured error diagnostics with codes, hints and the exception
hierarchy raised during configuration, invocation and verification.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorPhase
from .errors import (
    AmbiguousTargetError,
    DoubleConfigurationError,
    DoubleError,
    DoubleInvocationError,
    ExpectationOnStubError,
    IncompatibleSurfaceError,
    InvalidConfigurationError,
    InvalidReturnValueError,
    MethodConflictError,
    NoOriginalMethodError,
    NotADoubleError,
    SequenceExhaustedError,
    StaticInterceptionError,
    TargetNotFoundError,
    UnexpectedInvocationError,
    UnknownMethodError,
    UnresolvableTypeError,
    UnsatisfiedExpectationError,
    VerificationError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "AmbiguousTargetError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DoubleConfigurationError",
    "DoubleError",
    "DoubleInvocationError",
    "ErrorPhase",
    "ErrorTemplate",
    "ExpectationOnStubError",
    "IncompatibleSurfaceError",
    "InvalidConfigurationError",
    "InvalidReturnValueError",
    "MethodConflictError",
    "NoOriginalMethodError",
    "NotADoubleError",
    "OutputFormat",
    "SequenceExhaustedError",
    "StaticInterceptionError",
    "TargetNotFoundError",
    "UnexpectedInvocationError",
    "UnknownMethodError",
    "UnresolvableTypeError",
    "UnsatisfiedExpectationError",
    "VerificationError",
]
