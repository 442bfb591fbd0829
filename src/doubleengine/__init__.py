"""DoubleEngine - test doubles synthesized from method surfaces.

Creates stubs and mocks for classes, ABCs and Protocols. A double subclasses
the doubled type, intercepts every call, answers it from configured
behavior rules (or a generated default), records it in an invocation ledger
and checks it against call-count expectations.

Public API:
    create_stub / create_mock - Doubles with default options
    create_configured_stub - Stub answering named operations with fixed values
    create_stub_for_intersection / create_mock_for_intersection - Doubles of several types
    DoubleBuilder - Fluent builder for doubles with custom options
    control - Configuration and inspection facade of a double
    finalize_all - Unsatisfied expectations of a double
    DoubleScope - Owner of a test's doubles, verified together

Matchers:
    equal_to, identical_to, anything, instance_of, satisfies - Argument constraints
    never, once, exactly, at_least, at_least_once, at_most, any_number_of_times - Call counts

Exceptions:
    DoubleError - Base exception class
    DoubleConfigurationError - Invalid surface, option or behavior
    DoubleInvocationError - Failure while a double is exercised
    VerificationError - Unsatisfied expectations

Submodules:
    doubleengine.surface - Type descriptors, method signatures, surfaces
    doubleengine.introspection - Surfaces from Python classes
    doubleengine.matching - Argument and count matchers
    doubleengine.runtime - Factory, interception core, behaviors, verification
    doubleengine.diagnostics - Error codes, templates and formatting
    doubleengine.pytest_plugin - The `doubles` pytest fixture
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import (
    DoubleConfigurationError,
    DoubleError,
    DoubleInvocationError,
    VerificationError,
)
from .enums import DoubleKind, SequenceExhaustion
from .introspection import describe
from .matching import (
    any_number_of_times,
    anything,
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
from .runtime import (
    BuildConfiguration,
    ConfigurationBuilder,
    DoubleBuilder,
    DoubleController,
    DoubleFactory,
    control,
    create_configured_stub,
    create_mock,
    create_mock_for_intersection,
    create_stub,
    create_stub_for_intersection,
    finalize_all,
    is_double,
)
from .scope import DoubleScope

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("doubleengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BuildConfiguration",
    "ConfigurationBuilder",
    "DoubleBuilder",
    "DoubleConfigurationError",
    "DoubleController",
    "DoubleError",
    "DoubleFactory",
    "DoubleInvocationError",
    "DoubleKind",
    "DoubleScope",
    "SequenceExhaustion",
    "VerificationError",
    "__version__",
    "any_number_of_times",
    "anything",
    "at_least",
    "at_least_once",
    "at_most",
    "control",
    "create_configured_stub",
    "create_mock",
    "create_mock_for_intersection",
    "create_stub",
    "create_stub_for_intersection",
    "describe",
    "equal_to",
    "exactly",
    "finalize_all",
    "identical_to",
    "instance_of",
    "is_double",
    "never",
    "once",
    "satisfies",
]
