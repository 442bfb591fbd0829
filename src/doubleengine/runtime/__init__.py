"""Runtime: synthesis, interception, behaviors and verification of doubles.

Python 3.13+. Zero external dependencies.
"""

from .actions import (
    Action,
    CallOriginal,
    Invocation,
    InvokeCallback,
    ReturnArgument,
    ReturnFromMap,
    ReturnSelf,
    ReturnSequence,
    ReturnValue,
    Throw,
)
from .autovalue import AutoValueGenerator
from .behavior import BehaviorRule, BehaviorTable
from .builder import (
    DoubleBuilder,
    Target,
    create_configured_stub,
    create_mock,
    create_mock_for_intersection,
    create_stub,
    create_stub_for_intersection,
    surface_of,
)
from .configuration import BuildConfiguration, ConfigurationBuilder
from .controller import (
    DoubleController,
    ExpectationBuilder,
    InvocationStubber,
    control,
    finalize_all,
)
from .factory import DoubleFactory, is_double
from .handler import InvocationHandler
from .ledger import InvocationLedger, InvocationRecord
from .verifier import ExpectationVerifier, VerificationFailure

__all__ = [
    "Action",
    "AutoValueGenerator",
    "BehaviorRule",
    "BehaviorTable",
    "BuildConfiguration",
    "CallOriginal",
    "ConfigurationBuilder",
    "DoubleBuilder",
    "DoubleController",
    "DoubleFactory",
    "ExpectationBuilder",
    "ExpectationVerifier",
    "Invocation",
    "InvocationHandler",
    "InvocationLedger",
    "InvocationRecord",
    "InvocationStubber",
    "InvokeCallback",
    "ReturnArgument",
    "ReturnFromMap",
    "ReturnSelf",
    "ReturnSequence",
    "ReturnValue",
    "Target",
    "Throw",
    "VerificationFailure",
    "control",
    "create_configured_stub",
    "create_mock",
    "create_mock_for_intersection",
    "create_stub",
    "create_stub_for_intersection",
    "finalize_all",
    "is_double",
    "surface_of",
]
