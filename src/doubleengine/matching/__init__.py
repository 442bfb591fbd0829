"""Matchers: argument constraints and invocation-count predicates.

Python 3.13+. Zero external dependencies.
"""

from .arguments import (
    ANY_ARGUMENTS,
    Anything,
    ArgumentMatcher,
    Constraint,
    EqualTo,
    IdenticalTo,
    InstanceOf,
    Satisfies,
    anything,
    as_constraint,
    equal_to,
    identical_to,
    instance_of,
    satisfies,
)
from .counts import (
    AnyCount,
    AtLeast,
    AtMost,
    CountMatcher,
    Exactly,
    Never,
    any_number_of_times,
    at_least,
    at_least_once,
    at_most,
    exactly,
    never,
    once,
)

__all__ = [
    "ANY_ARGUMENTS",
    "AnyCount",
    "Anything",
    "ArgumentMatcher",
    "AtLeast",
    "AtMost",
    "Constraint",
    "CountMatcher",
    "EqualTo",
    "Exactly",
    "IdenticalTo",
    "InstanceOf",
    "Never",
    "Satisfies",
    "any_number_of_times",
    "anything",
    "as_constraint",
    "at_least",
    "at_least_once",
    "at_most",
    "equal_to",
    "exactly",
    "identical_to",
    "instance_of",
    "never",
    "once",
    "satisfies",
]
