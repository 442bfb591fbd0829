"""Enumerations for DoubleEngine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class TypeKind(StrEnum):
    """Kind tag of a return-type descriptor.

    StrEnum provides automatic string conversion: str(TypeKind.INTEGER) == "integer"
    """

    INTEGER = "integer"
    """Integral scalar: int"""

    FLOAT = "float"
    """Floating point scalar: float"""

    BOOLEAN = "boolean"
    """Boolean scalar: bool"""

    TEXT = "text"
    """Text scalar: str"""

    BYTES = "bytes"
    """Binary scalar: bytes"""

    SEQUENCE = "sequence"
    """Ordered container: list, tuple, Sequence"""

    MAPPING = "mapping"
    """Key/value container: dict, Mapping"""

    SET = "set"
    """Unordered container: set, frozenset, AbstractSet"""

    ITERATOR = "iterator"
    """Lazy producer: Iterator, Generator"""

    ENUM = "enum"
    """Enumeration, answered with its first member"""

    OBJECT = "object"
    """Class or interface instance, answered with a nested double"""

    SELF = "self"
    """typing.Self, answered with the double itself"""

    VOID = "void"
    """No value: None, NoReturn"""

    MIXED = "mixed"
    """Unconstrained: unannotated, Any, object"""

    UNRESOLVED = "unresolved"
    """Ambiguous: unions, type variables, unresolvable forward references"""


class ParameterKind(StrEnum):
    """How a parameter binds call arguments.

    StrEnum provides automatic string conversion: str(ParameterKind.POSITIONAL) == "positional"
    """

    POSITIONAL_ONLY = "positional_only"
    """Parameter before /, never bound from a keyword"""

    POSITIONAL = "positional"
    """Positional-or-keyword parameter"""

    KEYWORD_ONLY = "keyword_only"
    """Parameter after * or *args"""

    VAR_POSITIONAL = "var_positional"
    """*args"""

    VAR_KEYWORD = "var_keyword"
    """**kwargs"""


class DoubleKind(StrEnum):
    """Flavour of a synthesized double.

    StrEnum provides automatic string conversion: str(DoubleKind.MOCK) == "mock"
    """

    STUB = "stub"
    """Returns values only; expectations are rejected"""

    MOCK = "mock"
    """Returns values and verifies attached expectations"""


class SequenceExhaustion(StrEnum):
    """Policy for consecutive-call values once every value has been returned.

    StrEnum provides automatic string conversion: str(SequenceExhaustion.RAISE) == "raise"
    """

    RAISE = "raise"
    """Further calls raise SequenceExhaustedError"""

    REPEAT_LAST = "repeat_last"
    """Further calls keep returning the final value"""


__all__ = [
    "DoubleKind",
    "ParameterKind",
    "SequenceExhaustion",
    "TypeKind",
]
