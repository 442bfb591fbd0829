"""Argument constraints and argument matchers.

An ArgumentMatcher decides whether a behavior rule or an expectation
applies to a call. It holds one constraint per positional position and per
keyword; raw values given where a constraint is expected are wrapped in
EqualTo.

Matching rules:
    - No positional constraints configured: any positional arguments match
    - Fewer actual positional arguments than constraints: no match
    - Actual arguments beyond the constrained positions: unconstrained
    - Every keyword constraint requires that keyword to be present

This is the matcher contract verification consumes, not an assertion
library; Satisfies() adapts any predicate.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

__all__ = [
    "ANY_ARGUMENTS",
    "Anything",
    "ArgumentMatcher",
    "Constraint",
    "EqualTo",
    "IdenticalTo",
    "InstanceOf",
    "Satisfies",
    "anything",
    "as_constraint",
    "equal_to",
    "identical_to",
    "instance_of",
    "satisfies",
]


class Constraint(ABC):
    """Predicate over a single argument value."""

    __slots__ = ()

    @abstractmethod
    def matches(self, value: object) -> bool:
        """Whether value satisfies the constraint."""

    @abstractmethod
    def describe(self) -> str:
        """Render the constraint for diagnostics."""


@dataclass(frozen=True, slots=True)
class EqualTo(Constraint):
    """Value compares equal (==) to expected."""

    expected: object

    def matches(self, value: object) -> bool:
        return bool(value == self.expected)

    def describe(self) -> str:
        return repr(self.expected)


@dataclass(frozen=True, slots=True)
class IdenticalTo(Constraint):
    """Value is the expected object (is)."""

    expected: object

    def matches(self, value: object) -> bool:
        return value is self.expected

    def describe(self) -> str:
        return f"identical to {self.expected!r}"


@dataclass(frozen=True, slots=True)
class Anything(Constraint):
    """Any value, including None."""

    def matches(self, value: object) -> bool:
        return True

    def describe(self) -> str:
        return "anything"


@dataclass(frozen=True, slots=True)
class InstanceOf(Constraint):
    """Value is an instance of a type."""

    expected_type: type | tuple[type, ...]

    def matches(self, value: object) -> bool:
        return isinstance(value, self.expected_type)

    def describe(self) -> str:
        if isinstance(self.expected_type, tuple):
            names = " | ".join(t.__qualname__ for t in self.expected_type)
        else:
            names = self.expected_type.__qualname__
        return f"instance of {names}"


@dataclass(frozen=True, slots=True)
class Satisfies(Constraint):
    """Value passes a predicate.

    Exceptions raised by the predicate propagate to the caller.
    """

    predicate: Callable[[object], object]
    description: str = ""

    def matches(self, value: object) -> bool:
        return bool(self.predicate(value))

    def describe(self) -> str:
        if self.description:
            return self.description
        name = getattr(self.predicate, "__name__", type(self.predicate).__name__)
        return f"satisfies {name}"


def equal_to(expected: object) -> EqualTo:
    """Constraint: value == expected."""
    return EqualTo(expected)


def identical_to(expected: object) -> IdenticalTo:
    """Constraint: value is expected."""
    return IdenticalTo(expected)


def anything() -> Anything:
    """Constraint accepting any value."""
    return Anything()


def instance_of(expected_type: type | tuple[type, ...]) -> InstanceOf:
    """Constraint: isinstance(value, expected_type)."""
    return InstanceOf(expected_type)


def satisfies(predicate: Callable[[object], object], description: str = "") -> Satisfies:
    """Constraint: predicate(value) is truthy."""
    return Satisfies(predicate, description)


def as_constraint(value: object) -> Constraint:
    """Wrap a raw value in EqualTo unless it already is a constraint."""
    if isinstance(value, Constraint):
        return value
    return EqualTo(value)


@dataclass(frozen=True, slots=True)
class ArgumentMatcher:
    """Predicate over a call's arguments.

    Attributes:
        positional: One constraint per leading positional argument, or None
            to accept any positional arguments
        keyword: (name, constraint) pairs for keyword arguments
    """

    positional: tuple[Constraint, ...] | None = None
    keyword: tuple[tuple[str, Constraint], ...] = ()

    @classmethod
    def of(cls, *values: object, **keyword_values: object) -> ArgumentMatcher:
        """Build a matcher from raw values and/or constraints.

        Example:
            >>> ArgumentMatcher.of(1, anything(), mode="r").matches((1, "x"), {"mode": "r"})
            True
        """
        return cls(
            positional=tuple(as_constraint(v) for v in values),
            keyword=tuple((name, as_constraint(v)) for name, v in keyword_values.items()),
        )

    @property
    def accepts_any(self) -> bool:
        """Whether this matcher places no constraint at all."""
        return not self.positional and not self.keyword

    def matches(self, args: Sequence[object], kwargs: Mapping[str, object]) -> bool:
        """Whether the call's arguments satisfy every constraint.

        Args:
            args: Normalized positional arguments
            kwargs: Keyword arguments

        Returns:
            True if the matcher accepts the call
        """
        if self.positional is not None:
            if len(args) < len(self.positional):
                return False
            if not all(c.matches(a) for c, a in zip(self.positional, args, strict=False)):
                return False
        for name, constraint in self.keyword:
            if name not in kwargs or not constraint.matches(kwargs[name]):
                return False
        return True

    def describe(self) -> str:
        """Render as "(c1, c2, name=c3)", or "(any arguments)"."""
        if self.accepts_any:
            return "(any arguments)"
        parts = [c.describe() for c in self.positional or ()]
        parts.extend(f"{name}={c.describe()}" for name, c in self.keyword)
        return f"({', '.join(parts)})"


ANY_ARGUMENTS = ArgumentMatcher()
