"""Behavior actions: what an intercepted call does once a rule is selected.

Each action is one variant of a tagged union. Actions receive an
Invocation describing the call and return the call's result or raise.

    ReturnValue         fixed value
    ReturnArgument      the N-th positional argument
    ReturnSelf          the double itself
    ReturnFromMap       value looked up by the leading arguments
    ReturnSequence      one value per call, in order
    InvokeCallback      result of a function called with the arguments
    Throw               raise a configured exception
    CallOriginal        run the original implementation

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from doubleengine.diagnostics import ErrorTemplate, SequenceExhaustedError
from doubleengine.enums import SequenceExhaustion
from doubleengine.surface import MethodSignature

__all__ = [
    "Action",
    "CallOriginal",
    "Invocation",
    "InvokeCallback",
    "ReturnArgument",
    "ReturnFromMap",
    "ReturnSelf",
    "ReturnSequence",
    "ReturnValue",
    "Throw",
]


@dataclass(frozen=True, slots=True)
class Invocation:
    """A call being answered by an action.

    Attributes:
        double: The double that received the call
        target: Display name of the doubled type
        signature: Signature of the called operation
        args: Normalized positional arguments
        kwargs: Keyword arguments
        fallback: Default resolution (proxy target, else auto-generated value)
        call_original: Runs the original implementation
    """

    double: object
    target: str
    signature: MethodSignature
    args: tuple[object, ...]
    kwargs: Mapping[str, object]
    fallback: Callable[[], object]
    call_original: Callable[[], object]

    @property
    def method_name(self) -> str:
        """Name of the called operation."""
        return self.signature.name


class Action(ABC):
    """Base class of all behavior actions."""

    __slots__ = ()

    @abstractmethod
    def perform(self, invocation: Invocation) -> object:
        """Answer the call."""

    def configured_values(self) -> tuple[object, ...]:
        """Values this action may return verbatim (checked against the return type)."""
        return ()

    def fresh(self) -> Action:
        """Equivalent action for a copied double; stateless actions return self."""
        return self


@dataclass(frozen=True, slots=True)
class ReturnValue(Action):
    """Return a fixed value."""

    value: object

    def perform(self, invocation: Invocation) -> object:
        return self.value

    def configured_values(self) -> tuple[object, ...]:
        return (self.value,)


@dataclass(frozen=True, slots=True)
class ReturnArgument(Action):
    """Return the positional argument at `index` (None if the call has fewer)."""

    index: int

    def perform(self, invocation: Invocation) -> object:
        if self.index < len(invocation.args):
            return invocation.args[self.index]
        return None


@dataclass(frozen=True, slots=True)
class ReturnSelf(Action):
    """Return the double itself (fluent interfaces)."""

    def perform(self, invocation: Invocation) -> object:
        return invocation.double


@dataclass(frozen=True, slots=True)
class ReturnFromMap(Action):
    """Return the value of the first row whose leading arguments match.

    Each row is (arg_1, ..., arg_n, value); a row matches when the call has
    at least n positional arguments and the first n compare equal. A call no
    row matches falls through to the default resolution.
    """

    rows: tuple[tuple[object, ...], ...]

    def perform(self, invocation: Invocation) -> object:
        for row in self.rows:
            keys = row[:-1]
            if len(invocation.args) >= len(keys) and invocation.args[: len(keys)] == keys:
                return row[-1]
        return invocation.fallback()

    def configured_values(self) -> tuple[object, ...]:
        return tuple(row[-1] for row in self.rows)


class ReturnSequence(Action):
    """Return one configured value per call, in order.

    Once every value has been returned the exhaustion policy applies:
    RAISE raises SequenceExhaustedError, REPEAT_LAST keeps returning the
    final value.

    Mutability Note:
        Holds a cursor advanced on every perform(); not frozen.
    """

    __slots__ = ("_cursor", "exhausted", "values")

    def __init__(
        self,
        values: Sequence[object],
        exhausted: SequenceExhaustion = SequenceExhaustion.RAISE,
    ) -> None:
        """Initialize with the values to return and the exhaustion policy."""
        self.values: tuple[object, ...] = tuple(values)
        self.exhausted = exhausted
        self._cursor = 0

    def __repr__(self) -> str:
        return f"ReturnSequence(values={self.values!r}, exhausted={self.exhausted!s})"

    @property
    def remaining(self) -> int:
        """Values not yet returned."""
        return max(len(self.values) - self._cursor, 0)

    def perform(self, invocation: Invocation) -> object:
        if self._cursor < len(self.values):
            value = self.values[self._cursor]
            self._cursor += 1
            return value
        if self.exhausted is SequenceExhaustion.REPEAT_LAST and self.values:
            return self.values[-1]
        raise SequenceExhaustedError(
            ErrorTemplate.sequence_exhausted(
                invocation.target, invocation.method_name, len(self.values)
            )
        )

    def configured_values(self) -> tuple[object, ...]:
        return self.values

    def fresh(self) -> ReturnSequence:
        return ReturnSequence(self.values, self.exhausted)


@dataclass(frozen=True, slots=True)
class InvokeCallback(Action):
    """Return callback(*args, **kwargs); its exceptions propagate unwrapped."""

    callback: Callable[..., object]

    def perform(self, invocation: Invocation) -> object:
        return self.callback(*invocation.args, **invocation.kwargs)


@dataclass(frozen=True, slots=True)
class Throw(Action):
    """Raise a configured exception verbatim.

    An exception class is instantiated without arguments on each call.
    """

    error: BaseException | type[BaseException]

    def perform(self, invocation: Invocation) -> object:
        raise self.error


@dataclass(frozen=True, slots=True)
class CallOriginal(Action):
    """Run the original implementation (or the proxy target's method)."""

    def perform(self, invocation: Invocation) -> object:
        return invocation.call_original()
