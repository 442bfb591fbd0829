"""Invocation ledger: append-only record of calls made to one double.

Records are never reordered, mutated or removed. Argument snapshots share
references with the caller by default; with argument cloning enabled they
are deep copies taken at call time, so later mutation by the code under
test does not rewrite history.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

__all__ = ["InvocationLedger", "InvocationRecord", "render_arguments"]


def render_arguments(args: Sequence[object], kwargs: Mapping[str, object]) -> str:
    """Render call arguments as "(1, 'x', mode='r')"."""
    parts = [repr(a) for a in args]
    parts.extend(f"{name}={value!r}" for name, value in kwargs.items())
    return f"({', '.join(parts)})"


@dataclass(frozen=True, slots=True)
class InvocationRecord:
    """One recorded call.

    Attributes:
        method_name: Operation that was called
        args: Positional arguments (normalized against the signature)
        kwargs: Keyword arguments (read-only view)
        sequence: Position in the ledger, starting at 0
    """

    method_name: str
    args: tuple[object, ...]
    kwargs: Mapping[str, object]
    sequence: int

    def render(self) -> str:
        """Render as "#0 fetch(1)"."""
        return f"#{self.sequence} {self.method_name}{render_arguments(self.args, self.kwargs)}"


class InvocationLedger:
    """Append-only ordered sequence of InvocationRecord.

    Supports sequence-like introspection:
        - len(ledger): Number of recorded calls
        - ledger[i]: Record by sequence number
        - iter(ledger): Records in call order

    Example:
        >>> ledger = InvocationLedger()
        >>> ledger.append("fetch", (1,), {}).sequence
        0
        >>> ledger.count("fetch")
        1
    """

    __slots__ = ("_records",)

    def __init__(self) -> None:
        """Initialize empty ledger."""
        self._records: list[InvocationRecord] = []

    def append(
        self,
        method_name: str,
        args: Sequence[object],
        kwargs: Mapping[str, object],
        *,
        clone: bool = False,
    ) -> InvocationRecord:
        """Record a call.

        Args:
            method_name: Operation that was called
            args: Positional arguments
            kwargs: Keyword arguments
            clone: Deep-copy the arguments instead of sharing references

        Returns:
            The appended record
        """
        if clone:
            args = copy.deepcopy(tuple(args))
            kwargs = copy.deepcopy(dict(kwargs))
        record = InvocationRecord(
            method_name=method_name,
            args=tuple(args),
            kwargs=MappingProxyType(dict(kwargs)),
            sequence=len(self._records),
        )
        self._records.append(record)
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[InvocationRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index: int) -> InvocationRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[InvocationRecord, ...]:
        """Snapshot of every record in call order."""
        return tuple(self._records)

    def for_method(self, method_name: str) -> tuple[InvocationRecord, ...]:
        """Records of calls to one operation, in call order."""
        return tuple(r for r in self._records if r.method_name == method_name)

    def count(self, method_name: str | None = None) -> int:
        """Number of calls, to one operation or in total."""
        if method_name is None:
            return len(self._records)
        return sum(1 for r in self._records if r.method_name == method_name)
