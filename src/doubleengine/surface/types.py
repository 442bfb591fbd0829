"""Return-type descriptors.

A TypeDescriptor is a tagged variant describing what a method returns. It
drives two things:
    - Configuration-time checks: accepts() rejects configured return values
      that cannot satisfy the declared type.
    - Auto-value generation: the kind selects the canonical default.

Descriptors are built by the introspection collaborator from annotations,
or by hand for surfaces that have no Python class behind them:

    >>> fetch_returns = TEXT
    >>> maybe_count = nullable(INTEGER)
    >>> children = sequence_of(list)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Iterator, Mapping, Sequence, Set
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from doubleengine.enums import TypeKind

if TYPE_CHECKING:
    from .signature import MethodSurfaceDescriptor

__all__ = [
    "BOOLEAN",
    "BYTES",
    "FLOAT",
    "INTEGER",
    "MIXED",
    "SELF",
    "TEXT",
    "VOID",
    "TypeDescriptor",
    "enum_of",
    "iterator_of",
    "mapping_of",
    "nullable",
    "object_of",
    "sequence_of",
    "set_of",
    "unresolved",
]

# Containers checked by isinstance() when a descriptor names no concrete one.
_DEFAULT_CONTAINERS: dict[TypeKind, type] = {
    TypeKind.SEQUENCE: Sequence,
    TypeKind.MAPPING: Mapping,
    TypeKind.SET: Set,
    TypeKind.ITERATOR: Iterator,
}


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Immutable description of a method's return type.

    Attributes:
        kind: Variant tag
        name: Display name used in diagnostics (e.g. "int", "list[str]")
        nullable: Whether None satisfies the type (Optional[...])
        container: Runtime container class for SEQUENCE/MAPPING/SET/ITERATOR
        target: Python class for OBJECT descriptors (None for surface-only types)
        surface: Explicit surface for OBJECT descriptors without a Python class
        reason: Why an UNRESOLVED descriptor could not be resolved
    """

    kind: TypeKind
    name: str = ""
    nullable: bool = False
    container: type | None = None
    target: type | None = None
    surface: MethodSurfaceDescriptor | None = field(default=None, compare=False, repr=False)
    reason: str = ""

    def describe(self) -> str:
        """Render the descriptor for diagnostics."""
        base = self.name or str(self.kind)
        return f"{base} | None" if self.nullable else base

    def as_nullable(self) -> TypeDescriptor:
        """Return a copy of this descriptor that also admits None."""
        if self.nullable:
            return self
        return replace(self, nullable=True)

    def accepts(self, value: object) -> bool:
        """Check whether a configured value satisfies this descriptor.

        MIXED, SELF and UNRESOLVED accept anything: an explicit value is how
        an ambiguous type gets resolved.

        Args:
            value: Candidate return value

        Returns:
            True if value may be returned from a method of this type
        """
        if value is None:
            return self.nullable or self.kind in (
                TypeKind.VOID,
                TypeKind.MIXED,
                TypeKind.UNRESOLVED,
            )

        match self.kind:
            case TypeKind.INTEGER:
                return isinstance(value, int) and not isinstance(value, bool)
            case TypeKind.FLOAT:
                return isinstance(value, int | float) and not isinstance(value, bool)
            case TypeKind.BOOLEAN:
                return isinstance(value, bool)
            case TypeKind.TEXT:
                return isinstance(value, str)
            case TypeKind.BYTES:
                return isinstance(value, bytes | bytearray)
            case TypeKind.SEQUENCE | TypeKind.MAPPING | TypeKind.SET | TypeKind.ITERATOR:
                container = self.container or _DEFAULT_CONTAINERS[self.kind]
                return isinstance(value, container)
            case TypeKind.ENUM:
                return self.target is not None and isinstance(value, self.target)
            case TypeKind.OBJECT:
                return self.target is None or _is_instance_of(value, self.target)
            case TypeKind.VOID:
                return False
            case _:
                return True

    def empty_container(self) -> object:
        """Build the canonical empty value for a container descriptor.

        Concrete containers (list, tuple, dict, deque, frozenset, ...) are
        instantiated directly; abstract ones fall back to list, dict, set or
        an exhausted iterator.

        Raises:
            TypeError: If the concrete container cannot be built without
                arguments (range, memoryview, slice)
        """
        container = self.container
        if container is not None and not inspect.isabstract(container):
            return container()
        match self.kind:
            case TypeKind.MAPPING:
                return {}
            case TypeKind.SET:
                return set()
            case TypeKind.ITERATOR:
                return iter(())
            case _:
                return []


def _is_instance_of(value: object, target: type) -> bool:
    """isinstance() that also handles non-runtime-checkable Protocols structurally."""
    if typing.is_protocol(target) and not getattr(target, "_is_runtime_protocol", False):
        return all(hasattr(value, member) for member in typing.get_protocol_members(target))
    return isinstance(value, target)


# ============================================================================
# CANONICAL DESCRIPTORS
# ============================================================================

INTEGER = TypeDescriptor(TypeKind.INTEGER, "int")
FLOAT = TypeDescriptor(TypeKind.FLOAT, "float")
BOOLEAN = TypeDescriptor(TypeKind.BOOLEAN, "bool")
TEXT = TypeDescriptor(TypeKind.TEXT, "str")
BYTES = TypeDescriptor(TypeKind.BYTES, "bytes")
VOID = TypeDescriptor(TypeKind.VOID, "None")
MIXED = TypeDescriptor(TypeKind.MIXED, "Any")
SELF = TypeDescriptor(TypeKind.SELF, "Self")


def nullable(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Optional[...] variant of a descriptor."""
    return descriptor.as_nullable()


def sequence_of(container: type = list, name: str = "") -> TypeDescriptor:
    """Sequence descriptor (list by default)."""
    return TypeDescriptor(TypeKind.SEQUENCE, name or container.__name__, container=container)


def mapping_of(container: type = dict, name: str = "") -> TypeDescriptor:
    """Mapping descriptor (dict by default)."""
    return TypeDescriptor(TypeKind.MAPPING, name or container.__name__, container=container)


def set_of(container: type = set, name: str = "") -> TypeDescriptor:
    """Set descriptor (set by default)."""
    return TypeDescriptor(TypeKind.SET, name or container.__name__, container=container)


def iterator_of(container: type = Iterator, name: str = "") -> TypeDescriptor:
    """Iterator descriptor."""
    return TypeDescriptor(TypeKind.ITERATOR, name or container.__name__, container=container)


def enum_of(target: type[Enum]) -> TypeDescriptor:
    """Enumeration descriptor answered with the first member."""
    return TypeDescriptor(TypeKind.ENUM, target.__qualname__, target=target)


def object_of(target: type | MethodSurfaceDescriptor) -> TypeDescriptor:
    """Object descriptor answered with a nested double.

    Args:
        target: Python class (described lazily at generation time) or an
            explicit surface for types with no Python class
    """
    if isinstance(target, type):
        return TypeDescriptor(TypeKind.OBJECT, target.__qualname__, target=target)
    return TypeDescriptor(TypeKind.OBJECT, target.name, surface=target)


def unresolved(name: str, reason: str) -> TypeDescriptor:
    """Descriptor for a type the engine refuses to guess a default for."""
    return TypeDescriptor(TypeKind.UNRESOLVED, name, reason=reason)
