"""Default return values for unconfigured calls.

Every return-type descriptor kind has a canonical default:

    nullable            None
    INTEGER / FLOAT     0 / 0.0
    BOOLEAN             False
    TEXT / BYTES        "" / b""
    containers          empty instance of the declared container
    ENUM                first member
    VOID / MIXED        None
    SELF                the double answering the call
    OBJECT              nested stub double, one level deeper
    UNRESOLVED          UnresolvableTypeError

Nested doubles are built lazily (one level per call), so a chain such as
repo.session().transaction().commit() works without configuration, and a
self-referencing type only fails when walked deeper than MAX_DOUBLE_DEPTH.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from doubleengine.constants import MAX_DOUBLE_DEPTH
from doubleengine.core import check_depth
from doubleengine.diagnostics import (
    ErrorTemplate,
    IncompatibleSurfaceError,
    UnresolvableTypeError,
)
from doubleengine.enums import DoubleKind, TypeKind
from doubleengine.introspection import describe
from doubleengine.surface import MethodSurfaceDescriptor, TypeDescriptor

if TYPE_CHECKING:
    from .factory import DoubleFactory

__all__ = ["AutoValueGenerator"]

logger = logging.getLogger(__name__)

_SCALAR_DEFAULTS: dict[TypeKind, object] = {
    TypeKind.INTEGER: 0,
    TypeKind.FLOAT: 0.0,
    TypeKind.BOOLEAN: False,
    TypeKind.TEXT: "",
    TypeKind.BYTES: b"",
}


class AutoValueGenerator:
    """Produces default values for return-type descriptors.

    Stateless apart from the factory used to build nested doubles.
    """

    __slots__ = ("_factory",)

    def __init__(self, factory: DoubleFactory) -> None:
        """Initialize generator.

        Args:
            factory: Builds nested doubles for OBJECT descriptors
        """
        self._factory = factory

    def generate(
        self,
        descriptor: TypeDescriptor,
        *,
        owner: object | None = None,
        depth: int = 0,
    ) -> object:
        """Default value for a descriptor.

        Args:
            descriptor: Return type of the called method
            owner: Double answering the call (returned for SELF)
            depth: Nesting depth of the owner

        Returns:
            The default value

        Raises:
            UnresolvableTypeError: For UNRESOLVED descriptors and types that
                cannot be doubled
            DepthLimitExceededError: If a nested double would exceed
                MAX_DOUBLE_DEPTH
        """
        if descriptor.nullable:
            return None

        match descriptor.kind:
            case TypeKind.INTEGER | TypeKind.FLOAT | TypeKind.BOOLEAN | TypeKind.TEXT | TypeKind.BYTES:
                return _SCALAR_DEFAULTS[descriptor.kind]
            case TypeKind.SEQUENCE | TypeKind.MAPPING | TypeKind.SET | TypeKind.ITERATOR:
                return self._empty_container(descriptor)
            case TypeKind.ENUM:
                return self._first_member(descriptor)
            case TypeKind.SELF:
                return owner
            case TypeKind.OBJECT:
                return self._nested_double(descriptor, depth + 1)
            case TypeKind.UNRESOLVED:
                raise UnresolvableTypeError(
                    ErrorTemplate.unresolvable_type(descriptor.describe(), descriptor.reason)
                )
            case _:
                return None

    @staticmethod
    def _empty_container(descriptor: TypeDescriptor) -> object:
        try:
            return descriptor.empty_container()
        except TypeError as e:
            raise UnresolvableTypeError(
                ErrorTemplate.unresolvable_type(descriptor.describe(), f"no empty value: {e}")
            ) from e

    @staticmethod
    def _first_member(descriptor: TypeDescriptor) -> object:
        members = list(descriptor.target) if descriptor.target is not None else []
        if not members:
            raise UnresolvableTypeError(
                ErrorTemplate.unresolvable_type(descriptor.describe(), "enumeration has no members")
            )
        return members[0]

    def _nested_double(self, descriptor: TypeDescriptor, depth: int) -> object:
        check_depth(depth, MAX_DOUBLE_DEPTH)

        surface: MethodSurfaceDescriptor
        if descriptor.surface is not None:
            surface = descriptor.surface
        elif descriptor.target is not None:
            surface = describe(descriptor.target)
        else:
            raise UnresolvableTypeError(
                ErrorTemplate.unresolvable_type(descriptor.describe(), "no class or surface")
            )

        logger.debug("Auto-generating nested stub of %s at depth %d", surface.name, depth)
        try:
            return self._factory.build(surface, kind=DoubleKind.STUB, depth=depth)
        except (TypeError, IncompatibleSurfaceError) as e:
            raise UnresolvableTypeError(
                ErrorTemplate.unresolvable_type(descriptor.describe(), f"cannot be doubled: {e}")
            ) from e
