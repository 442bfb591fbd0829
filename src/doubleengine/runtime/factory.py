"""Double factory: synthesizes doubles from method surfaces.

A double is an instance of a class created at runtime with
types.new_class(). The class subclasses the surface's Python types (if
any), so isinstance() checks and type annotations in the code under test
keep working, and defines one function per intercepted operation that
routes the call to the double's InvocationHandler.

Operations are treated as follows:

    intercepted         routed through the handler
    non-interceptable   inherited unchanged (private and @final members)
    outside only_methods inherited unchanged, unless abstract
    static / class      replaced by a function raising StaticInterceptionError

The doubled classes themselves are never modified.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import copy
import inspect
import logging
import re
import secrets
import types
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NoReturn

from doubleengine.constants import CLASS_NAME_PREFIX, CLASS_NAME_SUFFIX_BYTES
from doubleengine.diagnostics import (
    ErrorTemplate,
    IncompatibleSurfaceError,
    MethodConflictError,
    StaticInterceptionError,
    UnknownMethodError,
)
from doubleengine.enums import DoubleKind
from doubleengine.surface import MethodSignature, MethodSurfaceDescriptor, merge_surfaces

from .autovalue import AutoValueGenerator
from .configuration import BuildConfiguration
from .handler import HANDLER_ATTRIBUTE, InvocationHandler, handler_of

__all__ = ["DoubleFactory", "is_double"]

logger = logging.getLogger(__name__)

_NON_IDENTIFIER = re.compile(r"\W+")


def is_double(value: object) -> bool:
    """Whether value was created by DoubleFactory."""
    try:
        handler_of(value)
    except TypeError:
        return False
    return True


# ==============================================================================
# SYNTHESIZED MEMBERS
# ==============================================================================


def _intercepting_method(signature: MethodSignature) -> Callable[..., object]:
    name = signature.name

    def intercepted(self: object, /, *args: object, **kwargs: object) -> object:
        return handler_of(self).invoke(self, name, args, kwargs)

    intercepted.__name__ = name
    intercepted.__qualname__ = name
    intercepted.__doc__ = f"Intercepted {signature.render()}"
    return intercepted


def _static_operation(target: str, name: str) -> staticmethod[..., NoReturn]:
    def static_operation(*args: object, **kwargs: object) -> NoReturn:
        raise StaticInterceptionError(ErrorTemplate.static_interception(target, name))

    static_operation.__name__ = name
    static_operation.__qualname__ = name
    return staticmethod(static_operation)


def _allocate(cls: type, args: Sequence[object] = (), kwargs: Mapping[str, Any] | None = None) -> Any:
    """Create an instance without running __init__."""
    if cls.__new__ is object.__new__:
        return object.__new__(cls)
    return cls.__new__(cls, *args, **(kwargs or {}))


def _copy_double(self: object) -> object:
    """Copy of a double: same rules, fresh ledger, no expectations."""
    handler = handler_of(self)
    cls = type(self)
    original_copy = getattr(super(cls, self), "__copy__", None)
    if handler.config.invoke_clone and original_copy is not None:
        clone = original_copy()
    else:
        clone = _allocate(cls)
        clone.__dict__.update(self.__dict__)
    object.__setattr__(clone, HANDLER_ATTRIBUTE, handler.clone())
    return clone


def _deepcopy_double(self: object, memo: dict[int, object]) -> object:
    """Deep copy of a double: state deep-copied, handler cloned as for copy.copy()."""
    handler = handler_of(self)
    clone = _allocate(type(self))
    memo[id(self)] = clone
    state = {k: v for k, v in self.__dict__.items() if k != HANDLER_ATTRIBUTE}
    clone.__dict__.update(copy.deepcopy(state, memo))
    object.__setattr__(clone, HANDLER_ATTRIBUTE, handler.clone())
    return clone


def _double_repr(self: object) -> str:
    handler = handler_of(self)
    return f"<{type(self).__name__} {handler.kind} of {handler.target}>"


def _original_implementation(origins: Sequence[type], name: str) -> Callable[..., object] | None:
    """First concrete function named `name` along the origins' MROs."""
    for origin in origins:
        for klass in origin.__mro__:
            if name not in vars(klass):
                continue
            raw = vars(klass)[name]
            if inspect.isfunction(raw) and not getattr(raw, "__isabstractmethod__", False):
                return raw
            break
    return None


# ==============================================================================
# FACTORY
# ==============================================================================


class DoubleFactory:
    """Builds doubles.

    Holds no per-double state: every build produces an independent class,
    handler, behavior table and ledger.

    Example:
        >>> factory = DoubleFactory()
        >>> repo = factory.build(describe(Repository), kind=DoubleKind.STUB)
        >>> isinstance(repo, Repository)
        True
    """

    __slots__ = ("_generator",)

    def __init__(self) -> None:
        """Initialize factory."""
        self._generator = AutoValueGenerator(self)

    def build(
        self,
        surface: MethodSurfaceDescriptor | Sequence[MethodSurfaceDescriptor],
        config: BuildConfiguration | None = None,
        *,
        kind: DoubleKind = DoubleKind.MOCK,
        depth: int = 0,
    ) -> Any:
        """Synthesize a double.

        Args:
            surface: Surface to double, or several surfaces to intersect
            config: Build options (defaults if None)
            kind: STUB or MOCK
            depth: Nesting depth (0 for doubles built by test code)

        Returns:
            The double

        Raises:
            IncompatibleSurfaceError: If intersected surfaces or their Python
                types conflict
            UnknownMethodError: If only_methods names an unknown operation
            MethodConflictError: If an additional method already exists
        """
        if not isinstance(surface, MethodSurfaceDescriptor):
            surface = merge_surfaces(list(surface))
        config = config if config is not None else BuildConfiguration()

        self._validate(surface, config)
        exposed = self._exposed_operations(surface, config)
        cls = self._synthesize_class(surface, config, exposed)

        handler = InvocationHandler(
            surface,
            config,
            exposed,
            kind=kind,
            depth=depth,
            generator=self._generator,
            originals={
                name: original
                for name, signature in exposed.items()
                if not signature.abstract
                and (original := _original_implementation(surface.origins, name)) is not None
            },
        )

        keywords = config.constructor_keywords
        double = _allocate(cls, config.constructor_args, keywords)
        object.__setattr__(double, HANDLER_ATTRIBUTE, handler)
        if config.invoke_constructor:
            cls.__init__(double, *config.constructor_args, **keywords)

        logger.info(
            "Built %s of %s as %s: %d intercepted operation(s), depth %d",
            kind,
            surface.name,
            cls.__name__,
            len(exposed),
            depth,
        )
        return double

    @staticmethod
    def _validate(surface: MethodSurfaceDescriptor, config: BuildConfiguration) -> None:
        for name in sorted(config.restricted_methods or ()):
            if name not in surface:
                raise UnknownMethodError(
                    ErrorTemplate.unknown_method(surface.name, name, surface.method_names)
                )
        for signature in config.additional_methods:
            name = signature.name
            if name in surface or any(hasattr(origin, name) for origin in surface.origins):
                raise MethodConflictError(ErrorTemplate.method_conflict(surface.name, name))

    @staticmethod
    def _exposed_operations(
        surface: MethodSurfaceDescriptor, config: BuildConfiguration
    ) -> dict[str, MethodSignature]:
        restricted = config.restricted_methods
        exposed: dict[str, MethodSignature] = {}
        for signature in surface:
            if signature.static:
                continue
            if not signature.interceptable:
                logger.debug("%s.%s keeps its original behavior", surface.name, signature.name)
                continue
            if restricted is not None and signature.name not in restricted and not signature.abstract:
                continue
            exposed[signature.name] = signature
        for signature in config.additional_methods:
            exposed[signature.name] = signature
        return exposed

    @staticmethod
    def _class_name(surface: MethodSurfaceDescriptor, config: BuildConfiguration) -> str:
        if config.class_name is not None:
            return config.class_name
        stem = _NON_IDENTIFIER.sub("_", surface.name).strip("_") or "Anonymous"
        return f"{CLASS_NAME_PREFIX}_{stem}_{secrets.token_hex(CLASS_NAME_SUFFIX_BYTES)}"

    def _synthesize_class(
        self,
        surface: MethodSurfaceDescriptor,
        config: BuildConfiguration,
        exposed: Mapping[str, MethodSignature],
    ) -> type:
        name = self._class_name(surface, config)
        namespace: dict[str, object] = {
            "__module__": __name__,
            "__qualname__": name,
            "__doc__": f"Double of {surface.name}.",
            "__repr__": _double_repr,
            "__copy__": _copy_double,
            "__deepcopy__": _deepcopy_double,
        }
        for signature in exposed.values():
            namespace[signature.name] = _intercepting_method(signature)
        for signature in surface:
            if signature.static and signature.interceptable:
                namespace[signature.name] = _static_operation(surface.name, signature.name)

        try:
            cls = types.new_class(
                name, surface.origins, exec_body=lambda ns: ns.update(namespace)
            )
        except TypeError as e:
            raise IncompatibleSurfaceError(
                ErrorTemplate.incompatible_bases(surface.name, str(e))
            ) from e

        # Every abstract operation is intercepted above.
        if getattr(cls, "__abstractmethods__", None):
            cls.__abstractmethods__ = frozenset()
        return cls
