"""Method-surface introspection for Python classes.

Turns a class (or an ABC, or a Protocol) into a MethodSurfaceDescriptor:

- Parameters come from inspect.signature(), minus the bound first parameter.
- Return types come from typing.get_type_hints(). They are converted into
  TypeDescriptors by descriptor_for().
- Interception eligibility follows Python's conventions:
    - private (_name) and @typing.final members keep their original behavior;
    - static and class methods are flagged static;
    - abstract and protocol methods are flagged abstract.

Dunder members, properties and other non-function attributes are not part
of the surface.

Example:
    >>> class Repository(Protocol):
    ...     def fetch(self, key: int) -> str: ...
    >>> surface = describe(Repository)
    >>> surface.get("fetch").render()
    'fetch(key: int) -> str'

Python 3.13+.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import types
import typing
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence, Set
from enum import Enum
from typing import Any

from .core import DepthGuard
from .diagnostics import AmbiguousTargetError, ErrorTemplate, TargetNotFoundError
from .enums import ParameterKind
from .surface import (
    BOOLEAN,
    BYTES,
    FLOAT,
    INTEGER,
    MIXED,
    NO_DEFAULT,
    SELF,
    TEXT,
    VOID,
    MethodSignature,
    MethodSurfaceDescriptor,
    ParameterSpec,
    TypeDescriptor,
    enum_of,
    iterator_of,
    mapping_of,
    object_of,
    sequence_of,
    set_of,
    unresolved,
    variadic_signature,
)

__all__ = ["descriptor_for", "describe", "resolve_target"]

logger = logging.getLogger(__name__)

_SCALARS: dict[type, TypeDescriptor] = {
    int: INTEGER,
    float: FLOAT,
    bool: BOOLEAN,
    str: TEXT,
    bytes: BYTES,
}

_PARAMETER_KINDS: dict[inspect._ParameterKind, ParameterKind] = {
    inspect.Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL,
    inspect.Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
    inspect.Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD_ONLY,
    inspect.Parameter.VAR_KEYWORD: ParameterKind.VAR_KEYWORD,
}

# Only standard-library containers map to container kinds; user classes that
# happen to implement __iter__ or __getitem__ are answered with nested doubles.
_CONTAINER_MODULES: frozenset[str] = frozenset(
    {"builtins", "collections", "collections.abc", "typing"}
)

_MACHINERY_MODULES: frozenset[str] = frozenset({"typing", "abc", "_typing"})

_VOID_ANNOTATIONS: tuple[object, ...] = (None, type(None), typing.NoReturn, typing.Never)


# ==============================================================================
# TARGET RESOLUTION
# ==============================================================================


def resolve_target(target: type | str) -> type:
    """Resolve a class or dotted import path to a class.

    Args:
        target: Class object, or "package.module.Class" (nested classes allowed)

    Returns:
        The class

    Raises:
        TargetNotFoundError: If the path cannot be imported or an attribute is missing
        AmbiguousTargetError: If the target is not a class
    """
    if isinstance(target, type):
        return target
    if not isinstance(target, str):
        raise AmbiguousTargetError(
            ErrorTemplate.target_ambiguous(repr(target), f"instance of {type(target).__name__}")
        )

    parts = target.split(".")
    if len(parts) < 2 or not all(parts):
        raise TargetNotFoundError(
            ErrorTemplate.target_not_found(target, "expected a dotted 'module.Class' path")
        )

    # Import the longest importable module prefix, then walk attributes.
    # At least one trailing segment is always an attribute.
    module: types.ModuleType | None = None
    split = len(parts)
    while split > 1 and module is None:
        split -= 1
        try:
            module = importlib.import_module(".".join(parts[:split]))
        except ImportError:
            module = None
    if module is None:
        raise TargetNotFoundError(ErrorTemplate.target_not_found(target, "no importable module"))

    resolved: object = module
    for attribute in parts[split:]:
        try:
            resolved = getattr(resolved, attribute)
        except AttributeError as e:
            raise TargetNotFoundError(ErrorTemplate.target_not_found(target, str(e))) from e

    if not isinstance(resolved, type):
        found = "module" if isinstance(resolved, types.ModuleType) else type(resolved).__name__
        raise AmbiguousTargetError(ErrorTemplate.target_ambiguous(target, found))
    return resolved


# ==============================================================================
# ANNOTATION CONVERSION
# ==============================================================================


def _annotation_name(annotation: object) -> str:
    if annotation is inspect.Parameter.empty:
        return ""
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__qualname__
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    return str(annotation).removeprefix("typing.")


def descriptor_for(annotation: object, guard: DepthGuard | None = None) -> TypeDescriptor:
    """Convert a return annotation into a TypeDescriptor.

    Never guesses: unions of several types, type variables, Literal,
    Callable and unresolvable forward references become UNRESOLVED, which
    auto-value generation refuses. Optional[X] becomes X made nullable.

    Args:
        annotation: Annotation object (inspect.Parameter.empty if absent)
        guard: Depth guard shared across recursive unwrapping

    Returns:
        Descriptor for the annotation

    Raises:
        DepthLimitExceededError: If wrappers nest beyond MAX_ANNOTATION_DEPTH
    """
    guard = guard if guard is not None else DepthGuard()
    with guard:
        return _convert(annotation, guard)


def _convert(annotation: object, guard: DepthGuard) -> TypeDescriptor:  # noqa: PLR0911
    name = _annotation_name(annotation)

    if annotation is inspect.Parameter.empty or annotation is Any or annotation is object:
        return MIXED
    if any(annotation is void for void in _VOID_ANNOTATIONS):
        return VOID
    if annotation is typing.Self:
        return SELF
    if isinstance(annotation, str | typing.ForwardRef):
        return unresolved(name, "forward reference could not be resolved")
    if isinstance(annotation, typing.TypeVar | typing.ParamSpec | typing.TypeVarTuple):
        return unresolved(name, "type variables have no default")

    origin = typing.get_origin(annotation)
    arguments = typing.get_args(annotation)

    if origin is typing.Annotated:
        return descriptor_for(arguments[0], guard)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in arguments if a is not type(None)]
        if len(members) == len(arguments):
            return unresolved(name, "union of several types")
        if len(members) == 1:
            return descriptor_for(members[0], guard).as_nullable()
        return unresolved(name, "union of several types").as_nullable()
    if origin is typing.Literal:
        return unresolved(name, "literal types have no canonical default")

    runtime = origin if origin is not None else annotation
    if not isinstance(runtime, type):
        return unresolved(name, "annotation is not a class")
    return _convert_class(runtime, name)


def _is_stdlib_container(runtime: type) -> bool:
    return runtime.__module__ in _CONTAINER_MODULES


def _convert_class(runtime: type, name: str) -> TypeDescriptor:  # noqa: PLR0911
    if runtime in _SCALARS:
        return _SCALARS[runtime]
    if issubclass(runtime, Enum):
        return enum_of(runtime)
    if runtime is type or runtime is Callable:
        return unresolved(name, "callables and classes have no default")
    if not _is_stdlib_container(runtime):
        return object_of(runtime)
    if issubclass(runtime, Iterator):
        return iterator_of(runtime, name)
    if issubclass(runtime, Mapping):
        return mapping_of(runtime, name)
    if issubclass(runtime, Set):
        return set_of(runtime, name)
    if issubclass(runtime, Sequence | Iterable):
        return sequence_of(runtime, name)
    return object_of(runtime)


# ==============================================================================
# MEMBER DESCRIPTION
# ==============================================================================


def _member_names(cls: type) -> list[str]:
    """Attribute names in MRO order (most-derived first).

    Members of object and of the typing/abc machinery (Protocol, Generic,
    ABC) are not part of any surface.
    """
    seen: dict[str, None] = {}
    for klass in cls.__mro__:
        if klass is object or klass.__module__ in _MACHINERY_MODULES:
            continue
        for name in vars(klass):
            seen.setdefault(name, None)
    return list(seen)


def _parameters(func: Callable[..., object], *, bound: bool) -> tuple[ParameterSpec, ...] | None:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    params = list(signature.parameters.values())
    if bound and params and params[0].kind is not inspect.Parameter.VAR_POSITIONAL:
        params = params[1:]
    return tuple(
        ParameterSpec(
            name=param.name,
            kind=_PARAMETER_KINDS[param.kind],
            annotation=_annotation_name(param.annotation),
            default=NO_DEFAULT if param.default is inspect.Parameter.empty else param.default,
        )
        for param in params
    )


def _return_annotation(func: Callable[..., object]) -> object:
    try:
        hints = typing.get_type_hints(func, include_extras=True)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references: keep the raw annotation, which
        # descriptor_for() reports as UNRESOLVED.
        return getattr(func, "__annotations__", {}).get("return", inspect.Parameter.empty)
    return hints.get("return", inspect.Parameter.empty)


def _describe_member(
    cls: type, name: str, protocol_members: frozenset[str]
) -> MethodSignature | None:
    raw = inspect.getattr_static(cls, name)
    static = isinstance(raw, staticmethod | classmethod)
    func = raw.__func__ if static else raw
    if not inspect.isfunction(func):
        return None

    parameters = _parameters(func, bound=not isinstance(raw, staticmethod))
    if parameters is None:
        return variadic_signature(name)

    abstract = bool(getattr(func, "__isabstractmethod__", False)) or name in protocol_members
    return MethodSignature(
        name=name,
        parameters=parameters,
        return_type=descriptor_for(_return_annotation(func)),
        interceptable=not name.startswith("_") and not getattr(func, "__final__", False),
        static=static,
        abstract=abstract,
    )


def describe(target: type | str) -> MethodSurfaceDescriptor:
    """Describe the callable surface of a class.

    Args:
        target: Class, ABC, Protocol, or dotted import path to one

    Returns:
        Surface with one signature per method

    Raises:
        TargetNotFoundError: If a dotted path cannot be resolved
        AmbiguousTargetError: If the target is not a class
    """
    cls = resolve_target(target)
    protocol_members = (
        frozenset(typing.get_protocol_members(cls)) if typing.is_protocol(cls) else frozenset()
    )

    signatures = [
        signature
        for name in _member_names(cls)
        if not (name.startswith("__") and name.endswith("__"))
        and (signature := _describe_member(cls, name, protocol_members)) is not None
    ]

    logger.debug(
        "Described %s: %d operation(s), %d interceptable",
        cls.__qualname__,
        len(signatures),
        sum(1 for s in signatures if s.interceptable and not s.static),
    )
    return MethodSurfaceDescriptor(
        name=cls.__qualname__,
        signatures=tuple(signatures),
        origins=(cls,),
    )
