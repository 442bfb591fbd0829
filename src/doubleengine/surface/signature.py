"""Method signatures and method surfaces.

A MethodSurfaceDescriptor is the static description of everything a double
must answer: one MethodSignature per callable member. Surfaces are produced
by the introspection collaborator (doubleengine.introspection.describe) or
built by hand, and several surfaces can be merged into the surface of an
intersection type.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from doubleengine.diagnostics import (
    ErrorTemplate,
    IncompatibleSurfaceError,
    InvalidConfigurationError,
)
from doubleengine.enums import ParameterKind

from .types import MIXED, TypeDescriptor

__all__ = [
    "NO_DEFAULT",
    "MethodSignature",
    "MethodSurfaceDescriptor",
    "ParameterSpec",
    "merge_surfaces",
    "variadic_signature",
]


class _NoDefault:
    """Sentinel type for parameters without a default value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<no default>"


NO_DEFAULT: Any = _NoDefault()


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One declared parameter of a method.

    Attributes:
        name: Parameter name
        kind: Binding kind
        annotation: Display name of the declared type ("" if unannotated)
        default: Default value, or NO_DEFAULT
    """

    name: str
    kind: ParameterKind = ParameterKind.POSITIONAL
    annotation: str = ""
    default: Any = field(default=NO_DEFAULT, compare=False)

    @property
    def has_default(self) -> bool:
        """Whether the parameter may be omitted."""
        return self.default is not NO_DEFAULT

    def render(self) -> str:
        """Render as it would appear in a def statement."""
        match self.kind:
            case ParameterKind.VAR_POSITIONAL:
                prefix = "*"
            case ParameterKind.VAR_KEYWORD:
                prefix = "**"
            case _:
                prefix = ""
        text = f"{prefix}{self.name}"
        if self.annotation:
            text += f": {self.annotation}"
        if self.has_default:
            text += " = ..."
        return text


@dataclass(frozen=True, slots=True)
class MethodSignature:
    """Immutable signature of one operation on a surface.

    Attributes:
        name: Operation name
        parameters: Declared parameters, excluding self/cls
        return_type: Return-type descriptor
        interceptable: False for members that keep original behavior
            (private or @final members)
        static: True for static/class methods, which doubles cannot intercept
        abstract: True for abstract methods, always intercepted
    """

    name: str
    parameters: tuple[ParameterSpec, ...] = ()
    return_type: TypeDescriptor = MIXED
    interceptable: bool = True
    static: bool = False
    abstract: bool = False

    @property
    def nullable(self) -> bool:
        """Whether the method may return None."""
        return self.return_type.nullable

    @property
    def variadic(self) -> bool:
        """Whether the method accepts *args."""
        return any(p.kind is ParameterKind.VAR_POSITIONAL for p in self.parameters)

    def render(self) -> str:
        """Render as "name(params) -> return"."""
        rendered = [p.render() for p in self.parameters]
        only = sum(p.kind is ParameterKind.POSITIONAL_ONLY for p in self.parameters)
        if only:
            rendered.insert(only, "/")
        params = ", ".join(rendered)
        return f"{self.name}({params}) -> {self.return_type.describe()}"

    def compatible_with(self, other: MethodSignature) -> bool:
        """Whether two declarations of the same name can share one implementation."""
        return (
            self.name == other.name
            and self.parameters == other.parameters
            and self.return_type == other.return_type
            and self.static == other.static
        )

    def normalize(
        self, args: Sequence[object], kwargs: Mapping[str, object]
    ) -> tuple[tuple[object, ...], dict[str, object]]:
        """Bind call arguments the way Python binds them to a def.

        Keyword arguments naming positional parameters are moved into their
        positional slot (filling skipped defaulted slots), so argument
        matchers see one canonical positional tuple however the caller
        spelled the call. Keyword-only and **kwargs arguments stay keyed, as
        do keywords that share a positional-only parameter's name.

        Args:
            args: Positional arguments as passed
            kwargs: Keyword arguments as passed

        Returns:
            (positional, keyword) arguments

        Raises:
            TypeError: If the call does not fit the signature
        """
        positional = [
            p
            for p in self.parameters
            if p.kind in (ParameterKind.POSITIONAL_ONLY, ParameterKind.POSITIONAL)
        ]
        keyword_only = {
            p.name: p for p in self.parameters if p.kind is ParameterKind.KEYWORD_ONLY
        }
        var_keyword = any(p.kind is ParameterKind.VAR_KEYWORD for p in self.parameters)

        if len(args) > len(positional) and not self.variadic:
            msg = (
                f"{self.name}() takes {len(positional)} positional argument(s) "
                f"but {len(args)} were given"
            )
            raise TypeError(msg)

        remaining = dict(kwargs)
        for param in positional[: len(args)]:
            if param.kind is ParameterKind.POSITIONAL and param.name in remaining:
                msg = f"{self.name}() got multiple values for argument '{param.name}'"
                raise TypeError(msg)

        values = list(args)
        tail = positional[len(args) :]
        keyed = [p.kind is ParameterKind.POSITIONAL and p.name in remaining for p in tail]
        last = max((i for i, k in enumerate(keyed) if k), default=-1)
        for index, param in enumerate(tail):
            if keyed[index]:
                values.append(remaining.pop(param.name))
            elif not param.has_default:
                msg = f"{self.name}() missing required argument: '{param.name}'"
                raise TypeError(msg)
            elif index < last:
                # A later slot was passed by keyword; this one takes its default.
                values.append(param.default)

        for name, spec in keyword_only.items():
            if name not in remaining and not spec.has_default:
                msg = f"{self.name}() missing required keyword-only argument: '{name}'"
                raise TypeError(msg)

        if not var_keyword:
            unexpected = [k for k in remaining if k not in keyword_only]
            if unexpected:
                msg = f"{self.name}() got an unexpected keyword argument '{unexpected[0]}'"
                raise TypeError(msg)

        return tuple(values), remaining


def variadic_signature(name: str, return_type: TypeDescriptor = MIXED) -> MethodSignature:
    """Signature accepting any arguments.

    Used for additional methods declared by name only.
    """
    return MethodSignature(
        name=name,
        parameters=(
            ParameterSpec("args", ParameterKind.VAR_POSITIONAL),
            ParameterSpec("kwargs", ParameterKind.VAR_KEYWORD),
        ),
        return_type=return_type,
    )


@dataclass(frozen=True, slots=True)
class MethodSurfaceDescriptor:
    """Immutable set of method signatures for a target.

    Supports dict-like introspection:
        - name in surface: Check if an operation is declared
        - surface.get(name): Look up a signature
        - iter(surface): Iterate signatures in declaration order
        - len(surface): Count declared operations

    Attributes:
        name: Display name of the target (class name or "A & B" for intersections)
        signatures: Declared operations in declaration order
        origins: Python types the surface was described from (empty for
            hand-built surfaces)
    """

    name: str
    signatures: tuple[MethodSignature, ...] = ()
    origins: tuple[type, ...] = ()
    _index: dict[str, MethodSignature] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        """Index signatures by name and reject duplicates.

        Raises:
            InvalidConfigurationError: If two signatures share a name
        """
        for signature in self.signatures:
            if signature.name in self._index:
                raise InvalidConfigurationError(
                    ErrorTemplate.invalid_configuration(
                        f"Surface {self.name} declares '{signature.name}' twice",
                        "Use merge_surfaces() to combine surfaces that overlap",
                    )
                )
            self._index[signature.name] = signature

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[MethodSignature]:
        return iter(self.signatures)

    def __len__(self) -> int:
        return len(self.signatures)

    @property
    def method_names(self) -> frozenset[str]:
        """Names of every declared operation."""
        return frozenset(self._index)

    def get(self, name: str) -> MethodSignature | None:
        """Signature for name, or None."""
        return self._index.get(name)

    def with_signatures(self, extra: Iterable[MethodSignature]) -> MethodSurfaceDescriptor:
        """Return a surface extended with extra signatures."""
        return MethodSurfaceDescriptor(
            name=self.name,
            signatures=self.signatures + tuple(extra),
            origins=self.origins,
        )


def merge_surfaces(surfaces: Sequence[MethodSurfaceDescriptor]) -> MethodSurfaceDescriptor:
    """Merge surfaces into the surface of their intersection type.

    The result is the union of all signatures. A name declared by several
    surfaces with compatible signatures appears once (abstract if any
    declaration is abstract).

    Args:
        surfaces: Surfaces in priority order

    Returns:
        Merged surface named "A & B & ..."

    Raises:
        IncompatibleSurfaceError: If one name has incompatible signatures
        InvalidConfigurationError: If no surfaces are given
    """
    if not surfaces:
        raise InvalidConfigurationError(
            ErrorTemplate.invalid_configuration("Cannot merge an empty list of surfaces")
        )
    if len(surfaces) == 1:
        return surfaces[0]

    merged: dict[str, MethodSignature] = {}
    origins: list[type] = []
    for surface in surfaces:
        for origin in surface.origins:
            if origin not in origins:
                origins.append(origin)
        for signature in surface:
            existing = merged.get(signature.name)
            if existing is None:
                merged[signature.name] = signature
                continue
            if not existing.compatible_with(signature):
                raise IncompatibleSurfaceError(
                    ErrorTemplate.incompatible_signatures(
                        signature.name, existing.render(), signature.render()
                    )
                )
            if signature.abstract and not existing.abstract:
                merged[signature.name] = replace(existing, abstract=True)

    return MethodSurfaceDescriptor(
        name=" & ".join(surface.name for surface in surfaces),
        signatures=tuple(merged.values()),
        origins=tuple(origins),
    )
