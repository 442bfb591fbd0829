"""Build configuration: declarative synthesis options for one double.

BuildConfiguration is immutable and consumed by DoubleFactory.build().
ConfigurationBuilder assembles one fluently:

    config = (
        ConfigurationBuilder()
        .only_methods("fetch")
        .add_methods("flush")
        .enable_argument_cloning()
        .build()
    )

Defaults: original constructor and clone suppressed, argument cloning
disabled, no proxy target, generated class name.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import keyword
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Self

from doubleengine.diagnostics import ErrorTemplate, InvalidConfigurationError
from doubleengine.surface import MethodSignature, variadic_signature

__all__ = ["BuildConfiguration", "ConfigurationBuilder"]


def _is_identifier(name: object) -> bool:
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


@dataclass(frozen=True, slots=True)
class BuildConfiguration:
    """Immutable synthesis options.

    Attributes:
        restricted_methods: Only these operations are intercepted (None = all).
            Abstract operations are intercepted regardless.
        additional_methods: Operations added to the double as pure stubs
        invoke_constructor: Run the original __init__ on construction
        constructor_args: Positional arguments for the original __init__
        constructor_kwargs: (name, value) keyword arguments for the original __init__
        invoke_clone: Run the original __copy__ when the double is copied
        clone_arguments: Deep-copy call arguments into the ledger
        proxy_target: Instance receiving calls no rule answers
        class_name: Name of the synthesized class (generated if None)
    """

    restricted_methods: frozenset[str] | None = None
    additional_methods: tuple[MethodSignature, ...] = ()
    invoke_constructor: bool = False
    constructor_args: tuple[object, ...] = ()
    constructor_kwargs: tuple[tuple[str, object], ...] = ()
    invoke_clone: bool = False
    clone_arguments: bool = False
    proxy_target: object | None = field(default=None, compare=False)
    class_name: str | None = None

    def __post_init__(self) -> None:
        """Validate option values.

        Raises:
            InvalidConfigurationError: If a name is not a valid identifier or an
                additional method is declared twice
        """
        if self.class_name is not None and not _is_identifier(self.class_name):
            raise InvalidConfigurationError(
                ErrorTemplate.invalid_configuration(
                    f"Class name {self.class_name!r} is not a valid identifier",
                    "Use letters, digits and underscores, not starting with a digit",
                )
            )
        for name in self.restricted_methods or ():
            if not isinstance(name, str):
                raise InvalidConfigurationError(
                    ErrorTemplate.invalid_configuration(
                        f"Method name {name!r} is not a string"
                    )
                )
        seen: set[str] = set()
        for signature in self.additional_methods:
            if not _is_identifier(signature.name):
                raise InvalidConfigurationError(
                    ErrorTemplate.invalid_configuration(
                        f"Additional method name {signature.name!r} is not a valid identifier"
                    )
                )
            if signature.name in seen:
                raise InvalidConfigurationError(
                    ErrorTemplate.invalid_configuration(
                        f"Additional method '{signature.name}' is declared twice"
                    )
                )
            seen.add(signature.name)

    @property
    def constructor_keywords(self) -> Mapping[str, object]:
        """Keyword arguments for the original __init__ as a dict."""
        return dict(self.constructor_kwargs)


class ConfigurationBuilder:
    """Fluent builder for BuildConfiguration.

    Every option method returns self. build() freezes the current options
    into a BuildConfiguration, which one factory build consumes; a builder
    reused for another double freezes a fresh configuration for it.
    """

    __slots__ = (
        "_additional_methods",
        "_class_name",
        "_clone_arguments",
        "_constructor_args",
        "_constructor_kwargs",
        "_invoke_clone",
        "_invoke_constructor",
        "_proxy_target",
        "_restricted_methods",
    )

    def __init__(self) -> None:
        """Initialize builder with default options."""
        self._restricted_methods: frozenset[str] | None = None
        self._additional_methods: list[MethodSignature] = []
        self._invoke_constructor = False
        self._constructor_args: tuple[object, ...] = ()
        self._constructor_kwargs: tuple[tuple[str, object], ...] = ()
        self._invoke_clone = False
        self._clone_arguments = False
        self._proxy_target: object | None = None
        self._class_name: str | None = None

    def only_methods(self, *names: str) -> Self:
        """Intercept only the named operations; others keep their original behavior."""
        self._restricted_methods = frozenset(names)
        return self

    def add_methods(self, *methods: str | MethodSignature) -> Self:
        """Add operations that do not exist on the target.

        Names given as strings accept any arguments and return Any.
        """
        for method in methods:
            if isinstance(method, str):
                method = variadic_signature(method)
            self._additional_methods.append(method)
        return self

    def enable_original_constructor(self, *args: object, **kwargs: object) -> Self:
        """Run the original __init__ with these arguments on construction."""
        self._invoke_constructor = True
        self._constructor_args = args
        self._constructor_kwargs = tuple(kwargs.items())
        return self

    def disable_original_constructor(self) -> Self:
        """Allocate the double without running __init__ (default)."""
        self._invoke_constructor = False
        self._constructor_args = ()
        self._constructor_kwargs = ()
        return self

    def enable_original_clone(self) -> Self:
        """Run the original __copy__ when the double is copied."""
        self._invoke_clone = True
        return self

    def disable_original_clone(self) -> Self:
        """Suppress the original __copy__ (default)."""
        self._invoke_clone = False
        return self

    def enable_argument_cloning(self) -> Self:
        """Record deep copies of call arguments."""
        self._clone_arguments = True
        return self

    def disable_argument_cloning(self) -> Self:
        """Record call arguments by reference (default)."""
        self._clone_arguments = False
        return self

    def enable_proxying_to(self, instance: object) -> Self:
        """Forward calls no rule answers to an existing instance."""
        self._proxy_target = instance
        return self

    def disable_proxying(self) -> Self:
        """Answer unconfigured calls with generated values (default)."""
        self._proxy_target = None
        return self

    def set_class_name(self, name: str) -> Self:
        """Name the synthesized class."""
        self._class_name = name
        return self

    def build(self) -> BuildConfiguration:
        """Freeze the options.

        Raises:
            InvalidConfigurationError: If an option value is malformed
        """
        return BuildConfiguration(
            restricted_methods=self._restricted_methods,
            additional_methods=tuple(self._additional_methods),
            invoke_constructor=self._invoke_constructor,
            constructor_args=self._constructor_args,
            constructor_kwargs=self._constructor_kwargs,
            invoke_clone=self._invoke_clone,
            clone_arguments=self._clone_arguments,
            proxy_target=self._proxy_target,
            class_name=self._class_name,
        )
