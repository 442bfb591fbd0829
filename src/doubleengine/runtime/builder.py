"""Entry points for creating doubles.

    create_stub(Repository)                 values only
    create_mock(Repository)                 values and expectations
    create_configured_stub(Repository, {"fetch": "x"})
    create_stub_for_intersection([Reader, Writer])
    DoubleBuilder(Repository).only_methods("fetch").get_mock()

Targets are classes, dotted import paths, or hand-built surfaces.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, overload

from doubleengine.enums import DoubleKind
from doubleengine.introspection import describe
from doubleengine.surface import MethodSurfaceDescriptor

from .configuration import BuildConfiguration, ConfigurationBuilder
from .controller import control
from .factory import DoubleFactory

__all__ = [
    "DoubleBuilder",
    "Target",
    "create_configured_stub",
    "create_mock",
    "create_mock_for_intersection",
    "create_stub",
    "create_stub_for_intersection",
    "surface_of",
]

type Target = type | str | MethodSurfaceDescriptor

_FACTORY = DoubleFactory()


def surface_of(target: Target) -> MethodSurfaceDescriptor:
    """Surface of a class, dotted path or hand-built surface."""
    if isinstance(target, MethodSurfaceDescriptor):
        return target
    return describe(target)


def _surfaces_of(targets: Sequence[Target]) -> list[MethodSurfaceDescriptor]:
    return [surface_of(target) for target in targets]


class DoubleBuilder(ConfigurationBuilder):
    """Fluent builder producing one configured double.

    Example:
        >>> repo = (
        ...     DoubleBuilder(Repository)
        ...     .only_methods("fetch")
        ...     .enable_argument_cloning()
        ...     .get_mock()
        ... )
    """

    __slots__ = ("_factory", "_targets")

    def __init__(
        self,
        target: Target | Sequence[Target],
        *,
        factory: DoubleFactory | None = None,
    ) -> None:
        """Initialize builder for one target or an intersection of several.

        Args:
            target: Class, dotted path or surface, or a list of them to intersect
            factory: Factory to build with (shared default if None)
        """
        super().__init__()
        if isinstance(target, list | tuple):
            self._targets: tuple[Target, ...] = tuple(target)
        else:
            self._targets = (target,)
        self._factory = factory if factory is not None else _FACTORY

    def get_stub(self) -> Any:
        """Build a stub with the configured options."""
        return self._build(DoubleKind.STUB)

    def get_mock(self) -> Any:
        """Build a mock with the configured options."""
        return self._build(DoubleKind.MOCK)

    def _build(self, kind: DoubleKind) -> Any:
        surfaces = _surfaces_of(self._targets)
        surface = surfaces[0] if len(surfaces) == 1 else surfaces
        return self._factory.build(surface, self.build(), kind=kind)


@overload
def create_stub[T](target: type[T]) -> T: ...
@overload
def create_stub(target: str | MethodSurfaceDescriptor) -> Any: ...
def create_stub(target: Target) -> Any:
    """Stub with default options: answers calls, rejects expectations."""
    return _FACTORY.build(surface_of(target), BuildConfiguration(), kind=DoubleKind.STUB)


@overload
def create_mock[T](target: type[T]) -> T: ...
@overload
def create_mock(target: str | MethodSurfaceDescriptor) -> Any: ...
def create_mock(target: Target) -> Any:
    """Mock with default options: answers calls and verifies expectations."""
    return _FACTORY.build(surface_of(target), BuildConfiguration(), kind=DoubleKind.MOCK)


def create_configured_stub(target: Target, returns: Mapping[str, object]) -> Any:
    """Stub answering each named operation with a fixed value.

    Raises:
        UnknownMethodError: If a name is not an intercepted operation
        InvalidReturnValueError: If a value does not satisfy the return type
    """
    stub = create_stub(target)
    controller = control(stub)
    for name, value in returns.items():
        controller.method(name).will_return(value)
    return stub


def create_stub_for_intersection(targets: Sequence[Target]) -> Any:
    """Stub implementing every target at once.

    Raises:
        IncompatibleSurfaceError: If the targets declare one name with
            different signatures, or cannot share a subclass
    """
    return _FACTORY.build(_surfaces_of(targets), BuildConfiguration(), kind=DoubleKind.STUB)


def create_mock_for_intersection(targets: Sequence[Target]) -> Any:
    """Mock implementing every target at once.

    Raises:
        IncompatibleSurfaceError: If the targets declare one name with
            different signatures, or cannot share a subclass
    """
    return _FACTORY.build(_surfaces_of(targets), BuildConfiguration(), kind=DoubleKind.MOCK)
