"""Double scope: explicit owner of the doubles created for one test.

A scope keeps a reference to every double it creates and verifies all of
them together, so a test reports every unsatisfied expectation at once:

    with DoubleScope() as doubles:
        repo = doubles.mock(Repository)
        control(repo).expects(once()).method("save")
        service.run(repo)
    # VerificationError raised here if save() was not called exactly once

No global registry is involved: doubles created outside a scope are only
verified when their controller is asked to.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from types import TracebackType
from typing import Any, Self

from .diagnostics import ErrorTemplate, VerificationError
from .enums import DoubleKind
from .runtime import (
    BuildConfiguration,
    DoubleBuilder,
    DoubleFactory,
    Target,
    VerificationFailure,
    control,
    finalize_all,
    surface_of,
)

__all__ = ["DoubleScope"]

logger = logging.getLogger(__name__)


class _ScopedBuilder(DoubleBuilder):
    """DoubleBuilder registering what it builds with a scope."""

    __slots__ = ("_scope",)

    def __init__(self, scope: DoubleScope, target: Target | Sequence[Target]) -> None:
        super().__init__(target, factory=scope.factory)
        self._scope = scope

    def get_stub(self) -> Any:
        return self._scope.adopt(super().get_stub())

    def get_mock(self) -> Any:
        return self._scope.adopt(super().get_mock())


class DoubleScope:
    """Owner of the doubles of one test.

    Supports:
        - len(scope): Number of owned doubles
        - iter(scope): Owned doubles in creation order
        - with scope: Verifies on clean exit

    Attributes:
        factory: Factory used for every double the scope creates
    """

    __slots__ = ("_doubles", "factory")

    def __init__(self, factory: DoubleFactory | None = None) -> None:
        """Initialize empty scope."""
        self.factory = factory if factory is not None else DoubleFactory()
        self._doubles: list[object] = []

    def __len__(self) -> int:
        return len(self._doubles)

    def __iter__(self) -> Iterator[object]:
        return iter(tuple(self._doubles))

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        # A failing test body is reported as-is.
        if exc_type is None:
            self.verify()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def adopt(self, double: Any) -> Any:
        """Take ownership of an existing double.

        Raises:
            NotADoubleError: If double was not created by DoubleFactory
        """
        control(double)
        if not any(owned is double for owned in self._doubles):
            self._doubles.append(double)
        return double

    def stub(self, target: Target) -> Any:
        """Create and own a stub."""
        return self.adopt(self.factory.build(surface_of(target), kind=DoubleKind.STUB))

    def mock(self, target: Target) -> Any:
        """Create and own a mock."""
        return self.adopt(self.factory.build(surface_of(target), kind=DoubleKind.MOCK))

    def configured_stub(self, target: Target, returns: Mapping[str, object]) -> Any:
        """Create and own a stub answering each named operation with a fixed value."""
        stub = self.stub(target)
        controller = control(stub)
        for name, value in returns.items():
            controller.method(name).will_return(value)
        return stub

    def stub_for_intersection(self, targets: Sequence[Target]) -> Any:
        """Create and own a stub implementing every target."""
        surfaces = [surface_of(t) for t in targets]
        return self.adopt(self.factory.build(surfaces, BuildConfiguration(), kind=DoubleKind.STUB))

    def mock_for_intersection(self, targets: Sequence[Target]) -> Any:
        """Create and own a mock implementing every target."""
        surfaces = [surface_of(t) for t in targets]
        return self.adopt(self.factory.build(surfaces, BuildConfiguration(), kind=DoubleKind.MOCK))

    def builder(self, target: Target | Sequence[Target]) -> DoubleBuilder:
        """DoubleBuilder whose doubles this scope owns."""
        return _ScopedBuilder(self, target)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def finalize_all(self) -> list[VerificationFailure]:
        """Unsatisfied expectations of every owned double, in creation order."""
        return [failure for double in self._doubles for failure in finalize_all(double)]

    def verify(self) -> None:
        """Raise if any owned double has an unsatisfied expectation.

        Raises:
            VerificationError: Aggregating every unsatisfied expectation
        """
        failures = self.finalize_all()
        logger.debug(
            "Verified %d double(s): %d unsatisfied expectation(s)",
            len(self._doubles),
            len(failures),
        )
        if failures:
            raise VerificationError(
                ErrorTemplate.verification_failed(len(failures), len(self._doubles)),
                [failure.to_error() for failure in failures],
            )
