"""Interception core: the single path every call on a double takes.

For each call:

1. Reject operations the double does not expose.
2. Bind the arguments against the operation's signature.
3. Let the first applicable expectation verifier count the call.
4. Append the call to the invocation ledger.
5. Raise UnexpectedInvocationError if the verifier reported over-saturation.
6. Run the first behavior rule accepting the arguments.
7. Otherwise delegate to the proxy target, or return a generated default.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import partial
from typing import TYPE_CHECKING

from doubleengine.constants import LOG_TRUNCATE_REPR
from doubleengine.diagnostics import (
    ErrorTemplate,
    NoOriginalMethodError,
    NotADoubleError,
    UnexpectedInvocationError,
    UnknownMethodError,
)
from doubleengine.enums import DoubleKind
from doubleengine.surface import MethodSignature, MethodSurfaceDescriptor

from .actions import Invocation
from .behavior import BehaviorRule, BehaviorTable
from .configuration import BuildConfiguration
from .ledger import InvocationLedger, render_arguments
from .verifier import ExpectationVerifier, VerificationFailure

if TYPE_CHECKING:
    from .autovalue import AutoValueGenerator

__all__ = ["HANDLER_ATTRIBUTE", "InvocationHandler", "handler_of"]

logger = logging.getLogger(__name__)

# Instance attribute holding a double's handler.
HANDLER_ATTRIBUTE: str = "__double_handler__"


def _truncate(text: str) -> str:
    if len(text) <= LOG_TRUNCATE_REPR:
        return text
    return text[: LOG_TRUNCATE_REPR - 3] + "..."


def handler_of(instance: object) -> InvocationHandler:
    """Return the handler of a double.

    Raises:
        NotADoubleError: If instance was not created by DoubleFactory
    """
    try:
        handler = object.__getattribute__(instance, HANDLER_ATTRIBUTE)
    except AttributeError:
        handler = None
    if not isinstance(handler, InvocationHandler):
        raise NotADoubleError(ErrorTemplate.not_a_double(instance))
    return handler


class InvocationHandler:
    """Per-double interception state.

    Owns the behavior table, invocation ledger and expectation verifiers
    of exactly one double.

    Attributes:
        surface: Surface the double was built from
        config: Build options
        exposed: Intercepted operations by name
        kind: STUB or MOCK
        depth: Nesting depth (0 for doubles built by test code)
        table: Stubbing rules
        ledger: Recorded calls
    """

    __slots__ = (
        "_generator",
        "_originals",
        "_verifiers",
        "config",
        "depth",
        "exposed",
        "kind",
        "ledger",
        "surface",
        "table",
    )

    def __init__(
        self,
        surface: MethodSurfaceDescriptor,
        config: BuildConfiguration,
        exposed: Mapping[str, MethodSignature],
        *,
        kind: DoubleKind,
        depth: int,
        generator: AutoValueGenerator,
        originals: Mapping[str, Callable[..., object]],
    ) -> None:
        """Initialize handler with an empty table, ledger and verifier set.

        Args:
            surface: Surface the double was built from
            config: Build options
            exposed: Intercepted operations by name
            kind: STUB or MOCK
            depth: Nesting depth
            generator: Supplies defaults for unconfigured calls
            originals: Original implementations by operation name
        """
        self.surface = surface
        self.config = config
        self.exposed = dict(exposed)
        self.kind = kind
        self.depth = depth
        self.table = BehaviorTable()
        self.ledger = InvocationLedger()
        self._verifiers: dict[str, list[ExpectationVerifier]] = {}
        self._generator = generator
        self._originals = dict(originals)

    def __repr__(self) -> str:
        return (
            f"InvocationHandler({self.surface.name!r}, kind={self.kind!s}, "
            f"calls={len(self.ledger)})"
        )

    @property
    def target(self) -> str:
        """Display name of the doubled type."""
        return self.surface.name

    def signature(self, method_name: str) -> MethodSignature:
        """Signature of an exposed operation.

        Raises:
            UnknownMethodError: If the double does not intercept method_name
        """
        signature = self.exposed.get(method_name)
        if signature is None:
            raise UnknownMethodError(
                ErrorTemplate.unknown_method(self.target, method_name, self.exposed)
            )
        return signature

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def add_rule(self, method_name: str, rule: BehaviorRule) -> None:
        """Append a behavior rule for an exposed operation."""
        self.signature(method_name)
        self.table.add(method_name, rule)
        logger.debug(
            "Configured %s.%s%s -> %r",
            self.target,
            method_name,
            rule.matcher.describe(),
            rule.action,
        )

    def add_verifier(self, verifier: ExpectationVerifier) -> None:
        """Attach an expectation verifier after any existing ones."""
        self.signature(verifier.method_name)
        self._verifiers.setdefault(verifier.method_name, []).append(verifier)
        logger.debug(
            "Expecting %s.%s called %s",
            self.target,
            verifier.method_name,
            verifier.count_matcher.describe(),
        )

    def verifiers_for(self, method_name: str) -> tuple[ExpectationVerifier, ...]:
        """Verifiers of one operation in configuration order."""
        return tuple(self._verifiers.get(method_name, ()))

    @property
    def verifiers(self) -> tuple[ExpectationVerifier, ...]:
        """Every verifier in configuration order."""
        return tuple(v for verifiers in self._verifiers.values() for v in verifiers)

    # ------------------------------------------------------------------
    # Interception
    # ------------------------------------------------------------------

    def invoke(
        self,
        double: object,
        method_name: str,
        args: tuple[object, ...],
        kwargs: Mapping[str, object],
    ) -> object:
        """Answer one call made on the double.

        Args:
            double: The double that received the call
            method_name: Called operation
            args: Positional arguments as passed
            kwargs: Keyword arguments as passed

        Returns:
            The selected action's result, or the default resolution

        Raises:
            UnknownMethodError: If method_name is not exposed
            TypeError: If the arguments do not fit the signature
            UnexpectedInvocationError: If an expectation is over-saturated
        """
        signature = self.signature(method_name)
        args, bound_kwargs = signature.normalize(args, kwargs)

        failure = None
        for verifier in self._verifiers.get(method_name, ()):
            if verifier.applies(args, bound_kwargs):
                failure = verifier.record_and_check(args, bound_kwargs)
                break

        record = self.ledger.append(
            method_name, args, bound_kwargs, clone=self.config.clone_arguments
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Intercepted %s #%d %s%s",
                self.target,
                record.sequence,
                method_name,
                _truncate(render_arguments(args, bound_kwargs)),
            )

        if failure is not None:
            raise UnexpectedInvocationError(failure)

        invocation = Invocation(
            double=double,
            target=self.target,
            signature=signature,
            args=args,
            kwargs=bound_kwargs,
            fallback=partial(self._default_result, double, signature, args, bound_kwargs),
            call_original=partial(self._call_original, double, signature, args, bound_kwargs),
        )
        rule = self.table.select(method_name, args, bound_kwargs)
        if rule is not None:
            return rule.action.perform(invocation)
        return invocation.fallback()

    def _default_result(
        self,
        double: object,
        signature: MethodSignature,
        args: tuple[object, ...],
        kwargs: Mapping[str, object],
    ) -> object:
        proxy = self.config.proxy_target
        if proxy is not None and hasattr(proxy, signature.name):
            return getattr(proxy, signature.name)(*args, **kwargs)
        return self._generator.generate(signature.return_type, owner=double, depth=self.depth)

    def _call_original(
        self,
        double: object,
        signature: MethodSignature,
        args: tuple[object, ...],
        kwargs: Mapping[str, object],
    ) -> object:
        proxy = self.config.proxy_target
        if proxy is not None and hasattr(proxy, signature.name):
            return getattr(proxy, signature.name)(*args, **kwargs)
        original = self._originals.get(signature.name)
        if original is None:
            raise NoOriginalMethodError(
                ErrorTemplate.no_original_method(self.target, signature.name)
            )
        return original(double, *args, **kwargs)

    # ------------------------------------------------------------------
    # Verification and cloning
    # ------------------------------------------------------------------

    def finalize(self) -> list[VerificationFailure]:
        """Under-saturation failures of every verifier, in configuration order."""
        failures = [f for v in self.verifiers if (f := v.finalize()) is not None]
        if failures:
            logger.debug("%s: %d unsatisfied expectation(s)", self.target, len(failures))
        return failures

    def clone(self) -> InvocationHandler:
        """Handler for a copied double: same rules, fresh ledger, no expectations."""
        clone = InvocationHandler(
            self.surface,
            self.config,
            self.exposed,
            kind=self.kind,
            depth=self.depth,
            generator=self._generator,
            originals=self._originals,
        )
        clone.table = self.table.copy()
        return clone
