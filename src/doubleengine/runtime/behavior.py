"""Behavior table: per-method ordered stubbing rules.

Rules are evaluated in configuration order and the first rule whose
argument matcher accepts the call wins. Later rules never shadow earlier
ones, so a catch-all rule configured first answers every call.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from doubleengine.matching import ArgumentMatcher

from .actions import Action

__all__ = ["BehaviorRule", "BehaviorTable"]


@dataclass(frozen=True, slots=True)
class BehaviorRule:
    """(ArgumentMatcher, Action) pair.

    Attributes:
        matcher: Selects the calls this rule answers
        action: What the call does once selected
    """

    matcher: ArgumentMatcher
    action: Action

    def accepts(self, args: tuple[object, ...], kwargs: Mapping[str, object]) -> bool:
        """Whether this rule answers a call with these arguments."""
        return self.matcher.matches(args, kwargs)


class BehaviorTable:
    """Method name to ordered list of BehaviorRule.

    Example:
        >>> table = BehaviorTable()
        >>> table.add("fetch", BehaviorRule(ANY_ARGUMENTS, ReturnValue("x")))
        >>> table.select("fetch", (1,), {}).action
        ReturnValue(value='x')
    """

    __slots__ = ("_rules",)

    def __init__(self) -> None:
        """Initialize empty table."""
        self._rules: dict[str, list[BehaviorRule]] = {}

    def add(self, method_name: str, rule: BehaviorRule) -> None:
        """Append a rule after every rule already configured for the method."""
        self._rules.setdefault(method_name, []).append(rule)

    def rules_for(self, method_name: str) -> tuple[BehaviorRule, ...]:
        """Rules for one method in evaluation order."""
        return tuple(self._rules.get(method_name, ()))

    def select(
        self, method_name: str, args: tuple[object, ...], kwargs: Mapping[str, object]
    ) -> BehaviorRule | None:
        """First rule accepting the call, or None."""
        for rule in self._rules.get(method_name, ()):
            if rule.accepts(args, kwargs):
                return rule
        return None

    def copy(self) -> BehaviorTable:
        """Independent table holding the same rules, with stateful actions restarted."""
        clone = BehaviorTable()
        clone._rules = {
            name: [BehaviorRule(rule.matcher, rule.action.fresh()) for rule in rules]
            for name, rules in self._rules.items()
        }
        return clone

    def __contains__(self, method_name: object) -> bool:
        return method_name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._rules))

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._rules.values())
