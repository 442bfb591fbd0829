"""Default return value tests.

Unconfigured calls answer with the canonical default of their declared
return type; object-typed returns answer with nested stubs built lazily.
"""

from collections.abc import Iterator

import pytest

from doubleengine import DoubleKind, control, create_mock, create_stub, is_double
from doubleengine.constants import MAX_DOUBLE_DEPTH
from doubleengine.core import DepthLimitExceededError
from doubleengine.diagnostics import UnresolvableTypeError
from tests.targets import Connection, Defaults, Node, QueryBuilder, Session, Status, Transaction


@pytest.fixture
def defaults() -> Defaults:
    return create_stub(Defaults)


class TestScalarDefaults:
    """Scalars, containers and enums."""

    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("integer", 0),
            ("ratio", 0.0),
            ("flag", False),
            ("label", ""),
            ("payload", b""),
            ("items", []),
            ("pair", ()),
            ("index", {}),
            ("tags", set()),
            ("frozen", frozenset()),
            ("sequence", []),
            ("mapping", {}),
            ("maybe", None),
            ("nothing", None),
            ("untyped", None),
            ("anything", None),
            ("status", Status.ACTIVE),
        ],
    )
    def test_default(self, defaults: Defaults, method: str, expected: object) -> None:
        """Each declared type answers with its canonical default."""
        result = getattr(defaults, method)()
        assert result == expected
        assert type(result) is type(expected)

    def test_iterators_are_exhausted(self, defaults: Defaults) -> None:
        """Iterator and generator returns are empty iterators."""
        for result in (defaults.stream(), defaults.generator()):
            assert isinstance(result, Iterator)
            assert list(result) == []

    def test_containers_are_fresh(self, defaults: Defaults) -> None:
        """Every call returns a new container."""
        first = defaults.items()
        first.append("x")
        assert defaults.items() == []

    def test_self_returns_double(self, defaults: Defaults) -> None:
        """Self-typed returns answer with the receiving double."""
        assert defaults.chained() is defaults


class TestUnresolvable:
    """Types without a canonical default."""

    @pytest.mark.parametrize("method", ["ambiguous", "function", "empty", "span"])
    def test_raises(self, defaults: Defaults, method: str) -> None:
        """Types with no canonical default must be configured."""
        with pytest.raises(UnresolvableTypeError):
            getattr(defaults, method)()

    def test_explicit_value_resolves(self, defaults: Defaults) -> None:
        """Configuring a value is how an ambiguous type is answered."""
        control(defaults).method("ambiguous").will_return("text")
        assert defaults.ambiguous() == "text"

    def test_call_is_recorded_before_failing(self) -> None:
        """The ledger keeps calls whose default could not be produced."""
        defaults = create_mock(Defaults)
        with pytest.raises(UnresolvableTypeError):
            defaults.ambiguous()
        assert control(defaults).call_count("ambiguous") == 1

    def test_container_without_empty_value(self, defaults: Defaults) -> None:
        """A container that cannot be built empty names itself in the diagnostic."""
        with pytest.raises(UnresolvableTypeError, match="range"):
            defaults.span()
        control(defaults).method("span").will_return(range(3))
        assert defaults.span() == range(3)


class TestNestedDoubles:
    """Object-typed returns."""

    def test_chain_without_configuration(self) -> None:
        """Chained calls work through nested stubs."""
        connection = create_stub(Connection)
        assert connection.session().transaction().commit() is False

    def test_nested_doubles_are_stubs(self) -> None:
        """Nested doubles are stubs one level deeper than their owner."""
        session = create_mock(Connection).session()
        assert isinstance(session, Session)
        assert is_double(session)
        assert control(session).kind is DoubleKind.STUB
        assert control(session).depth == 1
        transaction = session.transaction()
        assert isinstance(transaction, Transaction)
        assert control(transaction).depth == 2

    def test_nested_doubles_are_configurable(self) -> None:
        """Nested stubs can be configured like any stub."""
        session = create_stub(Connection).session()
        transaction = session.transaction()
        control(transaction).method("commit").will_return(True)
        assert transaction.commit() is True

    def test_each_call_builds_a_new_double(self) -> None:
        """Nested doubles are not cached between calls."""
        connection = create_stub(Connection)
        assert connection.session() is not connection.session()

    def test_protocol_return(self) -> None:
        """Protocol-typed returns answer with a double of the protocol."""
        nested = create_stub(QueryBuilder).where("a")
        assert QueryBuilder in type(nested).__mro__
        assert nested.build() == ""

    def test_self_referencing_chain_is_bounded(self) -> None:
        """Walking a self-referencing type fails at the depth limit."""
        node = create_stub(Node)
        for _ in range(MAX_DOUBLE_DEPTH - 1):
            node = node.next()
        assert control(node).depth == MAX_DOUBLE_DEPTH - 1
        with pytest.raises(DepthLimitExceededError):
            node.next()

    def test_depth_limit_is_unresolvable(self) -> None:
        """The depth-limit error is an unresolvable-type error."""
        assert issubclass(DepthLimitExceededError, UnresolvableTypeError)
