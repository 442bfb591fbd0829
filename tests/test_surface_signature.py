"""Method signature and surface tests.

Validates argument normalization, surface indexing and intersection merging.
"""

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from doubleengine.diagnostics import IncompatibleSurfaceError, InvalidConfigurationError
from doubleengine.enums import ParameterKind
from doubleengine.surface import (
    BYTES,
    INTEGER,
    TEXT,
    MethodSignature,
    MethodSurfaceDescriptor,
    ParameterSpec,
    merge_surfaces,
    variadic_signature,
)
from tests.strategies import method_names, scalar_values

FETCH = MethodSignature(
    "fetch",
    (ParameterSpec("key", annotation="int"), ParameterSpec("default", default=None)),
    TEXT,
)
THREE = MethodSignature(
    "three",
    (ParameterSpec("a"), ParameterSpec("b", default=2), ParameterSpec("c", default=3)),
)
OPEN = MethodSignature(
    "open",
    (
        ParameterSpec("path"),
        ParameterSpec("mode", ParameterKind.KEYWORD_ONLY),
        ParameterSpec("buffering", ParameterKind.KEYWORD_ONLY, default=-1),
    ),
)
OPTIONS = MethodSignature(
    "options",
    (ParameterSpec("name"), ParameterSpec("extra", ParameterKind.VAR_KEYWORD)),
)
ONLY = MethodSignature(
    "only",
    (
        ParameterSpec("a", ParameterKind.POSITIONAL_ONLY),
        ParameterSpec("b", ParameterKind.POSITIONAL_ONLY, default=2),
        ParameterSpec("c", default=3),
    ),
)
MIXED_OPTIONS = MethodSignature(
    "mixed",
    (
        ParameterSpec("a", ParameterKind.POSITIONAL_ONLY),
        ParameterSpec("options", ParameterKind.VAR_KEYWORD),
    ),
)


class TestNormalize:
    """normalize() binds arguments like a Python call."""

    def test_positional_unchanged(self) -> None:
        """Positional arguments are kept as given."""
        assert FETCH.normalize((1,), {}) == ((1,), {})
        assert FETCH.normalize((1, "d"), {}) == ((1, "d"), {})

    def test_keyword_moves_to_positional_slot(self) -> None:
        """A keyword naming a positional parameter becomes positional."""
        assert FETCH.normalize((), {"key": 1}) == ((1,), {})

    def test_keywords_in_any_order(self) -> None:
        """Keyword order does not matter."""
        assert FETCH.normalize((), {"default": "d", "key": 1}) == ((1, "d"), {})

    def test_skipped_slot_takes_default(self) -> None:
        """Slots before a keyword-provided slot are filled with defaults."""
        assert THREE.normalize((1,), {"c": 5}) == ((1, 2, 5), {})

    def test_trailing_defaults_not_filled(self) -> None:
        """Omitted trailing defaults stay omitted."""
        assert THREE.normalize((1,), {}) == ((1,), {})

    def test_keyword_only_stays_keyed(self) -> None:
        """Keyword-only arguments remain keyword arguments."""
        assert OPEN.normalize(("f",), {"mode": "r"}) == (("f",), {"mode": "r"})

    def test_var_keyword_accepts_extras(self) -> None:
        """**kwargs collects unknown keywords."""
        assert OPTIONS.normalize(("n",), {"x": 1}) == (("n",), {"x": 1})

    def test_positional_only_not_bound_from_keyword(self) -> None:
        """A positional-only parameter cannot be passed by name."""
        with pytest.raises(TypeError, match="missing required argument: 'a'"):
            ONLY.normalize((), {"a": 1})
        with pytest.raises(TypeError, match="unexpected keyword argument 'b'"):
            ONLY.normalize((1,), {"b": 2})

    def test_positional_only_skipped_slot_takes_default(self) -> None:
        """A keyword for a later slot still fills skipped positional-only defaults."""
        assert ONLY.normalize((1,), {"c": 5}) == ((1, 2, 5), {})

    def test_positional_only_name_reaches_var_keyword(self) -> None:
        """With **kwargs, a keyword sharing a positional-only name stays keyed."""
        assert MIXED_OPTIONS.normalize((1,), {"a": 2}) == ((1,), {"a": 2})

    @pytest.mark.parametrize(
        ("signature", "args", "kwargs", "message"),
        [
            (FETCH, (1, 2, 3), {}, "positional argument"),
            (FETCH, (1,), {"key": 2}, "multiple values"),
            (FETCH, (), {}, "missing required argument"),
            (OPEN, ("f",), {}, "missing required keyword-only"),
            (FETCH, (1,), {"other": 2}, "unexpected keyword"),
        ],
    )
    def test_mismatch_raises_type_error(
        self,
        signature: MethodSignature,
        args: tuple[object, ...],
        kwargs: dict[str, object],
        message: str,
    ) -> None:
        """Calls that do not fit the signature raise TypeError."""
        with pytest.raises(TypeError, match=message):
            signature.normalize(args, kwargs)

    @given(
        st.lists(scalar_values, max_size=5),
        st.dictionaries(st.sampled_from(["x", "y", "z"]), scalar_values, max_size=3),
    )
    def test_variadic_passes_everything_through(
        self, args: list[object], kwargs: dict[str, object]
    ) -> None:
        """A variadic signature accepts and preserves any call."""
        event(f"args={len(args)}")
        event(f"kwargs={len(kwargs)}")
        signature = variadic_signature("anything")
        assert signature.normalize(tuple(args), kwargs) == (tuple(args), kwargs)


class TestMethodSignature:
    """Signature properties and rendering."""

    def test_render(self) -> None:
        """Render shows parameters, defaults and return type."""
        assert FETCH.render() == "fetch(key: int, default = ...) -> str"
        assert variadic_signature("f").render() == "f(*args, **kwargs) -> Any"
        assert ONLY.render() == "only(a, b = ..., /, c = ...) -> Any"

    def test_flags(self) -> None:
        """nullable and variadic are derived."""
        assert not FETCH.nullable
        assert not FETCH.variadic
        assert variadic_signature("f").variadic

    def test_compatible_ignores_abstract(self) -> None:
        """Abstract and concrete declarations of one signature are compatible."""
        abstract = MethodSignature("fetch", FETCH.parameters, TEXT, abstract=True)
        assert FETCH.compatible_with(abstract)

    def test_incompatible_return_type(self) -> None:
        """Different return types are incompatible."""
        other = MethodSignature("fetch", FETCH.parameters, INTEGER)
        assert not FETCH.compatible_with(other)


class TestSurfaceDescriptor:
    """Surface indexing."""

    def test_lookup(self) -> None:
        """Surfaces support in, get(), len() and iteration."""
        surface = MethodSurfaceDescriptor("Repo", (FETCH, THREE))
        assert "fetch" in surface
        assert "missing" not in surface
        assert surface.get("three") is THREE
        assert surface.get("missing") is None
        assert len(surface) == 2
        assert [s.name for s in surface] == ["fetch", "three"]
        assert surface.method_names == frozenset({"fetch", "three"})

    def test_duplicate_names_rejected(self) -> None:
        """One surface cannot declare a name twice."""
        with pytest.raises(InvalidConfigurationError, match="declares 'fetch' twice"):
            MethodSurfaceDescriptor("Repo", (FETCH, FETCH))

    def test_with_signatures(self) -> None:
        """with_signatures() returns an extended copy."""
        surface = MethodSurfaceDescriptor("Repo", (FETCH,))
        extended = surface.with_signatures([THREE])
        assert extended.method_names == frozenset({"fetch", "three"})
        assert surface.method_names == frozenset({"fetch"})

    @given(st.lists(method_names(), min_size=1, max_size=8, unique=True))
    def test_index_matches_signatures(self, names: list[str]) -> None:
        """Every declared signature is reachable by name."""
        event(f"size={len(names)}")
        surface = MethodSurfaceDescriptor("Generated", tuple(variadic_signature(n) for n in names))
        assert surface.method_names == frozenset(names)
        for name in names:
            signature = surface.get(name)
            assert signature is not None
            assert signature.name == name


class TestMergeSurfaces:
    """Intersection surfaces."""

    READER = MethodSurfaceDescriptor(
        "Reader", (MethodSignature("read", (ParameterSpec("path"),), BYTES),)
    )
    WRITER = MethodSurfaceDescriptor(
        "Writer", (MethodSignature("write", (ParameterSpec("path"),), INTEGER),)
    )

    def test_disjoint_union(self) -> None:
        """Disjoint surfaces merge into the union of their operations."""
        merged = merge_surfaces([self.READER, self.WRITER])
        assert merged.name == "Reader & Writer"
        assert merged.method_names == frozenset({"read", "write"})

    def test_identical_duplicates_collapse(self) -> None:
        """A name declared identically twice appears once."""
        merged = merge_surfaces([self.READER, self.READER.with_signatures([])])
        assert len(merged) == 1

    def test_abstract_wins(self) -> None:
        """A duplicate is abstract if any declaration is."""
        abstract = MethodSurfaceDescriptor(
            "AbstractReader",
            (MethodSignature("read", (ParameterSpec("path"),), BYTES, abstract=True),),
        )
        merged = merge_surfaces([self.READER, abstract])
        signature = merged.get("read")
        assert signature is not None
        assert signature.abstract

    def test_incompatible_signatures_rejected(self) -> None:
        """One name with different signatures cannot be merged."""
        text_reader = MethodSurfaceDescriptor(
            "TextReader",
            (MethodSignature("read", (ParameterSpec("path"), ParameterSpec("encoding")), TEXT),),
        )
        with pytest.raises(IncompatibleSurfaceError, match="incompatible signatures"):
            merge_surfaces([self.READER, text_reader])

    def test_single_surface_returned(self) -> None:
        """Merging one surface returns it unchanged."""
        assert merge_surfaces([self.READER]) is self.READER

    def test_empty_rejected(self) -> None:
        """At least one surface is required."""
        with pytest.raises(InvalidConfigurationError):
            merge_surfaces([])
