"""pytest integration.

Provides the `doubles` fixture: a DoubleScope verified when the test
finishes. Enable it with the `pytest11` entry point installed alongside the
package, or explicitly:

    pytest_plugins = ["doubleengine.pytest_plugin"]

Usage:
    def test_saves_once(doubles):
        repo = doubles.mock(Repository)
        control(repo).expects(once()).method("save")
        Service(repo).run()
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from .scope import DoubleScope

__all__ = ["doubles"]


@pytest.fixture
def doubles() -> Iterator[DoubleScope]:
    """Scope owning the test's doubles; unsatisfied expectations fail the test."""
    scope = DoubleScope()
    yield scope
    scope.verify()
