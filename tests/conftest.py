"""
Shared pytest fixtures and configuration for nestspec tests.

This module provides:
- Auto-marking of unit/integration tests by location
- A fresh spec instance, recording formatter and call recorder per test
- A three-level context tree with every per-example hook recorded

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.

    def test_something(spec, formatter, calls):
        ...
"""

import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure nestspec package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nestspec.core.logging import clear_context
from nestspec.domain import Context, Example, Spec
from nestspec.formatters import RecordingFormatter
from nestspec.testing import CallRecorder


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Make sure no bound log context leaks between tests."""
    clear_context()
    yield
    clear_context()


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def spec() -> Spec:
    return Spec()


@pytest.fixture
def formatter() -> RecordingFormatter:
    return RecordingFormatter()


@pytest.fixture
def calls() -> CallRecorder:
    return CallRecorder()


@pytest.fixture
def three_level_tree(calls: CallRecorder) -> Context:
    """
    root → middle → leaf, each with before/act/after recorded, and one
    example in the leaf whose body records ``body``.
    """
    root = Context("root")
    middle = root.add_context(Context("middle"))
    leaf = middle.add_context(Context("leaf"))
    for ctx in (root, middle, leaf):
        ctx.before = calls.hook(f"{ctx.name}.before")
        ctx.act = calls.hook(f"{ctx.name}.act")
        ctx.after = calls.hook(f"{ctx.name}.after")
    leaf.add_example(Example("works", calls.hook("body")))
    return root
