"""Test Harness: utilities for testing spec trees.

Manifesto:
Checking hook order and failure attribution by hand means writing the same
"append a label to a list" lambdas over and over. This module provides them,
plus assertions over a :class:`~nestspec.runner.RunResult`.

ARCHITECTURE
────────────
::

    Call recording:
      CallRecorder.hook(label)          → zero-arg hook recording label
      CallRecorder.instance_hook(label) → class-level hook recording label
      CallRecorder.async_hook(label)    → async zero-arg hook
      CallRecorder.failing(label, exc)  → records, then raises exc

    Assertion helpers:
      assert_run_passed(result)
      assert_run_failed(result, example=None)
      assert_example_status(root, full_name, status)

    Lookup:
      find_example(root, full_name)

Example::

    from nestspec.testing import CallRecorder, assert_run_passed

    calls = CallRecorder()
    root = Context("root")
    root.before = calls.hook("root.before")
    root.add_example(Example("works", calls.hook("body")))

    result = SpecRunner().run(root, Spec())
    assert_run_passed(result)
    assert calls.calls == ["root.before", "body"]

Tags:
    nestspec, testing, harness, assertions

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from nestspec.domain.context import Context
from nestspec.domain.example import Example, ExampleStatus
from nestspec.runner import RunResult, RunStatus

# ---------------------------------------------------------------------------
# Call recording
# ---------------------------------------------------------------------------


class CallRecorder:
    """Builds hooks and bodies that append their label to ``calls``."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def hook(self, label: str) -> Callable[[], None]:
        def record() -> None:
            self.calls.append(label)

        record.__name__ = label
        return record

    def instance_hook(self, label: str) -> Callable[[Any], None]:
        def record(instance: Any) -> None:
            self.calls.append(label)

        record.__name__ = label
        return record

    def async_hook(self, label: str) -> Callable[[], Any]:
        async def record() -> None:
            self.calls.append(label)

        record.__name__ = label
        return record

    def async_instance_hook(self, label: str) -> Callable[[Any], Any]:
        async def record(instance: Any) -> None:
            self.calls.append(label)

        record.__name__ = label
        return record

    def failing(self, label: str, exception: BaseException) -> Callable[..., None]:
        """A hook (any arity) that records ``label`` then raises."""

        def record(*args: Any) -> None:
            self.calls.append(label)
            raise exception

        record.__name__ = label
        return record

    def clear(self) -> None:
        self.calls.clear()


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_example(root: Context, full_name: str) -> Example:
    """Find an example under ``root`` by its full name."""
    for example in root.all_examples():
        if example.full_name() == full_name:
            return example
    raise LookupError(f"No example named '{full_name}' under '{root.name}'")


# ---------------------------------------------------------------------------
# Assertion helpers
# ---------------------------------------------------------------------------


class RunAssertionError(AssertionError):
    """Raised when a run assertion fails.

    Provides contextual information about the run result.
    """

    def __init__(self, message: str, result: RunResult) -> None:
        self.result = result
        super().__init__(
            f"{message}\n  Run: {result.run_id}\n  Status: {result.status.value}"
            f"\n  Failed: {', '.join(result.failed_examples) or '-'}"
        )


def assert_run_passed(result: RunResult) -> None:
    """Assert that a run had no failed examples and no context failures."""
    if result.status != RunStatus.PASSED:
        raise RunAssertionError(f"Expected PASSED, got {result.status.value}", result)


def assert_run_failed(result: RunResult, example: str | None = None) -> None:
    """Assert that a run failed, optionally naming an example that must have failed."""
    if result.status != RunStatus.FAILED:
        raise RunAssertionError(f"Expected FAILED, got {result.status.value}", result)
    if example is not None and example not in result.failed_examples:
        raise RunAssertionError(f"Expected '{example}' among failed examples", result)


def assert_example_status(root: Context, full_name: str, status: ExampleStatus | str) -> None:
    """Assert the reported status of one example."""
    actual = find_example(root, full_name).status
    if actual != ExampleStatus(status):
        raise AssertionError(f"Expected '{full_name}' to be {ExampleStatus(status).value}, got {actual.value}")
