"""Tests for nestspec.testing: the call recorder and run assertions."""

import pytest

from nestspec import Context, Example, ExampleStatus, RunnerSettings, Spec, SpecRunner
from nestspec.formatters import RecordingFormatter
from nestspec.testing import (
    CallRecorder,
    RunAssertionError,
    assert_example_status,
    assert_run_failed,
    assert_run_passed,
    find_example,
)


def _run(root):
    return SpecRunner(RunnerSettings(), formatter=RecordingFormatter()).run(root, Spec())


def _passing_tree():
    root = Context("root")
    root.add_example(Example("works", lambda: None))
    return root


def _failing_tree():
    root = Context("root")
    child = root.add_context(Context("child"))

    def fails():
        raise AssertionError("nope")

    child.add_example(Example("breaks", fails))
    child.add_example(Example("later"))
    return root


class TestCallRecorder:
    def test_hooks_record_labels(self, spec):
        calls = CallRecorder()
        calls.hook("a")()
        calls.instance_hook("b")(spec)
        assert calls.calls == ["a", "b"]

    def test_async_hooks_record_when_awaited(self, spec):
        import asyncio

        calls = CallRecorder()
        coroutine = calls.async_hook("a")()
        assert calls.calls == []
        asyncio.run(coroutine)
        asyncio.run(calls.async_instance_hook("b")(spec))
        assert calls.calls == ["a", "b"]

    def test_failing_records_then_raises(self):
        calls = CallRecorder()
        hook = calls.failing("boom", KeyError("k"))
        with pytest.raises(KeyError):
            hook()
        with pytest.raises(KeyError):
            hook(object())
        assert calls.calls == ["boom", "boom"]

    def test_clear(self):
        calls = CallRecorder()
        calls.hook("a")()
        calls.clear()
        assert calls.calls == []

    def test_hook_names(self):
        assert CallRecorder().hook("root.before").__name__ == "root.before"


class TestFindExample:
    def test_finds_by_full_name(self):
        root = _failing_tree()
        assert find_example(root, "root. child. breaks").name == "breaks"

    def test_missing_raises_lookup_error(self):
        with pytest.raises(LookupError, match="No example named"):
            find_example(_failing_tree(), "root. nope")


class TestRunAssertions:
    def test_assert_run_passed(self):
        assert_run_passed(_run(_passing_tree()))

    def test_assert_run_passed_fails_on_failed_run(self):
        with pytest.raises(RunAssertionError) as excinfo:
            assert_run_passed(_run(_failing_tree()))
        assert "root. child. breaks" in str(excinfo.value)
        assert excinfo.value.result.failed == 1

    def test_assert_run_failed(self):
        result = _run(_failing_tree())
        assert_run_failed(result)
        assert_run_failed(result, example="root. child. breaks")

    def test_assert_run_failed_names_missing_example(self):
        result = _run(_failing_tree())
        with pytest.raises(RunAssertionError, match="among failed examples"):
            assert_run_failed(result, example="root. child. later")

    def test_assert_run_failed_on_passing_run(self):
        with pytest.raises(RunAssertionError, match="Expected FAILED"):
            assert_run_failed(_run(_passing_tree()))

    def test_assert_run_failed_is_an_assertion_error(self):
        assert issubclass(RunAssertionError, AssertionError)

    def test_assert_example_status(self):
        root = _failing_tree()
        _run(root)
        assert_example_status(root, "root. child. breaks", ExampleStatus.FAILED)
        assert_example_status(root, "root. child. later", "pending")
        with pytest.raises(AssertionError, match="Expected 'root. child. later' to be passed"):
            assert_example_status(root, "root. child. later", ExampleStatus.PASSED)
