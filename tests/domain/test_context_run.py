"""Tests for Context.run: traversal, filtering, fail-fast and live reporting."""

from nestspec.domain import Context, Example, ExampleStatus, Spec, TagsFilter


def _failing_body(message="nope"):
    def body():
        raise AssertionError(message)

    return body


class TestTraversal:
    def test_own_examples_before_children(self, calls, formatter, spec):
        root = Context("root")
        child = root.add_context(Context("child"))
        child.add_example(Example("c1", calls.hook("c1")))
        root.add_example(Example("r1", calls.hook("r1")))
        root.build(spec)
        root.run(formatter, instance=spec)
        assert calls.calls == ["r1", "c1"]

    def test_uses_saved_instance_over_argument(self, formatter):
        seen = []
        bound = Spec()
        ctx = Context("ctx")
        ctx.before_instance = seen.append
        ctx.add_example(Example("works", lambda: None))
        ctx.build(bound)
        ctx.run(formatter, instance=Spec())
        assert seen == [bound]

    def test_examples_appended_while_running_are_executed(self, calls, formatter, spec):
        ctx = Context("ctx")

        def grows():
            calls.calls.append("first")
            ctx.add_example(Example("added", calls.hook("added")))

        ctx.add_example(Example("first", grows))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert calls.calls == ["first", "added"]
        assert formatter.examples == ["first", "added"]

    def test_sibling_failure_does_not_affect_others(self, formatter, spec):
        ctx = Context("ctx")
        bad = ctx.add_example(Example("bad", _failing_body()))
        good = ctx.add_example(Example("good", lambda: None))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert bad.status is ExampleStatus.FAILED
        assert good.status is ExampleStatus.PASSED


class TestTagFiltering:
    def test_filtered_example_never_runs_or_reports(self, calls, formatter):
        spec = Spec(TagsFilter.parse("~slow"))
        ctx = Context("ctx")
        ctx.before = calls.hook("before")
        slow = ctx.add_example(Example("slow one", calls.hook("slow"), tags="slow"))
        ctx.add_example(Example("fast one", calls.hook("fast")))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert calls.calls == ["before", "fast"]
        assert slow.has_run is False
        assert formatter.examples == ["fast one"]

    def test_inherited_context_tags_filter_examples(self, calls, formatter):
        spec = Spec(TagsFilter.parse("db"))
        root = Context("root")
        db = root.add_context(Context("database", tags="db"))
        db.add_example(Example("stores", calls.hook("stores")))
        ui = root.add_context(Context("ui"))
        ui.add_example(Example("renders", calls.hook("renders")))
        root.build(spec)
        root.run(formatter, instance=spec)
        assert calls.calls == ["stores"]
        assert formatter.contexts == ["database"]

    def test_excluding_pending(self, formatter):
        spec = Spec(TagsFilter.parse("~pending"))
        ctx = Context("ctx")
        later = ctx.add_example(Example("later"))
        now = ctx.add_example(Example("now", lambda: None))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert later.has_run is False
        assert now.has_run is True


class TestPending:
    def test_pending_child_context_reports_pending(self, calls, formatter, spec):
        a = Context("A")
        b = a.add_context(Context("B", is_pending=True))
        b1 = b.add_example(Example("b1", calls.failing("b1", AssertionError("never"))))
        a.build(spec)
        a.run(formatter, instance=spec)
        assert b1.pending is True
        assert b1.status is ExampleStatus.PENDING
        assert calls.calls == []
        assert formatter.lines() == ["B", "  b1: pending"]

    def test_pending_example_still_gets_hooks(self, calls, formatter, spec):
        ctx = Context("ctx")
        ctx.before = calls.hook("before")
        ctx.add_example(Example("later"))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert calls.calls == ["before"]


class TestBeforeAllFailure:
    def test_examples_still_attempt_to_run(self, calls, formatter, spec):
        error = RuntimeError("no database")
        ctx = Context("ctx")
        ctx.before_all = calls.failing("before_all", error)
        ctx.after_all = calls.hook("after_all")
        first = ctx.add_example(Example("first", calls.hook("first")))
        second = ctx.add_example(Example("second", calls.hook("second")))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert calls.calls == ["before_all", "first", "second", "after_all"]
        assert first.has_run and second.has_run

    def test_failure_recorded_once_at_context_scope(self, calls, formatter, spec):
        error = RuntimeError("no database")
        ctx = Context("ctx")
        ctx.before_all = calls.failing("before_all", error)
        first = ctx.add_example(Example("first", lambda: None))
        second = ctx.add_example(Example("second", lambda: None))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert ctx.exception is error
        # examples share the one recorded object rather than copies
        assert first.exception is error and second.exception is error

    def test_after_all_failure_is_contained(self, calls, formatter, spec):
        ctx = Context("ctx")
        ctx.after_all = calls.failing("after_all", RuntimeError("cleanup"))
        example = ctx.add_example(Example("works", lambda: None))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert isinstance(ctx.exception, RuntimeError)
        assert example.status is ExampleStatus.PASSED


class TestFailFast:
    def test_stops_remaining_siblings(self, calls, formatter, spec):
        ctx = Context("ctx")
        ctx.add_example(Example("first", calls.failing("first", AssertionError("x"))))
        second = ctx.add_example(Example("second", calls.hook("second")))
        ctx.build(spec)
        ctx.run(formatter, fail_fast=True, instance=spec)
        assert calls.calls == ["first"]
        assert second.has_run is False

    def test_stops_descendants(self, calls, formatter, spec):
        root = Context("root")
        root.add_example(Example("first", calls.failing("first", AssertionError("x"))))
        child = root.add_context(Context("child"))
        child.add_example(Example("nested", calls.hook("nested")))
        root.build(spec)
        root.run(formatter, fail_fast=True, instance=spec)
        assert calls.calls == ["first"]

    def test_skips_after_all_on_abort(self, calls, formatter, spec):
        ctx = Context("ctx")
        ctx.before_all = calls.hook("before_all")
        ctx.after_all = calls.hook("after_all")
        ctx.add_example(Example("first", calls.failing("first", AssertionError("x"))))
        ctx.add_example(Example("second", calls.hook("second")))
        ctx.build(spec)
        ctx.run(formatter, fail_fast=True, instance=spec)
        assert calls.calls == ["before_all", "first"]

    def test_root_always_starts(self, calls, formatter, spec):
        root = Context("root")
        root.add_example(Example("only", calls.hook("only")))
        root.build(spec)
        root.run(formatter, fail_fast=True, instance=spec)
        assert calls.calls == ["only"]

    def test_without_fail_fast_everything_runs(self, calls, formatter, spec):
        root = Context("root")
        root.add_example(Example("first", calls.failing("first", AssertionError("x"))))
        child = root.add_context(Context("child"))
        child.add_example(Example("nested", calls.hook("nested")))
        root.build(spec)
        root.run(formatter, instance=spec)
        assert calls.calls == ["first", "nested"]

    def test_pending_does_not_trigger_fail_fast(self, calls, formatter, spec):
        ctx = Context("ctx")
        ctx.add_example(Example("later"))
        ctx.add_example(Example("now", calls.hook("now")))
        ctx.build(spec)
        ctx.run(formatter, fail_fast=True, instance=spec)
        assert calls.calls == ["now"]


class TestLiveReporting:
    def test_headers_written_once_and_root_never(self, formatter, spec):
        root = Context("root")
        root.add_example(Example("r1", lambda: None))
        child = root.add_context(Context("child"))
        child.add_example(Example("c1", lambda: None))
        child.add_example(Example("c2", lambda: None))
        grandchild = child.add_context(Context("grandchild"))
        grandchild.add_example(Example("g1", lambda: None))
        root.build(spec)
        root.run(formatter, instance=spec)
        assert formatter.lines() == [
            "r1: passed",
            "child",
            "  c1: passed",
            "  c2: passed",
            "  grandchild",
            "    g1: passed",
        ]

    def test_ancestors_written_lazily(self, formatter, spec):
        root = Context("root")
        outer = root.add_context(Context("outer"))
        inner = outer.add_context(Context("inner"))
        inner.add_example(Example("deep", lambda: None))
        root.build(spec)
        root.run(formatter, instance=spec)
        assert [(e.kind, e.name, e.level) for e in formatter.events] == [
            ("context", "outer", 1),
            ("context", "inner", 2),
            ("example", "deep", 2),
        ]

    def test_context_without_executed_examples_is_not_written(self, formatter):
        spec = Spec(TagsFilter.parse("db"))
        root = Context("root")
        empty = root.add_context(Context("nothing tagged"))
        empty.add_example(Example("ui", lambda: None))
        root.build(spec)
        root.run(formatter, instance=spec)
        assert formatter.events == []

    def test_example_reported_with_final_status(self, calls, formatter, spec):
        ctx = Context("ctx")
        ctx.after = calls.failing("after", RuntimeError("teardown"))
        ctx.add_example(Example("works", lambda: None))
        root = Context("root")
        root.add_context(ctx)
        root.build(spec)
        root.run(formatter, instance=spec)
        assert formatter.events[-1].status == "failed"


class TestEffectiveFilter:
    def test_unset_filter_runs_everything(self):
        tags_filter = Spec().effective_filter()
        assert isinstance(tags_filter, TagsFilter)
        assert not tags_filter

    def test_run_consults_effective_filter(self, calls, formatter):
        class FastOnlySpec(Spec):
            def effective_filter(self):
                return TagsFilter.parse("~slow")

        spec = FastOnlySpec()
        ctx = Context("ctx")
        ctx.before_all = calls.hook("before_all")
        ctx.add_example(Example("slow one", calls.hook("slow"), tags="slow"))
        ctx.build(spec)
        ctx.run(formatter, instance=spec)
        assert calls.calls == []
        assert formatter.events == []
