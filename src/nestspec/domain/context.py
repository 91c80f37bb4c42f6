"""Context: a node of the spec tree and the engine that runs it.

A context is a "describe" scope. It owns child contexts, child examples and
up to twenty hook slots (five phases × context/class scope × sync/async),
and it knows how to run itself.

ARCHITECTURE
────────────
::

    Context("Stack")                              level 0
      ├── before / before_instance / ...          hook slots
      ├── Example("starts empty")
      └── Context("when pushed")                  level 1
            ├── act
            └── Example("is not empty")

    run(formatter, fail_fast, instance)     inside one shared event loop
      1. fail-fast: parent subtree already failed → return
      2. any example will execute?  → before_all
      3. for each own example (by index):
             befores (ancestors first) → acts (ancestors first)
             → body → afters (ancestors last) → coalesce failure
             → write headers once, write example
      4. recurse into child contexts
      5. after_all (if step 2 held)

Hook order per example, three levels deep::

    root.before → middle.before → leaf.before
    root.act    → middle.act    → leaf.act
    body
    leaf.after  → middle.after  → root.after

Within one context the class-level hook runs before the context-level hook
for ``before``, ``act`` and ``after``; ``before_all``/``after_all`` run the
context-level hook first. Neither ``before_all`` nor ``after_all`` chains
into ancestors.

Failures are contained per scope (see :mod:`nestspec.domain.failure`):
hook phases record into the context's slot, the body into the example's.

Tags:
    nestspec, context, hooks, tree-runner, containment

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from nestspec.core.logging import get_logger
from nestspec.domain.example import Example
from nestspec.domain.failure import FailureSlot, run_guarded
from nestspec.domain.hooks import Hook, HookPhase, HookScope, event_loop, invoke, pairs_for
from nestspec.domain.tags import TagSet

if TYPE_CHECKING:
    from nestspec.domain.spec import Spec
    from nestspec.formatters.base import LiveFormatter

logger = get_logger(__name__)


class Context:
    """
    A nested spec scope.

    Attributes:
        name: Display name (underscores rendered as spaces)
        level: Depth in the tree, root = 0
        tags: Declared tags plus ancestors' tags at attach time
        parent: Enclosing context (None at the root)
        examples: Own examples, in declaration order
        contexts: Child contexts, in declaration order
    """

    # Context-level hooks (zero-argument)
    before: Hook | None = None
    act: Hook | None = None
    after: Hook | None = None
    before_all: Hook | None = None
    after_all: Hook | None = None
    before_async: Hook | None = None
    act_async: Hook | None = None
    after_async: Hook | None = None
    before_all_async: Hook | None = None
    after_all_async: Hook | None = None

    # Class-level hooks (take the spec instance)
    before_instance: Hook | None = None
    act_instance: Hook | None = None
    after_instance: Hook | None = None
    before_all_instance: Hook | None = None
    after_all_instance: Hook | None = None
    before_instance_async: Hook | None = None
    act_instance_async: Hook | None = None
    after_instance_async: Hook | None = None
    before_all_instance_async: Hook | None = None
    after_all_instance_async: Hook | None = None

    def __init__(
        self,
        name: str = "",
        tags: str | Iterable[str] | None = None,
        is_pending: bool = False,
    ) -> None:
        self.name = name.replace("_", " ")
        self.level = 0
        self.tags = TagSet.parse(tags)
        self.parent: Context | None = None
        self.examples: list[Example] = []
        self.contexts: list[Context] = []
        self.failure = FailureSlot()
        self._is_pending = is_pending
        self._saved_instance: Spec | None = None
        self._already_written = False

    @property
    def exception(self) -> BaseException | None:
        return self.failure.exception

    @exception.setter
    def exception(self, value: BaseException | None) -> None:
        self.failure.exception = value

    # =========================================================================
    # Tree building
    # =========================================================================

    def add_example(self, example: Example) -> Example:
        example.context = self
        example.tags.add_all(self.tags)
        self.examples.append(example)
        example.pending = example.pending or self.is_pending()
        return example

    def add_context(self, child: Context) -> Context:
        child.level = self.level + 1
        child.parent = self
        child.tags.add_all(self.tags)
        self.contexts.append(child)
        return child

    def is_pending(self) -> bool:
        return self._is_pending or (self.parent is not None and self.parent.is_pending())

    def build(self, instance: Spec) -> None:
        """Bind one spec instance to this context and every descendant."""
        instance.context = self
        self._bind(instance)

    def _bind(self, instance: Spec) -> None:
        self._saved_instance = instance
        for child in self.contexts:
            child._bind(instance)

    def get_instance(self) -> Spec | None:
        if self._saved_instance is not None:
            return self._saved_instance
        if self.parent is None:
            return None
        return self.parent.get_instance()

    # =========================================================================
    # Queries
    # =========================================================================

    def all_examples(self) -> list[Example]:
        """Own examples followed by every descendant's, depth first.

        Own examples come first, so ``failures()`` and lookups by name list a
        context's examples ahead of its children's.
        """
        examples = list(self.examples)
        for child in self.contexts:
            examples.extend(child.all_examples())
        return examples

    def failures(self) -> list[Example]:
        return [e for e in self.all_examples() if e.exception is not None]

    def has_any_failures(self) -> bool:
        return any(e.failed() for e in self.all_examples())

    def has_any_executed_example(self) -> bool:
        return any(e.has_run for e in self.all_examples())

    def child_contexts(self) -> list[Context]:
        descendants: list[Context] = []
        for child in self.contexts:
            descendants.append(child)
            descendants.extend(child.child_contexts())
        return descendants

    def all_contexts(self) -> list[Context]:
        return [self, *self.child_contexts()]

    def full_context(self) -> str:
        if self.parent is None:
            return self.name
        prefix = self.parent.full_context()
        return f"{prefix}. {self.name}" if prefix else self.name

    # =========================================================================
    # Hook phases
    # =========================================================================

    def run_befores(self, instance: Spec) -> None:
        self._check_conflicts(HookPhase.BEFORE)
        self._recurse_ancestors(lambda c: c.run_befores(instance))
        self._run_local(HookPhase.BEFORE, instance, class_first=True)

    def run_acts(self, instance: Spec) -> None:
        self._check_conflicts(HookPhase.ACT)
        self._recurse_ancestors(lambda c: c.run_acts(instance))
        self._run_local(HookPhase.ACT, instance, class_first=True)

    def run_afters(self, instance: Spec) -> None:
        self._check_conflicts(HookPhase.AFTER)
        self._run_local(HookPhase.AFTER, instance, class_first=True)
        self._recurse_ancestors(lambda c: c.run_afters(instance))

    def run_before_all(self, instance: Spec) -> None:
        self._check_conflicts(HookPhase.BEFORE_ALL)
        self._run_local(HookPhase.BEFORE_ALL, instance, class_first=False)

    def run_after_all(self, instance: Spec) -> None:
        self._check_conflicts(HookPhase.AFTER_ALL)
        self._run_local(HookPhase.AFTER_ALL, instance, class_first=False)

    def _check_conflicts(self, phase: HookPhase) -> None:
        for pair in pairs_for(phase):
            pair.check(self)

    def _run_local(self, phase: HookPhase, instance: Spec, class_first: bool) -> None:
        pairs = pairs_for(phase)
        if not class_first:
            pairs = pairs[::-1]
        for pair in pairs:
            hook = pair.resolve(self)
            if pair.scope is HookScope.CLASS:
                invoke(hook, instance)
            else:
                invoke(hook)

    def _recurse_ancestors(self, ancestor_action: Callable[[Context], None]) -> None:
        if self.parent is not None:
            ancestor_action(self.parent)

    # =========================================================================
    # Running
    # =========================================================================

    def exercise(self, example: Example, instance: Spec) -> None:
        """Run one example with the full hook chain around it."""
        if example.should_skip(instance.effective_filter()):
            return

        scope = self.full_context()
        run_guarded(self.run_befores, instance, self.failure, scope=scope)
        run_guarded(self.run_acts, instance, self.failure, scope=scope)
        run_guarded(example.run, instance, example.failure, scope=example.full_name())
        run_guarded(self.run_afters, instance, self.failure, scope=scope)

        example.assign_proper_exception(self.exception)

        if example.failed():
            logger.debug(
                "example_failed",
                example=example.full_name(),
                error_type=type(example.exception).__name__,
            )

    def run(
        self,
        formatter: LiveFormatter,
        fail_fast: bool = False,
        instance: Spec | None = None,
    ) -> None:
        """Run this subtree. Async hooks and bodies under it share one event loop."""
        with event_loop():
            self._run(formatter, fail_fast, instance)

    def _run(
        self,
        formatter: LiveFormatter,
        fail_fast: bool,
        instance: Spec | None,
    ) -> None:
        if fail_fast and self.parent is not None and self.parent.has_any_failures():
            logger.info("fail_fast_abort", context=self.full_context())
            return

        spec = self._saved_instance if self._saved_instance is not None else instance

        should_run_any = any(
            e.should_not_skip(spec.effective_filter()) for e in self.all_examples()
        )

        if should_run_any:
            run_guarded(self.run_before_all, spec, self.failure, scope=self.full_context())

        # Index loop: examples may append siblings to this list while running.
        i = 0
        while i < len(self.examples):
            example = self.examples[i]
            i += 1

            if fail_fast and example.context.has_any_failures():
                logger.info("fail_fast_abort", context=self.full_context())
                return

            self.exercise(example, spec)

            if example.has_run and not self._already_written:
                self._write_ancestors(formatter)
                self._already_written = True

            if example.has_run:
                formatter.write_example(example, self.level)

        for child in self.contexts:
            child.run(formatter, fail_fast, spec)

        if should_run_any:
            run_guarded(self.run_after_all, spec, self.failure, scope=self.full_context())

    def _write_ancestors(self, formatter: LiveFormatter) -> None:
        if self.parent is None:
            return

        self.parent._write_ancestors(formatter)

        if not self._already_written:
            formatter.write_context(self)

        self._already_written = True

    # =========================================================================
    # Reporting
    # =========================================================================

    def trim_skipped_descendants(self) -> None:
        """Drop every example that did not run and every context left empty."""
        self.contexts[:] = [c for c in self.contexts if c.has_any_executed_example()]
        self.examples[:] = [e for e in self.examples if e.has_run]
        for child in self.contexts:
            child.trim_skipped_descendants()

    def __repr__(self) -> str:
        return f"Context({self.name!r}, level={self.level})"
