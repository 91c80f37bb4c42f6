"""Examples: the leaf units of a spec tree.

An :class:`Example` is a named body attached to exactly one context. Its
outcome is one of passed, failed or pending, and it keeps at most one
failure: whichever was recorded first during the run.

Example::

    ctx = Context("when the stack is empty")
    ctx.add_example(Example("has no items", lambda: assert_equal(stack.size, 0)))
    ctx.add_example(Example("rejects pop"))          # no body → pending
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from nestspec.core.errors import HookInvocationError
from nestspec.domain.failure import FailureSlot
from nestspec.domain.hooks import drive
from nestspec.domain.tags import TagSet, TagsFilter

if TYPE_CHECKING:
    from nestspec.domain.context import Context
    from nestspec.domain.spec import Spec


class ExampleStatus(str, Enum):
    """Reported outcome of an example."""

    NOT_RUN = "not_run"
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"


class Example:
    """
    A single "it" in a spec tree.

    Attributes:
        name: Display name
        body: Zero-argument callable (sync or async); None means pending
        context: Owning context, set by :meth:`Context.add_example`
        tags: Declared tags plus everything inherited at attach time
        pending: Declared pending, or attached under a pending context
        has_run: Whether the example was exercised in this run
    """

    def __init__(
        self,
        name: str = "",
        body: Callable[[], Any] | None = None,
        tags: str | list[str] | None = None,
        pending: bool = False,
    ) -> None:
        self.name = name
        self.body = body
        self.tags = TagSet.parse(tags)
        self.pending = pending or body is None
        self.context: Context | None = None
        self.has_run = False
        self.failure = FailureSlot()

    @property
    def exception(self) -> BaseException | None:
        return self.failure.exception

    @exception.setter
    def exception(self, value: BaseException | None) -> None:
        self.failure.exception = value

    def run(self, instance: Spec) -> None:
        """Execute the body. Pending examples count as run but do nothing."""
        self.has_run = True
        if self.pending:
            return
        self._invoke(instance)

    def _invoke(self, instance: Spec) -> None:
        drive(self.body())

    def should_skip(self, tags_filter: TagsFilter | None) -> bool:
        if tags_filter is None:
            return False
        return tags_filter.should_skip(self.tags, pending=self.pending)

    def should_not_skip(self, tags_filter: TagsFilter | None) -> bool:
        return not self.should_skip(tags_filter)

    def failed(self) -> bool:
        return self.exception is not None and not self.pending

    @property
    def status(self) -> ExampleStatus:
        if not self.has_run:
            return ExampleStatus.NOT_RUN
        if self.pending:
            return ExampleStatus.PENDING
        if self.exception is not None:
            return ExampleStatus.FAILED
        return ExampleStatus.PASSED

    def assign_proper_exception(self, context_exception: BaseException | None) -> None:
        """Attribute a context-scope failure to this example if it has none."""
        if context_exception is not None and self.exception is None:
            self.exception = context_exception

    def full_name(self) -> str:
        if self.context is None:
            return self.name
        return f"{self.context.full_context()}. {self.name}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging/storage."""
        return {
            "name": self.name,
            "full_name": self.full_name(),
            "status": self.status.value,
            "tags": list(self.tags),
            "error_type": type(self.exception).__name__ if self.exception else None,
            "error": str(self.exception) if self.exception else None,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, status={self.status.value})"


class MethodExample(Example):
    """
    An example whose body is a method of the spec class.

    The method is looked up on the spec instance at run time, so it sees the
    state class-level hooks left behind. Its failures surface wrapped in
    :class:`HookInvocationError`, which containment unwraps.
    """

    def __init__(
        self,
        method_name: str,
        tags: str | list[str] | None = None,
        pending: bool = False,
    ) -> None:
        super().__init__(method_name.replace("_", " "), body=None, tags=tags, pending=False)
        self.method_name = method_name
        self.pending = pending

    def _invoke(self, instance: Spec) -> None:
        method = getattr(instance, self.method_name)
        try:
            drive(method())
        except Exception as exc:
            raise HookInvocationError(f"{type(instance).__name__}.{self.method_name}", exc) from exc
