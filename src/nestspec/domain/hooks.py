"""Hook slots and invocation.

Each context offers five hook phases (``before``, ``act``, ``after``,
``before_all``, ``after_all``) at two scopes:

- **context-level** hooks are zero-argument callables attached directly to
  a :class:`~nestspec.domain.context.Context` (``ctx.before = ...``);
- **class-level** hooks take the spec instance (``ctx.before_instance =
  lambda spec: ...``), usually adapted from a method on the spec class with
  :func:`method_hook`.

Each scope has a sync slot and an async slot. They form a pair: a context
may fill one of them, never both. :class:`HookPair` resolves a pair at run
time and raises :class:`~nestspec.core.errors.HookConflictError` when both
are set.

ARCHITECTURE
────────────
::

    HookPair(phase="before", scope=CONTEXT)
      ├── sync_attr  = "before"
      └── async_attr = "before_async"

    HookPair(phase="before", scope=CLASS)
      ├── sync_attr  = "before_instance"
      └── async_attr = "before_instance_async"

    invoke(hook, *args)  → call, then drive any awaitable to completion

    with event_loop():    → every awaitable driven inside shares one loop,
        ...                 so state a before_async hook creates (queues,
                            sessions, futures) is usable in the body
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from typing import Any

from nestspec.core.errors import HookConflictError, HookInvocationError

Hook = Callable[..., Any]


class HookScope(str, Enum):
    CONTEXT = "context"
    CLASS = "class"


class HookPhase(str, Enum):
    BEFORE = "before"
    ACT = "act"
    AFTER = "after"
    BEFORE_ALL = "before_all"
    AFTER_ALL = "after_all"


# Class-level hooks are named after the spec-class method they usually come from.
_CLASS_HOOK_NAMES = {
    HookPhase.BEFORE: "before_each",
    HookPhase.ACT: "act_each",
    HookPhase.AFTER: "after_each",
    HookPhase.BEFORE_ALL: "before_all",
    HookPhase.AFTER_ALL: "after_all",
}


@dataclass(frozen=True)
class HookPair:
    """A mutually exclusive sync/async pair of hook slots at one scope."""

    phase: HookPhase
    scope: HookScope

    @property
    def sync_attr(self) -> str:
        if self.scope is HookScope.CLASS:
            return f"{self.phase.value}_instance"
        return self.phase.value

    @property
    def async_attr(self) -> str:
        return f"{self.sync_attr}_async"

    def conflict(self) -> HookConflictError:
        if self.scope is HookScope.CLASS:
            message = (
                "A single class cannot have both a sync and an async class-level "
                f"'{_CLASS_HOOK_NAMES[self.phase]}' set, please pick one of the two"
            )
        else:
            message = None
        return HookConflictError(
            self.phase.value,
            self.scope.value,
            (self.sync_attr, self.async_attr),
            message=message,
        )

    def check(self, owner: Any) -> None:
        """Raise when ``owner`` fills both slots of this pair."""
        if getattr(owner, self.sync_attr) is not None and getattr(owner, self.async_attr) is not None:
            raise self.conflict()

    def resolve(self, owner: Any) -> Hook | None:
        """Return whichever slot is filled, or None."""
        self.check(owner)
        hook = getattr(owner, self.sync_attr)
        if hook is None:
            hook = getattr(owner, self.async_attr)
        return hook


def pairs_for(phase: HookPhase) -> tuple[HookPair, HookPair]:
    """The (class-level, context-level) pairs of ``phase``."""
    return HookPair(phase, HookScope.CLASS), HookPair(phase, HookScope.CONTEXT)


HOOK_ATTRIBUTES: tuple[str, ...] = tuple(
    attr
    for phase in HookPhase
    for pair in pairs_for(phase)
    for attr in (pair.sync_attr, pair.async_attr)
)


_active_runner: ContextVar[asyncio.Runner | None] = ContextVar("nestspec_event_loop", default=None)


@contextmanager
def event_loop() -> Iterator[None]:
    """
    Share one event loop between every awaitable driven inside the block.

    Nested blocks reuse the outer loop. The loop is created on the first
    awaitable and closed when the outermost block exits, so a tree without
    async hooks never starts one.
    """
    if _active_runner.get() is not None:
        yield
        return
    with asyncio.Runner() as runner:
        token = _active_runner.set(runner)
        try:
            yield
        finally:
            _active_runner.reset(token)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def drive(result: Any) -> Any:
    """Run ``result`` to completion if it is awaitable, else return it as is.

    Inside :func:`event_loop` the shared loop is used; outside it each
    awaitable gets a loop of its own.
    """
    if not inspect.isawaitable(result):
        return result
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        runner = _active_runner.get()
        if runner is None:
            return asyncio.run(_await(result))
        return runner.run(_await(result))
    if inspect.iscoroutine(result):
        result.close()
    raise RuntimeError("async hooks cannot be awaited from inside a running event loop")


def invoke(hook: Hook | None, *args: Any) -> Any:
    """Call ``hook`` (if present) and wait for it to settle."""
    if hook is None:
        return None
    return drive(hook(*args))


def method_hook(method_name: str) -> Hook:
    """
    Adapt a spec-class method into a class-level hook.

    The method is looked up on the spec instance when the hook runs. A
    failure inside it surfaces as :class:`HookInvocationError`, which
    containment unwraps before recording.

    Example::

        ctx.before_instance = method_hook("before_each")
    """

    def hook(instance: Any) -> Any:
        method = getattr(instance, method_name)
        try:
            return drive(method())
        except Exception as exc:
            raise HookInvocationError(f"{type(instance).__name__}.{method_name}", exc) from exc

    hook.__name__ = method_name
    hook.__qualname__ = f"method_hook.<{method_name}>"
    return hook
