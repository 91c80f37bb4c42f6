"""
Structured error types for the nestspec engine.

Two very different things go wrong while running a spec tree, and the engine
treats them differently:

- **Configuration errors** mean the spec definition itself is broken (for
  example a context declaring both a sync and an async ``before``). They are
  fatal and propagate out of the run uncontained.
- **Execution failures** are ordinary exceptions raised by hook bodies and
  example bodies. They are never instances of these classes; the engine
  catches them and records them on the nearest context or example.

The one exception type that sits between both worlds is
:class:`HookInvocationError`: a wrapper produced when a hook or example body
is invoked reflectively (by method name on the spec instance). Containment
unwraps it one level so the reported failure is the user's exception.

Architecture:
    ::

        SpecError  (category, context, cause)
          ├── SpecConfigurationError   (CONFIG, also a ValueError)
          │     └── HookConflictError  (sync + async pair both declared)
          └── HookInvocationError      (HOOK, wraps the real failure)

Examples:
    >>> error = HookConflictError("before", "context", ("before", "before_async"))
    >>> isinstance(error, ValueError)
    True
    >>> error.to_dict()["category"]
    'CONFIG'

Tags:
    error-handling, exception-hierarchy, configuration, nestspec

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        CONFIG: Broken spec definition, never contained
        HOOK: Failure while invoking a hook or body reflectively
        EXAMPLE: Failure attributed to a single example
        INTERNAL: Bugs, unexpected state
    """

    CONFIG = "CONFIG"
    HOOK = "HOOK"
    EXAMPLE = "EXAMPLE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        context: Full name of the spec context where the error occurred
        example: Name of the example, if any
        hook: Hook slot or method name involved
        metadata: Additional key-value pairs
    """

    context: str | None = None
    example: str | None = None
    hook: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["context", "example", "hook"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SpecError(Exception):
    """
    Base exception for all nestspec errors.

    Every error raised by the engine itself carries a category, an
    :class:`ErrorContext` and an optional chained cause. Subclasses set
    ``default_category``.

    Examples:
        >>> error = SpecError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = SpecError("Hook failed").with_context(context="Stack. when empty")
        >>> error.context.context
        'Stack. when empty'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SpecError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SpecError("Failed").with_context(context="Stack", hook="before")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = repr(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS (never contained)
# =============================================================================


class SpecConfigurationError(SpecError, ValueError):
    """The spec definition is broken; the run cannot continue."""

    default_category = ErrorCategory.CONFIG


class HookConflictError(SpecConfigurationError):
    """
    Both members of a sync/async hook pair were declared at the same scope.

    Args:
        phase: Hook phase, e.g. ``"before"`` or ``"after_all"``
        scope: ``"context"`` for context-level hooks, ``"class"`` for
            class-level hooks taking the spec instance
        pair: The two conflicting attribute names
    """

    def __init__(self, phase: str, scope: str, pair: tuple[str, str], message: str | None = None):
        self.phase = phase
        self.scope = scope
        self.pair = pair
        if message is None:
            message = (
                f"A single {scope} cannot have both a '{pair[0]}' and a '{pair[1]}' set, "
                "please pick one of the two"
            )
        super().__init__(message)
        self.with_context(hook=phase)


# =============================================================================
# INVOCATION ERRORS (unwrapped by containment)
# =============================================================================


class HookInvocationError(SpecError):
    """
    Wrapper for a failure raised by a reflectively invoked method.

    The engine never reports this type; containment records ``cause``.
    """

    default_category = ErrorCategory.HOOK

    def __init__(self, target: str, cause: BaseException):
        self.target = target
        super().__init__(f"Invocation of '{target}' raised {type(cause).__name__}: {cause}", cause=cause)
        self.with_context(hook=target)


def unwrap_invocation(exc: BaseException) -> BaseException:
    """Strip one level of :class:`HookInvocationError` wrapping."""
    if isinstance(exc, HookInvocationError) and exc.cause is not None:
        return exc.cause
    return exc


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SpecError",
    "SpecConfigurationError",
    "HookConflictError",
    "HookInvocationError",
    "unwrap_invocation",
]
