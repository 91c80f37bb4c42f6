"""
nestspec: execution engine for nested behaviour specifications.

Contexts nest, hooks run in nesting order around every example, and a
failure in one hook or example never leaks into its siblings.

Example::

    from nestspec import Context, Example, Spec, SpecRunner

    stack = []
    root = Context("Stack")
    root.before = stack.clear

    pushed = root.add_context(Context("when_pushed"))
    pushed.act = lambda: stack.append(1)
    pushed.add_example(Example("holds the pushed item", lambda: stack.index(1)))

    result = SpecRunner().run(root, Spec())
"""

from nestspec.core.errors import (
    ErrorCategory,
    ErrorContext,
    HookConflictError,
    HookInvocationError,
    SpecConfigurationError,
    SpecError,
)
from nestspec.core.settings import RunnerSettings
from nestspec.domain import (
    Context,
    Example,
    ExampleStatus,
    FailureSlot,
    HookPhase,
    HookScope,
    MethodExample,
    Spec,
    TagSet,
    TagsFilter,
    method_hook,
    run_guarded,
)
from nestspec.formatters import LiveFormatter, LoggingFormatter, RecordingFormatter
from nestspec.runner import RunResult, RunStatus, SpecRunner

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ErrorCategory",
    "ErrorContext",
    "HookConflictError",
    "HookInvocationError",
    "SpecConfigurationError",
    "SpecError",
    # Configuration
    "RunnerSettings",
    # Domain
    "Context",
    "Example",
    "ExampleStatus",
    "FailureSlot",
    "HookPhase",
    "HookScope",
    "MethodExample",
    "Spec",
    "TagSet",
    "TagsFilter",
    "method_hook",
    "run_guarded",
    # Reporting
    "LiveFormatter",
    "LoggingFormatter",
    "RecordingFormatter",
    # Running
    "RunResult",
    "RunStatus",
    "SpecRunner",
]
