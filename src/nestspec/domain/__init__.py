"""Spec tree model and execution engine."""

from nestspec.domain.context import Context
from nestspec.domain.example import Example, ExampleStatus, MethodExample
from nestspec.domain.failure import FailureSlot, run_guarded
from nestspec.domain.hooks import HookPair, HookPhase, HookScope, method_hook
from nestspec.domain.spec import Spec
from nestspec.domain.tags import TagSet, TagsFilter

__all__ = [
    "Context",
    "Example",
    "ExampleStatus",
    "MethodExample",
    "FailureSlot",
    "run_guarded",
    "HookPair",
    "HookPhase",
    "HookScope",
    "method_hook",
    "Spec",
    "TagSet",
    "TagsFilter",
]
