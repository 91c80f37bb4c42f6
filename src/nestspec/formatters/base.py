"""Live formatter contract.

The tree runner reports results as soon as they exist: a context header the
first time one of its examples finishes, then each finished example. Any
object with these two methods can receive them.

Guardrails:
    ❌ DON'T: Buffer results in the engine and hand over a finished tree
    ✅ DO: React to each call; the engine never calls twice for one header

Tags:
    protocol, formatter, reporting, nestspec

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from nestspec.domain.context import Context
    from nestspec.domain.example import Example


@runtime_checkable
class LiveFormatter(Protocol):
    """Sink for incremental run results."""

    def write_context(self, context: Context) -> None:
        """Write one context header."""
        ...

    def write_example(self, example: Example, level: int) -> None:
        """Write one finished example at the given nesting level."""
        ...
