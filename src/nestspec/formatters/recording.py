"""Formatter that records what it was told, in order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nestspec.domain.context import Context
    from nestspec.domain.example import Example


@dataclass
class FormatterEvent:
    """One call received by :class:`RecordingFormatter`."""

    kind: str  # "context" or "example"
    name: str
    level: int
    status: str | None = None
    subject: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "level": self.level,
            "status": self.status,
        }


@dataclass
class RecordingFormatter:
    """
    Keeps every header and example write as a :class:`FormatterEvent`.

    Useful for programmatic consumers of a run and for asserting on the exact
    reporting order in tests.

    Example::

        formatter = RecordingFormatter()
        root.run(formatter, instance=spec)
        formatter.lines()
        # ['when pushed', '  is not empty: passed']
    """

    events: list[FormatterEvent] = field(default_factory=list)

    def write_context(self, context: Context) -> None:
        self.events.append(
            FormatterEvent(kind="context", name=context.name, level=context.level, subject=context)
        )

    def write_example(self, example: Example, level: int) -> None:
        self.events.append(
            FormatterEvent(
                kind="example",
                name=example.name,
                level=level,
                status=example.status.value,
                subject=example,
            )
        )

    @property
    def contexts(self) -> list[str]:
        return [e.name for e in self.events if e.kind == "context"]

    @property
    def examples(self) -> list[str]:
        return [e.name for e in self.events if e.kind == "example"]

    def lines(self, indent: str = "  ") -> list[str]:
        """Render the events as an indented outline."""
        rendered = []
        for event in self.events:
            if event.kind == "context":
                rendered.append(f"{indent * (event.level - 1)}{event.name}")
            else:
                rendered.append(f"{indent * event.level}{event.name}: {event.status}")
        return rendered
