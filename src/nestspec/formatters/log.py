"""Formatter that streams results as structured log events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nestspec.core.logging import get_logger
from nestspec.domain.example import ExampleStatus

if TYPE_CHECKING:
    from nestspec.domain.context import Context
    from nestspec.domain.example import Example


class LoggingFormatter:
    """
    Emits ``context_started`` and ``example_finished`` events.

    Failed examples are logged at warning level with the error type and
    message; everything else at info.
    """

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger or get_logger("nestspec.report")

    def write_context(self, context: Context) -> None:
        self._logger.info(
            "context_started",
            context=context.full_context(),
            level=context.level,
            tags=list(context.tags),
        )

    def write_example(self, example: Example, level: int) -> None:
        status = example.status
        if status is ExampleStatus.FAILED:
            self._logger.warning(
                "example_finished",
                example=example.full_name(),
                level=level,
                status=status.value,
                error_type=type(example.exception).__name__,
                error=str(example.exception),
            )
            return
        self._logger.info(
            "example_finished",
            example=example.full_name(),
            level=level,
            status=status.value,
        )
