"""Spec Runner: runs a context tree end to end.

The SpecRunner wraps the per-context engine with what a caller needs around
a run:

- **Build** the tree onto one spec instance
- **Filter** by the configured tag expression when the instance has none
- **Run** depth first with live reporting and optional fail-fast
- **Trim** contexts and examples that did not execute (optional)
- **Summarise** into a :class:`RunResult`

Configuration errors (a context declaring both a sync and an async hook for
the same phase) end the run: they are logged and re-raised.

Logging follows ``log_level``/``log_json`` when either was set on the
settings (directly or through ``NESTSPEC_LOG_LEVEL``/``NESTSPEC_LOG_JSON``);
otherwise the process's existing structlog configuration is left alone.

Example::

    from nestspec import Context, Example, RunStatus, Spec, SpecRunner
    from nestspec.core.settings import RunnerSettings

    root = Context("Stack")
    root.add_example(Example("starts empty", lambda: None))

    runner = SpecRunner(RunnerSettings(fail_fast=True))
    result = runner.run(root, Spec())

    if result.status == RunStatus.PASSED:
        print(f"{result.passed} examples passed")
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from nestspec.core.errors import SpecConfigurationError
from nestspec.core.logging import LogContext, get_logger
from nestspec.core.settings import RunnerSettings
from nestspec.domain.context import Context
from nestspec.domain.example import ExampleStatus
from nestspec.domain.spec import Spec
from nestspec.formatters.base import LiveFormatter
from nestspec.formatters.log import LoggingFormatter

logger = get_logger(__name__)

_LOGGING_FIELDS = {"log_level", "log_json"}


class RunStatus(str, Enum):
    """Overall outcome of a run."""

    PASSED = "passed"
    FAILED = "failed"


@dataclass
class RunResult:
    """Summary of one run over a context tree."""

    run_id: str
    status: RunStatus
    root: Context
    started_at: datetime
    completed_at: datetime | None = None
    examples: int = 0
    passed: int = 0
    failed: int = 0
    pending: int = 0
    context_failures: int = 0

    @property
    def duration_seconds(self) -> float | None:
        """Total run duration."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def failed_examples(self) -> list[str]:
        """Full names of failed examples."""
        return [e.full_name() for e in self.root.all_examples() if e.failed()]

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging/storage."""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "examples": self.examples,
            "passed": self.passed,
            "failed": self.failed,
            "pending": self.pending,
            "context_failures": self.context_failures,
            "failed_examples": self.failed_examples,
        }


class SpecRunner:
    """Runs context trees with one set of settings and one formatter."""

    def __init__(
        self,
        settings: RunnerSettings | None = None,
        formatter: LiveFormatter | None = None,
    ) -> None:
        """Initialise the runner.

        Args:
            settings: Run settings (read from the environment when omitted)
            formatter: Result sink; defaults to :class:`LoggingFormatter`
        """
        self._settings = settings or RunnerSettings()
        self._formatter = formatter or LoggingFormatter()

        if self._settings.model_fields_set & _LOGGING_FIELDS:
            self._settings.configure_logging()

    @property
    def settings(self) -> RunnerSettings:
        return self._settings

    @property
    def formatter(self) -> LiveFormatter:
        return self._formatter

    def run(self, root: Context, instance: Spec, run_id: str | None = None) -> RunResult:
        """Build ``root`` onto ``instance``, run it and summarise."""
        run_id = run_id or str(uuid.uuid4())
        started_at = datetime.now(UTC)

        if instance.tags_filter is None:
            instance.tags_filter = self._settings.tags_filter()

        root.build(instance)

        with LogContext(run_id=run_id):
            logger.info(
                "run_started",
                root=root.name,
                fail_fast=self._settings.fail_fast,
                tags_filter=repr(instance.tags_filter),
            )
            try:
                root.run(self._formatter, self._settings.fail_fast, instance)
            except SpecConfigurationError as exc:
                logger.error("hook_conflict", **exc.to_dict())
                raise

            if self._settings.trim_skipped:
                root.trim_skipped_descendants()

            result = self._summarise(root, run_id, started_at)
            logger.info(
                "run_completed",
                status=result.status.value,
                examples=result.examples,
                failed=result.failed,
                pending=result.pending,
                duration_seconds=result.duration_seconds,
            )
        return result

    def _summarise(self, root: Context, run_id: str, started_at: datetime) -> RunResult:
        executed = [e for e in root.all_examples() if e.has_run]
        statuses = [e.status for e in executed]
        failed = statuses.count(ExampleStatus.FAILED)
        context_failures = sum(1 for c in root.all_contexts() if c.exception is not None)

        return RunResult(
            run_id=run_id,
            status=RunStatus.FAILED if failed or context_failures else RunStatus.PASSED,
            root=root,
            started_at=started_at,
            completed_at=datetime.now(UTC),
            examples=len(executed),
            passed=statuses.count(ExampleStatus.PASSED),
            failed=failed,
            pending=statuses.count(ExampleStatus.PENDING),
            context_failures=context_failures,
        )
