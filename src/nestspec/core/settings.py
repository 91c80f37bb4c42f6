"""Runner settings for nestspec.

Everything a run can be tuned with lives here and is read from the
environment (``NESTSPEC_`` prefix) or a ``.env`` file, so CI jobs can flip
fail-fast or narrow the tag filter without code changes.

Examples:
    >>> from nestspec.core.settings import RunnerSettings
    >>> settings = RunnerSettings(fail_fast=True, tags="fast,~slow")
    >>> settings.tags_filter().exclude
    TagSet(['slow'])

Tags:
    settings, configuration, pydantic, environment, nestspec

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nestspec.core.logging import configure_logging
from nestspec.domain.tags import TagsFilter


class RunnerSettings(BaseSettings):
    """Settings for a single spec run.

    Fields
    ──────
    fail_fast    : Stop running siblings/descendants after the first failure
    tags         : Tag filter expression (``"fast,~slow"``)
    trim_skipped : Prune contexts/examples that did not run after the run
    log_level    : Structlog log level
    log_json     : JSON logs (True), console (False), auto-detect (None)
    """

    model_config = SettingsConfigDict(
        env_prefix="NESTSPEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Execution ────────────────────────────────────────────────
    fail_fast: bool = False
    tags: str = Field(
        default="",
        description="Tag filter expression; '~' prefix excludes a tag",
    )
    trim_skipped: bool = False

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    def tags_filter(self) -> TagsFilter:
        """Build the tag filter described by ``tags``."""
        return TagsFilter.parse(self.tags)

    def configure_logging(self) -> None:
        """Apply ``log_level`` and ``log_json`` to structlog."""
        configure_logging(level=self.log_level, json_format=self.log_json)
