"""Ambient infrastructure: errors, logging, settings."""

from nestspec.core.errors import (
    ErrorCategory,
    ErrorContext,
    HookConflictError,
    HookInvocationError,
    SpecConfigurationError,
    SpecError,
)
from nestspec.core.logging import configure_logging, get_logger

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "HookConflictError",
    "HookInvocationError",
    "SpecConfigurationError",
    "SpecError",
    "configure_logging",
    "get_logger",
]
