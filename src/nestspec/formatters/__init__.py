"""Result sinks for spec runs."""

from nestspec.formatters.base import LiveFormatter
from nestspec.formatters.log import LoggingFormatter
from nestspec.formatters.recording import FormatterEvent, RecordingFormatter

__all__ = [
    "LiveFormatter",
    "LoggingFormatter",
    "FormatterEvent",
    "RecordingFormatter",
]
