"""Email adapter."""

from .client import (
    BrevoNotifier,
    EmailMessage,
    EmailNotifier,
    LoggingNotifier,
    RecordingNotifier,
)

__all__ = [
    "BrevoNotifier",
    "EmailMessage",
    "EmailNotifier",
    "LoggingNotifier",
    "RecordingNotifier",
]
