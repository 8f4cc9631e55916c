"""Event notification for lending state changes."""

from .notifier import (
    ConsoleListener,
    EventKind,
    EventNotifier,
    Listener,
    LoggingListener,
    format_event,
)

__all__ = [
    "ConsoleListener",
    "EventKind",
    "EventNotifier",
    "Listener",
    "LoggingListener",
    "format_event",
]
