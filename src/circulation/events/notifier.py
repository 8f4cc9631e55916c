"""Synchronous fan-out of lending events to registered listeners."""

import logging
import threading
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from rich.console import Console

logger = logging.getLogger(__name__)

# Nested publications allowed per thread before events are dropped
MAX_PUBLISH_DEPTH = 8


class EventKind(str, Enum):
    """Events published by the lending service."""

    BOOK_ADDED = "BOOK_ADDED"
    MEMBER_ADDED = "MEMBER_ADDED"
    BOOK_BORROWED = "BOOK_BORROWED"
    BOOK_RETURNED = "BOOK_RETURNED"
    BORROW_FAILED = "BORROW_FAILED"
    RETURN_FAILED = "RETURN_FAILED"


Listener = Callable[[EventKind, str], None]


class EventNotifier:
    """Broadcasts events to listeners in subscription order.

    Listeners run on the publishing thread. A listener that raises is
    logged and skipped; the remaining listeners still receive the event.
    """

    def __init__(self, max_depth: int = MAX_PUBLISH_DEPTH):
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()
        self._local = threading.local()
        self.max_depth = max_depth

    def subscribe(self, listener: Listener) -> None:
        """Register a listener. Subscribing twice means two deliveries."""
        with self._lock:
            self._listeners.append(listener)
        logger.debug("Subscribed listener %r", listener)

    def unsubscribe(self, listener: Listener) -> bool:
        """Remove the first registration equal to ``listener``.

        Bound methods compare equal when they wrap the same function and
        instance, so ``unsubscribe(obj.method)`` matches ``subscribe(obj.method)``.

        Returns:
            True if the listener was registered
        """
        with self._lock:
            for index, registered in enumerate(self._listeners):
                if registered == listener:
                    del self._listeners[index]
                    logger.debug("Unsubscribed listener %r", listener)
                    return True
        logger.warning("Listener not subscribed: %r", listener)
        return False

    @property
    def listeners(self) -> list[Listener]:
        with self._lock:
            return list(self._listeners)

    def clear(self) -> None:
        """Remove every listener."""
        with self._lock:
            self._listeners.clear()

    def publish(self, kind: EventKind, detail: str) -> int:
        """Deliver an event to every current listener.

        Args:
            kind: Event kind
            detail: Human-readable description

        Returns:
            Number of listeners that handled the event without raising
        """
        depth = getattr(self._local, "depth", 0)
        if depth >= self.max_depth:
            logger.warning(
                "Dropping %s: publish nested %d levels deep", kind.value, depth
            )
            return 0

        delivered = 0
        self._local.depth = depth + 1
        try:
            for listener in self.listeners:
                try:
                    listener(kind, detail)
                    delivered += 1
                except Exception:
                    logger.exception("Error in listener %r for %s", listener, kind.value)
        finally:
            self._local.depth = depth
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)


def format_event(kind: EventKind, detail: str, when: Optional[datetime] = None) -> str:
    """Render an event as ``[timestamp] EVENT: KIND - detail``."""
    timestamp = (when or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return f"[{timestamp}] EVENT: {kind.value} - {detail}"


class ConsoleListener:
    """Prints events to the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def __call__(self, kind: EventKind, detail: str) -> None:
        style = "red" if kind.value.endswith("_FAILED") else "dim"
        self.console.print(format_event(kind, detail), style=style, markup=False)


class LoggingListener:
    """Writes events to the ``circulation.events`` logger."""

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self.logger = logging.getLogger("circulation.events")

    def __call__(self, kind: EventKind, detail: str) -> None:
        self.logger.log(self.level, "%s - %s", kind.value, detail)
