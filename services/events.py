"""
Outbound print notifications.

The hosting application subscribes observers to learn about jobs as they
pass through the server. Notifications are fire-and-forget: nothing waits
for an acknowledgment and a failing observer never affects the request.

Events:
    print-received {type, content, time, printer}
    print-success  {type, printer, time}
    print-error    {error, time}
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List

from logging_config import get_logger


logger = get_logger(__name__)

PRINT_RECEIVED = "print-received"
PRINT_SUCCESS = "print-success"
PRINT_ERROR = "print-error"

Observer = Callable[[str, Dict[str, Any]], Any]


class EventNotifier:
    """Thread-safe observer registry."""

    def __init__(self):
        self._observers: List[Observer] = []
        self._lock = threading.Lock()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer called as observer(event_name, payload).

        Returns:
            A callable that unsubscribes the observer
        """
        with self._lock:
            self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def emit(self, event: str, payload: Dict[str, Any]) -> None:
        """Deliver `payload` to every observer on the calling thread."""
        with self._lock:
            observers = list(self._observers)

        logger.debug(f"Emitting {event} to {len(observers)} observers")

        for observer in observers:
            try:
                observer(event, dict(payload))
            except Exception as exc:
                logger.error(f"Observer failed handling {event}: {exc}", exc_info=True)
