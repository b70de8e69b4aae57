"""
Notifications published to the UI collaborator.

The GUI either subscribes in-process or drains an ``EventBuffer`` through the
control API. Listener failures are logged and never reach the request path.
"""
import logging
import threading
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

PROCESSING_STATE = "update-processing-state"
RESULT_UPDATED = "update-result"
CONFIRMATION_NEEDED = "confirmation-needed"
CONFIRMATION_RESOLVED = "confirmation-resolved"
SHOW_ERROR = "show-error"

Listener = Callable[[str, Any], None]

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: str, payload: Any = None) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, payload)
            except Exception as e:
                logger.error(f"Event listener failed for {event}: {e}", exc_info=True)


class EventBuffer:
    """Bounded buffer of events for clients that poll instead of subscribing."""

    def __init__(self, maxlen: int = 256):
        self._events: Deque[Dict[str, Any]] = deque(maxlen=maxlen)
        self._condition = threading.Condition()
        self._sequence = 0

    def __call__(self, event: str, payload: Any) -> None:
        with self._condition:
            self._sequence += 1
            self._events.append({"id": self._sequence, "event": event, "payload": payload})
            self._condition.notify_all()

    def poll(self, after: int = 0, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        """Return events with an id greater than ``after``, waiting up to ``timeout`` seconds."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._condition:
            while True:
                ready = [e for e in self._events if e["id"] > after]
                if ready:
                    return ready
                if deadline is None:
                    return []
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return []
                self._condition.wait(remaining)
