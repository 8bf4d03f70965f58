"""EventChannel - tick and finished notifications for one countdown."""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)

TICK = "tick"
FINISHED = "finished"
SIGNALS = (TICK, FINISHED)

Handler = Callable[[str, dict[str, Any]], None]


class EventChannel:
    """Pub/sub with per-tick flush semantics, scoped to one countdown's lifetime.

    ``publish`` queues, ``flush`` delivers in publish order. There is no
    replay: a handler subscribed after a flush never sees that flush's
    signals. Once closed, every call is silently ignored.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        with self._lock:
            if self._closed:
                return
            self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._subscribers.get(signal_name)
            if handlers is None:
                return
            try:
                handlers.remove(handler)
            except ValueError:
                pass

    def publish(self, signal_name: str, **data: Any) -> None:
        with self._lock:
            if self._closed:
                return
            self._queue.append((signal_name, data))

    def flush(self) -> None:
        with self._lock:
            snapshot = self._queue
            self._queue = []
        for signal_name, data in snapshot:
            with self._lock:
                if self._closed:
                    return
                handlers = list(self._subscribers.get(signal_name, ()))
            for handler in handlers:
                try:
                    handler(signal_name, data)
                except Exception:
                    logger.exception("%s handler %r failed", signal_name, handler)

    def clear(self) -> None:
        with self._lock:
            self._queue.clear()

    def close(self) -> None:
        """Detach every handler and drop queued signals."""
        with self._lock:
            self._closed = True
            self._queue.clear()
            self._subscribers.clear()
