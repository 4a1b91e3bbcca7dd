"""Publish/subscribe helper feeding the server-sent event stream of the web view."""

from __future__ import annotations

import queue
import threading
import time
from typing import Any, Dict, Optional

LISTENER_BACKLOG = 256


class EventBus:
    """Fan game events out to every listener queue."""

    def __init__(self, backlog: int = LISTENER_BACKLOG) -> None:
        self._backlog = backlog
        self._listeners: set[queue.Queue] = set()
        self._lock = threading.Lock()

    def listen(self) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=self._backlog)
        with self._lock:
            self._listeners.add(q)
        return q

    def remove(self, q: queue.Queue) -> None:
        with self._lock:
            self._listeners.discard(q)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, event_type: str, payload: Optional[Dict[str, Any]] = None) -> None:
        message = {
            "type": event_type,
            "payload": payload or {},
            "ts": time.time(),
        }
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener.put_nowait(message)
            except queue.Full:
                # A stalled listener loses events instead of blocking the game.
                continue
