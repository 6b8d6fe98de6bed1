from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

JOB_ADDED = "job:added"
JOB_FAIL = "job:fail"
JOB_SUCCESS = "job:success"
SCRAPER_START = "scraper:start"
SCRAPER_FAIL = "scraper:fail"
SCRAPER_SUCCESS = "scraper:success"
SCRAPER_END = "scraper:end"
SCRAPER_TEARDOWN = "scraper:teardown"

EVENTS = (
    JOB_ADDED,
    JOB_FAIL,
    JOB_SUCCESS,
    SCRAPER_START,
    SCRAPER_FAIL,
    SCRAPER_SUCCESS,
    SCRAPER_END,
    SCRAPER_TEARDOWN,
)

Listener = Callable[..., Any]


class EventBus:
    """Observer registry scoped to one scraper.

    Listeners are called synchronously, in registration order, on the thread
    that emits. Exceptions raised by a listener propagate to the emitter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, fn: Listener) -> None:
        with self._lock:
            self._listeners[event].append(fn)

    def off(self, event: str, fn: Listener) -> None:
        with self._lock:
            if fn in self._listeners.get(event, []):
                self._listeners[event].remove(fn)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of ``event``. Returns False if there was none."""
        with self._lock:
            listeners = list(self._listeners.get(event, []))
        for fn in listeners:
            fn(*args)
        return bool(listeners)

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(event, []))

    def remove_all_listeners(self) -> None:
        with self._lock:
            self._listeners.clear()
