"""Clock and timer service used by quiz sessions.

Sessions only see the small ``Scheduler`` surface (``now``, ``call_later``,
``call_every``) so the composition root decides how time passes: the server
runs callbacks as Socket.IO background tasks, tests advance a virtual clock.
"""

from __future__ import annotations

import logging
import time
from threading import RLock
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle:
    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class TimerSet:
    """Timers owned by one session, cancelled together on every superseding transition."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._handles: list[TimerHandle] = []

    def add(self, handle: TimerHandle) -> TimerHandle:
        with self._lock:
            self._handles = [h for h in self._handles if not h.cancelled]
            self._handles.append(handle)
            return handle

    def cancel_all(self) -> None:
        with self._lock:
            for handle in self._handles:
                handle.cancel()
            self._handles = []

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for h in self._handles if not h.cancelled)


class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle: ...


def _run_callback(callback: Callable[[], None]) -> None:
    try:
        callback()
    except Exception:
        # Background tasks have nobody to propagate to.
        logger.exception("timer callback failed")


class SocketIOScheduler:
    def __init__(self, socketio) -> None:
        self._socketio = socketio

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _runner() -> None:
            self._socketio.sleep(max(0.0, delay))
            if handle.cancelled:
                return
            _run_callback(callback)

        self._socketio.start_background_task(_runner)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _runner() -> None:
            while True:
                self._socketio.sleep(max(0.0, interval))
                if handle.cancelled:
                    return
                _run_callback(callback)

        self._socketio.start_background_task(_runner)
        return handle
