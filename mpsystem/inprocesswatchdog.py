"""Watchdog backend that tracks outstanding reports in memory."""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from typing import Any, Callable

from .application import Application
from .ipc import ManagerType
from .watchdogmanager import WatchDogManager

log = logging.getLogger(__name__)

INACTIVE_AFTER_MSECS = 1000
CHECK_INTERVAL = 0.25


@dataclasses.dataclass
class _Ping:
    method: str
    application: Application
    serial: int
    time: float


class InProcessWatchDogManager(WatchDogManager):
    """Marks applications inactive when a ping stays unanswered for over a second.

    Pangs (serial 0) refresh a standing entry; pongs remove the matching
    ping. While entries are outstanding, :meth:`check` runs every
    ``interval`` seconds on a background thread.
    """

    def __init__(
        self,
        parent: Any = None,
        type: ManagerType = ManagerType.CLIENT,
        *,
        interval: float = CHECK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(parent, type)
        self._interval = interval
        self._clock = clock
        self._lock = threading.RLock()
        self._database: list[_Ping] = []
        self._sleeping: dict[Application, float] = {}
        self._stop: threading.Event | None = None
        self.finished.connect(self._on_finished)
        self.ping_received.connect(self._on_ping)
        self.pong_received.connect(self._on_pong)
        self.pang_received.connect(self._on_pang)

    @property
    def timer_active(self) -> bool:
        """Whether the periodic check is running."""
        return self._stop is not None

    def _start_timer(self) -> None:
        if self._stop is not None:
            return
        stop = threading.Event()
        self._stop = stop

        def run() -> None:
            while not stop.wait(self._interval):
                self.check()

        threading.Thread(target=run, name="watchdog-check", daemon=True).start()

    def _stop_timer(self) -> None:
        if self._stop is not None:
            self._stop.set()
            self._stop = None

    def _msecs_since(self, then: float, now: float) -> int:
        return int((now - then) * 1000)

    def check(self) -> None:
        """Report each application whose oldest entry is over a second old."""
        with self._lock:
            now = self._clock()
            for ping in list(self._database):
                diff = self._msecs_since(ping.time, now)
                if diff > INACTIVE_AFTER_MSECS and ping.application not in self._sleeping:
                    self._sleeping[ping.application] = ping.time
                    self.inactive_changed.emit(ping.method, ping.application, True, diff)
                    log.warning("%s %s %d %d", ping.application.key, ping.method, diff, ping.serial)

    def close(self) -> None:
        """Stop the periodic check."""
        with self._lock:
            self._stop_timer()

    def _on_finished(self, application: Application) -> None:
        with self._lock:
            self._database = [p for p in self._database if p.application != application]

    def _on_ping(self, method: str, application: Application, serial: int) -> None:
        with self._lock:
            self._database.append(_Ping(method, application, serial, self._clock()))
            self._start_timer()

    def _on_pong(self, method: str, application: Application, serial: int) -> None:
        with self._lock:
            for index, ping in enumerate(self._database):
                if (ping.method, ping.application, ping.serial) != (method, application, serial):
                    continue
                del self._database[index]
                if not self._database:
                    self._stop_timer()
                if application in self._sleeping:
                    since = self._sleeping.pop(application)
                    self.inactive_changed.emit(
                        method, application, False, self._msecs_since(since, self._clock())
                    )
                return
            log.warning("%s %d not found", method, serial)

    def _on_pang(self, method: str, application: Application) -> None:
        with self._lock:
            for ping in self._database:
                if ping.method == method and ping.application == application and ping.serial <= 0:
                    ping.time = self._clock()
                    return
            self._database.append(_Ping(method, application, 0, self._clock()))
            self._start_timer()


class InProcessWatchDogManagerPlugin:
    """Creates the in-process watchdog manager for the key ``inprocess``."""

    def create(
        self, key: str, parent: Any = None, type: ManagerType = ManagerType.CLIENT
    ) -> InProcessWatchDogManager | None:
        if key.lower() != "inprocess":
            return None
        return InProcessWatchDogManager(parent, type)