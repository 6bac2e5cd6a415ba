"""Watchdog reporters for the main thread, xdg-shell pings and the service manager."""

from __future__ import annotations

import logging
import os
import socket
from collections.abc import Mapping

from .application import Application
from .ipc import Signal
from .watchdog import WatchDog
from .watchdogmanager import WatchDogManager

log = logging.getLogger(__name__)


class _ManagedWatchDog:
    def __init__(self, method: str) -> None:
        self.manager_changed = Signal("manager_changed")
        self._watchdog = WatchDog(method=method)
        self._watchdog.manager_changed.connect(self.manager_changed.emit)

    @property
    def manager(self) -> WatchDogManager | None:
        return self._watchdog.manager

    @manager.setter
    def manager(self, manager: WatchDogManager | None) -> None:
        self._watchdog.manager = manager


class MainThreadWatchDog(_ManagedWatchDog):
    """Reports that the main thread of ``application`` is alive."""

    def __init__(self) -> None:
        super().__init__("main-thread")
        self.application_changed = Signal("application_changed")
        self._application = Application()

    @property
    def application(self) -> Application:
        return self._application

    @application.setter
    def application(self, application: Application) -> None:
        if self._application == application:
            return
        self._application = application
        self.application_changed.emit(application)

    def pang(self) -> None:
        self._watchdog.pang(self._application)


class XdgShellWatchDog(_ManagedWatchDog):
    """Reports pings sent to clients and the pongs they return, by serial."""

    def __init__(self) -> None:
        super().__init__("xdg-shell")
        self._pending: dict[int, Application] = {}

    def ping(self, application: Application, serial: int) -> None:
        self._pending[serial] = application
        self._watchdog.ping(application, serial)

    def pong(self, serial: int) -> None:
        self._watchdog.pong(self._pending.pop(serial, Application()), serial)


class SystemdWatchDog:
    """Keeps the service manager's watchdog fed.

    Enabled when ``WATCHDOG_USEC`` is set; each pang then sends
    ``WATCHDOG=1`` to the socket named by ``NOTIFY_SOCKET``.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ
        self.enabled = "WATCHDOG_USEC" in self._environ
        log.info("SystemdWatchDog is %savailable", "" if self.enabled else "not ")

    def pang(self) -> None:
        if not self.enabled:
            return
        address = self._environ.get("NOTIFY_SOCKET")
        if not address:
            return
        if address.startswith("@"):
            address = "\0" + address[1:]
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM) as sock:
                sock.sendto(b"WATCHDOG=1", address)
        except OSError as error:
            log.warning("notifying the service manager failed: %s", error)