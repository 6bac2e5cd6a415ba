"""Collects liveness reports (ping, pong, pang) from applications."""

from __future__ import annotations

import logging
from typing import Any

from .application import Application
from .applicationmanager import ApplicationManager
from .ipc import IpcInterface, ManagerType, Signal, UnknownTypeError

log = logging.getLogger(__name__)


class WatchDogManager(IpcInterface):
    """Receives watchdog reports; the server announces them as signals.

    A server also emits ``finished`` for each application whose status
    becomes ``"destroyed"``.
    """

    interface_name = "local.WatchDogManager"

    def __init__(self, parent: Any = None, type: ManagerType = ManagerType.CLIENT) -> None:
        if ManagerType(type) is ManagerType.UNKNOWN:
            raise UnknownTypeError(f"unknown type in {self.__class__.__name__}")
        self.started = Signal("started")
        self.finished = Signal("finished")
        self.ping_received = Signal("ping_received")
        self.pong_received = Signal("pong_received")
        self.pang_received = Signal("pang_received")
        self.inactive_changed = Signal("inactive_changed")
        super().__init__(parent, type)
        self._application_manager: ApplicationManager | None = None
        if self.type is ManagerType.SERVER:
            self._application_manager = ApplicationManager(self)
            self._application_manager.init()
            self._application_manager.application_status_changed.connect(self._on_status)

    def _on_status(self, application: Application, status: str) -> None:
        if status == "destroyed":
            log.debug("WatchDogManager ejects %s", application.key)
            self.finished.emit(application)

    def ping(self, method: str, application: Application, serial: int) -> None:
        """Report that ``application`` was sent ping ``serial``."""
        self._call("ping_received", "ping", method, application, serial)

    def pong(self, method: str, application: Application, serial: int) -> None:
        """Report that ``application`` answered ping ``serial``."""
        self._call("pong_received", "pong", method, application, serial)

    def pang(self, method: str, application: Application) -> None:
        """Report that ``application`` is alive."""
        self._call("pang_received", "pang", method, application)