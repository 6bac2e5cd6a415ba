"""A reporter that sends one kind of watchdog report to a manager."""

from __future__ import annotations

from .application import Application
from .ipc import Signal
from .watchdogmanager import WatchDogManager


class WatchDog:
    """Sends pings, pongs and pangs tagged with ``method`` to ``manager``.

    Reports are dropped while no manager is set.
    """

    def __init__(self, manager: WatchDogManager | None = None, method: str = "") -> None:
        self.manager_changed = Signal("manager_changed")
        self.method_changed = Signal("method_changed")
        self._manager = manager
        self._method = method

    @property
    def manager(self) -> WatchDogManager | None:
        return self._manager

    @manager.setter
    def manager(self, manager: WatchDogManager | None) -> None:
        if self._manager is manager:
            return
        self._manager = manager
        self.manager_changed.emit(manager)

    @property
    def method(self) -> str:
        return self._method

    @method.setter
    def method(self, method: str) -> None:
        if self._method == method:
            return
        self._method = method
        self.method_changed.emit(method)

    def ping(self, app: Application, serial: int) -> None:
        if self._manager is not None:
            self._manager.ping(self._method, app, serial)

    def pong(self, app: Application, serial: int) -> None:
        if self._manager is not None:
            self._manager.pong(self._method, app, serial)

    def pang(self, app: Application) -> None:
        if self._manager is not None:
            self._manager.pang(self._method, app)