"""Shared list of applications, their status and the requests to run or stop them."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from typing import Any

from .application import Application, Attribute
from .ipc import IpcInterface, ManagerType, Signal, UnknownTypeError

log = logging.getLogger(__name__)


class ApplicationManager(IpcInterface):
    """Holds the known applications; a server owns them, clients forward to it.

    Running and stopping applications is left to backends, which connect to
    ``do_exec`` and ``do_kill`` on the server.
    """

    interface_name = "local.ApplicationManager"

    def __init__(self, parent: Any = None, type: ManagerType = ManagerType.CLIENT) -> None:
        if ManagerType(type) is ManagerType.UNKNOWN:
            raise UnknownTypeError(f"unknown type in {self.__class__.__name__}")
        self.applications_changed = Signal("applications_changed")
        self.current_changed = Signal("current_changed")
        self.application_status_changed = Signal("application_status_changed")
        self.activated = Signal("activated")
        self.killed = Signal("killed")
        self.do_exec = Signal("do_exec")
        self.do_kill = Signal("do_kill")
        self.do_set_application_status = Signal("do_set_application_status")
        super().__init__(parent, type)
        if self.type is ManagerType.SERVER:
            self.do_set_application_status.connect(self._update_status)

    def _update_status(self, application: Application, status: str) -> None:
        apps: list[Application] = self._values.get("applications", [])
        try:
            index = apps.index(application)
        except ValueError:
            return
        app = apps[index]
        if app.status == status:
            return
        log.debug("Status %s %s ==> %s", app.key, app.status, status)
        updated = dataclasses.replace(app, status=status)
        apps[index] = updated
        self.application_status_changed.emit(updated, status)

    @property
    def applications(self) -> list[Application]:
        return self._get("applications", [])

    @applications.setter
    def applications(self, applications: Iterable[Application]) -> None:
        self._set("applications", list(applications))

    @property
    def current(self) -> Application:
        return self._get("current", Application())

    @current.setter
    def current(self, current: Application) -> None:
        log.debug("current %s", current.key)
        self._set("current", current)

    def find_by_key(self, key: str) -> Application:
        """The application with ``key``, or an invalid application."""
        for app in self.applications:
            if app.key == key:
                return app
        return Application()

    def application_status(self, application: Application) -> str:
        """Status of ``application`` as the server knows it; empty when unknown."""
        self._require_known_type()
        if self.type is ManagerType.SERVER:
            for app in self.applications:
                if app.key == application.key:
                    return app.status
            return ""
        if self.proxy is not None:
            return self.proxy.application_status(application)
        return ""

    def application_status_by_key(self, key: str) -> str:
        return self.application_status(self.find_by_key(key))

    def set_application_status(self, application: Application, status: str) -> None:
        self._call("do_set_application_status", "set_application_status", application, status)

    def set_application_status_by_key(self, key: str, status: str) -> None:
        self.set_application_status(self.find_by_key(key), status)

    def exec(self, application: Application, arguments: Iterable[str] | None = None) -> None:
        """Ask the server to run ``application`` with ``arguments``."""
        self._call("do_exec", "exec", application, list(arguments or []))

    def kill(self, application: Application) -> None:
        """Ask the server to stop ``application``."""
        self._call("do_kill", "kill", application)

    def start(self) -> None:
        """Run every application marked to start automatically."""
        for app in self.applications:
            if app.attributes & Attribute.AUTO_START:
                self.exec(app)