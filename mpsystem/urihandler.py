"""Routing of URIs to the applications that declare they handle them."""

from __future__ import annotations

import logging
import re
import webbrowser
from typing import Any, Callable

from .application import Application
from .applicationmanager import ApplicationManager
from .ipc import IpcInterface, ManagerType, Signal, UnknownTypeError

log = logging.getLogger(__name__)


def handles(application: Application, uri: str) -> bool:
    """Whether one of ``application``'s URI handlers matches ``uri``.

    A handler maps a pattern to its kind: ``"scheme"`` matches URIs that
    start with the pattern, ``"regexp"`` matches URIs the pattern is found in.
    """
    for pattern, kind in application.uri_handlers.items():
        if kind == "scheme":
            if uri.startswith(pattern):
                return True
        elif kind == "regexp":
            if re.search(pattern, uri):
                return True
    return False


class UriHandler(IpcInterface):
    """Opens URIs: the server starts every application that handles one.

    When no application handles a URI, the server hands it to the desktop's
    URL opener. A client emits ``requested`` for the URIs its own
    application handles.
    """

    interface_name = "local.UriHandler"

    def __init__(
        self,
        parent: Any = None,
        type: ManagerType = ManagerType.CLIENT,
        *,
        url_opener: Callable[[str], Any] | None = None,
    ) -> None:
        if ManagerType(type) is ManagerType.UNKNOWN:
            raise UnknownTypeError(f"unknown type in {self.__class__.__name__}")
        self.application_changed = Signal("application_changed")
        self.do_open = Signal("do_open")
        self.requested = Signal("requested")
        self._application_manager = ApplicationManager(self)
        self._application = Application()
        self._url_opener = url_opener if url_opener is not None else webbrowser.open
        super().__init__(parent, type)
        if self.type is ManagerType.SERVER:
            self.do_open.connect(self._open_on_server)
        else:
            self.do_open.connect(self._open_on_client)
        self.init()

    def _open_on_server(self, uri: str) -> None:
        handled = False
        for app in self._application_manager.applications:
            if handles(app, uri):
                handled = True
                self._application_manager.exec(app, [uri])
        if not handled:
            self._url_opener(uri)

    def _open_on_client(self, uri: str) -> None:
        if handles(self._application, uri):
            self.requested.emit(uri)

    def init(self) -> bool:
        """Connect to the server; a server also connects to the application manager."""
        if not super().init():
            return False
        if self.type is ManagerType.SERVER:
            return self._application_manager.init()
        return True

    @property
    def application(self) -> Application:
        """The application this handler opens URIs for."""
        return self._application

    @application.setter
    def application(self, application: Application) -> None:
        if self._application == application:
            return
        self._application = application
        self.application_changed.emit(application)

    def open(self, uri: str) -> None:
        """Open ``uri`` through the server."""
        self._call("do_open", "open", uri)