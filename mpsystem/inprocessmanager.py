"""Application manager backend that loads applications into this process."""

from __future__ import annotations

import logging
import os
from typing import Any

from .application import Application
from .applicationmanager import ApplicationManager
from .ipc import ManagerType
from .plugins import APPLICATION_CATEGORY_ENV, ApplicationFactory, application_factory

log = logging.getLogger(__name__)

DEFAULT_CATEGORY = "example"


class InProcessApplicationManager(ApplicationManager):
    """Runs applications by loading their plugins from the application factory.

    Applications are looked up as ``<category>/<key>``, where the category
    comes from the environment and defaults to ``example``.
    """

    def __init__(
        self,
        parent: Any = None,
        type: ManagerType = ManagerType.CLIENT,
        *,
        factory: ApplicationFactory | None = None,
    ) -> None:
        super().__init__(parent, type)
        self._factory = factory if factory is not None else application_factory
        self._category = os.environ.get(APPLICATION_CATEGORY_ENV) or DEFAULT_CATEGORY
        self._loaded: dict[Application, Any] = {}
        self.do_exec.connect(self._on_exec)
        self.do_kill.connect(self._on_kill)

    @property
    def category(self) -> str:
        """The category applications are loaded from."""
        return self._category

    def _on_exec(self, application: Application, arguments: list[str]) -> None:
        if not application.valid:
            return
        if application in self._loaded:
            self.activated.emit(application, arguments)
            return
        loaded = self._factory.load(f"{self._category}/{application.key}", self)
        if loaded is None:
            log.warning("launching %s in %s failed", application.key, self._category)
            return
        self._loaded[application] = loaded
        self.set_application_status(application, "created")
        self.set_application_status(application, "started")
        self.activated.emit(application, arguments)

    def _on_kill(self, application: Application) -> None:
        if not application.valid:
            return
        if self._loaded.pop(application, None) is None:
            return
        self.set_application_status(application, "destroyed")
        self.killed.emit(application)


class InProcessApplicationManagerPlugin:
    """Creates the in-process application manager for the key ``inprocess``."""

    def create(
        self, key: str, parent: Any = None, type: ManagerType = ManagerType.CLIENT
    ) -> InProcessApplicationManager | None:
        if key.lower() != "inprocess":
            return None
        return InProcessApplicationManager(parent, type)