"""A list model of the applications shown to the user."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .application import Application, Attribute
from .applicationmanager import ApplicationManager
from .ipc import Signal

USER_ROLE = 0x0100

_PROPERTIES = (
    "valid",
    "key",
    "role",
    "name",
    "i18n_name",
    "theme",
    "icon",
    "splash",
    "area",
    "uri_handlers",
    "attributes",
    "status",
    "organization",
)


class ApplicationManagerModel:
    """Rows of applications taken from a manager.

    With no filters, the rows are the manager's applications minus those
    carrying any of ``exclude_attributes``; with filters, they are the
    applications with the listed keys, in that order.
    """

    def __init__(self) -> None:
        self.manager_changed = Signal("manager_changed")
        self.exclude_attributes_changed = Signal("exclude_attributes_changed")
        self.filters_changed = Signal("filters_changed")
        self.rows_removed = Signal("rows_removed")
        self.rows_inserted = Signal("rows_inserted")
        self.data_changed = Signal("data_changed")
        self._manager: ApplicationManager | None = None
        self._exclude_attributes = Attribute.SYSTEM_UI | Attribute.DAEMON
        self._filters: list[str] = []
        self._apps: list[Application] = []

    @property
    def manager(self) -> ApplicationManager | None:
        return self._manager

    @manager.setter
    def manager(self, manager: ApplicationManager | None) -> None:
        if self._manager is manager:
            return
        if self._manager is not None:
            self._manager.application_status_changed.disconnect(self._on_status)
        self._manager = manager
        if manager is not None:
            manager.application_status_changed.connect(self._on_status)
        self.manager_changed.emit(manager)
        self._update()

    @property
    def exclude_attributes(self) -> Attribute:
        return self._exclude_attributes

    @exclude_attributes.setter
    def exclude_attributes(self, attributes: Attribute) -> None:
        attributes = Attribute(attributes)
        if self._exclude_attributes == attributes:
            return
        self._exclude_attributes = attributes
        self.exclude_attributes_changed.emit(attributes)
        self._update()

    @property
    def filters(self) -> list[str]:
        return list(self._filters)

    @filters.setter
    def filters(self, filters: Iterable[str]) -> None:
        filters = list(filters)
        if self._filters == filters:
            return
        self._filters = filters
        self.filters_changed.emit(list(filters))
        self._update()

    def _update(self) -> None:
        manager = self._manager
        if manager is None:
            return
        if self._apps:
            last = len(self._apps) - 1
            self._apps = []
            self.rows_removed.emit(0, last)
        if self._filters:
            self._apps = [manager.find_by_key(key) for key in self._filters]
        else:
            self._apps = [
                app
                for app in manager.applications
                if not app.attributes & self._exclude_attributes
            ]
        if self._apps:
            self.rows_inserted.emit(0, len(self._apps) - 1)

    def _on_status(self, application: Application, status: str) -> None:
        for row, app in enumerate(self._apps):
            if app == application:
                app.status = status
                role = next(r for r, n in self.role_names().items() if n == "status")
                self.data_changed.emit(row, row, [role])
                break

    def role_names(self) -> dict[int, str]:
        """Role numbers and the application properties they read."""
        return {USER_ROLE + index: name for index, name in enumerate(_PROPERTIES)}

    def row_count(self) -> int:
        return len(self._apps)

    def data(self, row: int, role: int) -> Any:
        """The property ``role`` of the application in ``row``, or None."""
        if not 0 <= row < len(self._apps):
            return None
        name = self.role_names().get(role)
        if name is None:
            return None
        app = self._apps[row]
        if name == "i18n_name":
            return app.i18n_name()
        return getattr(app, name)