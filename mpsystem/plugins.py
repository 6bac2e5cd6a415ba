"""Registries that find applications and manager backends by key."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from .application import Application, from_json
from .ipc import ManagerType

log = logging.getLogger(__name__)

APPLICATION_CATEGORY_ENV = "QT_MULTIPROCESSSYSTEM_APPLICATION_CATEGORY"
APPLICATION_MANAGER_ENV = "QT_MULTIPROCESSSYSTEM_APPLICATIONMANAGER"
WATCHDOG_MANAGER_ENV = "QT_MULTIPROCESSSYSTEM_WATCHDOGMANAGER"
WINDOW_MANAGER_ENV = "QT_MULTIPROCESSSYSTEM_WINDOWMANAGER"


class PluginNotFoundError(LookupError):
    """Raised when a required backend is not registered."""


class ApplicationPlugin:
    """An application's code; loading it returns the plugin itself."""

    def __init__(self, parent: Any = None) -> None:
        self.parent = parent

    def create(self, key: str, parent: Any = None) -> Any:
        log.debug("%s %r", key, parent)
        return self


class _ManagerPlugin(Protocol):
    def create(self, key: str, parent: Any, type: ManagerType) -> Any: ...


class ApplicationFactory:
    """Registered applications, each with its metadata and plugin."""

    def __init__(self) -> None:
        self._entries: list[tuple[dict[str, Any], ApplicationPlugin]] = []

    def register(self, metadata: Mapping[str, Any], plugin: ApplicationPlugin) -> None:
        """Add a plugin; ``metadata["Keys"]`` lists the keys it is found under."""
        self._entries.append((dict(metadata), plugin))

    @staticmethod
    def _keys_of(metadata: Mapping[str, Any]) -> list[str]:
        keys = metadata.get("Keys", [])
        return [key for key in keys if isinstance(key, str)] if isinstance(keys, list) else []

    def apps(self, prefix: str) -> list[Application]:
        """Applications with a key starting with ``prefix``, sorted by key."""
        result: list[Application] = []
        for metadata, _plugin in self._entries:
            if any(key.startswith(prefix) for key in self._keys_of(metadata)):
                result.extend(from_json(metadata))
        result.sort(key=lambda app: app.key or "")
        return result

    def keys(self) -> list[str]:
        return [key for metadata, _plugin in self._entries for key in self._keys_of(metadata)]

    def load(self, key: str, parent: Any = None) -> Any:
        """Create the plugin registered under ``key`` (case-insensitive), or None."""
        needle = key.lower()
        for metadata, plugin in self._entries:
            if any(k.lower() == needle for k in self._keys_of(metadata)):
                return plugin.create(needle, parent)
        return None


class ManagerFactory:
    """Manager backends by key; the chosen key is recorded in an environment variable."""

    def __init__(self, environment_variable: str, required: bool = False) -> None:
        self.environment_variable = environment_variable
        self.required = required
        self._entries: list[tuple[list[str], _ManagerPlugin]] = []

    def register(self, keys: Iterable[str], plugin: _ManagerPlugin) -> None:
        self._entries.append((list(keys), plugin))

    def keys(self) -> list[str]:
        """Registered keys without duplicates, in registration order."""
        result: list[str] = []
        for keys, _plugin in self._entries:
            for key in keys:
                if key not in result:
                    result.append(key)
        return result

    def create(self, key: str, parent: Any = None, type: ManagerType = ManagerType.CLIENT) -> Any:
        """Create the backend for ``key``; None when missing, unless required."""
        needle = key.lower()
        result = None
        for keys, plugin in self._entries:
            if any(k.lower() == needle for k in keys):
                result = plugin.create(needle, parent, type)
                break
        if result is None and self.required:
            raise PluginNotFoundError(
                f"{key} not found\navailable managers: {', '.join(self.keys())}"
            )
        os.environ[self.environment_variable] = key
        return result


class WindowManager:
    """Window management backend; holds only its parent."""

    def __init__(self, parent: Any = None) -> None:
        self.parent = parent


application_factory = ApplicationFactory()
application_manager_factory = ManagerFactory(APPLICATION_MANAGER_ENV, required=True)
watchdog_manager_factory = ManagerFactory(WATCHDOG_MANAGER_ENV)
window_manager_factory = ManagerFactory(WINDOW_MANAGER_ENV)