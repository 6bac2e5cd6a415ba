"""Window manager backends: one shared window, or a Wayland compositor."""

from __future__ import annotations

import os
from typing import Any

from .ipc import ManagerType
from .plugins import WindowManager


class MonolithicWindowManagerPlugin:
    """Creates the window manager for the key ``monolithic``."""

    def create(
        self, key: str, parent: Any = None, type: ManagerType = ManagerType.CLIENT
    ) -> WindowManager | None:
        if key.lower() != "monolithic":
            return None
        return WindowManager(parent)


class WaylandWindowManagerPlugin:
    """Creates the window manager for the key ``wayland`` and selects that platform."""

    def create(
        self, key: str, parent: Any = None, type: ManagerType = ManagerType.CLIENT
    ) -> WindowManager | None:
        if key.lower() != "wayland":
            return None
        if not os.environ.get("QT_WAYLAND_DISABLE_WINDOWDECORATION"):
            os.environ["QT_WAYLAND_DISABLE_WINDOWDECORATION"] = "1"
        os.environ["QT_QPA_PLATFORM"] = "wayland"
        return WindowManager(parent)