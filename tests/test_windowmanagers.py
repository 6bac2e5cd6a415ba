import os

from mpsystem.ipc import ManagerType
from mpsystem.plugins import ManagerFactory, WindowManager
from mpsystem.windowmanagers import MonolithicWindowManagerPlugin, WaylandWindowManagerPlugin


def test_monolithic_creates_for_its_key():
    plugin = MonolithicWindowManagerPlugin()
    manager = plugin.create("Monolithic", "parent", ManagerType.SERVER)
    assert isinstance(manager, WindowManager)
    assert manager.parent == "parent"
    assert plugin.create("wayland", None, ManagerType.SERVER) is None


def test_wayland_sets_environment(monkeypatch):
    monkeypatch.delenv("QT_WAYLAND_DISABLE_WINDOWDECORATION", raising=False)
    monkeypatch.delenv("QT_QPA_PLATFORM", raising=False)
    manager = WaylandWindowManagerPlugin().create("wayland", "parent", ManagerType.CLIENT)
    assert manager.parent == "parent"
    assert os.environ["QT_WAYLAND_DISABLE_WINDOWDECORATION"] == "1"
    assert os.environ["QT_QPA_PLATFORM"] == "wayland"


def test_wayland_keeps_existing_decoration_setting(monkeypatch):
    monkeypatch.setenv("QT_WAYLAND_DISABLE_WINDOWDECORATION", "0")
    monkeypatch.delenv("QT_QPA_PLATFORM", raising=False)
    manager = WaylandWindowManagerPlugin().create("Wayland", "owner", ManagerType.CLIENT)
    assert isinstance(manager, WindowManager)
    assert manager.parent == "owner"
    assert os.environ["QT_WAYLAND_DISABLE_WINDOWDECORATION"] == "0"
    assert os.environ["QT_QPA_PLATFORM"] == "wayland"


def test_wayland_ignores_other_keys(monkeypatch):
    monkeypatch.delenv("QT_QPA_PLATFORM", raising=False)
    assert WaylandWindowManagerPlugin().create("monolithic", None, ManagerType.CLIENT) is None
    assert "QT_QPA_PLATFORM" not in os.environ


def test_factory_creates_registered_window_manager(monkeypatch):
    monkeypatch.delenv("MPS_TEST_WINDOWMANAGER", raising=False)
    factory = ManagerFactory("MPS_TEST_WINDOWMANAGER")
    factory.register(["monolithic"], MonolithicWindowManagerPlugin())
    manager = factory.create("Monolithic", "parent", ManagerType.SERVER)
    assert isinstance(manager, WindowManager)
    assert os.environ["MPS_TEST_WINDOWMANAGER"] == "Monolithic"
    assert factory.create("wayland", None, ManagerType.SERVER) is None