import threading

import pytest

from mpsystem.application import Application
from mpsystem.inprocesswatchdog import (
    InProcessWatchDogManager,
    InProcessWatchDogManagerPlugin,
)
from mpsystem.ipc import IpcInterface, ManagerType


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def clean_servers():
    IpcInterface._servers.clear()
    yield
    IpcInterface._servers.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    m = InProcessWatchDogManager(type=ManagerType.SERVER, interval=3600, clock=clock)
    yield m
    m.close()


@pytest.fixture
def events(manager):
    recorded = []
    manager.inactive_changed.connect(lambda m, a, inactive, ms: recorded.append((m, a.key, inactive, ms)))
    return recorded


def test_unanswered_ping_becomes_inactive_once(manager, clock, events):
    app = Application(key="app")
    manager.ping("xdg-shell", app, 5)
    clock.now = 0.5
    manager.check()
    assert events == []
    clock.now = 1.5
    manager.check()
    manager.check()
    assert events == [("xdg-shell", "app", True, 1500)]


def test_pong_after_inactive_reports_active(manager, clock, events):
    app = Application(key="app")
    manager.ping("xdg-shell", app, 5)
    clock.now = 2.0
    manager.check()
    clock.now = 3.0
    manager.pong("xdg-shell", app, 5)
    assert [e[2] for e in events] == [True, False]
    assert events[1][3] > events[0][3]
    assert manager.timer_active is False


def test_timer_runs_while_pings_outstanding(manager):
    app = Application(key="app")
    assert manager.timer_active is False
    manager.ping("xdg-shell", app, 1)
    assert manager.timer_active is True
    manager.pong("xdg-shell", app, 1)
    assert manager.timer_active is False


def test_unmatched_pong_is_ignored(manager, clock, events):
    app = Application(key="app")
    manager.ping("xdg-shell", app, 1)
    manager.pong("xdg-shell", app, 2)
    manager.pong("main-thread", app, 1)
    assert manager.timer_active is True
    clock.now = 2.0
    manager.check()
    assert [e[2] for e in events] == [True]


def test_pang_refreshes_entry(manager, clock, events):
    app = Application(key="app")
    manager.pang("main-thread", app)
    clock.now = 0.8
    manager.pang("main-thread", app)
    clock.now = 1.5
    manager.check()
    assert events == []
    clock.now = 2.0
    manager.check()
    assert events == [("main-thread", "app", True, 1200)]


def test_finished_drops_entries(manager, clock, events):
    app = Application(key="app")
    other = Application(key="other")
    manager.ping("xdg-shell", app, 1)
    manager.ping("xdg-shell", other, 2)
    manager.finished.emit(app)
    clock.now = 5.0
    manager.check()
    assert [e[1] for e in events] == ["other"]


def test_background_check_runs(clock):
    m = InProcessWatchDogManager(type=ManagerType.SERVER, interval=0.01, clock=clock)
    fired = threading.Event()
    m.inactive_changed.connect(lambda *args: fired.set())
    try:
        m.ping("xdg-shell", Application(key="app"), 1)
        clock.now = 5.0
        assert fired.wait(2.0) is True
    finally:
        m.close()
    assert m.timer_active is False


def test_plugin_creates_for_inprocess_key():
    plugin = InProcessWatchDogManagerPlugin()
    created = plugin.create("InProcess", None, ManagerType.CLIENT)
    assert isinstance(created, InProcessWatchDogManager)
    assert created.type is ManagerType.CLIENT
    assert plugin.create("other", None, ManagerType.CLIENT) is None