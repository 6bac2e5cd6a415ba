import pytest

from mpsystem.application import Application
from mpsystem.inprocessmanager import (
    InProcessApplicationManager,
    InProcessApplicationManagerPlugin,
)
from mpsystem.ipc import ManagerType
from mpsystem.plugins import APPLICATION_CATEGORY_ENV, ApplicationFactory, ApplicationPlugin


class CountingPlugin(ApplicationPlugin):
    def __init__(self):
        super().__init__()
        self.loads = 0

    def create(self, key, parent=None):
        self.loads += 1
        return super().create(key, parent)


@pytest.fixture
def setup(monkeypatch):
    monkeypatch.setenv(APPLICATION_CATEGORY_ENV, "demo")
    factory = ApplicationFactory()
    plugin = CountingPlugin()
    factory.register({"Keys": ["demo/foo"], "key": "foo"}, plugin)
    manager = InProcessApplicationManager(None, ManagerType.SERVER, factory=factory)
    manager.init()
    app = Application(key="foo")
    manager.applications = [app, Application(key="bar")]
    return manager, plugin, app


def test_category_defaults_to_example(monkeypatch):
    monkeypatch.delenv(APPLICATION_CATEGORY_ENV, raising=False)
    manager = InProcessApplicationManager(None, ManagerType.SERVER, factory=ApplicationFactory())
    assert manager.category == "example"


def test_exec_loads_and_starts(setup):
    manager, plugin, app = setup
    statuses = []
    activated = []
    manager.application_status_changed.connect(lambda a, s: statuses.append((a.key, s)))
    manager.activated.connect(lambda a, args: activated.append((a.key, args)))
    manager.exec(app, ["x"])
    assert plugin.loads == 1
    assert statuses == [("foo", "created"), ("foo", "started")]
    assert activated == [("foo", ["x"])]
    assert manager.application_status(app) == "started"


def test_second_exec_only_activates(setup):
    manager, plugin, app = setup
    activated = []
    manager.activated.connect(lambda a, args: activated.append(a.key))
    manager.exec(app)
    manager.exec(app)
    assert plugin.loads == 1
    assert activated == ["foo", "foo"]


def test_exec_of_unknown_application_does_nothing(setup):
    manager, plugin, _app = setup
    activated = []
    manager.activated.connect(lambda a, args: activated.append(a))
    manager.exec(Application(key="bar"))
    manager.exec(Application())
    assert activated == []
    assert manager.application_status_by_key("bar") == "none"


def test_kill(setup):
    manager, _plugin, app = setup
    killed = []
    manager.killed.connect(killed.append)
    manager.exec(app)
    manager.kill(app)
    assert killed == [app]
    assert manager.application_status(app) == "destroyed"
    manager.kill(app)
    assert killed == [app]


def test_exec_after_kill_loads_again(setup):
    manager, plugin, app = setup
    manager.exec(app)
    manager.kill(app)
    manager.exec(app)
    assert plugin.loads == 2
    assert manager.application_status(app) == "started"


def test_plugin_creates_by_key():
    plugin = InProcessApplicationManagerPlugin()
    manager = plugin.create("InProcess", "parent", ManagerType.SERVER)
    assert isinstance(manager, InProcessApplicationManager)
    assert manager.type is ManagerType.SERVER
    assert manager.parent == "parent"
    assert plugin.create("qprocess", None, ManagerType.SERVER) is None