import pytest

from mpsystem.application import Application, Attribute
from mpsystem.applicationmanager import ApplicationManager
from mpsystem.ipc import ManagerType, UnknownTypeError


class IsolatedManager(ApplicationManager):
    """A manager on an interface of its own that no test gives a server."""

    interface_name = "test.IsolatedApplicationManager"


def make_server(*apps):
    server = ApplicationManager(type=ManagerType.SERVER)
    server.init()
    server.applications = list(apps)
    return server


def test_unknown_type_raises():
    with pytest.raises(UnknownTypeError):
        ApplicationManager(type=ManagerType.UNKNOWN)


def test_server_stores_applications_and_emits_once():
    server = ApplicationManager(type=ManagerType.SERVER)
    seen = []
    server.applications_changed.connect(seen.append)
    apps = [Application(key="a"), Application(key="b")]
    server.applications = apps
    server.applications = [Application(key="a"), Application(key="b")]
    assert [a.key for a in server.applications] == ["a", "b"]
    assert len(seen) == 1


def test_returned_list_is_a_copy():
    server = make_server(Application(key="a"))
    server.applications.append(Application(key="x"))
    assert [a.key for a in server.applications] == ["a"]


def test_current_default_is_invalid():
    server = ApplicationManager(type=ManagerType.SERVER)
    assert server.current.valid is False
    server.current = Application(key="menu")
    assert server.current.key == "menu"


def test_find_by_key():
    server = make_server(Application(key="a", role="ra"), Application(key="b"))
    assert server.find_by_key("a").role == "ra"
    assert server.find_by_key("missing").valid is False


def test_status_update_on_server():
    server = make_server(Application(key="a"))
    changes = []
    server.application_status_changed.connect(lambda app, status: changes.append((app.key, status)))
    server.set_application_status_by_key("a", "started")
    server.set_application_status_by_key("a", "started")
    assert server.application_status_by_key("a") == "started"
    assert changes == [("a", "started")]


def test_status_of_unknown_application_ignored():
    server = make_server(Application(key="a"))
    changes = []
    server.application_status_changed.connect(lambda *args: changes.append(args))
    server.set_application_status(Application(key="zzz"), "started")
    assert changes == []
    assert server.application_status(Application(key="zzz")) == ""


def test_status_update_does_not_touch_callers_objects():
    app = Application(key="a")
    server = make_server(app)
    server.set_application_status(app, "created")
    assert app.status == "none"
    assert server.application_status(app) == "created"


def test_client_without_server_returns_defaults():
    client = IsolatedManager()
    assert client.init() is False
    assert client.applications == []
    assert client.application_status(Application(key="a")) == ""


def test_client_reads_and_writes_through_server():
    server = make_server(Application(key="a"))
    client = ApplicationManager()
    assert client.init() is True
    assert [a.key for a in client.applications] == ["a"]
    client.applications = [Application(key="b")]
    assert [a.key for a in server.applications] == ["b"]


def test_client_exec_reaches_server_and_signals_return():
    server = make_server(Application(key="a"))
    server.do_exec.connect(lambda app, args: server.activated.emit(app, args))
    client = ApplicationManager()
    client.init()
    activated = []
    client.activated.connect(lambda app, args: activated.append((app.key, args)))
    client.exec(Application(key="a"), ["x://y"])
    assert activated == [("a", ["x://y"])]


def test_client_kill_and_status():
    server = make_server(Application(key="a"))
    killed = []
    server.do_kill.connect(lambda app: killed.append(app.key))
    client = ApplicationManager()
    client.kill(Application(key="a"))
    client.set_application_status(Application(key="a"), "stopped")
    assert killed == ["a"]
    assert client.application_status(Application(key="a")) == "stopped"


def test_start_execs_auto_start_only():
    server = make_server(
        Application(key="a", attributes=Attribute.AUTO_START),
        Application(key="b"),
        Application(key="c", attributes=Attribute.AUTO_START | Attribute.DAEMON),
    )
    started = []
    server.do_exec.connect(lambda app, args: started.append((app.key, args)))
    server.start()
    assert started == [("a", []), ("c", [])]