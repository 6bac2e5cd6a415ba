# mpsystem

`mpsystem` is a library for building a "system" out of many applications
(a home screen, a status bar, a music player and so on). Each application is
described by metadata, and a set of pluggable managers decides how the
applications are started, stopped, watched and addressed.

## Applications

`mpsystem.application.Application` is a dataclass describing one application:
`key`, `role`, `name` (a dict of language to name), `theme`, `icon`, `splash`,
`area`, `uri_handlers`, `attributes`, `status` (default `"none"`) and
`organization`. Two applications are equal when their keys are equal, and
an application is `valid` once it has a key.

`Attribute` is an `IntFlag` with `NONE`, `SYSTEM_UI`, `AUTO_START`, `DAEMON`,
`FULL_SCREEN` and `ROOT`. In metadata they are written by name:
`"SystemUI"`, `"AutoStart"`, `"Daemon"`, `"FullScreen"`, `"Root"`.

- `from_json(data)` takes plugin metadata (a mapping, or JSON text) and
  returns a list: the application itself, then one copy per string in an
  `"alias"` list, with the alias as its key. A `role` left empty becomes the
  key; a `name`, `uri_handlers` or `organization` given as a plain string
  becomes `{"default": <string>}`.
- `Application.to_dict()` returns the writable properties as a JSON-ready
  dict, with attributes as a list of names; `from_dict(data)` rebuilds one
  application from it.
- `Application.i18n_name(languages)` returns the name in the first language
  that has one, else the `"default"` name. With no languages given it reads
  them from `LANGUAGE`, `LC_ALL`, `LC_MESSAGES` or `LANG`.

```python
from mpsystem.application import from_json
from mpsystem.urihandler import handles

apps = from_json({
    "key": "browser",
    "name": {"default": "Browser", "de": "Browser"},
    "uri_handlers": {"https:": "scheme"},
    "attributes": ["AutoStart"],
    "alias": ["web"],
})

browser = apps[0]
print(browser.role)                              # "browser": role defaults to the key
print([app.key for app in apps])                 # ["browser", "web"]
print(handles(browser, "https://example.com/"))  # True
```

## Servers, clients and signals

Every manager is an `mpsystem.ipc.IpcInterface` created with a
`ManagerType`: `SERVER` or `CLIENT` (`UNKNOWN` raises `UnknownTypeError`).
A server registers itself under its class's `interface_name` and owns the
state; a client finds that server on `init()`, forwards property reads,
writes and calls to it, and re-emits the server's signals as its own.
Servers are looked up within the running Python process.

`Signal` is a list of callbacks: `connect(slot)` (a slot is connected at
most once), `disconnect(slot)` and `emit(*args)`.

## Application manager

`mpsystem.applicationmanager.ApplicationManager` holds the `applications`
list and the `current` application (emitting `applications_changed` and
`current_changed` when they change), and offers `find_by_key`,
`application_status`, `application_status_by_key`, `set_application_status`,
`set_application_status_by_key`, `exec(application, arguments)`,
`kill(application)` and `start()`, which runs every application carrying
`AUTO_START`. Status changes are announced with `application_status_changed`.

On a server, `exec` and `kill` emit `do_exec` and `do_kill`; the backends
connect to those:

- `mpsystem.inprocessmanager.InProcessApplicationManager` loads the plugin
  registered as `<category>/<key>` in an `ApplicationFactory`, sets the
  status to `"created"` then `"started"`, and emits `activated`; killing it
  sets `"destroyed"` and emits `killed`. The category comes from
  `QT_MULTIPROCESSSYSTEM_APPLICATION_CATEGORY` and defaults to `example`.
- `mpsystem.processmanager.ProcessApplicationManager` runs
  `command + [key, *arguments]` as a child process (by default the current
  interpreter and script), copies each line of its output to `output`
  (standard error by default) prefixed with the key, and sets the status to
  `"destroyed"` when the child exits. `close()` terminates every child.

`InProcessApplicationManagerPlugin` (key `inprocess`) and
`ProcessApplicationManagerPlugin` (key `qprocess`) create these backends.

## Plugins and factories

`mpsystem.plugins` has the registries:

- `ApplicationFactory`: `register(metadata, plugin)`, where
  `metadata["Keys"]` lists the plugin's keys; `apps(prefix)` returns the
  applications (via `from_json`) with a key starting with the prefix, sorted
  by key; `keys()`; `load(key, parent)` creates the plugin for a key,
  case-insensitively, or returns `None`.
- `ApplicationPlugin`: its `create` returns the plugin itself.
- `ManagerFactory`: `register(keys, plugin)`, `keys()` without duplicates,
  and `create(key, parent, type)`, which records the key in the factory's
  environment variable and returns `None` for an unknown key, or raises
  `PluginNotFoundError` when the factory is `required`.
- Shared instances: `application_factory`, `application_manager_factory`
  (required), `watchdog_manager_factory` and `window_manager_factory`.

## URI handling

`mpsystem.urihandler.handles(application, uri)` is true when one of the
application's `uri_handlers` matches: a pattern mapped to `"scheme"` matches
URIs starting with it, one mapped to `"regexp"` matches URIs it is found in.
A server `UriHandler.open(uri)` asks the application manager to run every
matching application with the URI as argument, and passes unhandled URIs
to `url_opener` (`webbrowser.open` by default). A client emits `requested`
for URIs its own `application` handles.

## Watchdogs

`mpsystem.watchdogmanager.WatchDogManager` takes `ping`, `pong` and `pang`
reports and, on a server, emits `ping_received`, `pong_received` and
`pang_received`; it also emits `finished` for applications whose status
becomes `"destroyed"`.

`mpsystem.inprocesswatchdog.InProcessWatchDogManager` keeps the outstanding
reports and emits `inactive_changed(method, application, True, msecs)` for
an application whose entry is over a second old, and `False` when its ping
is answered. While entries are outstanding, `check()` runs every `interval`
seconds on a background thread; `close()` stops it. The plugin
`InProcessWatchDogManagerPlugin` answers the key `inprocess`.

`mpsystem.watchdog.WatchDog` sends reports tagged with its `method` to its
`manager`, dropping them while no manager is set. `mpsystem.watchdogs`
has ready-made senders:

- `MainThreadWatchDog`: `pang()` reports `application` under `main-thread`.
- `XdgShellWatchDog`: `ping(application, serial)` and `pong(serial)` under
  `xdg-shell`, matching pongs to pings by serial.
- `SystemdWatchDog`: enabled when `WATCHDOG_USEC` is set; `pang()` then
  sends `WATCHDOG=1` to the socket named by `NOTIFY_SOCKET`.

## Window managers

`mpsystem.windowmanagers.MonolithicWindowManagerPlugin` (key `monolithic`)
and `WaylandWindowManagerPlugin` (key `wayland`) create a
`plugins.WindowManager`, which holds only its parent. The Wayland plugin also
sets `QT_QPA_PLATFORM=wayland` and, if unset,
`QT_WAYLAND_DISABLE_WINDOWDECORATION=1`.

## Menus

`mpsystem.model.ApplicationManagerModel` presents a manager's applications
as rows: without `filters`, those lacking every `exclude_attributes` flag
(by default `SYSTEM_UI | DAEMON`); with `filters`, the applications with
those keys, in order. `role_names()`, `row_count()` and `data(row, role)`
read the rows, and status changes emit `data_changed`.

## What this package does not do

- It has no command-line launcher; applications, managers and plugins are
  wired together by your own code.
- It draws no windows and loads no user-interface files; the window manager
  objects only select a platform through environment variables.
- Servers and clients meet only within one Python process. There is no
  message bus between processes, and no backend that starts applications
  as service-manager units.

## Requirements

Python 3.10 or later. The package has no third-party dependencies; the
tests use pytest (`pip install mpsystem[test]`).