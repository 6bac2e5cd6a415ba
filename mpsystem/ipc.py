"""Server/client interfaces that share state and calls within one process."""

from __future__ import annotations

import copy
import enum
import logging
from typing import Any, Callable, ClassVar

log = logging.getLogger(__name__)

_MISSING = object()


class ManagerType(enum.Enum):
    """Role an interface plays: the owner of the state or a user of it."""

    UNKNOWN = 0
    SERVER = 1
    CLIENT = 2


class UnknownTypeError(RuntimeError):
    """Raised when an interface whose type is UNKNOWN is used."""


class Signal:
    """A list of callbacks invoked together; a slot is connected at most once."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        """Connect ``slot``; connecting the same slot again has no effect."""
        if slot not in self._slots:
            self._slots.append(slot)

    def disconnect(self, slot: Callable[..., Any]) -> bool:
        """Disconnect ``slot``; return whether it was connected."""
        try:
            self._slots.remove(slot)
        except ValueError:
            return False
        return True

    def emit(self, *args: Any) -> None:
        """Call every connected slot with ``args``, in connection order."""
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, slots={len(self._slots)})"


class IpcInterface:
    """Base for managers that run either as the server or as a client of it.

    A server owns the state and handles requests itself. A client forwards
    reads, writes and calls to the server registered under the same
    ``interface_name`` and re-emits the server's signals as its own.
    """

    interface_name: ClassVar[str] = ""
    _servers: ClassVar[dict[str, "IpcInterface"]] = {}

    def __init__(self, parent: Any = None, type: ManagerType = ManagerType.CLIENT) -> None:
        self.parent = parent
        self._type = ManagerType(type)
        self._proxy: Any = None
        self._values: dict[str, Any] = {}
        if self._type is ManagerType.SERVER and self.interface_name:
            IpcInterface._servers[self.interface_name] = self

    @property
    def type(self) -> ManagerType:
        return self._type

    @property
    def proxy(self) -> Any:
        """The object requests are sent to, once initialised."""
        return self._proxy

    @property
    def server(self) -> IpcInterface | None:
        """The server registered for this interface, if any."""
        return IpcInterface._servers.get(self.interface_name)

    def init(self) -> bool:
        """Connect to the server (or become it); return whether it succeeded."""
        if self._proxy is not None:
            return True
        if not self.interface_name:
            raise LookupError(f"interface name not set in {self.__class__.__name__}")
        if self._type is ManagerType.UNKNOWN:
            raise UnknownTypeError(f"unknown type in {self.__class__.__name__}")
        if self._type is ManagerType.SERVER:
            log.debug("Server %s", self.interface_name)
            self._proxy = self
            return True
        server = self.server
        if server is None:
            log.warning("no server found for %s", self.interface_name)
            return False
        self._proxy = server
        self._connect_signals()
        return True

    def _connect_signals(self) -> None:
        for name, signal in vars(self).items():
            if not isinstance(signal, Signal):
                continue
            source = getattr(self._proxy, name, None)
            if isinstance(source, Signal):
                source.connect(signal.emit)
            else:
                log.warning("%s not found in %r", name, self._proxy)

    def _require_known_type(self) -> None:
        if self._type is ManagerType.UNKNOWN:
            raise UnknownTypeError(f"unknown type in {self.__class__.__name__}")

    def _call(self, server_signal: str, client_method: str, *args: Any) -> None:
        """Emit ``server_signal`` on a server, or call ``client_method`` on the server from a client."""
        self._require_known_type()
        if self._type is ManagerType.SERVER:
            getattr(self, server_signal).emit(*args)
        elif self._proxy is not None or self.init():
            getattr(self._proxy, client_method)(*args)

    def _get(self, name: str, default: Any) -> Any:
        """Read a shared value: the server's own, or the server's through a client."""
        self._require_known_type()
        if self._type is ManagerType.SERVER:
            return copy.copy(self._values.get(name, default))
        if self._proxy is not None:
            return getattr(self._proxy, name)
        return default

    def _set(self, name: str, value: Any) -> None:
        """Write a shared value and emit ``<name>_changed`` when it changes."""
        self._require_known_type()
        if self._type is ManagerType.SERVER:
            if self._values.get(name, _MISSING) == value:
                return
            self._values[name] = value
            getattr(self, f"{name}_changed").emit(value)
        elif self._proxy is not None or self.init():
            setattr(self._proxy, name, value)