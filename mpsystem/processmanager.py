"""Application manager backend that runs each application as a child process."""

from __future__ import annotations

import logging
import subprocess
import sys
import threading
from collections.abc import Sequence
from typing import IO, Any

from .application import Application
from .applicationmanager import ApplicationManager
from .ipc import ManagerType

log = logging.getLogger(__name__)


def _default_command() -> list[str]:
    return [sys.executable, *sys.argv[:1]]


class ProcessApplicationManager(ApplicationManager):
    """Runs ``command + [key, *arguments]`` for each application.

    Every line a child writes is copied to ``output`` (standard error by
    default), prefixed with the application's key. When a child exits its
    application's status becomes ``"destroyed"``.
    """

    def __init__(
        self,
        parent: Any = None,
        type: ManagerType = ManagerType.CLIENT,
        *,
        command: Sequence[str] | None = None,
        output: IO[str] | None = None,
    ) -> None:
        super().__init__(parent, type)
        self._command = list(command) if command is not None else _default_command()
        self._output = output
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._processes: dict[Application, subprocess.Popen[str]] = {}
        self.do_exec.connect(self._on_exec)
        self.do_kill.connect(self._on_kill)
        self.application_status_changed.connect(self._on_status)

    def _write(self, line: str) -> None:
        out = self._output if self._output is not None else sys.stderr
        with self._write_lock:
            out.write(line + "\n")
            out.flush()

    def _relay(self, name: str, stream: IO[str]) -> None:
        with stream:
            for line in stream:
                self._write(f"{name} {line.rstrip(chr(10))}")

    def _on_exec(self, application: Application, arguments: list[str]) -> None:
        if not application.valid:
            return
        with self._lock:
            running = application in self._processes
        if running:
            self.activated.emit(application, arguments)
            return
        name = application.key or ""
        self.set_application_status(application, "created")
        log.debug("starting %s", name)
        args = [*self._command, name, *arguments]
        try:
            process = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as error:
            log.warning("%s %s", args, error)
            raise
        with self._lock:
            self._processes[application] = process
        readers = [
            threading.Thread(target=self._relay, args=(name, stream), daemon=True)
            for stream in (process.stdout, process.stderr)
        ]
        for reader in readers:
            reader.start()
        threading.Thread(
            target=self._wait, args=(application, process, readers), daemon=True
        ).start()
        self.activated.emit(application, arguments)

    def _wait(
        self,
        application: Application,
        process: subprocess.Popen[str],
        readers: list[threading.Thread],
    ) -> None:
        code = process.wait()
        for reader in readers:
            reader.join()
        if code >= 0:
            log.debug("%s exited with %d", application.key, code)
        else:
            log.warning("%s crashed with %d", application.key, code)
        with self._lock:
            ours = self._processes.get(application) is process
            if ours:
                del self._processes[application]
        if ours:
            self.set_application_status(application, "destroyed")

    def _on_kill(self, application: Application) -> None:
        if not application.valid:
            return
        with self._lock:
            process = self._processes.pop(application, None)
        if process is None:
            return
        process.terminate()
        self.set_application_status(application, "destroyed")
        self.killed.emit(application)

    def _on_status(self, application: Application, status: str) -> None:
        if status != "destroyed":
            return
        with self._lock:
            if self._processes.pop(application, None) is not None:
                log.debug("remove process %s", application.key)

    def close(self) -> None:
        """Terminate every running child and wait for it to exit."""
        with self._lock:
            processes = list(self._processes.values())
        for process in processes:
            process.terminate()
        for process in processes:
            process.wait()


class ProcessApplicationManagerPlugin:
    """Creates the child-process application manager for the key ``qprocess``."""

    def create(
        self, key: str, parent: Any = None, type: ManagerType = ManagerType.CLIENT
    ) -> ProcessApplicationManager | None:
        if key.lower() != "qprocess":
            return None
        return ProcessApplicationManager(parent, type)