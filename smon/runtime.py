from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from threading import Condition, Lock
from typing import Iterator

from .roster import ServiceRoster


class ReadWriteLock:
    """Many readers or one writer.

    Writers are preferred: once a writer is waiting, new readers block so a
    steady stream of ``/config`` requests cannot starve a reload.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass
class WatchState:
    last_mtime: float | None = None
    roster: ServiceRoster | None = None  # last successfully applied
    reloads: int = 0


class RuntimeState:
    """In-memory state shared by the watcher and the HTTP handlers."""

    def __init__(self) -> None:
        self.config_lock = ReadWriteLock()
        self.watch = WatchState()

    def record_reload(self, mtime: float | None, roster: ServiceRoster) -> None:
        """Caller must hold ``config_lock.write()``."""
        self.watch.last_mtime = mtime
        self.watch.roster = roster
        self.watch.reloads += 1
