from __future__ import annotations

import logging
import os
from threading import Event, Thread

from .metrics import MetricSet
from .roster import RosterError, load_roster
from .runtime import RuntimeState

logger = logging.getLogger(__name__)


class RosterWatcher:
    """Polls the roster file and re-applies it when its mtime changes."""

    def __init__(self, path: str, metrics: MetricSet, runtime: RuntimeState, interval: float = 3.0):
        self.path = path
        self.metrics = metrics
        self.runtime = runtime
        self.interval = max(0.05, float(interval))
        self._stop = Event()
        self._thr: Thread | None = None

    def start(self) -> None:
        if self._thr and self._thr.is_alive():
            return
        self._stop.clear()
        self._thr = Thread(target=self._loop, name="roster-watcher", daemon=True)
        self._thr.start()

    def stop(self) -> None:
        self._stop.set()

    def _loop(self) -> None:
        logger.info("Starting config watcher for file: %s", self.path)
        # The initial load happens at startup, so wait before the first poll.
        while not self._stop.wait(self.interval):
            try:
                self.poll_once()
            except Exception:
                logger.exception("Config watcher tick failed")

    def poll_once(self) -> bool:
        """Reload the roster if the file changed since the last poll.

        Returns True when a new roster was applied.
        """
        try:
            mtime = os.stat(self.path).st_mtime
        except OSError as e:
            logger.warning("Error checking config file: %s", e)
            return False

        if mtime == self.runtime.watch.last_mtime:
            return False

        logger.info("Config file changed, reloading...")
        try:
            roster = load_roster(self.path)
        except RosterError as e:
            logger.error("Error loading config: %s", e)
            return False

        overlap = roster.overlap()
        if overlap:
            logger.warning("Services listed as both up and down, reporting them down: %s", ", ".join(overlap))

        with self.runtime.config_lock.write():
            self.metrics.apply_roster(roster)
            self.runtime.record_reload(mtime, roster)
        logger.info(
            "Reloaded config: %d up services and %d down services",
            len(roster.up),
            len(roster.down),
        )
        return True
