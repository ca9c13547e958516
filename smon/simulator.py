from __future__ import annotations

import logging
import random
from threading import Event, Thread

from prometheus_client import Gauge

logger = logging.getLogger(__name__)


class LoadSimulator:
    """Sets a gauge to a random value in [0, max_load) every ``interval`` seconds."""

    def __init__(self, gauge: Gauge, interval: float = 5.0, max_load: float = 10.0, rng: random.Random | None = None):
        self.gauge = gauge
        self.interval = max(0.05, float(interval))
        self.max_load = max_load
        self.rng = rng or random.Random()
        self._stop = Event()
        self._thr: Thread | None = None

    def start(self) -> None:
        if self._thr and self._thr.is_alive():
            return
        self._stop.clear()
        self._thr = Thread(target=self._loop, name="load-simulator", daemon=True)
        self._thr.start()

    def stop(self) -> None:
        self._stop.set()

    def tick(self) -> float:
        load = self.rng.random() * self.max_load
        self.gauge.set(load)
        return load

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Load simulator tick failed")
            self._stop.wait(self.interval)
