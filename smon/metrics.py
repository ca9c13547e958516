from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import (
    CollectorRegistry,
    Counter,
    GCCollector,
    Gauge,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from .roster import ServiceRoster


def linear_buckets(start: float, width: float, count: int) -> tuple[float, ...]:
    return tuple(round(start + width * i, 6) for i in range(count))


REQUEST_DURATION_BUCKETS = linear_buckets(0.01, 0.05, 10)


class MetricSet:
    """Process-scoped metric state for the monitor.

    Every metric lives in a private CollectorRegistry so several instances
    (one per app, one per test) never collide on the default registry.
    """

    def __init__(self, split_load_gauge: bool = True) -> None:
        self.registry = CollectorRegistry()
        # Runtime series the default registry would carry (process_*, python_gc_*, python_info).
        ProcessCollector(registry=self.registry)
        GCCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)

        self.requests_total = Counter(
            "service_monitor_requests_total",
            "The total number of processed requests",
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "service_monitor_request_duration_seconds",
            "Request duration distribution",
            buckets=REQUEST_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.active_requests = Gauge(
            "service_monitor_active_requests",
            "Number of active requests",
            registry=self.registry,
        )
        self.error_rate = Gauge(
            "service_monitor_error_rate",
            "Current error rate",
            registry=self.registry,
        )
        self.service_up = Gauge(
            "service_monitor_up",
            "Status of monitored services (1=up, 0=down)",
            ["service"],
            registry=self.registry,
        )

        self.simulated_load: Gauge | None = None
        if split_load_gauge:
            self.simulated_load = Gauge(
                "service_monitor_simulated_load",
                "Synthetic load level, refreshed by the load simulator",
                registry=self.registry,
            )

    @property
    def load_gauge(self) -> Gauge:
        """Gauge the load simulator writes to."""
        return self.simulated_load if self.simulated_load is not None else self.active_requests

    def apply_roster(self, roster: ServiceRoster) -> None:
        """Replace all service status labels with the roster's.

        Down is applied after up, so a name in both lists ends at 0.
        """
        self.service_up.clear()
        for name in roster.up:
            self.service_up.labels(service=name).set(1)
        for name in roster.down:
            self.service_up.labels(service=name).set(0)

    def service_status(self) -> dict[str, float]:
        out: dict[str, float] = {}
        for family in self.service_up.collect():
            for sample in family.samples:
                out[sample.labels["service"]] = sample.value
        return out

    @contextmanager
    def track_request(self) -> Iterator[None]:
        self.active_requests.inc()
        start = time.perf_counter()
        try:
            yield
        finally:
            self.request_duration.observe(time.perf_counter() - start)
            self.requests_total.inc()
            self.active_requests.dec()

    def record_outcome(self, failed: bool) -> None:
        self.error_rate.set(0.1 if failed else 0.0)

    def render(self) -> bytes:
        return generate_latest(self.registry)
