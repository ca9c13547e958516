from __future__ import annotations

import logging
import os
import random
import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from .metrics import MetricSet
from .roster import FALLBACK_ROSTER, RosterError, ServiceRoster, ensure_roster_file, load_roster, render_roster
from .runtime import RuntimeState
from .settings import Settings, settings as default_settings
from .simulator import LoadSimulator
from .watcher import RosterWatcher

logger = logging.getLogger(__name__)


def initial_load(cfg: Settings, metrics: MetricSet, runtime: RuntimeState) -> ServiceRoster:
    """Create the roster file if needed, load it and apply it once.

    Falls back to FALLBACK_ROSTER when the file cannot be loaded.
    """
    ensure_roster_file(cfg.config_path)

    try:
        roster = load_roster(cfg.config_path)
        logger.info(
            "Loaded initial config with %d up services and %d down services",
            len(roster.up),
            len(roster.down),
        )
    except RosterError as e:
        logger.error("Error loading initial config: %s", e)
        roster = FALLBACK_ROSTER

    try:
        mtime: float | None = os.stat(cfg.config_path).st_mtime
    except OSError:
        mtime = None

    with runtime.config_lock.write():
        metrics.apply_roster(roster)
        runtime.record_reload(mtime, roster)
    return roster


def create_app(
    cfg: Settings | None = None,
    rng: random.Random | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> FastAPI:
    cfg = cfg or default_settings
    rng = rng or random.Random()

    metrics = MetricSet(split_load_gauge=cfg.split_load_gauge)
    runtime = RuntimeState()
    watcher = RosterWatcher(cfg.config_path, metrics, runtime, interval=cfg.poll_interval_s)
    simulator = LoadSimulator(metrics.load_gauge, interval=cfg.load_interval_s)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        initial_load(cfg, metrics, runtime)
        watcher.start()
        simulator.start()
        logger.info("Service Monitor ready on %s:%d", cfg.host, cfg.port)
        yield
        watcher.stop()
        simulator.stop()

    app = FastAPI(title="Service Monitor", lifespan=lifespan)
    app.state.settings = cfg
    app.state.metrics = metrics
    app.state.runtime = runtime
    app.state.watcher = watcher
    app.state.simulator = simulator

    @app.get("/", response_class=PlainTextResponse)
    def health() -> PlainTextResponse:
        # Sync handler: runs in the worker thread pool, so sleeping is fine.
        with metrics.track_request():
            sleep(rng.random() * cfg.max_work_s)
            if rng.random() < cfg.error_probability:
                metrics.record_outcome(failed=True)
                return PlainTextResponse("Internal Server Error", status_code=500)
            metrics.record_outcome(failed=False)
            return PlainTextResponse("Service Monitor is running!")

    @app.get("/config", response_class=PlainTextResponse)
    def config_dump() -> PlainTextResponse:
        # Reads the file again instead of using the watcher's cached roster.
        with runtime.config_lock.read():
            try:
                roster = load_roster(cfg.config_path)
            except RosterError as e:
                logger.warning("Config dump failed: %s", e)
                return PlainTextResponse(f"Error loading config: {e}", status_code=500)
        return PlainTextResponse(render_roster(roster))

    @app.get("/metrics", include_in_schema=False)
    def prometheus_metrics() -> Response:
        return Response(content=metrics.render(), media_type=CONTENT_TYPE_LATEST)

    return app
