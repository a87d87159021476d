"""FastAPI application entry point with lifespan management.

Startup: load settings and endpoints, build the prober, cycle runner, sinks
and scheduler, then run the scheduler as a background task.
Shutdown: request a stop, let the current cycle finish, close the cycle log.

Serve with ``uptime-monitor --serve`` or any ASGI server, e.g.
``uvicorn --factory uptime_monitor.main:create_app``. Settings are read when
the app is created, never at import time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI

from uptime_monitor.config.endpoints import Endpoint, load_endpoints
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.middleware.error_handler import register_error_handlers
from uptime_monitor.probes import build_prober
from uptime_monitor.probes.base import Prober
from uptime_monitor.routers.status import create_status_router
from uptime_monitor.services.cycle_runner import CycleRunner
from uptime_monitor.services.scheduler import Scheduler, Timer
from uptime_monitor.services.sinks import ConsoleReporter, CycleLogSink

logger = logging.getLogger(__name__)

SCHEDULER_STOP_TIMEOUT_SECONDS = 60


def build_scheduler(
    settings: MonitorSettings,
    endpoints: Sequence[Endpoint],
    *,
    prober: Prober | None = None,
    reporter: ConsoleReporter | None = None,
    timer: Timer | None = None,
) -> tuple[Scheduler, CycleLogSink]:
    """Wire a scheduler and its cycle log sink from settings.

    The sink is opened here; the caller closes it at shutdown.
    """
    cycle_runner = CycleRunner(
        prober or build_prober(settings),
        probe_timeout_seconds=settings.probe_timeout_seconds,
        max_concurrent_probes=settings.max_concurrent_probes,
    )
    log_sink = CycleLogSink(
        settings.log_file,
        max_retries=settings.sink_max_retries,
        backoff_base_seconds=settings.sink_backoff_base_seconds,
        interval_seconds=settings.interval_seconds,
    )
    log_sink.open()

    scheduler = Scheduler(
        endpoints=endpoints,
        cycle_runner=cycle_runner,
        log_sink=log_sink,
        reporter=reporter or ConsoleReporter(),
        interval_seconds=settings.interval_seconds,
        timer=timer,
    )
    return scheduler, log_sink


def create_app(
    settings: MonitorSettings | None = None,
    *,
    on_scheduler_error: Callable[[BaseException], None] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Endpoints are loaded during lifespan startup, so an invalid configuration
    file aborts startup before the scheduler runs. ``on_scheduler_error`` is
    called if the scheduler loop dies with an unrecovered error while the app
    is still serving.
    """
    settings = settings or MonitorSettings()
    state: dict = {}

    def _scheduler_done(task: asyncio.Task[None]) -> None:
        if task.cancelled() or task.exception() is None:
            return
        exc = task.exception()
        logger.error("Scheduler loop failed: %s", exc, exc_info=exc)
        if on_scheduler_error is not None:
            on_scheduler_error(exc)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown logic."""
        endpoints = load_endpoints(settings.config_path)
        scheduler, log_sink = build_scheduler(settings, endpoints)
        state["scheduler"] = scheduler

        scheduler_task = asyncio.create_task(scheduler.run(), name="uptime-scheduler")
        scheduler_task.add_done_callback(_scheduler_done)
        logger.info(
            "Uptime monitor started (%s probes, cycle log %s)",
            settings.probe_mode,
            settings.log_file,
        )

        yield

        # --- Shutdown ---
        logger.info("Shutting down uptime monitor…")
        scheduler.stop()
        try:
            await asyncio.wait_for(scheduler_task, timeout=SCHEDULER_STOP_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            logger.error("Scheduler did not stop within %ds", SCHEDULER_STOP_TIMEOUT_SECONDS)
        except Exception:
            # Already reported by _scheduler_done
            logger.debug("Scheduler task ended with an error", exc_info=True)
        finally:
            log_sink.close()

        logger.info("Uptime monitor shut down")

    app = FastAPI(
        title="Uptime Monitor",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(create_status_router(scheduler=lambda: state.get("scheduler")))

    return app
