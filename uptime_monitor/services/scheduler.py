"""Fixed-interval scheduler driving the health-check cycles.

State machine:
- Idle -> Running(1): ``run()`` is called
- Running(N) -> Waiting: results are logged, aggregated and reported
- Waiting -> Running(N+1): the interval elapses
- Waiting -> Stopped: ``stop()`` was requested

The interval is measured from the end of one cycle's bookkeeping to the start
of the next, so processing time is not absorbed into it. A stop request is
honored at the next wait; a cycle already in progress always completes.

The scheduler is the single owner of the cumulative state. Readers such as the
status API get ``snapshot()``, a copy taken at the last cycle boundary.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.models.results import Result
from uptime_monitor.services.aggregator import (
    AvailabilityReport,
    CumulativeState,
    update_and_report,
)
from uptime_monitor.services.cycle_runner import CycleRunner
from uptime_monitor.services.sinks import ConsoleReporter, CycleLogSink

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Scheduler lifecycle states."""

    IDLE = "idle"
    RUNNING = "running"
    WAITING = "waiting"
    STOPPED = "stopped"


class Timer(Protocol):
    """Suspends the scheduler between cycles."""

    async def wait(self, seconds: float, stop_event: asyncio.Event) -> bool:
        """Wait *seconds* or until *stop_event* is set. Return True if stopped."""
        ...


class AsyncioTimer:
    """Real-time timer that wakes early when a stop is requested."""

    async def wait(self, seconds: float, stop_event: asyncio.Event) -> bool:
        if stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True


@dataclass(frozen=True)
class CycleSummary:
    """What one completed cycle produced."""

    cycle: int
    results: tuple[Result, ...]
    report: AvailabilityReport


class Scheduler:
    """Runs cycles forever at a fixed interval until stopped.

    Parameters
    ----------
    endpoints:
        Endpoints to probe every cycle, in log order.
    cycle_runner:
        Probes and classifies the endpoints.
    log_sink:
        Durable destination for each cycle's block.
    reporter:
        Receives the availability report after each cycle.
    interval_seconds:
        Wait between the end of a cycle and the start of the next.
    timer:
        Suspension strategy; defaults to ``AsyncioTimer``.
    """

    def __init__(
        self,
        *,
        endpoints: Sequence[Endpoint],
        cycle_runner: CycleRunner,
        log_sink: CycleLogSink,
        reporter: ConsoleReporter,
        interval_seconds: float = 15,
        timer: Timer | None = None,
    ) -> None:
        self._endpoints = tuple(endpoints)
        self._cycle_runner = cycle_runner
        self._log_sink = log_sink
        self._reporter = reporter
        self._interval_seconds = interval_seconds
        self._timer: Timer = timer or AsyncioTimer()

        self._state = SchedulerState.IDLE
        self._cycle_number = 1
        self._cumulative = CumulativeState()
        self._snapshot = CumulativeState()
        self._stop_event = asyncio.Event()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycle_number(self) -> int:
        """Number of the next cycle to run."""
        return self._cycle_number

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    def snapshot(self) -> CumulativeState:
        """Copy of the cumulative state as of the last completed cycle."""
        return self._snapshot.copy()

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Request a stop; honored at the next wait."""
        if not self._stop_event.is_set():
            logger.info("Stop requested (next cycle would be #%d)", self._cycle_number)
        self._stop_event.set()

    async def run(self) -> None:
        """Run cycles until ``stop()`` is called.

        Errors that escape a cycle (for example ``SinkWriteError``) stop the
        loop and propagate to the caller.
        """
        logger.info(
            "Scheduler started with %d endpoints, interval %.1fs",
            len(self._endpoints),
            self._interval_seconds,
        )
        try:
            while not self._stop_event.is_set():
                await self.run_cycle()
                self._state = SchedulerState.WAITING
                if await self._timer.wait(self._interval_seconds, self._stop_event):
                    break
        finally:
            self._state = SchedulerState.STOPPED
            logger.info(
                "Scheduler stopped after %d cycles", self._cycle_number - 1
            )

    async def run_cycle(self) -> CycleSummary:
        """Run exactly one cycle: probe, log, aggregate, report, snapshot."""
        cycle = self._cycle_number
        self._state = SchedulerState.RUNNING
        start = time.monotonic()
        try:
            results = await self._cycle_runner.run_cycle(self._endpoints, cycle=cycle)
            await self._log_sink.append(cycle, results)
            self._cumulative, report = update_and_report(
                self._cumulative, results, cycle=cycle
            )
            self._snapshot = self._cumulative.copy()
            self._reporter.report(report)
        finally:
            self._cycle_number = cycle + 1

        down = sum(1 for r in results if not r.is_up)
        logger.info(
            "Cycle #%d complete: %d endpoints, %d down",
            cycle,
            len(results),
            down,
            extra={
                "cycle": cycle,
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
            },
        )
        return CycleSummary(cycle=cycle, results=tuple(results), report=report)
