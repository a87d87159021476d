"""Property tests for the cycle runner.

Validates that results come back in endpoint order no matter how probe
completion interleaves, and that concurrency never exceeds the bound.
"""

from __future__ import annotations

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.models.results import ProbeOutcome
from uptime_monitor.probes.base import Prober
from uptime_monitor.services.cycle_runner import CycleRunner


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class _DelayedProber(Prober):
    """Finishes each probe after a per-endpoint number of event-loop turns."""

    mode = "delayed"

    def __init__(self, delays: dict[str, int]) -> None:
        self._delays = delays
        self.in_flight = 0
        self.peak = 0

    async def _probe(self, endpoint: Endpoint) -> ProbeOutcome:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            for _ in range(self._delays[endpoint.name]):
                await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
        return ProbeOutcome(response_code=200, latency_ms=self._delays[endpoint.name])


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@settings(max_examples=100, deadline=None)
@given(
    delays=st.lists(st.integers(min_value=0, max_value=20), min_size=0, max_size=25),
    bound=st.integers(min_value=1, max_value=8),
)
def test_results_follow_endpoint_order(delays: list[int], bound: int) -> None:
    endpoints = [
        Endpoint(name=f"E{i}", url=f"http://e{i}.example.com") for i in range(len(delays))
    ]
    prober = _DelayedProber({ep.name: d for ep, d in zip(endpoints, delays)})
    runner = CycleRunner(prober, max_concurrent_probes=bound)

    results = _run_async(runner.run_cycle(endpoints, cycle=1))

    assert [r.endpoint_name for r in results] == [ep.name for ep in endpoints]
    assert [r.latency_ms for r in results] == delays
    assert prober.peak <= bound
